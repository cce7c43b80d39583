"""
Message type definitions.

Every supported message type owns its payload layout. Adding a type means
adding a MessageType member and registering a MessageDefinition for it.
"""

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Dict, List, Optional, Tuple

from bridge_core.errors import PayloadTooShort


class MessageType(IntEnum):
    RAW_DOUBLE = 0  # One IEEE-754 double, little-endian bit pattern


# (sensor_id, value) pairs decoded from a payload
SensorValues = List[Tuple[int, float]]

DEFAULT_SENSOR_ID = 0


@dataclass(frozen=True)
class MessageDefinition:
    message_type: MessageType
    name: str
    min_payload: int
    decoder: Callable[[bytes], SensorValues]
    description: str = ""

    def decode(self, payload: bytes) -> SensorValues:
        if len(payload) < self.min_payload:
            raise PayloadTooShort(int(self.message_type), len(payload), self.min_payload)
        return self.decoder(payload)


def _decode_raw_double(payload: bytes) -> SensorValues:
    # Bit-cast, not a numeric conversion
    (value,) = struct.unpack_from("<d", payload, 0)
    return [(DEFAULT_SENSOR_ID, value)]


MESSAGE_DEFINITIONS: Dict[MessageType, MessageDefinition] = {
    MessageType.RAW_DOUBLE: MessageDefinition(
        message_type=MessageType.RAW_DOUBLE,
        name="raw_double",
        min_payload=8,
        decoder=_decode_raw_double,
        description="Single sensor value as a raw float64 bit pattern",
    ),
}


def get_message_definition(message_type: int) -> Optional[MessageDefinition]:
    """Look up the definition for a wire message type, or None if unsupported."""
    try:
        return MESSAGE_DEFINITIONS.get(MessageType(message_type))
    except ValueError:
        return None
