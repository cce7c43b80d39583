"""
Bridge error taxonomy.

Frame errors are input validation failures: the current cycle is dropped
and the read loop moves on. Transport errors end the bridge.
"""


class BridgeError(Exception):
    """Base class for all bridge errors."""


class FrameError(BridgeError, ValueError):
    """A buffer could not be turned into a measurement."""


class DecodeError(FrameError):
    """Raised by the frame decoder."""


class HeaderTooShort(DecodeError):
    def __init__(self, length: int):
        super().__init__(f"Buffer too short for header: {length} bytes, need 8")
        self.length = length


class PayloadOutOfBounds(DecodeError):
    def __init__(self, payload_size: int, length: int):
        super().__init__(
            f"Payload of {payload_size} bytes exceeds buffer "
            f"({length} bytes, header is 8)"
        )
        self.payload_size = payload_size
        self.length = length


class InvalidSourceId(DecodeError):
    def __init__(self, raw_source_id: int):
        super().__init__(
            f"Raw source id {raw_source_id} is in the reserved transport range (< 2)"
        )
        self.raw_source_id = raw_source_id


class MapError(FrameError):
    """Raised by the measurement mapper."""


class PayloadTooShort(MapError):
    def __init__(self, message_type: int, have: int, need: int):
        super().__init__(
            f"Payload for message type {message_type} too short: have {have}, need {need}"
        )
        self.message_type = message_type
        self.have = have
        self.need = need


class UnsupportedMessageType(MapError):
    def __init__(self, message_type: int):
        super().__init__(f"Unsupported message type: {message_type}")
        self.message_type = message_type


class DispatchError(BridgeError):
    """The ingestion endpoint did not accept a measurement."""


class TransportError(BridgeError):
    """The serial link was lost."""
