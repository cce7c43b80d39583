"""
Serial frame structure and decoding.
"""

from dataclasses import dataclass
from typing import Union
import logging

from .errors import HeaderTooShort, InvalidSourceId, PayloadOutOfBounds


logger = logging.getLogger(__name__)

BufferLike = Union[bytes, bytearray, memoryview]


@dataclass(frozen=True)
class Frame:
    """
    One decoded serial packet.

    Structure (multi-byte fields little-endian):
    - bytes 0-1: Source id (raw value minus SOURCE_ID_OFFSET)
    - bytes 2-3: Destination id
    - byte 4:    Sequence id
    - byte 5:    Message type
    - bytes 6-7: Payload size
    - bytes 8..: Payload (payload size bytes)
    """

    source_id: int
    destination_id: int
    sequence_id: int
    message_type: int
    payload_size: int
    payload: bytes = b""

    # Constants
    HEADER_SIZE = 8
    SOURCE_ID_OFFSET = 2

    def __repr__(self) -> str:
        return (
            f"Frame(src={self.source_id}, dst={self.destination_id}, "
            f"seq={self.sequence_id}, type={self.message_type}, "
            f"len={self.payload_size}, payload={self.payload.hex() or '(empty)'})"
        )


def decode_frame(buffer: BufferLike) -> Frame:
    """
    Decode one frame from a raw buffer.

    The payload is copied out of ``buffer``, so the caller is free to
    reuse or zero the buffer as soon as this returns. Bytes past the
    declared payload are ignored.

    Raises:
        HeaderTooShort: fewer than 8 bytes were supplied.
        InvalidSourceId: the raw source id is below the protocol offset.
        PayloadOutOfBounds: the declared payload runs past the buffer.
    """
    data = memoryview(buffer)
    length = len(data)

    if length < Frame.HEADER_SIZE:
        raise HeaderTooShort(length)

    raw_source_id = int.from_bytes(data[0:2], "little")
    if raw_source_id < Frame.SOURCE_ID_OFFSET:
        raise InvalidSourceId(raw_source_id)

    destination_id = int.from_bytes(data[2:4], "little")
    sequence_id = data[4]
    message_type = data[5]
    payload_size = int.from_bytes(data[6:8], "little")

    end = Frame.HEADER_SIZE + payload_size
    if end > length:
        raise PayloadOutOfBounds(payload_size, length)

    frame = Frame(
        source_id=raw_source_id - Frame.SOURCE_ID_OFFSET,
        destination_id=destination_id,
        sequence_id=sequence_id,
        message_type=message_type,
        payload_size=payload_size,
        payload=bytes(data[Frame.HEADER_SIZE:end]),
    )
    logger.debug(f"Decoded {frame}")
    return frame


def encode_frame(
    source_id: int,
    destination_id: int,
    sequence_id: int,
    message_type: int,
    payload: bytes = b"",
) -> bytes:
    """
    Build a wire buffer for a frame.

    ``source_id`` is the logical id; the protocol offset is added here.
    """
    raw_source_id = source_id + Frame.SOURCE_ID_OFFSET
    if not 0 <= raw_source_id <= 0xFFFF:
        raise ValueError(f"Source id out of range: {source_id}")
    if not 0 <= destination_id <= 0xFFFF:
        raise ValueError(f"Destination id out of range: {destination_id}")
    if not 0 <= sequence_id <= 0xFF:
        raise ValueError(f"Sequence id must be 0-255, got {sequence_id}")
    if not 0 <= message_type <= 0xFF:
        raise ValueError(f"Message type must be 0-255, got {message_type}")
    if len(payload) > 0xFFFF:
        raise ValueError(f"Payload too large: {len(payload)} bytes")

    header = (
        raw_source_id.to_bytes(2, "little")
        + destination_id.to_bytes(2, "little")
        + bytes([sequence_id, message_type])
        + len(payload).to_bytes(2, "little")
    )
    return header + bytes(payload)
