"""Bridge core - serial frame decoding and connection handling."""

from .errors import (
    BridgeError,
    FrameError,
    DecodeError,
    HeaderTooShort,
    PayloadOutOfBounds,
    InvalidSourceId,
    MapError,
    PayloadTooShort,
    UnsupportedMessageType,
    DispatchError,
    TransportError,
)
from .frame import Frame, decode_frame, encode_frame
from .connection import ConnectionConfig, SerialConnection

__all__ = [
    "BridgeError",
    "FrameError",
    "DecodeError",
    "HeaderTooShort",
    "PayloadOutOfBounds",
    "InvalidSourceId",
    "MapError",
    "PayloadTooShort",
    "UnsupportedMessageType",
    "DispatchError",
    "TransportError",
    "Frame",
    "decode_frame",
    "encode_frame",
    "ConnectionConfig",
    "SerialConnection",
]
