"""Measurement mapping and forwarding."""

from .messages import (
    MessageType,
    MessageDefinition,
    MESSAGE_DEFINITIONS,
    get_message_definition,
)
from .mapper import Measurement, SensorReading, to_measurement
from .dispatcher import DispatchConfig, MeasurementDispatcher

__all__ = [
    "MessageType",
    "MessageDefinition",
    "MESSAGE_DEFINITIONS",
    "get_message_definition",
    "Measurement",
    "SensorReading",
    "to_measurement",
    "DispatchConfig",
    "MeasurementDispatcher",
]
