"""
Frame to measurement mapping.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from bridge_core.errors import UnsupportedMessageType
from bridge_core.frame import Frame
from .messages import get_message_definition


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SensorReading:
    sensor_id: int
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return {"sensor_id": self.sensor_id, "value": self.value}


@dataclass(frozen=True)
class Measurement:
    device_id: int
    sensors: List[SensorReading] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Body for the ingestion endpoint."""
        return {
            "device_id": self.device_id,
            "sensors": [sensor.to_dict() for sensor in self.sensors],
        }

    def __repr__(self) -> str:
        parts = ", ".join(f"{s.sensor_id}={s.value:g}" for s in self.sensors)
        return f"Measurement[device {self.device_id}]: {parts}"


def to_measurement(frame: Frame) -> Measurement:
    """
    Map a decoded frame to a measurement.

    Raises:
        UnsupportedMessageType: no definition for the frame's message type.
        PayloadTooShort: the payload is smaller than the type requires.
    """
    msg_def = get_message_definition(frame.message_type)
    if msg_def is None:
        raise UnsupportedMessageType(frame.message_type)

    values = msg_def.decode(frame.payload)
    measurement = Measurement(
        device_id=frame.source_id,
        sensors=[SensorReading(sensor_id=sid, value=value) for sid, value in values],
    )
    logger.debug(f"{msg_def.name}: {measurement}")
    return measurement
