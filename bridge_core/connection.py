"""
Serial connection handler.

Each read returns whatever the device delivered in one go; the bridge
treats one read as one frame.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

import serial

from .errors import TransportError


@dataclass
class ConnectionConfig:
    """Connection configuration."""
    port: str = "/dev/ttyUSB0"
    baudrate: int = 9600
    timeout: float = 1.0
    read_size: int = 256


class SerialConnection:
    """Direct serial connection to the device link."""

    def __init__(self, config: ConnectionConfig):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)
        self._serial: Optional[serial.Serial] = None
        self._connected = False
        self._raw_callbacks: list[Callable[[bytes], None]] = []

    @property
    def connected(self) -> bool:
        return self._connected

    def register_raw_callback(self, callback: Callable[[bytes], None]) -> None:
        """Register a callback for every non-empty buffer read."""
        self._raw_callbacks.append(callback)

    def unregister_raw_callback(self, callback: Callable[[bytes], None]) -> None:
        if callback in self._raw_callbacks:
            self._raw_callbacks.remove(callback)

    def connect(self) -> bool:
        """Open serial port connection."""
        try:
            self._serial = serial.Serial(
                port=self.config.port,
                baudrate=self.config.baudrate,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                timeout=self.config.timeout
            )
            self._connected = True
            self.logger.info(f"Connected to {self.config.port} @ {self.config.baudrate} baud")
            return True
        except serial.SerialException as e:
            self.logger.error(f"Failed to connect: {e}")
            self._connected = False
            return False

    def disconnect(self) -> None:
        """Close serial connection."""
        if self._serial and self._serial.is_open:
            self._serial.close()
        self._connected = False
        self.logger.info("Disconnected")

    def read_buffer(self) -> bytes:
        """
        Perform a single read of up to ``read_size`` bytes.

        Returns an empty buffer on timeout. Raises TransportError if the
        port is gone.
        """
        if not self._serial or not self._serial.is_open:
            raise TransportError(f"Port {self.config.port} is not open")

        try:
            data = self._serial.read(self.config.read_size)
        except serial.SerialException as e:
            self.logger.error(f"Read error: {e}")
            self._connected = False
            raise TransportError(str(e)) from e

        if data:
            for cb in self._raw_callbacks:
                cb(data)
        return data

    def read_loop(self) -> Iterator[bytes]:
        """Generator yielding non-empty buffers while connected."""
        while self._connected:
            data = self.read_buffer()
            if data:
                yield data

    def __enter__(self) -> "SerialConnection":
        if not self.connect():
            raise TransportError(f"Could not open {self.config.port}")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disconnect()
