"""
Bridge configuration.

Values come from a YAML file and can be overridden from the command line.
A missing file is not an error: defaults apply.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from bridge_core.connection import ConnectionConfig
from telemetry.dispatcher import DispatchConfig


DEFAULT_CONFIG_PATH = "config/config.yaml"
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class LoggingConfig:
    level: str = "INFO"
    format: str = DEFAULT_LOG_FORMAT
    file: Optional[str] = None


@dataclass
class BridgeConfig:
    connection: ConnectionConfig = field(default_factory=ConnectionConfig)
    server: DispatchConfig = field(default_factory=DispatchConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader:
    """Load and manage configuration from YAML file."""

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH):
        self.config_path = Path(config_path)
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            logging.getLogger(self.__class__.__name__).debug(
                f"Config file not found: {self.config_path}, using defaults"
            )
            return {}

        with open(self.config_path, 'r') as f:
            return yaml.safe_load(f) or {}

    def get(self, key_path: str, default=None):
        """Get configuration value using dot notation (e.g., 'server.port')."""
        keys = key_path.split('.')
        value = self.config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def build(self) -> BridgeConfig:
        """Build typed configuration from the loaded file."""
        conn = ConnectionConfig()
        server = DispatchConfig()
        log = LoggingConfig()

        return BridgeConfig(
            connection=ConnectionConfig(
                port=self.get("connection.port", conn.port),
                baudrate=int(self.get("connection.baudrate", conn.baudrate)),
                timeout=float(self.get("connection.timeout", conn.timeout)),
                read_size=int(self.get("connection.read_size", conn.read_size)),
            ),
            server=DispatchConfig(
                url=self.get("server.url", server.url),
                host=self.get("server.host", server.host),
                port=int(self.get("server.port", server.port)),
                user_id=int(self.get("server.user_id", server.user_id)),
                timeout=float(self.get("server.timeout", server.timeout)),
            ),
            logging=LoggingConfig(
                level=str(self.get("logging.level", log.level)).upper(),
                format=self.get("logging.format", log.format),
                file=self.get("logging.file", log.file),
            ),
        )


def load_config(
    config_path: str = DEFAULT_CONFIG_PATH,
    port: Optional[str] = None,
    baudrate: Optional[int] = None,
    url: Optional[str] = None,
    server_port: Optional[int] = None,
    user_id: Optional[int] = None,
    verbose: bool = False,
) -> BridgeConfig:
    """Load the YAML file and apply command line overrides on top."""
    config = ConfigLoader(config_path).build()

    if port is not None:
        config.connection.port = port
    if baudrate is not None:
        config.connection.baudrate = baudrate
    if url is not None:
        config.server.url = url
    if server_port is not None:
        config.server.port = server_port
    if user_id is not None:
        config.server.user_id = user_id
    if verbose:
        config.logging.level = "DEBUG"

    return config
