#!/usr/bin/env python3
"""Tests for configuration loading."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from config_loader import ConfigLoader, load_config


def test_missing_file_uses_defaults(tmp_path):
    config = load_config(str(tmp_path / "absent.yaml"))

    assert config.connection.port == "/dev/ttyUSB0"
    assert config.connection.baudrate == 9600
    assert config.connection.read_size == 256
    assert config.server.endpoint == "http://localhost:5000/new/user/1/measurements"
    assert config.logging.level == "INFO"
    assert config.logging.file is None


def test_yaml_values(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "connection:\n"
        "  port: /dev/ttyACM1\n"
        "  baudrate: 115200\n"
        "server:\n"
        "  port: 5001\n"
        "  user_id: 7\n"
        "logging:\n"
        "  level: debug\n"
    )

    config = load_config(str(path))

    assert config.connection.port == "/dev/ttyACM1"
    assert config.connection.baudrate == 115200
    assert config.connection.timeout == 1.0
    assert config.server.endpoint == "http://localhost:5001/new/user/7/measurements"
    assert config.logging.level == "DEBUG"


def test_cli_overrides_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("connection:\n  port: /dev/ttyS0\nserver:\n  port: 5000\n")

    config = load_config(
        str(path),
        port="/dev/ttyUSB3",
        baudrate=19200,
        server_port=5001,
        user_id=2,
        verbose=True,
    )

    assert config.connection.port == "/dev/ttyUSB3"
    assert config.connection.baudrate == 19200
    assert config.server.endpoint == "http://localhost:5001/new/user/2/measurements"
    assert config.logging.level == "DEBUG"


def test_url_override(tmp_path):
    config = load_config(str(tmp_path / "absent.yaml"), url="http://ingest.test/m")
    assert config.server.endpoint == "http://ingest.test/m"


def test_empty_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert ConfigLoader(str(path)).config == {}


def test_dot_notation_get(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("server:\n  host: example\n")
    loader = ConfigLoader(str(path))

    assert loader.get("server.host") == "example"
    assert loader.get("server.missing", 5) == 5
    assert loader.get("server.host.deeper") is None


def test_shipped_config_loads():
    path = Path(__file__).parent.parent / "config" / "config.yaml"
    config = load_config(str(path))
    assert config.server.endpoint == "http://localhost:5000/new/user/1/measurements"
