#!/usr/bin/env python3
"""Tests for the serial connection, with pyserial stubbed out."""

import sys
from pathlib import Path

import pytest
import serial

sys.path.insert(0, str(Path(__file__).parent.parent))

from bridge_core import connection as connection_module
from bridge_core.connection import ConnectionConfig, SerialConnection
from bridge_core.errors import TransportError


class StubSerial:
    def __init__(self, reads=(), **kwargs):
        self.kwargs = kwargs
        self.reads = list(reads)
        self.read_sizes = []
        self.is_open = True

    def read(self, size):
        self.read_sizes.append(size)
        if not self.reads:
            return b""
        item = self.reads.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def close(self):
        self.is_open = False


def _install(monkeypatch, reads=()):
    created = []

    def factory(**kwargs):
        stub = StubSerial(reads, **kwargs)
        created.append(stub)
        return stub

    monkeypatch.setattr(connection_module.serial, "Serial", factory)
    return created


def test_connect_uses_config(monkeypatch):
    created = _install(monkeypatch)
    conn = SerialConnection(ConnectionConfig(port="/dev/ttyTEST", baudrate=9600, timeout=0.5))

    assert conn.connect() is True
    assert conn.connected
    kwargs = created[0].kwargs
    assert kwargs["port"] == "/dev/ttyTEST"
    assert kwargs["baudrate"] == 9600
    assert kwargs["timeout"] == 0.5
    assert kwargs["bytesize"] == serial.EIGHTBITS
    assert kwargs["parity"] == serial.PARITY_NONE


def test_connect_failure_returns_false(monkeypatch):
    def factory(**kwargs):
        raise serial.SerialException("no such port")

    monkeypatch.setattr(connection_module.serial, "Serial", factory)
    conn = SerialConnection(ConnectionConfig())

    assert conn.connect() is False
    assert not conn.connected


def test_read_buffer_reads_configured_size(monkeypatch):
    created = _install(monkeypatch, [b"\x01\x02"])
    conn = SerialConnection(ConnectionConfig(read_size=64))
    conn.connect()

    assert conn.read_buffer() == b"\x01\x02"
    assert conn.read_buffer() == b""
    assert created[0].read_sizes == [64, 64]


def test_read_before_connect_raises():
    conn = SerialConnection(ConnectionConfig())
    with pytest.raises(TransportError):
        conn.read_buffer()


def test_read_error_marks_disconnected(monkeypatch):
    _install(monkeypatch, [serial.SerialException("device unplugged")])
    conn = SerialConnection(ConnectionConfig())
    conn.connect()

    with pytest.raises(TransportError):
        conn.read_buffer()
    assert not conn.connected


def test_read_loop_skips_empty_reads(monkeypatch):
    _install(monkeypatch, [b"a", b"", b"b"])
    conn = SerialConnection(ConnectionConfig())
    conn.connect()

    loop = conn.read_loop()
    assert next(loop) == b"a"
    assert next(loop) == b"b"
    conn.disconnect()
    assert list(loop) == []


def test_raw_callback(monkeypatch):
    _install(monkeypatch, [b"xyz", b""])
    seen = []
    conn = SerialConnection(ConnectionConfig())
    conn.register_raw_callback(seen.append)
    conn.connect()

    conn.read_buffer()
    conn.read_buffer()
    assert seen == [b"xyz"]


def test_context_manager_closes(monkeypatch):
    created = _install(monkeypatch)
    with SerialConnection(ConnectionConfig()) as conn:
        assert conn.connected
    assert created[0].is_open is False
    assert not conn.connected


def test_unregister_raw_callback(monkeypatch):
    _install(monkeypatch, [b"one", b"two"])
    seen = []
    conn = SerialConnection(ConnectionConfig())
    conn.register_raw_callback(seen.append)
    conn.connect()

    conn.read_buffer()
    conn.unregister_raw_callback(seen.append)
    conn.read_buffer()
    assert seen == [b"one"]
