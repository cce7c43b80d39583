#!/usr/bin/env python3
"""
Serial Measurement Bridge - Main Entry Point

Reads frames from a serial device, decodes the sensor reading they carry
and forwards it as JSON to an HTTP ingestion endpoint.
"""

import argparse
import logging
import signal
import sys
from pathlib import Path
from typing import Dict, List, Optional

from bridge_core.connection import SerialConnection
from bridge_core.errors import DecodeError, DispatchError, MapError, TransportError
from bridge_core.frame import decode_frame
from config_loader import DEFAULT_CONFIG_PATH, BridgeConfig, load_config
from telemetry.dispatcher import MeasurementDispatcher
from telemetry.mapper import Measurement, to_measurement


class BridgeApplication:
    """Main application class."""

    def __init__(
        self,
        config: BridgeConfig,
        connection: Optional[SerialConnection] = None,
        dispatcher: Optional[MeasurementDispatcher] = None,
    ):
        self.config = config
        self._setup_logging()

        self.logger = logging.getLogger(self.__class__.__name__)
        self.connection = connection or SerialConnection(config.connection)
        self.dispatcher = dispatcher or MeasurementDispatcher(config.server)

        self._running = False
        self.stats = {
            "frames": 0,
            "forwarded": 0,
            "decode_errors": 0,
            "map_errors": 0,
            "dispatch_errors": 0,
        }

    def _setup_logging(self) -> None:
        """Configure logging."""
        log_config = self.config.logging
        level = getattr(logging, log_config.level, logging.INFO)

        logging.basicConfig(level=level, format=log_config.format)
        logging.getLogger().setLevel(level)
        # httpx logs every request at INFO
        logging.getLogger("httpx").setLevel(max(level, logging.WARNING))

        # File handler if specified
        if log_config.file:
            Path(log_config.file).parent.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(log_config.file)
            fh.setLevel(level)
            fh.setFormatter(logging.Formatter(log_config.format))
            logging.getLogger().addHandler(fh)

    def process_buffer(self, buffer: bytes) -> Optional[Measurement]:
        """
        Run one decode, map and dispatch cycle.

        Returns the forwarded measurement, or None if the cycle was dropped.
        Nothing is sent unless decoding and mapping both succeed.
        """
        self.stats["frames"] += 1

        try:
            frame = decode_frame(buffer)
        except DecodeError as e:
            self.stats["decode_errors"] += 1
            self.logger.warning(f"Dropping buffer: {e}")
            self.logger.debug(f"Raw buffer: {bytes(buffer).hex()}")
            return None

        try:
            measurement = to_measurement(frame)
        except MapError as e:
            self.stats["map_errors"] += 1
            self.logger.warning(f"Dropping frame seq={frame.sequence_id}: {e}")
            return None

        try:
            self.dispatcher.send(measurement)
        except DispatchError as e:
            self.stats["dispatch_errors"] += 1
            self.logger.warning(f"Could not forward {measurement}: {e}")
            return None

        self.stats["forwarded"] += 1
        self.logger.info(f"📨 {measurement}")
        return measurement

    def run(self) -> int:
        """Run the read loop until stopped. Returns a process exit code."""
        self._running = True
        self.logger.info(f"🚀 Starting bridge {self.config.connection.port} -> {self.dispatcher.endpoint}")

        if not self.connection.connect():
            self.logger.error(f"❌ Could not open serial port {self.config.connection.port}")
            self._running = False
            self.dispatcher.close()
            return 1

        exit_code = 0
        try:
            while self._running:
                buffer = self.connection.read_buffer()
                if not buffer:
                    continue
                self.process_buffer(buffer)
        except TransportError as e:
            self.logger.error(f"Serial link lost: {e}")
            exit_code = 1
        finally:
            self._running = False
            self.connection.disconnect()
            self.dispatcher.close()
            self.logger.info(f"📊 Stats: {self.get_stats()}")

        return exit_code

    def stop(self) -> None:
        """Stop the application after the current cycle."""
        self.logger.info("Stopping...")
        self._running = False

    def get_stats(self) -> Dict[str, int]:
        return dict(self.stats)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Forward sensor frames from a serial port to an HTTP endpoint"
    )
    parser.add_argument("port", nargs="?", help="Serial port (e.g. /dev/ttyUSB0)")
    parser.add_argument("-c", "--config", default=DEFAULT_CONFIG_PATH, help="YAML config file")
    parser.add_argument("-b", "--baudrate", type=int, help="Serial baud rate")
    parser.add_argument("--url", help="Full ingestion URL (overrides server port/user id)")
    parser.add_argument("--server-port", type=int, help="Ingestion server port")
    parser.add_argument("--user-id", type=int, help="User id in the ingestion URL")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_arg_parser().parse_args(argv)
    config = load_config(
        args.config,
        port=args.port,
        baudrate=args.baudrate,
        url=args.url,
        server_port=args.server_port,
        user_id=args.user_id,
        verbose=args.verbose,
    )
    app = BridgeApplication(config)

    # Handle signals
    for sig in (signal.SIGINT, signal.SIGTERM):
        signal.signal(sig, lambda signum, frame: app.stop())

    return app.run()


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
