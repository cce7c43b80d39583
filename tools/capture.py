#!/usr/bin/env python3
"""
Serial Frame Capture Tool

Reads frames from the device link and prints what the bridge would make
of them. Nothing is forwarded.
"""

import sys
import argparse
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from bridge_core.connection import SerialConnection, ConnectionConfig
from bridge_core.errors import FrameError, TransportError
from bridge_core.frame import decode_frame
from telemetry.mapper import to_measurement
from telemetry.messages import get_message_definition


def describe(buffer: bytes, raw: bool = False) -> Tuple[str, bool]:
    """Describe a buffer as hex plus the decode result unless raw.

    Returns the text and whether a measurement could be produced.
    """
    hex_str = ' '.join(f'{b:02X}' for b in buffer)
    if raw:
        return hex_str, False

    try:
        frame = decode_frame(buffer)
    except FrameError as e:
        return f"❌ {type(e).__name__}: {e}\n       RAW: {hex_str}", False

    try:
        measurement = to_measurement(frame)
    except FrameError as e:
        return f"{frame}\n       ❓ {type(e).__name__}: {e}", False
    msg_def = get_message_definition(frame.message_type)
    return f"{frame}\n       ✅ {msg_def.name} ({msg_def.description}): {measurement}", True


class FrameCapturer:
    """Frame capture and analysis tool."""

    def __init__(self, port: str = "/dev/ttyUSB0", baudrate: int = 9600):
        self.config = ConnectionConfig(port=port, baudrate=baudrate)
        self.connection = SerialConnection(self.config)
        self.stats = {"buffers": 0, "bytes": 0, "valid": 0}

    def connect(self) -> bool:
        """Connect to serial port."""
        return self.connection.connect()

    def disconnect(self) -> None:
        """Disconnect from serial port."""
        self.connection.disconnect()

    def capture(self, count: int = 20, raw: bool = False, output_file: Optional[str] = None):
        """Capture and display ``count`` buffers (0 = until interrupted)."""
        mode = "raw" if raw else "decoded"
        print(f"\n📡 Capturing {count or 'all'} frames ({mode} mode) - Ctrl+C to stop...")
        print("=" * 70)

        out_file = open(output_file, 'ab') if output_file else None
        if out_file:
            print(f"💾 Saving to {output_file}")
            self.connection.register_raw_callback(out_file.write)

        try:
            for buffer in self.connection.read_loop():
                self.stats["buffers"] += 1
                self.stats["bytes"] += len(buffer)

                ts = datetime.now().strftime("%H:%M:%S.%f")[:-3]
                line, ok = describe(buffer, raw=raw)
                if ok:
                    self.stats["valid"] += 1
                print(f"[{self.stats['buffers']:4d}] {ts} {line}")

                if count and self.stats["buffers"] >= count:
                    break
        except KeyboardInterrupt:
            print("\n⚠️  Interrupted")
        except TransportError as e:
            print(f"\n❌ Serial link lost: {e}")
        finally:
            if out_file:
                self.connection.unregister_raw_callback(out_file.write)
                out_file.close()

        print("=" * 70)
        print(f"📊 Captured {self.stats['buffers']} buffers, "
              f"{self.stats['bytes']} bytes, {self.stats['valid']} valid measurements")


def main():
    parser = argparse.ArgumentParser(
        description="Serial Frame Capture Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s -p /dev/ttyUSB0           # Decode 20 frames
  %(prog)s -c 0 --raw                # Hex dump until Ctrl+C
  %(prog)s -c 100 -o capture.bin     # Save 100 frames
        """
    )

    parser.add_argument(
        "-p", "--port",
        default="/dev/ttyUSB0",
        help="Serial port (default: /dev/ttyUSB0)"
    )
    parser.add_argument(
        "-b", "--baudrate",
        type=int,
        default=9600,
        help="Baud rate (default: 9600)"
    )
    parser.add_argument(
        "-c", "--count",
        type=int,
        default=20,
        help="Number of frames to capture, 0 for no limit (default: 20)"
    )
    parser.add_argument(
        "-o", "--output",
        help="Append raw bytes to this file"
    )
    parser.add_argument(
        "--raw",
        action="store_true",
        help="Show hex only, do not decode"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose logging"
    )

    args = parser.parse_args()

    # Setup logging
    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    capturer = FrameCapturer(port=args.port, baudrate=args.baudrate)

    if not capturer.connect():
        print(f"❌ Failed to connect to {args.port}")
        sys.exit(1)

    try:
        capturer.capture(args.count, raw=args.raw, output_file=args.output)
    finally:
        capturer.disconnect()


if __name__ == "__main__":
    main()
