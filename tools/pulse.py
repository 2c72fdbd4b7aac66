#!/usr/bin/env python3
# tools/pulse.py
"""
Relay pulse - turn one relay on for a number of seconds.

Reads the relay state, energises it, waits, de-energises it and reads the
state again, printing progress at each step.

Serial device: TTY_PATH environment variable, else config/relay.yml.
"""

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Mapping
from pathlib import Path

from config.config_loader import ConfigLoader
from relay_pulse.errors import (
    ChannelConnectionError,
    RelayConfigError,
    TransactionError,
)
from relay_pulse.logging_system import (
    EventCategory,
    EventSeverity,
    configure_logging,
    get_logger,
)
from relay_pulse.protocols.modbus.coil_channel import CoilChannel
from relay_pulse.sequencing.actuation_sequencer import (
    ActuationSequencer,
    validate_request,
)

logger = get_logger(__name__)


def _bounded_int(upper: int):
    def _parse(value: str) -> int:
        try:
            number = int(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
        if not 0 <= number <= upper:
            raise argparse.ArgumentTypeError(f"{number} not in range 0-{upper}")
        return number

    return _parse


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="relay-pulse",
        description="Turn on one Modbus RTU relay for a number of seconds",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  relay-pulse                     # Relay 0 for 10 seconds
  relay-pulse 3 5                 # Relay 3 for 5 seconds
  TTY_PATH=/dev/ttyUSB0 relay-pulse 1 2
        """,
    )
    parser.add_argument(
        "relay",
        nargs="?",
        type=_bounded_int(255),
        help="Relay (coil) index, 0-7 (default from config, 0)",
    )
    parser.add_argument(
        "duration",
        nargs="?",
        type=_bounded_int(65535),
        help="Seconds to keep the relay on (default from config, 10)",
    )
    parser.add_argument(
        "--config-dir",
        default="config",
        help="Directory containing relay.yml (default: config)",
    )
    parser.add_argument("--log-dir", help="Write JSON logs to this directory")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging on stderr"
    )
    return parser


async def main(
    argv: list[str] | None = None, environ: Mapping[str, str] | None = None
) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    configure_logging(
        log_dir=Path(args.log_dir) if args.log_dir else None,
        console_level=logging.DEBUG if args.verbose else logging.WARNING,
    )

    config = ConfigLoader(args.config_dir).load_relay_config(
        os.environ if environ is None else environ
    )
    relay_index = config.relay_index if args.relay is None else args.relay
    hold_duration = config.hold_duration if args.duration is None else args.duration

    print(f"Turning on relay {relay_index} for {hold_duration} seconds")

    try:
        validate_request(relay_index, hold_duration)
        channel = await CoilChannel.open(config.link, config.slave_id)
    except RelayConfigError as e:
        print(f"[!] {e}")
        logger.log_event(EventSeverity.ERROR, EventCategory.SYSTEM, str(e))
        return 1
    except ChannelConnectionError as e:
        print(f"[!] {e}")
        logger.log_event(EventSeverity.ERROR, EventCategory.COMMUNICATION, str(e))
        return 1

    try:
        await ActuationSequencer(channel).run(relay_index, hold_duration)
    except TransactionError as e:
        print(f"[!] {e}")
        return 1
    finally:
        await channel.close()

    return 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
