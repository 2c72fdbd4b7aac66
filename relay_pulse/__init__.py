"""
Single-relay actuation over Modbus RTU.

Structure:
    relay_pulse/
    ├── protocols/modbus/coil_channel.py        # CoilChannel (serial transport)
    ├── sequencing/actuation_sequencer.py       # ActuationSequencer
    ├── logging_system.py                       # RelayLogger, get_logger
    └── errors.py                               # error taxonomy

Usage:
    from relay_pulse import CoilChannel, SerialLink, run

    channel = await CoilChannel.open(SerialLink("/dev/rs485", 9600), 255)
    async with channel:
        await run(channel, relay_index=0, hold_duration=10)
"""

from relay_pulse.errors import (
    ChannelConnectionError,
    RelayConfigError,
    RelayError,
    TransactionError,
)
from relay_pulse.protocols.modbus.coil_channel import BANK_SIZE, CoilChannel, SerialLink
from relay_pulse.sequencing.actuation_sequencer import (
    ActuationResult,
    ActuationSequencer,
    ActuationStep,
    run,
)

__all__ = [
    "BANK_SIZE",
    "ActuationResult",
    "ActuationSequencer",
    "ActuationStep",
    "ChannelConnectionError",
    "CoilChannel",
    "RelayConfigError",
    "RelayError",
    "SerialLink",
    "TransactionError",
    "run",
]
