"""Modbus RTU coil access."""

from relay_pulse.protocols.modbus.coil_channel import BANK_SIZE, CoilChannel, SerialLink

__all__ = [
    "BANK_SIZE",
    "CoilChannel",
    "SerialLink",
]
