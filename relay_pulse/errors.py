# relay_pulse/errors.py
"""Errors raised by the coil channel and the actuation sequencer."""


class RelayError(Exception):
    """Base class for relay actuation failures."""


class ChannelConnectionError(RelayError, ConnectionError):
    """Serial device could not be opened or the Modbus session not established."""

    def __init__(self, port: str, reason: str = "connection refused"):
        super().__init__(f"Cannot open serial device {port}: {reason}")
        self.port = port
        self.reason = reason


class TransactionError(RelayError):
    """A read or write coil transaction failed."""

    def __init__(self, operation: str, address: int, reason: str):
        super().__init__(f"{operation} at coil {address} failed: {reason}")
        self.operation = operation
        self.address = address
        self.reason = reason


class RelayConfigError(RelayError, ValueError):
    """Relay index, hold duration or slave address out of range."""
