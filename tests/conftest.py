# tests/conftest.py
"""Shared pytest fixtures for relay actuator tests.

Provides a recording coil channel that stands in for the serial device,
plus configuration helpers backed by real YAML files.
"""

import tempfile
from pathlib import Path
from typing import Generator

import pytest
import yaml

from relay_pulse.protocols.modbus.coil_channel import BANK_SIZE, SerialLink


# ----------------------------------------------------------------
# Recording channel
# ----------------------------------------------------------------
class RecordingChannel:
    """In-memory coil bank that records every transaction in order.

    Args:
        initial: Starting coil states (padded to BANK_SIZE with False)
        fail_on: Operation name ("read", "write_on", "write_off") to fail
        error: Exception raised by the failing operation
        sticky: If True, writes are acknowledged but coils never change
    """

    def __init__(
        self,
        initial: list[bool] | None = None,
        fail_on: str | None = None,
        error: Exception | None = None,
        sticky: bool = False,
    ):
        bank = list(initial or [])
        self.bank = bank + [False] * (BANK_SIZE - len(bank))
        self.fail_on = fail_on
        self.error = error
        self.sticky = sticky
        self.calls: list[tuple] = []
        self.closed = False

    async def close(self) -> None:
        self.closed = True

    async def read_coils(self, start: int = 0, count: int = BANK_SIZE) -> list[bool]:
        self.calls.append(("read", start, count))
        if self.fail_on == "read":
            raise self.error
        return list(self.bank[start : start + count])

    async def write_coil(self, index: int, value: bool) -> None:
        self.calls.append(("write", index, value))
        if self.fail_on == ("write_on" if value else "write_off"):
            raise self.error
        if not self.sticky:
            self.bank[index] = value

    @property
    def reads(self) -> list[tuple]:
        return [c for c in self.calls if c[0] == "read"]

    @property
    def writes(self) -> list[tuple]:
        return [c for c in self.calls if c[0] == "write"]


@pytest.fixture
def make_channel():
    """Provide the RecordingChannel class for tests needing custom setup."""
    return RecordingChannel


@pytest.fixture
def recording_channel() -> RecordingChannel:
    """Provide a RecordingChannel with all coils off."""
    return RecordingChannel()


@pytest.fixture
def serial_link() -> SerialLink:
    """Provide a typical RS-485 link."""
    return SerialLink(port="/dev/ttyUSB0", baudrate=9600)


@pytest.fixture
def sleep_recorder():
    """Provide a fake sleep coroutine that records requested durations.

    Returns:
        Tuple of (sleep coroutine function, list of durations)
    """
    durations: list[float] = []

    async def _sleep(seconds: float) -> None:
        durations.append(seconds)

    return _sleep, durations


# ----------------------------------------------------------------
# Configuration fixtures
# ----------------------------------------------------------------
@pytest.fixture
def temp_config_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test configuration files.

    Yields:
        Path to temporary configuration directory
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def write_config_file(temp_config_dir):
    """Factory fixture for writing YAML configuration files.

    Returns:
        Function that writes a config dict to YAML and returns its path
    """

    def _write_config(config: dict, filename: str = "relay.yml") -> Path:
        config_file = temp_config_dir / filename
        with open(config_file, "w") as f:
            yaml.dump(config, f)
        return config_file

    return _write_config
