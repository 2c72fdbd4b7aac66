# relay_pulse/sequencing/actuation_sequencer.py
"""
Actuation sequencer.

Drives one relay through a fixed, non-branching sequence:

    READ_INITIAL -> SET_ON -> READ_AFTER_ON -> HOLD -> SET_OFF
        -> READ_AFTER_OFF -> DONE

Observed coil states are reported but never steer the sequence; the write
acknowledgement is the only success signal. Any channel error aborts the
sequence and propagates unchanged. No compensating off-write is attempted, so
a failure after SET_ON leaves the relay energised.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from relay_pulse.errors import RelayConfigError
from relay_pulse.logging_system import EventCategory, EventSeverity, get_logger
from relay_pulse.protocols.modbus.coil_channel import BANK_SIZE

MAX_HOLD_DURATION = 65535  # seconds

logger = get_logger(__name__)


class CoilAccess(Protocol):
    async def read_coils(self, start: int = 0, count: int = BANK_SIZE) -> list[bool]:
        ...

    async def write_coil(self, index: int, value: bool) -> None:
        ...


class ActuationStep(Enum):
    READ_INITIAL = "read_initial"
    SET_ON = "set_on"
    READ_AFTER_ON = "read_after_on"
    HOLD = "hold"
    SET_OFF = "set_off"
    READ_AFTER_OFF = "read_after_off"
    DONE = "done"


@dataclass
class ActuationResult:
    """States observed during one run (advisory only)."""

    relay_index: int
    hold_duration: int
    initial_state: bool | None = None
    after_on_state: bool | None = None
    final_state: bool | None = None
    steps: list[ActuationStep] = field(default_factory=list)

    @property
    def completed(self) -> bool:
        return bool(self.steps) and self.steps[-1] is ActuationStep.DONE


def validate_request(relay_index: int, hold_duration: int) -> None:
    """Reject a relay index outside the bank or an out-of-range hold."""
    if not 0 <= relay_index < BANK_SIZE:
        raise RelayConfigError(
            f"Relay index {relay_index} outside coil bank 0-{BANK_SIZE - 1}"
        )
    if not 0 <= hold_duration <= MAX_HOLD_DURATION:
        raise RelayConfigError(
            f"Hold duration {hold_duration}s outside 0-{MAX_HOLD_DURATION}"
        )


class ActuationSequencer:
    """
    Runs the read/on/hold/off/read sequence against a coil channel.

    Example:
        >>> sequencer = ActuationSequencer(channel)
        >>> result = await sequencer.run(relay_index=3, hold_duration=10)
        >>> result.final_state
        False
    """

    def __init__(
        self,
        channel: CoilAccess,
        report: Callable[[str], None] = print,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Args:
            channel: Connected coil channel
            report: Receives one human-readable progress line per step
            sleep: Coroutine used for the hold wait
        """
        self.channel = channel
        self.report = report
        self.sleep = sleep

    async def _read_state(self, relay_index: int) -> bool:
        bank = await self.channel.read_coils(0, BANK_SIZE)
        return bank[relay_index]

    async def _set_state(self, relay_index: int, state: bool) -> None:
        await self.channel.write_coil(relay_index, state)
        logger.log_event(
            EventSeverity.NOTICE,
            EventCategory.PROCESS,
            f"Relay {relay_index} commanded {'ON' if state else 'OFF'}",
        )

    async def run(self, relay_index: int, hold_duration: int) -> ActuationResult:
        validate_request(relay_index, hold_duration)

        result = ActuationResult(relay_index=relay_index, hold_duration=hold_duration)
        steps = result.steps

        try:
            self.report("[*] Reading relay state")
            result.initial_state = await self._read_state(relay_index)
            self.report(f"[*] Relay state is: {result.initial_state}")
            steps.append(ActuationStep.READ_INITIAL)

            self.report(f"[*] Setting relay {relay_index} to ON")
            await self._set_state(relay_index, True)
            steps.append(ActuationStep.SET_ON)

            self.report(f"[*] Reading relay {relay_index} state")
            result.after_on_state = await self._read_state(relay_index)
            self.report(f"[*] Relay state is: {result.after_on_state}")
            steps.append(ActuationStep.READ_AFTER_ON)

            self.report(f"[*] Waiting for {hold_duration} seconds")
            if hold_duration > 0:
                await self.sleep(hold_duration)
            steps.append(ActuationStep.HOLD)

            self.report(f"[*] Setting relay {relay_index} to OFF")
            await self._set_state(relay_index, False)
            steps.append(ActuationStep.SET_OFF)

            self.report(f"[*] Reading relay {relay_index} state")
            result.final_state = await self._read_state(relay_index)
            self.report(f"[*] Relay state is: {result.final_state}")
            steps.append(ActuationStep.READ_AFTER_OFF)
        except Exception as e:
            completed = steps[-1].value if steps else "none"
            severity = (
                EventSeverity.CRITICAL
                if ActuationStep.SET_ON in steps
                else EventSeverity.ERROR
            )
            logger.log_event(
                severity,
                EventCategory.PROCESS,
                f"Sequence for relay {relay_index} aborted after {completed}: {e}",
            )
            raise

        steps.append(ActuationStep.DONE)
        return result


async def run(
    channel: CoilAccess,
    relay_index: int,
    hold_duration: int,
    **kwargs,
) -> ActuationResult:
    """Run one actuation sequence; kwargs are passed to ActuationSequencer."""
    return await ActuationSequencer(channel, **kwargs).run(relay_index, hold_duration)
