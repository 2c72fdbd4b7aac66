"""Relay actuation sequencing."""

from relay_pulse.sequencing.actuation_sequencer import (
    ActuationResult,
    ActuationSequencer,
    ActuationStep,
    run,
)

__all__ = [
    "ActuationResult",
    "ActuationSequencer",
    "ActuationStep",
    "run",
]
