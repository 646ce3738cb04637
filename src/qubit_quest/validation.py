"""
Puzzle validation: does a state vector match its target?

Two states match when every pair of amplitudes lies strictly closer than
the tolerance in the complex plane. A single amplitude out of tolerance
fails the whole comparison; there is no partial credit.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

from .core.statevector import Amplitude, StateVector

DEFAULT_TOLERANCE = 0.001

SUCCESS_MESSAGE = "Correct! You solved the puzzle!"
FAILURE_MESSAGE = "Not quite right. Keep trying!"

States = Union[StateVector, Sequence[Amplitude]]


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a solution check. Only ``valid`` is a contract."""
    valid: bool
    message: str
    max_distance: float = float('inf')

    def __bool__(self) -> bool:
        return self.valid


def max_distance(actual: States, target: States) -> float:
    """Largest per-amplitude distance, inf when the lengths differ."""
    if len(actual) != len(target):
        return float('inf')
    return max((a.distance(b) for a, b in zip(actual, target)), default=0.0)


def states_match(actual: States, target: States,
                 tolerance: float = DEFAULT_TOLERANCE) -> bool:
    """True if both states have the same length and every distance < tolerance."""
    if len(actual) != len(target):
        return False
    return all(a.distance(b) < tolerance for a, b in zip(actual, target))


def validate(actual: States, target: States,
             tolerance: float = DEFAULT_TOLERANCE) -> ValidationResult:
    """states_match plus a player-facing message."""
    valid = states_match(actual, target, tolerance)
    return ValidationResult(
        valid=valid,
        message=SUCCESS_MESSAGE if valid else FAILURE_MESSAGE,
        max_distance=max_distance(actual, target),
    )
