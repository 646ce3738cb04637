"""Exceptions raised by the qubit-quest engine."""


class QubitQuestError(Exception):
    """Base class for all engine errors."""


class InvalidGateError(QubitQuestError, ValueError):
    """A gate is malformed or addresses a qubit outside the circuit."""


class StateError(QubitQuestError, ValueError):
    """A state vector cannot be built from the given data."""


class GateNotFoundError(QubitQuestError, KeyError):
    """No placed gate carries the requested id."""


class PuzzleNotFoundError(QubitQuestError, KeyError):
    """No puzzle carries the requested id."""
