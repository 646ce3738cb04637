"""
Circuit puzzles and puzzle sessions.

A puzzle is static reference data: a starting state, a target state, the
tolerance used to compare them and the XP reward. A session owns the one
circuit a player builds for a puzzle and reports every solution check
through a callback, so the progression layer can award XP without the
engine knowing anything about it.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .config import DEFAULT_CONFIG, EngineConfig
from .core.circuit import Circuit
from .core.statevector import StateVector
from .errors import PuzzleNotFoundError, StateError
from .logging_config import get_logger
from .validation import DEFAULT_TOLERANCE, ValidationResult, validate

logger = get_logger(__name__)

_R2 = 1 / math.sqrt(2)
_R8 = 1 / math.sqrt(8)


@dataclass(frozen=True)
class Puzzle:
    """A target state to reach from an initial state."""
    id: str
    title: str
    description: str
    num_qubits: int
    initial_state: StateVector
    target_state: StateVector
    reward: int
    hint: Optional[str] = None
    # None defers to EngineConfig.validation_tolerance
    tolerance: Optional[float] = None

    def __post_init__(self):
        for label, state in (('initial', self.initial_state), ('target', self.target_state)):
            if state.num_qubits != self.num_qubits:
                raise StateError(
                    f"Puzzle {self.id}: {label} state has {state.dim} amplitudes, "
                    f"expected {2 ** self.num_qubits}"
                )

    def to_dict(self, default_tolerance: float = DEFAULT_TOLERANCE) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'num_qubits': self.num_qubits,
            'initial_state': self.initial_state.to_pairs(),
            'target_state': self.target_state.to_pairs(),
            'tolerance': self.tolerance if self.tolerance is not None else default_tolerance,
            'reward': self.reward,
            'hint': self.hint,
        }


def _sv(*amplitudes: complex) -> StateVector:
    return StateVector.from_amplitudes(amplitudes)


CIRCUIT_PUZZLES: List[Puzzle] = [
    Puzzle(
        id='puzzle-1-bit-flip',
        title='Puzzle 1: Bit Flip',
        description='Transform |0⟩ into |1⟩ using a single gate.',
        num_qubits=1,
        initial_state=_sv(1, 0),
        target_state=_sv(0, 1),
        reward=30,
        hint='The X gate flips |0⟩ to |1⟩',
    ),
    Puzzle(
        id='puzzle-2-superposition',
        title='Puzzle 2: Equal Superposition',
        description='Create an equal superposition (|0⟩+|1⟩)/√2 from |0⟩.',
        num_qubits=1,
        initial_state=_sv(1, 0),
        target_state=_sv(_R2, _R2),
        reward=40,
        hint='The Hadamard gate creates equal superposition',
    ),
    Puzzle(
        id='puzzle-3-minus-state',
        title='Puzzle 3: Minus State',
        description='Create the |-⟩ state: (|0⟩-|1⟩)/√2 from |0⟩.',
        num_qubits=1,
        initial_state=_sv(1, 0),
        target_state=_sv(_R2, -_R2),
        reward=50,
        hint='Try combining X and H gates',
    ),
    Puzzle(
        id='puzzle-4-bell-state',
        title='Puzzle 4: Bell State',
        description='Create a Bell state (|00⟩+|11⟩)/√2 from |00⟩.',
        num_qubits=2,
        initial_state=_sv(1, 0, 0, 0),
        target_state=_sv(_R2, 0, 0, _R2),
        reward=60,
        hint='Use H on one qubit, then CNOT',
    ),
    Puzzle(
        id='puzzle-5-three-qubit',
        title='Puzzle 5: Three-Qubit Superposition',
        description='Create equal superposition of all 8 basis states.',
        num_qubits=3,
        initial_state=StateVector.initial(3),
        target_state=_sv(*([_R8] * 8)),
        reward=70,
        hint='Apply H to all three qubits',
    ),
    Puzzle(
        id='puzzle-6-phase-flip',
        title='Puzzle 6: Phase Flip',
        description='Transform |+⟩ into |-⟩ using phase gates.',
        num_qubits=1,
        initial_state=_sv(_R2, _R2),
        target_state=_sv(_R2, -_R2),
        reward=50,
        hint='The Z gate adds a phase flip to |1⟩',
    ),
]

_PUZZLES_BY_ID: Dict[str, Puzzle] = {p.id: p for p in CIRCUIT_PUZZLES}


def get_puzzle(puzzle_id: str) -> Puzzle:
    """Look up a built-in puzzle by id."""
    try:
        return _PUZZLES_BY_ID[puzzle_id]
    except KeyError:
        raise PuzzleNotFoundError(puzzle_id) from None


def get_puzzles_by_qubits(num_qubits: int) -> List[Puzzle]:
    """Puzzles of a given size (the catalog's notion of difficulty)."""
    return [p for p in CIRCUIT_PUZZLES if p.num_qubits == num_qubits]


CompletionCallback = Callable[[Puzzle, ValidationResult], None]


@dataclass
class PuzzleSession:
    """
    One player's attempt at a puzzle.

    Example:
        >>> session = PuzzleSession(get_puzzle('puzzle-1-bit-flip'))
        >>> session.circuit.x(0)
        Circuit(qubits=1, gates=1)
        >>> session.check_solution().valid
        True
        >>> session.reward_earned
        30
    """
    puzzle: Puzzle
    on_complete: Optional[CompletionCallback] = None
    config: EngineConfig = field(default=DEFAULT_CONFIG)
    circuit: Circuit = field(init=False)
    solved: bool = field(default=False, init=False)
    attempts: int = field(default=0, init=False)

    def __post_init__(self):
        self.circuit = Circuit(
            self.puzzle.num_qubits,
            initial_state=self.puzzle.initial_state,
            config=self.config,
        )

    @property
    def state(self) -> StateVector:
        return self.circuit.state

    @property
    def tolerance(self) -> float:
        if self.puzzle.tolerance is not None:
            return self.puzzle.tolerance
        return self.config.validation_tolerance

    @property
    def reward_earned(self) -> int:
        return self.puzzle.reward if self.solved else 0

    def check_solution(self) -> ValidationResult:
        """Compare the circuit's state with the target and notify the observer."""
        result = validate(self.circuit.state, self.puzzle.target_state, self.tolerance)
        self.attempts += 1
        if result.valid and not self.solved:
            self.solved = True
            logger.info("Puzzle %s solved in %d attempt(s)", self.puzzle.id, self.attempts)
        if self.on_complete is not None:
            self.on_complete(self.puzzle, result)
        return result

    def restart(self) -> None:
        """Drop every gate and go back to the puzzle's initial state."""
        self.circuit.clear()
