"""
Circuit evolver - owns the placed gates and the current state vector.

The placed gate list works like an event log: the current state is the
fold of apply_gate over the log, starting from the circuit's initial state.
Adding a gate applies just that gate; removing one filters the log and
folds it again from scratch.

Supports the fluent API: Circuit(2).h(0).cx(0, 1).state
"""
from __future__ import annotations

import itertools
import time
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple

from ..config import DEFAULT_CONFIG, EngineConfig
from ..errors import GateNotFoundError, StateError
from ..logging_config import get_logger
from ..performance import CIRCUIT_SIMULATION, PerformanceMonitor
from .gates import Gate, GateType, apply_gate, check_gate_fits
from .statevector import StateVector

logger = get_logger(__name__)


@dataclass(frozen=True)
class PlacedGate:
    """A gate at a column position in the circuit."""
    gate: Gate
    position: int
    id: str


class Circuit:
    """
    Quantum circuit with an always up-to-date state vector.

    Example:
        >>> qc = Circuit(2)
        >>> bell = qc.h(0).cx(0, 1).state
        >>> [round(a.real, 4) for a in bell]
        [0.7071, 0.0, 0.0, 0.7071]

    A circuit attached to a puzzle starts from the puzzle's initial state:
        >>> qc = Circuit(1, initial_state=StateVector.from_amplitudes([0, 1]))
    """

    def __init__(self, num_qubits: int, initial_state: Optional[StateVector] = None,
                 config: Optional[EngineConfig] = None,
                 monitor: Optional[PerformanceMonitor] = None,
                 on_change: Optional[Callable[[StateVector], None]] = None):
        """
        Create a circuit.

        Args:
            num_qubits: Number of qubits, fixed for the circuit's lifetime
            initial_state: Starting vector (default: |00...0⟩)
            config: Engine configuration (default: DEFAULT_CONFIG)
            monitor: Performance monitor for replays
            on_change: Called with the new state after every mutation
        """
        self.config = config or DEFAULT_CONFIG
        if num_qubits < 1:
            raise StateError(f"Need at least one qubit, got {num_qubits}")
        if num_qubits > self.config.max_qubits:
            raise StateError(
                f"{num_qubits} qubits exceeds the limit of {self.config.max_qubits}"
            )
        if initial_state is None:
            initial_state = StateVector.initial(num_qubits)
        elif initial_state.num_qubits != num_qubits:
            raise StateError(
                f"Initial state has {initial_state.dim} amplitudes, "
                f"expected {2 ** num_qubits} for {num_qubits} qubits"
            )

        if not initial_state.is_normalized(self.config.normalization_tolerance):
            logger.warning("Initial state is not normalized (norm=%.6f)", initial_state.norm())

        self.num_qubits = num_qubits
        self.monitor = monitor if monitor is not None else PerformanceMonitor(self.config)
        self.on_change = on_change
        self._initial_state = initial_state
        self._state = initial_state
        self._placed: List[PlacedGate] = []
        self._ids = itertools.count()

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def state(self) -> StateVector:
        """Current state vector snapshot."""
        return self._state

    @property
    def initial_state(self) -> StateVector:
        return self._initial_state

    @property
    def gates(self) -> Tuple[PlacedGate, ...]:
        """Placed gates in column order. Equal positions keep insertion order."""
        return tuple(sorted(self._placed, key=lambda p: p.position))

    @property
    def next_position(self) -> int:
        if not self._placed:
            return 0
        return max(p.position for p in self._placed) + 1

    # =========================================================================
    # MUTATION
    # =========================================================================

    def add_gate(self, gate: Gate) -> PlacedGate:
        """Append a gate after the last column and apply it to the current state."""
        check_gate_fits(gate, self.num_qubits)
        placed = PlacedGate(gate, self.next_position, self._new_id())
        self._placed.append(placed)

        with self.monitor.timed('state-update'):
            self._state = apply_gate(self._state, gate)

        logger.debug("Added %r at position %d as %s", gate, placed.position, placed.id)
        self._notify()
        return placed

    def place(self, gate: Gate, position: int) -> PlacedGate:
        """
        Put a gate at an explicit column position.

        Gates already at that position stay in front of it. The state is
        rebuilt by a full replay.
        """
        check_gate_fits(gate, self.num_qubits)
        if position < 0:
            raise ValueError(f"Position must be >= 0, got {position}")
        placed = PlacedGate(gate, position, self._new_id())
        self._placed.append(placed)
        logger.debug("Placed %r at position %d as %s", gate, position, placed.id)
        self.replay()
        self._notify()
        return placed

    def remove_gate(self, gate_id: str) -> PlacedGate:
        """Delete a placed gate by id and replay the remaining gates."""
        for i, placed in enumerate(self._placed):
            if placed.id == gate_id:
                del self._placed[i]
                break
        else:
            raise GateNotFoundError(gate_id)

        logger.debug("Removed %s (%r), replaying %d gates",
                     gate_id, placed.gate, len(self._placed))
        self.replay()
        self._notify()
        return placed

    def clear(self) -> None:
        """Remove every gate and return to the initial state."""
        self._placed.clear()
        self._state = self._initial_state
        logger.debug("Cleared circuit")
        self._notify()

    # =========================================================================
    # FLUENT API
    # =========================================================================

    def x(self, qubit: int) -> 'Circuit':
        """Pauli-X (NOT) gate."""
        self.add_gate(Gate.x(qubit))
        return self

    def h(self, qubit: int) -> 'Circuit':
        """Hadamard gate."""
        self.add_gate(Gate.h(qubit))
        return self

    def z(self, qubit: int) -> 'Circuit':
        """Pauli-Z gate."""
        self.add_gate(Gate.z(qubit))
        return self

    def s(self, qubit: int) -> 'Circuit':
        """S (√Z) gate."""
        self.add_gate(Gate.s(qubit))
        return self

    def t(self, qubit: int) -> 'Circuit':
        """T (π/8) gate."""
        self.add_gate(Gate.t(qubit))
        return self

    def cx(self, control: int, target: int) -> 'Circuit':
        """CNOT (controlled-X) gate."""
        self.add_gate(Gate.cnot(control, target))
        return self

    def cnot(self, control: int, target: int) -> 'Circuit':
        """Alias for cx."""
        return self.cx(control, target)

    # =========================================================================
    # EXECUTION
    # =========================================================================

    def replay(self) -> StateVector:
        """
        Recompute the state from the initial vector through every placed gate.

        The duration is recorded with the performance monitor, which warns
        when a long circuit blows the simulation budget.
        """
        ordered = self.gates
        start = time.perf_counter()

        state = self._initial_state
        for placed in ordered:
            state = apply_gate(state, placed.gate)

        duration_ms = (time.perf_counter() - start) * 1000.0
        self.monitor.record(CIRCUIT_SIMULATION, duration_ms)
        self.monitor.check_circuit_budget(len(ordered), duration_ms)

        self._state = state
        return state

    def steps(self) -> List[Tuple[PlacedGate, StateVector]]:
        """State after each gate in column order (educational stepping)."""
        result = []
        state = self._initial_state
        for placed in self.gates:
            state = apply_gate(state, placed.gate)
            result.append((placed, state))
        return result

    # =========================================================================
    # INTERNAL METHODS
    # =========================================================================

    def _new_id(self) -> str:
        return f"gate-{next(self._ids)}"

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self._state)

    # =========================================================================
    # UTILITY
    # =========================================================================

    def __len__(self) -> int:
        """Return number of placed gates."""
        return len(self._placed)

    def __iter__(self) -> Iterator[PlacedGate]:
        return iter(self.gates)

    def count(self, gate_type: GateType) -> int:
        return sum(1 for p in self._placed if p.gate.type is gate_type)

    def depth(self) -> int:
        """Return circuit depth (layers of parallel gates)."""
        if not self._placed:
            return 0

        qubit_depths = [0] * self.num_qubits
        for placed in self.gates:
            qubits = placed.gate.qubits
            max_depth = max(qubit_depths[q] for q in qubits)
            for q in qubits:
                qubit_depths[q] = max_depth + 1

        return max(qubit_depths)

    def __repr__(self) -> str:
        return f"Circuit(qubits={self.num_qubits}, gates={len(self._placed)})"
