"""
Gates and the gate applicator.

The engine supports a closed set of six gates: X, H, Z, S, T and CNOT.
Instead of building 2^n x 2^n matrices, each gate is applied by bit-masking
the basis index: for every index i we compute where its amplitude goes and
accumulate the contributions into a fresh vector.

    target_bit = (i >> target) & 1
    flipped    = i ^ (1 << target)

This shortcut is exact for single-qubit gates and CNOT. It does not
generalise to arbitrary multi-qubit unitaries.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from ..errors import InvalidGateError
from .statevector import Amplitude, StateVector

SQRT1_2 = 1 / math.sqrt(2)
T_PHASE = math.pi / 4


class GateType(Enum):
    X = 'X'
    H = 'H'
    Z = 'Z'
    CNOT = 'CNOT'
    S = 'S'
    T = 'T'

    @property
    def num_qubits(self) -> int:
        return 2 if self is GateType.CNOT else 1

    @classmethod
    def parse(cls, name: Any) -> 'GateType':
        """Parse a gate tag, case-insensitive. ``CX`` is accepted for CNOT."""
        if isinstance(name, GateType):
            return name
        key = str(name).strip().upper()
        if key == 'CX':
            key = 'CNOT'
        try:
            return cls(key)
        except ValueError:
            raise InvalidGateError(f"Unknown gate: {name!r}") from None


@dataclass(frozen=True)
class Gate:
    """
    One gate of the supported set.

    A CNOT always carries a control qubit distinct from its target, and
    single-qubit gates never carry one, so a malformed gate cannot be built.

    Example:
        >>> Gate.h(0)
        Gate(H, target=0)
        >>> Gate.cnot(0, 1)
        Gate(CNOT, control=0, target=1)
    """
    type: GateType
    target_qubit: int
    control_qubit: Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.type, GateType):
            object.__setattr__(self, 'type', GateType.parse(self.type))
        if self.target_qubit < 0:
            raise InvalidGateError(f"Target qubit must be >= 0, got {self.target_qubit}")
        if self.type is GateType.CNOT:
            if self.control_qubit is None:
                raise InvalidGateError("CNOT requires a control qubit")
            if self.control_qubit < 0:
                raise InvalidGateError(
                    f"Control qubit must be >= 0, got {self.control_qubit}"
                )
            if self.control_qubit == self.target_qubit:
                raise InvalidGateError(
                    f"CNOT control and target must differ (both {self.target_qubit})"
                )
        elif self.control_qubit is not None:
            raise InvalidGateError(f"{self.type.value} gate takes no control qubit")

    # =========================================================================
    # CONSTRUCTORS
    # =========================================================================

    @classmethod
    def x(cls, qubit: int) -> 'Gate':
        """Pauli-X (NOT) gate."""
        return cls(GateType.X, qubit)

    @classmethod
    def h(cls, qubit: int) -> 'Gate':
        """Hadamard gate."""
        return cls(GateType.H, qubit)

    @classmethod
    def z(cls, qubit: int) -> 'Gate':
        """Pauli-Z (phase flip) gate."""
        return cls(GateType.Z, qubit)

    @classmethod
    def s(cls, qubit: int) -> 'Gate':
        """S (√Z) gate."""
        return cls(GateType.S, qubit)

    @classmethod
    def t(cls, qubit: int) -> 'Gate':
        """T (π/8) gate."""
        return cls(GateType.T, qubit)

    @classmethod
    def cnot(cls, control: int, target: int) -> 'Gate':
        """CNOT (controlled-X) gate."""
        return cls(GateType.CNOT, target, control)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Gate':
        """
        Build a gate from its JSON form.

        Accepts ``{"type": "CNOT", "target": 1, "control": 0}``; the keys
        ``targetQubit``/``controlQubit`` are accepted too.
        """
        try:
            gate_type = GateType.parse(data['type'])
            target = data['target'] if 'target' in data else data['targetQubit']
        except KeyError as e:
            raise InvalidGateError(f"Gate definition missing {e.args[0]!r}") from None
        control = data.get('control', data.get('controlQubit'))
        try:
            target = int(target)
            control = None if control is None else int(control)
        except (TypeError, ValueError):
            raise InvalidGateError(f"Qubit indices must be integers: {dict(data)!r}") from None
        return cls(gate_type, target, control)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'type': self.type.value, 'target': self.target_qubit}
        if self.control_qubit is not None:
            data['control'] = self.control_qubit
        return data

    @property
    def qubits(self) -> Tuple[int, ...]:
        """Qubits touched by the gate, control first."""
        if self.control_qubit is None:
            return (self.target_qubit,)
        return (self.control_qubit, self.target_qubit)

    def __repr__(self) -> str:
        if self.control_qubit is None:
            return f"Gate({self.type.value}, target={self.target_qubit})"
        return (f"Gate({self.type.value}, control={self.control_qubit}, "
                f"target={self.target_qubit})")


# =============================================================================
# PER-GATE ARMS
# =============================================================================
# Each arm maps (basis index, amplitude at that index, gate) to the list of
# (destination index, contribution) pairs.

Contribution = Tuple[int, Amplitude]


def _x(index: int, amp: Amplitude, gate: Gate) -> List[Contribution]:
    return [(index ^ (1 << gate.target_qubit), amp)]


def _h(index: int, amp: Amplitude, gate: Gate) -> List[Contribution]:
    # |0⟩ -> (|0⟩ + |1⟩)/√2, |1⟩ -> (|0⟩ - |1⟩)/√2
    flipped = index ^ (1 << gate.target_qubit)
    half = amp.scaled(SQRT1_2)
    if (index >> gate.target_qubit) & 1:
        return [(flipped, half), (index, half.negated())]
    return [(index, half), (flipped, half)]


def _z(index: int, amp: Amplitude, gate: Gate) -> List[Contribution]:
    if (index >> gate.target_qubit) & 1:
        return [(index, amp.negated())]
    return [(index, amp)]


def _cnot(index: int, amp: Amplitude, gate: Gate) -> List[Contribution]:
    if (index >> gate.control_qubit) & 1:
        return [(index ^ (1 << gate.target_qubit), amp)]
    return [(index, amp)]


def _s(index: int, amp: Amplitude, gate: Gate) -> List[Contribution]:
    if (index >> gate.target_qubit) & 1:
        return [(index, Amplitude(-amp.imaginary, amp.real))]
    return [(index, amp)]


def _t(index: int, amp: Amplitude, gate: Gate) -> List[Contribution]:
    if (index >> gate.target_qubit) & 1:
        return [(index, amp.rotated(T_PHASE))]
    return [(index, amp)]


GATE_ARMS: Dict[GateType, Callable[[int, Amplitude, Gate], List[Contribution]]] = {
    GateType.X: _x,
    GateType.H: _h,
    GateType.Z: _z,
    GateType.CNOT: _cnot,
    GateType.S: _s,
    GateType.T: _t,
}


def gate_contributions(index: int, amplitude: Amplitude, gate: Gate) -> List[Contribution]:
    """Where the amplitude at ``index`` ends up after ``gate``."""
    return GATE_ARMS[gate.type](index, amplitude, gate)


# =============================================================================
# APPLICATOR
# =============================================================================

def check_gate_fits(gate: Gate, num_qubits: int) -> None:
    """Raise InvalidGateError if the gate addresses a qubit >= num_qubits."""
    for q in gate.qubits:
        if q >= num_qubits:
            raise InvalidGateError(
                f"Qubit {q} is out of range. "
                f"Circuit has {num_qubits} qubits (0 to {num_qubits - 1})."
            )


def apply_gate(state: StateVector, gate: Gate) -> StateVector:
    """
    Apply one gate, returning a new state vector.

    Contributions are summed rather than assigned, so two source indices
    landing on the same destination would add correctly.
    """
    check_gate_fits(gate, state.num_qubits)
    arm = GATE_ARMS[gate.type]

    real = [0.0] * state.dim
    imag = [0.0] * state.dim
    for i, amp in enumerate(state):
        for dest, contribution in arm(i, amp, gate):
            real[dest] += contribution.real
            imag[dest] += contribution.imaginary

    return StateVector(Amplitude(r, m) for r, m in zip(real, imag))


def apply_gates(state: StateVector, gates: Iterable[Gate]) -> StateVector:
    """Fold ``apply_gate`` over a gate sequence."""
    for gate in gates:
        state = apply_gate(state, gate)
    return state
