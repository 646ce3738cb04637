"""
State vector and complex amplitudes.

A state of n qubits is an ordered list of 2^n amplitudes. Bit i of a basis
index holds the value of qubit i, so index 0 is |00...0⟩ and, for two
qubits, index 2 is qubit 1 set (written |10⟩).

Both types are immutable: gate application always builds a new vector.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Sequence, Tuple, Union

import numpy as np

from ..errors import StateError


@dataclass(frozen=True)
class Amplitude:
    """Complex coefficient of one basis state."""
    real: float = 0.0
    imaginary: float = 0.0

    @classmethod
    def from_complex(cls, value: complex) -> 'Amplitude':
        value = complex(value)
        return cls(value.real, value.imag)

    @classmethod
    def from_pair(cls, pair: Sequence[float]) -> 'Amplitude':
        """Build from ``[real, imaginary]`` (JSON form)."""
        if len(pair) != 2:
            raise StateError(f"Amplitude needs [real, imaginary], got {list(pair)!r}")
        return cls(float(pair[0]), float(pair[1]))

    def to_complex(self) -> complex:
        return complex(self.real, self.imaginary)

    def to_pair(self) -> List[float]:
        return [self.real, self.imaginary]

    @property
    def probability(self) -> float:
        """Squared magnitude: real² + imag²."""
        return self.real * self.real + self.imaginary * self.imaginary

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.probability)

    def scaled(self, factor: float) -> 'Amplitude':
        return Amplitude(self.real * factor, self.imaginary * factor)

    def negated(self) -> 'Amplitude':
        return Amplitude(-self.real, -self.imaginary)

    def rotated(self, theta: float) -> 'Amplitude':
        """Multiply by e^(iθ)."""
        c, s = math.cos(theta), math.sin(theta)
        return Amplitude(
            self.real * c - self.imaginary * s,
            self.real * s + self.imaginary * c,
        )

    def distance(self, other: 'Amplitude') -> float:
        """Euclidean distance in the complex plane."""
        return math.hypot(self.real - other.real, self.imaginary - other.imaginary)

    def __repr__(self) -> str:
        return f"Amplitude({self.real:.4f}, {self.imaginary:.4f})"


AmplitudeLike = Union[Amplitude, complex, float, int, Sequence[float]]


def _as_amplitude(value: AmplitudeLike) -> Amplitude:
    if isinstance(value, Amplitude):
        return value
    if isinstance(value, (complex, float, int, np.number)):
        return Amplitude.from_complex(complex(value))
    return Amplitude.from_pair(value)


class StateVector:
    """
    Immutable amplitude vector over all 2^n basis states.

    Memory usage grows as 2^n, so the engine only targets a handful of
    qubits (puzzles use 1-3).

    Example:
        >>> sv = StateVector.initial(2)
        >>> sv[0]
        Amplitude(1.0000, 0.0000)
        >>> sv.basis_label(2)
        '10'
    """

    __slots__ = ('_amplitudes', '_num_qubits')

    def __init__(self, amplitudes: Iterable[AmplitudeLike]):
        amps = tuple(_as_amplitude(a) for a in amplitudes)
        dim = len(amps)
        if dim < 2 or dim & (dim - 1):
            raise StateError(
                f"State vector length must be a power of two >= 2, got {dim}"
            )
        self._amplitudes: Tuple[Amplitude, ...] = amps
        self._num_qubits = dim.bit_length() - 1

    # =========================================================================
    # CONSTRUCTION
    # =========================================================================

    @classmethod
    def initial(cls, num_qubits: int) -> 'StateVector':
        """|00...0⟩ for ``num_qubits`` qubits."""
        if num_qubits < 1:
            raise StateError(f"Need at least one qubit, got {num_qubits}")
        dim = 2 ** num_qubits
        return cls(Amplitude(1.0, 0.0) if i == 0 else Amplitude() for i in range(dim))

    @classmethod
    def from_amplitudes(cls, amplitudes: Iterable[AmplitudeLike]) -> 'StateVector':
        """Copy amplitudes as given. No re-normalisation is done."""
        return cls(amplitudes)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Sequence[float]]) -> 'StateVector':
        return cls(Amplitude.from_pair(p) for p in pairs)

    @classmethod
    def from_numpy(cls, vector: np.ndarray) -> 'StateVector':
        return cls(Amplitude.from_complex(z) for z in np.asarray(vector).ravel())

    # =========================================================================
    # ACCESS
    # =========================================================================

    @property
    def num_qubits(self) -> int:
        return self._num_qubits

    @property
    def dim(self) -> int:
        return len(self._amplitudes)

    @property
    def amplitudes(self) -> Tuple[Amplitude, ...]:
        return self._amplitudes

    def __len__(self) -> int:
        return len(self._amplitudes)

    def __getitem__(self, index: int) -> Amplitude:
        return self._amplitudes[index]

    def __iter__(self) -> Iterator[Amplitude]:
        return iter(self._amplitudes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StateVector):
            return NotImplemented
        return self._amplitudes == other._amplitudes

    def __hash__(self) -> int:
        return hash(self._amplitudes)

    def basis_label(self, index: int) -> str:
        """Bitstring for a basis index, qubit 0 rightmost."""
        return format(index, f'0{self._num_qubits}b')

    # =========================================================================
    # MEASURES
    # =========================================================================

    def norm(self) -> float:
        """Sum of squared magnitudes (1 for a normalised state)."""
        return float(sum(a.probability for a in self._amplitudes))

    def is_normalized(self, tol: float = 1e-6) -> bool:
        return abs(self.norm() - 1.0) <= tol

    def probabilities(self) -> np.ndarray:
        """Measurement probability of each basis state."""
        return np.abs(self.to_numpy()) ** 2

    def to_numpy(self) -> np.ndarray:
        return np.array([a.to_complex() for a in self._amplitudes], dtype=np.complex128)

    def to_pairs(self) -> List[List[float]]:
        return [a.to_pair() for a in self._amplitudes]

    def __repr__(self) -> str:
        return f"StateVector(qubits={self._num_qubits}, dim={self.dim})"
