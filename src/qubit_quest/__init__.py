"""
qubit-quest: the circuit engine behind a quantum-computing puzzle game.

Features:
- Six-gate simulator (X, H, Z, S, T, CNOT) over small state vectors
- Fluent API: Circuit(2).h(0).cx(0, 1).state
- Two-click CNOT placement for circuit-builder UIs
- Puzzle catalog with tolerance-based solution checking
- Advisory performance monitoring of circuit replays

Quick Start:
    >>> from qubit_quest import Circuit, states_match, get_puzzle
    >>> qc = Circuit(2).h(0).cx(0, 1)
    >>> states_match(qc.state, get_puzzle('puzzle-4-bell-state').target_state)
    True

Puzzles:
    >>> from qubit_quest import PuzzleSession
    >>> session = PuzzleSession(get_puzzle('puzzle-2-superposition'))
    >>> _ = session.circuit.h(0)
    >>> session.check_solution().valid
    True
"""
__version__ = "1.0.0"

# Core components
from .core import (
    Amplitude,
    StateVector,
    Gate,
    GateType,
    apply_gate,
    apply_gates,
    Circuit,
    PlacedGate,
    PlacementController,
    PlacementState,
)

from .config import EngineConfig, DEFAULT_CONFIG
from .errors import (
    QubitQuestError,
    InvalidGateError,
    StateError,
    GateNotFoundError,
    PuzzleNotFoundError,
)
from .performance import PerformanceMonitor
from .validation import ValidationResult, states_match, validate
from .puzzles import (
    Puzzle,
    PuzzleSession,
    CIRCUIT_PUZZLES,
    get_puzzle,
    get_puzzles_by_qubits,
)
from .visualization import draw_circuit, show_state, bloch_coordinates
from .logging_config import setup_logging, get_logger

__all__ = [
    # Core
    'Amplitude',
    'StateVector',
    'Gate',
    'GateType',
    'apply_gate',
    'apply_gates',
    'Circuit',
    'PlacedGate',
    'PlacementController',
    'PlacementState',
    # Validation and puzzles
    'ValidationResult',
    'states_match',
    'validate',
    'Puzzle',
    'PuzzleSession',
    'CIRCUIT_PUZZLES',
    'get_puzzle',
    'get_puzzles_by_qubits',
    # Monitoring, config, errors
    'PerformanceMonitor',
    'EngineConfig',
    'DEFAULT_CONFIG',
    'QubitQuestError',
    'InvalidGateError',
    'StateError',
    'GateNotFoundError',
    'PuzzleNotFoundError',
    'setup_logging',
    'get_logger',
    # Visualization
    'draw_circuit',
    'show_state',
    'bloch_coordinates',
]
