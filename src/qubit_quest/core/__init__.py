"""Core simulation components."""
from .statevector import Amplitude, StateVector
from .gates import Gate, GateType, apply_gate, apply_gates, gate_contributions
from .circuit import Circuit, PlacedGate
from .placement import PlacementController, PlacementState

__all__ = [
    'Amplitude',
    'StateVector',
    'Gate',
    'GateType',
    'apply_gate',
    'apply_gates',
    'gate_contributions',
    'Circuit',
    'PlacedGate',
    'PlacementController',
    'PlacementState',
]
