"""
Gate placement protocol.

Turns the UI's "pick a gate, then click a qubit" interaction into circuit
mutations. Single-qubit gates are placed on the first qubit clicked. A CNOT
takes two clicks: the first picks the control, the second the target.
Clicking the control again cancels it.

    IDLE --select_gate--> GATE_TYPE_SELECTED
    GATE_TYPE_SELECTED --select_qubit (X/H/Z/S/T)--> IDLE        (gate added)
    GATE_TYPE_SELECTED --select_qubit (CNOT)--> CONTROL_QUBIT_PENDING
    CONTROL_QUBIT_PENDING --select_qubit (other)--> IDLE         (gate added)
    CONTROL_QUBIT_PENDING --select_qubit (same)--> GATE_TYPE_SELECTED
"""
from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from ..logging_config import get_logger
from .circuit import Circuit, PlacedGate
from .gates import Gate, GateType, check_gate_fits

logger = get_logger(__name__)


class PlacementState(Enum):
    IDLE = 'idle'
    GATE_TYPE_SELECTED = 'gate_type_selected'
    CONTROL_QUBIT_PENDING = 'control_qubit_pending'


class PlacementController:
    """
    Drives gate placement on one circuit.

    Example:
        >>> qc = Circuit(2)
        >>> ctl = PlacementController(qc)
        >>> ctl.select_gate('CNOT')
        >>> ctl.select_qubit(0)          # control
        >>> ctl.select_qubit(1).gate     # target, gate placed
        Gate(CNOT, control=0, target=1)
    """

    def __init__(self, circuit: Circuit):
        self.circuit = circuit
        self._state = PlacementState.IDLE
        self._selected: Optional[GateType] = None
        self._control: Optional[int] = None

    @property
    def state(self) -> PlacementState:
        return self._state

    @property
    def selected_gate(self) -> Optional[GateType]:
        return self._selected

    @property
    def pending_control(self) -> Optional[int]:
        return self._control

    def select_gate(self, gate_type: Union[GateType, str]) -> None:
        """Pick a gate type from the palette, dropping any pending control."""
        self._selected = GateType.parse(gate_type)
        self._control = None
        self._state = PlacementState.GATE_TYPE_SELECTED

    def select_qubit(self, qubit: int) -> Optional[PlacedGate]:
        """
        Handle a click on a qubit wire.

        Returns the placed gate when the click completes one, else None.
        """
        if self._state is PlacementState.IDLE:
            return None

        if self._state is PlacementState.GATE_TYPE_SELECTED:
            if self._selected is GateType.CNOT:
                check_gate_fits(Gate.x(qubit), self.circuit.num_qubits)
                self._control = qubit
                self._state = PlacementState.CONTROL_QUBIT_PENDING
                return None
            return self._place(Gate(self._selected, qubit))

        # CONTROL_QUBIT_PENDING
        if qubit == self._control:
            logger.debug("Cancelled pending control on qubit %d", qubit)
            self._control = None
            self._state = PlacementState.GATE_TYPE_SELECTED
            return None
        return self._place(Gate.cnot(self._control, qubit))

    def cancel(self) -> None:
        """Abandon the current selection."""
        self._selected = None
        self._control = None
        self._state = PlacementState.IDLE

    def _place(self, gate: Gate) -> PlacedGate:
        placed = self.circuit.add_gate(gate)
        self.cancel()
        return placed

    def __repr__(self) -> str:
        return (f"PlacementController(state={self._state.value}, "
                f"gate={self._selected.value if self._selected else None}, "
                f"control={self._control})")
