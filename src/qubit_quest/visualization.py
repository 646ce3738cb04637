"""
Circuit and state visualization.

Features:
- ASCII circuit diagrams
- State vector bar charts
- Per-qubit Bloch sphere coordinates (for the dashboard's renderer)
"""
from __future__ import annotations

from typing import Dict, List

import numpy as np

from .core.circuit import Circuit
from .core.gates import GateType
from .core.statevector import StateVector


class CircuitDrawer:
    """
    Draw a circuit as ASCII art, one column per placed gate.

    Example output:
        q0: ─[H]───●────
        q1: ───────⊕────
    """

    def __init__(self, circuit: Circuit):
        self.circuit = circuit

    def _columns(self) -> List[List[str]]:
        n = self.circuit.num_qubits
        columns = []
        for placed in self.circuit.gates:
            gate = placed.gate
            if gate.type is GateType.CNOT:
                lo, hi = sorted((gate.control_qubit, gate.target_qubit))
                col = ['│' if lo < q < hi else '─' for q in range(n)]
                col[gate.control_qubit] = '●'
                col[gate.target_qubit] = '⊕'
            else:
                col = ['─'] * n
                col[gate.target_qubit] = f'[{gate.type.value}]'
            columns.append(col)
        return columns

    def draw(self) -> str:
        """Generate ASCII circuit diagram."""
        columns = self._columns()
        if not columns:
            return "Empty circuit"

        lines = []
        for q in range(self.circuit.num_qubits):
            line = f'q{q}: '
            for col in columns:
                cell = col[q]
                if cell == '─':
                    line += '─────'
                elif cell == '│':
                    line += '──┼──'
                elif cell.startswith('['):
                    line += cell.center(5, '─')
                else:
                    line += f'──{cell}──'
            line += '──'
            lines.append(line)

        return '\n'.join(lines)


class StateVisualizer:
    """Render state vectors as text."""

    @staticmethod
    def amplitudes_ascii(state: StateVector, threshold: float = 1e-10) -> str:
        """
        Amplitude list with a probability bar per basis state.

        Basis states whose probability is below ``threshold`` are hidden.
        """
        lines = ["State Vector:", "─" * 60]
        for i, amp in enumerate(state):
            prob = amp.probability
            if prob < threshold:
                continue
            bar = '█' * int(prob * 30)
            sign = '-' if amp.imaginary < 0 else '+'
            lines.append(
                f"|{state.basis_label(i)}⟩: {amp.real: .4f} {sign} {abs(amp.imaginary):.4f}i"
                f"  {bar:30s} ({prob * 100:5.1f}%)"
            )
        return '\n'.join(lines)

    @staticmethod
    def probabilities(state: StateVector, threshold: float = 1e-10) -> Dict[str, float]:
        """``{bitstring: probability}`` for the non-negligible basis states."""
        return {
            state.basis_label(i): float(p)
            for i, p in enumerate(state.probabilities())
            if p > threshold
        }


def bloch_coordinates(state: StateVector, qubit: int) -> Dict[str, float]:
    """
    Bloch vector of one qubit, from its reduced density matrix.

    Returns {"x", "y", "z", "purity"}. Purity drops below 1 when the
    qubit is entangled with the others (0.5 for a Bell pair).
    """
    n = state.num_qubits
    psi = state.to_numpy().reshape([2] * n)
    # Axis 0 of the reshaped tensor is the most significant bit
    m = np.moveaxis(psi, n - 1 - qubit, 0).reshape(2, -1)
    rho = m @ m.conj().T

    x = float(2 * rho[0, 1].real)
    y = float(2 * rho[1, 0].imag)
    z = float((rho[0, 0] - rho[1, 1]).real)
    purity = float(np.trace(rho @ rho).real)
    return {"x": x, "y": y, "z": z, "purity": purity}


# Convenience functions
def draw_circuit(circuit: Circuit) -> str:
    """Draw a circuit as ASCII."""
    return CircuitDrawer(circuit).draw()


def show_state(state: StateVector) -> str:
    """Show state vector as ASCII bar chart."""
    return StateVisualizer.amplitudes_ascii(state)
