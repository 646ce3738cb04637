"""Tests for the circuit evolver."""

import math

import numpy as np
import pytest

from qubit_quest import (
    Circuit, EngineConfig, Gate, GateNotFoundError, GateType, InvalidGateError,
    PerformanceMonitor, StateError, StateVector,
)

R2 = 1 / math.sqrt(2)


# ---------------------------------------------------------------------------
# Basic construction
# ---------------------------------------------------------------------------

def test_empty_circuit():
    qc = Circuit(3)
    assert qc.num_qubits == 3
    assert len(qc) == 0
    assert qc.depth() == 0
    assert qc.next_position == 0
    assert qc.state == StateVector.initial(3)


def test_invalid_qubit_count():
    with pytest.raises(StateError):
        Circuit(0)


def test_qubit_limit_from_config():
    with pytest.raises(StateError):
        Circuit(4, config=EngineConfig(max_qubits=3))


def test_initial_state_size_must_match():
    with pytest.raises(StateError):
        Circuit(2, initial_state=StateVector.initial(1))


def test_custom_initial_state():
    plus = StateVector.from_amplitudes([R2, R2])
    qc = Circuit(1, initial_state=plus)
    assert qc.state == plus
    qc.z(0)
    np.testing.assert_allclose(qc.state.to_numpy(), [R2, -R2], atol=1e-12)


def test_method_chaining():
    qc = Circuit(2)
    result = qc.h(0).cx(0, 1)
    assert result is qc
    assert len(qc) == 2
    np.testing.assert_allclose(qc.state.to_numpy(), [R2, 0, 0, R2], atol=1e-12)


# ---------------------------------------------------------------------------
# Adding gates
# ---------------------------------------------------------------------------

def test_add_gate_assigns_increasing_positions():
    qc = Circuit(2)
    first = qc.add_gate(Gate.h(0))
    second = qc.add_gate(Gate.x(1))
    assert (first.position, second.position) == (0, 1)
    assert first.id != second.id
    assert qc.next_position == 2


def test_add_gate_after_highest_position():
    qc = Circuit(1)
    qc.place(Gate.x(0), 5)
    assert qc.add_gate(Gate.h(0)).position == 6


def test_add_gate_out_of_range():
    qc = Circuit(2)
    with pytest.raises(InvalidGateError):
        qc.add_gate(Gate.h(2))
    with pytest.raises(InvalidGateError):
        qc.cx(0, 3)
    assert len(qc) == 0


def test_incremental_matches_replay():
    qc = Circuit(3).h(0).t(0).cx(0, 1).s(1).h(2).cx(2, 0)
    incremental = qc.state
    assert qc.replay() == incremental


def test_all_gate_methods():
    qc = Circuit(2)
    qc.x(0).h(0).z(0).s(0).t(0).cx(0, 1).cnot(1, 0)
    assert len(qc) == 7
    assert qc.count(GateType.CNOT) == 2
    assert qc.state.is_normalized()


# ---------------------------------------------------------------------------
# Removing gates
# ---------------------------------------------------------------------------

def test_remove_matches_fresh_circuit():
    qc = Circuit(2)
    qc.add_gate(Gate.h(0))
    g2 = qc.add_gate(Gate.cnot(0, 1))
    qc.remove_gate(g2.id)

    fresh = Circuit(2).h(0)
    assert qc.state == fresh.state


def test_remove_first_gate_replays_rest():
    qc = Circuit(1)
    g1 = qc.add_gate(Gate.x(0))
    qc.add_gate(Gate.h(0))
    removed = qc.remove_gate(g1.id)

    assert removed.gate == Gate.x(0)
    assert [p.gate for p in qc.gates] == [Gate.h(0)]
    np.testing.assert_allclose(qc.state.to_numpy(), [R2, R2], atol=1e-12)


def test_remove_replays_from_puzzle_start():
    plus = StateVector.from_amplitudes([R2, R2])
    qc = Circuit(1, initial_state=plus)
    qc.add_gate(Gate.z(0))
    g = qc.add_gate(Gate.h(0))
    qc.remove_gate(g.id)
    np.testing.assert_allclose(qc.state.to_numpy(), [R2, -R2], atol=1e-12)


def test_remove_unknown_id():
    qc = Circuit(1).x(0)
    with pytest.raises(GateNotFoundError):
        qc.remove_gate('gate-99')
    with pytest.raises(KeyError):
        qc.remove_gate('nope')


def test_ids_not_reused_after_removal():
    qc = Circuit(1)
    g = qc.add_gate(Gate.x(0))
    qc.remove_gate(g.id)
    assert qc.add_gate(Gate.x(0)).id != g.id


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------

def test_gates_sorted_by_position():
    qc = Circuit(1)
    qc.place(Gate.h(0), 3)
    qc.place(Gate.x(0), 1)
    assert [p.position for p in qc.gates] == [1, 3]
    # X then H from |0⟩ gives |-⟩
    np.testing.assert_allclose(qc.state.to_numpy(), [R2, -R2], atol=1e-12)


def test_equal_positions_keep_insertion_order():
    qc = Circuit(1)
    first = qc.place(Gate.x(0), 2)
    second = qc.place(Gate.h(0), 2)
    assert [p.id for p in qc.gates] == [first.id, second.id]
    np.testing.assert_allclose(qc.state.to_numpy(), [R2, -R2], atol=1e-12)


def test_place_negative_position():
    with pytest.raises(ValueError):
        Circuit(1).place(Gate.x(0), -1)


# ---------------------------------------------------------------------------
# Clear, steps, callbacks
# ---------------------------------------------------------------------------

def test_clear_resets_to_initial_state():
    plus = StateVector.from_amplitudes([R2, R2])
    qc = Circuit(1, initial_state=plus).z(0).h(0)
    qc.clear()
    assert len(qc) == 0
    assert qc.state == plus
    assert qc.next_position == 0


def test_steps():
    qc = Circuit(2).h(0).cx(0, 1)
    steps = qc.steps()
    assert len(steps) == 2
    placed, state = steps[0]
    assert placed.gate == Gate.h(0)
    np.testing.assert_allclose(state.to_numpy(), [R2, R2, 0, 0], atol=1e-12)
    assert steps[-1][1] == qc.state


def test_on_change_called_for_every_mutation():
    seen = []
    qc = Circuit(1, on_change=seen.append)
    g = qc.add_gate(Gate.x(0))
    qc.remove_gate(g.id)
    qc.place(Gate.h(0), 0)
    qc.clear()
    assert len(seen) == 4
    assert seen[0] == StateVector.from_amplitudes([0, 1])
    assert seen[-1] == StateVector.initial(1)


def test_depth():
    qc = Circuit(3).h(0).h(1).cx(0, 1).x(2)
    assert qc.depth() == 2


def test_iteration_in_column_order():
    qc = Circuit(1)
    qc.place(Gate.h(0), 4)
    qc.place(Gate.x(0), 0)
    assert [p.gate.type for p in qc] == [GateType.X, GateType.H]


def test_replay_records_metric():
    qc = Circuit(1).x(0)
    qc.replay()
    assert len(qc.monitor.get_metrics('circuit-simulation')) == 1


def test_empty_monitor_is_shared():
    monitor = PerformanceMonitor()
    qc = Circuit(1, monitor=monitor)
    assert qc.monitor is monitor
    qc.x(0)
    assert len(monitor.get_metrics('state-update')) == 1


def test_unnormalized_initial_state_warns(caplog):
    state = StateVector.from_amplitudes([1, 1])
    with caplog.at_level('WARNING', logger='qubit_quest'):
        Circuit(1, initial_state=state)
    assert 'not normalized' in caplog.text


def test_normalization_tolerance_from_config(caplog):
    state = StateVector.from_amplitudes([1.001, 0])
    with caplog.at_level('WARNING', logger='qubit_quest'):
        Circuit(1, initial_state=state, config=EngineConfig(normalization_tolerance=0.01))
    assert caplog.text == ''
