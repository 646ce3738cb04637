"""Tests for the performance monitor."""

import logging

import pytest

from qubit_quest import Circuit, EngineConfig, Gate, PerformanceMonitor
from qubit_quest.performance import PerformanceMetric


@pytest.fixture
def monitor():
    return PerformanceMonitor()


# ---------------------------------------------------------------------------
# Measuring
# ---------------------------------------------------------------------------

def test_measure_returns_result_and_records(monitor):
    assert monitor.measure('work', sum, [1, 2, 3]) == 6
    [metric] = monitor.get_metrics('work')
    assert isinstance(metric, PerformanceMetric)
    assert metric.duration_ms >= 0.0


def test_start_stop(monitor):
    stop = monitor.start('manual')
    duration = stop()
    assert duration >= 0.0
    assert len(monitor.get_metrics('manual')) == 1


def test_timed_context_records_on_error(monitor):
    with pytest.raises(RuntimeError):
        with monitor.timed('failing'):
            raise RuntimeError("boom")
    assert len(monitor.get_metrics('failing')) == 1


def test_history_is_bounded():
    monitor = PerformanceMonitor(EngineConfig(max_metrics=5))
    for i in range(8):
        monitor.record('op', float(i))
    assert len(monitor) == 5
    assert [m.duration_ms for m in monitor.get_metrics('op')] == [3.0, 4.0, 5.0, 6.0, 7.0]


# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------

def test_threshold_warning(monitor, caplog):
    with caplog.at_level(logging.WARNING, logger='qubit_quest'):
        monitor.record('state-update', 25.0)
    assert 'state-update took 25.00ms' in caplog.text


def test_under_threshold_is_silent(monitor, caplog):
    with caplog.at_level(logging.WARNING, logger='qubit_quest'):
        monitor.record('state-update', 2.0)
        monitor.record('unknown-op', 5000.0)
    assert caplog.text == ''


def test_custom_thresholds(caplog):
    monitor = PerformanceMonitor(thresholds={'render': 16.67})
    with caplog.at_level(logging.WARNING, logger='qubit_quest'):
        monitor.record('render', 20.0)
    assert 'render' in caplog.text


# ---------------------------------------------------------------------------
# Circuit budget
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("num_gates,duration,expected", [
    (10, 150.0, True),
    (10, 100.0, False),
    (9, 500.0, False),
    (25, 100.1, True),
    (0, 1000.0, False),
])
def test_circuit_budget_rule(monitor, num_gates, duration, expected):
    assert monitor.check_circuit_budget(num_gates, duration) is expected


def test_circuit_budget_logs_warning(monitor, caplog):
    with caplog.at_level(logging.WARNING, logger='qubit_quest'):
        monitor.check_circuit_budget(12, 250.0)
    assert 'for 12 gates' in caplog.text


def test_simulation_metric_not_judged_by_plain_threshold(monitor, caplog):
    # A short circuit may be slow without being flagged
    with caplog.at_level(logging.WARNING, logger='qubit_quest'):
        monitor.record('circuit-simulation', 500.0)
    assert caplog.text == ''


def test_slow_replay_warns_but_keeps_result(caplog):
    config = EngineConfig(simulation_budget_ms=0.0)
    qc = Circuit(1, config=config)
    for _ in range(10):
        qc.add_gate(Gate.x(0))

    with caplog.at_level(logging.WARNING, logger='qubit_quest'):
        state = qc.replay()

    assert 'Circuit simulation took' in caplog.text
    assert state == Circuit(1).state


def test_short_replay_never_warns(caplog):
    qc = Circuit(1, config=EngineConfig(simulation_budget_ms=0.0))
    for _ in range(9):
        qc.add_gate(Gate.x(0))
    with caplog.at_level(logging.WARNING, logger='qubit_quest'):
        qc.replay()
    assert 'Circuit simulation took' not in caplog.text


# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------

def test_summary(monitor):
    monitor.record('a', 2.0)
    monitor.record('a', 4.0)
    monitor.record('b', 1.0)
    summary = monitor.get_summary()
    assert summary['a'] == {'count': 2, 'avg': 3.0, 'max': 4.0}
    assert summary['b']['count'] == 1


def test_average_of_unknown_metric(monitor):
    assert monitor.get_average('missing') == 0.0


def test_clear(monitor):
    monitor.record('a', 1.0)
    monitor.clear()
    assert len(monitor) == 0
    assert monitor.get_summary() == {}


def test_log_summary(monitor, caplog):
    monitor.record('a', 1.0)
    with caplog.at_level(logging.INFO, logger='qubit_quest'):
        monitor.log_summary()
    assert 'count=1' in caplog.text
