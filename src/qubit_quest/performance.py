"""
Performance monitoring.

Times named operations, keeps a bounded history of the most recent
measurements and logs a warning when an operation exceeds its threshold.
Warnings are advisory: they never alter results or block the caller.

Usage:
    monitor = PerformanceMonitor()
    state = monitor.measure('circuit-simulation', circuit.replay)

    with monitor.timed('state-update'):
        ...
"""
from __future__ import annotations

import time
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Deque, Dict, Iterator, List, Optional, TypeVar

from .config import DEFAULT_CONFIG, EngineConfig
from .logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar('T')

CIRCUIT_SIMULATION = 'circuit-simulation'

# Milliseconds
DEFAULT_THRESHOLDS: Dict[str, float] = {
    'persistence': 50.0,
    CIRCUIT_SIMULATION: 100.0,
    'state-update': 10.0,
}


@dataclass(frozen=True)
class PerformanceMetric:
    """One timed operation."""
    name: str
    duration_ms: float
    timestamp: float


class PerformanceMonitor:
    """
    Records operation timings against named thresholds.

    The circuit budget is a separate, gate-count aware rule: a replay is
    only flagged when it covers at least ``budget_min_gates`` gates and took
    longer than ``simulation_budget_ms``.
    """

    def __init__(self, config: Optional[EngineConfig] = None,
                 thresholds: Optional[Dict[str, float]] = None):
        self.config = config or DEFAULT_CONFIG
        self.thresholds = dict(DEFAULT_THRESHOLDS)
        self.thresholds[CIRCUIT_SIMULATION] = self.config.simulation_budget_ms
        if thresholds:
            self.thresholds.update(thresholds)
        self._metrics: Deque[PerformanceMetric] = deque(maxlen=self.config.max_metrics)

    # =========================================================================
    # MEASURING
    # =========================================================================

    def measure(self, name: str, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Run ``fn``, record its duration under ``name`` and return its result."""
        start = time.perf_counter()
        result = fn(*args, **kwargs)
        self.record(name, (time.perf_counter() - start) * 1000.0)
        return result

    def start(self, name: str) -> Callable[[], float]:
        """Start a manual measurement. Call the returned function to stop it."""
        start = time.perf_counter()

        def stop() -> float:
            duration = (time.perf_counter() - start) * 1000.0
            self.record(name, duration)
            return duration

        return stop

    @contextmanager
    def timed(self, name: str) -> Iterator[None]:
        stop = self.start(name)
        try:
            yield
        finally:
            stop()

    def record(self, name: str, duration_ms: float) -> PerformanceMetric:
        metric = PerformanceMetric(name, duration_ms, time.time())
        self._metrics.append(metric)
        self._check_threshold(name, duration_ms)
        return metric

    def _check_threshold(self, name: str, duration_ms: float) -> None:
        # Replays are judged by check_circuit_budget, which knows the gate count
        if name == CIRCUIT_SIMULATION:
            return
        threshold = self.thresholds.get(name)
        if threshold and duration_ms > threshold:
            logger.warning(
                "Performance: %s took %.2fms (threshold: %.2fms)",
                name, duration_ms, threshold,
            )

    def check_circuit_budget(self, num_gates: int, duration_ms: float) -> bool:
        """
        Apply the replay budget rule.

        Returns True (and logs a warning) when ``num_gates`` is at least
        ``budget_min_gates`` and ``duration_ms`` exceeds the budget.
        """
        budget = self.thresholds[CIRCUIT_SIMULATION]
        if num_gates >= self.config.budget_min_gates and duration_ms > budget:
            logger.warning(
                "Circuit simulation took %.2fms for %d gates (target: <%.0fms for %d gates)",
                duration_ms, num_gates, budget, self.config.budget_min_gates,
            )
            return True
        return False

    # =========================================================================
    # REPORTING
    # =========================================================================

    def get_metrics(self, name: str) -> List[PerformanceMetric]:
        return [m for m in self._metrics if m.name == name]

    def get_average(self, name: str) -> float:
        """Mean duration in ms, 0.0 if nothing was recorded."""
        durations = [m.duration_ms for m in self._metrics if m.name == name]
        if not durations:
            return 0.0
        return sum(durations) / len(durations)

    def get_summary(self) -> Dict[str, Dict[str, float]]:
        """``{name: {count, avg, max}}`` over the retained metrics."""
        summary: Dict[str, Dict[str, float]] = {}
        for metric in self._metrics:
            entry = summary.setdefault(metric.name, {'count': 0, 'avg': 0.0, 'max': 0.0})
            entry['count'] += 1
            entry['max'] = max(entry['max'], metric.duration_ms)
        for name, entry in summary.items():
            entry['avg'] = self.get_average(name)
        return summary

    def clear(self) -> None:
        self._metrics.clear()

    def log_summary(self) -> None:
        for name, entry in sorted(self.get_summary().items()):
            logger.info(
                "%-20s count=%d avg=%.2fms max=%.2fms",
                name, entry['count'], entry['avg'], entry['max'],
            )

    def __len__(self) -> int:
        return len(self._metrics)

    def __repr__(self) -> str:
        return f"PerformanceMonitor(metrics={len(self._metrics)})"
