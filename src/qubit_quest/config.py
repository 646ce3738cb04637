"""
Engine configuration.

All numeric knobs of the simulator live here so the dashboard, the CLI and
library callers share one source of defaults.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional

ENV_PREFIX = "QUBIT_QUEST_"


@dataclass(frozen=True)
class EngineConfig:
    """Configuration for circuit simulation, validation and monitoring."""

    # Validation
    validation_tolerance: float = 0.001
    normalization_tolerance: float = 1e-6

    # Performance budget: warn when a replay of >= budget_min_gates gates
    # takes longer than simulation_budget_ms
    simulation_budget_ms: float = 100.0
    budget_min_gates: int = 10
    max_metrics: int = 100

    # State vectors hold 2^n amplitudes
    max_qubits: int = 10

    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """
        Build a config from ``QUBIT_QUEST_*`` environment variables.

        Unset variables keep their defaults, e.g. ``QUBIT_QUEST_MAX_QUBITS=4``.
        """
        if environ is None:
            environ = os.environ

        overrides = {}
        for f in fields(cls):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            default = getattr(cls, f.name)
            try:
                overrides[f.name] = type(default)(raw)
            except ValueError:
                raise ValueError(
                    f"Invalid value for {ENV_PREFIX}{f.name.upper()}: {raw!r}"
                ) from None
        return cls(**overrides)


# Default configuration instance
DEFAULT_CONFIG = EngineConfig()
