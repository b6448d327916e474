"""
Key performance indicators of a simulation.

A KPI holds one value in deterministic mode and a histogram of the values
of every run in random mode. In random mode the KPI value is the value
reached or exceeded with probability ``proba_objective``, i.e. the
``(1 - proba_objective)`` percentile of the samples.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
import pandas as pd

from patrimoine.core.kinds import KpiKind, SimulationMode

DEFAULT_OBJECTIVE = 200_000.0
DEFAULT_PROBA_OBJECTIVE = 0.98


@dataclass
class Kpi:
    """
    Attributes:
        name: Indicator
        objective: Value to reach (euros)
        proba_objective: Probability with which the objective must be reached
        deterministic_value: Value of the last deterministic run (None before)
        samples: Values of the random runs
    """

    name: KpiKind
    objective: float = DEFAULT_OBJECTIVE
    proba_objective: float = DEFAULT_PROBA_OBJECTIVE
    deterministic_value: float | None = None
    samples: list[float] = field(default_factory=list)

    def reset(self) -> None:
        self.deterministic_value = None
        self.samples = []

    def record(self, value: float, mode: SimulationMode) -> None:
        if mode is SimulationMode.DETERMINISTIC:
            self.deterministic_value = value
        else:
            self.samples.append(value)

    def value_is_undefined(self, mode: SimulationMode) -> bool:
        if mode is SimulationMode.DETERMINISTIC:
            return self.deterministic_value is None
        return not self.samples

    def value(self, mode: SimulationMode) -> float | None:
        if mode is SimulationMode.DETERMINISTIC:
            return self.deterministic_value
        if not self.samples:
            return None
        return float(np.percentile(self.samples, (1.0 - self.proba_objective) * 100.0))

    def objective_is_reached_by(self, value: float) -> bool:
        return value >= self.objective

    def objective_is_reached(self, mode: SimulationMode) -> bool | None:
        value = self.value(mode)
        if value is None:
            return None
        return self.objective_is_reached_by(value)

    def histogram(self, bins: int = 50) -> pd.DataFrame:
        """
        Histogram of the random samples.

        Returns:
            DataFrame with ``lower``, ``upper`` and ``count`` columns, one row
            per bin (empty without samples)
        """
        if not self.samples:
            return pd.DataFrame(columns=["lower", "upper", "count"])
        counts, edges = np.histogram(self.samples, bins=bins)
        return pd.DataFrame({"lower": edges[:-1], "upper": edges[1:], "count": counts})


@dataclass
class KpiDictionary:
    """The three indicators of a simulation, indexed by kind."""

    kpis: dict[KpiKind, Kpi] = field(
        default_factory=lambda: {kind: Kpi(kind) for kind in KpiKind}
    )

    def __getitem__(self, kind: KpiKind) -> Kpi:
        return self.kpis[kind]

    def __iter__(self):
        return iter(self.kpis.values())

    def reset(self) -> None:
        for kpi in self.kpis.values():
            kpi.reset()

    def record(self, kind: KpiKind, value: float, mode: SimulationMode) -> None:
        self.kpis[kind].record(value, mode)

    def summary(self, mode: SimulationMode) -> pd.DataFrame:
        rows = []
        for kpi in self.kpis.values():
            rows.append(
                {
                    "kpi": kpi.name.value,
                    "objective": kpi.objective,
                    "proba_objective": kpi.proba_objective,
                    "value": kpi.value(mode),
                    "objective_is_reached": kpi.objective_is_reached(mode),
                }
            )
        return pd.DataFrame(rows).set_index("kpi")
