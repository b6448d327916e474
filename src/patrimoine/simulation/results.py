"""
Results of the runs of a Monte-Carlo simulation.

Each run records the random values it drew, so that it can be replayed
exactly, and the outcome of each KPI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, NamedTuple

import pandas as pd

from patrimoine.core.kinds import KpiKind, RunFilter, RunResult
from patrimoine.economy.economy import EconomyVariable
from patrimoine.economy.socioeconomy import SocioEconomyVariable
from patrimoine.family.person import AdultRandomProperties


class KpiResult(NamedTuple):
    value: float
    objective_is_reached: bool


@dataclass
class SimulationResultLine:
    """
    Attributes:
        run_number: Number of the run, starting at 1
        adults_random_properties: Age of death and dependency drawn per adult
        economy_random_values: Long-run economic values drawn
        economy_seed: Seed of the yearly returns series
        socio_economy_random_values: Socio-economic values drawn
        kpi_results: Outcome of each KPI; a KPI never computed is missing
    """

    run_number: int
    adults_random_properties: dict[str, AdultRandomProperties] = field(default_factory=dict)
    economy_random_values: dict[EconomyVariable, float] = field(default_factory=dict)
    economy_seed: int | None = None
    socio_economy_random_values: dict[SocioEconomyVariable, float] = field(default_factory=dict)
    kpi_results: dict[KpiKind, KpiResult] = field(default_factory=dict)

    @property
    def run_result(self) -> RunResult:
        for kind in KpiKind:
            result = self.kpi_results.get(kind)
            if result is None:
                return RunResult.SOME_OBJECTIVE_UNDEFINED
            if not result.objective_is_reached:
                return RunResult.SOME_OBJECTIVE_MISSED
        return RunResult.ALL_OBJECTIVES_REACHED

    def kpi_value(self, kind: KpiKind) -> float | None:
        result = self.kpi_results.get(kind)
        return result.value if result is not None else None

    def to_dict(self) -> dict[str, Any]:
        row: dict[str, Any] = {"run_number": self.run_number, "run_result": self.run_result.value}
        for kind in KpiKind:
            row[kind.value] = self.kpi_value(kind)
        for name, properties in self.adults_random_properties.items():
            row[f"{name}.age_of_death"] = properties.age_of_death
            row[f"{name}.nb_of_years_of_dependency"] = properties.nb_of_years_of_dependency
        for variable, value in self.economy_random_values.items():
            row[variable.value] = value
        row["economy_seed"] = self.economy_seed
        for variable, value in self.socio_economy_random_values.items():
            row[variable.value] = value
        return row


@dataclass
class SimulationResultTable:
    """Result lines of a Monte-Carlo simulation, in run order."""

    lines: list[SimulationResultLine] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self):
        return iter(self.lines)

    def reset(self) -> None:
        self.lines = []

    def append(self, line: SimulationResultLine) -> None:
        self.lines.append(line)

    def line(self, run_number: int) -> SimulationResultLine | None:
        for line in self.lines:
            if line.run_number == run_number:
                return line
        return None

    def count(self, result: RunResult) -> int:
        return sum(1 for line in self.lines if line.run_result is result)

    def filtered(self, run_filter: RunFilter) -> list[SimulationResultLine]:
        if run_filter is RunFilter.SOME_BAD:
            return [line for line in self.lines if line.run_result is RunResult.SOME_OBJECTIVE_MISSED]
        if run_filter is RunFilter.SOME_UNKNOWN:
            return [line for line in self.lines if line.run_result is RunResult.SOME_OBJECTIVE_UNDEFINED]
        return list(self.lines)

    def sorted(
        self,
        by: KpiKind | None = None,
        ascending: bool = True,
        run_filter: RunFilter = RunFilter.ALL,
    ) -> list[SimulationResultLine]:
        """
        Lines sorted by run number (``by=None``) or by the value of a KPI.

        Lines whose KPI is undefined come last whatever the order.
        """
        lines = self.filtered(run_filter)
        if by is None:
            return sorted(lines, key=lambda line: line.run_number, reverse=not ascending)
        defined = [line for line in lines if line.kpi_value(by) is not None]
        undefined = [line for line in lines if line.kpi_value(by) is None]
        defined.sort(key=lambda line: line.kpi_value(by), reverse=not ascending)
        return defined + undefined

    def to_frame(
        self,
        by: KpiKind | None = None,
        ascending: bool = True,
        run_filter: RunFilter = RunFilter.ALL,
    ) -> pd.DataFrame:
        rows = [line.to_dict() for line in self.sorted(by, ascending, run_filter)]
        if not rows:
            frame = pd.DataFrame(columns=["run_number", "run_result", *(k.value for k in KpiKind)])
        else:
            frame = pd.DataFrame(rows)
        return frame.set_index("run_number")
