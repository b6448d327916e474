"""
Sociological model: pension devaluation, quarters for a full pension and the
under-evaluation of expenses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from patrimoine.core.kinds import SimulationMode
from patrimoine.core.utils import ModelVersion
from patrimoine.economy.randomizer import ModelRandomizer


class SocioEconomyVariable(Enum):
    PENSION_DEVALUATION_RATE = "pension_devaluation_rate"
    NB_TRIM_TAUX_PLEIN = "nb_trim_taux_plein"
    EXPENSES_UNDER_EVALUATION_RATE = "expenses_under_evaluation_rate"


@dataclass
class SocioEconomyModel:
    """
    Attributes:
        pension_devaluation_rate: Yearly loss of pension purchasing power (%)
        nb_trim_taux_plein: Extra quarters required for a full pension
        expenses_under_evaluation_rate: Under-evaluation of the expenses (%)
    """

    pension_devaluation_rate: ModelRandomizer
    nb_trim_taux_plein: ModelRandomizer
    expenses_under_evaluation_rate: ModelRandomizer
    version: ModelVersion = field(default_factory=ModelVersion)

    def initialize(self) -> SocioEconomyModel:
        for randomizer in self.randomizers().values():
            randomizer.initialize()
        return self

    def randomizers(self) -> dict[SocioEconomyVariable, ModelRandomizer]:
        return {
            SocioEconomyVariable.PENSION_DEVALUATION_RATE: self.pension_devaluation_rate,
            SocioEconomyVariable.NB_TRIM_TAUX_PLEIN: self.nb_trim_taux_plein,
            SocioEconomyVariable.EXPENSES_UNDER_EVALUATION_RATE: self.expenses_under_evaluation_rate,
        }

    def pension_devaluation(self, mode: SimulationMode) -> float:
        return self.pension_devaluation_rate.value(mode)

    def extra_quarters(self, mode: SimulationMode) -> int:
        return int(self.nb_trim_taux_plein.value(mode))

    def expenses_under_evaluation(self, mode: SimulationMode) -> float:
        return self.expenses_under_evaluation_rate.value(mode)

    def next(self) -> dict[SocioEconomyVariable, float]:
        return {variable: rnd.next() for variable, rnd in self.randomizers().items()}

    def set_random_value(self, values: dict[SocioEconomyVariable, float]) -> None:
        for variable, rnd in self.randomizers().items():
            rnd.set_random_value(values[variable])

    def reset_random_history(self) -> None:
        for rnd in self.randomizers().values():
            rnd.reset_random_history()

    def random_histories(self) -> dict[SocioEconomyVariable, list[float]]:
        return {variable: list(rnd.random_history) for variable, rnd in self.randomizers().items()}
