"""
Economic model: inflation and long-run returns of secured and stock assets.

In random mode with simulated volatility, each run also carries a per-year
series of returns drawn from a normal law centred on the run's long-run
values. The series is generated from a seed stored with the run so that a
replay regenerates exactly the same values.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple

import numpy as np

from patrimoine.core.errors import OutOfBoundsError
from patrimoine.core.kinds import SimulationMode
from patrimoine.core.utils import ModelVersion
from patrimoine.economy.randomizer import ModelRandomizer

logger = logging.getLogger(__name__)


class EconomyVariable(Enum):
    INFLATION = "inflation"
    SECURED_RATE = "secured_rate"
    STOCK_RATE = "stock_rate"


class FinancialRates(NamedTuple):
    secured_rate: float
    stock_rate: float


@dataclass
class EconomyModel:
    """
    Attributes:
        inflation: Yearly inflation (%)
        secured_rate: Long-run yearly return of secured assets (%)
        stock_rate: Long-run yearly return of stocks (%)
        secured_volatility: Standard deviation of secured yearly returns (%)
        stock_volatility: Standard deviation of stock yearly returns (%)
        simulate_volatility: Draw per-year returns in random mode
        rng: Generator used to draw the per-run sample seeds
    """

    inflation: ModelRandomizer
    secured_rate: ModelRandomizer
    stock_rate: ModelRandomizer
    secured_volatility: float = 0.0
    stock_volatility: float = 0.0
    simulate_volatility: bool = False
    rng: np.random.Generator = field(default_factory=np.random.default_rng, repr=False)
    version: ModelVersion = field(default_factory=ModelVersion)
    first_year_sampled: int = 0
    samples_seed: int | None = None
    secured_rate_samples: list[float] = field(default_factory=list, repr=False)
    stock_rate_samples: list[float] = field(default_factory=list, repr=False)

    def initialize(self) -> EconomyModel:
        for randomizer in self.randomizers().values():
            randomizer.initialize()
        return self

    def randomizers(self) -> dict[EconomyVariable, ModelRandomizer]:
        return {
            EconomyVariable.INFLATION: self.inflation,
            EconomyVariable.SECURED_RATE: self.secured_rate,
            EconomyVariable.STOCK_RATE: self.stock_rate,
        }

    def _uses_samples(self, mode: SimulationMode) -> bool:
        return mode is SimulationMode.RANDOM and self.simulate_volatility

    def inflation_rate(self, mode: SimulationMode) -> float:
        return self.inflation.value(mode)

    def rates(self, mode: SimulationMode, year: int | None = None) -> FinancialRates:
        """
        Secured and stock returns (%).

        Without ``year`` (or without volatility) the run's long-run values are
        returned; with ``year`` in random mode with volatility, the sampled
        value of that year.
        """
        if year is not None and self._uses_samples(mode):
            idx = year - self.first_year_sampled
            if not 0 <= idx < len(self.secured_rate_samples):
                raise OutOfBoundsError(f"No sampled return for year {year}")
            return FinancialRates(self.secured_rate_samples[idx], self.stock_rate_samples[idx])
        return FinancialRates(self.secured_rate.value(mode), self.stock_rate.value(mode))

    def _generate_samples(self, mode: SimulationMode, first_year: int, last_year: int) -> None:
        if last_year < first_year:
            logger.error("Cannot sample returns: last year %s < first year %s", last_year, first_year)
            raise OutOfBoundsError(f"last_year {last_year} < first_year {first_year}")
        self.first_year_sampled = first_year
        self.secured_rate_samples = []
        self.stock_rate_samples = []
        if not self._uses_samples(mode):
            return
        nb_years = last_year - first_year + 1
        sampler = np.random.default_rng(self.samples_seed)
        self.secured_rate_samples = list(
            sampler.normal(self.secured_rate.value(mode), self.secured_volatility, nb_years)
        )
        self.stock_rate_samples = list(
            sampler.normal(self.stock_rate.value(mode), self.stock_volatility, nb_years)
        )

    def next_run(
        self, mode: SimulationMode, first_year: int, last_year: int
    ) -> dict[EconomyVariable, float]:
        """
        Draw the long-run values of a new run and regenerate its yearly series.

        Raises:
            OutOfBoundsError: If ``last_year < first_year``
        """
        if last_year < first_year:
            raise OutOfBoundsError(f"last_year {last_year} < first_year {first_year}")
        drawn = {variable: rnd.next() for variable, rnd in self.randomizers().items()}
        self.samples_seed = int(self.rng.integers(0, 2**63 - 1))
        self._generate_samples(mode, first_year, last_year)
        return drawn

    def set_random_value(
        self,
        values: dict[EconomyVariable, float],
        mode: SimulationMode,
        first_year: int,
        last_year: int,
        seed: int | None,
    ) -> None:
        """Replay recorded long-run values and regenerate the same yearly series."""
        for variable, rnd in self.randomizers().items():
            rnd.set_random_value(values[variable])
        self.samples_seed = seed
        self._generate_samples(mode, first_year, last_year)

    def reset_random_history(self) -> None:
        for rnd in self.randomizers().values():
            rnd.reset_random_history()

    def random_histories(self) -> dict[EconomyVariable, list[float]]:
        return {variable: list(rnd.random_history) for variable, rnd in self.randomizers().items()}
