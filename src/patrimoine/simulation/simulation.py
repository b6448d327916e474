"""
Deterministic or Monte-Carlo simulation of the family's patrimoine.

A single run uses the configured mode. Several runs force the random
mode: before each run the adults' ages of death, the economic values and
the socio-economic values are drawn, and the drawn values are recorded in
the result table so that any run can be replayed exactly.

**Example:**
    ```python
    models = default_models()
    simulation = Simulation(models, first_year=2025)
    table = simulation.compute(nb_of_years=40, nb_of_runs=500,
                               family=family, patrimoine=patrimoine)
    worst = table.sorted(by=KpiKind.MINIMUM_ASSET)[0]
    accounts = simulation.replay(worst, family, patrimoine)
    ```
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from patrimoine.core.errors import ConfigError
from patrimoine.core.kinds import KpiKind, SimulationMode
from patrimoine.ownership.ownership import Ownership
from patrimoine.simulation.kpi import Kpi, KpiDictionary
from patrimoine.simulation.results import KpiResult, SimulationResultLine, SimulationResultTable
from patrimoine.simulation.social_accounts import SocialAccounts

if TYPE_CHECKING:
    from patrimoine.core.context import ModelContext
    from patrimoine.family.family import Family
    from patrimoine.patrimoine import Patrimoine

logger = logging.getLogger(__name__)


@dataclass
class Simulation:
    """
    Attributes:
        models: Fiscal, economic, socio-economic and demographic models
        first_year: First simulated year
        mode: Mode of a single run
        kpis: KPIs of the simulation
        result_table: One line per Monte-Carlo run
        social_accounts: Accounts of the last run computed or replayed
        nb_of_years: Number of years of the last computation
        replay_results: KPI results of the last replay
        initial_ownerships: Ownerships of the patrimoine before the first run
    """

    models: ModelContext
    first_year: int
    mode: SimulationMode = SimulationMode.DETERMINISTIC
    kpis: KpiDictionary = field(default_factory=KpiDictionary)
    result_table: SimulationResultTable = field(default_factory=SimulationResultTable)
    social_accounts: SocialAccounts = field(default_factory=SocialAccounts)
    nb_of_years: int = 0
    replay_results: dict[KpiKind, KpiResult] = field(default_factory=dict)
    initial_ownerships: list[Ownership] = field(default_factory=list, repr=False)

    @property
    def last_year(self) -> int:
        return self.first_year + self.nb_of_years - 1

    def _prepare(self, family: Family, patrimoine: Patrimoine, mode: SimulationMode) -> None:
        if patrimoine.context is None:
            patrimoine.bind(self.models.economy, self.models.fiscal, mode, family)
        else:
            patrimoine.set_mode(mode)

    def compute(
        self,
        nb_of_years: int,
        nb_of_runs: int,
        family: Family,
        patrimoine: Patrimoine,
        cancel: Callable[[], bool] | None = None,
    ) -> SimulationResultTable:
        """
        Run the simulation.

        Args:
            nb_of_years: Number of years per run
            nb_of_runs: Number of runs; more than one switches to random mode
            family: Family (random properties are redrawn per run)
            patrimoine: Patrimoine (restored before each run)
            cancel: Checked once per simulated year

        Returns:
            The result table, one line per run

        Raises:
            ConfigError: If ``nb_of_runs`` or ``nb_of_years`` is not positive
        """
        if nb_of_runs < 1 or nb_of_years < 1:
            raise ConfigError(f"Invalid simulation size: {nb_of_runs} runs of {nb_of_years} years")
        self.nb_of_years = nb_of_years
        monte_carlo = nb_of_runs > 1
        mode = SimulationMode.RANDOM if monte_carlo else self.mode
        economy = self.models.economy
        socio_economy = self.models.socio_economy

        if monte_carlo:
            self.models.human_life.reset_random_history()
            economy.reset_random_history()
            socio_economy.reset_random_history()
        self.result_table = SimulationResultTable()

        self._prepare(family, patrimoine, mode)
        self.initial_ownerships = patrimoine.ownerships()

        for run in range(1, nb_of_runs + 1):
            if mode is SimulationMode.RANDOM:
                family.next_random_properties(self.models.human_life, self.first_year)
                economy_values = economy.next_run(mode, self.first_year, self.last_year)
                socio_values = socio_economy.next()
            else:
                economy_values = {v: rnd.value(mode) for v, rnd in economy.randomizers().items()}
                socio_values = {v: rnd.value(mode) for v, rnd in socio_economy.randomizers().items()}

            if run == 1:
                self.kpis.reset()
            patrimoine.restore_ownerships(self.initial_ownerships)
            patrimoine.reset_free_investment_current_value(self.first_year - 1)

            self.social_accounts = SocialAccounts()
            kpi_results = self.social_accounts.build(
                run,
                self.first_year,
                nb_of_years,
                family,
                patrimoine,
                self.models,
                self.kpis,
                mode,
                cancel,
            )
            self.result_table.append(
                SimulationResultLine(
                    run_number=run,
                    adults_random_properties=family.adults_random_properties(),
                    economy_random_values=economy_values,
                    economy_seed=economy.samples_seed,
                    socio_economy_random_values=socio_values,
                    kpi_results=kpi_results,
                )
            )
            logger.debug("Run %d/%d: %s", run, nb_of_runs, self.result_table.lines[-1].run_result.value)

        patrimoine.restore_ownerships(self.initial_ownerships)
        return self.result_table

    def replay(
        self,
        line: SimulationResultLine,
        family: Family,
        patrimoine: Patrimoine,
    ) -> SocialAccounts:
        """
        Rebuild the accounts of a recorded run with its random values.

        The KPIs of the simulation are left untouched; the KPI results of the
        replay are those of ``line`` when the models are unchanged.

        Raises:
            ConfigError: If no simulation was computed before
        """
        if self.nb_of_years < 1:
            raise ConfigError("Nothing to replay: no simulation computed")
        mode = SimulationMode.RANDOM if len(self.result_table) > 1 else self.mode
        if mode is SimulationMode.RANDOM:
            self.models.economy.set_random_value(
                line.economy_random_values, mode, self.first_year, self.last_year, line.economy_seed
            )
            self.models.socio_economy.set_random_value(line.socio_economy_random_values)
            family.set_random_properties(line.adults_random_properties)

        self._prepare(family, patrimoine, mode)
        patrimoine.restore_ownerships(self.initial_ownerships)
        patrimoine.reset_free_investment_current_value(self.first_year - 1)

        scratch = KpiDictionary(
            {kind: Kpi(kind, kpi.objective, kpi.proba_objective) for kind, kpi in self.kpis.kpis.items()}
        )
        self.social_accounts = SocialAccounts()
        self.replay_results = self.social_accounts.build(
            line.run_number,
            self.first_year,
            self.nb_of_years,
            family,
            patrimoine,
            self.models,
            scratch,
            mode,
        )
        accounts = self.social_accounts
        patrimoine.restore_ownerships(self.initial_ownerships)
        return accounts
