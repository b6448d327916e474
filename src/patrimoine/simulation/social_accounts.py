"""
Social accounts of a run: the yearly cash-flow lines and balance sheets.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

import pandas as pd

from patrimoine.core.errors import CashFlowError
from patrimoine.core.kinds import KpiKind, RunState, SimulationMode
from patrimoine.simulation.balance_sheet import BalanceSheetLine
from patrimoine.simulation.cash_flow import CashFlowLine
from patrimoine.simulation.results import KpiResult
from patrimoine.succession.succession import Succession, successions_frame

if TYPE_CHECKING:
    from patrimoine.core.context import ModelContext
    from patrimoine.family.family import Family
    from patrimoine.patrimoine import Patrimoine
    from patrimoine.simulation.kpi import KpiDictionary

logger = logging.getLogger(__name__)


@dataclass
class SocialAccounts:
    """
    Cash-flow lines and end of year balance sheets of one run.

    A run stops early when the free investments can no longer cover a
    deficit, or at the end of the year in which the last adult dies.

    **KPIs:**
        - ``asset_at_first_death``: net financial assets at the end of the
          year of the first death
        - ``asset_at_second_death``: same at the second death
        - ``minimum_asset``: lowest financial assets over the run, 0 if the
          run ran out of cash

    Attributes:
        first_year: First simulated year
        last_year: Last simulated year (lowered when the run stops early)
        cash_flow: One line per simulated year
        balance_sheet: One line per completed year
        legal_successions: Legal successions of the run
        life_insurance_successions: Life insurance successions of the run
        state: Life cycle of the run
        missing_cash: Amount missing when the run ran out of cash
    """

    first_year: int = 0
    last_year: int = 0
    cash_flow: list[CashFlowLine] = field(default_factory=list)
    balance_sheet: list[BalanceSheetLine] = field(default_factory=list)
    legal_successions: list[Succession] = field(default_factory=list)
    life_insurance_successions: list[Succession] = field(default_factory=list)
    state: RunState = RunState.NOT_STARTED
    missing_cash: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not self.cash_flow or not self.balance_sheet

    def build(
        self,
        run: int,
        first_year: int,
        nb_of_years: int,
        family: Family,
        patrimoine: Patrimoine,
        models: ModelContext,
        kpis: KpiDictionary,
        mode: SimulationMode,
        cancel: Callable[[], bool] | None = None,
    ) -> dict[KpiKind, KpiResult]:
        """
        Simulate ``nb_of_years`` years starting at ``first_year``.

        The free investments of ``patrimoine`` must hold their state at the
        end of ``first_year - 1``.

        Args:
            run: Run number
            first_year: First simulated year
            nb_of_years: Number of years to simulate
            family: Family, with the random properties of the run
            patrimoine: Patrimoine, updated in place year after year
            models: Models of the simulation
            kpis: KPIs recording the values of the run
            mode: Simulation mode
            cancel: Checked once per year; the run stops when it returns True

        Returns:
            KPI results of the run; a KPI that could not be computed is missing
        """
        self.first_year = first_year
        self.last_year = first_year + nb_of_years - 1
        self.cash_flow = []
        self.balance_sheet = []
        self.legal_successions = []
        self.life_insurance_successions = []
        self.missing_cash = 0.0
        self.state = RunState.RUNNING
        results: dict[KpiKind, KpiResult] = {}

        def record(kind: KpiKind, value: float) -> None:
            kpis.record(kind, value, mode)
            results[kind] = KpiResult(value, kpis[kind].objective_is_reached_by(value))

        for year in range(first_year, self.last_year + 1):
            if cancel is not None and cancel():
                logger.info("Run %d cancelled in %d", run, year)
                self.last_year = year - 1
                self.state = RunState.CANCELLED
                return results

            delayed = self.cash_flow[-1].taxable_irpp_delayed_to_next_year if self.cash_flow else 0.0
            try:
                line = CashFlowLine.compute(run, year, family, patrimoine, models, mode, delayed)
            except CashFlowError as exc:
                logger.info("End of run %d: out of cash in %d", run, year)
                self.last_year = year
                self.missing_cash = exc.missing_cash
                self.state = RunState.FAILED
                if family.nb_of_adults_alive(year) == 1 and family.nb_of_adults_alive(year - 1) == 2:
                    last = self.balance_sheet[-1].net_financial_assets() if self.balance_sheet else 0.0
                    record(KpiKind.ASSET_AT_FIRST_DEATH, last)
                record(KpiKind.MINIMUM_ASSET, 0.0)
                return results

            self.cash_flow.append(line)
            self.legal_successions.extend(line.legal_successions)
            self.life_insurance_successions.extend(line.life_insurance_successions)

            balance = BalanceSheetLine.build(year, family, patrimoine)
            self.balance_sheet.append(balance)

            nb_alive = family.nb_of_adults_alive(year)
            if nb_alive < family.nb_of_adults_alive(year - 1):
                net_assets = balance.net_financial_assets()
                if nb_alive == 1:
                    record(KpiKind.ASSET_AT_FIRST_DEATH, net_assets)
                elif nb_alive == 0:
                    if family.nb_of_adults_alive(year - 1) == 2:
                        record(KpiKind.ASSET_AT_FIRST_DEATH, net_assets)
                    record(KpiKind.ASSET_AT_SECOND_DEATH, net_assets)
                    record(KpiKind.MINIMUM_ASSET, self.minimum_financial_assets)

            if nb_alive == 0:
                logger.info("End of run %d: no adult alive at the end of %d", run, year)
                self.last_year = year
                self.state = RunState.COMPLETED
                return results

        if self.balance_sheet:
            record(KpiKind.MINIMUM_ASSET, self.minimum_financial_assets)
        self.state = RunState.COMPLETED
        return results

    @property
    def minimum_financial_assets(self) -> float:
        return min(line.financial_assets() for line in self.balance_sheet)

    def balance_sheet_frame(self) -> pd.DataFrame:
        """Balance sheets indexed by year, one column per category and total."""
        if not self.balance_sheet:
            return pd.DataFrame()
        return pd.DataFrame([line.to_dict() for line in self.balance_sheet]).set_index("year")

    def cash_flow_frame(self) -> pd.DataFrame:
        """Cash-flow lines indexed by year, one column per category and total."""
        if not self.cash_flow:
            return pd.DataFrame()
        return pd.DataFrame([line.to_dict() for line in self.cash_flow]).set_index("year")

    def successions_frame(self) -> pd.DataFrame:
        frame = successions_frame(self.legal_successions)
        frame.insert(0, "kind", "legal")
        life_insurance = successions_frame(self.life_insurance_successions)
        life_insurance.insert(0, "kind", "life_insurance")
        return pd.concat([frame, life_insurance], ignore_index=True)
