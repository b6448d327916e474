"""
Provider protocols injected into assets, ownerships, family members and
cash-flow steps.

They let the valuation layer read the economic context without depending
on the concrete models, so tests can pass simple doubles.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Protocol, runtime_checkable

if TYPE_CHECKING:
    from patrimoine.core.kinds import SimulationMode
    from patrimoine.economy.economy import FinancialRates


@runtime_checkable
class InflationProvider(Protocol):
    """Yearly inflation rate (%) of the current run."""

    def inflation_rate(self, mode: SimulationMode) -> float: ...


@runtime_checkable
class FinancialRatesProvider(Protocol):
    """
    Secured and stock returns (%).

    ``rates(mode)`` gives the long-run values of the run and
    ``rates(mode, year)`` the value of a given year when volatility is
    simulated.
    """

    def rates(self, mode: SimulationMode, year: int | None = None) -> FinancialRates: ...


@runtime_checkable
class EconomyModelProvider(InflationProvider, FinancialRatesProvider, Protocol):
    """Inflation and financial returns together."""


@runtime_checkable
class PensionDevaluationRateProvider(Protocol):
    def pension_devaluation(self, mode: SimulationMode) -> float: ...


@runtime_checkable
class ExpensesUnderEvaluationRateProvider(Protocol):
    def expenses_under_evaluation(self, mode: SimulationMode) -> float: ...


@runtime_checkable
class PersonAgeProvider(Protocol):
    """Age of a family member by name at the end of a year (None if unknown)."""

    def age_of(self, name: str, year: int) -> int | None: ...


@runtime_checkable
class FiscalHouseholdSumator(Protocol):
    """Sum of a per-member value over the fiscal household (adults and dependent children)."""

    def fiscal_household_sum(self, year: int, member_value: Callable[[str], float]) -> float: ...
