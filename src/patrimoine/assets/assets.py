"""
Assets of the family: financial investments, real estate, SCPI and SCI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Iterator

from patrimoine.assets.free_investment import FreeInvestment
from patrimoine.assets.periodic_investment import PeriodicInvestment
from patrimoine.assets.real_estate import RealEstateAsset
from patrimoine.assets.sci import SCI
from patrimoine.assets.scpi import SCPI
from patrimoine.core.kinds import EvaluationMethod
from patrimoine.ownership.ownable import Ownable, sum_of_owned_values, sum_of_values

if TYPE_CHECKING:
    from patrimoine.core.context import ValuationContext
    from patrimoine.core.interfaces import FiscalHouseholdSumator
    from patrimoine.fiscal.inheritance import FiscalOption


@dataclass
class Assets:
    """
    Attributes:
        periodic_invests: Periodic investments
        free_invests: Free investments (the cash flow receptacles)
        real_estates: Real estate
        scpis: SCPI held directly
        sci: SCI and its SCPI
    """

    periodic_invests: list[PeriodicInvestment] = field(default_factory=list)
    free_invests: list[FreeInvestment] = field(default_factory=list)
    real_estates: list[RealEstateAsset] = field(default_factory=list)
    scpis: list[SCPI] = field(default_factory=list)
    sci: SCI = field(default_factory=SCI)

    def __iter__(self) -> Iterator[Ownable]:
        yield from self.periodic_invests
        yield from self.free_invests
        yield from self.real_estates
        yield from self.scpis
        yield from self.sci

    def for_each_ownable(self, body: Callable[[Ownable], None]) -> None:
        for item in self:
            body(item)

    def bind(self, context: ValuationContext) -> None:
        for item in (*self.periodic_invests, *self.free_invests, *self.real_estates, *self.scpis):
            item.bind(context)
        self.sci.bind(context)

    def reset_free_investment_current_value(self, estimation_year: int) -> None:
        for idx in range(len(self.free_invests)):
            self.free_invests[idx].reset_current_state(estimation_year)

    def value(self, year: int) -> float:
        return sum_of_values(self, year)

    def real_estate_value(
        self,
        year: int,
        method: EvaluationMethod,
        household: FiscalHouseholdSumator | None = None,
    ) -> float:
        """
        Real estate value (real estate, SCPI, SCI): the fiscal household's
        owned share for a wealth tax, the total value otherwise.
        """
        estate = (*self.real_estates, *self.scpis, *self.sci.scpis)
        if method.is_wealth_tax and household is not None:
            return household.fiscal_household_sum(
                year, lambda name: sum_of_owned_values(estate, name, year, method)
            )
        if method is EvaluationMethod.LIFE_INSURANCE_SUCCESSION:
            return 0.0
        return sum_of_values(estate, year)

    def transfer_ownership_of(
        self,
        decedent: str,
        children: list[str] | None,
        spouse: str | None,
        spouse_fiscal_option: FiscalOption | None,
    ) -> None:
        """
        Generic transfer at death of every asset except life insurance
        contracts, which are handed over by their beneficiary clause.
        """
        for idx in range(len(self.periodic_invests)):
            if not self.periodic_invests[idx].is_life_insurance:
                self.periodic_invests[idx].ownership.transfer_ownership_of(
                    decedent, children, spouse, spouse_fiscal_option
                )
        for idx in range(len(self.free_invests)):
            if not self.free_invests[idx].is_life_insurance:
                self.free_invests[idx].ownership.transfer_ownership_of(
                    decedent, children, spouse, spouse_fiscal_option
                )
        for items in (self.real_estates, self.scpis):
            for idx in range(len(items)):
                items[idx].ownership.transfer_ownership_of(
                    decedent, children, spouse, spouse_fiscal_option
                )
        self.sci.transfer_ownership_of(decedent, children, spouse, spouse_fiscal_option)
