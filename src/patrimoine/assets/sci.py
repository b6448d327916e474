"""
SCI: civil real estate company holding SCPI shares, taxed at the corporate rate.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterator, NamedTuple

from patrimoine.assets.scpi import SCPI
from patrimoine.core.utils import NamedValueTable
from patrimoine.ownership.ownable import Ownable, sum_of_values

if TYPE_CHECKING:
    from patrimoine.core.context import ValuationContext
    from patrimoine.fiscal.inheritance import FiscalOption


class SciCashFlow(NamedTuple):
    """Yearly accounts of the SCI."""

    dividends: NamedValueTable
    scpi_sales: NamedValueTable
    corporate_tax: float

    @property
    def total_revenue(self) -> float:
        return self.dividends.total + self.scpi_sales.total

    @property
    def net_cash_flow(self) -> float:
        return self.total_revenue - self.corporate_tax


@dataclass
class SCI:
    """
    Attributes:
        name: Company name
        note: Free text
        scpis: SCPI shares held by the company
        bank_account: Cash held by the company
    """

    name: str = "SCI"
    note: str = ""
    scpis: list[SCPI] = field(default_factory=list)
    bank_account: float = 0.0
    context: ValuationContext | None = field(default=None, repr=False, compare=False)

    def __iter__(self) -> Iterator[Ownable]:
        return iter(self.scpis)

    def for_each_ownable(self, body: Callable[[Ownable], None]) -> None:
        for scpi in self.scpis:
            body(scpi)

    def bind(self, context: ValuationContext) -> None:
        self.context = context
        for scpi in self.scpis:
            scpi.bind(context)

    def value(self, year: int) -> float:
        return sum_of_values(self.scpis, year)

    def transfer_ownership_of(
        self,
        decedent: str,
        children: list[str] | None,
        spouse: str | None,
        spouse_fiscal_option: FiscalOption | None,
    ) -> None:
        for idx in range(len(self.scpis)):
            self.scpis[idx].ownership.transfer_ownership_of(
                decedent, children, spouse, spouse_fiscal_option
            )

    def cash_flow(self, year: int, adults: list[str]) -> SciCashFlow:
        """
        Dividends (net of social taxes) and sale proceeds of the SCPIs held
        by ``adults``, and the corporate tax levied on them.
        """
        dividends = NamedValueTable("SCI-REVENUS DE SCPI")
        sales = NamedValueTable("SCI-VENTES SCPI")
        for scpi in sorted(self.scpis, key=lambda s: s.name):
            if not scpi.is_part_of_patrimoine_of(adults):
                continue
            if scpi.provides_revenue_to(adults):
                dividends.append(scpi.name, scpi.yearly_revenue(year).taxable_irpp)
            sales.append(scpi.name, scpi.liquidated_value(year).net_revenue)
        corporate_tax = 0.0
        if self.context is not None:
            corporate_tax = self.context.fiscal.company_profit_taxes.corporate_tax(
                dividends.total + sales.total
            )
        return SciCashFlow(dividends, sales, corporate_tax)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "note": self.note,
            "bank_account": self.bank_account,
            "scpis": [scpi.to_dict() for scpi in self.scpis],
        }
