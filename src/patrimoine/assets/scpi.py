"""
SCPI shares (real estate investment fund).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NamedTuple

from patrimoine.assets.financial_math import future_value
from patrimoine.assets.real_estate import NO_LIQUIDATION, Liquidation
from patrimoine.core.utils import zero_or_positive
from patrimoine.ownership.ownable import Ownable


class ScpiRevenue(NamedTuple):
    revenue: float
    taxable_irpp: float
    social_taxes: float


@dataclass
class SCPI(Ownable):
    """
    SCPI shares revalued yearly and sold with a commission.

    Rates are nominal; the inflation of the run is subtracted from both the
    revaluation and the yield.

    Attributes:
        buying_year: Year of purchase
        buying_price: Purchase price
        interest_rate: Yearly yield (%)
        revaluation_rate: Yearly revaluation of the shares (%)
        will_be_sold: Whether a sale is planned
        selling_year: Year of the sale, last year of ownership
    """

    buying_year: int = 0
    buying_price: float = 0.0
    interest_rate: float = 0.0
    revaluation_rate: float = 0.0
    will_be_sold: bool = False
    selling_year: int = 0

    SALE_COMMISSION = 10.0

    @property
    def inflation(self) -> float:
        ctx = self.ctx
        return ctx.economy.inflation_rate(ctx.mode)

    def is_sold_before(self, year: int) -> bool:
        return self.will_be_sold and year > self.selling_year

    def is_owned(self, year: int) -> bool:
        return year >= self.buying_year and not self.is_sold_before(year)

    def value(self, year: int) -> float:
        if not self.is_owned(year):
            return 0.0
        return future_value(
            payment=0.0,
            interest_rate=(self.revaluation_rate - self.inflation) / 100.0,
            nb_period=year - self.buying_year,
            initial_value=self.buying_price,
        ) * (1.0 - self.SALE_COMMISSION / 100.0)

    def yearly_revenue(self, year: int) -> ScpiRevenue:
        """Yearly dividends, net of inflation, and their taxation."""
        if not self.is_owned(year):
            return ScpiRevenue(0.0, 0.0, 0.0)
        revenue = self.buying_price * (self.interest_rate - self.inflation) / 100.0
        taxable = self.ctx.fiscal.financial_revenue_taxes.net(revenue)
        return ScpiRevenue(revenue, taxable, revenue - taxable)

    def liquidated_value(self, year: int) -> Liquidation:
        if not (self.will_be_sold and year == self.selling_year):
            return NO_LIQUIDATION
        fiscal = self.ctx.fiscal
        detention = self.selling_year - self.buying_year
        current_value = self.value(self.selling_year)
        capital_gain = current_value - self.buying_price
        taxable_gain = zero_or_positive(capital_gain)
        social_taxes = fiscal.estate_capital_gain_taxes.social_taxes(taxable_gain, detention)
        irpp = fiscal.estate_capital_gain_irpp.irpp_on_capital_gain(taxable_gain, detention)
        return Liquidation(
            revenue=current_value,
            capital_gain=capital_gain,
            net_revenue=current_value - social_taxes - irpp,
            social_taxes=social_taxes,
            irpp=irpp,
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "buying_year": self.buying_year,
                "buying_price": self.buying_price,
                "interest_rate": self.interest_rate,
                "revaluation_rate": self.revaluation_rate,
                "will_be_sold": self.will_be_sold,
                "selling_year": self.selling_year,
            }
        )
        return data
