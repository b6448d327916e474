"""
Investment fed by constant yearly payments and liquidated at a fixed year.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NamedTuple

from patrimoine.assets.envelope import FinancialEnvelope
from patrimoine.assets.financial_math import future_value
from patrimoine.assets.investment_type import LifeInsurance, Pea


class PeriodicLiquidation(NamedTuple):
    revenue: float
    interests: float
    net_interests: float
    taxable_irpp_interests: float
    social_taxes: float


@dataclass
class PeriodicInvestment(FinancialEnvelope):
    """
    Periodic investment over ``[first_year, last_year]``.

    Attributes:
        yearly_payment: Yearly payment net of fees
        yearly_cost: Fees on payments
        first_year: First year of payment (value at the end of that year)
        last_year: Year of liquidation
        initial_value: Value at the end of ``first_year``
        initial_interest: Part of ``initial_value`` made of interests
    """

    yearly_payment: float = 0.0
    yearly_cost: float = 0.0
    first_year: int = 0
    last_year: int = 0
    initial_value: float = 0.0
    initial_interest: float = 0.0

    def is_active(self, year: int) -> bool:
        return self.first_year <= year <= self.last_year

    def yearly_total_payment(self, year: int) -> float:
        if not self.is_active(year):
            return 0.0
        return self.yearly_payment + self.yearly_cost

    def value(self, year: int) -> float:
        if not self.is_active(year):
            return 0.0
        return future_value(
            payment=self.yearly_payment,
            interest_rate=self.average_interest_rate_net / 100.0,
            nb_period=year - self.first_year,
            initial_value=self.initial_value,
        )

    def cumulated_interests(self, year: int) -> float:
        if not self.is_active(year):
            return 0.0
        paid = self.initial_value + self.yearly_payment * (year - self.first_year)
        return self.initial_interest + self.value(year) - paid

    def liquidated_value(self, year: int) -> PeriodicLiquidation:
        """
        Proceeds of the liquidation in ``last_year``.

        Interests bear social taxes unless already levied yearly (life
        insurance); PEA interests are exempt from IRPP.
        """
        if year != self.last_year:
            return PeriodicLiquidation(0.0, 0.0, 0.0, 0.0, 0.0)
        taxes = self.ctx.fiscal.financial_revenue_taxes
        interests = self.cumulated_interests(year)
        investment_type = self.investment_type
        if isinstance(investment_type, LifeInsurance):
            net_interests = (
                interests if investment_type.periodic_social_taxes else taxes.net(interests)
            )
            taxable = net_interests
        elif isinstance(investment_type, Pea):
            net_interests = taxes.net(interests)
            taxable = 0.0
        else:
            net_interests = taxes.net(interests)
            taxable = net_interests
        return PeriodicLiquidation(
            revenue=self.value(year),
            interests=interests,
            net_interests=net_interests,
            taxable_irpp_interests=taxable,
            social_taxes=interests - net_interests,
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "investment_type": self.investment_type.to_dict(),
                "interest_rate_type": self.interest_rate_type.to_dict(),
                "yearly_payment": self.yearly_payment,
                "yearly_cost": self.yearly_cost,
                "first_year": self.first_year,
                "last_year": self.last_year,
                "initial_value": self.initial_value,
                "initial_interest": self.initial_interest,
            }
        )
        return data
