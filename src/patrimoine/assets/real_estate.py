"""
Real estate asset: residence or rental property.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NamedTuple

from patrimoine.core.kinds import EvaluationMethod
from patrimoine.core.utils import zero_or_positive
from patrimoine.ownership.ownable import Ownable


class YearPeriod(NamedTuple):
    """Years ``[from_year, to_year)``; ``to_year`` is excluded."""

    from_year: int
    to_year: int

    def contains(self, year: int) -> bool:
        return self.from_year <= year < self.to_year


class Rent(NamedTuple):
    revenue: float
    taxable_irpp: float
    social_taxes: float


class Liquidation(NamedTuple):
    """Outcome of a sale in the selling year."""

    revenue: float
    capital_gain: float
    net_revenue: float
    social_taxes: float
    irpp: float


NO_LIQUIDATION = Liquidation(0.0, 0.0, 0.0, 0.0, 0.0)


@dataclass
class RealEstateAsset(Ownable):
    """
    Real estate property.

    The value is the estimated value when it is known, the buying price
    otherwise (no revaluation). The property is owned from ``buying_year``
    through ``selling_year`` included.

    **Wealth tax and succession discounts:**
        - Inhabited: IFI value reduced by 30 %, succession value by 20 %
        - Rented: IFI value reduced by 20 %

    Attributes:
        buying_year: Year of purchase
        buying_price: Purchase price
        estimated_value: Current estimate (0 if unknown)
        will_be_sold: Whether a sale is planned
        selling_year: Year of the sale, last year of ownership
        selling_net_price: Sale price net of fees
        inhabited: Years during which the family lives in it
        rented: Years during which it is rented
        monthly_rent: Rent received per month while rented
        yearly_habitation_tax: Housing tax paid while inhabited
        yearly_land_tax: Land tax paid while owned
    """

    buying_year: int = 0
    buying_price: float = 0.0
    estimated_value: float = 0.0
    will_be_sold: bool = False
    selling_year: int = 0
    selling_net_price: float = 0.0
    inhabited: YearPeriod | None = None
    rented: YearPeriod | None = None
    monthly_rent: float = 0.0
    yearly_habitation_tax: float = 0.0
    yearly_land_tax: float = 0.0

    IFI_RESIDENCE_DISCOUNT = 30.0
    IFI_RENTAL_DISCOUNT = 20.0
    INHERITANCE_RESIDENCE_DISCOUNT = 20.0

    def is_sold_before(self, year: int) -> bool:
        return self.will_be_sold and year > self.selling_year

    def is_owned(self, year: int) -> bool:
        return year >= self.buying_year and not self.is_sold_before(year)

    def is_inhabited(self, year: int) -> bool:
        return self.is_owned(year) and self.inhabited is not None and self.inhabited.contains(year)

    def is_rented(self, year: int) -> bool:
        return self.is_owned(year) and self.rented is not None and self.rented.contains(year)

    def value(self, year: int) -> float:
        if not self.is_owned(year):
            return 0.0
        return self.estimated_value if self.estimated_value != 0.0 else self.buying_price

    def ifi_value(self, year: int) -> float:
        value = self.value(year)
        if self.is_inhabited(year):
            return value * (1.0 - self.IFI_RESIDENCE_DISCOUNT / 100.0)
        if self.is_rented(year):
            return value * (1.0 - self.IFI_RENTAL_DISCOUNT / 100.0)
        return value

    def inheritance_value(self, year: int) -> float:
        value = self.value(year)
        if self.is_inhabited(year):
            return value * (1.0 - self.INHERITANCE_RESIDENCE_DISCOUNT / 100.0)
        return value

    def _evaluated_value(self, name: str, year: int, method: EvaluationMethod) -> float:
        if method.is_wealth_tax:
            return self.ifi_value(year)
        if method is EvaluationMethod.LEGAL_SUCCESSION:
            if self.ownership.is_an_usufruct_owner(name):
                return 0.0
            return self.inheritance_value(year)
        if method is EvaluationMethod.LIFE_INSURANCE_SUCCESSION:
            return 0.0
        return self.value(year)

    def yearly_local_taxes(self, year: int) -> float:
        """Land tax, plus housing tax unless the property is rented."""
        if not self.is_owned(year):
            return 0.0
        if self.is_rented(year):
            return self.yearly_land_tax
        return self.yearly_land_tax + self.yearly_habitation_tax

    def yearly_rent(self, year: int) -> Rent:
        if not self.is_rented(year):
            return Rent(0.0, 0.0, 0.0)
        revenue = self.monthly_rent * 12.0
        social_taxes = self.ctx.fiscal.financial_revenue_taxes.social_taxes(revenue)
        return Rent(revenue, revenue, social_taxes)

    def profitability(self, year: int) -> float:
        value = self.value(year)
        if value == 0.0:
            return 0.0
        return self.yearly_rent(year).revenue / value

    @property
    def selling_price_after_taxes(self) -> float:
        if not self.will_be_sold:
            return 0.0
        return self.liquidated_value(self.selling_year).net_revenue

    def liquidated_value(self, year: int) -> Liquidation:
        """Proceeds of the sale, taxed on the capital gain; only in the selling year."""
        if not (self.will_be_sold and year == self.selling_year):
            return NO_LIQUIDATION
        fiscal = self.ctx.fiscal
        detention = self.selling_year - self.buying_year
        capital_gain = self.selling_net_price - self.buying_price
        taxable_gain = zero_or_positive(capital_gain)
        social_taxes = fiscal.estate_capital_gain_taxes.social_taxes(taxable_gain, detention)
        irpp = fiscal.estate_capital_gain_irpp.irpp_on_capital_gain(taxable_gain, detention)
        return Liquidation(
            revenue=self.selling_net_price,
            capital_gain=capital_gain,
            net_revenue=self.selling_net_price - social_taxes - irpp,
            social_taxes=social_taxes,
            irpp=irpp,
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "buying_year": self.buying_year,
                "buying_price": self.buying_price,
                "estimated_value": self.estimated_value,
                "will_be_sold": self.will_be_sold,
                "selling_year": self.selling_year,
                "selling_net_price": self.selling_net_price,
                "inhabited": list(self.inhabited) if self.inhabited else None,
                "rented": list(self.rented) if self.rented else None,
                "monthly_rent": self.monthly_rent,
                "yearly_habitation_tax": self.yearly_habitation_tax,
                "yearly_land_tax": self.yearly_land_tax,
            }
        )
        return data
