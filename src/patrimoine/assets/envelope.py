"""
Common behaviour of financial envelopes (periodic and free investments).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from patrimoine.assets.investment_type import (
    ContractualRate,
    InterestRateType,
    InvestmentType,
    LifeInsurance,
    MarketRate,
    OtherInvestment,
)
from patrimoine.core.kinds import EvaluationMethod
from patrimoine.economy.economy import FinancialRates
from patrimoine.ownership.ownable import Ownable


@dataclass
class FinancialEnvelope(Ownable):
    """
    Investment held in an envelope with a contractual or market return.

    Returns are real returns: the inflation of the run is subtracted from
    the nominal rate. A life insurance whose social taxes are levied yearly
    grows at the rate net of social taxes.

    Attributes:
        investment_type: Envelope (life insurance, PEA, other)
        interest_rate_type: Contractual or market return
    """

    investment_type: InvestmentType = field(default_factory=OtherInvestment)
    interest_rate_type: InterestRateType = field(default_factory=lambda: ContractualRate(0.0))

    @property
    def is_life_insurance(self) -> bool:
        return isinstance(self.investment_type, LifeInsurance)

    def _real_rate(self, rates: FinancialRates) -> float:
        ctx = self.ctx
        inflation = ctx.economy.inflation_rate(ctx.mode)
        rate_type = self.interest_rate_type
        if isinstance(rate_type, ContractualRate):
            return rate_type.fixed_rate - inflation
        if isinstance(rate_type, MarketRate):
            stock = rate_type.stock_ratio / 100.0
            return stock * rates.stock_rate + (1.0 - stock) * rates.secured_rate - inflation
        raise TypeError(f"Unknown interest rate type {rate_type!r}")

    def _net_of_periodic_taxes(self, rate: float) -> float:
        if isinstance(self.investment_type, LifeInsurance) and self.investment_type.periodic_social_taxes:
            return self.ctx.fiscal.financial_revenue_taxes.net(rate)
        return rate

    @property
    def average_interest_rate(self) -> float:
        """Long-run real rate (%) before periodic social taxes."""
        ctx = self.ctx
        return self._real_rate(ctx.economy.rates(ctx.mode))

    @property
    def average_interest_rate_net(self) -> float:
        """Long-run real rate (%) after periodic social taxes."""
        return self._net_of_periodic_taxes(self.average_interest_rate)

    def interest_rate_net(self, year: int) -> float:
        """Real rate (%) of ``year``, sampled when volatility is simulated."""
        ctx = self.ctx
        return self._net_of_periodic_taxes(self._real_rate(ctx.economy.rates(ctx.mode, year)))

    def _evaluated_value(self, name: str, year: int, method: EvaluationMethod) -> float:
        if method is EvaluationMethod.LEGAL_SUCCESSION:
            # life insurance is outside the estate
            if self.is_life_insurance or self.ownership.is_an_usufruct_owner(name):
                return 0.0
        elif method is EvaluationMethod.LIFE_INSURANCE_SUCCESSION:
            if not self.is_life_insurance:
                return 0.0
        return self.value(year)
