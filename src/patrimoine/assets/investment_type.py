"""
Envelope and return variants of financial investments.

Both are closed sets of variants encoded with an explicit ``type``
discriminator:

    ```yaml
    type: {type: life_insurance, periodic_social_taxes: true,
           clause: {full_recipients: [Alice]}}
    type: {type: pea}
    interest_rate_type: {type: contractual, fixed_rate: 2.5}
    interest_rate_type: {type: market, stock_ratio: 60}
    ```
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from patrimoine.ownership.clause import LifeInsuranceClause


@dataclass(frozen=True)
class LifeInsurance:
    """
    Life insurance contract.

    Attributes:
        periodic_social_taxes: Social taxes are levied yearly on the interests
            (euro fund) instead of at withdrawal
        clause: Beneficiary clause applied at the subscriber's death
    """

    periodic_social_taxes: bool = True
    clause: LifeInsuranceClause = field(default_factory=LifeInsuranceClause)

    kind = "life_insurance"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind,
            "periodic_social_taxes": self.periodic_social_taxes,
            "clause": self.clause.to_dict(),
        }


@dataclass(frozen=True)
class Pea:
    """Plan d'épargne en actions: interests exempt from IRPP."""

    kind = "pea"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind}


@dataclass(frozen=True)
class OtherInvestment:
    """Any other taxable envelope (securities account, savings book)."""

    kind = "other"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind}


InvestmentType = Union[LifeInsurance, Pea, OtherInvestment]


@dataclass(frozen=True)
class ContractualRate:
    """Fixed nominal yearly rate (%)."""

    fixed_rate: float

    kind = "contractual"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "fixed_rate": self.fixed_rate}


@dataclass(frozen=True)
class MarketRate:
    """Mix of stocks (``stock_ratio`` %) and secured assets at market returns."""

    stock_ratio: float

    kind = "market"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "stock_ratio": self.stock_ratio}


InterestRateType = Union[ContractualRate, MarketRate]
