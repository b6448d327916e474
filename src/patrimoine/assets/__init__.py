"""
Assets of the patrimoine and the financial formulas used to value them.
"""

from .assets import Assets
from .envelope import FinancialEnvelope
from .financial_math import future_value, loan_payment, residual_value
from .free_investment import FreeInvestment, Removal, State
from .investment_type import (
    ContractualRate,
    InterestRateType,
    InvestmentType,
    LifeInsurance,
    MarketRate,
    OtherInvestment,
    Pea,
)
from .periodic_investment import PeriodicInvestment, PeriodicLiquidation
from .real_estate import Liquidation, RealEstateAsset, Rent, YearPeriod
from .sci import SCI, SciCashFlow
from .scpi import SCPI, ScpiRevenue

__all__ = [
    "Assets",
    "ContractualRate",
    "FinancialEnvelope",
    "FreeInvestment",
    "InterestRateType",
    "InvestmentType",
    "LifeInsurance",
    "Liquidation",
    "MarketRate",
    "OtherInvestment",
    "Pea",
    "PeriodicInvestment",
    "PeriodicLiquidation",
    "RealEstateAsset",
    "Removal",
    "Rent",
    "SCI",
    "SCPI",
    "SciCashFlow",
    "ScpiRevenue",
    "State",
    "YearPeriod",
    "future_value",
    "loan_payment",
    "residual_value",
]
