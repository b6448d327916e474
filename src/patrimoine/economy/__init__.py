"""
Economic, sociological and demographic models built on random variables.
"""

from .economy import EconomyModel, EconomyVariable, FinancialRates
from .human_life import HumanLifeModel
from .randomizer import (
    BetaRandomGenerator,
    DiscreteRandomGenerator,
    ModelRandomizer,
    RandomGenerator,
)
from .socioeconomy import SocioEconomyModel, SocioEconomyVariable

__all__ = [
    "BetaRandomGenerator",
    "DiscreteRandomGenerator",
    "EconomyModel",
    "EconomyVariable",
    "FinancialRates",
    "HumanLifeModel",
    "ModelRandomizer",
    "RandomGenerator",
    "SocioEconomyModel",
    "SocioEconomyVariable",
]
