"""
Real-estate capital gain taxation.

The gain is taxed twice, once at the flat IRPP rate and once by the social
levies, each with its own holding-duration exoneration grid. A flat works
allowance is deducted from the gain after ``discount_after`` years.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from patrimoine.core.utils import ModelVersion
from patrimoine.fiscal.rate_grid import ExonerationGrid


@dataclass
class RealEstateCapitalGainIrppModel:
    """
    IRPP part of the real-estate capital gain tax (19 %).

    Attributes:
        exo_grid: Exoneration per holding duration
        irpp: Flat rate (%)
        discount_travaux: Flat works allowance (% of the gain)
        discount_after: Holding years after which the works allowance applies
    """

    exo_grid: ExonerationGrid
    irpp: float = 19.0
    discount_travaux: float = 15.0
    discount_after: int = 5
    version: ModelVersion = field(default_factory=ModelVersion)

    def initialize(self) -> None:
        self.exo_grid.initialize()

    def works_allowance(self, detention_duration: int) -> float:
        return self.discount_travaux if detention_duration >= self.discount_after else 0.0

    def irpp_on_capital_gain(self, capital_gain: float, detention_duration: int) -> float:
        if capital_gain <= 0.0:
            return 0.0
        discount = self.exo_grid.discount(detention_duration)
        travaux = self.works_allowance(detention_duration)
        return (
            capital_gain
            * (1.0 - travaux / 100.0)
            * (1.0 - discount / 100.0)
            * self.irpp
            / 100.0
        )


@dataclass
class RealEstateCapitalGainTaxesModel:
    """Social levies part of the real-estate capital gain tax (17.2 %)."""

    exo_grid: ExonerationGrid
    crds: float = 0.5
    csg: float = 9.2
    prelev_social: float = 7.5
    discount_travaux: float = 15.0
    discount_after: int = 5
    version: ModelVersion = field(default_factory=ModelVersion)

    @property
    def total(self) -> float:
        return self.crds + self.csg + self.prelev_social

    def initialize(self) -> None:
        self.exo_grid.initialize()

    def social_taxes(self, capital_gain: float, detention_duration: int) -> float:
        if capital_gain <= 0.0:
            return 0.0
        discount = self.exo_grid.discount(detention_duration)
        travaux = self.discount_travaux if detention_duration >= self.discount_after else 0.0
        return (
            capital_gain
            * (1.0 - travaux / 100.0)
            * (1.0 - discount / 100.0)
            * self.total
            / 100.0
        )
