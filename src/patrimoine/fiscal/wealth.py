"""
Wealth tax (IFI, formerly ISF) on the household's taxable real-estate assets.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple

from patrimoine.core.errors import GridSliceIssueError
from patrimoine.core.utils import ModelVersion
from patrimoine.fiscal.rate_grid import RateGrid


class Isf(NamedTuple):
    amount: float
    taxable: float
    marginal_rate: float


@dataclass
class IsfModel:
    """
    IFI model.

    Nothing is due up to ``seuil``. Above it, the grid tax is reduced by the
    smoothing discount ``max(decote_euro - x * decote_coef / 100, 0)`` which
    vanishes at ``seuil2 = decote_euro / (decote_coef / 100)``.

    Attributes:
        grid: Progressive grid
        seuil: Taxation threshold (euros)
        decote_euro: Smoothing discount constant (euros)
        decote_coef: Smoothing discount coefficient (%)
        decote_residence: Discount on the main residence value (%)
        decote_location: Discount on a rented property value (%)
        decote_indivision: Discount on a jointly-owned property value (%)
    """

    grid: RateGrid
    seuil: float = 1_300_000.0
    decote_euro: float = 17_500.0
    decote_coef: float = 1.25
    decote_residence: float = 30.0
    decote_location: float = 20.0
    decote_indivision: float = 30.0
    seuil2: float = 0.0
    version: ModelVersion = field(default_factory=ModelVersion)

    def initialize(self) -> None:
        self.grid.initialize()
        self.seuil2 = self.decote_euro / (self.decote_coef / 100.0)

    def isf(self, taxable_asset: float) -> Isf:
        """
        Wealth tax due on ``taxable_asset``.

        Raises:
            GridSliceIssueError: If the grid does not cover the amount
        """
        if taxable_asset <= self.seuil:
            return Isf(0.0, 0.0, 0.0)
        isf_slice = self.grid.slice_containing(taxable_asset)
        if isf_slice is None:
            raise GridSliceIssueError(f"IFI grid does not cover {taxable_asset}")
        amount = isf_slice.tax(taxable_asset)
        amount -= max(self.decote_euro - taxable_asset * self.decote_coef / 100.0, 0.0)
        return Isf(amount, taxable_asset, isf_slice.rate)
