"""
Inheritance and donation taxes, and the spouse's fiscal options.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple

from patrimoine.core.errors import GridSliceIssueError
from patrimoine.core.utils import ModelVersion, zero_or_positive
from patrimoine.fiscal.demembrement import DemembrementModel
from patrimoine.fiscal.rate_grid import RateGrid


class TaxedAmount(NamedTuple):
    net_amount: float
    tax: float


class HeirShare(NamedTuple):
    usufruct: float
    bare: float


class InheritanceSharing(NamedTuple):
    for_child: HeirShare
    for_spouse: HeirShare


class SharedValues(NamedTuple):
    for_child: float
    for_spouse: float


class FiscalOption(Enum):
    """Option chosen by the surviving spouse when children survive too."""

    FULL_USUFRUCT = "full_usufruct"
    QUOTITE_DISPONIBLE = "quotite_disponible"
    USUFRUCT_PLUS_BARE = "usufruct_plus_bare"

    def shared_values(
        self, nb_children: int, spouse_age: int, demembrement: DemembrementModel
    ) -> SharedValues:
        """
        Fraction of the estate value received by each child and the spouse.

        The usufruct options are valued with the demembrement grid at the
        spouse's age. The spouse receives everything when there is no child.
        """
        if nb_children == 0:
            return SharedValues(for_child=0.0, for_spouse=1.0)
        if self is FiscalOption.FULL_USUFRUCT:
            values = demembrement.demembrement(1.0, spouse_age)
            return SharedValues(
                for_child=values.bare_value / nb_children,
                for_spouse=values.usufruct_value,
            )
        if self is FiscalOption.QUOTITE_DISPONIBLE:
            spouse_share = 1.0 / (nb_children + 1)
            return SharedValues(
                for_child=(1.0 - spouse_share) / nb_children, for_spouse=spouse_share
            )
        values = demembrement.demembrement(1.0, spouse_age)
        spouse_share = 0.25 + 0.75 * values.usufruct_value
        return SharedValues(
            for_child=(1.0 - spouse_share) / nb_children, for_spouse=spouse_share
        )

    def shares(self, nb_children: int) -> InheritanceSharing:
        """Usufruct and bare ownership fractions received by each heir."""
        if nb_children == 0:
            return InheritanceSharing(
                for_child=HeirShare(0.0, 0.0), for_spouse=HeirShare(1.0, 1.0)
            )
        if self is FiscalOption.FULL_USUFRUCT:
            return InheritanceSharing(
                for_child=HeirShare(0.0, 1.0 / nb_children),
                for_spouse=HeirShare(1.0, 0.0),
            )
        if self is FiscalOption.QUOTITE_DISPONIBLE:
            spouse_share = 1.0 / (nb_children + 1)
            child_share = (1.0 - spouse_share) / nb_children
            return InheritanceSharing(
                for_child=HeirShare(child_share, child_share),
                for_spouse=HeirShare(spouse_share, spouse_share),
            )
        return InheritanceSharing(
            for_child=HeirShare(0.0, 0.75 / nb_children),
            for_spouse=HeirShare(1.0, 0.25),
        )


@dataclass
class InheritanceDonationModel:
    """
    Direct line inheritance and donation to spouse taxes.

    Attributes:
        grid_ligne_directe: Progressive grid shared by inheritances and donations
        abat_ligne_directe: Allowance per child (euros)
        abat_conjoint: Allowance on a donation to the spouse (euros)
        frais_funeraires: Funeral expenses deductible from the estate (euros)
        decote_residence: Discount on the main residence value (%)
    """

    grid_ligne_directe: RateGrid
    abat_ligne_directe: float = 100_000.0
    abat_conjoint: float = 80_724.0
    frais_funeraires: float = 1_500.0
    decote_residence: float = 20.0
    version: ModelVersion = field(default_factory=ModelVersion)

    def initialize(self) -> None:
        self.grid_ligne_directe.initialize()

    @staticmethod
    def child_share(nb_children: int) -> float:
        if nb_children <= 0:
            return 0.0
        return 1.0 / nb_children

    def _taxed(self, amount: float, allowance: float) -> TaxedAmount:
        # bases are kept to the cent so a share equal to the allowance is untaxed
        taxable = zero_or_positive(round(amount - allowance, 2))
        tax_slice = self.grid_ligne_directe.slice_containing(taxable)
        if tax_slice is None:
            raise GridSliceIssueError(f"Inheritance grid does not cover {taxable}")
        tax = tax_slice.tax(taxable)
        return TaxedAmount(amount - tax, tax)

    def heritage_of_child(self, part_succession: float) -> TaxedAmount:
        """Net amount and tax of a child's share of an estate."""
        return self._taxed(part_succession, self.abat_ligne_directe)

    def donation_to_spouse(self, donation: float) -> TaxedAmount:
        """Net amount and tax of a donation to the spouse."""
        return self._taxed(donation, self.abat_conjoint)


@dataclass
class LifeInsuranceInheritanceModel:
    """Taxation of life insurance capital transmitted at death."""

    grid: RateGrid
    version: ModelVersion = field(default_factory=ModelVersion)

    def initialize(self) -> None:
        self.grid.initialize()

    def heritage_of_child(self, part_succession: float) -> TaxedAmount:
        tax_slice = self.grid.slice_containing(part_succession)
        if tax_slice is None:
            raise GridSliceIssueError(
                f"Life insurance inheritance grid does not cover {part_succession}"
            )
        tax = tax_slice.tax(part_succession)
        return TaxedAmount(part_succession - tax, tax)

    @staticmethod
    def heritage_to_conjoint(part_succession: float) -> TaxedAmount:
        return TaxedAmount(part_succession, 0.0)


@dataclass
class LifeInsuranceTaxes:
    """Yearly allowance on the interests withdrawn from a life insurance."""

    rebate_per_person: float = 4_800.0
    version: ModelVersion = field(default_factory=ModelVersion)
