"""
Legal succession: sharing of the estate between the surviving spouse and
the children, and the inheritance taxes of the children.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from patrimoine.fiscal.inheritance import InheritanceDonationModel
from patrimoine.succession.succession import Inheritance, Succession

if TYPE_CHECKING:
    from patrimoine.family.family import Family
    from patrimoine.family.person import Adult
    from patrimoine.fiscal.fiscal_model import FiscalModel
    from patrimoine.patrimoine import Patrimoine

logger = logging.getLogger(__name__)


@dataclass
class LegalSuccessionManager:
    """
    Computes the legal succession of a deceased adult.

    The estate is valued at the end of the year preceding the death. A
    surviving spouse receives the share given by the fiscal option she or
    he chose, untaxed; the children share the rest equally and are taxed on
    their part. Without spouse the children share the whole estate.

    Attributes:
        family: Family of the decedent
        fiscal: Fiscal model (inheritance taxes and demembrement grid)
    """

    family: Family
    fiscal: FiscalModel

    def surviving_spouse(self, decedent: Adult, year: int) -> Adult | None:
        for adult in self.family.adults_alive(year):
            if adult.name != decedent.name:
                return adult
        return None

    def legal_succession(self, patrimoine: Patrimoine, decedent: Adult, year: int) -> Succession:
        """
        Succession of ``decedent`` who died during ``year``.

        Ownership is left untouched; the transfer is a separate step.
        """
        taxable_value = patrimoine.taxable_inheritance_value(decedent.name, year - 1)
        children = self.family.children_alive(year)
        nb_children = len(children)
        inheritances: list[Inheritance] = []

        spouse = self.surviving_spouse(decedent, year)
        if spouse is not None:
            shares = spouse.fiscal_option.shared_values(
                nb_children, spouse.age(year), self.fiscal.demembrement
            )
            brut = taxable_value * shares.for_spouse
            inheritances.append(
                Inheritance(spouse.name, shares.for_spouse, brut, brut, 0.0)
            )
            child_share = shares.for_child
        elif nb_children > 0:
            child_share = InheritanceDonationModel.child_share(nb_children)
        else:
            logger.info("No heir for the succession of %s in %d", decedent.name, year)
            return Succession(year, decedent.name, taxable_value, inheritances)

        for child in children:
            brut = taxable_value * child_share
            taxed = self.fiscal.inheritance_donation.heritage_of_child(brut)
            inheritances.append(
                Inheritance(child.name, child_share, brut, taxed.net_amount, taxed.tax)
            )
        return Succession(year, decedent.name, taxable_value, inheritances)
