"""
Transfer of the ownership of every asset and liability of a deceased adult.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from patrimoine.family.family import Family
    from patrimoine.family.person import Adult
    from patrimoine.patrimoine import Patrimoine

logger = logging.getLogger(__name__)


@dataclass
class OwnershipManager:
    """
    Hands the decedent's shares over to the heirs alive at the end of the
    year of death: life insurance contracts by their beneficiary clause,
    then every other item with the spouse's fiscal option.
    """

    family: Family

    def transfer_life_insurances(self, patrimoine: Patrimoine, decedent: str) -> None:
        assets = patrimoine.assets
        for envelopes in (assets.periodic_invests, assets.free_invests):
            for idx in range(len(envelopes)):
                if envelopes[idx].is_life_insurance and envelopes[idx].ownership.has_an_owner([decedent]):
                    envelopes[idx].ownership.transfer_life_insurance_of_decedent(
                        decedent, envelopes[idx].investment_type.clause
                    )

    def transfer_ownership_of(self, patrimoine: Patrimoine, decedent: Adult, year: int) -> None:
        spouse_name = None
        spouse_fiscal_option = None
        spouse = self.family.spouse_of(decedent)
        if spouse is not None and spouse.is_alive(year):
            spouse_name = spouse.name
            spouse_fiscal_option = spouse.fiscal_option
        children = [child.name for child in self.family.children_alive(year)]

        logger.info(
            "Transfer of the patrimoine of %s in %d (spouse: %s, children: %s)",
            decedent.name,
            year,
            spouse_name,
            children,
        )
        self.transfer_life_insurances(patrimoine, decedent.name)
        patrimoine.transfer_ownership_of(decedent.name, children, spouse_name, spouse_fiscal_option)
