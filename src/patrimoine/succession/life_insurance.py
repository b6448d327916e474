"""
Succession of the life insurance contracts of a deceased adult.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

from patrimoine.core.kinds import EvaluationMethod
from patrimoine.family.person import Adult
from patrimoine.succession.succession import Inheritance, Succession

if TYPE_CHECKING:
    from patrimoine.assets.envelope import FinancialEnvelope
    from patrimoine.family.family import Family
    from patrimoine.fiscal.fiscal_model import FiscalModel
    from patrimoine.patrimoine import Patrimoine

METHOD = EvaluationMethod.LIFE_INSURANCE_SUCCESSION


@dataclass
class LifeInsuranceSuccessionManager:
    """
    Capital transmitted by the beneficiary clauses of the decedent's life
    insurance contracts.

    Only contracts held in full ownership by the decedent alone produce a
    transmitted mass; the clause is applied to a copy of the ownership and
    the resulting owned values give each beneficiary's mass. Spouses are
    exempt, children are taxed with the life insurance grid.

    Attributes:
        family: Family of the decedent
        fiscal: Fiscal model (life insurance inheritance taxes)
    """

    family: Family
    fiscal: FiscalModel

    @staticmethod
    def succession_masses(
        envelopes: Iterable[FinancialEnvelope], decedent: str, year: int
    ) -> dict[str, float]:
        """Mass received by each beneficiary, valued at the end of ``year``."""
        masses: dict[str, float] = defaultdict(float)
        for envelope in envelopes:
            if not envelope.is_life_insurance:
                continue
            if envelope.owned_value(decedent, year, METHOD) == 0.0:
                continue
            ownership = envelope.ownership
            if ownership.is_dismembered or not ownership.full_owners.contains(decedent):
                continue
            transferred = ownership.copy()
            transferred.transfer_life_insurance_of_decedent(
                decedent, envelope.investment_type.clause
            )
            total = envelope.value(year)
            for name, value in transferred.owned_values(total, year, METHOD).items():
                masses[name] += value
        return dict(masses)

    def life_insurance_succession(
        self, patrimoine: Patrimoine, decedent: Adult, year: int
    ) -> Succession:
        taxable_value = patrimoine.taxable_life_insurance_inheritance_value(decedent.name, year - 1)
        assets = patrimoine.assets
        masses = self.succession_masses(
            (*assets.free_invests, *assets.periodic_invests), decedent.name, year - 1
        )
        taxes = self.fiscal.life_insurance_inheritance
        inheritances: list[Inheritance] = []
        for member in self.family.members:
            if member.name == decedent.name or member.name not in masses:
                continue
            mass = masses[member.name]
            if isinstance(member, Adult):
                taxed = taxes.heritage_to_conjoint(mass)
            else:
                taxed = taxes.heritage_of_child(mass)
            percent = mass / taxable_value if taxable_value else 0.0
            inheritances.append(Inheritance(member.name, percent, mass, taxed.net_amount, taxed.tax))
        return Succession(year, decedent.name, taxable_value, inheritances)
