"""
Ownership structure of an asset or liability and its transfer at death.

An asset is either held in full ownership (``full_owners``) or dismembered
into usufruct (``usufruct_owners``) and bare ownership (``bare_owners``).
Each owner list sums to 100 % on its own.

**Transfer at death:**

The decedent's usufruct fraction ``U`` and bare fraction ``B`` are handed
to the heirs with the sharing of the spouse's fiscal option
(``FiscalOption.shares``): the spouse receives ``U * usufruct`` and
``B * bare`` of the spouse share, each child the child share. A full
ownership is first split into equal usufruct and bare fractions, so the
same rule covers every case. On a dismembered asset the decedent's usufruct
first extinguishes into the bare owners, proportionally to their bare
fractions. Shares are then regrouped and an asset whose usufruct and bare
owner lists coincide becomes a full ownership again.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from patrimoine.core.errors import OwnershipError
from patrimoine.core.kinds import EvaluationMethod
from patrimoine.fiscal.inheritance import FiscalOption
from patrimoine.ownership.clause import LifeInsuranceClause
from patrimoine.ownership.owner import Owner, Owners

if TYPE_CHECKING:
    from patrimoine.core.interfaces import PersonAgeProvider
    from patrimoine.fiscal.demembrement import DemembrementModel, DemembrementValues

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Ownership:
    """
    Attributes:
        full_owners: Full owners (non dismembered asset)
        usufruct_owners: Usufructuaries (dismembered asset)
        bare_owners: Bare owners (dismembered asset)
        is_dismembered: Whether usufruct and bare ownership are split
        age_provider: Ages of the owners, for the demembrement valuation
        demembrement_model: Usufruct / bare valuation grid
    """

    full_owners: Owners = field(default_factory=Owners)
    usufruct_owners: Owners = field(default_factory=Owners)
    bare_owners: Owners = field(default_factory=Owners)
    is_dismembered: bool = False
    age_provider: PersonAgeProvider | None = field(default=None, repr=False)
    demembrement_model: DemembrementModel | None = field(default=None, repr=False)

    @classmethod
    def full(cls, *pairs: tuple[str, float]) -> Ownership:
        return cls(full_owners=Owners.of(*pairs))

    @classmethod
    def dismembered(
        cls, usufruct: list[tuple[str, float]], bare: list[tuple[str, float]]
    ) -> Ownership:
        return cls(
            usufruct_owners=Owners.of(*usufruct),
            bare_owners=Owners.of(*bare),
            is_dismembered=True,
        )

    def bind(
        self,
        age_provider: PersonAgeProvider | None,
        demembrement_model: DemembrementModel | None,
    ) -> None:
        self.age_provider = age_provider
        self.demembrement_model = demembrement_model

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ownership):
            return NotImplemented
        return (
            self.is_dismembered == other.is_dismembered
            and self.full_owners == other.full_owners
            and self.usufruct_owners == other.usufruct_owners
            and self.bare_owners == other.bare_owners
        )

    def copy(self) -> Ownership:
        return Ownership(
            full_owners=self.full_owners.copy(),
            usufruct_owners=self.usufruct_owners.copy(),
            bare_owners=self.bare_owners.copy(),
            is_dismembered=self.is_dismembered,
            age_provider=self.age_provider,
            demembrement_model=self.demembrement_model,
        )

    def dismember(self) -> None:
        """Split each full owner's share into the same usufruct and bare shares."""
        self.usufruct_owners = self.full_owners.copy()
        self.bare_owners = self.full_owners.copy()
        self.full_owners = Owners()
        self.is_dismembered = True

    @property
    def is_valid(self) -> bool:
        if self.is_dismembered:
            return (
                bool(self.bare_owners)
                and self.bare_owners.is_valid
                and bool(self.usufruct_owners)
                and self.usufruct_owners.is_valid
            )
        return bool(self.full_owners) and self.full_owners.is_valid

    # ------------------------------------------------------------------
    # Valuation
    # ------------------------------------------------------------------

    def _usufructuary_age(self, name: str, year: int) -> int:
        if self.age_provider is None:
            raise OwnershipError("No age provider bound to a dismembered ownership")
        age = self.age_provider.age_of(name, year)
        if age is None:
            raise OwnershipError(f"Unknown age of usufructuary {name} in {year}")
        return age

    def _split(self, value: float, usufructuary: str, year: int) -> DemembrementValues:
        if self.demembrement_model is None:
            raise OwnershipError("No demembrement model bound to a dismembered ownership")
        return self.demembrement_model.demembrement(
            value, self._usufructuary_age(usufructuary, year)
        )

    def demembrement(self, total_value: float, year: int) -> tuple[float, float]:
        """
        Usufruct and bare values of the whole asset at the end of ``year``.

        Raises:
            OwnershipError: If the asset is not dismembered or invalid
        """
        if not self.is_dismembered:
            logger.error("Trying to split the value of a non dismembered asset")
            raise OwnershipError("Trying to dismember a non dismembered asset")
        if not self.is_valid:
            raise OwnershipError("Invalid ownership")
        usufruct_value = 0.0
        bare_value = 0.0
        for usufructuary in self.usufruct_owners:
            split = self._split(usufructuary.owned_value(total_value), usufructuary.name, year)
            usufruct_value += split.usufruct_value
            bare_value += split.bare_value
        return usufruct_value, bare_value

    def demembrement_percentage(self, year: int) -> tuple[float, float]:
        return self.demembrement(100.0, year)

    def owned_value(
        self, name: str, total_value: float, year: int, method: EvaluationMethod
    ) -> float:
        """
        Value of ``total_value`` owned by ``name``.

        A usufructuary pays the wealth tax on the full value of its share;
        otherwise a dismembered share is valued with the demembrement grid
        at the usufructuary's age.
        """
        if not self.is_dismembered:
            owner = self.full_owners.owner(name)
            return owner.owned_value(total_value) if owner is not None else 0.0

        if method.is_wealth_tax:
            owner = self.usufruct_owners.owner(name)
            return owner.owned_value(total_value) if owner is not None else 0.0

        value = 0.0
        bare_owner = self.bare_owners.owner(name)
        if bare_owner is not None:
            _, bare_value = self.demembrement(total_value, year)
            value += bare_owner.owned_value(bare_value)
        usufructuary = self.usufruct_owners.owner(name)
        if usufructuary is not None:
            value += self._split(
                usufructuary.owned_value(total_value), name, year
            ).usufruct_value
        return value

    def owned_values(
        self, total_value: float, year: int, method: EvaluationMethod
    ) -> dict[str, float]:
        names = (
            self.usufruct_owners.names + self.bare_owners.names
            if self.is_dismembered
            else self.full_owners.names
        )
        return {
            name: self.owned_value(name, total_value, year, method)
            for name in dict.fromkeys(names)
        }

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_an_usufruct_owner(self, name: str) -> bool:
        return self.is_dismembered and self.usufruct_owners.contains(name)

    def is_a_bare_owner(self, name: str) -> bool:
        return self.is_dismembered and self.bare_owners.contains(name)

    def is_a_full_owner(self, name: str) -> bool:
        return not self.is_dismembered and self.full_owners.contains(name)

    def receives_revenues(self, name: str) -> bool:
        return self.is_a_full_owner(name) or self.is_an_usufruct_owner(name)

    def has_an_owner(self, names: list[str]) -> bool:
        return any(
            self.is_a_full_owner(n) or self.is_an_usufruct_owner(n) or self.is_a_bare_owner(n)
            for n in names
        )

    def has_a_full_owner(self, names: list[str]) -> bool:
        return any(self.is_a_full_owner(n) for n in names)

    def is_fully_owned_partly_by(self, names: list[str]) -> bool:
        return not self.is_dismembered and self.has_a_full_owner(names)

    # ------------------------------------------------------------------
    # Transfer at death
    # ------------------------------------------------------------------

    def group_shares(self) -> None:
        if self.is_dismembered:
            self.full_owners = Owners()
            self.usufruct_owners.group_shares()
            self.bare_owners.group_shares()
            if self.usufruct_owners == self.bare_owners:
                self.full_owners = self.bare_owners
                self.usufruct_owners = Owners()
                self.bare_owners = Owners()
                self.is_dismembered = False
        else:
            self.full_owners.group_shares()
            self.usufruct_owners = Owners()
            self.bare_owners = Owners()

    def _extinguish_usufruct(self, decedent: str) -> None:
        share = self.usufruct_owners.remove(decedent)
        for bare_owner in list(self.bare_owners):
            self.usufruct_owners.append(
                Owner(bare_owner.name, share * bare_owner.fraction / 100.0)
            )

    def transfer_ownership_of(
        self,
        decedent: str,
        children: list[str] | None,
        spouse: str | None,
        spouse_fiscal_option: FiscalOption | None,
    ) -> None:
        """
        Hand the decedent's shares to the spouse and children.

        Raises:
            OwnershipError: If the ownership is invalid before or after the
                transfer, or a spouse and children survive without a fiscal
                option
        """
        if not self.is_valid:
            logger.error("Ownership transfer of %s on an invalid ownership", decedent)
            raise OwnershipError("Ownership transfer on an invalid ownership")

        children = list(children or [])
        if spouse is None and not children:
            return
        if not self.has_an_owner([decedent]):
            return

        if spouse is not None and children and spouse_fiscal_option is None:
            raise OwnershipError("A surviving spouse with children needs a fiscal option")

        if self.is_dismembered:
            if self.usufruct_owners.contains(decedent):
                self._extinguish_usufruct(decedent)
                self.usufruct_owners.group_shares()
        else:
            self.dismember()

        usufruct_share = self.usufruct_owners.remove(decedent)
        bare_share = self.bare_owners.remove(decedent)

        if spouse is None:
            for child in children:
                self.usufruct_owners.append(Owner(child, usufruct_share / len(children)))
                self.bare_owners.append(Owner(child, bare_share / len(children)))
        else:
            option = spouse_fiscal_option or FiscalOption.FULL_USUFRUCT
            sharing = option.shares(len(children))
            self.usufruct_owners.append(Owner(spouse, usufruct_share * sharing.for_spouse.usufruct))
            self.bare_owners.append(Owner(spouse, bare_share * sharing.for_spouse.bare))
            for child in children:
                self.usufruct_owners.append(Owner(child, usufruct_share * sharing.for_child.usufruct))
                self.bare_owners.append(Owner(child, bare_share * sharing.for_child.bare))

        self.group_shares()
        if not self.is_valid:
            logger.error("Ownership transfer of %s produced an invalid ownership", decedent)
            raise OwnershipError(f"Ownership transfer of {decedent} produced an invalid ownership")

    def transfer_life_insurance_of_decedent(
        self, decedent: str, clause: LifeInsuranceClause
    ) -> None:
        """
        Hand a life insurance over according to its beneficiary clause.

        A dismembered contract whose decedent is bare owner only is left
        unchanged.

        Raises:
            OwnershipError: Invalid ownership or clause, or several full owners
        """
        if not self.is_valid:
            raise OwnershipError("Life insurance transfer on an invalid ownership")

        if self.is_dismembered:
            if self.usufruct_owners.contains(decedent):
                if not self.bare_owners:
                    raise OwnershipError("No bare owner to receive the life insurance usufruct")
                self.full_owners = self.bare_owners.copy()
                self.usufruct_owners = Owners()
                self.bare_owners = Owners()
                self.is_dismembered = False
            elif self.bare_owners.contains(decedent):
                # bare ownership only: left unchanged
                logger.warning(
                    "Life insurance held in bare ownership by %s left unchanged", decedent
                )
        elif self.full_owners.contains(decedent):
            if len(self.full_owners) != 1:
                raise OwnershipError(
                    "Life insurance held in full ownership by several owners cannot be transferred"
                )
            if not clause.is_valid:
                raise OwnershipError(f"Invalid beneficiary clause {clause}")
            if clause.is_dismembered:
                share = 100.0 / len(clause.bare_recipients)
                self.full_owners = Owners()
                self.usufruct_owners = Owners([Owner(clause.usufruct_recipient, 100.0)])
                self.bare_owners = Owners([Owner(r, share) for r in clause.bare_recipients])
                self.is_dismembered = True
            else:
                share = 100.0 / len(clause.full_recipients)
                self.full_owners = Owners([Owner(r, share) for r in clause.full_recipients])
                self.usufruct_owners = Owners()
                self.bare_owners = Owners()
                self.is_dismembered = False

        self.group_shares()
        if not self.is_valid:
            raise OwnershipError(f"Life insurance transfer of {decedent} produced an invalid ownership")

    def to_dict(self) -> dict[str, Any]:
        if self.is_dismembered:
            return {
                "is_dismembered": True,
                "usufruct_owners": self.usufruct_owners.to_records(),
                "bare_owners": self.bare_owners.to_records(),
            }
        return {"is_dismembered": False, "full_owners": self.full_owners.to_records()}
