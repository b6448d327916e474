"""
Owners of an asset or liability and their fractions.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator

from patrimoine.core.errors import OwnershipError

FRACTION_TOLERANCE = 1e-4


@dataclass
class Owner:
    """
    An owner and its share.

    Attributes:
        name: Name of the person
        fraction: Owned share in percent [0, 100]
    """

    name: str
    fraction: float

    @property
    def is_valid(self) -> bool:
        return self.name != ""

    def owned_value(self, total_value: float) -> float:
        return total_value * self.fraction / 100.0

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "fraction": self.fraction}


@dataclass(eq=False)
class Owners:
    """
    List of owners whose fractions sum to 100 %.

    Equality ignores the order and compares fractions within
    ``FRACTION_TOLERANCE``.
    """

    owners: list[Owner] = field(default_factory=list)

    @classmethod
    def of(cls, *pairs: tuple[str, float]) -> Owners:
        return cls([Owner(name, fraction) for name, fraction in pairs])

    def __iter__(self) -> Iterator[Owner]:
        return iter(self.owners)

    def __len__(self) -> int:
        return len(self.owners)

    def __bool__(self) -> bool:
        return bool(self.owners)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Owners):
            return NotImplemented
        for lhs, rhs in ((self, other), (other, self)):
            for owner in lhs:
                found = rhs.owner(owner.name)
                if found is None or not math.isclose(
                    found.fraction, owner.fraction, abs_tol=FRACTION_TOLERANCE
                ):
                    return False
        return True

    def copy(self) -> Owners:
        return Owners([Owner(o.name, o.fraction) for o in self.owners])

    def append(self, owner: Owner) -> None:
        self.owners.append(owner)

    @property
    def sum_of_owned_fractions(self) -> float:
        return sum(o.fraction for o in self.owners)

    @property
    def percentage_ok(self) -> bool:
        return math.isclose(self.sum_of_owned_fractions, 100.0, abs_tol=FRACTION_TOLERANCE)

    @property
    def is_valid(self) -> bool:
        if not self.owners:
            return True
        return all(o.is_valid for o in self.owners) and self.percentage_ok

    @property
    def names(self) -> list[str]:
        return [o.name for o in self.owners]

    def owner(self, name: str) -> Owner | None:
        for o in self.owners:
            if o.name == name:
                return o
        return None

    def contains(self, name: str) -> bool:
        return self.owner(name) is not None

    def fraction_of(self, name: str) -> float:
        return sum(o.fraction for o in self.owners if o.name == name)

    def remove(self, name: str) -> float:
        """Remove ``name`` and return the fraction it held."""
        fraction = self.fraction_of(name)
        self.owners = [o for o in self.owners if o.name != name]
        return fraction

    def replace(self, name: str, new_owners: Iterable[str]) -> None:
        """
        Give the share of ``name`` to ``new_owners`` in equal parts.

        Raises:
            OwnershipError: If there is no new owner or ``name`` owns nothing
        """
        new_owners = list(new_owners)
        if not new_owners:
            raise OwnershipError("No new owner to replace an owner with")
        if not self.contains(name):
            raise OwnershipError(f"{name} is not an owner")
        share = self.remove(name)
        for new_owner in new_owners:
            self.owners.append(Owner(new_owner, share / len(new_owners)))
        self.group_shares()

    def group_shares(self) -> None:
        """Merge the shares of a same owner and drop null shares (first-seen order)."""
        totals: dict[str, float] = {}
        for o in self.owners:
            totals[o.name] = totals.get(o.name, 0.0) + o.fraction
        self.owners = [Owner(name, fraction) for name, fraction in totals.items() if fraction != 0.0]

    def to_records(self) -> list[dict[str, Any]]:
        return [o.to_dict() for o in self.owners]
