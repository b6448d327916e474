"""
Family: members, fiscal household and life expenses.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

from patrimoine.core.errors import ConfigError
from patrimoine.family.expenses import LifeExpenses
from patrimoine.family.person import Adult, AdultRandomProperties, Child, Person

if TYPE_CHECKING:
    from patrimoine.economy.human_life import HumanLifeModel

logger = logging.getLogger(__name__)


@dataclass
class Family:
    """
    Members of the family and their expenses.

    ``Family`` is the age provider injected into ownerships (demembrement
    lookups) and the fiscal household used for wealth taxes.

    Attributes:
        members: Adults and children, names unique
        expenses: Life expenses of the household
    """

    members: list[Person] = field(default_factory=list)
    expenses: LifeExpenses = field(default_factory=LifeExpenses)

    def __post_init__(self) -> None:
        names = [member.name for member in self.members]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ConfigError(f"Duplicate family member names: {duplicates}")

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    @property
    def adults(self) -> list[Adult]:
        return [member for member in self.members if isinstance(member, Adult)]

    @property
    def children(self) -> list[Child]:
        return [member for member in self.members if isinstance(member, Child)]

    @property
    def members_name(self) -> list[str]:
        return [member.name for member in self.members]

    @property
    def adults_name(self) -> list[str]:
        return [adult.name for adult in self.adults]

    @property
    def children_name(self) -> list[str]:
        return [child.name for child in self.children]

    def member(self, name: str) -> Person | None:
        for member in self.members:
            if member.name == name:
                return member
        return None

    def age_of(self, name: str, year: int) -> int | None:
        member = self.member(name)
        return member.age(year) if member is not None else None

    # ------------------------------------------------------------------
    # Life status
    # ------------------------------------------------------------------

    def adults_alive(self, year: int) -> list[Adult]:
        return [adult for adult in self.adults if adult.is_alive(year)]

    def adults_alive_name(self, year: int) -> list[str]:
        return [adult.name for adult in self.adults_alive(year)]

    def nb_of_adults_alive(self, year: int) -> int:
        return len(self.adults_alive(year))

    def children_alive(self, year: int) -> list[Child]:
        return [child for child in self.children if child.is_alive(year)]

    def nb_of_children_alive(self, year: int) -> int:
        return len(self.children_alive(year))

    def nb_of_fiscal_children(self, year: int) -> int:
        return sum(1 for child in self.children if child.is_fiscally_dependent(year))

    def spouse_of(self, adult: Adult) -> Adult | None:
        """The other adult of the family, dead or alive."""
        for other in self.adults:
            if other.name != adult.name:
                return other
        return None

    def deceased_adults(self, year: int) -> list[Adult]:
        """Adults dying during ``year``, the eldest first."""
        return sorted(
            (adult for adult in self.adults if adult.is_deceased(year)),
            key=lambda adult: adult.birth_year,
        )

    # ------------------------------------------------------------------
    # Fiscal household
    # ------------------------------------------------------------------

    def fiscal_household_sum(self, year: int, member_value: Callable[[str], float]) -> float:
        """Sum of ``member_value`` over the adults and the fiscally dependent children."""
        total = 0.0
        for member in self.members:
            if isinstance(member, Adult) or (
                isinstance(member, Child) and member.is_fiscally_dependent(year)
            ):
                total += member_value(member.name)
        return total

    # ------------------------------------------------------------------
    # Random properties
    # ------------------------------------------------------------------

    def next_random_properties(self, human_life: HumanLifeModel, current_year: int) -> None:
        """Draw new ages of death and dependency durations for the adults."""
        for adult in self.adults:
            adult.next_random_properties(human_life, current_year)
            logger.debug(
                "%s: age of death %d, %d years of dependency",
                adult.name,
                adult.age_of_death,
                adult.nb_of_years_of_dependency,
            )

    def adults_random_properties(self) -> dict[str, AdultRandomProperties]:
        return {adult.name: adult.random_properties for adult in self.adults}

    def set_random_properties(self, properties: dict[str, AdultRandomProperties]) -> None:
        for adult in self.adults:
            if adult.name not in properties:
                raise ConfigError(f"No random properties recorded for {adult.name}")
            adult.set_random_properties(properties[adult.name])

    def to_dict(self) -> dict[str, Any]:
        members = []
        for member in self.members:
            data = member.to_dict()
            data["role"] = "adult" if isinstance(member, Adult) else "child"
            members.append(data)
        return {"members": members, "expenses": self.expenses.to_records()}
