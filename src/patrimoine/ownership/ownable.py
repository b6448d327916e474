"""
Base class of every asset and liability held by family members.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable

from patrimoine.core.errors import ConfigError
from patrimoine.core.kinds import EvaluationMethod
from patrimoine.ownership.ownership import Ownership

if TYPE_CHECKING:
    from patrimoine.core.context import ValuationContext


@dataclass
class Ownable:
    """
    Named item of the patrimoine with an ownership structure.

    Subclasses implement ``value(year)``. The valuation context (economy
    providers, fiscal model, simulation mode) is bound by the owning
    ``Patrimoine``; items that need it read it through ``ctx``.

    Attributes:
        name: Display name, also the key used in reporting tables
        note: Free text
        ownership: Owners of the item
        context: Valuation context bound by the patrimoine
    """

    name: str
    note: str = ""
    ownership: Ownership = field(default_factory=Ownership)
    context: ValuationContext | None = field(default=None, repr=False, compare=False)

    @property
    def ctx(self) -> ValuationContext:
        if self.context is None:
            raise ConfigError(f"{self.name}: no valuation context bound")
        return self.context

    def bind(self, context: ValuationContext) -> None:
        self.context = context
        self.ownership.bind(context.age_provider, context.fiscal.demembrement)

    def value(self, year: int) -> float:
        """Value at the end of ``year``."""
        raise NotImplementedError

    def _evaluated_value(self, name: str, year: int, method: EvaluationMethod) -> float:
        if method is EvaluationMethod.LEGAL_SUCCESSION:
            # usufruct extinguishes at death
            if self.ownership.is_an_usufruct_owner(name):
                return 0.0
        elif method is EvaluationMethod.LIFE_INSURANCE_SUCCESSION:
            return 0.0
        return self.value(year)

    def owned_value(self, name: str, year: int, method: EvaluationMethod) -> float:
        """Part of the value owned by ``name`` at the end of ``year``."""
        evaluated = self._evaluated_value(name, year, method)
        if evaluated == 0.0:
            return 0.0
        return self.ownership.owned_value(name, evaluated, year, method)

    def owned_values(self, year: int, method: EvaluationMethod) -> dict[str, float]:
        names = (
            self.ownership.bare_owners.names + self.ownership.usufruct_owners.names
            if self.ownership.is_dismembered
            else self.ownership.full_owners.names
        )
        return {name: self.owned_value(name, year, method) for name in dict.fromkeys(names)}

    def provides_revenue_to(self, names: Iterable[str]) -> bool:
        return any(self.ownership.receives_revenues(n) for n in names)

    def is_fully_owned_by(self, names: Iterable[str]) -> bool:
        return self.ownership.has_a_full_owner(list(names))

    def is_part_of_patrimoine_of(self, names: Iterable[str]) -> bool:
        return self.ownership.has_an_owner(list(names))

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "note": self.note, "ownership": self.ownership.to_dict()}


def sum_of_owned_values(
    items: Iterable[Ownable], name: str, year: int, method: EvaluationMethod
) -> float:
    return sum(item.owned_value(name, year, method) for item in items)


def sum_of_values(items: Iterable[Ownable], year: int) -> float:
    return sum(item.value(year) for item in items)
