"""
Life expenses of the family and the time spans over which they apply.

Time spans are a closed set of variants tagged by ``type`` in documents:

    ```yaml
    time_span: {type: permanent}
    time_span: {type: periodic, from_year: 2025, period: 5, to_year: 2045}
    time_span: {type: starting, from_year: 2030}
    time_span: {type: ending, to_year: 2030}
    time_span: {type: spanning, from_year: 2024, to_year: 2040}
    time_span: {type: exceptional, in_year: 2027}
    ```

``to_year`` bounds are exclusive.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

from patrimoine.core.utils import NamedValueTable

if TYPE_CHECKING:
    from patrimoine.family.family import Family


@dataclass(frozen=True)
class Permanent:
    kind = "permanent"

    def contains(self, year: int) -> bool:
        return True

    @property
    def is_valid(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind}


@dataclass(frozen=True)
class Periodic:
    """Every ``period`` years from ``from_year`` until ``to_year`` (excluded)."""

    from_year: int
    period: int
    to_year: int

    kind = "periodic"

    def contains(self, year: int) -> bool:
        if not self.is_valid:
            return False
        return self.from_year <= year < self.to_year and (year - self.from_year) % self.period == 0

    @property
    def is_valid(self) -> bool:
        return self.from_year < self.to_year and self.period > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind,
            "from_year": self.from_year,
            "period": self.period,
            "to_year": self.to_year,
        }


@dataclass(frozen=True)
class Starting:
    from_year: int

    kind = "starting"

    def contains(self, year: int) -> bool:
        return year >= self.from_year

    @property
    def is_valid(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "from_year": self.from_year}


@dataclass(frozen=True)
class Ending:
    to_year: int

    kind = "ending"

    def contains(self, year: int) -> bool:
        return year < self.to_year

    @property
    def is_valid(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "to_year": self.to_year}


@dataclass(frozen=True)
class Spanning:
    from_year: int
    to_year: int

    kind = "spanning"

    def contains(self, year: int) -> bool:
        return self.from_year <= year < self.to_year

    @property
    def is_valid(self) -> bool:
        return self.from_year < self.to_year

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "from_year": self.from_year, "to_year": self.to_year}


@dataclass(frozen=True)
class Exceptional:
    in_year: int

    kind = "exceptional"

    def contains(self, year: int) -> bool:
        return year == self.in_year

    @property
    def is_valid(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "in_year": self.in_year}


TimeSpan = Union[Permanent, Periodic, Starting, Ending, Spanning, Exceptional]

TIME_SPAN_TYPES: dict[str, type] = {
    cls.kind: cls for cls in (Permanent, Periodic, Starting, Ending, Spanning, Exceptional)
}


@dataclass
class LifeExpense:
    """
    One expense item.

    Attributes:
        name: Label of the expense
        value: Yearly amount (euros of today)
        proportional: Multiply by the number of fiscal household members
        time_span: Years during which the expense applies
        note: Free text
    """

    name: str
    value: float = 0.0
    proportional: bool = False
    time_span: TimeSpan = field(default_factory=Permanent)
    note: str = ""

    def value_during(self, year: int, family: Family, under_evaluation_rate: float = 0.0) -> float:
        """
        Amount spent during ``year``, raised by the expenses
        under-evaluation rate (%) of the socio-economic model.
        """
        if not self.time_span.contains(year):
            return 0.0
        correction = 1.0 + under_evaluation_rate / 100.0
        if self.proportional:
            nb_members = family.nb_of_adults_alive(year) + family.nb_of_fiscal_children(year)
            return self.value * correction * nb_members
        return self.value * correction

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "value": self.value,
            "proportional": self.proportional,
            "time_span": self.time_span.to_dict(),
            "note": self.note,
        }


@dataclass
class LifeExpenses:
    """Ordered list of life expenses."""

    items: list[LifeExpense] = field(default_factory=list)

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def named_value_table(
        self, year: int, family: Family, under_evaluation_rate: float = 0.0
    ) -> NamedValueTable:
        table = NamedValueTable(name="Dépenses de vie")
        for expense in self.items:
            table.append(expense.name, expense.value_during(year, family, under_evaluation_rate))
        return table

    def total(self, year: int, family: Family, under_evaluation_rate: float = 0.0) -> float:
        return self.named_value_table(year, family, under_evaluation_rate).total

    def to_records(self) -> list[dict[str, Any]]:
        return [expense.to_dict() for expense in self.items]
