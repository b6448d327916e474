"""
Results of a succession: who inherits what, and the taxes paid.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Iterable, NamedTuple

import pandas as pd


class Inheritance(NamedTuple):
    """
    Share of an estate received by one heir.

    Attributes:
        person_name: Heir
        percent: Fraction of the taxable estate received, in [0, 1]
        brut: Amount received before inheritance taxes
        net: Amount received after inheritance taxes
        tax: Inheritance taxes paid
    """

    person_name: str
    percent: float
    brut: float
    net: float
    tax: float


@dataclass
class Succession:
    """
    Attributes:
        year_of_death: Year of the death
        decedent_name: Deceased adult
        taxable_value: Value of the estate at the end of the previous year
        inheritances: One entry per heir
    """

    year_of_death: int
    decedent_name: str
    taxable_value: float
    inheritances: list[Inheritance] = field(default_factory=list)

    @property
    def brut(self) -> float:
        return sum(inheritance.brut for inheritance in self.inheritances)

    @property
    def net(self) -> float:
        return sum(inheritance.net for inheritance in self.inheritances)

    @property
    def tax(self) -> float:
        return sum(inheritance.tax for inheritance in self.inheritances)

    @property
    def successors_inherited_net_value(self) -> dict[str, float]:
        values: dict[str, float] = defaultdict(float)
        for inheritance in self.inheritances:
            values[inheritance.person_name] += inheritance.net
        return dict(values)

    def to_dict(self) -> dict[str, Any]:
        return {
            "year_of_death": self.year_of_death,
            "decedent_name": self.decedent_name,
            "taxable_value": self.taxable_value,
            "inheritances": [inheritance._asdict() for inheritance in self.inheritances],
        }


def successors_inherited_net_value(successions: Iterable[Succession]) -> dict[str, float]:
    """Net amounts inherited by each heir over several successions."""
    values: dict[str, float] = defaultdict(float)
    for succession in successions:
        for name, net in succession.successors_inherited_net_value.items():
            values[name] += net
    return dict(values)


def successions_frame(successions: Iterable[Succession]) -> pd.DataFrame:
    """One row per (succession, heir), with the estate columns repeated."""
    rows = []
    for succession in successions:
        for inheritance in succession.inheritances:
            rows.append(
                {
                    "year_of_death": succession.year_of_death,
                    "decedent_name": succession.decedent_name,
                    "taxable_value": succession.taxable_value,
                    **inheritance._asdict(),
                }
            )
    columns = ["year_of_death", "decedent_name", "taxable_value", *Inheritance._fields]
    return pd.DataFrame(rows, columns=columns)
