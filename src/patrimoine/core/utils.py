"""
Utility functions and small value types for patrimoine.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import NamedTuple

import pandas as pd


class PatrimoineWarning(UserWarning):
    """Warning for patrimoine configuration issues."""


# Global set to track warnings per object to avoid spam
_warned: set[tuple[str, str]] = set()


def warn_once(code: str, item: str, msg: str, *, category=PatrimoineWarning):
    """Warn once per (item, code) to avoid spam."""
    key = (item, code)
    if key not in _warned:
        _warned.add(key)
        warnings.warn(msg, category, stacklevel=3)


def zero_or_positive(value: float) -> float:
    """Return ``value`` if it is positive, else 0."""
    return value if value > 0.0 else 0.0


def clamp(value: float, low: float, high: float) -> float:
    """Clamp ``value`` into ``[low, high]``."""
    return max(low, min(value, high))


class NamedValue(NamedTuple):
    """A labelled amount, the unit of every reporting table."""

    name: str
    value: float


@dataclass
class NamedValueTable:
    """
    Ordered list of labelled amounts with a total.

    This is the reporting sink of the simulation loop: every revenue, tax,
    expense, asset or liability category of a yearly line is one table. The
    presentation layer only ever reads these tables (or their pandas form).

    Attributes:
        name: Label of the table (category name)
        named_values: Ordered labelled amounts
    """

    name: str = ""
    named_values: list[NamedValue] = field(default_factory=list)

    def append(self, name: str, value: float) -> None:
        self.named_values.append(NamedValue(name, value))

    def extend(self, values) -> None:
        for item in values:
            self.append(item[0], item[1])

    @property
    def total(self) -> float:
        return sum(nv.value for nv in self.named_values)

    @property
    def names(self) -> list[str]:
        return [nv.name for nv in self.named_values]

    def value_of(self, name: str) -> float:
        """Sum of the values recorded under ``name``."""
        return sum(nv.value for nv in self.named_values if nv.name == name)

    def to_series(self) -> pd.Series:
        """Return the table as a pandas Series indexed by label."""
        return pd.Series(
            [nv.value for nv in self.named_values],
            index=[nv.name for nv in self.named_values],
            name=self.name,
            dtype=float,
        )


@dataclass
class ModelVersion:
    """Version metadata carried by every model document."""

    name: str | None = None
    date: str | None = None
    comment: str | None = None
