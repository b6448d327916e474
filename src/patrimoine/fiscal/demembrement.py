"""
Legal valuation of usufruct and bare ownership by age of the usufructuary
(article 669 of the Code général des impôts).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, NamedTuple

from patrimoine.core.errors import (
    ConfigError,
    GridSliceIssueError,
    NegativeFloorError,
    OutOfBoundsError,
    SlicesNotAscendingError,
)
from patrimoine.core.utils import ModelVersion


class DemembrementSlice(NamedTuple):
    floor: int
    usufruct: float
    bare: float


class DemembrementValues(NamedTuple):
    usufruct_value: float
    bare_value: float


@dataclass
class DemembrementModel:
    """
    Age grid of usufruct / bare ownership percentages.

    The lookup takes the last slice whose floor is strictly below the age,
    except that age 0 falls in the first slice.
    """

    grid: list[DemembrementSlice] = field(default_factory=list)
    version: ModelVersion = field(default_factory=ModelVersion)

    @classmethod
    def from_records(cls, records: list[dict[str, Any]], **kwargs) -> DemembrementModel:
        return cls(
            grid=[
                DemembrementSlice(
                    int(rec["floor"]), float(rec["usufruct"]), float(rec["bare"])
                )
                for rec in records
            ],
            **kwargs,
        )

    def initialize(self) -> None:
        if not self.grid:
            raise ConfigError("The demembrement grid needs at least one slice")
        if any(s.floor < 0 for s in self.grid):
            raise NegativeFloorError("Demembrement grid floors must be >= 0")
        for prev, cur in zip(self.grid, self.grid[1:]):
            if cur.floor <= prev.floor:
                raise SlicesNotAscendingError(
                    f"Demembrement grid floors must be strictly ascending ({prev.floor} >= {cur.floor})"
                )
        for s in self.grid:
            if abs(s.usufruct + s.bare - 100.0) > 1e-9:
                raise ConfigError(
                    f"Demembrement slice {s.floor}: usufruct + bare must equal 100"
                )

    def slice_for(self, usufructuary_age: int) -> DemembrementSlice:
        if usufructuary_age < 0:
            raise OutOfBoundsError(f"Negative usufructuary age {usufructuary_age}")
        if usufructuary_age == 0:
            return self.grid[0]
        found = None
        for s in self.grid:
            if s.floor < usufructuary_age:
                found = s
            else:
                break
        if found is None:
            raise GridSliceIssueError(f"No demembrement slice for age {usufructuary_age}")
        return found

    def demembrement(self, asset_value: float, usufructuary_age: int) -> DemembrementValues:
        """
        Split ``asset_value`` into usufruct and bare ownership values.

        Raises:
            OutOfBoundsError: If ``usufructuary_age`` is negative
        """
        dem_slice = self.slice_for(usufructuary_age)
        return DemembrementValues(
            usufruct_value=asset_value * dem_slice.usufruct / 100.0,
            bare_value=asset_value * dem_slice.bare / 100.0,
        )
