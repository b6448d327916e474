"""
Piecewise tax grids (barèmes).

Two evaluation modes live here and must not be mixed:

* ``RateGrid``: progressive grid of ``{floor, rate, disc}`` slices. The tax of
  an amount ``x`` is ``x * rate - disc`` for the last slice whose floor is
  ``<= x``, where ``disc`` is the cumulative discount computed once by
  ``initialize()``.
* ``ExonerationGrid``: holding-duration grid of
  ``{floor, discount_rate, prev_discount}`` slices returning an exoneration
  percentage accumulated slice by slice (``prev_discount + discount_rate *
  (duration - floor)``, clamped to 100%). The lookup is exclusive: the last
  slice whose floor is ``< duration``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from patrimoine.core.errors import (
    ConfigError,
    NegativeFloorError,
    NotInRightSliceError,
    SlicesNotAscendingError,
)


@dataclass
class RateSlice:
    """
    One slice of a progressive grid.

    Attributes:
        floor: Lower bound of the slice (euros)
        rate: Marginal rate of the slice (fraction, e.g. 0.11 for 11%)
        disc: Cumulative discount (euros), computed by ``RateGrid.initialize``
    """

    floor: float
    rate: float
    disc: float = 0.0

    def tax(self, taxable_value: float) -> float:
        """
        Tax due for an amount located in this slice.

        Raises:
            NotInRightSliceError: If ``taxable_value`` is below the slice floor
        """
        if taxable_value < self.floor:
            raise NotInRightSliceError(
                f"{taxable_value} is below the slice floor {self.floor}"
            )
        return taxable_value * self.rate - self.disc


@dataclass
class RateGrid:
    """
    Progressive tax grid used by IRPP, inheritance taxes and IFI.

    Example:
        ```python
        grid = RateGrid.from_records(
            [{"floor": 0, "rate": 0.0}, {"floor": 10_084, "rate": 0.11}]
        )
        grid.initialize()
        grid.tax(20_000)  # 20_000 * 0.11 - 10_084 * 0.11
        ```
    """

    slices: list[RateSlice] = field(default_factory=list)
    initialized: bool = False

    @classmethod
    def from_records(cls, records: list[dict[str, Any]]) -> RateGrid:
        return cls(
            slices=[
                RateSlice(
                    floor=float(rec["floor"]),
                    rate=float(rec["rate"]),
                    disc=float(rec.get("disc", 0.0)),
                )
                for rec in records
            ]
        )

    def to_records(self) -> list[dict[str, float]]:
        return [{"floor": s.floor, "rate": s.rate} for s in self.slices]

    def __len__(self) -> int:
        return len(self.slices)

    def __getitem__(self, idx: int) -> RateSlice:
        return self.slices[idx]

    def check_validity(self) -> None:
        """
        Verify the grid is usable.

        Raises:
            NegativeFloorError: If any floor is negative
            SlicesNotAscendingError: If floors are not strictly increasing
        """
        if not self.slices:
            raise ConfigError("A rate grid needs at least one slice")
        if any(s.floor < 0.0 for s in self.slices):
            raise NegativeFloorError("Rate grid floors must be >= 0")
        for prev, cur in zip(self.slices, self.slices[1:]):
            if cur.floor <= prev.floor:
                raise SlicesNotAscendingError(
                    f"Rate grid floors must be strictly ascending ({prev.floor} >= {cur.floor})"
                )

    def initialize(self) -> None:
        """Validate the grid and compute the cumulative discount of each slice."""
        self.check_validity()
        for idx, current in enumerate(self.slices):
            if idx == 0:
                current.disc = current.floor * current.rate
            else:
                prev = self.slices[idx - 1]
                current.disc = prev.disc + current.floor * (current.rate - prev.rate)
        self.initialized = True

    def slice_index(self, taxable_value: float) -> int | None:
        """Index of the last slice whose floor is ``<= taxable_value``."""
        found = None
        for idx, s in enumerate(self.slices):
            if s.floor <= taxable_value:
                found = idx
            else:
                break
        return found

    def slice_containing(self, taxable_value: float) -> RateSlice | None:
        idx = self.slice_index(taxable_value)
        return None if idx is None else self.slices[idx]

    def tax(self, taxable_value: float) -> float:
        """
        Tax due for ``taxable_value`` according to the grid.

        Raises:
            ConfigError: If the grid was not initialized
            NotInRightSliceError: If no slice covers ``taxable_value``
        """
        if not self.initialized:
            raise ConfigError("RateGrid.initialize() must be called before tax()")
        rate_slice = self.slice_containing(taxable_value)
        if rate_slice is None:
            raise NotInRightSliceError(
                f"{taxable_value} is below the lowest grid floor {self.slices[0].floor}"
            )
        return rate_slice.tax(taxable_value)


@dataclass
class ExonerationSlice:
    """
    One slice of a holding-duration exoneration grid.

    Attributes:
        floor: Holding duration (years) after which the slice applies
        discount_rate: Exoneration percentage gained per year beyond ``floor``
        prev_discount: Cumulated exoneration of the previous slices (%)
    """

    floor: int
    discount_rate: float
    prev_discount: float | None = None


@dataclass
class ExonerationGrid:
    """Holding-duration exoneration grid (real-estate capital gains)."""

    slices: list[ExonerationSlice] = field(default_factory=list)

    @classmethod
    def from_records(cls, records: list[dict[str, Any]]) -> ExonerationGrid:
        return cls(
            slices=[
                ExonerationSlice(
                    floor=int(rec["floor"]),
                    discount_rate=float(rec["discount_rate"]),
                    prev_discount=(
                        float(rec["prev_discount"])
                        if rec.get("prev_discount") is not None
                        else None
                    ),
                )
                for rec in records
            ]
        )

    def initialize(self) -> None:
        """
        Validate floors and derive each slice's cumulated previous discount.

        A ``prev_discount`` given in the configuration must match the value
        derived from the previous slices.
        """
        if not self.slices:
            raise ConfigError("An exoneration grid needs at least one slice")
        if any(s.floor < 0 for s in self.slices):
            raise NegativeFloorError("Exoneration grid floors must be >= 0")
        cumulated = 0.0
        for idx, current in enumerate(self.slices):
            if idx > 0:
                prev = self.slices[idx - 1]
                if current.floor <= prev.floor:
                    raise SlicesNotAscendingError(
                        f"Exoneration grid floors must be strictly ascending ({prev.floor} >= {current.floor})"
                    )
                cumulated += prev.discount_rate * (current.floor - prev.floor)
            cumulated = min(cumulated, 100.0)
            if current.prev_discount is not None and not math.isclose(
                current.prev_discount, cumulated, abs_tol=1e-6
            ):
                raise ConfigError(
                    f"Exoneration slice {current.floor}: prev_discount "
                    f"{current.prev_discount} does not match cumulated {cumulated}"
                )
            current.prev_discount = cumulated

    def discount(self, detention_duration: int) -> float:
        """Exoneration percentage [0, 100] for a holding duration in years."""
        found = None
        for s in self.slices:
            if s.floor < detention_duration:
                found = s
            else:
                break
        if found is None:
            return 0.0
        prev = found.prev_discount or 0.0
        return min(prev + found.discount_rate * (detention_duration - found.floor), 100.0)
