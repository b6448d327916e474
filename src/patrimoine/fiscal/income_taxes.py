"""
Income tax (IRPP) model with the family quotient cap rule.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple

from patrimoine.core.errors import GridSliceIssueError, OutOfBoundsError
from patrimoine.core.utils import ModelVersion, clamp, zero_or_positive
from patrimoine.family.work_income import SalaryIncome, TurnoverIncome, WorkIncome
from patrimoine.fiscal.rate_grid import RateGrid


class Irpp(NamedTuple):
    amount: float
    family_quotient: float
    marginal_rate: float
    average_rate: float


class IrppSlice(NamedTuple):
    """Breakdown of one grid slice for reporting."""

    size: float
    size_with_children: float
    size_without_children: float
    rate: float
    irpp_max: float
    irpp_with_children: float
    irpp_without_children: float


@dataclass
class IncomeTaxesModel:
    """
    French income tax (IRPP).

    The tax is computed on ``taxable_income / Q`` where ``Q`` is the family
    quotient, then multiplied back by ``Q``. The benefit brought by the
    children's parts is capped at ``child_rebate`` per half part: when the
    uncapped gain over the adults-only computation exceeds the cap, the tax
    is the adults-only tax minus the cap.

    Attributes:
        grid: Progressive grid applied to one quotient part
        salary_rebate: Flat professional expenses rebate on salaries (%)
        min_salary_rebate: Minimum salary rebate (euros)
        max_salary_rebate: Maximum salary rebate (euros)
        turnover_rebate: Flat rebate on BNC turnover (%)
        min_turnover_rebate: Minimum turnover rebate (euros)
        child_rebate: Maximum gain per child half part (euros)
    """

    grid: RateGrid
    salary_rebate: float = 10.0
    min_salary_rebate: float = 441.0
    max_salary_rebate: float = 12_627.0
    turnover_rebate: float = 34.0
    min_turnover_rebate: float = 305.0
    child_rebate: float = 1_512.0
    version: ModelVersion = field(default_factory=ModelVersion)

    def initialize(self) -> None:
        self.grid.initialize()

    @staticmethod
    def family_quotient(nb_adults: int, nb_children: int) -> float:
        """
        Number of quotient parts of a household.

        Each child counts for half a part.
        """
        if nb_adults < 0 or nb_children < 0:
            raise OutOfBoundsError(
                f"Negative household size (adults={nb_adults}, children={nb_children})"
            )
        return nb_adults + nb_children / 2.0

    def taxable_income(self, work_income: WorkIncome) -> float:
        """Part of a work income subject to IRPP after the flat rebates."""
        if isinstance(work_income, SalaryIncome):
            taxable = work_income.taxable_salary
            if taxable < 0:
                return 0.0
            rebate = clamp(
                taxable * self.salary_rebate / 100.0,
                self.min_salary_rebate,
                self.max_salary_rebate,
            )
            return zero_or_positive(taxable - rebate)
        if isinstance(work_income, TurnoverIncome):
            bnc = work_income.bnc
            if bnc < 0:
                return 0.0
            rebate = max(self.min_turnover_rebate, bnc * self.turnover_rebate / 100.0)
            return zero_or_positive(bnc - rebate)
        raise TypeError(f"Unsupported work income {work_income!r}")

    def irpp(self, taxable_income: float, nb_adults: int, nb_children: int) -> Irpp:
        """
        Income tax of a household.

        Args:
            taxable_income: Household taxable income (euros)
            nb_adults: Number of adults in the fiscal household
            nb_children: Number of dependent children

        Returns:
            Irpp(amount, family_quotient, marginal_rate, average_rate)

        Raises:
            OutOfBoundsError: Negative household counts
            GridSliceIssueError: The grid does not cover the adults-only income
        """
        if nb_adults == 0 or taxable_income < 0.0:
            return Irpp(0.0, 0.0, 0.0, 0.0)

        quotient = self.family_quotient(nb_adults, nb_children)
        irpp_slice = self.grid.slice_containing(taxable_income / quotient)
        if irpp_slice is None:
            return Irpp(0.0, quotient, 0.0, 0.0)

        tax_with_children = quotient * irpp_slice.tax(taxable_income / quotient)
        quotient_without_children = self.family_quotient(nb_adults, 0)
        slice_without = self.grid.slice_containing(
            taxable_income / quotient_without_children
        )
        if slice_without is None:
            raise GridSliceIssueError(
                f"IRPP grid does not cover {taxable_income / quotient_without_children}"
            )
        tax_without_children = quotient_without_children * slice_without.tax(
            taxable_income / quotient_without_children
        )
        gain = tax_without_children - tax_with_children
        max_gain = nb_children * self.child_rebate
        amount = tax_without_children - max_gain if gain > max_gain else tax_with_children
        average = amount / taxable_income if taxable_income > 0 else 0.0
        return Irpp(amount, quotient, irpp_slice.rate, average)

    def sliced_irpp(
        self, taxable_income: float, nb_adults: int, nb_children: int
    ) -> list[IrppSlice]:
        """Per-slice breakdown of the tax with and without children's parts."""
        if nb_adults == 0:
            return []
        quotient = self.family_quotient(nb_adults, nb_children)
        income_with = taxable_income / quotient
        idx_with = self.grid.slice_index(income_with)
        quotient_without = self.family_quotient(nb_adults, 0)
        income_without = taxable_income / quotient_without
        idx_without = self.grid.slice_index(income_without)
        if idx_with is None or idx_without is None:
            return []

        slices: list[IrppSlice] = []
        last = len(self.grid) - 1
        for idx, current in enumerate(self.grid.slices):
            if idx == last:
                size, irpp_max = 10_000.0, 0.0
            else:
                size = self.grid[idx + 1].floor - current.floor
                irpp_max = current.rate * size

            def _part(slice_idx: int, income: float) -> tuple[float, float]:
                if idx < slice_idx:
                    return size, irpp_max
                if idx == slice_idx:
                    part = income - current.floor
                    return part, current.rate * part
                return 0.0, 0.0

            size_with, irpp_with = _part(idx_with, income_with)
            size_without, irpp_without = _part(idx_without, income_without)
            slices.append(
                IrppSlice(
                    size=size,
                    size_with_children=size_with,
                    size_without_children=size_without,
                    rate=current.rate,
                    irpp_max=irpp_max,
                    irpp_with_children=irpp_with,
                    irpp_without_children=irpp_without,
                )
            )
        return slices
