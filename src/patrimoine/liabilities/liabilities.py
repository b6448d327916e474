"""
Liabilities of the family: loans and debts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Iterator

from patrimoine.core.kinds import EvaluationMethod
from patrimoine.liabilities.debt import Debt
from patrimoine.liabilities.loan import Loan
from patrimoine.ownership.ownable import Ownable, sum_of_owned_values, sum_of_values

if TYPE_CHECKING:
    from patrimoine.core.context import ValuationContext
    from patrimoine.core.interfaces import FiscalHouseholdSumator
    from patrimoine.fiscal.inheritance import FiscalOption


@dataclass
class Liabilities:
    debts: list[Debt] = field(default_factory=list)
    loans: list[Loan] = field(default_factory=list)

    def __iter__(self) -> Iterator[Ownable]:
        yield from self.loans
        yield from self.debts

    def for_each_ownable(self, body: Callable[[Ownable], None]) -> None:
        for item in self:
            body(item)

    def bind(self, context: ValuationContext) -> None:
        for item in self:
            item.bind(context)

    def value(self, year: int) -> float:
        return sum_of_values(self, year)

    def value_of_debts(self, year: int) -> float:
        return sum_of_values(self.debts, year)

    def value_of_loans(self, year: int) -> float:
        return sum_of_values(self.loans, year)

    def real_estate_value(
        self,
        year: int,
        method: EvaluationMethod,
        household: FiscalHouseholdSumator | None = None,
    ) -> float:
        """Loans deductible from the real estate value (negative)."""
        if method.is_wealth_tax and household is not None:
            return household.fiscal_household_sum(
                year, lambda name: sum_of_owned_values(self.loans, name, year, method)
            )
        if method is EvaluationMethod.LIFE_INSURANCE_SUCCESSION:
            return 0.0
        return self.value_of_loans(year)

    def transfer_ownership_of(
        self,
        decedent: str,
        children: list[str] | None,
        spouse: str | None,
        spouse_fiscal_option: FiscalOption | None,
    ) -> None:
        for items in (self.loans, self.debts):
            for idx in range(len(items)):
                items[idx].ownership.transfer_ownership_of(
                    decedent, children, spouse, spouse_fiscal_option
                )
