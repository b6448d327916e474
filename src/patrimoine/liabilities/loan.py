"""
Amortising loan repaid by constant yearly payments.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from patrimoine.assets.financial_math import loan_payment
from patrimoine.core.errors import OutOfBoundsError
from patrimoine.ownership.ownable import Ownable


@dataclass
class Loan(Ownable):
    """
    Loan over ``[first_year, last_year]``.

    Amounts are negative (liability side): ``loaned_value`` is the
    borrowed capital as a negative number, so payments and values are
    negative too.

    **Example:**
        ```python
        loan = Loan(name="Mortgage", first_year=2020, last_year=2039,
                    loaned_value=-200_000, interest_rate=1.5)
        loan.total_payment == loan.yearly_payment(2020) * 20
        loan.value(2039) == 0
        ```

    Attributes:
        first_year: First year of repayment
        last_year: Last year of repayment
        loaned_value: Borrowed capital (negative)
        interest_rate: Yearly interest rate (%)
        monthly_insurance: Borrower insurance per month (negative)
    """

    first_year: int = 0
    last_year: int = 0
    loaned_value: float = 0.0
    interest_rate: float = 0.0
    monthly_insurance: float = 0.0

    def __post_init__(self) -> None:
        if self.last_year < self.first_year:
            raise OutOfBoundsError(
                f"{self.name}: last_year {self.last_year} < first_year {self.first_year}"
            )

    @property
    def nb_period(self) -> int:
        return self.last_year - self.first_year + 1

    @property
    def _yearly_payment(self) -> float:
        return (
            loan_payment(self.loaned_value, self.interest_rate / 100.0, self.nb_period)
            + 12.0 * self.monthly_insurance
        )

    def is_active(self, year: int) -> bool:
        return self.first_year <= year <= self.last_year

    def yearly_payment(self, year: int) -> float:
        return self._yearly_payment if self.is_active(year) else 0.0

    @property
    def total_payment(self) -> float:
        return self._yearly_payment * self.nb_period

    @property
    def cost_of_credit(self) -> float:
        return self.total_payment - self.loaned_value

    def value(self, year: int) -> float:
        """Payments still due after ``year``."""
        if not self.is_active(year):
            return 0.0
        return self._yearly_payment * (self.last_year - year)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "first_year": self.first_year,
                "last_year": self.last_year,
                "loaned_value": self.loaned_value,
                "interest_rate": self.interest_rate,
                "monthly_insurance": self.monthly_insurance,
            }
        )
        return data
