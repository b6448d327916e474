"""
Work income variants of an adult (salary or self-employed turnover).

Work incomes are a closed set of variants encoded with an explicit ``type``
discriminator in configuration documents:

    ```yaml
    work_income: {type: salary, brut_salary: 60000, taxable_salary: 50000,
                  net_salary: 46000, health_insurance: 1200}
    work_income: {type: turnover, bnc: 80000, other_health_insurance: 3000}
    ```
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class SalaryIncome:
    """Salaried work income (yearly euros)."""

    brut_salary: float
    taxable_salary: float
    net_salary: float
    health_insurance: float = 0.0

    kind = "salary"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind,
            "brut_salary": self.brut_salary,
            "taxable_salary": self.taxable_salary,
            "net_salary": self.net_salary,
            "health_insurance": self.health_insurance,
        }


@dataclass(frozen=True)
class TurnoverIncome:
    """Self-employed turnover (BNC, yearly euros)."""

    bnc: float
    other_health_insurance: float = 0.0

    kind = "turnover"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind,
            "bnc": self.bnc,
            "other_health_insurance": self.other_health_insurance,
        }


WorkIncome = Union[SalaryIncome, TurnoverIncome]
