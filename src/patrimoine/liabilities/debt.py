"""
Static debt (negative amount not amortised by the simulation).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from patrimoine.ownership.ownable import Ownable


@dataclass
class Debt(Ownable):
    """
    Attributes:
        amount: Amount owed (negative)
    """

    amount: float = 0.0

    def value(self, year: int) -> float:
        return self.amount

    def set_value(self, amount: float) -> None:
        self.amount = amount

    def increase(self, amount: float) -> None:
        self.amount += amount

    def decrease(self, amount: float) -> None:
        self.amount -= amount

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["amount"] = self.amount
        return data
