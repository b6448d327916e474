"""
Family members, work incomes and life expenses.
"""

from .expenses import (
    Ending,
    Exceptional,
    LifeExpense,
    LifeExpenses,
    Periodic,
    Permanent,
    Spanning,
    Starting,
    TimeSpan,
)
from .family import Family
from .person import Adult, AdultRandomProperties, BrutNetTaxable, Child, Pension, Person
from .work_income import SalaryIncome, TurnoverIncome, WorkIncome

__all__ = [
    "Adult",
    "AdultRandomProperties",
    "BrutNetTaxable",
    "Child",
    "Ending",
    "Exceptional",
    "Family",
    "LifeExpense",
    "LifeExpenses",
    "Pension",
    "Periodic",
    "Permanent",
    "Person",
    "SalaryIncome",
    "Spanning",
    "Starting",
    "TimeSpan",
    "TurnoverIncome",
    "WorkIncome",
]
