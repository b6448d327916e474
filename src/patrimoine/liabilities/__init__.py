"""
Liabilities of the patrimoine.
"""

from .debt import Debt
from .liabilities import Liabilities
from .loan import Loan

__all__ = ["Debt", "Liabilities", "Loan"]
