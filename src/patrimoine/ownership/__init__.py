"""
Ownership of assets and liabilities: owners, dismemberment and transfers at death.
"""

from .clause import LifeInsuranceClause
from .ownable import Ownable, sum_of_owned_values, sum_of_values
from .owner import Owner, Owners
from .ownership import Ownership

__all__ = [
    "LifeInsuranceClause",
    "Ownable",
    "Owner",
    "Owners",
    "Ownership",
    "sum_of_owned_values",
    "sum_of_values",
]
