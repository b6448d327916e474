"""
Successions at death: legal and life insurance successions, ownership transfer.
"""

from .legal import LegalSuccessionManager
from .life_insurance import LifeInsuranceSuccessionManager
from .ownership_manager import OwnershipManager
from .succession import Inheritance, Succession, successions_frame, successors_inherited_net_value

__all__ = [
    "Inheritance",
    "LegalSuccessionManager",
    "LifeInsuranceSuccessionManager",
    "OwnershipManager",
    "Succession",
    "successions_frame",
    "successors_inherited_net_value",
]
