"""Beneficiary clause of a life insurance contract."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class LifeInsuranceClause:
    """
    Attributes:
        is_dismembered: Beneficiaries receive usufruct and bare ownership separately
        full_recipients: Full owners when the clause is not dismembered
        usufruct_recipient: Sole usufructuary when the clause is dismembered
        bare_recipients: Bare owners when the clause is dismembered
    """

    is_dismembered: bool = False
    full_recipients: list[str] = field(default_factory=list)
    usufruct_recipient: str = ""
    bare_recipients: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        if self.is_dismembered:
            return self.usufruct_recipient != "" and bool(self.bare_recipients)
        return bool(self.full_recipients)

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_dismembered": self.is_dismembered,
            "full_recipients": list(self.full_recipients),
            "usufruct_recipient": self.usufruct_recipient,
            "bare_recipients": list(self.bare_recipients),
        }
