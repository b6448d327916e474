"""Corporate income tax (IS) applied to SCI profits."""

from __future__ import annotations

from dataclasses import dataclass, field

from patrimoine.core.utils import ModelVersion


@dataclass
class CompanyProfitTaxesModel:
    rate: float = 15.0
    version: ModelVersion = field(default_factory=ModelVersion)

    def corporate_tax(self, brut: float) -> float:
        if brut <= 0.0:
            return 0.0
        return brut * self.rate / 100.0

    def net(self, brut: float) -> float:
        return brut - self.corporate_tax(brut)
