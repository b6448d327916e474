"""
Patrimoine of the family: assets, liabilities and their valuation context.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterator

from patrimoine.assets.assets import Assets
from patrimoine.core.context import ValuationContext
from patrimoine.core.errors import ConfigError
from patrimoine.core.kinds import EvaluationMethod, SimulationMode
from patrimoine.liabilities.liabilities import Liabilities
from patrimoine.ownership.ownable import Ownable
from patrimoine.ownership.ownership import Ownership

if TYPE_CHECKING:
    from patrimoine.core.interfaces import (
        EconomyModelProvider,
        FiscalHouseholdSumator,
        PersonAgeProvider,
    )
    from patrimoine.fiscal.fiscal_model import FiscalModel
    from patrimoine.fiscal.inheritance import FiscalOption


@dataclass
class Patrimoine:
    """
    Assets and liabilities of the family.

    Every ownable shares the single ``ValuationContext`` created by
    :meth:`bind`, so switching the simulation mode with :meth:`set_mode`
    is seen by every item at once.

    **Example:**
        ```python
        patrimoine = Patrimoine(assets=assets, liabilities=liabilities)
        patrimoine.bind(economy, fiscal, age_provider=family)
        patrimoine.value(2030)
        ```

    Attributes:
        assets: Assets of the family
        liabilities: Liabilities of the family
        context: Valuation context bound to every ownable
    """

    assets: Assets = field(default_factory=Assets)
    liabilities: Liabilities = field(default_factory=Liabilities)
    context: ValuationContext | None = field(default=None, repr=False, compare=False)

    def bind(
        self,
        economy: EconomyModelProvider,
        fiscal: FiscalModel,
        mode: SimulationMode = SimulationMode.DETERMINISTIC,
        age_provider: PersonAgeProvider | None = None,
    ) -> ValuationContext:
        self.context = ValuationContext(
            economy=economy, fiscal=fiscal, mode=mode, age_provider=age_provider
        )
        self.assets.bind(self.context)
        self.liabilities.bind(self.context)
        return self.context

    @property
    def ctx(self) -> ValuationContext:
        if self.context is None:
            raise ConfigError("Patrimoine has no valuation context bound")
        return self.context

    def set_mode(self, mode: SimulationMode) -> None:
        self.ctx.mode = mode

    def __iter__(self) -> Iterator[Ownable]:
        yield from self.assets
        yield from self.liabilities

    def for_each_ownable(self, body: Callable[[Ownable], None]) -> None:
        for item in self:
            body(item)

    def value(self, year: int) -> float:
        return self.assets.value(year) + self.liabilities.value(year)

    def reset_free_investment_current_value(self, estimation_year: int) -> None:
        self.assets.reset_free_investment_current_value(estimation_year)

    def ownerships(self) -> list[Ownership]:
        """Copies of the ownership of every item, in iteration order."""
        return [item.ownership.copy() for item in self]

    def restore_ownerships(self, ownerships: list[Ownership]) -> None:
        """Undo the transfers at death of a run."""
        items = list(self)
        if len(items) != len(ownerships):
            raise ConfigError("Ownership snapshot does not match the patrimoine items")
        for item, ownership in zip(items, ownerships):
            item.ownership = ownership.copy()

    def real_estate_value(
        self,
        year: int,
        method: EvaluationMethod,
        household: FiscalHouseholdSumator | None = None,
    ) -> float:
        """Taxable real estate net of its loans (IFI base)."""
        return self.assets.real_estate_value(year, method, household) + self.liabilities.real_estate_value(
            year, method, household
        )

    def taxable_inheritance_value(self, decedent: str, year: int) -> float:
        """Estate of ``decedent`` valued at the end of ``year``, life insurance excluded."""
        return sum(
            item.owned_value(decedent, year, EvaluationMethod.LEGAL_SUCCESSION) for item in self
        )

    def taxable_life_insurance_inheritance_value(self, decedent: str, year: int) -> float:
        return sum(
            item.owned_value(decedent, year, EvaluationMethod.LIFE_INSURANCE_SUCCESSION)
            for item in self
        )

    def transfer_ownership_of(
        self,
        decedent: str,
        children: list[str] | None,
        spouse: str | None,
        spouse_fiscal_option: FiscalOption | None,
    ) -> None:
        self.assets.transfer_ownership_of(decedent, children, spouse, spouse_fiscal_option)
        self.liabilities.transfer_ownership_of(decedent, children, spouse, spouse_fiscal_option)

    def to_dict(self) -> dict[str, Any]:
        return {
            "assets": {
                "periodic_invests": [item.to_dict() for item in self.assets.periodic_invests],
                "free_invests": [item.to_dict() for item in self.assets.free_invests],
                "real_estates": [item.to_dict() for item in self.assets.real_estates],
                "scpis": [item.to_dict() for item in self.assets.scpis],
                "sci": self.assets.sci.to_dict(),
            },
            "liabilities": {
                "debts": [item.to_dict() for item in self.liabilities.debts],
                "loans": [item.to_dict() for item in self.liabilities.loans],
            },
        }
