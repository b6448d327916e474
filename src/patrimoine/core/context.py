"""
Context classes passed explicitly through the simulation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from patrimoine.core.kinds import SimulationMode

if TYPE_CHECKING:
    from patrimoine.core.interfaces import (
        EconomyModelProvider,
        PersonAgeProvider,
    )
    from patrimoine.economy.economy import EconomyModel
    from patrimoine.economy.human_life import HumanLifeModel
    from patrimoine.economy.socioeconomy import SocioEconomyModel
    from patrimoine.fiscal.fiscal_model import FiscalModel


@dataclass
class ModelContext:
    """
    Every model a simulation depends on, built once and injected.

    Attributes:
        fiscal: Fiscal model (initialised)
        economy: Economic model
        socio_economy: Sociological model
        human_life: Demographic model
    """

    fiscal: FiscalModel
    economy: EconomyModel
    socio_economy: SocioEconomyModel
    human_life: HumanLifeModel

    def initialize(self) -> ModelContext:
        if not self.fiscal.initialized:
            self.fiscal.initialize()
        self.economy.initialize()
        self.socio_economy.initialize()
        self.human_life.initialize()
        return self


@dataclass
class ValuationContext:
    """
    Context shared by every asset and liability of a ``Patrimoine``.

    The simulation mode changes during a session (a Monte-Carlo batch forces
    the random mode) so assets read it here rather than storing it.

    Attributes:
        economy: Inflation and financial returns provider
        fiscal: Fiscal model used for valuation taxes
        mode: Current simulation mode
        age_provider: Ages of family members (demembrement lookups)
    """

    economy: EconomyModelProvider
    fiscal: FiscalModel
    mode: SimulationMode = SimulationMode.DETERMINISTIC
    age_provider: PersonAgeProvider | None = None
