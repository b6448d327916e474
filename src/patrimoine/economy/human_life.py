"""Demographic model: life expectancy by sex and years of dependency."""

from __future__ import annotations

from dataclasses import dataclass, field

from patrimoine.core.kinds import Sex
from patrimoine.core.utils import ModelVersion
from patrimoine.economy.randomizer import ModelRandomizer


@dataclass
class HumanLifeModel:
    men_life_expectation: ModelRandomizer
    women_life_expectation: ModelRandomizer
    nb_of_years_of_dependency: ModelRandomizer
    version: ModelVersion = field(default_factory=ModelVersion)

    def initialize(self) -> HumanLifeModel:
        self.men_life_expectation.initialize()
        self.women_life_expectation.initialize()
        self.nb_of_years_of_dependency.initialize()
        return self

    def life_expectation(self, sex: Sex) -> ModelRandomizer:
        if sex is Sex.MALE:
            return self.men_life_expectation
        return self.women_life_expectation

    def reset_random_history(self) -> None:
        self.men_life_expectation.reset_random_history()
        self.women_life_expectation.reset_random_history()
        self.nb_of_years_of_dependency.reset_random_history()
