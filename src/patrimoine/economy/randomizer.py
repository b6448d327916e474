"""
Random variable primitives of the Monte-Carlo engine.

A ``ModelRandomizer`` wraps a generator (continuous Beta or discrete table)
with a deterministic default value and a history of every value drawn, so
that a run can be audited and replayed:

    ```python
    rng = np.random.default_rng(42)
    inflation = ModelRandomizer(
        name="inflation",
        generator=BetaRandomGenerator(alpha=2, beta=2, min_x=0.5, max_x=3.0, rng=rng),
        default_value=1.5,
    )
    inflation.next()                         # draws and records a value
    inflation.value(SimulationMode.RANDOM)   # the value just drawn
    inflation.set_random_value(1.2)          # replay a recorded run
    ```
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

import numpy as np

from patrimoine.core.errors import ConfigError
from patrimoine.core.kinds import SimulationMode
from patrimoine.core.utils import ModelVersion


@runtime_checkable
class RandomGenerator(Protocol):
    """Anything able to draw one float sample."""

    def next(self) -> float: ...


@dataclass
class BetaRandomGenerator:
    """
    Beta distribution mapped on ``[min_x, max_x]``.

    Attributes:
        alpha: First shape parameter
        beta: Second shape parameter
        min_x: Lower bound of the mapped interval
        max_x: Upper bound of the mapped interval
        rng: Injected numpy generator
    """

    alpha: float
    beta: float
    min_x: float
    max_x: float
    rng: np.random.Generator = field(default_factory=np.random.default_rng, repr=False)

    def initialize(self) -> None:
        if self.alpha <= 0.0 or self.beta <= 0.0:
            raise ConfigError(f"Beta shape parameters must be > 0 ({self.alpha}, {self.beta})")
        if self.max_x < self.min_x:
            raise ConfigError(f"Beta interval is reversed ({self.min_x} > {self.max_x})")

    @property
    def expected_value(self) -> float:
        return self.min_x + (self.max_x - self.min_x) * self.alpha / (self.alpha + self.beta)

    def pdf(self, x: float) -> float:
        """Probability density at ``x`` of the mapped distribution."""
        width = self.max_x - self.min_x
        if width <= 0.0 or not self.min_x < x < self.max_x:
            return 0.0
        u = (x - self.min_x) / width
        log_density = (
            math.lgamma(self.alpha + self.beta)
            - math.lgamma(self.alpha)
            - math.lgamma(self.beta)
            + (self.alpha - 1.0) * math.log(u)
            + (self.beta - 1.0) * math.log(1.0 - u)
        )
        return math.exp(log_density) / width

    def next(self) -> float:
        return float(self.min_x + (self.max_x - self.min_x) * self.rng.beta(self.alpha, self.beta))


@dataclass
class DiscreteRandomGenerator:
    """
    Discrete distribution given by a table of ``(value, probability)`` pairs.

    ``initialize()`` must be called before ``next()``: it checks the table and
    builds the cumulative probabilities.
    """

    distribution: list[tuple[float, float]]
    rng: np.random.Generator = field(default_factory=np.random.default_rng, repr=False)
    cumulative: list[float] = field(default_factory=list, repr=False)

    def initialize(self) -> None:
        if not self.distribution:
            raise ConfigError("A discrete distribution needs at least one value")
        values = [value for value, _ in self.distribution]
        if any(b <= a for a, b in zip(values, values[1:])):
            raise ConfigError("Discrete distribution values must be strictly increasing")
        probabilities = [p for _, p in self.distribution]
        if any(p < 0.0 for p in probabilities):
            raise ConfigError("Discrete distribution probabilities must be >= 0")
        if not math.isclose(sum(probabilities), 1.0, abs_tol=1e-9):
            raise ConfigError(
                f"Discrete distribution probabilities sum to {sum(probabilities)}, expected 1"
            )
        self.cumulative = list(np.cumsum(probabilities))
        self.cumulative[-1] = 1.0

    @property
    def expected_value(self) -> float:
        return sum(value * p for value, p in self.distribution)

    def next(self) -> float:
        if not self.cumulative:
            raise ConfigError("DiscreteRandomGenerator.initialize() must be called before next()")
        u = self.rng.random()
        for (value, _), cumulated in zip(self.distribution, self.cumulative):
            if u <= cumulated:
                return float(value)
        return float(self.distribution[-1][0])


@dataclass
class ModelRandomizer:
    """
    A model variable with a deterministic value and a random draw history.

    Attributes:
        name: Variable name used in result tables
        generator: Random generator
        default_value: Value used in deterministic mode
        random_value: Last value drawn (or forced for a replay)
        random_history: Every value drawn since the last reset
    """

    name: str
    generator: RandomGenerator
    default_value: float
    random_value: float = 0.0
    random_history: list[float] = field(default_factory=list)
    version: ModelVersion = field(default_factory=ModelVersion)

    def initialize(self) -> None:
        init = getattr(self.generator, "initialize", None)
        if init is not None:
            init()

    def next(self) -> float:
        """Draw a new value, remember it and append it to the history."""
        self.random_value = self.generator.next()
        self.random_history.append(self.random_value)
        return self.random_value

    def value(self, mode: SimulationMode) -> float:
        if mode is SimulationMode.DETERMINISTIC:
            return self.default_value
        return self.random_value

    def set_random_value(self, value: float) -> None:
        self.random_value = value

    def reset_random_history(self) -> None:
        self.random_history = []
