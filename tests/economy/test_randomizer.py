"""
Tests for the random variable primitives and the economic model built on them.
"""

import numpy as np
import pytest
from hypothesis import given
from hypothesis import strategies as st

from patrimoine.core.errors import ConfigError, OutOfBoundsError
from patrimoine.core.kinds import SimulationMode
from patrimoine.economy.economy import EconomyModel, EconomyVariable
from patrimoine.economy.randomizer import (
    BetaRandomGenerator,
    DiscreteRandomGenerator,
    ModelRandomizer,
    RandomGenerator,
)


class FixedUniform:
    """Stands for ``np.random.Generator`` and returns preset uniform draws."""

    def __init__(self, *draws):
        self.draws = list(draws)

    def random(self):
        return self.draws.pop(0)


class Sequence:
    def __init__(self, *values):
        self.values = list(values)

    def next(self):
        return self.values.pop(0)


class TestBetaRandomGenerator:
    """Beta law mapped on an interval."""

    def test_expected_value(self):
        generator = BetaRandomGenerator(alpha=2, beta=2, min_x=0.0, max_x=3.0)
        assert generator.expected_value == pytest.approx(1.5)

    def test_uniform_pdf(self):
        generator = BetaRandomGenerator(alpha=1, beta=1, min_x=0.0, max_x=2.0)

        assert generator.pdf(1.0) == pytest.approx(0.5)
        assert generator.pdf(-1.0) == 0.0
        assert generator.pdf(2.5) == 0.0

    @pytest.mark.parametrize("alpha, beta, min_x, max_x", [(0, 2, 0, 1), (2, -1, 0, 1), (2, 2, 3, 1)])
    def test_invalid_parameters(self, alpha, beta, min_x, max_x):
        with pytest.raises(ConfigError):
            BetaRandomGenerator(alpha, beta, min_x, max_x).initialize()

    @given(
        alpha=st.floats(min_value=0.5, max_value=10.0),
        beta=st.floats(min_value=0.5, max_value=10.0),
        min_x=st.floats(min_value=-10.0, max_value=10.0),
        width=st.floats(min_value=0.0, max_value=100.0),
        seed=st.integers(min_value=0, max_value=2**32 - 1),
    )
    def test_draws_stay_in_interval(self, alpha, beta, min_x, width, seed):
        generator = BetaRandomGenerator(
            alpha, beta, min_x, min_x + width, rng=np.random.default_rng(seed)
        )
        value = generator.next()
        assert min_x - 1e-9 <= value <= min_x + width + 1e-9

    def test_is_a_random_generator(self):
        assert isinstance(BetaRandomGenerator(2, 2, 0, 1), RandomGenerator)


class TestDiscreteRandomGenerator:
    """Table of values drawn by cumulative probability."""

    DISTRIBUTION = [(1.0, 0.25), (2.0, 0.5), (3.0, 0.25)]

    @pytest.mark.parametrize("u, expected", [(0.0, 1.0), (0.25, 1.0), (0.26, 2.0), (0.75, 2.0), (0.99, 3.0)])
    def test_first_value_reaching_the_draw(self, u, expected):
        generator = DiscreteRandomGenerator(self.DISTRIBUTION, rng=FixedUniform(u))
        generator.initialize()
        assert generator.next() == expected

    def test_expected_value(self):
        assert DiscreteRandomGenerator(self.DISTRIBUTION).expected_value == pytest.approx(2.0)

    @pytest.mark.parametrize(
        "distribution, message",
        [
            ([], "at least one"),
            ([(2.0, 0.5), (1.0, 0.5)], "strictly increasing"),
            ([(1.0, 0.5), (1.0, 0.5)], "strictly increasing"),
            ([(1.0, 1.2), (2.0, -0.2)], ">= 0"),
            ([(1.0, 0.5), (2.0, 0.4)], "expected 1"),
        ],
    )
    def test_invalid_tables(self, distribution, message):
        with pytest.raises(ConfigError, match=message):
            DiscreteRandomGenerator(distribution).initialize()

    def test_next_requires_initialize(self):
        with pytest.raises(ConfigError, match="initialize"):
            DiscreteRandomGenerator(self.DISTRIBUTION).next()


class TestModelRandomizer:
    """Deterministic default, last draw and history."""

    def test_values_by_mode(self):
        randomizer = ModelRandomizer("inflation", Sequence(1.2, 2.4), default_value=1.5)

        assert randomizer.next() == 1.2
        assert randomizer.next() == 2.4
        assert randomizer.value(SimulationMode.DETERMINISTIC) == 1.5
        assert randomizer.value(SimulationMode.RANDOM) == 2.4
        assert randomizer.random_history == [1.2, 2.4]

    def test_replay_and_reset(self):
        randomizer = ModelRandomizer("inflation", Sequence(1.2), default_value=1.5)
        randomizer.next()

        randomizer.set_random_value(0.7)
        randomizer.reset_random_history()

        assert randomizer.value(SimulationMode.RANDOM) == 0.7
        assert randomizer.random_history == []

    def test_initialize_checks_the_generator(self):
        randomizer = ModelRandomizer("x", DiscreteRandomGenerator([]), default_value=0.0)
        with pytest.raises(ConfigError):
            randomizer.initialize()


def _economy(simulate_volatility=False, seed=7):
    return EconomyModel(
        inflation=ModelRandomizer("inflation", Sequence(2.0, 1.0), default_value=1.5),
        secured_rate=ModelRandomizer("secured_rate", Sequence(3.0, 2.5), default_value=2.0),
        stock_rate=ModelRandomizer("stock_rate", Sequence(7.0, 5.0), default_value=6.0),
        secured_volatility=1.0,
        stock_volatility=15.0,
        simulate_volatility=simulate_volatility,
        rng=np.random.default_rng(seed),
    ).initialize()


class TestEconomyModel:
    """Long-run values and yearly return series."""

    def test_deterministic_rates(self):
        economy = _economy()

        assert economy.inflation_rate(SimulationMode.DETERMINISTIC) == 1.5
        assert economy.rates(SimulationMode.DETERMINISTIC, 2030) == (2.0, 6.0)

    def test_next_run_draws_every_variable(self):
        economy = _economy()
        drawn = economy.next_run(SimulationMode.RANDOM, 2025, 2034)

        assert drawn == {
            EconomyVariable.INFLATION: 2.0,
            EconomyVariable.SECURED_RATE: 3.0,
            EconomyVariable.STOCK_RATE: 7.0,
        }
        # no volatility: the long-run values apply every year
        assert economy.rates(SimulationMode.RANDOM, 2030) == (3.0, 7.0)
        assert economy.random_histories()[EconomyVariable.STOCK_RATE] == [7.0]

    def test_yearly_series_with_volatility(self):
        economy = _economy(simulate_volatility=True)
        economy.next_run(SimulationMode.RANDOM, 2025, 2034)

        assert len(economy.stock_rate_samples) == 10
        assert economy.rates(SimulationMode.RANDOM, 2025).stock_rate == economy.stock_rate_samples[0]
        with pytest.raises(OutOfBoundsError):
            economy.rates(SimulationMode.RANDOM, 2035)

    def test_replay_regenerates_the_same_series(self):
        economy = _economy(simulate_volatility=True)
        drawn = economy.next_run(SimulationMode.RANDOM, 2025, 2034)
        seed = economy.samples_seed
        recorded = list(economy.stock_rate_samples)

        economy.next_run(SimulationMode.RANDOM, 2025, 2034)
        economy.set_random_value(drawn, SimulationMode.RANDOM, 2025, 2034, seed)

        assert economy.stock_rate_samples == recorded
        assert economy.rates(SimulationMode.RANDOM) == (3.0, 7.0)

    def test_reversed_years(self):
        with pytest.raises(OutOfBoundsError):
            _economy().next_run(SimulationMode.RANDOM, 2030, 2025)
