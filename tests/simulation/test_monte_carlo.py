"""
Tests for Monte-Carlo runs: recorded random values, reproducibility and
exact replay of a run.
"""

import numpy as np
import pytest
import yaml

from patrimoine.assets.assets import Assets
from patrimoine.assets.free_investment import FreeInvestment
from patrimoine.assets.investment_type import LifeInsurance, MarketRate
from patrimoine.core.config_loader import (
    DATA_DIR,
    default_models,
    load_economy_model,
    load_human_life_model,
    load_socio_economy_model,
)
from patrimoine.core.context import ModelContext
from patrimoine.core.kinds import KpiKind, RunFilter, RunResult, SimulationMode
from patrimoine.economy.economy import EconomyVariable
from patrimoine.economy.socioeconomy import SocioEconomyVariable
from patrimoine.ownership.clause import LifeInsuranceClause
from patrimoine.ownership.ownership import Ownership
from patrimoine.patrimoine import Patrimoine
from patrimoine.simulation import Simulation

NB_OF_RUNS = 5
NB_OF_YEARS = 20


@pytest.fixture
def monte_carlo(make_family, make_patrimoine):
    simulation = Simulation(default_models(seed=1234), first_year=2025)
    family = make_family()
    patrimoine = make_patrimoine()
    table = simulation.compute(NB_OF_YEARS, NB_OF_RUNS, family, patrimoine)
    return simulation, table, family, patrimoine


def test_one_line_per_run(monte_carlo):
    _, table, _, _ = monte_carlo

    assert [line.run_number for line in table] == list(range(1, NB_OF_RUNS + 1))
    for line in table:
        assert set(line.adults_random_properties) == {"Alice"}
        assert set(line.economy_random_values) == set(EconomyVariable)
        assert set(line.socio_economy_random_values) == set(SocioEconomyVariable)
        assert KpiKind.MINIMUM_ASSET in line.kpi_results


def test_random_values_are_drawn_in_bounds(monte_carlo):
    _, table, _, _ = monte_carlo

    for line in table:
        # Alice is 65 at the start of the simulation
        assert line.adults_random_properties["Alice"].age_of_death >= 65
        assert 0.0 <= line.economy_random_values[EconomyVariable.INFLATION] <= 3.0
        assert 2.0 <= line.economy_random_values[EconomyVariable.STOCK_RATE] <= 10.0


def test_kpis_collect_samples(monte_carlo):
    simulation, _, _, _ = monte_carlo
    kpi = simulation.kpis[KpiKind.MINIMUM_ASSET]

    assert len(kpi.samples) == NB_OF_RUNS
    assert kpi.value(SimulationMode.RANDOM) <= max(kpi.samples)
    assert kpi.histogram(bins=3)["count"].sum() == NB_OF_RUNS


def test_ownership_restored(monte_carlo):
    _, _, _, patrimoine = monte_carlo
    assert patrimoine.assets.free_invests[0].ownership == Ownership.full(("Alice", 100.0))


def test_same_seed_same_results(monte_carlo, make_family, make_patrimoine):
    _, table, _, _ = monte_carlo
    other = Simulation(default_models(seed=1234), first_year=2025).compute(
        NB_OF_YEARS, NB_OF_RUNS, make_family(), make_patrimoine()
    )

    for first, second in zip(table, other):
        assert first.adults_random_properties == second.adults_random_properties
        assert first.economy_random_values == second.economy_random_values
        assert first.kpi_results == second.kpi_results


@pytest.mark.parametrize("run_number", [1, 3, NB_OF_RUNS])
def test_replay_gives_recorded_results(monte_carlo, run_number):
    simulation, table, family, patrimoine = monte_carlo
    line = table.line(run_number)

    accounts = simulation.replay(line, family, patrimoine)

    assert simulation.replay_results == line.kpi_results
    assert accounts.last_year <= 2025 + NB_OF_YEARS - 1
    assert family.adults_random_properties() == line.adults_random_properties


def test_replay_leaves_kpis_untouched(monte_carlo):
    simulation, table, family, patrimoine = monte_carlo
    samples = list(simulation.kpis[KpiKind.MINIMUM_ASSET].samples)

    simulation.replay(table.line(2), family, patrimoine)

    assert simulation.kpis[KpiKind.MINIMUM_ASSET].samples == samples


def test_result_table_views(monte_carlo):
    _, table, _, _ = monte_carlo

    assert sum(table.count(result) for result in RunResult) == NB_OF_RUNS
    ordered = table.sorted(by=KpiKind.MINIMUM_ASSET)
    values = [line.kpi_value(KpiKind.MINIMUM_ASSET) for line in ordered]
    assert values == sorted(values)
    assert len(table.filtered(RunFilter.ALL)) == NB_OF_RUNS

    frame = table.to_frame()
    assert list(frame.index) == list(range(1, NB_OF_RUNS + 1))
    assert "Alice.age_of_death" in frame.columns


def volatile_models(fiscal, seed):
    """Packaged models with yearly returns drawn around each run's long-run values."""
    rng = np.random.default_rng(seed)
    economy = yaml.safe_load((DATA_DIR / "economy.yaml").read_text(encoding="utf-8"))
    economy["simulate_volatility"] = True
    return ModelContext(
        fiscal=fiscal,
        economy=load_economy_model(economy, rng=rng),
        socio_economy=load_socio_economy_model(DATA_DIR / "socio_economy.yaml", rng=rng),
        human_life=load_human_life_model(DATA_DIR / "human_life.yaml", rng=rng),
    )


def market_patrimoine():
    contract = FreeInvestment(
        name="Assurance vie UC",
        ownership=Ownership.full(("Alice", 100.0)),
        investment_type=LifeInsurance(
            periodic_social_taxes=False,
            clause=LifeInsuranceClause(full_recipients=["Bob"]),
        ),
        interest_rate_type=MarketRate(60.0),
        year=2024,
        initial_value=200_000.0,
    )
    return Patrimoine(assets=Assets(free_invests=[contract]))


class TestReplayWithVolatility:
    """Replays rebuild the same yearly accounts from the recorded seed."""

    def test_monte_carlo_run(self, fiscal, make_family):
        simulation = Simulation(volatile_models(fiscal, seed=42), first_year=2025)
        family = make_family()
        patrimoine = market_patrimoine()
        table = simulation.compute(NB_OF_YEARS, NB_OF_RUNS, family, patrimoine)
        # accounts of the last run computed
        balance_sheet = simulation.social_accounts.balance_sheet_frame()
        cash_flow = simulation.social_accounts.cash_flow_frame()

        accounts = simulation.replay(table.line(NB_OF_RUNS), family, patrimoine)

        assert accounts.balance_sheet_frame().equals(balance_sheet)
        assert accounts.cash_flow_frame().equals(cash_flow)
        assert simulation.replay_results == table.line(NB_OF_RUNS).kpi_results

    def test_yearly_returns_are_sampled(self, fiscal, make_family):
        simulation = Simulation(volatile_models(fiscal, seed=42), first_year=2025)
        simulation.compute(NB_OF_YEARS, NB_OF_RUNS, make_family(), market_patrimoine())
        economy = simulation.models.economy

        assert len(economy.stock_rate_samples) == NB_OF_YEARS
        assert len(set(economy.stock_rate_samples)) > 1

    def test_earlier_run_after_another_replay(self, fiscal, make_family):
        simulation = Simulation(volatile_models(fiscal, seed=7), first_year=2025)
        family = make_family()
        patrimoine = market_patrimoine()
        table = simulation.compute(NB_OF_YEARS, NB_OF_RUNS, family, patrimoine)

        first = simulation.replay(table.line(2), family, patrimoine).balance_sheet_frame()
        simulation.replay(table.line(4), family, patrimoine)
        second = simulation.replay(table.line(2), family, patrimoine).balance_sheet_frame()

        assert second.equals(first)
        assert simulation.replay_results == table.line(2).kpi_results

    def test_single_random_run(self, fiscal, make_family):
        simulation = Simulation(
            volatile_models(fiscal, seed=11), first_year=2025, mode=SimulationMode.RANDOM
        )
        family = make_family()
        patrimoine = market_patrimoine()
        table = simulation.compute(NB_OF_YEARS, 1, family, patrimoine)
        balance_sheet = simulation.social_accounts.balance_sheet_frame()
        cash_flow = simulation.social_accounts.cash_flow_frame()

        accounts = simulation.replay(table.line(1), family, patrimoine)

        assert table.line(1).economy_seed is not None
        assert accounts.balance_sheet_frame().equals(balance_sheet)
        assert accounts.cash_flow_frame().equals(cash_flow)
