"""
Tests for a deterministic run: yearly lines, successions, KPIs and early
termination.

The reference family is a widow dying during 2030 who spends 10 000 € a
year out of a life insurance with no return, her son being the beneficiary.
"""

import pytest

from patrimoine.core.errors import ConfigError
from patrimoine.core.kinds import KpiKind, RunState, TaxCategory
from patrimoine.ownership.ownership import Ownership
from patrimoine.simulation import Simulation


@pytest.fixture
def simulation(neutral_models):
    return Simulation(neutral_models, first_year=2025)


class TestDeterministicRun:
    """Run ending with the death of the last adult."""

    @pytest.fixture
    def run(self, simulation, make_family, make_patrimoine):
        patrimoine = make_patrimoine()
        table = simulation.compute(10, 1, make_family(), patrimoine)
        return simulation, table, patrimoine

    def test_run_stops_at_last_death(self, run):
        simulation, table, _ = run
        accounts = simulation.social_accounts

        assert len(table) == 1
        assert accounts.state is RunState.COMPLETED
        assert accounts.last_year == 2030
        assert [line.year for line in accounts.cash_flow] == list(range(2025, 2031))
        assert len(accounts.balance_sheet) == 6

    def test_expenses_are_withdrawn(self, run):
        simulation, _, _ = run
        first = simulation.social_accounts.cash_flow[0]

        assert first.net_cash_flow == pytest.approx(-10_000.0)
        assert first.withdrawals.total == pytest.approx(10_000.0)
        assert simulation.social_accounts.balance_sheet[0].financial_assets() == pytest.approx(190_000.0)

    def test_life_insurance_succession(self, run):
        simulation, _, _ = run
        accounts = simulation.social_accounts
        [succession] = accounts.life_insurance_successions

        assert succession.year_of_death == 2030
        assert succession.decedent_name == "Alice"
        assert [(i.person_name, i.percent) for i in succession.inheritances] == [("Bob", 1.0)]
        assert succession.brut == pytest.approx(150_000.0)
        assert succession.tax == 0.0
        assert accounts.cash_flow[-1].taxes[TaxCategory.LIFE_INSURANCE_SUCCESSION].total == 0.0

    def test_legal_succession_without_estate(self, run):
        simulation, _, _ = run
        [succession] = simulation.social_accounts.legal_successions

        assert succession.taxable_value == 0.0
        assert succession.tax == 0.0

    def test_kpis(self, run):
        _, table, _ = run
        line = table.line(1)

        assert line.kpi_value(KpiKind.MINIMUM_ASSET) == pytest.approx(140_000.0)
        assert line.kpi_value(KpiKind.ASSET_AT_SECOND_DEATH) == pytest.approx(140_000.0)
        assert line.kpi_value(KpiKind.ASSET_AT_FIRST_DEATH) is None
        assert not line.kpi_results[KpiKind.MINIMUM_ASSET].objective_is_reached

    def test_ownership_restored_after_run(self, run):
        _, _, patrimoine = run
        assert patrimoine.assets.free_invests[0].ownership == Ownership.full(("Alice", 100.0))

    def test_frames(self, run):
        simulation, _, _ = run
        accounts = simulation.social_accounts

        cash_flow = accounts.cash_flow_frame()
        assert list(cash_flow.index) == list(range(2025, 2031))
        assert cash_flow.loc[2025, "life_expenses"] == pytest.approx(10_000.0)

        balance = accounts.balance_sheet_frame()
        assert balance.loc[2029, "free_invests"] == pytest.approx(150_000.0)

        successions = accounts.successions_frame()
        assert sorted(successions["kind"]) == ["legal", "life_insurance"]

    def test_replay_deterministic_run(self, run, make_family):
        simulation, table, patrimoine = run
        accounts = simulation.replay(table.line(1), make_family(), patrimoine)

        assert len(accounts.cash_flow) == 6
        assert simulation.replay_results == table.line(1).kpi_results


class TestEarlyTermination:
    """Runs stopped before their last year."""

    def test_out_of_cash(self, simulation, make_family, make_patrimoine):
        table = simulation.compute(10, 1, make_family(), make_patrimoine(initial_value=25_000.0))
        accounts = simulation.social_accounts

        assert accounts.state is RunState.FAILED
        assert accounts.last_year == 2027
        assert accounts.missing_cash == pytest.approx(5_000.0)
        assert len(accounts.cash_flow) == 2
        assert table.line(1).kpi_value(KpiKind.MINIMUM_ASSET) == 0.0

    def test_cancelled(self, simulation, make_family, make_patrimoine):
        table = simulation.compute(10, 1, make_family(), make_patrimoine(), cancel=lambda: True)

        assert simulation.social_accounts.state is RunState.CANCELLED
        assert simulation.social_accounts.is_empty
        assert table.line(1).kpi_results == {}

    def test_horizon_reached_before_death(self, simulation, make_family, make_patrimoine):
        table = simulation.compute(3, 1, make_family(), make_patrimoine())

        assert simulation.social_accounts.last_year == 2027
        assert table.line(1).kpi_value(KpiKind.MINIMUM_ASSET) == pytest.approx(170_000.0)
        assert table.line(1).kpi_value(KpiKind.ASSET_AT_SECOND_DEATH) is None

    @pytest.mark.parametrize("nb_of_years, nb_of_runs", [(0, 1), (10, 0)])
    def test_invalid_size(self, simulation, make_family, make_patrimoine, nb_of_years, nb_of_runs):
        with pytest.raises(ConfigError):
            simulation.compute(nb_of_years, nb_of_runs, make_family(), make_patrimoine())

    def test_nothing_to_replay(self, simulation, make_family, make_patrimoine):
        with pytest.raises(ConfigError):
            simulation.replay(None, make_family(), make_patrimoine())
