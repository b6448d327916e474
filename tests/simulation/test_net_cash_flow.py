"""
Tests for the allocation of the yearly net cash flow to the free investments.
"""

import pytest

from patrimoine.assets.assets import Assets
from patrimoine.assets.free_investment import FreeInvestment
from patrimoine.assets.investment_type import ContractualRate, LifeInsurance, OtherInvestment, Pea
from patrimoine.core.errors import CashFlowError
from patrimoine.ownership.ownership import Ownership
from patrimoine.patrimoine import Patrimoine
from patrimoine.simulation.net_cash_flow import NetCashFlowManager, receptacle


def _invest(name, investment_type=None, owner="Alice", value=1_000.0, interest=0.0, rate=0.0):
    return FreeInvestment(
        name=name,
        ownership=Ownership.full((owner, 100.0)),
        investment_type=investment_type or OtherInvestment(),
        interest_rate_type=ContractualRate(rate),
        year=2024,
        initial_value=value,
        initial_interest=interest,
    )


def _patrimoine(fiscal, make_economy, *investments):
    patrimoine = Patrimoine(assets=Assets(free_invests=list(investments)))
    patrimoine.bind(make_economy(), fiscal)
    return patrimoine


class TestReceptacle:
    """Choice of the free investment receiving a surplus."""

    def test_priority(self):
        investments = [
            _invest("Compte titres"),
            _invest("PEA", Pea()),
            _invest("AV sortie", LifeInsurance(periodic_social_taxes=False)),
            _invest("AV euros", LifeInsurance(periodic_social_taxes=True)),
        ]

        assert receptacle(investments, ["Alice"]).name == "AV euros"
        assert receptacle(investments[:3], ["Alice"]).name == "AV sortie"
        assert receptacle(investments[:2], ["Alice"]).name == "PEA"
        assert receptacle(investments, ["Bob"]) is None

    def test_surplus_goes_to_best_rate(self, fiscal, make_economy):
        low = _invest("Livret", rate=1.0)
        high = _invest("Compte titres", rate=3.0)
        patrimoine = _patrimoine(fiscal, make_economy, low, high)

        chosen = NetCashFlowManager.invest_net_cash_flow(patrimoine, 500.0, ["Alice"])

        assert chosen is high
        assert high.value(2024) == pytest.approx(1_500.0)
        assert low.value(2024) == pytest.approx(1_000.0)

    def test_surplus_without_receptacle(self, fiscal, make_economy):
        patrimoine = _patrimoine(fiscal, make_economy, _invest("Compte titres", owner="Bob"))
        assert NetCashFlowManager.invest_net_cash_flow(patrimoine, 500.0, ["Alice"]) is None

    def test_capital_of_adults_only(self, fiscal, make_economy):
        account = _invest("Compte titres")
        patrimoine = _patrimoine(fiscal, make_economy, account)

        NetCashFlowManager.invest_capital(patrimoine, {"Alice": 1_000.0, "Bob": 500.0}, ["Alice"])

        assert account.value(2024) == pytest.approx(2_000.0)


class TestWithdrawal:
    """Cash taken from the free investments to cover a deficit."""

    def test_pea_before_life_insurance(self, fiscal, make_economy):
        pea = _invest("PEA", Pea())
        contract = _invest(
            "Assurance vie", LifeInsurance(periodic_social_taxes=True), value=5_000.0, interest=1_000.0
        )
        patrimoine = _patrimoine(fiscal, make_economy, contract, pea)

        withdrawal = NetCashFlowManager.get_cash_from_investment(patrimoine, 1_500.0, 2025, ["Alice"], 4_800.0)

        assert withdrawal.withdrawals.names == ["PEA", "Assurance vie"]
        assert withdrawal.withdrawals.total == pytest.approx(1_500.0)
        assert withdrawal.taxable_interests == 0.0
        assert pea.value(2024) == 0.0

    def test_life_insurance_interests_beyond_allowance(self, fiscal, make_economy):
        contract = _invest(
            "Assurance vie", LifeInsurance(periodic_social_taxes=True), value=5_000.0, interest=1_000.0
        )
        patrimoine = _patrimoine(fiscal, make_economy, contract)

        withdrawal = NetCashFlowManager.get_cash_from_investment(patrimoine, 1_000.0, 2025, ["Alice"], 100.0)

        assert withdrawal.taxable_interests == pytest.approx(100.0)

    def test_social_taxes_reported(self, fiscal, make_economy):
        account = _invest("Compte titres", value=10_000.0, interest=2_000.0)
        patrimoine = _patrimoine(fiscal, make_economy, account)

        withdrawal = NetCashFlowManager.get_cash_from_investment(patrimoine, 828.0, 2025, ["Alice"], 4_800.0)

        assert withdrawal.withdrawals.total == pytest.approx(828.0)
        assert withdrawal.social_taxes.total == pytest.approx(34.4)
        assert withdrawal.taxable_interests == pytest.approx(165.6)

    def test_wealthiest_adult_first(self, fiscal, make_economy):
        poor = _invest("Livret Alice", owner="Alice", value=1_000.0)
        rich = _invest("Livret Bernard", owner="Bernard", value=5_000.0)
        patrimoine = _patrimoine(fiscal, make_economy, poor, rich)

        withdrawal = NetCashFlowManager.get_cash_from_investment(
            patrimoine, 500.0, 2025, ["Alice", "Bernard"], 0.0
        )

        assert withdrawal.withdrawals.names == ["Livret Bernard"]
        assert poor.value(2024) == pytest.approx(1_000.0)

    def test_any_owner_when_no_adult_alive(self, fiscal, make_economy):
        patrimoine = _patrimoine(fiscal, make_economy, _invest("Livret Bob", owner="Bob"))

        withdrawal = NetCashFlowManager.get_cash_from_investment(patrimoine, 500.0, 2025, [], 0.0)

        assert withdrawal.withdrawals.names == ["Livret Bob"]

    def test_not_enough_cash(self, fiscal, make_economy):
        patrimoine = _patrimoine(fiscal, make_economy, _invest("Livret"))

        with pytest.raises(CashFlowError) as excinfo:
            NetCashFlowManager.get_cash_from_investment(patrimoine, 2_000.0, 2025, ["Alice"], 0.0)

        assert excinfo.value.missing_cash == pytest.approx(2_000.0 - 828.0)

    def test_capitalization(self, fiscal, make_economy):
        account = _invest("Compte titres", rate=2.0)
        patrimoine = _patrimoine(fiscal, make_economy, account)

        NetCashFlowManager.capitalize_free_investments(patrimoine, 2025)

        assert account.current_state.year == 2025
        assert account.value(2025) == pytest.approx(1_020.0)
