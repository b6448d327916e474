"""
Tests for the yearly cash-flow line.
"""

import dataclasses

import pytest

from patrimoine.assets.assets import Assets
from patrimoine.assets.free_investment import FreeInvestment
from patrimoine.assets.investment_type import ContractualRate, LifeInsurance
from patrimoine.assets.periodic_investment import PeriodicInvestment
from patrimoine.core.interfaces import ExpensesUnderEvaluationRateProvider, PensionDevaluationRateProvider
from patrimoine.core.kinds import RevenueCategory, SimulationMode
from patrimoine.ownership.clause import LifeInsuranceClause
from patrimoine.ownership.ownership import Ownership
from patrimoine.patrimoine import Patrimoine
from patrimoine.simulation.cash_flow import CashFlowLine


def _life_insurance(**kwargs):
    return dict(
        ownership=Ownership.full(("Alice", 100.0)),
        investment_type=LifeInsurance(
            periodic_social_taxes=True,
            clause=LifeInsuranceClause(full_recipients=["Bob"]),
        ),
        interest_rate_type=ContractualRate(0.0),
        **kwargs,
    )


@pytest.fixture
def patrimoine(neutral_models):
    """Plan liquidated in 2024 with 6 000 € of interests; contract half made of interests."""
    plan = PeriodicInvestment(
        name="Plan AV",
        first_year=2020,
        last_year=2024,
        initial_value=20_000.0,
        initial_interest=6_000.0,
        **_life_insurance(),
    )
    contract = FreeInvestment(
        name="Assurance vie",
        year=2024,
        initial_value=100_000.0,
        initial_interest=50_000.0,
        **_life_insurance(),
    )
    patrimoine = Patrimoine(assets=Assets(periodic_invests=[plan], free_invests=[contract]))
    patrimoine.bind(neutral_models.economy, neutral_models.fiscal)
    return patrimoine


class TestLifeInsuranceAllowance:
    """One yearly allowance per adult for every life insurance interest."""

    def test_shared_by_liquidation_and_withdrawal(self, neutral_models, make_family, patrimoine):
        line = CashFlowLine.compute(
            1, 2025, make_family(), patrimoine, neutral_models, SimulationMode.DETERMINISTIC
        )

        assert line.revenues[RevenueCategory.PERIODIC_LIQUIDATION].total == pytest.approx(20_000.0)
        # 6 000 € of interests less the 4 800 € allowance
        assert line.taxable_irpp_income == pytest.approx(1_200.0)

        assert line.net_cash_flow == pytest.approx(-10_000.0)
        # the liquidation was reinvested: 50 000 € of interests out of 120 000 €
        assert line.withdrawals.total == pytest.approx(10_000.0)
        assert line.taxable_irpp_delayed_to_next_year == pytest.approx(10_000.0 * 50_000.0 / 120_000.0)
        assert line.life_insurance_rebate == 0.0

    def test_unused_allowance_left_for_withdrawal(self, neutral_models, make_family, patrimoine):
        patrimoine.assets.periodic_invests[0].initial_interest = 1_000.0
        line = CashFlowLine.compute(
            1, 2025, make_family(), patrimoine, neutral_models, SimulationMode.DETERMINISTIC
        )

        assert line.taxable_irpp_income == 0.0
        withdrawn_interests = 10_000.0 * 50_000.0 / 120_000.0
        assert line.taxable_irpp_delayed_to_next_year == pytest.approx(withdrawn_interests - 3_800.0)
        assert line.life_insurance_rebate == 0.0


class FixedSocialRates:
    """Pension devaluation and expenses under-evaluation rates (%) whatever the mode."""

    def __init__(self, devaluation=0.0, under_evaluation=0.0):
        self.devaluation = devaluation
        self.under_evaluation = under_evaluation

    def pension_devaluation(self, mode):
        return self.devaluation

    def expenses_under_evaluation(self, mode):
        return self.under_evaluation


class TestSocioEconomicRates:
    """The line reads the socio-economic rates through their provider protocols."""

    def test_model_provides_both_rates(self, neutral_models):
        assert isinstance(neutral_models.socio_economy, PensionDevaluationRateProvider)
        assert isinstance(neutral_models.socio_economy, ExpensesUnderEvaluationRateProvider)

    def test_expenses_raised_by_under_evaluation(self, neutral_models, make_family, make_patrimoine):
        models = dataclasses.replace(neutral_models, socio_economy=FixedSocialRates(under_evaluation=10.0))
        patrimoine = make_patrimoine()
        patrimoine.bind(models.economy, models.fiscal)

        line = CashFlowLine.compute(1, 2025, make_family(), patrimoine, models, SimulationMode.DETERMINISTIC)

        assert line.life_expenses.total == pytest.approx(11_000.0)
