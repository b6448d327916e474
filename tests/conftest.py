"""
Shared fixtures: the packaged fiscal model, neutral economic models and a
small family with a single life insurance contract.
"""

import pytest

from patrimoine.assets.assets import Assets
from patrimoine.assets.free_investment import FreeInvestment
from patrimoine.assets.investment_type import ContractualRate, LifeInsurance
from patrimoine.core.config_loader import (
    DATA_DIR,
    load_economy_model,
    load_fiscal_model,
    load_human_life_model,
    load_socio_economy_model,
)
from patrimoine.core.context import ModelContext, ValuationContext
from patrimoine.core.kinds import Sex, SimulationMode
from patrimoine.family.expenses import LifeExpense, LifeExpenses
from patrimoine.family.family import Family
from patrimoine.family.person import Adult, Child
from patrimoine.ownership.clause import LifeInsuranceClause
from patrimoine.ownership.ownership import Ownership
from patrimoine.patrimoine import Patrimoine


def _beta(default, low=0.0, high=3.0):
    return {
        "default": default,
        "generator": {"type": "beta", "alpha": 2, "beta": 2, "min": low, "max": high},
    }


@pytest.fixture(scope="session")
def fiscal():
    """Packaged fiscal model, initialised once for the whole session."""
    return load_fiscal_model(DATA_DIR / "fiscal.yaml")


@pytest.fixture(scope="session")
def make_economy():
    """Factory of economic models with fixed deterministic values (%)."""

    def factory(inflation=0.0, secured_rate=0.0, stock_rate=0.0):
        return load_economy_model(
            {
                "inflation": _beta(inflation),
                "secured_rate": _beta(secured_rate),
                "stock_rate": _beta(stock_rate, 2.0, 10.0),
            }
        )

    return factory


@pytest.fixture(scope="session")
def make_context(fiscal, make_economy):
    """Factory of valuation contexts for assets tested outside a patrimoine."""

    def factory(inflation=0.0, mode=SimulationMode.DETERMINISTIC, age_provider=None):
        return ValuationContext(
            economy=make_economy(inflation=inflation),
            fiscal=fiscal,
            mode=mode,
            age_provider=age_provider,
        )

    return factory


@pytest.fixture
def neutral_models(fiscal, make_economy):
    """Models without inflation, returns, pension devaluation or expense correction."""
    socio_economy = load_socio_economy_model(
        {
            "pension_devaluation_rate": _beta(0.0, 0.0, 2.0),
            "nb_trim_taux_plein": {
                "default": 0,
                "generator": {"type": "discrete", "distribution": [[0, 1.0]]},
            },
            "expenses_under_evaluation_rate": _beta(0.0, 0.0, 10.0),
        }
    )
    return ModelContext(
        fiscal=fiscal,
        economy=make_economy(),
        socio_economy=socio_economy,
        human_life=load_human_life_model(DATA_DIR / "human_life.yaml"),
    )


@pytest.fixture(scope="session")
def make_family():
    """
    Factory of a widow born in 1960 dying at 70 (during 2030), with one
    independent son and a flat yearly budget.
    """

    def factory(yearly_expenses=10_000.0, age_of_death=70):
        return Family(
            members=[
                Adult(name="Alice", birth_year=1960, sex=Sex.FEMALE, age_of_death=age_of_death),
                Child(name="Bob", birth_year=1990),
            ],
            expenses=LifeExpenses([LifeExpense(name="Vie courante", value=yearly_expenses)]),
        )

    return factory


@pytest.fixture(scope="session")
def make_patrimoine():
    """Factory of a patrimoine made of one life insurance of Alice, Bob beneficiary."""

    def factory(initial_value=200_000.0, year=2024):
        contract = FreeInvestment(
            name="Assurance vie",
            ownership=Ownership.full(("Alice", 100.0)),
            investment_type=LifeInsurance(
                periodic_social_taxes=True,
                clause=LifeInsuranceClause(full_recipients=["Bob"]),
            ),
            interest_rate_type=ContractualRate(0.0),
            year=year,
            initial_value=initial_value,
        )
        return Patrimoine(assets=Assets(free_invests=[contract]))

    return factory
