"""
Patrimoine - Wealth, Retirement and Succession Simulator for French Households

Patrimoine projects the patrimoine of a family year after year: work
incomes, pensions, unemployment allowances, rents and financial revenues
come in; taxes, life expenses and loan payments go out; the net cash flow
is invested into or withdrawn from free investments; adults die and their
estates are transferred and taxed.

Key Features:
- **French Fiscal Model**: IRPP with family quotient, IFI, social taxes,
  real-estate capital gains, inheritance and life insurance taxes
- **Ownership**: Full ownership, usufruct and bare ownership, with their
  valuation and transfer at death
- **Monte-Carlo**: Random ages of death, economic and socio-economic
  values, with exact replay of any recorded run
- **Explicit Models**: Every model is loaded from a document and injected,
  no global state

Architecture Overview:
- **ModelContext**: Fiscal, economic, socio-economic and demographic models
- **Family**: Adults, children and life expenses
- **Patrimoine**: Assets and liabilities sharing one valuation context
- **SocialAccounts**: Cash-flow lines and balance sheets of a run
- **Simulation**: Deterministic run or Monte-Carlo batch with KPIs

Quick Start:
    ```python
    from patrimoine import Simulation, default_models, load_scenario

    models = default_models(seed=42)
    scenario = load_scenario("couple.yaml")
    simulation = Simulation(models, first_year=scenario.first_year)
    table = simulation.compute(
        nb_of_years=40,
        nb_of_runs=1,
        family=scenario.family,
        patrimoine=scenario.patrimoine,
    )
    print(simulation.kpis.summary(simulation.mode))
    ```
"""

# Version information
__version__ = "0.1.0"
__description__ = "Wealth, retirement and succession simulator for French households"

from .core import (
    CashFlowError,
    ConfigError,
    ConfigLoadError,
    EvaluationMethod,
    KpiKind,
    ModelContext,
    OwnershipError,
    PatrimoineError,
    RunFilter,
    RunResult,
    SimulationMode,
)
from .core.config_loader import (
    ScenarioDefinition,
    default_models,
    load_economy_model,
    load_family,
    load_fiscal_model,
    load_human_life_model,
    load_patrimoine,
    load_scenario,
    load_socio_economy_model,
)
from .family import Adult, Child, Family, LifeExpense, LifeExpenses
from .fiscal import FiscalModel
from .ownership import Owner, Owners, Ownership
from .patrimoine import Patrimoine
from .simulation import (
    BalanceSheetLine,
    CashFlowLine,
    KpiDictionary,
    Simulation,
    SimulationResultTable,
    SocialAccounts,
)
from .succession import Succession

__all__ = [
    # Models
    "ModelContext",
    "FiscalModel",
    # Family and patrimoine
    "Adult",
    "Child",
    "Family",
    "LifeExpense",
    "LifeExpenses",
    "Owner",
    "Owners",
    "Ownership",
    "Patrimoine",
    # Simulation
    "BalanceSheetLine",
    "CashFlowLine",
    "KpiDictionary",
    "Simulation",
    "SimulationResultTable",
    "SocialAccounts",
    "Succession",
    # Kinds
    "EvaluationMethod",
    "KpiKind",
    "RunFilter",
    "RunResult",
    "SimulationMode",
    # Errors
    "CashFlowError",
    "ConfigError",
    "ConfigLoadError",
    "OwnershipError",
    "PatrimoineError",
    # Loading
    "ScenarioDefinition",
    "default_models",
    "load_economy_model",
    "load_family",
    "load_fiscal_model",
    "load_human_life_model",
    "load_patrimoine",
    "load_scenario",
    "load_socio_economy_model",
]
