"""
Core module for patrimoine.

This module contains the error taxonomy, the shared enumerations, the
reporting value types and the contexts injected through the simulation.
"""

from .context import ModelContext, ValuationContext
from .errors import (
    CashFlowError,
    ConfigError,
    ConfigLoadError,
    GridSliceIssueError,
    IllegalOperationError,
    ModelError,
    NegativeFloorError,
    NotInRightSliceError,
    OutOfBoundsError,
    OwnershipError,
    PatrimoineError,
    RateGridError,
    SlicesNotAscendingError,
)
from .interfaces import (
    EconomyModelProvider,
    ExpensesUnderEvaluationRateProvider,
    FinancialRatesProvider,
    FiscalHouseholdSumator,
    InflationProvider,
    PensionDevaluationRateProvider,
    PersonAgeProvider,
)
from .kinds import (
    AssetCategory,
    EvaluationMethod,
    KpiKind,
    LiabilityCategory,
    RevenueCategory,
    RunFilter,
    RunResult,
    RunState,
    Sex,
    SimulationMode,
    TaxCategory,
)
from .utils import ModelVersion, NamedValue, NamedValueTable, PatrimoineWarning, warn_once

__all__ = [
    "AssetCategory",
    "CashFlowError",
    "ConfigError",
    "ConfigLoadError",
    "EconomyModelProvider",
    "EvaluationMethod",
    "ExpensesUnderEvaluationRateProvider",
    "FinancialRatesProvider",
    "FiscalHouseholdSumator",
    "GridSliceIssueError",
    "IllegalOperationError",
    "InflationProvider",
    "KpiKind",
    "LiabilityCategory",
    "ModelContext",
    "ModelError",
    "ModelVersion",
    "NamedValue",
    "NamedValueTable",
    "NegativeFloorError",
    "NotInRightSliceError",
    "OutOfBoundsError",
    "OwnershipError",
    "PatrimoineError",
    "PatrimoineWarning",
    "PensionDevaluationRateProvider",
    "PersonAgeProvider",
    "RateGridError",
    "RevenueCategory",
    "RunFilter",
    "RunResult",
    "RunState",
    "Sex",
    "SimulationMode",
    "SlicesNotAscendingError",
    "TaxCategory",
    "ValuationContext",
    "warn_once",
]
