"""
Enumerations shared across the simulator.
"""

from __future__ import annotations

from enum import Enum


class SimulationMode(Enum):
    """Deterministic (expected values) or random (sampled values) computation."""

    DETERMINISTIC = "deterministic"
    RANDOM = "random"


class EvaluationMethod(Enum):
    """Context in which an asset or liability is valued."""

    IFI = "ifi"
    ISF = "isf"
    LEGAL_SUCCESSION = "legal_succession"
    LIFE_INSURANCE_SUCCESSION = "life_insurance_succession"
    PATRIMOINE = "patrimoine"

    @property
    def is_wealth_tax(self) -> bool:
        return self in (EvaluationMethod.IFI, EvaluationMethod.ISF)


class KpiKind(Enum):
    """Key performance indicators recorded for each run."""

    MINIMUM_ASSET = "minimum_asset"
    ASSET_AT_FIRST_DEATH = "asset_at_first_death"
    ASSET_AT_SECOND_DEATH = "asset_at_second_death"


class RunResult(Enum):
    """Synthesis of the KPI outcomes of one run."""

    ALL_OBJECTIVES_REACHED = "all_objectives_reached"
    SOME_OBJECTIVE_MISSED = "some_objective_missed"
    SOME_OBJECTIVE_UNDEFINED = "some_objective_undefined"


class RunFilter(Enum):
    """Filters applicable to the Monte-Carlo result table."""

    ALL = "all"
    SOME_BAD = "some_bad"
    SOME_UNKNOWN = "some_unknown"


class RunState(Enum):
    """Life cycle of a single run of the year-by-year loop."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class Sex(Enum):
    MALE = "male"
    FEMALE = "female"


class RevenueCategory(Enum):
    """Revenue categories of the yearly cash-flow line."""

    WORK_INCOMES = "work_incomes"
    PENSIONS = "pensions"
    LAYOFF_COMPENSATION = "layoff_compensation"
    UNEMPLOYMENT_ALLOCATION = "unemployment_allocation"
    PERIODIC_LIQUIDATION = "periodic_liquidation"
    SCPI_REVENUES = "scpi_revenues"
    REAL_ESTATE_RENTS = "real_estate_rents"
    SCPI_SALE = "scpi_sale"
    REAL_ESTATE_SALE = "real_estate_sale"

    @property
    def is_sale(self) -> bool:
        return self in (RevenueCategory.SCPI_SALE, RevenueCategory.REAL_ESTATE_SALE)

    @property
    def is_reinvested(self) -> bool:
        """Capital returned by a sale or a liquidation, invested instead of spent."""
        return self.is_sale or self is RevenueCategory.PERIODIC_LIQUIDATION


class TaxCategory(Enum):
    """Tax categories of the yearly cash-flow line."""

    IRPP = "irpp"
    ISF = "isf"
    SOCIAL_TAXES = "social_taxes"
    LOCAL_TAXES = "local_taxes"
    SUCCESSION = "succession"
    LIFE_INSURANCE_SUCCESSION = "life_insurance_succession"


class AssetCategory(Enum):
    """Asset categories of the yearly balance sheet."""

    REAL_ESTATES = "real_estates"
    PERIODIC_INVESTS = "periodic_invests"
    FREE_INVESTS = "free_invests"
    SCPIS = "scpis"
    SCI = "sci"


class LiabilityCategory(Enum):
    """Liability categories of the yearly balance sheet."""

    DEBTS = "debts"
    LOANS = "loans"
