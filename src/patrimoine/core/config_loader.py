"""Utilities for loading models and scenarios from YAML/JSON sources."""

from __future__ import annotations

import datetime as _dt
import json
from copy import deepcopy
from dataclasses import MISSING, dataclass, field, fields
from pathlib import Path
from typing import Any, Callable

import numpy as np
import yaml

from patrimoine.assets.assets import Assets
from patrimoine.assets.free_investment import FreeInvestment
from patrimoine.assets.investment_type import (
    ContractualRate,
    LifeInsurance,
    MarketRate,
    OtherInvestment,
    Pea,
)
from patrimoine.assets.periodic_investment import PeriodicInvestment
from patrimoine.assets.real_estate import RealEstateAsset, YearPeriod
from patrimoine.assets.sci import SCI
from patrimoine.assets.scpi import SCPI
from patrimoine.core.context import ModelContext
from patrimoine.core.errors import ConfigError, ConfigLoadError
from patrimoine.core.kinds import KpiKind, Sex, SimulationMode
from patrimoine.core.utils import ModelVersion, warn_once
from patrimoine.economy.economy import EconomyModel
from patrimoine.economy.human_life import HumanLifeModel
from patrimoine.economy.randomizer import (
    BetaRandomGenerator,
    DiscreteRandomGenerator,
    ModelRandomizer,
)
from patrimoine.economy.socioeconomy import SocioEconomyModel
from patrimoine.family.expenses import TIME_SPAN_TYPES, LifeExpense, LifeExpenses
from patrimoine.family.family import Family
from patrimoine.family.person import Adult, Child, Pension
from patrimoine.family.work_income import SalaryIncome, TurnoverIncome
from patrimoine.fiscal.capital_gain import (
    RealEstateCapitalGainIrppModel,
    RealEstateCapitalGainTaxesModel,
)
from patrimoine.fiscal.company import CompanyProfitTaxesModel
from patrimoine.fiscal.demembrement import DemembrementModel
from patrimoine.fiscal.fiscal_model import FiscalModel
from patrimoine.fiscal.income_taxes import IncomeTaxesModel
from patrimoine.fiscal.inheritance import (
    FiscalOption,
    InheritanceDonationModel,
    LifeInsuranceInheritanceModel,
    LifeInsuranceTaxes,
)
from patrimoine.fiscal.rate_grid import ExonerationGrid, RateGrid
from patrimoine.fiscal.social_taxes import (
    AllocationChomageTaxesModel,
    FinancialRevenueTaxesModel,
    LayoffTaxesModel,
    PensionTaxesModel,
    TurnoverTaxesModel,
)
from patrimoine.fiscal.unemployment import (
    AgeCorrection,
    AmountModel,
    DelayModel,
    DurationSlice,
    IrppDiscount,
    LayoffCompensationModel,
    SeniorityCoef,
    SeniorityCorrection,
    UnemploymentCause,
    UnemploymentCompensationModel,
)
from patrimoine.fiscal.wealth import IsfModel
from patrimoine.liabilities.debt import Debt
from patrimoine.liabilities.liabilities import Liabilities
from patrimoine.liabilities.loan import Loan
from patrimoine.ownership.clause import LifeInsuranceClause
from patrimoine.ownership.owner import Owner, Owners
from patrimoine.ownership.ownership import Ownership
from patrimoine.patrimoine import Patrimoine
from patrimoine.simulation.kpi import Kpi, KpiDictionary

__all__ = [
    "DATA_DIR",
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

Source = str | Path | dict[str, Any]

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@dataclass
class ScenarioDefinition:
    """
    A family, its patrimoine and the settings of the simulation to run.

    Attributes:
        family: Family members and expenses
        patrimoine: Assets and liabilities (not bound to any model yet)
        first_year: First simulated year
        nb_of_years: Number of years per run
        nb_of_runs: Number of runs (more than one is a Monte-Carlo batch)
        mode: Mode of a single run
        kpis: KPIs with their objectives
        metadata: Free ``version`` mapping and document-level data
        source: Label of the document the scenario comes from
    """

    family: Family
    patrimoine: Patrimoine
    first_year: int
    nb_of_years: int = 30
    nb_of_runs: int = 1
    mode: SimulationMode = SimulationMode.DETERMINISTIC
    kpis: KpiDictionary = field(default_factory=KpiDictionary)
    metadata: dict[str, Any] = field(default_factory=dict)
    source: str = "<memory>"


# ----------------------------------------------------------------------
# Public loaders
# ----------------------------------------------------------------------


def load_fiscal_model(
    source: Source, *, format: str | None = None, initialize: bool = True
) -> FiscalModel:
    """Parse a fiscal model document and, by default, initialise its grids."""

    mapping, label = _read_source(source, format=format)
    model = build_fiscal_model(mapping, label)
    return model.initialize() if initialize else model


def load_economy_model(
    source: Source,
    *,
    format: str | None = None,
    rng: np.random.Generator | None = None,
    initialize: bool = True,
) -> EconomyModel:
    mapping, label = _read_source(source, format=format)
    model = build_economy_model(mapping, label, rng)
    return model.initialize() if initialize else model


def load_socio_economy_model(
    source: Source,
    *,
    format: str | None = None,
    rng: np.random.Generator | None = None,
    initialize: bool = True,
) -> SocioEconomyModel:
    mapping, label = _read_source(source, format=format)
    model = build_socio_economy_model(mapping, label, rng)
    return model.initialize() if initialize else model


def load_human_life_model(
    source: Source,
    *,
    format: str | None = None,
    rng: np.random.Generator | None = None,
    initialize: bool = True,
) -> HumanLifeModel:
    mapping, label = _read_source(source, format=format)
    model = build_human_life_model(mapping, label, rng)
    return model.initialize() if initialize else model


def load_family(source: Source, *, format: str | None = None) -> Family:
    mapping, label = _read_source(source, format=format)
    return build_family(mapping, label)


def load_patrimoine(source: Source, *, format: str | None = None) -> Patrimoine:
    mapping, label = _read_source(source, format=format)
    return build_patrimoine(mapping, label)


def load_scenario(source: Source, *, format: str | None = None) -> ScenarioDefinition:
    """
    Parse a scenario document: ``family``, ``patrimoine`` and ``simulation``.

    **Example:**
        ```yaml
        version: {name: couple, date: 2025-01-01}
        simulation:
          first_year: 2025
          nb_of_years: 40
          nb_of_runs: 200
          kpis:
            minimum_asset: {objective: 100000, proba_objective: 0.95}
        family: {members: [...], expenses: [...]}
        patrimoine: {assets: {...}, liabilities: {...}}
        ```

    Raises:
        ConfigLoadError: If a section is missing or malformed, or if an
            ownership references someone outside the family
    """
    mapping, label = _read_source(source, format=format)
    family = build_family(_require(mapping, "family", label), f"{label}::family")
    patrimoine = build_patrimoine(_require(mapping, "patrimoine", label), f"{label}::patrimoine")
    _check_owners(patrimoine, family, f"{label}::patrimoine")

    ctx = f"{label}::simulation"
    settings = _ensure_dict(mapping.get("simulation"), ctx)
    first_year = settings.get("first_year")
    if first_year is None:
        raise ConfigLoadError(f"{ctx}: 'first_year' is required")
    nb_of_years = _coerce_int(settings.get("nb_of_years", 30), f"{ctx}.nb_of_years")
    nb_of_runs = _coerce_int(settings.get("nb_of_runs", 1), f"{ctx}.nb_of_runs")
    if nb_of_years < 1 or nb_of_runs < 1:
        raise ConfigLoadError(f"{ctx}: nb_of_years and nb_of_runs must be >= 1")
    return ScenarioDefinition(
        family=family,
        patrimoine=patrimoine,
        first_year=_coerce_int(first_year, f"{ctx}.first_year"),
        nb_of_years=nb_of_years,
        nb_of_runs=nb_of_runs,
        mode=_coerce_enum(SimulationMode, settings.get("mode", "deterministic"), f"{ctx}.mode"),
        kpis=_kpis(settings.get("kpis"), f"{ctx}.kpis"),
        metadata={"version": _ensure_dict(mapping.get("version"), f"{label}::version")},
        source=label,
    )


def default_models(seed: int | None = None, *, data_dir: str | Path | None = None) -> ModelContext:
    """
    Load the packaged default models into an initialised ``ModelContext``.

    Args:
        seed: Seed of the generator shared by every random variable
        data_dir: Directory holding ``fiscal.yaml``, ``economy.yaml``,
            ``socio_economy.yaml`` and ``human_life.yaml``
    """
    directory = Path(data_dir) if data_dir is not None else DATA_DIR
    rng = np.random.default_rng(seed)
    return ModelContext(
        fiscal=load_fiscal_model(directory / "fiscal.yaml"),
        economy=load_economy_model(directory / "economy.yaml", rng=rng),
        socio_economy=load_socio_economy_model(directory / "socio_economy.yaml", rng=rng),
        human_life=load_human_life_model(directory / "human_life.yaml", rng=rng),
    )


# ----------------------------------------------------------------------
# Models
# ----------------------------------------------------------------------


def build_fiscal_model(mapping: dict[str, Any], label: str = "<mapping>") -> FiscalModel:
    def section(key: str, required: bool = False) -> tuple[dict[str, Any], str]:
        ctx = f"{label}::{key}"
        if required:
            return _require(mapping, key, label), ctx
        return _ensure_dict(mapping.get(key), ctx), ctx

    pass_ = mapping.get("pass")
    if pass_ is None:
        raise ConfigLoadError(f"{label}: 'pass' is required")

    data, ctx = section("income_taxes", required=True)
    income_taxes = _build(
        IncomeTaxesModel, data, ctx, grid=_rate_grid(data.get("grid"), f"{ctx}.grid")
    )
    data, ctx = section("isf", required=True)
    isf = _build(IsfModel, data, ctx, grid=_rate_grid(data.get("grid"), f"{ctx}.grid"))
    data, ctx = section("estate_capital_gain_irpp", required=True)
    capital_gain_irpp = _build(
        RealEstateCapitalGainIrppModel,
        data,
        ctx,
        exo_grid=_exoneration_grid(data.get("exo_grid"), f"{ctx}.exo_grid"),
    )
    data, ctx = section("estate_capital_gain_taxes", required=True)
    capital_gain_taxes = _build(
        RealEstateCapitalGainTaxesModel,
        data,
        ctx,
        exo_grid=_exoneration_grid(data.get("exo_grid"), f"{ctx}.exo_grid"),
    )
    data, ctx = section("demembrement", required=True)
    demembrement = DemembrementModel.from_records(
        _records(data.get("grid"), f"{ctx}.grid", ("floor", "usufruct", "bare")),
        version=_version(data.get("version"), f"{ctx}.version"),
    )
    data, ctx = section("inheritance_donation", required=True)
    inheritance = _build(
        InheritanceDonationModel,
        data,
        ctx,
        grid_ligne_directe=_rate_grid(data.get("grid_ligne_directe"), f"{ctx}.grid_ligne_directe"),
    )
    data, ctx = section("life_insurance_inheritance", required=True)
    life_insurance_inheritance = _build(
        LifeInsuranceInheritanceModel, data, ctx, grid=_rate_grid(data.get("grid"), f"{ctx}.grid")
    )
    data, ctx = section("layoff_compensation", required=True)
    layoff_compensation = _build(
        LayoffCompensationModel,
        data,
        ctx,
        legal_grid=_named_tuples(data.get("legal_grid"), f"{ctx}.legal_grid", SeniorityCoef),
        metallurgie_grid=_named_tuples(
            data.get("metallurgie_grid"), f"{ctx}.metallurgie_grid", SeniorityCoef
        ),
        correction_age_grid=_age_corrections(
            data.get("correction_age_grid"), f"{ctx}.correction_age_grid"
        ),
        irpp_discount=_build(
            IrppDiscount,
            _ensure_dict(data.get("irpp_discount"), f"{ctx}.irpp_discount"),
            f"{ctx}.irpp_discount",
        ),
    )
    data, ctx = section("unemployment_compensation", required=True)
    unemployment = _build(
        UnemploymentCompensationModel,
        data,
        ctx,
        duration_grid=_named_tuples(data.get("duration_grid"), f"{ctx}.duration_grid", DurationSlice),
        delay_model=_build(
            DelayModel, _ensure_dict(data.get("delay_model"), f"{ctx}.delay_model"), f"{ctx}.delay_model"
        ),
        amount_model=_build(
            AmountModel,
            _ensure_dict(data.get("amount_model"), f"{ctx}.amount_model"),
            f"{ctx}.amount_model",
        ),
    )

    simple: dict[str, type] = {
        "pension_taxes": PensionTaxesModel,
        "financial_revenue_taxes": FinancialRevenueTaxesModel,
        "turnover_taxes": TurnoverTaxesModel,
        "allocation_chomage_taxes": AllocationChomageTaxesModel,
        "layoff_taxes": LayoffTaxesModel,
        "life_insurance_taxes": LifeInsuranceTaxes,
        "company_profit_taxes": CompanyProfitTaxesModel,
    }
    flat = {key: _build(cls, *section(key)) for key, cls in simple.items()}

    known = set(simple) | {
        "version",
        "pass",
        "income_taxes",
        "isf",
        "estate_capital_gain_irpp",
        "estate_capital_gain_taxes",
        "demembrement",
        "inheritance_donation",
        "life_insurance_inheritance",
        "layoff_compensation",
        "unemployment_compensation",
    }
    _warn_unused(mapping, known, label)

    return FiscalModel(
        pass_=_coerce_float(pass_, f"{label}::pass"),
        income_taxes=income_taxes,
        isf=isf,
        estate_capital_gain_irpp=capital_gain_irpp,
        estate_capital_gain_taxes=capital_gain_taxes,
        demembrement=demembrement,
        inheritance_donation=inheritance,
        life_insurance_inheritance=life_insurance_inheritance,
        layoff_compensation=layoff_compensation,
        unemployment_compensation=unemployment,
        version=_version(mapping.get("version"), f"{label}::version"),
        **flat,
    )


def build_economy_model(
    mapping: dict[str, Any], label: str = "<mapping>", rng: np.random.Generator | None = None
) -> EconomyModel:
    rng = rng if rng is not None else np.random.default_rng()
    randomizers = {
        name: _randomizer(name, _require(mapping, name, label), f"{label}::{name}", rng)
        for name in ("inflation", "secured_rate", "stock_rate")
    }
    _warn_unused(
        mapping,
        set(randomizers) | {"version", "secured_volatility", "stock_volatility", "simulate_volatility"},
        label,
    )
    return EconomyModel(
        secured_volatility=_coerce_float(
            mapping.get("secured_volatility", 0.0), f"{label}::secured_volatility"
        ),
        stock_volatility=_coerce_float(
            mapping.get("stock_volatility", 0.0), f"{label}::stock_volatility"
        ),
        simulate_volatility=_coerce_bool(
            mapping.get("simulate_volatility", False), f"{label}::simulate_volatility"
        ),
        rng=rng,
        version=_version(mapping.get("version"), f"{label}::version"),
        **randomizers,
    )


def build_socio_economy_model(
    mapping: dict[str, Any], label: str = "<mapping>", rng: np.random.Generator | None = None
) -> SocioEconomyModel:
    rng = rng if rng is not None else np.random.default_rng()
    names = ("pension_devaluation_rate", "nb_trim_taux_plein", "expenses_under_evaluation_rate")
    _warn_unused(mapping, set(names) | {"version"}, label)
    return SocioEconomyModel(
        version=_version(mapping.get("version"), f"{label}::version"),
        **{
            name: _randomizer(name, _require(mapping, name, label), f"{label}::{name}", rng)
            for name in names
        },
    )


def build_human_life_model(
    mapping: dict[str, Any], label: str = "<mapping>", rng: np.random.Generator | None = None
) -> HumanLifeModel:
    rng = rng if rng is not None else np.random.default_rng()
    names = ("men_life_expectation", "women_life_expectation", "nb_of_years_of_dependency")
    _warn_unused(mapping, set(names) | {"version"}, label)
    return HumanLifeModel(
        version=_version(mapping.get("version"), f"{label}::version"),
        **{
            name: _randomizer(name, _require(mapping, name, label), f"{label}::{name}", rng)
            for name in names
        },
    )


def _randomizer(
    name: str, data: dict[str, Any], ctx: str, rng: np.random.Generator
) -> ModelRandomizer:
    if "default" not in data:
        raise ConfigLoadError(f"{ctx}: 'default' is required")

    def beta(params: dict[str, Any], gctx: str) -> BetaRandomGenerator:
        return BetaRandomGenerator(
            alpha=_coerce_float(params.get("alpha"), f"{gctx}.alpha"),
            beta=_coerce_float(params.get("beta"), f"{gctx}.beta"),
            min_x=_coerce_float(params.get("min"), f"{gctx}.min"),
            max_x=_coerce_float(params.get("max"), f"{gctx}.max"),
            rng=rng,
        )

    def discrete(params: dict[str, Any], gctx: str) -> DiscreteRandomGenerator:
        entries = _ensure_list(params.get("distribution"), f"{gctx}.distribution")
        distribution = []
        for idx, entry in enumerate(entries):
            ectx = f"{gctx}.distribution[{idx}]"
            if isinstance(entry, dict):
                value, probability = entry.get("value"), entry.get("probability")
            elif isinstance(entry, list) and len(entry) == 2:
                value, probability = entry
            else:
                raise ConfigLoadError(f"{ectx}: expected [value, probability]")
            distribution.append(
                (_coerce_float(value, f"{ectx}.value"), _coerce_float(probability, f"{ectx}.probability"))
            )
        return DiscreteRandomGenerator(distribution=distribution, rng=rng)

    generator = _tagged(
        data.get("generator"), f"{ctx}.generator", {"beta": beta, "discrete": discrete}
    )
    return ModelRandomizer(
        name=name,
        generator=generator,
        default_value=_coerce_float(data["default"], f"{ctx}.default"),
        version=_version(data.get("version"), f"{ctx}.version"),
    )


def _rate_grid(raw: Any, ctx: str) -> RateGrid:
    records = _records(raw, ctx, ("floor", "rate"))
    if not records:
        raise ConfigLoadError(f"{ctx}: grid must define at least one slice")
    return RateGrid.from_records(records)


def _exoneration_grid(raw: Any, ctx: str) -> ExonerationGrid:
    records = _records(raw, ctx, ("floor", "discount_rate"))
    if not records:
        raise ConfigLoadError(f"{ctx}: grid must define at least one slice")
    return ExonerationGrid.from_records(records)


def _records(raw: Any, ctx: str, required: tuple[str, ...]) -> list[dict[str, Any]]:
    out = []
    for idx, entry in enumerate(_ensure_list(raw, ctx)):
        ectx = f"{ctx}[{idx}]"
        data = _ensure_dict(entry, ectx)
        for key in required:
            if key not in data:
                raise ConfigLoadError(f"{ectx}: '{key}' is required")
            _coerce_float(data[key], f"{ectx}.{key}")
        out.append(data)
    return out


def _named_tuples(raw: Any, ctx: str, cls: type) -> list[Any]:
    out = []
    for idx, entry in enumerate(_ensure_list(raw, ctx)):
        ectx = f"{ctx}[{idx}]"
        data = _ensure_dict(entry, ectx)
        values = []
        for name in cls._fields:
            if name not in data:
                raise ConfigLoadError(f"{ectx}: '{name}' is required")
            values.append(_coerce(data[name], cls.__annotations__[name], f"{ectx}.{name}"))
        out.append(cls(*values))
    return out


def _age_corrections(raw: Any, ctx: str) -> list[AgeCorrection]:
    out = []
    for idx, entry in enumerate(_ensure_list(raw, ctx)):
        ectx = f"{ctx}[{idx}]"
        data = _ensure_dict(entry, ectx)
        out.append(
            AgeCorrection(
                age=_coerce_int(data.get("age"), f"{ectx}.age"),
                corrections=_named_tuples(
                    data.get("corrections"), f"{ectx}.corrections", SeniorityCorrection
                ),
            )
        )
    return out


# ----------------------------------------------------------------------
# Family
# ----------------------------------------------------------------------


def build_family(mapping: dict[str, Any], label: str = "<mapping>") -> Family:
    members = []
    for idx, entry in enumerate(_ensure_list(mapping.get("members"), f"{label}::members")):
        ctx = f"{label}::members[{idx}]"
        data = _ensure_dict(entry, ctx)
        role = data.pop("role", None)
        if role == "adult":
            members.append(_adult(data, ctx))
        elif role == "child":
            members.append(_child(data, ctx))
        else:
            raise ConfigLoadError(f"{ctx}: 'role' must be 'adult' or 'child' (got {role!r})")
    if not any(isinstance(member, Adult) for member in members):
        raise ConfigLoadError(f"{label}::members: the family needs at least one adult")

    expenses = []
    raw = _ensure_list(mapping.get("expenses"), f"{label}::expenses", allow_none=True) or []
    for idx, entry in enumerate(raw):
        ctx = f"{label}::expenses[{idx}]"
        data = _ensure_dict(entry, ctx)
        _coerce_str(data.get("name"), f"{ctx}.name")
        time_span = _time_span(data.pop("time_span", {"type": "permanent"}), f"{ctx}.time_span")
        expenses.append(_build(LifeExpense, data, ctx, time_span=time_span))

    try:
        return Family(members=members, expenses=LifeExpenses(expenses))
    except ConfigError as exc:
        raise ConfigLoadError(f"{label}::members: {exc}") from exc


def _person_overrides(data: dict[str, Any], ctx: str) -> dict[str, Any]:
    _coerce_str(data.get("name"), f"{ctx}.name")
    if "birth_year" not in data:
        raise ConfigLoadError(f"{ctx}: 'birth_year' is required")
    return {"sex": _coerce_enum(Sex, data.pop("sex", "male"), f"{ctx}.sex")}


def _adult(data: dict[str, Any], ctx: str) -> Adult:
    overrides = _person_overrides(data, ctx)
    if data.get("work_income") is not None:
        overrides["work_income"] = _tagged(
            data.pop("work_income"),
            f"{ctx}.work_income",
            {
                "salary": _builder(SalaryIncome),
                "turnover": _builder(TurnoverIncome),
            },
        )
    else:
        data.pop("work_income", None)
    if "cause_of_retirement" in data:
        overrides["cause_of_retirement"] = _coerce_enum(
            UnemploymentCause, data.pop("cause_of_retirement"), f"{ctx}.cause_of_retirement"
        )
    if "fiscal_option" in data:
        overrides["fiscal_option"] = _coerce_enum(
            FiscalOption, data.pop("fiscal_option"), f"{ctx}.fiscal_option"
        )
    for regime in ("pension_general", "pension_agirc"):
        if regime in data:
            overrides[regime] = _build(
                Pension, _ensure_dict(data.pop(regime), f"{ctx}.{regime}"), f"{ctx}.{regime}"
            )
    return _build(Adult, data, ctx, **overrides)


def _child(data: dict[str, Any], ctx: str) -> Child:
    return _build(Child, data, ctx, **_person_overrides(data, ctx))


def _time_span(raw: Any, ctx: str) -> Any:
    span = _tagged(raw, ctx, {tag: _builder(cls) for tag, cls in TIME_SPAN_TYPES.items()})
    if not span.is_valid:
        raise ConfigLoadError(f"{ctx}: invalid time span {span.to_dict()}")
    return span


# ----------------------------------------------------------------------
# Patrimoine
# ----------------------------------------------------------------------


def build_patrimoine(mapping: dict[str, Any], label: str = "<mapping>") -> Patrimoine:
    ctx = f"{label}::assets"
    assets_data = _ensure_dict(mapping.get("assets"), ctx)
    sci_ctx = f"{ctx}.sci"
    sci_data = _ensure_dict(assets_data.get("sci"), sci_ctx)
    sci = SCI(
        name=_coerce_str(sci_data.get("name", "SCI"), f"{sci_ctx}.name"),
        note=str(sci_data.get("note", "")),
        scpis=_items(sci_data.get("scpis"), f"{sci_ctx}.scpis", _scpi),
        bank_account=_coerce_float(sci_data.get("bank_account", 0.0), f"{sci_ctx}.bank_account"),
    )
    assets = Assets(
        periodic_invests=_items(
            assets_data.get("periodic_invests"), f"{ctx}.periodic_invests", _periodic_investment
        ),
        free_invests=_items(assets_data.get("free_invests"), f"{ctx}.free_invests", _free_investment),
        real_estates=_items(assets_data.get("real_estates"), f"{ctx}.real_estates", _real_estate),
        scpis=_items(assets_data.get("scpis"), f"{ctx}.scpis", _scpi),
        sci=sci,
    )

    ctx = f"{label}::liabilities"
    liabilities_data = _ensure_dict(mapping.get("liabilities"), ctx)
    liabilities = Liabilities(
        debts=_items(
            liabilities_data.get("debts"),
            f"{ctx}.debts",
            lambda d, c: _build(Debt, d, c, ownership=_ownership(d.pop("ownership", None), c)),
        ),
        loans=_items(liabilities_data.get("loans"), f"{ctx}.loans", _loan),
    )
    return Patrimoine(assets=assets, liabilities=liabilities)


def _items(raw: Any, ctx: str, builder: Callable[[dict[str, Any], str], Any]) -> list[Any]:
    entries = _ensure_list(raw, ctx, allow_none=True) or []
    out = []
    for idx, entry in enumerate(entries):
        ectx = f"{ctx}[{idx}]"
        data = _ensure_dict(entry, ectx)
        _coerce_str(data.get("name"), f"{ectx}.name")
        out.append(builder(data, ectx))
    return out


def _envelope_overrides(data: dict[str, Any], ctx: str) -> dict[str, Any]:
    return {
        "ownership": _ownership(data.pop("ownership", None), ctx),
        "investment_type": _investment_type(
            data.pop("investment_type", {"type": "other"}), f"{ctx}.investment_type"
        ),
        "interest_rate_type": _interest_rate_type(
            data.pop("interest_rate_type", None), f"{ctx}.interest_rate_type"
        ),
    }


def _free_investment(data: dict[str, Any], ctx: str) -> FreeInvestment:
    return _build(FreeInvestment, data, ctx, **_envelope_overrides(data, ctx))


def _periodic_investment(data: dict[str, Any], ctx: str) -> PeriodicInvestment:
    return _build(PeriodicInvestment, data, ctx, **_envelope_overrides(data, ctx))


def _real_estate(data: dict[str, Any], ctx: str) -> RealEstateAsset:
    overrides: dict[str, Any] = {"ownership": _ownership(data.pop("ownership", None), ctx)}
    for key in ("inhabited", "rented"):
        overrides[key] = _year_period(data.pop(key, None), f"{ctx}.{key}")
    return _build(RealEstateAsset, data, ctx, **overrides)


def _scpi(data: dict[str, Any], ctx: str) -> SCPI:
    return _build(SCPI, data, ctx, ownership=_ownership(data.pop("ownership", None), ctx))


def _loan(data: dict[str, Any], ctx: str) -> Loan:
    ownership = _ownership(data.pop("ownership", None), ctx)
    try:
        return _build(Loan, data, ctx, ownership=ownership)
    except ValueError as exc:
        raise ConfigLoadError(f"{ctx}: {exc}") from exc


def _year_period(raw: Any, ctx: str) -> YearPeriod | None:
    if raw is None:
        return None
    if isinstance(raw, list) and len(raw) == 2:
        from_year, to_year = raw
    elif isinstance(raw, dict):
        from_year, to_year = raw.get("from_year"), raw.get("to_year")
    else:
        raise ConfigLoadError(f"{ctx}: expected [from_year, to_year]")
    period = YearPeriod(
        _coerce_int(from_year, f"{ctx}.from_year"), _coerce_int(to_year, f"{ctx}.to_year")
    )
    if period.to_year < period.from_year:
        raise ConfigLoadError(f"{ctx}: to_year {period.to_year} < from_year {period.from_year}")
    return period


def _ownership(raw: Any, ctx: str) -> Ownership:
    octx = f"{ctx}.ownership"
    if raw is None:
        raise ConfigLoadError(f"{octx}: an ownership is required")
    data = _ensure_dict(raw, octx)

    def owners(key: str) -> Owners:
        entries = _ensure_list(data.get(key), f"{octx}.{key}", allow_none=True) or []
        out = Owners()
        for idx, entry in enumerate(entries):
            ectx = f"{octx}.{key}[{idx}]"
            record = _ensure_dict(entry, ectx)
            out.append(
                Owner(
                    _coerce_str(record.get("name"), f"{ectx}.name"),
                    _coerce_float(record.get("fraction"), f"{ectx}.fraction"),
                )
            )
        return out

    is_dismembered = _coerce_bool(data.get("is_dismembered", False), f"{octx}.is_dismembered")
    if is_dismembered:
        ownership = Ownership(
            usufruct_owners=owners("usufruct_owners"),
            bare_owners=owners("bare_owners"),
            is_dismembered=True,
        )
    else:
        ownership = Ownership(full_owners=owners("full_owners"))
    if not ownership.is_valid:
        raise ConfigLoadError(f"{octx}: owners are missing or their fractions do not sum to 100")
    for group in (ownership.full_owners, ownership.usufruct_owners, ownership.bare_owners):
        if group.owners and group.sum_of_owned_fractions != 100.0:
            warn_once(
                "fraction_total",
                octx,
                f"{octx}: fractions sum to {group.sum_of_owned_fractions}, not exactly 100",
            )
    return ownership


def _clause(raw: Any, ctx: str) -> LifeInsuranceClause:
    data = _ensure_dict(raw, ctx)
    clause = LifeInsuranceClause(
        is_dismembered=_coerce_bool(data.get("is_dismembered", False), f"{ctx}.is_dismembered"),
        full_recipients=_ensure_str_list(
            data.get("full_recipients"), f"{ctx}.full_recipients", allow_none=True
        )
        or [],
        usufruct_recipient=str(data.get("usufruct_recipient", "")),
        bare_recipients=_ensure_str_list(
            data.get("bare_recipients"), f"{ctx}.bare_recipients", allow_none=True
        )
        or [],
    )
    if raw is not None and not clause.is_valid:
        raise ConfigLoadError(f"{ctx}: the clause names no beneficiary")
    return clause


def _investment_type(raw: Any, ctx: str) -> Any:
    def life_insurance(data: dict[str, Any], c: str) -> LifeInsurance:
        return LifeInsurance(
            periodic_social_taxes=_coerce_bool(
                data.get("periodic_social_taxes", True), f"{c}.periodic_social_taxes"
            ),
            clause=_clause(data.get("clause"), f"{c}.clause"),
        )

    return _tagged(
        raw,
        ctx,
        {
            "life_insurance": life_insurance,
            "pea": lambda d, c: Pea(),
            "other": lambda d, c: OtherInvestment(),
        },
    )


def _interest_rate_type(raw: Any, ctx: str) -> Any:
    if raw is None:
        raise ConfigLoadError(f"{ctx}: an interest rate type is required")
    return _tagged(
        raw,
        ctx,
        {
            "contractual": lambda d, c: ContractualRate(
                _coerce_float(d.get("fixed_rate"), f"{c}.fixed_rate")
            ),
            "market": lambda d, c: MarketRate(_coerce_float(d.get("stock_ratio"), f"{c}.stock_ratio")),
        },
    )


def _check_owners(patrimoine: Patrimoine, family: Family, ctx: str) -> None:
    names = set(family.members_name)
    for item in patrimoine:
        ownership = item.ownership
        for owner in [*ownership.full_owners, *ownership.usufruct_owners, *ownership.bare_owners]:
            if owner.name not in names:
                raise ConfigLoadError(f"{ctx}: '{item.name}' is owned by unknown member '{owner.name}'")


def _kpis(raw: Any, ctx: str) -> KpiDictionary:
    data = _ensure_dict(raw, ctx)
    kpis = KpiDictionary()
    for key, entry in data.items():
        kind = _coerce_enum(KpiKind, key, f"{ctx}.{key}")
        params = _ensure_dict(entry, f"{ctx}.{key}")
        kpi = kpis[kind]
        kpis.kpis[kind] = Kpi(
            kind,
            objective=_coerce_float(params.get("objective", kpi.objective), f"{ctx}.{key}.objective"),
            proba_objective=_coerce_float(
                params.get("proba_objective", kpi.proba_objective), f"{ctx}.{key}.proba_objective"
            ),
        )
    return kpis


# ----------------------------------------------------------------------
# Low level helpers
# ----------------------------------------------------------------------


def _read_source(source: Source, *, format: str | None) -> tuple[dict[str, Any], str]:
    if isinstance(source, dict):
        return deepcopy(source), "<mapping>"

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(path)

    fmt = (format or path.suffix.lstrip(".")).lower()
    text = path.read_text(encoding="utf-8")
    try:
        if fmt in {"yaml", "yml", ""}:
            data = yaml.safe_load(text)
        elif fmt == "json":
            data = json.loads(text)
        else:
            raise ConfigLoadError(f"Unsupported document format '{fmt}' for {path}")
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigLoadError(f"{path}: cannot parse document ({exc})") from exc

    if not isinstance(data, dict):
        raise ConfigLoadError(f"Document root must be a mapping (source={path})")
    return data, str(path)


def _build(cls: type, data: dict[str, Any], ctx: str, **overrides: Any) -> Any:
    """Instantiate dataclass ``cls`` from the scalar fields of ``data``."""
    known = {f.name: f for f in fields(cls) if f.init}
    kwargs = dict(overrides)
    for key, value in data.items():
        if key in overrides:
            continue
        if key == "version" and "version" in known:
            kwargs["version"] = _version(value, f"{ctx}.version")
            continue
        f = known.get(key)
        if f is None:
            warn_once("unused_key", f"{ctx}.{key}", f"{ctx}: unused key '{key}'")
            continue
        kwargs[key] = _coerce(value, f.type, f"{ctx}.{key}")
    missing = [
        name
        for name, f in known.items()
        if name not in kwargs and f.default is MISSING and f.default_factory is MISSING
    ]
    if missing:
        raise ConfigLoadError(f"{ctx}: missing required field(s) {missing}")
    return cls(**kwargs)


def _builder(cls: type) -> Callable[[dict[str, Any], str], Any]:
    return lambda data, ctx: _build(cls, data, ctx)


def _coerce(value: Any, annotation: Any, ctx: str) -> Any:
    # NamedTuple fields keep postponed annotations as ForwardRef
    annotation = getattr(annotation, "__forward_arg__", annotation)
    if not isinstance(annotation, str):
        annotation = getattr(annotation, "__name__", str(annotation))
    optional = annotation.endswith("| None")
    if optional:
        if value is None:
            return None
        annotation = annotation[: -len("| None")].strip()
    coercer = _COERCERS.get(annotation)
    if coercer is None:
        raise ConfigLoadError(f"{ctx}: field cannot be set from a document")
    return coercer(value, ctx)


def _coerce_float(value: Any, ctx: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigLoadError(f"{ctx}: expected a number")
    return float(value)


def _coerce_int(value: Any, ctx: str) -> int:
    if isinstance(value, bool):
        raise ConfigLoadError(f"{ctx}: expected an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise ConfigLoadError(f"{ctx}: expected an integer")


def _coerce_bool(value: Any, ctx: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigLoadError(f"{ctx}: expected a boolean")
    return value


def _coerce_str(value: Any, ctx: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigLoadError(f"{ctx}: expected non-empty string")
    return value


def _coerce_note(value: Any, ctx: str) -> str:
    if not isinstance(value, str):
        raise ConfigLoadError(f"{ctx}: expected a string")
    return value


_COERCERS: dict[str, Callable[[Any, str], Any]] = {
    "float": _coerce_float,
    "int": _coerce_int,
    "bool": _coerce_bool,
    "str": _coerce_note,
}


def _coerce_enum(enum_cls: type, value: Any, ctx: str) -> Any:
    try:
        return enum_cls(value)
    except ValueError as exc:
        choices = ", ".join(str(member.value) for member in enum_cls)
        raise ConfigLoadError(f"{ctx}: unknown value {value!r} (expected one of {choices})") from exc


def _tagged(raw: Any, ctx: str, builders: dict[str, Callable[[dict[str, Any], str], Any]]) -> Any:
    data = _ensure_dict(raw, ctx)
    tag = data.pop("type", None)
    builder = builders.get(tag) if isinstance(tag, str) else None
    if builder is None:
        raise ConfigLoadError(
            f"{ctx}: unknown type {tag!r} (expected one of {', '.join(sorted(builders))})"
        )
    return builder(data, ctx)


def _version(raw: Any, ctx: str) -> ModelVersion:
    data = _ensure_dict(raw, ctx)
    values = {}
    for key in ("name", "date", "comment"):
        value = data.get(key)
        if isinstance(value, (_dt.date, _dt.datetime)):
            value = value.isoformat()
        if value is not None and not isinstance(value, str):
            raise ConfigLoadError(f"{ctx}.{key}: expected a string")
        values[key] = value
    return ModelVersion(**values)


def _warn_unused(mapping: dict[str, Any], known: set[str], label: str) -> None:
    for key in mapping:
        if key not in known:
            warn_once("unused_key", f"{label}::{key}", f"{label}: unused key '{key}'")


def _require(mapping: dict[str, Any], key: str, label: str) -> dict[str, Any]:
    if mapping.get(key) is None:
        raise ConfigLoadError(f"{label}: '{key}' is required")
    return _ensure_dict(mapping[key], f"{label}::{key}")


def _ensure_dict(value: Any, ctx: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigLoadError(f"{ctx}: expected a mapping")
    return deepcopy(value)


def _ensure_list(value: Any, ctx: str, *, allow_none: bool = False) -> list[Any] | None:
    if value is None:
        if allow_none:
            return None
        raise ConfigLoadError(f"{ctx}: expected a list")
    if not isinstance(value, list):
        raise ConfigLoadError(f"{ctx}: expected a list")
    return list(value)


def _ensure_str_list(value: Any, ctx: str, *, allow_none: bool = False) -> list[str] | None:
    entries = _ensure_list(value, ctx, allow_none=allow_none)
    if entries is None:
        return None
    out: list[str] = []
    for idx, item in enumerate(entries):
        if not isinstance(item, str) or not item.strip():
            raise ConfigLoadError(f"{ctx}[{idx}]: expected non-empty string")
        out.append(item)
    return out
