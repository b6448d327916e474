"""
Tests for loading models and scenarios from YAML/JSON documents.
"""

import json

import pytest
import yaml

from patrimoine.assets.investment_type import ContractualRate, LifeInsurance
from patrimoine.core.config_loader import (
    DATA_DIR,
    default_models,
    load_family,
    load_fiscal_model,
    load_patrimoine,
    load_scenario,
)
from patrimoine.core.errors import ConfigLoadError
from patrimoine.core.kinds import KpiKind, SimulationMode
from patrimoine.core.utils import PatrimoineWarning
from patrimoine.family.expenses import Periodic
from patrimoine.family.person import Adult
from patrimoine.fiscal.inheritance import FiscalOption
from patrimoine.fiscal.unemployment import SeniorityCoef, UnemploymentCause
from patrimoine.ownership.ownership import Ownership


@pytest.fixture
def scenario():
    return {
        "version": {"name": "veuve", "date": "2025-01-01"},
        "simulation": {
            "first_year": 2025,
            "nb_of_years": 10,
            "kpis": {"minimum_asset": {"objective": 1_000}},
        },
        "family": {
            "members": [
                {
                    "role": "adult",
                    "name": "Alice",
                    "birth_year": 1960,
                    "sex": "female",
                    "age_of_death": 70,
                    "fiscal_option": "quotite_disponible",
                },
                {"role": "child", "name": "Bob", "birth_year": 1990},
            ],
            "expenses": [
                {"name": "Vie courante", "value": 10_000},
                {
                    "name": "Voiture",
                    "value": 20_000,
                    "time_span": {"type": "periodic", "from_year": 2026, "period": 8, "to_year": 2050},
                },
            ],
        },
        "patrimoine": {
            "assets": {
                "free_invests": [
                    {
                        "name": "Assurance vie",
                        "ownership": {"full_owners": [{"name": "Alice", "fraction": 100}]},
                        "investment_type": {
                            "type": "life_insurance",
                            "clause": {"full_recipients": ["Bob"]},
                        },
                        "interest_rate_type": {"type": "contractual", "fixed_rate": 1.5},
                        "year": 2024,
                        "initial_value": 200_000,
                    }
                ]
            }
        },
    }


class TestLoadScenario:
    """Scenario documents: family, patrimoine and simulation settings."""

    def test_from_mapping(self, scenario):
        definition = load_scenario(scenario)

        assert definition.first_year == 2025
        assert definition.nb_of_years == 10
        assert definition.nb_of_runs == 1
        assert definition.mode is SimulationMode.DETERMINISTIC
        assert definition.metadata["version"]["name"] == "veuve"
        assert definition.source == "<mapping>"

        kpi = definition.kpis[KpiKind.MINIMUM_ASSET]
        assert kpi.objective == 1_000.0
        assert kpi.proba_objective == 0.98

    def test_family(self, scenario):
        family = load_scenario(scenario).family

        assert family.members_name == ["Alice", "Bob"]
        assert family.adults[0].fiscal_option is FiscalOption.QUOTITE_DISPONIBLE
        assert family.expenses.items[1].time_span == Periodic(2026, 8, 2050)

    def test_patrimoine(self, scenario):
        [contract] = load_scenario(scenario).patrimoine.assets.free_invests

        assert contract.ownership == Ownership.full(("Alice", 100.0))
        assert isinstance(contract.investment_type, LifeInsurance)
        assert contract.investment_type.clause.full_recipients == ["Bob"]
        assert contract.interest_rate_type == ContractualRate(1.5)
        assert contract.value(2024) == 200_000.0

    def test_source_is_not_mutated(self, scenario):
        load_scenario(scenario)
        assert scenario["family"]["members"][0]["role"] == "adult"

    @pytest.mark.parametrize("suffix, dump", [(".yaml", yaml.safe_dump), (".json", json.dumps)])
    def test_from_file(self, tmp_path, scenario, suffix, dump):
        path = tmp_path / f"scenario{suffix}"
        path.write_text(dump(scenario), encoding="utf-8")

        definition = load_scenario(path)

        assert definition.source == str(path)
        assert definition.family.members_name == ["Alice", "Bob"]

    def test_packaged_example(self):
        definition = load_scenario(DATA_DIR / "example_scenario.yaml")

        assert definition.family.adults_name == ["Paul", "Claire"]
        assert definition.nb_of_years == 45
        paul = definition.family.adults[0]
        assert paul.cause_of_retirement is UnemploymentCause.RUPTURE_CONVENTIONNELLE_INDIVIDUELLE


class TestScenarioErrors:
    """Malformed documents are reported with their location."""

    @pytest.mark.parametrize("section", ["family", "patrimoine"])
    def test_missing_section(self, scenario, section):
        del scenario[section]
        with pytest.raises(ConfigLoadError, match=f"'{section}' is required"):
            load_scenario(scenario)

    def test_missing_first_year(self, scenario):
        del scenario["simulation"]["first_year"]
        with pytest.raises(ConfigLoadError, match="first_year"):
            load_scenario(scenario)

    def test_no_run(self, scenario):
        scenario["simulation"]["nb_of_runs"] = 0
        with pytest.raises(ConfigLoadError, match="nb_of_runs"):
            load_scenario(scenario)

    def test_unknown_owner(self, scenario):
        ownership = scenario["patrimoine"]["assets"]["free_invests"][0]["ownership"]
        ownership["full_owners"][0]["name"] = "Zoe"
        with pytest.raises(ConfigLoadError, match="unknown member 'Zoe'"):
            load_scenario(scenario)

    def test_fractions_must_sum_to_100(self, scenario):
        ownership = scenario["patrimoine"]["assets"]["free_invests"][0]["ownership"]
        ownership["full_owners"][0]["fraction"] = 60
        with pytest.raises(ConfigLoadError, match="sum to 100"):
            load_scenario(scenario)

    def test_fractions_within_tolerance_warn(self, scenario):
        ownership = scenario["patrimoine"]["assets"]["free_invests"][0]["ownership"]
        ownership["full_owners"][0]["fraction"] = 99.99999
        with pytest.warns(PatrimoineWarning, match="not exactly 100"):
            load_scenario(scenario)

    def test_unknown_investment_type(self, scenario):
        scenario["patrimoine"]["assets"]["free_invests"][0]["investment_type"] = {"type": "livret"}
        with pytest.raises(ConfigLoadError, match="unknown type 'livret'"):
            load_scenario(scenario)

    def test_invalid_role(self, scenario):
        scenario["family"]["members"][1]["role"] = "cousin"
        with pytest.raises(ConfigLoadError, match="role"):
            load_scenario(scenario)

    def test_invalid_time_span(self, scenario):
        scenario["family"]["expenses"][1]["time_span"]["period"] = 0
        with pytest.raises(ConfigLoadError, match="invalid time span"):
            load_scenario(scenario)

    def test_wrong_value_type(self, scenario):
        scenario["family"]["members"][0]["birth_year"] = "1960"
        with pytest.raises(ConfigLoadError, match="birth_year: expected an integer"):
            load_scenario(scenario)

    def test_duplicate_member(self, scenario):
        scenario["family"]["members"][1]["name"] = "Alice"
        with pytest.raises(ConfigLoadError, match="Duplicate"):
            load_scenario(scenario)

    def test_unused_key_warns(self, scenario):
        scenario["family"]["members"][1]["favourite_colour"] = "blue"
        with pytest.warns(PatrimoineWarning, match="unused key 'favourite_colour'"):
            load_scenario(scenario)


class TestSources:
    """Files, formats and partial documents."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_scenario(tmp_path / "absent.yaml")

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "scenario.toml"
        path.write_text("first_year = 2025", encoding="utf-8")
        with pytest.raises(ConfigLoadError, match="Unsupported"):
            load_scenario(path)

    def test_root_must_be_a_mapping(self, tmp_path):
        path = tmp_path / "scenario.yaml"
        path.write_text("- family\n- patrimoine\n", encoding="utf-8")
        with pytest.raises(ConfigLoadError, match="mapping"):
            load_scenario(path)

    def test_family_and_patrimoine_alone(self, scenario):
        family = load_family(scenario["family"])
        patrimoine = load_patrimoine(scenario["patrimoine"])

        assert isinstance(family.adults[0], Adult)
        assert [item.name for item in patrimoine] == ["Assurance vie"]


class TestModels:
    """Packaged fiscal and economic models."""

    def test_default_models(self):
        models = default_models(seed=3)

        assert models.economy.inflation_rate(SimulationMode.DETERMINISTIC) == 1.5
        assert models.economy.rates(SimulationMode.DETERMINISTIC) == (2.0, 6.0)
        assert models.socio_economy.expenses_under_evaluation(SimulationMode.DETERMINISTIC) == 5.0
        assert models.fiscal.isf.seuil2 == pytest.approx(1_400_000.0)

    def test_packaged_fiscal_model_tables(self):
        fiscal = load_fiscal_model(DATA_DIR / "fiscal.yaml")
        first = fiscal.layoff_compensation.legal_grid[0]

        assert first == SeniorityCoef(10, 0.25)
        assert isinstance(first.nb_years, int)
        assert isinstance(first.coef, float)

    def test_table_entries_are_coerced(self):
        mapping = yaml.safe_load((DATA_DIR / "fiscal.yaml").read_text(encoding="utf-8"))
        mapping["layoff_compensation"]["legal_grid"][0]["nb_years"] = "ten"
        with pytest.raises(ConfigLoadError, match=r"legal_grid\[0\]\.nb_years: expected an integer"):
            load_fiscal_model(mapping)

    def test_fiscal_model_requires_pass(self):
        mapping = yaml.safe_load((DATA_DIR / "fiscal.yaml").read_text(encoding="utf-8"))
        del mapping["pass"]
        with pytest.raises(ConfigLoadError, match="'pass' is required"):
            load_fiscal_model(mapping)

    def test_fiscal_model_requires_sections(self):
        mapping = yaml.safe_load((DATA_DIR / "fiscal.yaml").read_text(encoding="utf-8"))
        del mapping["demembrement"]
        with pytest.raises(ConfigLoadError, match="'demembrement' is required"):
            load_fiscal_model(mapping)
