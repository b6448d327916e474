"""
Command-line interface for Patrimoine.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from enum import Enum

import numpy as np
import pandas as pd

from patrimoine import __version__
from patrimoine.core.config_loader import DATA_DIR, default_models, load_scenario
from patrimoine.core.errors import PatrimoineError
from patrimoine.core.kinds import KpiKind, SimulationMode
from patrimoine.simulation.simulation import Simulation

EXAMPLE_SCENARIO = DATA_DIR / "example_scenario.yaml"


class NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy scalars and arrays, pandas frames and enums."""

    def default(self, obj):
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        elif isinstance(obj, np.generic):
            return obj.item()
        elif isinstance(obj, pd.DataFrame):
            return obj.to_dict("records")
        elif isinstance(obj, pd.Series):
            return obj.to_dict()
        elif isinstance(obj, Enum):
            return obj.value
        elif hasattr(obj, "__dict__"):
            return obj.__dict__
        return super().default(obj)


def _save_json(path: str, data: dict) -> None:
    """Save data as JSON to file path."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, cls=NumpyEncoder)


def _frame_records(frame: pd.DataFrame) -> list[dict]:
    if frame.empty:
        return []
    return frame.reset_index().to_dict("records")


def _configure_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def cmd_example(_) -> int:
    """Print the packaged example scenario."""
    sys.stdout.write(EXAMPLE_SCENARIO.read_text(encoding="utf-8"))
    return 0


def cmd_run(args) -> int:
    """Run a scenario and print or export its results."""
    try:
        scenario = load_scenario(args.input)
        models = default_models(seed=args.seed, data_dir=args.data_dir)
        mode = SimulationMode(args.mode) if args.mode else scenario.mode
        simulation = Simulation(
            models, first_year=scenario.first_year, mode=mode, kpis=scenario.kpis
        )
        nb_of_years = args.years or scenario.nb_of_years
        nb_of_runs = args.runs or scenario.nb_of_runs
        table = simulation.compute(
            nb_of_years=nb_of_years,
            nb_of_runs=nb_of_runs,
            family=scenario.family,
            patrimoine=scenario.patrimoine,
        )

        run_mode = SimulationMode.RANDOM if nb_of_runs > 1 else mode
        summary = simulation.kpis.summary(run_mode)
        accounts = simulation.social_accounts

        if args.output:
            results = {
                "scenario": scenario.source,
                "first_year": scenario.first_year,
                "nb_of_years": nb_of_years,
                "nb_of_runs": nb_of_runs,
                "mode": run_mode.value,
                "kpis": _frame_records(summary),
                "runs": _frame_records(table.to_frame()),
                "last_run": {
                    "state": accounts.state.value,
                    "cash_flow": _frame_records(accounts.cash_flow_frame()),
                    "balance_sheet": _frame_records(accounts.balance_sheet_frame()),
                    "successions": _frame_records(accounts.successions_frame()),
                },
            }
            _save_json(args.output, results)
            print(f"Results saved to {args.output}")
            return 0

        print(f"Scenario: {scenario.source}")
        print(f"Years: {scenario.first_year}-{simulation.last_year}, runs: {nb_of_runs} ({run_mode.value})")
        print()
        print(summary.to_string())
        if nb_of_runs > 1:
            print()
            worst = table.to_frame(by=KpiKind.MINIMUM_ASSET).head(args.top)
            print(f"Worst {len(worst)} runs by minimum asset:")
            print(worst.to_string())
        else:
            print()
            print(accounts.balance_sheet_frame().to_string())
        return 0

    except (PatrimoineError, FileNotFoundError) as e:
        print(f"Error running scenario: {e}", file=sys.stderr)
        return 1


def cmd_validate(args) -> int:
    """Load a scenario and the models without simulating."""
    try:
        scenario = load_scenario(args.input)
        default_models(data_dir=args.data_dir)
    except (PatrimoineError, FileNotFoundError) as e:
        if args.format == "json":
            json.dump({"valid": False, "error": str(e)}, sys.stdout, indent=2)
            sys.stdout.write("\n")
        else:
            print(f"Validation failed: {e}", file=sys.stderr)
        return 1

    report = {
        "valid": True,
        "source": scenario.source,
        "members": scenario.family.members_name,
        "ownables": [item.name for item in scenario.patrimoine],
        "first_year": scenario.first_year,
    }
    if args.format == "json":
        json.dump(report, sys.stdout, indent=2)
        sys.stdout.write("\n")
    else:
        print(f"✅ {scenario.source} is valid")
        print(f"  Members: {', '.join(report['members'])}")
        print(f"  Assets and liabilities: {len(report['ownables'])}")
    return 0


def cmd_irpp(args) -> int:
    """Income tax of a household with the packaged fiscal model."""
    try:
        fiscal = default_models(data_dir=args.data_dir).fiscal
        irpp = fiscal.income_taxes.irpp(args.income, args.adults, args.children)
    except PatrimoineError as e:
        print(f"Error computing IRPP: {e}", file=sys.stderr)
        return 1
    print(f"Family quotient: {irpp.family_quotient:g}")
    print(f"IRPP: {irpp.amount:,.2f}")
    print(f"Marginal rate: {irpp.marginal_rate:.2%}")
    print(f"Average rate: {irpp.average_rate:.2%}")
    return 0


def cmd_ifi(args) -> int:
    """Real-estate wealth tax of a taxable amount."""
    try:
        fiscal = default_models(data_dir=args.data_dir).fiscal
        ifi = fiscal.isf.isf(args.taxable)
    except PatrimoineError as e:
        print(f"Error computing IFI: {e}", file=sys.stderr)
        return 1
    print(f"IFI: {ifi.amount:,.2f}")
    print(f"Marginal rate: {ifi.marginal_rate:.2%}")
    return 0


def cmd_inheritance(args) -> int:
    """Taxes on a share of an estate received by a child."""
    try:
        fiscal = default_models(data_dir=args.data_dir).fiscal
        model = (
            fiscal.life_insurance_inheritance if args.life_insurance else fiscal.inheritance_donation
        )
        taxed = model.heritage_of_child(args.amount)
    except PatrimoineError as e:
        print(f"Error computing inheritance taxes: {e}", file=sys.stderr)
        return 1
    print(f"Net: {taxed.net_amount:,.2f}")
    print(f"Tax: {taxed.tax:,.2f}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="patrimoine",
        description="Patrimoine - Wealth, retirement and succession simulator",
    )

    # Version argument
    parser.add_argument("--version", action="version", version=f"Patrimoine {__version__}")
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)"
    )
    parser.add_argument(
        "--data-dir", default=None, help="Directory of the fiscal and economic model documents"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True, help="Available commands")

    # Example command
    example_parser = subparsers.add_parser("example", help="Print an example scenario YAML")
    example_parser.set_defaults(func=cmd_example)

    # Run command
    run_parser = subparsers.add_parser("run", help="Simulate a scenario")
    run_parser.add_argument("-i", "--input", required=True, help="Scenario YAML or JSON file")
    run_parser.add_argument("-o", "--output", help="Export the results to a JSON file")
    run_parser.add_argument("--years", type=int, help="Number of simulated years")
    run_parser.add_argument("--runs", type=int, help="Number of Monte-Carlo runs")
    run_parser.add_argument(
        "--mode",
        choices=[mode.value for mode in SimulationMode],
        help="Mode of a single run (several runs are always random)",
    )
    run_parser.add_argument("--seed", type=int, help="Seed of the random generators")
    run_parser.add_argument(
        "--top", type=int, default=10, help="Number of worst runs to print (default: 10)"
    )
    run_parser.set_defaults(func=cmd_run)

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a scenario")
    validate_parser.add_argument("-i", "--input", required=True, help="Scenario YAML or JSON file")
    validate_parser.add_argument(
        "--format", choices=["human", "json"], default="human", help="Output format"
    )
    validate_parser.set_defaults(func=cmd_validate)

    # Tax calculators
    irpp_parser = subparsers.add_parser("irpp", help="Compute the income tax of a household")
    irpp_parser.add_argument("income", type=float, help="Taxable income of the household")
    irpp_parser.add_argument("--adults", type=int, default=1, help="Number of adults (default: 1)")
    irpp_parser.add_argument(
        "--children", type=int, default=0, help="Number of dependent children (default: 0)"
    )
    irpp_parser.set_defaults(func=cmd_irpp)

    ifi_parser = subparsers.add_parser("ifi", help="Compute the real-estate wealth tax")
    ifi_parser.add_argument("taxable", type=float, help="Taxable real-estate value")
    ifi_parser.set_defaults(func=cmd_ifi)

    inheritance_parser = subparsers.add_parser(
        "inheritance", help="Compute the taxes on a child's share of an estate"
    )
    inheritance_parser.add_argument("amount", type=float, help="Share received by the child")
    inheritance_parser.add_argument(
        "--life-insurance",
        action="store_true",
        help="Share of a life insurance capital instead of the legal estate",
    )
    inheritance_parser.set_defaults(func=cmd_inheritance)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()

    # Parse arguments and execute
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
