"""CLI entry point for scenario comparison."""

import argparse
import sys
from pathlib import Path

from firesim.charts import plot_scenarios
from firesim.cli import non_negative_int
from firesim.config import parse_args
from firesim.scenarios import SCENARIO_ORDER, SCENARIOS, run_scenarios, summarize, sweep


def print_parameters(params):
    """Print scenario parameters"""
    print("=" * 80)
    print("Scenario parameters")
    print("=" * 80)
    print(f"{'scenario':<16} {'inflation':>10} {'return':>10} {'salary growth':>14}")
    print("-" * 80)
    for name in SCENARIO_ORDER:
        scenario = SCENARIOS[name]
        inflation = (scenario.get("inflation", params.inflation) - 1) * 100
        roi = (scenario.get("return_on_investment", params.return_on_investment) - 1) * 100
        growth = (scenario.get("salary_growth", params.salary_growth) - 1) * 100
        print(f"{name:<16} {inflation:>9.1f}% {roi:>9.1f}% {growth:>13.1f}%")
    print("-" * 80)
    print()


def _format_year(v) -> str:
    return "---" if v is None else str(v)


def print_results(results: dict, years: int):
    """Print one summary row per run"""
    print("=" * 80)
    print(f"Results over {years} years")
    print("=" * 80)
    print(f"{'run':<16} {'retired in':>11} {'exhausted in':>13} {'final assets':>15} {'passive income':>15}")
    print("-" * 80)
    for name, records in results.items():
        s = summarize(records)
        print(
            f"{str(name):<16} {_format_year(s['years_to_retirement']):>11} "
            f"{_format_year(s['exhausted_year']):>13} "
            f"{s['final_total_assets']:>15,.0f} {s['final_passive_income']:>15,.0f}"
        )
    print("-" * 80)
    print()


def _add_args(parser: argparse.ArgumentParser):
    parser.add_argument("-n", "--number-of-years", type=non_negative_int, default=40, help="years to simulate (default: 40)")
    parser.add_argument(
        "--sweep", type=str, default=None,
        help="sweep one parameter instead of running the scenarios, e.g. withdraw_rate=0.03,0.035,0.04",
    )
    parser.add_argument(
        "--chart", type=Path, default=None,
        help="also write a total-assets chart into this directory",
    )


def parse_sweep(s: str) -> tuple[str, list[float]]:
    """Parse "name=v1,v2,..." → (name, [v1, v2, ...])."""
    name, sep, values = s.partition("=")
    if not sep or not values.strip():
        raise ValueError(f"expected name=v1,v2,... got {s!r}")
    return name.strip().replace("-", "_"), [float(v) for v in values.split(",") if v.strip()]


def main(argv: list[str] | None = None):
    params, args = parse_args("Scenario comparison", _add_args, argv)
    years = args.number_of_years

    if args.sweep:
        try:
            field_name, values = parse_sweep(args.sweep)
            results = sweep(params, years, field_name, values)
        except (ValueError, TypeError) as e:
            print(f"Invalid sweep: {e}", file=sys.stderr)
            raise SystemExit(1)
        results = {f"{field_name}={v:g}": records for v, records in results.items()}
    else:
        print_parameters(params)
        results = run_scenarios(params, years)

    print_results(results, years)

    if args.chart is not None and years > 0:
        path = plot_scenarios(results, args.chart)
        print(f"  → {path}", file=sys.stderr)


if __name__ == "__main__":
    main()
