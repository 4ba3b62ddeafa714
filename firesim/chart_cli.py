"""CLI entry point for chart generation."""

import argparse
import sys
from pathlib import Path

from firesim.charts import plot_trajectory
from firesim.cli import non_negative_int
from firesim.config import parse_args
from firesim.simulation import run


def _add_args(parser: argparse.ArgumentParser):
    parser.add_argument("-n", "--number-of-years", type=non_negative_int, default=40, help="years to simulate (default: 40)")
    parser.add_argument("-b", "--base-year", type=int, default=0, help="added to year_index on the X axis (default: 0)")
    parser.add_argument(
        "--output", type=Path, default=Path("reports/charts"),
        help="output directory (default: reports/charts)",
    )
    parser.add_argument(
        "--name", type=str, default="",
        help="output file name suffix (e.g. qc → trajectory-qc.png)",
    )


def main(argv: list[str] | None = None):
    params, args = parse_args("Account balance chart", _add_args, argv)

    print(f"Simulating {args.number_of_years} years...", file=sys.stderr)
    records = run(params, args.number_of_years)
    if not records:
        print("  nothing to plot", file=sys.stderr)
        return

    path = plot_trajectory(
        records, args.output, name=args.name,
        base_year=args.base_year,
    )
    print(f"  → {path}", file=sys.stderr)
    print("done", file=sys.stderr)


if __name__ == "__main__":
    main()
