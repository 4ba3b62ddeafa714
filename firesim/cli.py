"""CLI entry point: print the yearly projection as CSV."""

import argparse
import logging

from firesim.config import parse_args
from firesim.output import write_csv
from firesim.simulation import run, years_to_retirement

logger = logging.getLogger(__name__)


def non_negative_int(value: str) -> int:
    n = int(value)
    if n < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {n}")
    return n


def _add_args(parser: argparse.ArgumentParser):
    parser.add_argument("-n", "--number-of-years", type=non_negative_int, default=20, help="years to simulate (default: 20)")
    parser.add_argument("-b", "--base-year", type=int, default=0, help="added to year_index in the output (default: 0)")
    parser.add_argument("--extended", action="store_true", help="append contributions, withdrawals and the other detail columns")
    parser.add_argument("--pretty", action="store_true", help="group digits of large amounts with _")


def main(argv: list[str] | None = None):
    """Simulate and write CSV to stdout"""
    params, args = parse_args("Year-by-year financial independence projection", _add_args, argv)

    records = run(params, args.number_of_years)
    write_csv(records, base_year=args.base_year, extended=args.extended, pretty=args.pretty)

    retirement = years_to_retirement(records)
    if retirement is None:
        logger.info("Retirement not reached within %d years", args.number_of_years)
    else:
        logger.info("Retirement reached in year %d", args.base_year + retirement)


if __name__ == "__main__":
    main()
