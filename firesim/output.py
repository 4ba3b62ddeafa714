"""CSV rendering of simulation records."""

import csv
import sys
from dataclasses import fields
from typing import Iterable, TextIO

from firesim.simulation import YearRecord

COLUMNS = (
    "year_index",
    "salary",
    "federal_tax",
    "provincial_tax",
    "net_income",
    "tax_deferred_balance",
    "tax_free_balance",
    "unregistered_balance",
    "total_assets",
    "retired",
)

# Every other record field, in declaration order
EXTENDED_COLUMNS = COLUMNS + tuple(f.name for f in fields(YearRecord) if f.name not in COLUMNS)

PRETTY_THRESHOLD = 10_000


def fmt_amount(v: float, pretty: bool = False) -> str:
    """Whole currency units; with `pretty`, 10_000 and up get `_` separators."""
    n = int(v)
    if pretty and n >= PRETTY_THRESHOLD:
        return f"{n:_}"
    return str(n)


def fmt_cell(record: YearRecord, column: str, base_year: int = 0, pretty: bool = False) -> str:
    value = getattr(record, column)
    if column == "year_index":
        return str(base_year + value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return fmt_amount(value, pretty)


def write_csv(
    records: Iterable[YearRecord],
    stream: TextIO | None = None,
    *,
    base_year: int = 0,
    extended: bool = False,
    pretty: bool = False,
) -> None:
    """Write a header row and one row per record."""
    if stream is None:
        stream = sys.stdout
    columns = EXTENDED_COLUMNS if extended else COLUMNS
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(columns)
    for record in records:
        writer.writerow(fmt_cell(record, c, base_year, pretty) for c in columns)
