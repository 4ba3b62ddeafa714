"""Tests for CSV output and the firesim CLI."""

import io
from dataclasses import fields
from pathlib import Path

import pytest
from firesim import SimulationParams, run
from firesim.cli import main
from firesim.output import COLUMNS, EXTENDED_COLUMNS, fmt_amount, write_csv
from firesim.simulation import YearRecord

REPO_CONFIG = Path(__file__).resolve().parent.parent / "config.toml"

SAMPLE = SimulationParams(
    salary_cap=500_000,
    employer_rrsp_match=0.06,
    rrsp_contribution_headroom=14_400,
    rrsp_assets=15_000,
    tfsa_assets=24_000,
)

HEADER = "year_index,salary,federal_tax,provincial_tax,net_income,tax_deferred_balance,tax_free_balance,unregistered_balance,total_assets,retired"


def _csv(records, **kwargs) -> list[str]:
    buf = io.StringIO()
    write_csv(records, buf, **kwargs)
    return buf.getvalue().splitlines()


class TestFmtAmount:
    def test_truncates(self):
        assert fmt_amount(24_056.99) == "24056"

    def test_pretty_groups_large_amounts(self):
        assert fmt_amount(1_234_567.8, pretty=True) == "1_234_567"
        assert fmt_amount(10_000, pretty=True) == "10_000"

    def test_pretty_leaves_small_amounts(self):
        assert fmt_amount(9_999.9, pretty=True) == "9999"
        assert fmt_amount(0, pretty=True) == "0"


class TestWriteCsv:
    def setup_method(self):
        self.records = run(SAMPLE, 3)

    def test_header(self):
        assert _csv([])[0] == HEADER
        assert ",".join(COLUMNS) == HEADER

    def test_one_row_per_year(self):
        assert len(_csv(self.records)) == 4

    def test_first_row(self):
        assert _csv(self.records)[1] == "0,140000,24056,23743,67199,31458,91163,0,122621,false"

    def test_base_year_and_pretty(self):
        lines = _csv(self.records, base_year=2021, pretty=True)
        assert lines[1] == "2021,140_000,24_056,23_743,67_199,31_458,91_163,0,122_621,false"
        assert lines[3].startswith("2023,169_400,")

    def test_retired_rendered_lowercase(self):
        lines = _csv(run(SimulationParams(tfsa_assets=1_000_000), 1))
        assert lines[1].endswith(",true")

    def test_extended_columns(self):
        assert EXTENDED_COLUMNS[:len(COLUMNS)] == COLUMNS
        assert set(EXTENDED_COLUMNS) == {f.name for f in fields(YearRecord)}
        lines = _csv(self.records, extended=True)
        assert lines[0].split(",") == list(EXTENDED_COLUMNS)
        assert all(len(line.split(",")) == len(EXTENDED_COLUMNS) for line in lines)

    def test_extended_goal(self):
        lines = _csv(self.records, extended=True)
        row = dict(zip(lines[0].split(","), lines[1].split(",")))
        assert row["goal"] == "625000"
        assert "goal" not in COLUMNS

    def test_defaults_to_stdout(self, capsys):
        write_csv(self.records[:1])
        assert capsys.readouterr().out.splitlines()[0] == HEADER


class TestMain:
    def test_default_twenty_years(self, capsys):
        main(["-c", str(REPO_CONFIG)])
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == HEADER
        assert len(lines) == 21

    def test_first_row_from_sample_config(self, capsys):
        main(["-c", str(REPO_CONFIG), "-n", "1"])
        assert capsys.readouterr().out.splitlines()[1] == "0,140000,24056,23743,67199,31458,91163,0,122621,false"

    def test_zero_years_prints_header_only(self, capsys):
        main(["-c", str(REPO_CONFIG), "-n", "0"])
        assert capsys.readouterr().out.splitlines() == [HEADER]

    def test_flags_override_config(self, capsys):
        main(["-c", str(REPO_CONFIG), "-n", "1", "--salary", "100000", "-b", "2030"])
        row = capsys.readouterr().out.splitlines()[1]
        assert row.startswith("2030,100000,")

    def test_negative_years_rejected(self):
        with pytest.raises(SystemExit) as exc:
            main(["-c", str(REPO_CONFIG), "-n", "-1"])
        assert exc.value.code == 2

    def test_missing_config_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["-c", str(tmp_path / "missing.toml")])
        assert exc.value.code == 1
        assert "Couldn't open config file" in capsys.readouterr().err
