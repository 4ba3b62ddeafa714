"""Smoke tests for chart generation."""

from pathlib import Path

import pytest
from firesim import SimulationParams, run
from firesim.chart_cli import main
from firesim.charts import plot_scenarios, plot_trajectory

REPO_CONFIG = Path(__file__).resolve().parent.parent / "config.toml"


class TestPlotTrajectory:
    def setup_method(self):
        self.records = run(SimulationParams(rrsp_contribution_headroom=14_400), 30)

    def test_writes_png(self, tmp_path):
        path = plot_trajectory(self.records, tmp_path)
        assert path == tmp_path / "trajectory.png"
        assert path.stat().st_size > 0

    def test_name_suffix_and_target_line(self, tmp_path):
        path = plot_trajectory(self.records, tmp_path / "out", name="qc", base_year=2021)
        assert path.name == "trajectory-qc.png"
        assert path.exists()

    def test_without_goal_line(self, tmp_path):
        assert plot_trajectory(self.records, tmp_path, show_goal=False).exists()

    def test_no_records(self, tmp_path):
        with pytest.raises(ValueError):
            plot_trajectory([], tmp_path)


class TestPlotScenarios:
    def test_writes_png(self, tmp_path):
        results = {
            "a": run(SimulationParams(), 10),
            "b": run(SimulationParams(return_on_investment=1.03), 10),
        }
        assert plot_scenarios(results, tmp_path).exists()

    def test_only_empty_runs(self, tmp_path):
        with pytest.raises(ValueError):
            plot_scenarios({"a": []}, tmp_path)


class TestMain:
    def test_writes_chart(self, tmp_path, capsys):
        main(["-c", str(REPO_CONFIG), "-n", "15", "--output", str(tmp_path), "--name", "sample"])
        assert (tmp_path / "trajectory-sample.png").exists()
        assert "done" in capsys.readouterr().err

    def test_zero_years(self, tmp_path, capsys):
        main(["-c", str(REPO_CONFIG), "-n", "0", "--output", str(tmp_path)])
        assert not any(tmp_path.iterdir())
        assert "nothing to plot" in capsys.readouterr().err
