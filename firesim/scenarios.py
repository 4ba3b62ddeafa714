"""Scenario definitions and multi-scenario execution.

Each run gets its own SimulationParams (via dataclasses.replace) and its
own state, so runs never share anything mutable.
"""

import dataclasses

from firesim.params import SimulationParams
from firesim.simulation import YearRecord, run, years_to_retirement

SCENARIOS = {
    "low_growth": {
        "inflation": 1.01,
        "return_on_investment": 1.05,
    },
    "standard": {
        "inflation": 1.02,
        "return_on_investment": 1.07,
    },
    "high_growth": {
        "inflation": 1.03,
        "return_on_investment": 1.09,
    },
    "stagflation": {
        # real returns near zero, wages trail prices
        "inflation": 1.04,
        "return_on_investment": 1.045,
        "salary_growth": 1.02,
    },
}

SCENARIO_ORDER = ["low_growth", "standard", "high_growth", "stagflation"]


def run_scenarios(
    params: SimulationParams,
    years: int,
    scenarios: dict[str, dict] | None = None,
) -> dict[str, list[YearRecord]]:
    """Run the base params once per scenario, with that scenario's overrides applied."""
    if scenarios is None:
        scenarios = SCENARIOS
    return {
        name: run(dataclasses.replace(params, **overrides), years)
        for name, overrides in scenarios.items()
    }


def sweep(
    params: SimulationParams, years: int, field_name: str, values: list[float],
) -> dict[float, list[YearRecord]]:
    """Sensitivity sweep: one run per value of a single parameter."""
    return {v: run(dataclasses.replace(params, **{field_name: v}), years) for v in values}


def summarize(records: list[YearRecord]) -> dict:
    """Headline numbers of one run."""
    exhausted = next((r.year_index for r in records if r.exhausted), None)
    return {
        "years_to_retirement": years_to_retirement(records),
        "exhausted_year": exhausted,
        "final_total_assets": records[-1].total_assets if records else 0.0,
        "final_passive_income": records[-1].passive_income if records else 0.0,
    }
