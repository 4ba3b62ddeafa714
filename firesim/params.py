"""Simulation parameters and contribution room policies."""

import math
from dataclasses import dataclass, fields
from typing import Callable

from firesim.exceptions import ConfigurationError
from firesim.ledger import ACCOUNTS, TAX_DEFERRED, TAX_FREE, UNREGISTERED
from firesim.tax import CANADA_FEDERAL_BRACKETS, QUEBEC_BRACKETS, TaxBracket, validate_brackets

DEFAULT_CONTRIBUTION_ORDER = (TAX_DEFERRED, TAX_FREE, UNREGISTERED)
DEFAULT_WITHDRAWAL_ORDER = (UNREGISTERED, TAX_FREE, TAX_DEFERRED)

MAX_RRSP_CONTRIBUTION = 26_500  # 2019 value
RRSP_CONTRIBUTION_RATE = 0.18   # room earned per dollar of previous-year salary

# Fields that must be > 0 (growth multipliers)
_MULTIPLIER_FIELDS = ("inflation", "salary_growth", "return_on_investment")

# Fields that must be >= 0 (currency amounts)
_MONETARY_FIELDS = (
    "salary",
    "salary_cap",
    "cost_of_living",
    "retirement_cost_of_living",
    "rrsp_contribution_headroom",
    "rrsp_assets",
    "tfsa_assets",
    "unregistered_assets",
    "rrsp_annual_room",
    "rrsp_contribution_limit",
    "tfsa_annual_limit",
)

# Monetary fields that may be +inf (no ceiling)
_UNBOUNDED_FIELDS = ("salary_cap",)

# Fields that are fractions in [0, 1]
_FRACTION_FIELDS = ("withdraw_rate", "employer_rrsp_match", "rrsp_contribution_rate")


@dataclass(frozen=True)
class SimulationParams:

    # Rates (annual multipliers: 1.02 = +2%/year)
    inflation: float = 1.02
    salary_growth: float = 1.1
    return_on_investment: float = 1.07
    # Fraction of the portfolio withdrawn each year in retirement
    withdraw_rate: float = 0.04

    # Income and spending
    salary: float = 140_000
    salary_cap: float = 999_999
    cost_of_living: float = 25_000
    retirement_cost_of_living: float = 25_000

    # RRSP
    employer_rrsp_match: float = 0.0  # fraction of salary contributed through the employer plan
    rrsp_contribution_headroom: float = 0.0  # starting room
    headroom_policy: str = "flat"
    rrsp_annual_room: float | None = None  # flat policy top-up; None = rrsp_contribution_headroom
    rrsp_contribution_limit: float = MAX_RRSP_CONTRIBUTION
    rrsp_contribution_rate: float = RRSP_CONTRIBUTION_RATE

    # TFSA yearly deposit cap (None = uncapped), inflation-indexed
    tfsa_annual_limit: float | None = None

    # Starting balances
    rrsp_assets: float = 0.0
    tfsa_assets: float = 0.0
    unregistered_assets: float = 0.0

    # Allocation policies: surplus fills accounts / withdrawals drain them in this order
    contribution_order: tuple[str, ...] = DEFAULT_CONTRIBUTION_ORDER
    withdrawal_order: tuple[str, ...] = DEFAULT_WITHDRAWAL_ORDER

    federal_tax_brackets: tuple[TaxBracket, ...] = CANADA_FEDERAL_BRACKETS
    provincial_tax_brackets: tuple[TaxBracket, ...] = QUEBEC_BRACKETS
    # Index bracket bounds by inflation every year after the first
    index_tax_brackets: bool = False

    def __post_init__(self):
        for name in ("federal_tax_brackets", "provincial_tax_brackets", "contribution_order", "withdrawal_order"):
            object.__setattr__(self, name, tuple(getattr(self, name)))
        validate_params(self)

    def inflation_factor(self, years: float) -> float:
        """Cumulative inflation multiplier after `years` years."""
        return self.inflation ** years

    def annual_room(self) -> float:
        if self.rrsp_annual_room is None:
            return self.rrsp_contribution_headroom
        return self.rrsp_annual_room

    def tfsa_limit(self, year_index: int) -> float | None:
        """TFSA deposit cap for a given year, or None when uncapped."""
        if self.tfsa_annual_limit is None:
            return None
        return self.tfsa_annual_limit * self.inflation_factor(year_index)


def validate_params(params: SimulationParams) -> None:
    """Raise ConfigurationError on the first invalid field."""
    for name in _MULTIPLIER_FIELDS + _MONETARY_FIELDS + _FRACTION_FIELDS:
        value = getattr(params, name)
        if value is None or (name in _UNBOUNDED_FIELDS and value == math.inf):
            continue
        if not math.isfinite(value):
            raise ConfigurationError(f"{name} must be a finite number, got {value}")
    for name in _MULTIPLIER_FIELDS:
        value = getattr(params, name)
        if value <= 0:
            raise ConfigurationError(f"{name} must be > 0 (a multiplier such as 1.02), got {value}")
    for name in _MONETARY_FIELDS:
        value = getattr(params, name)
        if value is not None and value < 0:
            raise ConfigurationError(f"{name} must be >= 0, got {value}")
    for name in _FRACTION_FIELDS:
        value = getattr(params, name)
        if not 0 <= value <= 1:
            raise ConfigurationError(f"{name} must be between 0 and 1, got {value}")
    for name in ("contribution_order", "withdrawal_order"):
        order = getattr(params, name)
        if sorted(order) != sorted(ACCOUNTS):
            raise ConfigurationError(
                f"{name} must list each of {', '.join(ACCOUNTS)} exactly once, got {list(order)}"
            )
    if params.headroom_policy not in HEADROOM_POLICIES:
        raise ConfigurationError(
            f"headroom_policy must be one of {', '.join(HEADROOM_POLICIES)}, got {params.headroom_policy!r}"
        )
    validate_brackets(params.federal_tax_brackets, "federal_tax_brackets")
    validate_brackets(params.provincial_tax_brackets, "provincial_tax_brackets")


def flat_room(params: SimulationParams, year_index: int, previous_salary: float) -> float:
    """Same room every year."""
    return params.annual_room()


def salary_indexed_room(params: SimulationParams, year_index: int, previous_salary: float) -> float:
    """18% of last year's salary, up to the inflation-indexed yearly maximum."""
    limit = params.rrsp_contribution_limit * params.inflation_factor(year_index)
    return min(limit, previous_salary * params.rrsp_contribution_rate)


# Room added at the start of each year after the first: (params, year_index, previous_salary) -> amount
HEADROOM_POLICIES: dict[str, Callable[[SimulationParams, int, float], float]] = {
    "flat": flat_room,
    "salary_indexed": salary_indexed_room,
}


def param_names() -> list[str]:
    return [f.name for f in fields(SimulationParams)]
