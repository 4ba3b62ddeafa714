"""Progressive income tax brackets."""

import math
from dataclasses import dataclass

from firesim.exceptions import ConfigurationError

# Upper bound used by the sample configuration for the open-ended top bracket
SENTINEL_UPPER_BOUND = 999_999

CAPITAL_GAINS_INCLUSION_RATE = 0.5  # half of a capital gain is taxable income

# (lower_bound, upper_bound, rate %), 2021 values
_CANADA_FEDERAL: tuple[tuple[int, int, float], ...] = (
    (0, 13_808, 0.0),
    (13_808, 49_020, 15.0),
    (49_020, 98_040, 20.5),
    (98_040, 151_978, 26.0),
    (151_978, 216_511, 29.75),
    (216_511, SENTINEL_UPPER_BOUND, 33.0),
)
_QUEBEC: tuple[tuple[int, int, float], ...] = (
    (0, 15_728, 0.0),
    (15_728, 45_105, 15.0),
    (45_105, 90_200, 20.0),
    (90_200, 109_755, 24.0),
    (109_755, SENTINEL_UPPER_BOUND, 25.75),
)


@dataclass(frozen=True)
class TaxBracket:
    """Income in [lower_bound, upper_bound) is taxed at `rate` percent."""

    lower_bound: float = 0
    upper_bound: float = 0
    rate: float = 0.0

    def compute_tax(self, income: float, open_ended: bool = False) -> float:
        """Tax owed on the part of `income` that falls inside this bracket.

        With `open_ended`, income past `upper_bound` is taxed here too.
        """
        top = income if open_ended else min(income, self.upper_bound)
        portion = max(0.0, top - self.lower_bound)
        return portion * self.rate / 100

    def adjust_for_inflation(self, multiplier: float) -> "TaxBracket":
        """Index both bounds, truncated to whole currency units."""
        return TaxBracket(
            lower_bound=int(self.lower_bound * multiplier),
            upper_bound=int(self.upper_bound * multiplier),
            rate=self.rate,
        )


CANADA_FEDERAL_BRACKETS = tuple(TaxBracket(*b) for b in _CANADA_FEDERAL)
QUEBEC_BRACKETS = tuple(TaxBracket(*b) for b in _QUEBEC)


def compute_tax(brackets: tuple[TaxBracket, ...] | list[TaxBracket], income: float) -> float:
    """Return the total tax owed on `income` for an ascending bracket list.

    Each bracket contributes only the slice of income inside its bounds, so
    a bracket boundary is never taxed twice. Brackets above the income
    contribute nothing and are skipped. The top bracket's upper bound is a
    sentinel, not a ceiling: income past it is taxed at the top rate.
    """
    tax = 0.0
    last = len(brackets) - 1
    for i, bracket in enumerate(brackets):
        if income <= bracket.lower_bound:
            break
        tax += bracket.compute_tax(income, open_ended=i == last)
    return tax


def marginal_rate(brackets: tuple[TaxBracket, ...] | list[TaxBracket], income: float) -> float:
    """Return the rate (percent) of the bracket containing `income`.

    Income beyond the last bracket is reported at the last bracket's rate;
    an empty bracket list means no tax.
    """
    if not brackets:
        return 0.0
    for bracket in brackets:
        if bracket.lower_bound <= income < bracket.upper_bound:
            return bracket.rate
    if income < brackets[0].lower_bound:
        return 0.0
    return brackets[-1].rate


def net_income(
    jurisdictions: list[tuple[TaxBracket, ...]],
    income: float,
    capital_gains: float = 0.0,
) -> float:
    """Income plus capital gains, less the tax of every jurisdiction.

    Only half of the capital gains is added to taxable income.
    """
    taxable = income + capital_gains * CAPITAL_GAINS_INCLUSION_RATE
    taxes = sum(compute_tax(brackets, taxable) for brackets in jurisdictions)
    return income + capital_gains - taxes


def index_brackets(brackets: tuple[TaxBracket, ...], multiplier: float) -> tuple[TaxBracket, ...]:
    """Index a whole bracket list by `multiplier`.

    Adjacent bounds are scaled from the same value, so contiguity survives
    the truncation.
    """
    return tuple(b.adjust_for_inflation(multiplier) for b in brackets)


def validate_brackets(brackets: tuple[TaxBracket, ...] | list[TaxBracket], name: str = "tax_brackets") -> None:
    """Raise ConfigurationError unless the brackets form one ascending, gapless ladder."""
    previous = None
    for i, bracket in enumerate(brackets):
        where = f"{name}[{i}]"
        for key in ("lower_bound", "upper_bound", "rate"):
            value = getattr(bracket, key)
            if not math.isfinite(value):
                raise ConfigurationError(f"{where}: {key} must be a finite number, got {value}")
        if bracket.rate < 0:
            raise ConfigurationError(f"{where}: rate must be >= 0, got {bracket.rate}")
        if bracket.lower_bound < 0:
            raise ConfigurationError(f"{where}: lower_bound must be >= 0, got {bracket.lower_bound}")
        if bracket.upper_bound <= bracket.lower_bound:
            raise ConfigurationError(
                f"{where}: upper_bound {bracket.upper_bound} must be greater than "
                f"lower_bound {bracket.lower_bound}"
            )
        if previous is not None:
            if bracket.lower_bound < previous.upper_bound:
                kind = "unsorted" if bracket.lower_bound < previous.lower_bound else "overlapping"
                raise ConfigurationError(
                    f"{where}: {kind} bracket, lower_bound {bracket.lower_bound} < "
                    f"previous upper_bound {previous.upper_bound}"
                )
            if bracket.lower_bound > previous.upper_bound:
                raise ConfigurationError(
                    f"{where}: gap between {previous.upper_bound} and {bracket.lower_bound}"
                )
        previous = bracket
