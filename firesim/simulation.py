"""Core simulation engine."""

import itertools
import logging
from dataclasses import dataclass
from typing import Iterator

from firesim.ledger import ACCOUNTS, TAX_DEFERRED, TAX_FREE, UNREGISTERED, Ledger
from firesim.params import HEADROOM_POLICIES, SimulationParams
from firesim.tax import TaxBracket, compute_tax, index_brackets, net_income

logger = logging.getLogger(__name__)


@dataclass
class YearState:
    """State carried from one simulated year to the next."""

    year_index: int
    salary: float
    cost_of_living: float
    retirement_cost_of_living: float
    ledger: Ledger
    federal_tax_brackets: tuple[TaxBracket, ...]
    provincial_tax_brackets: tuple[TaxBracket, ...]
    retired: bool = False
    exhausted: bool = False

    @classmethod
    def initial(cls, params: SimulationParams) -> "YearState":
        return cls(
            year_index=0,
            salary=params.salary,
            cost_of_living=params.cost_of_living,
            retirement_cost_of_living=params.retirement_cost_of_living,
            ledger=Ledger(
                tax_deferred=params.rrsp_assets,
                tax_free=params.tfsa_assets,
                unregistered=params.unregistered_assets,
                headroom=params.rrsp_contribution_headroom,
            ),
            federal_tax_brackets=params.federal_tax_brackets,
            provincial_tax_brackets=params.provincial_tax_brackets,
        )


@dataclass(frozen=True)
class YearRecord:
    """One emitted row: what happened during a year and the balances at its end."""

    year_index: int
    salary: float
    taxable_income: float
    federal_tax: float
    provincial_tax: float
    net_income: float
    surplus: float
    cost_of_living: float
    retirement_cost_of_living: float
    contribution_headroom: float
    tax_deferred_contribution: float
    tax_free_contribution: float
    unregistered_contribution: float
    withdrawal: float
    shortfall: float
    tax_deferred_balance: float
    tax_free_balance: float
    unregistered_balance: float
    total_assets: float
    goal: float  # portfolio whose withdrawals cover this year's retirement cost of living
    passive_income: float
    retired: bool
    exhausted: bool


def passive_income(state: YearState, params: SimulationParams) -> float:
    """After-tax income the portfolio would yield at the configured withdraw rate.

    TFSA draws are tax-free, RRSP draws are ordinary income and unregistered
    draws are treated as capital gains.
    """
    ledger = state.ledger
    rate = params.withdraw_rate
    return ledger.tax_free * rate + net_income(
        [state.federal_tax_brackets, state.provincial_tax_brackets],
        ledger.tax_deferred * rate,
        ledger.unregistered * rate,
    )


def _allocate_surplus(
    surplus: float, ledger: Ledger, params: SimulationParams, year_index: int,
) -> dict[str, float]:
    """Spread the surplus across accounts in contribution order. Returns deposits per account."""
    deposits = dict.fromkeys(ACCOUNTS, 0.0)
    remaining = surplus
    for account in params.contribution_order:
        if remaining <= 0:
            break
        if account == TAX_DEFERRED:
            amount = min(remaining, ledger.headroom)
            ledger.deposit_tax_deferred(amount)
        elif account == TAX_FREE:
            limit = params.tfsa_limit(year_index)
            amount = remaining if limit is None else min(remaining, limit)
            ledger.deposit_tax_free(amount)
        else:
            amount = remaining
            ledger.deposit_unregistered(amount)
        deposits[account] += amount
        remaining -= amount
    return deposits


def retirement_goal(retirement_cost_of_living: float, withdraw_rate: float) -> float:
    """Portfolio size whose yearly withdrawals cover the retirement cost of living (0 if nothing is withdrawn)."""
    if withdraw_rate == 0:
        return 0.0
    return retirement_cost_of_living / withdraw_rate


def _snapshot(state: YearState, params: SimulationParams, **year_values) -> YearRecord:
    ledger = state.ledger
    return YearRecord(
        year_index=state.year_index,
        contribution_headroom=ledger.headroom,
        tax_deferred_balance=ledger.tax_deferred,
        tax_free_balance=ledger.tax_free,
        unregistered_balance=ledger.unregistered,
        total_assets=ledger.total(),
        goal=retirement_goal(year_values["retirement_cost_of_living"], params.withdraw_rate),
        passive_income=passive_income(state, params),
        retired=state.retired,
        exhausted=state.exhausted,
        **year_values,
    )


def _accumulation_year(state: YearState, params: SimulationParams) -> YearRecord:
    """Earn, pay tax, save, grow; then check whether the portfolio can fund retirement."""
    ledger = state.ledger
    salary = state.salary
    cost_of_living = state.cost_of_living
    retirement_cost_of_living = state.retirement_cost_of_living

    # Employer plan contribution is fixed by salary, so the deduction is known before tax
    plan_contribution = salary * params.employer_rrsp_match
    deducted = ledger.deposit_tax_deferred(plan_contribution)
    plan_overflow = plan_contribution - deducted  # redirected to unregistered

    taxable_income = salary - deducted
    federal_tax = compute_tax(state.federal_tax_brackets, taxable_income)
    provincial_tax = compute_tax(state.provincial_tax_brackets, taxable_income)

    net = salary - federal_tax - provincial_tax - cost_of_living
    if net < 0:
        logger.debug(
            "Year %d: cost of living exceeds after-tax salary by %.2f, nothing saved",
            state.year_index, -net,
        )
    surplus = max(0.0, net)
    deposits = _allocate_surplus(surplus, ledger, params, state.year_index)

    ledger.grow(params.return_on_investment)

    state.cost_of_living *= params.inflation
    state.retirement_cost_of_living *= params.inflation

    if ledger.total() * params.withdraw_rate >= state.retirement_cost_of_living:
        state.retired = True
        logger.info(
            "Year %d: retirement reached with %.2f in assets", state.year_index, ledger.total(),
        )

    return _snapshot(
        state, params,
        salary=salary,
        taxable_income=taxable_income,
        federal_tax=federal_tax,
        provincial_tax=provincial_tax,
        net_income=net,
        surplus=surplus,
        cost_of_living=cost_of_living,
        retirement_cost_of_living=retirement_cost_of_living,
        tax_deferred_contribution=deducted + deposits[TAX_DEFERRED],
        tax_free_contribution=deposits[TAX_FREE],
        unregistered_contribution=plan_overflow + deposits[UNREGISTERED],
        withdrawal=0.0,
        shortfall=0.0,
    )


def _retirement_year(state: YearState, params: SimulationParams) -> YearRecord:
    """Fund the retirement cost of living from the portfolio; grow what is left."""
    ledger = state.ledger
    state.salary = 0.0
    required = state.retirement_cost_of_living

    withdrawn = ledger.withdraw(required, params.withdrawal_order)
    shortfall = required - withdrawn
    if shortfall > 0 and not state.exhausted:
        state.exhausted = True
        logger.warning(
            "Year %d: portfolio exhausted, %.2f of %.2f retirement cost of living unfunded",
            state.year_index, shortfall, required,
        )

    ledger.grow(params.return_on_investment)
    state.retirement_cost_of_living *= params.inflation

    return _snapshot(
        state, params,
        salary=0.0,
        taxable_income=0.0,
        federal_tax=0.0,
        provincial_tax=0.0,
        net_income=withdrawn,
        surplus=0.0,
        cost_of_living=0.0,  # spending is retirement_cost_of_living from here on
        retirement_cost_of_living=required,
        tax_deferred_contribution=0.0,
        tax_free_contribution=0.0,
        unregistered_contribution=0.0,
        withdrawal=withdrawn,
        shortfall=shortfall,
    )


def _next_year(state: YearState, params: SimulationParams) -> None:
    """Roll the state over the year boundary: room top-up, raise, bracket indexing."""
    state.year_index += 1
    if params.index_tax_brackets:
        state.federal_tax_brackets = index_brackets(state.federal_tax_brackets, params.inflation)
        state.provincial_tax_brackets = index_brackets(state.provincial_tax_brackets, params.inflation)
    if state.retired:
        return
    room = HEADROOM_POLICIES[params.headroom_policy](params, state.year_index, state.salary)
    state.ledger.add_headroom(room)
    state.salary = min(state.salary * params.salary_growth, params.salary_cap)


def simulate(params: SimulationParams) -> Iterator[YearRecord]:
    """Yield one YearRecord per year, indefinitely.

    Every call starts over from the configured starting values, so the
    sequence can be replayed.
    """
    state = YearState.initial(params)
    while True:
        if state.retired:
            yield _retirement_year(state, params)
        else:
            yield _accumulation_year(state, params)
        _next_year(state, params)


def run(params: SimulationParams, years: int) -> list[YearRecord]:
    """Simulate exactly `years` years."""
    if years < 0:
        raise ValueError(f"years must be >= 0, got {years}")
    return list(itertools.islice(simulate(params), years))


def years_to_retirement(records: list[YearRecord]) -> int | None:
    """year_index of the first retired record, or None if retirement is never reached."""
    for record in records:
        if record.retired:
            return record.year_index
    return None
