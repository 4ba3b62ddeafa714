"""Year-by-year financial independence simulation."""

from firesim.exceptions import FiresimError, ConfigurationError
from firesim.ledger import Ledger, TAX_DEFERRED, TAX_FREE, UNREGISTERED, ACCOUNTS
from firesim.params import (
    SimulationParams,
    HEADROOM_POLICIES,
    DEFAULT_CONTRIBUTION_ORDER,
    DEFAULT_WITHDRAWAL_ORDER,
)
from firesim.simulation import (
    YearRecord,
    YearState,
    simulate,
    run,
    years_to_retirement,
)
from firesim.tax import (
    TaxBracket,
    compute_tax,
    marginal_rate,
    net_income,
    validate_brackets,
    CANADA_FEDERAL_BRACKETS,
    QUEBEC_BRACKETS,
)

__all__ = [
    "FiresimError",
    "ConfigurationError",
    "Ledger",
    "TAX_DEFERRED",
    "TAX_FREE",
    "UNREGISTERED",
    "ACCOUNTS",
    "SimulationParams",
    "HEADROOM_POLICIES",
    "DEFAULT_CONTRIBUTION_ORDER",
    "DEFAULT_WITHDRAWAL_ORDER",
    "YearRecord",
    "YearState",
    "simulate",
    "run",
    "years_to_retirement",
    "TaxBracket",
    "compute_tax",
    "marginal_rate",
    "net_income",
    "validate_brackets",
    "CANADA_FEDERAL_BRACKETS",
    "QUEBEC_BRACKETS",
]
