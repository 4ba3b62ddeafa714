"""Exception hierarchy for firesim.

FiresimError (base)
└── ConfigurationError - invalid brackets, rates, amounts or policies

ConfigurationError also derives from ValueError so callers that only know
about ValueError keep working.
"""


class FiresimError(Exception):
    """Base exception for all firesim errors."""


class ConfigurationError(FiresimError, ValueError):
    """Invalid configuration, detected before any simulation year runs.

    Raised for malformed tax brackets (unsorted, overlapping,
    non-contiguous, negative rate), negative monetary amounts,
    non-positive growth multipliers, unknown policy names and
    missing or unknown configuration keys.
    """
