"""TOML config loader with CLI > config > default resolution."""

import argparse
import logging
import sys
import tomllib
from pathlib import Path
from typing import Callable

from firesim.exceptions import ConfigurationError
from firesim.params import SimulationParams, param_names
from firesim.tax import TaxBracket

DEFAULT_CONFIG_PATH = Path("config.toml")

# Must come from the config file or the command line
REQUIRED = (
    "inflation",
    "salary_growth",
    "return_on_investment",
    "salary",
    "cost_of_living",
    "retirement_cost_of_living",
)

DEFAULTS = {
    "salary_cap": 999_999,
    "withdraw_rate": 0.04,
    "employer_rrsp_match": 0.0,
    "rrsp_contribution_headroom": 0,
    "rrsp_assets": 0,
    "tfsa_assets": 0,
    "unregistered_assets": 0,
    "headroom_policy": "flat",
    "rrsp_annual_room": None,
    "tfsa_annual_limit": None,
    "index_tax_brackets": False,
}

# Accepted for compatibility with older config files
_KEY_ALIASES = {"state_tax_brackets": "provincial_tax_brackets"}
_BRACKET_KEYS = ("lower_bound", "upper_bound", "rate")
_BRACKET_ALIASES = {"percentage": "rate"}


def load_config(path: Path | None = None) -> dict:
    """Load TOML config file.

    A missing default config.toml yields an empty dict; a missing file that
    was asked for explicitly is an error.
    """
    explicit = path is not None
    if path is None:
        path = DEFAULT_CONFIG_PATH
    if not path.exists():
        if explicit:
            raise ConfigurationError(f"Couldn't open config file `{path}`")
        return {}
    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        print(f"Invalid TOML in config file {path}: {e}", file=sys.stderr)
        raise SystemExit(1)
    for alias, key in _KEY_ALIASES.items():
        if alias in raw:
            if key in raw:
                raise ConfigurationError(f"both `{alias}` and `{key}` are set; use `{key}`")
            raw[key] = raw.pop(alias)
    return raw


def parse_brackets(raw: list, name: str) -> tuple[TaxBracket, ...]:
    """Convert TOML array-of-tables into TaxBrackets. Missing fields default to 0."""
    if not isinstance(raw, list):
        raise ConfigurationError(f"{name} must be an array of tables")
    brackets = []
    for i, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise ConfigurationError(f"{name}[{i}] must be a table")
        values = {}
        for key, value in entry.items():
            key = _BRACKET_ALIASES.get(key, key)
            if key not in _BRACKET_KEYS:
                raise ConfigurationError(f"{name}[{i}]: unknown key `{key}`")
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(f"{name}[{i}].{key} must be a number, got {value!r}")
            values[key] = value
        brackets.append(TaxBracket(**values))
    return tuple(brackets)


def create_parser(description: str) -> argparse.ArgumentParser:
    """Create argparse parser with shared simulation flags."""
    d = DEFAULTS
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("-c", "--config", type=Path, default=None, help=f"config file path (default: {DEFAULT_CONFIG_PATH})")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="log retirement and exhaustion events (-vv for per-year detail)")
    parser.add_argument("--inflation", type=float, default=None, help="annual inflation multiplier, e.g. 1.02")
    parser.add_argument("--salary-growth", type=float, default=None, help="annual salary growth multiplier, e.g. 1.03")
    parser.add_argument("--return-on-investment", type=float, default=None, help="annual portfolio return multiplier, e.g. 1.07")
    parser.add_argument("--withdraw-rate", type=float, default=None, help=f"fraction of the portfolio withdrawn yearly in retirement (default: {d['withdraw_rate']})")
    parser.add_argument("--salary", type=float, default=None, help="starting gross salary")
    parser.add_argument("--salary-cap", type=float, default=None, help=f"salary ceiling (default: {d['salary_cap']:_})")
    parser.add_argument("--cost-of-living", type=float, default=None, help="yearly spending while working")
    parser.add_argument("--retirement-cost-of-living", type=float, default=None, help="yearly spending in retirement")
    parser.add_argument("--employer-rrsp-match", type=float, default=None, help=f"fraction of salary contributed through the employer RRSP (default: {d['employer_rrsp_match']})")
    parser.add_argument("--rrsp-contribution-headroom", type=float, default=None, help="starting RRSP contribution room")
    parser.add_argument("--headroom-policy", type=str, default=None, choices=["flat", "salary_indexed"], help=f"how RRSP room grows each year (default: {d['headroom_policy']})")
    parser.add_argument("--index-tax-brackets", action="store_true", default=None, help="index tax brackets by inflation every year")
    return parser


def resolve(args: argparse.Namespace, config: dict) -> dict:
    """Resolve values with priority: CLI flag > config.toml > hardcoded default.

    Keys without a CLI flag are copied from the config as-is.
    """
    resolved = dict(config)
    for key in REQUIRED:
        cli_val = getattr(args, key, None)
        if cli_val is not None:
            resolved[key] = cli_val
        elif key not in config:
            raise ConfigurationError(f"missing required setting `{key}` (set it in the config file or pass --{key.replace('_', '-')})")
    for key, default in DEFAULTS.items():
        cli_val = getattr(args, key, None)
        resolved[key] = cli_val if cli_val is not None else config.get(key, default)
    return resolved


def build_params(r: dict) -> SimulationParams:
    """Build SimulationParams from resolved config dict."""
    known = set(param_names())
    unknown = sorted(set(r) - known)
    if unknown:
        raise ConfigurationError(f"unknown config key(s): {', '.join(unknown)}")
    values = dict(r)
    for key in ("federal_tax_brackets", "provincial_tax_brackets"):
        values[key] = parse_brackets(values.get(key, []), key)
    for key in ("contribution_order", "withdrawal_order"):
        if key in values:
            values[key] = tuple(values[key])
    try:
        return SimulationParams(**values)
    except TypeError as e:
        raise ConfigurationError(str(e)) from e


def setup_logging(verbosity: int) -> None:
    """-v → INFO, -vv → DEBUG; warnings are always shown."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")


def parse_args(
    description: str,
    add_args_fn: Callable[[argparse.ArgumentParser], None] | None = None,
    argv: list[str] | None = None,
) -> tuple[SimulationParams, argparse.Namespace]:
    """Parse CLI args, load config, resolve values and build params.

    Configuration errors are printed to stderr and exit with status 1.
    """
    parser = create_parser(description)
    if add_args_fn:
        add_args_fn(parser)
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    try:
        config = load_config(args.config)
        params = build_params(resolve(args, config))
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        raise SystemExit(1)
    return params, args
