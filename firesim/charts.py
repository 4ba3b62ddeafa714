"""Chart generation for simulation results."""

from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.ticker as ticker

from firesim.simulation import YearRecord, years_to_retirement

ACCOUNT_COLORS = {
    "tax_deferred_balance": "#1f77b4",   # blue
    "tax_free_balance": "#2ca02c",       # green
    "unregistered_balance": "#ff7f0e",   # orange
}
ACCOUNT_LABELS = {
    "tax_deferred_balance": "RRSP",
    "tax_free_balance": "TFSA",
    "unregistered_balance": "Unregistered",
}

SCENARIO_COLORS = ["#1f77b4", "#2ca02c", "#ff7f0e", "#d62728", "#9467bd", "#8c564b"]


def _format_money_axis(ax: plt.Axes):
    """Thousands separators on the left axis, millions on the right."""
    ax.yaxis.set_major_formatter(
        ticker.FuncFormatter(lambda x, _: f"{x:,.0f}")
    )
    ax_right = ax.secondary_yaxis("right")
    ax_right.yaxis.set_major_formatter(
        ticker.FuncFormatter(lambda x, _: f"{x / 1_000_000:.1f}M" if x != 0 else "0")
    )
    ax_right.set_ylabel("")


def _save(fig, output_path: Path, stem: str, name: str) -> Path:
    output_path.mkdir(parents=True, exist_ok=True)
    suffix = f"-{name}" if name else ""
    filepath = output_path / f"{stem}{suffix}.png"
    fig.tight_layout()
    fig.savefig(filepath, dpi=150)
    plt.close(fig)
    return filepath


def plot_trajectory(
    records: list[YearRecord],
    output_path: Path,
    name: str = "",
    base_year: int = 0,
    show_goal: bool = True,
) -> Path:
    """Generate a stacked area chart of account balances, with the retirement year marked.

    Args:
        records: run() output.
        output_path: directory to save the PNG.
        name: optional suffix for the output filename (e.g. "qc" → "trajectory-qc.png").
        base_year: added to year_index on the X axis.
        show_goal: also draw each year's goal, the portfolio size at which
            withdrawals cover the retirement cost of living.

    Returns:
        Path to the generated PNG file.
    """
    if not records:
        raise ValueError("No records for trajectory chart")

    fig, ax = plt.subplots(figsize=(14, 8))

    years = [base_year + r.year_index for r in records]
    stacks = [[getattr(r, key) for r in records] for key in ACCOUNT_COLORS]
    ax.stackplot(
        years, *stacks,
        labels=[ACCOUNT_LABELS[k] for k in ACCOUNT_COLORS],
        colors=list(ACCOUNT_COLORS.values()),
        alpha=0.8,
    )
    if show_goal and any(r.goal for r in records):
        ax.plot(
            years, [r.goal for r in records],
            color="#555555", linestyle="--", linewidth=1.2, label="Retirement target",
        )

    retirement = years_to_retirement(records)
    if retirement is not None:
        ax.axvline(base_year + retirement, color="#c0392b", linewidth=1.0, linestyle=":")
        ax.annotate(
            f"retired ({base_year + retirement})",
            xy=(base_year + retirement, ax.get_ylim()[1] * 0.95),
            fontsize=11, color="#c0392b", ha="left", va="top",
        )

    ax.set_xlabel("Year")
    ax.set_ylabel("Balance")
    ax.set_title("Account balances (end of year)")
    ax.legend(loc="upper left")
    ax.grid(True, alpha=0.3)
    _format_money_axis(ax)

    return _save(fig, output_path, "trajectory", name)


def plot_scenarios(
    results: dict[str, list[YearRecord]], output_path: Path, name: str = "",
) -> Path:
    """Generate a line chart of total assets, one line per scenario or sweep value."""
    results = {k: v for k, v in results.items() if v}
    if not results:
        raise ValueError("No results for scenario chart")

    fig, ax = plt.subplots(figsize=(14, 8))
    for i, (label, records) in enumerate(results.items()):
        color = SCENARIO_COLORS[i % len(SCENARIO_COLORS)]
        years = [r.year_index for r in records]
        ax.plot(years, [r.total_assets for r in records], label=str(label), color=color, linewidth=2)
        retirement = years_to_retirement(records)
        if retirement is not None:
            ax.axvline(retirement, color=color, linewidth=0.8, linestyle=":", alpha=0.6)

    ax.set_xlabel("Year")
    ax.set_ylabel("Total assets")
    ax.set_title("Total assets by scenario")
    ax.legend(loc="upper left")
    ax.grid(True, alpha=0.3)
    _format_money_axis(ax)

    return _save(fig, output_path, "scenarios", name)
