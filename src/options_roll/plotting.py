"""Payoff chart for a roll."""

from __future__ import annotations

from collections.abc import Sequence

import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from options_roll.breakeven import find_break_evens
from options_roll.payoff import curve_to_frame
from options_roll.types import PayoffPoint


def plot_roll_payoff(
    curve: Sequence[PayoffPoint],
    *,
    old_strike: float,
    new_strike: float,
    title: str = "Roll P/L at Expiration",
) -> Figure:
    """Plot total P&L against settlement price with strike and break-even marks."""
    frame = curve_to_frame(curve)
    if frame.empty:
        raise ValueError("curve must not be empty")

    fig, ax = plt.subplots(figsize=(10, 5))
    x = frame["settlement_price"]
    y = frame["total_pnl"]
    ax.plot(x, y, color="tab:blue", label="Total P/L")
    ax.fill_between(x, y, 0, where=y >= 0, color="tab:green", alpha=0.15)
    ax.fill_between(x, y, 0, where=y < 0, color="tab:red", alpha=0.15)

    ax.axhline(0.0, color="grey", linewidth=1, linestyle="--")
    ax.axvline(old_strike, color="tab:orange", linestyle=":", label="Old Strike")
    ax.axvline(new_strike, color="tab:purple", linestyle=":", label="New Strike")
    for price in find_break_evens(curve):
        ax.scatter([price], [0.0], color="black", zorder=3)
        ax.annotate(
            f"BE {price:.2f}",
            (price, 0.0),
            textcoords="offset points",
            xytext=(4, 6),
            fontsize=8,
        )

    ax.set_title(title)
    ax.set_xlabel("Stock Price at Expiration")
    ax.set_ylabel("P/L")
    ax.legend(loc="best")
    ax.grid(True)
    fig.tight_layout()
    return fig
