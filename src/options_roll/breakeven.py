"""Break-even search and summary statistics on a discretized payoff curve."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from options_roll.types import PayoffPoint


def _brackets_zero(a: float, b: float) -> bool:
    return (a <= 0.0 <= b) or (b <= 0.0 <= a)


def find_break_evens(curve: Sequence[PayoffPoint]) -> tuple[float, ...]:
    """Return interpolated settlement prices where total P&L crosses zero.

    Each adjacent pair whose P&L values bracket zero contributes one linearly
    interpolated price. Pairs with equal P&L are skipped, so a flat segment
    lying on zero reports nothing. A grid point that is exactly zero is
    reported once even though it closes one pair and opens the next.
    """
    crossings: list[float] = []
    for p0, p1 in zip(curve, curve[1:]):
        if not _brackets_zero(p0.total_pnl, p1.total_pnl):
            continue
        delta = p1.total_pnl - p0.total_pnl
        if delta == 0.0:
            continue
        ratio = -p0.total_pnl / delta
        price = p0.settlement_price + ratio * (p1.settlement_price - p0.settlement_price)
        if crossings and math.isclose(crossings[-1], price, rel_tol=1e-12, abs_tol=1e-9):
            continue
        crossings.append(price)
    return tuple(crossings)


@dataclass(frozen=True)
class CurveSummary:
    """Extremes and break-evens of one payoff curve."""

    max_profit: float
    max_loss: float
    break_evens: tuple[float, ...]
    price_low: float
    price_high: float


def summarize_curve(curve: Sequence[PayoffPoint]) -> CurveSummary:
    if not curve:
        raise ValueError("curve must not be empty")
    pnls = [p.total_pnl for p in curve]
    return CurveSummary(
        max_profit=max(pnls),
        max_loss=min(pnls),
        break_evens=find_break_evens(curve),
        price_low=curve[0].settlement_price,
        price_high=curve[-1].settlement_price,
    )
