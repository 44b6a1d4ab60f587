"""Expiration payoff curve of a roll across hypothetical settlement prices.

The curve evaluates total P&L (old leg realized P&L plus new leg P&L) on an
evenly spaced price grid bracketing both strikes. The new leg's exercise
condition flips at its strike; calls treat `price >= strike` as exercised,
puts `price <= strike`. Both branches agree at the strike itself.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import pandas as pd

from options_roll.resolver import resolve_old_leg
from options_roll.strategies import NewLegContext, VariantRules, get_rules
from options_roll.types import (
    NewPositionInput,
    OldLegAssumption,
    PayoffPoint,
    ResolvedOldLegState,
    StrategyRecord,
)

DEFAULT_STEPS = 100
SPAN_BUFFER_PCT = 0.3
STRIKE_BUFFER_PCT = 0.2


def generate_price_range(
    old_strike: float, new_strike: float, *, steps: int = DEFAULT_STEPS
) -> tuple[float, ...]:
    """Return `steps + 1` ascending settlement prices around both strikes.

    The buffer on each side is the larger of 30% of the strike span and 20%
    of the lower strike; the lower bound is floored at zero.
    """
    if steps <= 0:
        raise ValueError("steps must be > 0")

    low_strike = min(old_strike, new_strike)
    high_strike = max(old_strike, new_strike)
    buffer = max(
        (high_strike - low_strike) * SPAN_BUFFER_PCT,
        low_strike * STRIKE_BUFFER_PCT,
    )
    lower = max(0.0, low_strike - buffer)
    upper = high_strike + buffer
    return tuple(np.linspace(lower, upper, steps + 1).tolist())


def _new_leg_pricer(
    strategy: StrategyRecord, resolved: ResolvedOldLegState, new: NewPositionInput
) -> tuple[VariantRules, NewLegContext]:
    # Dispatch on the new leg's variant, defaulting to the old one.
    variant = new.variant_for(strategy)
    ctx = NewLegContext.build(
        strategy=strategy, resolved=resolved, new=new, variant=variant
    )
    return get_rules(variant), ctx


def evaluate_at_price(
    strategy: StrategyRecord,
    resolved: ResolvedOldLegState,
    new: NewPositionInput,
    settlement_price: float,
) -> float:
    """Return total roll P&L if the underlying settles at `settlement_price`."""
    rules, ctx = _new_leg_pricer(strategy, resolved, new)
    return resolved.realized_pnl + rules.evaluate_at_price(ctx, settlement_price)


def generate_curve(
    strategy: StrategyRecord,
    assumption: OldLegAssumption,
    new: NewPositionInput,
    *,
    steps: int = DEFAULT_STEPS,
) -> tuple[PayoffPoint, ...]:
    """Resolve the old leg and evaluate the roll over the default price grid."""
    resolved = resolve_old_leg(strategy, assumption)
    prices = generate_price_range(strategy.strike, new.strike, steps=steps)

    rules, ctx = _new_leg_pricer(strategy, resolved, new)
    return tuple(
        PayoffPoint(
            settlement_price=price,
            total_pnl=resolved.realized_pnl + rules.evaluate_at_price(ctx, price),
        )
        for price in prices
    )


def curve_to_frame(curve: Sequence[PayoffPoint]) -> pd.DataFrame:
    """Return the curve as a two-column DataFrame ordered by price."""
    return pd.DataFrame(
        {
            "settlement_price": [p.settlement_price for p in curve],
            "total_pnl": [p.total_pnl for p in curve],
        },
        columns=["settlement_price", "total_pnl"],
    )
