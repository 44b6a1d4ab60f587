"""Forward scenarios for the new leg of a roll."""

from __future__ import annotations

from options_roll.resolver import resolve_old_leg
from options_roll.strategies import NewLegContext, get_rules, premium_cash_flow
from options_roll.types import (
    NewPositionInput,
    OldLegAssumption,
    ResolvedOldLegState,
    RollResult,
    ScenarioResult,
    StrategyRecord,
)


def new_leg_premium_received(
    strategy: StrategyRecord, new: NewPositionInput
) -> float:
    """Signed premium of the new leg, using the old variant's side."""
    return premium_cash_flow(strategy.variant, new.premium, new.shares_for(strategy))


def project_scenarios(
    strategy: StrategyRecord,
    resolved: ResolvedOldLegState,
    new: NewPositionInput,
) -> tuple[ScenarioResult, ScenarioResult]:
    """Return `(if_exercised, if_not_exercised)` for the new leg.

    Branching follows the old strategy's variant: a roll stays within the
    same strategy family.
    """
    rules = get_rules(strategy.variant)
    ctx = NewLegContext.build(
        strategy=strategy, resolved=resolved, new=new, variant=strategy.variant
    )
    return rules.project_exercised(ctx), rules.project_not_exercised(ctx)


def calculate_roll(
    strategy: StrategyRecord,
    assumption: OldLegAssumption,
    new: NewPositionInput,
) -> RollResult:
    """Resolve the old leg and project both new-leg scenarios in one call."""
    resolved = resolve_old_leg(strategy, assumption)
    exercised, not_exercised = project_scenarios(strategy, resolved, new)
    return RollResult(
        strategy=strategy,
        assumption=assumption,
        new_position=new,
        resolved=resolved,
        new_leg_premium_received=new_leg_premium_received(strategy, new),
        if_exercised=exercised,
        if_not_exercised=not_exercised,
    )
