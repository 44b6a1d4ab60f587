"""Roll rules for bought calls and puts.

For long legs the premium is a cash outflow and the return is measured
against the premium paid.
"""

from __future__ import annotations

from dataclasses import dataclass

from options_roll.strategies.base import (
    MISSING_EXERCISE_PRICE,
    MISSING_EXPECTED_PRICE,
    NewLegContext,
    build_scenario,
    money,
    premium_cash_flow,
    resolve_unexercised,
)
from options_roll.types import (
    OldLegAssumption,
    ResolvedOldLegState,
    ScenarioResult,
    StrategyRecord,
    StrategyVariant,
)


def _premium_only(ctx: NewLegContext, description: str) -> ScenarioResult:
    return build_scenario(
        ctx,
        new_leg_pnl=ctx.premium_received,
        cost_basis=ctx.premium_paid,
        final_stock_quantity=None,
        final_stock_cost_basis=None,
        description=description,
    )


@dataclass(frozen=True)
class BuyCallRules:
    """Long call; exercise buys stock at the strike."""

    variant: StrategyVariant = StrategyVariant.BUY_CALL

    def resolve_old_leg(
        self, strategy: StrategyRecord, assumption: OldLegAssumption
    ) -> ResolvedOldLegState:
        resolved = resolve_unexercised(strategy, assumption)
        if resolved is not None:
            return resolved

        premium = premium_cash_flow(self.variant, strategy.premium, strategy.shares)
        return ResolvedOldLegState(
            realized_pnl=0.0,
            stock_quantity=strategy.shares,
            stock_cost_basis_per_share=strategy.strike - premium / strategy.shares,
        )

    def project_exercised(self, ctx: NewLegContext) -> ScenarioResult:
        return build_scenario(
            ctx,
            new_leg_pnl=ctx.premium_received,
            cost_basis=ctx.premium_paid,
            final_stock_quantity=ctx.shares,
            final_stock_cost_basis=ctx.new.strike - ctx.premium_received / ctx.shares,
            description=(
                f"New Call exercised: Stock purchased at {money(ctx.new.strike)}"
            ),
        )

    def project_not_exercised(self, ctx: NewLegContext) -> ScenarioResult:
        return _premium_only(
            ctx, f"New Call expired: Premium paid {money(ctx.premium_paid)} lost"
        )

    def evaluate_at_price(self, ctx: NewLegContext, price: float) -> float:
        if price >= ctx.new.strike:
            return (price - ctx.new.strike) * ctx.shares + ctx.premium_received
        return ctx.premium_received


@dataclass(frozen=True)
class BuyPutRules:
    """Long put; exercise delivers stock bought at market for the strike."""

    variant: StrategyVariant = StrategyVariant.BUY_PUT

    def resolve_old_leg(
        self, strategy: StrategyRecord, assumption: OldLegAssumption
    ) -> ResolvedOldLegState:
        resolved = resolve_unexercised(strategy, assumption)
        if resolved is not None:
            return resolved

        premium = premium_cash_flow(self.variant, strategy.premium, strategy.shares)
        market = assumption.market_price_at_exercise
        if market is None:
            return ResolvedOldLegState(
                realized_pnl=premium, missing_data_warning=MISSING_EXERCISE_PRICE
            )
        return ResolvedOldLegState(
            realized_pnl=(strategy.strike - market) * strategy.shares + premium
        )

    def project_exercised(self, ctx: NewLegContext) -> ScenarioResult:
        expected = ctx.new.expected_settlement_price
        if expected is None:
            return build_scenario(
                ctx,
                new_leg_pnl=None,
                cost_basis=ctx.premium_paid,
                final_stock_quantity=None,
                final_stock_cost_basis=None,
                description="Calculation not possible without expected stock price",
                missing_data_warning=MISSING_EXPECTED_PRICE.format(
                    variant="Buy Put", scenario="exercise"
                ),
            )

        exercise_gain = (ctx.new.strike - expected) * ctx.shares
        return build_scenario(
            ctx,
            new_leg_pnl=exercise_gain + ctx.premium_received,
            cost_basis=ctx.premium_paid,
            final_stock_quantity=None,
            final_stock_cost_basis=None,
            description=(
                f"New Put exercised: Buy at {money(expected)}, "
                f"sell at {money(ctx.new.strike)}"
            ),
        )

    def project_not_exercised(self, ctx: NewLegContext) -> ScenarioResult:
        return _premium_only(
            ctx, f"New Put expired: Premium paid {money(ctx.premium_paid)} lost"
        )

    def evaluate_at_price(self, ctx: NewLegContext, price: float) -> float:
        if price <= ctx.new.strike:
            return (ctx.new.strike - price) * ctx.shares + ctx.premium_received
        return ctx.premium_received
