"""Roll rules for sold calls: covered (stock held) and naked."""

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

NO_STOCK_WARNING = "No stock to calculate P/L"


def _assignment_split(ctx: NewLegContext) -> tuple[int, int, int]:
    """Split an assignment into (shares called away, shares kept, uncovered shares).

    Shares kept are stock beyond the new leg's size; uncovered shares are
    contracts written beyond the stock held and settle at market.
    """
    qty = ctx.resolved.stock_quantity or 0
    called = min(ctx.shares, qty)
    return called, qty - called, ctx.shares - called


@dataclass(frozen=True)
class CoveredCallRules:
    """Short call written against stock already held.

    The stock position carried out of the old leg drives both scenarios:
    exercise sells it at the new strike, expiry marks it to the expected
    settlement price.
    """

    variant: StrategyVariant = StrategyVariant.COVERED_CALL

    def resolve_old_leg(
        self, strategy: StrategyRecord, assumption: OldLegAssumption
    ) -> ResolvedOldLegState:
        resolved = resolve_unexercised(
            strategy,
            assumption,
            stock_quantity=strategy.shares,
            stock_cost_basis_per_share=strategy.cost_basis_per_share,
        )
        if resolved is not None:
            return resolved

        premium = premium_cash_flow(self.variant, strategy.premium, strategy.shares)
        stock_pnl = (strategy.strike - strategy.cost_basis_per_share) * strategy.shares
        return ResolvedOldLegState(realized_pnl=stock_pnl + premium, stock_quantity=0)

    def project_exercised(self, ctx: NewLegContext) -> ScenarioResult:
        resolved = ctx.resolved
        if not resolved.holds_stock:
            return build_scenario(
                ctx,
                new_leg_pnl=ctx.premium_received,
                cost_basis=None,
                final_stock_quantity=resolved.stock_quantity,
                final_stock_cost_basis=None,
                description="No stock to sell (old position was already exercised)",
            )

        qty = resolved.stock_quantity
        cost = resolved.stock_cost_basis_per_share
        called, kept, uncovered = _assignment_split(ctx)
        remaining_cost = cost if kept > 0 else None
        expected = ctx.new.expected_settlement_price

        if (kept > 0 or uncovered > 0) and expected is None:
            return build_scenario(
                ctx,
                new_leg_pnl=None,
                cost_basis=cost * qty,
                final_stock_quantity=kept,
                final_stock_cost_basis=remaining_cost,
                description="Calculation not possible without expected stock price",
                missing_data_warning=MISSING_EXPECTED_PRICE.format(
                    variant="Covered Call", scenario="exercise"
                ),
            )

        new_leg_pnl = (ctx.new.strike - cost) * called + ctx.premium_received
        if expected is not None:
            new_leg_pnl += (expected - cost) * kept
            new_leg_pnl -= (expected - ctx.new.strike) * uncovered
        return build_scenario(
            ctx,
            new_leg_pnl=new_leg_pnl,
            cost_basis=cost * qty,
            final_stock_quantity=kept,
            final_stock_cost_basis=remaining_cost,
            description=(
                f"New Call exercised: {called} shares sold at "
                f"{money(ctx.new.strike)}"
            ),
        )

    def project_not_exercised(self, ctx: NewLegContext) -> ScenarioResult:
        resolved = ctx.resolved
        expected = ctx.new.expected_settlement_price

        if not resolved.holds_stock:
            return build_scenario(
                ctx,
                new_leg_pnl=None,
                cost_basis=None,
                final_stock_quantity=resolved.stock_quantity,
                final_stock_cost_basis=None,
                description="No stock position",
                missing_data_warning=NO_STOCK_WARNING,
            )
        if expected is None:
            return build_scenario(
                ctx,
                new_leg_pnl=None,
                cost_basis=None,
                final_stock_quantity=resolved.stock_quantity,
                final_stock_cost_basis=resolved.stock_cost_basis_per_share,
                description="Calculation not possible without expected stock price",
                missing_data_warning=MISSING_EXPECTED_PRICE.format(
                    variant="Covered Call", scenario="expiry"
                ),
            )

        qty = resolved.stock_quantity
        cost = resolved.stock_cost_basis_per_share
        stock_pnl = (expected - cost) * qty
        return build_scenario(
            ctx,
            new_leg_pnl=stock_pnl + ctx.premium_received,
            cost_basis=cost * qty,
            final_stock_quantity=qty,
            final_stock_cost_basis=cost,
            description=(
                f"New Call expired: Stock held, valued at {money(expected)}. "
                "P/L = (S_T - cost) x shares + premium"
            ),
        )

    def evaluate_at_price(self, ctx: NewLegContext, price: float) -> float:
        resolved = ctx.resolved
        if not resolved.holds_stock:
            return ctx.premium_received

        cost = resolved.stock_cost_basis_per_share
        if price < ctx.new.strike:
            return (price - cost) * resolved.stock_quantity + ctx.premium_received

        called, kept, uncovered = _assignment_split(ctx)
        return (
            (ctx.new.strike - cost) * called
            + (price - cost) * kept
            - (price - ctx.new.strike) * uncovered
            + ctx.premium_received
        )


@dataclass(frozen=True)
class NakedCallRules:
    """Short call with no stock behind it; assignment is settled at market."""

    variant: StrategyVariant = StrategyVariant.NAKED_CALL

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
        assignment_loss = (market - strategy.strike) * strategy.shares
        return ResolvedOldLegState(realized_pnl=premium - assignment_loss)

    def project_exercised(self, ctx: NewLegContext) -> ScenarioResult:
        expected = ctx.new.expected_settlement_price
        margin = ctx.strategy.margin_cost()

        if expected is None:
            return build_scenario(
                ctx,
                new_leg_pnl=None,
                cost_basis=margin,
                final_stock_quantity=ctx.resolved.stock_quantity,
                final_stock_cost_basis=ctx.resolved.stock_cost_basis_per_share,
                description="Calculation not possible without expected stock price",
                missing_data_warning=MISSING_EXPECTED_PRICE.format(
                    variant="Naked Call", scenario="exercise"
                ),
            )

        assignment_loss = (expected - ctx.new.strike) * ctx.shares
        return build_scenario(
            ctx,
            new_leg_pnl=ctx.premium_received - assignment_loss,
            cost_basis=margin,
            final_stock_quantity=ctx.resolved.stock_quantity,
            final_stock_cost_basis=ctx.resolved.stock_cost_basis_per_share,
            description=(
                f"New Naked Call exercised: Buy at {money(expected)}, "
                f"sell at {money(ctx.new.strike)}"
            ),
        )

    def project_not_exercised(self, ctx: NewLegContext) -> ScenarioResult:
        return build_scenario(
            ctx,
            new_leg_pnl=ctx.premium_received,
            cost_basis=ctx.strategy.margin_cost(),
            final_stock_quantity=ctx.resolved.stock_quantity,
            final_stock_cost_basis=ctx.resolved.stock_cost_basis_per_share,
            description=(
                "New Naked Call expired: Kept full premium "
                f"{money(ctx.premium_received)}"
            ),
        )

    def evaluate_at_price(self, ctx: NewLegContext, price: float) -> float:
        if price >= ctx.new.strike:
            return ctx.premium_received - (price - ctx.new.strike) * ctx.shares
        return ctx.premium_received
