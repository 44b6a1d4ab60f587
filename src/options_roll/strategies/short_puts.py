"""Roll rules for sold puts.

Put assignment always buys stock at the strike, so cash-secured and naked
puts resolve identically. They only differ in the capital a return is
measured against.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from options_roll.strategies.base import (
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


@dataclass(frozen=True)
class _ShortPutRules(ABC):
    variant: StrategyVariant
    label: str

    def resolve_old_leg(
        self, strategy: StrategyRecord, assumption: OldLegAssumption
    ) -> ResolvedOldLegState:
        resolved = resolve_unexercised(strategy, assumption)
        if resolved is not None:
            return resolved

        # Assignment converts cash into stock; the premium lowers its cost.
        premium = premium_cash_flow(self.variant, strategy.premium, strategy.shares)
        return ResolvedOldLegState(
            realized_pnl=0.0,
            stock_quantity=strategy.shares,
            stock_cost_basis_per_share=strategy.strike - premium / strategy.shares,
        )

    @abstractmethod
    def exercised_cost_basis(self, ctx: NewLegContext) -> float:
        """Capital the exercised scenario's return is measured against."""

    @abstractmethod
    def expired_cost_basis(self, ctx: NewLegContext) -> float:
        """Capital the expired scenario's return is measured against."""

    def project_exercised(self, ctx: NewLegContext) -> ScenarioResult:
        net_cost_per_share = ctx.new.strike - ctx.premium_received / ctx.shares
        return build_scenario(
            ctx,
            new_leg_pnl=ctx.premium_received,
            cost_basis=self.exercised_cost_basis(ctx),
            final_stock_quantity=ctx.shares,
            final_stock_cost_basis=net_cost_per_share,
            description=(
                f"New {self.label} exercised: Stock purchased at "
                f"{money(ctx.new.strike)}"
            ),
        )

    def project_not_exercised(self, ctx: NewLegContext) -> ScenarioResult:
        return build_scenario(
            ctx,
            new_leg_pnl=ctx.premium_received,
            cost_basis=self.expired_cost_basis(ctx),
            final_stock_quantity=None,
            final_stock_cost_basis=None,
            description=(
                f"New {self.label} expired: Kept premium "
                f"{money(ctx.premium_received)}, no stock purchased"
            ),
        )

    def evaluate_at_price(self, ctx: NewLegContext, price: float) -> float:
        if price <= ctx.new.strike:
            return ctx.premium_received - (ctx.new.strike - price) * ctx.shares
        return ctx.premium_received


@dataclass(frozen=True)
class CashSecuredPutRules(_ShortPutRules):
    """Short put fully collateralised by cash at the strike."""

    variant: StrategyVariant = StrategyVariant.CASH_SECURED_PUT
    label: str = "Put"

    def exercised_cost_basis(self, ctx: NewLegContext) -> float:
        return ctx.new.strike * ctx.shares - ctx.premium_received

    def expired_cost_basis(self, ctx: NewLegContext) -> float:
        return ctx.new.strike * ctx.shares


@dataclass(frozen=True)
class NakedPutRules(_ShortPutRules):
    """Short put carried on margin."""

    variant: StrategyVariant = StrategyVariant.NAKED_PUT
    label: str = "Naked Put"

    def exercised_cost_basis(self, ctx: NewLegContext) -> float:
        return ctx.strategy.margin_cost()

    def expired_cost_basis(self, ctx: NewLegContext) -> float:
        return ctx.strategy.margin_cost()
