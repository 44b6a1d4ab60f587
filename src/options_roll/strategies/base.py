"""Shared contract and helpers for per-variant roll rules.

Each strategy variant owns one rules object implementing `VariantRules`.
Rules are pure: they read their inputs and build new result objects, never
mutating anything.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from options_roll.types import (
    NewPositionInput,
    OldLegAssumption,
    OldLegEndMode,
    ResolvedOldLegState,
    ScenarioResult,
    StrategyRecord,
    StrategyVariant,
)

MISSING_CLOSE_PRICE = (
    "Close price not provided: old leg treated as expired worthless, "
    "closing cost is understated"
)
MISSING_EXERCISE_PRICE = (
    "Market price at exercise not provided: assignment loss excluded, "
    "old leg P&L is premium only"
)
MISSING_EXPECTED_PRICE = (
    "Cannot calculate: expected stock price at expiration is required for "
    "the {variant} {scenario} scenario"
)


def premium_cash_flow(variant: StrategyVariant, premium: float, shares: int) -> float:
    """Signed premium cash flow: positive when collected, negative when paid."""
    return -int(variant.side) * premium * shares


def money(value: float) -> str:
    return f"${value:,.2f}"


@dataclass(frozen=True)
class NewLegContext:
    """Inputs shared by every new-leg computation of one roll.

    `premium_received` is signed by the variant whose rules consume the
    context (collected premium is positive, paid premium negative).
    """

    strategy: StrategyRecord
    resolved: ResolvedOldLegState
    new: NewPositionInput
    shares: int
    premium_received: float

    @classmethod
    def build(
        cls,
        *,
        strategy: StrategyRecord,
        resolved: ResolvedOldLegState,
        new: NewPositionInput,
        variant: StrategyVariant,
    ) -> NewLegContext:
        shares = new.shares_for(strategy)
        return cls(
            strategy=strategy,
            resolved=resolved,
            new=new,
            shares=shares,
            premium_received=premium_cash_flow(variant, new.premium, shares),
        )

    @property
    def premium_paid(self) -> float:
        return -self.premium_received


def build_scenario(
    ctx: NewLegContext,
    *,
    new_leg_pnl: float | None,
    cost_basis: float | None,
    final_stock_quantity: int | None,
    final_stock_cost_basis: float | None,
    description: str,
    missing_data_warning: str | None = None,
) -> ScenarioResult:
    """Assemble a `ScenarioResult`, deriving total P&L and return."""
    total_pnl = None
    return_pct = None
    if new_leg_pnl is not None:
        total_pnl = ctx.resolved.realized_pnl + new_leg_pnl
        if cost_basis is not None and cost_basis > 0:
            return_pct = total_pnl / cost_basis

    return ScenarioResult(
        new_leg_pnl=new_leg_pnl,
        total_pnl=total_pnl,
        cost_basis=cost_basis,
        return_pct=return_pct,
        final_stock_quantity=final_stock_quantity,
        final_stock_cost_basis=final_stock_cost_basis,
        description=description,
        missing_data_warning=missing_data_warning,
    )


def resolve_unexercised(
    strategy: StrategyRecord,
    assumption: OldLegAssumption,
    *,
    stock_quantity: int | None = None,
    stock_cost_basis_per_share: float | None = None,
) -> ResolvedOldLegState | None:
    """Resolve the expired and closed outcomes common to every variant.

    Returns None for the exercised outcome, which is variant specific.
    Closing trades the option at `close_price`: a short leg buys it back,
    a long leg sells it.
    """
    premium = premium_cash_flow(strategy.variant, strategy.premium, strategy.shares)

    if assumption.end_mode == OldLegEndMode.EXPIRED:
        return ResolvedOldLegState(
            realized_pnl=premium,
            stock_quantity=stock_quantity,
            stock_cost_basis_per_share=stock_cost_basis_per_share,
        )

    if assumption.end_mode == OldLegEndMode.CLOSED:
        if assumption.close_price is None:
            return ResolvedOldLegState(
                realized_pnl=premium,
                stock_quantity=stock_quantity,
                stock_cost_basis_per_share=stock_cost_basis_per_share,
                missing_data_warning=MISSING_CLOSE_PRICE,
            )
        close_flow = premium_cash_flow(
            strategy.variant, assumption.close_price, strategy.shares
        )
        return ResolvedOldLegState(
            realized_pnl=premium - close_flow,
            stock_quantity=stock_quantity,
            stock_cost_basis_per_share=stock_cost_basis_per_share,
        )

    return None


@runtime_checkable
class VariantRules(Protocol):
    """Roll arithmetic for one strategy variant."""

    variant: StrategyVariant

    def resolve_old_leg(
        self, strategy: StrategyRecord, assumption: OldLegAssumption
    ) -> ResolvedOldLegState:
        """Return realized P&L and carried stock for the old leg."""
        ...

    def project_exercised(self, ctx: NewLegContext) -> ScenarioResult:
        """Return the scenario where the new leg is exercised."""
        ...

    def project_not_exercised(self, ctx: NewLegContext) -> ScenarioResult:
        """Return the scenario where the new leg expires unexercised."""
        ...

    def evaluate_at_price(self, ctx: NewLegContext, price: float) -> float:
        """Return the new leg's P&L if the underlying settles at `price`."""
        ...
