"""Shared dataclasses and enums for option-roll scenario analysis."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from enum import IntEnum, StrEnum

CONTRACT_SIZE = 100


class PositionSide(IntEnum):
    """Signed position direction used for premium cash flows."""

    SHORT = -1
    LONG = 1


class StrategyVariant(StrEnum):
    """Closed set of single-leg option strategies a position can hold."""

    COVERED_CALL = "CoveredCall"
    NAKED_CALL = "NakedCall"
    CASH_SECURED_PUT = "CashSecuredPut"
    NAKED_PUT = "NakedPut"
    BUY_CALL = "BuyCall"
    BUY_PUT = "BuyPut"

    @property
    def display_name(self) -> str:
        return _VARIANT_DISPLAY_NAMES[self]

    @property
    def is_call(self) -> bool:
        return self in (
            StrategyVariant.COVERED_CALL,
            StrategyVariant.NAKED_CALL,
            StrategyVariant.BUY_CALL,
        )

    @property
    def is_put(self) -> bool:
        return not self.is_call

    @property
    def is_secured(self) -> bool:
        return self in (StrategyVariant.COVERED_CALL, StrategyVariant.CASH_SECURED_PUT)

    @property
    def is_naked(self) -> bool:
        return self in (StrategyVariant.NAKED_CALL, StrategyVariant.NAKED_PUT)

    @property
    def is_long(self) -> bool:
        """True for bought options, where the premium is paid, not collected."""
        return self in (StrategyVariant.BUY_CALL, StrategyVariant.BUY_PUT)

    @property
    def side(self) -> PositionSide:
        return PositionSide.LONG if self.is_long else PositionSide.SHORT


_VARIANT_DISPLAY_NAMES: dict[StrategyVariant, str] = {
    StrategyVariant.COVERED_CALL: "Sell Covered Call",
    StrategyVariant.NAKED_CALL: "Sell Naked Call",
    StrategyVariant.CASH_SECURED_PUT: "Sell Cash-Secured Put",
    StrategyVariant.NAKED_PUT: "Sell Naked Put",
    StrategyVariant.BUY_CALL: "Buy Call",
    StrategyVariant.BUY_PUT: "Buy Put",
}


class OldLegEndMode(StrEnum):
    """How the existing leg is assumed to have ended."""

    EXERCISED = "Exercised"
    CLOSED = "Closed"
    EXPIRED = "Expired"

    @property
    def display_name(self) -> str:
        return {
            OldLegEndMode.EXERCISED: "Exercised",
            OldLegEndMode.CLOSED: "Closed (Buy Back)",
            OldLegEndMode.EXPIRED: "Expired Worthless",
        }[self]

    @property
    def description(self) -> str:
        return {
            OldLegEndMode.EXERCISED: "Option was exercised, stock was assigned",
            OldLegEndMode.CLOSED: "Option was bought back before expiration",
            OldLegEndMode.EXPIRED: "Option expired worthless, kept full premium",
        }[self]


class ExerciseStatus(StrEnum):
    YES = "Yes"
    NO = "No"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class StrategyRecord:
    """Snapshot of an existing single-leg option position.

    `premium` is quoted per share. For sold variants it is the premium
    collected at open; for `BUY_*` variants it is the premium paid.
    `cost_basis_per_share` only matters for covered calls, and
    `margin_override` only for naked variants.
    """

    symbol: str
    variant: StrategyVariant
    strike: float
    premium: float
    contracts: int
    cost_basis_per_share: float = 0.0
    margin_override: float | None = None
    expiration: date | None = None
    exercise_status: ExerciseStatus = ExerciseStatus.UNKNOWN
    exercise_market_price: float | None = None
    current_market_price: float | None = None

    def __post_init__(self) -> None:
        symbol = str(self.symbol).strip().upper()
        if not symbol:
            raise ValueError("symbol must not be empty")
        object.__setattr__(self, "symbol", symbol)
        object.__setattr__(self, "variant", StrategyVariant(self.variant))
        object.__setattr__(
            self, "exercise_status", ExerciseStatus(self.exercise_status)
        )
        if self.strike <= 0:
            raise ValueError("strike must be > 0")
        if self.contracts <= 0:
            raise ValueError("contracts must be > 0")
        if self.margin_override is not None and self.margin_override < 0:
            raise ValueError("margin_override must be >= 0")

    @property
    def shares(self) -> int:
        return self.contracts * CONTRACT_SIZE

    def margin_cost(self) -> float:
        """Return the margin override, or a flat-percentage notional estimate."""
        if self.margin_override is not None:
            return self.margin_override
        notional = self.strike * self.shares
        if self.variant == StrategyVariant.NAKED_CALL:
            return notional * 0.20
        if self.variant == StrategyVariant.NAKED_PUT:
            return notional * 0.15
        return 0.0

    def should_exercise(self, price: float) -> bool:
        """Return True when the option is in the money at `price`."""
        if self.variant.is_call:
            return price > self.strike
        return price < self.strike

    def with_market_price(self, price: float) -> StrategyRecord:
        """Return a copy with exercise status and market-price fields updated."""
        if self.should_exercise(price):
            exercise_price = (
                None if self.variant == StrategyVariant.COVERED_CALL else price
            )
            return replace(
                self,
                exercise_status=ExerciseStatus.YES,
                exercise_market_price=exercise_price,
                current_market_price=None,
            )
        return replace(
            self,
            exercise_status=ExerciseStatus.NO,
            exercise_market_price=None,
            current_market_price=price,
        )

    def suggested_end_mode(self) -> OldLegEndMode | None:
        if self.exercise_status == ExerciseStatus.YES:
            return OldLegEndMode.EXERCISED
        if self.exercise_status == ExerciseStatus.NO:
            return OldLegEndMode.EXPIRED
        return None


@dataclass(frozen=True)
class OldLegAssumption:
    """User-asserted outcome for the existing leg (prices are per share)."""

    end_mode: OldLegEndMode
    close_price: float | None = None
    market_price_at_exercise: float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "end_mode", OldLegEndMode(self.end_mode))


@dataclass(frozen=True)
class NewPositionInput:
    """Terms of the leg opened by the roll.

    `quantity` defaults to the old leg's contract count. `variant` defaults
    to the old leg's variant and only drives the payoff curve.
    """

    strike: float
    premium: float
    quantity: int | None = None
    expected_settlement_price: float | None = None
    variant: StrategyVariant | None = None

    def __post_init__(self) -> None:
        if self.strike <= 0:
            raise ValueError("strike must be > 0")
        if self.quantity is not None and self.quantity <= 0:
            raise ValueError("quantity must be > 0 when provided")
        if self.variant is not None:
            object.__setattr__(self, "variant", StrategyVariant(self.variant))

    def contracts_for(self, strategy: StrategyRecord) -> int:
        return self.quantity if self.quantity is not None else strategy.contracts

    def shares_for(self, strategy: StrategyRecord) -> int:
        return self.contracts_for(strategy) * CONTRACT_SIZE

    def variant_for(self, strategy: StrategyRecord) -> StrategyVariant:
        return self.variant if self.variant is not None else strategy.variant


@dataclass(frozen=True)
class ResolvedOldLegState:
    """Realized P&L of the old leg and the stock position it leaves behind.

    `stock_quantity=None` means no stock is carried forward, while `0` means
    stock was carried and has been sold away. The two are never conflated.
    `missing_data_warning` is set when a fallback replaced a required input.
    """

    realized_pnl: float
    stock_quantity: int | None = None
    stock_cost_basis_per_share: float | None = None
    missing_data_warning: str | None = None

    def __post_init__(self) -> None:
        holds_stock = self.stock_quantity is not None and self.stock_quantity > 0
        if holds_stock and self.stock_cost_basis_per_share is None:
            raise ValueError("stock_cost_basis_per_share is required when holding stock")
        if not holds_stock and self.stock_cost_basis_per_share is not None:
            raise ValueError("stock_cost_basis_per_share requires a positive stock_quantity")

    @property
    def holds_stock(self) -> bool:
        return self.stock_quantity is not None and self.stock_quantity > 0

    @property
    def is_estimate(self) -> bool:
        return self.missing_data_warning is not None


@dataclass(frozen=True)
class ScenarioResult:
    """P&L breakdown of one resolution of the new leg.

    `new_leg_pnl` and `total_pnl` are None when a required input is missing;
    no numeric placeholder is ever used.
    """

    new_leg_pnl: float | None
    total_pnl: float | None
    cost_basis: float | None
    return_pct: float | None
    final_stock_quantity: int | None
    final_stock_cost_basis: float | None
    description: str
    missing_data_warning: str | None = None

    def __post_init__(self) -> None:
        if (self.new_leg_pnl is None) != (self.missing_data_warning is not None):
            raise ValueError(
                "missing_data_warning must be set exactly when new_leg_pnl is None"
            )

    @property
    def is_calculated(self) -> bool:
        return self.missing_data_warning is None


@dataclass(frozen=True, slots=True)
class PayoffPoint:
    """Total roll P&L at one hypothetical settlement price."""

    settlement_price: float
    total_pnl: float


@dataclass(frozen=True)
class RollResult:
    """Everything the roll calculator derives from one set of inputs."""

    strategy: StrategyRecord
    assumption: OldLegAssumption
    new_position: NewPositionInput
    resolved: ResolvedOldLegState
    new_leg_premium_received: float
    if_exercised: ScenarioResult
    if_not_exercised: ScenarioResult

    @property
    def old_leg_pnl(self) -> float:
        return self.resolved.realized_pnl
