"""Scenario and payoff analysis for rolling single-leg option positions."""

from .breakeven import CurveSummary, find_break_evens, summarize_curve
from .payoff import (
    curve_to_frame,
    evaluate_at_price,
    generate_curve,
    generate_price_range,
)
from .projector import calculate_roll, new_leg_premium_received, project_scenarios
from .resolver import resolve_old_leg
from .strategies import VARIANT_RULES, VariantRules, get_rules
from .types import (
    CONTRACT_SIZE,
    ExerciseStatus,
    NewPositionInput,
    OldLegAssumption,
    OldLegEndMode,
    PayoffPoint,
    PositionSide,
    ResolvedOldLegState,
    RollResult,
    ScenarioResult,
    StrategyRecord,
    StrategyVariant,
)

__all__ = [
    "CONTRACT_SIZE",
    "StrategyVariant",
    "PositionSide",
    "OldLegEndMode",
    "ExerciseStatus",
    "StrategyRecord",
    "OldLegAssumption",
    "NewPositionInput",
    "ResolvedOldLegState",
    "ScenarioResult",
    "PayoffPoint",
    "RollResult",
    "VARIANT_RULES",
    "VariantRules",
    "get_rules",
    "resolve_old_leg",
    "project_scenarios",
    "new_leg_premium_received",
    "calculate_roll",
    "generate_price_range",
    "evaluate_at_price",
    "generate_curve",
    "curve_to_frame",
    "find_break_evens",
    "summarize_curve",
    "CurveSummary",
]
