"""Serializable views and a plain-text breakdown of roll results."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from options_roll.breakeven import CurveSummary
from options_roll.types import OldLegEndMode, RollResult, ScenarioResult


def _fmt_money(value: float | None) -> str:
    return "n/a" if value is None else f"${value:,.2f}"


def scenario_to_dict(scenario: ScenarioResult) -> dict[str, Any]:
    payload = asdict(scenario)
    payload["is_calculated"] = scenario.is_calculated
    return payload


def roll_result_to_dict(
    result: RollResult, *, curve_summary: CurveSummary | None = None
) -> dict[str, Any]:
    """Return a JSON-serializable mapping of one roll calculation."""
    resolved = result.resolved
    payload: dict[str, Any] = {
        "symbol": result.strategy.symbol,
        "variant": result.strategy.variant.value,
        "old_leg": {
            "end_mode": result.assumption.end_mode.value,
            "realized_pnl": resolved.realized_pnl,
            "stock_quantity": resolved.stock_quantity,
            "stock_cost_basis_per_share": resolved.stock_cost_basis_per_share,
            "is_estimate": resolved.is_estimate,
            "missing_data_warning": resolved.missing_data_warning,
        },
        "new_leg_premium_received": result.new_leg_premium_received,
        "scenarios": {
            "exercised": scenario_to_dict(result.if_exercised),
            "not_exercised": scenario_to_dict(result.if_not_exercised),
        },
    }
    if curve_summary is not None:
        payload["curve_summary"] = {
            "max_profit": curve_summary.max_profit,
            "max_loss": curve_summary.max_loss,
            "break_evens": list(curve_summary.break_evens),
            "price_low": curve_summary.price_low,
            "price_high": curve_summary.price_high,
        }
    return payload


def _scenario_lines(title: str, scenario: ScenarioResult) -> list[str]:
    lines = [title, scenario.description]
    if not scenario.is_calculated:
        lines.append(f"Warning: {scenario.missing_data_warning}")
        return lines
    lines.append(f"New Leg P/L: {_fmt_money(scenario.new_leg_pnl)}")
    lines.append(f"Total P/L: {_fmt_money(scenario.total_pnl)}")
    if scenario.return_pct is not None:
        lines.append(f"Return: {scenario.return_pct:.2%}")
    return lines


def format_breakdown(result: RollResult) -> str:
    """Render the step-by-step calculation as plain text."""
    strategy = result.strategy
    assumption = result.assumption
    new = result.new_position
    shares = strategy.shares

    lines = [
        "Calculation Breakdown:",
        "",
        "=== OLD POSITION (Realized) ===",
        f"Strategy: {strategy.variant.display_name}",
        f"Strike: {_fmt_money(strategy.strike)}",
        f"Premium: {_fmt_money(strategy.premium * shares)}",
        f"Outcome: {assumption.end_mode.display_name}",
    ]
    if assumption.end_mode == OldLegEndMode.CLOSED and assumption.close_price is not None:
        lines.append(f"Close Price: {_fmt_money(assumption.close_price)} per share")
        lines.append(f"Close Cost: {_fmt_money(assumption.close_price * shares)}")
    lines.append(f"Old Leg P/L: {_fmt_money(result.old_leg_pnl)}")
    if result.resolved.is_estimate:
        lines.append(f"Warning: {result.resolved.missing_data_warning}")

    lines += [
        "",
        "=== NEW POSITION (Future Scenarios) ===",
        f"New Strike: {_fmt_money(new.strike)}",
        f"Premium: {_fmt_money(new.premium)} per share",
        f"Premium Total: {_fmt_money(result.new_leg_premium_received)}",
        "",
    ]
    lines += _scenario_lines(
        "SCENARIO 1: If New Position Is Exercised", result.if_exercised
    )
    lines.append("")
    lines += _scenario_lines(
        "SCENARIO 2: If New Position Expires/Not Exercised", result.if_not_exercised
    )
    return "\n".join(lines)
