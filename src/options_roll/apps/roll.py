#!/usr/bin/env python
"""Compute the outcome of rolling an option position from a YAML description."""

from __future__ import annotations

import argparse
import logging
from typing import Any

from options_roll.apps._cli import (
    add_print_config_arg,
    collect_logging_overrides,
    dump_json,
    print_config,
)
from options_roll.breakeven import summarize_curve
from options_roll.cli import (
    DEFAULT_LOGGING,
    add_config_arg,
    add_logging_args,
    build_config,
    require_section,
    resolve_path,
    setup_logging_from_config,
)
from options_roll.market_data import PollingPriceProvider, PriceSource, YFinancePriceSource
from options_roll.payoff import DEFAULT_STEPS, generate_curve
from options_roll.projector import calculate_roll
from options_roll.reporting import format_breakdown, roll_result_to_dict
from options_roll.store import strategy_from_mapping
from options_roll.types import NewPositionInput, OldLegAssumption, StrategyVariant

DEFAULT_CONFIG: dict[str, Any] = {
    "logging": DEFAULT_LOGGING,
    "strategy": None,
    "old_leg": {"end_mode": "Expired"},
    "new_leg": None,
    "curve": {"steps": DEFAULT_STEPS},
    "output": {"plot": None, "breakdown": False},
    "market_data": {"use_live_price": False, "timeout_s": 10.0},
}


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Project P&L scenarios and the payoff curve of an option roll."
    )
    add_config_arg(parser)
    add_logging_args(parser)
    add_print_config_arg(parser)

    parser.add_argument("--steps", type=int, default=None)
    parser.add_argument("--plot-out", type=str, default=None)
    parser.add_argument(
        "--expected-price",
        type=float,
        default=None,
        help="Expected stock price at the new leg's expiration.",
    )
    parser.add_argument(
        "--breakdown",
        dest="breakdown",
        action="store_true",
        help="Also log the plain-text calculation breakdown.",
    )
    parser.set_defaults(breakdown=None)
    parser.add_argument(
        "--use-live-price",
        dest="use_live_price",
        action="store_true",
        help="Seed a missing expected price with the last Yahoo Finance quote.",
    )
    parser.set_defaults(use_live_price=None)
    return parser.parse_args(argv)


def _build_overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.steps is not None:
        overrides["curve"] = {"steps": args.steps}

    output: dict[str, Any] = {}
    if args.plot_out:
        output["plot"] = args.plot_out
    if args.breakdown is not None:
        output["breakdown"] = args.breakdown
    if output:
        overrides["output"] = output

    if args.expected_price is not None:
        overrides["new_leg"] = {"expected_settlement_price": args.expected_price}
    if args.use_live_price is not None:
        overrides["market_data"] = {"use_live_price": args.use_live_price}

    logging_overrides = collect_logging_overrides(args)
    if logging_overrides:
        overrides["logging"] = logging_overrides
    return overrides


def _optional_float(value: Any) -> float | None:
    return None if value is None else float(value)


def _assumption_from_config(section: dict[str, Any]) -> OldLegAssumption:
    return OldLegAssumption(
        end_mode=section.get("end_mode", "Expired"),
        close_price=_optional_float(section.get("close_price")),
        market_price_at_exercise=_optional_float(
            section.get("market_price_at_exercise")
        ),
    )


def _new_position_from_config(
    section: dict[str, Any], *, expected_price: float | None
) -> NewPositionInput:
    for key in ("strike", "premium"):
        if section.get(key) is None:
            raise ValueError(f"new_leg.{key} is required.")
    quantity = section.get("quantity")
    variant = section.get("variant")
    return NewPositionInput(
        strike=float(section["strike"]),
        premium=float(section["premium"]),
        quantity=None if quantity is None else int(quantity),
        expected_settlement_price=expected_price,
        variant=None if variant is None else StrategyVariant(variant),
    )


def _live_price(symbol: str, source: PriceSource) -> float | None:
    provider = PollingPriceProvider(source)
    provider.refresh([symbol])
    return provider.last_known_price(symbol)


def main(argv: list[str] | None = None, *, price_source: PriceSource | None = None) -> None:
    args = _parse_args(argv)
    config = build_config(DEFAULT_CONFIG, args.config, _build_overrides(args))
    if args.print_config:
        print_config(config)
        return

    setup_logging_from_config(config.get("logging"))
    logger = logging.getLogger(__name__)

    strategy = strategy_from_mapping(require_section(config, "strategy"))
    assumption = _assumption_from_config(require_section(config, "old_leg"))
    new_section = require_section(config, "new_leg")
    market_cfg = config.get("market_data") or {}

    expected_price = _optional_float(new_section.get("expected_settlement_price"))
    if expected_price is None and market_cfg.get("use_live_price"):
        source = price_source or YFinancePriceSource(
            timeout_s=float(market_cfg.get("timeout_s", 10.0))
        )
        expected_price = _live_price(strategy.symbol, source)
        if expected_price is None:
            logger.warning("No live price for %s; expected price left unset", strategy.symbol)
        else:
            logger.info("Seeded expected price for %s: %.2f", strategy.symbol, expected_price)

    new = _new_position_from_config(new_section, expected_price=expected_price)
    steps = int(config["curve"].get("steps", DEFAULT_STEPS))

    logger.info("Strategy:   %s %s x%d", strategy.symbol, strategy.variant.value, strategy.contracts)
    logger.info("Old leg:    %s", assumption.end_mode.value)
    logger.info("New strike: %.2f premium: %.2f", new.strike, new.premium)

    result = calculate_roll(strategy, assumption, new)
    curve = generate_curve(strategy, assumption, new, steps=steps)
    summary = summarize_curve(curve)

    for name, scenario in (
        ("exercised", result.if_exercised),
        ("not exercised", result.if_not_exercised),
    ):
        if not scenario.is_calculated:
            logger.warning("Scenario %s not calculated: %s", name, scenario.missing_data_warning)
    if result.resolved.is_estimate:
        logger.warning("Old leg P&L is an estimate: %s", result.resolved.missing_data_warning)

    output_cfg = config.get("output") or {}
    if output_cfg.get("breakdown"):
        logger.info("\n%s", format_breakdown(result))

    plot_path = resolve_path(output_cfg.get("plot"))
    if plot_path is not None:
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        from options_roll.plotting import plot_roll_payoff

        fig = plot_roll_payoff(
            curve,
            old_strike=strategy.strike,
            new_strike=new.strike,
            title=f"{strategy.symbol} roll P/L at expiration",
        )
        plot_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(plot_path, dpi=120)
        plt.close(fig)
        logger.info("Payoff chart: %s", plot_path)

    print(dump_json(roll_result_to_dict(result, curve_summary=summary)))


if __name__ == "__main__":
    main()
