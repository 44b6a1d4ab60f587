from dataclasses import fields

import pytest

from options_roll import (
    ExerciseStatus,
    NewPositionInput,
    OldLegAssumption,
    OldLegEndMode,
    PositionSide,
    ResolvedOldLegState,
    ScenarioResult,
    StrategyRecord,
    StrategyVariant,
)


def test_strategy_record_normalizes_symbol_and_variant():
    record = StrategyRecord(
        symbol=" aapl ",
        variant="CoveredCall",
        strike=180.0,
        premium=5.5,
        contracts=5,
    )
    assert record.symbol == "AAPL"
    assert record.variant is StrategyVariant.COVERED_CALL
    assert record.shares == 500


@pytest.mark.parametrize(
    "kwargs, match",
    [
        ({"strike": 0.0}, "strike"),
        ({"contracts": 0}, "contracts"),
        ({"symbol": "  "}, "symbol"),
        ({"margin_override": -1.0}, "margin_override"),
    ],
)
def test_strategy_record_rejects_invalid_inputs(kwargs, match):
    base = {
        "symbol": "AAPL",
        "variant": StrategyVariant.NAKED_CALL,
        "strike": 100.0,
        "premium": 1.0,
        "contracts": 1,
    }
    base.update(kwargs)
    with pytest.raises(ValueError, match=match):
        StrategyRecord(**base)


def test_margin_cost_estimates_and_override(naked_call, naked_put, covered_call):
    assert naked_call.margin_cost() == pytest.approx(185.0 * 400 * 0.20)
    assert naked_put.margin_cost() == pytest.approx(50.0 * 200 * 0.15)
    assert covered_call.margin_cost() == 0.0

    overridden = StrategyRecord(
        symbol="TSLA",
        variant=StrategyVariant.NAKED_CALL,
        strike=185.0,
        premium=6.0,
        contracts=4,
        margin_override=5000.0,
    )
    assert overridden.margin_cost() == 5000.0


def test_variant_classification_flags():
    assert StrategyVariant.COVERED_CALL.is_call
    assert StrategyVariant.COVERED_CALL.is_secured
    assert StrategyVariant.NAKED_PUT.is_put
    assert StrategyVariant.NAKED_PUT.is_naked
    assert StrategyVariant.BUY_PUT.is_long
    assert StrategyVariant.BUY_PUT.side is PositionSide.LONG
    assert StrategyVariant.CASH_SECURED_PUT.side is PositionSide.SHORT
    assert StrategyVariant.BUY_CALL.display_name == "Buy Call"


def test_should_exercise_uses_moneyness(covered_call, cash_secured_put):
    assert covered_call.should_exercise(181.0)
    assert not covered_call.should_exercise(180.0)
    assert cash_secured_put.should_exercise(49.0)
    assert not cash_secured_put.should_exercise(50.0)


def test_with_market_price_updates_status(covered_call, naked_call):
    itm_cc = covered_call.with_market_price(190.0)
    assert itm_cc.exercise_status is ExerciseStatus.YES
    assert itm_cc.exercise_market_price is None
    assert itm_cc.suggested_end_mode() is OldLegEndMode.EXERCISED

    itm_nc = naked_call.with_market_price(190.0)
    assert itm_nc.exercise_market_price == 190.0
    assert itm_nc.current_market_price is None

    otm = naked_call.with_market_price(170.0)
    assert otm.exercise_status is ExerciseStatus.NO
    assert otm.current_market_price == 170.0
    assert otm.suggested_end_mode() is OldLegEndMode.EXPIRED

    assert naked_call.suggested_end_mode() is None


def test_resolved_state_distinguishes_none_and_zero_stock():
    none_state = ResolvedOldLegState(realized_pnl=0.0)
    zero_state = ResolvedOldLegState(realized_pnl=0.0, stock_quantity=0)
    assert none_state.stock_quantity is None
    assert zero_state.stock_quantity == 0
    assert none_state != zero_state
    assert not zero_state.holds_stock


def test_resolved_state_requires_cost_when_holding_stock():
    with pytest.raises(ValueError, match="stock_cost_basis_per_share"):
        ResolvedOldLegState(realized_pnl=0.0, stock_quantity=100)
    with pytest.raises(ValueError, match="positive stock_quantity"):
        ResolvedOldLegState(
            realized_pnl=0.0, stock_quantity=0, stock_cost_basis_per_share=10.0
        )


def test_scenario_result_warning_matches_missing_pnl():
    with pytest.raises(ValueError, match="missing_data_warning"):
        ScenarioResult(
            new_leg_pnl=None,
            total_pnl=None,
            cost_basis=None,
            return_pct=None,
            final_stock_quantity=None,
            final_stock_cost_basis=None,
            description="x",
        )


def test_new_position_defaults_to_old_leg(covered_call):
    new = NewPositionInput(strike=185.0, premium=4.0)
    assert new.contracts_for(covered_call) == 5
    assert new.shares_for(covered_call) == 500
    assert new.variant_for(covered_call) is StrategyVariant.COVERED_CALL

    override = NewPositionInput(
        strike=185.0, premium=4.0, quantity=3, variant="NakedCall"
    )
    assert override.shares_for(covered_call) == 300
    assert override.variant_for(covered_call) is StrategyVariant.NAKED_CALL


def test_new_position_rejects_bad_quantity():
    with pytest.raises(ValueError, match="quantity"):
        NewPositionInput(strike=10.0, premium=1.0, quantity=0)


def test_old_leg_assumption_fields_are_the_resolver_inputs():
    assert [f.name for f in fields(OldLegAssumption)] == [
        "end_mode",
        "close_price",
        "market_price_at_exercise",
    ]
