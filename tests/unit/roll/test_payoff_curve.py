import pytest

from options_roll import (
    NewPositionInput,
    OldLegAssumption,
    PayoffPoint,
    StrategyVariant,
    curve_to_frame,
    evaluate_at_price,
    find_break_evens,
    generate_curve,
    generate_price_range,
    resolve_old_leg,
    summarize_curve,
)

EXPIRED = OldLegAssumption(end_mode="Expired")


def test_price_range_bounds_and_length():
    prices = generate_price_range(180.0, 185.0)

    assert len(prices) == 101
    assert prices[0] == pytest.approx(144.0)
    assert prices[-1] == pytest.approx(221.0)
    assert all(a < b for a, b in zip(prices, prices[1:]))


def test_price_range_uses_span_buffer_and_floors_at_zero():
    prices = generate_price_range(100.0, 10.0)

    assert prices[0] == 0.0
    assert prices[-1] == pytest.approx(127.0)


def test_price_range_rejects_non_positive_steps():
    with pytest.raises(ValueError, match="steps"):
        generate_price_range(10.0, 12.0, steps=0)


def test_naked_call_curve_has_single_break_even(naked_call):
    new = NewPositionInput(strike=190.0, premium=3.0)

    curve = generate_curve(naked_call, EXPIRED, new)

    assert len(curve) == 101
    assert curve[0].total_pnl == pytest.approx(3600.0)
    assert find_break_evens(curve) == pytest.approx((199.0,))


def test_cash_secured_put_curve_break_even(cash_secured_put):
    new = NewPositionInput(strike=48.0, premium=1.5)

    curve = generate_curve(cash_secured_put, EXPIRED, new)

    assert find_break_evens(curve) == pytest.approx((45.5,))
    assert curve[-1].total_pnl == pytest.approx(500.0)


def test_covered_call_curve_caps_above_new_strike(covered_call):
    resolved = resolve_old_leg(covered_call, EXPIRED)
    new = NewPositionInput(strike=185.0, premium=4.0)

    capped = (185.0 - 175.0) * 500 + 2000.0 + 2750.0
    assert evaluate_at_price(covered_call, resolved, new, 185.0) == pytest.approx(capped)
    assert evaluate_at_price(covered_call, resolved, new, 200.0) == pytest.approx(capped)
    assert evaluate_at_price(covered_call, resolved, new, 170.0) == pytest.approx(
        (170.0 - 175.0) * 500 + 2000.0 + 2750.0
    )


def test_covered_call_curve_without_stock_is_flat(covered_call):
    new = NewPositionInput(strike=185.0, premium=4.0)

    curve = generate_curve(covered_call, OldLegAssumption(end_mode="Exercised"), new)

    assert all(p.total_pnl == pytest.approx(7250.0) for p in curve)
    assert find_break_evens(curve) == ()


def test_curve_dispatches_on_new_leg_variant(covered_call):
    resolved = resolve_old_leg(covered_call, EXPIRED)
    as_naked = NewPositionInput(
        strike=185.0, premium=4.0, variant=StrategyVariant.NAKED_CALL
    )

    value = evaluate_at_price(covered_call, resolved, as_naked, 195.0)

    assert value == pytest.approx(2750.0 + 2000.0 - 10.0 * 500)


def test_curve_is_reproducible(naked_put):
    new = NewPositionInput(strike=47.0, premium=1.1)
    assert generate_curve(naked_put, EXPIRED, new) == generate_curve(
        naked_put, EXPIRED, new
    )


def test_curve_to_frame_columns(naked_call):
    curve = generate_curve(naked_call, EXPIRED, NewPositionInput(strike=190.0, premium=3.0))

    frame = curve_to_frame(curve)

    assert list(frame.columns) == ["settlement_price", "total_pnl"]
    assert len(frame) == 101
    assert frame["settlement_price"].is_monotonic_increasing


def test_summarize_curve_reports_extremes():
    curve = (
        PayoffPoint(90.0, -100.0),
        PayoffPoint(100.0, 50.0),
        PayoffPoint(110.0, 50.0),
    )

    summary = summarize_curve(curve)

    assert summary.max_profit == 50.0
    assert summary.max_loss == -100.0
    assert summary.break_evens == pytest.approx((90.0 + 10.0 * 100.0 / 150.0,))
    assert (summary.price_low, summary.price_high) == (90.0, 110.0)


def test_summarize_curve_rejects_empty():
    with pytest.raises(ValueError, match="empty"):
        summarize_curve(())


def test_covered_call_partial_roll_curve_is_continuous(covered_call):
    resolved = resolve_old_leg(covered_call, EXPIRED)
    new = NewPositionInput(strike=185.0, premium=4.0, quantity=3)

    below = evaluate_at_price(covered_call, resolved, new, 184.99)
    at_strike = evaluate_at_price(covered_call, resolved, new, 185.0)
    above = evaluate_at_price(covered_call, resolved, new, 200.0)

    assert at_strike == pytest.approx(10.0 * 500 + 1200.0 + 2750.0)
    assert at_strike - below == pytest.approx(0.01 * 500)
    assert above == pytest.approx(10.0 * 300 + 25.0 * 200 + 1200.0 + 2750.0)

    curve = generate_curve(covered_call, EXPIRED, new)
    assert find_break_evens(curve) == pytest.approx((175.0 - 3950.0 / 500,))


def test_covered_call_oversized_roll_curve_loses_on_uncovered_calls(covered_call):
    resolved = resolve_old_leg(covered_call, EXPIRED)
    new = NewPositionInput(strike=185.0, premium=4.0, quantity=7)

    value = evaluate_at_price(covered_call, resolved, new, 200.0)

    assert value == pytest.approx(10.0 * 500 - 15.0 * 200 + 2800.0 + 2750.0)
