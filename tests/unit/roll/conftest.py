from __future__ import annotations

import pytest

from options_roll import StrategyRecord, StrategyVariant


@pytest.fixture
def covered_call() -> StrategyRecord:
    return StrategyRecord(
        symbol="aapl",
        variant=StrategyVariant.COVERED_CALL,
        strike=180.0,
        premium=5.50,
        contracts=5,
        cost_basis_per_share=175.0,
    )


@pytest.fixture
def naked_call() -> StrategyRecord:
    return StrategyRecord(
        symbol="TSLA",
        variant=StrategyVariant.NAKED_CALL,
        strike=185.0,
        premium=6.00,
        contracts=4,
    )


@pytest.fixture
def cash_secured_put() -> StrategyRecord:
    return StrategyRecord(
        symbol="KO",
        variant=StrategyVariant.CASH_SECURED_PUT,
        strike=50.0,
        premium=1.00,
        contracts=2,
    )


@pytest.fixture
def naked_put() -> StrategyRecord:
    return StrategyRecord(
        symbol="KO",
        variant=StrategyVariant.NAKED_PUT,
        strike=50.0,
        premium=1.00,
        contracts=2,
    )


@pytest.fixture
def buy_call() -> StrategyRecord:
    return StrategyRecord(
        symbol="MSFT",
        variant=StrategyVariant.BUY_CALL,
        strike=100.0,
        premium=2.00,
        contracts=1,
    )


@pytest.fixture
def buy_put() -> StrategyRecord:
    return StrategyRecord(
        symbol="MSFT",
        variant=StrategyVariant.BUY_PUT,
        strike=100.0,
        premium=2.00,
        contracts=1,
    )


@pytest.fixture
def strategies_by_variant(
    covered_call,
    naked_call,
    cash_secured_put,
    naked_put,
    buy_call,
    buy_put,
) -> dict[StrategyVariant, StrategyRecord]:
    return {
        StrategyVariant.COVERED_CALL: covered_call,
        StrategyVariant.NAKED_CALL: naked_call,
        StrategyVariant.CASH_SECURED_PUT: cash_secured_put,
        StrategyVariant.NAKED_PUT: naked_put,
        StrategyVariant.BUY_CALL: buy_call,
        StrategyVariant.BUY_PUT: buy_put,
    }
