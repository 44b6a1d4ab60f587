from __future__ import annotations

import pandas as pd
import pytest

from options_roll.market_data import PriceSource, YFinancePriceSource, last_close


def _flat_frame(closes: list[float | None]) -> pd.DataFrame:
    index = pd.date_range("2024-01-02", periods=len(closes), freq="D")
    return pd.DataFrame({"Open": closes, "Close": closes}, index=index)


def _multi_frame(ticker: str, closes: list[float | None]) -> pd.DataFrame:
    index = pd.date_range("2024-01-02", periods=len(closes), freq="D")
    columns = pd.MultiIndex.from_tuples([("Close", ticker), ("Open", ticker)])
    return pd.DataFrame(
        {("Close", ticker): closes, ("Open", ticker): closes},
        index=index,
        columns=columns,
    )


def test_last_close_reads_flat_and_multiindex_columns():
    assert last_close(_flat_frame([10.0, 11.5]), ticker="KO") == 11.5
    assert last_close(_multi_frame("AAPL", [190.0, 191.25]), ticker="AAPL") == 191.25


def test_last_close_skips_trailing_nan_and_handles_empty():
    assert last_close(_flat_frame([10.0, None]), ticker="KO") == 10.0
    assert last_close(pd.DataFrame(), ticker="KO") is None
    assert last_close(_flat_frame([None, None]), ticker="KO") is None
    assert last_close(pd.DataFrame({"Open": [1.0]}), ticker="KO") is None


def test_fetch_price_downloads_normalized_ticker(monkeypatch) -> None:
    calls: list[dict[str, object]] = []

    def _fake_download_history(*, ticker, period, interval, timeout_s):
        calls.append(
            {"ticker": ticker, "period": period, "interval": interval, "timeout_s": timeout_s}
        )
        return _multi_frame(ticker, [189.0, 190.5])

    monkeypatch.setattr(
        "options_roll.market_data.yahoo._download_history",
        _fake_download_history,
    )

    source = YFinancePriceSource(timeout_s=3.0)

    assert isinstance(source, PriceSource)
    assert source.fetch_price(" aapl ") == 190.5
    assert calls == [
        {"ticker": "AAPL", "period": "5d", "interval": "1d", "timeout_s": 3.0}
    ]


def test_fetch_price_returns_none_for_empty_download(monkeypatch) -> None:
    monkeypatch.setattr(
        "options_roll.market_data.yahoo._download_history",
        lambda **_: pd.DataFrame(),
    )
    assert YFinancePriceSource().fetch_price("NOPE") is None


def test_fetch_price_rejects_empty_symbol():
    with pytest.raises(ValueError, match="symbol"):
        YFinancePriceSource().fetch_price("  ")
