"""Last-price lookup through yfinance."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import pandas as pd
import yfinance as yf

logger = logging.getLogger(__name__)


def _download_history(
    *, ticker: str, period: str, interval: str, timeout_s: float
) -> pd.DataFrame:
    frame = yf.download(
        ticker,
        period=period,
        interval=interval,
        auto_adjust=False,
        progress=False,
        timeout=timeout_s,
    )
    if frame is None:
        return pd.DataFrame()
    return frame


def _close_series(frame: pd.DataFrame, *, ticker: str) -> pd.Series:
    """Return the close column for one symbol, flattening yfinance's MultiIndex."""
    if isinstance(frame.columns, pd.MultiIndex):
        if "Close" not in frame.columns.get_level_values(0):
            return pd.Series(dtype=float)
        closes = frame.xs("Close", axis=1, level=0, drop_level=True)
        if isinstance(closes, pd.Series):
            return closes
        if ticker in closes.columns:
            return closes[ticker]
        return closes.iloc[:, 0]
    if "Close" not in frame.columns:
        return pd.Series(dtype=float)
    return frame["Close"]


def last_close(frame: pd.DataFrame, *, ticker: str) -> float | None:
    """Return the most recent non-null close in a yfinance download, if any."""
    if frame.empty:
        return None
    closes = pd.to_numeric(_close_series(frame, ticker=ticker), errors="coerce").dropna()
    if closes.empty:
        return None
    return float(closes.iloc[-1])


@dataclass(frozen=True)
class YFinancePriceSource:
    """`PriceSource` backed by `yf.download`.

    A failed or empty download yields None; errors raised by yfinance itself
    propagate to the caller (the polling provider logs them and keeps its
    cached value).
    """

    period: str = "5d"
    interval: str = "1d"
    timeout_s: float = 10.0

    def fetch_price(self, symbol: str) -> float | None:
        """Return the last close for `symbol`, or None when unavailable."""
        ticker = str(symbol).strip().upper()
        if not ticker:
            raise ValueError("symbol must not be empty")

        frame = _download_history(
            ticker=ticker,
            period=self.period,
            interval=self.interval,
            timeout_s=self.timeout_s,
        )
        price = last_close(frame, ticker=ticker)
        if price is None:
            logger.warning("No price data returned for symbol=%s", ticker)
        return price
