"""Polling last-price cache used to seed optional calculator inputs.

The provider is constructed explicitly and owns its own lifecycle:

- `start(symbols)` runs one refresh immediately, then every `interval_s`
  seconds on a background thread.
- `stop()` signals the thread and waits for it to exit.
- `last_known_price(symbol)` is a synchronous cache read.

Each refresh fetches every unique symbol concurrently. A symbol whose fetch
fails keeps its previous cached value.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Protocol, runtime_checkable

from options_roll.market_data.yahoo import YFinancePriceSource

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_S = 60.0


@runtime_checkable
class PriceSource(Protocol):
    """Fetches one price per call; returns None when unavailable."""

    def fetch_price(self, symbol: str) -> float | None: ...


@runtime_checkable
class PriceProvider(Protocol):
    """Synchronous last-known-price lookup."""

    def last_known_price(self, symbol: str) -> float | None: ...


def _normalize_symbols(symbols: Iterable[str]) -> list[str]:
    unique: dict[str, None] = {}
    for symbol in symbols:
        s = str(symbol).strip().upper()
        if s:
            unique[s] = None
    return list(unique)


class StaticPriceProvider:
    """Fixed price map, for tests and offline runs."""

    def __init__(self, prices: Mapping[str, float] | None = None) -> None:
        self._prices = {str(k).upper(): float(v) for k, v in (prices or {}).items()}

    def last_known_price(self, symbol: str) -> float | None:
        return self._prices.get(str(symbol).strip().upper())


class PollingPriceProvider:
    """Background poller keeping a per-symbol last-price cache."""

    def __init__(
        self,
        source: PriceSource | None = None,
        *,
        interval_s: float = DEFAULT_INTERVAL_S,
        max_workers: int = 8,
    ) -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be > 0")
        if max_workers <= 0:
            raise ValueError("max_workers must be > 0")
        self.source: PriceSource = source or YFinancePriceSource()
        self.interval_s = interval_s
        self.max_workers = max_workers

        self._cache: dict[str, float] = {}
        self._cache_lock = threading.Lock()
        self._last_update_time: datetime | None = None
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._symbols: list[str] = []

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def last_update_time(self) -> datetime | None:
        with self._cache_lock:
            return self._last_update_time

    def last_known_price(self, symbol: str) -> float | None:
        with self._cache_lock:
            return self._cache.get(str(symbol).strip().upper())

    def snapshot(self) -> dict[str, float]:
        with self._cache_lock:
            return dict(self._cache)

    def _fetch_one(self, symbol: str) -> float | None:
        try:
            return self.source.fetch_price(symbol)
        except Exception:
            logger.exception("Price fetch raised for symbol=%s", symbol)
            return None

    def refresh(self, symbols: Iterable[str]) -> dict[str, float | None]:
        """Fetch all `symbols` once and update the cache with successes."""
        unique = _normalize_symbols(symbols)
        if not unique:
            return {}

        logger.info("Refreshing prices for %d symbols", len(unique))
        workers = min(self.max_workers, len(unique))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            prices = list(executor.map(self._fetch_one, unique))
        results = dict(zip(unique, prices))

        with self._cache_lock:
            for symbol, price in results.items():
                if price is None:
                    logger.warning(
                        "%s: price fetch failed, keeping cached value", symbol
                    )
                    continue
                self._cache[symbol] = price
                logger.debug("%s: %.2f", symbol, price)
            self._last_update_time = datetime.now(timezone.utc)
        return results

    def _run(self) -> None:
        while not self._stop_event.is_set():
            self.refresh(self._symbols)
            if self._stop_event.wait(self.interval_s):
                break

    def start(self, symbols: Iterable[str]) -> None:
        """Start polling `symbols`, replacing any running poll."""
        self.stop()
        self._symbols = _normalize_symbols(symbols)
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, name="price-poller", daemon=True
        )
        self._thread.start()
        logger.info(
            "Price polling started symbols=%s interval_s=%.1f",
            self._symbols,
            self.interval_s,
        )

    def stop(self, timeout_s: float | None = None) -> None:
        """Signal the poller to stop and wait for the thread to exit."""
        thread = self._thread
        if thread is None:
            return
        self._stop_event.set()
        thread.join(timeout_s)
        self._thread = None
        logger.info("Price polling stopped")

    def __enter__(self) -> PollingPriceProvider:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
