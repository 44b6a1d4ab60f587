"""Strategy record storage used by the apps (never by the calculators)."""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Iterable, Mapping, Sequence
from datetime import date
from typing import Any, Protocol, runtime_checkable

from options_roll.types import StrategyRecord

logger = logging.getLogger(__name__)


@runtime_checkable
class StrategyStore(Protocol):
    """Read-only view of stored strategies."""

    def list(self) -> Sequence[StrategyRecord]:
        """Return stored strategies in insertion order."""
        ...


class InMemoryStrategyStore:
    """Process-local store with create/read/update keyed by string ids."""

    def __init__(self, records: Iterable[StrategyRecord] = ()) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, StrategyRecord] = {}
        for record in records:
            self.create(record)

    def create(self, record: StrategyRecord, *, record_id: str | None = None) -> str:
        key = record_id or uuid.uuid4().hex
        with self._lock:
            if key in self._records:
                raise ValueError(f"Strategy id already exists: {key}")
            self._records[key] = record
        logger.debug("Stored strategy id=%s symbol=%s", key, record.symbol)
        return key

    def get(self, record_id: str) -> StrategyRecord:
        with self._lock:
            try:
                return self._records[record_id]
            except KeyError as e:
                raise KeyError(f"Unknown strategy id: {record_id}") from e

    def update(self, record_id: str, record: StrategyRecord) -> None:
        with self._lock:
            if record_id not in self._records:
                raise KeyError(f"Unknown strategy id: {record_id}")
            self._records[record_id] = record

    def list(self) -> Sequence[StrategyRecord]:
        with self._lock:
            return tuple(self._records.values())

    def items(self) -> Sequence[tuple[str, StrategyRecord]]:
        with self._lock:
            return tuple(self._records.items())

    def symbols(self) -> list[str]:
        """Return unique symbols in first-seen order."""
        return list(dict.fromkeys(r.symbol for r in self.list()))


def strategy_from_mapping(data: Mapping[str, Any]) -> StrategyRecord:
    """Build a `StrategyRecord` from a config mapping (e.g. parsed YAML)."""
    missing = [
        key
        for key in ("symbol", "variant", "strike", "premium", "contracts")
        if data.get(key) is None
    ]
    if missing:
        raise ValueError(f"strategy is missing required keys: {missing}")

    expiration = data.get("expiration")
    if isinstance(expiration, str):
        expiration = date.fromisoformat(expiration)

    margin = data.get("margin_override")
    return StrategyRecord(
        symbol=str(data["symbol"]),
        variant=data["variant"],
        strike=float(data["strike"]),
        premium=float(data["premium"]),
        contracts=int(data["contracts"]),
        cost_basis_per_share=float(data.get("cost_basis_per_share") or 0.0),
        margin_override=None if margin is None else float(margin),
        expiration=expiration,
    )
