from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pytest
import yaml


@pytest.fixture
def write_yaml(tmp_path: Path):
    def _write(name: str, data: Mapping[str, Any] | Any) -> Path:
        path = tmp_path / name
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(data, f)
        return path

    return _write


@pytest.fixture
def roll_config() -> dict[str, Any]:
    return {
        "strategy": {
            "symbol": "AAPL",
            "variant": "CoveredCall",
            "strike": 180.0,
            "premium": 5.5,
            "contracts": 5,
            "cost_basis_per_share": 175.0,
        },
        "old_leg": {"end_mode": "Expired"},
        "new_leg": {"strike": 185.0, "premium": 4.0},
    }
