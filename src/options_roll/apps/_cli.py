"""Shared CLI helpers for app entrypoints."""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any


def add_print_config_arg(parser) -> None:
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Print merged config (JSON) and exit.",
    )


def collect_logging_overrides(args) -> dict[str, Any]:
    """Collect logging override values from parsed CLI args."""
    overrides: dict[str, Any] = {}
    if getattr(args, "log_level", None):
        overrides["level"] = args.log_level
    if getattr(args, "log_file", None):
        overrides["file"] = args.log_file
    if getattr(args, "log_format", None):
        overrides["format"] = args.log_format
    if getattr(args, "log_color", None) is not None:
        overrides["color"] = args.log_color
    return overrides


def to_jsonable(obj: Any) -> Any:
    """Convert paths, enums, dates and containers to JSON-friendly values."""
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, (date, datetime)):
        return obj.isoformat()
    if isinstance(obj, Mapping):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set)):
        return [to_jsonable(v) for v in obj]
    return obj


def dump_json(data: Any) -> str:
    return json.dumps(to_jsonable(data), indent=2, sort_keys=True)


def print_config(config: Mapping[str, Any]) -> None:
    """Pretty-print merged config as deterministic JSON."""
    print(dump_json(config))
