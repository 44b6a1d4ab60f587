from __future__ import annotations

from typing import Any, Mapping

from options_roll.utils.logging_config import setup_logging

DEFAULT_LOGGING: dict[str, Any] = {
    "level": "INFO",
    "format": "%(asctime)s %(levelname)s %(shortname)s - %(message)s",
    "file": None,
    "color": True,
    "module_levels": None,
}


def add_logging_args(parser) -> None:
    group = parser.add_argument_group("logging")
    group.add_argument("--log-level", type=str, default=None, help="e.g. INFO, DEBUG.")
    group.add_argument("--log-file", type=str, default=None, help="Optional log file.")
    group.add_argument(
        "--log-format", type=str, default=None, help="Console log format string."
    )
    group.add_argument(
        "--color",
        dest="log_color",
        action="store_true",
        help="Enable colored console logs.",
    )
    group.add_argument(
        "--no-color",
        dest="log_color",
        action="store_false",
        help="Disable colored console logs.",
    )
    parser.set_defaults(log_color=None)


def _normalize_logging_config(config: Mapping[str, Any] | None) -> dict[str, Any]:
    merged = dict(DEFAULT_LOGGING)
    for key, value in (config or {}).items():
        if key in merged and value is not None:
            merged[key] = value
    return merged


def setup_logging_from_config(config: Mapping[str, Any] | None) -> None:
    log_cfg = _normalize_logging_config(config)
    setup_logging(
        log_cfg["level"],
        fmt_console=log_cfg["format"],
        log_file=log_cfg["file"],
        module_levels=log_cfg["module_levels"],
        colored=log_cfg["color"],
    )
