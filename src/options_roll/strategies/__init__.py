"""Per-variant roll rules and the registry that dispatches to them."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from options_roll.types import StrategyVariant

from .base import NewLegContext, VariantRules, build_scenario, premium_cash_flow
from .long_options import BuyCallRules, BuyPutRules
from .short_calls import CoveredCallRules, NakedCallRules
from .short_puts import CashSecuredPutRules, NakedPutRules


def _build_registry(
    rules: tuple[VariantRules, ...],
) -> Mapping[StrategyVariant, VariantRules]:
    registry = {r.variant: r for r in rules}
    if len(registry) != len(rules):
        raise ValueError("duplicate rules registered for one strategy variant")

    missing = set(StrategyVariant) - set(registry)
    if missing:
        names = ", ".join(sorted(v.value for v in missing))
        raise ValueError(f"no roll rules registered for: {names}")
    return MappingProxyType(registry)


VARIANT_RULES: Mapping[StrategyVariant, VariantRules] = _build_registry(
    (
        CoveredCallRules(),
        NakedCallRules(),
        CashSecuredPutRules(),
        NakedPutRules(),
        BuyCallRules(),
        BuyPutRules(),
    )
)


def get_rules(variant: StrategyVariant | str) -> VariantRules:
    """Return the rules object for `variant`."""
    return VARIANT_RULES[StrategyVariant(variant)]


__all__ = [
    "VARIANT_RULES",
    "VariantRules",
    "NewLegContext",
    "build_scenario",
    "premium_cash_flow",
    "get_rules",
    "CoveredCallRules",
    "NakedCallRules",
    "CashSecuredPutRules",
    "NakedPutRules",
    "BuyCallRules",
    "BuyPutRules",
]
