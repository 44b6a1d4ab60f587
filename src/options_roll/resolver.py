"""Resolution of the old leg into realized P&L and carried stock."""

from __future__ import annotations

import logging

from options_roll.strategies import get_rules
from options_roll.types import OldLegAssumption, ResolvedOldLegState, StrategyRecord

logger = logging.getLogger(__name__)


def resolve_old_leg(
    strategy: StrategyRecord, assumption: OldLegAssumption
) -> ResolvedOldLegState:
    """Resolve the existing leg under the asserted end mode.

    A missing close price or exercise market price does not fail the
    computation: the premium-only fallback is returned with
    `missing_data_warning` set so callers can tell it apart from a
    computed result.
    """
    resolved = get_rules(strategy.variant).resolve_old_leg(strategy, assumption)
    if resolved.is_estimate:
        logger.debug(
            "Old leg %s %s resolved with fallback: %s",
            strategy.symbol,
            strategy.variant.value,
            resolved.missing_data_warning,
        )
    return resolved
