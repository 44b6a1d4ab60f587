"""Market-data collaborators that seed optional calculator inputs."""

from .provider import (
    DEFAULT_INTERVAL_S,
    PollingPriceProvider,
    PriceProvider,
    PriceSource,
    StaticPriceProvider,
)
from .yahoo import YFinancePriceSource, last_close

__all__ = [
    "DEFAULT_INTERVAL_S",
    "PriceProvider",
    "PriceSource",
    "PollingPriceProvider",
    "StaticPriceProvider",
    "YFinancePriceSource",
    "last_close",
]
