"""Source-agnostic price fetching and caching.

Architecture
------------
    PriceSource → QuoteCache → MetalsStore

Key abstractions:

- ``PriceSource``: async protocol yielding quotes and historical series.
- ``QuoteCache``: process-lifetime memo of successful results.

Built-in implementations:

- ``MockPriceSource``: static INR quotes with synthesized history.
- ``GoldApiPriceSource``: goldapi.io over httpx.
"""

from metal_tracker.prices.cache import QuoteCache
from metal_tracker.prices.factory import create_source
from metal_tracker.prices.goldapi import GoldApiAdapter, GoldApiPriceSource
from metal_tracker.prices.mock import (
    MOCK_PRICES,
    MockPriceSource,
    MockQuote,
    synthesize_history,
)
from metal_tracker.prices.provider import PriceSource

__all__ = [
    # Protocols
    "PriceSource",
    # Cache
    "QuoteCache",
    # Mock
    "MockPriceSource",
    "MockQuote",
    "MOCK_PRICES",
    "synthesize_history",
    # GoldAPI
    "GoldApiAdapter",
    "GoldApiPriceSource",
    # Factory
    "create_source",
]
