"""Price source protocol — the upstream capability the store consumes.

Architecture
------------
The store never talks to a quote API directly:

    PriceSource → QuoteCache → MetalsStore → Observers

- **PriceSource** produces a current quote for a symbol and a historical
  series for a (symbol, timeframe) pair. Any call may fail with
  ``UpstreamError``.

- **QuoteCache** memoizes successful results for the process lifetime.

Adding a new source means writing one class with these two coroutines.
The cache and the store need no changes.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from metal_tracker.core.models import (
    HistoricalDataPoint,
    MetalPrice,
    MetalSymbol,
    Timeframe,
)


@runtime_checkable
class PriceSource(Protocol):
    """Upstream quote provider for the tracked metals."""

    async def get_metal_price(self, symbol: MetalSymbol) -> MetalPrice:
        """Return the current quote for ``symbol``.

        Raises
        ------
        UpstreamError
            Network, parsing, or "no data for symbol" failures.
        """
        ...

    async def get_historical_data(
        self,
        symbol: MetalSymbol,
        timeframe: Timeframe,
        current_price: MetalPrice,
    ) -> list[HistoricalDataPoint]:
        """Return the series for ``timeframe``, oldest point first.

        ``current_price`` anchors the series to the last known value;
        sources with real history may ignore it.

        Raises
        ------
        UpstreamError
            On any failure to produce the series.
        """
        ...
