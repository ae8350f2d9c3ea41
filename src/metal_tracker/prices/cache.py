"""In-memory quote cache in front of a PriceSource.

Successful results are kept for the process lifetime; nothing expires.
Failures are never cached, so the next call retries unconditionally.

By default concurrent misses on the same key each reach the source and
the last writer wins. With ``single_flight=True`` concurrent callers share
one in-flight fetch per key.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Any, Awaitable, Callable, Hashable

from metal_tracker.core.models import (
    HistoricalSeries,
    MetalPrice,
    MetalSymbol,
    Timeframe,
)
from metal_tracker.prices.provider import PriceSource

logger = logging.getLogger(__name__)


class QuoteCache:
    """Fetch-or-return cache for quotes and historical series.

    Parameters
    ----------
    source : PriceSource
        Upstream provider consulted on a miss.
    single_flight : bool
        De-duplicate concurrent misses for the same key. Default: False.
    """

    def __init__(self, source: PriceSource, single_flight: bool = False) -> None:
        self._source = source
        self._single_flight = single_flight
        self._quotes: dict[MetalSymbol, MetalPrice] = {}
        self._history: dict[tuple[MetalSymbol, Timeframe], HistoricalSeries] = {}
        self._inflight: dict[Hashable, asyncio.Task[Any]] = {}

    @property
    def source(self) -> PriceSource:
        return self._source

    def cached_quote(self, symbol: MetalSymbol) -> MetalPrice | None:
        return self._quotes.get(symbol)

    def cached_history(
        self, symbol: MetalSymbol, timeframe: Timeframe
    ) -> HistoricalSeries | None:
        return self._history.get((symbol, timeframe))

    async def get_or_fetch_quote(self, symbol: MetalSymbol) -> MetalPrice:
        """Return the cached quote for ``symbol``, fetching it on a miss.

        Raises
        ------
        UpstreamError
            Propagated from the source; nothing is cached.
        """
        cached = self._quotes.get(symbol)
        if cached is not None:
            logger.debug("Quote cache hit for %s", symbol)
            return cached

        def _store(quote: MetalPrice) -> MetalPrice:
            self._quotes[symbol] = quote
            return quote

        return await self._fetch(
            ("quote", symbol),
            lambda: self._source.get_metal_price(symbol),
            _store,
        )

    async def get_or_fetch_history(
        self,
        symbol: MetalSymbol,
        timeframe: Timeframe,
        reference_quote: MetalPrice,
    ) -> HistoricalSeries:
        """Return the cached series for (symbol, timeframe), fetching it on a miss.

        ``reference_quote`` anchors a synthesized series to the current price.
        """
        key = (symbol, timeframe)
        cached = self._history.get(key)
        if cached is not None:
            logger.debug("History cache hit for %s/%s", symbol, timeframe)
            return cached

        def _store(points: list) -> HistoricalSeries:
            series = tuple(points)
            self._history[key] = series
            return series

        return await self._fetch(
            ("history", symbol, timeframe),
            lambda: self._source.get_historical_data(symbol, timeframe, reference_quote),
            _store,
        )

    def clear(self) -> None:
        """Drop every cached entry. In-flight fetches still complete and write back."""
        self._quotes.clear()
        self._history.clear()

    async def _fetch(
        self,
        key: Hashable,
        call: Callable[[], Awaitable[Any]],
        store: Callable[[Any], Any],
    ) -> Any:
        if not self._single_flight:
            logger.debug("Fetching %s from source", key)
            return store(await call())

        task = self._inflight.get(key)
        if task is None:
            logger.debug("Fetching %s from source", key)
            task = asyncio.ensure_future(self._run(key, call, store))
            self._inflight[key] = task
            task.add_done_callback(functools.partial(_consume_failure, key))
        else:
            logger.debug("Joining in-flight fetch for %s", key)
        # One caller being cancelled must not cancel the shared fetch
        return await asyncio.shield(task)

    async def _run(
        self,
        key: Hashable,
        call: Callable[[], Awaitable[Any]],
        store: Callable[[Any], Any],
    ) -> Any:
        try:
            return store(await call())
        finally:
            self._inflight.pop(key, None)


def _consume_failure(key: Hashable, task: asyncio.Future) -> None:
    # Marks the failure as retrieved even when every awaiter was cancelled
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug("Shared fetch for %s failed: %s", key, exc)
