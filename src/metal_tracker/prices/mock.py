"""Deterministic mock price source.

Serves a fixed quote table in INR and synthesizes smooth historical
series that end at the current quote, with simulated network latency.
"""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

from metal_tracker.core.exceptions import UpstreamError
from metal_tracker.core.models import (
    HistoricalDataPoint,
    MetalPrice,
    MetalSymbol,
    Timeframe,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MockQuote:
    """Base values a mock quote is derived from."""

    price: float  # per troy ounce
    price_gram_24k: float
    change: float
    change_percent: float


MOCK_PRICES: dict[MetalSymbol, MockQuote] = {
    MetalSymbol.GOLD: MockQuote(5850.75, 188.12, 45.20, 0.78),
    MetalSymbol.SILVER: MockQuote(72.45, 2.33, -1.15, -1.56),
    MetalSymbol.PLATINUM: MockQuote(2650.34, 85.22, 25.10, 0.95),
    MetalSymbol.PALLADIUM: MockQuote(3420.89, 109.99, -18.45, -0.54),
}

# Synthetic series never dip below this share of the current price
_PRICE_FLOOR = 0.85


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MockPriceSource:
    """PriceSource backed by a static quote table.

    Parameters
    ----------
    quote_delay : float
        Simulated latency of a quote request, in seconds. Default: 0.8.
    history_delay : float
        Simulated latency of a history request, in seconds. Default: 0.4.
    currency : str
        Currency code stamped on every quote. Default: ``"INR"``.
    prices : dict[MetalSymbol, MockQuote] | None
        Override the quote table (useful for testing).
    clock : Callable[[], datetime] | None
        Source of "now" for timestamps. Defaults to UTC wall time.
    """

    def __init__(
        self,
        quote_delay: float = 0.8,
        history_delay: float = 0.4,
        currency: str = "INR",
        prices: dict[MetalSymbol, MockQuote] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._quote_delay = quote_delay
        self._history_delay = history_delay
        self._currency = currency
        self._prices = MOCK_PRICES if prices is None else prices
        self._clock = clock or _utcnow

    async def get_metal_price(self, symbol: MetalSymbol) -> MetalPrice:
        await asyncio.sleep(self._quote_delay)

        mock = self._prices.get(symbol)
        if mock is None:
            raise UpstreamError(
                f"No mock data available for {symbol}",
                context={"symbol": str(symbol)},
            )

        logger.debug("Mock quote for %s: %.2f", symbol, mock.price)
        return MetalPrice(
            metal=symbol,
            currency=self._currency,
            price=mock.price,
            price_gram_24k=mock.price_gram_24k,
            timestamp=self._clock(),
            prev_close_price=mock.price - mock.change,
            open_price=mock.price - mock.change * 0.5,
            low_price=mock.price - abs(mock.change * 1.2),
            high_price=mock.price + abs(mock.change * 0.8),
            ch=mock.change,
            chp=mock.change_percent,
        )

    async def get_historical_data(
        self,
        symbol: MetalSymbol,
        timeframe: Timeframe,
        current_price: MetalPrice,
    ) -> list[HistoricalDataPoint]:
        await asyncio.sleep(self._history_delay)
        return synthesize_history(symbol, timeframe, current_price, self._clock())


def synthesize_history(
    symbol: MetalSymbol,
    timeframe: Timeframe,
    current_price: MetalPrice,
    now: datetime,
) -> list[HistoricalDataPoint]:
    """Build a smooth series that drifts from the previous level to the current price.

    Two sine waves seeded by the symbol give each metal its own shape; the
    last point lands on ``now`` and the series is ordered oldest first.
    """
    end_price = current_price.price
    change = current_price.chp / 100
    start_price = end_price / (1 + change)

    n = timeframe.points
    interval = timedelta(seconds=timeframe.interval_seconds)
    seed = ord(symbol[0]) + ord(symbol[1])

    points: list[HistoricalDataPoint] = []
    for i in range(n):
        progress = i / (n - 1)
        wave1 = math.sin(progress * math.pi * 2 + seed * 0.1) * 0.02
        wave2 = math.sin(progress * math.pi * 4 + seed * 0.2) * 0.01
        trend = progress * change * 0.01
        variation = (wave1 + wave2 + trend) * end_price
        price = start_price + (end_price - start_price) * progress + variation
        points.append(
            HistoricalDataPoint(
                date=now - (n - 1 - i) * interval,
                price=max(price, end_price * _PRICE_FLOOR),
            )
        )
    return points
