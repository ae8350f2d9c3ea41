"""Shared pytest fixtures for metal-tracker."""

from __future__ import annotations

import asyncio
from collections import Counter
from datetime import datetime, timedelta, timezone

import pytest

from metal_tracker.core.exceptions import UpstreamError
from metal_tracker.core.models import (
    HistoricalDataPoint,
    MetalPrice,
    MetalSymbol,
    Timeframe,
)

FIXED_NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)

FIXTURE_PRICES: dict[MetalSymbol, float] = {
    MetalSymbol.GOLD: 5850.75,
    MetalSymbol.SILVER: 72.45,
    MetalSymbol.PLATINUM: 2650.34,
    MetalSymbol.PALLADIUM: 3420.89,
}


def make_price(symbol: MetalSymbol = MetalSymbol.GOLD, price: float = 5850.75, **overrides) -> MetalPrice:
    fields = dict(
        metal=symbol,
        currency="INR",
        price=price,
        price_gram_24k=round(price / 31.1035, 2),
        timestamp=FIXED_NOW,
        prev_close_price=price - 10.0,
        open_price=price - 5.0,
        low_price=price - 12.0,
        high_price=price + 8.0,
        ch=10.0,
        chp=0.5,
    )
    fields.update(overrides)
    return MetalPrice(**fields)


class StubPriceSource:
    """Scriptable PriceSource that records every upstream call.

    ``failures`` maps a symbol to the message its quote call fails with.
    When ``gate`` is set, every call waits on it before answering.
    """

    def __init__(
        self,
        prices: dict[MetalSymbol, float] | None = None,
        failures: dict[MetalSymbol, str] | None = None,
        history_failures: set[MetalSymbol] | None = None,
        gate: asyncio.Event | None = None,
    ) -> None:
        self.prices = dict(FIXTURE_PRICES if prices is None else prices)
        self.failures = dict(failures or {})
        self.history_failures = set(history_failures or ())
        self.gate = gate
        self.quote_calls: Counter = Counter()
        self.history_calls: Counter = Counter()

    async def get_metal_price(self, symbol: MetalSymbol) -> MetalPrice:
        self.quote_calls[symbol] += 1
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        if symbol in self.failures:
            raise UpstreamError(self.failures[symbol], context={"symbol": str(symbol)})
        return make_price(symbol, self.prices[symbol])

    async def get_historical_data(
        self,
        symbol: MetalSymbol,
        timeframe: Timeframe,
        current_price: MetalPrice,
    ) -> list[HistoricalDataPoint]:
        self.history_calls[(symbol, timeframe)] += 1
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        if symbol in self.history_failures:
            raise UpstreamError(f"history unavailable for {symbol}")
        n = timeframe.points
        step = timedelta(seconds=timeframe.interval_seconds)
        return [
            HistoricalDataPoint(
                date=current_price.timestamp - (n - 1 - i) * step,
                price=current_price.price + i,
            )
            for i in range(n)
        ]


@pytest.fixture
def sample_price() -> MetalPrice:
    return make_price()


@pytest.fixture
def stub_source() -> StubPriceSource:
    return StubPriceSource()


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def price_factory():
    """Factory for MetalPrice with overridable defaults."""
    return make_price


@pytest.fixture
def source_factory():
    """Factory for StubPriceSource with scripted prices and failures."""
    return StubPriceSource
