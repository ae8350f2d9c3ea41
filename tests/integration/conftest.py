"""Integration test fixtures — the real mock source, no network."""

from __future__ import annotations

import pytest

from metal_tracker.core.exceptions import UpstreamError
from metal_tracker.core.models import MetalSymbol
from metal_tracker.prices.mock import MockPriceSource


class FlakyMockSource(MockPriceSource):
    """MockPriceSource whose quote calls fail for selected symbols."""

    def __init__(self, failing: dict[MetalSymbol, str], **kwargs) -> None:
        super().__init__(**kwargs)
        self.failing = failing
        self.history_requests = 0

    async def get_metal_price(self, symbol):
        if symbol in self.failing:
            raise UpstreamError(self.failing[symbol], context={"symbol": str(symbol)})
        return await super().get_metal_price(symbol)

    async def get_historical_data(self, symbol, timeframe, current_price):
        self.history_requests += 1
        return await super().get_historical_data(symbol, timeframe, current_price)


@pytest.fixture
def mock_source() -> MockPriceSource:
    return MockPriceSource(quote_delay=0, history_delay=0)


@pytest.fixture
def flaky_source_factory():
    def _make(failing: dict[MetalSymbol, str] | None = None) -> FlakyMockSource:
        return FlakyMockSource(failing or {}, quote_delay=0, history_delay=0)

    return _make
