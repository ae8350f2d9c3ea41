"""GoldAPI price source — direct HTTP implementation.

Uses the goldapi.io REST API via httpx:

- ``GET /{symbol}/{currency}`` returns the live quote.
- ``GET /{symbol}/{currency}/{YYYYMMDD}`` returns the quote for a past day.

The API has daily granularity only, so the ``24h`` window is not served.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any

import httpx
from pydantic import ValidationError

from metal_tracker.core.exceptions import UpstreamError
from metal_tracker.core.models import (
    HistoricalDataPoint,
    MetalPrice,
    MetalSymbol,
    Timeframe,
)

logger = logging.getLogger(__name__)

_BASE_URL = "https://www.goldapi.io/api"
_USER_AGENT = "metal-tracker/0.1"


class GoldApiAdapter:
    """Transforms raw GoldAPI JSON into canonical models."""

    def adapt(self, raw_data: Any, symbol: MetalSymbol) -> MetalPrice:
        """Parse a quote payload into a MetalPrice.

        Raises
        ------
        UpstreamError
            If the payload carries an ``error`` field or fails validation.
        """
        if not isinstance(raw_data, dict):
            raise UpstreamError(
                f"Unexpected GoldAPI payload for {symbol}: {type(raw_data).__name__}",
                context={"symbol": str(symbol)},
            )
        if raw_data.get("error"):
            raise UpstreamError(
                f"GoldAPI error for {symbol}: {raw_data['error']}",
                context={"symbol": str(symbol)},
            )
        try:
            return MetalPrice.model_validate({**raw_data, "metal": symbol})
        except ValidationError as e:
            raise UpstreamError(
                f"Malformed GoldAPI quote for {symbol}: {e.error_count()} invalid fields",
                context={"symbol": str(symbol)},
            ) from e

    def adapt_point(self, raw_data: Any, symbol: MetalSymbol, day: date) -> HistoricalDataPoint:
        """Parse a historical-day payload into a single point stamped at midnight UTC."""
        quote = self.adapt(raw_data, symbol)
        return HistoricalDataPoint(
            date=datetime.combine(day, datetime.min.time(), tzinfo=timezone.utc),
            price=quote.price,
        )


class GoldApiPriceSource:
    """Fetches quotes from goldapi.io.

    All methods are async. Use via ``async with GoldApiPriceSource(...) as source:``.

    Parameters
    ----------
    api_key : str
        Value of the ``x-access-token`` header.
    currency : str
        Quote currency. Default: ``"INR"``.
    timeout : float
        HTTP request timeout in seconds. Default: 15.0.
    base_url : str
        Override base URL (useful for testing).
    adapter : GoldApiAdapter | None
        Custom adapter instance. Uses default if None.
    """

    def __init__(
        self,
        api_key: str,
        currency: str = "INR",
        timeout: float = 15.0,
        base_url: str = _BASE_URL,
        adapter: GoldApiAdapter | None = None,
    ) -> None:
        self._currency = currency
        self._base_url = base_url.rstrip("/")
        self._adapter = adapter or GoldApiAdapter()
        self._client = httpx.AsyncClient(
            headers={
                "x-access-token": api_key,
                "User-Agent": _USER_AGENT,
                "Accept": "application/json",
            },
            timeout=httpx.Timeout(timeout),
        )

    async def __aenter__(self) -> GoldApiPriceSource:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client. Called automatically by __aexit__."""
        await self._client.aclose()

    async def _get_json(self, url: str, symbol: MetalSymbol) -> Any:
        """GET a URL and decode JSON, mapping every failure to UpstreamError."""
        try:
            resp = await self._client.get(url)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "GoldAPI HTTP error for %s: %s %s",
                symbol,
                e.response.status_code,
                e.response.text[:200],
            )
            raise UpstreamError(
                f"GoldAPI returned HTTP {e.response.status_code} for {symbol}",
                context={
                    "symbol": str(symbol),
                    "status_code": e.response.status_code,
                    "url": url,
                },
            ) from e
        except httpx.RequestError as e:
            logger.error("GoldAPI request error for %s: %s", symbol, e)
            raise UpstreamError(
                f"GoldAPI request failed for {symbol}: {e}",
                context={"symbol": str(symbol), "url": url},
            ) from e
        except ValueError as e:
            raise UpstreamError(
                f"GoldAPI returned invalid JSON for {symbol}",
                context={"symbol": str(symbol), "url": url},
            ) from e

    async def get_metal_price(self, symbol: MetalSymbol) -> MetalPrice:
        url = f"{self._base_url}/{symbol}/{self._currency}"
        raw = await self._get_json(url, symbol)
        return self._adapter.adapt(raw, symbol)

    async def get_historical_data(
        self,
        symbol: MetalSymbol,
        timeframe: Timeframe,
        current_price: MetalPrice,
    ) -> list[HistoricalDataPoint]:
        """Fetch one point per past day concurrently; today is the current quote."""
        if timeframe == Timeframe.DAY:
            raise UpstreamError(
                f"GoldAPI has no intraday history for {symbol}",
                context={"symbol": str(symbol), "timeframe": str(timeframe)},
            )

        today = current_price.timestamp.astimezone(timezone.utc).date()
        days = [today - timedelta(days=n) for n in range(timeframe.points - 1, 0, -1)]
        points = await asyncio.gather(*(self._get_day(symbol, d) for d in days))

        return [
            *points,
            HistoricalDataPoint(date=current_price.timestamp, price=current_price.price),
        ]

    async def _get_day(self, symbol: MetalSymbol, day: date) -> HistoricalDataPoint:
        url = f"{self._base_url}/{symbol}/{self._currency}/{day:%Y%m%d}"
        raw = await self._get_json(url, symbol)
        return self._adapter.adapt_point(raw, symbol, day)
