"""Pydantic data models — the system's type contracts."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# --- Type Aliases ---

MetalId = str

# --- Enumerations ---


class MetalSymbol(StrEnum):
    """Market symbols of the tracked metals."""

    GOLD = "XAU"
    SILVER = "XAG"
    PLATINUM = "XPT"
    PALLADIUM = "XPD"


class Timeframe(StrEnum):
    """Historical windows a chart can be requested for."""

    DAY = "24h"
    WEEK = "Week"
    MONTH = "Month"

    @property
    def points(self) -> int:
        """Number of points in a series for this window."""
        return _TIMEFRAME_POINTS[self]

    @property
    def interval_seconds(self) -> int:
        """Spacing between consecutive points."""
        return 3600 if self is Timeframe.DAY else 86400


_TIMEFRAME_POINTS: dict[Timeframe, int] = {
    Timeframe.DAY: 24,
    Timeframe.WEEK: 7,
    Timeframe.MONTH: 30,
}


class SourceProvider(StrEnum):
    """Supported price source backends."""

    MOCK = "mock"
    GOLDAPI = "goldapi"


# --- Price Models ---


class MetalPrice(BaseModel):
    """A point-in-time quote for one metal.

    Replaced wholesale on every successful fetch; never patched field by
    field.
    """

    model_config = ConfigDict(frozen=True)

    metal: MetalSymbol
    currency: str
    price: float  # per troy ounce
    price_gram_24k: float
    timestamp: datetime
    prev_close_price: float
    open_price: float
    low_price: float
    high_price: float
    ch: float
    chp: float

    @field_validator("price")
    @classmethod
    def price_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"price must be > 0, got {v}")
        return v

    @model_validator(mode="after")
    def high_gte_low(self) -> MetalPrice:
        if self.high_price < self.low_price:
            raise ValueError(
                f"high_price ({self.high_price}) must be >= low_price ({self.low_price})"
            )
        return self


class HistoricalDataPoint(BaseModel):
    """A single point of a historical price series."""

    model_config = ConfigDict(frozen=True)

    date: datetime
    price: float


HistoricalSeries = tuple[HistoricalDataPoint, ...]


# --- Store State Models ---


class MetalData(BaseModel):
    """Canonical state of one tracked metal."""

    model_config = ConfigDict(frozen=True)

    id: MetalId
    name: str
    symbol: MetalSymbol
    icon: str
    loading: bool = False
    price: MetalPrice | None = None
    error: str | None = None
    historical_data: dict[Timeframe, HistoricalSeries] = Field(default_factory=dict)

    def history(self, timeframe: Timeframe) -> HistoricalSeries | None:
        """Return the cached series for a window, or None if not loaded yet."""
        return self.historical_data.get(timeframe)


class AppState(BaseModel):
    """Immutable snapshot of the whole store."""

    model_config = ConfigDict(frozen=True)

    metals: tuple[MetalData, ...]
    last_updated: datetime | None = None
    refreshing: bool = False

    @field_validator("metals")
    @classmethod
    def ids_unique(cls, v: tuple[MetalData, ...]) -> tuple[MetalData, ...]:
        ids = [m.id for m in v]
        if len(ids) != len(set(ids)):
            raise ValueError(f"metal ids must be unique, got {ids}")
        return v
