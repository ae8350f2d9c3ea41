"""State-transition vocabulary of the metals store.

Every change to ``AppState`` is described by one of these immutable
action objects and applied by ``metals_reducer``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Union

from metal_tracker.core.models import HistoricalSeries, MetalId, MetalPrice, Timeframe


@dataclass(frozen=True)
class BeginRefresh:
    """A refresh batch was issued for every tracked metal."""


@dataclass(frozen=True)
class ItemQuoteSucceeded:
    metal_id: MetalId
    price: MetalPrice
    at: datetime  # merge time, becomes AppState.last_updated


@dataclass(frozen=True)
class ItemQuoteFailed:
    metal_id: MetalId
    error: str


@dataclass(frozen=True)
class EndRefresh:
    """The refresh batch has been merged."""


@dataclass(frozen=True)
class RefreshCancelled:
    """The refresh batch was abandoned before any quote was merged."""


@dataclass(frozen=True)
class HistorySucceeded:
    metal_id: MetalId
    timeframe: Timeframe
    points: HistoricalSeries


MetalsAction = Union[
    BeginRefresh,
    ItemQuoteSucceeded,
    ItemQuoteFailed,
    EndRefresh,
    RefreshCancelled,
    HistorySucceeded,
]
