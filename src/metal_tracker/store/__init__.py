"""Reducer-driven store synchronizing metal quotes and history."""

from metal_tracker.store.actions import (
    BeginRefresh,
    EndRefresh,
    HistorySucceeded,
    ItemQuoteFailed,
    ItemQuoteSucceeded,
    MetalsAction,
    RefreshCancelled,
)
from metal_tracker.store.engine import Listener, MetalsStore, create_store
from metal_tracker.store.reducer import initial_state, metals_reducer

__all__ = [
    # Actions
    "MetalsAction",
    "BeginRefresh",
    "ItemQuoteSucceeded",
    "ItemQuoteFailed",
    "EndRefresh",
    "RefreshCancelled",
    "HistorySucceeded",
    # Reducer
    "initial_state",
    "metals_reducer",
    # Store
    "Listener",
    "MetalsStore",
    "create_store",
]
