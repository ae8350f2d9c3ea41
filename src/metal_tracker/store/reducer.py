"""Pure state transition function for the metals store."""

from __future__ import annotations

from typing import Any

from metal_tracker.core.catalog import default_metals
from metal_tracker.core.models import AppState, MetalData, MetalId
from metal_tracker.store.actions import (
    BeginRefresh,
    EndRefresh,
    HistorySucceeded,
    ItemQuoteFailed,
    ItemQuoteSucceeded,
    MetalsAction,
    RefreshCancelled,
)


def initial_state() -> AppState:
    """Every catalog metal loading, nothing fetched yet."""
    return AppState(metals=default_metals())


def metals_reducer(state: AppState, action: MetalsAction) -> AppState:
    """Return the state that results from applying ``action`` to ``state``.

    No I/O and no clock reads: everything time-dependent travels inside
    the action. Actions naming an unknown metal leave the state untouched.
    """
    if isinstance(action, BeginRefresh):
        return state.model_copy(
            update={
                "refreshing": True,
                "metals": tuple(
                    m.model_copy(update={"loading": True, "error": None})
                    for m in state.metals
                ),
            }
        )

    if isinstance(action, ItemQuoteSucceeded):
        if not _has_metal(state, action.metal_id):
            return state
        updated = _update_metal(
            state,
            action.metal_id,
            price=action.price,
            loading=False,
            error=None,
        )
        return updated.model_copy(update={"last_updated": action.at})

    if isinstance(action, ItemQuoteFailed):
        # The previous quote, if any, stays visible
        return _update_metal(state, action.metal_id, error=action.error, loading=False)

    if isinstance(action, EndRefresh):
        return state.model_copy(update={"refreshing": False})

    if isinstance(action, RefreshCancelled):
        # Unsettled items keep their previous quote
        return state.model_copy(
            update={
                "refreshing": False,
                "metals": tuple(
                    m.model_copy(update={"loading": False}) if m.loading else m
                    for m in state.metals
                ),
            }
        )

    if isinstance(action, HistorySucceeded):
        metal = _find(state, action.metal_id)
        if metal is None or metal.historical_data.get(action.timeframe):
            # Series are write-once per (metal, timeframe)
            return state
        history = {**metal.historical_data, action.timeframe: tuple(action.points)}
        return _update_metal(state, action.metal_id, historical_data=history)

    return state


def _find(state: AppState, metal_id: MetalId) -> MetalData | None:
    for metal in state.metals:
        if metal.id == metal_id:
            return metal
    return None


def _has_metal(state: AppState, metal_id: MetalId) -> bool:
    return _find(state, metal_id) is not None


def _update_metal(state: AppState, metal_id: MetalId, **changes: Any) -> AppState:
    if not _has_metal(state, metal_id):
        return state
    return state.model_copy(
        update={
            "metals": tuple(
                m.model_copy(update=changes) if m.id == metal_id else m
                for m in state.metals
            )
        }
    )
