"""Tests for the pure metals reducer."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from metal_tracker.core.models import HistoricalDataPoint, MetalSymbol, Timeframe
from metal_tracker.store.actions import (
    BeginRefresh,
    EndRefresh,
    HistorySucceeded,
    ItemQuoteFailed,
    ItemQuoteSucceeded,
    RefreshCancelled,
)
from metal_tracker.store.reducer import initial_state, metals_reducer

AT = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def _metal(state, metal_id):
    return next(m for m in state.metals if m.id == metal_id)


def _series(n: int, base: float = 100.0) -> tuple[HistoricalDataPoint, ...]:
    return tuple(
        HistoricalDataPoint(date=datetime(2026, 1, i + 1, tzinfo=timezone.utc), price=base + i)
        for i in range(n)
    )


@pytest.fixture
def state():
    return initial_state()


class TestInitialState:
    def test_shape(self, state):
        assert [m.id for m in state.metals] == ["gold", "silver", "platinum", "palladium"]
        assert state.last_updated is None
        assert state.refreshing is False


class TestRefreshActions:
    def test_begin_refresh_sets_flag_and_clears_errors(self, state):
        failed = metals_reducer(state, ItemQuoteFailed("gold", "timeout"))
        after = metals_reducer(failed, BeginRefresh())
        assert after.refreshing is True
        assert all(m.loading for m in after.metals)
        assert all(m.error is None for m in after.metals)

    def test_begin_refresh_keeps_quotes(self, state, sample_price):
        with_quote = metals_reducer(state, ItemQuoteSucceeded("gold", sample_price, AT))
        after = metals_reducer(with_quote, BeginRefresh())
        assert _metal(after, "gold").price == sample_price

    def test_quote_succeeded(self, state, sample_price):
        loading = metals_reducer(state, BeginRefresh())
        failed = metals_reducer(loading, ItemQuoteFailed("gold", "old error"))
        after = metals_reducer(failed, ItemQuoteSucceeded("gold", sample_price, AT))
        gold = _metal(after, "gold")
        assert gold.price == sample_price
        assert gold.loading is False
        assert gold.error is None
        assert after.last_updated == AT

    def test_quote_succeeded_touches_only_its_metal(self, state, sample_price):
        after = metals_reducer(state, ItemQuoteSucceeded("gold", sample_price, AT))
        assert _metal(after, "silver") is _metal(state, "silver")

    def test_quote_replaced_wholesale(self, state, price_factory):
        first = metals_reducer(state, ItemQuoteSucceeded("gold", price_factory(price=100.0), AT))
        replacement = price_factory(price=200.0, ch=-3.0)
        after = metals_reducer(first, ItemQuoteSucceeded("gold", replacement, AT))
        assert _metal(after, "gold").price == replacement

    def test_quote_failed_keeps_stale_quote(self, state, sample_price):
        with_quote = metals_reducer(state, ItemQuoteSucceeded("gold", sample_price, AT))
        after = metals_reducer(with_quote, ItemQuoteFailed("gold", "timeout"))
        gold = _metal(after, "gold")
        assert gold.error == "timeout"
        assert gold.loading is False
        assert gold.price == sample_price

    def test_quote_failed_does_not_touch_last_updated(self, state):
        after = metals_reducer(state, ItemQuoteFailed("gold", "timeout"))
        assert after.last_updated is None

    def test_end_refresh(self, state):
        refreshing = metals_reducer(state, BeginRefresh())
        assert metals_reducer(refreshing, EndRefresh()).refreshing is False

    def test_refresh_cancelled_settles_loading(self, state, sample_price):
        refreshed = metals_reducer(
            metals_reducer(state, BeginRefresh()),
            ItemQuoteSucceeded("gold", sample_price, AT),
        )
        pending = metals_reducer(refreshed, BeginRefresh())
        after = metals_reducer(pending, RefreshCancelled())

        assert after.refreshing is False
        assert not any(m.loading for m in after.metals)
        assert _metal(after, "gold").price == sample_price
        assert after.last_updated == AT

    def test_unknown_metal_is_ignored(self, state, sample_price):
        assert metals_reducer(state, ItemQuoteSucceeded("copper", sample_price, AT)) is state
        assert metals_reducer(state, ItemQuoteFailed("copper", "x")) is state

    def test_reducer_does_not_mutate_input(self, state, sample_price):
        metals_reducer(state, ItemQuoteSucceeded("gold", sample_price, AT))
        assert _metal(state, "gold").price is None


class TestHistoryAction:
    def test_inserts_series(self, state):
        after = metals_reducer(state, HistorySucceeded("gold", Timeframe.WEEK, _series(7)))
        assert _metal(after, "gold").history(Timeframe.WEEK) == _series(7)
        assert _metal(after, "gold").history(Timeframe.MONTH) is None

    def test_windows_accumulate(self, state):
        s1 = metals_reducer(state, HistorySucceeded("gold", Timeframe.WEEK, _series(7)))
        s2 = metals_reducer(s1, HistorySucceeded("gold", Timeframe.DAY, _series(24)))
        gold = _metal(s2, "gold")
        assert set(gold.historical_data) == {Timeframe.WEEK, Timeframe.DAY}

    def test_write_once(self, state):
        first = metals_reducer(state, HistorySucceeded("gold", Timeframe.WEEK, _series(7)))
        second = metals_reducer(first, HistorySucceeded("gold", Timeframe.WEEK, _series(7, 999.0)))
        assert second is first
        assert _metal(second, "gold").history(Timeframe.WEEK)[0].price == 100.0

    def test_empty_series_can_be_replaced(self, state):
        empty = metals_reducer(state, HistorySucceeded("gold", Timeframe.WEEK, ()))
        assert _metal(empty, "gold").history(Timeframe.WEEK) == ()
        filled = metals_reducer(empty, HistorySucceeded("gold", Timeframe.WEEK, _series(7)))
        assert len(_metal(filled, "gold").history(Timeframe.WEEK)) == 7

    def test_unknown_metal_is_ignored(self, state):
        assert metals_reducer(state, HistorySucceeded("copper", Timeframe.WEEK, _series(7))) is state

    def test_symbol_unchanged(self, state):
        after = metals_reducer(state, HistorySucceeded("gold", Timeframe.WEEK, _series(7)))
        assert _metal(after, "gold").symbol == MetalSymbol.GOLD
