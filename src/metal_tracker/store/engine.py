"""The metals store: the single writer of AppState.

All mutation goes through ``metals_reducer``. Fetches run on the event
loop and only ever suspend inside the price source, so a dispatch is never
interleaved with another one and no locks are needed.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from functools import reduce
from typing import Callable, Iterable

from metal_tracker.core.models import (
    AppState,
    MetalData,
    MetalId,
    Timeframe,
)
from metal_tracker.prices.cache import QuoteCache
from metal_tracker.prices.provider import PriceSource
from metal_tracker.store.actions import (
    BeginRefresh,
    EndRefresh,
    HistorySucceeded,
    ItemQuoteFailed,
    ItemQuoteSucceeded,
    MetalsAction,
    RefreshCancelled,
)
from metal_tracker.store.reducer import initial_state, metals_reducer

logger = logging.getLogger(__name__)

Listener = Callable[[AppState], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _error_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class MetalsStore:
    """Process-wide read model of the tracked metals.

    Observers read ``snapshot()`` or ``subscribe()`` to every committed
    state; presentation code triggers ``refresh_all()`` and
    ``fetch_history()``. Neither coroutine raises on upstream failure.

    Parameters
    ----------
    cache : QuoteCache
        Cache in front of the price source.
    state : AppState | None
        Starting state. Defaults to every catalog metal in loading state.
    clock : Callable[[], datetime] | None
        Source of merge timestamps. Defaults to UTC wall time.
    """

    def __init__(
        self,
        cache: QuoteCache,
        state: AppState | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._cache = cache
        self._state = state if state is not None else initial_state()
        self._clock = clock or _utcnow
        self._index: dict[MetalId, int] = {
            m.id: i for i, m in enumerate(self._state.metals)
        }
        self._listeners: list[Listener] = []
        self._initial_refresh: asyncio.Task[None] | None = None

    @property
    def cache(self) -> QuoteCache:
        return self._cache

    # --- Read side ---

    def snapshot(self) -> AppState:
        """Current immutable state."""
        return self._state

    def lookup_item(self, metal_id: MetalId) -> MetalData | None:
        """Return the current state of one metal, or None for unknown ids."""
        idx = self._index.get(metal_id)
        if idx is None:
            return None
        return self._state.metals[idx]

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with every committed state. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # --- Write side ---

    def dispatch(self, action: MetalsAction) -> AppState:
        """Apply one action and publish the result."""
        return self.dispatch_batch([action])

    def dispatch_batch(self, actions: Iterable[MetalsAction]) -> AppState:
        """Fold several actions and publish only the final state."""
        previous = self._state
        self._state = reduce(metals_reducer, actions, previous)
        if self._state is not previous:
            self._notify()
        return self._state

    def _notify(self) -> None:
        state = self._state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Store listener %r failed", listener)

    # --- Operations ---

    def start(self) -> asyncio.Task[None]:
        """Schedule the initial refresh. Later calls return the same task.

        Must be called from a running event loop.
        """
        if self._initial_refresh is None:
            self._initial_refresh = asyncio.get_running_loop().create_task(
                self.refresh_all()
            )
        return self._initial_refresh

    async def wait_ready(self) -> None:
        """Wait for the initial refresh, if one was started."""
        if self._initial_refresh is not None:
            await self._initial_refresh

    async def refresh_all(self) -> None:
        """Fetch every metal's quote concurrently and merge the batch at once.

        One metal failing never cancels or delays the others; failures end
        up in the metal's ``error`` field.
        """
        self.dispatch(BeginRefresh())
        metals = self._state.metals

        try:
            results = await asyncio.gather(
                *(self._cache.get_or_fetch_quote(m.symbol) for m in metals),
                return_exceptions=True,
            )
        except asyncio.CancelledError:
            self.dispatch(RefreshCancelled())
            raise

        at = self._clock()
        actions: list[MetalsAction] = []
        failed = 0
        for metal, result in zip(metals, results):
            if isinstance(result, BaseException):
                failed += 1
                message = _error_message(result)
                logger.warning("Quote fetch failed for %s: %s", metal.id, message)
                actions.append(ItemQuoteFailed(metal_id=metal.id, error=message))
            else:
                actions.append(ItemQuoteSucceeded(metal_id=metal.id, price=result, at=at))
        actions.append(EndRefresh())

        self.dispatch_batch(actions)
        logger.info("%d/%d quotes refreshed", len(metals) - failed, len(metals))

    async def fetch_history(self, metal_id: MetalId, timeframe: Timeframe | str) -> None:
        """Load the series for one metal and window, unless already present.

        No-op for unknown ids or window names, for windows already loaded,
        and for metals without a quote yet. A failure is logged and the window
        stays absent so the caller can retry later.
        """
        try:
            timeframe = Timeframe(timeframe)
        except ValueError:
            logger.debug("fetch_history for unknown timeframe %r ignored", timeframe)
            return
        metal = self.lookup_item(metal_id)
        if metal is None:
            logger.debug("fetch_history for unknown metal %r ignored", metal_id)
            return
        if metal.history(timeframe):
            return
        if metal.price is None:
            logger.debug("No quote yet for %s, skipping %s history", metal_id, timeframe)
            return

        try:
            series = await self._cache.get_or_fetch_history(
                metal.symbol, timeframe, metal.price
            )
        except Exception as e:
            logger.error(
                "Failed to fetch %s history for %s: %s", timeframe, metal_id, e
            )
            return

        self.dispatch(
            HistorySucceeded(metal_id=metal_id, timeframe=timeframe, points=series)
        )


def create_store(
    source: PriceSource,
    *,
    single_flight: bool = False,
    clock: Callable[[], datetime] | None = None,
) -> MetalsStore:
    """Build a store over ``source`` and trigger its initial refresh.

    Must be called from a running event loop; await ``wait_ready()`` for
    the first batch to land.
    """
    store = MetalsStore(QuoteCache(source, single_flight=single_flight), clock=clock)
    store.start()
    return store
