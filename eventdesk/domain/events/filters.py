"""
Filter state store shared by the listing toolbar and the events grid.

The store holds the active filter selection and notifies subscribers
synchronously after each merge. Two helpers sit on top of it:

- InitialTagSync applies a route's initial tag once per distinct value.
- SearchInputDebouncer commits keystrokes to the store after a quiet period.
"""

import asyncio
import logging
import threading
from dataclasses import dataclass, replace
from typing import Any, Callable, Mapping, Optional

from eventdesk.domain.events.constants import (
    FREQUENCY_ALL,
    MAX_EVENTS_OFFSET,
    STATUS_ACTIVE,
    TRENDING_TAG,
)
from eventdesk.domain.events.entities import ListEventsCriteria

logger = logging.getLogger(__name__)

SEARCH_DEBOUNCE_SECONDS = 0.15


@dataclass(frozen=True)
class FilterState:
    """Active filter selection."""

    search: str = ""
    tag: str = TRENDING_TAG
    main_tag: str = TRENDING_TAG
    bookmarked: bool = False
    frequency: str = FREQUENCY_ALL
    status: str = STATUS_ACTIVE
    hide_sports: bool = False
    hide_crypto: bool = False
    hide_earnings: bool = False


Listener = Callable[[FilterState], None]


class FilterStore:
    """Reactive holder for a FilterState.

    Merges are applied under a lock; listeners are called afterwards,
    outside the lock, with the resulting snapshot.
    """

    def __init__(self, initial_tag: Optional[str] = None) -> None:
        state = FilterState()
        if initial_tag:
            state = replace(state, tag=initial_tag, main_tag=initial_tag)
        self._state = state
        self._lock = threading.Lock()
        self._listeners: list[Listener] = []

    def snapshot(self) -> FilterState:
        with self._lock:
            return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener and return a callable that removes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            self.unsubscribe(listener)

        return unsubscribe

    def unsubscribe(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def update_filters(self, partial: Mapping[str, Any]) -> FilterState:
        """Shallow-merge ``partial`` over the current state and notify.

        Args:
            partial: Field name to new value. Later keys win.

        Returns:
            The merged state.
        """
        with self._lock:
            self._state = replace(self._state, **dict(partial))
            state = self._state
            listeners = list(self._listeners)

        for listener in listeners:
            listener(state)
        return state

    def select_main_category(self, slug: str) -> FilterState:
        return self.update_filters({"tag": slug, "main_tag": slug})


class InitialTagSync:
    """Applies a route-provided initial tag at most once per distinct value."""

    def __init__(self, store: FilterStore) -> None:
        self._store = store
        self._last_applied: Optional[str] = None

    @property
    def last_applied(self) -> Optional[str]:
        return self._last_applied

    def apply(self, initial_tag: Optional[str]) -> bool:
        if not initial_tag or initial_tag == self._last_applied:
            return False
        self._last_applied = initial_tag
        self._store.select_main_category(initial_tag)
        return True


class SearchInputDebouncer:
    """Debounces search keystrokes into the filter store.

    Nothing is committed until the user has typed at least once. A
    ``search`` change coming from the store (navigation, reset) replaces
    the local value and drops any pending commit.
    """

    def __init__(
        self, store: FilterStore, delay: float = SEARCH_DEBOUNCE_SECONDS
    ) -> None:
        self._store = store
        self._delay = delay
        self._value = store.snapshot().search
        self._user_changed = False
        self._pending: Optional[asyncio.TimerHandle] = None
        self._unsubscribe = store.subscribe(self._on_store_change)

    @property
    def value(self) -> str:
        return self._value

    @property
    def has_pending_commit(self) -> bool:
        return self._pending is not None

    def on_input(self, value: str) -> None:
        """Record a keystroke and (re)schedule the commit.

        Must be called from a running event loop.
        """
        self._value = value
        self._user_changed = True
        self._cancel_pending()
        loop = asyncio.get_running_loop()
        self._pending = loop.call_later(self._delay, self._commit)

    def close(self) -> None:
        self._cancel_pending()
        self._unsubscribe()

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _commit(self) -> None:
        self._pending = None
        if not self._user_changed:
            return
        if self._store.snapshot().search == self._value:
            return
        logger.debug("Committing search input: %r", self._value)
        self._store.update_filters({"search": self._value})

    def _on_store_change(self, state: FilterState) -> None:
        if state.search == self._value:
            return
        self._cancel_pending()
        self._value = state.search


def to_criteria(
    state: FilterState,
    user_id: str = "",
    locale: str = "en",
    offset: int = 0,
    sports_sport_slug: Optional[str] = None,
    sports_section: Optional[str] = None,
) -> ListEventsCriteria:
    """Convert a filter snapshot into repository criteria."""
    return ListEventsCriteria(
        tag=state.tag,
        search=state.search,
        user_id=user_id,
        bookmarked=state.bookmarked,
        frequency=state.frequency,
        status=state.status,
        locale=locale,
        offset=min(max(0, offset), MAX_EVENTS_OFFSET),
        sports_sport_slug=sports_sport_slug,
        sports_section=sports_section,
        hide_sports=state.hide_sports,
        hide_crypto=state.hide_crypto,
        hide_earnings=state.hide_earnings,
    )
