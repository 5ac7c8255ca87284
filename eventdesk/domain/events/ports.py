"""
Port interfaces (ABCs) for the events bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.

Repository ports return QueryResult values instead of raising: storage
failures are logged by the adapter and surfaced as an error message.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping, Optional

from eventdesk.domain.events.entities import (
    Affiliate,
    ConditionChangeLogEntry,
    Event,
    EventVisibility,
    ListEventsCriteria,
    MainTag,
    MarketResolution,
    MarketSearchHit,
    QueryResult,
    RelatedEvent,
    SettingsSnapshot,
    SettingsUpdate,
    User,
)


class EventRepository(ABC):
    """Port for querying and mutating events."""

    @abstractmethod
    def list_events(self, criteria: ListEventsCriteria) -> QueryResult[list[Event]]:
        """Return one ranked page of events matching the criteria.

        Args:
            criteria: Filter, locale, viewer and pagination settings.

        Returns:
            QueryResult with the page, or an error message.
        """
        raise NotImplementedError

    @abstractmethod
    def list_admin_events(self, criteria: ListEventsCriteria) -> QueryResult[list[Event]]:
        """Same as list_events, including admin-hidden events."""
        raise NotImplementedError

    @abstractmethod
    def get_event_by_slug(
        self, slug: str, user_id: str = "", locale: str = "en"
    ) -> QueryResult[Optional[Event]]:
        """Return a single hydrated event, or None if the slug is unknown."""
        raise NotImplementedError

    @abstractmethod
    def get_event_change_log(self, slug: str) -> QueryResult[list[ConditionChangeLogEntry]]:
        """Return condition audit entries for an event, newest first."""
        raise NotImplementedError

    @abstractmethod
    def get_related_events(
        self, slug: str, tag_slug: str = "all", locale: str = "en"
    ) -> QueryResult[list[RelatedEvent]]:
        """Return single-market events sharing tags with the given event."""
        raise NotImplementedError

    @abstractmethod
    def set_event_hidden_state(
        self, event_id: str, is_hidden: bool
    ) -> QueryResult[Optional[EventVisibility]]:
        """Toggle the admin hidden flag. Data is None for an unknown id."""
        raise NotImplementedError


class MarketRepository(ABC):
    """Port for market lookups."""

    @abstractmethod
    def search_markets(self, query: str, limit: int) -> QueryResult[list[MarketSearchHit]]:
        """Return active markets whose question contains ``query``."""
        raise NotImplementedError

    @abstractmethod
    def get_market_resolutions(
        self, condition_ids: list[str]
    ) -> QueryResult[list[MarketResolution]]:
        """Return resolution flags for lower-cased condition ids."""
        raise NotImplementedError


class TagRepository(ABC):
    """Port for category tags."""

    @abstractmethod
    def get_main_tags(self, locale: str = "en") -> QueryResult[list[MainTag]]:
        raise NotImplementedError

    @abstractmethod
    def update_tag_translations(
        self, tag_id: int, translations: Mapping[str, Optional[str]]
    ) -> QueryResult[dict[str, str]]:
        """Upsert non-empty translations and delete empty ones.

        Returns:
            QueryResult with the stored translations, or an error when the
            tag does not exist or the write failed.
        """
        raise NotImplementedError


class SettingsRepository(ABC):
    """Port for the (group, key) -> value settings store."""

    @abstractmethod
    def get_settings(self) -> QueryResult[SettingsSnapshot]:
        raise NotImplementedError

    @abstractmethod
    def update_settings(self, updates: Iterable[SettingsUpdate]) -> QueryResult[SettingsSnapshot]:
        """Upsert the given entries and return the written entries."""
        raise NotImplementedError


class AffiliateRepository(ABC):
    """Port for affiliate lookups."""

    @abstractmethod
    def get_affiliate_by_code(self, code: str) -> QueryResult[Optional[Affiliate]]:
        raise NotImplementedError


class UserRepository(ABC):
    """Port for resolving the viewer."""

    @abstractmethod
    def get_user(self, user_id: str) -> QueryResult[Optional[User]]:
        raise NotImplementedError


class TagCache(ABC):
    """Port for a tag-aware cache.

    Entries are stored under a key together with a set of tags.
    Invalidating a tag drops every entry labelled with it.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None on a miss."""
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: Any, tags: Iterable[str], ttl: Optional[int] = None) -> None:
        """Store a value under ``key`` labelled with ``tags``.

        Args:
            key: Cache key.
            value: JSON-serialisable value.
            tags: Invalidation tags for the entry.
            ttl: Expiry in seconds, or None for the backend default.
        """
        raise NotImplementedError

    @abstractmethod
    def invalidate(self, *tags: str) -> int:
        """Drop every entry carrying any of ``tags``. Returns entries dropped."""
        raise NotImplementedError
