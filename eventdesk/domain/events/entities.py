"""
Domain entities for the events bounded context.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, Optional, TypeVar

from eventdesk.domain.events.constants import FALLBACK_MAIN_TAG
from eventdesk.domain.events.market_chance import resolve_display_price
from eventdesk.domain.events.sports_routing import resolve_event_page_path

T = TypeVar("T")


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    """Outcome of a repository call: either data or an error message.

    Repository operations never raise; failures are carried in ``error``.
    """

    data: Optional[T]
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class Market:
    """A single yes/no question within an event."""

    condition_id: str
    event_id: str
    slug: str
    title: str
    short_title: Optional[str] = None
    question: Optional[str] = None
    icon_url: Optional[str] = None
    is_active: bool = True
    is_resolved: bool = False
    volume: float = 0.0
    volume_24h: float = 0.0
    best_bid: Optional[float] = None
    best_ask: Optional[float] = None
    midpoint: Optional[float] = None
    last_trade_price: Optional[float] = None
    end_time: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def display_title(self) -> str:
        return self.short_title or self.title

    @property
    def price(self) -> Optional[float]:
        """Price shown on market cards, see resolve_display_price."""
        return resolve_display_price(
            bid=self.best_bid,
            ask=self.best_ask,
            last_trade=self.last_trade_price,
            midpoint=self.midpoint,
        )

    @property
    def probability(self) -> Optional[float]:
        price = self.price
        return price * 100 if price is not None else None


@dataclass(frozen=True)
class EventTag:
    """A category label attached to an event, name already localized."""

    id: int
    name: str
    slug: str
    is_main_category: bool = False


@dataclass(frozen=True)
class Event:
    """A tradable topic composed of one or more markets."""

    id: str
    slug: str
    title: str
    status: str
    icon_url: Optional[str] = None
    series_slug: Optional[str] = None
    series_recurrence: Optional[str] = None
    is_hidden: bool = False
    sports_sport_slug: Optional[str] = None
    sports_event_slug: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    end_date: Optional[datetime] = None
    markets: list[Market] = field(default_factory=list)
    tags: list[EventTag] = field(default_factory=list)
    is_bookmarked: bool = False

    @property
    def main_tag(self) -> str:
        """Name of the first main-category tag, else the first tag."""
        if not self.tags:
            return FALLBACK_MAIN_TAG
        for tag in self.tags:
            if tag.is_main_category:
                return tag.name
        return self.tags[0].name

    @property
    def path(self) -> str:
        return resolve_event_page_path(self.slug, self.sports_sport_slug, self.sports_event_slug)

    @property
    def volume(self) -> float:
        return sum(market.volume for market in self.markets)

    @property
    def volume_24h(self) -> float:
        return sum(market.volume_24h for market in self.markets)


@dataclass(frozen=True)
class RelatedEvent:
    """A compact event card shown next to an event page."""

    id: str
    slug: str
    title: str
    icon_url: str
    common_tags_count: int
    chance: Optional[float]


@dataclass(frozen=True)
class EventVisibility:
    """Result of an admin visibility toggle."""

    id: str
    slug: str
    is_hidden: bool


@dataclass(frozen=True)
class ConditionChangeLogEntry:
    """A single audited change on a market condition."""

    condition_id: str
    created_at: datetime
    old_values: dict
    new_values: dict


@dataclass(frozen=True)
class MarketSearchHit:
    """A market matched by free-text search."""

    condition_id: str
    slug: str
    question: str
    volume: float
    is_active: bool
    end_time: Optional[datetime]
    price: Optional[float]


@dataclass(frozen=True)
class MarketResolution:
    """Resolution flag for a market condition."""

    condition_id: str
    is_resolved: bool


@dataclass(frozen=True)
class MainTag:
    """A top-level category with its visible child categories."""

    id: int
    name: str
    slug: str
    display_order: int
    childs: list[tuple[str, str]] = field(default_factory=list)


@dataclass(frozen=True)
class Affiliate:
    """A referral partner identified by a public code."""

    id: str
    affiliate_code: str
    user_id: Optional[str] = None


@dataclass(frozen=True)
class User:
    """A platform user as seen by the listing service."""

    id: str
    username: Optional[str] = None
    is_admin: bool = False


@dataclass(frozen=True)
class SettingsEntry:
    """A persisted settings value. Values are always strings."""

    value: str
    updated_at: Optional[datetime] = None


# group -> key -> entry
SettingsSnapshot = dict[str, dict[str, SettingsEntry]]


@dataclass(frozen=True)
class SettingsUpdate:
    """A single (group, key) write."""

    group: str
    key: str
    value: str


@dataclass(frozen=True)
class ListEventsCriteria:
    """Filter criteria for a page of events.

    Attributes:
        tag: Synthetic tag (trending, new), the sports vertical or a tag slug.
        search: Free-text search, matched term by term against titles.
        user_id: Viewer id, empty for anonymous viewers.
        bookmarked: Restrict to the viewer's bookmarks.
        frequency: Recurrence class, or "all".
        status: "active" or "resolved".
        locale: Locale used for translated titles and tag names.
        offset: Row offset, clamped to zero.
        sports_sport_slug: Narrow the sports vertical to one sport.
        sports_section: "games" or "props" within the sports vertical.
        hide_sports: Exclude sports events.
        hide_crypto: Exclude crypto events.
        hide_earnings: Exclude earnings events.
        include_hidden: Include admin-hidden events (admin listings only).
    """

    tag: str = "trending"
    search: str = ""
    user_id: str = ""
    bookmarked: bool = False
    frequency: str = "all"
    status: str = "active"
    locale: str = "en"
    offset: int = 0
    sports_sport_slug: Optional[str] = None
    sports_section: Optional[str] = None
    hide_sports: bool = False
    hide_crypto: bool = False
    hide_earnings: bool = False
    include_hidden: bool = False
