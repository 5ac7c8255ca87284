"""
Data Transfer Objects for the events application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from eventdesk.domain.events.entities import ConditionChangeLogEntry


@dataclass(frozen=True)
class ListEventsQuery:
    """Input DTO for a page of the events feed.

    Attributes:
        tag: Listing tag; synthetic (trending, new), sports or a tag slug.
        search: Free-text search.
        user_id: Viewer id, empty for anonymous viewers.
        bookmarked: Restrict to the viewer's bookmarks.
        status: Requested status, validated by the use case.
        locale: Requested locale; unsupported values fall back to the default.
        offset: Row offset; negative values are clamped to zero.
        frequency: Recurrence class, or "all".
        hide_sports: Exclude sports events.
        hide_crypto: Exclude crypto events.
        hide_earnings: Exclude earnings events.
        sports_sport_slug: Narrow the sports vertical to one sport.
        sports_section: "games" or "props".
    """

    tag: str = "trending"
    search: str = ""
    user_id: str = ""
    bookmarked: bool = False
    status: str = "active"
    locale: str = "en"
    offset: int = 0
    frequency: str = "all"
    hide_sports: bool = False
    hide_crypto: bool = False
    hide_earnings: bool = False
    sports_sport_slug: Optional[str] = None
    sports_section: Optional[str] = None


@dataclass(frozen=True)
class MarketSummary:
    """Output DTO for a market rendered inside an event card."""

    condition_id: str
    slug: str
    title: str
    question: Optional[str]
    icon_url: Optional[str]
    is_active: bool
    is_resolved: bool
    price: Optional[float]
    probability: Optional[float]
    volume: float
    volume_24h: float
    end_time: Optional[datetime]
    path: str = ""


@dataclass(frozen=True)
class TagSummary:
    """Output DTO for a tag chip."""

    id: int
    name: str
    slug: str
    is_main_category: bool


@dataclass(frozen=True)
class EventCard:
    """Output DTO for an event in a feed.

    Attributes:
        main_tag: Display category of the event.
        volume: Total volume summed over markets.
        is_trending: Recent volume or a recent update.
        show_new_badge: Whether the card carries the "new" badge.
        path: Page path, under /sports for sports events.
    """

    id: str
    slug: str
    title: str
    status: str
    icon_url: Optional[str]
    series_slug: Optional[str]
    series_recurrence: Optional[str]
    main_tag: str
    volume: float
    is_trending: bool
    is_bookmarked: bool
    is_hidden: bool
    show_new_badge: bool
    path: str
    created_at: Optional[datetime]
    end_date: Optional[datetime]
    tags: list[TagSummary] = field(default_factory=list)
    markets: list[MarketSummary] = field(default_factory=list)


@dataclass(frozen=True)
class EventPageResult:
    """Output DTO for a single event page.

    Attributes:
        event: The hydrated event.
        change_log: Audited market condition changes, newest first. Empty
            when the change log could not be loaded.
    """

    event: EventCard
    change_log: list[ConditionChangeLogEntry] = field(default_factory=list)


@dataclass(frozen=True)
class RelatedEventsQuery:
    slug: str
    tag: str = "all"
    locale: str = "en"


@dataclass(frozen=True)
class MarketSearchResult:
    """Output DTO for one market search hit.

    Attributes:
        id: Condition id.
        probability: Display price in [0, 1]; 0.5 when unknown.
        close_time: Market end time.
        volume_usdc: Total traded volume.
        active: Whether the market is open.
    """

    id: str
    slug: str
    question: str
    probability: float
    close_time: Optional[datetime]
    volume_usdc: float
    active: bool


@dataclass(frozen=True)
class MarketStatusResult:
    condition_id: str
    is_resolved: bool


@dataclass(frozen=True)
class MainTagResult:
    id: int
    name: str
    slug: str
    childs: list[dict[str, str]] = field(default_factory=list)


@dataclass(frozen=True)
class AffiliateRedirect:
    """Output DTO for an affiliate link visit.

    Attributes:
        location: Safe same-site path to redirect to.
        affiliate_code: Code to store in the referral cookie, or None when
            the code is unknown and no cookie must be set.
        timestamp_ms: Visit time in milliseconds since the epoch.
    """

    location: str
    affiliate_code: Optional[str] = None
    timestamp_ms: Optional[int] = None
