"""
Pydantic schemas for the events API responses.

These schemas define the API contract. They validate directly from the
application DTOs (from_attributes), so routes never copy fields by hand.
No business logic belongs here.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Standard error response schema.

    Attributes:
        error: Human-readable error message.
        detail: Optional additional detail.
    """

    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response schema.

    Attributes:
        status: "ok", or "degraded" when the database is unreachable.
        version: Application version.
        database: "ok" or "unavailable".
    """

    status: str
    version: str
    database: str


class MarketSchema(BaseModel):
    """A market inside an event card.

    Attributes:
        price: Displayed price; midpoint when the spread is tight, else
            last trade.
        probability: Price expressed as a percentage.
    """

    model_config = ConfigDict(from_attributes=True)

    condition_id: str
    slug: str
    title: str
    question: Optional[str] = None
    icon_url: Optional[str] = None
    is_active: bool
    is_resolved: bool
    price: Optional[float] = None
    probability: Optional[float] = None
    volume: float
    volume_24h: float
    end_time: Optional[datetime] = None
    path: str = ""


class TagSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    is_main_category: bool


class EventCardSchema(BaseModel):
    """An event as rendered in feeds and on its page."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    slug: str
    title: str
    status: str
    icon_url: Optional[str] = None
    series_slug: Optional[str] = None
    series_recurrence: Optional[str] = None
    main_tag: str
    volume: float
    is_trending: bool
    is_bookmarked: bool
    is_hidden: bool
    show_new_badge: bool
    path: str
    created_at: Optional[datetime] = None
    end_date: Optional[datetime] = None
    tags: list[TagSchema] = Field(default_factory=list)
    markets: list[MarketSchema] = Field(default_factory=list)


class ChangeLogEntrySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    condition_id: str
    created_at: datetime
    old_values: dict
    new_values: dict


class EventPageResponse(BaseModel):
    """Response schema for a single event page.

    Attributes:
        event: The event card.
        change_log: Market condition changes, newest first. Empty when the
            log could not be loaded.
    """

    model_config = ConfigDict(from_attributes=True)

    event: EventCardSchema
    change_log: list[ChangeLogEntrySchema] = Field(default_factory=list)


class RelatedEventSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    slug: str
    title: str
    icon_url: str
    common_tags_count: int
    chance: Optional[float] = None


class MarketSearchItem(BaseModel):
    """A market search hit.

    Attributes:
        probability: Display price in [0, 1]; 0.5 when unknown.
        volume_usdc: Total traded volume.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str
    slug: str
    question: str
    probability: float
    close_time: Optional[datetime] = None
    volume_usdc: float
    active: bool


class MarketStatusItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    condition_id: str
    is_resolved: bool


class MarketStatusResponse(BaseModel):
    """Response schema for the market status batch endpoint."""

    data: list[MarketStatusItem]


class MainTagChild(BaseModel):
    name: str
    slug: str


class MainTagSchema(BaseModel):
    """A main category with its child categories."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    childs: list[MainTagChild] = Field(default_factory=list)


class ThemeResponse(BaseModel):
    """Response schema for the runtime theme.

    Attributes:
        preset: Active preset id.
        light: Stored light-mode token overrides.
        dark: Stored dark-mode token overrides.
        palette_light: Preset light palette with the overrides applied.
        palette_dark: Preset dark palette with the overrides applied.
        css_text: Ready-to-inject CSS for both modes.
        source: "settings" when read from storage, "default" otherwise.
    """

    preset: str
    light: dict[str, str]
    dark: dict[str, str]
    palette_light: dict[str, str]
    palette_dark: dict[str, str]
    css_text: str
    source: str


class SiteSettingsResponse(BaseModel):
    """Response schema for public site settings."""

    model_config = ConfigDict(from_attributes=True)

    enabled_locales: list[str]
    locale_labels: dict[str, str] = Field(default_factory=dict)
    automatic_translations_enabled: bool
    auto_deploy_new_events: bool


class ClientWindowSchema(BaseModel):
    id: str
    url: str


class RenderNotificationRequest(BaseModel):
    """Request schema for resolving a push payload.

    Attributes:
        payload: Raw push data; JSON object text or plain text.
        windows: Client windows currently open, in focus order.
    """

    payload: Optional[str] = Field(default=None, max_length=4096)
    windows: list[ClientWindowSchema] = Field(default_factory=list, max_length=50)


class NotificationSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    title: str
    body: str
    icon: str
    badge: str
    url: str


class ClickActionSchema(BaseModel):
    """What the browser should do when the notification is clicked.

    Attributes:
        kind: "focus", "navigate" or "open".
        url: Absolute target URL.
        client_id: Window to focus or navigate; None when opening.
    """

    kind: str
    url: str
    client_id: Optional[str] = None


class RenderNotificationResponse(BaseModel):
    notification: NotificationSchema
    click_action: ClickActionSchema
