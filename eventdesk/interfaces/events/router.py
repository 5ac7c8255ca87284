"""
FastAPI router for the events bounded context.

All routes delegate to use cases. No business logic here.
Read routes are served through the tag cache; admin mutations
invalidate the tags they touch.
Error mapping is handled by centralized error handlers.
"""

import logging
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from starlette.concurrency import run_in_threadpool

from eventdesk.application.events.dtos import ListEventsQuery, RelatedEventsQuery
from eventdesk.application.events.get_event_page import GetEventPageUseCase
from eventdesk.application.events.get_market_status import GetMarketStatusUseCase
from eventdesk.application.events.get_related_events import GetRelatedEventsUseCase
from eventdesk.application.events.get_site_config import (
    GetMainTagsUseCase,
    GetRuntimeThemeUseCase,
    GetSiteSettingsUseCase,
)
from eventdesk.application.events.list_events import ListEventsUseCase
from eventdesk.application.events.render_notification import RenderNotificationUseCase
from eventdesk.application.events.search_markets import SearchMarketsUseCase
from eventdesk.domain.events import cache_tags
from eventdesk.domain.events.constants import MAX_EVENTS_OFFSET
from eventdesk.domain.events.entities import User
from eventdesk.domain.events.locales import LOCALE_LABELS, resolve_locale
from eventdesk.domain.events.ports import TagCache
from eventdesk.domain.events.theme import build_preview_theme
from eventdesk.domain.notifications.push import ClientWindow
from eventdesk.interfaces.events.dependencies import (
    get_current_user,
    get_event_page_use_case,
    get_list_events_use_case,
    get_main_tags_use_case,
    get_market_status_use_case,
    get_related_events_use_case,
    get_render_notification_use_case,
    get_runtime_theme_use_case,
    get_search_markets_use_case,
    get_site_settings_use_case,
    get_tag_cache,
)
from eventdesk.interfaces.events.rendering import cache_key, render_cached
from eventdesk.interfaces.events.schemas import (
    ClickActionSchema,
    ErrorResponse,
    EventCardSchema,
    EventPageResponse,
    MainTagSchema,
    MarketSearchItem,
    MarketStatusItem,
    MarketStatusResponse,
    NotificationSchema,
    RelatedEventSchema,
    RenderNotificationRequest,
    RenderNotificationResponse,
    SiteSettingsResponse,
    ThemeResponse,
)
from eventdesk.shared.security.rate_limiting import SEARCH_RATE_LIMIT, limiter

logger = logging.getLogger(__name__)

router = APIRouter(tags=["events"])


def _parse_offset(raw: Optional[str]) -> int:
    try:
        return min(max(0, int(raw or 0)), MAX_EVENTS_OFFSET)
    except ValueError:
        return 0


@router.get(
    "/events",
    response_model=list[EventCardSchema],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="List events",
    description=(
        "One page of the events feed for a tag, search text and status, "
        "ranked by recent volume or recency depending on the tag."
    ),
)
def list_events(
    tag: str = Query(default="trending", max_length=100),
    search: str = Query(default="", max_length=200),
    bookmarked: Optional[str] = Query(default=None),
    status: str = Query(default="active", max_length=20),
    locale: str = Query(default="en", max_length=10),
    offset: Optional[str] = Query(default=None),
    frequency: str = Query(default="all", max_length=20),
    hide_sports: bool = Query(default=False, alias="hideSports"),
    hide_crypto: bool = Query(default=False, alias="hideCrypto"),
    hide_earnings: bool = Query(default=False, alias="hideEarnings"),
    sports_sport_slug: Optional[str] = Query(default=None, alias="sportsSportSlug"),
    sports_section: Optional[str] = Query(default=None, alias="sportsSection"),
    user: Optional[User] = Depends(get_current_user),
    cache: TagCache = Depends(get_tag_cache),
    use_case: ListEventsUseCase = Depends(get_list_events_use_case),
) -> list[dict]:
    """List events for the current viewer."""
    query = ListEventsQuery(
        tag=tag,
        search=search.strip(),
        user_id=user.id if user else "",
        bookmarked=bookmarked == "true",
        status=status,
        locale=locale,
        offset=_parse_offset(offset),
        frequency=frequency,
        hide_sports=hide_sports,
        hide_crypto=hide_crypto,
        hide_earnings=hide_earnings,
        sports_sport_slug=sports_sport_slug,
        sports_section=sports_section,
    )

    def build() -> list[dict]:
        return [
            EventCardSchema.model_validate(card).model_dump(mode="json")
            for card in use_case.execute(query)
        ]

    return render_cached(
        cache,
        cache_key("events", **asdict(query)),
        cache_tags.listing_tags(query.user_id),
        build,
    )


@router.get(
    "/events/{slug}",
    response_model=EventPageResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Get an event page",
    description="A single event with its markets, tags and condition change log.",
)
def get_event_page(
    slug: str,
    locale: str = Query(default="en", max_length=10),
    user: Optional[User] = Depends(get_current_user),
    cache: TagCache = Depends(get_tag_cache),
    use_case: GetEventPageUseCase = Depends(get_event_page_use_case),
) -> dict:
    """Get one event by slug."""
    user_id = user.id if user else ""
    locale = resolve_locale(locale)

    def build() -> dict:
        page = use_case.execute(slug, user_id=user_id, locale=locale)
        return EventPageResponse.model_validate(page).model_dump(mode="json")

    # Bookmark state is per viewer.
    viewer_tag = cache_tags.events_list(cache_tags.viewer_scope(user_id))
    return render_cached(
        cache,
        cache_key("event", slug=slug, user_id=user_id, locale=locale),
        cache_tags.event_page_tags(slug) + [viewer_tag],
        build,
    )


@router.get(
    "/events/{slug}/related",
    response_model=list[RelatedEventSchema],
    responses={500: {"model": ErrorResponse}},
    summary="Related events",
    description="Up to three visible events sharing the most tags with the given event.",
)
def get_related_events(
    slug: str,
    tag: str = Query(default="all", max_length=100),
    locale: str = Query(default="en", max_length=10),
    cache: TagCache = Depends(get_tag_cache),
    use_case: GetRelatedEventsUseCase = Depends(get_related_events_use_case),
) -> list[dict]:
    """List events related to the given one."""
    query = RelatedEventsQuery(slug=slug, tag=tag, locale=resolve_locale(locale))

    def build() -> list[dict]:
        return [
            RelatedEventSchema.model_validate(item).model_dump(mode="json")
            for item in use_case.execute(query)
        ]

    return render_cached(
        cache,
        cache_key("related", **asdict(query)),
        cache_tags.event_page_tags(slug),
        build,
    )


@router.get(
    "/markets/search",
    response_model=list[MarketSearchItem],
    responses={429: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Search markets",
    description="Active markets whose question contains the query, by volume.",
)
@limiter.limit(SEARCH_RATE_LIMIT)
def search_markets(
    request: Request,
    q: Optional[str] = Query(default=None, max_length=200),
    limit: Optional[str] = Query(default=None),
    use_case: SearchMarketsUseCase = Depends(get_search_markets_use_case),
) -> list[MarketSearchItem]:
    """Search markets for the search box."""
    return [MarketSearchItem.model_validate(hit) for hit in use_case.execute(q, limit)]


@router.post(
    "/markets/status",
    response_model=MarketStatusResponse,
    responses={500: {"model": ErrorResponse}},
    summary="Market resolution status",
    description="Resolution flags for up to 500 condition ids.",
)
async def get_market_status(
    request: Request,
    use_case: GetMarketStatusUseCase = Depends(get_market_status_use_case),
) -> MarketStatusResponse:
    """Report which of the given markets are resolved."""
    try:
        body = await request.json()
    except ValueError:
        logger.debug("Malformed market status body")
        return MarketStatusResponse(data=[])

    raw_ids = body.get("conditionIds") if isinstance(body, dict) else None
    if not isinstance(raw_ids, list):
        return MarketStatusResponse(data=[])

    statuses = await run_in_threadpool(use_case.execute, raw_ids)
    return MarketStatusResponse(
        data=[MarketStatusItem.model_validate(item) for item in statuses]
    )


@router.get(
    "/tags/main",
    response_model=list[MainTagSchema],
    responses={500: {"model": ErrorResponse}},
    summary="Main categories",
    description="Main categories in display order with their child categories.",
)
def get_main_tags(
    locale: str = Query(default="en", max_length=10),
    cache: TagCache = Depends(get_tag_cache),
    use_case: GetMainTagsUseCase = Depends(get_main_tags_use_case),
) -> list[dict]:
    """List main categories for the navigation menu."""
    locale = resolve_locale(locale)

    def build() -> list[dict]:
        return [
            MainTagSchema.model_validate(tag).model_dump(mode="json")
            for tag in use_case.execute(locale)
        ]

    return render_cached(
        cache,
        cache_key("main-tags", locale=locale),
        [cache_tags.main_tags(locale)],
        build,
    )


@router.get(
    "/theme",
    response_model=ThemeResponse,
    summary="Runtime theme",
    description="The theme served to visitors; the default preset when none is stored.",
)
def get_theme(
    cache: TagCache = Depends(get_tag_cache),
    use_case: GetRuntimeThemeUseCase = Depends(get_runtime_theme_use_case),
) -> dict:
    """Return the resolved site theme."""

    def build() -> dict:
        runtime = use_case.execute()
        theme = runtime.theme
        palette = build_preview_theme(theme.preset_id, theme.light, theme.dark)
        return ThemeResponse(
            preset=theme.preset_id,
            light=theme.light,
            dark=theme.dark,
            palette_light=palette.light,
            palette_dark=palette.dark,
            css_text=theme.css_text,
            source=runtime.source,
        ).model_dump(mode="json")

    return render_cached(cache, cache_key("theme"), [cache_tags.SETTINGS], build)


@router.get(
    "/settings/site",
    response_model=SiteSettingsResponse,
    summary="Public site settings",
    description="Enabled locales and site-wide feature toggles.",
)
def get_site_settings(
    cache: TagCache = Depends(get_tag_cache),
    use_case: GetSiteSettingsUseCase = Depends(get_site_settings_use_case),
) -> dict:
    """Return public site settings."""

    def build() -> dict:
        site = use_case.execute()
        return SiteSettingsResponse(
            enabled_locales=list(site.enabled_locales),
            locale_labels={locale: LOCALE_LABELS[locale] for locale in site.enabled_locales},
            automatic_translations_enabled=site.automatic_translations_enabled,
            auto_deploy_new_events=site.auto_deploy_new_events,
        ).model_dump(mode="json")

    return render_cached(cache, cache_key("site-settings"), [cache_tags.SETTINGS], build)


@router.post(
    "/notifications/render",
    response_model=RenderNotificationResponse,
    responses={422: {"model": ErrorResponse}},
    summary="Resolve a push notification",
    description=(
        "Turn a raw push payload into the notification to display and "
        "decide which window a click should focus, navigate or open."
    ),
)
def render_notification(
    request: RenderNotificationRequest,
    use_case: RenderNotificationUseCase = Depends(get_render_notification_use_case),
) -> RenderNotificationResponse:
    """Resolve a push payload for the service worker."""
    notification, action = use_case.execute(
        request.payload,
        [ClientWindow(id=window.id, url=window.url) for window in request.windows],
    )
    return RenderNotificationResponse(
        notification=NotificationSchema.model_validate(notification),
        click_action=ClickActionSchema(
            kind=action.kind.value, url=action.url, client_id=action.client_id
        ),
    )
