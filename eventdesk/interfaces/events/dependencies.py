"""
Dependency injection for the events bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection.
These are the composition root for the events context.

The engine and the tag cache are themselves dependencies so tests can
swap them through app.dependency_overrides.
"""

import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.engine import Engine

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
from eventdesk.application.events.track_affiliate import TrackAffiliateUseCase
from eventdesk.core.config import settings
from eventdesk.domain.events.entities import User
from eventdesk.domain.events.ports import TagCache
from eventdesk.domain.notifications.push import PushDefaults
from eventdesk.infrastructure.cache.factory import build_tag_cache
from eventdesk.infrastructure.db import get_engine
from eventdesk.infrastructure.events.account_repository import (
    AffiliateRepositoryAdapter,
    UserRepositoryAdapter,
)
from eventdesk.infrastructure.events.event_repository import EventRepositoryAdapter
from eventdesk.infrastructure.events.market_repository import MarketRepositoryAdapter
from eventdesk.infrastructure.events.settings_repository import SettingsRepositoryAdapter
from eventdesk.infrastructure.events.tag_repository import TagRepositoryAdapter

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_tag_cache() -> TagCache:
    """Return the process-wide tag cache."""
    return build_tag_cache(
        settings.cache_backend,
        settings.redis_url,
        settings.cache_ttl_seconds,
        max_entries=settings.cache_max_entries,
    )


def get_current_user(
    x_user_id: Optional[str] = Header(default=None),
    engine: Engine = Depends(get_engine),
) -> Optional[User]:
    """Resolve the viewer from the X-User-Id header set by the auth proxy.

    Unknown ids and lookup failures resolve to an anonymous viewer.
    """
    user_id = (x_user_id or "").strip()
    if not user_id:
        return None
    result = UserRepositoryAdapter(engine).get_user(user_id)
    if result.error:
        logger.warning("User lookup failed; treating request as anonymous")
        return None
    return result.data


def get_list_events_use_case(engine: Engine = Depends(get_engine)) -> ListEventsUseCase:
    """Build ListEventsUseCase with its infrastructure dependencies."""
    return ListEventsUseCase(
        event_repo=EventRepositoryAdapter(engine, page_size=settings.events_page_size),
    )


def get_event_page_use_case(engine: Engine = Depends(get_engine)) -> GetEventPageUseCase:
    """Build GetEventPageUseCase with its infrastructure dependencies."""
    return GetEventPageUseCase(event_repo=EventRepositoryAdapter(engine))


def get_related_events_use_case(
    engine: Engine = Depends(get_engine),
) -> GetRelatedEventsUseCase:
    """Build GetRelatedEventsUseCase with its infrastructure dependencies."""
    return GetRelatedEventsUseCase(event_repo=EventRepositoryAdapter(engine))


def get_search_markets_use_case(engine: Engine = Depends(get_engine)) -> SearchMarketsUseCase:
    """Build SearchMarketsUseCase with its infrastructure dependencies."""
    return SearchMarketsUseCase(market_repo=MarketRepositoryAdapter(engine))


def get_market_status_use_case(
    engine: Engine = Depends(get_engine),
) -> GetMarketStatusUseCase:
    """Build GetMarketStatusUseCase with its infrastructure dependencies."""
    return GetMarketStatusUseCase(market_repo=MarketRepositoryAdapter(engine))


def get_main_tags_use_case(engine: Engine = Depends(get_engine)) -> GetMainTagsUseCase:
    """Build GetMainTagsUseCase with its infrastructure dependencies."""
    return GetMainTagsUseCase(tag_repo=TagRepositoryAdapter(engine))


def get_runtime_theme_use_case(
    engine: Engine = Depends(get_engine),
) -> GetRuntimeThemeUseCase:
    """Build GetRuntimeThemeUseCase with its infrastructure dependencies."""
    return GetRuntimeThemeUseCase(settings_repo=SettingsRepositoryAdapter(engine))


def get_site_settings_use_case(
    engine: Engine = Depends(get_engine),
) -> GetSiteSettingsUseCase:
    """Build GetSiteSettingsUseCase with its infrastructure dependencies."""
    return GetSiteSettingsUseCase(settings_repo=SettingsRepositoryAdapter(engine))


def get_track_affiliate_use_case(
    engine: Engine = Depends(get_engine),
) -> TrackAffiliateUseCase:
    """Build TrackAffiliateUseCase with its infrastructure dependencies."""
    return TrackAffiliateUseCase(affiliate_repo=AffiliateRepositoryAdapter(engine))


def get_render_notification_use_case() -> RenderNotificationUseCase:
    """Build RenderNotificationUseCase from the configured defaults."""
    return RenderNotificationUseCase(
        defaults=PushDefaults(
            title=settings.push_default_title,
            body=settings.push_default_body,
            icon=settings.push_default_icon,
            badge=settings.push_default_badge,
            url=settings.push_default_url,
        ),
        origin=settings.site_url,
    )
