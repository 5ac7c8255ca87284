"""
Dependency injection for admin actions.

Each factory wires a repository adapter and the shared tag cache into
an admin use case.
"""

from fastapi import Depends
from sqlalchemy.engine import Engine

from eventdesk.application.admin.list_admin_events import ListAdminEventsUseCase
from eventdesk.application.admin.update_category_translations import (
    UpdateCategoryTranslationsUseCase,
)
from eventdesk.application.admin.update_event_sync_settings import (
    UpdateEventSyncSettingsUseCase,
)
from eventdesk.application.admin.update_event_visibility import UpdateEventVisibilityUseCase
from eventdesk.application.admin.update_locales_settings import UpdateLocalesSettingsUseCase
from eventdesk.application.admin.update_theme_settings import UpdateThemeSettingsUseCase
from eventdesk.core.config import settings
from eventdesk.domain.events.ports import TagCache
from eventdesk.infrastructure.db import get_engine
from eventdesk.infrastructure.events.event_repository import EventRepositoryAdapter
from eventdesk.infrastructure.events.settings_repository import SettingsRepositoryAdapter
from eventdesk.infrastructure.events.tag_repository import TagRepositoryAdapter
from eventdesk.interfaces.events.dependencies import get_tag_cache


def get_update_event_visibility_use_case(
    engine: Engine = Depends(get_engine),
    cache: TagCache = Depends(get_tag_cache),
) -> UpdateEventVisibilityUseCase:
    """Build UpdateEventVisibilityUseCase with its infrastructure dependencies."""
    return UpdateEventVisibilityUseCase(event_repo=EventRepositoryAdapter(engine), cache=cache)


def get_update_event_sync_settings_use_case(
    engine: Engine = Depends(get_engine),
    cache: TagCache = Depends(get_tag_cache),
) -> UpdateEventSyncSettingsUseCase:
    """Build UpdateEventSyncSettingsUseCase with its infrastructure dependencies."""
    return UpdateEventSyncSettingsUseCase(
        settings_repo=SettingsRepositoryAdapter(engine), cache=cache
    )


def get_update_theme_settings_use_case(
    engine: Engine = Depends(get_engine),
    cache: TagCache = Depends(get_tag_cache),
) -> UpdateThemeSettingsUseCase:
    """Build UpdateThemeSettingsUseCase with its infrastructure dependencies."""
    return UpdateThemeSettingsUseCase(settings_repo=SettingsRepositoryAdapter(engine), cache=cache)


def get_update_locales_settings_use_case(
    engine: Engine = Depends(get_engine),
    cache: TagCache = Depends(get_tag_cache),
) -> UpdateLocalesSettingsUseCase:
    """Build UpdateLocalesSettingsUseCase with its infrastructure dependencies."""
    return UpdateLocalesSettingsUseCase(
        settings_repo=SettingsRepositoryAdapter(engine), cache=cache
    )


def get_update_category_translations_use_case(
    engine: Engine = Depends(get_engine),
    cache: TagCache = Depends(get_tag_cache),
) -> UpdateCategoryTranslationsUseCase:
    """Build UpdateCategoryTranslationsUseCase with its infrastructure dependencies."""
    return UpdateCategoryTranslationsUseCase(tag_repo=TagRepositoryAdapter(engine), cache=cache)


def get_list_admin_events_use_case(
    engine: Engine = Depends(get_engine),
    cache: TagCache = Depends(get_tag_cache),
) -> ListAdminEventsUseCase:
    """Build ListAdminEventsUseCase with its infrastructure dependencies."""
    return ListAdminEventsUseCase(
        event_repo=EventRepositoryAdapter(engine, page_size=settings.events_page_size),
        cache=cache,
    )
