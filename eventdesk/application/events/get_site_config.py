"""
Use cases: Site-wide configuration read from the settings store.

- GetSiteSettingsUseCase: enabled locales and feature toggles.
- GetRuntimeThemeUseCase: the theme served to visitors.
- GetMainTagsUseCase: the localized category menu.

All are read-only. Settings reads degrade to defaults on storage errors;
the category menu raises StorageError.
"""

import logging

from eventdesk.application.events.dtos import MainTagResult
from eventdesk.domain.events.errors import StorageError
from eventdesk.domain.events.locales import SiteSettings, resolve_locale
from eventdesk.domain.events.ports import SettingsRepository, TagRepository
from eventdesk.domain.events.theme import RuntimeTheme, resolve_runtime_theme

logger = logging.getLogger(__name__)


class GetSiteSettingsUseCase:
    def __init__(self, settings_repo: SettingsRepository) -> None:
        self._settings_repo = settings_repo

    def execute(self) -> SiteSettings:
        result = self._settings_repo.get_settings()
        if result.error:
            logger.warning("Settings unavailable, using defaults: %s", result.error)
            return SiteSettings.from_snapshot(None)
        return SiteSettings.from_snapshot(result.data)


class GetRuntimeThemeUseCase:
    def __init__(self, settings_repo: SettingsRepository) -> None:
        self._settings_repo = settings_repo

    def execute(self) -> RuntimeTheme:
        result = self._settings_repo.get_settings()
        if result.error:
            logger.warning("Settings unavailable, using default theme: %s", result.error)
            return resolve_runtime_theme(None)
        return resolve_runtime_theme(result.data)


class GetMainTagsUseCase:
    def __init__(self, tag_repo: TagRepository) -> None:
        self._tag_repo = tag_repo

    def execute(self, locale: str = "en") -> list[MainTagResult]:
        result = self._tag_repo.get_main_tags(resolve_locale(locale))
        if result.error:
            raise StorageError(result.error)
        return [
            MainTagResult(
                id=tag.id,
                name=tag.name,
                slug=tag.slug,
                childs=[{"name": name, "slug": slug} for name, slug in tag.childs],
            )
            for tag in result.data or []
        ]
