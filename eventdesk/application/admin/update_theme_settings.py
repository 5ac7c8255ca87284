"""
Use case: Save the site theme.

Input: admin user, preset id, light and dark override JSON documents
Output: ActionResult with the normalized theme
Side effects: Writes theme/preset, theme/light_json, theme/dark_json;
    invalidates settings.
Failure cases: Non-admin user, invalid preset or overrides, storage error.
"""

import logging
from typing import Optional

from eventdesk.application.admin.actions import (
    UNAUTHENTICATED_MESSAGE,
    ActionFailure,
    ActionResult,
    AdminAction,
)
from eventdesk.domain.events import cache_tags
from eventdesk.domain.events.constants import DEFAULT_ERROR_MESSAGE
from eventdesk.domain.events.entities import SettingsUpdate, User
from eventdesk.domain.events.errors import InvalidThemeSettingsError
from eventdesk.domain.events.ports import SettingsRepository, TagCache
from eventdesk.domain.events.theme import (
    THEME_DARK_JSON_KEY,
    THEME_LIGHT_JSON_KEY,
    THEME_PRESET_KEY,
    THEME_SETTINGS_GROUP,
    validate_theme_settings,
)

logger = logging.getLogger(__name__)


class UpdateThemeSettingsUseCase(AdminAction):
    """Validates and stores the theme preset and overrides."""

    unauthorized_message = UNAUTHENTICATED_MESSAGE

    def __init__(self, settings_repo: SettingsRepository, cache: TagCache) -> None:
        super().__init__(cache)
        self._settings_repo = settings_repo

    def _perform(
        self,
        user: User,
        preset: Optional[str],
        light_json: Optional[str] = "{}",
        dark_json: Optional[str] = "{}",
    ) -> ActionResult:
        try:
            theme = validate_theme_settings(preset, light_json, dark_json)
        except InvalidThemeSettingsError as exc:
            logger.info("Rejected theme settings: %s", exc.message)
            return ActionResult.fail(ActionFailure.INVALID, exc.message)

        result = self._settings_repo.update_settings(
            [
                SettingsUpdate(THEME_SETTINGS_GROUP, THEME_PRESET_KEY, theme.preset_id),
                SettingsUpdate(THEME_SETTINGS_GROUP, THEME_LIGHT_JSON_KEY, theme.light_json),
                SettingsUpdate(THEME_SETTINGS_GROUP, THEME_DARK_JSON_KEY, theme.dark_json),
            ]
        )
        if result.error:
            return ActionResult.fail(ActionFailure.FAILED, DEFAULT_ERROR_MESSAGE)

        self._invalidate(cache_tags.theme_settings_invalidations())
        return ActionResult.ok(
            {
                "preset": theme.preset_id,
                "light_json": theme.light_json,
                "dark_json": theme.dark_json,
                "css_text": theme.css_text,
            }
        )
