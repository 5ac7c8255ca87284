"""
Use case: Choose which locales the site offers.

Input: admin user, requested locales, optional automatic-translations flag
Output: ActionResult with the stored locale list
Side effects: Writes i18n/enabled_locales (and i18n/automatic_translations_enabled
    when given); invalidates settings.
Failure cases: Non-admin user, unsupported locale, storage error.
"""

from typing import Iterable, Optional

from eventdesk.application.admin.actions import (
    INVALID_INPUT_MESSAGE,
    UNAUTHENTICATED_MESSAGE,
    ActionFailure,
    ActionResult,
    AdminAction,
)
from eventdesk.domain.events import cache_tags
from eventdesk.domain.events.constants import DEFAULT_ERROR_MESSAGE
from eventdesk.domain.events.entities import SettingsUpdate, User
from eventdesk.domain.events.locales import (
    AUTOMATIC_TRANSLATIONS_KEY,
    ENABLED_LOCALES_KEY,
    I18N_SETTINGS_GROUP,
    ensure_enabled_locales,
    is_supported_locale,
    serialize_enabled_locales,
)
from eventdesk.domain.events.ports import SettingsRepository, TagCache


class UpdateLocalesSettingsUseCase(AdminAction):
    unauthorized_message = UNAUTHENTICATED_MESSAGE

    def __init__(self, settings_repo: SettingsRepository, cache: TagCache) -> None:
        super().__init__(cache)
        self._settings_repo = settings_repo

    def _perform(
        self,
        user: User,
        enabled_locales: Iterable[str],
        automatic_translations_enabled: Optional[bool] = None,
    ) -> ActionResult:
        requested = list(enabled_locales)
        if not all(is_supported_locale(locale) for locale in requested):
            return ActionResult.fail(ActionFailure.INVALID, INVALID_INPUT_MESSAGE)

        locales = ensure_enabled_locales(requested)
        updates = [
            SettingsUpdate(
                I18N_SETTINGS_GROUP, ENABLED_LOCALES_KEY, serialize_enabled_locales(locales)
            )
        ]
        if automatic_translations_enabled is not None:
            updates.append(
                SettingsUpdate(
                    I18N_SETTINGS_GROUP,
                    AUTOMATIC_TRANSLATIONS_KEY,
                    "true" if automatic_translations_enabled else "false",
                )
            )

        result = self._settings_repo.update_settings(updates)
        if result.error:
            return ActionResult.fail(ActionFailure.FAILED, DEFAULT_ERROR_MESSAGE)

        self._invalidate(cache_tags.locale_settings_invalidations())
        return ActionResult.ok({"enabled_locales": locales})
