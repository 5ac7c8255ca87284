"""
Use case: Toggle automatic deployment of newly synced events.

Input: admin user, auto-deploy flag
Output: ActionResult
Side effects: Writes events/auto_deploy_new_events; invalidates settings.
Failure cases: Non-admin user, storage error.
"""

from eventdesk.application.admin.actions import ActionFailure, ActionResult, AdminAction
from eventdesk.domain.events import cache_tags
from eventdesk.domain.events.entities import SettingsUpdate, User
from eventdesk.domain.events.locales import AUTO_DEPLOY_NEW_EVENTS_KEY, EVENTS_SETTINGS_GROUP
from eventdesk.domain.events.ports import SettingsRepository, TagCache

SYNC_SETTINGS_FAILED_MESSAGE = "Failed to update sync settings."


class UpdateEventSyncSettingsUseCase(AdminAction):
    def __init__(self, settings_repo: SettingsRepository, cache: TagCache) -> None:
        super().__init__(cache)
        self._settings_repo = settings_repo

    def _perform(self, user: User, auto_deploy_new_events: bool) -> ActionResult:
        result = self._settings_repo.update_settings(
            [
                SettingsUpdate(
                    group=EVENTS_SETTINGS_GROUP,
                    key=AUTO_DEPLOY_NEW_EVENTS_KEY,
                    value="true" if auto_deploy_new_events else "false",
                )
            ]
        )
        if result.error:
            return ActionResult.fail(ActionFailure.FAILED, SYNC_SETTINGS_FAILED_MESSAGE)

        self._invalidate(cache_tags.event_sync_settings_invalidations())
        return ActionResult.ok()
