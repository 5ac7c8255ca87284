"""
Use case: Hide or show an event in public listings.

Input: admin user, event id, hidden flag
Output: ActionResult with {id, slug, is_hidden}
Side effects: Updates events.is_hidden; invalidates events:all and event:<slug>.
Failure cases: Non-admin user, unknown event, storage error.
"""

import logging

from eventdesk.application.admin.actions import ActionFailure, ActionResult, AdminAction
from eventdesk.domain.events import cache_tags
from eventdesk.domain.events.entities import User
from eventdesk.domain.events.ports import EventRepository, TagCache

logger = logging.getLogger(__name__)

VISIBILITY_FAILED_MESSAGE = "Failed to update event visibility."


class UpdateEventVisibilityUseCase(AdminAction):
    """Toggles the admin hidden flag of an event."""

    def __init__(self, event_repo: EventRepository, cache: TagCache) -> None:
        super().__init__(cache)
        self._event_repo = event_repo

    def _perform(self, user: User, event_id: str, is_hidden: bool) -> ActionResult:
        logger.info("Admin %s sets event %s hidden=%s", user.id, event_id, is_hidden)
        result = self._event_repo.set_event_hidden_state(event_id, is_hidden)
        if result.error or result.data is None:
            return ActionResult.fail(
                ActionFailure.FAILED, result.error or VISIBILITY_FAILED_MESSAGE
            )

        visibility = result.data
        self._invalidate(cache_tags.event_visibility_invalidations(visibility.slug))
        return ActionResult.ok(
            {"id": visibility.id, "slug": visibility.slug, "is_hidden": visibility.is_hidden}
        )
