"""
Use case: Admin events table.

Input: admin user, ListEventsQuery
Output: ActionResult with list[EventCard], hidden events included
Side effects: None (read-only query).
Failure cases: Non-admin user, invalid status, storage error.
"""

from eventdesk.application.admin.actions import (
    INVALID_INPUT_MESSAGE,
    ActionFailure,
    ActionResult,
    AdminAction,
)
from eventdesk.application.events.dtos import ListEventsQuery
from eventdesk.application.events.list_events import build_criteria
from eventdesk.application.events.mappers import to_event_card
from eventdesk.domain.events.entities import User
from eventdesk.domain.events.errors import InvalidStatusFilterError
from eventdesk.domain.events.ports import EventRepository, TagCache


class ListAdminEventsUseCase(AdminAction):
    def __init__(self, event_repo: EventRepository, cache: TagCache) -> None:
        super().__init__(cache)
        self._event_repo = event_repo

    def _perform(self, user: User, query: ListEventsQuery) -> ActionResult:
        try:
            criteria = build_criteria(query)
        except InvalidStatusFilterError:
            return ActionResult.fail(ActionFailure.INVALID, INVALID_INPUT_MESSAGE)

        result = self._event_repo.list_admin_events(criteria)
        if result.error:
            return ActionResult.fail(ActionFailure.FAILED, result.error)
        return ActionResult.ok([to_event_card(event) for event in result.data or []])
