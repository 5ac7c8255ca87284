"""
Use case: Load a single event with its change log.

Input: slug, viewer id, locale
Output: EventPageResult
Side effects: None (read-only query).
Failure cases: EventNotFoundError for an unknown slug; StorageError when
    the event itself cannot be loaded. A change-log failure is tolerated.
"""

import logging

from eventdesk.application.events.dtos import EventPageResult
from eventdesk.application.events.mappers import to_event_card
from eventdesk.domain.events.errors import EventNotFoundError, StorageError
from eventdesk.domain.events.locales import resolve_locale
from eventdesk.domain.events.ports import EventRepository

logger = logging.getLogger(__name__)


class GetEventPageUseCase:
    """Loads an event page, degrading gracefully on change-log errors."""

    def __init__(self, event_repo: EventRepository) -> None:
        self._event_repo = event_repo

    def execute(self, slug: str, user_id: str = "", locale: str = "en") -> EventPageResult:
        locale = resolve_locale(locale)
        result = self._event_repo.get_event_by_slug(slug, user_id=user_id, locale=locale)
        if result.error:
            raise StorageError(result.error)
        if result.data is None:
            raise EventNotFoundError(slug)

        change_log_result = self._event_repo.get_event_change_log(slug)
        if change_log_result.error:
            logger.warning(
                "Change log unavailable for event %s: %s", slug, change_log_result.error
            )
            change_log = []
        else:
            change_log = change_log_result.data or []

        return EventPageResult(event=to_event_card(result.data), change_log=change_log)
