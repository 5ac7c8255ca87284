"""
Use case: Related events for an event page.

Input: RelatedEventsQuery (slug, tag, locale)
Output: list[RelatedEvent], at most three
Side effects: None (read-only query).
Failure cases: StorageError when the repository reports an error.
"""

import logging

from eventdesk.application.events.dtos import RelatedEventsQuery
from eventdesk.domain.events.entities import RelatedEvent
from eventdesk.domain.events.errors import StorageError
from eventdesk.domain.events.locales import resolve_locale
from eventdesk.domain.events.ports import EventRepository

logger = logging.getLogger(__name__)


class GetRelatedEventsUseCase:
    def __init__(self, event_repo: EventRepository) -> None:
        self._event_repo = event_repo

    def execute(self, query: RelatedEventsQuery) -> list[RelatedEvent]:
        logger.info("Related events: slug=%s, tag=%s", query.slug, query.tag)
        result = self._event_repo.get_related_events(
            query.slug, tag_slug=query.tag, locale=resolve_locale(query.locale)
        )
        if result.error:
            raise StorageError(result.error)
        return result.data or []
