"""
Use case: List one page of the events feed.

Input: ListEventsQuery
Output: list[EventCard]
Side effects: None (read-only query).
Failure cases: InvalidStatusFilterError for a status other than active or
    resolved; StorageError when the repository reports an error.
"""

import logging
from datetime import datetime, timezone
from typing import Callable

from eventdesk.application.events.dtos import EventCard, ListEventsQuery
from eventdesk.application.events.mappers import to_event_card
from eventdesk.domain.events.constants import LISTING_STATUSES, MAX_EVENTS_OFFSET
from eventdesk.domain.events.entities import ListEventsCriteria
from eventdesk.domain.events.errors import InvalidStatusFilterError, StorageError
from eventdesk.domain.events.locales import resolve_locale
from eventdesk.domain.events.ports import EventRepository

logger = logging.getLogger(__name__)


def build_criteria(query: ListEventsQuery) -> ListEventsCriteria:
    """Validate a listing query and convert it to repository criteria.

    Raises:
        InvalidStatusFilterError: If the status is not a listing status.
    """
    if query.status not in LISTING_STATUSES:
        raise InvalidStatusFilterError(query.status)

    return ListEventsCriteria(
        tag=query.tag or "trending",
        search=query.search,
        user_id=query.user_id,
        bookmarked=query.bookmarked,
        frequency=query.frequency or "all",
        status=query.status,
        locale=resolve_locale(query.locale),
        offset=min(max(0, query.offset), MAX_EVENTS_OFFSET),
        sports_sport_slug=query.sports_sport_slug,
        sports_section=query.sports_section,
        hide_sports=query.hide_sports,
        hide_crypto=query.hide_crypto,
        hide_earnings=query.hide_earnings,
    )


class ListEventsUseCase:
    """Orchestrates fetching and shaping a page of events.

    The repository applies filtering, ranking and hydration; this use
    case validates the query and derives card fields (trending flag,
    new badge) at a single reference time.
    """

    def __init__(
        self,
        event_repo: EventRepository,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        """Initialize the use case.

        Args:
            event_repo: Repository for events.
            clock: Returns the reference time for derived fields.
        """
        self._event_repo = event_repo
        self._clock = clock

    def execute(self, query: ListEventsQuery) -> list[EventCard]:
        """Run the list events use case.

        Args:
            query: Listing filters and viewer.

        Returns:
            The requested page of event cards.

        Raises:
            InvalidStatusFilterError: If the status is unsupported.
            StorageError: If the repository failed.
        """
        criteria = build_criteria(query)
        logger.info(
            "Listing events: tag=%s, status=%s, locale=%s, offset=%d, bookmarked=%s",
            criteria.tag,
            criteria.status,
            criteria.locale,
            criteria.offset,
            criteria.bookmarked,
        )

        result = self._event_repo.list_events(criteria)
        if result.error:
            raise StorageError(result.error)

        now = self._clock()
        return [to_event_card(event, now) for event in result.data or []]
