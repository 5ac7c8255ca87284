"""
Use case: Market search box.

Input: raw query text, raw limit
Output: list[MarketSearchResult]
Side effects: None (read-only query).
Failure cases: StorageError when the repository reports an error.
"""

import logging
from typing import Optional, Union

from eventdesk.application.events.dtos import MarketSearchResult
from eventdesk.domain.events.constants import (
    MARKET_SEARCH_DEFAULT_LIMIT,
    MARKET_SEARCH_MAX_LIMIT,
    MARKET_SEARCH_MIN_QUERY,
)
from eventdesk.domain.events.errors import StorageError
from eventdesk.domain.events.ports import MarketRepository

logger = logging.getLogger(__name__)

UNKNOWN_PROBABILITY = 0.5


def parse_search_limit(raw: Union[str, int, None]) -> int:
    """Parse a limit leniently: default when absent or malformed, clamped to [1, 20]."""
    if raw is None or raw == "":
        return MARKET_SEARCH_DEFAULT_LIMIT
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        return MARKET_SEARCH_DEFAULT_LIMIT
    return min(max(limit, 1), MARKET_SEARCH_MAX_LIMIT)


class SearchMarketsUseCase:
    def __init__(self, market_repo: MarketRepository) -> None:
        self._market_repo = market_repo

    def execute(
        self, query: Optional[str], limit: Union[str, int, None] = None
    ) -> list[MarketSearchResult]:
        """Search active markets by question.

        Queries shorter than two characters return nothing without
        touching storage.
        """
        text = (query or "").strip()
        if len(text) < MARKET_SEARCH_MIN_QUERY:
            return []

        result = self._market_repo.search_markets(text, parse_search_limit(limit))
        if result.error:
            raise StorageError(result.error)

        return [
            MarketSearchResult(
                id=hit.condition_id,
                slug=hit.slug,
                question=hit.question,
                probability=hit.price if hit.price is not None else UNKNOWN_PROBABILITY,
                close_time=hit.end_time,
                volume_usdc=hit.volume,
                active=hit.is_active,
            )
            for hit in result.data or []
        ]
