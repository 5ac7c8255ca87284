"""
Use case: Resolution status for a batch of markets.

Input: raw list of condition ids
Output: list[MarketStatusResult]
Side effects: None (read-only query).
Failure cases: StorageError when the repository reports an error.
"""

from typing import Any, Iterable

from eventdesk.application.events.dtos import MarketStatusResult
from eventdesk.domain.events.constants import MARKET_STATUS_MAX_IDS
from eventdesk.domain.events.errors import StorageError
from eventdesk.domain.events.ports import MarketRepository


def normalize_condition_ids(raw_ids: Iterable[Any]) -> list[str]:
    """Trim, lower-case and de-duplicate string ids, keeping the first 500."""
    seen: dict[str, None] = {}
    for value in raw_ids:
        if not isinstance(value, str):
            continue
        normalized = value.strip().lower()
        if normalized:
            seen.setdefault(normalized, None)
    return list(seen)[:MARKET_STATUS_MAX_IDS]


class GetMarketStatusUseCase:
    def __init__(self, market_repo: MarketRepository) -> None:
        self._market_repo = market_repo

    def execute(self, raw_ids: Iterable[Any]) -> list[MarketStatusResult]:
        condition_ids = normalize_condition_ids(raw_ids)
        if not condition_ids:
            return []

        result = self._market_repo.get_market_resolutions(condition_ids)
        if result.error:
            raise StorageError(result.error)
        return [
            MarketStatusResult(condition_id=item.condition_id, is_resolved=item.is_resolved)
            for item in result.data or []
        ]
