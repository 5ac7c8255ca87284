"""
Adapter: Market repository.

Implements MarketRepository port.
Serves the market search box and the resolution-status lookup.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.engine import Engine

from eventdesk.domain.events.entities import MarketResolution, MarketSearchHit, QueryResult
from eventdesk.domain.events.market_chance import resolve_display_price
from eventdesk.domain.events.ports import MarketRepository
from eventdesk.infrastructure.events.query import as_utc, run_query
from eventdesk.infrastructure.tables import markets

logger = logging.getLogger(__name__)


class MarketRepositoryAdapter(MarketRepository):
    """SQL implementation of the market repository."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def search_markets(self, query: str, limit: int) -> QueryResult[list[MarketSearchHit]]:
        """Return active markets whose question contains ``query``.

        Args:
            query: Trimmed search text. Matching is case-insensitive.
            limit: Maximum number of hits.

        Returns:
            Hits ordered by total volume, highest first.
        """

        def operation() -> list[MarketSearchHit]:
            stmt = (
                select(markets)
                .where(
                    markets.c.is_active.is_(True),
                    markets.c.question.is_not(None),
                    func.lower(markets.c.question).contains(query.lower(), autoescape=True),
                )
                .order_by(markets.c.volume.desc(), markets.c.condition_id)
                .limit(limit)
            )
            with self._engine.connect() as conn:
                rows = conn.execute(stmt).mappings().all()
            return [
                MarketSearchHit(
                    condition_id=row["condition_id"],
                    slug=row["slug"],
                    question=row["question"],
                    volume=float(row["volume"] or 0),
                    is_active=bool(row["is_active"]),
                    end_time=as_utc(row["end_time"]),
                    price=resolve_display_price(
                        bid=row["best_bid"],
                        ask=row["best_ask"],
                        last_trade=row["last_trade_price"],
                        midpoint=row["midpoint"],
                    ),
                )
                for row in rows
            ]

        return run_query(operation, "search_markets")

    def get_market_resolutions(
        self, condition_ids: list[str]
    ) -> QueryResult[list[MarketResolution]]:
        if not condition_ids:
            return QueryResult(data=[])

        def operation() -> list[MarketResolution]:
            stmt = select(markets.c.condition_id, markets.c.is_resolved).where(
                func.lower(markets.c.condition_id).in_(condition_ids)
            )
            with self._engine.connect() as conn:
                rows = conn.execute(stmt).all()
            return [
                MarketResolution(
                    condition_id=condition_id.lower(),
                    is_resolved=bool(is_resolved),
                )
                for condition_id, is_resolved in rows
            ]

        return run_query(operation, "get_market_resolutions")
