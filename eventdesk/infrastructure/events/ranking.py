"""
Ranking policies for event listings.

A policy turns a listing tag into ORDER BY clauses. The event id is
always the last clause so that OFFSET pagination is stable.
"""

from abc import ABC, abstractmethod

from sqlalchemy import func, select
from sqlalchemy.sql.elements import ColumnElement

from eventdesk.domain.events.constants import NEW_TAG, TRENDING_TAG
from eventdesk.infrastructure.tables import events, markets


class RankingPolicy(ABC):
    """Ordering applied to a page of events."""

    name: str = ""

    @abstractmethod
    def order_by(self) -> list[ColumnElement]:
        raise NotImplementedError


class RecencyRanking(RankingPolicy):
    """Newest events first."""

    name = "recency"

    def order_by(self) -> list[ColumnElement]:
        return [events.c.created_at.desc(), events.c.id.desc()]


class RecentVolumeRanking(RankingPolicy):
    """Highest 24h volume first, falling back to total volume."""

    name = "recent_volume"

    def order_by(self) -> list[ColumnElement]:
        volume_24h = (
            select(func.sum(markets.c.volume_24h))
            .where(markets.c.event_id == events.c.id)
            .scalar_subquery()
        )
        total_volume = (
            select(func.sum(markets.c.volume))
            .where(markets.c.event_id == events.c.id)
            .scalar_subquery()
        )
        recent_volume = func.coalesce(func.nullif(volume_24h, 0), total_volume, 0)
        return [recent_volume.desc(), events.c.created_at.desc(), events.c.id.desc()]


DEFAULT_RANKING = RecencyRanking()

RANKING_POLICIES: dict[str, RankingPolicy] = {
    TRENDING_TAG: RecentVolumeRanking(),
    NEW_TAG: RecencyRanking(),
}


def ranking_for_tag(tag: str) -> RankingPolicy:
    return RANKING_POLICIES.get(tag, DEFAULT_RANKING)
