"""
Mapping from domain entities to output DTOs.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from eventdesk.application.events.dtos import EventCard, MarketSummary, TagSummary
from eventdesk.domain.events.entities import Event, Market
from eventdesk.domain.events.new_badge import should_show_new_badge
from eventdesk.domain.events.sports_routing import resolve_event_market_path

RECENT_UPDATE_WINDOW = timedelta(days=3)


def to_market_summary(market: Market, event: Optional[Event] = None) -> MarketSummary:
    path = ""
    if event is not None:
        path = resolve_event_market_path(
            event.slug, market.slug, event.sports_sport_slug, event.sports_event_slug
        )
    return MarketSummary(
        condition_id=market.condition_id,
        slug=market.slug,
        title=market.display_title,
        question=market.question,
        icon_url=market.icon_url,
        is_active=market.is_active,
        is_resolved=market.is_resolved,
        price=market.price,
        probability=market.probability,
        volume=market.volume,
        volume_24h=market.volume_24h,
        end_time=market.end_time,
        path=path,
    )


def is_trending(event: Event, now: datetime) -> bool:
    """Trending events have 24h volume or were updated in the last three days."""
    if event.volume_24h > 0:
        return True
    if event.updated_at is None:
        return False
    return now - event.updated_at < RECENT_UPDATE_WINDOW


def to_event_card(event: Event, now: Optional[datetime] = None) -> EventCard:
    now = now or datetime.now(timezone.utc)
    return EventCard(
        id=event.id,
        slug=event.slug,
        title=event.title,
        status=event.status,
        icon_url=event.icon_url,
        series_slug=event.series_slug,
        series_recurrence=event.series_recurrence,
        main_tag=event.main_tag,
        volume=event.volume,
        is_trending=is_trending(event, now),
        is_bookmarked=event.is_bookmarked,
        is_hidden=event.is_hidden,
        show_new_badge=should_show_new_badge(
            status=event.status,
            series_recurrence=event.series_recurrence,
            event_created_at=event.created_at,
            market_created_at=(market.created_at for market in event.markets),
            now=now,
        ),
        path=event.path,
        created_at=event.created_at,
        end_date=event.end_date,
        tags=[
            TagSummary(
                id=tag.id,
                name=tag.name,
                slug=tag.slug,
                is_main_category=tag.is_main_category,
            )
            for tag in event.tags
        ],
        markets=[to_market_summary(market, event) for market in event.markets],
    )
