"""
Adapter: Event repository.

Implements EventRepository port on top of SQLAlchemy Core.
Translates listing criteria into a single filtered, ranked and paginated
SELECT, then hydrates the page (markets, tags, translations, bookmarks)
with one query per relation.
"""

import logging
from collections import defaultdict
from dataclasses import replace
from datetime import datetime, timezone
from typing import Iterable, Mapping, Optional

from sqlalchemy import and_, func, literal, not_, or_, select, update
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.sql.elements import ColumnElement

from eventdesk.domain.events.constants import (
    ALL_TAG,
    CRYPTO_TAG,
    EARNINGS_TAG,
    EVENTS_PAGE_SIZE,
    MAX_EVENTS_OFFSET,
    HIDE_FROM_NEW_TAG_SLUG,
    NEW_TAG,
    RELATED_EVENTS_LIMIT,
    SPORTS_SECTION_GAMES,
    SPORTS_SECTION_PROPS,
    SPORTS_TAG,
    STATUS_ACTIVE,
    STATUS_RESOLVED,
    TRENDING_TAG,
)
from eventdesk.domain.events.entities import (
    ConditionChangeLogEntry,
    Event,
    EventTag,
    EventVisibility,
    ListEventsCriteria,
    Market,
    QueryResult,
    RelatedEvent,
)
from eventdesk.domain.events.locales import DEFAULT_LOCALE
from eventdesk.domain.events.ports import EventRepository
from eventdesk.infrastructure.events.query import as_utc, run_query
from eventdesk.infrastructure.events.ranking import ranking_for_tag
from eventdesk.infrastructure.tables import (
    bookmarks,
    conditions_audit,
    event_tags,
    event_translations,
    events,
    markets,
    tag_translations,
    tags,
)

logger = logging.getLogger(__name__)

# Tags that select a ranking rather than narrowing the listing.
_UNFILTERED_TAGS = frozenset({TRENDING_TAG, NEW_TAG, ALL_TAG, ""})


def _normalized(column: ColumnElement) -> ColumnElement:
    return func.lower(func.trim(func.coalesce(column, "")))


def _has_tag(slug: str) -> ColumnElement:
    return (
        select(literal(1))
        .select_from(event_tags.join(tags, tags.c.id == event_tags.c.tag_id))
        .where(event_tags.c.event_id == events.c.id, tags.c.slug == slug)
        .exists()
    )


def _has_hiding_tag() -> ColumnElement:
    return (
        select(literal(1))
        .select_from(event_tags.join(tags, tags.c.id == event_tags.c.tag_id))
        .where(event_tags.c.event_id == events.c.id, tags.c.hide_events.is_(True))
        .exists()
    )


def _has_markets() -> ColumnElement:
    return select(literal(1)).where(markets.c.event_id == events.c.id).exists()


def _has_unresolved_markets() -> ColumnElement:
    return (
        select(literal(1))
        .where(markets.c.event_id == events.c.id, markets.c.is_resolved.is_(False))
        .exists()
    )


def _is_sports_event() -> ColumnElement:
    return or_(_normalized(events.c.sports_sport_slug) != "", _has_tag(SPORTS_TAG))


def _visible() -> list[ColumnElement]:
    return [events.c.is_hidden.is_(False), not_(_has_hiding_tag())]


def _status_condition(status: str) -> ColumnElement:
    if status == STATUS_RESOLVED:
        return or_(
            events.c.status == STATUS_RESOLVED,
            and_(
                events.c.status == STATUS_ACTIVE,
                _has_markets(),
                not_(_has_unresolved_markets()),
            ),
        )
    return events.c.status == STATUS_ACTIVE


def build_listing_conditions(criteria: ListEventsCriteria) -> list[ColumnElement]:
    """Translate listing criteria into WHERE conditions on the events table."""
    conditions: list[ColumnElement] = [_status_condition(criteria.status), _has_markets()]

    if not criteria.include_hidden:
        conditions.extend(_visible())

    if criteria.bookmarked and criteria.user_id:
        conditions.append(
            select(literal(1))
            .where(
                bookmarks.c.event_id == events.c.id,
                bookmarks.c.user_id == criteria.user_id,
            )
            .exists()
        )

    for term in criteria.search.strip().lower().split():
        conditions.append(func.lower(events.c.title).contains(term, autoescape=True))

    frequency = criteria.frequency.strip().lower()
    if frequency and frequency != ALL_TAG:
        conditions.append(_normalized(events.c.series_recurrence) == frequency)

    tag = criteria.tag.strip().lower()
    if tag == NEW_TAG:
        conditions.append(not_(_has_tag(HIDE_FROM_NEW_TAG_SLUG)))
    elif tag == SPORTS_TAG:
        conditions.append(_is_sports_event())
        sport = (criteria.sports_sport_slug or "").strip().lower()
        if sport:
            conditions.append(_normalized(events.c.sports_sport_slug) == sport)
        if criteria.sports_section == SPORTS_SECTION_GAMES:
            conditions.append(_normalized(events.c.sports_event_slug) != "")
        elif criteria.sports_section == SPORTS_SECTION_PROPS:
            conditions.append(_normalized(events.c.sports_event_slug) == "")
    elif tag not in _UNFILTERED_TAGS:
        conditions.append(_has_tag(tag))

    if criteria.hide_sports:
        conditions.append(not_(_is_sports_event()))
    if criteria.hide_crypto:
        conditions.append(not_(_has_tag(CRYPTO_TAG)))
    if criteria.hide_earnings:
        conditions.append(not_(_has_tag(EARNINGS_TAG)))

    return conditions


def _to_market(row: Mapping) -> Market:
    return Market(
        condition_id=row["condition_id"],
        event_id=row["event_id"],
        slug=row["slug"],
        title=row["title"],
        short_title=row["short_title"],
        question=row["question"],
        icon_url=row["icon_url"],
        is_active=bool(row["is_active"]),
        is_resolved=bool(row["is_resolved"]),
        volume=float(row["volume"] or 0),
        volume_24h=float(row["volume_24h"] or 0),
        best_bid=row["best_bid"],
        best_ask=row["best_ask"],
        midpoint=row["midpoint"],
        last_trade_price=row["last_trade_price"],
        end_time=as_utc(row["end_time"]),
        created_at=as_utc(row["created_at"]),
    )


class EventRepositoryAdapter(EventRepository):
    """SQL implementation of the event repository.

    Every public method runs inside run_query, so storage errors are
    logged and returned as a QueryResult error instead of raised.
    """

    def __init__(self, engine: Engine, page_size: int = EVENTS_PAGE_SIZE) -> None:
        """Initialize the repository.

        Args:
            engine: SQLAlchemy engine shared by the application.
            page_size: Number of events per listing page.
        """
        self._engine = engine
        self._page_size = page_size

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def list_events(self, criteria: ListEventsCriteria) -> QueryResult[list[Event]]:
        if criteria.bookmarked and not criteria.user_id:
            return QueryResult(data=[])
        return run_query(lambda: self._list_events(criteria), "list_events")

    def list_admin_events(self, criteria: ListEventsCriteria) -> QueryResult[list[Event]]:
        return self.list_events(replace(criteria, include_hidden=True))

    def _list_events(self, criteria: ListEventsCriteria) -> list[Event]:
        ranking = ranking_for_tag(criteria.tag.strip().lower())
        stmt = (
            select(events)
            .where(and_(*build_listing_conditions(criteria)))
            .order_by(*ranking.order_by())
            .limit(self._page_size)
            .offset(min(max(0, criteria.offset), MAX_EVENTS_OFFSET))
        )
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
            logger.debug(
                "Listed %d events (tag=%s, ranking=%s, offset=%d)",
                len(rows),
                criteria.tag,
                ranking.name,
                criteria.offset,
            )
            return self._hydrate(conn, rows, criteria.user_id, criteria.locale)

    # ------------------------------------------------------------------
    # Single event
    # ------------------------------------------------------------------

    def get_event_by_slug(
        self, slug: str, user_id: str = "", locale: str = DEFAULT_LOCALE
    ) -> QueryResult[Optional[Event]]:
        def operation() -> Optional[Event]:
            with self._engine.connect() as conn:
                row = conn.execute(select(events).where(events.c.slug == slug)).mappings().first()
                if row is None:
                    return None
                return self._hydrate(conn, [row], user_id, locale)[0]

        return run_query(operation, "get_event_by_slug")

    def get_event_change_log(self, slug: str) -> QueryResult[list[ConditionChangeLogEntry]]:
        def operation() -> Optional[list[ConditionChangeLogEntry]]:
            with self._engine.connect() as conn:
                event_id = conn.execute(
                    select(events.c.id).where(events.c.slug == slug)
                ).scalar()
                if event_id is None:
                    return None
                rows = conn.execute(
                    select(
                        conditions_audit.c.condition_id,
                        conditions_audit.c.created_at,
                        conditions_audit.c.old_values,
                        conditions_audit.c.new_values,
                    )
                    .select_from(
                        conditions_audit.join(
                            markets, markets.c.condition_id == conditions_audit.c.condition_id
                        )
                    )
                    .where(markets.c.event_id == event_id)
                    .order_by(conditions_audit.c.created_at.desc(), conditions_audit.c.id.desc())
                ).mappings()
                return [
                    ConditionChangeLogEntry(
                        condition_id=row["condition_id"],
                        created_at=as_utc(row["created_at"]),
                        old_values=dict(row["old_values"] or {}),
                        new_values=dict(row["new_values"] or {}),
                    )
                    for row in rows
                ]

        result = run_query(operation, "get_event_change_log")
        if result.ok and result.data is None:
            return QueryResult(data=None, error="Event not found.")
        return result

    # ------------------------------------------------------------------
    # Related events
    # ------------------------------------------------------------------

    def get_related_events(
        self, slug: str, tag_slug: str = ALL_TAG, locale: str = DEFAULT_LOCALE
    ) -> QueryResult[list[RelatedEvent]]:
        return run_query(
            lambda: self._get_related_events(slug, (tag_slug or "").strip().lower(), locale),
            "get_related_events",
        )

    def _get_related_events(self, slug: str, tag_slug: str, locale: str) -> list[RelatedEvent]:
        with self._engine.connect() as conn:
            current = conn.execute(
                select(events.c.id, events.c.series_slug).where(events.c.slug == slug)
            ).first()
            if current is None:
                return []

            tag_query = (
                select(event_tags.c.tag_id)
                .select_from(event_tags.join(tags, tags.c.id == event_tags.c.tag_id))
                .where(event_tags.c.event_id == current.id)
            )
            if tag_slug and tag_slug != ALL_TAG:
                tag_query = tag_query.where(tags.c.slug == tag_slug)
            selected_tag_ids = list(conn.execute(tag_query).scalars())
            if not selected_tag_ids:
                return []

            market_counts = (
                select(markets.c.event_id, func.count().label("market_count"))
                .group_by(markets.c.event_id)
                .subquery()
            )
            common_tags = func.count(event_tags.c.tag_id).label("common_tags_count")
            stmt = (
                select(events.c.id, events.c.slug, events.c.title, common_tags)
                .select_from(
                    events.join(event_tags, event_tags.c.event_id == events.c.id).join(
                        market_counts, market_counts.c.event_id == events.c.id
                    )
                )
                .where(
                    event_tags.c.tag_id.in_(selected_tag_ids),
                    events.c.slug != slug,
                    market_counts.c.market_count == 1,
                    *_visible(),
                )
                .group_by(events.c.id, events.c.slug, events.c.title)
                .order_by(common_tags.desc(), events.c.id)
                .limit(RELATED_EVENTS_LIMIT)
            )
            current_series = (current.series_slug or "").strip().lower()
            if current_series:
                stmt = stmt.where(_normalized(events.c.series_slug) != current_series)

            rows = conn.execute(stmt).mappings().all()
            if not rows:
                return []

            event_ids = [row["id"] for row in rows]
            market_by_event = {
                row["event_id"]: _to_market(row)
                for row in conn.execute(
                    select(markets).where(markets.c.event_id.in_(event_ids))
                ).mappings()
            }
            titles = self._localized_titles(conn, event_ids, locale)

        related = []
        for row in rows:
            market = market_by_event.get(row["id"])
            related.append(
                RelatedEvent(
                    id=row["id"],
                    slug=row["slug"],
                    title=titles.get(row["id"], row["title"]),
                    icon_url=(market.icon_url if market else None) or "",
                    common_tags_count=int(row["common_tags_count"]),
                    chance=market.probability if market else None,
                )
            )
        return related

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    def set_event_hidden_state(
        self, event_id: str, is_hidden: bool
    ) -> QueryResult[Optional[EventVisibility]]:
        def operation() -> Optional[EventVisibility]:
            with self._engine.begin() as conn:
                updated = conn.execute(
                    update(events)
                    .where(events.c.id == event_id)
                    .values(is_hidden=is_hidden, updated_at=datetime.now(timezone.utc))
                ).rowcount
                if not updated:
                    return None
                row = conn.execute(
                    select(events.c.id, events.c.slug, events.c.is_hidden).where(
                        events.c.id == event_id
                    )
                ).first()
            if row is None:
                return None
            logger.info("Event %s visibility set to hidden=%s", row.id, row.is_hidden)
            return EventVisibility(id=row.id, slug=row.slug, is_hidden=bool(row.is_hidden))

        return run_query(operation, "set_event_hidden_state")

    # ------------------------------------------------------------------
    # Hydration
    # ------------------------------------------------------------------

    def _hydrate(
        self, conn: Connection, rows: list[Mapping], user_id: str, locale: str
    ) -> list[Event]:
        if not rows:
            return []
        event_ids = [row["id"] for row in rows]

        markets_by_event: dict[str, list[Market]] = defaultdict(list)
        for row in conn.execute(
            select(markets)
            .where(markets.c.event_id.in_(event_ids))
            .order_by(markets.c.created_at, markets.c.condition_id)
        ).mappings():
            markets_by_event[row["event_id"]].append(_to_market(row))

        tags_by_event = self._tags_by_event(conn, event_ids, locale)
        titles = self._localized_titles(conn, event_ids, locale)

        bookmarked: set[str] = set()
        if user_id:
            bookmarked = set(
                conn.execute(
                    select(bookmarks.c.event_id).where(
                        bookmarks.c.user_id == user_id,
                        bookmarks.c.event_id.in_(event_ids),
                    )
                ).scalars()
            )

        return [
            Event(
                id=row["id"],
                slug=row["slug"],
                title=titles.get(row["id"], row["title"]),
                status=row["status"],
                icon_url=row["icon_url"],
                series_slug=row["series_slug"],
                series_recurrence=row["series_recurrence"],
                is_hidden=bool(row["is_hidden"]),
                sports_sport_slug=row["sports_sport_slug"],
                sports_event_slug=row["sports_event_slug"],
                created_at=as_utc(row["created_at"]),
                updated_at=as_utc(row["updated_at"]),
                end_date=as_utc(row["end_date"]),
                markets=markets_by_event.get(row["id"], []),
                tags=tags_by_event.get(row["id"], []),
                is_bookmarked=row["id"] in bookmarked,
            )
            for row in rows
        ]

    def _tags_by_event(
        self, conn: Connection, event_ids: list[str], locale: str
    ) -> dict[str, list[EventTag]]:
        rows = conn.execute(
            select(
                event_tags.c.event_id,
                tags.c.id,
                tags.c.name,
                tags.c.slug,
                tags.c.is_main_category,
            )
            .select_from(event_tags.join(tags, tags.c.id == event_tags.c.tag_id))
            .where(event_tags.c.event_id.in_(event_ids), tags.c.is_hidden.is_(False))
            .order_by(tags.c.display_order, tags.c.id)
        ).mappings().all()

        names = self._localized_tag_names(conn, {row["id"] for row in rows}, locale)

        grouped: dict[str, list[EventTag]] = defaultdict(list)
        for row in rows:
            grouped[row["event_id"]].append(
                EventTag(
                    id=row["id"],
                    name=names.get(row["id"], row["name"]),
                    slug=row["slug"],
                    is_main_category=bool(row["is_main_category"]),
                )
            )
        return grouped

    @staticmethod
    def _localized_titles(conn: Connection, event_ids: list[str], locale: str) -> dict[str, str]:
        if locale == DEFAULT_LOCALE or not event_ids:
            return {}
        rows = conn.execute(
            select(event_translations.c.event_id, event_translations.c.title).where(
                event_translations.c.event_id.in_(event_ids),
                event_translations.c.locale == locale,
            )
        )
        return {event_id: title for event_id, title in rows if title}

    @staticmethod
    def _localized_tag_names(conn: Connection, tag_ids: Iterable[int], locale: str) -> dict[int, str]:
        tag_ids = list(tag_ids)
        if locale == DEFAULT_LOCALE or not tag_ids:
            return {}
        rows = conn.execute(
            select(tag_translations.c.tag_id, tag_translations.c.name).where(
                tag_translations.c.tag_id.in_(tag_ids),
                tag_translations.c.locale == locale,
            )
        )
        return {tag_id: name for tag_id, name in rows if name}
