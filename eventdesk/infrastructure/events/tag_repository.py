"""
Adapter: Tag repository.

Implements TagRepository port.
Builds the localized main-category menu and writes category translations.
"""

import logging
from collections import defaultdict
from typing import Mapping, Optional

from sqlalchemy import and_, delete, func, insert, literal, select
from sqlalchemy.engine import Engine

from eventdesk.domain.events.constants import HIDE_FROM_NEW_TAG_SLUG, SYNTHETIC_TAGS
from eventdesk.domain.events.entities import MainTag, QueryResult
from eventdesk.domain.events.locales import DEFAULT_LOCALE, SUPPORTED_LOCALES
from eventdesk.domain.events.ports import TagRepository
from eventdesk.infrastructure.events.query import run_query
from eventdesk.infrastructure.tables import event_tags, events, markets, tag_translations, tags

logger = logging.getLogger(__name__)

NON_DEFAULT_LOCALES = tuple(locale for locale in SUPPORTED_LOCALES if locale != DEFAULT_LOCALE)

_EXCLUDED_CHILD_SLUGS = frozenset({HIDE_FROM_NEW_TAG_SLUG}) | SYNTHETIC_TAGS


class TagRepositoryAdapter(TagRepository):
    """SQL implementation of the tag repository."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get_main_tags(self, locale: str = DEFAULT_LOCALE) -> QueryResult[list[MainTag]]:
        """Return visible main categories with their visible children.

        Children are ordered by active market count, then name.
        """
        return run_query(lambda: self._get_main_tags(locale), "get_main_tags")

    def _get_main_tags(self, locale: str) -> list[MainTag]:
        active_markets = (
            select(event_tags.c.tag_id, func.count(markets.c.condition_id).label("active_count"))
            .select_from(
                event_tags.join(events, events.c.id == event_tags.c.event_id).join(
                    markets, markets.c.event_id == events.c.id
                )
            )
            .where(markets.c.is_active.is_(True), markets.c.is_resolved.is_(False))
            .group_by(event_tags.c.tag_id)
            .subquery()
        )

        with self._engine.connect() as conn:
            main_rows = conn.execute(
                select(tags.c.id, tags.c.name, tags.c.slug, tags.c.display_order)
                .where(tags.c.is_main_category.is_(True), tags.c.is_hidden.is_(False))
                .order_by(tags.c.display_order, tags.c.name)
            ).mappings().all()
            if not main_rows:
                return []

            main_ids = [row["id"] for row in main_rows]
            child_rows = conn.execute(
                select(
                    tags.c.id,
                    tags.c.name,
                    tags.c.slug,
                    tags.c.parent_tag_id,
                    func.coalesce(active_markets.c.active_count, 0).label("active_count"),
                )
                .select_from(
                    tags.outerjoin(active_markets, active_markets.c.tag_id == tags.c.id)
                )
                .where(
                    tags.c.parent_tag_id.in_(main_ids),
                    tags.c.is_hidden.is_(False),
                    tags.c.is_main_category.is_(False),
                )
            ).mappings().all()

            names: dict[int, str] = {}
            if locale != DEFAULT_LOCALE:
                tag_ids = main_ids + [row["id"] for row in child_rows]
                names = {
                    tag_id: name
                    for tag_id, name in conn.execute(
                        select(tag_translations.c.tag_id, tag_translations.c.name).where(
                            tag_translations.c.tag_id.in_(tag_ids),
                            tag_translations.c.locale == locale,
                        )
                    )
                    if name
                }

        children: dict[int, list[tuple[int, str, str]]] = defaultdict(list)
        for row in child_rows:
            if row["slug"] in _EXCLUDED_CHILD_SLUGS:
                continue
            name = names.get(row["id"], row["name"])
            children[row["parent_tag_id"]].append((int(row["active_count"]), name, row["slug"]))

        return [
            MainTag(
                id=row["id"],
                name=names.get(row["id"], row["name"]),
                slug=row["slug"],
                display_order=row["display_order"],
                childs=[
                    (name, slug)
                    for _, name, slug in sorted(
                        children.get(row["id"], []), key=lambda child: (-child[0], child[1])
                    )
                ],
            )
            for row in main_rows
        ]

    def update_tag_translations(
        self, tag_id: int, translations: Mapping[str, Optional[str]]
    ) -> QueryResult[dict[str, str]]:
        """Replace the non-default-locale names of a tag.

        Every non-default locale is written: a non-empty value is upserted,
        an empty or missing one deletes the stored translation.
        """
        normalized = {
            locale: (translations.get(locale) or "").strip() for locale in NON_DEFAULT_LOCALES
        }
        to_delete = [locale for locale, value in normalized.items() if not value]
        to_upsert = {locale: value for locale, value in normalized.items() if value}

        def operation() -> Optional[dict[str, str]]:
            with self._engine.begin() as conn:
                exists = conn.execute(
                    select(literal(1)).select_from(tags).where(tags.c.id == tag_id)
                ).first()
                if exists is None:
                    return None

                conn.execute(
                    delete(tag_translations).where(
                        and_(
                            tag_translations.c.tag_id == tag_id,
                            tag_translations.c.locale.in_(list(normalized)),
                        )
                    )
                )
                if to_upsert:
                    conn.execute(
                        insert(tag_translations),
                        [
                            {"tag_id": tag_id, "locale": locale, "name": name}
                            for locale, name in to_upsert.items()
                        ],
                    )
            logger.info(
                "Updated translations for tag %d: upserted=%s deleted=%s",
                tag_id,
                sorted(to_upsert),
                to_delete,
            )
            return to_upsert

        result = run_query(operation, "update_tag_translations")
        if result.ok and result.data is None:
            return QueryResult(data=None, error="Tag not found.")
        return result
