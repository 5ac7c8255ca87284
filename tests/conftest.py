"""
Shared fixtures.

API and repository tests run against an in-memory SQLite database
created fresh for every test. The application's engine and tag cache
are replaced through FastAPI dependency overrides.
"""

import os

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("CACHE_BACKEND", "memory")

from datetime import datetime, timedelta, timezone  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine, insert  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from eventdesk.infrastructure.cache.memory import InMemoryTagCache  # noqa: E402
from eventdesk.infrastructure.db import get_engine  # noqa: E402
from eventdesk.infrastructure.tables import (  # noqa: E402
    affiliates,
    bookmarks,
    conditions_audit,
    event_tags,
    event_translations,
    events,
    markets,
    metadata,
    settings,
    tag_translations,
    tags,
    users,
)
from eventdesk.interfaces.events.dependencies import get_tag_cache  # noqa: E402
from eventdesk.main import app  # noqa: E402

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


class Seeder:
    """Inserts rows with sensible defaults; every method returns its key."""

    def __init__(self, engine) -> None:
        self._engine = engine

    def _insert(self, table, **values) -> None:
        with self._engine.begin() as conn:
            conn.execute(insert(table).values(**values))

    def event(self, event_id: str, slug: str = None, **values) -> str:
        created_at = values.pop("created_at", NOW - timedelta(days=10))
        row = {
            "id": event_id,
            "slug": slug or event_id,
            "title": values.pop("title", f"Event {event_id}"),
            "status": values.pop("status", "active"),
            "is_hidden": values.pop("is_hidden", False),
            "created_at": created_at,
            "updated_at": values.pop("updated_at", created_at),
        }
        row.update(values)
        self._insert(events, **row)
        return event_id

    def market(self, condition_id: str, event_id: str, **values) -> str:
        row = {
            "condition_id": condition_id,
            "event_id": event_id,
            "slug": values.pop("slug", condition_id),
            "title": values.pop("title", f"Market {condition_id}"),
            "is_active": values.pop("is_active", True),
            "is_resolved": values.pop("is_resolved", False),
            "volume": values.pop("volume", 0.0),
            "volume_24h": values.pop("volume_24h", 0.0),
            "created_at": values.pop("created_at", NOW - timedelta(days=10)),
        }
        row.update(values)
        self._insert(markets, **row)
        return condition_id

    def tag(self, tag_id: int, slug: str, **values) -> int:
        row = {
            "id": tag_id,
            "slug": slug,
            "name": values.pop("name", slug.title()),
            "is_main_category": values.pop("is_main_category", False),
            "is_hidden": values.pop("is_hidden", False),
            "hide_events": values.pop("hide_events", False),
            "display_order": values.pop("display_order", 0),
        }
        row.update(values)
        self._insert(tags, **row)
        return tag_id

    def link(self, event_id: str, *tag_ids: int) -> None:
        for tag_id in tag_ids:
            self._insert(event_tags, event_id=event_id, tag_id=tag_id)

    def user(self, user_id: str, is_admin: bool = False) -> str:
        self._insert(users, id=user_id, username=user_id, is_admin=is_admin)
        return user_id

    def bookmark(self, user_id: str, event_id: str) -> None:
        self._insert(bookmarks, user_id=user_id, event_id=event_id)

    def affiliate(self, affiliate_id: str, code: str) -> str:
        self._insert(affiliates, id=affiliate_id, affiliate_code=code)
        return code

    def audit(self, condition_id: str, created_at: datetime, old: dict, new: dict) -> None:
        self._insert(
            conditions_audit,
            condition_id=condition_id,
            created_at=created_at,
            old_values=old,
            new_values=new,
        )

    def setting(self, group: str, key: str, value: str) -> None:
        self._insert(settings, group=group, key=key, value=value, updated_at=NOW)

    def event_translation(self, event_id: str, locale: str, title: str) -> None:
        self._insert(event_translations, event_id=event_id, locale=locale, title=title)

    def tag_translation(self, tag_id: int, locale: str, name: str) -> None:
        self._insert(tag_translations, tag_id=tag_id, locale=locale, name=name)


@pytest.fixture
def engine():
    """Fresh in-memory database shared across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def seed(engine) -> Seeder:
    return Seeder(engine)


@pytest.fixture
def cache() -> InMemoryTagCache:
    return InMemoryTagCache(default_ttl=300)


@pytest.fixture
def client(engine, cache):
    """TestClient wired to the test database and cache."""
    app.dependency_overrides[get_engine] = lambda: engine
    app.dependency_overrides[get_tag_cache] = lambda: cache
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
