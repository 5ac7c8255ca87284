"""
Adapter: Settings repository.

Implements SettingsRepository port.
Reads and writes the (group, key) -> value settings table.
"""

import logging
from datetime import datetime, timezone
from typing import Iterable

from sqlalchemy import insert, select, update
from sqlalchemy.engine import Engine

from eventdesk.domain.events.entities import (
    QueryResult,
    SettingsEntry,
    SettingsSnapshot,
    SettingsUpdate,
)
from eventdesk.domain.events.ports import SettingsRepository
from eventdesk.infrastructure.events.query import as_utc, run_query
from eventdesk.infrastructure.tables import settings as settings_table

logger = logging.getLogger(__name__)


class SettingsRepositoryAdapter(SettingsRepository):
    """SQL implementation of the settings repository."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get_settings(self) -> QueryResult[SettingsSnapshot]:
        def operation() -> SettingsSnapshot:
            snapshot: SettingsSnapshot = {}
            with self._engine.connect() as conn:
                rows = conn.execute(
                    select(
                        settings_table.c.group,
                        settings_table.c.key,
                        settings_table.c.value,
                        settings_table.c.updated_at,
                    )
                ).all()
            for group, key, value, updated_at in rows:
                snapshot.setdefault(group, {})[key] = SettingsEntry(
                    value=value, updated_at=as_utc(updated_at)
                )
            return snapshot

        return run_query(operation, "get_settings")

    def update_settings(self, updates: Iterable[SettingsUpdate]) -> QueryResult[SettingsSnapshot]:
        """Upsert entries in a single transaction.

        Args:
            updates: Entries to write. Later entries for the same key win.

        Returns:
            QueryResult with the written entries grouped like get_settings.
        """
        updates = list(updates)

        def operation() -> SettingsSnapshot:
            now = datetime.now(timezone.utc)
            written: SettingsSnapshot = {}
            with self._engine.begin() as conn:
                for item in updates:
                    changed = conn.execute(
                        update(settings_table)
                        .where(
                            settings_table.c.group == item.group,
                            settings_table.c.key == item.key,
                        )
                        .values(value=item.value, updated_at=now)
                    ).rowcount
                    if not changed:
                        conn.execute(
                            insert(settings_table).values(
                                group=item.group, key=item.key, value=item.value, updated_at=now
                            )
                        )
                    written.setdefault(item.group, {})[item.key] = SettingsEntry(
                        value=item.value, updated_at=now
                    )
            logger.info(
                "Updated %d settings: %s",
                len(updates),
                ", ".join(f"{item.group}/{item.key}" for item in updates),
            )
            return written

        return run_query(operation, "update_settings")
