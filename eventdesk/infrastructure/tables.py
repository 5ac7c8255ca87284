"""
SQLAlchemy Core table definitions.

Mirrors the relational schema read and written by the repository
adapters. Timestamps are stored timezone-aware where the backend
supports it; adapters normalise naive values to UTC on read.
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

events = Table(
    "events",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("slug", String(255), nullable=False, unique=True),
    Column("title", Text, nullable=False),
    Column("status", String(16), nullable=False, default="draft"),
    Column("icon_url", Text),
    Column("series_slug", String(255)),
    Column("series_recurrence", String(64)),
    Column("is_hidden", Boolean, nullable=False, default=False),
    Column("sports_sport_slug", String(128)),
    Column("sports_event_slug", String(255)),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    Column("end_date", DateTime(timezone=True)),
)

event_translations = Table(
    "event_translations",
    metadata,
    Column("event_id", String(64), ForeignKey("events.id", ondelete="CASCADE"), primary_key=True),
    Column("locale", String(8), primary_key=True),
    Column("title", Text, nullable=False),
)

markets = Table(
    "markets",
    metadata,
    Column("condition_id", String(128), primary_key=True),
    Column("event_id", String(64), ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
    Column("slug", String(255), nullable=False),
    Column("title", Text, nullable=False),
    Column("short_title", Text),
    Column("question", Text),
    Column("icon_url", Text),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("is_resolved", Boolean, nullable=False, default=False),
    Column("volume", Float, nullable=False, default=0),
    Column("volume_24h", Float, nullable=False, default=0),
    Column("best_bid", Float),
    Column("best_ask", Float),
    Column("midpoint", Float),
    Column("last_trade_price", Float),
    Column("end_time", DateTime(timezone=True)),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

tags = Table(
    "tags",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(255), nullable=False),
    Column("slug", String(255), nullable=False, unique=True),
    Column("is_main_category", Boolean, nullable=False, default=False),
    Column("is_hidden", Boolean, nullable=False, default=False),
    Column("hide_events", Boolean, nullable=False, default=False),
    Column("display_order", Integer, nullable=False, default=0),
    Column("parent_tag_id", Integer, ForeignKey("tags.id", ondelete="SET NULL")),
)

tag_translations = Table(
    "tag_translations",
    metadata,
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
    Column("locale", String(8), primary_key=True),
    Column("name", String(255), nullable=False),
)

event_tags = Table(
    "event_tags",
    metadata,
    Column("event_id", String(64), ForeignKey("events.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)

users = Table(
    "users",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("username", String(255)),
    Column("is_admin", Boolean, nullable=False, default=False),
)

bookmarks = Table(
    "bookmarks",
    metadata,
    Column("user_id", String(64), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("event_id", String(64), ForeignKey("events.id", ondelete="CASCADE"), primary_key=True),
)

settings = Table(
    "settings",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("group", String(64), nullable=False),
    Column("key", String(128), nullable=False),
    Column("value", Text, nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    UniqueConstraint("group", "key", name="uq_settings_group_key"),
)

affiliates = Table(
    "affiliates",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("affiliate_code", String(64), nullable=False, unique=True),
    Column("user_id", String(64), ForeignKey("users.id", ondelete="SET NULL")),
)

conditions_audit = Table(
    "conditions_audit",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("condition_id", String(128), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("old_values", JSON, nullable=False, default=dict),
    Column("new_values", JSON, nullable=False, default=dict),
)
