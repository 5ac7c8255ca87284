"""
Tests for the events domain layer.

Pure functions and entities only; no database or network calls.
"""

from datetime import datetime, timedelta, timezone

import pytest

from eventdesk.domain.events import cache_tags
from eventdesk.domain.events.entities import Event, EventTag, Market, SettingsEntry
from eventdesk.domain.events.locales import (
    SiteSettings,
    ensure_enabled_locales,
    get_auto_deploy_new_events_enabled_from_settings,
    get_automatic_translations_enabled_from_settings,
    get_enabled_locales_from_settings,
    normalize_boolean_setting,
    normalize_enabled_locales,
    parse_enabled_locales,
    resolve_locale,
    serialize_enabled_locales,
)
from eventdesk.domain.events.market_chance import clamp_price, resolve_display_price
from eventdesk.domain.events.new_badge import (
    NEW_BADGE_WINDOW_DAILY,
    NEW_BADGE_WINDOW_DEFAULT,
    NEW_BADGE_WINDOW_SUB_HOURLY,
    new_badge_window,
    parse_recurrence,
    should_show_new_badge,
)
from eventdesk.domain.events.sports_routing import (
    resolve_event_market_path,
    resolve_event_page_path,
)

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def _snapshot(group: str, key: str, value: str) -> dict:
    return {group: {key: SettingsEntry(value=value)}}


# ══════════════════════════════════════════════════════════════════════
# Locales and settings
# ══════════════════════════════════════════════════════════════════════


class TestEnabledLocales:
    """Parsing and normalizing the enabled-locales setting."""

    def test_default_locale_is_always_first(self):
        assert normalize_enabled_locales(["de"]) == ["en", "de"]

    def test_canonical_order_and_unsupported_dropped(self):
        assert normalize_enabled_locales(["fr", "de", "en"]) == ["en", "de"]

    def test_ensure_never_empty(self):
        assert ensure_enabled_locales([]) == ["en"]

    def test_malformed_json_yields_all_supported(self):
        assert parse_enabled_locales("{bad") == ["en", "de"]

    def test_missing_value_yields_all_supported(self):
        assert parse_enabled_locales(None) == ["en", "de"]
        assert parse_enabled_locales("") == ["en", "de"]

    def test_non_array_yields_all_supported(self):
        assert parse_enabled_locales('{"en": true}') == ["en", "de"]

    def test_empty_array_yields_default_only(self):
        assert parse_enabled_locales("[]") == ["en"]

    def test_non_string_items_ignored(self):
        assert parse_enabled_locales('["de", 3, null]') == ["en", "de"]

    def test_serialize_is_json_array(self):
        assert serialize_enabled_locales(["de"]) == '["en", "de"]'

    def test_from_settings(self):
        snapshot = _snapshot("i18n", "enabled_locales", '["en"]')
        assert get_enabled_locales_from_settings(snapshot) == ["en"]
        assert get_enabled_locales_from_settings(None) == ["en", "de"]


class TestBooleanSettings:
    """Feature toggles stored as strings."""

    def test_auto_deploy_defaults_to_true(self):
        assert get_auto_deploy_new_events_enabled_from_settings(None) is True

    def test_auto_deploy_false(self):
        snapshot = _snapshot("events", "auto_deploy_new_events", "false")
        assert get_auto_deploy_new_events_enabled_from_settings(snapshot) is False

    def test_auto_deploy_invalid_falls_back(self):
        snapshot = _snapshot("events", "auto_deploy_new_events", "invalid")
        assert get_auto_deploy_new_events_enabled_from_settings(snapshot) is True

    def test_automatic_translations(self):
        snapshot = _snapshot("i18n", "automatic_translations_enabled", " OFF ")
        assert get_automatic_translations_enabled_from_settings(snapshot) is False
        assert get_automatic_translations_enabled_from_settings({}) is True

    @pytest.mark.parametrize("value", ["1", "yes", "on", "enabled", "TRUE"])
    def test_truthy_spellings(self, value):
        assert normalize_boolean_setting(value, fallback=False) is True

    def test_site_settings_snapshot(self):
        snapshot = {
            "i18n": {"enabled_locales": SettingsEntry('["de"]')},
            "events": {"auto_deploy_new_events": SettingsEntry("no")},
        }
        site = SiteSettings.from_snapshot(snapshot)
        assert site.enabled_locales == ("en", "de")
        assert site.automatic_translations_enabled is True
        assert site.auto_deploy_new_events is False


class TestResolveLocale:
    def test_supported(self):
        assert resolve_locale("de") == "de"

    def test_unsupported_falls_back(self):
        assert resolve_locale("fr") == "en"
        assert resolve_locale(None) == "en"


# ══════════════════════════════════════════════════════════════════════
# Cache tags
# ══════════════════════════════════════════════════════════════════════


class TestCacheTags:
    """Tag strings and the invalidation set of every mutation."""

    def test_tag_builders(self):
        assert cache_tags.event("btc-100k") == "event:btc-100k"
        assert cache_tags.events_list("u1") == "events:u1"
        assert cache_tags.activity("0xabc") == "activity:0xabc"
        assert cache_tags.holders("0xabc") == "holders:0xabc"
        assert cache_tags.notifications("u1") == "notifications:u1"
        assert cache_tags.main_tags("de") == "main-tags:de"

    def test_listing_tags_for_guest_and_user(self):
        assert cache_tags.listing_tags("") == ["events:guest", "events:all"]
        assert cache_tags.listing_tags("u1") == ["events:u1", "events:all"]

    def test_event_page_tags(self):
        assert set(cache_tags.event_page_tags("s")) == {"event:s", "events:all"}

    def test_event_visibility_invalidations(self):
        assert set(cache_tags.event_visibility_invalidations("s")) == {"events:all", "event:s"}

    def test_settings_invalidations(self):
        assert cache_tags.event_sync_settings_invalidations() == ["settings"]
        assert cache_tags.theme_settings_invalidations() == ["settings"]
        assert cache_tags.locale_settings_invalidations() == ["settings"]

    def test_category_translation_invalidations(self):
        assert set(cache_tags.category_translation_invalidations("admin-1")) == {
            "admin:categories",
            "events:all",
            "events:admin-1",
            "main-tags:en",
            "main-tags:de",
        }


# ══════════════════════════════════════════════════════════════════════
# Display price
# ══════════════════════════════════════════════════════════════════════


class TestDisplayPrice:
    def test_tight_spread_uses_computed_midpoint(self):
        assert resolve_display_price(0.40, 0.46, 0.10) == pytest.approx(0.43)

    def test_tight_spread_prefers_published_midpoint(self):
        assert resolve_display_price(0.40, 0.46, 0.10, midpoint=0.44) == pytest.approx(0.44)

    def test_wide_spread_uses_last_trade(self):
        assert resolve_display_price(0.10, 0.60, 0.55) == pytest.approx(0.55)

    def test_wide_spread_without_last_trade_uses_midpoint(self):
        assert resolve_display_price(0.10, 0.60, None) == pytest.approx(0.35)

    def test_single_side(self):
        assert resolve_display_price(None, 0.7, 0.2) == pytest.approx(0.7)
        assert resolve_display_price(0.3, None, 0.2) == pytest.approx(0.3)

    def test_only_last_trade(self):
        assert resolve_display_price(None, None, 0.25) == pytest.approx(0.25)

    def test_nothing_known(self):
        assert resolve_display_price(None, None, None) is None

    def test_clamped(self):
        assert clamp_price(1.7) == 1.0
        assert clamp_price(-0.2) == 0.0
        assert clamp_price(float("nan")) == 0.0


# ══════════════════════════════════════════════════════════════════════
# New badge
# ══════════════════════════════════════════════════════════════════════


class TestNewBadge:
    def test_parse_recurrence(self):
        assert parse_recurrence("daily") == timedelta(days=1)
        assert parse_recurrence("15m") == timedelta(minutes=15)
        assert parse_recurrence("every 4 hours") == timedelta(hours=4)
        assert parse_recurrence("0m") is None
        assert parse_recurrence("sometimes") is None

    def test_windows(self):
        assert new_badge_window("15m") == NEW_BADGE_WINDOW_SUB_HOURLY
        assert new_badge_window("daily") == NEW_BADGE_WINDOW_DAILY
        assert new_badge_window("weekly") == NEW_BADGE_WINDOW_DEFAULT
        assert new_badge_window(None) == NEW_BADGE_WINDOW_DEFAULT

    def test_newest_market_counts(self):
        assert should_show_new_badge(
            "active",
            "daily",
            NOW - timedelta(days=5),
            [NOW - timedelta(days=4), NOW - timedelta(hours=1)],
            now=NOW,
        )

    def test_expired_window(self):
        assert not should_show_new_badge(
            "active", "15m", NOW - timedelta(minutes=30), [], now=NOW
        )

    def test_event_created_at_used_without_markets(self):
        assert should_show_new_badge("active", None, NOW - timedelta(hours=23), [], now=NOW)

    def test_inactive_never_badged(self):
        assert not should_show_new_badge("resolved", None, NOW, [NOW], now=NOW)

    def test_no_timestamp(self):
        assert not should_show_new_badge("active", None, None, [None], now=NOW)


# ══════════════════════════════════════════════════════════════════════
# Sports routing and entities
# ══════════════════════════════════════════════════════════════════════


class TestSportsRouting:
    def test_sports_event_path(self):
        assert resolve_event_page_path("x", " NBA ", "lakers-celtics") == "/sports/nba/lakers-celtics"

    def test_regular_event_path(self):
        assert resolve_event_page_path("fed-rates", "nba", None) == "/event/fed-rates"

    def test_market_path(self):
        assert resolve_event_market_path("x", "m1", "nba", "g1") == "/sports/nba/g1/m1"
        assert resolve_event_market_path("x", "m1") == "/event/x/m1"


class TestEventEntity:
    def _event(self, **values) -> Event:
        defaults = {"id": "e1", "slug": "e1", "title": "E1", "status": "active"}
        defaults.update(values)
        return Event(**defaults)

    def test_main_tag_prefers_main_category(self):
        event = self._event(
            tags=[EventTag(1, "Elections", "elections"), EventTag(2, "Politics", "politics", True)]
        )
        assert event.main_tag == "Politics"

    def test_main_tag_falls_back_to_first_then_world(self):
        assert self._event(tags=[EventTag(1, "Elections", "elections")]).main_tag == "Elections"
        assert self._event().main_tag == "World"

    def test_volume_sums(self):
        event = self._event(
            markets=[
                Market("c1", "e1", "m1", "M1", volume=10, volume_24h=1),
                Market("c2", "e1", "m2", "M2", volume=5, volume_24h=2),
            ]
        )
        assert event.volume == 15
        assert event.volume_24h == 3

    def test_market_probability_is_percentage(self):
        market = Market("c1", "e1", "m1", "M1", best_bid=0.5, best_ask=0.52)
        assert market.price == pytest.approx(0.51)
        assert market.probability == pytest.approx(51.0)
