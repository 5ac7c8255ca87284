"""
Tests for the SQL repository adapters.

Each test seeds a fresh in-memory SQLite database (see conftest).
"""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from conftest import NOW
from eventdesk.domain.events.constants import DEFAULT_ERROR_MESSAGE
from eventdesk.domain.events.entities import ListEventsCriteria, SettingsUpdate
from eventdesk.infrastructure.events.account_repository import (
    AffiliateRepositoryAdapter,
    UserRepositoryAdapter,
)
from eventdesk.infrastructure.events.event_repository import EventRepositoryAdapter
from eventdesk.infrastructure.events.market_repository import MarketRepositoryAdapter
from eventdesk.infrastructure.events.settings_repository import SettingsRepositoryAdapter
from eventdesk.infrastructure.events.tag_repository import TagRepositoryAdapter


def _slugs(result) -> list[str]:
    assert result.error is None
    return [event.slug for event in result.data]


# ══════════════════════════════════════════════════════════════════════
# Event listing
# ══════════════════════════════════════════════════════════════════════


class TestListEvents:
    """Filtering, ranking and hydration of the events feed."""

    def test_trending_ranks_by_recent_volume(self, engine, seed):
        seed.event("quiet")
        seed.market("m-quiet", "quiet", volume=1000, volume_24h=0)
        seed.event("hot")
        seed.market("m-hot", "hot", volume=10, volume_24h=500)
        seed.event("mid")
        seed.market("m-mid", "mid", volume=100, volume_24h=100)

        repo = EventRepositoryAdapter(engine)
        result = repo.list_events(ListEventsCriteria(tag="trending"))
        # quiet has no 24h volume, so its total volume ranks it.
        assert _slugs(result) == ["quiet", "hot", "mid"]

    def test_new_ranks_by_creation_and_skips_hide_from_new(self, engine, seed):
        seed.tag(1, "hide-from-new")
        seed.event("old", created_at=NOW - timedelta(days=3))
        seed.market("m-old", "old")
        seed.event("newest", created_at=NOW - timedelta(hours=1))
        seed.market("m-newest", "newest")
        seed.event("hidden-from-new", created_at=NOW)
        seed.market("m-hfn", "hidden-from-new")
        seed.link("hidden-from-new", 1)

        repo = EventRepositoryAdapter(engine)
        assert _slugs(repo.list_events(ListEventsCriteria(tag="new"))) == ["newest", "old"]

    def test_events_without_markets_excluded(self, engine, seed):
        seed.event("empty")
        seed.event("full")
        seed.market("m1", "full")
        repo = EventRepositoryAdapter(engine)
        assert _slugs(repo.list_events(ListEventsCriteria())) == ["full"]

    def test_hidden_events_and_hiding_tags_excluded(self, engine, seed):
        seed.tag(1, "nsfw", hide_events=True)
        seed.event("hidden", is_hidden=True)
        seed.market("m1", "hidden")
        seed.event("tagged")
        seed.market("m2", "tagged")
        seed.link("tagged", 1)
        seed.event("visible")
        seed.market("m3", "visible")

        repo = EventRepositoryAdapter(engine)
        assert _slugs(repo.list_events(ListEventsCriteria())) == ["visible"]
        admin = repo.list_admin_events(ListEventsCriteria())
        assert set(_slugs(admin)) == {"hidden", "tagged", "visible"}

    def test_tag_filter(self, engine, seed):
        seed.tag(1, "politics")
        seed.event("vote")
        seed.market("m1", "vote")
        seed.link("vote", 1)
        seed.event("match")
        seed.market("m2", "match")

        repo = EventRepositoryAdapter(engine)
        assert _slugs(repo.list_events(ListEventsCriteria(tag="politics"))) == ["vote"]

    def test_search_matches_every_term(self, engine, seed):
        seed.event("a", title="Will Bitcoin reach 100k?")
        seed.market("m1", "a")
        seed.event("b", title="Bitcoin ETF approved?")
        seed.market("m2", "b")

        repo = EventRepositoryAdapter(engine)
        result = repo.list_events(ListEventsCriteria(search="bitcoin 100K"))
        assert _slugs(result) == ["a"]

    def test_resolved_status_includes_fully_resolved_active_events(self, engine, seed):
        seed.event("closed", status="resolved")
        seed.market("m1", "closed", is_resolved=True)
        seed.event("settled")
        seed.market("m2", "settled", is_resolved=True)
        seed.event("open")
        seed.market("m3", "open")
        seed.market("m4", "open", is_resolved=True)

        repo = EventRepositoryAdapter(engine)
        resolved = repo.list_events(ListEventsCriteria(status="resolved", tag="new"))
        assert set(_slugs(resolved)) == {"closed", "settled"}

    def test_sports_filters(self, engine, seed):
        seed.tag(1, "crypto")
        seed.event("game", sports_sport_slug="nba", sports_event_slug="lal-bos")
        seed.market("m1", "game")
        seed.event("prop", sports_sport_slug="nba")
        seed.market("m2", "prop")
        seed.event("coin")
        seed.market("m3", "coin")
        seed.link("coin", 1)

        repo = EventRepositoryAdapter(engine)
        sports = repo.list_events(ListEventsCriteria(tag="sports"))
        assert set(_slugs(sports)) == {"game", "prop"}
        games = repo.list_events(
            ListEventsCriteria(tag="sports", sports_sport_slug="NBA", sports_section="games")
        )
        assert _slugs(games) == ["game"]
        assert _slugs(repo.list_events(ListEventsCriteria(hide_sports=True))) == ["coin"]
        assert set(_slugs(repo.list_events(ListEventsCriteria(hide_crypto=True)))) == {
            "game",
            "prop",
        }

    def test_frequency_filter(self, engine, seed):
        seed.event("daily", series_recurrence="Daily")
        seed.market("m1", "daily")
        seed.event("weekly", series_recurrence="weekly")
        seed.market("m2", "weekly")
        repo = EventRepositoryAdapter(engine)
        assert _slugs(repo.list_events(ListEventsCriteria(frequency="daily"))) == ["daily"]

    def test_bookmarked_without_user_is_empty(self, engine, seed):
        seed.event("e1")
        seed.market("m1", "e1")
        repo = EventRepositoryAdapter(engine)
        result = repo.list_events(ListEventsCriteria(tag="trending", bookmarked=True, user_id=""))
        assert result.error is None
        assert result.data == []

    def test_bookmarked_for_user(self, engine, seed):
        seed.user("u1")
        seed.event("saved")
        seed.market("m1", "saved")
        seed.event("other")
        seed.market("m2", "other")
        seed.bookmark("u1", "saved")

        repo = EventRepositoryAdapter(engine)
        result = repo.list_events(ListEventsCriteria(bookmarked=True, user_id="u1"))
        assert _slugs(result) == ["saved"]
        assert result.data[0].is_bookmarked is True

    def test_pagination(self, engine, seed):
        for index in range(5):
            seed.event(f"e{index}", created_at=NOW - timedelta(hours=index))
            seed.market(f"m{index}", f"e{index}")

        repo = EventRepositoryAdapter(engine, page_size=2)
        first = _slugs(repo.list_events(ListEventsCriteria(tag="new")))
        second = _slugs(repo.list_events(ListEventsCriteria(tag="new", offset=2)))
        assert first == ["e0", "e1"]
        assert second == ["e2", "e3"]

    def test_hydration_localizes_titles_and_tags(self, engine, seed):
        seed.tag(1, "politics", name="Politics", is_main_category=True)
        seed.tag_translation(1, "de", "Politik")
        seed.event("vote", title="Election")
        seed.event_translation("vote", "de", "Wahl")
        seed.market("m1", "vote", best_bid=0.4, best_ask=0.42)
        seed.link("vote", 1)

        repo = EventRepositoryAdapter(engine)
        [event] = repo.list_events(ListEventsCriteria(locale="de")).data
        assert event.title == "Wahl"
        assert event.main_tag == "Politik"
        assert event.markets[0].price == pytest.approx(0.41)

    def test_storage_error_returned_not_raised(self):
        engine = MagicMock()
        engine.connect.side_effect = OperationalError("SELECT", {}, Exception("down"))
        result = EventRepositoryAdapter(engine).list_events(ListEventsCriteria())
        assert result.data is None
        assert result.error == DEFAULT_ERROR_MESSAGE

    def test_driver_error_returned_not_raised(self):
        engine = MagicMock()
        engine.connect.side_effect = OverflowError("int too large to convert")
        result = EventRepositoryAdapter(engine).list_events(ListEventsCriteria())
        assert result.data is None
        assert result.error == DEFAULT_ERROR_MESSAGE

    def test_huge_offset_clamped(self, engine, seed):
        seed.event("only")
        seed.market("m-only", "only")
        result = EventRepositoryAdapter(engine).list_events(ListEventsCriteria(offset=10**20))
        assert result.error is None
        assert result.data == []


# ══════════════════════════════════════════════════════════════════════
# Single event, change log, related events, visibility
# ══════════════════════════════════════════════════════════════════════


class TestSingleEvent:
    def test_get_by_slug(self, engine, seed):
        seed.event("e1", slug="btc-100k")
        seed.market("m1", "e1")
        repo = EventRepositoryAdapter(engine)
        assert repo.get_event_by_slug("btc-100k").data.id == "e1"
        missing = repo.get_event_by_slug("nope")
        assert missing.error is None and missing.data is None

    def test_change_log_newest_first(self, engine, seed):
        seed.event("e1")
        seed.market("c1", "e1")
        seed.audit("c1", NOW - timedelta(hours=2), {"is_active": True}, {"is_active": False})
        seed.audit("c1", NOW - timedelta(hours=1), {"is_resolved": False}, {"is_resolved": True})
        seed.audit("unrelated", NOW, {}, {})

        log = EventRepositoryAdapter(engine).get_event_change_log("e1").data
        assert [entry.new_values for entry in log] == [{"is_resolved": True}, {"is_active": False}]

    def test_change_log_unknown_event(self, engine):
        result = EventRepositoryAdapter(engine).get_event_change_log("nope")
        assert result.error == "Event not found."


class TestRelatedEvents:
    def _seed_related(self, seed):
        seed.tag(1, "politics")
        seed.tag(2, "us")
        seed.tag(3, "elections")
        seed.event("main", series_slug="pres")
        seed.market("m-main", "main")
        seed.link("main", 1, 2, 3)

        seed.event("three-common")
        seed.market("m-3", "three-common", best_bid=0.6, best_ask=0.62)
        seed.link("three-common", 1, 2, 3)
        seed.event("one-common")
        seed.market("m-1", "one-common")
        seed.link("one-common", 1)
        seed.event("same-series", series_slug="PRES")
        seed.market("m-s", "same-series")
        seed.link("same-series", 1, 2, 3)
        seed.event("multi-market")
        seed.market("m-a", "multi-market")
        seed.market("m-b", "multi-market")
        seed.link("multi-market", 1, 2, 3)
        seed.event("hidden", is_hidden=True)
        seed.market("m-h", "hidden")
        seed.link("hidden", 1, 2, 3)

    def test_ranked_by_common_tags(self, engine, seed):
        self._seed_related(seed)
        related = EventRepositoryAdapter(engine).get_related_events("main").data
        assert [item.slug for item in related] == ["three-common", "one-common"]
        assert related[0].common_tags_count == 3
        assert related[0].chance == pytest.approx(61.0)

    def test_restricted_to_tag(self, engine, seed):
        self._seed_related(seed)
        related = EventRepositoryAdapter(engine).get_related_events("main", tag_slug="us").data
        assert [item.slug for item in related] == ["three-common"]
        assert related[0].common_tags_count == 1

    def test_unknown_event(self, engine):
        assert EventRepositoryAdapter(engine).get_related_events("nope").data == []


class TestEventVisibility:
    def test_toggle(self, engine, seed):
        seed.event("e1", slug="btc")
        repo = EventRepositoryAdapter(engine)
        visibility = repo.set_event_hidden_state("e1", True).data
        assert (visibility.id, visibility.slug, visibility.is_hidden) == ("e1", "btc", True)
        assert repo.get_event_by_slug("btc").data.is_hidden is True

    def test_unknown_event(self, engine):
        result = EventRepositoryAdapter(engine).set_event_hidden_state("nope", True)
        assert result.error is None and result.data is None


# ══════════════════════════════════════════════════════════════════════
# Markets, tags, settings, accounts
# ══════════════════════════════════════════════════════════════════════


class TestMarketRepository:
    def test_search_active_by_volume(self, engine, seed):
        seed.event("e1")
        seed.market("small", "e1", question="Will BTC hit 100k?", volume=10)
        seed.market("big", "e1", question="BTC above 90k?", volume=500)
        seed.market("closed", "e1", question="BTC ATH?", volume=900, is_active=False)
        seed.market("other", "e1", question="Fed cut?", volume=1000)

        hits = MarketRepositoryAdapter(engine).search_markets("btc", 8).data
        assert [hit.condition_id for hit in hits] == ["big", "small"]

    def test_search_limit_and_like_escaping(self, engine, seed):
        seed.event("e1")
        seed.market("pct", "e1", question="Inflation above 3%?")
        seed.market("plain", "e1", question="Inflation above 3.5?")
        repo = MarketRepositoryAdapter(engine)
        assert [hit.condition_id for hit in repo.search_markets("3%", 8).data] == ["pct"]
        assert len(repo.search_markets("inflation", 1).data) == 1

    def test_resolutions_case_insensitive(self, engine, seed):
        seed.event("e1")
        seed.market("0xABC", "e1", is_resolved=True)
        seed.market("0xdef", "e1")
        result = MarketRepositoryAdapter(engine).get_market_resolutions(["0xabc", "0xdef"]).data
        assert {(item.condition_id, item.is_resolved) for item in result} == {
            ("0xabc", True),
            ("0xdef", False),
        }


class TestTagRepository:
    def test_main_tags_with_children(self, engine, seed):
        seed.tag(1, "politics", name="Politics", is_main_category=True, display_order=2)
        seed.tag(2, "sports", name="Sports", is_main_category=True, display_order=1)
        seed.tag(10, "elections", name="Elections", parent_tag_id=1)
        seed.tag(11, "courts", name="Courts", parent_tag_id=1)
        seed.tag(12, "hide-from-new", name="Hide From New", parent_tag_id=1)
        seed.tag(13, "secret", name="Secret", parent_tag_id=1, is_hidden=True)
        seed.tag_translation(1, "de", "Politik")
        seed.event("e1")
        seed.market("m1", "e1")
        seed.link("e1", 11)

        repo = TagRepositoryAdapter(engine)
        tags = repo.get_main_tags("en").data
        assert [tag.slug for tag in tags] == ["sports", "politics"]
        assert tags[1].childs == [("Courts", "courts"), ("Elections", "elections")]
        assert repo.get_main_tags("de").data[1].name == "Politik"

    def test_update_translations(self, engine, seed):
        seed.tag(1, "politics")
        seed.tag_translation(1, "de", "Alt")
        repo = TagRepositoryAdapter(engine)

        assert repo.update_tag_translations(1, {"de": " Politik "}).data == {"de": "Politik"}
        assert repo.update_tag_translations(1, {"de": ""}).data == {}

    def test_update_translations_unknown_tag(self, engine):
        result = TagRepositoryAdapter(engine).update_tag_translations(99, {"de": "x"})
        assert result.error == "Tag not found."


class TestSettingsRepository:
    def test_upsert_and_snapshot(self, engine, seed):
        seed.setting("theme", "preset", "lime")
        repo = SettingsRepositoryAdapter(engine)
        repo.update_settings(
            [
                SettingsUpdate("theme", "preset", "midnight"),
                SettingsUpdate("events", "auto_deploy_new_events", "false"),
            ]
        )
        snapshot = repo.get_settings().data
        assert snapshot["theme"]["preset"].value == "midnight"
        assert snapshot["events"]["auto_deploy_new_events"].value == "false"
        assert snapshot["theme"]["preset"].updated_at.tzinfo is not None


class TestAccountRepositories:
    def test_user_lookup(self, engine, seed):
        seed.user("admin-1", is_admin=True)
        repo = UserRepositoryAdapter(engine)
        assert repo.get_user("admin-1").data.is_admin is True
        assert repo.get_user("ghost").data is None

    def test_affiliate_lookup(self, engine, seed):
        seed.affiliate("a1", "FRIEND")
        repo = AffiliateRepositoryAdapter(engine)
        assert repo.get_affiliate_by_code("FRIEND").data.id == "a1"
        assert repo.get_affiliate_by_code("friend").data is None
