"""
Tests for the events application layer (use cases).

Tests use cases with mocked ports. No real infrastructure needed.
Each test verifies orchestration logic, not business rules.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from eventdesk.application.events.dtos import ListEventsQuery, RelatedEventsQuery
from eventdesk.application.events.get_event_page import GetEventPageUseCase
from eventdesk.application.events.get_market_status import (
    GetMarketStatusUseCase,
    normalize_condition_ids,
)
from eventdesk.application.events.get_related_events import GetRelatedEventsUseCase
from eventdesk.application.events.get_site_config import (
    GetMainTagsUseCase,
    GetRuntimeThemeUseCase,
    GetSiteSettingsUseCase,
)
from eventdesk.application.events.list_events import ListEventsUseCase, build_criteria
from eventdesk.application.events.search_markets import SearchMarketsUseCase, parse_search_limit
from eventdesk.application.events.track_affiliate import (
    TrackAffiliateUseCase,
    sanitize_redirect_target,
)
from eventdesk.domain.events.constants import MAX_EVENTS_OFFSET
from eventdesk.domain.events.entities import (
    Affiliate,
    ConditionChangeLogEntry,
    Event,
    MainTag,
    Market,
    MarketResolution,
    MarketSearchHit,
    QueryResult,
    SettingsEntry,
)
from eventdesk.domain.events.errors import (
    EventNotFoundError,
    InvalidStatusFilterError,
    StorageError,
)

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def _event(**overrides) -> Event:
    values = {
        "id": "e1",
        "slug": "btc-100k",
        "title": "BTC 100k?",
        "status": "active",
        "created_at": NOW - timedelta(days=30),
        "updated_at": NOW - timedelta(days=30),
        "markets": [
            Market(
                condition_id="c1",
                event_id="e1",
                slug="yes",
                title="Yes",
                best_bid=0.3,
                best_ask=0.34,
                created_at=NOW - timedelta(days=30),
            )
        ],
    }
    values.update(overrides)
    return Event(**values)


def _failed(message: str = "boom") -> QueryResult:
    return QueryResult(data=None, error=message)


class TestListEventsUseCase:
    """Tests for the ListEventsUseCase."""

    def test_returns_cards(self) -> None:
        """Use case maps repository events to cards at the clock's time."""
        repo = MagicMock()
        repo.list_events.return_value = QueryResult(data=[_event()])
        cards = ListEventsUseCase(repo, clock=lambda: NOW).execute(ListEventsQuery())

        assert [card.slug for card in cards] == ["btc-100k"]
        assert cards[0].is_trending is False
        assert cards[0].show_new_badge is False
        assert cards[0].markets[0].path == "/event/btc-100k/yes"

    def test_invalid_status_never_reaches_storage(self) -> None:
        """Use case raises InvalidStatusFilterError before querying."""
        repo = MagicMock()
        with pytest.raises(InvalidStatusFilterError):
            ListEventsUseCase(repo).execute(ListEventsQuery(status="archived"))
        repo.list_events.assert_not_called()

    def test_storage_error(self) -> None:
        repo = MagicMock()
        repo.list_events.return_value = _failed()
        with pytest.raises(StorageError):
            ListEventsUseCase(repo).execute(ListEventsQuery())

    def test_criteria_normalization(self) -> None:
        criteria = build_criteria(
            ListEventsQuery(tag="", frequency="", locale="xx", offset=-10, hide_crypto=True)
        )
        assert criteria.tag == "trending"
        assert criteria.frequency == "all"
        assert criteria.locale == "en"
        assert criteria.offset == 0
        assert criteria.hide_crypto is True
        assert criteria.include_hidden is False

    def test_criteria_offset_capped(self) -> None:
        criteria = build_criteria(ListEventsQuery(offset=10**20))
        assert criteria.offset == MAX_EVENTS_OFFSET


class TestGetEventPageUseCase:
    """Tests for the GetEventPageUseCase."""

    def test_event_with_change_log(self) -> None:
        entry = ConditionChangeLogEntry("c1", NOW, {"is_resolved": False}, {"is_resolved": True})
        repo = MagicMock()
        repo.get_event_by_slug.return_value = QueryResult(data=_event())
        repo.get_event_change_log.return_value = QueryResult(data=[entry])

        page = GetEventPageUseCase(repo).execute("btc-100k", user_id="u1", locale="de")

        assert page.event.id == "e1"
        assert page.change_log == [entry]
        repo.get_event_by_slug.assert_called_once_with("btc-100k", user_id="u1", locale="de")

    def test_change_log_failure_degrades(self) -> None:
        """A change-log error yields an empty log, not a failure."""
        repo = MagicMock()
        repo.get_event_by_slug.return_value = QueryResult(data=_event())
        repo.get_event_change_log.return_value = _failed()
        assert GetEventPageUseCase(repo).execute("btc-100k").change_log == []

    def test_unknown_slug(self) -> None:
        repo = MagicMock()
        repo.get_event_by_slug.return_value = QueryResult(data=None)
        with pytest.raises(EventNotFoundError):
            GetEventPageUseCase(repo).execute("missing")

    def test_event_load_failure(self) -> None:
        repo = MagicMock()
        repo.get_event_by_slug.return_value = _failed()
        with pytest.raises(StorageError):
            GetEventPageUseCase(repo).execute("btc-100k")


class TestGetRelatedEventsUseCase:
    def test_passes_tag_and_resolved_locale(self) -> None:
        repo = MagicMock()
        repo.get_related_events.return_value = QueryResult(data=[])
        GetRelatedEventsUseCase(repo).execute(
            RelatedEventsQuery(slug="btc-100k", tag="crypto", locale="fr")
        )
        repo.get_related_events.assert_called_once_with("btc-100k", tag_slug="crypto", locale="en")

    def test_storage_error(self) -> None:
        repo = MagicMock()
        repo.get_related_events.return_value = _failed()
        with pytest.raises(StorageError):
            GetRelatedEventsUseCase(repo).execute(RelatedEventsQuery(slug="x"))


class TestSearchMarketsUseCase:
    """Tests for the SearchMarketsUseCase."""

    def test_short_query_skips_storage(self) -> None:
        """Use case returns nothing for queries under two characters."""
        repo = MagicMock()
        assert SearchMarketsUseCase(repo).execute(" b ") == []
        assert SearchMarketsUseCase(repo).execute(None) == []
        repo.search_markets.assert_not_called()

    def test_unknown_price_reported_as_even_odds(self) -> None:
        repo = MagicMock()
        repo.search_markets.return_value = QueryResult(
            data=[
                MarketSearchHit("c1", "btc", "BTC?", 10.0, True, None, None),
                MarketSearchHit("c2", "eth", "ETH?", 5.0, True, None, 0.25),
            ]
        )
        results = SearchMarketsUseCase(repo).execute("  crypto ", "3")
        assert [result.probability for result in results] == [0.5, 0.25]
        repo.search_markets.assert_called_once_with("crypto", 3)

    @pytest.mark.parametrize(
        "raw, expected",
        [(None, 8), ("", 8), ("abc", 8), ("0", 1), ("-4", 1), ("50", 20), (12, 12)],
    )
    def test_limit_parsing(self, raw, expected) -> None:
        assert parse_search_limit(raw) == expected

    def test_storage_error(self) -> None:
        repo = MagicMock()
        repo.search_markets.return_value = _failed()
        with pytest.raises(StorageError):
            SearchMarketsUseCase(repo).execute("btc")


class TestGetMarketStatusUseCase:
    def test_ids_normalized(self) -> None:
        raw = [" 0xABC ", "0xabc", 42, None, "", "0xdef"]
        assert normalize_condition_ids(raw) == ["0xabc", "0xdef"]

    def test_ids_capped(self) -> None:
        raw = [f"0x{index:04x}" for index in range(600)]
        assert len(normalize_condition_ids(raw)) == 500

    def test_no_valid_ids_skips_storage(self) -> None:
        repo = MagicMock()
        assert GetMarketStatusUseCase(repo).execute([1, None, "  "]) == []
        repo.get_market_resolutions.assert_not_called()

    def test_results(self) -> None:
        repo = MagicMock()
        repo.get_market_resolutions.return_value = QueryResult(
            data=[MarketResolution("0xabc", True)]
        )
        [status] = GetMarketStatusUseCase(repo).execute(["0xABC"])
        assert (status.condition_id, status.is_resolved) == ("0xabc", True)
        repo.get_market_resolutions.assert_called_once_with(["0xabc"])


class TestTrackAffiliateUseCase:
    """Tests for the TrackAffiliateUseCase."""

    @pytest.mark.parametrize(
        "target, expected",
        [
            ("/event/btc", "/event/btc"),
            (None, "/"),
            ("", "/"),
            ("https://evil.example", "/"),
            ("//evil.example", "/"),
            ("event/btc", "/"),
        ],
    )
    def test_redirect_sanitized(self, target, expected) -> None:
        assert sanitize_redirect_target(target) == expected

    def test_known_code(self) -> None:
        repo = MagicMock()
        repo.get_affiliate_by_code.return_value = QueryResult(data=Affiliate("a1", "FRIEND"))
        redirect = TrackAffiliateUseCase(repo, clock_ms=lambda: 1700000000000).execute(
            "FRIEND", "/portfolio"
        )
        assert redirect.location == "/portfolio"
        assert redirect.affiliate_code == "FRIEND"
        assert redirect.timestamp_ms == 1700000000000

    def test_unknown_code_goes_home_without_referral(self) -> None:
        """Unknown codes ignore the requested target."""
        repo = MagicMock()
        repo.get_affiliate_by_code.return_value = QueryResult(data=None)
        redirect = TrackAffiliateUseCase(repo).execute("NOPE", "/portfolio")
        assert redirect.location == "/"
        assert redirect.affiliate_code is None

    def test_lookup_failure_goes_home(self) -> None:
        repo = MagicMock()
        repo.get_affiliate_by_code.return_value = _failed()
        assert TrackAffiliateUseCase(repo).execute("FRIEND").affiliate_code is None


class TestSiteConfigUseCases:
    def test_site_settings_defaults_on_error(self) -> None:
        repo = MagicMock()
        repo.get_settings.return_value = _failed()
        site = GetSiteSettingsUseCase(repo).execute()
        assert site.enabled_locales == ("en", "de")
        assert site.automatic_translations_enabled is True
        assert site.auto_deploy_new_events is True

    def test_site_settings_from_snapshot(self) -> None:
        repo = MagicMock()
        repo.get_settings.return_value = QueryResult(
            data={
                "i18n": {"enabled_locales": SettingsEntry('["de"]')},
                "events": {"auto_deploy_new_events": SettingsEntry("off")},
            }
        )
        site = GetSiteSettingsUseCase(repo).execute()
        assert site.enabled_locales == ("en", "de")
        assert site.auto_deploy_new_events is False

    def test_runtime_theme_defaults_on_error(self) -> None:
        repo = MagicMock()
        repo.get_settings.return_value = _failed()
        assert GetRuntimeThemeUseCase(repo).execute().source == "default"

    def test_main_tags(self) -> None:
        repo = MagicMock()
        repo.get_main_tags.return_value = QueryResult(
            data=[MainTag(1, "Politics", "politics", 0, [("Elections", "elections")])]
        )
        [tag] = GetMainTagsUseCase(repo).execute("xx")
        assert tag.childs == [{"name": "Elections", "slug": "elections"}]
        repo.get_main_tags.assert_called_once_with("en")

    def test_main_tags_storage_error(self) -> None:
        repo = MagicMock()
        repo.get_main_tags.return_value = _failed()
        with pytest.raises(StorageError):
            GetMainTagsUseCase(repo).execute()
