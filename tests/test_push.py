"""
Tests for push notification payload parsing and click handling.
"""

from eventdesk.application.events.render_notification import RenderNotificationUseCase
from eventdesk.domain.notifications.push import (
    ClickActionKind,
    ClientWindow,
    PushDefaults,
    choose_click_action,
    parse_push_payload,
    resolve_notification_url,
)

ORIGIN = "https://example.com"

DEFAULTS = PushDefaults(
    title="EventDesk",
    body="You have a new notification.",
    icon="/icon.png",
    badge="/badge.png",
    url="/",
)


class TestParsePushPayload:
    def test_json_payload(self):
        notification = parse_push_payload(
            b'{"title": "Resolved", "body": "BTC hit 100k", "url": "/event/btc"}', DEFAULTS
        )
        assert notification.title == "Resolved"
        assert notification.body == "BTC hit 100k"
        assert notification.url == "/event/btc"
        assert notification.icon == DEFAULTS.icon

    def test_plain_text_becomes_body(self):
        notification = parse_push_payload("Market closing soon", DEFAULTS)
        assert notification.title == DEFAULTS.title
        assert notification.body == "Market closing soon"

    def test_empty_payload_uses_defaults(self):
        notification = parse_push_payload(None, DEFAULTS)
        assert notification.body == DEFAULTS.body
        assert notification.url == "/"

    def test_blank_fields_fall_back(self):
        notification = parse_push_payload('{"title": "  ", "body": 5}', DEFAULTS)
        assert notification.title == DEFAULTS.title
        assert notification.body == DEFAULTS.body


class TestClickAction:
    """Prefer an existing window over opening a new one."""

    def test_relative_url_resolved(self):
        assert resolve_notification_url("/event/x", ORIGIN) == "https://example.com/event/x"
        assert resolve_notification_url(None, ORIGIN) == "https://example.com/"

    def test_focus_window_already_at_target(self):
        windows = [
            ClientWindow("w1", "https://example.com/"),
            ClientWindow("w2", "https://example.com/event/x"),
        ]
        action = choose_click_action("/event/x", ORIGIN, windows)
        assert action.kind is ClickActionKind.FOCUS
        assert action.client_id == "w2"

    def test_navigate_same_origin_window(self):
        windows = [
            ClientWindow("other", "https://elsewhere.org/"),
            ClientWindow("w1", "https://example.com/portfolio"),
        ]
        action = choose_click_action("/event/x", ORIGIN, windows)
        assert action.kind is ClickActionKind.NAVIGATE
        assert action.client_id == "w1"
        assert action.url == "https://example.com/event/x"

    def test_open_when_no_window(self):
        action = choose_click_action("/event/x", ORIGIN, [])
        assert action.kind is ClickActionKind.OPEN
        assert action.client_id is None


class TestRenderNotificationUseCase:
    def test_url_made_absolute(self):
        use_case = RenderNotificationUseCase(DEFAULTS, ORIGIN)
        notification, action = use_case.execute('{"url": "/event/x"}')
        assert notification.url == "https://example.com/event/x"
        assert action.kind is ClickActionKind.OPEN
        assert action.url == notification.url
