"""
Push notification payload handling.

Parses the payload delivered with a web push message and decides what a
notification click should do with the browser windows already open.
No framework imports allowed.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Union
from urllib.parse import urljoin, urlsplit


@dataclass(frozen=True)
class PushDefaults:
    """Values used for fields a payload leaves out."""

    title: str
    body: str
    icon: str
    badge: str
    url: str


@dataclass(frozen=True)
class PushNotification:
    title: str
    body: str
    icon: str
    badge: str
    url: str


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def parse_push_payload(
    raw: Union[bytes, str, None], defaults: PushDefaults
) -> PushNotification:
    """Build a notification from a push payload.

    A JSON object may carry title, body, icon, badge and url. Any other
    payload is shown as plain text in the notification body.
    """
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    text = (raw or "").strip()

    data: dict = {}
    if text:
        try:
            decoded = json.loads(text)
        except ValueError:
            decoded = None
        if isinstance(decoded, dict):
            data = decoded
        else:
            data = {"body": text}

    return PushNotification(
        title=_text(data.get("title")) or defaults.title,
        body=_text(data.get("body")) or defaults.body,
        icon=_text(data.get("icon")) or defaults.icon,
        badge=_text(data.get("badge")) or defaults.badge,
        url=_text(data.get("url")) or defaults.url,
    )


def resolve_notification_url(url: Optional[str], origin: str) -> str:
    """Resolve a possibly relative notification URL against the site origin."""
    return urljoin(origin.rstrip("/") + "/", url or "/")


def _same_origin(left: str, right: str) -> bool:
    a, b = urlsplit(left), urlsplit(right)
    return (a.scheme, a.netloc) == (b.scheme, b.netloc)


class ClickActionKind(Enum):
    FOCUS = "focus"
    NAVIGATE = "navigate"
    OPEN = "open"


@dataclass(frozen=True)
class ClientWindow:
    """An open browser window controlled by the site."""

    id: str
    url: str


@dataclass(frozen=True)
class ClickAction:
    kind: ClickActionKind
    url: str
    client_id: Optional[str] = None


def choose_click_action(
    url: Optional[str], origin: str, windows: Iterable[ClientWindow]
) -> ClickAction:
    """Pick how to surface ``url`` after a notification click.

    Prefers focusing a window already showing the target, then navigating
    any same-origin window, and only then opening a new window.
    """
    target = resolve_notification_url(url, origin)
    windows = list(windows)

    for window in windows:
        if window.url == target:
            return ClickAction(ClickActionKind.FOCUS, target, window.id)

    for window in windows:
        if _same_origin(window.url, target):
            return ClickAction(ClickActionKind.NAVIGATE, target, window.id)

    return ClickAction(ClickActionKind.OPEN, target)
