"""
Use case: Resolve a push payload into the notification shown to the user.

Input: raw payload, open client windows
Output: PushNotification with an absolute URL, and the click action
Side effects: None.
Failure cases: None; malformed payloads fall back to plain text and defaults.
"""

from dataclasses import replace
from typing import Iterable, Union

from eventdesk.domain.notifications.push import (
    ClickAction,
    ClientWindow,
    PushDefaults,
    PushNotification,
    choose_click_action,
    parse_push_payload,
    resolve_notification_url,
)


class RenderNotificationUseCase:
    def __init__(self, defaults: PushDefaults, origin: str) -> None:
        self._defaults = defaults
        self._origin = origin

    def execute(
        self, raw: Union[bytes, str, None], windows: Iterable[ClientWindow] = ()
    ) -> tuple[PushNotification, ClickAction]:
        notification = parse_push_payload(raw, self._defaults)
        notification = replace(
            notification, url=resolve_notification_url(notification.url, self._origin)
        )
        return notification, choose_click_action(notification.url, self._origin, windows)
