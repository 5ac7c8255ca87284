"""
Cache tag registry.

Every cached output is labelled with one or more of these tags and every
mutation invalidates the tags it affects. Tag strings are part of the
cache contract: renaming one silently breaks invalidation.
"""

from typing import Iterable

from eventdesk.domain.events.locales import SUPPORTED_LOCALES

GUEST_SCOPE = "guest"

EVENTS_GLOBAL = "events:all"
ADMIN_CATEGORIES = "admin:categories"
SETTINGS = "settings"


def notifications(key: str) -> str:
    return f"notifications:{key}"


def activity(key: str) -> str:
    return f"activity:{key}"


def holders(key: str) -> str:
    return f"holders:{key}"


def events_list(scope: str) -> str:
    return f"events:{scope}"


def event(slug: str) -> str:
    return f"event:{slug}"


def main_tags(locale: str) -> str:
    return f"main-tags:{locale}"


def viewer_scope(user_id: str) -> str:
    """Scope used to partition per-viewer listing caches."""
    return user_id or GUEST_SCOPE


def listing_tags(user_id: str) -> list[str]:
    return [events_list(viewer_scope(user_id)), EVENTS_GLOBAL]


def event_page_tags(slug: str) -> list[str]:
    return [event(slug), EVENTS_GLOBAL]


# Invalidation sets, one per mutation.

def event_visibility_invalidations(slug: str) -> list[str]:
    return [EVENTS_GLOBAL, event(slug)]


def event_sync_settings_invalidations() -> list[str]:
    return [SETTINGS]


def theme_settings_invalidations() -> list[str]:
    return [SETTINGS]


def locale_settings_invalidations() -> list[str]:
    return [SETTINGS]


def category_translation_invalidations(
    admin_id: str, locales: Iterable[str] = SUPPORTED_LOCALES
) -> list[str]:
    tags = [ADMIN_CATEGORIES, EVENTS_GLOBAL, events_list(admin_id)]
    tags.extend(main_tags(locale) for locale in locales)
    return tags
