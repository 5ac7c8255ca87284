"""
Locale and settings resolution.

Derives the enabled locales and the feature toggles from a persisted
settings snapshot. Settings values are always strings; the helpers here
parse them and fall back to safe defaults on malformed input.
No framework imports allowed.
"""

import json
from dataclasses import dataclass
from typing import Iterable, Optional

from eventdesk.domain.events.entities import SettingsSnapshot

SUPPORTED_LOCALES: tuple[str, ...] = ("en", "de")
DEFAULT_LOCALE = "en"

LOCALE_LABELS = {
    "en": "English",
    "de": "Deutsch",
}

I18N_SETTINGS_GROUP = "i18n"
ENABLED_LOCALES_KEY = "enabled_locales"
AUTOMATIC_TRANSLATIONS_KEY = "automatic_translations_enabled"

EVENTS_SETTINGS_GROUP = "events"
AUTO_DEPLOY_NEW_EVENTS_KEY = "auto_deploy_new_events"

TRUE_VALUES = frozenset({"true", "1", "yes", "on", "enabled"})
FALSE_VALUES = frozenset({"false", "0", "no", "off", "disabled"})


def is_supported_locale(value: object) -> bool:
    return isinstance(value, str) and value in SUPPORTED_LOCALES


def resolve_locale(value: Optional[str]) -> str:
    """Return ``value`` when it is a supported locale, else the default."""
    return value if is_supported_locale(value) else DEFAULT_LOCALE


def normalize_enabled_locales(locales: Iterable[str]) -> list[str]:
    """Keep supported locales in canonical order, default locale first."""
    requested = set(locales)
    normalized = [locale for locale in SUPPORTED_LOCALES if locale in requested]
    if DEFAULT_LOCALE not in normalized:
        normalized.insert(0, DEFAULT_LOCALE)
    return normalized


def ensure_enabled_locales(locales: Iterable[str]) -> list[str]:
    normalized = normalize_enabled_locales(locales)
    return normalized or [DEFAULT_LOCALE]


def parse_enabled_locales(raw: Optional[str]) -> list[str]:
    """Parse the stored enabled-locales value.

    Args:
        raw: JSON array of locale codes as stored in settings.

    Returns:
        Supported locales in canonical order. Missing or malformed input
        yields every supported locale; an empty array yields only the
        default locale.
    """
    if not raw:
        return list(SUPPORTED_LOCALES)

    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        return list(SUPPORTED_LOCALES)

    if not isinstance(parsed, list):
        return list(SUPPORTED_LOCALES)

    return ensure_enabled_locales(item for item in parsed if isinstance(item, str))


def serialize_enabled_locales(locales: Iterable[str]) -> str:
    return json.dumps(normalize_enabled_locales(locales))


def normalize_boolean_setting(value: Optional[str], fallback: bool) -> bool:
    """Interpret a stored boolean, returning ``fallback`` when unrecognised."""
    if not value:
        return fallback
    normalized = value.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    return fallback


def _setting_value(
    snapshot: Optional[SettingsSnapshot], group: str, key: str
) -> Optional[str]:
    if not snapshot:
        return None
    entry = snapshot.get(group, {}).get(key)
    return entry.value if entry is not None else None


def get_enabled_locales_from_settings(snapshot: Optional[SettingsSnapshot]) -> list[str]:
    return parse_enabled_locales(
        _setting_value(snapshot, I18N_SETTINGS_GROUP, ENABLED_LOCALES_KEY)
    )


def get_automatic_translations_enabled_from_settings(
    snapshot: Optional[SettingsSnapshot],
) -> bool:
    return normalize_boolean_setting(
        _setting_value(snapshot, I18N_SETTINGS_GROUP, AUTOMATIC_TRANSLATIONS_KEY),
        fallback=True,
    )


def get_auto_deploy_new_events_enabled_from_settings(
    snapshot: Optional[SettingsSnapshot],
) -> bool:
    return normalize_boolean_setting(
        _setting_value(snapshot, EVENTS_SETTINGS_GROUP, AUTO_DEPLOY_NEW_EVENTS_KEY),
        fallback=True,
    )


@dataclass(frozen=True)
class SiteSettings:
    """Typed view over a settings snapshot.

    Attributes:
        enabled_locales: Locales offered to visitors, default first.
        automatic_translations_enabled: Whether new content is machine translated.
        auto_deploy_new_events: Whether synced events go live without review.
    """

    enabled_locales: tuple[str, ...]
    automatic_translations_enabled: bool
    auto_deploy_new_events: bool

    @classmethod
    def from_snapshot(cls, snapshot: Optional[SettingsSnapshot]) -> "SiteSettings":
        return cls(
            enabled_locales=tuple(get_enabled_locales_from_settings(snapshot)),
            automatic_translations_enabled=get_automatic_translations_enabled_from_settings(
                snapshot
            ),
            auto_deploy_new_events=get_auto_deploy_new_events_enabled_from_settings(
                snapshot
            ),
        )
