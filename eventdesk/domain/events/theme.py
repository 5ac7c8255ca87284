"""
Site theme presets, override validation and CSS rendering.

A theme is a preset id plus two override maps (light and dark) from
theme token to colour. Colours are restricted to hex and oklch().
Override maps are always kept in canonical token order so that stored
JSON and generated CSS are stable.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from eventdesk.domain.events.entities import SettingsSnapshot
from eventdesk.domain.events.errors import InvalidThemeSettingsError

THEME_TOKENS: tuple[str, ...] = (
    "yes",
    "yes-foreground",
    "no",
    "no-foreground",
    "background",
    "foreground",
    "card",
    "card-foreground",
    "card-hover",
    "popover",
    "popover-foreground",
    "primary",
    "primary-foreground",
    "secondary",
    "secondary-foreground",
    "muted",
    "muted-foreground",
    "accent",
    "accent-foreground",
    "destructive",
    "destructive-foreground",
    "border",
    "input",
    "input-hover",
    "ring",
    "chart-1",
    "chart-2",
    "chart-3",
    "chart-4",
    "chart-5",
    "sidebar",
    "sidebar-foreground",
    "sidebar-primary",
    "sidebar-primary-foreground",
    "sidebar-accent",
    "sidebar-accent-foreground",
    "sidebar-border",
    "sidebar-ring",
)
_THEME_TOKEN_SET = frozenset(THEME_TOKENS)

_NUMBER = r"[+-]?(?:\d+(?:\.\d+)?|\.\d+)"
HEX_COLOR_PATTERN = re.compile(r"^#(?:[0-9a-f]{3}|[0-9a-f]{6}|[0-9a-f]{8})$", re.IGNORECASE)
OKLCH_COLOR_PATTERN = re.compile(
    rf"^oklch\(\s*{_NUMBER}%?\s+{_NUMBER}\s+{_NUMBER}(?:\s*/\s*{_NUMBER}%?)?\s*\)$",
    re.IGNORECASE,
)

THEME_SETTINGS_GROUP = "theme"
THEME_PRESET_KEY = "preset"
THEME_LIGHT_JSON_KEY = "light_json"
THEME_DARK_JSON_KEY = "dark_json"

PRESET_LABEL = "Theme preset"
LIGHT_OVERRIDES_LABEL = "Light theme overrides"
DARK_OVERRIDES_LABEL = "Dark theme overrides"

ThemeOverrides = dict[str, str]


@dataclass(frozen=True)
class ThemePreset:
    id: str
    label: str
    description: str
    light: ThemeOverrides = field(default_factory=dict)
    dark: ThemeOverrides = field(default_factory=dict)


THEME_PRESETS: dict[str, ThemePreset] = {
    "kuest": ThemePreset(
        id="kuest",
        label="Kuest",
        description="Default Kuest palette.",
    ),
    "midnight": ThemePreset(
        id="midnight",
        label="Midnight",
        description="Cool blue-purple tones with deeper dark surfaces.",
        light={
            "primary": "oklch(0.52 0.18 262)",
            "chart-1": "oklch(0.59 0.24 290)",
            "chart-2": "oklch(0.57 0.18 240)",
            "chart-3": "oklch(0.48 0.16 215)",
            "chart-4": "oklch(0.72 0.16 310)",
        },
        dark={
            "background": "oklch(0.22 0.03 266)",
            "card": "oklch(0.26 0.03 262)",
            "card-hover": "oklch(0.3 0.04 262)",
            "popover": "oklch(0.22 0.03 266)",
            "primary": "oklch(0.76 0.18 285)",
            "primary-foreground": "oklch(0.16 0.02 270)",
            "ring": "oklch(0.62 0.08 285)",
            "chart-1": "oklch(0.7 0.19 300)",
            "chart-2": "oklch(0.66 0.17 255)",
            "chart-3": "oklch(0.64 0.17 225)",
            "chart-4": "oklch(0.72 0.16 330)",
            "chart-5": "oklch(0.76 0.14 200)",
        },
    ),
    "lime": ThemePreset(
        id="lime",
        label="Lime",
        description="High-energy green accent palette.",
        light={
            "primary": "oklch(0.67 0.2 145)",
            "primary-foreground": "oklch(0.2 0.03 145)",
            "yes": "oklch(0.74 0.2 146)",
            "yes-foreground": "oklch(0.28 0.07 147)",
            "ring": "oklch(0.64 0.11 146)",
            "chart-1": "oklch(0.72 0.23 145)",
            "chart-2": "oklch(0.66 0.19 175)",
            "chart-3": "oklch(0.57 0.15 205)",
            "chart-4": "oklch(0.77 0.2 120)",
        },
        dark={
            "background": "oklch(0.24 0.03 165)",
            "card": "oklch(0.28 0.03 165)",
            "card-hover": "oklch(0.31 0.04 165)",
            "popover": "oklch(0.24 0.03 165)",
            "primary": "oklch(0.78 0.2 145)",
            "primary-foreground": "oklch(0.2 0.03 145)",
            "secondary": "oklch(0.37 0.04 162)",
            "muted": "oklch(0.37 0.04 162)",
            "accent": "oklch(0.37 0.04 162)",
            "ring": "oklch(0.67 0.12 145)",
            "chart-1": "oklch(0.75 0.23 146)",
            "chart-2": "oklch(0.7 0.2 170)",
            "chart-3": "oklch(0.66 0.16 200)",
            "chart-4": "oklch(0.78 0.2 120)",
            "chart-5": "oklch(0.68 0.19 90)",
        },
    ),
}
DEFAULT_THEME_PRESET_ID = "kuest"


@dataclass(frozen=True)
class ThemeConfig:
    """A validated theme ready to be stored or rendered."""

    preset_id: str
    light: ThemeOverrides
    dark: ThemeOverrides

    @property
    def light_json(self) -> str:
        return format_theme_overrides_json(self.light)

    @property
    def dark_json(self) -> str:
        return format_theme_overrides_json(self.dark)

    @property
    def css_text(self) -> str:
        return build_theme_css_text(self.light, self.dark)


@dataclass(frozen=True)
class RuntimeTheme:
    theme: ThemeConfig
    source: str  # "settings" or "default"


def is_valid_color(value: str) -> bool:
    return bool(HEX_COLOR_PATTERN.match(value) or OKLCH_COLOR_PATTERN.match(value))


def _normalize_token_key(value: str) -> Optional[str]:
    trimmed = value.strip()
    normalized = trimmed[2:] if trimmed.startswith("--") else trimmed
    return normalized if normalized in _THEME_TOKEN_SET else None


def sort_theme_overrides(overrides: Mapping[str, str]) -> ThemeOverrides:
    return {token: overrides[token] for token in THEME_TOKENS if isinstance(overrides.get(token), str)}


def format_theme_overrides_json(overrides: Mapping[str, str]) -> str:
    return json.dumps(sort_theme_overrides(overrides), indent=2)


def validate_theme_preset_id(value: Optional[str]) -> Optional[str]:
    normalized = value.strip().lower() if isinstance(value, str) else ""
    return normalized if normalized in THEME_PRESETS else None


def parse_theme_overrides(value: Any, label: str) -> ThemeOverrides:
    """Validate an already-decoded override document.

    Raises:
        InvalidThemeSettingsError: On a non-object document, an unknown
            token, a non-string value or an unsupported colour.
    """
    if value is None:
        return {}

    if not isinstance(value, dict):
        raise InvalidThemeSettingsError(f"{label} must be a JSON object.")

    parsed: ThemeOverrides = {}
    for raw_key, raw_value in sorted(value.items()):
        key = _normalize_token_key(raw_key)
        if key is None:
            raise InvalidThemeSettingsError(f'Unsupported theme token: "{raw_key}".')
        if not isinstance(raw_value, str):
            raise InvalidThemeSettingsError(f'Theme token "{raw_key}" must be a string value.')
        color = raw_value.strip()
        if not is_valid_color(color):
            raise InvalidThemeSettingsError(
                f'Invalid color for "{raw_key}". Supported formats: hex and oklch().'
            )
        parsed[key] = color

    return sort_theme_overrides(parsed)


def parse_theme_overrides_json(raw: Optional[str], label: str) -> ThemeOverrides:
    normalized = raw.strip() if isinstance(raw, str) else ""
    if not normalized:
        return {}
    try:
        decoded = json.loads(normalized)
    except ValueError as exc:
        raise InvalidThemeSettingsError(f"{label} must be valid JSON.") from exc
    return parse_theme_overrides(decoded, label)


def validate_theme_settings(
    preset: Optional[str],
    light_json: Optional[str],
    dark_json: Optional[str],
    preset_label: str = PRESET_LABEL,
    light_label: str = LIGHT_OVERRIDES_LABEL,
    dark_label: str = DARK_OVERRIDES_LABEL,
) -> ThemeConfig:
    """Validate admin theme input into a ThemeConfig.

    An empty preset selects the default preset; an unknown one is rejected.
    """
    requested = preset.strip().lower() if isinstance(preset, str) else ""
    preset_id = validate_theme_preset_id(requested)
    if preset_id is None:
        if requested:
            raise InvalidThemeSettingsError(f"{preset_label} is invalid.")
        preset_id = DEFAULT_THEME_PRESET_ID

    light = parse_theme_overrides_json(light_json, light_label)
    dark = parse_theme_overrides_json(dark_json, dark_label)
    return ThemeConfig(preset_id=preset_id, light=light, dark=dark)


def _merge_overrides(base: Mapping[str, str], overrides: Mapping[str, str]) -> ThemeOverrides:
    merged = dict(base)
    merged.update({token: value for token, value in overrides.items() if token in _THEME_TOKEN_SET})
    return sort_theme_overrides(merged)


def build_preview_theme(preset_id: str, light: Mapping[str, str], dark: Mapping[str, str]) -> ThemeConfig:
    """Layer overrides on top of the preset palette."""
    preset = THEME_PRESETS[preset_id]
    return ThemeConfig(
        preset_id=preset_id,
        light=_merge_overrides(preset.light, light),
        dark=_merge_overrides(preset.dark, dark),
    )


def build_theme_css_text(light: Mapping[str, str], dark: Mapping[str, str]) -> str:
    blocks = []
    for selector, overrides in ((":root", light), (".dark", dark)):
        lines = [f"  --{token}: {overrides[token]};" for token in THEME_TOKENS if token in overrides]
        if lines:
            blocks.append(selector + " {\n" + "\n".join(lines) + "\n}")
    return "\n".join(blocks)


def default_theme() -> ThemeConfig:
    return ThemeConfig(preset_id=DEFAULT_THEME_PRESET_ID, light={}, dark={})


def resolve_runtime_theme(snapshot: Optional[SettingsSnapshot]) -> RuntimeTheme:
    """Resolve the theme served to visitors from stored settings.

    Falls back to the default preset when nothing is stored or the stored
    values no longer validate.
    """
    group = (snapshot or {}).get(THEME_SETTINGS_GROUP) or {}

    def stored(key: str) -> str:
        entry = group.get(key)
        return entry.value if entry is not None else ""

    preset, light_json, dark_json = (
        stored(THEME_PRESET_KEY),
        stored(THEME_LIGHT_JSON_KEY),
        stored(THEME_DARK_JSON_KEY),
    )
    if not (preset.strip() or light_json.strip() or dark_json.strip()):
        return RuntimeTheme(theme=default_theme(), source="default")

    try:
        theme = validate_theme_settings(
            preset,
            light_json,
            dark_json,
            preset_label="Theme preset in settings",
            light_label="Theme light_json in settings",
            dark_label="Theme dark_json in settings",
        )
    except InvalidThemeSettingsError:
        return RuntimeTheme(theme=default_theme(), source="default")

    return RuntimeTheme(theme=theme, source="settings")
