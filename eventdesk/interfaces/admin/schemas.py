"""
Pydantic schemas for the admin API.

Request bodies are validated here. Every admin response uses the same
envelope: {success, data?, error?}.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ActionResponse(BaseModel):
    """Envelope returned by every admin action.

    Attributes:
        success: True when the action was applied.
        data: Action-specific payload on success.
        error: Human-readable message on failure.
    """

    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None


class EventVisibilityRequest(BaseModel):
    is_hidden: bool


class EventSyncSettingsRequest(BaseModel):
    auto_deploy_new_events: bool


class ThemeSettingsRequest(BaseModel):
    """Request schema for saving the site theme.

    Attributes:
        preset: Preset id; empty selects the default preset.
        light_json: JSON object of light-mode token overrides.
        dark_json: JSON object of dark-mode token overrides.
    """

    preset: Optional[str] = Field(default=None, max_length=50)
    light_json: Optional[str] = Field(default="{}", max_length=20000)
    dark_json: Optional[str] = Field(default="{}", max_length=20000)


class LocalesSettingsRequest(BaseModel):
    """Request schema for choosing the enabled locales.

    Attributes:
        enabled_locales: Locale codes; the default locale is always kept.
        automatic_translations_enabled: Optional toggle stored alongside.
    """

    enabled_locales: list[str] = Field(..., max_length=20)
    automatic_translations_enabled: Optional[bool] = None


class CategoryTranslationsRequest(BaseModel):
    """Request schema for category names per locale.

    Attributes:
        translations: Locale -> name. Empty or missing locales clear the
            stored translation.
    """

    translations: dict[str, Optional[str]] = Field(default_factory=dict)
