"""
FastAPI router for admin actions.

Admin use cases never raise; they return an ActionResult which this
router maps to an HTTP status:

- unauthorized -> 401
- invalid input -> 400
- failure -> 500
"""

from typing import Any, Callable, Optional

from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import JSONResponse

from eventdesk.application.admin.actions import ActionFailure, ActionResult
from eventdesk.application.admin.list_admin_events import ListAdminEventsUseCase
from eventdesk.application.admin.update_category_translations import (
    UpdateCategoryTranslationsUseCase,
)
from eventdesk.application.admin.update_event_sync_settings import (
    UpdateEventSyncSettingsUseCase,
)
from eventdesk.application.admin.update_event_visibility import UpdateEventVisibilityUseCase
from eventdesk.application.admin.update_locales_settings import UpdateLocalesSettingsUseCase
from eventdesk.application.admin.update_theme_settings import UpdateThemeSettingsUseCase
from eventdesk.application.events.dtos import ListEventsQuery
from eventdesk.domain.events.entities import User
from eventdesk.interfaces.admin.dependencies import (
    get_list_admin_events_use_case,
    get_update_category_translations_use_case,
    get_update_event_sync_settings_use_case,
    get_update_event_visibility_use_case,
    get_update_locales_settings_use_case,
    get_update_theme_settings_use_case,
)
from eventdesk.interfaces.admin.schemas import (
    ActionResponse,
    CategoryTranslationsRequest,
    EventSyncSettingsRequest,
    EventVisibilityRequest,
    LocalesSettingsRequest,
    ThemeSettingsRequest,
)
from eventdesk.interfaces.events.dependencies import get_current_user
from eventdesk.interfaces.events.schemas import EventCardSchema

router = APIRouter(prefix="/admin", tags=["admin"])

FAILURE_STATUS = {
    ActionFailure.UNAUTHORIZED: 401,
    ActionFailure.INVALID: 400,
    ActionFailure.FAILED: 500,
}

ACTION_RESPONSES = {
    400: {"model": ActionResponse},
    401: {"model": ActionResponse},
    500: {"model": ActionResponse},
}


def _to_response(
    result: ActionResult, serialize: Optional[Callable[[Any], Any]] = None
) -> JSONResponse:
    """Map an ActionResult to its HTTP response."""
    if not result.success:
        return JSONResponse(
            status_code=FAILURE_STATUS.get(result.reason, 500),
            content={"success": False, "error": result.error},
        )

    content: dict[str, Any] = {"success": True}
    if result.data is not None:
        content["data"] = serialize(result.data) if serialize else result.data
    return JSONResponse(status_code=200, content=content)


@router.get(
    "/events",
    response_model=ActionResponse,
    responses=ACTION_RESPONSES,
    summary="Admin events table",
    description="A page of events for moderation, hidden events included.",
)
def list_admin_events(
    tag: str = Query(default="all", max_length=100),
    search: str = Query(default="", max_length=200),
    status: str = Query(default="active", max_length=20),
    offset: int = Query(default=0, ge=0),
    user: Optional[User] = Depends(get_current_user),
    use_case: ListAdminEventsUseCase = Depends(get_list_admin_events_use_case),
) -> JSONResponse:
    """List events for the admin dashboard."""
    query = ListEventsQuery(tag=tag, search=search.strip(), status=status, offset=offset)
    result = use_case.execute(user, query)
    return _to_response(
        result,
        lambda cards: [EventCardSchema.model_validate(card).model_dump(mode="json") for card in cards],
    )


@router.patch(
    "/events/{event_id}/visibility",
    response_model=ActionResponse,
    responses=ACTION_RESPONSES,
    summary="Hide or show an event",
)
def update_event_visibility(
    request: EventVisibilityRequest,
    event_id: str = Path(..., max_length=100),
    user: Optional[User] = Depends(get_current_user),
    use_case: UpdateEventVisibilityUseCase = Depends(get_update_event_visibility_use_case),
) -> JSONResponse:
    """Toggle whether an event appears in public listings."""
    return _to_response(use_case.execute(user, event_id, request.is_hidden))


@router.put(
    "/settings/event-sync",
    response_model=ActionResponse,
    responses=ACTION_RESPONSES,
    summary="Update event sync settings",
)
def update_event_sync_settings(
    request: EventSyncSettingsRequest,
    user: Optional[User] = Depends(get_current_user),
    use_case: UpdateEventSyncSettingsUseCase = Depends(get_update_event_sync_settings_use_case),
) -> JSONResponse:
    """Toggle automatic deployment of newly synced events."""
    return _to_response(use_case.execute(user, request.auto_deploy_new_events))


@router.put(
    "/settings/theme",
    response_model=ActionResponse,
    responses=ACTION_RESPONSES,
    summary="Update the site theme",
)
def update_theme_settings(
    request: ThemeSettingsRequest,
    user: Optional[User] = Depends(get_current_user),
    use_case: UpdateThemeSettingsUseCase = Depends(get_update_theme_settings_use_case),
) -> JSONResponse:
    """Validate and store the theme preset and overrides."""
    return _to_response(
        use_case.execute(user, request.preset, request.light_json, request.dark_json)
    )


@router.put(
    "/settings/locales",
    response_model=ActionResponse,
    responses=ACTION_RESPONSES,
    summary="Update enabled locales",
)
def update_locales_settings(
    request: LocalesSettingsRequest,
    user: Optional[User] = Depends(get_current_user),
    use_case: UpdateLocalesSettingsUseCase = Depends(get_update_locales_settings_use_case),
) -> JSONResponse:
    """Choose which locales the site offers."""
    return _to_response(
        use_case.execute(
            user, request.enabled_locales, request.automatic_translations_enabled
        )
    )


@router.put(
    "/categories/{tag_id}/translations",
    response_model=ActionResponse,
    responses=ACTION_RESPONSES,
    summary="Update category translations",
)
def update_category_translations(
    request: CategoryTranslationsRequest,
    tag_id: int = Path(..., ge=1),
    user: Optional[User] = Depends(get_current_user),
    use_case: UpdateCategoryTranslationsUseCase = Depends(
        get_update_category_translations_use_case
    ),
) -> JSONResponse:
    """Store translated names of a category."""
    return _to_response(use_case.execute(user, tag_id, request.translations))
