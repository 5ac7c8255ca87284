"""
Shared result type and guard for admin actions.

Admin actions never raise to their caller. Each returns an ActionResult
saying whether the mutation happened and, if not, why.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from eventdesk.domain.events.entities import User
from eventdesk.domain.events.ports import TagCache

logger = logging.getLogger(__name__)

UNAUTHORIZED_ADMIN_MESSAGE = "Unauthorized. Admin access required."
UNAUTHENTICATED_MESSAGE = "Unauthenticated."
INVALID_INPUT_MESSAGE = "Invalid input."
UNEXPECTED_ERROR_MESSAGE = "Internal server error. Please try again."


class ActionFailure(Enum):
    """Why an admin action did not complete."""

    UNAUTHORIZED = "unauthorized"
    INVALID = "invalid"
    FAILED = "failed"


@dataclass(frozen=True)
class ActionResult:
    """Outcome of an admin action.

    Attributes:
        success: True when the mutation was applied.
        data: Action-specific payload on success.
        error: Human-readable message on failure.
        reason: Failure category, used to pick an HTTP status.
    """

    success: bool
    data: Any = None
    error: Optional[str] = None
    reason: Optional[ActionFailure] = None

    @classmethod
    def ok(cls, data: Any = None) -> "ActionResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, reason: ActionFailure, error: str) -> "ActionResult":
        return cls(success=False, error=error, reason=reason)


class AdminAction(ABC):
    """Template for an admin-only mutation followed by cache invalidation.

    Subclasses implement ``_perform``. The guard rejects non-admin users,
    and any unexpected exception is logged and reported as a failure.
    """

    unauthorized_message: str = UNAUTHORIZED_ADMIN_MESSAGE

    def __init__(self, cache: TagCache) -> None:
        self._cache = cache

    def execute(self, user: Optional[User], *args: Any, **kwargs: Any) -> ActionResult:
        if user is None or not user.is_admin:
            logger.warning(
                "Rejected %s for non-admin user %s",
                type(self).__name__,
                user.id if user else None,
            )
            return ActionResult.fail(ActionFailure.UNAUTHORIZED, self.unauthorized_message)

        try:
            return self._perform(user, *args, **kwargs)
        except Exception:
            logger.exception("Admin action %s failed", type(self).__name__)
            return ActionResult.fail(ActionFailure.FAILED, UNEXPECTED_ERROR_MESSAGE)

    @abstractmethod
    def _perform(self, user: User, *args: Any, **kwargs: Any) -> ActionResult:
        raise NotImplementedError

    def _invalidate(self, tags: list[str]) -> None:
        dropped = self._cache.invalidate(*tags)
        logger.info("Invalidated cache tags %s (%d entries)", tags, dropped)
