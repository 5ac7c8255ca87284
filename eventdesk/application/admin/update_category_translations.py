"""
Use case: Edit the translated names of a category.

Input: admin user, tag id, locale -> name map (non-default locales)
Output: ActionResult with the stored translations
Side effects: Upserts or deletes tag_translations rows; invalidates
    admin:categories, events:all, events:<admin id> and main-tags:<locale>
    for every supported locale.
Failure cases: Non-admin user, unknown tag, storage error.
"""

import logging
from typing import Mapping, Optional

from eventdesk.application.admin.actions import ActionFailure, ActionResult, AdminAction
from eventdesk.domain.events import cache_tags
from eventdesk.domain.events.entities import User
from eventdesk.domain.events.ports import TagCache, TagRepository

logger = logging.getLogger(__name__)

TRANSLATIONS_FAILED_MESSAGE = "Failed to update category translations. Please try again."


class UpdateCategoryTranslationsUseCase(AdminAction):
    def __init__(self, tag_repo: TagRepository, cache: TagCache) -> None:
        super().__init__(cache)
        self._tag_repo = tag_repo

    def _perform(
        self, user: User, tag_id: int, translations: Mapping[str, Optional[str]]
    ) -> ActionResult:
        result = self._tag_repo.update_tag_translations(tag_id, translations)
        if result.error or result.data is None:
            logger.error("Error updating category translations: %s", result.error)
            return ActionResult.fail(ActionFailure.FAILED, TRANSLATIONS_FAILED_MESSAGE)

        self._invalidate(cache_tags.category_translation_invalidations(user.id))
        return ActionResult.ok(result.data)
