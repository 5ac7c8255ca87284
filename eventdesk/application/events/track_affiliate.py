"""
Use case: Record an affiliate link visit.

Input: affiliate code, requested redirect target
Output: AffiliateRedirect
Side effects: None here; the interface layer sets the referral cookie.
Failure cases: None. An unknown code or a lookup failure redirects home
    without a referral.
"""

import logging
import time
from typing import Callable, Optional

from eventdesk.application.events.dtos import AffiliateRedirect
from eventdesk.domain.events.ports import AffiliateRepository

logger = logging.getLogger(__name__)

HOME_PATH = "/"


def sanitize_redirect_target(target: Optional[str]) -> str:
    """Only same-site absolute paths are allowed; anything else goes home."""
    if target and target.startswith("/") and not target.startswith("//"):
        return target
    return HOME_PATH


class TrackAffiliateUseCase:
    def __init__(
        self,
        affiliate_repo: AffiliateRepository,
        clock_ms: Callable[[], int] = lambda: int(time.time() * 1000),
    ) -> None:
        self._affiliate_repo = affiliate_repo
        self._clock_ms = clock_ms

    def execute(self, code: str, target: Optional[str] = None) -> AffiliateRedirect:
        result = self._affiliate_repo.get_affiliate_by_code(code)
        if result.error:
            logger.warning("Affiliate lookup failed for code %s: %s", code, result.error)
            return AffiliateRedirect(location=HOME_PATH)
        if result.data is None:
            logger.info("Unknown affiliate code %s", code)
            return AffiliateRedirect(location=HOME_PATH)

        return AffiliateRedirect(
            location=sanitize_redirect_target(target),
            affiliate_code=result.data.affiliate_code,
            timestamp_ms=self._clock_ms(),
        )
