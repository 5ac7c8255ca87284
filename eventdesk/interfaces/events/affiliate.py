"""
Affiliate link router.

Mounted at the site root, outside the JSON API prefix, so that share
links look like /r/<code>.
"""

import json
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse

from eventdesk.application.events.dtos import AffiliateRedirect
from eventdesk.application.events.track_affiliate import TrackAffiliateUseCase
from eventdesk.core.config import settings
from eventdesk.interfaces.events.dependencies import get_track_affiliate_use_case

AFFILIATE_COOKIE_NAME = "platform_affiliate"
AFFILIATE_COOKIE_MAX_AGE = 60 * 60 * 24 * 30

router = APIRouter(tags=["affiliate"])


def affiliate_cookie_value(redirect: AffiliateRedirect) -> str:
    """Encode the referral cookie payload as URL-encoded compact JSON."""
    payload = {"affiliateCode": redirect.affiliate_code, "timestamp": redirect.timestamp_ms}
    return quote(json.dumps(payload, separators=(",", ":")))


@router.get(
    "/r/{code}",
    response_class=RedirectResponse,
    status_code=307,
    summary="Follow an affiliate link",
    description=(
        "Store the referral in a cookie and redirect to the requested "
        "same-site path. Unknown codes redirect home without a cookie."
    ),
)
def follow_affiliate_link(
    code: str,
    to: Optional[str] = Query(default=None, max_length=2048),
    use_case: TrackAffiliateUseCase = Depends(get_track_affiliate_use_case),
) -> RedirectResponse:
    """Redirect an affiliate visit, recording the referral."""
    redirect = use_case.execute(code, to)
    response = RedirectResponse(url=redirect.location, status_code=307)
    if redirect.affiliate_code is None:
        return response

    response.set_cookie(
        key=AFFILIATE_COOKIE_NAME,
        value=affiliate_cookie_value(redirect),
        max_age=AFFILIATE_COOKIE_MAX_AGE,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return response
