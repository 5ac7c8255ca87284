"""Page paths for events, routing sports events under /sports."""

from typing import Optional


def _path_segment(value: Optional[str]) -> Optional[str]:
    normalized = (value or "").strip().lower()
    return normalized or None


def resolve_sports_event_base_path(
    sports_sport_slug: Optional[str], sports_event_slug: Optional[str]
) -> Optional[str]:
    sport = _path_segment(sports_sport_slug)
    event = _path_segment(sports_event_slug)
    if sport and event:
        return f"/sports/{sport}/{event}"
    return None


def resolve_event_page_path(
    slug: str,
    sports_sport_slug: Optional[str] = None,
    sports_event_slug: Optional[str] = None,
) -> str:
    base = resolve_sports_event_base_path(sports_sport_slug, sports_event_slug)
    return base or f"/event/{slug}"


def resolve_event_market_path(
    slug: str,
    market_slug: str,
    sports_sport_slug: Optional[str] = None,
    sports_event_slug: Optional[str] = None,
) -> str:
    base = resolve_sports_event_base_path(sports_sport_slug, sports_event_slug)
    if base:
        return f"{base}/{market_slug}"
    return f"/event/{slug}/{market_slug}"
