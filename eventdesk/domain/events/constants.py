"""
Shared constants for the events bounded context.

All magic strings used by the listing pipeline live here.
"""

DEFAULT_ERROR_MESSAGE = "Internal server error. Try again in a few moments."

TRENDING_TAG = "trending"
NEW_TAG = "new"
SPORTS_TAG = "sports"
CRYPTO_TAG = "crypto"
EARNINGS_TAG = "earnings"
ALL_TAG = "all"

# Synthetic tags select a ranking mode, not a row in the tags table.
SYNTHETIC_TAGS = frozenset({TRENDING_TAG, NEW_TAG})

HIDE_FROM_NEW_TAG_SLUG = "hide-from-new"

STATUS_ACTIVE = "active"
STATUS_RESOLVED = "resolved"
LISTING_STATUSES = (STATUS_ACTIVE, STATUS_RESOLVED)

FREQUENCY_ALL = "all"

SPORTS_SECTION_GAMES = "games"
SPORTS_SECTION_PROPS = "props"

EVENTS_PAGE_SIZE = 40
# Deeper pages are served as the last reachable page.
MAX_EVENTS_OFFSET = 100_000
RELATED_EVENTS_LIMIT = 3
FALLBACK_MAIN_TAG = "World"

MARKET_SEARCH_MIN_QUERY = 2
MARKET_SEARCH_DEFAULT_LIMIT = 8
MARKET_SEARCH_MAX_LIMIT = 20
MARKET_STATUS_MAX_IDS = 500
