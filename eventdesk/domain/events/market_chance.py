"""
Display price resolution for markets.

Chooses which price a market card shows: the midpoint while the book is
tight, the last trade when the spread is too wide, and whatever single
side is available otherwise.
"""

import math
from typing import Optional

MAX_DISPLAY_SPREAD = 0.1


def _is_number(value: Optional[float]) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value)


def clamp_price(value: Optional[float]) -> float:
    """Clamp a price into [0, 1]; missing or non-finite values become 0."""
    if not _is_number(value):
        return 0.0
    return min(max(float(value), 0.0), 1.0)


def resolve_display_price(
    bid: Optional[float],
    ask: Optional[float],
    last_trade: Optional[float],
    midpoint: Optional[float] = None,
    max_spread: float = MAX_DISPLAY_SPREAD,
) -> Optional[float]:
    """Return the price to display for a market, or None if unknown.

    Args:
        bid: Best bid.
        ask: Best ask.
        last_trade: Last traded price.
        midpoint: Explicit midpoint, if the book publishes one.
        max_spread: Widest spread at which the midpoint is trusted.

    Returns:
        A price in [0, 1], or None when no price source is available.
    """
    has_bid = _is_number(bid)
    has_ask = _is_number(ask)
    has_midpoint = _is_number(midpoint)
    has_last_trade = _is_number(last_trade)

    if has_bid and has_ask:
        mid = midpoint if has_midpoint else (ask + bid) / 2
        spread = max(0.0, ask - bid)
        if spread <= max_spread:
            return clamp_price(mid)
        return clamp_price(last_trade) if has_last_trade else clamp_price(mid)

    if has_midpoint:
        return clamp_price(midpoint)

    if has_ask or has_bid:
        return clamp_price(ask if has_ask else bid)

    return clamp_price(last_trade) if has_last_trade else None
