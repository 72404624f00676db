"""Axis label thinning and price-range utilities for candle charts."""
from __future__ import annotations

import datetime as dt
from typing import Iterable, List, Optional, Sequence, Tuple

from .config import PRICE_PADDING
from .errors import EmptySeriesError


def should_show_label(current: dt.datetime, next_: Optional[dt.datetime]) -> bool:
    """Return True when ``current`` is the last bar of its month."""

    if next_ is None:
        return True
    return (current.year, current.month) != (next_.year, next_.month)


def select_labels(timestamps: Iterable[dt.datetime]) -> List[dt.datetime]:
    """Pick one x-axis label per calendar month.

    The sequence is walked with one element of lookahead; a timestamp is kept
    when the following one falls in a different (year, month), so each month
    is represented by its last bar and the final bar is always kept.
    """

    labels: List[dt.datetime] = []
    iterator = iter(timestamps)
    current = next(iterator, None)
    while current is not None:
        upcoming = next(iterator, None)
        if should_show_label(current, upcoming):
            labels.append(current)
        current = upcoming
    return labels


def price_range(
    highs: Sequence[float],
    lows: Sequence[float],
    padding: float = PRICE_PADDING,
) -> Tuple[float, float]:
    """Return padded ``(y_min, y_max)`` bounds for the price axis."""

    if len(highs) == 0 or len(lows) == 0:
        raise EmptySeriesError("Cannot compute a price range over zero bars.")
    return float(min(lows)) - padding, float(max(highs)) + padding
