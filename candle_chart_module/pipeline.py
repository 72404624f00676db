"""End-to-end fetch, validate and render pipeline for a single symbol."""
from __future__ import annotations

import datetime as dt
import logging
import os
from typing import Optional, Tuple

import requests

from .config import ChartConfig, Settings
from .data import fetch_candles, to_frame, validate_series
from .io_utils import ensure_outdir, save_image
from .models import ChartResult
from .processing import price_range, select_labels
from .render import render_chart

logger = logging.getLogger(__name__)


def lookback_window(now: dt.datetime, days: int) -> Tuple[dt.datetime, dt.datetime]:
    """Return the ``(from_date, to_date)`` pair ending at ``now``."""

    return now - dt.timedelta(days=days), now


def output_path(out_dir: str, symbol: str) -> str:
    return os.path.join(out_dir, f"{symbol}.png")


def run_pipeline(
    symbol: str,
    settings: Settings,
    now: Optional[dt.datetime] = None,
    session: Optional[requests.Session] = None,
    chart_config: Optional[ChartConfig] = None,
) -> ChartResult:
    """Fetch, validate and render one symbol's chart, returning where it was written."""

    cfg = chart_config or ChartConfig()
    if now is None:
        now = dt.datetime.now(settings.tzinfo)
    from_date, to_date = lookback_window(now, settings.lookback_days)

    series = fetch_candles(
        symbol, from_date, to_date, settings.resolution, settings, session=session
    )
    validate_series(series)
    logger.info("%s's price data fetched successfully (%d bars)", symbol, len(series))

    df = to_frame(series, settings.tzinfo)
    labels = [ts.to_pydatetime() for ts in select_labels(df.index)]
    y_range = price_range(df["High"], df["Low"])
    logger.debug("Selected %d labels; y range %.2f..%.2f", len(labels), *y_range)

    logger.info("Plotting %s's price data", symbol)
    ensure_outdir(settings.output_dir)
    path = output_path(settings.output_dir, symbol)
    image = render_chart(
        df,
        labels,
        y_range,
        (from_date, to_date),
        f"{symbol} Stock Price",
        cfg,
    )
    save_image(image, path)
    logger.info("Saved chart %s", path)

    return ChartResult(
        symbol=symbol,
        path=path,
        n_bars=len(df),
        labels=tuple(labels),
        y_range=y_range,
    )
