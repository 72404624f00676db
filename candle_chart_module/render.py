"""Rendering helpers for candlestick chart creation."""
from __future__ import annotations

import datetime as dt
import io
from typing import Iterator, Sequence, Tuple

import matplotlib

matplotlib.use("Agg")

import matplotlib.dates as mdates
import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.ticker import FixedLocator
import mplfinance as mpf
import pandas as pd
from PIL import Image

from .config import PRICE_COLUMNS, ChartConfig
from .errors import EmptySeriesError, RenderError
from .models import CandlePoint


def resolve_candle_color(open_: float, close: float, cfg: ChartConfig) -> Tuple[str, str]:
    """Return ``(fill, outline)``; only a strictly higher close counts as up."""

    color = cfg.up_color if close > open_ else cfg.down_color
    return color, color


def iter_candle_points(df: pd.DataFrame, cfg: ChartConfig) -> Iterator[CandlePoint]:
    """Yield one coloured :class:`CandlePoint` per row, in index order."""

    rows = df.loc[:, PRICE_COLUMNS].itertuples(index=False, name=None)
    for timestamp, (open_, high, low, close) in zip(df.index, rows):
        fill, outline = resolve_candle_color(open_, close, cfg)
        yield CandlePoint(
            timestamp=timestamp.to_pydatetime(),
            open=float(open_),
            high=float(high),
            low=float(low),
            close=float(close),
            fill_color=fill,
            outline_color=outline,
        )


def _make_style(cfg: ChartConfig) -> dict:
    market_colors = mpf.make_marketcolors(
        up=cfg.up_color,
        down=cfg.down_color,
        edge="inherit",
        wick="inherit",
    )
    rc = {
        "figure.facecolor": cfg.bg,
        "savefig.facecolor": cfg.bg,
        "axes.facecolor": cfg.bg,
        "axes.grid": True,
    }
    return mpf.make_mpf_style(
        marketcolors=market_colors,
        facecolor=cfg.bg,
        figcolor=cfg.bg,
        gridcolor=cfg.grid_color,
        gridstyle="-",
        y_on_right=False,
        rc=rc,
    )


def _candle_width(x_domain: Tuple[dt.datetime, dt.datetime], cfg: ChartConfig) -> float:
    """Convert the configured pixel width of a candle into date units."""

    start, end = (mdates.date2num(value) for value in x_domain)
    axes_px = cfg.width * cfg.plot_rect[2]
    return cfg.candle_width_px * (end - start) / axes_px


def build_chart(
    df: pd.DataFrame,
    labels: Sequence[dt.datetime],
    y_range: Tuple[float, float],
    x_domain: Tuple[dt.datetime, dt.datetime],
    caption: str,
    cfg: ChartConfig,
) -> Tuple[Figure, Axes]:
    """Draw the candlestick chart and return the open figure and its axes.

    The caller is responsible for closing the figure.
    """

    if df.empty:
        raise EmptySeriesError("Cannot render a chart without bars.")

    points = list(iter_candle_points(df, cfg))
    overrides = [point.fill_color for point in points]
    zone = getattr(df.index, "tz", None)

    fig = mpf.figure(
        style=_make_style(cfg),
        figsize=(cfg.width / cfg.dpi, cfg.height / cfg.dpi),
        dpi=cfg.dpi,
    )
    try:
        ax = fig.add_axes(list(cfg.plot_rect))
        mpf.plot(
            df,
            ax=ax,
            type="candle",
            volume=False,
            show_nontrading=True,
            marketcolor_overrides=overrides,
            update_width_config={
                "candle_width": _candle_width(x_domain, cfg),
                "candle_linewidth": cfg.wick_width,
            },
        )

        ax.set_xlim(mdates.date2num(x_domain[0]), mdates.date2num(x_domain[1]))
        ax.set_ylim(*y_range)
        ax.xaxis.set_major_locator(FixedLocator(mdates.date2num(list(labels))))
        ax.xaxis.set_major_formatter(mdates.DateFormatter(cfg.label_format, tz=zone))
        ax.grid(True, color=cfg.grid_color, linestyle="-")
        ax.set_title(caption, fontsize=cfg.caption_font_size)
    except Exception as exc:
        plt.close(fig)
        raise RenderError(f"Failed to draw chart {caption!r}: {exc}") from exc

    return fig, ax


def render_chart(
    df: pd.DataFrame,
    labels: Sequence[dt.datetime],
    y_range: Tuple[float, float],
    x_domain: Tuple[dt.datetime, dt.datetime],
    caption: str,
    cfg: ChartConfig,
) -> Image.Image:
    """Render the candlestick chart into a PIL image of ``cfg.width x cfg.height``."""

    fig, _ = build_chart(df, labels, y_range, x_domain, caption, cfg)
    buf = io.BytesIO()
    try:
        fig.savefig(buf, format="png", dpi=cfg.dpi, facecolor=cfg.bg)
        buf.seek(0)
        image = Image.open(buf).convert("RGB")
        if image.size != (cfg.width, cfg.height):
            image = image.resize((cfg.width, cfg.height), Image.Resampling.BICUBIC)
    except Exception as exc:
        raise RenderError(f"Failed to rasterise chart {caption!r}: {exc}") from exc
    finally:
        plt.close(fig)
    return image
