"""Modular helpers for fetching price bars and rendering candlestick charts."""
from .config import (
    PRICE_COLUMNS,
    PRICE_PADDING,
    REQUIRED_COLUMNS,
    ChartConfig,
    Settings,
    load_settings,
)
from .data import fetch_candles, parse_candles, to_frame, validate_series
from .errors import (
    CandleChartError,
    ConfigError,
    DeserializationError,
    EmptySeriesError,
    InvalidRequestError,
    NetworkError,
    OutputError,
    RemoteStatusError,
    RenderError,
    ShapeMismatchError,
    ValidationError,
)
from .io_utils import ensure_outdir, save_image
from .models import CandlePoint, ChartResult, PriceBarSeries, Resolution
from .pipeline import lookback_window, run_pipeline
from .processing import price_range, select_labels, should_show_label
from .render import build_chart, iter_candle_points, render_chart, resolve_candle_color

__all__ = [
    "PRICE_COLUMNS",
    "PRICE_PADDING",
    "REQUIRED_COLUMNS",
    "ChartConfig",
    "Settings",
    "load_settings",
    "fetch_candles",
    "parse_candles",
    "to_frame",
    "validate_series",
    "CandleChartError",
    "ConfigError",
    "DeserializationError",
    "EmptySeriesError",
    "InvalidRequestError",
    "NetworkError",
    "OutputError",
    "RemoteStatusError",
    "RenderError",
    "ShapeMismatchError",
    "ValidationError",
    "ensure_outdir",
    "save_image",
    "CandlePoint",
    "ChartResult",
    "PriceBarSeries",
    "Resolution",
    "lookback_window",
    "run_pipeline",
    "price_range",
    "select_labels",
    "should_show_label",
    "build_chart",
    "iter_candle_points",
    "render_chart",
    "resolve_candle_color",
]
