"""Configuration objects and shared constants for candle chart generation."""
from __future__ import annotations

import datetime as dt
import os
from dataclasses import dataclass, field
from typing import Callable, Final, List, Mapping, Optional, Tuple, TypeVar

from dateutil import tz
from dotenv import load_dotenv

from .errors import ConfigError
from .models import Resolution

PRICE_COLUMNS: Final[List[str]] = ["Open", "High", "Low", "Close"]
REQUIRED_COLUMNS: Final[List[str]] = PRICE_COLUMNS + ["Volume"]

PRICE_PADDING: Final[float] = 25.0
DEFAULT_SYMBOL: Final[str] = "AAPL"
DEFAULT_BASE_URL: Final[str] = "https://finnhub.io/api/v1"
DEFAULT_OUTPUT_DIR: Final[str] = "./static"

API_KEY_ENV: Final[str] = "FINNHUB_API_KEY"

_T = TypeVar("_T")


@dataclass(frozen=True)
class ChartConfig:
    """Container for rendering related configuration."""

    width: int = 1024
    height: int = 768
    dpi: int = 100
    bg: str = "white"
    grid_color: str = "#e6e6e6"
    up_color: str = "green"
    down_color: str = "red"
    candle_width_px: int = 15
    wick_width: float = 1.0
    label_format: str = "%d-%m-%Y"
    caption_font_size: int = 24
    # left, bottom, width, height as figure fractions
    plot_rect: Tuple[float, float, float, float] = (0.08, 0.1, 0.88, 0.8)


@dataclass(frozen=True)
class Settings:
    """Runtime settings resolved once at startup and passed to the pipeline."""

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    output_dir: str = DEFAULT_OUTPUT_DIR
    resolution: Resolution = Resolution.DAILY
    lookback_days: int = 365
    timeout: float = 10.0
    retries: int = 1
    retry_backoff: float = 0.5
    tzinfo: dt.tzinfo = field(default_factory=tz.tzlocal)


def _read(
    env: Mapping[str, str],
    name: str,
    convert: Callable[[str], _T],
    default: _T,
) -> _T:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return convert(raw.strip())
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid value for {name}: {raw!r}") from exc


def _zone(name: str) -> dt.tzinfo:
    zone = tz.gettz(name)
    if zone is None:
        raise ValueError(f"unknown time zone {name!r}")
    return zone


def load_settings(
    env: Optional[Mapping[str, str]] = None, dotenv: bool = True
) -> Settings:
    """Build :class:`Settings` from environment variables.

    When ``env`` is omitted the process environment is used, after loading a
    ``.env`` file if one is present.
    """

    if env is None:
        if dotenv:
            load_dotenv()
        env = os.environ

    api_key = (env.get(API_KEY_ENV) or "").strip()
    if not api_key:
        raise ConfigError(f"Finnhub API key not found; set {API_KEY_ENV}.")

    resolution = env.get("CANDLE_CHART_RESOLUTION")
    lookback_days = _read(env, "CANDLE_CHART_LOOKBACK_DAYS", int, 365)
    timeout = _read(env, "CANDLE_CHART_TIMEOUT", float, 10.0)
    retries = _read(env, "CANDLE_CHART_RETRIES", int, 1)
    if lookback_days <= 0:
        raise ConfigError("CANDLE_CHART_LOOKBACK_DAYS must be positive.")
    if timeout <= 0:
        raise ConfigError("CANDLE_CHART_TIMEOUT must be positive.")
    if retries < 0:
        raise ConfigError("CANDLE_CHART_RETRIES must not be negative.")

    return Settings(
        api_key=api_key,
        base_url=_read(env, "FINNHUB_BASE_URL", str, DEFAULT_BASE_URL).rstrip("/"),
        output_dir=_read(env, "CANDLE_CHART_OUTPUT_DIR", str, DEFAULT_OUTPUT_DIR),
        resolution=Resolution.parse(resolution) if resolution else Resolution.DAILY,
        lookback_days=lookback_days,
        timeout=timeout,
        retries=retries,
        tzinfo=_read(env, "CANDLE_CHART_TZ", _zone, tz.tzlocal()),
    )
