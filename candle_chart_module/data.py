"""Data acquisition and validation helpers for candle chart generation."""
from __future__ import annotations

import datetime as dt
import logging
import numbers
import time
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd
import requests
from dateutil import tz

from .config import REQUIRED_COLUMNS, Settings
from .errors import (
    ConfigError,
    DeserializationError,
    InvalidRequestError,
    NetworkError,
    RemoteStatusError,
    ShapeMismatchError,
    ValidationError,
)
from .models import PriceBarSeries, Resolution

logger = logging.getLogger(__name__)

FLOAT_FIELDS = {"o": "opens", "h": "highs", "l": "lows", "c": "closes"}
INT_FIELDS = {"v": "volumes", "t": "timestamps"}
STATUS_OK = "ok"


def _redact(text: str, secret: str) -> str:
    return text.replace(secret, "***") if secret else text


def _get_with_retry(
    session: requests.Session,
    url: str,
    params: Dict[str, Any],
    settings: Settings,
    symbol: str,
) -> requests.Response:
    """Issue the GET, retrying transient transport failures a bounded number of times."""

    attempts = settings.retries + 1
    for attempt in range(1, attempts + 1):
        try:
            response = session.get(url, params=params, timeout=settings.timeout)
        except (requests.ConnectionError, requests.Timeout) as exc:
            reason = _redact(str(exc), settings.api_key)
            if attempt >= attempts:
                raise NetworkError(
                    f"Failed to fetch candles for {symbol!r} after {attempts} attempt(s): {reason}"
                ) from exc
            logger.warning(
                "Transient error fetching %s (attempt %d/%d): %s",
                symbol,
                attempt,
                attempts,
                reason,
            )
            time.sleep(settings.retry_backoff)
            continue
        except requests.RequestException as exc:
            reason = _redact(str(exc), settings.api_key)
            raise NetworkError(f"Request for {symbol!r} failed: {reason}") from exc

        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise NetworkError(
                f"Provider answered HTTP {response.status_code} for {symbol!r}."
            ) from exc
        return response

    raise AssertionError("unreachable")  # pragma: no cover


def _number_list(payload: Dict[str, Any], key: str, integral: bool) -> List[Any]:
    values = payload.get(key)
    if not isinstance(values, list):
        raise DeserializationError(f"Field {key!r} missing or not a list.")

    out: List[Any] = []
    for position, value in enumerate(values):
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise DeserializationError(
                f"Field {key!r} has non-numeric value {value!r} at position {position}."
            )
        if integral:
            if not float(value).is_integer():
                raise DeserializationError(
                    f"Field {key!r} has non-integer value {value!r} at position {position}."
                )
            out.append(int(value))
        else:
            out.append(float(value))
    return out


def parse_candles(payload: Any, symbol: Optional[str] = None) -> PriceBarSeries:
    """Turn a decoded candle response into a :class:`PriceBarSeries`.

    The status field is checked before the arrays because the provider omits
    them entirely for statuses such as ``no_data``.
    """

    if not isinstance(payload, dict):
        raise DeserializationError(
            f"Expected a JSON object, got {type(payload).__name__}."
        )

    status = payload.get("s")
    if not isinstance(status, str):
        raise DeserializationError("Field 's' missing or not a string.")
    if status != STATUS_OK:
        raise RemoteStatusError(status, symbol)

    fields: Dict[str, Any] = {"status": status}
    for key, name in FLOAT_FIELDS.items():
        fields[name] = tuple(_number_list(payload, key, integral=False))
    for key, name in INT_FIELDS.items():
        fields[name] = tuple(_number_list(payload, key, integral=True))
    return PriceBarSeries(**fields)


def fetch_candles(
    symbol: str,
    from_date: dt.datetime,
    to_date: dt.datetime,
    resolution: Resolution,
    settings: Settings,
    session: Optional[requests.Session] = None,
) -> PriceBarSeries:
    """Fetch one symbol's candles between ``from_date`` and ``to_date``."""

    if not symbol or not symbol.strip():
        raise InvalidRequestError("Symbol must be a non-empty string.")
    if from_date >= to_date:
        raise InvalidRequestError(
            f"from_date ({from_date.isoformat()}) must be before to_date ({to_date.isoformat()})."
        )
    if not settings.api_key:
        raise ConfigError("Finnhub API key is not configured.")

    url = f"{settings.base_url}/stock/candle"
    params = {
        "symbol": symbol,
        "resolution": resolution.value,
        "from": int(from_date.timestamp()),
        "to": int(to_date.timestamp()),
        "token": settings.api_key,
    }

    logger.info(
        "Fetching %s's price data from %s to %s",
        symbol,
        from_date.strftime("%d-%m-%Y"),
        to_date.strftime("%d-%m-%Y"),
    )

    http = session if session is not None else requests.Session()
    try:
        response = _get_with_retry(http, url, params, settings, symbol)
    finally:
        if session is None:
            http.close()

    try:
        payload = response.json()
    except ValueError as exc:
        raise DeserializationError(
            f"Response for {symbol!r} is not valid JSON: {exc}"
        ) from exc

    return parse_candles(payload, symbol)


def validate_series(series: PriceBarSeries) -> PriceBarSeries:
    """Validate shape, status and ordering before any indexed access."""

    lengths = series.lengths()
    if len(set(lengths.values())) > 1:
        raise ShapeMismatchError(lengths)

    if series.status != STATUS_OK:
        raise RemoteStatusError(series.status)

    stamps = series.timestamps
    for position in range(1, len(stamps)):
        if stamps[position] < stamps[position - 1]:
            raise ValidationError(
                f"Timestamps must be non-decreasing; {stamps[position]} follows "
                f"{stamps[position - 1]} at position {position}."
            )
    return series


def to_frame(series: PriceBarSeries, tzinfo: Optional[dt.tzinfo] = None) -> pd.DataFrame:
    """Validate the series and return it as a tz-aware OHLCV dataframe."""

    validate_series(series)
    zone = tzinfo if tzinfo is not None else tz.tzlocal()

    index = pd.to_datetime(
        np.asarray(series.timestamps, dtype="int64"), unit="s", utc=True
    ).tz_convert(zone)
    index.name = "Date"

    return pd.DataFrame(
        {
            "Open": np.asarray(series.opens, dtype=float),
            "High": np.asarray(series.highs, dtype=float),
            "Low": np.asarray(series.lows, dtype=float),
            "Close": np.asarray(series.closes, dtype=float),
            "Volume": np.asarray(series.volumes, dtype="int64"),
        },
        index=index,
        columns=REQUIRED_COLUMNS,
    )
