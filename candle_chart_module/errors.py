"""Exception hierarchy for the candle chart pipeline."""
from __future__ import annotations

from typing import Mapping, Optional


class CandleChartError(Exception):
    """Base exception for every pipeline failure."""


class ConfigError(CandleChartError):
    """Required configuration is missing or malformed."""


class NetworkError(CandleChartError):
    """The market-data provider could not be reached."""


class DeserializationError(CandleChartError):
    """The provider response did not have the expected shape."""


class RemoteStatusError(CandleChartError):
    """The provider reported a non-``ok`` status."""

    def __init__(self, status: str, symbol: Optional[str] = None) -> None:
        self.status = status
        self.symbol = symbol
        target = f" for {symbol!r}" if symbol else ""
        super().__init__(f"Provider returned status {status!r}{target}.")


class ValidationError(CandleChartError):
    """A price-bar series failed validation."""


class ShapeMismatchError(ValidationError):
    """Parallel price-bar sequences have different lengths."""

    def __init__(self, lengths: Mapping[str, int]) -> None:
        self.lengths = dict(lengths)
        detail = ", ".join(f"{name}={size}" for name, size in self.lengths.items())
        super().__init__(f"Price-bar sequences differ in length: {detail}")


class EmptySeriesError(ValidationError):
    """An operation needs at least one bar but got none."""


class RenderError(CandleChartError):
    """Drawing the chart failed."""


class OutputError(CandleChartError, OSError):
    """The chart could not be written to disk."""


class InvalidRequestError(CandleChartError, ValueError):
    """A fetch was requested with an empty symbol or an inverted date range."""
