"""Domain types shared across the candle chart pipeline."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Tuple

from .errors import ConfigError


class Resolution(enum.Enum):
    """Bar width requested from the provider."""

    DAILY = "D"
    WEEKLY = "W"

    @classmethod
    def parse(cls, value: str) -> "Resolution":
        """Parse ``D``/``W`` or ``daily``/``weekly`` (case-insensitive)."""

        key = value.strip().upper()
        aliases = {"DAILY": cls.DAILY, "WEEKLY": cls.WEEKLY}
        if key in aliases:
            return aliases[key]
        try:
            return cls(key)
        except ValueError:
            raise ConfigError(f"Unsupported resolution: {value!r}") from None


@dataclass(frozen=True)
class PriceBarSeries:
    """Parallel OHLCV sequences as returned by the candle endpoint."""

    opens: Tuple[float, ...]
    highs: Tuple[float, ...]
    lows: Tuple[float, ...]
    closes: Tuple[float, ...]
    volumes: Tuple[int, ...]
    timestamps: Tuple[int, ...]
    status: str

    def __len__(self) -> int:
        return len(self.timestamps)

    def lengths(self) -> Dict[str, int]:
        return {
            "opens": len(self.opens),
            "highs": len(self.highs),
            "lows": len(self.lows),
            "closes": len(self.closes),
            "volumes": len(self.volumes),
            "timestamps": len(self.timestamps),
        }


@dataclass(frozen=True)
class CandlePoint:
    """One bar ready to be drawn, with its resolved colours."""

    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    fill_color: str
    outline_color: str


@dataclass(frozen=True)
class ChartResult:
    """Summary of a finished pipeline run."""

    symbol: str
    path: str
    n_bars: int
    labels: Tuple[datetime, ...]
    y_range: Tuple[float, float]
