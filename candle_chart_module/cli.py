"""Command line interface for rendering a candlestick chart of one symbol.

Example usage
-------------

* Chart the default symbol (AAPL) over the last year::

    FINNHUB_API_KEY=... python make_candle_chart.py

* Chart another symbol::

    python make_candle_chart.py MSFT

The chart is written to ``./static/<SYMBOL>.png`` unless
``CANDLE_CHART_OUTPUT_DIR`` points elsewhere.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .config import DEFAULT_SYMBOL, load_settings
from .errors import CandleChartError
from .pipeline import run_pipeline


LOGGER_NAME = "make_candle_chart"


def _symbol(value: str) -> str:
    symbol = value.strip().upper()
    if not symbol:
        raise argparse.ArgumentTypeError("symbol must not be empty")
    return symbol


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""

    parser = argparse.ArgumentParser(
        description="Render a one-year candlestick chart for a ticker symbol."
    )
    parser.add_argument(
        "symbol",
        nargs="?",
        type=_symbol,
        default=DEFAULT_SYMBOL,
        help=f"Ticker symbol (default: {DEFAULT_SYMBOL}).",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI utility."""

    args = parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    logger = logging.getLogger(LOGGER_NAME)

    raw_args = sys.argv[1:] if argv is None else argv
    if not raw_args:
        logger.info("No symbol provided, using default: %s", args.symbol)
    else:
        logger.info("Charting %s", args.symbol)

    try:
        settings = load_settings()
        result = run_pipeline(args.symbol, settings)
    except CandleChartError as exc:
        logger.error("Chart for %s failed: %s", args.symbol, exc)
        raise SystemExit(f"{type(exc).__name__}: {exc}") from exc

    print(f"Result has been saved to {result.path}")
    return 0
