#!/usr/bin/env python3
"""make_candle_chart.py
=================================

Entry-point script for rendering a one-year candlestick chart of a ticker
symbol from Finnhub candle data. The heavy lifting lives in the
``candle_chart_module`` package.

Example usage
-------------

* Chart the default symbol::

    FINNHUB_API_KEY=... python make_candle_chart.py

* Chart Microsoft into ``./static/MSFT.png``::

    python make_candle_chart.py MSFT

The script requires the following packages: ``requests``, ``pandas``,
``numpy``, ``matplotlib``, ``mplfinance``, ``pillow``, ``python-dateutil`` and
``python-dotenv``.
"""
from __future__ import annotations

from candle_chart_module.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
