from unittest.mock import MagicMock

import pandas as pd
import pytest
from dateutil import tz

from candle_chart_module.config import Settings


def make_payload(index: pd.DatetimeIndex, status: str = "ok") -> dict:
    n = len(index)
    opens = [100.0 + i for i in range(n)]
    closes = [o + (1.0 if i % 3 else -1.0) for i, o in enumerate(opens)]
    return {
        "o": opens,
        "c": closes,
        "h": [max(o, c) + 2.0 for o, c in zip(opens, closes)],
        "l": [min(o, c) - 2.0 for o, c in zip(opens, closes)],
        "v": [1000 + 10 * i for i in range(n)],
        "t": [int(ts.timestamp()) for ts in index],
        "s": status,
    }


def make_session(payload) -> MagicMock:
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    session = MagicMock()
    session.get.return_value = response
    return session


@pytest.fixture
def q1_index():
    """Business days of Q1 2023 at midnight UTC, as the provider stamps daily bars."""
    return pd.bdate_range("2023-01-02", "2023-03-31", tz="UTC")


@pytest.fixture
def settings(tmp_path):
    return Settings(
        api_key="test-key",
        output_dir=str(tmp_path / "static"),
        retry_backoff=0.0,
        tzinfo=tz.UTC,
    )


@pytest.fixture
def payload_for():
    return make_payload


@pytest.fixture
def session_for():
    return make_session
