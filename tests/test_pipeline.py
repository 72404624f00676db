import datetime as dt
import logging
import os
from dataclasses import replace

import pytest
from dateutil import tz
from PIL import Image

from candle_chart_module import cli
from candle_chart_module.errors import (
    ConfigError,
    EmptySeriesError,
    OutputError,
    RemoteStatusError,
    ShapeMismatchError,
)
from candle_chart_module.io_utils import ensure_outdir, save_image
from candle_chart_module.models import ChartResult
from candle_chart_module.pipeline import lookback_window, run_pipeline

NOW = dt.datetime(2023, 3, 31, tzinfo=tz.UTC)


def test_lookback_window():
    assert lookback_window(NOW, 89) == (dt.datetime(2023, 1, 1, tzinfo=tz.UTC), NOW)


def test_run_pipeline_writes_chart(settings, payload_for, session_for, q1_index):
    session = session_for(payload_for(q1_index))
    settings = replace(settings, lookback_days=89)

    result = run_pipeline("MSFT", settings, now=NOW, session=session)

    assert result.path == os.path.join(settings.output_dir, "MSFT.png")
    assert os.path.isfile(result.path)
    assert result.n_bars == len(q1_index)
    assert [label.month for label in result.labels] == [1, 2, 3]
    assert result.labels[-1] == q1_index[-1].to_pydatetime()
    with Image.open(result.path) as image:
        assert image.size == (1024, 768)

    params = session.get.call_args.kwargs["params"]
    assert params["from"] == int(dt.datetime(2023, 1, 1, tzinfo=tz.UTC).timestamp())
    assert params["to"] == int(NOW.timestamp())
    assert params["resolution"] == "D"


def test_run_pipeline_stops_before_rendering_on_shape_mismatch(
    settings, payload_for, session_for, q1_index
):
    payload = payload_for(q1_index[:5])
    payload["v"] = payload["v"][:4]

    with pytest.raises(ShapeMismatchError):
        run_pipeline("MSFT", settings, now=NOW, session=session_for(payload))
    assert not os.path.exists(settings.output_dir)


def test_run_pipeline_empty_series(settings, payload_for, session_for, q1_index):
    payload = payload_for(q1_index[:0])
    with pytest.raises(EmptySeriesError):
        run_pipeline("MSFT", settings, now=NOW, session=session_for(payload))


def test_run_pipeline_propagates_remote_status(settings, session_for):
    with pytest.raises(RemoteStatusError):
        run_pipeline("NOPE", settings, now=NOW, session=session_for({"s": "no_data"}))


def test_save_image_requires_existing_directory(tmp_path):
    image = Image.new("RGB", (4, 4), "white")
    with pytest.raises(OutputError) as excinfo:
        save_image(image, str(tmp_path / "missing" / "X.png"))
    assert isinstance(excinfo.value, IOError)


def test_ensure_outdir_creates_nested_directory(tmp_path):
    target = tmp_path / "a" / "b"
    assert ensure_outdir(str(target)) == str(target)
    assert target.is_dir()


def test_ensure_outdir_wraps_os_errors(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    with pytest.raises(OutputError):
        ensure_outdir(str(blocker / "sub"))


def test_parse_args_defaults_to_aapl():
    assert cli.parse_args([]).symbol == "AAPL"
    assert cli.parse_args([" msft "]).symbol == "MSFT"


def test_parse_args_rejects_extra_arguments():
    with pytest.raises(SystemExit):
        cli.parse_args(["MSFT", "AAPL"])


def test_main_reports_saved_path(monkeypatch, capsys):
    calls = {}

    def fake_run(symbol, settings):
        calls["symbol"] = symbol
        return ChartResult(symbol, "./static/TSLA.png", 3, (), (0.0, 1.0))

    monkeypatch.setattr(cli, "load_settings", lambda: object())
    monkeypatch.setattr(cli, "run_pipeline", fake_run)

    assert cli.main(["tsla"]) == 0
    assert calls["symbol"] == "TSLA"
    assert "Result has been saved to ./static/TSLA.png" in capsys.readouterr().out


def test_main_exits_non_zero_on_config_error(monkeypatch):
    def missing_key():
        raise ConfigError("Finnhub API key not found; set FINNHUB_API_KEY.")

    monkeypatch.setattr(cli, "load_settings", missing_key)

    with pytest.raises(SystemExit) as excinfo:
        cli.main([])
    assert str(excinfo.value.code).startswith("ConfigError: ")
    assert "FINNHUB_API_KEY" in str(excinfo.value.code)


@pytest.mark.parametrize(
    "argv, message",
    [
        ([], "No symbol provided, using default: AAPL"),
        (["nvda"], "Charting NVDA"),
    ],
)
def test_main_logs_symbol_choice(monkeypatch, caplog, argv, message):
    monkeypatch.setattr(cli, "load_settings", lambda: object())
    monkeypatch.setattr(
        cli,
        "run_pipeline",
        lambda symbol, settings: ChartResult(symbol, f"./static/{symbol}.png", 1, (), (0.0, 1.0)),
    )

    with caplog.at_level(logging.INFO, logger=cli.LOGGER_NAME):
        assert cli.main(argv) == 0

    assert message in caplog.messages
