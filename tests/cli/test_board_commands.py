from __future__ import annotations

import json

import pytest
from loguru import logger
from typer.testing import CliRunner

from tickerboard.cli import board as board_module
from tickerboard.cli.constants import FETCH_ERROR_EXIT_CODE, VALIDATION_EXIT_CODE
from tickerboard.cli.main import create_app
from tickerboard.core.market import Market


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    for name in ("TICKERBOARD_LOGGING_LEVEL", "TICKERBOARD_REFRESH_INTERVAL", "TICKERBOARD_LOGGING_FILE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    yield
    # the CLI points the log sink at the runner's stderr, which is closed afterwards
    logger.remove()


@pytest.fixture
def stub_market(monkeypatch, stub, client_factory):
    markets: list[Market] = []

    def factory(config):
        market = Market(config=config, client=client_factory(stub))
        markets.append(market)
        return market

    monkeypatch.setattr(board_module, "get_market", factory)
    return markets


def test_yahoo_table_output(runner, stub_market) -> None:
    app = create_app()
    result = runner.invoke(app, ["--no-color", "yahoo"])

    assert result.exit_code == 0, result.output
    assert "Dow" in result.output
    assert "38654.42" in result.output
    assert "U.S. markets open" in result.output
    assert "SSE Composite" not in result.output


def test_qq_jsonl_output(runner, stub_market) -> None:
    app = create_app()
    result = runner.invoke(app, ["--format", "jsonl", "qq"])

    assert result.exit_code == 0, result.output
    line = next(line for line in result.output.splitlines() if line.startswith("{"))
    payload = json.loads(line)
    assert payload["vendor"] == "qq"
    assert payload["ok"] is True
    assert payload["records"]["szzs"] == {"name": "SSE Composite", "latest": "3012.34", "change": "15.6", "percent": "0.52%"}
    assert payload["records"]["oil"]["change"] == "-2.3%"


def test_fetch_error_exits_with_code(runner, stub_market, stub) -> None:
    stub.quote_payload = {"unexpected": True}
    app = create_app()

    result = runner.invoke(app, ["--format", "jsonl", "yahoo"])

    assert result.exit_code == FETCH_ERROR_EXIT_CODE
    assert "FETCH_ERROR" in result.output
    assert "Error fetching market data" in result.output


def test_table_shows_error_banner(runner, stub_market, stub) -> None:
    stub.quote_error = True
    app = create_app()

    result = runner.invoke(app, ["--no-color", "netease"])

    assert result.exit_code == FETCH_ERROR_EXIT_CODE
    assert "error" in result.output
    assert "SSE Composite" in result.output


def test_invalid_format_rejected(runner, stub_market) -> None:
    app = create_app()
    result = runner.invoke(app, ["--format", "xml", "yahoo"])

    assert result.exit_code == VALIDATION_EXIT_CODE
    assert stub_market == []


def test_invalid_log_level_rejected(runner, stub_market) -> None:
    app = create_app()
    result = runner.invoke(app, ["--log-level", "verbose", "yahoo"])

    assert result.exit_code == VALIDATION_EXIT_CODE
    assert stub_market == []


@pytest.mark.parametrize("level", ["warn", "fatal", "panic", "debug"])
def test_log_level_aliases_accepted(runner, stub_market, level) -> None:
    app = create_app()
    result = runner.invoke(app, ["--log-level", level, "--format", "jsonl", "yahoo"])

    assert result.exit_code == 0, result.output


def test_negative_watch_interval_rejected(runner, stub_market) -> None:
    app = create_app()
    result = runner.invoke(app, ["yahoo", "--watch", "-1"])

    assert result.exit_code == VALIDATION_EXIT_CODE


def test_watch_lines_stops_after_count(runner, stub_market, stub, monkeypatch) -> None:
    sleeps: list[float] = []
    monkeypatch.setattr(board_module.time, "sleep", sleeps.append)
    app = create_app()

    result = runner.invoke(app, ["--format", "jsonl", "eastmoney", "--watch", "5", "--count", "3"])

    assert result.exit_code == 0, result.output
    lines = [line for line in result.output.splitlines() if line.startswith("{")]
    assert len(lines) == 3
    assert sleeps == [5.0, 5.0]
    assert stub.count("/v7/finance/quote") == 3
    assert stub.count("/v1/test/getcrumb") == 1


def test_watch_table_stops_after_count(runner, stub_market, monkeypatch) -> None:
    monkeypatch.setattr(board_module.time, "sleep", lambda _: None)
    app = create_app()

    result = runner.invoke(app, ["--no-color", "sina", "--watch", "1", "--count", "2"])

    assert result.exit_code == 0, result.output
    assert "CSI300" in result.output


def test_refresh_interval_from_config(runner, stub_market, stub, monkeypatch, tmp_path) -> None:
    config_file = tmp_path / "board.toml"
    config_file.write_text("[display]\nrefresh_interval = 2.5\n", encoding="utf-8")
    sleeps: list[float] = []
    monkeypatch.setattr(board_module.time, "sleep", sleeps.append)
    app = create_app()

    result = runner.invoke(app, ["--config", str(config_file), "--format", "jsonl", "yahoo", "--count", "2"])

    assert result.exit_code == 0, result.output
    assert sleeps == [2.5]


def test_every_vendor_has_a_command(runner, stub_market) -> None:
    app = create_app()
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    for name in ("yahoo", "qq", "sina", "netease", "eastmoney", "eastmoney-limitup", "eastmoney-lhb"):
        assert name in result.output


def test_version_command(runner) -> None:
    app = create_app()
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "tickerboard 0.1.0" in result.output
