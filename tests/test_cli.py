"""Tests for the oracle-earth command line interface."""

from unittest.mock import patch

import pytest
from click.testing import CliRunner
from rich.console import Console

import oracle_earth.config
from oracle_earth.cli import main


@pytest.fixture(autouse=True)
def wide_console():
    """Wide console so table cells are not wrapped in captured output."""
    with patch("oracle_earth.cli.console", Console(width=200)):
        yield


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch, tmp_path):
    monkeypatch.setenv("ORACLE_DATABASE_PATH", str(tmp_path / "cli.db"))
    monkeypatch.setenv("ORACLE_ANALYSIS_DELAY_SECONDS", "0")
    oracle_earth.config._config = None
    yield
    oracle_earth.config._config = None


@pytest.fixture
def runner():
    return CliRunner()


def test_version(runner):
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_scenarios_lists_catalog(runner):
    result = runner.invoke(main, ["scenarios"])
    assert result.exit_code == 0
    for scenario_id in ("climate-action", "peace-treaty", "cyber-security"):
        assert scenario_id in result.output


class TestSimulate:
    def test_simulate_bespoke_scenario(self, runner):
        result = runner.invoke(main, ["simulate", "climate-action"])
        assert result.exit_code == 0
        assert "Global Carbon Tax Implementation" in result.output
        assert "Probability: 75%" in result.output
        assert "10-15 years" in result.output

    def test_simulate_shows_clamped_parameters(self, runner):
        result = runner.invoke(main, ["simulate", "climate-action", "-p", "carbonTax=500"])
        assert result.exit_code == 0
        assert "carbonTax=150" in result.output

    def test_simulate_unknown_scenario(self, runner):
        result = runner.invoke(main, ["simulate", "moon-base"])
        assert result.exit_code == 0
        assert "Probability: 60%" in result.output

    @pytest.mark.parametrize("param", ["carbonTax", "carbonTax=abc", "=5"])
    def test_simulate_rejects_malformed_params(self, runner, param):
        result = runner.invoke(main, ["simulate", "climate-action", "-p", param])
        assert result.exit_code == 2


class TestTimeline:
    def test_historical_year(self, runner):
        result = runner.invoke(main, ["timeline", "2001"])
        assert result.exit_code == 0
        assert "Historical" in result.output
        assert "9/11 Attacks" in result.output

    def test_out_of_range_year_is_clamped(self, runner):
        result = runner.invoke(main, ["timeline", "2100"])
        assert result.exit_code == 0
        assert "2050" in result.output
        assert "Predicted" in result.output
        assert "Clamped from 2100" in result.output


class TestFeed:
    def test_feed_replay(self, runner):
        result = runner.invoke(main, ["feed", "--ticks", "10", "--seed", "1"])
        assert result.exit_code == 0
        assert "Crisis Feed (all)" in result.output

    def test_feed_is_reproducible(self, runner):
        first = runner.invoke(main, ["feed", "--ticks", "10", "--seed", "42"])
        second = runner.invoke(main, ["feed", "--ticks", "10", "--seed", "42"])
        assert first.output == second.output

    def test_feed_rejects_unknown_category(self, runner):
        result = runner.invoke(main, ["feed", "--category", "sports"])
        assert result.exit_code == 2


def test_init_db_creates_and_seeds(runner, tmp_path):
    result = runner.invoke(main, ["init-db"])
    assert result.exit_code == 0
    assert "Database ready" in result.output
    assert (tmp_path / "cli.db").exists()


def test_serve_runs_uvicorn(runner):
    with patch("uvicorn.run") as run:
        result = runner.invoke(main, ["serve", "--port", "9000"])
    assert result.exit_code == 0
    args, kwargs = run.call_args
    assert args[0] == "oracle_earth.api.main:create_app"
    assert kwargs["factory"] is True
    assert kwargs["port"] == 9000
