"""Tests for the command-line front end."""

from __future__ import annotations

import json

from typer.testing import CliRunner

from rent_vs_buy.cli import app

runner = CliRunner()


def test_run_prints_header_and_verdict() -> None:
    result = runner.invoke(app, ["--years", "20"])
    assert result.exit_code == 0, result.output
    assert "Mortgage (est): $2,806/mo | Down payment: $120,000" in result.output
    assert "appears to build more wealth by $" in result.output
    assert "Final (year 20) rent paid: $" in result.output


def test_cost_view_from_option_and_env() -> None:
    result = runner.invoke(app, ["--view", "cost"])
    assert result.exit_code == 0, result.output
    assert "(net of equity)" in result.output

    result = runner.invoke(app, [], env={"RENT_VS_BUY_VIEW": "cost"})
    assert result.exit_code == 0, result.output
    assert "(net of equity)" in result.output


def test_year_detail_is_clamped_to_horizon() -> None:
    result = runner.invoke(app, ["--years", "5", "--year", "3"])
    assert result.exit_code == 0, result.output
    assert "At year 3:" in result.output

    result = runner.invoke(app, ["--years", "5", "--year", "40"])
    assert "At year 5:" in result.output


def test_show_timeline_dumps_records() -> None:
    result = runner.invoke(app, ["--years", "4", "--show-timeline"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output[result.output.index("[") :])
    assert [row["year"] for row in payload] == [1, 2, 3, 4]
    assert all(row["equity_if_sold"] >= 0 for row in payload)


def test_invalid_view_is_a_usage_error() -> None:
    result = runner.invoke(app, ["--view", "sideways"])
    assert result.exit_code != 0


def test_unknown_log_level_falls_back() -> None:
    result = runner.invoke(app, ["--log-level", "foo"])
    assert result.exit_code == 0, result.output
    assert "appears to build more wealth" in result.output

    result = runner.invoke(app, [], env={"RENT_VS_BUY_LOG_LEVEL": "nonsense"})
    assert result.exit_code == 0, result.output
