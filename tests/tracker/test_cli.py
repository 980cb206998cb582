"""Tests for tracker CLI commands."""

import json
from unittest.mock import Mock

import pytest
import yaml
from click.testing import CliRunner

import src.tracker.cli as tracker_cli
from src.tracker.cli import cli
from src.tracker.pricing import StockPriceOracle


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def quote_source() -> Mock:
    source = Mock()
    source.get_current_price.return_value = 104.0
    return source


@pytest.fixture
def base_args(tmp_path, monkeypatch, quote_source) -> list[str]:
    """Global options pointing the CLI at a temporary database and config."""
    for name in ("TRACKER_DB_PATH", "TRACKER_DATABASE_PATH", "TRACKER_STRATEGY_STORAGE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(
        tracker_cli, "build_oracle", lambda config: StockPriceOracle(source=quote_source)
    )

    config_file = tmp_path / "config.yaml"
    config_file.write_text(yaml.dump({"storage": {"data_dir": str(tmp_path)}}))
    return ["--db", str(tmp_path / "positions.db"), "--config-file", str(config_file)]


def _add(runner, base_args, *extra) -> dict:
    result = runner.invoke(
        cli,
        base_args
        + ["--json", "add", "XYZ", "put", "--strike", "100", "--premium", "2.00",
           "--expiration", "2026-02-20", "--open-date", "2026-01-05"]
        + list(extra),
    )
    assert result.exit_code == 0, result.output
    return json.loads(result.output)


class TestAddCommand:
    """Tests for 'tracker add'."""

    def test_add_put(self, runner, base_args):
        result = runner.invoke(
            cli,
            base_args
            + ["add", "xyz", "put", "--strike", "100", "--premium", "2.00",
               "--expiration", "2026-02-20"],
        )

        assert result.exit_code == 0
        assert "Recorded XYZ PUT $100.00 x1" in result.output

    def test_add_json_defaults_cycle_to_ticker(self, runner, base_args):
        data = _add(runner, base_args)

        assert data["ticker"] == "XYZ"
        assert data["wheel_cycle_name"] == "XYZ"
        assert data["status"] == "open"
        assert data["realized_pl"] is None

    def test_add_rejects_bad_strike(self, runner, base_args):
        result = runner.invoke(
            cli,
            base_args
            + ["add", "XYZ", "put", "--strike", "0", "--premium", "2.00",
               "--expiration", "2026-02-20"],
        )

        assert result.exit_code == 1
        assert "strike" in result.output


class TestListAndShow:
    """Tests for 'tracker list' and 'tracker show'."""

    def test_empty_list(self, runner, base_args):
        result = runner.invoke(cli, base_args + ["list"])

        assert result.exit_code == 0
        assert "No positions found." in result.output

    def test_list_filters_by_status(self, runner, base_args):
        _add(runner, base_args)

        open_result = runner.invoke(cli, base_args + ["list", "--status", "open"])
        closed_result = runner.invoke(cli, base_args + ["list", "--status", "closed"])

        assert "XYZ" in open_result.output
        assert "No positions found." in closed_result.output

    def test_show(self, runner, base_args):
        position = _add(runner, base_args)

        result = runner.invoke(cli, base_args + ["show", position["id"]])

        assert result.exit_code == 0
        assert "=== XYZ PUT $100.00 ===" in result.output
        assert "Cycle:      XYZ" in result.output

    def test_show_unknown(self, runner, base_args):
        result = runner.invoke(cli, base_args + ["show", "missing"])

        assert result.exit_code == 1
        assert "Position not found: missing" in result.output


class TestUpdateCommand:
    """Tests for 'tracker update'."""

    def test_close_realizes_profit(self, runner, base_args):
        position = _add(runner, base_args)

        result = runner.invoke(
            cli,
            base_args
            + ["--json", "update", position["id"], "--close-date", "2026-02-01",
               "--close-price", "0.50"],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["status"] == "closed"
        assert data["premium_realized_pl"] == 150.0
        assert data["realized_pl"] == 150.0

    def test_reopen(self, runner, base_args):
        position = _add(runner, base_args)
        runner.invoke(
            cli, base_args + ["update", position["id"], "--close-date", "2026-02-01"]
        )

        result = runner.invoke(cli, base_args + ["update", position["id"], "--reopen"])

        assert result.exit_code == 0
        assert "(status: open)" in result.output

    def test_nothing_to_update(self, runner, base_args):
        position = _add(runner, base_args)

        result = runner.invoke(cli, base_args + ["update", position["id"]])

        assert result.exit_code == 1
        assert "Nothing to update" in result.output

    def test_reopen_conflicts_with_close_date(self, runner, base_args):
        result = runner.invoke(
            cli, base_args + ["update", "any", "--reopen", "--close-date", "2026-02-01"]
        )

        assert result.exit_code == 1
        assert "mutually exclusive" in result.output


class TestDeleteCommand:
    """Tests for 'tracker delete'."""

    def test_delete(self, runner, base_args):
        position = _add(runner, base_args)

        result = runner.invoke(cli, base_args + ["delete", position["id"], "--yes"])
        listed = runner.invoke(cli, base_args + ["list"])

        assert result.exit_code == 0
        assert "No positions found." in listed.output

    def test_delete_unknown(self, runner, base_args):
        result = runner.invoke(cli, base_args + ["delete", "missing", "--yes"])
        assert result.exit_code == 1


class TestReportCommands:
    """Tests for metrics, cycles and holdings."""

    def test_metrics_json(self, runner, base_args):
        position = _add(runner, base_args)
        runner.invoke(
            cli,
            base_args
            + ["update", position["id"], "--close-date", "2026-02-01", "--close-price", "0.50"],
        )

        result = runner.invoke(cli, base_args + ["--json", "metrics"])

        data = json.loads(result.output)
        assert data["total_positions"] == 1
        assert data["closed_positions"] == 1
        assert data["realized_pl"] == 150.0

    def test_cycles_empty(self, runner, base_args):
        result = runner.invoke(cli, base_args + ["cycles"])
        assert "No wheel cycles yet." in result.output

    def test_cycles(self, runner, base_args):
        _add(runner, base_args)

        result = runner.invoke(cli, base_args + ["--json", "cycles"])

        data = json.loads(result.output)
        assert [c["name"] for c in data] == ["XYZ"]
        assert data[0]["status"] == "active"

    def test_holdings_empty(self, runner, base_args):
        result = runner.invoke(cli, base_args + ["holdings"])
        assert "No stock holdings." in result.output

    def test_analytics_json(self, runner, base_args):
        position = _add(runner, base_args)
        runner.invoke(
            cli,
            base_args
            + ["update", position["id"], "--close-date", "2026-02-01", "--close-price", "0.50"],
        )

        result = runner.invoke(cli, base_args + ["--json", "analytics"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["total_realized"] == 150.0
        assert data["win_rates"] == [{"ticker": "XYZ", "wins": 1, "total": 1, "win_rate": 100.0}]
        assert data["cumulative_pl"][0]["cumulative_pl"] == 150.0

    def test_analytics_text(self, runner, base_args):
        _add(runner, base_args)

        result = runner.invoke(cli, base_args + ["analytics"])

        assert result.exit_code == 0
        assert "=== Returns ===" in result.output
        assert "=== Premium by Month ===" in result.output
        assert "2026-01  puts     $200.00" in result.output


class TestAlertCommands:
    """Tests for alerts, dismissals and strategy settings."""

    def test_roll_alert(self, runner, base_args):
        _add(runner, base_args)

        result = runner.invoke(cli, base_args + ["alerts"])

        assert result.exit_code == 0
        assert "[HIGH] XYZ Roll Put" in result.output

    def test_dismiss_hides_alert(self, runner, base_args):
        position = _add(runner, base_args)

        dismissed = runner.invoke(cli, base_args + ["dismiss", position["id"]])
        result = runner.invoke(cli, base_args + ["alerts"])
        everything = runner.invoke(cli, base_args + ["alerts", "--all"])

        assert "Dismissed alerts for" in dismissed.output
        assert "No alerts." in result.output
        assert "1 dismissed alert(s) hidden" in result.output
        assert "Roll Put" in everything.output

    def test_undismiss_and_clear(self, runner, base_args):
        position = _add(runner, base_args)
        runner.invoke(cli, base_args + ["dismiss", position["id"]])

        restored = runner.invoke(cli, base_args + ["undismiss", position["id"]])
        cleared = runner.invoke(cli, base_args + ["clear-dismissed"])
        result = runner.invoke(cli, base_args + ["alerts"])

        assert "Restored alerts for" in restored.output
        assert "All dismissed alerts restored" in cleared.output
        assert "Roll Put" in result.output

    def test_dismiss_unknown_position(self, runner, base_args):
        result = runner.invoke(cli, base_args + ["dismiss", "missing"])
        assert result.exit_code == 1

    def test_no_price_no_alert(self, runner, base_args, quote_source):
        quote_source.get_current_price.return_value = 0.0
        _add(runner, base_args)

        result = runner.invoke(cli, base_args + ["alerts"])

        assert "No alerts." in result.output

    def test_strategy_show_defaults(self, runner, base_args):
        result = runner.invoke(cli, base_args + ["strategy"])

        assert result.exit_code == 0
        assert "=== Strategy: standard ===" in result.output
        assert "Roll threshold:  3% above strike" in result.output

    def test_strategy_custom(self, runner, base_args):
        result = runner.invoke(
            cli, base_args + ["--json", "strategy", "--custom", "--roll", "5", "--close", "80"]
        )

        data = json.loads(result.output)
        assert data["active_strategy"] == "custom"
        assert data["custom_roll_threshold"] == 5.0
        assert data["custom_close_threshold"] == 80.0

    def test_custom_threshold_changes_alerts(self, runner, base_args):
        _add(runner, base_args)
        runner.invoke(cli, base_args + ["strategy", "--custom", "--roll", "5"])

        result = runner.invoke(cli, base_args + ["alerts"])

        assert "Approaching Roll Threshold" not in result.output
        assert "Roll Put" not in result.output

    def test_strategy_out_of_range(self, runner, base_args):
        result = runner.invoke(cli, base_args + ["strategy", "--custom", "--roll", "12"])

        assert result.exit_code == 1
        assert "custom_roll_threshold" in result.output

    def test_file_strategy_storage(self, runner, base_args, tmp_path, monkeypatch):
        monkeypatch.setenv("TRACKER_STRATEGY_STORAGE", "file")

        runner.invoke(cli, base_args + ["strategy", "--custom"])

        stored = json.loads((tmp_path / "strategy_config.json").read_text())
        assert stored["active_strategy"] == "custom"


class TestConfigCommands:
    """Tests for 'tracker config'."""

    def test_show_json_includes_overrides(self, runner, base_args, tmp_path):
        result = runner.invoke(cli, base_args + ["--json", "config", "show"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["storage"]["database_path"] == str(tmp_path / "positions.db")
        assert data["prices"]["cache_ttl"] == 300

    def test_init_refuses_existing_file(self, runner, base_args):
        result = runner.invoke(cli, base_args + ["config", "init"])

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_init_force_overwrites(self, runner, base_args, tmp_path):
        result = runner.invoke(cli, base_args + ["config", "init", "--force"])

        assert result.exit_code == 0, result.output
        saved = yaml.safe_load((tmp_path / "config.yaml").read_text())
        assert saved["storage"]["database_path"] == str(tmp_path / "positions.db")
        assert saved["storage"]["data_dir"] == str(tmp_path)

    def test_init_default_location(self, runner, base_args, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        db_path = str(tmp_path / "positions.db")

        result = runner.invoke(cli, ["--db", db_path, "config", "init"])

        assert result.exit_code == 0, result.output
        config_file = tmp_path / "home" / ".options_tracker" / "config.yaml"
        assert yaml.safe_load(config_file.read_text())["storage"]["database_path"] == db_path
