"""Tests for the config show command."""

import json

from resilient_ops.cli.main import cli


def test_show_defaults(cli_runner):
    """Without configuration the defaults are shown."""
    result = cli_runner.invoke(cli, ["config", "show"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)["data"]
    assert data["retry"]["max_retries"] == 3
    assert data["circuit_breaker"]["failure_threshold"] == 5
    assert data["recovery"]["login_path"] == "/login"


def test_show_env_override(cli_runner, monkeypatch):
    """Environment overrides are reflected."""
    monkeypatch.setenv("RESILIENT_OPS_MAX_RETRIES", "8")
    result = cli_runner.invoke(cli, ["config", "show"])
    assert json.loads(result.stdout)["data"]["retry"]["max_retries"] == 8


def test_show_invalid_values(cli_runner, tmp_path):
    """Validation failures list the offending fields."""
    config = tmp_path / "ops.toml"
    config.write_text("[circuit_breaker]\nfailure_threshold = 0\n")
    result = cli_runner.invoke(cli, ["config", "show", "--config-file", str(config)])
    assert result.exit_code == 1
    payload = json.loads(result.stdout)
    assert payload["code"] == "INVALID_CONFIG"
    assert payload["data"]["errors"][0]["loc"] == ["failure_threshold"]


def test_show_unparsable_toml(cli_runner, tmp_path):
    """Malformed TOML is reported, not raised."""
    config = tmp_path / "ops.toml"
    config.write_text("[retry\nmax_retries = ")
    result = cli_runner.invoke(cli, ["config", "show", "--config-file", str(config)])
    assert result.exit_code == 1
    assert json.loads(result.stdout)["code"] == "INVALID_CONFIG"


def test_version(cli_runner):
    """--version prints the package version."""
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "resilient-ops" in result.output
