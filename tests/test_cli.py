"""Tests for the CLI's startup validation and the one-shot check command."""

import threading
import time

from click.testing import CliRunner

from edgecast_exporter.main import cli
from edgecast_exporter.mock.fake_edgecast_server import main as fake_api_main
from edgecast_exporter.mock.fake_edgecast_server import make_server


def test_missing_credentials_exit_before_serving():
    runner = CliRunner()
    result = runner.invoke(cli, ["check"], env={"EDGECAST_ACCOUNT_ID": "", "EDGECAST_TOKEN": ""})
    assert result.exit_code == 1
    assert "Account-ID or Token" in result.output


def test_unknown_platform_exits_before_serving():
    runner = CliRunner()
    result = runner.invoke(
        cli, ["--account-id", "ABCD", "--token", "x", "--platforms", "2,42", "check"],
    )
    assert result.exit_code == 1
    assert "Invalid platform: 42" in result.output


def test_check_prints_samples_from_fake_server():
    server = make_server(port=19888)
    threading.Thread(target=server.serve_forever, daemon=True).start()
    time.sleep(0.2)
    try:
        runner = CliRunner()
        result = runner.invoke(cli, ["check"], env={
            "EDGECAST_ACCOUNT_ID": "ABCD",
            "EDGECAST_TOKEN": "secret",
            "EDGECAST_PLATFORMS": "8",
            "EDGECAST_API_URL": "http://127.0.0.1:19888",
        })
        assert result.exit_code == 0, result.output
        assert "bandwidth_bps" in result.output
        assert "http_small" in result.output
        assert "20 samples from 4/4 fetches" in result.output
    finally:
        server.shutdown()


def test_check_with_unreachable_api_fails():
    runner = CliRunner()
    result = runner.invoke(cli, [
        "--account-id", "ABCD", "--token", "x", "--platforms", "8",
        "--api-url", "http://127.0.0.1:1", "--timeout", "0.5", "check",
    ])
    assert result.exit_code == 1
    assert "No samples collected" in result.output


def test_fake_api_help_lists_port_option():
    result = CliRunner().invoke(fake_api_main, ["--help"])
    assert result.exit_code == 0
    assert "--port" in result.output
