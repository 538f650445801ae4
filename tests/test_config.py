"""Tests for startup config validation."""

import pytest

from edgecast_exporter.config import build_config, parse_platform_ids
from edgecast_exporter.errors import ConfigurationError


def test_defaults_monitor_every_platform():
    config = build_config(account_id="ABCD", token="secret")
    assert [p.id for p in config.platforms] == [2, 3, 7, 8, 9, 14, 15]
    assert config.retries == 1
    assert config.timeout_seconds == 5.0
    assert config.max_workers is None
    assert config.api_url == "https://api.edgecast.com"


def test_platform_subset():
    config = build_config(account_id="ABCD", token="secret", platforms="8, 2")
    assert [p.name for p in config.platforms] == ["http_small", "flash"]


@pytest.mark.parametrize("account_id,token", [(None, "secret"), ("ABCD", ""), ("", None)])
def test_missing_credentials(account_id, token):
    with pytest.raises(ConfigurationError, match="Account-ID or Token"):
        build_config(account_id=account_id, token=token)


def test_unknown_platform_is_a_config_error():
    with pytest.raises(ConfigurationError, match="Invalid platform: 4"):
        build_config(account_id="ABCD", token="secret", platforms="2,4")


def test_non_numeric_platform_is_a_config_error():
    with pytest.raises(ConfigurationError, match="Invalid platform: small"):
        build_config(account_id="ABCD", token="secret", platforms="small")


def test_bad_retry_and_timeout_values():
    with pytest.raises(ConfigurationError):
        build_config(account_id="ABCD", token="secret", retries=0)
    with pytest.raises(ConfigurationError):
        build_config(account_id="ABCD", token="secret", timeout_seconds=0)
    with pytest.raises(ConfigurationError):
        build_config(account_id="ABCD", token="secret", max_workers=0)


def test_trailing_slash_stripped_from_api_url():
    config = build_config(account_id="ABCD", token="secret", api_url="http://localhost:9100/")
    assert config.api_url == "http://localhost:9100"


def test_parse_platform_ids_empty():
    assert parse_platform_ids(None) == ()
    assert parse_platform_ids("  ") == ()
