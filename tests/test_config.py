"""Tests for environment-driven configuration."""

import pytest

from dino_http import ConfigurationError, load_service_config
from dino_http.config import convert_value, load_environment, parse_headers, parse_proxy


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("true", True),
        ("False", False),
        ("42", 42),
        ("1.5", 1.5),
        ("0,200", [0, 200]),
        ("hello", "hello"),
        ("", ""),
    ],
)
def test_convert_value(raw, expected):
    assert convert_value(raw) == expected


def test_load_service_config_from_environment():
    environ = {
        "DINO_HTTP_BASE_URL": "https://api.test/{tenant}",
        "DINO_HTTP_REQUEST_TIMEOUT": "15",
        "DINO_HTTP_SUCCESS_CODE": "0,200",
        "DINO_HTTP_NEED_LOGIN_CODE": "630",
        "DINO_HTTP_PROXY": "http://user:pw@127.0.0.1:8888",
        "DINO_HTTP_DEFAULT_HEADERS": "X-App=dino, Accept-Language=en",
        "OTHER_BASE_URL": "https://ignored.test",
    }

    config = load_service_config(environ=environ)

    assert config.base_url == "https://api.test/{tenant}"
    assert config.request_timeout == 15.0
    assert config.success_code == frozenset({0, 200})
    assert config.need_login_code == frozenset({630})
    assert config.proxy.host == "127.0.0.1"
    assert config.proxy.port == 8888
    assert config.proxy.auth.username == "user"
    assert config.proxy.url == "http://user:pw@127.0.0.1:8888"
    assert config.default_headers == {"X-App": "dino", "Accept-Language": "en"}


def test_custom_prefix_and_overrides():
    environ = {"BILLING_BASE_URL": "https://billing.test", "BILLING_REQUEST_TIMEOUT": "5"}

    config = load_service_config("billing_", environ=environ, request_timeout=30)

    assert config.base_url == "https://billing.test"
    assert config.request_timeout == 30


def test_missing_variables_use_defaults():
    config = load_service_config(environ={})

    assert config.base_url == ""
    assert config.request_timeout == 60.0
    assert config.success_code == frozenset({0})
    assert config.need_login_code == frozenset({630})
    assert load_environment(environ={"DINO_HTTP_BASE_URL": ""}) == {}


def test_reads_os_environ(monkeypatch):
    monkeypatch.setenv("DINO_HTTP_BASE_URL", "https://env.test")

    assert load_service_config().base_url == "https://env.test"


@pytest.mark.parametrize(
    "environ",
    [
        {"DINO_HTTP_SUCCESS_CODE": "ok"},
        {"DINO_HTTP_NEED_LOGIN_CODE": "true"},
        {"DINO_HTTP_REQUEST_TIMEOUT": "soon"},
        {"DINO_HTTP_PROXY": "not a proxy"},
        {"DINO_HTTP_DEFAULT_HEADERS": "X-App"},
    ],
)
def test_invalid_values(environ):
    with pytest.raises(ConfigurationError):
        load_environment(environ=environ)


def test_parse_proxy_without_auth():
    proxy = parse_proxy("socks5://10.0.0.1:1080")

    assert proxy.protocol == "socks5"
    assert proxy.auth is None


def test_parse_headers_skips_empty_items():
    assert parse_headers("A=1,,B=2") == {"A": "1", "B": "2"}
