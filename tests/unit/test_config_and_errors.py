# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import json
import socket

import httpx
import pytest

from apinet import config
from apinet.config import DEFAULT_USER_AGENT, NetworkConfig, TimeoutConfig
from apinet.errors import (
    BusinessException,
    ConnectTimeoutException,
    ErrorCategory,
    HttpException,
    NetworkConnectionException,
    ParseException,
    RequestTimeoutException,
    SocketTimeoutException,
    TypeDecodeError,
    categorize_exception,
    error_category_to_reason,
)
from apinet.http.retry import RetryPolicy


@pytest.mark.parametrize("base_url", ["", "   ", "api.example.com", "ftp://api.example.com", "http://"])
def test_network_config_rejects_invalid_base_url(base_url):
    with pytest.raises(ValueError):
        NetworkConfig(base_url=base_url)


def test_network_config_defaults():
    cfg = NetworkConfig.create("https://api.example.com")
    assert cfg.base_url == "https://api.example.com"
    assert cfg.timeout == TimeoutConfig(connect_timeout=30.0, socket_timeout=30.0, request_timeout=60.0)
    assert cfg.retry_policy is RetryPolicy.DEFAULT
    assert dict(cfg.default_headers) == {}


def test_network_config_freezes_default_headers():
    headers = {"X-App": "1"}
    cfg = NetworkConfig(base_url="http://localhost", default_headers=headers)
    headers["X-App"] = "2"
    assert cfg.default_headers["X-App"] == "1"
    with pytest.raises(TypeError):
        cfg.default_headers["X-Other"] = "x"  # type: ignore[index]


def test_builder_merges_headers_last_write_wins():
    cfg = (
        NetworkConfig.builder("https://api.example.com")
        .default_header("Authorization", "Bearer a")
        .default_headers({"Authorization": "Bearer b", "X-Trace": "t"})
        .timeout(TimeoutConfig.FAST)
        .retry_policy(None)
        .build()
    )
    assert dict(cfg.default_headers) == {"Authorization": "Bearer b", "X-Trace": "t"}
    assert cfg.timeout is TimeoutConfig.FAST
    assert cfg.retry_policy is None


def test_builder_validates_on_build():
    builder = NetworkConfig.builder("not-a-url")
    with pytest.raises(ValueError):
        builder.build()


def test_timeout_presets_and_validation():
    assert TimeoutConfig.SLOW.request_timeout == 300.0
    assert TimeoutConfig.FAST.connect_timeout == 5.0
    with pytest.raises(ValueError):
        TimeoutConfig(connect_timeout=0)


@pytest.mark.parametrize("field", ["connect_timeout", "socket_timeout", "request_timeout"])
def test_timeout_config_rejects_nan(field):
    with pytest.raises(ValueError):
        TimeoutConfig(**{field: float("nan")})


def test_network_config_env_overrides(monkeypatch):
    monkeypatch.setenv("APINET_BASE_URL", "https://env.example.com")
    monkeypatch.setenv("APINET_CONNECT_TIMEOUT", "5.5")
    monkeypatch.setenv("APINET_SOCKET_TIMEOUT", "6")
    monkeypatch.setenv("APINET_REQUEST_TIMEOUT", "12")
    monkeypatch.setenv("APINET_MAX_RETRIES", "4")
    monkeypatch.setenv("APINET_RETRY_DELAY", "0.25")

    cfg = config.load_network_config()

    assert cfg.base_url == "https://env.example.com"
    assert cfg.timeout == TimeoutConfig(connect_timeout=5.5, socket_timeout=6.0, request_timeout=12.0)
    assert cfg.retry_policy.max_retries == 4
    assert cfg.retry_policy.retry_delay == 0.25


def test_network_config_invalid_env_fall_back(monkeypatch):
    monkeypatch.setenv("APINET_CONNECT_TIMEOUT", "not-a-number")
    monkeypatch.setenv("APINET_SOCKET_TIMEOUT", "-3")
    monkeypatch.setenv("APINET_MAX_RETRIES", "ten")

    cfg = config.load_network_config("http://localhost:8080")

    assert cfg.timeout.connect_timeout == TimeoutConfig.DEFAULT.connect_timeout
    assert cfg.timeout.socket_timeout == TimeoutConfig.DEFAULT.socket_timeout
    assert cfg.retry_policy.max_retries == RetryPolicy.DEFAULT.max_retries


def test_zero_retries_env_disables_retry(monkeypatch):
    monkeypatch.setenv("APINET_MAX_RETRIES", "0")
    cfg = config.load_network_config("http://localhost")
    assert cfg.retry_policy is RetryPolicy.NO_RETRY


def test_missing_base_url_env_fails_fast(monkeypatch):
    monkeypatch.delenv("APINET_BASE_URL", raising=False)
    with pytest.raises(ValueError):
        config.load_network_config()


def test_http_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("APINET_USER_AGENT", "CustomAgent/1.0")
    monkeypatch.setenv("APINET_VERIFY_SSL", "0")
    monkeypatch.setenv("APINET_MAX_BODY_BYTES", "-1")

    settings = config.load_http_settings()

    assert settings.user_agent == "CustomAgent/1.0"
    assert settings.verify_ssl is False
    assert settings.max_body_bytes == config.HttpSettings.max_body_bytes


def test_http_settings_reads_env_at_call_time(monkeypatch):
    monkeypatch.delenv("APINET_USER_AGENT", raising=False)
    assert config.load_http_settings().user_agent == DEFAULT_USER_AGENT
    monkeypatch.setenv("APINET_USER_AGENT", "Later/2.0")
    assert config.load_http_settings().user_agent == "Later/2.0"


@pytest.mark.parametrize(
    ("exc", "expected"),
    [
        (HttpException(500, "Internal Server Error"), ErrorCategory.HTTP),
        (BusinessException(404, "not found"), ErrorCategory.BUSINESS),
        (ParseException("bad"), ErrorCategory.PARSE),
        (json.JSONDecodeError("Expecting value", "x", 0), ErrorCategory.PARSE),
        (TypeDecodeError("expected int"), ErrorCategory.PARSE),
        (ConnectTimeoutException(), ErrorCategory.CONNECT_TIMEOUT),
        (httpx.ConnectTimeout("slow connect"), ErrorCategory.CONNECT_TIMEOUT),
        (SocketTimeoutException(), ErrorCategory.SOCKET_TIMEOUT),
        (RequestTimeoutException(), ErrorCategory.SOCKET_TIMEOUT),
        (httpx.ReadTimeout("slow read"), ErrorCategory.SOCKET_TIMEOUT),
        (TimeoutError(), ErrorCategory.SOCKET_TIMEOUT),
        (NetworkConnectionException(), ErrorCategory.NETWORK),
        (httpx.ConnectError("refused"), ErrorCategory.NETWORK),
        (ConnectionResetError(), ErrorCategory.NETWORK),
        (socket.gaierror("dns"), ErrorCategory.NETWORK),
        (OSError("disk"), ErrorCategory.NETWORK),
        (RuntimeError("bug"), ErrorCategory.UNKNOWN),
        (KeyError("x"), ErrorCategory.UNKNOWN),
    ],
)
def test_categorize_exception_is_total(exc, expected):
    assert categorize_exception(exc) is expected


def test_exception_messages_carry_context():
    http_exc = HttpException(503, "Service Unavailable", body="down")
    assert str(http_exc) == "HTTP 503: Service Unavailable"
    assert http_exc.body == "down"

    business = BusinessException(404, "not found", data={"id": 999})
    assert str(business) == "Business Error 404: not found"
    assert business.message == "not found"
    assert business.data == {"id": 999}

    cause = ValueError("boom")
    parse = ParseException("bad json", cause)
    assert str(parse) == "Parse Error: bad json"
    assert parse.__cause__ is cause


def test_error_category_reasons():
    assert error_category_to_reason(ErrorCategory.NETWORK) == "Network connectivity issue"
    assert error_category_to_reason(None) == ""
    for category in ErrorCategory:
        assert error_category_to_reason(category)
