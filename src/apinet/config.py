# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for apinet."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import ClassVar

from .http.retry import RetryPolicy
from .http.url import validate_base_url
from .version import __version__

DEFAULT_USER_AGENT = f"apinet/{__version__}"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _default_headers() -> Mapping[str, str]:
    return MappingProxyType({})


@dataclass(frozen=True)
class TimeoutConfig:
    """Per-attempt timeout budgets in seconds."""

    connect_timeout: float = 30.0
    socket_timeout: float = 30.0
    request_timeout: float = 60.0

    DEFAULT: ClassVar[TimeoutConfig]
    FAST: ClassVar[TimeoutConfig]
    SLOW: ClassVar[TimeoutConfig]

    def __post_init__(self) -> None:
        for name in ("connect_timeout", "socket_timeout", "request_timeout"):
            if not (getattr(self, name) > 0):
                raise ValueError(f"{name} must be > 0")


TimeoutConfig.DEFAULT = TimeoutConfig()
TimeoutConfig.FAST = TimeoutConfig(connect_timeout=5.0, socket_timeout=5.0, request_timeout=10.0)
TimeoutConfig.SLOW = TimeoutConfig(connect_timeout=60.0, socket_timeout=60.0, request_timeout=300.0)


@dataclass(frozen=True)
class NetworkConfig:
    """
    Immutable client configuration.

    The base address is validated on construction, never on first request. `retry_policy=None`
    disables retry entirely.
    """

    base_url: str
    timeout: TimeoutConfig = TimeoutConfig.DEFAULT
    retry_policy: RetryPolicy | None = RetryPolicy.DEFAULT
    default_headers: Mapping[str, str] = field(default_factory=_default_headers)

    def __post_init__(self) -> None:
        validate_base_url(self.base_url)
        # Freeze copied headers to avoid post-init mutation side effects.
        object.__setattr__(self, "default_headers", MappingProxyType(dict(self.default_headers)))

    @classmethod
    def create(cls, base_url: str) -> NetworkConfig:
        return cls(base_url=base_url)

    @classmethod
    def builder(cls, base_url: str) -> NetworkConfigBuilder:
        return NetworkConfigBuilder(base_url)

    @classmethod
    def from_env(cls, base_url: str | None = None) -> NetworkConfig:
        """Create a config from environment variables (evaluated at call time)."""
        resolved_base_url = base_url or os.getenv("APINET_BASE_URL", "")
        defaults = TimeoutConfig.DEFAULT
        timeout = TimeoutConfig(
            connect_timeout=_positive(_float_env("APINET_CONNECT_TIMEOUT", defaults.connect_timeout), defaults.connect_timeout),
            socket_timeout=_positive(_float_env("APINET_SOCKET_TIMEOUT", defaults.socket_timeout), defaults.socket_timeout),
            request_timeout=_positive(_float_env("APINET_REQUEST_TIMEOUT", defaults.request_timeout), defaults.request_timeout),
        )
        retry_defaults = RetryPolicy.DEFAULT
        max_retries = _int_env("APINET_MAX_RETRIES", retry_defaults.max_retries)
        retry_delay = _float_env("APINET_RETRY_DELAY", retry_defaults.retry_delay)
        if max_retries <= 0:
            retry_policy = RetryPolicy.NO_RETRY
        else:
            retry_policy = RetryPolicy(max_retries=max_retries, retry_delay=max(0.0, retry_delay))
        return cls(base_url=resolved_base_url, timeout=timeout, retry_policy=retry_policy)


def _positive(value: float, default: float) -> float:
    return value if value > 0 else default


class NetworkConfigBuilder:
    """Incremental NetworkConfig construction; default headers are last-write-wins per key."""

    def __init__(self, base_url: str):
        self._base_url = base_url
        self._timeout = TimeoutConfig.DEFAULT
        self._retry_policy: RetryPolicy | None = RetryPolicy.DEFAULT
        self._default_headers: dict[str, str] = {}

    def timeout(self, timeout: TimeoutConfig) -> NetworkConfigBuilder:
        self._timeout = timeout
        return self

    def retry_policy(self, retry_policy: RetryPolicy | None) -> NetworkConfigBuilder:
        self._retry_policy = retry_policy
        return self

    def default_header(self, name: str, value: str) -> NetworkConfigBuilder:
        self._default_headers[name] = value
        return self

    def default_headers(self, headers: Mapping[str, str]) -> NetworkConfigBuilder:
        self._default_headers.update(headers)
        return self

    def build(self) -> NetworkConfig:
        return NetworkConfig(
            base_url=self._base_url,
            timeout=self._timeout,
            retry_policy=self._retry_policy,
            default_headers=self._default_headers,
        )


@dataclass
class HttpSettings:
    """Transport defaults that are not part of the per-client NetworkConfig."""

    user_agent: str = DEFAULT_USER_AGENT
    verify_ssl: bool = True
    max_body_bytes: int = 16 * 1024 * 1024

    @classmethod
    def from_env(cls) -> HttpSettings:
        """Create settings from environment variables (evaluated at call time)."""
        max_body_bytes = _int_env("APINET_MAX_BODY_BYTES", cls.max_body_bytes)
        if max_body_bytes <= 0:
            max_body_bytes = cls.max_body_bytes
        return cls(
            user_agent=os.getenv("APINET_USER_AGENT", cls.user_agent),
            verify_ssl=_bool_env("APINET_VERIFY_SSL", cls.verify_ssl),
            max_body_bytes=max_body_bytes,
        )


def load_http_settings() -> HttpSettings:
    """Load HTTP settings from environment with sensible defaults."""
    return HttpSettings.from_env()


def load_network_config(base_url: str | None = None) -> NetworkConfig:
    """Load a NetworkConfig from environment; `base_url` overrides APINET_BASE_URL."""
    return NetworkConfig.from_env(base_url)


__all__ = [
    "DEFAULT_USER_AGENT",
    "HttpSettings",
    "NetworkConfig",
    "NetworkConfigBuilder",
    "TimeoutConfig",
    "load_http_settings",
    "load_network_config",
]
