# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level client facade over the execution pipeline."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from .config import HttpSettings, NetworkConfig, TimeoutConfig
from .http.models import HttpRequest
from .http.retry import RetryPolicy
from .http.transport import Transport, create_default_transport
from .models.response import ApiResponse
from .models.result import ApiError, ApiResult
from .parser.base import Parser
from .pipeline import RequestExecutor

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class NetworkClient:
    """
    Entry point for application code.

    Two tiers are offered. `get`/`post` return the raw ApiResponse envelope whatever its business
    code and raise only for transport, HTTP and parse failures. `get_data`/`post_data` additionally
    require `code == 200` and non-null data. `request`/`request_data` return the same outcomes as an
    ApiResult instead of raising.

    Example:
        async with NetworkClient.create("https://api.example.com") as client:
            user = await client.get_data("/user/1", User)
    """

    def __init__(
        self,
        config: NetworkConfig,
        transport: Transport | None = None,
        parser: Parser | None = None,
        parsers: Sequence[Parser] | None = None,
        settings: HttpSettings | None = None,
    ):
        self._config = config
        self._transport = transport or create_default_transport(config, settings)
        chosen = list(parsers or ())
        if parser is not None:
            chosen.insert(0, parser)
        self._executor = RequestExecutor(config, self._transport, chosen or None)
        self._closed = False

    @classmethod
    def create(
        cls,
        base_url: str | NetworkConfig,
        *,
        timeout: TimeoutConfig | None = None,
        retry_policy: RetryPolicy | None = _UNSET,
        default_headers: Mapping[str, str] | None = None,
        transport: Transport | None = None,
        parser: Parser | None = None,
        settings: HttpSettings | None = None,
    ) -> NetworkClient:
        """Build a client from a base URL (plus builder options) or from a ready NetworkConfig."""
        if isinstance(base_url, NetworkConfig):
            config = base_url
        else:
            builder = NetworkConfig.builder(base_url)
            if timeout is not None:
                builder.timeout(timeout)
            if retry_policy is not _UNSET:
                builder.retry_policy(retry_policy)
            if default_headers:
                builder.default_headers(default_headers)
            config = builder.build()
        return cls(config, transport=transport, parser=parser, settings=settings)

    @property
    def config(self) -> NetworkConfig:
        return self._config

    @property
    def base_url(self) -> str:
        return self._config.base_url

    @property
    def closed(self) -> bool:
        return self._closed

    async def request(
        self,
        method: str,
        path: str,
        data_type: Any = Any,
        *,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> ApiResult[ApiResponse[Any]]:
        """Run a request and return the envelope as an ApiResult (never raises for request failures)."""
        self._ensure_open()
        request = self._build(method, path, headers=headers, body=body)
        if isinstance(request, ApiError):
            return request
        return await self._executor.execute(request, data_type)

    async def request_data(
        self,
        method: str,
        path: str,
        data_type: Any = Any,
        *,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> ApiResult[Any]:
        """Like `request`, with the envelope unwrapped to its data."""
        self._ensure_open()
        request = self._build(method, path, headers=headers, body=body)
        if isinstance(request, ApiError):
            return request
        return await self._executor.execute_data(request, data_type)

    async def get(self, path: str, data_type: Any = Any, *, headers: Mapping[str, str] | None = None) -> ApiResponse[Any]:
        result = await self.request("GET", path, data_type, headers=headers)
        return result.get_data_or_throw()

    async def get_data(self, path: str, data_type: Any = Any, *, headers: Mapping[str, str] | None = None) -> Any:
        result = await self.request_data("GET", path, data_type, headers=headers)
        return result.get_data_or_throw()

    async def post(
        self,
        path: str,
        body: Any = None,
        data_type: Any = Any,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> ApiResponse[Any]:
        result = await self.request("POST", path, data_type, body=body, headers=headers)
        return result.get_data_or_throw()

    async def post_data(
        self,
        path: str,
        body: Any = None,
        data_type: Any = Any,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        result = await self.request_data("POST", path, data_type, body=body, headers=headers)
        return result.get_data_or_throw()

    async def close(self) -> None:
        """Release the transport. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        await self._transport.close()

    def _build(self, method: str, path: str, *, headers: Mapping[str, str] | None, body: Any) -> HttpRequest | ApiError:
        try:
            return self._executor.build_request(method, path, headers=headers, body=body)
        except Exception as exc:  # noqa: BLE001
            logger.warning("%s %s could not be built: %r", method, path, exc)
            return ApiError.from_exception(exc)

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("NetworkClient is closed")

    async def __aenter__(self) -> NetworkClient:
        return self

    async def __aexit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        await self.close()


__all__ = ["NetworkClient"]
