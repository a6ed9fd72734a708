# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed Transport implementation."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import httpx

from ..errors import (
    ConnectTimeoutException,
    NetworkConnectionException,
    RequestTimeoutException,
    SocketTimeoutException,
)
from .headers import header_value
from .models import HttpRequest, HttpResponse
from .transport import Transport

if TYPE_CHECKING:
    from ..config import HttpSettings, NetworkConfig


def build_timeout(config: NetworkConfig) -> httpx.Timeout:
    """Translate a TimeoutConfig into httpx connect/read/write/pool budgets."""
    timeouts = config.timeout
    return httpx.Timeout(
        connect=timeouts.connect_timeout,
        read=timeouts.socket_timeout,
        write=timeouts.socket_timeout,
        pool=timeouts.connect_timeout,
    )


class HttpxTransport(Transport):
    """Asynchronous httpx client wrapper performing one exchange per `execute` call."""

    def __init__(
        self,
        config: NetworkConfig,
        settings: HttpSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        from ..config import load_http_settings

        self.config = config
        self.settings = settings or load_http_settings()
        self._client = client or httpx.AsyncClient(
            timeout=build_timeout(config),
            verify=self.settings.verify_ssl,
            follow_redirects=False,
        )
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def execute(self, request: HttpRequest) -> HttpResponse:
        if self._closed:
            raise RuntimeError("transport is closed")

        headers = dict(request.headers or {})
        if not header_value(headers, "User-Agent"):
            headers["User-Agent"] = self.settings.user_agent

        budget = request.timeout if request.timeout is not None else self.config.timeout.request_timeout
        try:
            return await asyncio.wait_for(self._exchange(request, headers), timeout=budget)
        except asyncio.TimeoutError as exc:
            raise RequestTimeoutException(f"request exceeded {budget}s", exc) from exc
        except httpx.ConnectTimeout as exc:
            raise ConnectTimeoutException(f"connect timeout: {exc}", exc) from exc
        except httpx.TimeoutException as exc:
            raise SocketTimeoutException(f"socket timeout: {exc}", exc) from exc
        except httpx.TransportError as exc:
            raise NetworkConnectionException(f"network error: {exc}", exc) from exc

    async def _exchange(self, request: HttpRequest, headers: dict[str, str]) -> HttpResponse:
        max_body_bytes = self.settings.max_body_bytes
        if max_body_bytes <= 0:
            max_body_bytes = 16 * 1024 * 1024

        # The stream context closes the response on every exit path, cancellation included.
        async with self._client.stream(
            request.method,
            request.url,
            headers=headers,
            content=request.body,
        ) as resp:
            meta: dict[str, Any] = {}
            try:
                content, truncated = await self._read_body(resp, max_body_bytes)
            except httpx.TransportError as exc:
                # Error statuses keep their status even when the body cannot be read.
                if resp.is_success:
                    raise
                content, truncated = bytearray(), False
                meta["body_read_error"] = repr(exc)

        meta.update(
            {
                "body_truncated": truncated,
                "body_bytes_read": len(content),
                "body_bytes_limit": max_body_bytes,
            }
        )
        return HttpResponse(
            status_code=resp.status_code,
            reason=resp.reason_phrase,
            headers=dict(resp.headers),
            content=bytes(content),
            url=str(resp.url),
            meta=meta,
        )

    @staticmethod
    async def _read_body(resp: httpx.Response, max_body_bytes: int) -> tuple[bytearray, bool]:
        content = bytearray()
        async for chunk in resp.aiter_bytes():
            if not chunk:
                continue
            remaining = max_body_bytes - len(content)
            if remaining <= 0:
                return content, True
            if len(chunk) > remaining:
                content.extend(chunk[:remaining])
                return content, True
            content.extend(chunk)
        return content, False

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._client.aclose()


__all__ = ["HttpxTransport", "build_timeout"]
