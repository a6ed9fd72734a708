# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Request execution pipeline.

One logical request moves through Pending -> Attempting -> (Succeeded | Retrying -> Attempting |
Failed). Each attempt calls the transport once; the HTTP status is classified, connectivity
failures are classified, and the retry policy decides whether a failure is retried after a
non-blocking delay. Successful bodies are parsed into an ApiResponse envelope. Every outcome is
returned as an ApiResult holding either Success or one ApiError variant; nothing is swallowed.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any, TypeVar

import httpx

from .config import NetworkConfig
from .errors import ParseException
from .http.headers import merge_headers
from .http.models import HttpRequest, HttpResponse
from .http.retry import STOP
from .http.transport import Transport
from .http.url import join_url
from .models.response import ApiResponse
from .models.result import ApiError, ApiResult, BusinessError, HttpError, NetworkError, ParseError, Success, UnknownError
from .parser.base import Parser, select_parser
from .parser.json_parser import JsonParser
from .parser.types import TypeInfo

logger = logging.getLogger(__name__)

T = TypeVar("T")

JSON_CONTENT_TYPE = "application/json"


def status_message(response: HttpResponse) -> str:
    """Reason phrase of a response, falling back to the standard phrase for its status."""
    return response.reason or httpx.codes.get_reason_phrase(response.status_code) or f"HTTP {response.status_code}"


def _body_snippet(response: HttpResponse) -> str | None:
    return response.text if response.content else None


def unwrap_data(envelope: ApiResponse[T]) -> ApiResult[T]:
    """
    Data tier on top of the raw envelope.

    `code != 200` becomes a BusinessError; `code == 200` without data becomes a ParseError.
    """
    if not envelope.is_success():
        return BusinessError(code=envelope.code, message=envelope.msg, data=envelope.data)
    if envelope.data is None:
        return ParseError(cause=ParseException("empty data"))
    return Success(envelope.data)


class RequestExecutor:
    """Runs requests against a Transport under the configured retry policy and parsers."""

    def __init__(
        self,
        config: NetworkConfig,
        transport: Transport,
        parsers: Sequence[Parser] | None = None,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ):
        self.config = config
        self.transport = transport
        self._sleep = sleep or asyncio.sleep
        self.parsers: tuple[Parser, ...] = tuple(parsers or (JsonParser.DEFAULT,))
        if not self.parsers:
            raise ValueError("at least one parser is required")

    def build_request(
        self,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
    ) -> HttpRequest:
        """Full URL is base + path; headers are defaults first, per-call values win by name."""
        content: bytes | None = None
        body_headers: dict[str, str] = {}
        if body is not None:
            content = select_parser(self.parsers, JSON_CONTENT_TYPE).encode(body)
            body_headers["Content-Type"] = JSON_CONTENT_TYPE
        return HttpRequest(
            url=join_url(self.config.base_url, path),
            method=method.upper(),
            headers=merge_headers(self.config.default_headers, body_headers, headers),
            body=content,
        )

    async def execute(self, request: HttpRequest, data_type: Any = Any) -> ApiResult[ApiResponse[Any]]:
        """Run `request` and parse the body as `ApiResponse[data_type]`. Business codes are not checked."""
        return await self.execute_typed(request, ApiResponse.type_info(data_type))

    async def execute_data(self, request: HttpRequest, data_type: Any = Any) -> ApiResult[Any]:
        """Run `request` and unwrap the envelope's data (see `unwrap_data`)."""
        result = await self.execute(request, data_type)
        if isinstance(result, Success):
            return unwrap_data(result.data)
        return result

    async def execute_typed(self, request: HttpRequest, type_info: TypeInfo[T]) -> ApiResult[T]:
        try:
            return await self._run(request, type_info)
        except Exception as exc:  # noqa: BLE001
            logger.warning("%s %s failed unexpectedly: %r", request.method, request.url, exc)
            return UnknownError(cause=exc)

    async def _run(self, request: HttpRequest, type_info: TypeInfo[T]) -> ApiResult[T]:
        policy = self.config.retry_policy
        attempt = 0
        while True:
            logger.debug("%s %s attempt %d", request.method, request.url, attempt + 1)
            prior: HttpResponse | None = None
            try:
                response = await self.transport.execute(request)
            except Exception as exc:  # noqa: BLE001
                error = ApiError.from_exception(exc)
            else:
                if response.is_success:
                    return self._parse(request, response, type_info)
                prior = response
                error = HttpError(
                    status_code=response.status_code,
                    message=status_message(response),
                    body=_body_snippet(response),
                )

            # Only HTTP and connectivity failures are offered to the policy; the rest are terminal.
            if policy is not None and isinstance(error, (HttpError, NetworkError)):
                decision = policy.decide(attempt, error, prior)
            else:
                decision = STOP

            if not decision.retry:
                logger.warning(
                    "%s %s failed after %d attempt(s): %s %s",
                    request.method,
                    request.url,
                    attempt + 1,
                    error.category.value,
                    error.message,
                )
                return error

            logger.info(
                "%s %s failed (%s), retrying in %.2fs",
                request.method,
                request.url,
                error.category.value,
                decision.delay,
            )
            await self._sleep(decision.delay)
            attempt += 1

    def _parse(self, request: HttpRequest, response: HttpResponse, type_info: TypeInfo[T]) -> ApiResult[T]:
        parser = select_parser(self.parsers, response.content_type)
        try:
            if response.meta.get("body_truncated"):
                limit = response.meta.get("body_bytes_limit", len(response.content))
                raise ParseException(f"response body exceeds {limit} bytes")
            return Success(parser.parse(response.content, type_info))
        except Exception as exc:  # noqa: BLE001
            error = ApiError.from_exception(exc)
            logger.warning("%s %s returned an unparseable body: %s", request.method, request.url, error.message)
            return error


__all__ = ["JSON_CONTENT_TYPE", "RequestExecutor", "status_message", "unwrap_data"]
