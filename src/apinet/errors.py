# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import json
import socket
from enum import Enum
from typing import Any

import httpx


class NetworkException(Exception):
    """Base class for every failure surfaced by the client."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class HttpException(NetworkException):
    """Response status outside [200, 300)."""

    def __init__(self, status_code: int, message: str, body: str | None = None):
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.body = body


class BusinessException(NetworkException):
    """Envelope `code` other than 200."""

    def __init__(self, code: int, message: str, data: Any = None):
        super().__init__(f"Business Error {code}: {message}")
        self.code = code
        self.message = message
        self.data = data


class ParseException(NetworkException):
    """Body could not be decoded into the expected type."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(f"Parse Error: {message}", cause)
        self.message = message


class NetworkConnectionException(NetworkException):
    """Connection refused/reset, DNS failure or another I/O failure."""

    def __init__(self, message: str = "network connection failed", cause: BaseException | None = None):
        super().__init__(message, cause)


class ConnectTimeoutException(NetworkConnectionException):
    def __init__(self, message: str = "connect timeout", cause: BaseException | None = None):
        super().__init__(message, cause)


class SocketTimeoutException(NetworkConnectionException):
    def __init__(self, message: str = "socket timeout", cause: BaseException | None = None):
        super().__init__(message, cause)


class RequestTimeoutException(SocketTimeoutException):
    """The whole attempt exceeded the request timeout budget."""

    def __init__(self, message: str = "request timeout", cause: BaseException | None = None):
        super().__init__(message, cause)


class UnknownNetworkException(NetworkException):
    def __init__(self, message: str = "unknown error", cause: BaseException | None = None):
        super().__init__(message, cause)


class TypeDecodeError(ValueError):
    """A decoded JSON value does not match the requested type."""

    def __init__(self, message: str, path: str = "$"):
        super().__init__(f"{path}: {message}")
        self.message = message
        self.path = path


class ErrorCategory(str, Enum):
    HTTP = "HTTP"
    BUSINESS = "BUSINESS"
    NETWORK = "NETWORK"
    CONNECT_TIMEOUT = "CONNECT_TIMEOUT"
    SOCKET_TIMEOUT = "SOCKET_TIMEOUT"
    PARSE = "PARSE"
    UNKNOWN = "UNKNOWN"


NETWORK_CATEGORIES = frozenset({ErrorCategory.NETWORK, ErrorCategory.CONNECT_TIMEOUT, ErrorCategory.SOCKET_TIMEOUT})


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.

    Every exception lands in exactly one category; unrecognized ones are UNKNOWN.
    """
    if isinstance(exc, HttpException):
        return ErrorCategory.HTTP

    if isinstance(exc, BusinessException):
        return ErrorCategory.BUSINESS

    if isinstance(exc, (ParseException, json.JSONDecodeError, TypeDecodeError, UnicodeDecodeError)):
        return ErrorCategory.PARSE

    if isinstance(exc, (ConnectTimeoutException, httpx.ConnectTimeout)):
        return ErrorCategory.CONNECT_TIMEOUT

    if isinstance(exc, (SocketTimeoutException, httpx.TimeoutException, TimeoutError)):
        return ErrorCategory.SOCKET_TIMEOUT

    if isinstance(exc, (NetworkConnectionException, httpx.TransportError)):
        return ErrorCategory.NETWORK

    # socket.gaierror and ConnectionError are OSError subclasses; listed for clarity.
    if isinstance(exc, (socket.gaierror, ConnectionError, OSError)):
        return ErrorCategory.NETWORK

    return ErrorCategory.UNKNOWN


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.HTTP: "Server answered with an HTTP error status",
        ErrorCategory.BUSINESS: "API reported a business error",
        ErrorCategory.NETWORK: "Network connectivity issue",
        ErrorCategory.CONNECT_TIMEOUT: "Timed out while connecting",
        ErrorCategory.SOCKET_TIMEOUT: "Timed out while waiting for the response",
        ErrorCategory.PARSE: "Response body could not be decoded",
        ErrorCategory.UNKNOWN: "Unexpected error",
        None: "",
    }
    return mapping.get(category, "Request failed")


__all__ = [
    "BusinessException",
    "ConnectTimeoutException",
    "ErrorCategory",
    "HttpException",
    "NETWORK_CATEGORIES",
    "NetworkConnectionException",
    "NetworkException",
    "ParseException",
    "RequestTimeoutException",
    "SocketTimeoutException",
    "TypeDecodeError",
    "UnknownNetworkException",
    "categorize_exception",
    "error_category_to_reason",
]
