# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
apinet package entrypoint.

This package provides an asynchronous client for backend APIs that wrap every payload in a
`{code, data, msg}` envelope. Requests run through an execution pipeline with bounded, policy-driven
retry; failures are classified into a typed taxonomy and surfaced either as ApiResult values or as
raised exceptions. HTTP itself is abstracted behind an injectable Transport, and response bodies
are decoded by pluggable parsers against runtime type descriptors.
"""

from .client import NetworkClient
from .config import (
    HttpSettings,
    NetworkConfig,
    NetworkConfigBuilder,
    TimeoutConfig,
    load_http_settings,
    load_network_config,
)
from .errors import (
    BusinessException,
    ConnectTimeoutException,
    ErrorCategory,
    HttpException,
    NetworkConnectionException,
    NetworkException,
    ParseException,
    RequestTimeoutException,
    SocketTimeoutException,
    UnknownNetworkException,
)
from .http import (
    HttpRequest,
    HttpResponse,
    HttpxTransport,
    RetryDecision,
    RetryPolicy,
    Transport,
    create_default_transport,
)
from .log import setup_logging
from .models import (
    LOADING,
    ApiError,
    ApiResponse,
    ApiResult,
    BusinessError,
    HttpError,
    Loading,
    NetworkError,
    ParseError,
    Success,
    UnknownError,
)
from .parser import JsonParser, Parser, TypeInfo
from .pipeline import RequestExecutor
from .version import __version__

__all__ = [
    "LOADING",
    "ApiError",
    "ApiResponse",
    "ApiResult",
    "BusinessError",
    "BusinessException",
    "ConnectTimeoutException",
    "ErrorCategory",
    "HttpError",
    "HttpException",
    "HttpRequest",
    "HttpResponse",
    "HttpSettings",
    "HttpxTransport",
    "JsonParser",
    "Loading",
    "NetworkClient",
    "NetworkConfig",
    "NetworkConfigBuilder",
    "NetworkConnectionException",
    "NetworkError",
    "NetworkException",
    "ParseError",
    "ParseException",
    "Parser",
    "RequestExecutor",
    "RequestTimeoutException",
    "RetryDecision",
    "RetryPolicy",
    "SocketTimeoutException",
    "Success",
    "TimeoutConfig",
    "Transport",
    "TypeInfo",
    "UnknownError",
    "UnknownNetworkException",
    "create_default_transport",
    "load_http_settings",
    "load_network_config",
    "setup_logging",
    "__version__",
]
