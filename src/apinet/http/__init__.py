# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP transport exports."""

from .adapters import SequenceTransport, StubTransport
from .headers import header_value, merge_headers, normalize_headers
from .httpx_transport import HttpxTransport
from .models import Headers, HttpRequest, HttpResponse
from .retry import RetryDecision, RetryPolicy, default_should_retry, retry_everything
from .transport import Transport, create_default_transport
from .url import join_url, validate_base_url

__all__ = [
    "Headers",
    "HttpRequest",
    "HttpResponse",
    "HttpxTransport",
    "RetryDecision",
    "RetryPolicy",
    "SequenceTransport",
    "StubTransport",
    "Transport",
    "create_default_transport",
    "default_should_retry",
    "header_value",
    "join_url",
    "merge_headers",
    "normalize_headers",
    "retry_everything",
    "validate_base_url",
]
