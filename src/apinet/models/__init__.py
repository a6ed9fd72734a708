# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Envelope and result exports for apinet."""

from .response import SUCCESS_CODE, ApiResponse
from .result import (
    LOADING,
    ApiError,
    ApiResult,
    BusinessError,
    HttpError,
    Loading,
    NetworkError,
    ParseError,
    Success,
    UnknownError,
)

__all__ = [
    "LOADING",
    "SUCCESS_CODE",
    "ApiError",
    "ApiResponse",
    "ApiResult",
    "BusinessError",
    "HttpError",
    "Loading",
    "NetworkError",
    "ParseError",
    "Success",
    "UnknownError",
]
