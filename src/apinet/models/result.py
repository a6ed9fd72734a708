# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Unified result type for API calls.

An ApiResult is exactly one of:
- Loading: caller-side placeholder before a call completes (the pipeline never returns it)
- Success: the call produced data
- ApiError: one of HttpError, BusinessError, NetworkError, ParseError, UnknownError
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from ..errors import (
    NETWORK_CATEGORIES,
    BusinessException,
    ErrorCategory,
    HttpException,
    NetworkConnectionException,
    NetworkException,
    ParseException,
    UnknownNetworkException,
    categorize_exception,
)

T = TypeVar("T")


class ApiResult(Generic[T]):
    """Base of the Loading / Success / ApiError states."""

    __slots__ = ()

    def is_success(self) -> bool:
        return isinstance(self, Success)

    def is_error(self) -> bool:
        return isinstance(self, ApiError)

    def is_loading(self) -> bool:
        return isinstance(self, Loading)

    def get_data_or_none(self) -> T | None:
        if isinstance(self, Success):
            return self.data
        return None

    def get_data_or_throw(self) -> T:
        """Return the data, or raise the failure this result carries."""
        match self:
            case Success(data=data):
                return data
            case ApiError():
                raise self.to_exception()
            case Loading():
                raise RuntimeError("data is still loading")
        raise TypeError(f"unexpected result state: {type(self).__name__}")


class Loading(ApiResult[Any]):
    __slots__ = ()

    def __repr__(self) -> str:
        return "Loading"


LOADING = Loading()


@dataclass(frozen=True)
class Success(ApiResult[T]):
    data: T


class ApiError(ApiResult[Any]):
    """Classified failure of a call."""

    __slots__ = ()

    # Every variant also exposes `message: str`, as a field or a property.

    @property
    def category(self) -> ErrorCategory:
        raise NotImplementedError

    def to_exception(self) -> NetworkException:
        raise NotImplementedError

    @staticmethod
    def from_exception(exc: BaseException) -> ApiError:
        """Classify any exception into exactly one error variant."""
        category = categorize_exception(exc)
        match category:
            case ErrorCategory.HTTP:
                return HttpError(status_code=exc.status_code, message=exc.message, body=exc.body)  # type: ignore[attr-defined]
            case ErrorCategory.BUSINESS:
                return BusinessError(code=exc.code, message=exc.message, data=exc.data)  # type: ignore[attr-defined]
            case _ if category in NETWORK_CATEGORIES:
                return NetworkError(cause=exc)
            case ErrorCategory.PARSE:
                return ParseError(cause=exc)
            case _:
                return UnknownError(cause=exc)


@dataclass(frozen=True)
class HttpError(ApiError):
    status_code: int
    message: str
    body: str | None = None

    @property
    def category(self) -> ErrorCategory:
        return ErrorCategory.HTTP

    def to_exception(self) -> NetworkException:
        return HttpException(self.status_code, self.message, self.body)


@dataclass(frozen=True)
class BusinessError(ApiError):
    code: int
    message: str
    data: Any = None

    @property
    def category(self) -> ErrorCategory:
        return ErrorCategory.BUSINESS

    def to_exception(self) -> NetworkException:
        return BusinessException(self.code, self.message, self.data)


@dataclass(frozen=True)
class NetworkError(ApiError):
    cause: BaseException

    @property
    def category(self) -> ErrorCategory:
        return categorize_exception(self.cause)

    @property
    def message(self) -> str:
        return str(self.cause) or type(self.cause).__name__

    def to_exception(self) -> NetworkException:
        if isinstance(self.cause, NetworkConnectionException):
            return self.cause
        return NetworkConnectionException(f"network error: {self.message}", self.cause)


@dataclass(frozen=True)
class ParseError(ApiError):
    cause: BaseException

    @property
    def category(self) -> ErrorCategory:
        return ErrorCategory.PARSE

    @property
    def message(self) -> str:
        if isinstance(self.cause, ParseException):
            return self.cause.message
        return str(self.cause) or type(self.cause).__name__

    def to_exception(self) -> NetworkException:
        if isinstance(self.cause, ParseException):
            return self.cause
        return ParseException(self.message, self.cause)


@dataclass(frozen=True)
class UnknownError(ApiError):
    cause: BaseException

    @property
    def category(self) -> ErrorCategory:
        return ErrorCategory.UNKNOWN

    @property
    def message(self) -> str:
        return str(self.cause) or type(self.cause).__name__

    def to_exception(self) -> NetworkException:
        if isinstance(self.cause, UnknownNetworkException):
            return self.cause
        return UnknownNetworkException(f"unknown error: {self.message}", self.cause)


__all__ = [
    "LOADING",
    "ApiError",
    "ApiResult",
    "BusinessError",
    "HttpError",
    "Loading",
    "NetworkError",
    "ParseError",
    "Success",
    "UnknownError",
]
