# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Retry policy: when to try a failed request again, and after how long."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import ClassVar

from ..models.result import ApiError, NetworkError
from .models import HttpResponse

RetryPredicate = Callable[[HttpResponse | None, ApiError], bool]


def default_should_retry(prior: HttpResponse | None, error: ApiError) -> bool:  # noqa: ARG001
    """Retry connectivity failures only (I/O errors, connect/socket/request timeouts)."""
    return isinstance(error, NetworkError)


def retry_everything(prior: HttpResponse | None, error: ApiError) -> bool:  # noqa: ARG001
    return True


@dataclass(frozen=True)
class RetryDecision:
    retry: bool
    delay: float = 0.0


STOP = RetryDecision(retry=False)


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded retry with linear backoff.

    `max_retries` counts retries after the first attempt, so a permanently failing retryable request
    is attempted `max_retries + 1` times. The n-th retry (0-indexed) waits `retry_delay * (n + 1)`
    seconds.
    """

    max_retries: int = 3
    retry_delay: float = 1.0
    should_retry: RetryPredicate = default_should_retry

    DEFAULT: ClassVar[RetryPolicy]
    NO_RETRY: ClassVar[RetryPolicy]
    AGGRESSIVE: ClassVar[RetryPolicy]
    NETWORK_ONLY: ClassVar[RetryPolicy]

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.retry_delay < 0:
            raise ValueError("retry_delay must be >= 0")

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def delay_for(self, attempt: int) -> float:
        return self.retry_delay * (attempt + 1)

    def decide(self, attempt: int, error: ApiError, prior: HttpResponse | None = None) -> RetryDecision:
        """
        Decide whether failure number `attempt` (0-indexed) is retried.

        The attempt limit is checked before the predicate, so it always wins.
        """
        if attempt >= self.max_retries:
            return STOP
        if not self.should_retry(prior, error):
            return STOP
        return RetryDecision(retry=True, delay=self.delay_for(attempt))


RetryPolicy.DEFAULT = RetryPolicy()
RetryPolicy.NO_RETRY = RetryPolicy(max_retries=0)
RetryPolicy.AGGRESSIVE = RetryPolicy(max_retries=5, retry_delay=0.5, should_retry=retry_everything)
RetryPolicy.NETWORK_ONLY = RetryPolicy(max_retries=3, retry_delay=1.0, should_retry=default_should_retry)


__all__ = [
    "STOP",
    "RetryDecision",
    "RetryPolicy",
    "RetryPredicate",
    "default_should_retry",
    "retry_everything",
]
