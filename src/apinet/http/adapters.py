# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Programmable Transport implementations for tests and offline use."""

from __future__ import annotations

from collections.abc import Iterable

from ..errors import NetworkConnectionException
from .models import HttpRequest, HttpResponse
from .transport import Transport

Outcome = HttpResponse | BaseException


def _resolve(outcome: Outcome) -> HttpResponse:
    if isinstance(outcome, BaseException):
        raise outcome
    return outcome


class StubTransport(Transport):
    """Deterministic, URL-keyed Transport for tests."""

    def __init__(self, responses: dict[str, Outcome] | None = None):
        self._responses = dict(responses or {})
        self.requests: list[HttpRequest] = []
        self.closed = False

    def add(self, url: str, outcome: Outcome) -> None:
        self._responses[url] = outcome

    async def execute(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        if request.url in self._responses:
            return _resolve(self._responses[request.url])
        raise NetworkConnectionException(f"No stubbed response configured for {request.url}")

    async def close(self) -> None:
        self.closed = True


class SequenceTransport(Transport):
    """Transport that replays a scripted sequence of responses/exceptions; the last one repeats."""

    def __init__(self, outcomes: Iterable[Outcome]):
        self._outcomes = list(outcomes)
        if not self._outcomes:
            raise ValueError("SequenceTransport needs at least one outcome")
        self.requests: list[HttpRequest] = []
        self.close_calls = 0

    @property
    def calls(self) -> int:
        return len(self.requests)

    async def execute(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        return _resolve(self._outcomes[min(self.calls - 1, len(self._outcomes) - 1)])

    async def close(self) -> None:
        self.close_calls += 1


__all__ = ["Outcome", "SequenceTransport", "StubTransport"]
