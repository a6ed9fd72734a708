# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models exchanged with Transport implementations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .headers import header_value

Headers = dict[str, str]


@dataclass
class HttpRequest:
    """Normalized request representation consumed by Transport implementations."""

    url: str
    method: str = "GET"
    headers: Headers = field(default_factory=dict)
    body: bytes | None = None
    timeout: float | None = None


@dataclass
class HttpResponse:
    """Status, headers and the fully read body of one HTTP exchange."""

    status_code: int
    reason: str = ""
    headers: Headers = field(default_factory=dict)
    content: bytes = b""
    url: str | None = None
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def content_type(self) -> str:
        return header_value(self.headers, "Content-Type")

    @property
    def text(self) -> str:
        """Best-effort text rendering of the body."""
        return self.content.decode("utf-8", errors="replace")
