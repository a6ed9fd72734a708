# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Parser abstraction."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, TypeVar

from .types import TypeInfo

T = TypeVar("T")


class Parser(Protocol):
    """Turns a raw response body into a typed value."""

    def parse(self, body: bytes, type_info: TypeInfo[T]) -> T:
        """Decode `body` against `type_info`; raise ParseException on any failure."""
        ...

    def supports(self, content_type: str) -> bool: ...

    def encode(self, value: Any) -> bytes: ...


def select_parser(parsers: Sequence[Parser], content_type: str | None) -> Parser:
    """Pick the first parser supporting `content_type`, falling back to the first registered one."""
    if not parsers:
        raise ValueError("at least one parser is required")
    if content_type:
        for parser in parsers:
            if parser.supports(content_type):
                return parser
    return parsers[0]


__all__ = ["Parser", "select_parser"]
