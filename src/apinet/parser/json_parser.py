# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""JSON body parser."""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any, ClassVar, TypeVar

from ..errors import ParseException, TypeDecodeError
from .types import TypeInfo

T = TypeVar("T")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def _encode_default(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class JsonParser:
    """
    Decode JSON bodies into typed values.

    The default (lenient) parser ignores unknown fields and tolerates coercible scalar mismatches;
    the strict parser rejects both, along with NaN/Infinity literals.
    """

    DEFAULT: ClassVar[JsonParser]
    STRICT: ClassVar[JsonParser]

    def __init__(self, *, strict: bool = False, encoding: str = "utf-8"):
        self.strict = strict
        self.encoding = encoding

    def __repr__(self) -> str:
        return f"JsonParser(strict={self.strict})"

    def parse(self, body: bytes | str, type_info: TypeInfo[T]) -> T:
        try:
            text = body if isinstance(body, str) else self._decode_text(body)
            if not text.strip():
                raise ParseException("empty response body")
            if self.strict:
                value = json.loads(text, parse_constant=_reject_constant)
            else:
                value = json.loads(text)
            return type_info.decode(value, strict=self.strict)
        except ParseException:
            raise
        except json.JSONDecodeError as exc:
            raise ParseException(f"JSON decode failed: {exc}", exc) from exc
        except TypeDecodeError as exc:
            raise ParseException(f"cannot decode {type_info.display_name}: {exc}", exc) from exc
        except Exception as exc:  # noqa: BLE001
            raise ParseException(f"failed to parse response: {exc}", exc) from exc

    def _decode_text(self, body: bytes) -> str:
        # utf-8-sig drops a leading BOM in lenient mode.
        encoding = self.encoding
        if not self.strict and encoding.lower().replace("_", "-") == "utf-8":
            encoding = "utf-8-sig"
        return body.decode(encoding)

    def supports(self, content_type: str) -> bool:
        return "json" in (content_type or "").lower()

    def encode(self, value: Any) -> bytes:
        if isinstance(value, bytes):
            return value
        return json.dumps(value, default=_encode_default, ensure_ascii=False, allow_nan=not self.strict).encode(self.encoding)


JsonParser.DEFAULT = JsonParser()
JsonParser.STRICT = JsonParser(strict=True)


__all__ = ["JsonParser"]
