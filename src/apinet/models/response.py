# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Standard `{code, data, msg}` response envelope."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, is_dataclass
from typing import Any, Generic, TypeVar

from ..errors import TypeDecodeError
from ..parser.types import TypeInfo, decode_value

T = TypeVar("T")

SUCCESS_CODE = 200

_ENVELOPE_FIELDS = frozenset({"code", "data", "msg"})


@dataclass(frozen=True)
class ApiResponse(Generic[T]):
    """
    Application-level envelope returned by backend APIs.

    `code` is the business status and is independent of the HTTP status: an HTTP 200 response may
    still carry `code != 200`.
    """

    code: int
    data: T | None = None
    msg: str = ""

    def is_success(self) -> bool:
        return self.code == SUCCESS_CODE

    def is_failure(self) -> bool:
        return not self.is_success()

    def to_dict(self) -> dict[str, Any]:
        data = self.data
        if is_dataclass(data) and not isinstance(data, type):
            data = asdict(data)
        return {"code": self.code, "data": data, "msg": self.msg}

    @classmethod
    def from_mapping(cls, value: Any, data_type: Any = Any, *, strict: bool = False) -> ApiResponse[Any]:
        """Decode a JSON object into an envelope whose `data` matches `data_type`."""
        if not isinstance(value, Mapping):
            raise TypeDecodeError(f"expected envelope object, got {type(value).__name__}")
        if strict:
            unknown = sorted(str(key) for key in value if key not in _ENVELOPE_FIELDS)
            if unknown:
                raise TypeDecodeError(f"unknown envelope field(s): {', '.join(unknown)}")
        if "code" not in value:
            raise TypeDecodeError("missing required field", "$.code")

        code = decode_value(int, value["code"], strict=strict, path="$.code")

        if "msg" not in value or (value["msg"] is None and not strict):
            msg = ""
        else:
            msg = decode_value(str, value["msg"], strict=strict, path="$.msg")

        raw_data = value.get("data")
        data = None
        if raw_data is not None:
            try:
                data = TypeInfo.of(data_type).decode(raw_data, strict=strict)
            except TypeDecodeError as exc:
                raise TypeDecodeError(exc.message, "$.data" + exc.path.removeprefix("$")) from exc
        return cls(code=code, data=data, msg=msg)

    @classmethod
    def type_info(cls, data_type: Any = Any) -> TypeInfo[ApiResponse[Any]]:
        """Descriptor for `ApiResponse[data_type]` backed by a decode closure."""
        data_info = TypeInfo.of(data_type)

        def _decode(value: Any, strict: bool) -> ApiResponse[Any]:
            return cls.from_mapping(value, data_info, strict=strict)

        return TypeInfo(type=cls, decoder=_decode, name=f"ApiResponse[{data_info.display_name}]")


__all__ = ["ApiResponse", "SUCCESS_CODE"]
