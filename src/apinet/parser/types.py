# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Runtime type descriptors and the decoder behind them.

Generic parameters are gone by the time a response body is parsed, so every typed call carries a
TypeInfo describing the payload it expects. A TypeInfo either wraps a plain type understood by
`decode_value` (scalars, containers, Optional, Enum and dataclasses) or a caller-supplied decode
closure for anything else.
"""

from __future__ import annotations

import dataclasses
import types
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar, Union, get_args, get_origin, get_type_hints

from ..errors import TypeDecodeError

T = TypeVar("T")

Decoder = Callable[[Any, bool], Any]

_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off"}


@dataclass(frozen=True)
class TypeInfo(Generic[T]):
    """Descriptor of the payload type a call expects."""

    type: Any = Any
    decoder: Decoder | None = None
    name: str | None = None

    @classmethod
    def of(cls, target: Any) -> TypeInfo[Any]:
        """Normalize a type (or an existing TypeInfo) into a TypeInfo."""
        if isinstance(target, TypeInfo):
            return target
        return cls(type=target)

    @property
    def display_name(self) -> str:
        if self.name:
            return self.name
        return _type_name(self.type)

    def decode(self, value: Any, *, strict: bool = False) -> T:
        if self.decoder is not None:
            return self.decoder(value, strict)
        return decode_value(self.type, value, strict=strict)


def _type_name(tp: Any) -> str:
    if tp is Any:
        return "Any"
    if isinstance(tp, type):
        return tp.__name__
    return str(tp).replace("typing.", "")


def _is_optional(tp: Any) -> bool:
    return get_origin(tp) in (Union, types.UnionType) and type(None) in get_args(tp)


def decode_value(tp: Any, value: Any, *, strict: bool = False, path: str = "$") -> Any:
    """Decode a JSON-shaped value into `tp`, raising TypeDecodeError on mismatch."""
    if tp is Any or tp is object:
        return value

    if tp is None or tp is type(None):
        if value is None:
            return None
        raise TypeDecodeError("expected null", path)

    origin = get_origin(tp)
    if origin in (Union, types.UnionType):
        return _decode_union(get_args(tp), value, strict=strict, path=path)

    if value is None:
        raise TypeDecodeError(f"expected {_type_name(tp)}, got null", path)

    if origin in (list, Sequence, tuple, set, frozenset) or tp in (list, tuple, set, frozenset):
        return _decode_sequence(tp, origin or tp, value, strict=strict, path=path)

    if origin in (dict, Mapping) or tp is dict:
        return _decode_mapping(tp, value, strict=strict, path=path)

    if isinstance(tp, type) and dataclasses.is_dataclass(tp):
        return _decode_dataclass(tp, value, strict=strict, path=path)

    if isinstance(tp, type) and issubclass(tp, Enum):
        try:
            return tp(value)
        except ValueError as exc:
            raise TypeDecodeError(f"{value!r} is not a valid {tp.__name__}", path) from exc

    if tp in (bool, int, float, str):
        return _decode_scalar(tp, value, strict=strict, path=path)

    raise TypeDecodeError(f"no decoder for {_type_name(tp)}; supply TypeInfo(decoder=...)", path)


def _decode_union(args: tuple[Any, ...], value: Any, *, strict: bool, path: str) -> Any:
    if value is None and type(None) in args:
        return None
    candidates = [arg for arg in args if arg is not type(None)]
    last_error: TypeDecodeError | None = None
    # Exact matches win over coercions.
    modes = (True,) if strict else (True, False)
    for mode in modes:
        for arg in candidates:
            try:
                return decode_value(arg, value, strict=mode, path=path)
            except TypeDecodeError as exc:
                last_error = exc
    raise last_error or TypeDecodeError("no matching union member", path)


def _decode_scalar(tp: type, value: Any, *, strict: bool, path: str) -> Any:
    if tp is bool:
        if isinstance(value, bool):
            return value
        if not strict:
            if isinstance(value, str) and value.strip().lower() in _TRUE_STRINGS | _FALSE_STRINGS:
                return value.strip().lower() in _TRUE_STRINGS
            if isinstance(value, int) and value in (0, 1):
                return bool(value)
    elif tp is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if not strict:
            if isinstance(value, float) and value.is_integer():
                return int(value)
            if isinstance(value, str):
                try:
                    return int(value.strip())
                except ValueError:
                    pass
    elif tp is float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        if not strict and isinstance(value, str):
            try:
                return float(value.strip())
            except ValueError:
                pass
    elif tp is str:
        if isinstance(value, str):
            return value
        if not strict:
            if isinstance(value, bool):
                return "true" if value else "false"
            if isinstance(value, (int, float)):
                return str(value)
    raise TypeDecodeError(f"expected {tp.__name__}, got {type(value).__name__}", path)


def _decode_sequence(tp: Any, origin: Any, value: Any, *, strict: bool, path: str) -> Any:
    if not isinstance(value, list):
        raise TypeDecodeError(f"expected array, got {type(value).__name__}", path)
    args = get_args(tp)
    if origin is tuple and args and args[-1] is not Ellipsis:
        if len(args) != len(value):
            raise TypeDecodeError(f"expected {len(args)} items, got {len(value)}", path)
        return tuple(decode_value(arg, item, strict=strict, path=f"{path}[{i}]") for i, (arg, item) in enumerate(zip(args, value)))
    item_type = args[0] if args else Any
    items = [decode_value(item_type, item, strict=strict, path=f"{path}[{i}]") for i, item in enumerate(value)]
    if origin in (tuple, set, frozenset):
        return origin(items)
    return items


def _decode_mapping(tp: Any, value: Any, *, strict: bool, path: str) -> dict[Any, Any]:
    if not isinstance(value, Mapping):
        raise TypeDecodeError(f"expected object, got {type(value).__name__}", path)
    args = get_args(tp)
    key_type, value_type = args if len(args) == 2 else (Any, Any)
    return {
        decode_value(key_type, key, strict=strict, path=path): decode_value(value_type, item, strict=strict, path=f"{path}.{key}")
        for key, item in value.items()
    }


def _decode_dataclass(cls: type, value: Any, *, strict: bool, path: str) -> Any:
    if not isinstance(value, Mapping):
        raise TypeDecodeError(f"expected object for {cls.__name__}, got {type(value).__name__}", path)
    try:
        hints = get_type_hints(cls)
    except Exception as exc:  # noqa: BLE001
        raise TypeDecodeError(f"cannot resolve annotations of {cls.__name__}: {exc}", path) from exc

    fields = {f.name: f for f in dataclasses.fields(cls) if f.init}
    if strict:
        unknown = sorted(str(key) for key in value if key not in fields)
        if unknown:
            raise TypeDecodeError(f"unknown field(s) for {cls.__name__}: {', '.join(unknown)}", path)

    kwargs: dict[str, Any] = {}
    for name, field in fields.items():
        field_type = hints.get(name, Any)
        field_path = f"{path}.{name}"
        has_default = field.default is not dataclasses.MISSING or field.default_factory is not dataclasses.MISSING
        if name not in value:
            if has_default:
                continue
            if not strict and _is_optional(field_type):
                kwargs[name] = None
                continue
            raise TypeDecodeError("missing required field", field_path)
        raw = value[name]
        if raw is None and has_default and not strict and not _is_optional(field_type):
            continue
        kwargs[name] = decode_value(field_type, raw, strict=strict, path=field_path)
    return cls(**kwargs)


__all__ = ["Decoder", "TypeInfo", "decode_value"]
