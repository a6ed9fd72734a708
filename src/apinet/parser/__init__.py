# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Response body parsers and type descriptors."""

from .base import Parser, select_parser
from .json_parser import JsonParser
from .types import Decoder, TypeInfo, decode_value

__all__ = [
    "Decoder",
    "JsonParser",
    "Parser",
    "TypeInfo",
    "decode_value",
    "select_parser",
]
