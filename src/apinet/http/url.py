# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""URL helpers for base addresses and request paths."""

from __future__ import annotations

from urllib.parse import urlsplit

ALLOWED_SCHEMES = ("http://", "https://")


def validate_base_url(base_url: str) -> str:
    """Return `base_url` unchanged, or raise ValueError when it is blank or not http(s)."""
    if not isinstance(base_url, str) or not base_url.strip():
        raise ValueError("base_url must not be empty")
    if not base_url.startswith(ALLOWED_SCHEMES):
        raise ValueError("base_url must start with http:// or https://")
    if not urlsplit(base_url).netloc:
        raise ValueError(f"base_url has no host: {base_url!r}")
    return base_url


def join_url(base_url: str, path: str) -> str:
    """
    Concatenate a base address and a request path.

    Example:
      https://api.example.com/v1 + /user/1 -> https://api.example.com/v1/user/1

    Absolute http(s) paths are returned unchanged.
    """
    if not path:
        return base_url
    if path.startswith(ALLOWED_SCHEMES):
        return path
    if base_url.endswith("/") and path.startswith("/"):
        return base_url + path[1:]
    if not base_url.endswith("/") and not path.startswith(("/", "?")):
        return f"{base_url}/{path}"
    return base_url + path


__all__ = ["ALLOWED_SCHEMES", "join_url", "validate_base_url"]
