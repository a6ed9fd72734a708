# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport abstraction and factory."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from .models import HttpRequest, HttpResponse

if TYPE_CHECKING:
    from ..config import HttpSettings, NetworkConfig


class Transport(Protocol):
    """
    Performs exactly one HTTP exchange.

    Connectivity failures are raised (NetworkConnectionException or a subtype); any status code is
    returned as an HttpResponse.
    """

    async def execute(self, request: HttpRequest) -> HttpResponse: ...

    async def close(self) -> None: ...


def create_default_transport(config: NetworkConfig, settings: HttpSettings | None = None) -> Transport:
    """Factory for the default httpx-backed transport."""
    from .httpx_transport import HttpxTransport

    return HttpxTransport(config, settings)


__all__ = ["Transport", "create_default_transport"]
