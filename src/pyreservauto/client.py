"""High-level async client for the Reservauto availability service."""

from __future__ import annotations

from typing import Any

import aiohttp

from pyreservauto._api.vehicles import fetch_available_vehicles
from pyreservauto._transport import HttpTransport
from pyreservauto.config import WatchConfig
from pyreservauto.exceptions import ReservautoError
from pyreservauto.models.coordinate import Coordinate
from pyreservauto.models.vehicle import Vehicle


class ReservautoClient:
    """Async client for the Reservauto vehicle feed.

    Usage::

        async with ReservautoClient(config) as client:
            vehicles = await client.get_available_vehicles(3, observer)
    """

    def __init__(
        self,
        config: WatchConfig,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: HttpTransport | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> ReservautoClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(
            self._http_session,
            request_timeout=self._config.request_timeout,
        )
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @property
    def transport(self) -> HttpTransport:
        if self._transport is None:
            raise ReservautoError("Client not initialized. Use 'async with ReservautoClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Read endpoints
    # ------------------------------------------------------------------

    async def get_available_vehicles(self, branch_id: int, observer: Coordinate) -> list[Vehicle]:
        """Fetch available vehicles of a branch with distances from *observer*.

        A single attempt; callers wrap it in
        :func:`pyreservauto.retry.run_with_retry`.
        """
        return await fetch_available_vehicles(self._config, self.transport, branch_id, observer)
