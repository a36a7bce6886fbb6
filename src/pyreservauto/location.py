"""Observer location providers.

The observer position is resolved once at startup, either from a fixed
``"lat,lng"`` value or by asking the geoclue demo agent and falling
back to IP geolocation.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Protocol

from pyreservauto._constants import (
    GEOCLUE_TIMEOUT_S,
    GEOCLUE_WHERE_AM_I,
    IP_GEOLOCATION_URL,
    PUBLIC_IP_URL,
)
from pyreservauto._transport import Transport
from pyreservauto.config import WatchConfig
from pyreservauto.exceptions import LocationResolutionError, ReservautoTransportError
from pyreservauto.ingestion.normalize import finite_float, safe_str, strip_unit
from pyreservauto.models.coordinate import Coordinate
from pyreservauto.retry import run_with_retry

_logger = logging.getLogger(__name__)


class LocationProvider(Protocol):
    async def resolve(self) -> Coordinate:
        ...


class StaticLocationProvider:
    """Always returns the configured coordinate."""

    def __init__(self, coordinate: Coordinate) -> None:
        self._coordinate = coordinate

    async def resolve(self) -> Coordinate:
        return self._coordinate


def parse_where_am_i(output: str) -> Coordinate | None:
    """Extract the position from ``where-am-i`` output.

    The agent prints ``Key: value`` lines, e.g. ``Latitude: 45.5017°``.
    Returns ``None`` when either coordinate is missing.
    """
    fields: dict[str, str] = {}
    for line in output.splitlines():
        key, sep, value = line.partition(":")
        if sep:
            fields[key.strip()] = value.strip()

    lat = finite_float(strip_unit(fields.get("Latitude", ""), "°"))
    lng = finite_float(strip_unit(fields.get("Longitude", ""), "°"))
    if lat is None or lng is None:
        return None
    return Coordinate(latitude=lat, longitude=lng)


class GeoclueLocationProvider:
    """Ask the geoclue ``where-am-i`` demo agent for the current position."""

    def __init__(self, executable: str = GEOCLUE_WHERE_AM_I, *, timeout: int = GEOCLUE_TIMEOUT_S) -> None:
        self._executable = executable
        self._timeout = timeout

    async def resolve(self) -> Coordinate:
        _logger.info("Getting current location")
        try:
            proc = await asyncio.create_subprocess_exec(
                self._executable,
                "-t",
                str(self._timeout),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise LocationResolutionError(f"Could not run {self._executable}: {exc}") from exc

        stdout, stderr = await proc.communicate()
        if proc.returncode != 0:
            raise LocationResolutionError(
                f"{self._executable} exited with {proc.returncode}: {stderr.decode(errors='replace').strip()[:200]}"
            )

        coordinate = parse_where_am_i(stdout.decode(errors="replace"))
        if coordinate is None:
            raise LocationResolutionError("geoclue did not report a position")
        return coordinate


class IpLocationProvider:
    """Geolocate the public IP address of this machine."""

    def __init__(
        self,
        transport: Transport,
        *,
        ip_url: str = PUBLIC_IP_URL,
        geolocation_url: str = IP_GEOLOCATION_URL,
    ) -> None:
        self._transport = transport
        self._ip_url = ip_url
        self._geolocation_url = geolocation_url

    async def resolve(self) -> Coordinate:
        try:
            ip_payload = await self._transport.get_json(self._ip_url, {"format": "json"})
            ip = safe_str(ip_payload.get("ip")) if isinstance(ip_payload, dict) else None
            if ip is None:
                raise LocationResolutionError("Public IP lookup returned no address")

            geo_payload = await self._transport.get_json(self._geolocation_url.format(ip=ip))
        except ReservautoTransportError as exc:
            raise LocationResolutionError(f"IP geolocation failed: {exc}") from exc

        if not isinstance(geo_payload, dict):
            raise LocationResolutionError("IP geolocation returned an unexpected payload")
        lat = finite_float(geo_payload.get("lat"))
        lng = finite_float(geo_payload.get("lon"))
        if lat is None or lng is None:
            raise LocationResolutionError("IP geolocation returned no position")
        return Coordinate(latitude=lat, longitude=lng)


class FallbackLocationProvider:
    """Try each provider in turn; the first position wins."""

    def __init__(self, providers: Sequence[LocationProvider]) -> None:
        if not providers:
            raise ValueError("at least one location provider is required")
        self._providers = tuple(providers)

    async def resolve(self) -> Coordinate:
        for provider in self._providers:
            try:
                return await provider.resolve()
            except LocationResolutionError as exc:
                _logger.info("%s failed: %s", type(provider).__name__, exc)
        raise LocationResolutionError(
            "Could not get location, try adding the location manually with the --location arg"
        )


async def resolve_observer(config: WatchConfig, transport: Transport) -> Coordinate:
    """Resolve the observer position for *config*.

    A configured ``location`` is used as is.  Otherwise the geoclue → IP
    chain is run under :func:`run_with_retry`.

    Raises
    ------
    LocationResolutionError
        If no provider produced a position within the retry budget.
    """
    if config.location:
        return await StaticLocationProvider(Coordinate.parse(config.location)).resolve()

    chain = FallbackLocationProvider([GeoclueLocationProvider(), IpLocationProvider(transport)])
    return await run_with_retry(
        chain.resolve,
        retries=config.retries,
        delay=config.retry_delay,
        retry_on=(LocationResolutionError,),
    )
