from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from pyreservauto.config import WatchConfig
from pyreservauto.exceptions import LocationResolutionError, ReservautoTransportError
from pyreservauto.location import (
    FallbackLocationProvider,
    GeoclueLocationProvider,
    IpLocationProvider,
    StaticLocationProvider,
    parse_where_am_i,
    resolve_observer,
)
from pyreservauto.models.coordinate import Coordinate

WHERE_AM_I_OUTPUT = """\
Client object: /org/freedesktop/GeoClue2/Client/1

New location:
Latitude:    45.501700°
Longitude:   -73.567300°
Accuracy:    25000.000000 meters
Description: GeoIP
Timestamp:   Mon 19 Oct 2026 10:00:00 (1792000000 seconds since the Epoch)
"""


class _FakeTransport:
    def __init__(self, responses: dict[str, Any]) -> None:
        self.responses = responses
        self.calls: list[str] = []

    async def get_json(self, url: str, params: Mapping[str, Any] | None = None) -> Any:
        self.calls.append(url)
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        return response


class _Failing:
    def __init__(self) -> None:
        self.calls = 0

    async def resolve(self) -> Coordinate:
        self.calls += 1
        raise LocationResolutionError("nope")


def test_parse_where_am_i() -> None:
    assert parse_where_am_i(WHERE_AM_I_OUTPUT) == Coordinate(latitude=45.5017, longitude=-73.5673)


def test_parse_where_am_i_without_position() -> None:
    assert parse_where_am_i("Client object: /org/freedesktop/GeoClue2/Client/1\n") is None


class _FakeProcess:
    def __init__(self, stdout: bytes, returncode: int = 0) -> None:
        self._stdout = stdout
        self.returncode = returncode

    async def communicate(self) -> tuple[bytes, bytes]:
        return self._stdout, b""


@pytest.mark.asyncio
async def test_geoclue_provider_parses_agent_output(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[tuple[Any, ...]] = []

    async def fake_exec(*args: Any, **_kwargs: Any) -> _FakeProcess:
        seen.append(args)
        return _FakeProcess(WHERE_AM_I_OUTPUT.encode())

    monkeypatch.setattr("pyreservauto.location.asyncio.create_subprocess_exec", fake_exec)

    coordinate = await GeoclueLocationProvider("where-am-i").resolve()

    assert coordinate.latitude == 45.5017
    assert seen == [("where-am-i", "-t", "6")]


@pytest.mark.asyncio
async def test_geoclue_provider_missing_binary() -> None:
    with pytest.raises(LocationResolutionError):
        await GeoclueLocationProvider("/nonexistent/where-am-i").resolve()


@pytest.mark.asyncio
async def test_geoclue_provider_without_fix(monkeypatch: pytest.MonkeyPatch) -> None:
    async def fake_exec(*_args: Any, **_kwargs: Any) -> _FakeProcess:
        return _FakeProcess(b"Client object: /x\n")

    monkeypatch.setattr("pyreservauto.location.asyncio.create_subprocess_exec", fake_exec)

    with pytest.raises(LocationResolutionError):
        await GeoclueLocationProvider("where-am-i").resolve()


@pytest.mark.asyncio
async def test_ip_provider_looks_up_public_ip_then_position() -> None:
    transport = _FakeTransport(
        {
            "https://ip.test": {"ip": "203.0.113.7"},
            "https://geo.test/203.0.113.7": {"status": "success", "lat": 43.65, "lon": -79.38},
        }
    )
    provider = IpLocationProvider(transport, ip_url="https://ip.test", geolocation_url="https://geo.test/{ip}")

    coordinate = await provider.resolve()

    assert coordinate == Coordinate(latitude=43.65, longitude=-79.38)
    assert transport.calls == ["https://ip.test", "https://geo.test/203.0.113.7"]


@pytest.mark.asyncio
async def test_ip_provider_wraps_transport_errors() -> None:
    transport = _FakeTransport({"https://ip.test": ReservautoTransportError("offline")})
    provider = IpLocationProvider(transport, ip_url="https://ip.test", geolocation_url="https://geo.test/{ip}")

    with pytest.raises(LocationResolutionError):
        await provider.resolve()


@pytest.mark.asyncio
async def test_ip_provider_without_position() -> None:
    transport = _FakeTransport(
        {
            "https://ip.test": {"ip": "203.0.113.7"},
            "https://geo.test/203.0.113.7": {"status": "fail"},
        }
    )
    provider = IpLocationProvider(transport, ip_url="https://ip.test", geolocation_url="https://geo.test/{ip}")

    with pytest.raises(LocationResolutionError):
        await provider.resolve()


@pytest.mark.asyncio
async def test_fallback_uses_first_success() -> None:
    failing = _Failing()
    target = Coordinate(latitude=1.0, longitude=2.0)
    provider = FallbackLocationProvider([failing, StaticLocationProvider(target)])

    assert await provider.resolve() == target
    assert failing.calls == 1


@pytest.mark.asyncio
async def test_fallback_suggests_location_flag_when_all_fail() -> None:
    provider = FallbackLocationProvider([_Failing(), _Failing()])

    with pytest.raises(LocationResolutionError, match="--location"):
        await provider.resolve()


@pytest.mark.asyncio
async def test_resolve_observer_prefers_configured_location() -> None:
    transport = _FakeTransport({})

    coordinate = await resolve_observer(WatchConfig(location="45.5,-73.6"), transport)

    assert coordinate == Coordinate(latitude=45.5, longitude=-73.6)
    assert transport.calls == []


@pytest.mark.asyncio
async def test_resolve_observer_retries_the_chain(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = 0

    async def fake_resolve(self: FallbackLocationProvider) -> Coordinate:
        nonlocal calls
        calls += 1
        raise LocationResolutionError("nothing")

    monkeypatch.setattr(FallbackLocationProvider, "resolve", fake_resolve)

    with pytest.raises(LocationResolutionError):
        await resolve_observer(WatchConfig(retries=2, retry_delay=0), _FakeTransport({}))

    assert calls == 3
