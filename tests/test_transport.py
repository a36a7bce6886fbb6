from __future__ import annotations

import asyncio

import aiohttp
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer as _TestServer

from pyreservauto._transport import HttpTransport
from pyreservauto.client import ReservautoClient
from pyreservauto.config import WatchConfig
from pyreservauto.exceptions import FeedFetchError, ReservautoError, ReservautoTransportError
from pyreservauto.models.coordinate import Coordinate


def _app() -> web.Application:
    async def feed(request: web.Request) -> web.Response:
        return web.json_response(
            {
                "d": {
                    "Vehicles": [
                        {
                            "CarBrand": "Hyundai",
                            "CarModel": "Kona",
                            "CarPlate": request.query["BranchID"],
                            "CarColor": "Grey",
                            "Latitude": 45.5,
                            "Longitude": -73.6,
                        }
                    ]
                }
            }
        )

    async def broken(_request: web.Request) -> web.Response:
        return web.Response(status=503, text="maintenance")

    async def not_json(_request: web.Request) -> web.Response:
        return web.Response(text="<html>")

    async def slow(_request: web.Request) -> web.Response:
        await asyncio.sleep(0.5)
        return web.json_response({})

    app = web.Application()
    app.router.add_get("/WCF/LSI/LSIBookingServiceV3.svc/GetAvailableVehicles", feed)
    app.router.add_get("/broken", broken)
    app.router.add_get("/not-json", not_json)
    app.router.add_get("/slow", slow)
    return app


@pytest.mark.asyncio
async def test_get_json_passes_query_parameters() -> None:
    async with _TestServer(_app()) as server, aiohttp.ClientSession() as session:
        transport = HttpTransport(session)
        url = str(server.make_url("/WCF/LSI/LSIBookingServiceV3.svc/GetAvailableVehicles"))

        payload = await transport.get_json(url, {"BranchID": 2, "LanguageID": 2})

    assert payload["d"]["Vehicles"][0]["CarPlate"] == "2"


@pytest.mark.asyncio
async def test_non_200_raises_transport_error_with_status() -> None:
    async with _TestServer(_app()) as server, aiohttp.ClientSession() as session:
        transport = HttpTransport(session)

        with pytest.raises(ReservautoTransportError) as excinfo:
            await transport.get_json(str(server.make_url("/broken")))

    assert excinfo.value.status_code == 503


@pytest.mark.asyncio
async def test_invalid_json_raises_transport_error() -> None:
    async with _TestServer(_app()) as server, aiohttp.ClientSession() as session:
        transport = HttpTransport(session)

        with pytest.raises(ReservautoTransportError, match="Invalid JSON"):
            await transport.get_json(str(server.make_url("/not-json")))


@pytest.mark.asyncio
async def test_slow_response_times_out() -> None:
    async with _TestServer(_app()) as server, aiohttp.ClientSession() as session:
        transport = HttpTransport(session, request_timeout=0.05)

        with pytest.raises(ReservautoTransportError):
            await transport.get_json(str(server.make_url("/slow")))


@pytest.mark.asyncio
async def test_client_fetches_vehicles_from_server() -> None:
    async with _TestServer(_app()) as server:
        config = WatchConfig(base_url=str(server.make_url("")).rstrip("/"))
        async with ReservautoClient(config) as client:
            vehicles = await client.get_available_vehicles(1, Coordinate(latitude=45.5, longitude=-73.6))

    assert len(vehicles) == 1
    assert vehicles[0].label == "Hyundai Kona"
    assert vehicles[0].plate == "1"
    assert vehicles[0].distance_m == 0.0


@pytest.mark.asyncio
async def test_client_wraps_http_errors_in_feed_error() -> None:
    async with _TestServer(_app()) as server:
        config = WatchConfig(base_url=str(server.make_url("/broken")))
        async with ReservautoClient(config) as client:
            with pytest.raises(FeedFetchError):
                await client.get_available_vehicles(1, Coordinate(latitude=45.5, longitude=-73.6))


def test_client_requires_context_manager() -> None:
    client = ReservautoClient(WatchConfig())

    with pytest.raises(ReservautoError):
        _ = client.transport
