"""Available-vehicles endpoint.

Endpoint:
  - /WCF/LSI/LSIBookingServiceV3.svc/GetAvailableVehicles
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from pyreservauto._constants import AVAILABLE_VEHICLES_ENDPOINT
from pyreservauto._transport import Transport
from pyreservauto.config import WatchConfig
from pyreservauto.exceptions import FeedFetchError, ReservautoTransportError
from pyreservauto.models.coordinate import Coordinate
from pyreservauto.models.vehicle import FeedVehicleRecord, Vehicle

_logger = logging.getLogger(__name__)


def build_query(config: WatchConfig, branch_id: int) -> dict[str, int]:
    return {"BranchID": branch_id, "LanguageID": config.language_id}


def extract_records(payload: Any) -> list[dict[str, Any]]:
    """Pull the raw vehicle list out of the ``{"d": {"Vehicles": [...]}}`` envelope."""
    data = payload.get("d") if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        raise FeedFetchError("Feed envelope missing 'd' object", endpoint=AVAILABLE_VEHICLES_ENDPOINT)
    records = data.get("Vehicles")
    if not isinstance(records, list):
        raise FeedFetchError("Feed envelope missing 'Vehicles' list", endpoint=AVAILABLE_VEHICLES_ENDPOINT)
    if not all(isinstance(item, dict) for item in records):
        raise FeedFetchError("Feed vehicle records must be objects", endpoint=AVAILABLE_VEHICLES_ENDPOINT)
    return records


def parse_vehicles(payload: Any, observer: Coordinate) -> list[Vehicle]:
    """Map a feed payload to vehicles with distances from *observer*.

    All or nothing: one malformed record fails the whole payload.
    """
    records = extract_records(payload)
    try:
        return [FeedVehicleRecord.model_validate(item).to_vehicle(observer) for item in records]
    except ValidationError as exc:
        raise FeedFetchError(
            f"Malformed vehicle record in feed: {exc.error_count()} error(s)",
            endpoint=AVAILABLE_VEHICLES_ENDPOINT,
        ) from exc


async def fetch_available_vehicles(
    config: WatchConfig,
    transport: Transport,
    branch_id: int,
    observer: Coordinate,
) -> list[Vehicle]:
    """Fetch every available vehicle of a branch.

    Parameters
    ----------
    config : WatchConfig
        Watcher configuration (base URL, language).
    transport : Transport
        HTTP transport.
    branch_id : int
        ``BranchID`` of the service area.
    observer : Coordinate
        Position distances are measured from.

    Returns
    -------
    list[Vehicle]
        Vehicles in feed order.

    Raises
    ------
    FeedFetchError
        On any transport or parse failure.
    """
    url = f"{config.base_url}{AVAILABLE_VEHICLES_ENDPOINT}"
    params = build_query(config, branch_id)
    _logger.debug("Url: %s params=%s", url, params)

    try:
        payload = await transport.get_json(url, params)
    except ReservautoTransportError as exc:
        raise FeedFetchError(f"Could not fetch available vehicles: {exc}", endpoint=url) from exc

    vehicles = parse_vehicles(payload, observer)
    _logger.debug("Parsed %d vehicles for branch %d", len(vehicles), branch_id)
    return vehicles
