"""Data models for Reservauto feed responses."""

from pyreservauto.models.coordinate import Coordinate
from pyreservauto.models.vehicle import FeedVehicleRecord, Vehicle

__all__ = [
    "Coordinate",
    "FeedVehicleRecord",
    "Vehicle",
]
