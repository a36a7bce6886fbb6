"""pyreservauto - Watch the Reservauto car-sharing feed for a car near you."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyreservauto")
except PackageNotFoundError:
    __version__ = "0+local"
from pyreservauto.branches import BRANCHES, Branch, resolve_branch
from pyreservauto.client import ReservautoClient
from pyreservauto.config import WatchConfig
from pyreservauto.exceptions import (
    FeedFetchError,
    LocationResolutionError,
    NotificationError,
    ReservautoConfigError,
    ReservautoError,
    ReservautoTransportError,
    UnsupportedCityError,
)
from pyreservauto.geo import distance
from pyreservauto.models import Coordinate, FeedVehicleRecord, Vehicle
from pyreservauto.notify import NotificationController, NotifyAction
from pyreservauto.poller import Poller, select_candidates
from pyreservauto.radius import RadiusLadder, human_distance
from pyreservauto.retry import run_with_retry

__all__ = [
    "__version__",
    "BRANCHES",
    "Branch",
    "Coordinate",
    "FeedFetchError",
    "FeedVehicleRecord",
    "LocationResolutionError",
    "NotificationController",
    "NotificationError",
    "NotifyAction",
    "Poller",
    "RadiusLadder",
    "ReservautoClient",
    "ReservautoConfigError",
    "ReservautoError",
    "ReservautoTransportError",
    "UnsupportedCityError",
    "Vehicle",
    "WatchConfig",
    "distance",
    "human_distance",
    "resolve_branch",
    "run_with_retry",
    "select_candidates",
]
