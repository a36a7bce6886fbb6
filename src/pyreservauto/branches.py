"""Supported cities and their Reservauto branches."""

from __future__ import annotations

import dataclasses

from pyreservauto.exceptions import UnsupportedCityError

_QUEBEC_BOOKING_HOST = "quebec.client.reservauto.net"
_ONTARIO_BOOKING_HOST = "ontario.client.reservauto.net"


@dataclasses.dataclass(frozen=True)
class Branch:
    """A provider service area.

    Parameters
    ----------
    city : str
        Lower-case city name used on the command line.
    branch_id : int
        ``BranchID`` sent to the availability feed.
    booking_host : str
        Host of the regional booking site.
    """

    city: str
    branch_id: int
    booking_host: str

    @property
    def booking_url(self) -> str:
        return f"https://{self.booking_host}/bookCar"


BRANCHES: dict[str, Branch] = {
    "montreal": Branch("montreal", 1, _QUEBEC_BOOKING_HOST),
    "quebec": Branch("quebec", 2, _QUEBEC_BOOKING_HOST),
    "toronto": Branch("toronto", 3, _ONTARIO_BOOKING_HOST),
}

DEFAULT_CITY = "toronto"


def supported_cities() -> tuple[str, ...]:
    return tuple(BRANCHES)


def resolve_branch(city: str) -> Branch:
    """Look up the branch for *city* (case-insensitive).

    Raises
    ------
    UnsupportedCityError
        If the city has no known branch.
    """
    branch = BRANCHES.get(city.strip().lower())
    if branch is None:
        raise UnsupportedCityError(city, supported=supported_cities())
    return branch
