"""Custom exception hierarchy for pyreservauto."""

from __future__ import annotations


class ReservautoError(Exception):
    """Base exception for all pyreservauto errors."""


class ReservautoConfigError(ReservautoError):
    """Invalid or missing configuration."""


class UnsupportedCityError(ReservautoConfigError):
    """City name has no known branch."""

    def __init__(self, city: str, *, supported: tuple[str, ...] = ()) -> None:
        self.city = city
        self.supported = supported
        message = f"City {city!r} not yet supported"
        if supported:
            message += f" (supported: {', '.join(supported)})"
        super().__init__(message)


class ReservautoTransportError(ReservautoError):
    """HTTP-level failure (network, timeout, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class FeedFetchError(ReservautoError):
    """The available-vehicles feed could not be fetched or parsed.

    Raised for transport failures as well as malformed envelopes or
    records.  The underlying cause is chained via ``__cause__``.
    """

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class LocationResolutionError(ReservautoError):
    """The observer location could not be determined."""


class NotificationError(ReservautoError):
    """The desktop notification could not be displayed."""
