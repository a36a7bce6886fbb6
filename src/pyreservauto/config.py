"""Watcher configuration for pyreservauto."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyreservauto._constants import BASE_URL, LANGUAGE_ID
from pyreservauto.branches import DEFAULT_CITY
from pyreservauto.retry import DEFAULT_RETRIES, DEFAULT_RETRY_DELAY


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class WatchConfig:
    """Watcher configuration.

    Parameters
    ----------
    city : str
        City whose branch is polled (e.g. ``"toronto"``).
    delay : float
        Seconds to sleep between polls.
    location : str or None
        Fixed observer position as ``"lat,lng"``.  When ``None`` the
        position is looked up via geoclue, then IP geolocation.
    initial_radius : float or None
        Starting search radius in meters.  Defaults to the widest rung
        of the radius ladder.
    base_url : str
        Reservauto web service base URL.
    language_id : int
        ``LanguageID`` sent with feed requests.
    request_timeout : float
        Total timeout for a single HTTP request in seconds.
    retries : int
        Extra attempts for a failing feed fetch or location lookup.
    retry_delay : float
        Seconds between those attempts.
    fail_fast : bool
        Exit when a feed fetch still fails after all retries instead of
        waiting for the next poll.
    """

    city: str = DEFAULT_CITY
    delay: float = 15.0
    location: str | None = None
    initial_radius: float | None = None
    base_url: str = BASE_URL
    language_id: int = LANGUAGE_ID
    request_timeout: float = 30.0
    retries: int = DEFAULT_RETRIES
    retry_delay: float = DEFAULT_RETRY_DELAY
    fail_fast: bool = False

    @classmethod
    def from_env(cls, **overrides: Any) -> WatchConfig:
        """Create configuration from ``RESERVAUTO_*`` environment variables.

        Explicit keyword arguments override environment values.  ``None``
        overrides are ignored so unset CLI options fall through.

        Returns
        -------
        WatchConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "RESERVAUTO_CITY": "city",
            "RESERVAUTO_LOCATION": "location",
            "RESERVAUTO_BASE_URL": "base_url",
        }
        _ENV_FLOAT_MAP = {
            "RESERVAUTO_DELAY": "delay",
            "RESERVAUTO_RADIUS": "initial_radius",
            "RESERVAUTO_REQUEST_TIMEOUT": "request_timeout",
            "RESERVAUTO_RETRY_DELAY": "retry_delay",
        }
        _ENV_INT_MAP = {
            "RESERVAUTO_LANGUAGE_ID": "language_id",
            "RESERVAUTO_RETRIES": "retries",
        }

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val:
                config_kwargs[field_name] = val
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val:
                config_kwargs[field_name] = float(val)
        for env_key, field_name in _ENV_INT_MAP.items():
            val = env.get(env_key)
            if val:
                config_kwargs[field_name] = int(val)

        config_kwargs["fail_fast"] = _env_bool(env.get("RESERVAUTO_FAIL_FAST"), False)

        config_kwargs.update({key: value for key, value in overrides.items() if value is not None})

        return cls(**config_kwargs)
