"""HTTP transport for Reservauto JSON endpoints."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pyreservauto._constants import USER_AGENT
from pyreservauto.exceptions import ReservautoTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, url: str, params: Mapping[str, Any] | None = None) -> Any:
        ...


class HttpTransport:
    """aiohttp-backed transport returning decoded JSON bodies."""

    def __init__(
        self,
        http_session: aiohttp.ClientSession,
        *,
        request_timeout: float = 30.0,
    ) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=request_timeout)

    async def get_json(self, url: str, params: Mapping[str, Any] | None = None) -> Any:
        """GET *url* and return the decoded JSON body.

        Raises
        ------
        ReservautoTransportError
            On network failure, timeout, a non-200 status or a body that
            is not JSON.
        """
        headers = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        query = {key: str(value) for key, value in (params or {}).items()}

        _logger.debug("GET %s params=%s", url, query)

        try:
            async with self._http.get(url, params=query, headers=headers, timeout=self._timeout) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise ReservautoTransportError(
                        f"HTTP {resp.status} from {url}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=url,
                    )
        except ReservautoTransportError:
            raise
        except asyncio.TimeoutError as exc:
            raise ReservautoTransportError(
                f"Request to {url} timed out",
                endpoint=url,
            ) from exc
        except aiohttp.ClientError as exc:
            raise ReservautoTransportError(
                f"Request to {url} failed: {exc}",
                endpoint=url,
            ) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ReservautoTransportError(
                f"Invalid JSON from {url}: {text[:200]}",
                status_code=200,
                endpoint=url,
            ) from exc
