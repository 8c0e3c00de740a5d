"""Client for the CRCON remote control API."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from .const import (
    API_GET_GAMESTATE,
    API_GET_MAX_PING,
    API_SET_MAX_PING,
    REQUEST_TIMEOUT,
)
from .exceptions import RemoteError
from .models import Occupancy
from .types import GameState

_LOGGER = logging.getLogger(__name__)


class CRCONClient:
    """Thin wrapper around the three CRCON endpoints the bot needs."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        server: str,
        api_key: str,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        """Initialize the client."""
        self._session = session
        self._server = server.rstrip("/")
        self._api_key = api_key
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    @property
    def server(self) -> str:
        """Return the CRCON base URL."""
        return self._server

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    async def _async_request(
        self,
        method: str,
        endpoint: str,
        payload: dict[str, Any] | None = None,
        default_error: str = "Invalid response",
    ) -> Any:
        """Perform one API call and return the ``result`` field.

        Raises:
            RemoteError: On a non-2xx status, a ``failed`` flag in the body,
                an unreadable body, or a transport error.
        """
        url = f"{self._server}/api/{endpoint}"
        status: int | None = None
        try:
            async with self._session.request(
                method,
                url,
                headers=self._headers(),
                json=payload,
                timeout=self._timeout,
            ) as response:
                status = response.status
                if not 200 <= status < 300:
                    raise RemoteError(status, f"HTTP error! Status: {status}")
                data = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as err:
            raise RemoteError(None, f"Request to {endpoint} failed: {err}") from err
        except ValueError as err:
            raise RemoteError(status, f"Invalid JSON from {endpoint}: {err}") from err

        if not isinstance(data, dict):
            raise RemoteError(status, f"API error: {default_error}")
        if data.get("failed"):
            error = data.get("error") or default_error
            raise RemoteError(status, f"API error: {error}")

        return data.get("result")

    async def async_get_max_ping(self) -> int:
        """Return the server's current max ping autokick threshold in ms."""
        result = await self._async_request("GET", API_GET_MAX_PING)
        if not isinstance(result, int):
            raise RemoteError(None, f"Unexpected max ping value: {result!r}")
        return result

    async def async_set_max_ping(self, max_ms: int) -> int:
        """Set the max ping autokick threshold and return the confirmed value."""
        result = await self._async_request(
            "POST",
            API_SET_MAX_PING,
            payload={"max_ms": max_ms},
            default_error="Failed to set max ping",
        )
        _LOGGER.debug("Set max ping request for %dms returned %r", max_ms, result)
        return result if isinstance(result, int) else max_ms

    async def async_get_occupancy(self) -> Occupancy:
        """Return the live player counts from the game state."""
        result: GameState = await self._async_request("GET", API_GET_GAMESTATE)
        try:
            return Occupancy(
                allied=int(result["num_allied_players"]),
                axis=int(result["num_axis_players"]),
            )
        except (KeyError, TypeError, ValueError) as err:
            raise RemoteError(None, f"Invalid gamestate payload: {err}") from err
