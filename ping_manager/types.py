"""Type definitions for the Ping Manager bot."""

from __future__ import annotations

from typing import Protocol, TypedDict

from .models import Affordances, PingConfig


class StatusRenderer(Protocol):
    """Presentation layer that shows the current configuration to operators."""

    async def async_render(self, config: PingConfig, affordances: Affordances) -> None:
        """Create or update the status message."""


class GameState(TypedDict, total=False):
    """Subset of the CRCON ``get_gamestate`` result used by the bot."""

    num_allied_players: int
    num_axis_players: int
    current_map: str
    next_map: str
