"""Occupancy watchdog that switches the ping cycle on and off."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta
import logging
from typing import TYPE_CHECKING

from .const import OCCUPANCY_POLL_INTERVAL, OCCUPANCY_THRESHOLD
from .event import CALLBACK_TYPE, async_track_time_interval
from .exceptions import RemoteError

if TYPE_CHECKING:
    from .coordinator import PingManagerCoordinator

_LOGGER = logging.getLogger(__name__)


class OccupancyWatchdog:
    """Poll the player count and drive the ping cycle when auto mode is on."""

    def __init__(
        self,
        coordinator: PingManagerCoordinator,
        threshold: int = OCCUPANCY_THRESHOLD,
        poll_interval: timedelta = OCCUPANCY_POLL_INTERVAL,
    ) -> None:
        """Initialize the watchdog."""
        self.coordinator = coordinator
        self.threshold = threshold
        self.poll_interval = poll_interval
        self._poll_timer: CALLBACK_TYPE | None = None
        self._check_pending = False

    @property
    def armed(self) -> bool:
        """Return whether the poll timer is active."""
        return self._poll_timer is not None

    def start(self) -> None:
        """Start polling; an active poll timer is replaced."""
        self.stop()
        self._poll_timer = async_track_time_interval(
            self._handle_poll_timer, self.poll_interval, name="occupancy poll"
        )
        _LOGGER.debug(
            "Occupancy watchdog polling every %s (threshold %d players)",
            self.poll_interval,
            self.threshold,
        )

    def stop(self) -> None:
        """Stop polling."""
        if self._poll_timer is not None:
            self._poll_timer()
            self._poll_timer = None

    def _handle_poll_timer(self, _now: datetime) -> None:
        """Queue an occupancy check unless one is already waiting."""
        if self._check_pending:
            _LOGGER.debug("Occupancy check still queued, skipping this tick")
            return
        self._check_pending = True
        future = self.coordinator.queue.submit(
            self.async_check_occupancy, "occupancy check"
        )
        future.add_done_callback(self._clear_check_pending)

    def _clear_check_pending(self, _future: asyncio.Future[None]) -> None:
        self._check_pending = False

    async def async_check_occupancy(self) -> None:
        """Start or stop the ping cycle when occupancy crosses the threshold."""
        coordinator = self.coordinator
        if not coordinator.config.auto_mode:
            return

        try:
            occupancy = await coordinator.client.async_get_occupancy()
        except RemoteError as err:
            _LOGGER.error("Error checking player count: %s", err)
            return

        total = occupancy.total
        _LOGGER.debug(
            "Player count %d (allied %d, axis %d)",
            total,
            occupancy.allied,
            occupancy.axis,
        )

        if total >= self.threshold and not coordinator.config.is_running:
            _LOGGER.info(
                "Player count %d reached %d, starting ping manager",
                total,
                self.threshold,
            )
            await coordinator.async_update_config(is_running=True)
            coordinator.ping_cycle.start()
            await coordinator.async_request_render()

        elif total < self.threshold and coordinator.config.is_running:
            _LOGGER.info(
                "Player count %d dropped below %d, stopping ping manager",
                total,
                self.threshold,
            )
            await coordinator.async_update_config(is_running=False)
            coordinator.ping_cycle.stop()
            await coordinator.async_restore_default()
            await coordinator.async_request_render()
