"""Repeating lower-then-restore ping cycle."""

from __future__ import annotations

import asyncio
from datetime import datetime
import logging
from typing import TYPE_CHECKING

from .event import CALLBACK_TYPE, async_track_time_interval
from .exceptions import RemoteError

if TYPE_CHECKING:
    from .coordinator import PingManagerCoordinator

_LOGGER = logging.getLogger(__name__)


class PingCycleController:
    """Own the ping cycle timer.

    The controller is Idle when no timer is armed and Armed otherwise. Each
    cycle lowers the server's max ping to the target, holds it for the
    configured duration and restores the default. Cycles run on the
    coordinator's request queue, so at most one cycle body is in flight.

    The interval is expected to be longer than the duration; shorter
    intervals queue ticks behind the running cycle.
    """

    def __init__(self, coordinator: PingManagerCoordinator) -> None:
        """Initialize the controller."""
        self.coordinator = coordinator
        self._interval_timer: CALLBACK_TYPE | None = None
        self._cycle_in_flight = False

    @property
    def armed(self) -> bool:
        """Return whether the periodic timer is active."""
        return self._interval_timer is not None

    @property
    def cycle_in_flight(self) -> bool:
        """Return whether a cycle body is currently running."""
        return self._cycle_in_flight

    def start(self) -> None:
        """Run one cycle now and every interval after that.

        An armed timer is cancelled first, so repeated calls never stack.
        """
        config = self.coordinator.config
        interval = config.interval
        self._cancel_interval_timer()

        self.coordinator.queue.submit(self.async_run_cycle, "ping cycle")
        self._interval_timer = async_track_time_interval(
            self._handle_interval_timer, interval, name="ping cycle"
        )
        _LOGGER.info(
            "Ping cycle armed: every %d minute(s), %dms for %d second(s)",
            config.interval_minutes,
            config.target_threshold,
            config.duration_seconds,
        )

    def stop(self) -> None:
        """Cancel the periodic timer.

        The default threshold is not restored here; an in-flight cycle still
        completes its restore.
        """
        if self._cancel_interval_timer():
            _LOGGER.info("Ping cycle stopped")

    def _cancel_interval_timer(self) -> bool:
        if self._interval_timer is None:
            return False
        self._interval_timer()
        self._interval_timer = None
        return True

    def _handle_interval_timer(self, _now: datetime) -> None:
        """Queue a cycle for this tick."""
        self.coordinator.queue.submit(self.async_run_cycle, "ping cycle")

    async def async_run_cycle(self) -> None:
        """Lower the threshold, wait, then restore the default.

        Remote failures are logged; the next tick runs as usual.
        """
        if self._cycle_in_flight:
            _LOGGER.warning("Ping cycle already in flight, skipping this tick")
            return

        self._cycle_in_flight = True
        client = self.coordinator.client
        try:
            target = self.coordinator.config.target_threshold
            try:
                await client.async_set_max_ping(target)
            except RemoteError as err:
                _LOGGER.error("Error lowering max ping to %dms: %s", target, err)
                return
            _LOGGER.info("Set max ping to %dms", target)

            await asyncio.sleep(self.coordinator.config.duration_seconds)

            default = self.coordinator.config.default_threshold
            try:
                await client.async_set_max_ping(default)
            except RemoteError as err:
                _LOGGER.error("Error restoring max ping to %dms: %s", default, err)
                return
            _LOGGER.info("Restored max ping to %dms", default)
        finally:
            self._cycle_in_flight = False
