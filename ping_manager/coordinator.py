"""Ping Manager Coordinator."""

from __future__ import annotations

import logging
from typing import Any

from .api import CRCONClient
from .exceptions import RemoteError, StorageSaveError
from .models import Affordances, PingConfig
from .ping_cycle import PingCycleController
from .request_queue import RequestQueue
from .storage import PingConfigStore
from .types import StatusRenderer
from .watchdog import OccupancyWatchdog

_LOGGER = logging.getLogger(__name__)


class PingManagerCoordinator:
    """Own the configuration and the components that act on it.

    The coordinator holds the only copy of the configuration. The ping cycle,
    the watchdog and the command dispatcher read ``coordinator.config`` when
    they need it and change it through ``async_update_config``. All of them run
    their work on ``queue``, one job at a time.
    """

    def __init__(
        self,
        client: CRCONClient,
        store: PingConfigStore,
        renderer: StatusRenderer,
    ) -> None:
        """Initialize the coordinator."""
        self.client = client
        self.store = store
        self.renderer = renderer
        self.config = PingConfig()
        self.queue = RequestQueue()
        self.ping_cycle = PingCycleController(self)
        self.watchdog = OccupancyWatchdog(self)
        self._setup_complete = False

    @property
    def setup_complete(self) -> bool:
        """Return whether setup is complete."""
        return self._setup_complete

    @property
    def affordances(self) -> Affordances:
        """Return the commands available for the current configuration."""
        return Affordances.from_config(self.config)

    async def async_setup(self) -> None:
        """Load the configuration and start the timers."""
        self.config = await self.store.async_load()
        await self.queue.async_run(self._async_startup, "startup")
        self._setup_complete = True

    async def _async_startup(self) -> None:
        try:
            current = await self.client.async_get_max_ping()
        except RemoteError as err:
            _LOGGER.warning("Could not read the current max ping: %s", err)
        else:
            _LOGGER.info("Current max ping is %dms", current)

        await self.async_restore_default()

        if self.config.is_running:
            self.ping_cycle.start()
        self.watchdog.start()

        _LOGGER.info(
            "Ping manager ready (running: %s, auto mode: %s)",
            self.config.is_running,
            self.config.auto_mode,
        )
        await self.async_request_render()

    async def async_update_config(self, **changes: Any) -> PingConfig:
        """Apply changes to the configuration and persist it.

        A failed save is logged; the in-memory configuration stays ahead of
        the file until the next successful save.

        Raises:
            ValueError: If a change names an unknown attribute.
        """
        unknown = set(changes) - PingConfig.attribute_names()
        if unknown:
            raise ValueError(f"Unknown configuration attribute(s): {sorted(unknown)}")

        for attr, value in changes.items():
            setattr(self.config, attr, value)

        try:
            await self.store.async_save(self.config)
        except StorageSaveError as err:
            _LOGGER.error("Configuration change not persisted: %s", err)
        return self.config

    async def async_restore_default(self) -> bool:
        """Write the default threshold to the server.

        Returns:
            True if the server accepted the write.
        """
        default = self.config.default_threshold
        try:
            await self.client.async_set_max_ping(default)
        except RemoteError as err:
            _LOGGER.error("Error restoring max ping to %dms: %s", default, err)
            return False
        _LOGGER.info("Max ping set to default %dms", default)
        return True

    async def async_request_render(self) -> None:
        """Ask the presentation layer to show the current state."""
        try:
            await self.renderer.async_render(self.config, self.affordances)
        except Exception:
            _LOGGER.exception("Error rendering status message")

    async def async_shutdown(self) -> None:
        """Stop the timers and let queued work finish.

        Timers are cancelled first so nothing new is queued, then the queue is
        drained so an in-flight cycle still restores the default threshold.
        """
        _LOGGER.info("Shutting down ping manager")
        self.ping_cycle.stop()
        self.watchdog.stop()
        await self.queue.async_stop()
        self._setup_complete = False
