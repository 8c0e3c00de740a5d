"""Operator commands for the Ping Manager bot."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
import logging
from typing import TYPE_CHECKING, Any

from .const import (
    COMMAND_AUTO,
    COMMAND_DURATION,
    COMMAND_INTERVAL,
    COMMAND_START,
    COMMAND_STOP,
    COMMAND_TARGET,
)
from .exceptions import ValidationError
from .validation_helpers import (
    validate_duration,
    validate_interval,
    validate_threshold,
)

if TYPE_CHECKING:
    from .coordinator import PingManagerCoordinator

_LOGGER = logging.getLogger(__name__)


class CommandDispatcher:
    """Turn operator commands into configuration changes.

    Payloads are validated before anything is queued, so a rejected command
    leaves the configuration untouched. Every method returns the reply shown
    to the operator.
    """

    def __init__(self, coordinator: PingManagerCoordinator) -> None:
        """Initialize the dispatcher."""
        self.coordinator = coordinator
        self._handlers: dict[str, Callable[..., Awaitable[str]]] = {
            COMMAND_START: self.async_manual_start,
            COMMAND_STOP: self.async_manual_stop,
            COMMAND_INTERVAL: self.async_set_interval,
            COMMAND_DURATION: self.async_set_duration,
            COMMAND_TARGET: self.async_set_target,
            COMMAND_AUTO: self.async_toggle_auto,
        }
        self._payload_commands = {COMMAND_INTERVAL, COMMAND_DURATION, COMMAND_TARGET}

    async def async_handle(self, command: str, payload: Any = None) -> str:
        """Run a command by name.

        Raises:
            ValidationError: For an unknown command or an invalid payload.
        """
        handler = self._handlers.get(command)
        if handler is None:
            raise ValidationError(f"Unknown command: {command}")
        if command in self._payload_commands:
            return await handler(payload)
        return await handler()

    async def async_manual_start(self) -> str:
        """Start the ping cycle regardless of auto mode."""

        async def _start() -> str:
            await self.coordinator.async_update_config(is_running=True)
            self.coordinator.ping_cycle.start()
            await self.coordinator.async_request_render()
            return "Ping manager started!"

        _LOGGER.info("Manual start requested")
        return await self.coordinator.queue.async_run(_start, "manual start")

    async def async_manual_stop(self) -> str:
        """Stop the ping cycle and restore the default threshold."""

        async def _stop() -> str:
            await self.coordinator.async_update_config(is_running=False)
            self.coordinator.ping_cycle.stop()
            restored = await self.coordinator.async_restore_default()
            await self.coordinator.async_request_render()
            if not restored:
                return (
                    "Ping manager stopped! Restoring the default ping failed, "
                    "check the logs."
                )
            return "Ping manager stopped!"

        _LOGGER.info("Manual stop requested")
        return await self.coordinator.queue.async_run(_stop, "manual stop")

    async def async_set_interval(self, raw: Any) -> str:
        """Set the minutes between cycle starts.

        An armed cycle is restarted so the new interval takes effect.
        """
        minutes = validate_interval(raw)

        async def _set() -> str:
            await self.coordinator.async_update_config(interval_minutes=minutes)
            if self.coordinator.ping_cycle.armed:
                self.coordinator.ping_cycle.start()
            await self.coordinator.async_request_render()
            return f"Interval set to {minutes} minutes!"

        return await self.coordinator.queue.async_run(_set, "set interval")

    async def async_set_duration(self, raw: Any) -> str:
        """Set how many seconds the lowered threshold is held."""
        seconds = validate_duration(raw)

        async def _set() -> str:
            await self.coordinator.async_update_config(duration_seconds=seconds)
            await self.coordinator.async_request_render()
            return f"Duration set to {seconds} seconds!"

        return await self.coordinator.queue.async_run(_set, "set duration")

    async def async_set_target(self, raw: Any) -> str:
        """Set the lowered threshold in ms."""
        target = validate_threshold(raw)

        async def _set() -> str:
            await self.coordinator.async_update_config(target_threshold=target)
            await self.coordinator.async_request_render()
            return f"Target ping set to {target}ms!"

        return await self.coordinator.queue.async_run(_set, "set target ping")

    async def async_toggle_auto(self) -> str:
        """Flip auto mode."""

        async def _toggle() -> str:
            enabled = not self.coordinator.config.auto_mode
            await self.coordinator.async_update_config(auto_mode=enabled)
            await self.coordinator.async_request_render()
            return f"Auto mode {'enabled' if enabled else 'disabled'}!"

        return await self.coordinator.queue.async_run(_toggle, "toggle auto mode")
