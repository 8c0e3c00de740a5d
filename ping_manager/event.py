"""Timer helpers for the Ping Manager bot."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone
import inspect
import logging
from typing import Any

_LOGGER = logging.getLogger(__name__)

CALLBACK_TYPE = Callable[[], None]


def async_track_time_interval(
    action: Callable[[datetime], Awaitable[Any] | None],
    interval: timedelta,
    *,
    name: str | None = None,
) -> CALLBACK_TYPE:
    """Call ``action`` every ``interval`` until the returned callback is called.

    The first call happens one interval from now. ``action`` receives the UTC
    time of the tick and may be a plain callback or a coroutine function.
    Must be called from within the running event loop.
    """
    loop = asyncio.get_running_loop()
    delay = interval.total_seconds()
    label = name or getattr(action, "__qualname__", repr(action))
    handle: asyncio.TimerHandle | None = None
    background_tasks: set[asyncio.Task[Any]] = set()
    cancelled = False

    def _log_task_result(task: asyncio.Task[Any]) -> None:
        background_tasks.discard(task)
        if not task.cancelled() and (err := task.exception()) is not None:
            _LOGGER.error("Error running interval listener %s: %s", label, err)

    def _schedule() -> None:
        nonlocal handle
        handle = loop.call_later(delay, _interval_listener)

    def _interval_listener() -> None:
        if cancelled:
            return
        _schedule()
        try:
            result = action(datetime.now(timezone.utc))
        except Exception:
            _LOGGER.exception("Error running interval listener %s", label)
            return
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            background_tasks.add(task)
            task.add_done_callback(_log_task_result)

    def remove_listener() -> None:
        nonlocal cancelled, handle
        cancelled = True
        if handle is not None:
            handle.cancel()
            handle = None

    _schedule()
    return remove_listener
