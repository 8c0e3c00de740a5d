"""Serialized execution of state-changing jobs."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from contextlib import suppress
from dataclasses import dataclass
import logging
from typing import Any, Generic, TypeVar

_LOGGER = logging.getLogger(__name__)

_T = TypeVar("_T")


@dataclass
class _QueuedJob(Generic[_T]):
    job: Callable[[], Awaitable[_T]]
    description: str
    future: asyncio.Future[_T]


class RequestQueue:
    """Run submitted jobs one at a time, in submission order.

    Timer ticks, occupancy decisions and operator commands all go through one
    queue, so a job always sees the state left by the previous job and never
    interleaves with another job at a suspension point.
    """

    def __init__(self, name: str = "ping_manager") -> None:
        """Initialize the queue."""
        self._name = name
        self._queue: asyncio.Queue[_QueuedJob[Any]] | None = None
        self._worker: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        """Return whether the consumer task is alive."""
        return self._worker is not None and not self._worker.done()

    @property
    def in_worker(self) -> bool:
        """Return whether the caller is running inside a queued job."""
        return self.running and asyncio.current_task() is self._worker

    def _ensure_worker(self) -> asyncio.Queue[_QueuedJob[Any]]:
        if self._queue is None:
            self._queue = asyncio.Queue()
        if not self.running:
            self._worker = asyncio.get_running_loop().create_task(
                self._async_process(), name=f"{self._name}_queue"
            )
        return self._queue

    def submit(
        self, job: Callable[[], Awaitable[_T]], description: str
    ) -> asyncio.Future[_T]:
        """Queue a job without waiting for it.

        The returned future resolves with the job's result. Failures are
        logged by the consumer, so callers may drop the future.
        """
        queue = self._ensure_worker()
        future: asyncio.Future[_T] = asyncio.get_running_loop().create_future()
        future.add_done_callback(_consume_exception)
        queue.put_nowait(_QueuedJob(job, description, future))
        _LOGGER.debug("Queued %s (%d pending)", description, queue.qsize())
        return future

    async def async_run(self, job: Callable[[], Awaitable[_T]], description: str) -> _T:
        """Queue a job and wait for its result.

        Called from inside a queued job, the job runs inline instead.
        """
        if self.in_worker:
            return await job()
        return await self.submit(job, description)

    async def _async_process(self) -> None:
        assert self._queue is not None
        while True:
            item = await self._queue.get()
            try:
                if item.future.cancelled():
                    continue
                try:
                    result = await item.job()
                except asyncio.CancelledError:
                    item.future.cancel()
                    raise
                except Exception as err:
                    _LOGGER.exception("Error running %s", item.description)
                    if not item.future.done():
                        item.future.set_exception(err)
                else:
                    if not item.future.done():
                        item.future.set_result(result)
            finally:
                self._queue.task_done()

    async def async_stop(self) -> None:
        """Finish the queued jobs, then stop the consumer."""
        if self._queue is not None and self.running:
            await self._queue.join()
        if self._worker is not None:
            self._worker.cancel()
            with suppress(asyncio.CancelledError):
                await self._worker
            self._worker = None


def _consume_exception(future: asyncio.Future[Any]) -> None:
    # Already logged by the consumer.
    if not future.cancelled():
        future.exception()
