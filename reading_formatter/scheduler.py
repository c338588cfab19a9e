"""Single-flight, rate-limited FIFO queue in front of the formatting adapter.

Every formatting request in the process goes through one ``RequestScheduler``.
A single drain task pops requests in arrival order and calls the adapter one
at a time, keeping at least ``min_interval`` seconds between the start of
consecutive calls. Each request gets its own future; a failed call rejects
only that future and the drain moves on.

The queue and the last-call timestamp belong to the scheduler alone. The
event loop is single-threaded, so no lock is needed around them.
"""
from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from reading_formatter.models import FormattedReadingTest, QueuedRequest

if TYPE_CHECKING:
    from reading_formatter.remote import RemoteFormattingAdapter

_log = logging.getLogger("reading_formatter.scheduler")

MIN_REQUEST_INTERVAL = 10.0


class RequestScheduler:
    def __init__(
        self,
        adapter: RemoteFormattingAdapter,
        min_interval: float = MIN_REQUEST_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.adapter = adapter
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._queue: deque[QueuedRequest] = deque()
        self._draining = False
        self._last_call: float | None = None
        self._drain_task: asyncio.Task | None = None

    @property
    def idle(self) -> bool:
        return not self._draining

    async def enqueue(self, prompt: str) -> FormattedReadingTest:
        """Queue *prompt* and wait for its turn at the adapter."""
        loop = asyncio.get_running_loop()
        request = QueuedRequest(prompt=prompt, future=loop.create_future())
        self._queue.append(request)
        _log.debug("Queued formatting request (%d waiting)", len(self._queue))

        # A drain task that finished without resetting the flag counts as idle
        if not self._draining or self._drain_task is None or self._drain_task.done():
            self._start_drain()
        return await request.future

    def _start_drain(self) -> None:
        self._draining = True
        self._drain_task = asyncio.get_running_loop().create_task(self._drain())

    async def _wait_for_slot(self) -> None:
        if self._last_call is None:
            return
        elapsed = self._clock() - self._last_call
        if elapsed < self.min_interval:
            wait = self.min_interval - elapsed
            _log.info("Rate limiting: waiting %.1fs before next formatting call", wait)
            await self._sleep(wait)

    async def _drain(self) -> None:
        try:
            while self._queue:
                request = self._queue.popleft()
                if request.future.done():
                    # Caller went away while waiting
                    continue
                # The popped request is no longer in the queue, so close()
                # can only reach it through this handler
                try:
                    await self._wait_for_slot()
                    self._last_call = self._clock()
                    result = await self.adapter.call(request.prompt)
                except asyncio.CancelledError:
                    request.future.cancel()
                    raise
                except Exception as e:
                    if not request.future.done():
                        request.future.set_exception(e)
                else:
                    if not request.future.done():
                        request.future.set_result(result)
        finally:
            self._draining = False

    async def close(self) -> None:
        """Stop draining and cancel every request still waiting."""
        task = self._drain_task
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        while self._queue:
            self._queue.popleft().future.cancel()
        self._draining = False
