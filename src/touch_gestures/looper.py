"""Deferred callback queues standing in for a host UI event loop.

Recognizers post their "revert to POSSIBLE" step here so it runs after the
current event has been fully processed, never nested inside it.
"""

from __future__ import annotations

import asyncio
from collections import deque
from typing import Callable, Optional


class Looper:
    """Single-threaded FIFO of zero-delay callbacks.

    The host drains it between input events:
        looper.run_pending()
        recognizer.on_event(event)
    """

    def __init__(self):
        self._queue: deque[Callable[[], None]] = deque()

    def post(self, callback: Callable[[], None]):
        self._queue.append(callback)

    def remove_callbacks(self, callback: Callable[[], None]):
        """Drop every pending occurrence of ``callback``."""
        self._queue = deque(cb for cb in self._queue if cb != callback)

    def run_pending(self) -> int:
        """Run queued callbacks, including ones they post. Returns count run."""
        ran = 0
        while self._queue:
            callback = self._queue.popleft()
            callback()
            ran += 1
        return ran

    @property
    def pending(self) -> int:
        return len(self._queue)


class AsyncioLooper:
    """Looper backed by an asyncio event loop's ``call_soon``.

    Must be used from the loop's own thread.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
        self._handles: dict[Callable[[], None], list[asyncio.Handle]] = {}

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def post(self, callback: Callable[[], None]):
        handles = self._handles.setdefault(callback, [])

        def run():
            pending = self._handles.get(callback)
            if pending is not None:
                if handle in pending:
                    pending.remove(handle)
                if not pending:
                    del self._handles[callback]
            callback()

        handle = self._get_loop().call_soon(run)
        handles.append(handle)

    def remove_callbacks(self, callback: Callable[[], None]):
        for handle in self._handles.pop(callback, []):
            handle.cancel()

    @property
    def pending(self) -> int:
        return sum(len(h) for h in self._handles.values())
