"""Asyncio debouncer: run a callable once input has been quiet for a while."""

import asyncio
import inspect
import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)


class Debouncer:
    """Delay calls to ``func`` until ``delay`` seconds pass without a new trigger.

    Every trigger cancels the pending call and restarts the quiet period, so
    only the last call of a burst runs. ``func`` may be a plain function or a
    coroutine function. Must be used from inside a running event loop.
    """

    def __init__(self, func: Callable[..., Any], delay: float):
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self.func = func
        self.delay = delay
        self._task: asyncio.Task | None = None
        self._closed = False

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def closed(self) -> bool:
        return self._closed

    def trigger(self, *args, **kwargs) -> None:
        if self._closed:
            raise RuntimeError("Debouncer is closed")
        self.cancel()
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._fire(args, kwargs))

    def cancel(self) -> bool:
        """Drop the pending call, if any. Returns True if one was dropped."""
        task, self._task = self._task, None
        if task is None or task.done():
            return False
        task.cancel()
        return True

    def close(self) -> None:
        """Cancel the pending call and refuse further triggers."""
        self._closed = True
        if self.cancel():
            logger.debug("Debouncer closed with a pending call, dropped it")

    async def _fire(self, args: tuple, kwargs: dict) -> None:
        await asyncio.sleep(self.delay)
        if self._closed:
            return
        # The quiet period is over; a trigger from inside func starts a new one
        if self._task is asyncio.current_task():
            self._task = None
        try:
            result = self.func(*args, **kwargs)
            if inspect.isawaitable(result):
                await result
        except Exception:
            # Nobody awaits this task, so log instead of losing the error
            logger.exception(f"Debounced call to {getattr(self.func, '__name__', self.func)} failed")
