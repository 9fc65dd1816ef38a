"""
Debounce helper for Jotter.

Coalesces a burst of calls into one: each call rescinds the pending one and
schedules a new one, so only the last call of a burst runs, once the quiet
period has passed.
"""

import asyncio
from typing import Any, Callable


class Debouncer:
    """Timer-reset wrapper around a callable, driven by the running event loop."""

    def __init__(self, func: Callable[..., Any], delay: float):
        self.func = func
        self.delay = delay
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        """True while a call is scheduled and has not run yet."""
        return self._handle is not None

    def __call__(self, *args: Any) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire, args)

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, args: tuple[Any, ...]) -> None:
        self._handle = None
        self.func(*args)
