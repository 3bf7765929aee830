"""
Debounce Timer.

Delayed, restartable callback on the running asyncio event loop. Every
trigger() cancels the pending call and schedules a new one, so a burst of
triggers collapses into a single invocation after the quiet period.

There is no maximum wait: triggers arriving faster than the delay postpone
the callback indefinitely.

Usage:
    from studynotes.core.debounce import Debouncer

    debouncer = Debouncer(3.0, session.save)
    debouncer.trigger()   # (re)start the timer
    debouncer.cancel()    # drop the pending call

Outside a running event loop trigger() schedules nothing and returns False;
the caller is expected to flush explicitly.
"""

import asyncio
from collections.abc import Callable

from studynotes.core.logging import get_logger

logger = get_logger(__name__)


class Debouncer:
    """Restartable one-shot timer bound to the running event loop."""

    def __init__(self, delay: float, callback: Callable[[], object]) -> None:
        if delay <= 0:
            raise ValueError("Debounce delay must be positive")
        self.delay = delay
        self._callback = callback
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        """Whether a call is currently scheduled."""
        return self._handle is not None

    def trigger(self) -> bool:
        """
        Start or restart the timer.

        Returns:
            True if a call was scheduled, False when no event loop is running
        """
        self.cancel()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, debounce not scheduled")
            return False
        self._handle = loop.call_later(self.delay, self._fire)
        return True

    def cancel(self) -> None:
        """Cancel the pending call, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self._callback()
