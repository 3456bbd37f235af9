"""
One-shot termination notification and the bridge from OS signals to it.
"""

import asyncio
import enum
import signal
from typing import Iterable, Tuple

TERMINATION_SIGNALS: Tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)


class WakeReason(enum.Enum):
    """Why TerminationNotifier.wait() returned."""

    TIMEOUT = "timeout"
    NOTIFIED = "notified"
    DISCONNECTED = "disconnected"


class TerminationNotifier:
    """
    Single-slot notification channel between signal handlers and the scheduler.

    Only the first notify() counts. close() marks the channel as having no
    senders left; a notification that is already pending still wins over it.
    """

    def __init__(self):
        self._event = asyncio.Event()
        self._notified = False
        self._closed = False

    @property
    def notified(self) -> bool:
        return self._notified

    @property
    def closed(self) -> bool:
        return self._closed

    def notify(self) -> bool:
        """Deliver the notification. Returns False if one was already delivered."""
        if self._notified:
            return False
        self._notified = True
        self._event.set()
        return True

    def close(self) -> None:
        self._closed = True
        self._event.set()

    async def wait(self, timeout: float) -> WakeReason:
        """Block for at most ``timeout`` seconds or until notified/closed."""
        if not self._event.is_set():
            try:
                await asyncio.wait_for(self._event.wait(), timeout)
            except asyncio.TimeoutError:
                return WakeReason.TIMEOUT

        if self._notified:
            return WakeReason.NOTIFIED
        return WakeReason.DISCONNECTED


def install_signal_handlers(
    loop: asyncio.AbstractEventLoop,
    notifier: TerminationNotifier,
    signals: Iterable[signal.Signals] = TERMINATION_SIGNALS,
) -> None:
    """Route termination signals into ``notifier``; handlers do nothing else."""
    for sig in signals:
        try:
            loop.add_signal_handler(sig, notifier.notify)
        except NotImplementedError:
            # Windows event loops have no add_signal_handler
            signal.signal(
                sig,
                lambda _signum, _frame: loop.call_soon_threadsafe(notifier.notify),
            )


def remove_signal_handlers(
    loop: asyncio.AbstractEventLoop,
    signals: Iterable[signal.Signals] = TERMINATION_SIGNALS,
) -> None:
    for sig in signals:
        try:
            loop.remove_signal_handler(sig)
        except NotImplementedError:
            signal.signal(sig, signal.SIG_DFL)
