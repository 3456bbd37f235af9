"""
Tests for the termination notifier and signal bridge.
"""

import asyncio
import os
import signal
from unittest.mock import Mock, patch

import pytest

from src.presence_agent.core.notifier import (
    TerminationNotifier,
    WakeReason,
    install_signal_handlers,
    remove_signal_handlers,
)


class TestTerminationNotifier:
    """Tests for the one-shot notification channel."""

    @pytest.mark.asyncio
    async def test_wait_times_out(self):
        notifier = TerminationNotifier()

        assert await notifier.wait(0.01) is WakeReason.TIMEOUT

    @pytest.mark.asyncio
    async def test_pending_notification(self):
        notifier = TerminationNotifier()
        notifier.notify()

        assert await notifier.wait(5) is WakeReason.NOTIFIED

    @pytest.mark.asyncio
    async def test_notification_wakes_waiter(self):
        notifier = TerminationNotifier()
        loop = asyncio.get_running_loop()
        loop.call_later(0.01, notifier.notify)

        assert await notifier.wait(5) is WakeReason.NOTIFIED

    @pytest.mark.asyncio
    async def test_closed_without_notification(self):
        notifier = TerminationNotifier()
        notifier.close()

        assert await notifier.wait(5) is WakeReason.DISCONNECTED

    @pytest.mark.asyncio
    async def test_notification_wins_over_close(self):
        notifier = TerminationNotifier()
        notifier.notify()
        notifier.close()

        assert await notifier.wait(5) is WakeReason.NOTIFIED

    @pytest.mark.asyncio
    async def test_only_first_notification_counts(self):
        notifier = TerminationNotifier()

        assert notifier.notify() is True
        assert notifier.notify() is False
        assert notifier.notified is True
        assert await notifier.wait(0) is WakeReason.NOTIFIED


class TestSignalBridge:
    """Tests for routing OS signals into the notifier."""

    @pytest.mark.asyncio
    async def test_registers_handlers_on_loop(self):
        loop = Mock()
        notifier = TerminationNotifier()

        install_signal_handlers(loop, notifier)

        loop.add_signal_handler.assert_any_call(signal.SIGINT, notifier.notify)
        loop.add_signal_handler.assert_any_call(signal.SIGTERM, notifier.notify)

    @pytest.mark.asyncio
    async def test_falls_back_to_signal_module(self):
        loop = Mock()
        loop.add_signal_handler.side_effect = NotImplementedError
        notifier = TerminationNotifier()

        with patch("src.presence_agent.core.notifier.signal.signal") as mock_signal:
            install_signal_handlers(loop, notifier, signals=(signal.SIGTERM,))

        handler = mock_signal.call_args[0][1]
        handler(signal.SIGTERM, None)
        loop.call_soon_threadsafe.assert_called_once_with(notifier.notify)

    def test_remove_falls_back_to_default_handler(self):
        loop = Mock()
        loop.remove_signal_handler.side_effect = NotImplementedError

        with patch("src.presence_agent.core.notifier.signal.signal") as mock_signal:
            remove_signal_handlers(loop, signals=(signal.SIGINT,))

        mock_signal.assert_called_once_with(signal.SIGINT, signal.SIG_DFL)

    @pytest.mark.skipif(os.name == "nt", reason="POSIX signals")
    @pytest.mark.asyncio
    async def test_real_sigterm_notifies(self):
        loop = asyncio.get_running_loop()
        notifier = TerminationNotifier()
        install_signal_handlers(loop, notifier, signals=(signal.SIGTERM,))
        try:
            os.kill(os.getpid(), signal.SIGTERM)
            reason = await notifier.wait(5)
        finally:
            remove_signal_handlers(loop, signals=(signal.SIGTERM,))

        assert reason is WakeReason.NOTIFIED
