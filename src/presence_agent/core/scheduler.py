"""
Fixed-period registration loop that can be interrupted by a termination
notification.
"""

import enum
import logging

from src.presence_agent.core.errors import RegistrationTransportError
from src.presence_agent.core.notifier import TerminationNotifier, WakeReason


class SchedulerState(enum.Enum):
    WAITING = "waiting"
    SHUTTING_DOWN = "shutting_down"


class PresenceScheduler:
    """
    Drives registration cycles.

    Each wake evaluates exactly one branch: a timer tick runs one
    resolve-then-register cycle, anything else ends the loop. Cycles run
    one after another, so at most one registration call is in flight and a
    slow call pushes back the start of the next wait.
    """

    def __init__(
        self,
        notifier: TerminationNotifier,
        network_utils,
        registration,
        hostname: str,
        poll_interval: float = 2.0,
    ):
        self.notifier = notifier
        self.network_utils = network_utils
        self.registration = registration
        self.hostname = hostname
        self.poll_interval = poll_interval
        self.state = SchedulerState.WAITING
        self.last_address = None
        self.logger = logging.getLogger(__name__)

    async def run(self) -> WakeReason:
        """
        Run cycles until notified or until the notifier is closed.

        Returns:
            WakeReason.NOTIFIED or WakeReason.DISCONNECTED
        """
        self.state = SchedulerState.WAITING
        while True:
            reason = await self.notifier.wait(self.poll_interval)

            if reason is WakeReason.TIMEOUT:
                try:
                    await self.run_cycle()
                except Exception as error:  # pylint: disable=broad-exception-caught
                    self.logger.error("Registration cycle failed: %s", error)
                continue

            self.state = SchedulerState.SHUTTING_DOWN
            if reason is WakeReason.DISCONNECTED:
                self.logger.debug("Notification channel closed, leaving loop")
            return reason

    async def run_cycle(self) -> bool:
        """
        Resolve the address and register it once.

        Returns:
            True if a register call was made and got an HTTP response
        """
        ipv6 = self.network_utils.select_ipv6_address()
        if ipv6 is None:
            return False

        self.last_address = ipv6
        self.logger.info("Call API /register")
        try:
            await self.registration.register(self.hostname, ipv6)
        except RegistrationTransportError as error:
            self.logger.error("Registration failed - %s", error)
            return False

        self.logger.info("Registration successfully")
        return True
