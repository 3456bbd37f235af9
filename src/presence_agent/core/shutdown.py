"""
Shutdown handling after a termination notification.
"""

import logging
from typing import Optional

EXIT_SUCCESS = 0


class ShutdownCoordinator:
    """
    Best-effort deregistration followed by an unconditional clean exit.

    The deregister call is only made when enabled in configuration; nothing
    that happens during it changes the exit status.
    """

    def __init__(self, registration, deregister_enabled: bool = False):
        self.registration = registration
        self.deregister_enabled = deregister_enabled
        self.logger = logging.getLogger(__name__)

    async def shutdown(self, hostname: str, ipv6: Optional[str] = None) -> int:
        """Run the shutdown sequence and return the process exit status."""
        self.logger.info("Got SIGTERM / SIGINT")
        self.logger.info("Call API /deregister")

        if not self.deregister_enabled:
            self.logger.debug("Deregistration disabled, skipping remote call")
            return EXIT_SUCCESS

        try:
            await self.registration.deregister(hostname, ipv6 or "")
        except Exception as error:  # pylint: disable=broad-exception-caught
            self.logger.error("Deregistration failed - %s", error)
        else:
            self.logger.info("Deregistration successfully")

        return EXIT_SUCCESS
