"""
This module is the main entry point for the presence agent. It periodically
registers the host's IPv6 address with a remote endpoint and shuts down
cleanly on SIGINT/SIGTERM.
"""

import asyncio
import logging
import os
import sys
from typing import Optional

from src.presence_agent.communication.http_client import (
    HttpClientConfig,
    create_http_session,
)
from src.presence_agent.communication.network_utils import NetworkUtils
from src.presence_agent.core.config import ConfigManager
from src.presence_agent.core.notifier import (
    TerminationNotifier,
    WakeReason,
    install_signal_handlers,
    remove_signal_handlers,
)
from src.presence_agent.core.scheduler import PresenceScheduler
from src.presence_agent.core.shutdown import EXIT_SUCCESS, ShutdownCoordinator
from src.presence_agent.registration.client_registration import ClientRegistration
from src.presence_agent.utils.logging_formatter import UTCTimestampFormatter
from src.presence_agent.utils.verbosity_logger import get_logger, parse_levels


class PresenceAgent:  # pylint: disable=too-many-instance-attributes
    """Registers this host's IPv6 address until told to stop."""

    def __init__(self, config_file: str = "presence-agent.yaml"):
        # Minimal logging until the configuration is known
        logging.basicConfig(level=logging.WARNING, handlers=[])

        self.config = ConfigManager(config_file)
        self.setup_logging()
        self.logger = get_logger(__name__, self.config)

        if self.config.env_file_loaded:
            self.logger.info(".env file is found and loaded")
        else:
            self.logger.info(".env file is not found")

        # Any of these raising StartupConfigurationError aborts startup
        self.register_url = self.config.get_register_url()
        self.deregister_url = self.config.get_deregister_url()
        self.network_utils = NetworkUtils(self.config)
        self.hostname = self.network_utils.get_hostname()

        self.http_config = HttpClientConfig.from_config(self.config)
        self.poll_interval = self.config.get_poll_interval()

        self.logger.info("Starting presence agent for host %s", self.hostname)
        self.logger.info("Register URL: %s", self.register_url)

    def setup_logging(self):
        """Setup logging based on configuration with verbosity support."""
        enabled_levels = parse_levels(self.config.get_log_level()) or {logging.INFO}
        root_level = min(enabled_levels)
        formatter = UTCTimestampFormatter(self.config.get_log_format())

        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(root_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        log_file = self.config.get_log_file()
        if log_file:
            log_dir = os.path.dirname(log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(root_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

        root_logger.setLevel(root_level)

    def create_registration(self, session) -> ClientRegistration:
        return ClientRegistration(session, self.register_url, self.deregister_url)

    def create_scheduler(
        self, notifier: TerminationNotifier, registration: ClientRegistration
    ) -> PresenceScheduler:
        return PresenceScheduler(
            notifier,
            self.network_utils,
            registration,
            self.hostname,
            poll_interval=self.poll_interval,
        )

    async def run(self, notifier: Optional[TerminationNotifier] = None) -> int:
        """
        Run the registration loop until a termination signal arrives.

        Returns:
            The process exit status
        """
        loop = asyncio.get_running_loop()
        notifier = notifier or TerminationNotifier()
        install_signal_handlers(loop, notifier)

        try:
            async with create_http_session(self.http_config) as session:
                registration = self.create_registration(session)
                scheduler = self.create_scheduler(notifier, registration)

                reason = await scheduler.run()
                if reason is WakeReason.NOTIFIED:
                    coordinator = ShutdownCoordinator(
                        registration, self.config.should_deregister_on_shutdown()
                    )
                    return await coordinator.shutdown(
                        self.hostname, scheduler.last_address
                    )

                self.logger.info("No termination source left, exiting")
                return EXIT_SUCCESS
        finally:
            remove_signal_handlers(loop)
            notifier.close()


def find_config_path() -> str:
    """
    Pick the configuration file.

    Priority: 1) PRESENCE_AGENT_CONFIG, 2) platform system location,
    3) current directory
    """
    config_path = os.getenv("PRESENCE_AGENT_CONFIG")
    if config_path:
        return config_path

    if os.name == "nt":
        system_config = r"C:\ProgramData\PresenceAgent\presence-agent.yaml"
    else:
        system_config = "/etc/presence-agent.yaml"

    if os.path.exists(system_config):
        return system_config
    return "presence-agent.yaml"


def main():
    agent = PresenceAgent(find_config_path())
    sys.exit(asyncio.run(agent.run()))


if __name__ == "__main__":
    main()
