"""
Exception types raised by the presence agent.
"""


class PresenceAgentError(Exception):
    """Base class for all presence agent errors."""


class StartupConfigurationError(PresenceAgentError):
    """Required configuration or host identity is missing at startup."""


class InterfaceEnumerationError(PresenceAgentError):
    """The host's network interfaces could not be listed."""


class RegistrationTransportError(PresenceAgentError):
    """A registration endpoint could not be reached at the transport level."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason
