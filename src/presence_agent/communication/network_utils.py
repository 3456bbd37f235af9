"""
Network utilities module for the presence agent.
Handles hostname detection and discovery of the IPv6 address to register.
"""

import logging
import socket
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import psutil

from src.presence_agent.core.config import DEFAULT_INTERFACE_PATTERNS
from src.presence_agent.core.errors import (
    InterfaceEnumerationError,
    StartupConfigurationError,
)


@dataclass(frozen=True)
class InterfaceAddress:
    """A single address bound to an interface."""

    family: int
    address: str

    @property
    def is_ipv6(self) -> bool:
        return self.family == socket.AF_INET6


@dataclass(frozen=True)
class NetworkInterface:
    """Read-only snapshot of one network interface and its IP addresses."""

    name: str
    addresses: Tuple[InterfaceAddress, ...]


def is_physical_interface(name: str, patterns: Iterable[str]) -> bool:
    """
    Coarse check for Ethernet-like interfaces.

    Only looks at the interface name (e.g. "eth0", "enp3s0"); it does not
    tell physical and virtual devices apart.
    """
    return any(pattern in name for pattern in patterns)


def _strip_zone(address: str) -> str:
    # psutil reports link-local addresses as "fe80::1%eth0"
    return address.split("%", 1)[0]


class NetworkUtils:
    """Handles network-related utilities for the agent."""

    def __init__(self, config_manager=None):
        self.config = config_manager
        self.logger = logging.getLogger(__name__)

    def get_interface_patterns(self) -> Sequence[str]:
        if self.config:
            return self.config.get_interface_patterns()
        return DEFAULT_INTERFACE_PATTERNS

    def get_hostname(self) -> str:
        """Get the hostname, with optional override from config."""
        if self.config:
            override = str(self.config.get_hostname_override() or "").strip()
            if override:
                self.logger.debug("Using hostname override: %s", override)
                return override

        try:
            hostname = socket.gethostname()
        except OSError as e:
            raise StartupConfigurationError(f"Cannot get hostname: {e}") from e

        if not hostname or not hostname.strip():
            raise StartupConfigurationError("Cannot get hostname")

        self.logger.debug("Hostname determined: %s", hostname)
        return hostname.strip()

    def get_interfaces(self) -> List[NetworkInterface]:
        """
        Take a fresh snapshot of the host's interfaces.

        Only IPv4 and IPv6 addresses are kept. Interfaces and addresses are
        returned in the order the platform reports them.

        Raises:
            InterfaceEnumerationError: if the interfaces cannot be listed
        """
        try:
            raw_interfaces = psutil.net_if_addrs()
        except (OSError, psutil.Error) as e:
            raise InterfaceEnumerationError(str(e)) from e

        interfaces = []
        for name, addrs in raw_interfaces.items():
            addresses = tuple(
                InterfaceAddress(addr.family, _strip_zone(addr.address))
                for addr in addrs
                if addr.family in (socket.AF_INET, socket.AF_INET6)
            )
            interfaces.append(NetworkInterface(name, addresses))
        return interfaces

    def select_ipv6_address(self) -> Optional[str]:
        """
        Select the IPv6 address to register.

        Returns the first IPv6 address on the first interface whose name
        matches the physical interface heuristic. Enumeration order is
        whatever the platform provides, so with several candidates the
        choice is not deterministic across hosts.

        Returns:
            The address, or None if none is available right now
        """
        try:
            interfaces = self.get_interfaces()
        except InterfaceEnumerationError as e:
            self.logger.error("Could not enumerate network interfaces: %s", e)
            return None

        patterns = self.get_interface_patterns()
        for interface in interfaces:
            if not is_physical_interface(interface.name, patterns):
                continue

            for address in interface.addresses:
                if address.is_ipv6:
                    return address.address

        return None
