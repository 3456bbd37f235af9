"""
Client registration module for the presence agent.
Calls the remote register/deregister endpoints over the shared HTTP session.
"""

import asyncio
import logging
from dataclasses import dataclass

import aiohttp

from src.presence_agent.core.errors import RegistrationTransportError


@dataclass(frozen=True)
class RegistrationRequest:
    """Identity reported for this host in one registration cycle."""

    hostname: str
    ipv6_address: str


class ClientRegistration:
    """
    Issues register and deregister calls for this host.

    Each call is a single GET with no retry. The hostname and address are
    accepted so call sites carry the full identity, but they are not sent in
    the request; the endpoint URL alone identifies the action.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        register_url: str,
        deregister_url: str,
    ):
        self.session = session
        self.register_url = register_url
        self.deregister_url = deregister_url
        self.logger = logging.getLogger(__name__)

    async def register(self, hostname: str, ipv6: str) -> int:
        """
        Call the register endpoint once.

        Returns:
            The HTTP status code. Error statuses are logged, not raised.

        Raises:
            RegistrationTransportError: if no HTTP response was received
        """
        request = RegistrationRequest(hostname, ipv6)
        return await self._call_endpoint("Register", self.register_url, request)

    async def deregister(self, hostname: str, ipv6: str) -> int:
        """Call the deregister endpoint once. Same contract as register()."""
        request = RegistrationRequest(hostname, ipv6)
        return await self._call_endpoint("Deregister", self.deregister_url, request)

    async def _call_endpoint(
        self, action: str, url: str, request: RegistrationRequest
    ) -> int:
        self.logger.debug(
            "%s %s for host %s (%s)",
            action,
            url,
            request.hostname,
            request.ipv6_address,
        )
        try:
            async with self.session.get(url) as response:
                if not response.ok:
                    # TODO: retry with backoff instead of waiting for the next cycle
                    self.logger.error(
                        "%s failed. status=%s reason=%s url=%s",
                        action,
                        response.status,
                        response.reason,
                        url,
                    )
                return response.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            reason = str(e) or type(e).__name__
            self.logger.error("%s request to %s failed: %s", action, url, reason)
            raise RegistrationTransportError(url, reason) from e
