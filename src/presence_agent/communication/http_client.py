"""
Construction of the shared outbound HTTP session.
"""

import socket
from dataclasses import dataclass

import aiohttp


@dataclass(frozen=True)
class HttpClientConfig:
    """Timeout and keep-alive policy for all registration calls."""

    request_timeout: float = 2.0
    tcp_keepalive: float = 60.0

    @classmethod
    def from_config(cls, config_manager) -> "HttpClientConfig":
        return cls(
            request_timeout=config_manager.get_request_timeout(),
            tcp_keepalive=config_manager.get_tcp_keepalive(),
        )


def keepalive_socket_factory(tcp_keepalive: float):
    """
    Build a connector socket factory that enables TCP keep-alive.

    The keep-alive idle time and interval are both ``tcp_keepalive``
    seconds where the platform exposes them.
    """
    seconds = max(1, int(tcp_keepalive))

    def factory(addr_info) -> socket.socket:
        family, sock_type, proto = addr_info[0], addr_info[1], addr_info[2]
        sock = socket.socket(family=family, type=sock_type, proto=proto)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)
        if hasattr(socket, "TCP_KEEPIDLE"):
            sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_KEEPIDLE, seconds)
        elif hasattr(socket, "TCP_KEEPALIVE"):
            # macOS names the idle option TCP_KEEPALIVE
            sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_KEEPALIVE, seconds)
        if hasattr(socket, "TCP_KEEPINTVL"):
            sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_KEEPINTVL, seconds)
        return sock

    return factory


def create_http_session(http_config: HttpClientConfig) -> aiohttp.ClientSession:
    """
    Create the process-wide client session.

    Must be called from within a running event loop. The caller owns the
    session and is responsible for closing it.
    """
    connector = aiohttp.TCPConnector(
        socket_factory=keepalive_socket_factory(http_config.tcp_keepalive),
        keepalive_timeout=http_config.tcp_keepalive,
    )
    timeout = aiohttp.ClientTimeout(total=http_config.request_timeout)
    return aiohttp.ClientSession(connector=connector, timeout=timeout)
