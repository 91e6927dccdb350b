"""Outbound HTTP client for webhook delivery, with optional SSRF protection."""

import asyncio
import ipaddress
import logging
import socket
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

# Cloud metadata endpoints reachable by name only
_BLOCKED_HOSTNAMES = frozenset({"localhost", "metadata", "metadata.google.internal"})


def is_private_address(address: str) -> bool:
    """True for loopback, private, link-local, reserved or unparseable addresses."""
    try:
        ip = ipaddress.ip_address(address.split("%", 1)[0])
    except ValueError:
        return True
    return (
        ip.is_private
        or ip.is_loopback
        or ip.is_link_local
        or ip.is_reserved
        or ip.is_unspecified
        or ip.is_multicast
    )


async def _resolve(hostname: str) -> list[str]:
    loop = asyncio.get_running_loop()
    infos = await loop.getaddrinfo(hostname, None, type=socket.SOCK_STREAM)
    return [sockaddr[0] for _, _, _, _, sockaddr in infos]


class SSRFSafeTransport(httpx.AsyncHTTPTransport):
    """Refuses to connect to hosts that resolve to non-public addresses."""

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        hostname = request.url.host
        if hostname.lower() in _BLOCKED_HOSTNAMES:
            raise httpx.ConnectError(f"Blocked hostname: {hostname}", request=request)
        try:
            addresses = await _resolve(hostname)
        except socket.gaierror as e:
            raise httpx.ConnectError(f"Cannot resolve hostname: {hostname}", request=request) from e
        blocked = [address for address in addresses if is_private_address(address)]
        if blocked:
            logger.warning("Refusing webhook call to %s (resolves to %s)", hostname, blocked[0])
            raise httpx.ConnectError(f"{hostname} resolves to a private address", request=request)
        return await super().handle_async_request(request)


def safe_http_client(
    timeout: Optional[float] = None,
    block_private_networks: bool = False,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    **kwargs,
) -> httpx.AsyncClient:
    """
    Build the client used for webhook calls.

    ``timeout=None`` waits for the remote indefinitely; set REQUEST_TIMEOUT to
    bound it. Private-network blocking is off by default because self-hosted
    ntfy servers commonly live on the LAN.
    """
    if transport is None and block_private_networks:
        transport = SSRFSafeTransport()
    kwargs.setdefault("follow_redirects", True)
    return httpx.AsyncClient(timeout=timeout, transport=transport, **kwargs)
