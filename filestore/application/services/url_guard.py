"""SSRF guard for remote ingestion (upload_from_url).

Runs before any network call. Rejects non-HTTP schemes, localhost names,
and any literal or resolved address in loopback, private, link-local or
unspecified ranges.
"""

from __future__ import annotations

import asyncio
import ipaddress
import logging
import socket
from collections.abc import Awaitable, Callable
from urllib.parse import urlparse

from filestore.domain.exceptions import SSRFRejectedException

logger = logging.getLogger(__name__)

BLOCKED_NETWORKS: tuple[ipaddress.IPv4Network | ipaddress.IPv6Network, ...] = tuple(
    ipaddress.ip_network(n)
    for n in (
        "127.0.0.0/8",
        "::1/128",
        "10.0.0.0/8",
        "172.16.0.0/12",
        "192.168.0.0/16",
        "fc00::/7",
        "169.254.0.0/16",
        "fe80::/10",
        "0.0.0.0/8",
    )
)

ALLOWED_SCHEMES = frozenset({"http", "https"})

Resolver = Callable[[str], Awaitable[list[str]]]


def is_blocked_address(ip_str: str) -> bool:
    """True if ip_str is an IP literal inside a blocked range."""
    try:
        addr = ipaddress.ip_address(ip_str.split("%", 1)[0])
    except ValueError:
        return False
    if isinstance(addr, ipaddress.IPv6Address) and addr.ipv4_mapped is not None:
        addr = addr.ipv4_mapped
    if addr.is_unspecified:
        return True
    return any(addr in net for net in BLOCKED_NETWORKS)


async def resolve_host(hostname: str) -> list[str]:
    """Resolve hostname to its addresses via the event loop's getaddrinfo."""
    loop = asyncio.get_running_loop()
    infos = await loop.getaddrinfo(hostname, None, type=socket.SOCK_STREAM)
    return [str(info[4][0]) for info in infos]


class UrlGuard:
    """Decides whether a remote URL may be fetched.

    Args:
        resolve_dns: Also resolve host names and check every address.
        resolver: Override for DNS lookups (tests).
    """

    def __init__(self, resolve_dns: bool = True, resolver: Resolver | None = None) -> None:
        self.resolve_dns = resolve_dns
        self._resolver = resolver or resolve_host

    def _reject(self, url: str, reason: str) -> SSRFRejectedException:
        logger.warning("Rejected remote URL %s: %s", url, reason)
        return SSRFRejectedException(url, reason)

    async def check(self, url: str) -> None:
        """Raise SSRFRejectedException if url must not be fetched.

        DNS failures are not rejections; the fetch reports them.
        """
        try:
            parsed = urlparse(url)
            hostname = parsed.hostname
        except ValueError as e:
            raise self._reject(url, "malformed URL") from e

        if parsed.scheme.lower() not in ALLOWED_SCHEMES:
            raise self._reject(url, f"scheme '{parsed.scheme}' not allowed")
        if not hostname:
            raise self._reject(url, "missing host")

        host = hostname.lower().rstrip(".")
        if host == "localhost" or host.endswith(".localhost"):
            raise self._reject(url, "localhost not allowed")

        try:
            ipaddress.ip_address(host.split("%", 1)[0])
            is_literal = True
        except ValueError:
            is_literal = False

        if is_literal:
            if is_blocked_address(host):
                raise self._reject(url, "internal address not allowed")
            return

        if not self.resolve_dns:
            return
        try:
            addresses = await self._resolver(host)
        except (OSError, UnicodeError):
            logger.debug("DNS lookup failed for %s; leaving it to the fetch", host)
            return
        for address in addresses:
            if is_blocked_address(address):
                raise self._reject(url, f"host resolves to internal address {address}")
