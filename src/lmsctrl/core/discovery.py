"""UDP broadcast discovery for LMS servers.

A server answers the one-byte probe "e" sent to UDP port 3483. The reply
payload is not interpreted; its source address is the server.
"""

from __future__ import annotations

import asyncio
import logging
from typing import cast

logger = logging.getLogger(__name__)

DISCOVERY_PORT = 3483
BROADCAST_ADDRESS = "255.255.255.255"
DISCOVERY_PROBE = b"e"
DEFAULT_DISCOVERY_TIMEOUT = 3.0


class DiscoveryError(Exception):
    """Server discovery failed."""


class DiscoveryTimeout(DiscoveryError):
    """No server replied to the probe in time."""


class DiscoverySendError(DiscoveryError):
    """The probe could not be sent or the socket reported an error."""


class DiscoveryProtocol(asyncio.DatagramProtocol):
    """Datagram protocol that resolves a future with the first replying host."""

    def __init__(self, probe: bytes, target: tuple[str, int]) -> None:
        """Initialize the protocol.

        Args:
            probe: Payload to broadcast once the socket is ready.
            target: (address, port) to send the probe to.
        """
        self._probe = probe
        self._target = target
        self.result: asyncio.Future[str] = asyncio.get_running_loop().create_future()

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        """Send the probe as soon as the socket is bound."""
        datagram = cast(asyncio.DatagramTransport, transport)
        try:
            datagram.sendto(self._probe, self._target)
        except OSError as e:
            self._fail(DiscoverySendError(f"Failed to send discovery probe to {self._target}: {e}"))

    def datagram_received(self, data: bytes, addr: tuple[str, int]) -> None:  # noqa: ARG002
        """Resolve with the sender address of the first reply."""
        if not self.result.done():
            self.result.set_result(addr[0])

    def error_received(self, exc: Exception) -> None:
        """Fail on socket errors (e.g. sendto rejected by the network)."""
        self._fail(DiscoverySendError(f"Discovery socket error: {exc}"))

    def connection_lost(self, exc: Exception | None) -> None:
        """Fail if the socket closes before a reply arrived."""
        if exc is not None:
            self._fail(DiscoverySendError(f"Discovery socket closed: {exc}"))

    def _fail(self, error: DiscoveryError) -> None:
        if not self.result.done():
            self.result.set_exception(error)


async def discover(
    timeout: float = DEFAULT_DISCOVERY_TIMEOUT,
    address: str = BROADCAST_ADDRESS,
    port: int = DISCOVERY_PORT,
) -> str:
    """Discover an LMS server on the local network.

    Example:
        host = await discover()
        client = LmsClient(host)

    Args:
        timeout: Seconds to wait for a reply.
        address: Address to send the probe to (broadcast by default).
        port: UDP discovery port.

    Returns:
        Address of the first server that replied.

    Raises:
        DiscoveryTimeout: If no server replied within timeout.
        DiscoverySendError: If the probe could not be sent.
    """
    loop = asyncio.get_running_loop()
    logger.debug("Broadcasting discovery probe to %s:%d", address, port)

    try:
        transport, protocol = await loop.create_datagram_endpoint(
            lambda: DiscoveryProtocol(DISCOVERY_PROBE, (address, port)),
            local_addr=("0.0.0.0", 0),
            allow_broadcast=True,
        )
    except OSError as e:
        raise DiscoverySendError(f"Failed to open discovery socket: {e}") from e

    try:
        host = await asyncio.wait_for(protocol.result, timeout=timeout)
    except TimeoutError as e:
        raise DiscoveryTimeout(f"No server replied within {timeout:.1f}s") from e
    finally:
        transport.close()

    logger.info("Discovered LMS server at %s", host)
    return host
