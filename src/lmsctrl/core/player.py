"""Power, volume and mute control for a single player.

This is the capability surface a home-automation accessory needs: an
on/off switch, a 0-100 volume and a mute toggle.
"""

import logging

from lmsctrl.api.client import DEFAULT_TIMEOUT, LmsClient
from lmsctrl.api.protocol import MalformedResponse
from lmsctrl.core.discovery import DEFAULT_DISCOVERY_TIMEOUT, discover
from lmsctrl.models.server import DEFAULT_PORT

logger = logging.getLogger(__name__)

# Status field names
FIELD_POWER = "power"
FIELD_VOLUME = "mixer volume"
FIELD_MUTING = "mixer muting"

MIN_VOLUME = 0
MAX_VOLUME = 100


async def connect_discovered(
    port: int = DEFAULT_PORT,
    timeout: float = DEFAULT_TIMEOUT,
    discovery_timeout: float = DEFAULT_DISCOVERY_TIMEOUT,
) -> LmsClient:
    """Discover a server and return a client bound to it.

    Raises:
        DiscoveryError: If no server could be found.
    """
    host = await discover(timeout=discovery_timeout)
    return LmsClient(host, port, timeout)


def _flag(value: bool) -> str:
    return "1" if value else "0"


class PlayerControl:
    """Read and change the power, volume and mute state of one player.

    Example:
        player = PlayerControl(LmsClient("192.168.1.100"), "00:04:20:12:34:56")
        if not await player.get_power():
            await player.set_power(True)
        await player.set_volume(40)
    """

    def __init__(self, client: LmsClient, player_id: str) -> None:
        """Initialize the controller.

        Args:
            client: Client for the server the player is attached to.
            player_id: Player identifier (usually its MAC address).
        """
        self._client = client
        self._player_id = player_id

    @property
    def player_id(self) -> str:
        """Return the player id."""
        return self._player_id

    async def status(self) -> dict[str, str]:
        """Return the player's status fields."""
        return await self._client.query_fields(self._player_id, "status")

    async def _status_field(self, name: str) -> str:
        status = await self.status()
        if name not in status:
            raise MalformedResponse(f"Status of {self._player_id} has no {name!r} field")
        return status[name]

    async def get_power(self) -> bool:
        """Return True if the player is switched on."""
        value = await self._status_field(FIELD_POWER)
        logger.debug("Player %s power -> %s", self._player_id, value)
        return value == "1"

    async def set_power(self, on: bool) -> None:
        """Switch the player on or off."""
        logger.debug("Player %s set power -> %s", self._player_id, on)
        await self._client.query(self._player_id, "power", _flag(on))

    async def get_volume(self) -> int:
        """Return the volume (0-100).

        A muted player reports a negative volume, which reads as 0.

        Raises:
            MalformedResponse: If the volume field is missing or not a number.
        """
        value = await self._status_field(FIELD_VOLUME)
        try:
            volume = int(float(value))
        except ValueError as e:
            raise MalformedResponse(f"Invalid volume for {self._player_id}: {value!r}") from e
        return max(volume, MIN_VOLUME)

    async def set_volume(self, volume: int) -> int:
        """Set the volume.

        Args:
            volume: Volume level, clamped to 0-100.

        Returns:
            The volume actually sent.
        """
        volume = max(MIN_VOLUME, min(MAX_VOLUME, volume))
        logger.debug("Player %s set volume -> %d", self._player_id, volume)
        await self._client.query(self._player_id, "mixer", "volume", volume)
        return volume

    async def get_mute(self) -> bool:
        """Return True if the player is muted."""
        return await self._status_field(FIELD_MUTING) == "1"

    async def set_mute(self, muted: bool) -> None:
        """Mute or unmute the player."""
        logger.debug("Player %s set mute -> %s", self._player_id, muted)
        await self._client.query(self._player_id, "mixer", "muting", _flag(muted))
