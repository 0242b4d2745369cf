"""Async client for the LMS command-line protocol.

Every request opens its own TCP connection, sends one command line, reads
one reply line and closes the connection again. Nothing is kept between
calls, so a client can be shared freely between tasks.

Example:
    client = LmsClient("192.168.1.100")
    count = await client.question("player", "count")
    status = await client.query("00:04:20:12:34:56", "status")
    for player in await client.get_players():
        print(player.name, player.power)
"""

import asyncio
import logging

from lmsctrl.api.protocol import (
    LmsError,
    MalformedResponse,
    decode_response,
    encode_command,
    format_command,
    parse_fields,
    strip_echo,
)
from lmsctrl.models.player import PlayerFailure, PlayerRecord, PlayersResult
from lmsctrl.models.server import DEFAULT_PORT, Endpoint

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

# Status replies for players with long playlists can be large
READ_LIMIT = 1024 * 1024


class LmsConnectionError(LmsError):
    """Failed to connect to the server."""


class LmsTransportError(LmsError):
    """Connection failed after it was established, before a reply arrived."""


class LmsClient:
    """Request/response client bound to one server endpoint.

    Attributes:
        host: Server hostname or IP.
        port: Command-line protocol port (default 9090).
        timeout: Seconds allowed for connecting and for each reply.
    """

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the client.

        Args:
            host: Server hostname or IP.
            port: Command-line protocol port.
            timeout: Connect and reply timeout in seconds.
        """
        self._endpoint = Endpoint(host, port)
        self._timeout = timeout

    @classmethod
    def from_endpoint(cls, endpoint: Endpoint, timeout: float = DEFAULT_TIMEOUT) -> "LmsClient":
        """Create a client for an existing endpoint."""
        return cls(endpoint.host, endpoint.port, timeout)

    @property
    def endpoint(self) -> Endpoint:
        """Return the server endpoint."""
        return self._endpoint

    @property
    def host(self) -> str:
        """Return server host."""
        return self._endpoint.host

    @property
    def port(self) -> int:
        """Return server port."""
        return self._endpoint.port

    @property
    def timeout(self) -> float:
        """Return the connect/reply timeout in seconds."""
        return self._timeout

    async def _open(self) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        """Open a fresh connection to the server.

        Raises:
            LmsConnectionError: If the connection fails or times out.
        """
        try:
            return await asyncio.wait_for(
                asyncio.open_connection(self.host, self.port, limit=READ_LIMIT),
                timeout=self._timeout,
            )
        except TimeoutError as e:
            raise LmsConnectionError(
                f"Connection to {self._endpoint.address} timed out"
            ) from e
        except OSError as e:
            raise LmsConnectionError(
                f"Failed to connect to {self._endpoint.address}: {e}"
            ) from e

    async def _close(self, writer: asyncio.StreamWriter) -> None:
        """Close a connection, ignoring errors from an already broken socket."""
        try:
            writer.close()
            await writer.wait_closed()
        except (OSError, asyncio.CancelledError) as e:
            logger.debug("Expected error while closing connection: %s", e)

    async def _read_reply(self, reader: asyncio.StreamReader) -> bytes:
        """Read one complete reply line.

        Raises:
            LmsTransportError: If the server closes without replying or
                the reply does not arrive in time.
            MalformedResponse: If the reply is not terminated by a newline.
        """
        try:
            line = await asyncio.wait_for(reader.readline(), timeout=self._timeout)
        except TimeoutError as e:
            raise LmsTransportError(
                f"No reply from {self._endpoint.address} within {self._timeout:.1f}s"
            ) from e
        except ValueError as e:
            # StreamReader reports an over-long line as ValueError
            raise MalformedResponse(f"Reply from {self._endpoint.address} too long: {e}") from e

        if not line:
            raise LmsTransportError(
                f"{self._endpoint.address} closed the connection without replying"
            )
        if not line.endswith(b"\n"):
            raise MalformedResponse(
                f"Incomplete reply from {self._endpoint.address}", decode_response(line)
            )
        return line

    async def request(self, *args: object) -> list[str]:
        """Send one command and return the decoded reply tokens.

        Args:
            *args: Command tokens. Pass raw values; each token is
                percent-encoded on the way out, so pre-escaped input is
                escaped twice.

        Returns:
            Reply tokens, starting with the echoed command.

        Raises:
            LmsConnectionError: If the connection cannot be established.
            LmsTransportError: If the connection fails before a reply arrives.
            MalformedResponse: If the reply is not a complete line.
        """
        reader, writer = await self._open()
        try:
            logger.debug("LMS command: %s", format_command(*args))
            writer.write(encode_command(*args))
            await writer.drain()
            line = await self._read_reply(reader)
        except OSError as e:
            raise LmsTransportError(f"Connection to {self._endpoint.address} failed: {e}") from e
        finally:
            await self._close(writer)

        tokens = decode_response(line)
        logger.debug("LMS reply: %s", tokens)
        return tokens

    async def question(self, *args: object) -> str | None:
        """Ask for a single value.

        Appends "?" to the command and returns the last token after the echo,
        e.g. question("player", "count") -> "3".

        Returns:
            The answer, or None if the server returned nothing after the echo.
        """
        result = strip_echo(await self.request(*args, "?"), args)
        return result[-1] if result else None

    async def query(self, *args: object) -> str | dict[str, str]:
        """Run a command and return its result.

        Some commands reply with one bare value, others with a block of
        "key:value" fields.

        Returns:
            The sole result token, or a dict of fields if there are several.
        """
        result = strip_echo(await self.request(*args), args)
        if len(result) == 1:
            return result[0]
        return parse_fields(result)

    async def query_fields(self, *args: object) -> dict[str, str]:
        """Run a command and parse every result token as a field.

        Unlike query(), a reply with a single "key:value" token still
        produces a dict.
        """
        return parse_fields(strip_echo(await self.request(*args), args))

    async def get_player_count(self) -> int:
        """Return the number of players connected to the server.

        Raises:
            MalformedResponse: If the count is missing or not an integer.
        """
        answer = await self.question("player", "count")
        try:
            return int(answer or "")
        except ValueError as e:
            raise MalformedResponse(f"Invalid player count: {answer!r}") from e

    async def get_players(self) -> PlayersResult:
        """Enumerate all players with their status.

        Players are queried one at a time in server index order. A failing
        player is recorded in the result's failures and does not stop the
        remaining lookups.

        Returns:
            PlayersResult with the players found and the failed lookups.

        Raises:
            LmsError: If the player count itself cannot be read.
        """
        count = await self.get_player_count()
        players: list[PlayerRecord] = []
        failures: list[PlayerFailure] = []

        for index in range(count):
            player_id: str | None = None
            try:
                player_id = await self.question("player", "id", index)
                if not player_id:
                    raise MalformedResponse(f"No player id for index {index}")
                fields = await self.query_fields(player_id, "status")
            except LmsError as e:
                logger.warning("Lookup of player %d (%s) failed: %s", index, player_id, e)
                failures.append(PlayerFailure(index=index, player_id=player_id, error=e))
                continue
            players.append(PlayerRecord(player_id=player_id, fields=fields))

        logger.debug("Found %d players (%d failed)", len(players), len(failures))
        return PlayersResult(players=players, failures=failures)
