"""Command-line entry point for lmsctrl."""

import argparse
import asyncio
import json
import logging
import sys

from lmsctrl.api.client import LmsClient
from lmsctrl.api.protocol import LmsError
from lmsctrl.core.config import ConfigManager
from lmsctrl.core.discovery import DiscoveryError, discover
from lmsctrl.core.player import PlayerControl

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="lmsctrl",
        description="lmsctrl: discover and control a Logitech/Lyrion Media Server",
    )
    parser.add_argument("--host", default=None, help="server hostname or IP (default: discover)")
    parser.add_argument("--port", type=int, default=None, help="CLI port (default: 9090)")
    parser.add_argument("--timeout", type=float, default=None, help="request timeout in seconds")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("discover", help="find a server on the local network")
    commands.add_parser("players", help="list players and their state")

    question = commands.add_parser("question", help="ask for a single value (appends '?')")
    question.add_argument("args", nargs="+")
    query = commands.add_parser("query", help="run a command and print its result")
    query.add_argument("args", nargs="+")

    power = commands.add_parser("power", help="read or set player power")
    power.add_argument("player")
    power.add_argument("state", nargs="?", choices=["on", "off"])

    volume = commands.add_parser("volume", help="read or set player volume")
    volume.add_argument("player")
    volume.add_argument("level", nargs="?", type=int)

    mute = commands.add_parser("mute", help="read or set player mute")
    mute.add_argument("player")
    mute.add_argument("state", nargs="?", choices=["on", "off"])

    return parser


async def _discover_host(config: ConfigManager) -> str:
    host = await discover(timeout=config.get_discovery_timeout())
    config.set_last_discovered_host(host)
    config.sync()
    return host


async def resolve_client(args: argparse.Namespace, config: ConfigManager) -> LmsClient:
    """Create a client from arguments, config or discovery (in that order)."""
    host: str | None = args.host or config.get_server_host() or None
    if not host:
        logger.info("Searching for LMS servers via UDP broadcast...")
        host = await _discover_host(config)

    port: int = args.port if args.port is not None else config.get_server_port()
    timeout: float = args.timeout if args.timeout is not None else config.get_request_timeout()
    return LmsClient(host, port, timeout)


def _on_off(value: bool) -> str:
    return "on" if value else "off"


async def run(args: argparse.Namespace, config: ConfigManager) -> int:
    """Run the selected command.

    Returns:
        Exit code.
    """
    if args.command == "discover":
        print(await _discover_host(config))
        return 0

    client = await resolve_client(args, config)

    if args.command == "players":
        result = await client.get_players()
        for player in result:
            print(
                f"{player.player_id}\t{player.name}\t"
                f"power={_on_off(player.power)}\tvolume={player.volume}"
            )
        for failure in result.failures:
            print(
                f"player {failure.index} ({failure.player_id or '?'}): {failure.error}",
                file=sys.stderr,
            )
        return 0 if result.ok else 1

    if args.command == "question":
        answer = await client.question(*args.args)
        print("" if answer is None else answer)
        return 0

    if args.command == "query":
        value = await client.query(*args.args)
        print(json.dumps(value, indent=2) if isinstance(value, dict) else value)
        return 0

    player = PlayerControl(client, args.player)

    if args.command == "power":
        if args.state is not None:
            await player.set_power(args.state == "on")
        print(_on_off(await player.get_power()))
    elif args.command == "volume":
        if args.level is not None:
            await player.set_volume(args.level)
        print(await player.get_volume())
    elif args.command == "mute":
        if args.state is not None:
            await player.set_mute(args.state == "on")
        print(_on_off(await player.get_mute()))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the lmsctrl command line.

    Returns:
        Exit code (0 for success).
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format=_LOG_FORMAT)

    config = ConfigManager()
    try:
        return asyncio.run(run(args, config))
    except DiscoveryError as e:
        logger.error("Server discovery failed: %s (use --host to skip discovery)", e)
    except LmsError as e:
        logger.error("Command failed: %s", e)
    return 1


if __name__ == "__main__":
    sys.exit(main())
