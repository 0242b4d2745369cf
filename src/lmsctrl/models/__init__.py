"""Data models for servers and players."""

from lmsctrl.models.player import PlayerFailure, PlayerRecord, PlayersResult
from lmsctrl.models.server import DEFAULT_PORT, Endpoint

__all__ = [
    "DEFAULT_PORT",
    "Endpoint",
    "PlayerFailure",
    "PlayerRecord",
    "PlayersResult",
]
