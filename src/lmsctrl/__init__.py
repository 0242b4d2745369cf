"""Discovery and command client for Logitech/Lyrion Media Server."""

import logging

from lmsctrl.api.client import LmsClient, LmsConnectionError, LmsTransportError
from lmsctrl.api.protocol import LmsError, MalformedResponse
from lmsctrl.core.discovery import (
    DiscoveryError,
    DiscoverySendError,
    DiscoveryTimeout,
    discover,
)
from lmsctrl.core.player import PlayerControl, connect_discovered
from lmsctrl.models import Endpoint, PlayerFailure, PlayerRecord, PlayersResult

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "DiscoveryError",
    "DiscoverySendError",
    "DiscoveryTimeout",
    "Endpoint",
    "LmsClient",
    "LmsConnectionError",
    "LmsError",
    "LmsTransportError",
    "MalformedResponse",
    "PlayerControl",
    "PlayerFailure",
    "PlayerRecord",
    "PlayersResult",
    "connect_discovered",
    "discover",
]
