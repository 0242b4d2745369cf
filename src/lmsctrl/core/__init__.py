"""Core layer: discovery, player control and configuration.

Classes:
    PlayerControl: Power, volume and mute for one player.
    ConfigManager: QSettings wrapper for configuration
        (import from lmsctrl.core.config).
"""

from lmsctrl.core.discovery import discover
from lmsctrl.core.player import PlayerControl, connect_discovered

__all__ = ["PlayerControl", "connect_discovered", "discover"]
