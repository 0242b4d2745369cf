"""Configuration manager using QSettings for persistent storage."""

import logging

from PySide6.QtCore import QSettings

from lmsctrl.models.server import DEFAULT_PORT, Endpoint

logger = logging.getLogger(__name__)

# Settings keys
_KEY_SERVER_HOST = "server/host"
_KEY_SERVER_PORT = "server/port"
_KEY_LAST_DISCOVERED_HOST = "server/last_discovered_host"

# Timeouts
_KEY_REQUEST_TIMEOUT = "timeouts/request"
_KEY_DISCOVERY_TIMEOUT = "timeouts/discovery"

_DEFAULT_REQUEST_TIMEOUT = 10.0
_DEFAULT_DISCOVERY_TIMEOUT = 3.0


class ConfigManager:
    """Wrapper around QSettings for type-safe config access.

    QSettings stores config in platform-specific locations:
    - Windows: HKEY_CURRENT_USER\\Software\\lmsctrl\\lmsctrl
    - macOS: ~/Library/Preferences/com.lmsctrl.lmsctrl.plist
    - Linux: ~/.config/lmsctrl/lmsctrl.conf

    Example:
        config = ConfigManager()
        endpoint = config.get_endpoint()
        if endpoint is None:
            host = await discover(timeout=config.get_discovery_timeout())
    """

    def __init__(self, organization: str = "lmsctrl", application: str = "lmsctrl") -> None:
        """Initialize the config manager.

        Args:
            organization: Organization name for QSettings.
            application: Application name for QSettings.
        """
        self._settings = QSettings(organization, application)

    @property
    def settings(self) -> QSettings:
        """Return the underlying QSettings instance."""
        return self._settings

    # -- Server settings -------------------------------------------------------

    def get_server_host(self) -> str:
        """Return the configured server host.

        Returns:
            Host string, or empty string to use discovery.
        """
        value = self._settings.value(_KEY_SERVER_HOST, "", str)
        return str(value) if value else ""

    def set_server_host(self, host: str) -> None:
        """Set the server host.

        Args:
            host: Hostname or IP, or empty string to use discovery.
        """
        self._settings.setValue(_KEY_SERVER_HOST, host.strip())

    def get_server_port(self) -> int:
        """Return the command-line protocol port.

        Returns:
            Port number (default 9090).
        """
        value = self._settings.value(_KEY_SERVER_PORT, DEFAULT_PORT, int)
        try:
            return max(1, min(65535, int(value)))  # type: ignore[arg-type]
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid server port setting: %r", value)
            return DEFAULT_PORT

    def set_server_port(self, port: int) -> None:
        """Set the command-line protocol port.

        Args:
            port: Port number (1-65535).
        """
        self._settings.setValue(_KEY_SERVER_PORT, max(1, min(65535, port)))

    def get_endpoint(self) -> Endpoint | None:
        """Return the configured endpoint, or None if discovery should be used."""
        host = self.get_server_host()
        if not host:
            return None
        return Endpoint(host, self.get_server_port())

    def get_last_discovered_host(self) -> str | None:
        """Return the host found by the most recent discovery, if any."""
        value = self._settings.value(_KEY_LAST_DISCOVERED_HOST, None, str)
        return str(value) if value else None

    def set_last_discovered_host(self, host: str) -> None:
        """Remember the host found by discovery.

        Args:
            host: Discovered server address.
        """
        self._settings.setValue(_KEY_LAST_DISCOVERED_HOST, host)

    # -- Timeouts --------------------------------------------------------------

    def _read_float(self, key: str, default: float) -> float:
        value = self._settings.value(key, default)
        try:
            return float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid setting %s: %r", key, value)
            return default

    def get_request_timeout(self) -> float:
        """Return the request timeout in seconds.

        Returns:
            Timeout in seconds (default 10).
        """
        value = self._read_float(_KEY_REQUEST_TIMEOUT, _DEFAULT_REQUEST_TIMEOUT)
        return max(1.0, min(120.0, value))

    def set_request_timeout(self, seconds: float) -> None:
        """Set the request timeout.

        Args:
            seconds: Timeout in seconds (1-120).
        """
        self._settings.setValue(_KEY_REQUEST_TIMEOUT, max(1.0, min(120.0, seconds)))

    def get_discovery_timeout(self) -> float:
        """Return the discovery timeout in seconds.

        Returns:
            Timeout in seconds (default 3).
        """
        value = self._read_float(_KEY_DISCOVERY_TIMEOUT, _DEFAULT_DISCOVERY_TIMEOUT)
        return max(0.5, min(30.0, value))

    def set_discovery_timeout(self, seconds: float) -> None:
        """Set the discovery timeout.

        Args:
            seconds: Timeout in seconds (0.5-30).
        """
        self._settings.setValue(_KEY_DISCOVERY_TIMEOUT, max(0.5, min(30.0, seconds)))

    # -- General settings ------------------------------------------------------

    def clear(self) -> None:
        """Clear all settings (useful for testing or reset)."""
        self._settings.clear()

    def sync(self) -> None:
        """Force settings to be written to disk."""
        self._settings.sync()
