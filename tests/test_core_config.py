"""Tests for ConfigManager using QSettings."""

import pytest

from lmsctrl.core.config import ConfigManager
from lmsctrl.models.server import Endpoint


@pytest.fixture
def config() -> ConfigManager:
    """Return a fresh ConfigManager for each test."""
    # Use unique organization/app to avoid test interference
    config = ConfigManager("lmsctrlTest", "TestConfig")
    config.clear()
    return config


class TestServerSettings:
    """Tests for server endpoint settings."""

    def test_defaults(self, config: ConfigManager) -> None:
        """Test that config starts with discovery and the default port."""
        assert config.get_server_host() == ""
        assert config.get_server_port() == 9090
        assert config.get_endpoint() is None
        assert config.get_last_discovered_host() is None

    def test_host_and_port(self, config: ConfigManager) -> None:
        """Test saving a host and port."""
        config.set_server_host(" 192.168.1.100 ")
        config.set_server_port(9091)

        assert config.get_server_host() == "192.168.1.100"
        assert config.get_endpoint() == Endpoint("192.168.1.100", 9091)

    def test_port_clamped(self, config: ConfigManager) -> None:
        """Test out-of-range ports are clamped."""
        config.set_server_port(70000)
        assert config.get_server_port() == 65535
        config.set_server_port(0)
        assert config.get_server_port() == 1

    def test_last_discovered_host(self, config: ConfigManager) -> None:
        """Test remembering the discovered host."""
        config.set_last_discovered_host("10.0.0.5")
        assert config.get_last_discovered_host() == "10.0.0.5"
        # Discovery results do not pin the endpoint
        assert config.get_endpoint() is None


class TestTimeoutSettings:
    """Tests for timeout settings."""

    def test_defaults(self, config: ConfigManager) -> None:
        """Test default timeouts."""
        assert config.get_request_timeout() == 10.0
        assert config.get_discovery_timeout() == 3.0

    def test_set_timeouts(self, config: ConfigManager) -> None:
        """Test saving timeouts."""
        config.set_request_timeout(5.0)
        config.set_discovery_timeout(1.5)
        assert config.get_request_timeout() == 5.0
        assert config.get_discovery_timeout() == 1.5

    def test_timeouts_clamped(self, config: ConfigManager) -> None:
        """Test out-of-range timeouts are clamped."""
        config.set_request_timeout(500.0)
        config.set_discovery_timeout(0.0)
        assert config.get_request_timeout() == 120.0
        assert config.get_discovery_timeout() == 0.5

    def test_invalid_timeouts_fall_back(self, config: ConfigManager) -> None:
        """Test non-numeric stored timeouts fall back to the defaults."""
        config.settings.setValue("timeouts/request", "fast")
        config.settings.setValue("timeouts/discovery", "never")
        assert config.get_request_timeout() == 10.0
        assert config.get_discovery_timeout() == 3.0


class TestClear:
    """Tests for resetting settings."""

    def test_clear(self, config: ConfigManager) -> None:
        """Test clear restores defaults."""
        config.set_server_host("lms.local")
        config.set_request_timeout(2.0)
        config.sync()

        config.clear()

        assert config.get_server_host() == ""
        assert config.get_request_timeout() == 10.0
