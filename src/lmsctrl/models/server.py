"""Server endpoint model."""

from dataclasses import dataclass

# Default port of the server's command-line protocol
DEFAULT_PORT = 9090


@dataclass(frozen=True, slots=True)
class Endpoint:
    """LMS command-line protocol endpoint.

    Attributes:
        host: Server hostname or IP address.
        port: TCP port (default 9090).
    """

    host: str
    port: int = DEFAULT_PORT

    @property
    def address(self) -> str:
        """Return the server address (host:port)."""
        return f"{self.host}:{self.port}"
