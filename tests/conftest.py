"""Test fixtures for lmsctrl tests."""

import asyncio
from collections.abc import AsyncGenerator, Callable
from urllib.parse import unquote

import pytest


class MockStreamReader:
    """Mock asyncio StreamReader for testing."""

    def __init__(self, responses: list[bytes]) -> None:
        self._responses = responses
        self._index = 0
        self._buffer = b""

    async def readline(self) -> bytes:
        """Read a line from mock data, or what is left at EOF."""
        while b"\n" not in self._buffer:
            if self._index >= len(self._responses):
                data, self._buffer = self._buffer, b""
                return data
            self._buffer += self._responses[self._index]
            self._index += 1

        line, self._buffer = self._buffer.split(b"\n", 1)
        return line + b"\n"


class MockStreamWriter:
    """Mock asyncio StreamWriter for testing."""

    def __init__(self) -> None:
        self.data: list[bytes] = []
        self.close_count = 0

    def write(self, data: bytes) -> None:
        """Record written data."""
        self.data.append(data)

    async def drain(self) -> None:
        """Mock drain."""

    def close(self) -> None:
        """Count closes."""
        self.close_count += 1

    async def wait_closed(self) -> None:
        """Mock wait_closed."""

    def is_closing(self) -> bool:
        """Check if closing."""
        return self.close_count > 0


@pytest.fixture
def mock_connection() -> Callable[[list[bytes]], tuple[MockStreamReader, MockStreamWriter]]:
    """Create mock connection for testing."""

    def _mock_connection(responses: list[bytes]) -> tuple[MockStreamReader, MockStreamWriter]:
        reader = MockStreamReader(responses)
        writer = MockStreamWriter()
        return reader, writer

    return _mock_connection


class FakeLmsServer:
    """Loopback server speaking the LMS command-line protocol.

    Each connection reads one command line and answers with the reply
    registered for that command. Unknown commands are echoed back.

    Attributes:
        replies: Maps decoded command lines (e.g. "player count ?") to raw replies.
        received: Decoded command lines in arrival order.
        connections: Number of connections accepted.
    """

    def __init__(self) -> None:
        self.replies: dict[str, bytes] = {}
        self.received: list[str] = []
        self.connections = 0
        self.host = "127.0.0.1"
        self.port = 0

    async def handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        """Serve one request on a connection."""
        self.connections += 1
        line = await reader.readline()
        command = " ".join(unquote(token) for token in line.decode().split())
        self.received.append(command)
        writer.write(self.replies.get(command, line.rstrip(b"\r\n") + b"\n"))
        await writer.drain()
        writer.close()
        await writer.wait_closed()


@pytest.fixture
async def lms_server() -> AsyncGenerator[FakeLmsServer, None]:
    """Fixture providing a loopback LMS server on a random port."""
    fake = FakeLmsServer()
    server = await asyncio.start_server(fake.handle, fake.host, 0)
    fake.port = server.sockets[0].getsockname()[1]
    async with server:
        yield fake
