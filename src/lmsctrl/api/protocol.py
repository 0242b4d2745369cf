"""LMS command-line protocol encoding and parsing utilities.

The server's CLI protocol (TCP port 9090) is a simple line-based text protocol:
- Commands are sent as one line of space-separated tokens, terminated by CRLF
- Every token is percent-encoded so values may contain spaces
- The reply line echoes the command tokens, followed by the result tokens
- Multi-field results are "key:value" tokens (e.g. "mixer%20volume%3A45")

Reference: https://lyrion.org/reference/cli/introduction/
"""

from collections.abc import Sequence
from urllib.parse import quote, unquote


class LmsError(Exception):
    """Base class for LMS protocol and transport errors."""


class MalformedResponse(LmsError):
    """Reply could not be interpreted as a response to the issued command."""

    def __init__(self, message: str, tokens: Sequence[str] = ()) -> None:
        self.tokens = list(tokens)
        super().__init__(message)


LINE_TERMINATOR = "\r\n"

# Characters left unescaped besides letters, digits and "_.-~".
# "?" must stay literal for queries, ":" keeps tagged params readable.
_SAFE_CHARS = ":?/+,"


def encode_token(token: object) -> str:
    """Percent-encode a single command token.

    Tokens are always escaped, "%" included, so callers pass raw values
    (e.g. "search:foo bar", not "search:foo%20bar").

    Args:
        token: The token; non-strings are converted with str().

    Returns:
        Token safe to place on a space-separated command line.
    """
    return quote(str(token), safe=_SAFE_CHARS)


def format_command(*args: object) -> str:
    """Format a command line (without terminator).

    Args:
        *args: Command tokens.

    Returns:
        Encoded tokens joined by a single space.
    """
    return " ".join(encode_token(arg) for arg in args)


def encode_command(*args: object) -> bytes:
    """Encode a command as a CRLF-terminated UTF-8 line."""
    return f"{format_command(*args)}{LINE_TERMINATOR}".encode()


def decode_response(data: bytes) -> list[str]:
    """Decode one reply line into tokens.

    Args:
        data: Raw line bytes, with or without the terminator.

    Returns:
        Percent-decoded tokens. Empty list for a blank line.

    Raises:
        MalformedResponse: If the line is not valid UTF-8.
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedResponse(f"Reply is not valid UTF-8: {e}") from e
    return [unquote(token) for token in text.split()]


def strip_echo(tokens: Sequence[str], args: Sequence[object]) -> list[str]:
    """Strip the echoed command prefix from a reply.

    Args:
        tokens: Decoded reply tokens.
        args: The arguments the command was issued with (without "?").

    Returns:
        The tokens following the echo.

    Raises:
        MalformedResponse: If the reply is shorter than the command or
            does not start with the command tokens.
    """
    expected = [str(arg) for arg in args]
    if len(tokens) < len(expected):
        raise MalformedResponse(
            f"Reply has {len(tokens)} tokens, expected echo of {len(expected)}",
            tokens,
        )
    echo = list(tokens[: len(expected)])
    if echo != expected:
        raise MalformedResponse(f"Reply echo {echo} does not match command {expected}", tokens)
    return list(tokens[len(expected) :])


def parse_fields(tokens: Sequence[str]) -> dict[str, str]:
    """Parse "key:value" tokens into a dict.

    Only the first colon separates key from value, so values such as
    MAC addresses or times keep their own colons. A token without a colon
    maps to an empty value.

    Args:
        tokens: Result tokens (echo already stripped).

    Returns:
        Dictionary of fields; later duplicates overwrite earlier ones.
    """
    result: dict[str, str] = {}
    for token in tokens:
        key, _, value = token.partition(":")
        result[key] = value
    return result
