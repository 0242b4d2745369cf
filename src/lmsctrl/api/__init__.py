"""API client for the LMS command-line protocol over TCP."""

from lmsctrl.api.client import LmsClient, LmsConnectionError, LmsTransportError
from lmsctrl.api.protocol import (
    LmsError,
    MalformedResponse,
    decode_response,
    encode_command,
    parse_fields,
    strip_echo,
)

__all__ = [
    "LmsClient",
    "LmsConnectionError",
    "LmsError",
    "LmsTransportError",
    "MalformedResponse",
    "decode_response",
    "encode_command",
    "parse_fields",
    "strip_echo",
]
