"""Exception types and transport failure records."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

# json encode failure codes
JSON_ERROR_RECURSION = 6
JSON_ERROR_INF_OR_NAN = 7
JSON_ERROR_UNSUPPORTED_TYPE = 8

# curl-compatible numeric codes for transport failures
TRANSPORT_ERROR_CODES: list[tuple[type[httpx.RequestError], int]] = [
    (httpx.UnsupportedProtocol, 1),
    (httpx.ProxyError, 5),
    (httpx.ConnectTimeout, 28),
    (httpx.ReadTimeout, 28),
    (httpx.WriteTimeout, 28),
    (httpx.PoolTimeout, 28),
    (httpx.ConnectError, 7),
    (httpx.RemoteProtocolError, 8),
    (httpx.LocalProtocolError, 8),
    (httpx.TooManyRedirects, 47),
    (httpx.WriteError, 55),
    (httpx.ReadError, 56),
    (httpx.DecodingError, 61),
]
UNKNOWN_TRANSPORT_ERROR = 2


class HttpHelperError(Exception):
    """Base class for errors raised by httphelper."""


class ConfigurationError(HttpHelperError):
    """The helper was misused or configured with invalid values."""


class EncodingError(HttpHelperError):
    """The outbound body could not be serialized."""

    def __init__(self, message: str, code: int) -> None:
        super().__init__(f"JSON encoding error: {message}")
        self.message = message
        self.code = code


@dataclass(frozen=True)
class TransportFailure:
    """A low-level transfer failure, recorded instead of raised."""

    message: str
    code: int

    @classmethod
    def from_exception(cls, exc: httpx.RequestError) -> TransportFailure:
        for exc_type, code in TRANSPORT_ERROR_CODES:
            if isinstance(exc, exc_type):
                return cls(str(exc) or exc_type.__name__, code)
        return cls(str(exc) or type(exc).__name__, UNKNOWN_TRANSPORT_ERROR)
