"""HTTP transport layer wrapping httpx."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx

from httphelper.errors import TransportFailure
from httphelper.request.headers import format_header_block

if TYPE_CHECKING:
    from httphelper.request.params import PreparedRequest

logger = logging.getLogger(__name__)

# httpx.Client keyword arguments callers may tune through set_option()
TRANSPORT_OPTIONS = frozenset(
    {
        "timeout",
        "follow_redirects",
        "max_redirects",
        "http1",
        "http2",
        "proxy",
        "cookies",
        "trust_env",
        "default_encoding",
    }
)


@dataclass
class DebugInfo:
    """Transfer diagnostics captured when debug mode is on."""

    url: str
    method: str
    content_type: str | None
    http_code: int
    http_version: str
    header_size: int
    request_size: int
    size_upload: int
    size_download: int
    total_time: float
    redirect_count: int


@dataclass
class TransferResult:
    content: bytes = b""
    encoding: str | None = None
    status_code: int = 0
    header_size: int = 0
    header_out: str = ""
    error: TransportFailure | None = None
    debug: DebugInfo | None = None


def _response_header_size(response: httpx.Response) -> int:
    status_line = f"{response.http_version} {response.status_code} {response.reason_phrase}\r\n"
    size = len(status_line.encode("latin-1", errors="replace"))
    for name, value in response.headers.raw:
        size += len(name) + len(value) + 4
    return size + 2


class HttpTransport:
    """One-shot transport: opens a session, sends one request, closes the session."""

    def __init__(self, timeout: float = 30.0, options: dict[str, Any] | None = None) -> None:
        self._client_kwargs: dict[str, Any] = {"timeout": timeout, "follow_redirects": True}
        self._client_kwargs.update(options or {})

    def send(self, prepared: PreparedRequest, *, debug: bool = False) -> TransferResult:
        method = prepared.method.value
        logger.debug("%s %s", method, prepared.url)
        result = TransferResult()
        started = time.perf_counter()

        with httpx.Client(**self._client_kwargs) as client:
            logger.debug("transport ready: %s", self._client_kwargs)
            request = client.build_request(
                method,
                prepared.url,
                headers=prepared.headers,
                content=prepared.content,
                data=prepared.data,
                files=prepared.files,
            )
            request_line = f"{method} {request.url.raw_path.decode('ascii')} HTTP/1.1"
            sent = [(k.decode("latin-1"), v.decode("latin-1")) for k, v in request.headers.raw]
            result.header_out = format_header_block(request_line, sent)
            try:
                response = client.send(request)
            except httpx.RequestError as e:
                result.error = TransportFailure.from_exception(e)
                logger.error("%s %s transfer failed: %s (code %d)", method, prepared.url, e, result.error.code)
                return result

        elapsed = time.perf_counter() - started
        result.content = response.content
        result.encoding = response.encoding
        result.status_code = response.status_code
        result.header_size = _response_header_size(response)
        logger.info("%s %s → %d (%d bytes)", method, prepared.url, response.status_code, len(response.content))

        if debug:
            body = request.read()
            result.debug = DebugInfo(
                url=str(response.url),
                method=method,
                content_type=response.headers.get("content-type"),
                http_code=response.status_code,
                http_version=response.http_version,
                header_size=result.header_size,
                request_size=len(result.header_out.encode("latin-1", errors="replace")) + len(body),
                size_upload=len(body),
                size_download=len(response.content),
                total_time=elapsed,
                redirect_count=len(response.history),
            )
        return result
