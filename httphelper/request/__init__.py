"""Fluent single-request HTTP helper, httpx-based."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from httphelper.config import Method, MimeType, ResponseFormat, Settings, load_settings
from httphelper.errors import ConfigurationError, TransportFailure
from httphelper.request._http import TRANSPORT_OPTIONS, DebugInfo, HttpTransport, TransferResult
from httphelper.request.decode import DecodeResult, DecodeStatus, decode_body
from httphelper.request.headers import normalize_header
from httphelper.request.params import PreparedRequest, RequestConfig
from httphelper.request.status import parse_code
from httphelper.request.util import FilePart, build_query

__all__ = [
    "DebugInfo",
    "DecodeResult",
    "DecodeStatus",
    "FilePart",
    "HttpHelper",
    "PreparedRequest",
    "RequestConfig",
]

logger = logging.getLogger(__name__)


class HttpHelper:
    """Accumulate request settings, execute once, then read the result.

    Usage::

        helper = HttpHelper().set_url("https://api.example.com/users").set_post_params({"name": "Morpheus"})
        helper.execute()
        helper.http_code()           # 201
        helper.response().data       # {"name": "Morpheus", ...}

    A helper executes a single request. Call :meth:`reset` to reuse it.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or load_settings()
        self.reset()

    def reset(self) -> HttpHelper:
        """Clear configuration and results so the helper can be used again."""
        s = self._settings
        self.config = RequestConfig(
            mime=s.mime,
            utf8=s.utf8,
            user_agent=s.user_agent,
            timeout=s.timeout,
            options={"follow_redirects": s.follow_redirects},
        )
        self._result: TransferResult | None = None
        return self

    # ── configuration ─────────────────────────────────────────────────

    def _check_mutable(self) -> None:
        if self._result is not None:
            raise ConfigurationError("Request already executed; call reset() before reconfiguring")

    def set_url(self, url: str) -> HttpHelper:
        self._check_mutable()
        self.config.url = url
        return self

    def set_mime(self, mime: str | MimeType | None = None) -> HttpHelper:
        """Set the body MIME type from a shorthand (``form``, ``json``...) or literal string."""
        self._check_mutable()
        self.config.mime = MimeType.resolve(mime)
        return self

    def set_utf8(self, enabled: bool = True) -> HttpHelper:
        self._check_mutable()
        self.config.utf8 = enabled
        return self

    def set_headers(self, data: dict[str, Any], parse: bool = True) -> HttpHelper:
        """Merge headers. Names are Proper-Cased unless ``parse`` is False."""
        self._check_mutable()
        for key, value in data.items():
            self.config.headers[normalize_header(key) if parse else key] = value
        return self

    def set_option(self, name: str, value: Any) -> HttpHelper:
        """Pass a tuning knob straight to the httpx client."""
        self._check_mutable()
        if name not in TRANSPORT_OPTIONS:
            raise ConfigurationError(f"Unknown transport option: {name!r}")
        if name == "timeout":
            self.config.timeout = value
        else:
            self.config.options[name] = value
        return self

    def set_options(self, options: dict[str, Any]) -> HttpHelper:
        for name, value in options.items():
            self.set_option(name, value)
        return self

    def set_user_agent(self, user_agent: str) -> HttpHelper:
        self._check_mutable()
        self.config.user_agent = user_agent
        return self

    def set_timeout(self, timeout: float) -> HttpHelper:
        return self.set_option("timeout", timeout)

    def set_method(self, method: Method | str) -> HttpHelper:
        """Pick the verb explicitly instead of inferring it from populated data."""
        self._check_mutable()
        try:
            self.config.method = Method(method.upper() if isinstance(method, str) else method)
        except ValueError as e:
            raise ConfigurationError(f"Unsupported method: {method!r}") from e
        return self

    def set_post_raw(self, raw: str | bytes | dict[str, Any]) -> HttpHelper:
        """Send ``raw`` verbatim as the body. Mappings are form-encoded first."""
        self._check_mutable()
        self.config.raw_body = build_query(raw) if isinstance(raw, dict) else raw
        return self

    def set_post_params(self, data: dict[str, Any]) -> HttpHelper:
        self._check_mutable()
        self.config.post_params.update(data)
        return self

    def set_post_files(self, files: list[str | Path | FilePart], field: str | None = None) -> HttpHelper:
        """Attach files for a multipart POST.

        Paths are turned into parts with a guessed MIME type and their base
        name. Without ``field`` each part gets the next numeric field name.
        """
        self._check_mutable()
        for item in files:
            part = item if isinstance(item, FilePart) else FilePart.from_path(item)
            name = field if field is not None else str(len(self.config.files))
            self.config.files.append((name, part))
            logger.debug("attached %s as %s (%s)", part.filename, name, part.content_type)
        return self

    def set_get_params(self, data: dict[str, Any]) -> HttpHelper:
        self._check_mutable()
        self.config.query_params.update(data)
        return self

    def set_put_params(self, data: dict[str, Any]) -> HttpHelper:
        self._check_mutable()
        self.config.put_params.update(data)
        return self

    def set_delete_params(self, data: dict[str, Any]) -> HttpHelper:
        self._check_mutable()
        self.config.delete_params.update(data)
        return self

    def set_debug(self, enabled: bool = True) -> HttpHelper:
        self._check_mutable()
        self.config.debug = enabled
        return self

    # ── execution ─────────────────────────────────────────────────────

    def prepare(self) -> PreparedRequest:
        """Build the outbound request without sending it."""
        return self.config.prepare()

    def execute(self) -> HttpHelper:
        """Send the request. Transport failures are recorded, not raised."""
        self._check_mutable()
        prepared = self.prepare()
        logger.info("%s %s", prepared.method.value, prepared.url)
        transport = HttpTransport(timeout=self.config.timeout, options=self.config.options)
        self._result = transport.send(prepared, debug=self.config.debug)
        return self

    # ── results ───────────────────────────────────────────────────────

    @property
    def executed(self) -> bool:
        return self._result is not None

    def _require_result(self) -> TransferResult:
        if self._result is None:
            raise ConfigurationError("No response yet; call execute() first")
        return self._result

    def http_code(self) -> int:
        """Status code of the response, 0 when the transfer failed."""
        return self._require_result().status_code

    @property
    def raw_response(self) -> bytes:
        return self._require_result().content

    @property
    def text(self) -> str:
        result = self._require_result()
        return result.content.decode(result.encoding or "utf-8", errors="replace")

    @property
    def transport_error(self) -> TransportFailure | None:
        return self._require_result().error

    @property
    def ok(self) -> bool:
        result = self._require_result()
        return result.error is None and not parse_code(result.status_code)[0]

    def debug(self) -> dict[str, Any]:
        """Diagnostics of the last transfer. ``debug`` is only filled in debug mode."""
        result = self._require_result()
        return {
            "debug": result.debug,
            "error": result.error.message if result.error else "",
            "errno": result.error.code if result.error else 0,
            "out": result.header_out,
            "code": result.status_code,
            "size": result.header_size,
        }

    def response(self, fmt: ResponseFormat | str = ResponseFormat.array) -> DecodeResult:
        """Decode the body as ``array`` (dicts), ``object`` (namespaces) or ``xml``."""
        try:
            fmt = ResponseFormat(fmt)
        except ValueError as e:
            raise ConfigurationError(f"Unknown response format: {fmt!r}") from e
        return decode_body(self.text, fmt, content=self.raw_response)

    def parse_code(self) -> tuple[bool, str]:
        """``(is_error, message)`` for the captured status code."""
        return parse_code(self.http_code())
