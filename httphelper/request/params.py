"""Request configuration and its preparation into a sendable request."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from httphelper.config import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, Method, MimeType
from httphelper.errors import ConfigurationError
from httphelper.request.headers import has_header, header_items
from httphelper.request.urls import merge_url
from httphelper.request.util import FilePart, build_query, encode_json, flatten_params

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = ("http", "https")


@dataclass
class PreparedRequest:
    method: Method
    url: str
    headers: list[tuple[str, str]]
    content: bytes | None = None
    data: dict[str, str] | None = None
    files: list[tuple[str, tuple[str, bytes, str]]] | None = None


@dataclass
class RequestConfig:
    url: str | None = None
    query_params: dict[str, Any] = field(default_factory=dict)
    post_params: dict[str, Any] = field(default_factory=dict)
    put_params: dict[str, Any] = field(default_factory=dict)
    delete_params: dict[str, Any] = field(default_factory=dict)
    raw_body: str | bytes | None = None
    files: list[tuple[str, FilePart]] = field(default_factory=list)
    headers: dict[str, Any] = field(default_factory=dict)
    mime: MimeType = MimeType.json
    utf8: bool = False
    debug: bool = False
    method: Method | None = None
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = DEFAULT_TIMEOUT
    options: dict[str, Any] = field(default_factory=dict)

    def resolve_method(self) -> Method:
        """Explicit method if set, else inferred from which data was populated."""
        if self.method is not None:
            return self.method
        if self.raw_body is not None or self.post_params or self.files:
            return Method.POST
        if self.put_params:
            return Method.PUT
        if self.delete_params:
            return Method.DELETE
        return Method.GET

    def body_params(self, method: Method) -> dict[str, Any]:
        return {
            Method.POST: self.post_params,
            Method.PUT: self.put_params,
            Method.DELETE: self.delete_params,
        }.get(method, {})

    def content_type(self) -> str:
        return self.mime.content_type(utf8=self.utf8)

    def build_url(self) -> str:
        if not self.url:
            raise ConfigurationError("No URL set; call set_url() before execute()")
        url = merge_url(self.url, self.query_params)
        try:
            parsed = httpx.URL(url)
        except httpx.InvalidURL as e:
            raise ConfigurationError(f"Invalid URL {self.url!r}: {e}") from e
        if parsed.scheme not in ALLOWED_SCHEMES or not parsed.host:
            raise ConfigurationError(f"Unsupported or missing URL scheme: {self.url}")
        return url

    def prepare(self) -> PreparedRequest:
        """Resolve method, URL, headers and body. Raises before any I/O."""
        method = self.resolve_method()
        url = self.build_url()
        headers = dict(self.headers)
        prepared = PreparedRequest(method=method, url=url, headers=[])

        if method is Method.GET:
            ignored = [name for name in ("post_params", "put_params", "delete_params") if getattr(self, name)]
            if self.raw_body is not None or self.files:
                ignored.append("body")
            if ignored:
                logger.warning("GET request ignores configured %s", ", ".join(ignored))
        elif self.files and method is Method.POST and self.raw_body is None:
            # multipart: the transport writes the boundary into Content-Type
            prepared.data = dict(flatten_params(self.post_params))
            prepared.files = [(name, part.to_httpx()) for name, part in self.files]
            headers = {k: v for k, v in headers.items() if k.lower() != "content-type"}
        else:
            prepared.content = self._serialize_body(method)
            headers = {k: v for k, v in headers.items() if k.lower() != "content-type"}
            headers["Content-Type"] = self.content_type()

        if not has_header(headers, "User-Agent"):
            headers["User-Agent"] = self.user_agent

        prepared.headers = header_items(headers)
        return prepared

    def _serialize_body(self, method: Method) -> bytes:
        if self.raw_body is not None:
            return self.raw_body.encode("utf-8") if isinstance(self.raw_body, str) else self.raw_body
        params = self.body_params(method)
        if self.mime is MimeType.json:
            return encode_json(params).encode("utf-8")
        return build_query(params).encode("utf-8")
