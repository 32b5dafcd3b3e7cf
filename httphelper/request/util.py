"""Body serialization helpers and file attachment parts."""

from __future__ import annotations

import json
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import quote, urlencode

from httphelper.errors import (
    JSON_ERROR_INF_OR_NAN,
    JSON_ERROR_RECURSION,
    JSON_ERROR_UNSUPPORTED_TYPE,
    EncodingError,
)

logger = logging.getLogger(__name__)

DEFAULT_FILE_MIME = "application/octet-stream"


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def flatten_params(params: dict[str, Any], prefix: str | None = None) -> list[tuple[str, str]]:
    """Flatten nested params into key/value pairs with bracketed keys.

    ``{"a": [1, 2], "b": {"c": "d"}}`` becomes
    ``[("a[0]", "1"), ("a[1]", "2"), ("b[c]", "d")]``. ``None`` values are skipped.
    """
    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        name = f"{prefix}[{key}]" if prefix is not None else str(key)
        if value is None:
            continue
        if isinstance(value, dict):
            pairs.extend(flatten_params(value, name))
        elif isinstance(value, (list, tuple)):
            pairs.extend(flatten_params(dict(enumerate(value)), name))
        else:
            pairs.append((name, _scalar(value)))
    return pairs


def build_query(params: dict[str, Any]) -> str:
    """Form-encode params, percent-encoding spaces as %20."""
    return urlencode(flatten_params(params), quote_via=quote)


def encode_json(data: Any) -> str:
    """Strict JSON encoding. Raises EncodingError instead of sending bad data."""
    try:
        return json.dumps(data, allow_nan=False)
    except TypeError as e:
        raise EncodingError(str(e), JSON_ERROR_UNSUPPORTED_TYPE) from e
    except RecursionError as e:
        raise EncodingError("Recursion detected", JSON_ERROR_RECURSION) from e
    except ValueError as e:
        code = JSON_ERROR_RECURSION if "Circular reference" in str(e) else JSON_ERROR_INF_OR_NAN
        raise EncodingError(str(e), code) from e


@dataclass(frozen=True)
class FilePart:
    """One multipart attachment: a file path or in-memory bytes."""

    source: str | Path | bytes
    mime: str | None = None
    name: str | None = None

    @classmethod
    def from_path(cls, path: str | Path, mime: str | None = None, name: str | None = None) -> FilePart:
        """Build a part from a local file, guessing its MIME type and base name."""
        p = Path(path)
        if not p.is_file():
            raise FileNotFoundError(f"attachment not found: {p}")
        guessed, _ = mimetypes.guess_type(p.name)
        return cls(p, mime or guessed or DEFAULT_FILE_MIME, name or p.name)

    @property
    def filename(self) -> str:
        if self.name:
            return self.name
        if isinstance(self.source, bytes):
            return "blob"
        return Path(self.source).name

    @property
    def content_type(self) -> str:
        return self.mime or DEFAULT_FILE_MIME

    def read(self) -> bytes:
        if isinstance(self.source, bytes):
            return self.source
        logger.debug("reading attachment: %s", self.source)
        return Path(self.source).read_bytes()

    def to_httpx(self) -> tuple[str, bytes, str]:
        return (self.filename, self.read(), self.content_type)
