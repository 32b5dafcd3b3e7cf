"""URL merging: combine a URL's existing query string with extra params."""

from __future__ import annotations

from typing import Any
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

from httphelper.request.util import flatten_params


def merge_url(url: str, params: dict[str, Any] | None = None) -> str:
    """Merge ``params`` into the query string of ``url``.

    Existing pairs keep their position; a configured key replaces every
    original pair with the same name at the spot of the first one. New keys
    are appended. An empty path becomes ``/`` and no ``?`` is emitted when the
    merged query is empty.
    """
    parts = urlsplit(url)
    params = params or {}
    pending = dict(params)

    merged: list[tuple[str, str]] = []
    for key, value in parse_qsl(parts.query, keep_blank_values=True, errors="surrogateescape"):
        if key in pending:
            merged.extend(flatten_params({key: pending.pop(key)}))
        elif key not in params:
            merged.append((key, value))
    merged.extend(flatten_params(pending))

    query = urlencode(merged, quote_via=quote, errors="surrogateescape")
    path = parts.path or "/"
    return urlunsplit((parts.scheme, parts.netloc, path, query, parts.fragment))

