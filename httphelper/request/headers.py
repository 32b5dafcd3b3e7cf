"""Header name normalisation and formatting."""

from __future__ import annotations

from typing import Any

HeaderValue = str | list[str]


def normalize_header(name: str) -> str:
    """Proper-Case a header name: ``content-type`` -> ``Content-Type``.

    Only the first character of each segment is touched, so already
    normalised names come back unchanged.
    """
    return "-".join(word[:1].upper() + word[1:] for word in name.split("-"))


def header_items(headers: dict[str, Any]) -> list[tuple[str, str]]:
    """Expand list values into repeated ``(name, value)`` pairs."""
    items: list[tuple[str, str]] = []
    for name, value in headers.items():
        if isinstance(value, (list, tuple)):
            items.extend((name, str(v)) for v in value)
        else:
            items.append((name, str(value)))
    return items


def has_header(headers: dict[str, Any], name: str) -> bool:
    """Case-insensitive membership test."""
    lowered = name.lower()
    return any(key.lower() == lowered for key in headers)


def format_header_block(request_line: str, items: list[tuple[str, str]]) -> str:
    """Render an outgoing header block the way it appears on the wire."""
    lines = [request_line, *(f"{k}: {v}" for k, v in items)]
    return "\r\n".join(lines) + "\r\n\r\n"
