"""Response body decoding into dicts, namespaces, or XML-derived dicts."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from types import SimpleNamespace
from typing import Any

from lxml import etree

from httphelper.config import ResponseFormat

logger = logging.getLogger(__name__)


class DecodeStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    UNDECODABLE = "undecodable"


@dataclass(frozen=True)
class DecodeResult:
    """Tagged decode outcome. ``data`` is only set when ``status`` is OK."""

    status: DecodeStatus
    data: Any = None
    raw: str = ""

    @property
    def ok(self) -> bool:
        return self.status is DecodeStatus.OK

    @property
    def empty(self) -> bool:
        return self.status is DecodeStatus.EMPTY


def _element_to_dict(elem: etree._Element) -> Any:
    """Convert an element to nested dicts, collapsing text-only leaves to strings."""
    result: dict[str, Any] = {}
    if elem.attrib:
        result["@attributes"] = dict(elem.attrib)

    for child in elem:
        if not isinstance(child.tag, str):
            # comments and processing instructions
            continue
        value = _element_to_dict(child)
        tag = etree.QName(child).localname
        if tag in result:
            existing = result[tag]
            if isinstance(existing, list):
                existing.append(value)
            else:
                result[tag] = [existing, value]
        else:
            result[tag] = value

    text = (elem.text or "").strip()
    if not result:
        return text if text else {}
    if text:
        result["#text"] = text
    return result


def xml_to_dict(text: str | bytes) -> dict[str, Any]:
    """Parse an XML document into the same nested shape as a decoded JSON object."""
    data = text.encode("utf-8") if isinstance(text, str) else text
    parser = etree.XMLParser(resolve_entities=False, no_network=True, remove_blank_text=True)
    root = etree.fromstring(data, parser=parser)
    converted = _element_to_dict(root)
    return converted if isinstance(converted, dict) else {"#text": converted}


def decode_body(
    raw: str,
    fmt: ResponseFormat | str = ResponseFormat.array,
    content: bytes | None = None,
) -> DecodeResult:
    """Decode ``raw`` in the requested format.

    XML is parsed from ``content`` when given, so the document's own
    encoding declaration decides how its bytes are read.

    Never raises on bad input: empty bodies come back as EMPTY and anything
    that fails to parse as UNDECODABLE with the raw text preserved.
    """
    fmt = ResponseFormat(fmt)
    if not raw or not raw.strip():
        return DecodeResult(DecodeStatus.EMPTY, raw=raw)

    try:
        if fmt is ResponseFormat.xml:
            data: Any = xml_to_dict(content if content is not None else raw)
        elif fmt is ResponseFormat.object:
            data = json.loads(raw, object_hook=lambda d: SimpleNamespace(**d))
        else:
            data = json.loads(raw)
    except (ValueError, etree.XMLSyntaxError) as e:
        logger.debug("response not decodable as %s: %s", fmt.value, e)
        return DecodeResult(DecodeStatus.UNDECODABLE, raw=raw)

    return DecodeResult(DecodeStatus.OK, data=data, raw=raw)
