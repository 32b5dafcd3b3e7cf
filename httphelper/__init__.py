"""httphelper: fluent single-request HTTP client built on httpx."""

__version__ = "0.1.0"

from httphelper.cli import main
from httphelper.config import (
    CONFIG_DIR,
    CONFIG_FILE,
    Method,
    MimeType,
    ResponseFormat,
    Settings,
    load_config,
    load_settings,
    save_config,
)
from httphelper.errors import ConfigurationError, EncodingError, HttpHelperError, TransportFailure
from httphelper.request import DebugInfo, DecodeResult, DecodeStatus, FilePart, HttpHelper
from httphelper.request.headers import normalize_header
from httphelper.request.status import parse_code
from httphelper.request.urls import merge_url

__all__ = [
    "CONFIG_DIR",
    "CONFIG_FILE",
    "ConfigurationError",
    "DebugInfo",
    "DecodeResult",
    "DecodeStatus",
    "EncodingError",
    "FilePart",
    "HttpHelper",
    "HttpHelperError",
    "Method",
    "MimeType",
    "ResponseFormat",
    "Settings",
    "TransportFailure",
    "load_config",
    "load_settings",
    "main",
    "merge_url",
    "normalize_header",
    "parse_code",
    "save_config",
]
