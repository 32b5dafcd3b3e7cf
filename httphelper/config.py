"""Configuration, constants, and enums for httphelper."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any

from httphelper.errors import ConfigurationError

# ============================================================================
# XDG Base Directory Configuration
# ============================================================================

# Config: ~/.config/httphelper/config.toml
CONFIG_DIR = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "httphelper"
CONFIG_FILE = CONFIG_DIR / "config.toml"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/80.0.3987.132 Safari/537.36"
)
DEFAULT_TIMEOUT = 30.0

ENV_USER_AGENT = "HTTPHELPER_USER_AGENT"
ENV_TIMEOUT = "HTTPHELPER_TIMEOUT"

UTF8_SUFFIX = "; charset=utf-8"


# ============================================================================
# Enums
# ============================================================================


class MimeType(str, Enum):
    """Request body content types."""

    form = "application/x-www-form-urlencoded"
    multipart = "multipart/form-data"
    json = "application/json"
    xml = "application/xml"
    binary = "application/binary"

    @classmethod
    def resolve(cls, value: str | MimeType | None) -> MimeType:
        """Map a shorthand token or literal MIME string to a MimeType.

        Unrecognised input falls back to JSON.
        """
        if isinstance(value, MimeType):
            return value
        if value is None:
            return cls.json
        token = value.strip().lower()
        if token in MIME_SHORTCUTS:
            return MIME_SHORTCUTS[token]
        for mime in cls:
            if mime.value == token:
                return mime
        return cls.json

    def content_type(self, *, utf8: bool = False) -> str:
        """Content-Type header value, optionally with a charset suffix."""
        return self.value + UTF8_SUFFIX if utf8 else self.value


MIME_SHORTCUTS: dict[str, MimeType] = {
    "form": MimeType.form,
    "x-www-form-urlencoded": MimeType.form,
    "multipart": MimeType.multipart,
    "multipart/form-data": MimeType.multipart,
    "json": MimeType.json,
    "xml": MimeType.xml,
    "binary": MimeType.binary,
}


class Method(str, Enum):
    """HTTP verbs the helper can issue."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @property
    def has_body(self) -> bool:
        return self is not Method.GET


class ResponseFormat(str, Enum):
    """Shapes the decoded response can take."""

    array = "array"
    object = "object"
    xml = "xml"

    @classmethod
    def _missing_(cls, value: object) -> ResponseFormat | None:
        # "obj" is accepted as shorthand for object
        if isinstance(value, str) and value.lower() == "obj":
            return cls.object
        return None


# ============================================================================
# Settings
# ============================================================================


@dataclass
class Settings:
    """Per-helper defaults, loaded from the config file and environment."""

    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = DEFAULT_TIMEOUT
    mime: MimeType = MimeType.json
    utf8: bool = False
    follow_redirects: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        if "timeout" in kwargs:
            kwargs["timeout"] = _parse_timeout(kwargs["timeout"])
        if "mime" in kwargs:
            kwargs["mime"] = MimeType.resolve(kwargs["mime"])
        if "utf8" in kwargs:
            kwargs["utf8"] = bool(kwargs["utf8"])
        if "follow_redirects" in kwargs:
            kwargs["follow_redirects"] = bool(kwargs["follow_redirects"])
        return cls(**kwargs)


# ============================================================================
# Config Functions
# ============================================================================


def load_config() -> dict[str, Any]:
    """Load configuration from TOML config file."""
    if CONFIG_FILE.exists():
        with CONFIG_FILE.open("rb") as f:
            return tomllib.load(f)
    return {}


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return str(value)


def save_config(config: dict[str, Any]) -> None:
    """Save configuration to TOML config file."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)

    # Top-level keys must come before the first table header
    lines: list[str] = [f"{key} = {_format_value(value)}" for key, value in config.items() if not isinstance(value, dict)]
    if lines:
        lines.append("")
    for key, value in config.items():
        if isinstance(value, dict):
            lines.append(f"[{key}]")
            for k, v in value.items():
                lines.append(f"{k} = {_format_value(v)}")
            lines.append("")

    CONFIG_FILE.write_text("\n".join(lines) + "\n")


def load_settings() -> Settings:
    """Build Settings from the [defaults] table, then environment overrides."""
    config = load_config()
    defaults = config.get("defaults", {})
    settings = Settings.from_dict(defaults if isinstance(defaults, dict) else {})

    # Environment variables win over the config file
    env_agent = os.environ.get(ENV_USER_AGENT)
    if env_agent:
        settings.user_agent = env_agent
    env_timeout = os.environ.get(ENV_TIMEOUT)
    if env_timeout:
        settings.timeout = _parse_timeout(env_timeout)

    return settings


def _parse_timeout(value: Any) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid timeout: {value!r}") from e
    if timeout <= 0:
        raise ConfigurationError(f"Timeout must be positive: {value!r}")
    return timeout
