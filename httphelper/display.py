"""Rich display functions for the hh CLI."""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import TYPE_CHECKING, Any

from rich.table import Table

if TYPE_CHECKING:
    from rich.console import Console

    from httphelper.request import DecodeResult, HttpHelper

MAX_RAW_DISPLAY = 2000


def _jsonable(value: Any) -> Any:
    """Turn decoded namespaces back into plain structures for printing."""
    if hasattr(value, "__dict__") and not isinstance(value, type):
        return {k: _jsonable(v) for k, v in vars(value).items()}
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    return value


def display_status(helper: HttpHelper, console: Console) -> None:
    """Print the status line, colored by classification."""
    failure = helper.transport_error
    if failure is not None:
        console.print(f"[red]Transfer failed:[/red] {failure.message} [dim](code {failure.code})[/dim]")
        return

    is_error, message = helper.parse_code()
    color = "red" if is_error else "green"
    console.print(f"[bold {color}]{helper.http_code()} {message}[/bold {color}]")


def display_debug(helper: HttpHelper, console: Console) -> None:
    """Print the request headers sent and the transfer diagnostics table."""
    info = helper.debug()
    console.print()
    console.print("[bold]Request sent:[/bold]")
    console.print(info["out"].rstrip(), markup=False, highlight=False)

    if info["debug"] is None:
        return

    table = Table(title="Transfer", show_header=True, header_style="bold magenta")
    table.add_column("Property", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")
    for key, value in asdict(info["debug"]).items():
        if key == "total_time":
            value = f"{value * 1000:.1f} ms"
        table.add_row(key, str(value))

    console.print()
    console.print(table)


def display_response(result: DecodeResult, console: Console) -> None:
    """Print a decoded body, or explain why there is none."""
    console.print()
    if result.ok:
        console.print_json(json.dumps(_jsonable(result.data), default=str))
    elif result.empty:
        console.print("[yellow]Empty response body.[/yellow]")
    else:
        console.print("[yellow]Response body could not be decoded; raw body follows.[/yellow]")
        raw = result.raw
        if len(raw) > MAX_RAW_DISPLAY:
            raw = raw[:MAX_RAW_DISPLAY] + "..."
        console.print(raw, markup=False, highlight=False)


def display_json(helper: HttpHelper, result: DecodeResult, console: Console) -> None:
    """Print status, decode outcome, body and diagnostics as one JSON document."""
    is_error, message = helper.parse_code()
    info = helper.debug()
    failure = helper.transport_error
    output = {
        "code": helper.http_code(),
        "error": is_error,
        "message": message,
        "transport_error": asdict(failure) if failure else None,
        "decode": result.status.value,
        "data": _jsonable(result.data),
        "debug": asdict(info["debug"]) if info["debug"] else None,
    }
    console.print_json(json.dumps(output, default=str))


def display_config(config: dict[str, Any], console: Console) -> None:
    """Print the effective defaults table."""
    table = Table(title="Defaults", show_header=True, header_style="bold magenta")
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")
    for key, value in config.items():
        table.add_row(key, str(value.value if hasattr(value, "value") else value))
    console.print(table)
