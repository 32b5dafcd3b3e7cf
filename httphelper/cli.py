"""CLI application and commands for hh."""

from __future__ import annotations

import logging
import sys
from dataclasses import asdict
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from httphelper.config import (
    CONFIG_FILE,
    Method,
    ResponseFormat,
    Settings,
    load_config,
    load_settings,
    save_config,
)
from httphelper.display import display_config, display_debug, display_json, display_response, display_status
from httphelper.errors import HttpHelperError
from httphelper.request import HttpHelper
from httphelper.request.status import parse_code

CONFIG_KEYS = ("user_agent", "timeout", "mime", "utf8", "follow_redirects")


def _version_callback(value: bool) -> None:
    if value:
        try:
            print(f"hh {version('httphelper')}")
        except PackageNotFoundError:
            from httphelper import __version__

            print(f"hh {__version__}")
        raise typer.Exit


app = typer.Typer(
    name="hh",
    help="Build and send a single HTTP request, then inspect the response.",
    no_args_is_help=True,
)


@app.callback()
def _main(
    _version: Annotated[
        bool,
        typer.Option("--version", "-V", callback=_version_callback, is_eager=True, help="Show version and exit."),
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log request details to stderr.")] = False,
) -> None:
    """Build and send a single HTTP request, then inspect the response."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


console = Console()


def _parse_pairs(values: list[str] | None, sep: str, what: str) -> dict[str, str]:
    """Split ``KEY<sep>VALUE`` options into a dict."""
    pairs: dict[str, str] = {}
    for item in values or []:
        if sep not in item:
            console.print(f"[red]Error: {what} must look like KEY{sep}VALUE, got {item!r}[/red]")
            raise typer.Exit(1)
        key, value = item.split(sep, 1)
        pairs[key.strip()] = value.strip()
    return pairs


@app.command()
def request(
    url: Annotated[str, typer.Argument(help="Target URL")],
    method: Annotated[Method | None, typer.Option("-X", "--method", help="HTTP method (inferred when omitted)")] = None,
    query: Annotated[list[str] | None, typer.Option("-q", "--query", help="Query param KEY=VALUE")] = None,
    data: Annotated[list[str] | None, typer.Option("-d", "--data", help="Body param KEY=VALUE")] = None,
    raw: Annotated[str | None, typer.Option("--raw", help="Raw request body")] = None,
    header: Annotated[list[str] | None, typer.Option("-H", "--header", help="Header NAME:VALUE")] = None,
    file: Annotated[list[Path] | None, typer.Option("-f", "--file", help="File to upload (multipart)")] = None,
    mime: Annotated[str | None, typer.Option("-m", "--mime", help="Body type: json, form, multipart, xml, binary")] = None,
    utf8: Annotated[bool, typer.Option("--utf8", help="Append charset=utf-8 to Content-Type")] = False,
    fmt: Annotated[ResponseFormat, typer.Option("--format", help="Response decoding")] = ResponseFormat.array,
    timeout: Annotated[float | None, typer.Option("--timeout", help="Timeout in seconds")] = None,
    debug: Annotated[bool, typer.Option("--debug", help="Show request sent and transfer info")] = False,
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Send one request and print the status and decoded body."""
    try:
        helper = HttpHelper().set_url(url)
        if mime is not None:
            helper.set_mime(mime)
        if utf8:
            helper.set_utf8()
        if timeout is not None:
            helper.set_timeout(timeout)
        if debug:
            helper.set_debug()
        helper.set_headers(_parse_pairs(header, ":", "header"))
        helper.set_get_params(_parse_pairs(query, "=", "query param"))

        body = _parse_pairs(data, "=", "body param")
        if method is not None:
            helper.set_method(method)
        if raw is not None:
            helper.set_post_raw(raw)
        if file:
            helper.set_post_files(list(file))
        if body:
            if method is Method.PUT:
                helper.set_put_params(body)
            elif method is Method.DELETE:
                helper.set_delete_params(body)
            else:
                helper.set_post_params(body)

        helper.execute()
    except (HttpHelperError, FileNotFoundError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from e

    result = helper.response(fmt)
    if json_output:
        display_json(helper, result, console)
    else:
        display_status(helper, console)
        if debug:
            display_debug(helper, console)
        if helper.transport_error is None:
            display_response(result, console)

    if helper.transport_error is not None:
        raise typer.Exit(1)


@app.command()
def status(
    code: Annotated[int, typer.Argument(help="HTTP status code")],
) -> None:
    """Look up the reason phrase for a status code."""
    is_error, message = parse_code(code)
    color = "red" if is_error else "green"
    kind = "error" if is_error else "success"
    console.print(f"[bold {color}]{code}[/bold {color}] {message} [dim]({kind})[/dim]")


@app.command()
def config(
    show: Annotated[bool, typer.Option("--show", help="Show current config")] = False,
    set_value: Annotated[str | None, typer.Option("--set", help="Set a default (KEY=VALUE)")] = None,
) -> None:
    """Manage default request settings."""
    if set_value:
        if "=" not in set_value:
            console.print("[red]Error: Use format KEY=VALUE (e.g., timeout=10)[/red]")
            raise typer.Exit(1)

        key, value = (part.strip() for part in set_value.split("=", 1))
        if key not in CONFIG_KEYS:
            console.print(f"[red]Error: Invalid key '{key}'. Valid: {', '.join(CONFIG_KEYS)}[/red]")
            raise typer.Exit(1)

        cfg = load_config()
        defaults = dict(cfg.get("defaults", {}))
        defaults[key] = value.lower() in ("1", "true", "yes", "on") if key in ("utf8", "follow_redirects") else value
        try:
            Settings.from_dict(defaults)
        except HttpHelperError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1) from e
        if key == "timeout":
            defaults[key] = float(value)
        cfg["defaults"] = defaults
        save_config(cfg)
        console.print(f"[green]{key} set to: {defaults[key]}[/green]")
        return

    if show or not set_value:
        console.print(f"[bold]Config file:[/bold] {CONFIG_FILE}")
        console.print(f"[bold]Config exists:[/bold] {CONFIG_FILE.exists()}")
        console.print()
        try:
            settings = load_settings()
        except HttpHelperError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1) from e
        display_config(asdict(settings), console)


def main() -> int:
    """Main entry point."""
    app()
    return 0


if __name__ == "__main__":
    sys.exit(main())
