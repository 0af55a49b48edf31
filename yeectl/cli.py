"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

import typer
from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from yeectl.core.codec import split_params
from yeectl.core.errors import YeectlError
from yeectl.core.model import Bulb, CommandResult
from yeectl.core.service import YeeService

app = typer.Typer(help="Discover and control Yeelight-compatible Wi-Fi bulbs on the LAN")

USAGE = """To operate on bulbs, type without double quotes:
    bulb method param1 param2 ...
where bulb is the ID column, the bulb name, or its address. For example:
    1 set_power on smooth 500
Type 'print' to show bulb details and 'quit' to leave."""


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(None, "--config", help="Path to a YAML config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = config


def _build_service(ctx: typer.Context) -> YeeService:
    service = YeeService(config_path=ctx.obj)
    for warning in getattr(service, "load_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return service


def _print_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
    table = Table(box=box.ASCII)
    for header in headers:
        table.add_column(header)
    for row in rows:
        table.add_row(*(Text(cell) for cell in row))
    Console().print(table)


def _echo_bulbs(bulbs: Sequence[Bulb]) -> None:
    rows = [
        (str(index), bulb.name, bulb.network_address, bulb.model)
        for index, bulb in enumerate(bulbs, start=1)
    ]
    _print_table(("ID", "NAME", "ADDRESS", "MODEL"), rows)


def _echo_details(bulbs: Sequence[Bulb]) -> None:
    typer.echo("Warning: bulb details reflect the state at discovery time.", err=True)
    rows = [
        (
            bulb.id,
            bulb.model,
            str(bulb.firmware_version),
            bulb.power.value,
            str(bulb.brightness),
            f"{type(bulb.color_mode).__name__} ({bulb.color_mode})",
            bulb.name,
            bulb.network_address,
        )
        for bulb in bulbs
    ]
    headers = ("UNIQUE ID", "MODEL", "FW VER", "POWER", "BRIGHT", "COLOR MODE", "NAME", "ADDRESS")
    _print_table(headers, rows)
    for bulb in bulbs:
        methods = " ".join(sorted(m.value for m in bulb.supported_methods))
        typer.echo(f"{bulb.id} supports: {methods or '<none>'}")


def _echo_result(result: CommandResult) -> None:
    typer.echo(f"Sent: {result.request.decode('utf-8').rstrip()}")
    typer.echo(f"Reply: {result.reply_text or '<none>'}")


def _discover_or_exit(service: YeeService) -> list[Bulb]:
    bulbs = service.discover()
    if not bulbs:
        typer.echo("No bulbs found.")
        raise typer.Exit(code=1)
    return bulbs


@app.command("list")
def list_bulbs(ctx: typer.Context) -> None:
    """Discover bulbs and list them."""
    try:
        service = _build_service(ctx)
        _echo_bulbs(_discover_or_exit(service))
    except YeectlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("details")
def show_details(ctx: typer.Context) -> None:
    """Discover bulbs and show their advertised state."""
    try:
        service = _build_service(ctx)
        _echo_details(_discover_or_exit(service))
    except YeectlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("send", context_settings={"ignore_unknown_options": True})
def send_command(
    ctx: typer.Context,
    bulb: str = typer.Argument(..., help="Bulb name, ID column, unique id, or address"),
    method: str = typer.Argument(..., help="Control method, e.g. set_power"),
    params: list[str] | None = typer.Argument(None, help="Method parameters"),
) -> None:
    """Send one command to a bulb and print its reply."""
    try:
        service = _build_service(ctx)
        bulbs = _discover_or_exit(service)
        target = service.resolve_bulb(bulb, bulbs)
        _echo_result(service.send_command(target, method, params or []))
    except YeectlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("shell")
def shell(ctx: typer.Context) -> None:
    """Discover bulbs and start an interactive command prompt."""
    try:
        service = _build_service(ctx)
        bulbs = _discover_or_exit(service)
    except YeectlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    _echo_bulbs(bulbs)
    typer.echo(USAGE)

    while True:
        try:
            line = typer.prompt("Command", default="", show_default=False, prompt_suffix=": ")
        except typer.Abort:
            break

        tokens = split_params(line)
        if not tokens:
            continue
        if tokens[0] == "quit":
            break
        if tokens[0] == "print":
            _echo_details(bulbs)
            continue
        if len(tokens) < 2:
            typer.echo("Please input at least 2 arguments.", err=True)
            continue

        try:
            target = service.resolve_bulb(tokens[0], bulbs)
            _echo_result(service.send_command(target, tokens[1], tokens[2:]))
        except YeectlError as exc:
            typer.echo(f"Error: {exc}", err=True)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
