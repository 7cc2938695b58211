"""Bufrouter CLI - inspect buffer names and modifiers.

Commands:
    bufrouter parse <name>             Show the components of a buffer name
    bufrouter name <scheme> <path>     Format a buffer name
    bufrouter mods "<modifiers>"       Classify host modifiers into a split
"""

from __future__ import annotations

from typing import Annotated, NoReturn, Optional

import typer
from rich.console import Console
from rich.table import Table

from bufrouter import bufname
from bufrouter.bufname import ResourceName
from bufrouter.exceptions import RouterError
from bufrouter.opener import classify

app = typer.Typer(
    name="bufrouter",
    help="Inspect URL-named buffer names and window modifiers",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def _fail(e: Exception) -> NoReturn:
    err_console.print(f"[red]{e}[/red]")
    raise typer.Exit(1)


def _parse_param(raw: str) -> tuple[str, str]:
    key, sep, value = raw.partition("=")
    if not key or not sep:
        raise typer.BadParameter(f"expected key=value, got {raw!r}")
    return key, value


@app.command("parse")
def parse_cmd(
    name: Annotated[str, typer.Argument(help="Buffer name, e.g. foo://path;id=1#top")],
):
    """Show the scheme, path, params and fragment of a buffer name."""
    try:
        parsed = bufname.parse(name)
    except RouterError as e:
        _fail(e)

    table = Table(show_header=True, header_style="bold")
    table.add_column("PART")
    table.add_column("VALUE")
    table.add_row("scheme", parsed.scheme)
    table.add_row("path", parsed.path)
    for key, value in parsed.params.items():
        shown = value if isinstance(value, str) else ", ".join(value)
        table.add_row(f"param:{key}", shown)
    table.add_row("fragment", parsed.fragment or "-")
    console.print(table)


@app.command("name")
def name_cmd(
    scheme: Annotated[str, typer.Argument(help="Router scheme")],
    path: Annotated[str, typer.Argument(help="Handler path")],
    param: Annotated[
        Optional[list[str]],
        typer.Option("--param", "-p", help="key=value (repeat for multiple values)"),
    ] = None,
    fragment: Annotated[Optional[str], typer.Option("--fragment", "-f")] = None,
):
    """Format a buffer name from its parts."""
    params: dict[str, list[str]] = {}
    for raw in param or []:
        key, value = _parse_param(raw)
        params.setdefault(key, []).append(value)
    try:
        out = bufname.format(
            ResourceName(scheme=scheme, path=path, params=params, fragment=fragment)
        )
    except RouterError as e:
        _fail(e)
    typer.echo(out)


@app.command("mods")
def mods_cmd(
    mods: Annotated[str, typer.Argument(help='Modifiers, e.g. "vertical botright"')],
):
    """Classify host modifier keywords into a split direction."""
    try:
        split = classify(mods)
    except RouterError as e:
        _fail(e)
    typer.echo(split.value)


def main():
    app()


if __name__ == "__main__":
    main()
