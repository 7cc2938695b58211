"""Plain-text rendering of router diagnostics via Rich.

Buffer content must be plain lines, so everything is rendered without
color codes.
"""

from __future__ import annotations

from io import StringIO

from rich import box
from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

ERROR_WIDTH = 80


def _rich_to_lines(renderable, width: int = ERROR_WIDTH) -> list[str]:
    """Render a Rich renderable to plain text lines."""
    buf = StringIO()
    console = Console(file=buf, width=width, force_terminal=False, color_system=None)
    console.print(renderable)
    return [line.rstrip() for line in buf.getvalue().rstrip("\n").split("\n")]


def render_load_error(name: str, exc: BaseException, width: int = ERROR_WIDTH) -> list[str]:
    """Lines shown in a buffer whose handler failed to load it."""
    parts = [Text(name, style="bold"), Text("")]
    err: BaseException | None = exc
    first = True
    while err is not None:
        line = Text("" if first else "caused by ")
        line.append(f"{type(err).__name__}: ", style="bold red")
        line.append(str(err))
        parts.append(line)
        err = err.__cause__
        first = False

    panel = Panel(
        Group(*parts),
        title="Failed to load",
        title_align="left",
        box=box.ROUNDED,
        padding=(0, 1),
    )
    return _rich_to_lines(panel, width)
