"""Host protocol: the editor primitives the router drives."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from bufrouter.opener import Split


@dataclass(frozen=True)
class SignalHandle:
    """Registration of a host event bound to a dispatcher method.

    `target` is the scheme for buffer-pattern signals, the view id for
    per-view signals, or the command name for user commands.
    """

    event: str
    target: str | int
    method: str


@runtime_checkable
class Host(Protocol):
    """Async view management of a host editor.

    Signals registered here call back into the dispatcher table by method
    name, the way a remote plugin host delivers requests.
    """

    async def find_window(self, name: str) -> int | None:
        """Window currently displaying the buffer `name`, if any."""
        ...

    async def focus_window(self, window: int) -> None: ...

    async def open_split(self, split: Split) -> None:
        """Open a new window in the given direction and make it current."""
        ...

    async def attach(self, name: str) -> int:
        """Show buffer `name` in the current window. Returns its view id."""
        ...

    async def preload(self, name: str) -> int:
        """Add and load buffer `name` without displaying it."""
        ...

    async def view_name(self, view_id: int) -> str: ...

    async def set_lines(self, view_id: int, lines: list[str]) -> None: ...

    async def set_variable(self, view_id: int, key: str, value: Any) -> None: ...

    async def set_modified(self, view_id: int, modified: bool) -> None: ...

    async def set_writable(self, view_id: int) -> None:
        """Make writes go through the write signal instead of the filesystem."""
        ...

    async def set_readonly(self, view_id: int) -> None: ...

    async def register_read_signal(self, scheme: str, method: str) -> SignalHandle:
        """Call `method(view_id, name)` when a `scheme://` buffer needs content."""
        ...

    async def register_unload_signal(self, scheme: str, method: str) -> SignalHandle:
        """Call `method(view_id)` when a `scheme://` buffer is wiped."""
        ...

    async def register_write_signal(self, view_id: int, method: str) -> SignalHandle:
        """Call `method(view_id, name)` when this view is written."""
        ...

    async def register_command(self, command: str, method: str, path: str) -> SignalHandle:
        """Define a user command calling `method(path, mods, args)`."""
        ...
