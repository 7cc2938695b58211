"""MemoryHost: an in-process host with windows, views and signals.

Used by tests and by embedders that have no real editor. Signals are
delivered by calling the dispatcher table (`host.dispatcher`) directly, one
at a time per view.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from bufrouter.dispatch import Dispatcher
from bufrouter.host.base import SignalHandle
from bufrouter.opener import Split

logger = logging.getLogger(__name__)


class HostError(Exception):
    """Raised for operations the simulated editor refuses (E21-style)."""


@dataclass
class MemoryView:
    view_id: int
    name: str
    lines: list[str] = field(default_factory=list)
    variables: dict[str, Any] = field(default_factory=dict)
    loaded: bool = False
    modified: bool = False
    modifiable: bool = True
    readonly: bool = False
    acwrite: bool = False
    write_method: str | None = None


@dataclass
class MemoryWindow:
    window_id: int
    tab: int
    view_id: int | None = None
    split: Split = Split.NONE


class MemoryHost:
    """Host implementation holding all editor state in memory."""

    def __init__(self, dispatcher: Dispatcher | None = None) -> None:
        self.dispatcher: Dispatcher = dispatcher or {}
        self.views: dict[int, MemoryView] = {}
        self.windows: dict[int, MemoryWindow] = {1: MemoryWindow(window_id=1, tab=1)}
        self.current_window = 1
        self.read_signals: dict[str, str] = {}
        self.unload_signals: dict[str, str] = {}
        self.commands: dict[str, tuple[str, str]] = {}
        self._next_view = 1
        self._next_window = 2
        self._next_tab = 2
        self._locks: dict[int, asyncio.Lock] = {}

    # --- Lookup ---

    def view_by_name(self, name: str) -> MemoryView | None:
        for view in self.views.values():
            if view.name == name:
                return view
        return None

    def windows_of(self, view_id: int) -> list[MemoryWindow]:
        return [w for w in self.windows.values() if w.view_id == view_id]

    @property
    def current_view(self) -> MemoryView | None:
        view_id = self.windows[self.current_window].view_id
        return self.views.get(view_id) if view_id is not None else None

    # --- Signal delivery ---

    async def request(self, method: str, *args: Any) -> Any:
        fn = self.dispatcher.get(method)
        if fn is None:
            raise HostError(f"No dispatcher method {method!r}")
        logger.debug(f"request {method} {args!r}")
        return await fn(*args)

    def _lock(self, view_id: int) -> asyncio.Lock:
        return self._locks.setdefault(view_id, asyncio.Lock())

    @staticmethod
    def _scheme_of(name: str) -> str | None:
        scheme, sep, _ = name.partition("://")
        return scheme if sep else None

    async def _read(self, view: MemoryView) -> None:
        if view.loaded:
            return
        view.loaded = True
        method = self.read_signals.get(self._scheme_of(view.name) or "")
        if method is None:
            return
        async with self._lock(view.view_id):
            await self.request(method, view.view_id, view.name)

    def _add(self, name: str) -> MemoryView:
        view = self.view_by_name(name)
        if view is None:
            view = MemoryView(view_id=self._next_view, name=name)
            self.views[view.view_id] = view
            self._next_view += 1
        return view

    # --- Host protocol ---

    async def find_window(self, name: str) -> int | None:
        view = self.view_by_name(name)
        if view is None:
            return None
        wins = self.windows_of(view.view_id)
        return wins[0].window_id if wins else None

    async def focus_window(self, window: int) -> None:
        if window not in self.windows:
            raise HostError(f"Invalid window number {window}")
        self.current_window = window

    async def open_split(self, split: Split) -> None:
        current = self.windows[self.current_window]
        tab = current.tab
        if split is Split.TAB:
            tab = self._next_tab
            self._next_tab += 1
        win = MemoryWindow(
            window_id=self._next_window, tab=tab, view_id=current.view_id, split=split,
        )
        self.windows[win.window_id] = win
        self._next_window += 1
        self.current_window = win.window_id

    async def attach(self, name: str) -> int:
        view = self._add(name)
        self.windows[self.current_window].view_id = view.view_id
        await self._read(view)
        return view.view_id

    async def preload(self, name: str) -> int:
        view = self._add(name)
        await self._read(view)
        return view.view_id

    async def view_name(self, view_id: int) -> str:
        return self._view(view_id).name

    async def set_lines(self, view_id: int, lines: list[str]) -> None:
        self._view(view_id).lines = list(lines)

    async def set_variable(self, view_id: int, key: str, value: Any) -> None:
        self._view(view_id).variables[key] = value

    async def set_modified(self, view_id: int, modified: bool) -> None:
        self._view(view_id).modified = modified

    async def set_writable(self, view_id: int) -> None:
        view = self._view(view_id)
        view.acwrite = True
        view.modifiable = True
        view.readonly = False

    async def set_readonly(self, view_id: int) -> None:
        view = self._view(view_id)
        view.modifiable = False
        view.readonly = True

    async def register_read_signal(self, scheme: str, method: str) -> SignalHandle:
        self.read_signals[scheme] = method
        return SignalHandle(event="read", target=scheme, method=method)

    async def register_unload_signal(self, scheme: str, method: str) -> SignalHandle:
        self.unload_signals[scheme] = method
        return SignalHandle(event="unload", target=scheme, method=method)

    async def register_write_signal(self, view_id: int, method: str) -> SignalHandle:
        self._view(view_id).write_method = method
        return SignalHandle(event="write", target=view_id, method=method)

    async def register_command(self, command: str, method: str, path: str) -> SignalHandle:
        self.commands[command] = (method, path)
        return SignalHandle(event="command", target=command, method=method)

    # --- Simulated user input ---

    def edit(self, view_id: int, lines: list[str]) -> None:
        """Replace the view content as a user would, marking it modified."""
        view = self._view(view_id)
        if not view.modifiable:
            raise HostError("E21: Cannot make changes, 'modifiable' is off")
        view.lines = list(lines)
        view.modified = True

    async def write(self, view_id: int) -> None:
        """Simulate `:write` on a view."""
        view = self._view(view_id)
        if view.write_method is None:
            raise HostError(f"E382: Cannot write view {view_id} ({view.name})")
        async with self._lock(view_id):
            await self.request(view.write_method, view_id, view.name)

    async def wipe(self, view_id: int) -> None:
        """Simulate `:bwipeout`, firing the unload signal."""
        view = self.views.pop(view_id)
        for win in self.windows_of(view_id):
            win.view_id = None
        method = self.unload_signals.get(self._scheme_of(view.name) or "")
        if method is not None:
            await self.request(method, view_id)
        self._locks.pop(view_id, None)

    async def rename(self, view_id: int, name: str) -> None:
        """Simulate `:file {name}`."""
        self._view(view_id).name = name

    async def run_command(self, command: str, *args: str, mods: str = "") -> Any:
        """Simulate a user running a registered command."""
        if command not in self.commands:
            raise HostError(f"E492: Not an editor command: {command}")
        method, path = self.commands[command]
        return await self.request(method, path, mods, list(args))

    def _view(self, view_id: int) -> MemoryView:
        view = self.views.get(view_id)
        if view is None:
            raise HostError(f"E86: Buffer {view_id} does not exist")
        return view
