"""VimHost: drives Vim/Neovim through Ex commands and function calls.

The transport is injected as a VimChannel (a denops- or pynvim-like
object). Signals become autocommands and user commands that call back into
the plugin with `request_fn` (default `denops#request`).
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from bufrouter.host.base import SignalHandle
from bufrouter.opener import Split

logger = logging.getLogger(__name__)


class VimChannel(Protocol):
    name: str

    async def cmd(self, command: str) -> None: ...

    async def call(self, fn: str, *args: Any) -> Any: ...


SPLIT_COMMANDS: dict[Split, str] = {
    Split.TOP: "topleft split",
    Split.ABOVE: "aboveleft split",
    Split.BELOW: "belowright split",
    Split.BOTTOM: "botright split",
    Split.LEFTMOST: "topleft vsplit",
    Split.LEFT: "aboveleft vsplit",
    Split.RIGHT: "belowright vsplit",
    Split.RIGHTMOST: "botright vsplit",
    Split.TAB: "tab split",
}

_ABUF = "str2nr(expand('<abuf>'))"
_AFILE = "expand('<afile>')"


def vim_string(s: str) -> str:
    """Quote `s` as a Vim script single-quoted string literal."""
    return "'" + s.replace("'", "''") + "'"


class VimHost:
    """Host implementation rendering every operation for Vim."""

    def __init__(self, channel: VimChannel, request_fn: str = "denops#request") -> None:
        self.channel = channel
        self.request_fn = request_fn

    def _request(self, method: str, args: str) -> str:
        return (
            f"call {self.request_fn}({vim_string(self.channel.name)}, "
            f"{vim_string(method)}, {args})"
        )

    def _group(self, *parts: str | int) -> str:
        return "-".join(["bufrouter", self.channel.name, *(str(p) for p in parts)])

    async def _augroup(self, group: str, *commands: str) -> None:
        await self.channel.cmd(f"augroup {group}")
        for command in commands:
            await self.channel.cmd(command)
        await self.channel.cmd("augroup END")

    async def find_window(self, name: str) -> int | None:
        bufnr = await self.channel.call("bufnr", name)
        if bufnr < 0:
            return None
        winnr = await self.channel.call("bufwinnr", bufnr)
        return winnr if winnr >= 0 else None

    async def focus_window(self, window: int) -> None:
        await self.channel.cmd(f"{window}wincmd w")

    async def open_split(self, split: Split) -> None:
        command = SPLIT_COMMANDS.get(split)
        if command is not None:
            await self.channel.cmd(command)

    async def attach(self, name: str) -> int:
        escaped = await self.channel.call("fnameescape", name)
        await self.channel.cmd(f"edit {escaped}")
        return await self.channel.call("bufnr", "%")

    async def preload(self, name: str) -> int:
        bufnr = await self.channel.call("bufadd", name)
        await self.channel.call("bufload", bufnr)
        return bufnr

    async def view_name(self, view_id: int) -> str:
        return await self.channel.call("bufname", view_id)

    async def set_lines(self, view_id: int, lines: list[str]) -> None:
        await self.channel.call("setbufvar", view_id, "&modifiable", 1)
        await self.channel.call("deletebufline", view_id, 1, "$")
        await self.channel.call("setbufline", view_id, 1, lines)

    async def set_variable(self, view_id: int, key: str, value: Any) -> None:
        await self.channel.call("setbufvar", view_id, key, value)

    async def set_modified(self, view_id: int, modified: bool) -> None:
        await self.channel.call("setbufvar", view_id, "&modified", int(modified))

    async def set_writable(self, view_id: int) -> None:
        await self.channel.call("setbufvar", view_id, "&swapfile", 0)
        await self.channel.call("setbufvar", view_id, "&modifiable", 1)
        await self.channel.call("setbufvar", view_id, "&readonly", 0)
        await self.channel.call("setbufvar", view_id, "&buftype", "acwrite")

    async def set_readonly(self, view_id: int) -> None:
        await self.channel.call("setbufvar", view_id, "&swapfile", 0)
        await self.channel.call("setbufvar", view_id, "&modifiable", 0)
        await self.channel.call("setbufvar", view_id, "&readonly", 1)

    async def register_read_signal(self, scheme: str, method: str) -> SignalHandle:
        await self._augroup(
            self._group(scheme, "read"),
            "autocmd! *",
            f"autocmd BufReadCmd {scheme}://* {self._request(method, f'[{_ABUF}, {_AFILE}]')}",
        )
        return SignalHandle(event="read", target=scheme, method=method)

    async def register_unload_signal(self, scheme: str, method: str) -> SignalHandle:
        await self._augroup(
            self._group(scheme, "unload"),
            "autocmd! *",
            f"autocmd BufWipeout {scheme}://* {self._request(method, f'[{_ABUF}]')}",
        )
        return SignalHandle(event="unload", target=scheme, method=method)

    async def register_write_signal(self, view_id: int, method: str) -> SignalHandle:
        buffer = f"<buffer={view_id}>"
        await self._augroup(
            self._group("write"),
            f"autocmd! * {buffer}",
            f"autocmd BufWriteCmd {buffer} {self._request(method, f'[{_ABUF}, {_AFILE}]')}",
        )
        return SignalHandle(event="write", target=view_id, method=method)

    async def register_command(self, command: str, method: str, path: str) -> SignalHandle:
        args = f"[{vim_string(path)}, <q-mods>, [<f-args>]]"
        await self.channel.cmd(f"command! -nargs=* {command} {self._request(method, args)}")
        logger.debug(f"defined command {command} -> {method}({path})")
        return SignalHandle(event="command", target=command, method=method)
