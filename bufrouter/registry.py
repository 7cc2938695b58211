"""HandlerRegistry: path -> handler map with an optional fallback."""

from __future__ import annotations

import difflib
from dataclasses import dataclass

from bufrouter.exceptions import NoHandlerError
from bufrouter.handler import Handler


@dataclass(frozen=True)
class Resolution:
    """A handler selected for a path.

    `path` is always the requested path, also when the fallback answered.
    """

    path: str
    handler: Handler
    fallback: bool = False


class HandlerRegistry:
    """Exact-match registry of handlers by path, plus one fallback handler."""

    def __init__(self) -> None:
        self._handlers: dict[str, Handler] = {}
        self._fallback: Handler | None = None

    def register(self, path: str, handler: Handler) -> None:
        """Register a handler for `path`. A later registration replaces it."""
        self._handlers[path] = handler

    def set_fallback(self, handler: Handler) -> None:
        self._fallback = handler

    @property
    def fallback(self) -> Handler | None:
        return self._fallback

    def paths(self) -> list[str]:
        return list(self._handlers)

    def can_handle(self, path: str) -> bool:
        return path in self._handlers or self._fallback is not None

    def resolve(self, path: str) -> Resolution:
        handler = self._handlers.get(path)
        if handler is not None:
            return Resolution(path=path, handler=handler)
        if self._fallback is not None:
            return Resolution(path=path, handler=self._fallback, fallback=True)

        message = f"There's no handler for a path {path!r}"
        matches = difflib.get_close_matches(path, self.paths(), n=1, cutoff=0.6)
        if matches:
            message += f". Did you mean {matches[0]!r}?"
        raise NoHandlerError(message, path=path)
