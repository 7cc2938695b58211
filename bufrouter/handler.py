"""Handler protocol and the live-resource value passed to handlers."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from bufrouter.bufname import ResourceName


@dataclass(frozen=True)
class LiveResource:
    """A view attached to a named buffer, for the duration of one handler call."""

    view_id: int
    name: ResourceName


Action = Callable[[LiveResource, dict[str, Any]], Awaitable[None]]


@runtime_checkable
class Handler(Protocol):
    """Loads buffers whose name matches a path.

    A handler may also define:

    - ``async def save(self, resource)``: makes the buffer writable. Without
      it the buffer is read-only.
    - ``actions``: mapping of action name to ``async (resource, params)``.
    """

    async def load(self, resource: LiveResource) -> None:
        """Read the content and set it into the buffer."""
        ...


def saver_of(handler: Handler) -> Callable[[LiveResource], Awaitable[None]] | None:
    """The handler's save method, or None when it has none."""
    save = getattr(handler, "save", None)
    return save if callable(save) else None


def actions_of(handler: Handler) -> Mapping[str, Action]:
    return getattr(handler, "actions", None) or {}


@dataclass
class FunctionHandler:
    """Handler assembled from plain coroutine functions.

    Example::

        router.handle("list", FunctionHandler(load=load_list, actions={"open": open_item}))
    """

    load: Callable[[LiveResource], Awaitable[None]]
    save: Callable[[LiveResource], Awaitable[None]] | None = None
    actions: dict[str, Action] = field(default_factory=dict)
