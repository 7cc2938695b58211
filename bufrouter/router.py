"""Router: resolves URL-named buffers to handlers and drives their lifecycle.

A Router owns one scheme. Buffers named `scheme://path;params#fragment`
are resolved by exact path match (or the fallback handler), loaded when the
host signals a read, made writable when the handler defines `save`, and
saved when the host signals a write. Handlers may also expose actions.

Lifecycle per view::

    UNLOADED -> LOADING -> LOADED_WRITABLE | LOADED_READONLY | LOAD_FAILED
    LOADED_WRITABLE -> SAVING -> LOADED_WRITABLE

A failed load is contained: the buffer shows the rendered error and is made
read-only. A failed save propagates and leaves the buffer modified.
"""

from __future__ import annotations

import enum
import logging
from typing import Any

from bufrouter import bufname
from bufrouter.bufname import Params, ResourceName, is_valid_scheme
from bufrouter.commands import command_name, parse_command_args
from bufrouter.config import DEFAULT_MARKER, DEFAULT_PREFIX, RouterSettings
from bufrouter.dispatch import Dispatcher, build_dispatcher
from bufrouter.exceptions import (
    InvalidSchemeError,
    NoSuchActionError,
    NotWritableError,
)
from bufrouter.handler import Handler, LiveResource, actions_of, saver_of
from bufrouter.host.base import Host, SignalHandle
from bufrouter.opener import Opener, classify, open_view, preload_view
from bufrouter.registry import HandlerRegistry, Resolution
from bufrouter.render import render_load_error

logger = logging.getLogger(__name__)


class ResourceState(enum.Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED_WRITABLE = "loaded-writable"
    LOADED_READONLY = "loaded-readonly"
    LOAD_FAILED = "load-failed"
    SAVING = "saving"


class Router:
    """Routes buffers named like `scheme://path;key=value#fragment` to handlers.

    Example::

        router = Router("diary")
        router.handle("new", FunctionHandler(load=load_new, save=save_new))
        router.handle("list", FunctionHandler(load=load_list, actions={"open": open_entry}))
        host.dispatcher = await router.dispatch(host, host.dispatcher)
    """

    def __init__(
        self,
        scheme: str,
        *,
        prefix: str = DEFAULT_PREFIX,
        marker: str = DEFAULT_MARKER,
    ) -> None:
        if not scheme:
            raise ValueError("Router scheme must be non-empty")
        if not is_valid_scheme(scheme):
            raise ValueError(f"Router scheme {scheme!r} contains unusable characters")
        self._scheme = scheme
        self._prefix = prefix
        self._marker = marker
        self._registry = HandlerRegistry()
        self._states: dict[int, ResourceState] = {}
        self._scheme_signals: list[SignalHandle] = []
        self._write_signals: dict[int, SignalHandle] = {}
        self._command_signals: dict[str, SignalHandle] = {}

    @classmethod
    def from_settings(cls, settings: RouterSettings) -> Router:
        return cls(settings.scheme, prefix=settings.prefix, marker=settings.marker)

    @property
    def scheme(self) -> str:
        return self._scheme

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def marker(self) -> str:
        return self._marker

    @property
    def registry(self) -> HandlerRegistry:
        return self._registry

    @property
    def signals(self) -> list[SignalHandle]:
        """Live host signal registrations: scheme signals, commands, per-view writes."""
        return [
            *self._scheme_signals,
            *self._command_signals.values(),
            *self._write_signals.values(),
        ]

    def method(self, operation: str) -> str:
        """Dispatcher method name for an operation, e.g. `router:open`."""
        return f"{self._prefix}:{operation}"

    def state(self, view_id: int) -> ResourceState:
        return self._states.get(view_id, ResourceState.UNLOADED)

    # --- Registration ---

    def handle(self, path: str, handler: Handler) -> None:
        """Set a handler for the path. A later call for the same path replaces it."""
        self._registry.register(path, handler)

    def handle_fallback(self, handler: Handler) -> None:
        """Set the handler used when no handler matches a path."""
        self._registry.set_fallback(handler)

    # --- Naming ---

    def _match(self, name: str) -> tuple[ResourceName, Resolution]:
        parsed = bufname.parse(name)
        if parsed.scheme != self._scheme:
            raise InvalidSchemeError(
                f"Invalid operation for {name}: scheme {parsed.scheme!r} "
                f"is not {self._scheme!r}"
            )
        return parsed, self._registry.resolve(parsed.path)

    def create_name(
        self,
        path: str,
        params: Params | None = None,
        fragment: str | None = None,
    ) -> str:
        """Buffer name for the path, parameters and fragment."""
        self._registry.resolve(path)
        return bufname.format(
            ResourceName(scheme=self._scheme, path=path, params=params or {}, fragment=fragment)
        )

    # --- Opening ---

    async def open(
        self,
        host: Host,
        path: str,
        params: Params | None = None,
        fragment: str | None = None,
        opener: Opener | None = None,
    ) -> str:
        """Display the buffer for the path. Content arrives via the read signal."""
        name = self.create_name(path, params, fragment)
        await open_view(host, name, opener)
        return name

    async def preload(
        self,
        host: Host,
        path: str,
        params: Params | None = None,
        fragment: str | None = None,
    ) -> str:
        """Load the buffer for the path without displaying it."""
        name = self.create_name(path, params, fragment)
        await preload_view(host, name)
        return name

    # --- Lifecycle ---

    async def on_resource_read(self, host: Host, view_id: int, name: str) -> None:
        """Load a buffer. Called from the host read signal.

        Never raises for resolution or handler errors: they are rendered
        into the buffer, which becomes read-only.
        """
        self._states[view_id] = ResourceState.LOADING
        try:
            parsed, resolution = self._match(name)
            await resolution.handler.load(LiveResource(view_id=view_id, name=parsed))
            # Observability only; resolution always re-parses the name.
            await host.set_variable(view_id, self._marker, resolution.path)
            await host.set_modified(view_id, False)
            if saver_of(resolution.handler) is not None:
                self._write_signals[view_id] = await host.register_write_signal(
                    view_id, self.method("internal:save")
                )
                await host.set_writable(view_id)
                state = ResourceState.LOADED_WRITABLE
            else:
                await host.set_readonly(view_id)
                state = ResourceState.LOADED_READONLY
        except Exception as e:
            logger.exception(f"Failed to load {name} (view {view_id})")
            await self._contain_load_failure(host, view_id, name, e)
            return
        self._states[view_id] = state
        logger.debug(f"loaded {name} (view {view_id}): {state.value}")

    async def _contain_load_failure(
        self, host: Host, view_id: int, name: str, error: Exception,
    ) -> None:
        self._states[view_id] = ResourceState.LOAD_FAILED
        await host.set_lines(view_id, render_load_error(name, error))
        await host.set_modified(view_id, False)
        await host.set_readonly(view_id)

    async def on_resource_write(self, host: Host, view_id: int, name: str) -> None:
        """Save a buffer. Called from the host write signal.

        Handler errors propagate; the buffer stays modified so nothing is lost.
        """
        parsed, resolution = self._match(name)
        save = saver_of(resolution.handler)
        if save is None:
            raise NotWritableError(f"There's no valid writable handler for {name}")
        state = self._states.get(view_id)
        if state is not None and state is not ResourceState.LOADED_WRITABLE:
            raise NotWritableError(f"Buffer {view_id} ({name}) is {state.value}")

        self._states[view_id] = ResourceState.SAVING
        try:
            await save(LiveResource(view_id=view_id, name=parsed))
        finally:
            self._states[view_id] = ResourceState.LOADED_WRITABLE
        await host.set_modified(view_id, False)
        logger.debug(f"saved {name} (view {view_id})")

    def on_resource_unload(self, view_id: int) -> None:
        """Forget a wiped buffer."""
        self._states.pop(view_id, None)
        self._write_signals.pop(view_id, None)

    async def invoke_action(
        self,
        host: Host,
        view_id: int,
        action: str,
        params: dict[str, Any] | None = None,
    ) -> None:
        """Call an action of the handler bound to the buffer.

        `params` are action parameters, not the buffer name parameters.
        """
        name = await host.view_name(view_id)
        parsed, resolution = self._match(name)
        actions = actions_of(resolution.handler)
        fn = actions.get(action)
        if fn is None:
            raise NoSuchActionError(
                f"There's no valid action {action!r} for buffer {view_id} ({name})",
                action=action,
                available=sorted(actions),
            )
        await fn(LiveResource(view_id=view_id, name=parsed), dict(params or {}))

    # --- Commands ---

    async def setup_command(self, host: Host, path: str, command: str | None = None) -> str:
        """Define a host command opening the path. Returns the command name."""
        self._registry.resolve(path)
        command = command or command_name(self._scheme, path)
        self._command_signals[command] = await host.register_command(
            command, self.method("internal:command"), path
        )
        return command

    async def run_command(self, host: Host, path: str, mods: str = "", args: list[str] | None = None) -> str:
        """Open the path from a command invocation's modifiers and flag arguments."""
        split = classify(mods)
        parsed = parse_command_args(args or [])
        return await self.open(
            host, path, parsed.params, parsed.fragment, Opener(reuse=parsed.reuse, split=split),
        )

    # --- Dispatcher ---

    async def dispatch(
        self,
        host: Host,
        dispatcher: Dispatcher | None = None,
        prefix: str | None = None,
    ) -> Dispatcher:
        """Register the host signals for the scheme and return the dispatcher.

        The returned table holds the given dispatcher's methods plus:

        - `{prefix}:open`, `{prefix}:preload`, `{prefix}:action`
        - `{prefix}:setup:command`
        - `{prefix}:internal:load`, `{prefix}:internal:save`,
          `{prefix}:internal:unload`, `{prefix}:internal:command`
        """
        if prefix is not None:
            self._prefix = prefix
        self._scheme_signals = [
            await host.register_read_signal(self._scheme, self.method("internal:load")),
            await host.register_unload_signal(self._scheme, self.method("internal:unload")),
        ]
        return {**(dispatcher or {}), **build_dispatcher(self, host)}
