"""Dispatcher table: validated entry points for remote calls into a Router.

Remote callers pass untyped positional arguments. Each method maps them
onto a pydantic schema and validates strictly before the Router runs;
failures raise DispatchArgumentError with a usage line.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, StrictInt, StrictStr, ValidationError

from bufrouter.exceptions import DispatchArgumentError
from bufrouter.opener import Opener

if TYPE_CHECKING:
    from bufrouter.host.base import Host
    from bufrouter.router import Router

Dispatcher = dict[str, Callable[..., Awaitable[Any]]]

NameParams = dict[StrictStr, StrictStr | list[StrictStr]]


class _Args(BaseModel):
    model_config = ConfigDict(extra="forbid")


class OpenArgs(_Args):
    path: StrictStr
    params: NameParams | None = None
    fragment: StrictStr | None = None
    opener: Opener | None = None


class PreloadArgs(_Args):
    path: StrictStr
    params: NameParams | None = None
    fragment: StrictStr | None = None


class ActionArgs(_Args):
    view_id: StrictInt
    action: StrictStr
    params: dict[StrictStr, Any] | None = None


class BufferArgs(_Args):
    view_id: StrictInt
    name: StrictStr


class UnloadArgs(_Args):
    view_id: StrictInt


class SetupCommandArgs(_Args):
    path: StrictStr
    command: StrictStr | None = None


class RunCommandArgs(_Args):
    path: StrictStr
    mods: StrictStr = ""
    args: list[StrictStr] = []


def _usage(method: str, schema: type[_Args]) -> str:
    params = []
    for fname, info in schema.model_fields.items():
        params.append(fname if info.is_required() else f"{fname}?")
    return f"{method}({', '.join(params)})"


def validate_args(method: str, schema: type[_Args], args: Sequence[Any]) -> Any:
    """Map positional `args` onto `schema` fields and validate them."""
    fields = list(schema.model_fields)
    if len(args) > len(fields):
        raise DispatchArgumentError(
            f"Method '{method}' takes at most {len(fields)} arguments "
            f"({len(args)} given)\nUsage: {_usage(method, schema)}",
            method=method,
        )
    try:
        return schema.model_validate(dict(zip(fields, args)))
    except ValidationError as e:
        error_msgs = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise DispatchArgumentError(
            f"Method '{method}' argument error: {error_msgs}\nUsage: {_usage(method, schema)}",
            method=method,
            errors=e.errors(include_url=False, include_context=False),
            cause=e,
        )


def build_dispatcher(router: Router, host: Host) -> Dispatcher:
    """Dispatcher methods for the router's operations, named with its prefix."""

    async def open_(*args: Any) -> str:
        a = validate_args(router.method("open"), OpenArgs, args)
        return await router.open(host, a.path, a.params, a.fragment, a.opener)

    async def preload(*args: Any) -> str:
        a = validate_args(router.method("preload"), PreloadArgs, args)
        return await router.preload(host, a.path, a.params, a.fragment)

    async def action(*args: Any) -> None:
        a = validate_args(router.method("action"), ActionArgs, args)
        await router.invoke_action(host, a.view_id, a.action, a.params)

    async def setup_command(*args: Any) -> str:
        a = validate_args(router.method("setup:command"), SetupCommandArgs, args)
        return await router.setup_command(host, a.path, a.command)

    async def internal_load(*args: Any) -> None:
        a = validate_args(router.method("internal:load"), BufferArgs, args)
        await router.on_resource_read(host, a.view_id, a.name)

    async def internal_save(*args: Any) -> None:
        a = validate_args(router.method("internal:save"), BufferArgs, args)
        await router.on_resource_write(host, a.view_id, a.name)

    async def internal_unload(*args: Any) -> None:
        a = validate_args(router.method("internal:unload"), UnloadArgs, args)
        router.on_resource_unload(a.view_id)

    async def internal_command(*args: Any) -> str:
        a = validate_args(router.method("internal:command"), RunCommandArgs, args)
        return await router.run_command(host, a.path, a.mods, a.args)

    return {
        router.method("open"): open_,
        router.method("preload"): preload,
        router.method("action"): action,
        router.method("setup:command"): setup_command,
        router.method("internal:load"): internal_load,
        router.method("internal:save"): internal_save,
        router.method("internal:unload"): internal_unload,
        router.method("internal:command"): internal_command,
    }
