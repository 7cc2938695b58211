"""Bufrouter: route URL-named editor buffers to pluggable handlers."""

from bufrouter.bufname import ResourceName, format, parse
from bufrouter.commands import command_name, parse_command_args
from bufrouter.config import RouterSettings, load_settings
from bufrouter.exceptions import (
    DispatchArgumentError,
    InvalidModifierError,
    InvalidSchemeError,
    MalformedNameError,
    NoHandlerError,
    NoSuchActionError,
    NotWritableError,
    RouterError,
)
from bufrouter.handler import Action, FunctionHandler, Handler, LiveResource
from bufrouter.host import Host, MemoryHost, VimHost
from bufrouter.opener import Opener, Split, classify, plan_open
from bufrouter.registry import HandlerRegistry, Resolution
from bufrouter.router import ResourceState, Router

__all__ = [
    # Core types
    "Router",
    "ResourceState",
    "HandlerRegistry",
    "Resolution",
    "Handler",
    "FunctionHandler",
    "LiveResource",
    "Action",
    # Names
    "ResourceName",
    "parse",
    "format",
    # Opener
    "Opener",
    "Split",
    "classify",
    "plan_open",
    # Commands
    "command_name",
    "parse_command_args",
    # Hosts
    "Host",
    "MemoryHost",
    "VimHost",
    # Config
    "RouterSettings",
    "load_settings",
    # Exceptions
    "RouterError",
    "MalformedNameError",
    "InvalidModifierError",
    "NoHandlerError",
    "InvalidSchemeError",
    "NoSuchActionError",
    "NotWritableError",
    "DispatchArgumentError",
]
