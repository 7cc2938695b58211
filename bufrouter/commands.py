"""User-command helpers: command names and flag-style argument parsing.

A command defined for a path (`:FooPathTo -id=123 -tag=a -tag=b #top`)
receives its arguments as a list of words. They are parsed into buffer
name params, a fragment, and the opener's reuse flag.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from bufrouter.exceptions import DispatchArgumentError

_WORD_START_RE = re.compile(r"(?<!\w)\w")
_NON_WORD_RE = re.compile(r"\W")

FRAGMENT_FLAG = "fragment"
REUSE_FLAG = "reuse"


def _title_case(word: str) -> str:
    return _NON_WORD_RE.sub("", _WORD_START_RE.sub(lambda m: m.group(0).upper(), word))


def command_name(*words: str) -> str:
    """CamelCase command name: command_name("foo", "bar/baz") == "FooBarBaz"."""
    return "".join(_title_case(w) for w in words)


@dataclass
class CommandArgs:
    params: dict[str, str | list[str]] = field(default_factory=dict)
    fragment: str | None = None
    reuse: bool = False


def parse_command_args(args: list[str]) -> CommandArgs:
    """Parse `-key=value`, `--key=value`, `-key` and `#fragment` words."""
    out = CommandArgs()
    for arg in args:
        if arg.startswith("#"):
            out.fragment = arg[1:]
            continue
        if not arg.startswith("-"):
            raise DispatchArgumentError(
                f"Invalid argument {arg!r}: expected -key=value or #fragment",
            )
        key, sep, value = arg.lstrip("-").partition("=")
        if not key:
            raise DispatchArgumentError(f"Invalid argument {arg!r}: empty key")
        if key == REUSE_FLAG and not sep:
            out.reuse = True
        elif key == FRAGMENT_FLAG:
            out.fragment = value
        elif key not in out.params:
            out.params[key] = value
        else:
            prev = out.params[key]
            out.params[key] = [*prev, value] if isinstance(prev, list) else [prev, value]
    return out
