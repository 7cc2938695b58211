"""Buffer name codec: `scheme://path;key=value&key=value#fragment`.

The path and fragment are percent-encoded so they never carry the reserved
delimiters unescaped. Parameters use form encoding and keep insertion order.
A key that repeats is a multi-valued parameter.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from urllib.parse import parse_qsl, quote, unquote, urlencode

from bufrouter.exceptions import MalformedNameError

ParamValue = str | tuple[str, ...]
Params = Mapping[str, str | Sequence[str]]

SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")

_NAME_RE = re.compile(
    r"^(?P<scheme>.*?)://"
    r"(?P<path>[^;#]*)"
    r"(?:;(?P<params>[^#]*))?"
    r"(?:#(?P<fragment>.*))?$",
    re.DOTALL,
)

# Everything else (including ; & = # : and %) is percent-encoded.
_PATH_SAFE = "/@!$'()+,~"
_FRAGMENT_SAFE = "/@!$'()+,~:;&=?"


def _normalize_params(params: Params | None) -> dict[str, ParamValue]:
    out: dict[str, ParamValue] = {}
    for key, value in (params or {}).items():
        if not isinstance(key, str):
            raise TypeError(f"parameter key must be str, got {type(key).__name__}")
        if isinstance(value, str):
            out[key] = value
            continue
        if not isinstance(value, Sequence):
            raise TypeError(
                f"parameter {key!r} must be str or a sequence of str, "
                f"got {type(value).__name__}"
            )
        items = tuple(value)
        for item in items:
            if not isinstance(item, str):
                raise TypeError(f"parameter {key!r} holds a non-str value: {item!r}")
        if len(items) == 1:
            out[key] = items[0]
        elif items:
            out[key] = items
    return out


@dataclass(frozen=True, eq=False)
class ResourceName:
    """Parsed buffer name.

    Params are normalised on construction: sequences become tuples, a
    one-element sequence collapses to its string, an empty sequence drops
    the key. An empty fragment is stored as None.

    Equality and hashing respect param order.
    """

    scheme: str
    path: str
    params: Mapping[str, ParamValue] = field(default_factory=dict)
    fragment: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", MappingProxyType(_normalize_params(self.params)))
        if self.fragment == "":
            object.__setattr__(self, "fragment", None)

    def _key(self) -> tuple:
        return (self.scheme, self.path, tuple(self.params.items()), self.fragment)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResourceName):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        return format(self)


def is_valid_scheme(scheme: str) -> bool:
    return bool(SCHEME_RE.match(scheme))


def _encode_params(params: Mapping[str, ParamValue]) -> str:
    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        if isinstance(value, str):
            pairs.append((key, value))
        else:
            pairs.extend((key, item) for item in value)
    return urlencode(pairs)


def _decode_params(raw: str, name: str) -> dict[str, ParamValue]:
    if not raw:
        return {}
    try:
        pairs = parse_qsl(raw, keep_blank_values=True, strict_parsing=True, errors="strict")
    except ValueError as e:
        raise MalformedNameError(f"Invalid parameters in buffer name {name!r}: {e}", cause=e)

    grouped: dict[str, list[str]] = {}
    for key, value in pairs:
        grouped.setdefault(key, []).append(value)
    return {k: v[0] if len(v) == 1 else tuple(v) for k, v in grouped.items()}


def _unquote(raw: str, part: str, name: str) -> str:
    try:
        return unquote(raw, errors="strict")
    except UnicodeDecodeError as e:
        raise MalformedNameError(f"Invalid {part} encoding in buffer name {name!r}: {e}", cause=e)


def format(name: ResourceName) -> str:
    """Render a ResourceName as a buffer name string."""
    if not is_valid_scheme(name.scheme):
        raise MalformedNameError(f"Scheme {name.scheme!r} contains unusable characters")
    out = f"{name.scheme}://{quote(name.path, safe=_PATH_SAFE)}"
    if name.params:
        out += ";" + _encode_params(name.params)
    if name.fragment:
        out += "#" + quote(name.fragment, safe=_FRAGMENT_SAFE)
    return out


def parse(name: str) -> ResourceName:
    """Parse a buffer name string into a ResourceName."""
    m = _NAME_RE.match(name)
    if m is None:
        raise MalformedNameError(f"Buffer name {name!r} has no scheme:// prefix")
    scheme = m.group("scheme")
    if not is_valid_scheme(scheme):
        raise MalformedNameError(f"Buffer name {name!r} has an invalid scheme {scheme!r}")

    fragment = m.group("fragment")
    return ResourceName(
        scheme=scheme,
        path=_unquote(m.group("path"), "path", name),
        params=_decode_params(m.group("params") or "", name),
        fragment=_unquote(fragment, "fragment", name) if fragment is not None else None,
    )
