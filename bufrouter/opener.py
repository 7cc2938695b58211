"""Window attachment policy: where and how a named buffer gets displayed.

`plan_open` turns an Opener into an ordered list of host operations;
`classify` reads the host's modifier keywords (`<mods>` in Vim) back into
the same Split enum.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, StrictBool, field_validator

from bufrouter.exceptions import InvalidModifierError

if TYPE_CHECKING:
    from bufrouter.host import Host

logger = logging.getLogger(__name__)


class Split(enum.Enum):
    NONE = "none"
    TOP = "top"
    ABOVE = "above"
    BELOW = "below"
    BOTTOM = "bottom"
    LEFTMOST = "leftmost"
    LEFT = "left"
    RIGHT = "right"
    RIGHTMOST = "rightmost"
    TAB = "tab"

    @classmethod
    def _missing_(cls, value):
        # Wire spellings: "" and "split-<direction>".
        if value == "":
            return cls.NONE
        if isinstance(value, str) and value.startswith("split-"):
            return cls._value2member_map_.get(value[len("split-"):])
        return None


class Opener(BaseModel):
    """How to attach a buffer: reuse a window showing it, or split."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    reuse: StrictBool = False
    split: Split = Split.NONE

    @field_validator("split", mode="before")
    @classmethod
    def _coerce_split(cls, v):
        if v is None:
            return Split.NONE
        if isinstance(v, Split):
            return v
        if not isinstance(v, str):
            raise ValueError(f"split must be a string, got {type(v).__name__}")
        try:
            return Split(v)
        except ValueError:
            choices = ", ".join(s.value for s in Split)
            raise ValueError(f"unknown split {v!r} (expected one of: {choices})") from None


# --- Host operations ---


@dataclass(frozen=True)
class FocusWindow:
    window: int

    async def apply(self, host: Host) -> None:
        await host.focus_window(self.window)


@dataclass(frozen=True)
class OpenSplit:
    split: Split

    async def apply(self, host: Host) -> None:
        await host.open_split(self.split)


@dataclass(frozen=True)
class Attach:
    name: str

    async def apply(self, host: Host) -> None:
        await host.attach(self.name)


HostOp = FocusWindow | OpenSplit | Attach


def plan_open(name: str, opener: Opener | None = None, window: int | None = None) -> list[HostOp]:
    """Host operations that display `name`.

    `window` is the window currently showing `name`, if any. It is only
    honoured when the opener asks for reuse.
    """
    opener = opener or Opener()
    if opener.reuse and window is not None:
        return [FocusWindow(window)]
    ops: list[HostOp] = []
    if opener.split is not Split.NONE:
        ops.append(OpenSplit(opener.split))
    ops.append(Attach(name))
    return ops


async def open_view(host: Host, name: str, opener: Opener | None = None) -> None:
    """Run the open plan for `name` against a host."""
    opener = opener or Opener()
    window = await host.find_window(name) if opener.reuse else None
    ops = plan_open(name, opener, window)
    logger.debug(f"open {name}: {ops}")
    for op in ops:
        await op.apply(host)


async def preload_view(host: Host, name: str) -> int:
    """Add and load `name` without displaying it. Returns the view id."""
    return await host.preload(name)


# --- Modifier classification ---

_ORIENTATIONS = frozenset({"tab", "horizontal", "vertical"})

_DIRECTIONS = {
    "aboveleft": "above",
    "leftabove": "above",
    "belowright": "below",
    "rightbelow": "below",
    "topleft": "top",
    "botright": "bottom",
}

# Modifiers that do not affect window placement.
_IGNORED = frozenset({
    "browse", "confirm", "filter", "hide", "keepalt", "keepjumps",
    "keepmarks", "keeppatterns", "lockmarks", "noautocmd", "noswapfile",
    "sandbox", "silent", "silent!", "unsilent", "verbose",
})

_HORIZONTAL = {
    None: Split.ABOVE,
    "above": Split.ABOVE,
    "below": Split.BELOW,
    "top": Split.TOP,
    "bottom": Split.BOTTOM,
}

_VERTICAL = {
    None: Split.LEFT,
    "above": Split.LEFT,
    "below": Split.RIGHT,
    "top": Split.LEFTMOST,
    "bottom": Split.RIGHTMOST,
}


def classify(mods: str | None) -> Split:
    """Map host modifier keywords (e.g. "vertical botright") to a Split."""
    orientation: str | None = None
    direction: str | None = None

    for word in (mods or "").split():
        if word in _ORIENTATIONS:
            if orientation in (None, word):
                orientation = word
            elif "tab" in (orientation, word):
                orientation = "tab"
            else:
                raise InvalidModifierError(
                    f"Contradicting modifiers in {mods!r}: {orientation} and {word}"
                )
        elif word in _DIRECTIONS:
            d = _DIRECTIONS[word]
            if direction not in (None, d):
                raise InvalidModifierError(
                    f"Contradicting directions in {mods!r}: {direction} and {d}"
                )
            direction = d
        elif word not in _IGNORED:
            raise InvalidModifierError(f"Unknown modifier {word!r} in {mods!r}")

    if orientation == "tab":
        return Split.TAB
    if orientation is None and direction is None:
        return Split.NONE
    table = _VERTICAL if orientation == "vertical" else _HORIZONTAL
    return table[direction]
