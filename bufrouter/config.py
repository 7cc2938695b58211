"""Router settings: scheme, dispatcher prefix, marker variable."""

from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

from bufrouter.bufname import is_valid_scheme

DEFAULT_PREFIX = "router"
DEFAULT_MARKER = "bufrouter_handler_path"


class RouterSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    scheme: str
    prefix: str = DEFAULT_PREFIX
    marker: str = DEFAULT_MARKER

    @field_validator("scheme")
    @classmethod
    def validate_scheme(cls, v: str) -> str:
        if not v:
            raise ValueError("scheme must be non-empty")
        if not is_valid_scheme(v):
            raise ValueError(f"scheme {v!r} contains unusable characters")
        return v

    @field_validator("prefix", "marker")
    @classmethod
    def validate_non_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("must be non-empty")
        return v


def load_settings(path: Path) -> RouterSettings:
    """Read settings from a TOML file.

    Uses the `[tool.bufrouter]` table when present (pyproject.toml style),
    otherwise the top-level table.
    """
    data = tomllib.loads(path.read_text())
    section = data.get("tool", {}).get("bufrouter", data)
    return RouterSettings.model_validate(section)
