"""Bufrouter exception hierarchy.

All bufrouter exceptions inherit from RouterError and support cause chaining.
"""

from __future__ import annotations

from typing import Any


class RouterError(Exception):
    """Base exception for all bufrouter errors.

    Wraps original errors as __cause__ for proper exception chaining.
    """

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.message = message
        if cause is not None:
            self.__cause__ = cause


class MalformedNameError(RouterError):
    """Raised when a buffer name cannot be parsed.

    Examples: missing `scheme://` prefix, invalid scheme characters,
    parameter fields without `=`.
    """

    pass


class InvalidModifierError(RouterError):
    """Raised when host modifier keywords are unknown or contradict each other."""

    pass


class NoHandlerError(RouterError):
    """Raised when no handler (and no fallback) matches a path."""

    def __init__(self, message: str, *, path: str = "", cause: Exception | None = None):
        super().__init__(message, cause=cause)
        self.path = path


class InvalidSchemeError(RouterError):
    """Raised when a buffer name belongs to another router's scheme."""

    pass


class NoSuchActionError(RouterError):
    """Raised when the resolved handler does not define the requested action."""

    def __init__(
        self,
        message: str,
        *,
        action: str = "",
        available: list[str] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause=cause)
        self.action = action
        self.available = available or []


class NotWritableError(RouterError):
    """Raised when a write signal reaches a buffer whose handler cannot save."""

    pass


class DispatchArgumentError(RouterError):
    """Raised when dispatcher arguments fail validation at the boundary."""

    def __init__(
        self,
        message: str,
        *,
        method: str = "",
        errors: list[dict[str, Any]] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause=cause)
        self.method = method
        self.errors = errors or []
