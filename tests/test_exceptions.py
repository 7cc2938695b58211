"""Tests for the RouterError hierarchy.

Every bufrouter error inherits from RouterError, keeps its message, and
chains the wrapped error as __cause__. Subclasses carry structured
attributes for diagnostics.
"""

import pytest

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


# =============================================================================
# Test: hierarchy
# =============================================================================


@pytest.mark.parametrize(
    "cls",
    [
        MalformedNameError,
        InvalidModifierError,
        NoHandlerError,
        InvalidSchemeError,
        NoSuchActionError,
        NotWritableError,
        DispatchArgumentError,
    ],
)
def test_subclasses_router_error(cls):
    """Every error can be caught as RouterError."""
    err = cls("bad")
    assert isinstance(err, RouterError)
    assert err.message == "bad"
    assert str(err) == "bad"


class TestCauseChaining:
    """cause= becomes __cause__."""

    def test_cause_is_chained(self):
        original = ValueError("inner")
        err = RouterError("outer", cause=original)
        assert err.__cause__ is original

    def test_no_cause(self):
        assert RouterError("outer").__cause__ is None

    def test_subclass_cause(self):
        original = KeyError("x")
        err = NoHandlerError("outer", path="p", cause=original)
        assert err.__cause__ is original


# =============================================================================
# Test: structured attributes
# =============================================================================


class TestAttributes:
    """Subclasses expose the data needed to report the failure."""

    def test_no_handler_path(self):
        assert NoHandlerError("x", path="a/b").path == "a/b"

    def test_no_such_action(self):
        err = NoSuchActionError("x", action="play", available=["stop"])
        assert err.action == "play"
        assert err.available == ["stop"]

    def test_no_such_action_defaults(self):
        assert NoSuchActionError("x").available == []

    def test_dispatch_argument(self):
        err = DispatchArgumentError("x", method="router:open", errors=[{"loc": ("path",)}])
        assert err.method == "router:open"
        assert err.errors == [{"loc": ("path",)}]
