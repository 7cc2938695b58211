"""Tests for HandlerRegistry: exact match, overwrite, fallback."""

from __future__ import annotations

import pytest

from bufrouter.exceptions import NoHandlerError
from bufrouter.handler import FunctionHandler
from bufrouter.registry import HandlerRegistry, Resolution


async def _noop(resource):
    return None


@pytest.fixture
def registry():
    return HandlerRegistry()


def test_resolve_exact_match(registry):
    handler = FunctionHandler(load=_noop)
    registry.register("path/to/foo", handler)
    assert registry.resolve("path/to/foo") == Resolution(path="path/to/foo", handler=handler)


def test_last_registration_wins(registry):
    first = FunctionHandler(load=_noop)
    second = FunctionHandler(load=_noop)
    registry.register("p", first)
    registry.register("p", second)
    assert registry.resolve("p").handler is second
    assert registry.paths() == ["p"]


def test_no_match_without_fallback(registry):
    registry.register("p", FunctionHandler(load=_noop))
    with pytest.raises(NoHandlerError) as exc_info:
        registry.resolve("q")
    assert exc_info.value.path == "q"


def test_no_match_suggests_close_path(registry):
    registry.register("path/to/foo", FunctionHandler(load=_noop))
    with pytest.raises(NoHandlerError, match="Did you mean 'path/to/foo'"):
        registry.resolve("path/to/fo")


def test_fallback_keeps_requested_path(registry):
    fallback = FunctionHandler(load=_noop)
    registry.set_fallback(fallback)
    res = registry.resolve("anything/else")
    assert res.handler is fallback
    assert res.path == "anything/else"
    assert res.fallback is True


def test_exact_match_beats_fallback(registry):
    exact = FunctionHandler(load=_noop)
    registry.register("p", exact)
    registry.set_fallback(FunctionHandler(load=_noop))
    res = registry.resolve("p")
    assert res.handler is exact
    assert res.fallback is False


def test_fallback_last_write_wins(registry):
    first = FunctionHandler(load=_noop)
    second = FunctionHandler(load=_noop)
    registry.set_fallback(first)
    registry.set_fallback(second)
    assert registry.fallback is second


def test_can_handle(registry):
    assert registry.can_handle("p") is False
    registry.register("p", FunctionHandler(load=_noop))
    assert registry.can_handle("p") is True
    assert registry.can_handle("q") is False
    registry.set_fallback(FunctionHandler(load=_noop))
    assert registry.can_handle("q") is True
