"""Tests for MemoryHost signal delivery: one signal at a time per view."""

from __future__ import annotations

import asyncio

import pytest

from bufrouter.host import HostError, MemoryHost


async def wait_for(predicate) -> None:
    while not predicate():
        await asyncio.sleep(0)


def make_host(events: list[str], gate: asyncio.Event) -> MemoryHost:
    async def load(view_id: int, name: str) -> None:
        events.append(f"load-start {view_id}")
        await gate.wait()
        events.append(f"load-end {view_id}")

    async def save(view_id: int, name: str) -> None:
        events.append(f"save {view_id}")

    return MemoryHost({"test:load": load, "test:save": save})


class TestSerialisation:
    @pytest.mark.asyncio
    async def test_write_waits_for_running_load(self):
        events: list[str] = []
        gate = asyncio.Event()
        host = make_host(events, gate)
        await host.register_read_signal("foo", "test:load")

        loading = asyncio.create_task(host.preload("foo://a"))
        await wait_for(lambda: events)
        view_id = host.view_by_name("foo://a").view_id
        await host.register_write_signal(view_id, "test:save")

        writing = asyncio.create_task(host.write(view_id))
        for _ in range(10):
            await asyncio.sleep(0)
        assert events == [f"load-start {view_id}"]

        gate.set()
        await asyncio.gather(loading, writing)
        assert events == [f"load-start {view_id}", f"load-end {view_id}", f"save {view_id}"]

    @pytest.mark.asyncio
    async def test_other_views_are_not_blocked(self):
        events: list[str] = []
        gate = asyncio.Event()
        host = make_host(events, gate)
        await host.register_read_signal("foo", "test:load")

        loading = asyncio.create_task(host.preload("foo://a"))
        await wait_for(lambda: events)
        other = await host.preload("bar://b")
        await host.register_write_signal(other, "test:save")

        await host.write(other)
        assert events[-1] == f"save {other}"
        assert "load-end 1" not in events

        gate.set()
        await loading


class TestSignals:
    @pytest.mark.asyncio
    async def test_read_signal_fires_once(self):
        events: list[str] = []
        gate = asyncio.Event()
        gate.set()
        host = make_host(events, gate)
        await host.register_read_signal("foo", "test:load")

        await host.attach("foo://a")
        await host.attach("foo://a")
        assert events == ["load-start 1", "load-end 1"]

    @pytest.mark.asyncio
    async def test_write_without_signal_fails(self):
        host = MemoryHost()
        view_id = await host.preload("foo://a")
        with pytest.raises(HostError, match="E382"):
            await host.write(view_id)

    @pytest.mark.asyncio
    async def test_unknown_method_fails(self):
        host = MemoryHost()
        with pytest.raises(HostError, match="No dispatcher method"):
            await host.request("nope")
