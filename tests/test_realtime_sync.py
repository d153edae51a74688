"""
Tests for the realtime appointment cache.
"""

from __future__ import annotations

import asyncio
import tempfile

import pytest

from slotbook.application.exceptions import StoreUnavailable, ValidationError
from slotbook.application.use_cases.realtime_sync import RealtimeSyncSubscriber
from slotbook.infrastructure.store.json_store import JsonAppointmentStore
from slotbook.infrastructure.store.memory_store import MemoryAppointmentStore

from tests.helpers import make_record


class RecordingStore(MemoryAppointmentStore):
    """Memory store that remembers the channels it handed out."""

    def __init__(self) -> None:
        super().__init__()
        self.opened = []

    async def subscribe(self):
        channel = await super().subscribe()
        self.opened.append(channel)
        return channel


async def _settle() -> None:
    for _ in range(5):
        await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_start_requires_identified_client():
    sync = RealtimeSyncSubscriber(MemoryAppointmentStore(), client_id=None)
    with pytest.raises(ValidationError):
        await sync.start()
    assert not sync.running


@pytest.mark.asyncio
async def test_start_loads_current_snapshot():
    store = MemoryAppointmentStore()
    await store.create_if_slot_free(make_record(time="09:00", record_id=None))

    sync = RealtimeSyncSubscriber(store, client_id="client-a")
    await sync.start()

    assert [r.time for r in sync.snapshot] == ["09:00"]
    assert sync.version == 1
    await sync.stop()


@pytest.mark.asyncio
async def test_every_write_replaces_the_cache():
    store = MemoryAppointmentStore()
    sync = RealtimeSyncSubscriber(store, client_id="client-a")
    seen = []
    sync.add_listener(lambda snapshot: seen.append(len(snapshot)))
    await sync.start()

    await store.create_if_slot_free(make_record(time="09:00"))
    await store.create_if_slot_free(make_record(time="10:00"))

    assert await sync.wait_until(lambda snapshot: len(snapshot) == 2, timeout=1)
    assert seen == [0, 1, 2]
    assert {r.time for r in sync.snapshot} == {"09:00", "10:00"}
    await sync.stop()


@pytest.mark.asyncio
async def test_start_is_idempotent():
    store = RecordingStore()
    sync = RealtimeSyncSubscriber(store, client_id="client-a")

    await sync.start()
    await sync.start()

    assert len(store.opened) == 1
    await sync.stop()


@pytest.mark.asyncio
async def test_no_updates_after_stop():
    store = RecordingStore()
    sync = RealtimeSyncSubscriber(store, client_id="client-a")
    seen = []
    sync.add_listener(lambda snapshot: seen.append(len(snapshot)))
    await sync.start()

    await sync.stop()
    await sync.stop()
    await store.create_if_slot_free(make_record(time="11:00"))
    await _settle()

    assert seen == [0]
    assert sync.snapshot == ()
    assert store.opened[0].closed
    assert not sync.running


@pytest.mark.asyncio
async def test_removed_listener_is_not_called():
    store = MemoryAppointmentStore()
    sync = RealtimeSyncSubscriber(store, client_id="client-a")
    seen = []
    remove = sync.add_listener(lambda snapshot: seen.append(len(snapshot)))
    await sync.start()

    remove()
    await store.create_if_slot_free(make_record(time="12:00"))
    assert await sync.wait_until(lambda snapshot: len(snapshot) == 1, timeout=1)

    assert seen == [0]
    await sync.stop()


@pytest.mark.asyncio
async def test_channel_failure_keeps_last_snapshot():
    store = RecordingStore()
    await store.create_if_slot_free(make_record(time="09:00"))
    sync = RealtimeSyncSubscriber(store, client_id="client-a")
    await sync.start()

    store.opened[0].fail(StoreUnavailable())
    await _settle()

    assert isinstance(sync.last_error, StoreUnavailable)
    assert [r.time for r in sync.snapshot] == ["09:00"]

    await store.create_if_slot_free(make_record(time="10:00"))
    assert await sync.wait_until(lambda snapshot: len(snapshot) == 2, timeout=1)
    assert sync.last_error is None
    await sync.stop()


@pytest.mark.asyncio
async def test_wait_until_times_out():
    sync = RealtimeSyncSubscriber(MemoryAppointmentStore(), client_id="client-a")
    await sync.start()

    assert await sync.wait_until(lambda snapshot: len(snapshot) == 5, timeout=0.05) is False
    await sync.stop()


@pytest.mark.asyncio
async def test_concurrent_start_opens_one_subscription():
    """Two overlapping starts share a subscription, and stop() silences it."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonAppointmentStore(data_dir=tmpdir)
        opened = []
        subscribe = store.subscribe

        async def recording_subscribe():
            channel = await subscribe()
            opened.append(channel)
            return channel

        store.subscribe = recording_subscribe
        sync = RealtimeSyncSubscriber(store, client_id="client-a")
        seen = []

        await asyncio.gather(sync.start(), sync.start())
        assert len(opened) == 1

        sync.add_listener(lambda snapshot: seen.append(len(snapshot)))
        await sync.stop()
        await store.create_if_slot_free(make_record(time="15:00"))
        await _settle()

        assert seen == []
        assert all(channel.closed for channel in opened)
