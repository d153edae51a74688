from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable

from slotbook.application.exceptions import StoreUnavailable, ValidationError
from slotbook.application.ports.appointment_store import AppointmentStorePort, Snapshot
from slotbook.application.utils.snapshot_channel import ChannelClosed, SnapshotChannel


SnapshotListener = Callable[[Snapshot], None]


class RealtimeSyncSubscriber:
    """
    Keeps a local, continuously refreshed copy of every appointment.

    Each snapshot delivered by the store replaces the cache as a whole; readers
    always see the latest complete snapshot, never a partial merge.
    """

    def __init__(self, store: AppointmentStorePort, client_id: str | None) -> None:
        self._store = store
        self._client_id = client_id
        self._snapshot: Snapshot = ()
        self._version = 0
        self._channel: SnapshotChannel[Snapshot] | None = None
        self._task: asyncio.Task[None] | None = None
        self._listeners: list[SnapshotListener] = []
        self._changed = asyncio.Condition()
        self._lifecycle = asyncio.Lock()
        self.last_error: StoreUnavailable | None = None
        self._logger = logging.getLogger(__name__)

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def version(self) -> int:
        return self._version

    @property
    def running(self) -> bool:
        return self._channel is not None and not self._channel.closed

    def add_listener(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a callback for every applied snapshot. Returns a remover."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    async def start(self) -> None:
        """Subscribe and wait for the first snapshot so the cache is warm on return."""
        if self._store is None or not self._client_id:
            raise ValidationError("A store and an identified client are required to sync appointments.")

        # concurrent callers share one subscription
        async with self._lifecycle:
            if self.running:
                return

            channel = await self._store.subscribe()
            self._channel = channel
            try:
                first = await channel.get()
            except ChannelClosed:
                return
            except StoreUnavailable as e:
                self._record_error(e)
            else:
                await self._apply(first)

            self._task = asyncio.create_task(self._drain(channel))
            self._logger.info(
                "Appointment sync started",
                extra={"client_id": self._client_id, "status": f"version={self._version}"},
            )

    async def stop(self) -> None:
        """Unsubscribe. Idempotent; no listener runs after this returns."""
        async with self._lifecycle:
            channel, task = self._channel, self._task
            self._task = None
            was_running = self.running
            if channel is not None:
                channel.close()
            if task is not None and task is not asyncio.current_task():
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task
            if was_running:
                self._logger.info("Appointment sync stopped", extra={"client_id": self._client_id})

    async def wait_until(self, predicate: Callable[[Snapshot], bool], timeout: float) -> bool:
        """Wait for a snapshot satisfying `predicate`. Returns False on timeout."""

        async def _wait() -> None:
            async with self._changed:
                await self._changed.wait_for(lambda: predicate(self._snapshot))

        try:
            await asyncio.wait_for(_wait(), timeout)
        except asyncio.TimeoutError:
            return False
        return True

    async def _drain(self, channel: SnapshotChannel[Snapshot]) -> None:
        while True:
            try:
                snapshot = await channel.get()
            except ChannelClosed:
                return
            except StoreUnavailable as e:
                # the store reconnects on its own; keep serving the last good snapshot
                self._record_error(e)
                continue
            if channel.closed:
                return
            await self._apply(snapshot)

    async def _apply(self, snapshot: Snapshot) -> None:
        self._snapshot = tuple(snapshot)
        self._version += 1
        self.last_error = None
        for listener in list(self._listeners):
            try:
                listener(self._snapshot)
            except Exception as e:
                self._logger.exception("Snapshot listener failed", extra={"error": str(e)})
        async with self._changed:
            self._changed.notify_all()

    def _record_error(self, error: StoreUnavailable) -> None:
        self.last_error = error
        self._logger.error(
            "Error loading appointments",
            extra={"client_id": self._client_id, "error": str(error)},
        )
