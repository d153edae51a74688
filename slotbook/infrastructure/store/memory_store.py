from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime, timezone

from slotbook.application.exceptions import SlotConflict
from slotbook.application.ports.appointment_store import (
    AppointmentStorePort,
    Snapshot,
    appointments_collection_path,
)
from slotbook.application.utils.snapshot_channel import SnapshotChannel
from slotbook.domain.entities.appointment import AppointmentRecord, slot_key_id


class MemoryAppointmentStore(AppointmentStorePort):
    """
    In-process appointment collection keyed by the composite (date, time) id.

    The occupancy check and the insert run without an await in between, so a
    create is atomic with respect to every other coroutine on the loop.
    """

    def __init__(self, app_id: str = "default-app-id", latency_seconds: float = 0.0) -> None:
        self._path = appointments_collection_path(app_id)
        self._latency = latency_seconds
        self._records: dict[str, AppointmentRecord] = {}
        self._channels: list[SnapshotChannel[Snapshot]] = []
        self._logger = logging.getLogger(__name__)

    @property
    def collection_path(self) -> str:
        return self._path

    async def create_if_slot_free(self, record: AppointmentRecord) -> AppointmentRecord:
        # simulated round trip; concurrent writers interleave here
        await asyncio.sleep(self._latency)

        key = slot_key_id(record.date, record.time)
        if key in self._records:
            self._logger.info(
                "Slot already taken",
                extra={"date": record.date.isoformat(), "time": record.time, "client_id": record.client_id},
            )
            raise SlotConflict()

        committed = record.with_store_fields(uuid.uuid4().hex, datetime.now(timezone.utc))
        self._records[key] = committed
        self._logger.info(
            "Appointment stored",
            extra={"appointment_id": committed.id, "date": committed.date.isoformat(), "time": committed.time},
        )
        self._broadcast()
        return committed

    async def query_all(self) -> list[AppointmentRecord]:
        return list(self._records.values())

    async def subscribe(self) -> SnapshotChannel[Snapshot]:
        channel: SnapshotChannel[Snapshot] = SnapshotChannel()
        channel.publish(self._snapshot())
        self._channels.append(channel)
        return channel

    def _snapshot(self) -> Snapshot:
        return tuple(self._records.values())

    def _broadcast(self) -> None:
        self._channels = [c for c in self._channels if not c.closed]
        snapshot = self._snapshot()
        for channel in self._channels:
            channel.publish(snapshot)
