from __future__ import annotations

import asyncio
import json
import logging
import uuid
from datetime import datetime, timezone
from decimal import InvalidOperation
from pathlib import Path
from typing import Any

from slotbook.application.exceptions import SlotConflict, StoreUnavailable
from slotbook.application.ports.appointment_store import (
    AppointmentStorePort,
    Snapshot,
    appointments_collection_path,
)
from slotbook.application.utils.snapshot_channel import SnapshotChannel
from slotbook.domain.entities.appointment import AppointmentRecord, slot_key_id


class JsonAppointmentStore(AppointmentStorePort):
    """
    Appointment collection persisted as one JSON document per collection path.

    Documents are keyed by the composite (date, time) id and every
    load-check-save runs under one lock, so creates are conditional within
    this process. Separate processes sharing the file are not coordinated.
    """

    def __init__(self, data_dir: str = "./data", app_id: str = "default-app-id") -> None:
        self._path = appointments_collection_path(app_id)
        self._file_path = Path(data_dir) / f"{self._path}.json"
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = asyncio.Lock()
        self._channels: list[SnapshotChannel[Snapshot]] = []
        self._logger = logging.getLogger(__name__)

    @property
    def collection_path(self) -> str:
        return self._path

    @property
    def file_path(self) -> Path:
        return self._file_path

    async def create_if_slot_free(self, record: AppointmentRecord) -> AppointmentRecord:
        key = slot_key_id(record.date, record.time)
        async with self._lock:
            data = await asyncio.to_thread(self._load_collection)
            appointments = data["appointments"]
            if key in appointments:
                self._logger.info(
                    "Slot already taken",
                    extra={"date": record.date.isoformat(), "time": record.time, "client_id": record.client_id},
                )
                raise SlotConflict()

            committed = record.with_store_fields(uuid.uuid4().hex, datetime.now(timezone.utc))
            appointments[key] = committed.to_document()
            await asyncio.to_thread(self._save_collection, data)
            snapshot = self._to_snapshot(data)

        self._logger.info(
            "Appointment stored",
            extra={"appointment_id": committed.id, "date": committed.date.isoformat(), "time": committed.time},
        )
        self._broadcast(snapshot)
        return committed

    async def query_all(self) -> list[AppointmentRecord]:
        async with self._lock:
            data = await asyncio.to_thread(self._load_collection)
        return list(self._to_snapshot(data))

    async def subscribe(self) -> SnapshotChannel[Snapshot]:
        channel: SnapshotChannel[Snapshot] = SnapshotChannel()
        try:
            channel.publish(tuple(await self.query_all()))
        except StoreUnavailable as e:
            channel.fail(e)
        self._channels.append(channel)
        return channel

    def _broadcast(self, snapshot: Snapshot) -> None:
        self._channels = [c for c in self._channels if not c.closed]
        for channel in self._channels:
            channel.publish(snapshot)

    def _load_collection(self) -> dict[str, Any]:
        """Load the collection document, empty if the file does not exist yet."""
        if not self._file_path.exists():
            return {"collection": self._path, "appointments": {}, "version": 1}
        try:
            with open(self._file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            # never fall back to an empty collection here: that would hand out booked slots again
            self._logger.error("Error reading appointments", extra={"error": str(e)})
            raise StoreUnavailable() from e
        data.setdefault("appointments", {})
        data.setdefault("version", 1)
        return data

    def _save_collection(self, data: dict[str, Any]) -> None:
        """Save the collection document atomically."""
        temp_path = self._file_path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(self._file_path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            self._logger.error("Error writing appointments", extra={"error": str(e)})
            raise StoreUnavailable() from e

    def _to_snapshot(self, data: dict[str, Any]) -> Snapshot:
        records: list[AppointmentRecord] = []
        for key, doc in data["appointments"].items():
            try:
                records.append(AppointmentRecord.from_document(doc))
            except (KeyError, ValueError, InvalidOperation) as e:
                self._logger.warning("Skipping malformed appointment", extra={"reason": key, "error": str(e)})
        return tuple(records)
