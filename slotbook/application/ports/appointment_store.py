from __future__ import annotations

from abc import ABC, abstractmethod

from slotbook.application.utils.snapshot_channel import SnapshotChannel
from slotbook.domain.entities.appointment import AppointmentRecord


Snapshot = tuple[AppointmentRecord, ...]


def sanitize_app_id(raw_app_id: str) -> str:
    """Keep only the first path segment so collection paths stay well-formed."""
    return (raw_app_id or "").split("/")[0] or "default-app-id"


def appointments_collection_path(app_id: str) -> str:
    return f"artifacts/{sanitize_app_id(app_id)}/public/data/appointments"


class AppointmentStorePort(ABC):
    @property
    @abstractmethod
    def collection_path(self) -> str:
        raise NotImplementedError

    @abstractmethod
    async def create_if_slot_free(self, record: AppointmentRecord) -> AppointmentRecord:
        """
        Atomically create `record` unless its (date, time) slot is taken.
        Returns the committed record with store-assigned `id` and `created_at`.
        Raises SlotConflict if the slot is occupied, StoreUnavailable on backend failure.
        """
        raise NotImplementedError

    @abstractmethod
    async def query_all(self) -> list[AppointmentRecord]:
        """Full scan, no ordering guaranteed."""
        raise NotImplementedError

    @abstractmethod
    async def subscribe(self) -> SnapshotChannel[Snapshot]:
        """
        Open a channel that first receives the current full snapshot, then a
        new full snapshot after every change. Close the channel to unsubscribe.
        """
        raise NotImplementedError
