from __future__ import annotations

from abc import ABC, abstractmethod

from slotbook.application.ports.appointment_store import sanitize_app_id
from slotbook.domain.entities.profile import ClientProfile


def profile_collection_path(app_id: str, client_id: str) -> str:
    return f"artifacts/{sanitize_app_id(app_id)}/users/{client_id}/profiles"


class ProfileStorePort(ABC):
    @abstractmethod
    async def get_profile(self, client_id: str) -> ClientProfile | None:
        raise NotImplementedError

    @abstractmethod
    async def save_profile(self, client_id: str, profile: ClientProfile) -> None:
        raise NotImplementedError
