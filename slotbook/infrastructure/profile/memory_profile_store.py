from __future__ import annotations

import logging

from slotbook.application.ports.profile_store import ProfileStorePort, profile_collection_path
from slotbook.domain.entities.profile import ClientProfile


class MemoryProfileStore(ProfileStorePort):
    def __init__(self, app_id: str = "default-app-id") -> None:
        self._app_id = app_id
        self._profiles: dict[str, ClientProfile] = {}
        self._logger = logging.getLogger(__name__)

    async def get_profile(self, client_id: str) -> ClientProfile | None:
        return self._profiles.get(profile_collection_path(self._app_id, client_id))

    async def save_profile(self, client_id: str, profile: ClientProfile) -> None:
        self._profiles[profile_collection_path(self._app_id, client_id)] = profile
        self._logger.info("Profile saved", extra={"client_id": client_id})
