from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ServiceKind(str, Enum):
    CLASSIC_HAIRCUT = "classic_haircut"


@dataclass(frozen=True)
class ServiceCatalogEntry:
    service_kind: ServiceKind
    display_name: str
    duration_minutes: int


SERVICE_CATALOG: dict[ServiceKind, ServiceCatalogEntry] = {
    ServiceKind.CLASSIC_HAIRCUT: ServiceCatalogEntry(
        service_kind=ServiceKind.CLASSIC_HAIRCUT,
        display_name="Classic Haircut",
        duration_minutes=60,
    ),
}
