from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from typing import TYPE_CHECKING

from slotbook.domain.entities.service_catalog import SERVICE_CATALOG, ServiceKind

if TYPE_CHECKING:
    from slotbook.core.config import Settings


@dataclass(frozen=True)
class BusinessRules:
    """Opening hours, slot grid and the single priced service.

    Built once at startup and handed to each component; nothing reads the
    rules from module state.
    """

    open_hour: int = 9
    close_hour: int = 18  # no slot may start at or after this hour
    slot_minutes: int = 60
    lead_time_minutes: int = 60
    service_kind: ServiceKind = ServiceKind.CLASSIC_HAIRCUT
    price: Decimal = Decimal("10.00")
    currency: str = "BRL"

    @property
    def lead_time(self) -> timedelta:
        return timedelta(minutes=self.lead_time_minutes)

    @property
    def service_name(self) -> str:
        return SERVICE_CATALOG[self.service_kind].display_name

    def slot_labels(self) -> list[str]:
        labels: list[str] = []
        start = self.open_hour * 60
        close = self.close_hour * 60
        while start + self.slot_minutes <= close:
            labels.append(f"{start // 60:02d}:{start % 60:02d}")
            start += self.slot_minutes
        return labels

    @staticmethod
    def from_settings(settings: "Settings") -> "BusinessRules":
        return BusinessRules(
            open_hour=settings.BUSINESS_OPEN_HOUR,
            close_hour=settings.BUSINESS_CLOSE_HOUR,
            slot_minutes=settings.SLOT_MINUTES,
            lead_time_minutes=settings.LEAD_TIME_MINUTES,
            price=settings.SERVICE_PRICE,
            currency=settings.CURRENCY,
        )


DEFAULT_RULES = BusinessRules()
