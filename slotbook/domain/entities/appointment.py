from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, time, tzinfo
from decimal import Decimal
from typing import Any

from slotbook.domain.entities.service_catalog import ServiceKind


SlotKey = tuple[date, str]


@dataclass(frozen=True)
class AppointmentRecord:
    id: str | None
    client_id: str
    client_name: str
    contact_number: str
    date: date
    time: str  # HH:MM, one of the business slot labels
    service_kind: ServiceKind
    price: Decimal
    paid: bool = False
    created_at: datetime | None = None  # assigned by the store, audit only

    @property
    def slot_key(self) -> SlotKey:
        return (self.date, self.time)

    def starts_at(self, tz: tzinfo | None = None) -> datetime:
        return slot_start(self.date, self.time, tz)

    def with_store_fields(self, record_id: str, created_at: datetime) -> "AppointmentRecord":
        return replace(self, id=record_id, created_at=created_at)

    def to_document(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.client_id,
            "userName": self.client_name,
            "whatsapp": self.contact_number,
            "date": self.date.isoformat(),
            "time": self.time,
            "service": self.service_kind.value,
            "price": str(self.price),
            "paid": self.paid,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "AppointmentRecord":
        """Raises KeyError / ValueError / InvalidOperation on malformed documents."""
        created_at = doc.get("createdAt")
        return cls(
            id=doc["id"],
            client_id=doc["userId"],
            client_name=doc.get("userName", ""),
            contact_number=doc.get("whatsapp", ""),
            date=date.fromisoformat(doc["date"]),
            time=doc["time"],
            service_kind=ServiceKind(doc.get("service", ServiceKind.CLASSIC_HAIRCUT.value)),
            price=Decimal(str(doc.get("price", "0"))),
            paid=bool(doc.get("paid", False)),
            created_at=datetime.fromisoformat(created_at) if created_at else None,
        )


def slot_start(day: date, label: str, tz: tzinfo | None = None) -> datetime:
    """Start instant of the slot `label` (HH:MM) on `day`."""
    return datetime.combine(day, time.fromisoformat(label), tzinfo=tz)


def slot_key_id(day: date, label: str) -> str:
    """Composite document key used for conditional writes, e.g. 2026-10-20_14:00."""
    return f"{day.isoformat()}_{label}"
