from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from slotbook.domain.entities.appointment import AppointmentRecord
from slotbook.domain.entities.service_catalog import ServiceKind


DAY = date(2026, 3, 10)  # a Tuesday


class FrozenClock:
    """Callable clock that tests move by hand."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def make_record(
    day: date = DAY,
    time: str = "10:00",
    client_id: str = "client-a",
    record_id: str | None = None,
    created_at: datetime | None = None,
) -> AppointmentRecord:
    return AppointmentRecord(
        id=record_id or f"{client_id}-{day.isoformat()}-{time}",
        client_id=client_id,
        client_name="Ana Souza",
        contact_number="11987654321",
        date=day,
        time=time,
        service_kind=ServiceKind.CLASSIC_HAIRCUT,
        price=Decimal("10.00"),
        paid=True,
        created_at=created_at,
    )
