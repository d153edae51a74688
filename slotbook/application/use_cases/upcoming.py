from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from slotbook.domain.entities.appointment import AppointmentRecord


def derive_upcoming(
    client_id: str,
    appointments: Iterable[AppointmentRecord],
    now: datetime,
) -> list[AppointmentRecord]:
    """The client's appointments starting at or after `now`, nearest first."""
    tz = now.tzinfo
    upcoming = [
        record
        for record in appointments
        if record.client_id == client_id and record.starts_at(tz) >= now
    ]
    # ties cannot happen while (date, time) is unique; created_at keeps order stable anyway
    upcoming.sort(key=lambda r: (r.starts_at(tz), r.created_at is not None, r.created_at or now))
    return upcoming
