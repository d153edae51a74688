from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from slotbook.domain.entities.appointment import AppointmentRecord


class BookingStatus(str, Enum):
    IDLE = "idle"
    SLOT_SELECTED = "slot_selected"
    PAYMENT_PENDING = "payment_pending"
    COMMITTING = "committing"
    COMMITTED = "committed"
    FAILED = "failed"


@dataclass(frozen=True)
class BookingAttempt:
    status: BookingStatus = BookingStatus.IDLE
    selected_date: date | None = None
    selected_time: str | None = None  # HH:MM
    record: AppointmentRecord | None = None  # set once committed
    error_kind: str | None = None  # "validation" | "payment_declined" | "slot_conflict" | "store_unavailable"
    message: str | None = None  # user-facing text for the last error

    @property
    def in_flight(self) -> bool:
        return self.status in (BookingStatus.PAYMENT_PENDING, BookingStatus.COMMITTING)
