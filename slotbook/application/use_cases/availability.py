from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timedelta

from slotbook.application.exceptions import ValidationError
from slotbook.domain.entities.appointment import AppointmentRecord, slot_start
from slotbook.domain.entities.business_rules import DEFAULT_RULES, BusinessRules


def compute_slots(
    day: date,
    existing: Iterable[AppointmentRecord],
    now: datetime,
    rules: BusinessRules = DEFAULT_RULES,
) -> list[str]:
    """
    Bookable slot labels (HH:MM) for `day`, ascending.

    A slot is dropped when a record already holds (day, slot), and on the
    current day unless it starts strictly later than now + lead time.
    Days before today yield nothing.
    """
    today = now.date()
    if day < today:
        return []

    taken = {record.time for record in existing if record.date == day}
    earliest = now + rules.lead_time

    slots: list[str] = []
    for label in rules.slot_labels():
        if label in taken:
            continue
        if day == today and slot_start(day, label, now.tzinfo) <= earliest:
            continue
        slots.append(label)
    return slots


def is_navigable(day: date, now: datetime) -> bool:
    return day >= now.date()


def shift_day(day: date, days: int, now: datetime) -> date:
    """Move the selected day by `days`; refuses to go before today."""
    target = day + timedelta(days=days)
    if not is_navigable(target, now):
        raise ValidationError("Past dates cannot be booked.")
    return target
