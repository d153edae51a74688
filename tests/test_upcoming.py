from __future__ import annotations

from datetime import datetime, timedelta, timezone

from slotbook.application.use_cases.upcoming import derive_upcoming

from tests.helpers import DAY, make_record


def test_only_own_future_appointments_nearest_first():
    now = datetime(2026, 3, 10, 12, 0)
    records = [
        make_record(day=DAY + timedelta(days=2), time="09:00"),
        make_record(day=DAY, time="15:00"),
        make_record(day=DAY, time="11:00"),  # already started
        make_record(day=DAY - timedelta(days=1), time="16:00"),
        make_record(day=DAY, time="13:00", client_id="client-b"),
        make_record(day=DAY + timedelta(days=1), time="10:00"),
    ]

    upcoming = derive_upcoming("client-a", records, now)

    assert [(r.date, r.time) for r in upcoming] == [
        (DAY, "15:00"),
        (DAY + timedelta(days=1), "10:00"),
        (DAY + timedelta(days=2), "09:00"),
    ]
    assert all(r.client_id == "client-a" for r in upcoming)


def test_appointment_starting_now_is_still_upcoming():
    now = datetime(2026, 3, 10, 14, 0)
    upcoming = derive_upcoming("client-a", [make_record(time="14:00")], now)
    assert len(upcoming) == 1


def test_ties_fall_back_to_creation_time():
    now = datetime(2026, 3, 10, 8, 0)
    later = make_record(time="14:00", record_id="later", created_at=datetime(2026, 3, 1, 12, tzinfo=timezone.utc))
    earlier = make_record(time="14:00", record_id="earlier", created_at=datetime(2026, 3, 1, 9, tzinfo=timezone.utc))

    upcoming = derive_upcoming("client-a", [later, earlier], now)

    assert [r.id for r in upcoming] == ["earlier", "later"]


def test_no_appointments():
    assert derive_upcoming("client-a", [], datetime(2026, 3, 10, 8, 0)) == []
