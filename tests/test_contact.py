from __future__ import annotations

from datetime import date

import pytest

from slotbook.application.exceptions import ValidationError
from slotbook.application.utils.contact import (
    build_profile,
    format_contact_number,
    normalize_contact_number,
)
from slotbook.infrastructure.notifications.mock_notifier import MockReminderNotifier
from slotbook.infrastructure.notifications.reminder import compose_reminder

from tests.helpers import make_record


def test_profile_is_normalized():
    profile = build_profile("  Ana   Souza ", "(11) 98765-4321")

    assert profile.name == "Ana   Souza"
    assert profile.contact_number == "11987654321"
    assert profile.profile_complete is True


@pytest.mark.parametrize("name", ["", "   ", "Ana", None])
def test_profile_requires_first_and_last_name(name):
    with pytest.raises(ValidationError):
        build_profile(name, "11987654321")


@pytest.mark.parametrize("number", ["1198765432", "119876543210", "", None, "abc"])
def test_profile_requires_eleven_digits(number):
    with pytest.raises(ValidationError):
        build_profile("Ana Souza", number)


def test_contact_formatting():
    assert normalize_contact_number("+55 (11) 98765-4321") == "5511987654321"
    assert format_contact_number("11987654321") == "(11) 98765-4321"
    assert format_contact_number("5511987654321") == "+55 (11) 98765-4321"
    assert format_contact_number("") == "Not provided"
    assert format_contact_number("123") == "123"


def test_reminder_text():
    record = make_record(day=date(2026, 3, 10), time="14:00")

    text = compose_reminder(record, "Barbearia Centro")

    assert "Barbearia Centro" in text
    assert "Hello, Ana Souza!" in text
    assert "Tuesday, 10 March" in text
    assert "14:00" in text
    assert "classic haircut" in text


def test_mock_notifier_keeps_outbox():
    notifier = MockReminderNotifier(business_name="Barbearia")
    notifier.notify(make_record(time="09:00"))

    assert len(notifier.sent) == 1
    number, text = notifier.sent[0]
    assert number == "11987654321"
    assert "09:00" in text
