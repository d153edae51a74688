from __future__ import annotations

import logging

from slotbook.application.ports.notification import NotificationPort
from slotbook.infrastructure.notifications.reminder import compose_reminder
from slotbook.domain.entities.appointment import AppointmentRecord


class MockReminderNotifier(NotificationPort):
    """Composes the WhatsApp reminder and logs it instead of sending it."""

    def __init__(self, business_name: str = "Barbershop") -> None:
        self._business_name = business_name
        self.sent: list[tuple[str, str]] = []
        self._logger = logging.getLogger(__name__)

    def notify(self, record: AppointmentRecord) -> None:
        text = compose_reminder(record, self._business_name)
        self.sent.append((record.contact_number, text))
        self._logger.info(
            "Mock reminder queued",
            extra={"appointment_id": record.id, "client_id": record.client_id, "reminder": text},
        )
