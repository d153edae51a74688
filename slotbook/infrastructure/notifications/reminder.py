from __future__ import annotations

from slotbook.domain.entities.appointment import AppointmentRecord
from slotbook.domain.entities.service_catalog import SERVICE_CATALOG


def compose_reminder(record: AppointmentRecord, business_name: str = "Barbershop") -> str:
    """WhatsApp-style reminder text for a committed appointment."""
    start = record.starts_at()
    formatted_date = start.strftime("%A, %d %B")
    formatted_time = start.strftime("%H:%M")
    service = SERVICE_CATALOG[record.service_kind].display_name.lower()
    return (
        f"*🤖 Appointment Reminder - {business_name}* Hello, {record.client_name}!\n"
        f"Your {service} is confirmed for:\n"
        f"🗓️ *Date:* {formatted_date}\n"
        f"⏰ *Time:* {formatted_time}\n"
        f"📍 See you there!"
    )
