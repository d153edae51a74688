from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from slotbook.domain.entities.appointment import AppointmentRecord
from slotbook.domain.entities.service_catalog import ServiceKind


class ProfileRequestSchema(BaseModel):
    name: str
    contact_number: str


class ProfileResponseSchema(BaseModel):
    name: str
    contact_number: str
    contact_display: str
    profile_complete: bool = True


class AvailabilityResponseSchema(BaseModel):
    date: date
    slots: list[str] = Field(default_factory=list)
    can_go_back: bool = False


class BookingRequestSchema(BaseModel):
    date: date
    time: str = Field(pattern=r"^\d{2}:\d{2}$")


class AppointmentSchema(BaseModel):
    id: str
    client_id: str
    client_name: str
    contact_number: str
    date: date
    time: str
    service_kind: ServiceKind
    price: Decimal
    paid: bool
    created_at: datetime | None = None

    @staticmethod
    def from_record(record: AppointmentRecord) -> "AppointmentSchema":
        return AppointmentSchema(
            id=record.id or "",
            client_id=record.client_id,
            client_name=record.client_name,
            contact_number=record.contact_number,
            date=record.date,
            time=record.time,
            service_kind=record.service_kind,
            price=record.price,
            paid=record.paid,
            created_at=record.created_at,
        )


class UpcomingResponseSchema(BaseModel):
    appointments: list[AppointmentSchema]
