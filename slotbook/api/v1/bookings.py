from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status

from slotbook.api.v1.schemas import (
    AppointmentSchema,
    AvailabilityResponseSchema,
    BookingRequestSchema,
    ProfileRequestSchema,
    ProfileResponseSchema,
    UpcomingResponseSchema,
)
from slotbook.application.exceptions import BookingError
from slotbook.application.use_cases.availability import is_navigable
from slotbook.application.use_cases.upcoming import derive_upcoming
from slotbook.application.utils.contact import build_profile, format_contact_number
from slotbook.core.config import settings
from slotbook.wiring.dependencies import ClientSession, get_client_session, get_profile_store, now


router = APIRouter()
logger = logging.getLogger(__name__)

_STATUS_BY_KIND = {
    "validation": status.HTTP_400_BAD_REQUEST,
    "payment_declined": status.HTTP_402_PAYMENT_REQUIRED,
    "slot_conflict": status.HTTP_409_CONFLICT,
    "store_unavailable": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def _http_error(error: BookingError) -> HTTPException:
    return HTTPException(
        status_code=_STATUS_BY_KIND.get(error.kind, status.HTTP_500_INTERNAL_SERVER_ERROR),
        detail={"kind": error.kind, "message": error.message},
    )


def require_client_id(x_client_id: str | None = Header(None)) -> str:
    if not x_client_id or not x_client_id.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="X-Client-Id header is required")
    return x_client_id.strip()


async def current_session(client_id: str = Depends(require_client_id)) -> ClientSession:
    try:
        return await get_client_session(client_id)
    except BookingError as e:
        raise _http_error(e)


@router.put("/clients/me/profile", response_model=ProfileResponseSchema)
async def save_profile(
    req: ProfileRequestSchema,
    client_id: str = Depends(require_client_id),
):
    try:
        profile = build_profile(req.name, req.contact_number)
    except BookingError as e:
        raise _http_error(e)

    await get_profile_store().save_profile(client_id, profile)
    session = await current_session(client_id)
    session.coordinator.update_profile(profile)

    return ProfileResponseSchema(
        name=profile.name,
        contact_number=profile.contact_number,
        contact_display=format_contact_number(profile.contact_number),
    )


@router.get("/clients/me/profile", response_model=ProfileResponseSchema)
async def read_profile(client_id: str = Depends(require_client_id)):
    profile = await get_profile_store().get_profile(client_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return ProfileResponseSchema(
        name=profile.name,
        contact_number=profile.contact_number,
        contact_display=format_contact_number(profile.contact_number),
        profile_complete=profile.profile_complete,
    )


@router.get("/availability", response_model=AvailabilityResponseSchema)
async def availability(
    day: date | None = Query(None, alias="date"),
    session: ClientSession = Depends(current_session),
):
    current = now()
    target = day or current.date()
    if not is_navigable(target, current):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Past dates cannot be booked.")
    return AvailabilityResponseSchema(
        date=target,
        slots=session.coordinator.available_slots(target),
        can_go_back=target > current.date(),
    )


@router.post("/bookings", response_model=AppointmentSchema, status_code=status.HTTP_201_CREATED)
async def create_booking(
    req: BookingRequestSchema,
    session: ClientSession = Depends(current_session),
):
    coordinator = session.coordinator
    try:
        coordinator.select_date(req.date)
        coordinator.select_slot(req.time)
    except BookingError as e:
        raise _http_error(e)

    result = await coordinator.confirm()
    if result.action == "ignored":
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="A booking is already being processed.")
    if result.record is None:
        raise _http_error(result.error or BookingError(result.message))

    record = result.record
    # hold the response until this client's own view contains the new appointment
    synced = await session.sync.wait_until(
        lambda snapshot: any(r.id == record.id for r in snapshot),
        timeout=settings.SYNC_WAIT_SECONDS,
    )
    if not synced:
        logger.warning(
            "Booking committed before sync caught up",
            extra={"client_id": session.client_id, "appointment_id": record.id},
        )
    return AppointmentSchema.from_record(record)


@router.get("/clients/me/appointments/upcoming", response_model=UpcomingResponseSchema)
async def upcoming_appointments(session: ClientSession = Depends(current_session)):
    records = derive_upcoming(session.client_id, session.sync.snapshot, now())
    return UpcomingResponseSchema(appointments=[AppointmentSchema.from_record(r) for r in records])
