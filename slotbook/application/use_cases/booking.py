from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import date, datetime

from slotbook.application.exceptions import (
    BookingError,
    PaymentDeclined,
    SlotConflict,
    StoreUnavailable,
    ValidationError,
)
from slotbook.application.ports.appointment_store import AppointmentStorePort
from slotbook.application.ports.notification import NotificationPort
from slotbook.application.ports.payment import PaymentGatePort
from slotbook.application.use_cases.availability import compute_slots, is_navigable, shift_day
from slotbook.application.use_cases.realtime_sync import RealtimeSyncSubscriber
from slotbook.domain.entities.appointment import AppointmentRecord
from slotbook.domain.entities.booking_attempt import BookingAttempt, BookingStatus
from slotbook.domain.entities.business_rules import BusinessRules
from slotbook.domain.entities.profile import ClientProfile


@dataclass(frozen=True)
class BookingResult:
    action: str  # "booked" | "failed" | "invalid" | "ignored"
    message: str | None
    record: AppointmentRecord | None
    attempt: BookingAttempt
    error: BookingError | None = None


class BookingCoordinator:
    """
    Drives one client's booking attempts:
    Idle -> SlotSelected -> PaymentPending -> Committing -> Committed | Failed.

    Availability is always read from the sync subscriber's latest snapshot.
    That check is best effort only; the store's conditional create decides
    who gets a contested slot.
    """

    def __init__(
        self,
        store: AppointmentStorePort,
        sync: RealtimeSyncSubscriber,
        payment: PaymentGatePort,
        notifier: NotificationPort,
        rules: BusinessRules,
        client_id: str,
        profile: ClientProfile | None,
        clock: Callable[[], datetime],
    ) -> None:
        self._store = store
        self._sync = sync
        self._payment = payment
        self._notifier = notifier
        self._rules = rules
        self._client_id = client_id
        self._profile = profile
        self._clock = clock
        self._attempt = BookingAttempt(selected_date=clock().date())
        self._logger = logging.getLogger(__name__)

    @property
    def client_id(self) -> str:
        return self._client_id

    @property
    def attempt(self) -> BookingAttempt:
        return self._attempt

    def update_profile(self, profile: ClientProfile | None) -> None:
        self._profile = profile

    def available_slots(self, day: date | None = None) -> list[str]:
        target = day or self._attempt.selected_date or self._clock().date()
        return compute_slots(target, self._sync.snapshot, self._clock(), self._rules)

    def select_date(self, day: date) -> BookingAttempt:
        self._ensure_idle_for_selection()
        if not is_navigable(day, self._clock()):
            raise ValidationError("Past dates cannot be booked.")
        self._attempt = BookingAttempt(status=BookingStatus.IDLE, selected_date=day)
        return self._attempt

    def shift_date(self, days: int) -> BookingAttempt:
        current = self._attempt.selected_date or self._clock().date()
        return self.select_date(shift_day(current, days, self._clock()))

    def select_slot(self, label: str) -> BookingAttempt:
        self._ensure_idle_for_selection()
        day = self._attempt.selected_date or self._clock().date()
        if label not in self.available_slots(day):
            if any(record.slot_key == (day, label) for record in self._sync.snapshot):
                raise SlotConflict()
            raise ValidationError("This time slot is not available for the selected date.")
        self._attempt = BookingAttempt(
            status=BookingStatus.SLOT_SELECTED,
            selected_date=day,
            selected_time=label,
        )
        return self._attempt

    async def confirm(self) -> BookingResult:
        """Run payment and commit for the selected slot. Re-entrant calls are ignored."""
        if self._attempt.in_flight:
            self._logger.info(
                "Confirm ignored, booking already in flight",
                extra={"client_id": self._client_id, "status": self._attempt.status.value},
            )
            return BookingResult(action="ignored", message=None, record=None, attempt=self._attempt)

        if self._attempt.status != BookingStatus.SLOT_SELECTED or not self._attempt.selected_time:
            return self._invalid(ValidationError("Please select a time slot."))

        if not self._client_id or self._profile is None or not self._profile.profile_complete:
            return self._invalid(ValidationError("Please complete your profile before booking."))

        day = self._attempt.selected_date
        label = self._attempt.selected_time
        if label not in self.available_slots(day):
            return self._fail(SlotConflict())

        self._transition(BookingStatus.PAYMENT_PENDING)
        if not self._collect_payment():
            return self._fail(PaymentDeclined())

        self._transition(BookingStatus.COMMITTING)
        record = AppointmentRecord(
            id=None,
            client_id=self._client_id,
            client_name=self._profile.name,
            contact_number=self._profile.contact_number,
            date=day,
            time=label,
            service_kind=self._rules.service_kind,
            price=self._rules.price,
            paid=True,
        )
        try:
            committed = await self._store.create_if_slot_free(record)
        except (SlotConflict, StoreUnavailable) as e:
            return self._fail(e)
        except Exception as e:
            self._logger.exception("Error saving appointment", extra={"error": str(e)})
            return self._fail(StoreUnavailable())

        self._attempt = replace(
            self._attempt,
            status=BookingStatus.COMMITTED,
            record=committed,
            error_kind=None,
            message=None,
        )
        self._logger.info(
            "Appointment booked",
            extra={
                "client_id": self._client_id,
                "appointment_id": committed.id,
                "date": committed.date.isoformat(),
                "time": committed.time,
            },
        )
        self._hand_over(committed)
        return BookingResult(action="booked", message=None, record=committed, attempt=self._attempt)

    def _collect_payment(self) -> bool:
        description = (
            f"{self._rules.service_name} on {self._attempt.selected_date.isoformat()} "
            f"at {self._attempt.selected_time}"
        )
        try:
            return bool(self._payment.confirm_payment(self._rules.price, self._rules.currency, description))
        except Exception as e:
            self._logger.exception("Payment gate failed", extra={"client_id": self._client_id, "error": str(e)})
            return False

    def _hand_over(self, record: AppointmentRecord) -> None:
        try:
            self._notifier.notify(record)
        except Exception as e:
            # the booking stands even if the reminder cannot be queued
            self._logger.exception(
                "Reminder hand-over failed",
                extra={"appointment_id": record.id, "error": str(e)},
            )

    def _ensure_idle_for_selection(self) -> None:
        if self._attempt.in_flight:
            raise ValidationError("A booking is already being processed.")

    def _transition(self, status: BookingStatus) -> None:
        self._attempt = replace(self._attempt, status=status, error_kind=None, message=None)
        self._logger.info(
            "Booking attempt moved",
            extra={"client_id": self._client_id, "status": status.value},
        )

    def _invalid(self, error: ValidationError) -> BookingResult:
        self._attempt = replace(self._attempt, error_kind=error.kind, message=error.message)
        return BookingResult(
            action="invalid",
            message=error.message,
            record=None,
            attempt=self._attempt,
            error=error,
        )

    def _fail(self, error: BookingError) -> BookingResult:
        self._attempt = replace(
            self._attempt,
            status=BookingStatus.FAILED,
            error_kind=error.kind,
            message=error.message,
        )
        self._logger.warning(
            "Booking attempt failed",
            extra={
                "client_id": self._client_id,
                "date": self._attempt.selected_date.isoformat() if self._attempt.selected_date else None,
                "time": self._attempt.selected_time,
                "reason": error.kind,
            },
        )
        return BookingResult(
            action="failed",
            message=error.message,
            record=None,
            attempt=self._attempt,
            error=error,
        )
