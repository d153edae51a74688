class BookingError(RuntimeError):
    """Base for booking failures. `message` is safe to show to the client."""

    kind = "booking_error"
    default_message = "Booking could not be completed. Please try again."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BookingError, ValueError):
    """Raised for missing selections or malformed profile fields."""

    kind = "validation"
    default_message = "Invalid booking request."


class PaymentDeclined(BookingError):
    """Raised when the payment gate is declined or cancelled."""

    kind = "payment_declined"
    default_message = "Payment cancelled or failed. The appointment was not booked."


class SlotConflict(BookingError):
    """Raised when the requested date+time slot is already taken."""

    kind = "slot_conflict"
    default_message = "This time slot is no longer available. Please choose another one."


class StoreUnavailable(BookingError):
    """Raised when the appointment store fails (network, disk, backend)."""

    kind = "store_unavailable"
    default_message = "Failed to register the appointment. Please try again."
