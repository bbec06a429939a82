"""Booking state machine."""

from hargeisa_vibes.core.exceptions import ValidationError

BOOKING_STATUSES = ("pending", "confirmed", "cancelled", "completed", "refunded")

# Admins may move a booking between any two statuses. Tighten a row here to
# forbid a transition.
BOOKING_TRANSITIONS = {
    "pending": {"pending", "confirmed", "cancelled", "completed", "refunded"},
    "confirmed": {"pending", "confirmed", "cancelled", "completed", "refunded"},
    "cancelled": {"pending", "confirmed", "cancelled", "completed", "refunded"},
    "completed": {"pending", "confirmed", "cancelled", "completed", "refunded"},
    "refunded": {"pending", "confirmed", "cancelled", "completed", "refunded"},
}


def assert_booking_status(value: str) -> None:
    if value not in BOOKING_STATUSES:
        raise ValidationError(
            f"Invalid booking status '{value}'. Allowed: {', '.join(BOOKING_STATUSES)}"
        )


def assert_booking_transition(current: str, target: str) -> None:
    assert_booking_status(target)
    allowed = BOOKING_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise ValidationError(
            f"Invalid booking transition: {current} → {target}"
        )
