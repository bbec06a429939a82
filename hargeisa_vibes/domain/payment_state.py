"""Payment state machine."""

from hargeisa_vibes.core.exceptions import ValidationError

PAYMENT_STATUSES = ("pending", "paid", "failed", "refunded", "partially_refunded")

PAYMENT_TRANSITIONS = {
    "pending": {"pending", "paid", "failed", "refunded", "partially_refunded"},
    "paid": {"pending", "paid", "failed", "refunded", "partially_refunded"},
    "failed": {"pending", "paid", "failed", "refunded", "partially_refunded"},
    "refunded": {"pending", "paid", "failed", "refunded", "partially_refunded"},
    "partially_refunded": {"pending", "paid", "failed", "refunded", "partially_refunded"},
}


def assert_payment_status(value: str) -> None:
    if value not in PAYMENT_STATUSES:
        raise ValidationError(
            f"Invalid payment status '{value}'. Allowed: {', '.join(PAYMENT_STATUSES)}"
        )


def assert_payment_transition(current: str, target: str) -> None:
    assert_payment_status(target)
    allowed = PAYMENT_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise ValidationError(
            f"Invalid payment transition: {current} → {target}"
        )
