from decimal import Decimal

import pytest

from hargeisa_vibes.core.exceptions import ValidationError
from hargeisa_vibes.domain.booking_state import (
    BOOKING_STATUSES,
    BOOKING_TRANSITIONS,
    assert_booking_transition,
)
from hargeisa_vibes.domain.payment_state import (
    PAYMENT_STATUSES,
    PAYMENT_TRANSITIONS,
    assert_payment_transition,
)
from hargeisa_vibes.domain.pricing import (
    calculate_total_amount,
    is_deal_reference,
    parse_discount_percentage,
    parse_price,
)


def test_every_booking_status_has_a_transition_row():
    assert set(BOOKING_TRANSITIONS) == set(BOOKING_STATUSES)
    for targets in BOOKING_TRANSITIONS.values():
        assert targets == set(BOOKING_STATUSES)


def test_every_payment_status_has_a_transition_row():
    assert set(PAYMENT_TRANSITIONS) == set(PAYMENT_STATUSES)


def test_booking_transition_accepts_any_known_status():
    assert_booking_transition("completed", "pending")
    assert_booking_transition("cancelled", "confirmed")


def test_booking_transition_rejects_unknown_status():
    with pytest.raises(ValidationError) as exc:
        assert_booking_transition("pending", "archived")
    assert exc.value.status_code == 400
    assert "archived" in exc.value.detail


def test_payment_transition_rejects_unknown_status():
    with pytest.raises(ValidationError):
        assert_payment_transition("pending", "settled")


def test_payment_transition_accepts_partial_refund():
    assert_payment_transition("paid", "partially_refunded")


def test_total_is_unit_price_times_people():
    assert calculate_total_amount(Decimal("50"), 3) == Decimal("150.00")


def test_total_treats_missing_party_size_as_one():
    assert calculate_total_amount(Decimal("45.5"), None) == Decimal("45.50")


def test_total_falls_back_to_caller_amount_without_price():
    assert calculate_total_amount(None, 4, Decimal("99.999")) == Decimal("100.00")
    assert calculate_total_amount(Decimal("0"), 4, 20) == Decimal("20.00")
    assert calculate_total_amount(None, 2) == Decimal("0.00")


def test_deal_references_are_prefixed():
    assert is_deal_reference("deal-42")
    assert not is_deal_reference("service-42")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("$1,200", Decimal("1200.00")),
        ("€ 45.50", Decimal("45.50")),
        (30, Decimal("30.00")),
        ("free", Decimal("0.00")),
        ("", Decimal("0.00")),
    ],
)
def test_parse_price(raw, expected):
    assert parse_price(raw) == expected


def test_parse_discount_percentage():
    assert parse_discount_percentage("25% OFF") == 25
    assert parse_discount_percentage("Special") == 0
    assert parse_discount_percentage(None) == 0
