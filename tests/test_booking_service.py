from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from hargeisa_vibes.core.exceptions import NotFoundError, ValidationError
from hargeisa_vibes.models.deal import Deal
from hargeisa_vibes.models.user import UserNotification
from hargeisa_vibes.schemas.booking import BookingCreate, BookingDetailsUpdate
from hargeisa_vibes.services.booking_service import BookingFilters, BookingService
from hargeisa_vibes.services.catalog_service import CatalogService

from tests.conftest import FakeReceiptSender


@pytest.fixture
def sender():
    return FakeReceiptSender()


@pytest.fixture
def bookings(sender):
    return BookingService(receipt_sender=sender)


def _new_booking(service_id: str = "service-1", **overrides) -> BookingCreate:
    data = {
        "serviceId": service_id,
        "customerName": "Amina Yusuf",
        "customerEmail": "amina@example.com",
        "numberOfPeople": 1,
    }
    data.update(overrides)
    return BookingCreate.model_validate(data)


async def _listed_ids(bookings, db, filters=None):
    return [b.id async for b in bookings.iter_bookings(db, filters)]


# ==================== CREATE ====================


async def test_deal_booking_lifecycle_keeps_status_and_payment_independent(db, bookings, sender):
    db.add(Deal(id="deal-42", title="Sheikh Mountains Trek", category="adventure", price=Decimal("50.00")))
    await db.flush()

    created = await bookings.create_booking(db, _new_booking("deal-42", numberOfPeople=3))
    booking = created.booking
    assert booking.total_amount == Decimal("150.00")
    assert booking.status == "pending"
    assert booking.payment_status == "pending"
    assert created.service_title == "Sheikh Mountains Trek"
    assert created.email_sent is True
    assert sender.sent == [(booking.id, "Sheikh Mountains Trek")]

    await bookings.update_payment_status(db, booking.id, "paid", "TXN-1")
    booking = await bookings.get_booking(db, booking.id)
    assert booking.payment_status == "paid"
    assert booking.transaction_id == "TXN-1"
    assert booking.status == "pending"

    await bookings.update_status(db, booking.id, "cancelled", "customer request")
    booking = await bookings.get_booking(db, booking.id)
    assert booking.status == "cancelled"
    assert booking.cancellation_reason == "customer request"
    assert booking.payment_status == "paid"


async def test_service_booking_total_uses_service_price(db, bookings, service):
    created = await bookings.create_booking(db, _new_booking("service-1", numberOfPeople=4))
    assert created.booking.total_amount == Decimal("180.00")
    assert created.service_title == "Laas Geel Cave Paintings Tour"


async def test_unknown_reference_keeps_caller_amount(db, bookings):
    created = await bookings.create_booking(db, _new_booking("service-missing", totalAmount="75.5"))
    assert created.service_title == "Unknown Service"
    assert created.booking.total_amount == Decimal("75.50")


async def test_unknown_reference_without_amount_is_zero(db, bookings):
    created = await bookings.create_booking(db, _new_booking("deal-missing", numberOfPeople=5))
    assert created.booking.total_amount == Decimal("0.00")


async def test_inactive_service_does_not_price_a_booking(db, bookings, service):
    service.is_active = False
    await db.flush()

    created = await bookings.create_booking(db, _new_booking("service-1", totalAmount=10))
    assert created.service_title == "Unknown Service"
    assert created.booking.total_amount == Decimal("10.00")


async def test_failed_catalog_lookup_does_not_block_booking(db, sender):
    class BrokenCatalog(CatalogService):
        async def resolve_reference(self, db, service_reference):
            raise OperationalError("SELECT", {}, Exception("connection lost"))

    bookings = BookingService(catalog=BrokenCatalog(), receipt_sender=sender)
    created = await bookings.create_booking(db, _new_booking("service-1", totalAmount=20))
    assert created.service_title == "Unknown Service"
    assert created.booking.total_amount == Decimal("20.00")


async def test_failed_receipt_still_creates_booking(db):
    bookings = BookingService(receipt_sender=FakeReceiptSender(error=RuntimeError("smtp down")))
    created = await bookings.create_booking(db, _new_booking())
    assert created.email_sent is False
    assert (await bookings.get_booking(db, created.booking.id)).id == created.booking.id


async def test_initial_status_goes_through_transition_table(db, bookings):
    created = await bookings.create_booking(db, _new_booking(status="confirmed", paymentStatus="paid"))
    assert created.booking.status == "confirmed"
    assert created.booking.payment_status == "paid"

    with pytest.raises(ValidationError):
        await bookings.create_booking(db, _new_booking(status="on-hold"))


async def test_booking_for_registered_customer_adds_inbox_reminder(db, bookings, customer):
    created = await bookings.create_booking(db, _new_booking())
    notifications = await bookings.notifications.list_for_user(db, customer.id)
    assert len(notifications) == 1
    assert isinstance(notifications[0], UserNotification)
    assert created.booking.id in notifications[0].message
    assert notifications[0].type == "reminder"


# ==================== UPDATE ====================


async def test_update_status_on_missing_booking_is_not_found(db, bookings):
    with pytest.raises(NotFoundError):
        await bookings.update_status(db, "booking-nope", "confirmed")


async def test_update_status_on_deleted_booking_is_not_found_and_unchanged(db, bookings):
    created = await bookings.create_booking(db, _new_booking())
    await bookings.soft_delete(db, created.booking.id)

    with pytest.raises(NotFoundError):
        await bookings.update_status(db, created.booking.id, "confirmed")
    assert created.booking.status == "pending"


async def test_cancel_without_reason_keeps_previous_reason(db, bookings):
    created = await bookings.create_booking(db, _new_booking())
    await bookings.update_status(db, created.booking.id, "cancelled", "weather")
    await bookings.update_status(db, created.booking.id, "pending")
    await bookings.update_status(db, created.booking.id, "cancelled")

    booking = await bookings.get_booking(db, created.booking.id)
    assert booking.cancellation_reason == "weather"


async def test_reason_is_ignored_for_non_cancel_status(db, bookings):
    created = await bookings.create_booking(db, _new_booking())
    await bookings.update_status(db, created.booking.id, "confirmed", "should not stick")
    booking = await bookings.get_booking(db, created.booking.id)
    assert booking.cancellation_reason is None


async def test_status_update_never_touches_payment(db, bookings):
    created = await bookings.create_booking(db, _new_booking(paymentStatus="paid"))
    await bookings.update_status(db, created.booking.id, "refunded")
    booking = await bookings.get_booking(db, created.booking.id)
    assert booking.payment_status == "paid"


async def test_payment_update_without_transaction_clears_it(db, bookings):
    created = await bookings.create_booking(db, _new_booking())
    await bookings.update_payment_status(db, created.booking.id, "paid", "TXN-9")
    await bookings.update_payment_status(db, created.booking.id, "refunded", "  ")
    booking = await bookings.get_booking(db, created.booking.id)
    assert booking.payment_status == "refunded"
    assert booking.transaction_id is None


async def test_invalid_payment_status_is_rejected(db, bookings):
    created = await bookings.create_booking(db, _new_booking())
    with pytest.raises(ValidationError):
        await bookings.update_payment_status(db, created.booking.id, "chargeback")


async def test_update_details_overwrites_fields_but_not_status(db, bookings):
    created = await bookings.create_booking(db, _new_booking(status="confirmed"))
    update = BookingDetailsUpdate.model_validate(
        {
            "customerName": "Hodan Ali",
            "customerEmail": "hodan@example.com",
            "numberOfPeople": 2,
            "totalAmount": "88.10",
            "notes": "Vegetarian lunch",
        }
    )
    await bookings.update_details(db, created.booking.id, update)

    booking = await bookings.get_booking(db, created.booking.id)
    assert booking.customer_name == "Hodan Ali"
    assert booking.customer_email == "hodan@example.com"
    assert booking.total_amount == Decimal("88.10")
    assert booking.customer_phone is None
    assert booking.status == "confirmed"


# ==================== QUERIES ====================


async def test_soft_deleted_booking_disappears(db, bookings):
    kept = await bookings.create_booking(db, _new_booking())
    gone = await bookings.create_booking(db, _new_booking())
    await bookings.soft_delete(db, gone.booking.id)

    assert await _listed_ids(bookings, db) == [kept.booking.id]
    with pytest.raises(NotFoundError):
        await bookings.get_booking(db, gone.booking.id)


async def test_filters_are_conjunctive(db, bookings):
    match = await bookings.create_booking(db, _new_booking(customerEmail="a@b.com", status="confirmed"))
    await bookings.create_booking(db, _new_booking(customerEmail="a@b.com"))
    await bookings.create_booking(db, _new_booking(customerEmail="c@d.com", status="confirmed"))

    ids = await _listed_ids(
        bookings, db, BookingFilters(status="confirmed", customer_email="a@b.com")
    )
    assert ids == [match.booking.id]


async def test_search_matches_name_or_email_case_insensitively(db, bookings):
    by_name = await bookings.create_booking(db, _new_booking(customerName="Faysal Warsame", customerEmail="fw@example.com"))
    by_email = await bookings.create_booking(db, _new_booking(customerName="Other", customerEmail="warsame.h@example.com"))
    await bookings.create_booking(db, _new_booking(customerName="Nobody", customerEmail="n@example.com"))

    ids = await _listed_ids(bookings, db, BookingFilters(search="WARSAME"))
    assert set(ids) == {by_name.booking.id, by_email.booking.id}


async def test_list_is_newest_first(db, bookings):
    first = await bookings.create_booking(db, _new_booking())
    second = await bookings.create_booking(db, _new_booking())
    ids = await _listed_ids(bookings, db)
    assert ids == [second.booking.id, first.booking.id]


async def test_list_view_resolves_titles(db, bookings, service):
    await bookings.create_booking(db, _new_booking("service-1"))
    await bookings.create_booking(db, _new_booking("service-gone"))
    titles = {v.service_id: v.service_title for v in await bookings.list_bookings(db)}
    assert titles == {
        "service-1": "Laas Geel Cave Paintings Tour",
        "service-gone": "Unknown Service",
    }


async def test_stats_count_payment_and_revenue(db, bookings, service):
    paid = await bookings.create_booking(db, _new_booking("service-1", numberOfPeople=2))
    await bookings.update_payment_status(db, paid.booking.id, "paid", "TXN-1")
    await bookings.update_status(db, paid.booking.id, "confirmed")
    await bookings.create_booking(db, _new_booking("service-1"))
    deleted = await bookings.create_booking(db, _new_booking("service-1"))
    await bookings.soft_delete(db, deleted.booking.id)

    stats = await bookings.stats(db)
    assert stats.total_bookings == 2
    assert stats.confirmed_bookings == 1
    assert stats.pending_bookings == 1
    assert stats.paid_bookings == 1
    assert stats.pending_payments == 1
    assert stats.total_revenue == 90.0
    assert stats.pending_revenue == 45.0


async def test_analytics_groups_by_day(db, bookings, service):
    paid = await bookings.create_booking(db, _new_booking("service-1"))
    await bookings.update_payment_status(db, paid.booking.id, "paid")
    await bookings.create_booking(db, _new_booking("service-1", numberOfPeople=3))

    days = await bookings.analytics(db)
    assert len(days) == 1
    assert days[0].total_bookings == 2
    assert days[0].revenue == 45.0
    assert days[0].avg_booking_value == 90.0
