import json
from decimal import Decimal

import httpx
import pytest

from hargeisa_vibes.gateways.base import GatewayType, OrderRequest
from hargeisa_vibes.gateways.paypal import PayPalGateway
from hargeisa_vibes.services.gateway_service import gateway_service

BASE_URL = "https://api-m.sandbox.paypal.com"


async def _booking(client) -> str:
    response = await client.post(
        "/api/bookings",
        json={"serviceId": "service-1", "customerName": "Amina", "customerEmail": "amina@example.com"},
    )
    return response.json()["bookingId"]


# ==================== DEMO MODE ====================


async def test_config_reports_demo_mode(client):
    body = (await client.get("/api/paypal/test-config")).json()
    assert body["demoMode"] is True
    assert body["configured"] is False


async def test_demo_checkout_marks_booking_paid(client, service):
    booking_id = await _booking(client)

    response = await client.post(
        "/api/paypal/create-order",
        json={
            "bookingId": booking_id,
            "serviceTitle": "Laas Geel Cave Paintings Tour",
            "totalAmount": 45,
            "customerEmail": "amina@example.com",
            "customerName": "Amina",
        },
    )
    assert response.status_code == 200
    order = response.json()
    assert order["orderId"].startswith("DEMO-")
    assert order["demo"] is True
    assert order["approvalUrl"].startswith("http://localhost:3000/payment/success?token=DEMO-")

    response = await client.post(
        "/api/paypal/capture-order", json={"orderId": order["orderId"], "bookingId": booking_id}
    )
    capture = response.json()
    assert capture["success"] is True
    assert capture["status"] == "COMPLETED"

    booking = (await client.get(f"/api/bookings/{booking_id}")).json()
    assert booking["paymentStatus"] == "paid"
    assert booking["transactionId"] == capture["captureId"]
    assert booking["status"] == "pending"


async def test_demo_capture_of_unknown_order_leaves_booking_unpaid(client, service):
    booking_id = await _booking(client)

    response = await client.post(
        "/api/paypal/capture-order", json={"orderId": "DEMO-forged", "bookingId": booking_id}
    )
    assert response.status_code != 200

    booking = (await client.get(f"/api/bookings/{booking_id}")).json()
    assert booking["paymentStatus"] == "pending"


async def test_create_order_rejects_zero_amount(client):
    response = await client.post(
        "/api/paypal/create-order",
        json={
            "bookingId": "booking-1",
            "serviceTitle": "Tour",
            "totalAmount": 0,
            "customerEmail": "amina@example.com",
            "customerName": "Amina",
        },
    )
    assert response.status_code == 400


async def test_capture_completed_webhook_marks_paid_only(client, service):
    booking_id = await _booking(client)
    await client.patch(f"/api/bookings/{booking_id}/status", json={"status": "confirmed"})

    event = {
        "id": "WH-1",
        "event_type": "PAYMENT.CAPTURE.COMPLETED",
        "resource": {"id": "CAPTURE-9", "custom_id": booking_id, "status": "COMPLETED"},
    }
    response = await client.post("/api/paypal/webhook", json=event)
    assert response.status_code == 200
    assert response.json() == {"received": True}

    booking = (await client.get(f"/api/bookings/{booking_id}")).json()
    assert booking["paymentStatus"] == "paid"
    assert booking["transactionId"] == "CAPTURE-9"
    assert booking["status"] == "confirmed"


async def test_capture_denied_webhook_marks_failed(client, service):
    booking_id = await _booking(client)
    event = {"event_type": "PAYMENT.CAPTURE.DENIED", "resource": {"custom_id": booking_id}}
    await client.post("/api/paypal/webhook", json=event)

    booking = (await client.get(f"/api/bookings/{booking_id}")).json()
    assert booking["paymentStatus"] == "failed"


async def test_webhook_for_unknown_booking_is_acknowledged(client):
    event = {"event_type": "PAYMENT.CAPTURE.COMPLETED", "resource": {"id": "C", "custom_id": "booking-0"}}
    response = await client.post("/api/paypal/webhook", json=event)
    assert response.status_code == 200


# ==================== REST ADAPTER ====================


def _gateway(handler, webhook_id: str | None = None) -> PayPalGateway:
    return PayPalGateway(
        client_id="client",
        client_secret="secret",
        base_url=BASE_URL,
        webhook_id=webhook_id,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def _order_request() -> OrderRequest:
    return OrderRequest(
        booking_id="booking-1",
        description="Booking for Laas Geel Cave Paintings Tour",
        amount=Decimal("90"),
        currency="USD",
        customer_email="amina@example.com",
        customer_name="Amina",
        return_url="http://localhost:3000/payment/success",
        cancel_url="http://localhost:3000/payment/cancel",
    )


async def test_create_order_posts_capture_intent():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if request.url.path == "/v1/oauth2/token":
            return httpx.Response(200, json={"access_token": "A21", "expires_in": 32400})
        body = json.loads(request.content)
        assert request.headers["Authorization"] == "Bearer A21"
        assert body["intent"] == "CAPTURE"
        unit = body["purchase_units"][0]
        assert unit["custom_id"] == "booking-1"
        assert unit["amount"] == {"currency_code": "USD", "value": "90.00"}
        return httpx.Response(
            201,
            json={
                "id": "ORDER-1",
                "status": "CREATED",
                "links": [{"rel": "approve", "href": "https://www.sandbox.paypal.com/checkoutnow?token=ORDER-1"}],
            },
        )

    gateway = _gateway(handler)
    result = await gateway.create_order(_order_request())
    await gateway.create_order(_order_request())

    assert result.success is True
    assert result.order_id == "ORDER-1"
    assert result.approval_url.endswith("token=ORDER-1")
    # The OAuth token is fetched once and reused
    assert [c.url.path for c in calls].count("/v1/oauth2/token") == 1


async def test_capture_order_reads_capture_id():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v1/oauth2/token":
            return httpx.Response(200, json={"access_token": "A21", "expires_in": 32400})
        return httpx.Response(
            201,
            json={
                "id": "ORDER-1",
                "status": "COMPLETED",
                "purchase_units": [
                    {
                        "reference_id": "booking-1",
                        "payments": {
                            "captures": [{"id": "CAP-1", "status": "COMPLETED", "custom_id": "booking-1"}]
                        },
                    }
                ],
            },
        )

    result = await _gateway(handler).capture_order("ORDER-1")
    assert result.success is True
    assert result.capture_id == "CAP-1"
    assert result.booking_id == "booking-1"


async def test_paypal_error_message_is_surfaced():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v1/oauth2/token":
            return httpx.Response(200, json={"access_token": "A21", "expires_in": 32400})
        return httpx.Response(422, json={"name": "UNPROCESSABLE_ENTITY", "message": "Order not approved"})

    result = await _gateway(handler).capture_order("ORDER-1")
    assert result.success is False
    assert result.error_message == "Order not approved"


async def test_webhook_without_webhook_id_is_rejected():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    assert await _gateway(handler).verify_webhook({}, {"id": "WH-1"}) is False


@pytest.mark.parametrize("verification, expected", [("SUCCESS", True), ("FAILURE", False)])
async def test_webhook_signature_verification(verification, expected):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v1/oauth2/token":
            return httpx.Response(200, json={"access_token": "A21", "expires_in": 32400})
        body = json.loads(request.content)
        assert body["webhook_id"] == "WH-ID"
        assert body["transmission_id"] == "T-1"
        return httpx.Response(200, json={"verification_status": verification})

    gateway = _gateway(handler, webhook_id="WH-ID")
    assert await gateway.verify_webhook({"paypal-transmission-id": "T-1"}, {"id": "WH-1"}) is expected


# ==================== LIVE MODE ====================


@pytest.fixture
def live_paypal(monkeypatch):
    """Route gateway_service to a configured PayPal adapter backed by a mock transport."""
    calls: list[httpx.Request] = []
    captures: dict[str, httpx.Response] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if request.url.path == "/v1/oauth2/token":
            return httpx.Response(200, json={"access_token": "A21", "expires_in": 32400})
        response = captures.get(request.url.path)
        if response is None:
            return httpx.Response(
                404, json={"name": "RESOURCE_NOT_FOUND", "message": "The specified resource does not exist."}
            )
        return response

    monkeypatch.setattr(gateway_service, "_gateways", {GatewayType.PAYPAL: _gateway(handler)})
    return calls, captures


def _completed_capture(order_id: str, booking_id: str) -> httpx.Response:
    return httpx.Response(
        201,
        json={
            "id": order_id,
            "status": "COMPLETED",
            "purchase_units": [
                {
                    "reference_id": booking_id,
                    "payments": {"captures": [{"id": "CAP-7", "status": "COMPLETED", "custom_id": booking_id}]},
                }
            ],
        },
    )


async def test_live_mode_sends_demo_order_ids_to_paypal(client, service, live_paypal):
    calls, _ = live_paypal
    booking_id = await _booking(client)

    response = await client.post(
        "/api/paypal/capture-order", json={"orderId": "DEMO-forged", "bookingId": booking_id}
    )
    assert response.status_code == 500
    assert "/v2/checkout/orders/DEMO-forged/capture" in [c.url.path for c in calls]

    booking = (await client.get(f"/api/bookings/{booking_id}")).json()
    assert booking["paymentStatus"] == "pending"


async def test_capture_for_another_booking_is_rejected(client, service, live_paypal):
    _, captures = live_paypal
    booking_id = await _booking(client)
    captures["/v2/checkout/orders/ORDER-7/capture"] = _completed_capture("ORDER-7", "booking-other")

    response = await client.post(
        "/api/paypal/capture-order", json={"orderId": "ORDER-7", "bookingId": booking_id}
    )
    assert response.status_code == 400

    booking = (await client.get(f"/api/bookings/{booking_id}")).json()
    assert booking["paymentStatus"] == "pending"
    assert booking["transactionId"] is None


async def test_live_capture_marks_its_own_booking_paid(client, service, live_paypal):
    _, captures = live_paypal
    booking_id = await _booking(client)
    captures["/v2/checkout/orders/ORDER-8/capture"] = _completed_capture("ORDER-8", booking_id)

    response = await client.post(
        "/api/paypal/capture-order", json={"orderId": "ORDER-8", "bookingId": booking_id}
    )
    assert response.status_code == 200
    assert response.json()["demo"] is False

    booking = (await client.get(f"/api/bookings/{booking_id}")).json()
    assert booking["paymentStatus"] == "paid"
    assert booking["transactionId"] == "CAP-7"
