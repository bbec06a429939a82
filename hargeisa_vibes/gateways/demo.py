"""Demo payment gateway used while PayPal credentials are not configured."""

from typing import Any

from hargeisa_vibes.gateways.base import (
    CaptureResult,
    GatewayType,
    OrderRequest,
    OrderResult,
    PaymentGateway,
)
from hargeisa_vibes.utils.identifiers import generate_reference

DEMO_PREFIX = "DEMO-"


def is_demo_order(order_id: str) -> bool:
    return order_id.startswith(DEMO_PREFIX)


class DemoGateway(PaymentGateway):
    """Demo gateway for exercising the checkout UI.

    Orders approve straight back to the frontend's success page and every
    order it created captures as completed. No money moves.
    """

    def __init__(self) -> None:
        # order id -> booking id, for the life of the process
        self._orders: dict[str, str] = {}

    @property
    def gateway_type(self) -> GatewayType:
        return GatewayType.DEMO

    async def create_order(self, request: OrderRequest) -> OrderResult:
        """Create demo order (always succeeds)."""
        order_id = generate_reference("DEMO")
        self._orders[order_id] = request.booking_id
        approval_url = f"{request.return_url}?token={order_id}&PayerID=DEMO-PAYER"
        return OrderResult(
            success=True,
            order_id=order_id,
            status="CREATED",
            approval_url=approval_url,
            raw_response={
                "id": order_id,
                "status": "CREATED",
                "links": [{"rel": "approve", "href": approval_url}],
            },
        )

    async def capture_order(self, order_id: str) -> CaptureResult:
        """Capture a demo order this gateway created; it always completes."""
        booking_id = self._orders.get(order_id) if is_demo_order(order_id) else None
        if booking_id is None:
            return CaptureResult(success=False, order_id=order_id, error_message="Unknown demo order")

        capture_id = generate_reference("DEMO-CAPTURE")
        return CaptureResult(
            success=True,
            order_id=order_id,
            capture_id=capture_id,
            booking_id=booking_id,
            status="COMPLETED",
            raw_response={
                "id": order_id,
                "status": "COMPLETED",
                "purchase_units": [
                    {
                        "custom_id": booking_id,
                        "payments": {
                            "captures": [
                                {"id": capture_id, "status": "COMPLETED", "custom_id": booking_id}
                            ]
                        },
                    }
                ],
            },
        )

    async def get_order(self, order_id: str) -> OrderResult:
        return OrderResult(
            success=True,
            order_id=order_id,
            status="APPROVED",
            raw_response={"id": order_id, "status": "APPROVED"},
        )

    async def verify_webhook(self, headers: dict[str, str], event: dict[str, Any]) -> bool:
        """Demo mode has no signing secret; deliveries are accepted."""
        return True
