"""Payment gateway service.

Routes payment operations to the appropriate gateway adapter.
No business logic here - only gateway coordination.
"""

from decimal import Decimal
from typing import Any

import httpx

from hargeisa_vibes.config import settings
from hargeisa_vibes.gateways.base import (
    CaptureResult,
    GatewayType,
    OrderRequest,
    OrderResult,
    PaymentGateway,
)
from hargeisa_vibes.gateways.demo import DemoGateway
from hargeisa_vibes.gateways.paypal import PayPalGateway


class GatewayService:
    """Service for managing payment gateway operations."""

    def __init__(self, paypal: PayPalGateway | None = None, demo: DemoGateway | None = None):
        self._gateways: dict[GatewayType, PaymentGateway] = {}
        if paypal is not None:
            self._gateways[GatewayType.PAYPAL] = paypal
        if demo is not None:
            self._gateways[GatewayType.DEMO] = demo

    @property
    def paypal(self) -> PayPalGateway:
        if GatewayType.PAYPAL not in self._gateways:
            self._gateways[GatewayType.PAYPAL] = PayPalGateway()
        return self._gateways[GatewayType.PAYPAL]  # type: ignore[return-value]

    @property
    def demo_mode(self) -> bool:
        """True while PayPal credentials are missing."""
        return not self.paypal.configured

    def _get_gateway(self) -> PaymentGateway:
        """Demo gateway while PayPal is unconfigured, PayPal otherwise."""
        if self.demo_mode:
            if GatewayType.DEMO not in self._gateways:
                self._gateways[GatewayType.DEMO] = DemoGateway()
            return self._gateways[GatewayType.DEMO]
        return self.paypal

    async def create_order(
        self,
        booking_id: str,
        service_title: str,
        amount: Decimal,
        customer_email: str,
        customer_name: str,
    ) -> OrderResult:
        """Create a checkout order for a booking."""
        gateway = self._get_gateway()
        return await gateway.create_order(
            OrderRequest(
                booking_id=booking_id,
                description=f"Booking for {service_title}",
                amount=amount,
                currency=settings.paypal_currency,
                customer_email=customer_email,
                customer_name=customer_name,
                return_url=f"{settings.frontend_url.rstrip('/')}/payment/success",
                cancel_url=f"{settings.frontend_url.rstrip('/')}/payment/cancel",
            )
        )

    async def capture_order(self, order_id: str) -> CaptureResult:
        gateway = self._get_gateway()
        return await gateway.capture_order(order_id)

    async def get_order(self, order_id: str) -> OrderResult:
        gateway = self._get_gateway()
        return await gateway.get_order(order_id)

    async def verify_webhook(self, headers: dict[str, str], event: dict[str, Any]) -> bool:
        """Verify webhook from gateway."""
        gateway = self._get_gateway()
        return await gateway.verify_webhook(headers, event)

    async def check_credentials(self) -> bool:
        """Try to obtain an OAuth token with the configured credentials."""
        if self.demo_mode:
            return False
        try:
            await self.paypal.get_access_token()
        except (httpx.HTTPError, KeyError, ValueError):
            return False
        return True


# Singleton instance
gateway_service = GatewayService()
