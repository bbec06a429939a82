"""PayPal payment gateway adapter (Orders v2 REST API)."""

import logging
import time
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

logger = logging.getLogger(__name__)

BRAND_NAME = "Hargeisa Vibes"

# Refresh the OAuth token this many seconds before PayPal expires it
TOKEN_EXPIRY_MARGIN = 60

WEBHOOK_HEADERS = {
    "auth_algo": "paypal-auth-algo",
    "cert_url": "paypal-cert-url",
    "transmission_id": "paypal-transmission-id",
    "transmission_sig": "paypal-transmission-sig",
    "transmission_time": "paypal-transmission-time",
}


class PayPalGateway(PaymentGateway):
    """PayPal payment gateway implementation."""

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        base_url: str | None = None,
        webhook_id: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.client_id = client_id or settings.paypal_client_id
        self.client_secret = client_secret or settings.paypal_client_secret
        self.base_url = (base_url or settings.paypal_base_url).rstrip("/")
        self.webhook_id = webhook_id or settings.paypal_webhook_id
        self._http_client = http_client
        self._access_token: str | None = None
        self._token_expires_at = 0.0

    @property
    def gateway_type(self) -> GatewayType:
        return GatewayType.PAYPAL

    @property
    def configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Lazy-load HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(base_url=self.base_url, timeout=30.0)
        return self._http_client

    async def close(self) -> None:
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    # ==================== AUTH ====================

    async def get_access_token(self) -> str:
        """Client-credentials OAuth token, cached until shortly before expiry."""
        if self._access_token and time.monotonic() < self._token_expires_at:
            return self._access_token

        response = await self.http_client.post(
            f"{self.base_url}/v1/oauth2/token",
            auth=(self.client_id or "", self.client_secret or ""),
            data={"grant_type": "client_credentials"},
            headers={"Accept": "application/json"},
        )
        response.raise_for_status()
        body = response.json()
        self._access_token = body["access_token"]
        self._token_expires_at = time.monotonic() + max(
            int(body.get("expires_in", 0)) - TOKEN_EXPIRY_MARGIN, 0
        )
        return self._access_token

    async def _request(self, method: str, path: str, json: dict | None = None) -> dict[str, Any]:
        token = await self.get_access_token()
        response = await self.http_client.request(
            method,
            f"{self.base_url}{path}",
            json=json,
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
                "Prefer": "return=representation",
            },
        )
        response.raise_for_status()
        return response.json()

    @staticmethod
    def _error_message(error: httpx.HTTPError) -> str:
        if isinstance(error, httpx.HTTPStatusError):
            try:
                body = error.response.json()
            except ValueError:
                return f"PayPal returned HTTP {error.response.status_code}"
            return body.get("message") or body.get("error_description") or str(body)
        return str(error) or error.__class__.__name__

    # ==================== ORDERS ====================

    async def create_order(self, request: OrderRequest) -> OrderResult:
        """Create a PayPal order with intent CAPTURE."""
        if not self.configured:
            return OrderResult(success=False, error_message="PayPal not configured")

        payload = {
            "intent": "CAPTURE",
            "purchase_units": [
                {
                    "reference_id": request.booking_id,
                    "custom_id": request.booking_id,
                    "invoice_id": f"INV-{request.booking_id}",
                    "description": request.description[:127],
                    "soft_descriptor": BRAND_NAME,
                    "amount": {
                        "currency_code": request.currency,
                        "value": f"{request.amount:.2f}",
                    },
                }
            ],
            "application_context": {
                "brand_name": BRAND_NAME,
                "landing_page": "NO_PREFERENCE",
                "user_action": "PAY_NOW",
                "return_url": request.return_url,
                "cancel_url": request.cancel_url,
            },
        }

        try:
            body = await self._request("POST", "/v2/checkout/orders", json=payload)
        except httpx.HTTPError as e:
            logger.warning("PayPal create order for %s failed: %s", request.booking_id, e)
            return OrderResult(success=False, error_message=self._error_message(e))

        approval_url = next(
            (link["href"] for link in body.get("links", []) if link.get("rel") in ("approve", "payer-action")),
            None,
        )
        logger.info("PayPal order %s created for booking %s", body.get("id"), request.booking_id)
        return OrderResult(
            success=True,
            order_id=body.get("id"),
            status=body.get("status"),
            approval_url=approval_url,
            raw_response=body,
        )

    async def capture_order(self, order_id: str) -> CaptureResult:
        """Capture an approved PayPal order."""
        if not self.configured:
            return CaptureResult(success=False, order_id=order_id, error_message="PayPal not configured")

        try:
            body = await self._request("POST", f"/v2/checkout/orders/{order_id}/capture", json={})
        except httpx.HTTPError as e:
            logger.warning("PayPal capture of %s failed: %s", order_id, e)
            return CaptureResult(success=False, order_id=order_id, error_message=self._error_message(e))

        captures = [
            capture
            for unit in body.get("purchase_units", [])
            for capture in unit.get("payments", {}).get("captures", [])
        ]
        capture_id = captures[0]["id"] if captures else None
        status = body.get("status")
        return CaptureResult(
            success=status == "COMPLETED",
            order_id=body.get("id", order_id),
            capture_id=capture_id,
            booking_id=_booking_reference(body, captures),
            status=status,
            raw_response=body,
        )

    async def get_order(self, order_id: str) -> OrderResult:
        if not self.configured:
            return OrderResult(success=False, order_id=order_id, error_message="PayPal not configured")

        try:
            body = await self._request("GET", f"/v2/checkout/orders/{order_id}")
        except httpx.HTTPError as e:
            return OrderResult(success=False, order_id=order_id, error_message=self._error_message(e))
        return OrderResult(
            success=True,
            order_id=body.get("id", order_id),
            status=body.get("status"),
            raw_response=body,
        )

    # ==================== WEBHOOKS ====================

    async def verify_webhook(self, headers: dict[str, str], event: dict[str, Any]) -> bool:
        """Verify a webhook through PayPal's verify-webhook-signature API.

        Without a configured webhook id nothing can be verified and every
        delivery is rejected.
        """
        if not self.configured or not self.webhook_id:
            logger.warning("PayPal webhook received but PAYPAL_WEBHOOK_ID is not set")
            return False

        payload: dict[str, Any] = {
            field: headers.get(header, "") for field, header in WEBHOOK_HEADERS.items()
        }
        payload["webhook_id"] = self.webhook_id
        payload["webhook_event"] = event

        try:
            body = await self._request(
                "POST", "/v1/notifications/verify-webhook-signature", json=payload
            )
        except httpx.HTTPError as e:
            logger.warning("PayPal webhook verification call failed: %s", e)
            return False
        return body.get("verification_status") == "SUCCESS"


def _booking_reference(body: dict[str, Any], captures: list[dict[str, Any]]) -> str | None:
    """Booking id the order was created for (``custom_id`` set in create_order)."""
    for capture in captures:
        if capture.get("custom_id"):
            return capture["custom_id"]
    for unit in body.get("purchase_units", []):
        reference = unit.get("custom_id") or unit.get("reference_id")
        if reference:
            return reference
    return None
