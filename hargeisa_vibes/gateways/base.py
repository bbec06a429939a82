"""Base payment gateway interface.

All gateway adapters must implement this interface.
Business logic should NOT live in adapters - only gateway communication.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any


class GatewayType(str, Enum):
    """Supported payment gateways."""

    PAYPAL = "paypal"
    DEMO = "demo"


@dataclass
class OrderRequest:
    """What the gateway needs to create a checkout order for a booking."""

    booking_id: str
    description: str
    amount: Decimal
    currency: str
    customer_email: str
    customer_name: str
    return_url: str
    cancel_url: str


@dataclass
class OrderResult:
    """Result of creating or fetching an order."""

    success: bool
    order_id: str | None = None
    status: str | None = None
    approval_url: str | None = None
    error_message: str | None = None
    raw_response: dict | None = None


@dataclass
class CaptureResult:
    """Result of capturing an approved order."""

    success: bool
    order_id: str | None = None
    capture_id: str | None = None
    booking_id: str | None = None
    status: str | None = None
    error_message: str | None = None
    raw_response: dict | None = None


class PaymentGateway(ABC):
    """Abstract base class for payment gateways."""

    @property
    @abstractmethod
    def gateway_type(self) -> GatewayType:
        """Return the gateway type."""
        pass

    @abstractmethod
    async def create_order(self, request: OrderRequest) -> OrderResult:
        """Create a checkout order the customer approves on the gateway's site.

        Args:
            request: Booking reference, amount and redirect URLs

        Returns:
            OrderResult with the order id and approval link
        """
        pass

    @abstractmethod
    async def capture_order(self, order_id: str) -> CaptureResult:
        """Capture the funds of an approved order.

        Args:
            order_id: Gateway order ID

        Returns:
            CaptureResult with the capture id and final status
        """
        pass

    @abstractmethod
    async def get_order(self, order_id: str) -> OrderResult:
        """Fetch an order's current state.

        Args:
            order_id: Gateway order ID

        Returns:
            OrderResult with current status
        """
        pass

    @abstractmethod
    async def verify_webhook(
        self,
        headers: dict[str, str],
        event: dict[str, Any],
    ) -> bool:
        """Verify a webhook delivery.

        Args:
            headers: Request headers (lower-cased names)
            event: Parsed webhook body

        Returns:
            True if the event is authentic
        """
        pass
