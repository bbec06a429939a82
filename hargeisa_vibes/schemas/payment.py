"""PayPal payment Pydantic schemas."""

from decimal import Decimal

from pydantic import EmailStr, Field

from hargeisa_vibes.schemas.common import CamelModel


class CreateOrderRequest(CamelModel):
    """Schema for creating a PayPal order for a booking."""

    booking_id: str = Field(..., min_length=1)
    service_title: str = Field(..., min_length=1)
    total_amount: Decimal = Field(..., gt=0)
    customer_email: EmailStr
    customer_name: str = Field(..., min_length=1)


class CreateOrderResponse(CamelModel):
    """Schema for a created PayPal order."""

    success: bool = True
    order_id: str
    approval_url: str | None = None
    status: str
    demo: bool = False


class CaptureOrderRequest(CamelModel):
    """Schema for capturing an approved order."""

    order_id: str = Field(..., min_length=1)
    booking_id: str | None = None


class CaptureOrderResponse(CamelModel):
    """Schema for a capture result."""

    success: bool
    order_id: str
    capture_id: str | None = None
    status: str
    demo: bool = False


class PayPalConfigStatus(CamelModel):
    """Schema for the PayPal configuration probe."""

    configured: bool
    environment: str
    demo_mode: bool
    access_token_ok: bool
    message: str
