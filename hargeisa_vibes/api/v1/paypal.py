"""PayPal checkout and webhook endpoints."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from hargeisa_vibes.api.deps import get_db
from hargeisa_vibes.config import settings
from hargeisa_vibes.core.exceptions import NotFoundError, UpstreamError, ValidationError
from hargeisa_vibes.schemas.payment import (
    CaptureOrderRequest,
    CaptureOrderResponse,
    CreateOrderRequest,
    CreateOrderResponse,
    PayPalConfigStatus,
)
from hargeisa_vibes.services.booking_service import booking_service
from hargeisa_vibes.services.gateway_service import gateway_service

logger = logging.getLogger(__name__)

router = APIRouter()

CAPTURE_COMPLETED = "PAYMENT.CAPTURE.COMPLETED"
CAPTURE_DENIED = "PAYMENT.CAPTURE.DENIED"


@router.get("/test-config", response_model=PayPalConfigStatus)
async def test_config() -> PayPalConfigStatus:
    """Report whether PayPal credentials are present and accepted."""
    if gateway_service.demo_mode:
        return PayPalConfigStatus(
            configured=False,
            environment=settings.paypal_environment,
            demo_mode=True,
            access_token_ok=False,
            message="PayPal credentials not configured; running in demo mode",
        )

    token_ok = await gateway_service.check_credentials()
    return PayPalConfigStatus(
        configured=True,
        environment=settings.paypal_environment,
        demo_mode=False,
        access_token_ok=token_ok,
        message="PayPal credentials accepted" if token_ok else "PayPal rejected the configured credentials",
    )


@router.post("/create-order", response_model=CreateOrderResponse)
async def create_order(request: CreateOrderRequest) -> CreateOrderResponse:
    """Create a checkout order the customer approves on PayPal."""
    result = await gateway_service.create_order(
        booking_id=request.booking_id,
        service_title=request.service_title,
        amount=request.total_amount,
        customer_email=str(request.customer_email),
        customer_name=request.customer_name,
    )
    if not result.success or not result.order_id:
        raise UpstreamError("PayPal", result.error_message or "Order could not be created")

    return CreateOrderResponse(
        order_id=result.order_id,
        approval_url=result.approval_url,
        status=result.status or "CREATED",
        demo=gateway_service.demo_mode,
    )


@router.post("/capture-order", response_model=CaptureOrderResponse)
async def capture_order(
    request: CaptureOrderRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CaptureOrderResponse:
    """Capture an approved order; a completed capture marks the booking paid."""
    result = await gateway_service.capture_order(request.order_id)
    if result.error_message:
        raise UpstreamError("PayPal", result.error_message)

    if result.success and request.booking_id:
        if result.booking_id != request.booking_id:
            logger.warning(
                "Capture of order %s belongs to booking %s, not %s",
                request.order_id,
                result.booking_id,
                request.booking_id,
            )
            raise ValidationError("Captured order does not belong to this booking")
        await booking_service.update_payment_status(
            db, request.booking_id, "paid", result.capture_id
        )

    return CaptureOrderResponse(
        success=result.success,
        order_id=result.order_id or request.order_id,
        capture_id=result.capture_id,
        status=result.status or "UNKNOWN",
        demo=gateway_service.demo_mode,
    )


@router.get("/order/{order_id}")
async def get_order(order_id: str) -> dict[str, Any]:
    result = await gateway_service.get_order(order_id)
    if not result.success:
        raise UpstreamError("PayPal", result.error_message or "Order could not be fetched")
    return result.raw_response or {"id": result.order_id, "status": result.status}


@router.post("/webhook", status_code=status.HTTP_200_OK)
async def paypal_webhook(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """Handle PayPal capture events."""
    try:
        event = await request.json()
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid payload",
        )

    headers = {key.lower(): value for key, value in request.headers.items()}
    if not await gateway_service.verify_webhook(headers, event):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid signature",
        )

    await _handle_paypal_event(db, event)
    return {"received": True}


async def _handle_paypal_event(db: AsyncSession, event: dict) -> None:
    """Process a PayPal event and update the booking's payment status."""
    event_type = event.get("event_type")
    resource = event.get("resource") or {}
    booking_id = resource.get("custom_id")

    if event_type == CAPTURE_COMPLETED:
        new_status, transaction_id = "paid", resource.get("id")
    elif event_type == CAPTURE_DENIED:
        new_status, transaction_id = "failed", None
    else:
        logger.info("Ignoring PayPal event %s", event_type)
        return

    if not booking_id:
        logger.warning("PayPal event %s carries no booking reference", event.get("id"))
        return

    try:
        await booking_service.update_payment_status(db, booking_id, new_status, transaction_id)
    except NotFoundError:
        logger.warning("PayPal event %s references unknown booking %s", event.get("id"), booking_id)
