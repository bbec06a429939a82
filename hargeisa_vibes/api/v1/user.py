"""Signed-in customer endpoints: saved deals and notification inbox."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hargeisa_vibes.api.deps import get_current_user, get_db
from hargeisa_vibes.core.exceptions import ConflictError
from hargeisa_vibes.models.user import User, UserSavedDeal
from hargeisa_vibes.schemas.common import MessageResponse
from hargeisa_vibes.schemas.user import (
    SaveDealRequest,
    SavedDealResponse,
    UserNotificationResponse,
)
from hargeisa_vibes.services.catalog_service import catalog_service
from hargeisa_vibes.services.notification_service import notification_service
from hargeisa_vibes.utils.identifiers import generate_id

router = APIRouter()


@router.post("/save-deal", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def save_deal(
    request: SaveDealRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MessageResponse:
    """Bookmark an active deal."""
    deal = await catalog_service.get_deal(db, request.deal_id)

    result = await db.execute(
        select(UserSavedDeal.id).where(
            UserSavedDeal.user_id == current_user.id,
            UserSavedDeal.deal_id == deal.id,
        )
    )
    if result.scalar_one_or_none():
        raise ConflictError("Deal already saved")

    db.add(UserSavedDeal(id=generate_id("saved"), user_id=current_user.id, deal_id=deal.id))
    await db.flush()
    return MessageResponse(message="Deal saved successfully")


@router.get("/saved-deals", response_model=list[SavedDealResponse])
async def get_saved_deals(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[SavedDealResponse]:
    """Saved deals, most recently saved first."""
    result = await db.execute(
        select(UserSavedDeal)
        .where(UserSavedDeal.user_id == current_user.id)
        .order_by(UserSavedDeal.saved_at.desc())
    )
    return [
        SavedDealResponse(
            id=saved.id,
            deal_id=saved.deal_id,
            title=saved.deal.title,
            price=float(saved.deal.price or 0),
            image=saved.deal.image,
            location=saved.deal.location,
            saved_at=saved.saved_at,
        )
        for saved in result.scalars().all()
    ]


@router.get("/notifications", response_model=list[UserNotificationResponse])
async def get_notifications(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list:
    return await notification_service.list_for_user(db, current_user.id)


@router.patch("/notifications/{notification_id}/read", response_model=MessageResponse)
async def mark_notification_read(
    notification_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MessageResponse:
    await notification_service.mark_read(db, current_user.id, notification_id)
    return MessageResponse(message="Notification marked as read")
