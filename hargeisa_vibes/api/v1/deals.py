"""Deal endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from hargeisa_vibes.api.deps import get_db, require_admin_update
from hargeisa_vibes.schemas.catalog import (
    CatalogCreatedResponse,
    DealCreate,
    DealResponse,
    DealUpdate,
)
from hargeisa_vibes.schemas.common import MessageResponse
from hargeisa_vibes.services.catalog_service import catalog_service

router = APIRouter()


@router.get("", response_model=list[DealResponse])
async def list_deals(
    db: Annotated[AsyncSession, Depends(get_db)],
    category: str | None = None,
    hot: bool | None = None,
) -> list[DealResponse]:
    """List active deals, optionally only one category or only hot deals."""
    deals = await catalog_service.list_deals(db, category=category, hot=hot)
    return [catalog_service.deal_view(d) for d in deals]


@router.get("/{deal_id}", response_model=DealResponse)
async def get_deal(
    deal_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DealResponse:
    deal = await catalog_service.get_deal(db, deal_id)
    return catalog_service.deal_view(deal)


@router.post(
    "",
    response_model=CatalogCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin_update)],
)
async def create_deal(
    deal_data: DealCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CatalogCreatedResponse:
    deal = await catalog_service.create_deal(db, deal_data)
    return CatalogCreatedResponse(message="Deal created successfully", id=deal.id)


@router.put(
    "/{deal_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin_update)],
)
async def update_deal(
    deal_id: str,
    deal_data: DealUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MessageResponse:
    """Replace a deal with its features, terms and inclusion lists."""
    await catalog_service.update_deal(db, deal_id, deal_data)
    return MessageResponse(message="Deal updated successfully")


@router.delete(
    "/{deal_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin_update)],
)
async def delete_deal(
    deal_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MessageResponse:
    await catalog_service.delete_deal(db, deal_id)
    return MessageResponse(message="Deal deleted successfully")
