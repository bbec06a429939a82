"""Service catalog endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from hargeisa_vibes.api.deps import get_db, require_admin_update
from hargeisa_vibes.schemas.catalog import (
    CatalogCreatedResponse,
    ServiceCreate,
    ServiceResponse,
    ServiceUpdate,
)
from hargeisa_vibes.schemas.common import MessageResponse
from hargeisa_vibes.services.catalog_service import catalog_service

router = APIRouter()


@router.get("", response_model=list[ServiceResponse])
async def list_services(
    db: Annotated[AsyncSession, Depends(get_db)],
    category: str | None = None,
) -> list[ServiceResponse]:
    """List active services, newest first."""
    services = await catalog_service.list_services(db, category)
    return [catalog_service.service_view(s) for s in services]


@router.get("/category/{category}", response_model=list[ServiceResponse])
async def list_services_by_category(
    category: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[ServiceResponse]:
    """List active services in a category, best rated first."""
    services = await catalog_service.list_services_by_category(db, category)
    return [catalog_service.service_view(s) for s in services]


@router.get("/{service_id}", response_model=ServiceResponse)
async def get_service(
    service_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ServiceResponse:
    service = await catalog_service.get_service(db, service_id)
    return catalog_service.service_view(service)


@router.post(
    "",
    response_model=CatalogCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin_update)],
)
async def create_service(
    service_data: ServiceCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CatalogCreatedResponse:
    service = await catalog_service.create_service(db, service_data)
    return CatalogCreatedResponse(message="Service created successfully", id=service.id)


@router.put(
    "/{service_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin_update)],
)
async def update_service(
    service_id: str,
    service_data: ServiceUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MessageResponse:
    await catalog_service.update_service(db, service_id, service_data)
    return MessageResponse(message="Service updated successfully")


@router.delete(
    "/{service_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin_update)],
)
async def delete_service(
    service_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MessageResponse:
    await catalog_service.delete_service(db, service_id)
    return MessageResponse(message="Service deleted successfully")
