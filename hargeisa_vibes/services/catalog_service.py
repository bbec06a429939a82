"""Service and deal catalog.

Owns catalog CRUD and the reference lookup bookings use to find a title
and unit price. A booking's ``service_id`` points at a deal when it starts
with ``deal-`` and at a service otherwise.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hargeisa_vibes.core.exceptions import NotFoundError
from hargeisa_vibes.domain.pricing import (
    UNKNOWN_SERVICE_TITLE,
    is_deal_reference,
    parse_discount_percentage,
)
from hargeisa_vibes.models.deal import Deal, DealItem
from hargeisa_vibes.models.service import Service, ServiceFeature
from hargeisa_vibes.schemas.catalog import (
    DealBase,
    DealResponse,
    ServiceBase,
    ServiceResponse,
)
from hargeisa_vibes.utils.identifiers import generate_id

logger = logging.getLogger(__name__)

DEFAULT_DISCOUNT_LABEL = "0% OFF"
DEFAULT_TIME_LEFT = "1 week left"
DEFAULT_DEAL_VALIDITY = timedelta(days=7)


@dataclass
class ResolvedReference:
    """Title and unit price of the Service or Deal a booking points at."""

    kind: str  # service, deal
    title: str
    unit_price: Decimal


class CatalogService:
    """Service for catalog reads and writes."""

    # ==================== BOOKING REFERENCES ====================

    async def resolve_reference(
        self, db: AsyncSession, service_reference: str
    ) -> ResolvedReference | None:
        """Look up an active Service or Deal by booking reference.

        Returns None when nothing active matches. Storage errors propagate.
        """
        if is_deal_reference(service_reference):
            result = await db.execute(
                select(Deal.title, Deal.price).where(
                    Deal.id == service_reference, Deal.is_active.is_(True)
                )
            )
            kind = "deal"
        else:
            result = await db.execute(
                select(Service.title, Service.price).where(
                    Service.id == service_reference, Service.is_active.is_(True)
                )
            )
            kind = "service"

        row = result.first()
        if row is None:
            return None
        return ResolvedReference(kind=kind, title=row.title, unit_price=row.price or Decimal("0"))

    async def resolve_titles(
        self, db: AsyncSession, references: Iterable[str]
    ) -> dict[str, str]:
        """Map booking references to display titles in two queries.

        Deactivated rows still resolve so old bookings keep their title.
        Unknown references map to "Unknown Service".
        """
        refs = set(references)
        deal_ids = {r for r in refs if is_deal_reference(r)}
        service_ids = refs - deal_ids

        titles: dict[str, str] = {}
        if deal_ids:
            result = await db.execute(select(Deal.id, Deal.title).where(Deal.id.in_(deal_ids)))
            titles.update({row.id: row.title for row in result})
        if service_ids:
            result = await db.execute(
                select(Service.id, Service.title).where(Service.id.in_(service_ids))
            )
            titles.update({row.id: row.title for row in result})

        return {ref: titles.get(ref, UNKNOWN_SERVICE_TITLE) for ref in refs}

    # ==================== SERVICES ====================

    async def list_services(
        self, db: AsyncSession, category: str | None = None
    ) -> list[Service]:
        query = select(Service).where(Service.is_active.is_(True))
        if category:
            query = query.where(Service.category == category)
        result = await db.execute(query.order_by(Service.created_at.desc()))
        return list(result.scalars().all())

    async def list_services_by_category(self, db: AsyncSession, category: str) -> list[Service]:
        result = await db.execute(
            select(Service)
            .where(Service.is_active.is_(True), Service.category == category)
            .order_by(Service.rating.desc(), Service.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_service(self, db: AsyncSession, service_id: str) -> Service:
        result = await db.execute(
            select(Service).where(Service.id == service_id, Service.is_active.is_(True))
        )
        service = result.scalar_one_or_none()
        if not service:
            raise NotFoundError("Service", service_id)
        return service

    async def create_service(self, db: AsyncSession, data: ServiceBase) -> Service:
        service = Service(id=generate_id("service"), features=[])
        self._apply_service(service, data)
        db.add(service)
        await db.flush()
        logger.info("Created service %s (%s)", service.id, service.title)
        return service

    async def update_service(self, db: AsyncSession, service_id: str, data: ServiceBase) -> Service:
        """Replace a service and its feature list in the request's transaction."""
        service = await self.get_service(db, service_id)
        self._apply_service(service, data)
        await db.flush()
        return service

    async def delete_service(self, db: AsyncSession, service_id: str) -> None:
        service = await self.get_service(db, service_id)
        service.is_active = False
        await db.flush()
        logger.info("Deactivated service %s", service_id)

    @staticmethod
    def _apply_service(service: Service, data: ServiceBase) -> None:
        service.title = data.title
        service.description = data.description
        service.category = data.category
        service.price = data.price
        service.rating = Decimal(str(data.rating))
        service.image = data.image
        service.location = data.location
        service.is_popular = data.is_popular
        service.is_new = data.is_new
        service.features = [
            ServiceFeature(feature=text, position=i)
            for i, text in enumerate(f.strip() for f in data.features)
            if text
        ]

    @staticmethod
    def service_view(service: Service) -> ServiceResponse:
        return ServiceResponse(
            id=service.id,
            title=service.title,
            description=service.description,
            category=service.category,
            price=float(service.price or 0),
            rating=float(service.rating or 0),
            image=service.image,
            location=service.location,
            features=[f.feature for f in service.features],
            is_popular=service.is_popular,
            is_new=service.is_new,
            created_at=service.created_at,
            updated_at=service.updated_at,
        )

    # ==================== DEALS ====================

    async def list_deals(
        self,
        db: AsyncSession,
        category: str | None = None,
        hot: bool | None = None,
    ) -> list[Deal]:
        query = select(Deal).where(Deal.is_active.is_(True))
        if category:
            query = query.where(Deal.category == category)
        if hot is not None:
            query = query.where(Deal.is_hot.is_(hot))
        result = await db.execute(query.order_by(Deal.created_at.desc()))
        return list(result.scalars().all())

    async def get_deal(self, db: AsyncSession, deal_id: str) -> Deal:
        result = await db.execute(
            select(Deal).where(Deal.id == deal_id, Deal.is_active.is_(True))
        )
        deal = result.scalar_one_or_none()
        if not deal:
            raise NotFoundError("Deal", deal_id)
        return deal

    async def create_deal(self, db: AsyncSession, data: DealBase) -> Deal:
        deal = Deal(id=generate_id("deal"), items=[])
        self._apply_deal(deal, data)
        db.add(deal)
        await db.flush()
        logger.info("Created deal %s (%s)", deal.id, deal.title)
        return deal

    async def update_deal(self, db: AsyncSession, deal_id: str, data: DealBase) -> Deal:
        """Replace a deal and all of its child lines in the request's transaction."""
        deal = await self.get_deal(db, deal_id)
        self._apply_deal(deal, data)
        await db.flush()
        return deal

    async def delete_deal(self, db: AsyncSession, deal_id: str) -> None:
        deal = await self.get_deal(db, deal_id)
        deal.is_active = False
        await db.flush()
        logger.info("Deactivated deal %s", deal_id)

    @staticmethod
    def _apply_deal(deal: Deal, data: DealBase) -> None:
        label = data.discount or DEFAULT_DISCOUNT_LABEL
        deal.title = data.title
        deal.location = data.location
        deal.price = data.price
        deal.original_price = data.original_price
        deal.rating = Decimal(str(data.rating))
        deal.reviews_count = data.reviews
        deal.image = data.image
        deal.category = data.category
        deal.discount_label = label
        deal.discount_percentage = parse_discount_percentage(label)
        deal.time_left = data.time_left or DEFAULT_TIME_LEFT
        deal.description = data.description
        deal.valid_until = data.valid_until or date.today() + DEFAULT_DEAL_VALIDITY
        deal.is_hot = data.is_hot
        deal.is_ai_recommended = data.is_ai_recommended

        items: list[DealItem] = []
        for kind, lines in (
            ("feature", data.features),
            ("term", data.terms),
            ("included", data.included_services),
            ("excluded", data.excluded_services),
        ):
            cleaned = [line.strip() for line in lines if line and line.strip()]
            items.extend(DealItem(kind=kind, text=text, position=i) for i, text in enumerate(cleaned))
        deal.items = items

    @staticmethod
    def deal_view(deal: Deal) -> DealResponse:
        return DealResponse(
            id=deal.id,
            title=deal.title,
            location=deal.location,
            price=float(deal.price or 0),
            original_price=float(deal.original_price) if deal.original_price is not None else None,
            rating=float(deal.rating or 0),
            reviews=deal.reviews_count,
            image=deal.image,
            category=deal.category,
            discount=deal.discount_label,
            discount_percentage=deal.discount_percentage,
            time_left=deal.time_left,
            description=deal.description,
            valid_until=deal.valid_until,
            is_hot=deal.is_hot,
            is_ai_recommended=deal.is_ai_recommended,
            features=deal.items_of("feature"),
            terms=deal.items_of("term"),
            included_services=deal.items_of("included"),
            excluded_services=deal.items_of("excluded"),
            created_at=deal.created_at,
            updated_at=deal.updated_at,
        )


# Singleton instance
catalog_service = CatalogService()
