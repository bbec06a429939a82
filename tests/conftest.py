import os

# Settings are read once at import; point them at test values first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ENVIRONMENT"] = "development"
os.environ["PAYPAL_CLIENT_ID"] = ""
os.environ["PAYPAL_CLIENT_SECRET"] = ""
os.environ["SENDGRID_API_KEY"] = ""
os.environ["SMTP_USER"] = ""
os.environ["SMTP_PASSWORD"] = ""
os.environ["JWT_SECRET_KEY"] = "test-secret"

from datetime import date
from decimal import Decimal

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from hargeisa_vibes import models  # noqa: F401
from hargeisa_vibes.core.security import create_access_token, create_admin_session_token, get_password_hash
from hargeisa_vibes.database import Base, get_db
from hargeisa_vibes.main import create_application
from hargeisa_vibes.models.deal import Deal, DealItem
from hargeisa_vibes.models.service import Service, ServiceFeature
from hargeisa_vibes.models.user import User
from hargeisa_vibes.services.booking_service import booking_service


class FakeReceiptSender:
    """Records receipts instead of mailing them."""

    def __init__(self, result: bool = True, error: Exception | None = None):
        self.result = result
        self.error = error
        self.sent: list[tuple[str, str]] = []

    async def send_booking_receipt(self, booking, service_title: str) -> bool:
        if self.error:
            raise self.error
        self.sent.append((booking.id, service_title))
        return self.result


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def receipts(monkeypatch):
    sender = FakeReceiptSender()
    monkeypatch.setattr(booking_service, "receipt_sender", sender)
    return sender


@pytest.fixture
async def client(session_maker, receipts):
    app = create_application()

    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ==================== DATA ====================


@pytest.fixture
async def service(db):
    service = Service(
        id="service-1",
        title="Laas Geel Cave Paintings Tour",
        category="tours",
        price=Decimal("45.00"),
        rating=Decimal("4.80"),
        location="Laas Geel",
        is_popular=True,
        is_new=False,
        is_active=True,
        features=[ServiceFeature(feature="Guide", position=0)],
    )
    db.add(service)
    await db.commit()
    return service


@pytest.fixture
async def deal(db):
    deal = Deal(
        id="deal-42",
        title="Berbera Beach Weekend",
        category="beach",
        price=Decimal("120.00"),
        original_price=Decimal("150.00"),
        rating=Decimal("4.50"),
        reviews_count=12,
        discount_label="20% OFF",
        discount_percentage=20,
        time_left="3 days left",
        valid_until=date(2030, 1, 1),
        is_hot=True,
        is_ai_recommended=False,
        is_active=True,
        items=[
            DealItem(kind="feature", text="Hotel", position=0),
            DealItem(kind="term", text="Non-refundable", position=0),
        ],
    )
    db.add(deal)
    await db.commit()
    return deal


async def make_user(
    db, username: str, email: str, role: str, password: str = "secret123", is_active: bool = True
) -> User:
    user = User(
        id=f"user-{username}",
        username=username,
        email=email,
        password_hash=get_password_hash(password),
        first_name=username.capitalize(),
        last_name="Test",
        role=role,
        is_active=is_active,
        is_verified=True,
        is_deleted=False,
    )
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
async def customer(db):
    return await make_user(db, "amina", "amina@example.com", "customer")


@pytest.fixture
async def admin(db):
    return await make_user(db, "admin", "admin@example.com", "admin")


@pytest.fixture
async def moderator(db):
    return await make_user(db, "mod", "mod@example.com", "moderator")


@pytest.fixture
def customer_headers(customer):
    token = create_access_token({"sub": customer.id, "email": customer.email, "role": customer.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin):
    token = create_admin_session_token({"sub": admin.id, "role": admin.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def moderator_headers(moderator):
    token = create_admin_session_token({"sub": moderator.id, "role": moderator.role})
    return {"Authorization": f"Bearer {token}"}
