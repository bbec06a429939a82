"""Service and deal Pydantic schemas."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import Field, field_validator

from hargeisa_vibes.domain.pricing import parse_price
from hargeisa_vibes.schemas.common import CamelModel


class ServiceBase(CamelModel):
    """Base service schema."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    category: str = Field(..., min_length=1, max_length=100)
    price: Decimal = Decimal("0.00")
    rating: float = Field(default=0, ge=0, le=5)
    image: str | None = Field(None, max_length=500)
    location: str | None = Field(None, max_length=255)
    features: list[str] = Field(default_factory=list)
    is_popular: bool = False
    is_new: bool = False

    @field_validator("price", mode="before")
    @classmethod
    def parse_display_price(cls, v):
        return parse_price(v)

    @field_validator("rating", mode="before")
    @classmethod
    def default_rating(cls, v):
        return 0 if v in (None, "") else v


class ServiceCreate(ServiceBase):
    """Schema for creating a service."""


class ServiceUpdate(ServiceBase):
    """Schema for replacing a service."""


class ServiceResponse(CamelModel):
    """Schema for service response."""

    id: str
    title: str
    description: str | None = None
    category: str
    price: float
    rating: float
    image: str | None = None
    location: str | None = None
    features: list[str]
    is_popular: bool
    is_new: bool
    created_at: datetime
    updated_at: datetime


class DealBase(CamelModel):
    """Base deal schema."""

    title: str = Field(..., min_length=1, max_length=255)
    location: str | None = Field(None, max_length=255)
    price: Decimal = Decimal("0.00")
    original_price: Decimal | None = None
    rating: float = Field(default=0, ge=0, le=5)
    reviews: int = Field(default=0, ge=0)
    image: str | None = Field(None, max_length=500)
    category: str = Field(..., min_length=1, max_length=100)
    discount: str | None = Field(None, max_length=50)
    time_left: str | None = Field(None, max_length=50)
    description: str | None = None
    valid_until: date | None = None
    is_hot: bool = False
    is_ai_recommended: bool = False
    features: list[str] = Field(default_factory=list)
    terms: list[str] = Field(default_factory=list)
    included_services: list[str] = Field(default_factory=list)
    excluded_services: list[str] = Field(default_factory=list)

    @field_validator("price", mode="before")
    @classmethod
    def parse_display_price(cls, v):
        return parse_price(v)

    @field_validator("original_price", mode="before")
    @classmethod
    def parse_original_price(cls, v):
        if v in (None, ""):
            return None
        return parse_price(v)

    @field_validator("valid_until", "time_left", "discount", mode="before")
    @classmethod
    def blank_is_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class DealCreate(DealBase):
    """Schema for creating a deal."""


class DealUpdate(DealBase):
    """Schema for replacing a deal."""


class DealResponse(CamelModel):
    """Schema for deal response."""

    id: str
    title: str
    location: str | None = None
    price: float
    original_price: float | None = None
    rating: float
    reviews: int
    image: str | None = None
    category: str
    discount: str
    discount_percentage: int
    time_left: str
    description: str | None = None
    valid_until: date | None = None
    is_hot: bool
    is_ai_recommended: bool
    features: list[str]
    terms: list[str]
    included_services: list[str]
    excluded_services: list[str]
    created_at: datetime
    updated_at: datetime


class CatalogCreatedResponse(CamelModel):
    """Schema for service/deal creation acknowledgement."""

    message: str
    id: str
