"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from hargeisa_vibes.api.v1 import (
    admin,
    auth,
    bookings,
    deals,
    paypal,
    services,
    system,
    user,
    users,
)

api_router = APIRouter()

# Health and diagnostics
api_router.include_router(system.router, tags=["System"])

# Authentication
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])

# Signed-in customer
api_router.include_router(user.router, prefix="/user", tags=["User"])

# Catalog
api_router.include_router(services.router, prefix="/services", tags=["Services"])
api_router.include_router(deals.router, prefix="/deals", tags=["Deals"])

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])

# Payments
api_router.include_router(paypal.router, prefix="/paypal", tags=["PayPal"])

# Admin
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
