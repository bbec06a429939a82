"""Core utilities and security modules."""

from hargeisa_vibes.core.exceptions import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    RateLimitExceeded,
    UpstreamError,
    ValidationError,
)
from hargeisa_vibes.core.security import (
    create_access_token,
    create_admin_session_token,
    get_password_hash,
    verify_password,
    verify_token,
)

__all__ = [
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "NotFoundError",
    "RateLimitExceeded",
    "UpstreamError",
    "ValidationError",
    "create_access_token",
    "create_admin_session_token",
    "get_password_hash",
    "verify_password",
    "verify_token",
]
