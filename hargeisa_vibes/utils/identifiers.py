"""Record identifier and username generation utilities."""

import random
import string
import time

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession


def generate_id(prefix: str) -> str:
    """Generate a prefixed record ID.

    Args:
        prefix: Record kind, e.g. ``booking``, ``service``, ``deal``

    Returns:
        str: ID like 'booking-1718000000000-k3m9q2'
    """
    millis = int(time.time() * 1000)
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=6))
    return f"{prefix}-{millis}-{suffix}"


def generate_reference(prefix: str) -> str:
    """Generate an uppercase reference such as 'DEMO-1718000000000-A3B7'."""
    millis = int(time.time() * 1000)
    suffix = "".join(random.choices(string.ascii_uppercase + string.digits, k=4))
    return f"{prefix}-{millis}-{suffix}"


async def generate_username(db: AsyncSession, email: str) -> str:
    """Generate a unique username from the local part of an email address.

    Args:
        db: Database session for uniqueness check
        email: Address the account registers with

    Returns:
        str: Username like 'amina4821'
    """
    from hargeisa_vibes.models.user import User

    base = "".join(c for c in email.split("@", 1)[0].lower() if c.isalnum() or c in "._") or "user"
    base = base[:40]

    while True:
        username = f"{base}{random.randint(1000, 9999)}"
        result = await db.execute(select(User.id).where(User.username == username))
        if result.scalar_one_or_none() is None:
            return username
