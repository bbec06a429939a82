#!/usr/bin/env python3
"""Create or reset an admin panel account."""

import asyncio

from sqlalchemy import or_, select

from hargeisa_vibes.core.security import get_password_hash
from hargeisa_vibes.database import get_db_context
from hargeisa_vibes.models.user import User
from hargeisa_vibes.utils.identifiers import generate_id


async def create_admin(
    username: str = "admin",
    email: str = "admin@hargeisavibes.com",
    password: str = "Admin@123",
    role: str = "admin",
) -> None:
    """Create an admin user, or reset the password and role of an existing one."""
    async with get_db_context() as session:
        result = await session.execute(
            select(User).where(or_(User.username == username, User.email == email))
        )
        existing = result.scalars().first()

        if existing:
            existing.password_hash = get_password_hash(password)
            existing.role = role
            existing.is_active = True
            existing.is_deleted = False
            print(f"Updated existing admin user: {existing.username}")
        else:
            session.add(
                User(
                    id=generate_id("user"),
                    username=username,
                    email=email,
                    password_hash=get_password_hash(password),
                    first_name="Hargeisa",
                    last_name="Admin",
                    role=role,
                    is_active=True,
                    is_verified=True,
                    is_deleted=False,
                )
            )
            print(f"Created admin user: {username}")

        print(f"Email: {email}")
        print(f"Role: {role}")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Create an admin panel user")
    parser.add_argument("--username", default="admin", help="Admin username")
    parser.add_argument("--email", default="admin@hargeisavibes.com", help="Admin email")
    parser.add_argument("--password", default="Admin@123", help="Admin password")
    parser.add_argument(
        "--role",
        default="admin",
        choices=["moderator", "admin", "super_admin"],
        help="Admin panel role",
    )

    args = parser.parse_args()

    asyncio.run(
        create_admin(
            username=args.username,
            email=args.email,
            password=args.password,
            role=args.role,
        )
    )
