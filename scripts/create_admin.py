#!/usr/bin/env python3
"""
Create an administrator account.

Usage:
    python scripts/create_admin.py <username> <email>
    python scripts/create_admin.py <username> <email> --first-name Jane --last-name Doe

The password is read from the ADMIN_PASSWORD environment variable or
prompted for interactively.
"""

import argparse
import asyncio
import getpass
import os
import sys

import dotenv

dotenv.load_dotenv()

from cafe_backend.core.exceptions import ConflictException  # noqa: E402
from cafe_backend.database import AsyncSessionLocal, engine  # noqa: E402
from cafe_backend.schemas.staff import PASSWORD_MIN_LENGTH  # noqa: E402
from cafe_backend.services.admin_service import AdminService  # noqa: E402


async def create_admin(
    username: str,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
) -> dict:
    """Create the administrator and release the engine."""
    try:
        async with AsyncSessionLocal() as session:
            return await AdminService.create_admin(
                session,
                username=username,
                email=email,
                password=password,
                first_name=first_name,
                last_name=last_name,
            )
    finally:
        await engine.dispose()


def main() -> int:
    """Parse arguments and create the administrator."""
    parser = argparse.ArgumentParser(description="Create an administrator account")
    parser.add_argument("username", help="Login username")
    parser.add_argument("email", help="Email address")
    parser.add_argument("--first-name", default="Admin", help="First name")
    parser.add_argument("--last-name", default="User", help="Last name")
    args = parser.parse_args()

    password = os.getenv("ADMIN_PASSWORD") or getpass.getpass("Password: ")
    if len(password) < PASSWORD_MIN_LENGTH:
        print(
            f"Error: password must be at least {PASSWORD_MIN_LENGTH} characters long",
            file=sys.stderr,
        )
        return 1

    try:
        admin = asyncio.run(
            create_admin(args.username, args.email, password, args.first_name, args.last_name)
        )
    except ConflictException as e:
        print(f"✗ {e.message}", file=sys.stderr)
        return 1

    print(f"✓ Administrator '{admin['username']}' created (id: {admin['id']})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
