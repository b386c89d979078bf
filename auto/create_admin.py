#!/usr/bin/env python3
"""
Create Admin Author Script.

Creates an admin author directly in the database and prints an access
token for it. Useful for initial setup when no admin exists yet.

Usage:
    uv run python auto/create_admin.py
    uv run python auto/create_admin.py --email admin@example.org --first-name Amara

Environment Variables:
    ADMIN_EMAIL: Admin email (default: admin@example.org)
    ADMIN_FIRST_NAME: First name (default: Admin)
    ADMIN_LAST_NAME: Last name (default: User)
"""

from argparse import ArgumentParser, Namespace, RawDescriptionHelpFormatter
from asyncio import run as asyncio_run
from dataclasses import dataclass
from datetime import timedelta
from os import environ
from sys import exit as sys_exit
from typing import cast

from sqlmodel import Column, select

from charity_cms.db import close_db, transaction
from charity_cms.managers import create_access_token
from charity_cms.models import AuthorDB


@dataclass(frozen=True)
class AdminAuthorData:
    """
    Admin author creation data.

    Attributes
    ----------
    email : str
        Admin email address.
    first_name : str
        Admin first name.
    last_name : str
        Admin last name.
    """

    email: str
    first_name: str
    last_name: str


def parse_args() -> Namespace:
    parser = ArgumentParser(
        description="Create an admin author and print an access token",
        formatter_class=RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--email", default=environ.get("ADMIN_EMAIL", "admin@example.org"))
    parser.add_argument("--first-name", default=environ.get("ADMIN_FIRST_NAME", "Admin"))
    parser.add_argument("--last-name", default=environ.get("ADMIN_LAST_NAME", "User"))
    parser.add_argument(
        "--token-days",
        type=int,
        default=7,
        help="Lifetime of the printed access token in days (default: 7)",
    )
    return parser.parse_args()


async def create_admin_author(data: AdminAuthorData) -> AuthorDB:
    """
    Create an admin author in the database.

    Parameters
    ----------
    data : AdminAuthorData
        Admin author data container.

    Returns
    -------
    AuthorDB
        Created admin author.

    Raises
    ------
    ValueError
        If an author with the email already exists.
    """
    async with transaction() as session:
        email_clause = cast(Column[bool], AuthorDB.email == data.email)
        existing = await session.execute(select(AuthorDB).where(email_clause))
        if existing.scalar_one_or_none():
            msg = f"Author with email '{data.email}' already exists"
            raise ValueError(msg)

        admin = AuthorDB(
            email=data.email,
            first_name=data.first_name,
            last_name=data.last_name,
            role="admin",
        )
        session.add(admin)
        await session.commit()
        await session.refresh(admin)
        return admin


async def run(args: Namespace) -> int:
    data = AdminAuthorData(
        email=args.email,
        first_name=args.first_name,
        last_name=args.last_name,
    )
    try:
        admin = await create_admin_author(data)
    except ValueError as e:
        print(f"❌ {e}")
        return 1
    finally:
        await close_db()

    token = create_access_token(
        user_id=cast(int, admin.id),
        role="admin",
        expires_delta=timedelta(days=args.token_days),
    )

    print("\n✅ Admin author created successfully!")
    print(f"   ID:    {admin.id}")
    print(f"   Email: {admin.email}")
    print(f"   Name:  {admin.display_name}")
    print("\nAccess token:")
    print(f"  {token}")
    print("\nCreate a post with:")
    print("  curl -X POST 'http://localhost:8000/posts' \\")
    print(f"    -H 'Authorization: Bearer {token[:16]}...' \\")
    print("    -H 'Content-Type: application/json' \\")
    print('    -d \'{"title": "Hello", "content": "First post"}\'')
    return 0


def main() -> None:
    sys_exit(asyncio_run(run(parse_args())))


if __name__ == "__main__":
    main()
