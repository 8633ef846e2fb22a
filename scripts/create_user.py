"""Utility script to create a household member in the database."""

from __future__ import annotations

import argparse
from getpass import getpass

from sqlalchemy.exc import SQLAlchemyError

from app.application.use_cases.users.create_user import create_user
from app.domain.entities import ROLE_CHILD, ROLE_PARENT
from app.infrastructure.database import SessionLocal, initialize_database


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for user creation."""

    parser = argparse.ArgumentParser(
        description="Create a household member for the notification service.",
    )
    parser.add_argument("--name", default="Parent", help="Display name (default: Parent)")
    parser.add_argument(
        "--email",
        default="parent@example.com",
        help="Login email (default: parent@example.com)",
    )
    parser.add_argument(
        "--password",
        default=None,
        help="Password. Prompted interactively when omitted.",
    )
    parser.add_argument(
        "--role",
        choices=[ROLE_PARENT, ROLE_CHILD],
        default=ROLE_PARENT,
        help="Household role (default: parent)",
    )
    parser.add_argument(
        "--family-id",
        type=int,
        default=None,
        help="Family the member belongs to (optional)",
    )
    return parser.parse_args()


def main() -> None:
    """Create a user using the provided command line arguments."""

    args = parse_args()

    password = args.password or getpass("Password: ")
    if not password:
        raise SystemExit("A password is required.")

    initialize_database()

    session = SessionLocal()
    try:
        user = create_user(
            session,
            name=args.name,
            email=args.email,
            password=password,
            role=args.role,
            family_id=args.family_id,
        )
    except ValueError as exc:
        session.rollback()
        raise SystemExit(f"Could not create the user: {exc}") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not save the user: {exc}") from exc
    else:
        print(
            "User created:\n"
            f"  ID: {user.id}\n"
            f"  Name: {user.name}\n"
            f"  Email: {user.email}\n"
            f"  Role: {user.role}\n"
            f"  Family: {user.family_id if user.family_id is not None else '-'}"
        )
    finally:
        session.close()


if __name__ == "__main__":
    main()
