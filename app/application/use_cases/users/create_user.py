"""Use case for creating household members."""

from sqlalchemy.orm import Session

from app.domain.entities import ROLE_CHILD, ROLE_PARENT, User
from app.infrastructure.repositories import UserRepository
from app.infrastructure.security import get_password_hash

_ALLOWED_ROLES = (ROLE_PARENT, ROLE_CHILD)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def create_user(
    session: Session,
    *,
    name: str,
    email: str,
    password: str,
    role: str = ROLE_CHILD,
    family_id: int | None = None,
) -> User:
    """Create a parent or child member; emails are unique and case-insensitive."""

    role_alias = role.strip().lower()
    if role_alias not in _ALLOWED_ROLES:
        raise ValueError(f"Role must be one of: {', '.join(_ALLOWED_ROLES)}")

    address = normalize_email(email)
    repository = UserRepository(session)
    if repository.get_by_email(address):
        raise ValueError("Email address is already registered")

    return repository.create(
        User(
            id=None,
            name=name,
            email=address,
            password=get_password_hash(password),
            role=role_alias,
            family_id=family_id,
            is_active=True,
        )
    )
