"""Use case for logging a household member in."""

from enum import Enum, auto

from sqlalchemy.orm import Session

from app.domain.entities import User
from app.infrastructure.repositories import UserRepository
from app.infrastructure.security import verify_password

from .create_user import normalize_email


class AuthenticationStatus(Enum):
    SUCCESS = auto()
    INVALID_CREDENTIALS = auto()
    INACTIVE = auto()


def authenticate_user(
    session: Session, email: str, password: str
) -> tuple[User | None, AuthenticationStatus]:
    """Check ``email`` and ``password``.

    An inactive member with the right password is reported as ``INACTIVE`` so
    the login route can answer 403 instead of 401.
    """

    user = UserRepository(session).get_by_email(normalize_email(email))
    if user is None or not verify_password(password, user.password):
        return None, AuthenticationStatus.INVALID_CREDENTIALS
    if not user.is_active:
        return user, AuthenticationStatus.INACTIVE
    return user, AuthenticationStatus.SUCCESS
