"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.domain.entities import User
from app.infrastructure.database import SessionLocal, get_db
from app.infrastructure.notifications import ConnectionRegistry, NotificationDispatcher
from app.infrastructure.repositories import UserRepository
from app.infrastructure.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def _credentials_error(detail: str = "Invalid credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_current_user(token: str, db: Session) -> User:
    """Resolve the authenticated, active user for the provided token."""

    try:
        email = decode_access_token(token)
    except ValueError as exc:
        raise _credentials_error() from exc

    user = UserRepository(db).get_by_email(email)
    if user is None:
        raise _credentials_error("User not found")
    if not user.is_active:
        raise _credentials_error("Inactive user")
    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Return the authenticated user from the bearer token."""

    return resolve_current_user(token, db)


def get_stream_user(
    request: Request,
    token: str | None = Query(default=None, description="Access token for EventSource clients"),
) -> User:
    """Authenticate a streaming request from its header or ``token`` query parameter.

    Uses a short-lived session so that no database connection is held for the
    lifetime of the stream.
    """

    credentials = token
    authorization = request.headers.get("Authorization", "")
    scheme, _, header_token = authorization.partition(" ")
    if scheme.lower() == "bearer" and header_token:
        credentials = header_token
    if not credentials:
        raise _credentials_error("Not authenticated")

    session = SessionLocal()
    try:
        return resolve_current_user(credentials, session)
    finally:
        session.close()


def get_connection_registry(request: Request) -> ConnectionRegistry:
    return request.app.state.connection_registry


def get_notification_dispatcher(request: Request) -> NotificationDispatcher:
    return request.app.state.notification_dispatcher
