"""Password hashing and bearer tokens for household members."""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import get_settings
from app.domain.entities import User

TOKEN_ALGORITHM = "HS256"

pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
    pbkdf2_sha256__rounds=310_000,
)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user: User, expires_delta: timedelta | None = None) -> str:
    """Issue a token naming ``user`` by email, with role and family claims.

    The same token authenticates REST calls and the event stream, where it may
    travel as a query parameter.
    """

    settings = get_settings()
    issued_at = datetime.now(timezone.utc)
    claims = {
        "sub": user.email,
        "role": user.role,
        "family_id": user.family_id,
        "iat": issued_at,
        "exp": issued_at
        + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes)),
    }
    return jwt.encode(claims, settings.secret_key, algorithm=TOKEN_ALGORITHM)


def decode_access_token(token: str) -> str:
    """Return the email a valid token was issued for; raise ``ValueError`` otherwise."""

    try:
        payload = jwt.decode(token, get_settings().secret_key, algorithms=[TOKEN_ALGORITHM])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise ValueError("Token does not name a member")
    return subject
