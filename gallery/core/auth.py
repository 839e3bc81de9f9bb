"""Email allow-list and session token helpers."""

from datetime import datetime, timedelta, timezone
from typing import Annotated, Iterable

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import ValidationError

from gallery.config import (
    ALLOWED_EMAILS,
    SESSION_ALGORITHM,
    SESSION_COOKIE_NAME,
    SESSION_EXPIRE_MINUTES,
    SESSION_SECRET,
)
from gallery.schemas.auth import SessionUser

security = HTTPBearer(auto_error=False)


def parse_allowed_emails(raw: str | Iterable[str] | None) -> frozenset[str]:
    """Normalize a comma-separated list (or iterable) of emails."""
    if not raw:
        return frozenset()
    items = raw.split(",") if isinstance(raw, str) else raw
    return frozenset(e.strip().lower() for e in items if e and e.strip())


def is_email_allowed(email: str | None, allowed: Iterable[str] | None = None) -> bool:
    if not email:
        return False
    allowed_emails = parse_allowed_emails(ALLOWED_EMAILS if allowed is None else allowed)
    return email.strip().lower() in allowed_emails


def create_session_token(
    email: str,
    name: str | None = None,
    picture: str | None = None,
    now: datetime | None = None,
) -> str:
    logged_in_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": email,
        "name": name,
        "picture": picture,
        "iat": logged_in_at,
        "exp": logged_in_at + timedelta(minutes=SESSION_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, SESSION_SECRET, algorithm=SESSION_ALGORITHM)


def decode_session_token(token: str) -> SessionUser | None:
    try:
        payload = jwt.decode(token, SESSION_SECRET, algorithms=[SESSION_ALGORITHM])
        return SessionUser(
            email=payload["sub"],
            name=payload.get("name"),
            picture=payload.get("picture"),
            loggedInAt=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
        )
    except (JWTError, KeyError, TypeError, ValidationError):
        return None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> SessionUser:
    """Session from the cookie, falling back to a Bearer token."""
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token and credentials is not None:
        token = credentials.credentials
    if not token:
        raise _unauthorized("Not authenticated")
    user = decode_session_token(token)
    if user is None:
        raise _unauthorized("Invalid or expired session")
    # Removing an email from the allow-list revokes its sessions
    if not is_email_allowed(user.email):
        raise _unauthorized("Unauthorized: Your email is not on the guardian list.")
    return user
