"""Auth: Google sign-in restricted to the allow-list, session, logout."""

import logging
import secrets
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse, Response

from gallery.config import (
    LOGIN_REDIRECT_PATH,
    SESSION_COOKIE_NAME,
    SESSION_COOKIE_SECURE,
    SESSION_EXPIRE_MINUTES,
)
from gallery.core import oauth
from gallery.core.auth import create_session_token, get_current_user, is_email_allowed
from gallery.schemas.auth import LogoutResponse, SessionUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

STATE_COOKIE_NAME = "gallery_oauth_state"
STATE_MAX_AGE_SECONDS = 600
NOT_ALLOWED_DETAIL = "Unauthorized: Your email is not on the guardian list."


def _start_login() -> RedirectResponse:
    state = secrets.token_urlsafe(32)
    response = RedirectResponse(oauth.build_authorization_url(state), status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        STATE_COOKIE_NAME,
        state,
        max_age=STATE_MAX_AGE_SECONDS,
        httponly=True,
        secure=SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return response


@router.get("/google")
async def google_login(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
) -> RedirectResponse:
    """
    Sign in with Google. Without a code, redirects to Google's consent screen;
    as the OAuth callback, checks the email against the allow-list and sets the session.
    """
    if not oauth.is_configured():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Google sign-in is not configured",
        )
    if error:
        logger.warning("Google sign-in returned error: %s", error)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Google sign-in failed")
    if not code:
        return _start_login()

    expected_state = request.cookies.get(STATE_COOKIE_NAME)
    if not state or not expected_state or not secrets.compare_digest(state, expected_state):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid OAuth state")

    try:
        access_token = await oauth.exchange_code(code)
        user = await oauth.fetch_user_info(access_token)
    except oauth.OAuthError as e:
        logger.warning("Google sign-in failed: %s", e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Google sign-in failed") from e

    if not user.email or not user.email_verified or not is_email_allowed(user.email):
        logger.warning("Rejected sign-in for %s", user.email or "<no email>")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=NOT_ALLOWED_DETAIL)

    token = create_session_token(user.email, name=user.name, picture=user.picture)
    response = RedirectResponse(LOGIN_REDIRECT_PATH, status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=SESSION_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    response.delete_cookie(STATE_COOKIE_NAME)
    logger.info("Signed in %s", user.email)
    return response


@router.get("/session", response_model=SessionUser)
async def get_session(user: Annotated[SessionUser, Depends(get_current_user)]) -> SessionUser:
    """Get the signed-in user."""
    return user


@router.post("/logout", response_model=LogoutResponse)
async def logout(response: Response) -> LogoutResponse:
    response.delete_cookie(SESSION_COOKIE_NAME)
    return LogoutResponse()
