"""Google OAuth 2.0 authorization-code flow."""

from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from gallery.config import (
    GOOGLE_CLIENT_ID,
    GOOGLE_CLIENT_SECRET,
    GOOGLE_REDIRECT_URI,
    OAUTH_TIMEOUT_SECONDS,
)
from gallery.schemas.auth import GoogleUser

AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
SCOPES = "openid email profile"


class OAuthError(Exception):
    """Google rejected the request or returned something unusable."""


def is_configured() -> bool:
    return bool(GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET)


def build_authorization_url(state: str) -> str:
    params = {
        "client_id": GOOGLE_CLIENT_ID,
        "redirect_uri": GOOGLE_REDIRECT_URI,
        "response_type": "code",
        "scope": SCOPES,
        "state": state,
        "prompt": "select_account",
    }
    return f"{AUTHORIZE_URL}?{urlencode(params)}"


async def exchange_code(code: str, transport: httpx.AsyncBaseTransport | None = None) -> str:
    """Exchange an authorization code for an access token."""
    data = {
        "code": code,
        "client_id": GOOGLE_CLIENT_ID,
        "client_secret": GOOGLE_CLIENT_SECRET,
        "redirect_uri": GOOGLE_REDIRECT_URI,
        "grant_type": "authorization_code",
    }
    try:
        async with httpx.AsyncClient(timeout=OAUTH_TIMEOUT_SECONDS, transport=transport) as client:
            resp = await client.post(TOKEN_URL, data=data, headers={"Accept": "application/json"})
            resp.raise_for_status()
            payload = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        raise OAuthError(f"Token exchange failed: {e}") from e
    access_token = payload.get("access_token") if isinstance(payload, dict) else None
    if not access_token:
        raise OAuthError("Token response has no access_token")
    return access_token


async def fetch_user_info(
    access_token: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> GoogleUser:
    try:
        async with httpx.AsyncClient(timeout=OAUTH_TIMEOUT_SECONDS, transport=transport) as client:
            resp = await client.get(
                USERINFO_URL,
                headers={"Authorization": f"Bearer {access_token}"},
            )
            resp.raise_for_status()
            return GoogleUser.model_validate(resp.json())
    except (httpx.HTTPError, ValidationError, ValueError) as e:
        raise OAuthError(f"Userinfo request failed: {e}") from e
