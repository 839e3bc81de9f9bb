"""Auth and session schemas."""

from datetime import datetime

from pydantic import BaseModel, EmailStr


class GoogleUser(BaseModel):
    """Profile returned by Google's OpenID userinfo endpoint."""

    email: EmailStr | None = None
    email_verified: bool = False
    name: str | None = None
    picture: str | None = None


class SessionUser(BaseModel):
    email: EmailStr
    name: str | None = None
    picture: str | None = None
    loggedInAt: datetime


class LogoutResponse(BaseModel):
    success: bool = True
