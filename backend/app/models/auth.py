"""Auth request/response models.

Request fields are optional so missing values can be reported as 400 with a
readable message instead of a validation error list.
"""

from pydantic import BaseModel


class LoginRequest(BaseModel):
    """Body for POST /api/auth/login. ``username`` may also be an email."""

    username: str | None = None
    password: str | None = None


class RegisterRequest(BaseModel):
    """Body for POST /api/auth/register."""

    username: str | None = None
    email: str | None = None
    password: str | None = None


class UserPublic(BaseModel):
    """User fields safe to return to clients."""

    username: str
    email: str


class AuthResponse(BaseModel):
    """Response for login and register."""

    message: str
    token: str
    user: UserPublic
