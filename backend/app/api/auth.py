"""Demo token handling.

Tokens are base64("<username>:<epoch millis>") and are never signed; a real
deployment would issue JWTs instead.
"""

import base64
import binascii
import time
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from backend.app.db.engine import get_store
from backend.app.db.repositories import UserRecord, UserRepository
from backend.app.db.storage import KeyValueStore


def issue_token(username: str, now_ms: int | None = None) -> str:
    """Issue a demo session token for a user."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return base64.b64encode(f"{username}:{now_ms}".encode()).decode("ascii")


def parse_token(token: str) -> str:
    """Extract the username from a demo token.

    Raises:
        ValueError: If the token is not a well-formed demo token
    """
    try:
        decoded = base64.b64decode(token.encode("ascii"), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeError) as e:
        raise ValueError("Token is not valid base64") from e

    username, sep, issued_at = decoded.rpartition(":")
    if not sep or not username or not issued_at.isdigit():
        raise ValueError("Token payload must be <username>:<epoch millis>")

    return username


async def get_current_user(
    store: Annotated[KeyValueStore, Depends(get_store)],
    authorization: Annotated[str | None, Header()] = None,
) -> UserRecord:
    """Resolve the user from a "Bearer <token>" authorization header.

    Raises:
        HTTPException: 401 if the header is missing, malformed, or names an unknown user
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = authorization[7:]  # Strip "Bearer "

    try:
        username = parse_token(token)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    user = await UserRepository(store).get(username)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown user",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user
