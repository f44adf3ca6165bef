"""Auth simulation endpoints - POST /api/auth/login, POST /api/auth/register, GET /api/auth/me.

Passwords are compared and stored in plain text: these routes are fixtures
for the demo UI, not a real identity service.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from backend.app.api.auth import get_current_user, issue_token
from backend.app.db.engine import get_store
from backend.app.db.repositories import UserRecord, UserRepository
from backend.app.db.storage import KeyValueStore
from backend.app.models.auth import AuthResponse, LoginRequest, RegisterRequest, UserPublic
from backend.app.utils.logging import StructuredEventLogger
from backend.app.utils.metrics import chat_metrics

router = APIRouter(prefix="/api/auth", tags=["auth"])
events = StructuredEventLogger("auth")


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    store: Annotated[KeyValueStore, Depends(get_store)],
) -> AuthResponse:
    """Log in by username or email.

    Returns:
        Token and public user fields

    Raises:
        HTTPException: 400 on missing fields, 401 on bad credentials
    """
    if not request.username or not request.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Missing username or password"
        )

    user = await UserRepository(store).find_by_login(request.username)

    if user is None or user.password != request.password:
        chat_metrics.inc_auth("login", "rejected")
        events.log_event("login", "rejected", username=request.username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    chat_metrics.inc_auth("login", "success")
    events.log_event("login", "success", username=user.username)

    return AuthResponse(
        message="Login successful",
        token=issue_token(user.username),
        user=UserPublic(username=user.username, email=user.email),
    )


@router.post("/register", response_model=AuthResponse)
async def register(
    request: RegisterRequest,
    store: Annotated[KeyValueStore, Depends(get_store)],
) -> AuthResponse:
    """Register a new user and log them in.

    Raises:
        HTTPException: 400 on missing fields, 409 if username or email is taken
    """
    if not request.username or not request.email or not request.password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing required fields")

    users = UserRepository(store)

    if await users.exists(request.username, request.email):
        chat_metrics.inc_auth("register", "conflict")
        events.log_event("register", "conflict", username=request.username)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User already exists")

    await users.create(
        UserRecord(username=request.username, email=request.email, password=request.password)
    )

    chat_metrics.inc_auth("register", "success")
    events.log_event("register", "success", username=request.username)

    return AuthResponse(
        message="User created successfully",
        token=issue_token(request.username),
        user=UserPublic(username=request.username, email=request.email),
    )


@router.get("/me", response_model=UserPublic)
async def me(user: Annotated[UserRecord, Depends(get_current_user)]) -> UserPublic:
    """Return the user named by the bearer token."""
    return UserPublic(username=user.username, email=user.email)
