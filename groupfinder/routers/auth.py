"""
Authentication Router

Endpoints:
- POST /auth/register - Create an account
- POST /auth/login - OAuth2 password form -> JWT access token
- POST /auth/refresh - Refresh cookie -> new access token
- GET /auth/me - The authenticated user

Security:
=========
- Passwords are hashed with bcrypt before storage and never logged
- Access tokens are short-lived; the refresh token travels in an
  httpOnly cookie
"""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy import select

from groupfinder.config import get_settings
from groupfinder.dependencies import ActiveUser, DbSession
from groupfinder.models.user import User, UserRole
from groupfinder.schemas.user import TokenResponse, UserCreate, UserResponse
from groupfinder.services.rate_limiter import limiter
from groupfinder.services.security import (
    create_access_token,
    create_refresh_token,
    hash_password,
    verify_password,
    verify_token_type,
)

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        401: {"description": "Unauthorized"},
        409: {"description": "Conflict (email/username already exists)"},
    },
)


def _token_response(user: User) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token({"sub": str(user.id)}),
        token_type="bearer",
        expires_in=settings.access_token_expire_minutes * 60,
    )


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
@limiter.limit("5/minute")
def register(
    request: Request,
    user_data: UserCreate,
    db: DbSession,
) -> UserResponse:
    """Create an account. Email and username must be unused."""
    if db.execute(select(User).where(User.email == user_data.email)).scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )

    if db.execute(select(User).where(User.username == user_data.username)).scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username already taken",
        )

    user = User(
        email=user_data.email,
        username=user_data.username,
        display_name=user_data.display_name,
        hashed_password=hash_password(user_data.password),
        role=UserRole.USER.value,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"New user registered: {user.email}")
    return UserResponse.model_validate(user)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login with email and password",
    description="""
    OAuth2 password flow. Put the email address in the `username` field.

    The refresh token is set as an httpOnly cookie.
    """,
)
@limiter.limit("10/minute")
def login(
    request: Request,
    response: Response,
    db: DbSession,
    form_data: OAuth2PasswordRequestForm = Depends(),
) -> TokenResponse:
    email = form_data.username
    user = db.execute(select(User).where(User.email == email)).scalar_one_or_none()

    if user is None or not verify_password(form_data.password, user.hashed_password):
        logger.warning(f"Login failed for {email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        logger.warning(f"Login failed: inactive account {email}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive",
        )

    user.last_login_at = datetime.now(UTC)
    db.commit()

    response.set_cookie(
        key="refresh_token",
        value=create_refresh_token({"sub": str(user.id)}),
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=settings.refresh_token_expire_days * 24 * 60 * 60,
    )

    logger.info(f"User logged in: {user.email}")
    return _token_response(user)


@router.post(
    "/refresh",
    response_model=TokenResponse,
    summary="Refresh access token",
)
def refresh_token(request: Request, db: DbSession) -> TokenResponse:
    """Exchange the refresh token cookie for a new access token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired refresh token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    token = request.cookies.get("refresh_token")
    payload = verify_token_type(token, "refresh") if token else None
    if payload is None or not str(payload.get("sub", "")).isdigit():
        raise credentials_exception

    user = db.get(User, int(payload["sub"]))
    if user is None:
        raise credentials_exception
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive",
        )

    return _token_response(user)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user",
)
def get_me(current_user: ActiveUser) -> UserResponse:
    return UserResponse.model_validate(current_user)
