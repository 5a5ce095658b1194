"""Common API dependencies."""

from __future__ import annotations

import uuid
from typing import Annotated
from collections.abc import AsyncGenerator

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.security import decode_access_token, verify_cron_secret
from app.db.session import get_session
from app.models.profile import Profile, ProfileRole
from app.services.email_service import Mailer, SmtpMailer

settings = get_settings()

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.api_v1_prefix}/auth/token")


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide an async database session."""
    async for session in get_session():
        yield session


def get_mailer() -> Mailer:
    """Outbound mail channel; overridden in tests."""
    return SmtpMailer()


async def get_current_profile(
    token: Annotated[str, Depends(oauth2_scheme)],
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> Profile:
    """Authenticate request via bearer token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_access_token(token)
    except JWTError as exc:  # pragma: no cover - handled as HTTP 401
        raise credentials_exception from exc

    subject = payload.get("sub")
    if subject is None:
        raise credentials_exception

    try:
        profile_id = uuid.UUID(subject)
    except (ValueError, TypeError) as exc:
        raise credentials_exception from exc

    profile = await session.get(Profile, profile_id)
    if profile is None:
        raise credentials_exception
    return profile


async def get_current_owner(
    current_profile: Annotated[Profile, Depends(get_current_profile)],
) -> Profile:
    """Horse data is managed by owners only."""
    if current_profile.role != ProfileRole.OWNER:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Owner permissions required",
        )
    return current_profile


async def require_cron_secret(
    x_cron_secret: Annotated[str | None, Header()] = None,
) -> None:
    """Gate the scheduler endpoints behind the shared secret header."""
    if not verify_cron_secret(x_cron_secret, get_settings().cron_secret):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized"
        )
