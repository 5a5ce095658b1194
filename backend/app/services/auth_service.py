"""Authentication service helpers."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import create_access_token, verify_password
from app.models.profile import Profile


async def get_profile_by_email(session: AsyncSession, *, email: str) -> Profile | None:
    result = await session.execute(select(Profile).where(Profile.email == email))
    return result.scalar_one_or_none()


async def authenticate_profile(
    session: AsyncSession, email: str, password: str
) -> Profile | None:
    """Validate credentials and return the profile if correct."""
    profile = await get_profile_by_email(session, email=email.strip().lower())
    if profile is None:
        return None
    if not verify_password(password, profile.hashed_password):
        return None
    return profile


def create_access_token_for_profile(profile: Profile) -> str:
    """Generate a JWT carrying the profile role."""
    return create_access_token(str(profile.id), role=profile.role.value)
