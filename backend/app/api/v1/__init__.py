"""Versioned API router."""

from fastapi import APIRouter

from . import auth, cron, dashboard, health, horses, notifications

# owner-facing routes share the default rate limit; login has its own
_owner_limits = [auth.DEFAULT_RATE_DEP]

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(
    horses.router, prefix="/horses", tags=["horses"], dependencies=_owner_limits
)
router.include_router(
    dashboard.router,
    prefix="/dashboard",
    tags=["dashboard"],
    dependencies=_owner_limits,
)
router.include_router(
    notifications.router,
    prefix="/notifications",
    tags=["notifications"],
    dependencies=_owner_limits,
)
router.include_router(cron.router, prefix="/cron", tags=["cron"])

__all__ = ["router"]
