"""API v1 routes."""

from fastapi import APIRouter

from membership.api.v1 import account, auth, health, members

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(account.router, prefix="/account", tags=["account"])
router.include_router(members.router, prefix="/members", tags=["members"])
