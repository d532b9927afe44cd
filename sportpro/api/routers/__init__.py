"""
API routers package.

Combines the auth, user, prediction and admin routers.
"""

from fastapi import APIRouter

from .admin import router as admin_router
from .auth import router as auth_router
from .predictions import router as predictions_router
from .user import router as user_router

router = APIRouter()
router.include_router(auth_router)
router.include_router(user_router)
router.include_router(predictions_router)
router.include_router(admin_router)

__all__ = ["router"]
