from fastapi import APIRouter

from .auth import router as auth_router
from .notifications import router as notifications_router
from .posts import router as posts_router
from .profile import router as profile_router

api_router = APIRouter()
# /sign-in, /logout, POST /profile
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(profile_router, prefix="/profile", tags=["profile"])
api_router.include_router(posts_router, prefix="/posts", tags=["posts"])
api_router.include_router(
    notifications_router, prefix="/notifications", tags=["notifications"]
)
