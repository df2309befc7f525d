from fastapi import APIRouter

from .auth import router as auth_router
from .posts import router as posts_router

api_router = APIRouter()
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(posts_router, prefix="/post", tags=["posts"])
