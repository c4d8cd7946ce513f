"""Mount all API routes."""

from fastapi import APIRouter

from memopad.api.editor import router as editor_router
from memopad.api.memos import router as memos_router
from memopad.api.pages import router as pages_router
from memopad.api.users import router as users_router

api_router = APIRouter()
api_router.include_router(memos_router, tags=["memos"])
api_router.include_router(users_router, tags=["users"])
api_router.include_router(editor_router, tags=["editor"])
api_router.include_router(pages_router, tags=["pages"])
