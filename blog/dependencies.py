"""
FastAPI dependencies shared by the page and API routers.

Usage in a router::

    @router.post("/posts")
    async def create(store: PostStore = Depends(get_post_store)):
        ...

Tests swap either provider through ``app.dependency_overrides``.
"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from blog.database import get_db
from blog.services.post_service import CreateFailureHook
from blog.store import PostStore, SqlPostStore


def get_post_store(db: AsyncSession = Depends(get_db)) -> PostStore:
    """The request's post store, bound to the request's session."""
    return SqlPostStore(db)


def get_create_failure_hook() -> CreateFailureHook | None:
    """
    Failure-injection hook for post creation.

    Always None in the running application; tests override this
    dependency to make ``create_post`` fail on demand.
    """
    return None
