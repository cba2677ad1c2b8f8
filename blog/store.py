"""
Post store: the persistence seam between the services and the database.

``PostStore`` is the interface the mutation handler depends on;
``SqlPostStore`` implements it on top of a request-scoped ``AsyncSession``.
The store flushes but never commits: the transaction boundary belongs to
``get_db``.  On any failure the session is rolled back before the error is
raised, so a rejected mutation leaves nothing behind for ``get_db`` to
commit.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Protocol, Sequence

from sqlalchemy import select
from sqlalchemy.exc import DBAPIError, IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from blog.errors import ConflictError, NotFoundError, StoreError, StoreUnavailableError
from blog.models import Post
from blog.schemas import PostFields

logger = logging.getLogger(__name__)


class PostStore(Protocol):
    async def list(self) -> Sequence[Post]: ...

    async def get(self, slug: str) -> Post: ...

    async def create(self, post: PostFields) -> Post: ...

    async def update(self, old_slug: str, post: PostFields) -> Post: ...

    async def delete(self, slug: str) -> None: ...


class SqlPostStore:
    """``PostStore`` backed by SQLAlchemy.  One instance per session."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    @asynccontextmanager
    async def _translate_errors(self, slug: str | None = None):
        """Roll back and re-raise database failures as ``StoreError`` subclasses."""
        try:
            yield
        except (NotFoundError, StoreError):
            raise
        except IntegrityError as exc:
            await self._db.rollback()
            logger.warning("Integrity error for slug=%r: %s", slug, exc.orig)
            raise ConflictError(slug or "") from exc
        except (OperationalError, InterfaceError, OSError, TimeoutError, asyncio.TimeoutError) as exc:
            # Drivers such as asyncpg raise bare socket errors on connect.
            await self._db.rollback()
            logger.error("Database unavailable: %s", exc)
            raise StoreUnavailableError() from exc
        except DBAPIError as exc:
            await self._db.rollback()
            logger.error("Database error for slug=%r: %s", slug, exc)
            raise StoreError("The post store rejected the operation") from exc

    async def _find(self, slug: str) -> Post | None:
        result = await self._db.execute(select(Post).where(Post.slug == slug))
        return result.scalar_one_or_none()

    async def list(self) -> Sequence[Post]:
        async with self._translate_errors():
            result = await self._db.execute(
                select(Post).order_by(Post.created_at, Post.slug)
            )
            return result.scalars().all()

    async def get(self, slug: str) -> Post:
        async with self._translate_errors(slug):
            post = await self._find(slug)
        if post is None:
            raise NotFoundError(slug)
        return post

    async def create(self, post: PostFields) -> Post:
        async with self._translate_errors(post.slug):
            if await self._find(post.slug) is not None:
                raise ConflictError(post.slug)
            row = Post(slug=post.slug, title=post.title, markdown=post.markdown)
            self._db.add(row)
            await self._db.flush()
            await self._db.refresh(row)
        return row

    async def update(self, old_slug: str, post: PostFields) -> Post:
        async with self._translate_errors(post.slug):
            row = await self._find(old_slug)
            if row is None:
                raise NotFoundError(old_slug)
            if post.slug != old_slug and await self._find(post.slug) is not None:
                raise ConflictError(post.slug)
            row.slug = post.slug
            row.title = post.title
            row.markdown = post.markdown
            await self._db.flush()
            await self._db.refresh(row)
        return row

    async def delete(self, slug: str) -> None:
        """Remove the post.  A missing slug raises ``NotFoundError``; nothing else changes."""
        async with self._translate_errors(slug):
            row = await self._find(slug)
            if row is None:
                raise NotFoundError(slug)
            await self._db.delete(row)
            await self._db.flush()
