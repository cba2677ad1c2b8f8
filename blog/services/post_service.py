"""
Post service: the mutation handler and the read helpers behind the pages.

Design notes
------------
- Each mutation is its own entry point (``create_post``, ``update_post``,
  ``delete_post``).  Transport concerns such as the admin form's hidden
  ``action`` field are resolved by the routers before calling in here.
- The store is passed in explicitly; nothing in this module reaches for a
  global database handle.
- Validation always runs before the store is touched.  A rejected request
  never writes anything.
- Reads go through the cache-aside layer; every successful mutation
  invalidates the list view and the affected detail views.
"""
import logging
from typing import Callable

from blog.cache import POST_LIST_KEY, cache, post_detail_key
from blog.config import settings
from blog.errors import StoreError, ValidationError
from blog.models import Post
from blog.schemas import MutationResult, PostCandidate, PostFields, PostResponse
from blog.services.rendering import render_markdown
from blog.services.validation import ensure_valid
from blog.store import PostStore

logger = logging.getLogger(__name__)

ADMIN_LIST_URL = "/posts/admin"
CREATE_FAILED_MESSAGE = "Sorry, we couldn't create the post"

# Called with the validated fields right before ``store.create``.  Raising
# ``StoreError`` makes the create fail the same way a database error would.
CreateFailureHook = Callable[[PostFields], None]


def admin_post_url(slug: str) -> str:
    return f"{ADMIN_LIST_URL}/{slug}"


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def _post_to_dict(post: Post) -> dict:
    return {
        "slug": post.slug,
        "title": post.title,
        "markdown": post.markdown,
        "created_at": post.created_at.isoformat() if post.created_at else None,
        "updated_at": post.updated_at.isoformat() if post.updated_at else None,
    }


def _post_detail_to_dict(post: Post) -> dict:
    data = _post_to_dict(post)
    data["html"] = render_markdown(post.markdown)
    return data


def _rejected(exc: ValidationError) -> MutationResult:
    logger.info("Post rejected: %s", {k: v for k, v in exc.errors.items() if v})
    return MutationResult(status_code=200, errors=exc.errors)


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

async def list_posts(store: PostStore) -> list[dict]:
    """Return every post in storage order."""
    cached = await cache.get(POST_LIST_KEY)
    if cached is not None:
        return cached

    posts = [_post_to_dict(p) for p in await store.list()]
    await cache.set(POST_LIST_KEY, posts, ttl=settings.CACHE_TTL_LIST)
    return posts


async def get_post_detail(store: PostStore, slug: str) -> dict:
    """
    Return the post identified by *slug* with its markdown rendered to HTML.

    Raises ``NotFoundError`` when the slug is unknown.
    """
    key = post_detail_key(slug)
    cached = await cache.get(key)
    if cached is not None:
        return cached

    data = _post_detail_to_dict(await store.get(slug))
    await cache.set(key, data, ttl=settings.CACHE_TTL_DETAIL)
    return data


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------

async def create_post(
    store: PostStore,
    candidate: PostCandidate,
    failure_hook: CreateFailureHook | None = None,
) -> MutationResult:
    """
    Validate *candidate* and persist it as a new post.

    - Missing fields: status 200 with the field error map, nothing persisted.
    - Store failure (including one raised by *failure_hook*): status 500
      with ``{"create": CREATE_FAILED_MESSAGE}``, nothing persisted.
    - Success: redirect to the new post's admin page.
    """
    try:
        ensure_valid(candidate)
    except ValidationError as exc:
        return _rejected(exc)

    fields = PostFields(**candidate.model_dump())
    try:
        if failure_hook is not None:
            failure_hook(fields)
        post = await store.create(fields)
    except StoreError as exc:
        logger.warning("Post creation failed for slug=%r: %s", fields.slug, exc.message)
        return MutationResult(status_code=500, errors={"create": CREATE_FAILED_MESSAGE})

    await cache.invalidate_post(post.slug)
    logger.info("Post created: %s", post.slug)
    return MutationResult(
        status_code=201,
        redirect_to=admin_post_url(post.slug),
        post=PostResponse.model_validate(post),
    )


async def update_post(
    store: PostStore, original_slug: str, candidate: PostCandidate
) -> MutationResult:
    """
    Replace the post at *original_slug* with *candidate*, which may carry
    a new slug.

    Missing fields return the error map without touching the store.
    ``NotFoundError`` and ``StoreError`` propagate to the caller.
    """
    try:
        ensure_valid(candidate)
    except ValidationError as exc:
        return _rejected(exc)

    post = await store.update(original_slug, PostFields(**candidate.model_dump()))

    await cache.invalidate_post(original_slug, post.slug)
    if post.slug != original_slug:
        logger.info("Post updated: %s (renamed to %s)", original_slug, post.slug)
    else:
        logger.info("Post updated: %s", post.slug)
    return MutationResult(
        status_code=200,
        redirect_to=ADMIN_LIST_URL,
        post=PostResponse.model_validate(post),
    )


async def delete_post(store: PostStore, slug: str) -> MutationResult:
    """Delete the post at *slug*.  ``NotFoundError`` propagates."""
    await store.delete(slug)
    await cache.invalidate_post(slug)
    logger.info("Post deleted: %s", slug)
    return MutationResult(status_code=200, redirect_to=ADMIN_LIST_URL)
