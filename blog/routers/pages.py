"""
Server-rendered page routes.

Route order matters: the fixed ``/posts/admin`` paths are declared before
the ``/posts/{slug}`` catch-all, and ``/posts/admin/new`` before
``/posts/admin/{slug}``.
"""
from enum import Enum

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import RedirectResponse

from blog.dependencies import get_create_failure_hook, get_post_store
from blog.schemas import MutationResult, PostCandidate
from blog.services import post_service
from blog.services.post_service import CreateFailureHook
from blog.store import PostStore
from blog.templating import templates

router = APIRouter(prefix="/posts", tags=["pages"])


class AdminAction(str, Enum):
    UPDATE = "update"
    DELETE = "delete"


def _redirect(result: MutationResult) -> RedirectResponse:
    return RedirectResponse(result.redirect_to, status_code=303)


@router.get("")
async def posts_index(request: Request, store: PostStore = Depends(get_post_store)):
    posts = await post_service.list_posts(store)
    return templates.TemplateResponse(request, "posts/index.html", {"posts": posts})


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------

@router.get("/admin")
async def admin_index(request: Request, store: PostStore = Depends(get_post_store)):
    posts = await post_service.list_posts(store)
    return templates.TemplateResponse(request, "admin/index.html", {"posts": posts})


@router.get("/admin/new")
async def admin_new_form(request: Request, store: PostStore = Depends(get_post_store)):
    posts = await post_service.list_posts(store)
    return templates.TemplateResponse(
        request, "admin/new.html", {"posts": posts, "form": {}, "errors": {}}
    )


@router.post("/admin/new")
async def admin_create(
    request: Request,
    title: str = Form(""),
    slug: str = Form(""),
    markdown: str = Form(""),
    store: PostStore = Depends(get_post_store),
    failure_hook: CreateFailureHook | None = Depends(get_create_failure_hook),
):
    candidate = PostCandidate(slug=slug, title=title, markdown=markdown)
    result = await post_service.create_post(store, candidate, failure_hook)
    if result.ok:
        return _redirect(result)

    posts = await post_service.list_posts(store)
    return templates.TemplateResponse(
        request,
        "admin/new.html",
        {"posts": posts, "form": candidate.model_dump(), "errors": result.errors},
        status_code=result.status_code,
    )


@router.get("/admin/{slug}")
async def admin_edit_form(slug: str, request: Request, store: PostStore = Depends(get_post_store)):
    post = await post_service.get_post_detail(store, slug)
    posts = await post_service.list_posts(store)
    return templates.TemplateResponse(
        request,
        "admin/edit.html",
        {"posts": posts, "slug": slug, "form": post, "errors": {}},
    )


@router.post("/admin/{slug}")
async def admin_update_or_delete(
    slug: str,
    request: Request,
    action: str = Form(""),
    title: str = Form(""),
    new_slug: str = Form("", alias="slug"),
    markdown: str = Form(""),
    store: PostStore = Depends(get_post_store),
):
    """Dispatch the admin form's hidden ``action`` field onto update or delete."""
    if action == AdminAction.DELETE.value:
        return _redirect(await post_service.delete_post(store, slug))

    if action != AdminAction.UPDATE.value:
        raise HTTPException(status_code=400, detail=f"Unknown action: {action!r}")

    candidate = PostCandidate(slug=new_slug, title=title, markdown=markdown)
    result = await post_service.update_post(store, slug, candidate)
    if result.ok:
        return _redirect(result)

    posts = await post_service.list_posts(store)
    return templates.TemplateResponse(
        request,
        "admin/edit.html",
        {"posts": posts, "slug": slug, "form": candidate.model_dump(), "errors": result.errors},
        status_code=result.status_code,
    )


# ---------------------------------------------------------------------------
# Public post view
# ---------------------------------------------------------------------------

@router.get("/{slug}")
async def post_view(slug: str, request: Request, store: PostStore = Depends(get_post_store)):
    post = await post_service.get_post_detail(store, slug)
    return templates.TemplateResponse(request, "posts/detail.html", {"post": post})
