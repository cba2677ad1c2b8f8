from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from blog.dependencies import get_create_failure_hook, get_post_store
from blog.schemas import MutationResult, PostCandidate, PostDetail, PostResponse
from blog.services import post_service
from blog.services.post_service import CreateFailureHook
from blog.store import PostStore

router = APIRouter(prefix="/api/v1/posts", tags=["posts"])


def _mutation_response(result: MutationResult, success_status: int) -> JSONResponse:
    if result.ok:
        return JSONResponse(
            status_code=success_status,
            content=result.post.model_dump(mode="json"),
        )
    # Field errors answer 200 like the form flow; store failures answer 500
    # with the {"create": ...} payload.
    if result.status_code >= 500:
        return JSONResponse(status_code=result.status_code, content=result.errors)
    return JSONResponse(status_code=result.status_code, content={"errors": result.errors})


@router.get("", response_model=list[PostResponse])
async def list_posts(store: PostStore = Depends(get_post_store)):
    return await post_service.list_posts(store)


@router.get("/{slug}", response_model=PostDetail)
async def get_post(slug: str, store: PostStore = Depends(get_post_store)):
    return await post_service.get_post_detail(store, slug)


@router.post("", status_code=201)
async def create_post(
    data: PostCandidate,
    store: PostStore = Depends(get_post_store),
    failure_hook: CreateFailureHook | None = Depends(get_create_failure_hook),
):
    result = await post_service.create_post(store, data, failure_hook)
    return _mutation_response(result, 201)


@router.put("/{slug}")
async def update_post(slug: str, data: PostCandidate, store: PostStore = Depends(get_post_store)):
    result = await post_service.update_post(store, slug, data)
    return _mutation_response(result, 200)


@router.delete("/{slug}", status_code=204)
async def delete_post(slug: str, store: PostStore = Depends(get_post_store)):
    await post_service.delete_post(store, slug)
    return Response(status_code=204)
