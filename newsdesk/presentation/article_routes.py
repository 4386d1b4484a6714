from typing import Annotated, Final
from uuid import UUID

from fastapi import APIRouter, Depends, Path, status

from ..application.article_service import ArticleService
from ..application.validation import build_with_logging, strip_or_none
from ..domain.entities import ArticleChanges, NewArticle
from ..infrastructure.database.database import ConnectionPool, get_pool
from ..infrastructure.database.repositories import ArticleRepository
from .schemas import (
    ArticleCreate,
    ArticleResponse,
    ArticleUpdate,
    DeleteResponse,
    ErrorResponse,
    StatusResponse,
)

article_router: Final = APIRouter(
    prefix="/post",
    tags=["posts"],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input data"},
        500: {"model": ErrorResponse, "description": "Persistence error"},
    },
)

_NOT_FOUND: Final = {404: {"model": ErrorResponse, "description": "Post not found"}}


def get_article_service(pool: ConnectionPool = Depends(get_pool)) -> ArticleService:
    return ArticleService(ArticleRepository(pool))


PostId = Annotated[UUID, Path(description="Identifier returned by create_post")]


@article_router.post(
    "/create_post",
    status_code=status.HTTP_200_OK,
    summary="Create a post",
)
def create_post(
    payload: ArticleCreate, service: ArticleService = Depends(get_article_service)
) -> UUID:
    """Store a new post and return its identifier."""
    new_article = build_with_logging(
        NewArticle,
        "article",
        title=payload.title.strip(),
        content=payload.content,
        is_published=payload.is_published,
    )
    return service.create_article(new_article).id


@article_router.get("/get_post/{post_id}", responses=_NOT_FOUND, summary="Get a post")
def get_post(
    post_id: PostId, service: ArticleService = Depends(get_article_service)
) -> ArticleResponse:
    """Return one post, including removed ones."""
    return ArticleResponse.from_domain(service.get_article(post_id))


@article_router.get("/list_posts", summary="List published posts")
def list_posts(
    service: ArticleService = Depends(get_article_service),
) -> list[ArticleResponse]:
    """Published posts that have not been removed."""
    return [ArticleResponse.from_domain(a) for a in service.list_published()]


@article_router.get("/list_all_posts", summary="List all posts")
def list_all_posts(
    service: ArticleService = Depends(get_article_service),
) -> list[ArticleResponse]:
    """Every post that has not been removed, drafts included."""
    return [ArticleResponse.from_domain(a) for a in service.list_all()]


@article_router.get("/list_deleted_posts", summary="List removed posts")
def list_deleted_posts(
    service: ArticleService = Depends(get_article_service),
) -> list[ArticleResponse]:
    return [ArticleResponse.from_domain(a) for a in service.list_deleted()]


@article_router.put(
    "/update_post/{post_id}", responses=_NOT_FOUND, summary="Update a post"
)
def update_post(
    payload: ArticleUpdate,
    post_id: PostId,
    service: ArticleService = Depends(get_article_service),
) -> ArticleResponse:
    """Overwrite the supplied fields and return the updated post."""
    changes = build_with_logging(
        ArticleChanges,
        "article",
        title=strip_or_none(payload.title),
        content=payload.content,
        is_published=payload.is_published,
        published_at=payload.published_at,
    )
    return ArticleResponse.from_domain(service.update_article(post_id, changes))


@article_router.delete(
    "/remove_post/{post_id}", responses=_NOT_FOUND, summary="Remove a post (soft)"
)
def remove_post(
    post_id: PostId, service: ArticleService = Depends(get_article_service)
) -> StatusResponse:
    """Flag the post deleted. The row stays and shows up in list_deleted_posts."""
    service.remove_article(post_id)
    return StatusResponse(status="ok", message=f"Post {post_id} removed")


@article_router.put(
    "/restore_post/{post_id}", responses=_NOT_FOUND, summary="Restore a removed post"
)
def restore_post(
    post_id: PostId, service: ArticleService = Depends(get_article_service)
) -> ArticleResponse:
    return ArticleResponse.from_domain(service.restore_article(post_id))


@article_router.delete(
    "/delete_post/{post_id}", responses=_NOT_FOUND, summary="Delete a post (hard)"
)
def delete_post(
    post_id: PostId, service: ArticleService = Depends(get_article_service)
) -> DeleteResponse:
    """Remove the row permanently, whether or not it was removed before."""
    return DeleteResponse(deleted=service.delete_article(post_id))
