"""게시글 라우터 — 작성(멀티파트), 조회, 수정, 삭제, 좋아요, 해시태그 검색.

Post Router — multipart post creation with photos, reads, owner-only
update/delete, likes, and hashtag search.
"""

from typing import Annotated, Any, TypeVar
from uuid import UUID

from fastapi import APIRouter, Body, Depends, File, Form, Query, UploadFile
from pydantic import BaseModel, ValidationError

from app.api.deps import CurrentMember, DbSession, get_post_service
from app.schemas.post import LikeResponse, PostCreate, PostResponse, PostUpdateRequest
from app.services.post_service import PostService
from app.utils.exceptions import FieldValidationError
from app.utils.pagination import DEFAULT_PER_PAGE, MAX_PER_PAGE, Page

router: APIRouter = APIRouter()
hashtag_router: APIRouter = APIRouter()

PostServiceDep = Annotated[PostService, Depends(get_post_service)]

SchemaType = TypeVar("SchemaType", bound=BaseModel)


def _validated(schema: type[SchemaType], fields: dict[str, Any]) -> SchemaType:
    """요청 필드를 스키마로 검증 — 실패 시 400 {field: message} (same shape as signup)."""
    try:
        return schema.model_validate(fields)
    except ValidationError as exc:
        raise FieldValidationError({str(err["loc"][0]): err["msg"] for err in exc.errors()})


@router.post("", response_model=PostResponse, status_code=201)
async def create_post(
    db: DbSession,
    current_member: CurrentMember,
    service: PostServiceDep,
    content: Annotated[str, Form()],
    location: Annotated[str | None, Form()] = None,
    temperature: Annotated[float | None, Form()] = None,
    hashtags: Annotated[list[str], Form()] = [],
    files: Annotated[list[UploadFile] | None, File()] = None,
) -> PostResponse:
    """게시글 작성 — 사진은 best-effort 업로드 (실패한 파일은 제외).

    Create a post from multipart form fields. Files that fail to upload
    are skipped; the post is still created.
    """
    data: PostCreate = _validated(PostCreate, {
        "content": content,
        "location": location,
        "temperature": temperature,
        "hashtags": hashtags,
    })

    result: PostResponse = await service.create_post(db, current_member, data, files)
    await db.commit()
    return result


@router.get("", response_model=Page[PostResponse])
async def list_posts(
    db: DbSession,
    current_member: CurrentMember,
    service: PostServiceDep,
    page: int = Query(1, ge=1),
    per_page: int = Query(DEFAULT_PER_PAGE, ge=1, le=MAX_PER_PAGE),
) -> Page[PostResponse]:
    """게시글 목록 (최신순)."""
    return await service.list_posts(db, page, per_page)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: UUID,
    db: DbSession,
    current_member: CurrentMember,
    service: PostServiceDep,
) -> PostResponse:
    return await service.get_post(db, post_id)


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: UUID,
    payload: Annotated[dict[str, Any], Body()],
    db: DbSession,
    current_member: CurrentMember,
    service: PostServiceDep,
) -> PostResponse:
    """게시글 수정 — 본문/위치/기온만, 작성자만.

    Validation failures return 400 with a ``{field: message}`` map,
    like post creation and signup.
    """
    data: PostUpdateRequest = _validated(PostUpdateRequest, payload)
    result: PostResponse = await service.update_post(db, current_member, post_id, data)
    await db.commit()
    return result


@router.delete("/{post_id}", status_code=204)
async def delete_post(
    post_id: UUID,
    db: DbSession,
    current_member: CurrentMember,
    service: PostServiceDep,
) -> None:
    """게시글 삭제 — 첨부 이미지/해시태그 연결/좋아요 함께 삭제."""
    await service.delete_post(db, current_member, post_id)
    await db.commit()


@router.post("/{post_id}/likes", response_model=LikeResponse)
async def like_post(
    post_id: UUID,
    db: DbSession,
    current_member: CurrentMember,
    service: PostServiceDep,
) -> LikeResponse:
    result: LikeResponse = await service.like_post(db, current_member, post_id)
    await db.commit()
    return result


@router.delete("/{post_id}/likes", response_model=LikeResponse)
async def unlike_post(
    post_id: UUID,
    db: DbSession,
    current_member: CurrentMember,
    service: PostServiceDep,
) -> LikeResponse:
    result: LikeResponse = await service.unlike_post(db, current_member, post_id)
    await db.commit()
    return result


@hashtag_router.get("/{name}/posts", response_model=Page[PostResponse])
async def list_posts_by_hashtag(
    name: str,
    db: DbSession,
    current_member: CurrentMember,
    service: PostServiceDep,
    page: int = Query(1, ge=1),
    per_page: int = Query(DEFAULT_PER_PAGE, ge=1, le=MAX_PER_PAGE),
) -> Page[PostResponse]:
    """해시태그 검색 — "#" 유무, 대소문자 무관."""
    return await service.list_posts_by_hashtag(db, name, page, per_page)
