"""회원 라우터 — 회원가입, 로그인, 내 정보, 프로필 수정, 탈퇴.

Member Router — signup, login, profile read/update, profile image,
account removal, and a member's posts.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, UploadFile

from app.api.deps import CurrentMember, DbSession, get_member_service, get_post_service
from app.schemas.common import MessageResponse
from app.schemas.member import (
    LoginRequest,
    MemberResponse,
    MemberUpdateRequest,
    SignupRequest,
    TokenResponse,
)
from app.schemas.post import PostResponse
from app.services.member_service import MemberService
from app.services.post_service import PostService
from app.utils.pagination import DEFAULT_PER_PAGE, MAX_PER_PAGE, Page

router: APIRouter = APIRouter()

MemberServiceDep = Annotated[MemberService, Depends(get_member_service)]


@router.post("/signup", response_model=MessageResponse)
async def signup(
    data: SignupRequest,
    db: DbSession,
    service: MemberServiceDep,
) -> MessageResponse:
    """회원가입 — 400 필드별 오류, 409 이메일 중복.

    Sign up a member. Responds 400 with a field → message map when
    validation fails and 409 when the email is already registered.
    """
    await service.signup(db, data)
    await db.commit()
    return MessageResponse(message="Signup Successful")


@router.post("/login", response_model=TokenResponse, status_code=201)
async def login(
    data: LoginRequest,
    db: DbSession,
    service: MemberServiceDep,
) -> TokenResponse:
    """로그인 — 액세스 토큰 발급."""
    return await service.login(db, data)


@router.get("/members/me", response_model=MemberResponse)
async def get_me(
    current_member: CurrentMember,
    service: MemberServiceDep,
) -> MemberResponse:
    return service.get_me(current_member)


@router.patch("/members/me", response_model=MemberResponse)
async def update_me(
    data: MemberUpdateRequest,
    db: DbSession,
    current_member: CurrentMember,
    service: MemberServiceDep,
) -> MemberResponse:
    """내 프로필 부분 수정 (Partial profile update)."""
    result: MemberResponse = await service.update_profile(db, current_member, data)
    await db.commit()
    return result


@router.put("/members/me/image", response_model=MemberResponse)
async def change_my_image(
    db: DbSession,
    current_member: CurrentMember,
    service: MemberServiceDep,
    file: UploadFile = File(...),
) -> MemberResponse:
    """프로필 이미지 교체 — 이미지가 아니면 400."""
    result: MemberResponse = await service.change_profile_image(db, current_member, file)
    await db.commit()
    return result


@router.delete("/members/me", status_code=204)
async def delete_me(
    db: DbSession,
    current_member: CurrentMember,
    service: MemberServiceDep,
) -> None:
    """회원 탈퇴 — 게시글과 좋아요도 함께 삭제."""
    await service.delete_member(db, current_member)
    await db.commit()


@router.get("/members/{member_id}", response_model=MemberResponse)
async def get_member(
    member_id: UUID,
    db: DbSession,
    current_member: CurrentMember,
    service: MemberServiceDep,
) -> MemberResponse:
    return await service.get_member(db, member_id)


@router.get("/members/{member_id}/posts", response_model=Page[PostResponse])
async def list_member_posts(
    member_id: UUID,
    db: DbSession,
    current_member: CurrentMember,
    service: Annotated[PostService, Depends(get_post_service)],
    page: int = Query(1, ge=1),
    per_page: int = Query(DEFAULT_PER_PAGE, ge=1, le=MAX_PER_PAGE),
) -> Page[PostResponse]:
    """회원의 게시글 목록 (최신순)."""
    return await service.list_member_posts(db, member_id, page, per_page)
