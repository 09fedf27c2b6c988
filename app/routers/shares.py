"""Course sharing router: publish, view and save shared course snapshots."""
from __future__ import annotations
import os

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel, Field

from app.db.config import get_session
from app.repositories.shared_course_repo import (
    SharedCourseConflictError,
    SharedCourseNotFoundError,
    SharedCourseRepository,
)
from app.repositories.subject_data_repo import SubjectDataRepository
from app.repositories.subject_repo import SubjectRepository
from app.services.course_share import (
    CourseNotFoundError,
    publish_course,
    save_shared_course,
)
from app.utils.auth import get_current_user_id
from app.utils.feature_flags import require_feature

router = APIRouter(
    prefix="/courses/share",
    tags=["Sharing"],
    dependencies=[Depends(require_feature("course_sharing"))],
)


class ShareCreate(BaseModel):
    slug: str = Field(..., min_length=1, max_length=64)


class Repositories:
    def __init__(self, session: AsyncSession):
        self.data = SubjectDataRepository(session)
        self.subjects = SubjectRepository(session)
        self.shares = SharedCourseRepository(session)


async def _get_repos(
    session: AsyncSession = Depends(get_session),
) -> Repositories:
    return Repositories(session)


def _share_url(request: Request, share_id: str) -> str:
    base_url = os.getenv("PUBLIC_BASE_URL")
    if not base_url:
        base_url = str(request.base_url).rstrip("/").replace("0.0.0.0", "localhost")
    return f"{base_url.rstrip('/')}/share/{share_id}"


@router.post("")
async def create_share(
    payload: ShareCreate,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    repos: Repositories = Depends(_get_repos),
):
    try:
        shared = await publish_course(
            repos.data, repos.subjects, repos.shares, user_id, payload.slug.strip()
        )
    except CourseNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except SharedCourseConflictError:
        raise HTTPException(status_code=409, detail="Share id collision, retry")
    return {
        "ok": True,
        "shareId": shared.share_id,
        "shareUrl": _share_url(request, shared.share_id),
    }


@router.get("/{share_id}")
async def get_share(
    share_id: str,
    repos: Repositories = Depends(_get_repos),
):
    try:
        shared = await repos.shares.get(share_id)
    except SharedCourseNotFoundError:
        raise HTTPException(status_code=404, detail="Shared course not found")
    return {"ok": True, "course": shared.to_dict()}


@router.post("/{share_id}/save")
async def save_share(
    share_id: str,
    user_id: str = Depends(get_current_user_id),
    repos: Repositories = Depends(_get_repos),
):
    try:
        saved = await save_shared_course(
            repos.data, repos.subjects, repos.shares, user_id, share_id
        )
    except SharedCourseNotFoundError:
        raise HTTPException(status_code=404, detail="Shared course not found")
    return {"ok": True, **saved}
