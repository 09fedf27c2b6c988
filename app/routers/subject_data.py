"""Course document router: read, merged write and delete.

Every write goes through the merge engine; deletion removes the stored
document outright.
"""
from __future__ import annotations
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel, Field

from app.db.config import get_session
from app.repositories.subject_data_repo import SubjectDataRepository
from app.services.course_sync import save_subject_data
from app.utils.auth import get_current_user_id

router = APIRouter(tags=["Subject Data"])


class SubjectDataPut(BaseModel):
    slug: str = Field("", max_length=64)
    data: Optional[dict] = Field(None, description="Partial or full course document")


class SubjectDataOut(BaseModel):
    ok: bool = True
    data: Optional[Any] = None


# Helpers ------------------------------------------------------------------


async def _get_repo(
    session: AsyncSession = Depends(get_session),
) -> SubjectDataRepository:
    return SubjectDataRepository(session)

# Routes -------------------------------------------------------------------


@router.get("/subject-data", response_model=SubjectDataOut)
async def get_subject_data(
    slug: str = "",
    user_id: str = Depends(get_current_user_id),
    repo: SubjectDataRepository = Depends(_get_repo),
):
    if not slug:
        raise HTTPException(status_code=400, detail="Missing slug")
    record = await repo.get(user_id, slug)
    return {"ok": True, "data": record.json_data if record else None}


@router.put("/subject-data", response_model=SubjectDataOut)
async def put_subject_data(
    payload: SubjectDataPut,
    user_id: str = Depends(get_current_user_id),
    repo: SubjectDataRepository = Depends(_get_repo),
):
    slug = payload.slug.strip()
    if not slug or payload.data is None:
        raise HTTPException(status_code=400, detail="Missing fields")
    merged = await save_subject_data(repo, user_id, slug, payload.data)
    return {"ok": True, "data": merged}


@router.delete("/subjects/data")
async def delete_subject_data(
    slug: str = "",
    user_id: str = Depends(get_current_user_id),
    repo: SubjectDataRepository = Depends(_get_repo),
):
    if not slug:
        raise HTTPException(status_code=400, detail="Missing slug")
    if not await repo.delete(user_id, slug):
        raise HTTPException(status_code=404, detail="Subject data not found")
    return {"ok": True}
