"""Subjects router: the owner's list of courses."""
from __future__ import annotations
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel, Field

from app.db.config import get_session
from app.repositories.subject_repo import (
    SubjectRepository,
    SubjectConflictError,
    SubjectNotFoundError,
)
from app.utils.auth import get_current_user_id

router = APIRouter(prefix="/subjects", tags=["Subjects"])


class SubjectIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    slug: str = Field(..., min_length=1, max_length=64, pattern=r"^[a-z0-9-]+$")


class SubjectOut(BaseModel):
    id: int
    name: str
    slug: str
    createdAt: str
    updatedAt: str
    sharedByUsername: Optional[str] = None


class SubjectListOut(BaseModel):
    ok: bool = True
    subjects: List[SubjectOut]


async def _get_repo(
    session: AsyncSession = Depends(get_session),
) -> SubjectRepository:
    return SubjectRepository(session)


@router.get("", response_model=SubjectListOut)
async def list_subjects(
    user_id: str = Depends(get_current_user_id),
    repo: SubjectRepository = Depends(_get_repo),
):
    subjects = await repo.list(user_id)
    shared_by = await repo.shared_by_for(user_id)
    return {
        "ok": True,
        "subjects": [s.to_dict(shared_by.get(s.slug)) for s in subjects],
    }


@router.post("", status_code=201)
async def create_subject(
    payload: SubjectIn,
    user_id: str = Depends(get_current_user_id),
    repo: SubjectRepository = Depends(_get_repo),
):
    try:
        record = await repo.create(user_id, payload.name, payload.slug)
    except SubjectConflictError:
        raise HTTPException(status_code=400, detail="slug already exists")
    return {"ok": True, "subject": record.to_dict()}


@router.put("")
async def rename_subject(
    payload: SubjectIn,
    user_id: str = Depends(get_current_user_id),
    repo: SubjectRepository = Depends(_get_repo),
):
    try:
        await repo.rename(user_id, payload.slug, payload.name)
    except SubjectNotFoundError:
        raise HTTPException(status_code=404, detail="Subject not found")
    return {"ok": True}


@router.delete("")
async def delete_subject(
    slug: str = "",
    user_id: str = Depends(get_current_user_id),
    repo: SubjectRepository = Depends(_get_repo),
):
    if not slug:
        raise HTTPException(status_code=400, detail="Missing slug")
    try:
        await repo.delete(user_id, slug)
    except SubjectNotFoundError:
        raise HTTPException(status_code=404, detail="Subject not found")
    return {"ok": True}
