"""Spaced repetition router.

Grading a review writes the new schedule back through the merge engine as a
partial document, so a concurrent save of the same course keeps both.
"""
from __future__ import annotations
import time
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.config import get_session
from app.models.course import ReviewRequest, ReviewSchedule
from app.repositories.subject_data_repo import SubjectDataRepository
from app.services.course_sync import save_subject_data
from app.services.review_scheduler import (
    due_for_review,
    next_schedule,
    parse_schedule,
    schedule_key,
    upcoming_reviews,
)
from app.utils.auth import get_current_user_id
from app.utils.feature_flags import require_feature

router = APIRouter(
    prefix="/subjects/{slug}/reviews",
    tags=["Reviews"],
    dependencies=[Depends(require_feature("spaced_repetition"))],
)


def _now_ms() -> int:
    return int(time.time() * 1000)


async def _get_repo(
    session: AsyncSession = Depends(get_session),
) -> SubjectDataRepository:
    return SubjectDataRepository(session)


async def _load_document(
    repo: SubjectDataRepository, user_id: str, slug: str
) -> dict:
    record = await repo.get(user_id, slug)
    if record is None:
        raise HTTPException(status_code=404, detail="Course not found")
    return record.json_data or {}


@router.post("", response_model=ReviewSchedule)
async def record_review(
    slug: str,
    payload: ReviewRequest,
    user_id: str = Depends(get_current_user_id),
    repo: SubjectDataRepository = Depends(_get_repo),
):
    document = await _load_document(repo, user_id, slug)
    key = schedule_key(payload.topicName, payload.lessonIndex)
    stored = document.get("reviewSchedules")
    previous = parse_schedule(stored.get(key)) if isinstance(stored, dict) else None

    now = _now_ms()
    schedule = next_schedule(
        previous, payload.topicName, payload.lessonIndex, payload.quality, now
    )
    await save_subject_data(
        repo,
        user_id,
        slug,
        {
            "reviewSchedules": {key: schedule.model_dump()},
            "reviewedTopics": {payload.topicName: now},
        },
    )
    return schedule


@router.get("/due", response_model=List[ReviewSchedule])
async def list_due_reviews(
    slug: str,
    user_id: str = Depends(get_current_user_id),
    repo: SubjectDataRepository = Depends(_get_repo),
):
    document = await _load_document(repo, user_id, slug)
    return due_for_review(document, _now_ms())


@router.get("/upcoming", response_model=List[ReviewSchedule])
async def list_upcoming_reviews(
    slug: str,
    days: int = Query(7, ge=1, le=365),
    user_id: str = Depends(get_current_user_id),
    repo: SubjectDataRepository = Depends(_get_repo),
):
    document = await _load_document(repo, user_id, slug)
    return upcoming_reviews(document, _now_ms(), days)
