"""Publishing course snapshots and copying them into another user's account."""
from __future__ import annotations
import logging
import re
import secrets
import time
from typing import Optional

from app.repositories.shared_course_repo import SharedCourseRepository
from app.repositories.subject_data_repo import SubjectDataRepository
from app.repositories.subject_repo import SubjectRepository
from app.models.persisted_course import SharedCourseRecord
from app.services.course_sync import save_subject_data

logger = logging.getLogger(__name__)

# Personal activity history stays with the original owner
PRIVATE_FIELDS = ("surgeLog", "practiceLogs")
MAX_SLUG_LENGTH = 64


class CourseNotFoundError(Exception):
    """Raised when the owner has no course document or subject for a slug."""


def to_safe_slug(value: str) -> str:
    slug = re.sub(r"[^a-z0-9\s-]", "", value.lower())
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def shareable_snapshot(document: dict) -> dict:
    return {k: v for k, v in document.items() if k not in PRIVATE_FIELDS}


def new_share_id() -> str:
    return secrets.token_hex(16)


def shared_copy_slug(original_slug: str, now_ms: Optional[int] = None) -> str:
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    base = to_safe_slug(original_slug or "course") or "course"
    return f"{base}-shared-{now_ms}-{secrets.token_hex(3)}"[:MAX_SLUG_LENGTH]


async def publish_course(
    data_repo: SubjectDataRepository,
    subject_repo: SubjectRepository,
    share_repo: SharedCourseRepository,
    owner_id: str,
    slug: str,
) -> SharedCourseRecord:
    record = await data_repo.get(owner_id, slug)
    if record is None:
        raise CourseNotFoundError("Course not found")
    subject = await subject_repo.get(owner_id, slug)
    if subject is None:
        raise CourseNotFoundError("Subject not found")

    shared = await share_repo.create(
        share_id=new_share_id(),
        owner_id=owner_id,
        course_slug=slug,
        course_name=subject.name,
        data=shareable_snapshot(record.json_data or {}),
    )
    logger.info(f"Published course '{slug}' as share {shared.share_id}")
    return shared


async def save_shared_course(
    data_repo: SubjectDataRepository,
    subject_repo: SubjectRepository,
    share_repo: SharedCourseRepository,
    owner_id: str,
    share_id: str,
) -> dict:
    """Copy a shared snapshot into ``owner_id``'s account under a fresh slug."""
    shared = await share_repo.get(share_id)
    slug = shared_copy_slug(shared.course_slug)
    document = dict(shared.json_data or {})
    document["subject"] = shared.course_name

    await subject_repo.ensure(owner_id, shared.course_name, slug)
    await save_subject_data(
        data_repo, owner_id, slug, document, shared_by=shared.user_id
    )
    logger.info(f"Saved share {share_id} for user {owner_id} as '{slug}'")
    return {"slug": slug, "name": shared.course_name}
