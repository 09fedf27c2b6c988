"""Read-merge-write cycle for course document saves.

The read and the write are separate storage operations; two requests for the
same (owner, slug) may interleave between them. The merge rules bound what a
stale writer can destroy, they do not serialise writers.
"""
from __future__ import annotations
import logging
from typing import Any, Optional

from app.repositories.subject_data_repo import SubjectDataRepository
from app.services.document_merge import merge_course_documents, summarize_merge
from app.utils.feature_flags import is_feature_enabled
from app.utils.validation import malformed_fields

logger = logging.getLogger(__name__)


async def save_subject_data(
    repo: SubjectDataRepository,
    owner_id: str,
    slug: str,
    incoming: Any,
    shared_by: Optional[str] = None,
) -> dict:
    """Merge ``incoming`` into the stored document and persist the result."""
    record = await repo.get(owner_id, slug)
    existing = record.json_data if record is not None else None

    dropped = malformed_fields(incoming)
    if dropped:
        logger.warning(
            f"Course '{slug}' write has malformed fields: {dropped}"
        )
    if is_feature_enabled("merge_audit_logging"):
        logger.info(f"Merging course '{slug}': {summarize_merge(existing, incoming)}")

    merged = merge_course_documents(existing, incoming)
    record = await repo.upsert(owner_id, slug, merged, shared_by=shared_by)
    return record.json_data
