"""Guarded merge of two versions of the same generated lesson.

A tab that loaded a course before a lesson finished generating elsewhere will
echo that lesson back with empty fields. The guards below keep the stored
content in that case while still honouring real edits (a shorter, non-empty
flashcard list replaces the stored one).
"""
from __future__ import annotations
import logging
from typing import Any, List, Optional

from app.services.merge_primitives import has_text, is_blank, shallow_merge

logger = logging.getLogger(__name__)

GUARDED_LIST_FIELDS = ("quiz", "flashcards", "highlights", "videos", "userAnswers")


def merge_lesson(existing: dict, incoming: dict) -> dict:
    merged = shallow_merge(existing, incoming)

    body = incoming.get("body")
    if body is not None and not isinstance(body, str):
        _restore(merged, existing, "body")
    elif is_blank(body) and has_text(existing.get("body")):
        logger.debug("Kept stored lesson body over blank incoming body")
        merged["body"] = existing["body"]

    for field in GUARDED_LIST_FIELDS:
        value = incoming.get(field)
        if value is None:
            continue
        if not isinstance(value, list):
            _restore(merged, existing, field)
        elif not value and _non_empty_list(existing.get(field)):
            logger.debug(f"Kept stored lesson {field} over empty incoming list")
            merged[field] = existing[field]

    results = incoming.get("quizResults")
    if not isinstance(results, dict):
        stored = existing.get("quizResults")
        if isinstance(stored, dict) and stored:
            merged["quizResults"] = stored
        elif results is not None:
            _restore(merged, existing, "quizResults")

    return merged


def coerce_lesson_slots(slots: Any) -> List[Optional[dict]]:
    """Normalise a lesson list so every slot is a lesson object or absent."""
    if not isinstance(slots, list):
        return []
    return [slot if isinstance(slot, dict) else None for slot in slots]


def _non_empty_list(value: Any) -> bool:
    return isinstance(value, list) and bool(value)


def _restore(merged: dict, existing: dict, field: str) -> None:
    # wrong-typed incoming value counts as absent
    if field in existing:
        merged[field] = existing[field]
    else:
        merged.pop(field, None)
