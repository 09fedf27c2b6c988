"""Merge of per-topic generated content (the ``nodes`` map)."""
from __future__ import annotations
from typing import Any

from app.services.lesson_merge import coerce_lesson_slots, merge_lesson
from app.services.merge_primitives import (
    merge_scalar,
    merge_sparse_list,
    shallow_merge,
    take_incoming,
)


def _merge_lesson_slot(existing: Any, incoming: dict) -> dict:
    # a stored slot that is not a lesson object counts as empty
    if not isinstance(existing, dict):
        return incoming
    return merge_lesson(existing, incoming)


# Index-aligned lists inside a node and the rule used for a slot present on
# both sides.
SPARSE_FIELDS = {
    "lessonsMeta": take_incoming,
    "lessons": _merge_lesson_slot,
    "rawLessonJson": take_incoming,
}


def merge_node_content(existing: Any, incoming: Any) -> Any:
    """Combine two versions of one topic's generated content.

    Nodes saved by older clients may be a plain overview string. Structured
    content always wins over such a legacy string, whichever side it is on.
    """
    if incoming is None:
        return existing
    if not isinstance(incoming, dict):
        if isinstance(existing, dict):
            return existing
        return merge_scalar(existing, incoming)
    if not isinstance(existing, dict):
        existing = {}

    merged = shallow_merge(existing, incoming)
    for field, item_merger in SPARSE_FIELDS.items():
        new = incoming.get(field)
        if new is None:
            continue
        if not isinstance(new, list):
            # wrong-typed incoming list counts as absent
            if field in existing:
                merged[field] = existing[field]
            else:
                merged.pop(field, None)
            continue
        old = existing.get(field)
        if field == "lessons":
            new = coerce_lesson_slots(new)
        if _non_empty_list(old) or _non_empty_list(new):
            merged[field] = merge_sparse_list(old, new, item_merger)
    return merged


def merge_node_map(existing: Any, incoming: Any) -> Any:
    """Merge topic key -> content maps, visiting incoming keys only.

    Keys the incoming map never mentions are carried through untouched.
    """
    if not isinstance(incoming, dict):
        return existing
    if not isinstance(existing, dict):
        existing = {}

    merged = dict(existing)
    for key, content in incoming.items():
        if content is None:
            continue
        merged[key] = merge_node_content(existing.get(key), content)
    return merged


def _non_empty_list(value: Any) -> bool:
    return isinstance(value, list) and bool(value)
