"""Per-field merge strategy registry for course documents.

Each top-level course field declares how two versions of it are combined, so
the document merger never re-derives shape rules at the call site. Fields not
listed here fall back to ``MergeStrategy.SCALAR``.
"""
from __future__ import annotations
from enum import Enum
from typing import Any, Callable, Dict

from app.services.merge_primitives import (
    merge_guarded_list,
    merge_guarded_text,
    merge_keyed_map,
    merge_latest_timestamp_map,
    merge_scalar,
)
from app.services.node_merge import merge_node_map
from app.services.topic_merge import merge_topic_list, merge_topic_tree


class MergeStrategy(str, Enum):
    SCALAR = "scalar"
    GUARDED_TEXT = "guarded_text"
    GUARDED_LIST = "guarded_list"
    KEYED_MAP = "keyed_map"
    LATEST_TIMESTAMP_MAP = "latest_timestamp_map"
    KEYED_COLLECTION = "keyed_collection"
    TOPIC_TREE = "topic_tree"
    NODE_MAP = "node_map"


STRATEGY_HANDLERS: Dict[MergeStrategy, Callable[[Any, Any], Any]] = {
    MergeStrategy.SCALAR: merge_scalar,
    MergeStrategy.GUARDED_TEXT: merge_guarded_text,
    MergeStrategy.GUARDED_LIST: merge_guarded_list,
    MergeStrategy.KEYED_MAP: merge_keyed_map,
    MergeStrategy.LATEST_TIMESTAMP_MAP: merge_latest_timestamp_map,
    MergeStrategy.KEYED_COLLECTION: merge_topic_list,
    MergeStrategy.TOPIC_TREE: merge_topic_tree,
    MergeStrategy.NODE_MAP: merge_node_map,
}

COURSE_FIELD_STRATEGIES: Dict[str, MergeStrategy] = {
    "subject": MergeStrategy.SCALAR,
    "course_language_code": MergeStrategy.SCALAR,
    "course_language_name": MergeStrategy.SCALAR,
    "course_notes": MergeStrategy.SCALAR,
    "course_icon": MergeStrategy.SCALAR,
    "combinedText": MergeStrategy.GUARDED_TEXT,
    "course_context": MergeStrategy.GUARDED_TEXT,
    "course_quick_summary": MergeStrategy.GUARDED_TEXT,
    "files": MergeStrategy.GUARDED_LIST,
    "course_file_ids": MergeStrategy.GUARDED_LIST,
    "examDates": MergeStrategy.GUARDED_LIST,
    "practiceLogs": MergeStrategy.GUARDED_LIST,
    "surgeLog": MergeStrategy.GUARDED_LIST,
    "reviewSchedules": MergeStrategy.KEYED_MAP,
    "topic_notes": MergeStrategy.KEYED_MAP,
    "progress": MergeStrategy.KEYED_MAP,
    "reviewedTopics": MergeStrategy.LATEST_TIMESTAMP_MAP,
    "topics": MergeStrategy.KEYED_COLLECTION,
    "tree": MergeStrategy.TOPIC_TREE,
    "nodes": MergeStrategy.NODE_MAP,
}


def strategy_for(field: str) -> MergeStrategy:
    return COURSE_FIELD_STRATEGIES.get(field, MergeStrategy.SCALAR)


def merge_field(field: str, existing: Any, incoming: Any) -> Any:
    return STRATEGY_HANDLERS[strategy_for(field)](existing, incoming)
