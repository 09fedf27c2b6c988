"""Key-based union of the flat topic list and the legacy topic tree."""
from __future__ import annotations
from typing import Any

from app.services.merge_primitives import (
    merge_keyed_collection,
    name_key,
    shallow_merge,
)


def merge_topic_list(existing: Any, incoming: Any) -> Any:
    """Union topics by name: existing order first, then new names.

    Overlapping names take incoming summary data; fields the incoming entry
    omits (``coverage`` for instance) are kept from the stored entry.
    """
    if not _non_empty_list(existing) and not _non_empty_list(incoming):
        return incoming if isinstance(incoming, list) else existing
    return merge_keyed_collection(existing, incoming, name_key)


def merge_tree_node(existing: dict, incoming: dict) -> dict:
    merged = shallow_merge(existing, incoming)
    if isinstance(existing.get("subtopics"), list) or isinstance(
        incoming.get("subtopics"), list
    ):
        merged["subtopics"] = merge_keyed_collection(
            existing.get("subtopics"),
            incoming.get("subtopics"),
            name_key,
            merge_tree_node,
        )
    return merged


def merge_topic_tree(existing: Any, incoming: Any) -> Any:
    """Merge two ``{subject, topics: [...]}`` trees at every depth."""
    if not isinstance(incoming, dict):
        return existing
    if not isinstance(existing, dict):
        return incoming

    merged = shallow_merge(existing, incoming)
    if isinstance(existing.get("topics"), list) or isinstance(
        incoming.get("topics"), list
    ):
        merged["topics"] = merge_keyed_collection(
            existing.get("topics"),
            incoming.get("topics"),
            name_key,
            merge_tree_node,
        )
    return merged


def _non_empty_list(value: Any) -> bool:
    return isinstance(value, list) and bool(value)
