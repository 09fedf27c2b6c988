"""Top-level reconciliation of a stored course document with a client write.

Clients save from stale or partial snapshots, so a plain replace would drop
content a sibling tab or a background generation request added in between.
``merge_course_documents`` is the only sanctioned way to combine the two; it
is a pure function and never raises for malformed input.
"""
from __future__ import annotations
import copy
import logging
from typing import Any, Dict, Optional

from app.services.field_strategies import merge_field
from app.utils.validation import field_has_expected_shape

logger = logging.getLogger(__name__)


def merge_course_documents(existing: Optional[dict], incoming: Any) -> Any:
    """Merge ``incoming`` into ``existing`` without losing stored content.

    Args:
        existing: Persisted document, or ``None`` on the first write.
        incoming: Partial or full document submitted by a client.

    Returns:
        A new document. Neither argument is modified. With no ``existing``
        document the result equals ``incoming``.
    """
    if not isinstance(existing, dict):
        return copy.deepcopy(incoming)
    if not isinstance(incoming, dict):
        logger.warning("Ignoring non-object course document write")
        return copy.deepcopy(existing)

    existing = copy.deepcopy(existing)
    incoming = copy.deepcopy(incoming)

    merged = dict(existing)
    for field, value in incoming.items():
        if value is None:
            continue
        if not field_has_expected_shape(field, value):
            logger.info(f"Treating malformed field '{field}' as absent")
            continue
        stored = existing.get(field)
        if stored is not None and not field_has_expected_shape(field, stored):
            stored = None
        merged[field] = merge_field(field, stored, value)
    return merged


def summarize_merge(existing: Optional[dict], incoming: Any) -> Dict[str, int]:
    """Count how a write touches the ``nodes`` and ``topics`` of a document."""
    existing_nodes = _as_dict((existing or {}).get("nodes"))
    incoming_nodes = _as_dict(incoming.get("nodes") if isinstance(incoming, dict) else None)

    touched = {key for key, value in incoming_nodes.items() if value is not None}
    return {
        "nodes_added": len(touched - existing_nodes.keys()),
        "nodes_merged": len(touched & existing_nodes.keys()),
        "nodes_carried": len(existing_nodes.keys() - touched),
        "existing_topics": len(_as_list((existing or {}).get("topics"))),
        "incoming_topics": len(
            _as_list(incoming.get("topics") if isinstance(incoming, dict) else None)
        ),
    }


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []
