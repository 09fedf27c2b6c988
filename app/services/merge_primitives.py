"""Generic merge rules for loosely typed course JSON.

Every rule combines an ``existing`` (persisted) value with an ``incoming``
(client-submitted) value of the same shape. ``None`` means absent: a JSON
``null`` or a missing key never overwrites stored data.
"""
from __future__ import annotations
from typing import Any, Callable, Dict, List, Optional

KeyFunc = Callable[[Any], Optional[str]]
Merger = Callable[[Any, Any], Any]


def merge_scalar(existing: Any, incoming: Any) -> Any:
    """Incoming wins when present, otherwise the existing value is kept."""
    return existing if incoming is None else incoming


def take_incoming(existing: Any, incoming: Any) -> Any:
    return incoming


def shallow_merge(existing: dict, incoming: dict) -> dict:
    """``{**existing, **incoming}`` where absent incoming values are skipped.

    A field present in ``existing`` survives unless ``incoming`` carries a
    value for it (falsy values such as ``""`` or ``0`` still win).
    """
    merged = dict(existing)
    for key, value in incoming.items():
        if value is not None:
            merged[key] = value
    return merged


def is_blank(value: Any) -> bool:
    return isinstance(value, str) and not value.strip()


def has_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def merge_guarded_text(existing: Any, incoming: Any) -> Any:
    # A blank string is what a client that never loaded the text sends back
    if not isinstance(incoming, str):
        return existing
    if is_blank(incoming) and has_text(existing):
        return existing
    return incoming


def merge_guarded_list(existing: Any, incoming: Any) -> Any:
    if not isinstance(incoming, list):
        return existing
    if not incoming and isinstance(existing, list) and existing:
        return existing
    return incoming


def merge_keyed_map(existing: Any, incoming: Any) -> Any:
    """Union of two JSON objects; incoming wins per key."""
    if not isinstance(incoming, dict):
        return existing
    if not isinstance(existing, dict):
        return incoming
    return shallow_merge(existing, incoming)


def merge_latest_timestamp_map(existing: Any, incoming: Any) -> Any:
    """Union of ``{key: epoch}`` objects keeping the newer timestamp per key."""
    if not isinstance(incoming, dict):
        return existing
    if not isinstance(existing, dict):
        return incoming
    merged = dict(existing)
    for key, value in incoming.items():
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            continue
        current = merged.get(key)
        if isinstance(current, (int, float)) and current >= value:
            continue
        merged[key] = value
    return merged


def name_key(entry: Any) -> Optional[str]:
    if not isinstance(entry, dict):
        return None
    name = entry.get("name")
    if isinstance(name, str) and name:
        return name
    return None


def merge_keyed_collection(
    existing: Any,
    incoming: Any,
    key_of: KeyFunc = name_key,
    entry_merger: Merger = shallow_merge,
) -> List[Any]:
    """Ordered union of two entry lists, matched by ``key_of(entry)``.

    Result order is existing order followed by keys first introduced by
    ``incoming``. The n-th incoming entry with a key matches the n-th existing
    entry with that key, or the first one when the existing list has fewer.
    Existing entries without a usable key are carried forward in place;
    incoming entries without one are dropped.
    """
    existing = existing if isinstance(existing, list) else []
    incoming = incoming if isinstance(incoming, list) else []

    slots: Dict[Any, Any] = {}
    seen: Dict[str, int] = {}
    for position, entry in enumerate(existing):
        key = key_of(entry)
        if key is None:
            slots[(None, position)] = entry
            continue
        slots[(key, seen.get(key, 0))] = entry
        seen[key] = seen.get(key, 0) + 1

    seen = {}
    for entry in incoming:
        key = key_of(entry)
        if key is None:
            continue
        slot = (key, seen.get(key, 0))
        seen[key] = seen.get(key, 0) + 1
        if slot not in slots:
            slot = (key, 0)
        if slot in slots:
            slots[slot] = entry_merger(slots[slot], entry)
        else:
            slots[slot] = entry
    return list(slots.values())


def merge_sparse_list(
    existing: Any, incoming: Any, item_merger: Merger = take_incoming
) -> List[Any]:
    """Index-aligned merge where ``None`` marks an absent slot."""
    existing = existing if isinstance(existing, list) else []
    incoming = incoming if isinstance(incoming, list) else []

    merged = []
    for index in range(max(len(existing), len(incoming))):
        old = existing[index] if index < len(existing) else None
        new = incoming[index] if index < len(incoming) else None
        if new is None:
            merged.append(old)
        elif old is None:
            merged.append(new)
        else:
            merged.append(item_merger(old, new))
    return merged
