"""Spaced repetition scheduling for generated lessons.

SM-2 style intervals (1, 3, then interval * ease days). Schedules live in the
course document under ``reviewSchedules`` keyed by ``"<topic>-<lessonIndex>"``
with epoch-millisecond timestamps, so they can be written back through the
merge engine like any other client edit.
"""
from __future__ import annotations
import math
from typing import Any, List, Optional

from app.models.course import ReviewSchedule

DAY_MS = 24 * 60 * 60 * 1000
INITIAL_EASE = 2.5
MIN_EASE = 1.3


def schedule_key(topic_name: str, lesson_index: int) -> str:
    return f"{topic_name}-{lesson_index}"


def next_schedule(
    previous: Optional[ReviewSchedule],
    topic_name: str,
    lesson_index: int,
    quality: int,
    now: int,
) -> ReviewSchedule:
    """Compute the schedule after a review graded ``quality`` (0 forgot .. 5 perfect)."""
    if previous is None:
        interval = 1.0 if quality >= 3 else 0.5
        return ReviewSchedule(
            topicName=topic_name,
            lessonIndex=lesson_index,
            lastReviewed=now,
            nextReview=now + int(interval * DAY_MS),
            interval=interval,
            ease=INITIAL_EASE,
            reviews=1,
        )

    lapse = 5 - quality
    ease = max(MIN_EASE, previous.ease + (0.1 - lapse * (0.08 + lapse * 0.02)))
    if quality < 3:
        interval = 1.0
    elif previous.reviews == 1:
        interval = 3.0
    else:
        # halves round up
        interval = float(math.floor(previous.interval * ease + 0.5))

    return previous.model_copy(
        update={
            "lastReviewed": now,
            "nextReview": now + int(interval * DAY_MS),
            "interval": interval,
            "ease": ease,
            "reviews": previous.reviews + 1,
        }
    )


def load_schedules(document: Any) -> List[ReviewSchedule]:
    """Parse the well-formed schedules of a course document, skipping the rest."""
    if not isinstance(document, dict):
        return []
    raw = document.get("reviewSchedules")
    if not isinstance(raw, dict):
        return []
    schedules = []
    for value in raw.values():
        schedule = parse_schedule(value)
        if schedule is not None:
            schedules.append(schedule)
    return schedules


def parse_schedule(value: Any) -> Optional[ReviewSchedule]:
    if not isinstance(value, dict):
        return None
    try:
        return ReviewSchedule.model_validate(value)
    except ValueError:
        return None


def due_for_review(document: Any, now: int) -> List[ReviewSchedule]:
    """Schedules already due, oldest due first."""
    due = [s for s in load_schedules(document) if s.nextReview <= now]
    return sorted(due, key=lambda s: s.nextReview)


def upcoming_reviews(document: Any, now: int, days: int = 7) -> List[ReviewSchedule]:
    horizon = now + days * DAY_MS
    upcoming = [
        s for s in load_schedules(document) if now < s.nextReview <= horizon
    ]
    return sorted(upcoming, key=lambda s: s.nextReview)
