"""Spaced repetition scheduling tests"""

from app.models.course import ReviewSchedule
from app.services.review_scheduler import (
    DAY_MS,
    due_for_review,
    next_schedule,
    parse_schedule,
    schedule_key,
    upcoming_reviews,
)

NOW = 1_700_000_000_000


def _schedule(**overrides):
    data = {
        "topicName": "Limits",
        "lessonIndex": 0,
        "lastReviewed": NOW - DAY_MS,
        "nextReview": NOW,
        "interval": 1,
        "ease": 2.5,
        "reviews": 1,
    }
    data.update(overrides)
    return ReviewSchedule(**data)


class TestNextSchedule:
    def test_first_review_good(self):
        schedule = next_schedule(None, "Limits", 0, 4, NOW)
        assert schedule.interval == 1.0
        assert schedule.nextReview == NOW + DAY_MS
        assert schedule.ease == 2.5
        assert schedule.reviews == 1

    def test_first_review_poor(self):
        schedule = next_schedule(None, "Limits", 0, 1, NOW)
        assert schedule.interval == 0.5
        assert schedule.nextReview == NOW + DAY_MS // 2

    def test_second_review_jumps_to_three_days(self):
        schedule = next_schedule(_schedule(), "Limits", 0, 5, NOW)
        assert schedule.interval == 3.0
        assert schedule.reviews == 2
        assert abs(schedule.ease - 2.6) < 1e-9

    def test_later_review_multiplies_by_ease(self):
        previous = _schedule(interval=3, reviews=2, ease=2.5)
        schedule = next_schedule(previous, "Limits", 0, 4, NOW)
        # quality 4 leaves ease unchanged
        assert abs(schedule.ease - 2.5) < 1e-9
        assert schedule.interval == 8.0

    def test_half_day_intervals_round_up(self):
        schedule = None
        intervals = []
        for _ in range(7):
            schedule = next_schedule(schedule, "Limits", 0, 4, NOW)
            intervals.append(schedule.interval)
        # 125 * 2.5 = 312.5
        assert intervals == [1.0, 3.0, 8.0, 20.0, 50.0, 125.0, 313.0]

    def test_lapse_resets_interval(self):
        previous = _schedule(interval=30, reviews=5, ease=2.0)
        schedule = next_schedule(previous, "Limits", 0, 2, NOW)
        assert schedule.interval == 1.0
        assert schedule.ease < 2.0

    def test_ease_never_drops_below_minimum(self):
        previous = _schedule(ease=1.3, reviews=4)
        schedule = next_schedule(previous, "Limits", 0, 0, NOW)
        assert schedule.ease == 1.3


def test_schedule_key():
    assert schedule_key("Limits", 2) == "Limits-2"


def test_parse_schedule_rejects_malformed():
    assert parse_schedule({"topicName": "Limits"}) is None
    assert parse_schedule("tomorrow") is None
    assert parse_schedule(_schedule().model_dump()) == _schedule()


def test_due_and_upcoming():
    document = {
        "reviewSchedules": {
            "late": _schedule(nextReview=NOW - 10).model_dump(),
            "later": _schedule(nextReview=NOW - 5).model_dump(),
            "soon": _schedule(nextReview=NOW + DAY_MS).model_dump(),
            "far": _schedule(nextReview=NOW + 30 * DAY_MS).model_dump(),
            "junk": "not a schedule",
        }
    }
    due = due_for_review(document, NOW)
    assert [s.nextReview for s in due] == [NOW - 10, NOW - 5]

    upcoming = upcoming_reviews(document, NOW, days=7)
    assert [s.nextReview for s in upcoming] == [NOW + DAY_MS]


def test_due_without_schedules():
    assert due_for_review({}, NOW) == []
    assert upcoming_reviews(None, NOW) == []
