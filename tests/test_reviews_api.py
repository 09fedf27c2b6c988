import pytest
from httpx import AsyncClient

from app.services.review_scheduler import DAY_MS
from app.utils.feature_flags import feature_flags

SLUG = "calc"
URL = f"/api/v1/subjects/{SLUG}/reviews"


async def _store(client: AsyncClient, document):
    r = await client.put("/api/v1/subject-data", json={"slug": SLUG, "data": document})
    assert r.status_code == 200, r.text


@pytest.mark.asyncio
async def test_first_review_creates_schedule(client: AsyncClient, stored_course):
    await _store(client, stored_course)

    r = await client.post(URL, json={"topicName": "Derivatives", "lessonIndex": 0, "quality": 4})
    assert r.status_code == 200, r.text
    schedule = r.json()
    assert schedule["reviews"] == 1
    assert schedule["interval"] == 1.0
    assert schedule["nextReview"] - schedule["lastReviewed"] == DAY_MS

    data = (await client.get("/api/v1/subject-data", params={"slug": SLUG})).json()["data"]
    assert set(data["reviewSchedules"]) == {"Limits-0", "Derivatives-0"}
    assert data["reviewedTopics"]["Derivatives"] == schedule["lastReviewed"]
    # the rest of the course is untouched
    assert data["nodes"] == stored_course["nodes"]


@pytest.mark.asyncio
async def test_second_review_extends_interval(client: AsyncClient, stored_course):
    await _store(client, stored_course)

    r = await client.post(URL, json={"topicName": "Limits", "lessonIndex": 0, "quality": 5})
    schedule = r.json()
    assert schedule["reviews"] == 2
    assert schedule["interval"] == 3.0
    assert schedule["ease"] > 2.5


@pytest.mark.asyncio
async def test_due_and_upcoming(client: AsyncClient, stored_course):
    await _store(client, stored_course)

    r = await client.get(f"{URL}/due")
    assert r.status_code == 200
    # fixture schedule came due in 1970
    assert [s["topicName"] for s in r.json()] == ["Limits"]

    await client.post(URL, json={"topicName": "Limits", "lessonIndex": 0, "quality": 5})
    assert (await client.get(f"{URL}/due")).json() == []
    upcoming = (await client.get(f"{URL}/upcoming", params={"days": 7})).json()
    assert [s["topicName"] for s in upcoming] == ["Limits"]


@pytest.mark.asyncio
async def test_review_unknown_course(client: AsyncClient):
    r = await client.post(URL, json={"topicName": "Limits", "lessonIndex": 0, "quality": 3})
    assert r.status_code == 404
    assert r.json()["error"] == "Course not found"


@pytest.mark.asyncio
async def test_review_quality_is_bounded(client: AsyncClient, stored_course):
    await _store(client, stored_course)
    r = await client.post(URL, json={"topicName": "Limits", "lessonIndex": 0, "quality": 9})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_reviews_disabled_by_flag(client: AsyncClient, stored_course, monkeypatch):
    await _store(client, stored_course)
    monkeypatch.setattr(feature_flags.flags["spaced_repetition"], "enabled", False)
    r = await client.get(f"{URL}/due")
    assert r.status_code == 404
