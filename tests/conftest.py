"""
Pytest configuration and fixtures for backend testing
"""

import copy
import os

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    async_sessionmaker,
    AsyncSession,
)
from sqlalchemy.pool import NullPool

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["AUTO_MIGRATE"] = "false"

from app.main import app
from app.db.config import get_session
from app.models.persisted_course import Base as PersistedBase

TEST_USER_ID = "user-alice"
OTHER_USER_ID = "user-bob"


@pytest.fixture(scope="session")
def test_client():
    """Create a test client for FastAPI application"""
    with TestClient(app) as client:
        yield client


@pytest_asyncio.fixture
async def test_app(tmp_path):
    """App wired to a fresh SQLite database per test"""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test_api.db'}",
        future=True,
        poolclass=NullPool,
    )
    async_session = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(PersistedBase.metadata.create_all)

    async def override_session():
        async with async_session() as session:
            yield session

    app.dependency_overrides[get_session] = override_session

    yield app

    app.dependency_overrides.clear()
    await engine.dispose()


@pytest_asyncio.fixture
async def client(test_app):
    transport = ASGITransport(app=test_app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"X-User-Id": TEST_USER_ID},
    ) as client:
        yield client


def build_lesson(title, body="", **fields):
    """Build a lesson slot the way the generation pipeline stores it"""
    data = {
        "title": title,
        "body": body,
        "quiz": [],
        "userAnswers": [],
        "flashcards": [],
        "highlights": [],
        "videos": [],
    }
    data.update(fields)
    return data


@pytest.fixture
def make_lesson():
    return build_lesson


@pytest.fixture
def stored_course():
    """A fully generated course as persisted after several saves"""
    return {
        "subject": "Calculus I",
        "course_language_code": "en",
        "course_notes": "Exam covers chapters 1-4",
        "combinedText": "Limits, continuity and derivatives.",
        "topics": [
            {"name": "Limits", "summary": "Approaching values", "coverage": 40},
            {"name": "Derivatives", "summary": "Rates of change", "coverage": 35},
        ],
        "tree": {
            "subject": "Calculus I",
            "topics": [
                {
                    "name": "Limits",
                    "overview": "Limits of functions",
                    "subtopics": [{"name": "One-sided limits"}],
                },
                {"name": "Derivatives"},
            ],
        },
        "nodes": {
            "Limits": {
                "overview": "How functions behave near a point",
                "symbols": [{"symbol": "lim", "meaning": "limit"}],
                "lessonsMeta": [
                    {"type": "concept", "title": "Intuition"},
                    {"type": "practice", "title": "Epsilon-delta"},
                ],
                "lessons": [
                    build_lesson(
                        "Intuition",
                        "A limit describes where f(x) is heading.",
                        quiz=[{"question": "What is lim x->0 of x?"}],
                        userAnswers=["0"],
                        quizResults={"0": {"correct": True, "explanation": "x goes to 0"}},
                        flashcards=[{"prompt": "Limit", "answer": "Target value"}],
                    ),
                    build_lesson("Epsilon-delta", "For every epsilon there is a delta."),
                ],
            },
            "Derivatives": {
                "overview": "Instantaneous rate of change",
                "symbols": [],
                "lessonsMeta": [{"type": "concept", "title": "Slope"}],
                "lessons": [None],
            },
        },
        "reviewSchedules": {
            "Limits-0": {
                "topicName": "Limits",
                "lessonIndex": 0,
                "lastReviewed": 1000,
                "nextReview": 2000,
                "interval": 1,
                "ease": 2.5,
                "reviews": 1,
            }
        },
        "reviewedTopics": {"Limits": 1000},
        "surgeLog": [{"sessionId": "s1", "timestamp": 1000}],
    }


@pytest.fixture
def stale_snapshot(stored_course):
    """What a tab opened before the second Limits lesson finished sends back"""
    snapshot = copy.deepcopy(stored_course)
    limits = snapshot["nodes"]["Limits"]
    limits["lessons"] = [limits["lessons"][0], build_lesson("Epsilon-delta")]
    return snapshot


def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow running"
    )


def pytest_collection_modifyitems(config, items):
    """Add markers to tests based on their location"""
    for item in items:
        if "api" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


