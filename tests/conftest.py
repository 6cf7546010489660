"""
Placement Prep Tracker - Test Configuration and Fixtures

The PostgreSQL session factory is swapped for an in-memory SQLite engine
loaded with schema.sql. The AI gateway and the MongoDB-backed stores are
replaced through FastAPI dependency overrides.
"""
import os
import json

# Set testing environment before the app reads its settings
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['AI_API_KEY'] = 'test-api-key'
os.environ['LOG_LEVEL'] = 'WARNING'

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.db.postgres as postgres
from app.main import app
from app.services.ai_client import get_ai_client
from app.services.mongo_service import (
    build_object_name, owns_object, get_resume_file_service, get_resume_analysis_service
)
from app.services.records_service import utc_now
from tests.helpers import make_questions


# ============================================================
# FAKES
# ============================================================

class FakeAIClient:
    """Stands in for AIGatewayClient; replies are set per test."""

    def __init__(self):
        self.questions_reply = json.dumps({"questions": make_questions(3)})
        self.stream_chunks = ["Hello! ", "Tell me ", "about yourself."]
        self.stream_failure = None
        self.feedback_reply = json.dumps({
            "overallRating": 7.5,
            "strengths": ["Clear communication"],
            "improvements": ["Use more examples"],
            "questionFeedback": [{"question": "Tell me about yourself", "rating": 8, "feedback": "Good"}],
            "tips": ["Practice STAR answers"],
            "summary": "Solid interview."
        })
        self.resume_reply = "```json\n" + json.dumps({
            "score": 82,
            "summary": "Strong resume.",
            "strengths": ["Projects"],
            "improvements": ["Quantify impact"],
            "atsScore": 75,
            "atsNotes": "Mostly parsable",
            "contentAnalysis": {
                "quantifiedAchievements": False,
                "actionOriented": True,
                "skillsHighlighted": True,
                "notes": "Add numbers"
            },
            "formatNotes": "One page",
            "recommendations": ["Add metrics"]
        }) + "\n```"
        self.error = None
        self.calls = []

    def _check(self):
        if self.error:
            raise self.error

    def generate_questions(self, category, subcategory, difficulty, num_questions):
        self.calls.append(("generate_questions", category, subcategory, difficulty, num_questions))
        self._check()
        return self.questions_reply

    def stream_interview(self, messages, interview_type, target_role, difficulty, action="continue"):
        self.calls.append(("stream_interview", action, list(messages)))
        self._check()
        for chunk in self.stream_chunks:
            yield chunk
        if self.stream_failure:
            raise self.stream_failure

    def interview_feedback(self, messages, interview_type):
        self.calls.append(("interview_feedback", list(messages)))
        self._check()
        return self.feedback_reply

    def analyze_resume(self, resume_text, target_role=None):
        self.calls.append(("analyze_resume", resume_text, target_role))
        self._check()
        return self.resume_reply


class FakeFileStore:
    """In-memory replacement for ResumeFileService."""

    def __init__(self):
        self.objects = {}

    def upload(self, user_id, filename, content, content_type=None):
        object_name = build_object_name(user_id, filename)
        self.objects[object_name] = (content, content_type or "application/octet-stream", filename)
        return object_name

    def download(self, user_id, object_name):
        if not owns_object(user_id, object_name):
            return None
        return self.objects.get(object_name)

    def delete(self, user_id, object_name):
        if not owns_object(user_id, object_name):
            return False
        return self.objects.pop(object_name, None) is not None


class FakeAnalysisStore:
    """In-memory replacement for ResumeAnalysisService."""

    def __init__(self):
        self.docs = []

    def insert(self, user_id, analysis, target_role=None, source="text"):
        doc = {
            "id": f"analysis-{len(self.docs) + 1}",
            "user_id": user_id,
            "target_role": target_role,
            "source": source,
            "analysis": analysis,
            "created_at": utc_now()
        }
        self.docs.append(doc)
        return doc

    def list_for_user(self, user_id, limit=20):
        return [d for d in reversed(self.docs) if d["user_id"] == user_id][:limit]

    def delete(self, user_id, analysis_id):
        for doc in self.docs:
            if doc["id"] == analysis_id and doc["user_id"] == user_id:
                self.docs.remove(doc)
                return True
        return False


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture
def db_engine(monkeypatch):
    """Fresh in-memory database for each test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    monkeypatch.setattr(postgres, "SessionLocal", TestSessionLocal)

    with postgres.get_db_session() as db:
        postgres.init_schema(db)

    yield engine
    engine.dispose()


@pytest.fixture
def ai_client():
    return FakeAIClient()


@pytest.fixture
def file_store():
    return FakeFileStore()


@pytest.fixture
def analysis_store():
    return FakeAnalysisStore()


@pytest.fixture
def client(db_engine, ai_client, file_store, analysis_store):
    """Test client with AI and MongoDB dependencies overridden"""
    app.dependency_overrides[get_ai_client] = lambda: ai_client
    app.dependency_overrides[get_resume_file_service] = lambda: file_store
    app.dependency_overrides[get_resume_analysis_service] = lambda: analysis_store

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(client):
    """Register + login; returns auth headers for the new user"""
    def _make_user(email: str = "student@example.com", password: str = "secret123") -> dict:
        response = client.post("/api/auth/register", json={"email": email, "password": password})
        assert response.status_code == 201, response.text
        response = client.post("/api/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}
    return _make_user


@pytest.fixture
def auth_headers(make_user):
    return make_user()


@pytest.fixture
def other_headers(make_user):
    return make_user("rival@example.com")

