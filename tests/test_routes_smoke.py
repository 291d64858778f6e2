"""Smoke tests for API routes."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from mentormind.api import deps
from mentormind.api.routes import CHAT_RETRY_MESSAGE, QUIZ_RETRY_MESSAGE, router
from mentormind.errors import GatewayError, QuizGenerationError
from mentormind.models.quiz import Quiz
from mentormind.tutoring.gateway import TutorReply

PROFILE = {
    "name": "Ayesha",
    "topic": "Algebra",
    "priorKnowledge": "intermediate",
    "confidence": 2,
    "consent": True,
}

QUIZ = {
    "quizTitle": "Algebra basics",
    "topic": "Algebra",
    "difficulty": "intermediate",
    "questions": [
        {
            "id": i + 1,
            "question": f"Q{i + 1}",
            "options": {"A": "a", "B": "b", "C": "c", "D": "d"},
            "correctAnswer": "A",
            "explanation": "",
        }
        for i in range(4)
    ],
}


@pytest.fixture
def gateway():
    gw = MagicMock()
    gw.send_prompt = AsyncMock(return_value=TutorReply(reply="x is 4"))
    return gw


@pytest.fixture
def quiz_generator():
    gen = MagicMock()
    gen.generate = AsyncMock(return_value=Quiz.model_validate(QUIZ))
    return gen


@pytest.fixture
def diagrams():
    gen = MagicMock()
    gen.generate = AsyncMock(return_value="data:image/svg+xml;base64,AA==")
    return gen


@pytest.fixture
def mock_settings():
    settings = MagicMock()
    settings.quiz_question_count = 5
    return settings


@pytest.fixture
def client(store, gateway, quiz_generator, diagrams, mock_settings):
    app = FastAPI()
    app.include_router(router)
    app.dependency_overrides[deps.get_store] = lambda: store
    app.dependency_overrides[deps.get_gateway] = lambda: gateway
    app.dependency_overrides[deps.get_quiz_generator] = lambda: quiz_generator
    app.dependency_overrides[deps.get_diagram_generator] = lambda: diagrams
    with patch("mentormind.api.routes.get_settings", return_value=mock_settings):
        with TestClient(app) as c:
            yield c


@pytest.fixture
def onboarded(client):
    assert client.put("/api/profile", json=PROFILE).status_code == 200
    return client


class TestHealthCheck:
    def test_health_returns_ok(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestProfile:
    def test_missing_profile(self, client):
        assert client.get("/api/profile").status_code == 404

    def test_onboarding_saves_profile(self, onboarded):
        data = onboarded.get("/api/profile").json()
        assert data["name"] == "Ayesha"
        assert data["sessionLength"] == "15-30min"

    def test_consent_required(self, client):
        response = client.put("/api/profile", json={**PROFILE, "consent": False})
        assert response.status_code == 422
        assert client.get("/api/profile").status_code == 404


class TestChat:
    def test_history_seeds_welcome(self, onboarded):
        history = onboarded.get("/api/chat/history").json()
        assert len(history) == 1
        assert history[0]["sender"] == "ai"
        assert "Welcome Ayesha" in history[0]["text"]

    def test_history_empty_without_profile(self, client):
        assert client.get("/api/chat/history").json() == []

    def test_send_message(self, onboarded, gateway):
        onboarded.post("/api/sessions/start")
        response = onboarded.post("/api/chat", json={"message": "Solve x - 2 = 2", "language": "urdu"})
        assert response.status_code == 200
        assert response.json()["text"] == "x is 4"

        history = onboarded.get("/api/chat/history").json()
        assert [m["sender"] for m in history] == ["user", "ai"]
        assert onboarded.get("/api/sessions/current").json()["messagesCount"] == 1
        assert gateway.send_prompt.await_args.args[2] == "urdu"

    def test_failed_reply_becomes_retry_message(self, onboarded, gateway):
        gateway.send_prompt.side_effect = GatewayError("down")
        response = onboarded.post("/api/chat", json={"message": "Explain slopes"})
        assert response.status_code == 200
        assert response.json()["text"] == CHAT_RETRY_MESSAGE
        assert len(onboarded.get("/api/chat/history").json()) == 2

    def test_empty_message_rejected(self, client):
        assert client.post("/api/chat", json={"message": ""}).status_code == 422

    def test_clear_history(self, onboarded):
        onboarded.post("/api/chat", json={"message": "hello"})
        onboarded.delete("/api/chat/history")
        history = onboarded.get("/api/chat/history").json()
        assert len(history) == 1

    def test_diagram_for_last_user_message(self, onboarded, diagrams):
        onboarded.post("/api/chat", json={"message": "Compare lines vs parabolas"})
        response = onboarded.post("/api/chat/diagram")
        assert response.status_code == 200
        assert response.json()["imageUrl"] == "data:image/svg+xml;base64,AA=="
        assert diagrams.generate.await_args.args[0] == "Compare lines vs parabolas"

    def test_diagram_needs_user_message(self, onboarded):
        assert onboarded.post("/api/chat/diagram").status_code == 404


class TestSessions:
    def test_start_uses_profile_defaults(self, onboarded):
        data = onboarded.post("/api/sessions/start").json()
        assert data["topic"] == "Algebra"
        assert data["confidenceBefore"] == 2

    def test_start_with_explicit_values(self, client):
        data = client.post("/api/sessions/start", json={"topic": "Geometry", "confidence": 4}).json()
        assert data["topic"] == "Geometry"

    def test_end_without_session(self, onboarded):
        assert onboarded.post("/api/sessions/end").json() == {"session": None}

    def test_end_without_session_or_profile(self, client):
        response = client.post("/api/sessions/end")
        assert response.status_code == 200
        assert response.json() == {"session": None}

    def test_end_records_session(self, onboarded):
        onboarded.post("/api/sessions/start")
        session = onboarded.post("/api/sessions/end", json={"confidence": 4}).json()["session"]
        assert session["confidenceAfter"] == 4
        assert onboarded.get("/api/sessions/current").status_code == 404
        analytics = onboarded.get("/api/analytics", params={"window": "all"}).json()
        assert analytics["progress"]["sessionsCompleted"] == 1
        assert analytics["progress"]["confidenceGrowth"] == [4]


class TestQuiz:
    def test_generate_uses_profile(self, onboarded, quiz_generator):
        response = onboarded.post("/api/quiz", json={})
        assert response.status_code == 200
        assert len(response.json()["questions"]) == 4
        args = quiz_generator.generate.await_args
        assert args.args[0] == "Algebra"
        assert args.kwargs["difficulty"] == "intermediate"
        assert args.kwargs["count"] == 5

    def test_generate_needs_topic(self, client):
        assert client.post("/api/quiz", json={}).status_code == 422

    def test_generation_failure(self, onboarded, quiz_generator):
        quiz_generator.generate.side_effect = QuizGenerationError("Invalid quiz structure")
        response = onboarded.post("/api/quiz", json={"topic": "Algebra"})
        assert response.status_code == 502
        assert response.json()["detail"] == QUIZ_RETRY_MESSAGE

    def test_submit_result(self, onboarded):
        response = onboarded.post(
            "/api/quiz/results",
            json={"quiz": QUIZ, "answers": {"0": "A", "1": "A", "2": "B", "3": "C"}},
        )
        assert response.status_code == 200
        result = response.json()
        assert result["score"] == 50
        assert result["correctAnswers"] == 2
        assert result["difficulty"] == "intermediate"

        analytics = onboarded.get("/api/analytics").json()
        assert analytics["performance"]["quizScores"] == [50]
        assert analytics["performance"]["weakAreas"] == ["Algebra"]


class TestAnalyticsAndData:
    def test_analytics_needs_profile(self, client):
        assert client.get("/api/analytics").status_code == 404

    def test_invalid_window(self, onboarded):
        assert onboarded.get("/api/analytics", params={"window": "year"}).status_code == 422

    def test_empty_analytics(self, onboarded):
        data = onboarded.get("/api/analytics", params={"window": "month"}).json()
        assert data["progress"]["topicsCompleted"] == 0
        assert data["performance"]["learningPace"] == "slow"
        assert data["progress"]["confidenceGrowth"] == [2]

    def test_export_and_reset(self, onboarded, store):
        onboarded.post("/api/chat", json={"message": "hello"})
        exported = onboarded.get("/api/data/export").json()
        assert exported["profile"]["name"] == "Ayesha"
        assert len(exported["chatHistory"]) == 2
        json.dumps(exported)

        assert onboarded.delete("/api/data").status_code == 200
        assert onboarded.get("/api/profile").status_code == 404
        assert onboarded.get("/api/data/export").json()["chatHistory"] == []
