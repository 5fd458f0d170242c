from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from src.app.dependencies import get_orchestrator, get_practitioner_cache, get_session_store
from src.app.main import app
from src.orchestrator.graph import AgentOrchestrator
from src.services.dispatcher import IntentDispatcher
from src.services.intent_rules import RuleBasedIntentOracle
from src.services.knowledge_base import default_knowledge_base
from src.services.practitioners import PractitionerCache
from src.services.session_memory import SessionMemoryStore
from src.services.spelling import SpellingCorrector


@pytest.fixture()
def store():
    return SessionMemoryStore()


@pytest.fixture()
def client(records, store):
    cache = PractitionerCache(records)
    knowledge_base = default_knowledge_base()
    oracle = RuleBasedIntentOracle(knowledge_base=knowledge_base)
    oracle.update_roster(cache.snapshot())

    def _orchestrator():
        return AgentOrchestrator(
            session_store=store,
            dispatcher=IntentDispatcher(cache=cache, knowledge_base=knowledge_base),
            intent_classifier=oracle.classify,
            spelling_corrector=SpellingCorrector().correct_text,
        )

    overrides = {
        get_orchestrator: _orchestrator,
        get_session_store: lambda: store,
        get_practitioner_cache: lambda: cache,
    }
    app.dependency_overrides.update(overrides)
    try:
        yield TestClient(app)
    finally:
        for key in overrides:
            app.dependency_overrides.pop(key, None)


def _search(client: TestClient, question):
    return client.post("/api/v1/search", json={"question": question})


def test_health_reports_roster_size(client: TestClient):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["practitioners"] == 4


def test_first_request_issues_session_cookie(client: TestClient, store):
    response = _search(client, "which branches do you have")
    data = response.json()

    assert response.status_code == 200
    assert data["intent"] == "list.branches"
    assert data["answer"] == ["Rwanda Branch", "Bulbula Branch"]
    assert response.cookies.get("sessionId") == data["session_id"]
    assert data["session_id"] in store


def test_follow_up_questions_share_the_session(client: TestClient):
    first = _search(client, "show doctors for cardiology").json()
    second = _search(client, "availability of doctor").json()

    assert second["session_id"] == first["session_id"]
    assert second["intent"] == "doctor.availability"
    assert second["answer"][0] == "Dr. Abebe Kebede (Senior Consultant) is available on:"


def test_unknown_question_returns_fallback(client: TestClient):
    data = _search(client, "hello there").json()

    assert data["intent"] is None
    assert data["answer"] == "Sorry, I didn't understand. Can you rephrase?"


@pytest.mark.parametrize("payload", [{}, {"question": ""}, {"question": "   "}])
def test_missing_question_is_rejected(client: TestClient, payload):
    response = client.post("/api/v1/search", json=payload)

    assert response.status_code == 400
    assert response.json() == {"detail": "No question provided"}


def test_reset_forgets_the_session(client: TestClient, store):
    session_id = _search(client, "show doctors for cardiology").json()["session_id"]
    assert store.get(session_id).doctor == "Dr. Abebe Kebede"

    response = client.post("/api/v1/reset")

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert session_id not in store
    assert "sessionId" in response.headers.get("set-cookie", "")

    client.cookies.set("sessionId", session_id)
    data = _search(client, "availability of doctor").json()
    assert data["answer"] == "Please provide a doctor's name."


def test_reset_without_session_still_succeeds(client: TestClient):
    response = client.post("/api/v1/reset")

    assert response.status_code == 200
    assert response.json() == {"success": True}
