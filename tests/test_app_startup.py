from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from src.app import dependencies, main
from src.app.config import get_settings
from src.orchestrator.intents import EntityKind

SINGLETONS = (
    dependencies.get_session_store,
    dependencies.get_practitioner_cache,
    dependencies.get_roster_client,
    dependencies.get_roster_refresher,
    dependencies.get_intent_oracle,
)


class FakeRosterSource:
    def __init__(self, records) -> None:
        self.records = records
        self.calls = 0

    def fetch(self):
        self.calls += 1
        return list(self.records)


@pytest.fixture()
def roster_source(records, monkeypatch):
    source = FakeRosterSource(records)
    for provider in SINGLETONS:
        provider.cache_clear()
    monkeypatch.setattr(dependencies, "get_roster_client", lambda: source)
    monkeypatch.setattr(
        main, "settings", get_settings().model_copy(update={"roster_refresh_enabled": True})
    )
    try:
        yield source
    finally:
        for provider in SINGLETONS:
            provider.cache_clear()


def test_startup_loads_roster_and_teaches_the_oracle(roster_source):
    with TestClient(main.app) as client:
        refresher = dependencies.get_roster_refresher()
        cache = dependencies.get_practitioner_cache()

        assert roster_source.calls >= 1
        assert len(cache) == 4
        assert refresher.running is True

        entities, _ = dependencies.get_intent_oracle().extract_entities(
            "availability of Dr. Hanna Girma"
        )
        assert [(entity.kind, entity.source_text) for entity in entities] == [
            (EntityKind.DOCTOR, "Dr. Hanna Girma")
        ]

        data = client.post("/api/v1/search", json={"question": "show doctors for cardiology"}).json()
        assert data["answer"] == ["Dr. Abebe Kebede (Senior Consultant) (Internal Medicine)"]
        assert client.get("/health").json()["practitioners"] == 4

    assert refresher.running is False
