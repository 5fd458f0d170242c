from __future__ import annotations

import threading

import pytest
import requests

from src.adapters import roster_client
from src.adapters.roster_client import RosterClient, RosterUnavailableError
from src.ingestion.roster import RosterRefresher
from src.services.practitioners import PractitionerCache


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=""):
        self._payload = payload
        self.status_code = status_code
        self.text = text

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class StaticSource:
    def __init__(self, records) -> None:
        self.records = records
        self.calls = 0
        self.fetched = threading.Event()

    def fetch(self):
        self.calls += 1
        self.fetched.set()
        return list(self.records)


class FailingSource:
    def fetch(self):
        raise RosterUnavailableError("endpoint down")


def test_roster_client_parses_rows_and_skips_malformed(monkeypatch, roster_rows):
    calls = []

    def fake_get(url, timeout):
        calls.append((url, timeout))
        return FakeResponse(roster_rows + [{"doctorDepartment": "No Name"}])

    monkeypatch.setattr(roster_client.requests, "get", fake_get)
    client = RosterClient(url="https://roster.test/doctors", timeout=3.0)

    records = client.fetch()

    assert calls == [("https://roster.test/doctors", 3.0)]
    assert [record.stripped_name for record in records] == [
        "Dr. Abebe Kebede",
        "Dr. Selam Tesfaye",
        "Dr. Hanna Girma",
        "Dr. Yonas Alemu",
    ]
    abebe = records[0]
    assert abebe.is_available_on("monday") is True
    assert abebe.is_available_on("tuesday") is False
    assert abebe.availability_on("wednesday").start == "02:00 PM"
    assert abebe.is_available_on("sunday") is False


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse(status_code=500, text="boom"),
        FakeResponse(payload=ValueError("not json")),
        FakeResponse(payload={"error": "unexpected"}),
    ],
)
def test_roster_client_rejects_bad_responses(monkeypatch, response):
    monkeypatch.setattr(roster_client.requests, "get", lambda url, timeout: response)

    with pytest.raises(RosterUnavailableError):
        RosterClient(url="https://roster.test/doctors").fetch()


def test_roster_client_wraps_network_errors(monkeypatch):
    def fake_get(url, timeout):
        raise requests.ConnectionError("unreachable")

    monkeypatch.setattr(roster_client.requests, "get", fake_get)

    with pytest.raises(RosterUnavailableError):
        RosterClient(url="https://roster.test/doctors").fetch()


def test_refresh_swaps_cache_and_notifies_listeners(records):
    cache = PractitionerCache()
    seen = []
    cache.add_listener(seen.append)
    refresher = RosterRefresher(source=StaticSource(records), cache=cache, interval_seconds=60)

    assert refresher.refresh_once() is True

    assert len(cache) == 4
    assert seen == [cache.snapshot()]
    assert cache.refreshed_at is not None


def test_failed_refresh_keeps_previous_snapshot(records):
    cache = PractitionerCache(records)
    before = cache.snapshot()
    refresher = RosterRefresher(source=FailingSource(), cache=cache, interval_seconds=60)

    assert refresher.refresh_once() is False
    assert cache.snapshot() is before


def test_snapshots_are_not_mutated_by_replace(records):
    cache = PractitionerCache(records)
    held = cache.snapshot()

    cache.replace(records[:1])

    assert len(held) == 4
    assert len(cache.snapshot()) == 1


def test_background_refresher_runs_until_stopped(records):
    cache = PractitionerCache()
    source = StaticSource(records)
    refresher = RosterRefresher(source=source, cache=cache, interval_seconds=0.01)

    refresher.start()
    try:
        assert source.fetched.wait(timeout=2.0)
        assert refresher.running is True
    finally:
        refresher.stop()

    assert refresher.running is False
    assert source.calls >= 1


def test_refresh_interval_must_be_positive(records):
    with pytest.raises(ValueError):
        RosterRefresher(source=StaticSource(records), cache=PractitionerCache(), interval_seconds=0)
