"""Tests for the HTTP API using FastAPI's TestClient."""

import json

import pytest
from fastapi.testclient import TestClient

from jobchat.api import AppServices, create_app
from jobchat.catalog import Catalog
from jobchat.composer import ResponseComposer
from jobchat.composer.service import APOLOGY_WITH_JOBS
from jobchat.extraction import FilterExtractor
from jobchat.matching import MatchEngine
from jobchat.sessions import SessionStore

from tests.helpers.factories import FakeGenerator

ALLOWED_ORIGIN = "https://app.example.com"


def build_services(catalog, generator=None):
    return AppServices(
        catalog=catalog,
        extractor=FilterExtractor(),
        engine=MatchEngine(catalog),
        composer=ResponseComposer(generator=generator),
        sessions=SessionStore(),
    )


def parse_sse(body: str):
    """Decode "data:" frames from an SSE body."""
    frames = []
    for chunk in body.split("\n\n"):
        chunk = chunk.strip()
        if chunk:
            assert chunk.startswith("data: ")
            frames.append(json.loads(chunk[len("data: "):]))
    return frames


@pytest.fixture
def generator():
    return FakeGenerator(pieces=("Here are ", "your jobs."))


@pytest.fixture
def services(sample_catalog, generator):
    return build_services(sample_catalog, generator)


@pytest.fixture
def client(services):
    return TestClient(create_app(services, allowed_origins=[ALLOWED_ORIGIN]))


class TestCatalogEndpoints:
    """Tests for /, /health, /jobs and /jobs/{id}."""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json() == {"status": "OK"}

    def test_health(self, client):
        body = client.get("/health").json()
        assert body == {"status": "ok", "job_count": 8, "generator": "openai", "sessions": 0}

    def test_health_degraded_without_catalog(self):
        client = TestClient(create_app(build_services(Catalog())))
        body = client.get("/health").json()
        assert body["status"] == "degraded"
        assert body["generator"] == "template"

    def test_list_jobs(self, client, sample_records):
        jobs = client.get("/jobs").json()

        assert [job["job_id"] for job in jobs] == [r["jobId"] for r in sample_records]
        assert all("facility_id" not in job for job in jobs)
        assert "FAC-1" not in json.dumps(jobs)

    def test_get_job(self, client):
        response = client.get("/jobs/TX-1")
        assert response.status_code == 200
        assert response.json()["city"] == "Houston"

    def test_get_job_not_found(self, client):
        response = client.get("/jobs/NOPE")
        assert response.status_code == 404
        assert response.json() == {"detail": "job_not_found"}


class TestSearchEndpoint:
    """Tests for GET /search."""

    def test_exact_search(self, client):
        jobs = client.get("/search", params={"state": "FL", "profession": "crna"}).json()
        assert [job["job_id"] for job in jobs] == ["FL-1", "FL-2"]

    def test_min_rate(self, client):
        jobs = client.get("/search", params={"profession": "CRNA", "minRate": "200"}).json()
        assert [job["job_id"] for job in jobs] == ["FL-1", "TX-1"]

    def test_invalid_params_are_ignored(self, client):
        jobs = client.get("/search", params={"state": "FL", "minRate": "lots"}).json()
        assert [job["job_id"] for job in jobs] == ["FL-1", "FL-2"]

    def test_empty_catalog_returns_empty_list(self):
        client = TestClient(create_app(build_services(Catalog())))
        assert client.get("/search", params={"state": "FL"}).json() == []


class TestChatBatch:
    """Tests for POST /chat without streaming."""

    def test_reply_with_jobs(self, client):
        response = client.post("/chat", json={"message": "CRNA jobs in Florida"})

        assert response.status_code == 200
        body = response.json()
        assert body["text"] == "Here are your jobs."
        assert [job["job_id"] for job in body["jobs"]] == ["FL-1", "FL-2"]
        assert body["filters"] == {"state": "FL", "profession": "CRNA", "specialty": "Anesthesia"}
        assert body["fallbackNote"] is None
        assert body["tier"] == "exact"

    def test_api_chat_alias(self, client):
        response = client.post("/api/chat", json={"message": "CRNA jobs in Florida", "stream": False})
        assert response.status_code == 200
        assert len(response.json()["jobs"]) == 2

    def test_explicit_filters_override(self, client):
        body = client.post(
            "/chat",
            json={"message": "CRNA jobs in Florida", "filters": {"state": "TX", "minRate": "abc"}},
        ).json()

        assert body["filters"]["state"] == "TX"
        assert "minRate" not in body["filters"]
        assert [job["job_id"] for job in body["jobs"]] == ["TX-1"]

    def test_fallback_note(self, client):
        body = client.post("/chat", json={"message": "jobs in ZZ", "filters": {"state": "ZZ"}}).json()

        assert body["tier"] == "best_overall"
        assert body["fallbackNote"]
        assert len(body["jobs"]) == 6

    def test_history_recorded(self, client, services, generator):
        client.post("/chat", json={"message": "CRNA jobs in Florida", "sessionId": "s1"})
        client.post("/chat", json={"message": "what about Texas?", "sessionId": "s1"})

        assert services.sessions.history("s1") == [
            {"role": "user", "content": "CRNA jobs in Florida"},
            {"role": "assistant", "content": "Here are your jobs."},
            {"role": "user", "content": "what about Texas?"},
            {"role": "assistant", "content": "Here are your jobs."},
        ]
        second_prompt = generator.calls[1]
        assert [m["role"] for m in second_prompt] == ["system", "user", "assistant", "user"]

    def test_failure_keeps_jobs_and_history_clean(self, sample_catalog):
        services = build_services(sample_catalog, FakeGenerator(fail_after=0))
        client = TestClient(create_app(services))

        body = client.post("/chat", json={"message": "CRNA jobs in Florida", "sessionId": "s1"}).json()

        assert body["text"] == APOLOGY_WITH_JOBS
        assert len(body["jobs"]) == 2
        assert services.sessions.history("s1") == []

    def test_templated_reply_without_model(self, sample_catalog):
        client = TestClient(create_app(build_services(sample_catalog)))
        body = client.post("/chat", json={"message": "CRNA jobs in Florida"}).json()

        assert "FL-1" in body["text"]
        assert len(body["jobs"]) == 2

    def test_missing_message(self, client):
        response = client.post("/chat", json={})
        assert response.status_code == 200
        assert response.json()["filters"] == {}


class TestChatStream:
    """Tests for POST /chat with server-sent events."""

    def test_stream_flag(self, client):
        response = client.post("/chat", json={"message": "CRNA jobs in Florida", "stream": True})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        frames = parse_sse(response.text)
        assert [f["type"] for f in frames] == ["text", "text", "blocks", "done"]
        assert "".join(f["data"] for f in frames[:2]) == "Here are your jobs."
        block = frames[2]["data"][0]
        assert block["type"] == "jobs"
        assert [item["job_id"] for item in block["items"]] == ["FL-1", "FL-2"]

    def test_accept_header(self, client):
        response = client.post(
            "/chat",
            json={"message": "CRNA jobs in Florida"},
            headers={"Accept": "text/event-stream"},
        )
        assert parse_sse(response.text)[-1] == {"type": "done"}

    def test_stream_flag_false_beats_accept_header(self, client):
        response = client.post(
            "/chat",
            json={"message": "CRNA jobs in Florida", "stream": False},
            headers={"Accept": "text/event-stream"},
        )
        assert response.headers["content-type"].startswith("application/json")

    def test_stream_records_history(self, client, services):
        client.post("/chat", json={"message": "CRNA jobs in Florida", "sessionId": "s2", "stream": True})

        assert services.sessions.history("s2")[-1] == {"role": "assistant", "content": "Here are your jobs."}

    def test_stream_failure_still_sends_jobs(self, sample_catalog):
        services = build_services(sample_catalog, FakeGenerator(pieces=("Partial",), fail_after=1))
        client = TestClient(create_app(services))

        response = client.post("/chat", json={"message": "CRNA jobs in Florida", "sessionId": "s3", "stream": True})
        frames = parse_sse(response.text)

        assert [f["type"] for f in frames] == ["text", "text", "blocks", "done"]
        assert APOLOGY_WITH_JOBS in frames[1]["data"]
        assert len(frames[2]["data"][0]["items"]) == 2
        assert services.sessions.history("s3") == []


class TestCors:
    """Tests for the CORS allow-list."""

    def test_allowed_origin(self, client):
        response = client.get("/jobs", headers={"Origin": ALLOWED_ORIGIN})
        assert response.headers["access-control-allow-origin"] == ALLOWED_ORIGIN

    def test_other_origin(self, client):
        response = client.get("/jobs", headers={"Origin": "https://evil.example.com"})
        assert "access-control-allow-origin" not in response.headers

    def test_preflight(self, client):
        response = client.options(
            "/chat",
            headers={
                "Origin": ALLOWED_ORIGIN,
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "content-type",
            },
        )
        assert response.status_code == 200
