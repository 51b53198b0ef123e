"""Tests for the HTTP interface."""

import base64

import pytest
from fastapi.testclient import TestClient

from conftest import SAMPLE_README, StubAdapter

from insight_engine.domain.entities import AnalysisMetadata, Provider
from insight_engine.domain.exceptions import BackendError, RepositoryNotFoundError
from insight_engine.infrastructure.config import Settings
from insight_engine.interface.app import create_app
from insight_engine.interface.dependencies import (
    get_app_settings,
    get_repo_fetcher,
    get_use_case,
)
from insight_engine.services.synthesize_insights import SynthesizeInsightsUseCase


class FakeFetcher:
    def __init__(self, metadata=None, readme=SAMPLE_README, error=None):
        self.metadata = metadata or AnalysisMetadata(name="fastgrid", language="Go", stars=240)
        self.readme = readme
        self.error = error

    async def fetch_metadata(self, url):
        if self.error:
            raise self.error
        return self.metadata

    async def fetch_readme(self, url):
        return self.readme


@pytest.fixture
def adapter():
    return StubAdapter()


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def settings(monkeypatch):
    for name in ("DEFAULT_PROVIDER", "OPENAI_API_KEY", "DEFAULT_MODEL"):
        monkeypatch.delenv(name, raising=False)
    return Settings(_env_file=None)


@pytest.fixture
def client(adapter, fetcher, settings):
    app = create_app()
    app.dependency_overrides[get_use_case] = lambda: SynthesizeInsightsUseCase(
        {Provider.OPENAI: adapter}
    )
    app.dependency_overrides[get_repo_fetcher] = lambda: fetcher
    app.dependency_overrides[get_app_settings] = lambda: settings
    return TestClient(app)


class TestAnalyzeText:
    def test_heuristic_without_key(self, client, adapter):
        resp = client.post("/insights", json={"content": SAMPLE_README})
        assert resp.status_code == 200
        body = resp.json()
        assert body["source"] == "heuristic"
        assert body["fallbackReason"] == "no-credential"
        assert set(body) >= {
            "summary",
            "keyFeatures",
            "technologies",
            "useCases",
            "mainSections",
            "complexity",
            "recommendation",
        }
        assert adapter.calls == []

    def test_backend_with_request_key(self, client, adapter):
        resp = client.post(
            "/insights",
            json={"content": "hello", "provider": "openai", "apiKey": "sk-request-key"},
        )
        body = resp.json()
        assert body["source"] == "backend"
        assert body["provider"] == "openai"
        assert body["complexity"] == "High"
        assert adapter.calls[0][2] == "sk-request-key"

    def test_backend_failure_still_200(self, client, adapter):
        adapter.error = BackendError("openai", "down", status=503)
        resp = client.post(
            "/insights",
            json={"content": "hello", "provider": "openai", "apiKey": "sk-request-key"},
        )
        assert resp.status_code == 200
        assert resp.json()["fallbackReason"] == "backend-error"

    def test_missing_content_is_422(self, client):
        resp = client.post("/insights", json={})
        assert resp.status_code == 422
        assert resp.json()["status"] == "error"
        assert "content" in resp.json()["message"]

    def test_unknown_provider_is_422(self, client):
        resp = client.post("/insights", json={"content": "x", "provider": "cohere"})
        assert resp.status_code == 422


class TestAnalyzeRepository:
    def test_repository(self, client):
        resp = client.post(
            "/insights/repository", json={"githubUrl": "https://github.com/acme/fastgrid"}
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["technologies"][0] == "Go"
        assert body["summary"].startswith("fastgrid is a Go project")

    def test_non_github_url(self, client):
        resp = client.post("/insights/repository", json={"githubUrl": "https://gitlab.com/a/b"})
        assert resp.status_code == 422
        assert "githubUrl" in resp.json()["message"]

    def test_malformed_github_url(self, client):
        resp = client.post("/insights/repository", json={"githubUrl": "https://github.com/acme"})
        assert resp.status_code == 422

    def test_repository_not_found(self, client, fetcher):
        fetcher.error = RepositoryNotFoundError("Repository not found.")
        resp = client.post(
            "/insights/repository", json={"githubUrl": "https://github.com/acme/missing"}
        )
        assert resp.status_code == 404
        assert resp.json() == {"status": "error", "message": "Repository not found."}


class TestAnalyzeDocument:
    def test_text_document(self, client):
        payload = base64.b64encode(b"# Intro\nSome notes\n## Results\nMore").decode()
        resp = client.post(
            "/insights/document", json={"fileName": "notes.md", "contentBase64": payload}
        )
        assert resp.status_code == 200
        assert resp.json()["mainSections"] == ["Intro", "Results"]

    def test_invalid_base64(self, client):
        resp = client.post(
            "/insights/document", json={"fileName": "notes.md", "contentBase64": "!!!"}
        )
        assert resp.status_code == 422
        assert "base64" in resp.json()["message"]

    def test_unsupported_type(self, client):
        payload = base64.b64encode(b"MZ").decode()
        resp = client.post(
            "/insights/document", json={"fileName": "setup.exe", "contentBase64": payload}
        )
        assert resp.status_code == 422


def test_health(client):
    assert client.get("/health").json() == {"status": "ok", "defaultBackend": "heuristic"}


def test_health_reports_default_provider(client, settings):
    settings.default_provider = Provider.GROQ
    assert client.get("/health").json()["defaultBackend"] == "groq"
