from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from backend.deps import build_classifier, build_services
from backend.server import create_app
from core.settings import Settings, refresh_settings
from services.sentiment.hf_model import HostedClassifier
from services.sentiment.rule_model import LexiconClassifier
from tests.fakes.fake_http import FakeUpstream


def _settings(**overrides) -> Settings:
    values = {
        "reddit_client_id": "id",
        "reddit_client_secret": "secret",
        "hf_token": "hf",
        "finnhub_key": "key",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.mark.asyncio
async def test_rule_backend_selects_lexicon(upstream: FakeUpstream) -> None:
    async with upstream.client() as client:
        classifier = build_classifier(_settings(sentiment_backend="rule"), client)
    assert isinstance(classifier, LexiconClassifier)


@pytest.mark.asyncio
async def test_default_backend_selects_hosted_model(upstream: FakeUpstream) -> None:
    async with upstream.client() as client:
        classifier = build_classifier(_settings(hf_model="org/model"), client)
    assert isinstance(classifier, HostedClassifier)
    assert classifier.url.endswith("/org/model")
    assert classifier.token == "hf"


@pytest.mark.asyncio
async def test_build_services_carries_settings(upstream: FakeUpstream) -> None:
    settings = _settings(
        sentiment_backend="rule",
        subreddits=("pennystocks", "options"),
        search_limit=7,
        scoring_interval_ms=250,
        cache_ttl_sec=60.0,
    )
    async with upstream.client() as client:
        services = build_services(settings, client)

    pipeline = services.sentiment
    assert services.backend == "rule"
    assert pipeline.threads.subreddits == ("pennystocks", "options")
    assert pipeline.threads.search_limit == 7
    assert pipeline.aggregator.gate.min_interval == pytest.approx(0.25)
    assert isinstance(pipeline.aggregator.scorer.classifier, LexiconClassifier)
    assert pipeline.cache is services.cache
    assert services.cache.ttl == 60.0
    assert services.quotes.api_key == "key"


def test_lifespan_builds_services_from_env(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("SENTIMENT_BACKEND", "rule")
    monkeypatch.setenv("HTTP_TIMEOUT_SEC", "7")
    monkeypatch.setenv("SCORING_INTERVAL_MS", "40")
    monkeypatch.setenv("LOG_PATH", str(tmp_path / "api.log"))
    refresh_settings()

    with TestClient(create_app()) as client:
        services = client.app.state.services
        resp = client.get("/health")

        assert resp.status_code == 200
        assert resp.json()["backend"] == "rule"
        assert isinstance(services.quotes.client, httpx.AsyncClient)
        assert services.quotes.client.timeout == httpx.Timeout(7.0)
        assert services.sentiment.aggregator.gate.min_interval == pytest.approx(0.04)
