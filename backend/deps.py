"""Dependency accessors shared by the API routes."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx
from fastapi import Request

from core.rate_limiter import IntervalGate
from core.settings import Settings
from services.quotes.finnhub import QuoteClient
from services.reddit.auth import TokenManager
from services.reddit.fetchers import CommentFetcher, ThreadFetcher
from services.sentiment.aggregator import ThreadAggregator
from services.sentiment.hf_model import HostedClassifier
from services.sentiment.pipeline import SentimentPipeline
from services.sentiment.rule_model import LexiconClassifier
from services.sentiment.scoring import Classifier, SentimentScorer
from services.sentiment.store import ResultCache

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Process-wide collaborators handed to the route handlers."""

    quotes: QuoteClient
    sentiment: SentimentPipeline
    cache: ResultCache
    backend: str


def build_classifier(settings: Settings, client: httpx.AsyncClient) -> Classifier:
    if settings.sentiment_backend == "rule":
        return LexiconClassifier()
    if not settings.hf_token:
        logger.warning("HF_TOKEN not set; hosted sentiment calls will degrade to neutral")
    return HostedClassifier(client, settings.hf_token, settings.hf_model)


def build_services(settings: Settings, client: httpx.AsyncClient) -> Services:
    if not settings.reddit_configured:
        logger.warning("REDDIT_CLIENT_ID/REDDIT_CLIENT_SECRET not set; /reddit requests will fail auth")
    if not settings.finnhub_key:
        logger.warning("FINNHUB_KEY not set; quote requests will fail")

    classifier = build_classifier(settings, client)
    cache = ResultCache(ttl_sec=settings.cache_ttl_sec)
    tokens = TokenManager(
        client,
        settings.reddit_client_id,
        settings.reddit_client_secret,
        settings.reddit_user_agent,
        cache_tokens=settings.reddit_token_cache,
    )
    threads = ThreadFetcher(
        client,
        settings.reddit_user_agent,
        subreddits=settings.subreddits,
        search_limit=settings.search_limit,
    )
    aggregator = ThreadAggregator(
        SentimentScorer(classifier),
        CommentFetcher(client, settings.reddit_user_agent),
        gate=IntervalGate.from_millis(settings.scoring_interval_ms),
    )
    return Services(
        quotes=QuoteClient(client, settings.finnhub_key),
        sentiment=SentimentPipeline(tokens, threads, aggregator, cache=cache),
        cache=cache,
        backend=classifier.name,
    )


def get_services(request: Request) -> Services:
    return request.app.state.services
