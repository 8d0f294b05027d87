import pytest
from fastapi.testclient import TestClient

from backend.deps import Services
from backend.server import create_app
from services.reddit.auth import AuthError
from services.quotes.finnhub import UpstreamDataError
from services.sentiment.store import ResultCache
from services.sentiment.types import AggregationResult, Post

QUOTE = {
    "ticker": "AAPL",
    "price": 190.5,
    "open": 188.0,
    "high": 191.2,
    "low": 187.4,
    "previousClose": 189.0,
    "change": 1.5,
    "changePercent": 0.79,
}


class StubQuotes:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls = []

    async def fetch_quote(self, ticker: str):
        self.calls.append(ticker)
        if self.error is not None:
            raise self.error
        return dict(QUOTE, ticker=ticker)


class StubPipeline:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls = []

    async def aggregate(self, ticker: str) -> AggregationResult:
        self.calls.append(ticker)
        if self.error is not None:
            raise self.error
        post = Post(
            id="p1",
            title="AAPL rocket",
            selftext="",
            score=12,
            url="https://reddit.com/r/stocks/comments/p1/slug/",
            permalink="/r/stocks/comments/p1/slug/",
            subreddit="stocks",
            thread_sentiment=72,
        )
        return AggregationResult(sentiment_score=72, posts=(post,))


def _client(quotes=None, pipeline=None) -> TestClient:
    services = Services(
        quotes=quotes or StubQuotes(),
        sentiment=pipeline or StubPipeline(),
        cache=ResultCache(),
        backend="rule",
    )
    return TestClient(create_app(services=services))


def test_root_lists_endpoints():
    resp = _client().get("/")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "healthy"
    assert body["endpoints"] == ["/stock/:symbol", "/reddit/:symbol", "/all/:symbol"]


def test_health_status():
    resp = _client().get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "backend": "rule", "cache_entries": 0}


def test_stock_quote():
    quotes = StubQuotes()
    resp = _client(quotes=quotes).get("/stock/aapl")
    assert resp.status_code == 200
    assert resp.json()["price"] == 190.5
    assert quotes.calls == ["AAPL"]


def test_stock_upstream_error():
    resp = _client(quotes=StubQuotes(UpstreamDataError("No stock data for XYZ"))).get("/stock/XYZ")
    assert resp.status_code == 502
    assert resp.json() == {"error": "No stock data for XYZ"}


def test_reddit_sentiment():
    resp = _client().get("/reddit/AAPL")
    assert resp.status_code == 200
    body = resp.json()
    assert body["sentimentScore"] == 72
    assert body["posts"][0]["threadSentiment"] == 72


@pytest.mark.parametrize(
    "error, status, message",
    [
        (AuthError("Reddit auth failed", status_code=401), 401, "Reddit auth failed"),
        (RuntimeError("search exploded"), 500, "search exploded"),
    ],
)
def test_reddit_errors(error, status, message):
    resp = _client(pipeline=StubPipeline(error)).get("/reddit/AAPL")
    assert resp.status_code == status
    assert resp.json() == {"error": message}


def test_all_merges_quote_and_sentiment():
    resp = _client().get("/all/msft")
    assert resp.status_code == 200
    body = resp.json()
    assert body["ticker"] == "MSFT"
    assert body["price"] == 190.5
    assert body["sentimentScore"] == 72
    assert len(body["posts"]) == 1


def test_all_auth_failure():
    resp = _client(pipeline=StubPipeline(AuthError("Reddit auth failed"))).get("/all/AAPL")
    assert resp.status_code == 401


def test_invalid_ticker_rejected():
    pipeline = StubPipeline()
    resp = _client(pipeline=pipeline).get("/reddit/not-a-ticker!")
    assert resp.status_code == 400
    assert "error" in resp.json()
    assert pipeline.calls == []


def test_all_quote_failure_is_server_error():
    quotes = StubQuotes(UpstreamDataError("No stock data for XYZ"))
    resp = _client(quotes=quotes).get("/all/XYZ")
    assert resp.status_code == 500
    assert resp.json() == {"error": "No stock data for XYZ"}
