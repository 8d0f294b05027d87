"""Unit tests for thread relevance, dedupe and ranking."""

from __future__ import annotations

from services.sentiment.filters import dedupe, rank, relevance_filter, select_threads, ticker_pattern
from services.sentiment.types import Post


def _post(pid: str, title: str, *, score: float = 1, url: str | None = None, body: str = "") -> Post:
    return Post(
        id=pid,
        title=title,
        selftext=body,
        score=score,
        url=url or f"https://reddit.com/r/stocks/comments/{pid}/",
        permalink=f"/r/stocks/comments/{pid}/",
        subreddit="stocks",
    )


def test_ticker_pattern_matches_whole_tokens_only() -> None:
    pattern = ticker_pattern("AAPL")
    assert pattern.search("$AAPL is mooning")
    assert pattern.search("thoughts on aapl earnings?")
    assert pattern.search("AAPL.")
    assert not pattern.search("MAAPL")
    assert not pattern.search("AAPLE")
    assert not pattern.search("x$AAPL2")


def test_relevance_filter_checks_title_and_body() -> None:
    items = [
        _post("1", "AAPL earnings"),
        _post("2", "Market wrap", body="Holding $aapl through the dip"),
        _post("3", "MAAPL squeeze"),
    ]
    kept = relevance_filter(items, "AAPL")
    assert [p.id for p in kept] == ["1", "2"]


def test_dedupe_keeps_first_seen_url() -> None:
    items = [
        _post("a", "AAPL", url="https://reddit.com/x"),
        _post("b", "AAPL", url="https://reddit.com/x"),
        _post("c", "AAPL", url="https://reddit.com/y"),
    ]
    assert [p.id for p in dedupe(items)] == ["a", "c"]


def test_rank_is_descending_and_stable() -> None:
    items = [_post("a", "t", score=5), _post("b", "t", score=9), _post("c", "t", score=5)]
    assert [p.id for p in rank(items)] == ["b", "a", "c"]


def test_select_threads_bounds_output() -> None:
    items = [_post(str(i), f"AAPL thread {i}", score=i) for i in range(12)]
    items.append(_post("dup", "AAPL dup", score=100, url=items[0].url))
    selected = select_threads(items, "AAPL")
    assert len(selected) == 5
    assert len({p.url for p in selected}) == 5
    assert [p.score for p in selected] == sorted((p.score for p in selected), reverse=True)
    # The duplicate url lost to the first occurrence, which has the lowest score.
    assert "dup" not in {p.id for p in selected}


def test_select_threads_empty_when_nothing_matches() -> None:
    assert select_threads([_post("1", "TSLA only")], "AAPL") == []
