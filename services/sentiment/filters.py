"""Filtering utilities for thread ingestion."""

from __future__ import annotations

import re
from typing import Iterable, List, Set

from services.sentiment.types import Post

MAX_POSTS = 5


def ticker_pattern(ticker: str) -> re.Pattern[str]:
    """Whole-token match for ``ticker`` with an optional ``$`` prefix."""
    return re.compile(
        rf"(?<![A-Za-z0-9])\$?{re.escape(ticker)}(?![A-Za-z0-9])",
        re.IGNORECASE,
    )


def relevance_filter(items: Iterable[Post], ticker: str) -> List[Post]:
    """Keep posts whose title or body mentions the ticker as a standalone token."""
    pattern = ticker_pattern(ticker)
    return [x for x in items if pattern.search(x.title or "") or pattern.search(x.selftext or "")]


def dedupe(items: Iterable[Post]) -> List[Post]:
    """Deduplicate posts by url, keeping the first one seen."""
    seen: Set[str] = set()
    out: List[Post] = []
    for item in items:
        if item.url in seen:
            continue
        seen.add(item.url)
        out.append(item)
    return out


def rank(items: Iterable[Post], limit: int = MAX_POSTS) -> List[Post]:
    """Most popular first; ties keep their incoming order."""
    ordered = sorted(items, key=lambda x: x.score, reverse=True)
    return ordered[:limit]


def select_threads(candidates: Iterable[Post], ticker: str, limit: int = MAX_POSTS) -> List[Post]:
    return rank(dedupe(relevance_filter(candidates, ticker)), limit=limit)
