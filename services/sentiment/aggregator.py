"""Combine post and reply sentiment into thread and ticker scores."""
from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional

from core.rate_limiter import IntervalGate
from services.reddit.fetchers import CommentFetcher
from services.sentiment.scoring import SentimentScorer
from services.sentiment.types import NEUTRAL, Post

POST_WEIGHT = 0.6
COMMENT_WEIGHT = 0.4

log = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    return int(Decimal(repr(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def clamp_score(value: int) -> int:
    return max(0, min(100, value))


def mean_or_neutral(values: Iterable[float]) -> float:
    items = list(values)
    if not items:
        return float(NEUTRAL)
    return sum(items) / len(items)


def blend_thread_score(post_score: float, comment_scores: Iterable[float]) -> int:
    combined = POST_WEIGHT * post_score + COMMENT_WEIGHT * mean_or_neutral(comment_scores)
    return clamp_score(round_half_up(combined))


def combine_ticker_score(thread_scores: Iterable[float]) -> int:
    """Mean of thread scores; no threads means no signal, i.e. neutral."""
    return clamp_score(round_half_up(mean_or_neutral(thread_scores)))


class ThreadAggregator:
    """Score a thread from its own text and its top replies."""

    def __init__(
        self,
        scorer: SentimentScorer,
        comments: CommentFetcher,
        gate: Optional[IntervalGate] = None,
    ) -> None:
        self.scorer = scorer
        self.comments = comments
        self.gate = gate or IntervalGate(min_interval=0.1)

    async def score_comments(self, bodies: Iterable[str]) -> List[int]:
        scores: List[int] = []
        for body in bodies:
            await self.gate.wait()
            scores.append(await self.scorer.score(body))
        return scores

    async def score_thread(self, post: Post, token: str) -> int:
        post_score = await self.scorer.score(post.text)
        bodies = await self.comments.fetch_top_comments(post, token)
        comment_scores = await self.score_comments(bodies)
        post.thread_sentiment = blend_thread_score(post_score, comment_scores)
        log.info(
            "sentiment.thread_scored",
            extra={
                "post_id": post.id,
                "post_score": post_score,
                "comments": len(comment_scores),
                "thread_sentiment": post.thread_sentiment,
            },
        )
        return post.thread_sentiment

    combine_ticker_score = staticmethod(combine_ticker_score)
