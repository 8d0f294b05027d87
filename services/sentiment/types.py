"""Dataclasses for sentiment processing."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

NEUTRAL = 50


class ScoringFailure(Exception):
    """Raised by a classifier when it cannot produce a label distribution."""

    def __init__(self, message: str, *, status_code: int | None = None, payload: Any | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


@dataclass(slots=True)
class Post:
    """Reddit thread candidate retrieved from a subreddit search."""

    id: str
    title: str
    selftext: str
    score: float
    url: str
    permalink: str
    subreddit: str
    thread_sentiment: Optional[int] = None

    @property
    def text(self) -> str:
        return f"{self.title} {self.selftext}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "selftext": self.selftext,
            "score": self.score,
            "url": self.url,
            "permalink": self.permalink,
            "subreddit": self.subreddit,
            "threadSentiment": self.thread_sentiment,
        }


@dataclass(frozen=True, slots=True)
class AggregationResult:
    """Ticker-level sentiment plus the threads it was computed from."""

    sentiment_score: int
    posts: Tuple[Post, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sentimentScore": self.sentiment_score,
            "posts": [post.to_dict() for post in self.posts],
        }


@dataclass(frozen=True, slots=True)
class ScoreOutcome:
    """Result of scoring one text; degraded outcomes carry the neutral value."""

    value: int
    degraded: bool = False
    reason: Optional[str] = None

    @classmethod
    def neutral(cls, reason: str) -> "ScoreOutcome":
        return cls(value=NEUTRAL, degraded=True, reason=reason)


Candidates = List[Dict[str, Any]]
