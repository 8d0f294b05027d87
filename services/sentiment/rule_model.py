"""Simple rule-based sentiment scoring."""

from __future__ import annotations

import re

from services.sentiment.types import Candidates

POS = {
    "beat", "beats", "bullish", "buy", "calls", "gain", "gains", "growth", "moon",
    "mooning", "outperform", "profit", "rally", "record", "rocket", "soar", "strong",
    "surge", "tops", "upgrade", "upside", "win",
}

NEG = {
    "bearish", "crash", "cut", "downgrade", "drop", "dump", "fall", "fraud", "lawsuit",
    "loss", "miss", "plunge", "probe", "puts", "recall", "sell", "slump", "tank",
    "weak", "downside",
}

_TOKEN = re.compile(r"[A-Za-z]+")


def keyword_hits(text: str) -> tuple[int, int]:
    """Count positive and negative keyword tokens in ``text``."""
    words = _TOKEN.findall(text.lower())
    pos = sum(1 for w in words if w in POS)
    neg = sum(1 for w in words if w in NEG)
    return pos, neg


class LexiconClassifier:
    """Deterministic offline classifier emitting the hosted model's candidate shape."""

    name = "rule"

    async def classify(self, text: str) -> Candidates:
        pos, neg = keyword_hits(text)
        total = pos + neg
        if total == 0:
            return [
                {"label": "neutral", "score": 1.0},
                {"label": "positive", "score": 0.0},
                {"label": "negative", "score": 0.0},
            ]
        lean = abs(pos - neg) / total
        neutral = 1.0 - lean
        return [
            {"label": "neutral", "score": neutral},
            {"label": "positive", "score": lean if pos > neg else 0.0},
            {"label": "negative", "score": lean if neg > pos else 0.0},
        ]
