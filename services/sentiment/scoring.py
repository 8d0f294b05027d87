"""Map classifier label distributions onto the 0-100 sentiment scale."""
from __future__ import annotations

import logging
from typing import Protocol

from services.sentiment.sanitize import sanitize
from services.sentiment.types import NEUTRAL, Candidates, ScoreOutcome, ScoringFailure

logger = logging.getLogger(__name__)

MIN_TEXT_LENGTH = 10

LABEL_VALUES = {
    "positive": 100,
    "neutral": 50,
    "negative": 0,
}


class Classifier(Protocol):
    name: str

    async def classify(self, text: str) -> Candidates:
        ...


def label_value(label: object) -> int:
    """Unknown labels score as neutral."""
    return LABEL_VALUES.get(str(label).lower(), NEUTRAL)


def best_candidate(candidates: Candidates) -> dict:
    """Highest-confidence candidate; the first one wins ties."""
    best = None
    best_score = 0.0
    for candidate in candidates:
        raw = candidate.get("score")
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise ScoringFailure("candidate score is not numeric", payload=candidate)
        if best is None or raw > best_score:
            best, best_score = candidate, float(raw)
    if best is None:
        raise ScoringFailure("no candidates to choose from")
    return best


class SentimentScorer:
    """Score text through a classifier, degrading to neutral on any failure."""

    def __init__(self, classifier: Classifier, *, min_length: int = MIN_TEXT_LENGTH) -> None:
        self.classifier = classifier
        self.min_length = min_length

    async def evaluate(self, text: object) -> ScoreOutcome:
        clean = sanitize(text)
        if len(clean) < self.min_length:
            logger.debug("sentiment.text_too_short", extra={"length": len(clean)})
            return ScoreOutcome(value=NEUTRAL, reason="text_too_short")
        try:
            candidates = await self.classifier.classify(clean)
            best = best_candidate(candidates)
        except ScoringFailure as exc:
            logger.warning(
                "sentiment.scoring_degraded",
                extra={"classifier": self.classifier.name, "error": str(exc), "status": exc.status_code},
            )
            return ScoreOutcome.neutral(str(exc))
        except Exception as exc:  # noqa: BLE001 - scoring never aborts the pipeline
            logger.exception("sentiment.scoring_failed", extra={"classifier": self.classifier.name})
            return ScoreOutcome.neutral(repr(exc))
        return ScoreOutcome(value=label_value(best.get("label")))

    async def score(self, text: object) -> int:
        outcome = await self.evaluate(text)
        return outcome.value
