"""Hosted HuggingFace inference client for financial sentiment labels."""
from __future__ import annotations

from typing import Any

import httpx

from core.settings import DEFAULT_HF_MODEL
from services.sentiment.types import Candidates, ScoringFailure

INFERENCE_BASE = "https://api-inference.huggingface.co/models"


class HostedClassifier:
    """Call the HF inference API and return the label distribution for a text."""

    name = "hf"

    def __init__(
        self,
        client: httpx.AsyncClient,
        token: str,
        model: str = DEFAULT_HF_MODEL,
        *,
        base_url: str = INFERENCE_BASE,
    ) -> None:
        self.client = client
        self.token = token
        self.model = model
        self.url = f"{base_url.rstrip('/')}/{model}"

    async def classify(self, text: str) -> Candidates:
        try:
            response = await self.client.post(
                self.url,
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Content-Type": "application/json",
                },
                json={"inputs": text},
            )
        except httpx.HTTPError as exc:
            raise ScoringFailure(f"inference request failed: {exc!r}") from exc

        if not response.is_success:
            raise ScoringFailure(
                f"inference HTTP {response.status_code}",
                status_code=response.status_code,
                payload=response.text[:200],
            )
        try:
            body: Any = response.json()
        except ValueError as exc:
            raise ScoringFailure("inference response is not JSON") from exc
        return _first_candidate_list(body)


def _first_candidate_list(body: Any) -> Candidates:
    """Unwrap ``[[{label, score}, ...]]`` into the inner candidate list."""

    if not isinstance(body, list) or not body or not isinstance(body[0], list):
        raise ScoringFailure("unexpected inference response shape", payload=body)
    candidates = [entry for entry in body[0] if isinstance(entry, dict)]
    if not candidates:
        raise ScoringFailure("inference response has no candidates", payload=body)
    return candidates
