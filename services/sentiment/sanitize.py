"""Normalise raw forum text before it is sent to a sentiment model."""

from __future__ import annotations

import re

MAX_LENGTH = 512

_EMPHASIS = re.compile(r"\*+")
_MENTION = re.compile(r"\b[ur]/\w+")
_URL = re.compile(r"https?://\S+")
_DISALLOWED = re.compile(r"[^\w\s.,!?-]")
_WHITESPACE = re.compile(r"\s+")


def sanitize(text: object) -> str:
    """Strip markdown, mentions and URLs, then collapse and bound the text."""
    if not text or not isinstance(text, str):
        return ""
    cleaned = _EMPHASIS.sub("", text)
    cleaned = _MENTION.sub("", cleaned)
    cleaned = _URL.sub("", cleaned)
    cleaned = _DISALLOWED.sub(" ", cleaned)
    cleaned = _WHITESPACE.sub(" ", cleaned)
    return cleaned[:MAX_LENGTH].strip()
