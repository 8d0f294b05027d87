from __future__ import annotations

from services.sentiment.sanitize import MAX_LENGTH, sanitize


def test_sanitize_handles_missing_text() -> None:
    assert sanitize(None) == ""
    assert sanitize("") == ""
    assert sanitize(42) == ""


def test_sanitize_strips_markdown_mentions_and_urls() -> None:
    raw = "**Huge** news from u/someone in r/stocks: *buy* https://example.com/x?y=1 now!"
    assert sanitize(raw) == "Huge news from in buy now!"


def test_sanitize_replaces_special_characters_and_collapses_whitespace() -> None:
    assert sanitize("  $AAPL   to the moon 🚀🚀 (really)  ") == "AAPL to the moon really"
    assert sanitize("price: 150.5, up 3% - nice?") == "price 150.5, up 3 - nice?"


def test_sanitize_bounds_length() -> None:
    cleaned = sanitize("word " * 400)
    assert len(cleaned) <= MAX_LENGTH
    assert not cleaned.endswith(" ")


def test_sanitize_only_strips_mentions_at_word_start() -> None:
    assert sanitize("check r/wallstreetbets today") == "check today"
    assert sanitize("your/AAPL position and sour/grapes") == "your AAPL position and sour grapes"
