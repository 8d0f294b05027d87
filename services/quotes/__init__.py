"""Price quote clients."""

__all__ = ["finnhub"]
