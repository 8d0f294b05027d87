"""Reddit OAuth and listing clients."""

__all__ = ["auth", "fetchers"]
