"""Finnhub quote client."""
from __future__ import annotations

import logging
from typing import Any, Dict

import httpx

QUOTE_URL = "https://finnhub.io/api/v1/quote"

log = logging.getLogger(__name__)

# Finnhub's single-letter quote fields mapped to the response contract.
_FIELDS = {
    "price": "c",
    "open": "o",
    "high": "h",
    "low": "l",
    "previousClose": "pc",
    "change": "d",
    "changePercent": "dp",
}


class UpstreamDataError(Exception):
    """Raised when the quote source returns no usable quote."""

    def __init__(self, message: str, *, status_code: int | None = None, payload: Any | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class QuoteClient:
    """Fetch a flat price/change snapshot for a ticker."""

    def __init__(self, client: httpx.AsyncClient, api_key: str, *, url: str = QUOTE_URL) -> None:
        self.client = client
        self.api_key = api_key
        self.url = url

    async def fetch_quote(self, ticker: str) -> Dict[str, Any]:
        symbol = ticker.strip().upper()
        try:
            response = await self.client.get(self.url, params={"symbol": symbol, "token": self.api_key})
            data = response.json()
        except httpx.HTTPError as exc:
            raise UpstreamDataError(f"Quote request failed for {symbol}: {exc!r}") from exc
        except ValueError as exc:
            raise UpstreamDataError(
                f"No stock data for {symbol}", status_code=response.status_code
            ) from exc

        if not isinstance(data, dict) or not _is_number(data.get("c")):
            log.warning("quote.missing", extra={"ticker": symbol, "status": response.status_code})
            raise UpstreamDataError(f"No stock data for {symbol}", status_code=response.status_code, payload=data)

        quote: Dict[str, Any] = {"ticker": symbol}
        for name, key in _FIELDS.items():
            quote[name] = data.get(key)
        return quote
