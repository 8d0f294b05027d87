"""Quote, Reddit sentiment and combined ticker endpoints."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from backend.deps import Services, get_services
from services.quotes.finnhub import UpstreamDataError
from services.reddit.auth import AuthError

router = APIRouter(tags=["sentiment"])

log = logging.getLogger(__name__)

_TICKER = re.compile(r"^[A-Z0-9.]{1,10}$")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _normalize(ticker: str) -> str | None:
    symbol = ticker.strip().upper()
    return symbol if _TICKER.match(symbol) else None


@router.get("/stock/{ticker}")
async def stock(ticker: str, services: Services = Depends(get_services)):
    symbol = _normalize(ticker)
    if symbol is None:
        return _error(400, f"invalid ticker: {ticker!r}")
    try:
        return await services.quotes.fetch_quote(symbol)
    except UpstreamDataError as exc:
        log.warning("quote.failed", extra={"ticker": symbol, "error": str(exc)})
        return _error(502, str(exc))


@router.get("/reddit/{ticker}")
async def reddit(ticker: str, services: Services = Depends(get_services)):
    symbol = _normalize(ticker)
    if symbol is None:
        return _error(400, f"invalid ticker: {ticker!r}")
    try:
        result = await services.sentiment.aggregate(symbol)
    except AuthError:
        return _error(401, "Reddit auth failed")
    except Exception as exc:  # noqa: BLE001 - surfaced to the caller as a 500 payload
        log.exception("reddit.route_failed", extra={"ticker": symbol})
        return _error(500, str(exc))
    return result.to_dict()


@router.get("/all/{ticker}")
async def all_data(ticker: str, services: Services = Depends(get_services)):
    symbol = _normalize(ticker)
    if symbol is None:
        return _error(400, f"invalid ticker: {ticker!r}")
    try:
        quote, result = await asyncio.gather(
            services.quotes.fetch_quote(symbol),
            services.sentiment.aggregate(symbol),
        )
    except AuthError:
        return _error(401, "Reddit auth failed")
    except Exception as exc:  # noqa: BLE001 - surfaced to the caller as a 500 payload
        log.exception("all.route_failed", extra={"ticker": symbol})
        return _error(500, str(exc))

    payload: Dict[str, Any] = {"ticker": symbol, **quote}
    payload.update(result.to_dict())
    return payload
