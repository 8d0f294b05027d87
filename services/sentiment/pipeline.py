"""Ticker-level sentiment pipeline with caching and in-flight coalescing."""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional

from services.reddit.auth import TokenManager
from services.reddit.fetchers import ThreadFetcher
from services.sentiment.aggregator import ThreadAggregator, combine_ticker_score
from services.sentiment.store import ResultCache
from services.sentiment.types import AggregationResult

log = logging.getLogger(__name__)


class SentimentPipeline:
    """Token -> threads -> per-thread scores -> ticker score -> cache."""

    def __init__(
        self,
        tokens: TokenManager,
        threads: ThreadFetcher,
        aggregator: ThreadAggregator,
        cache: Optional[ResultCache] = None,
    ) -> None:
        self.tokens = tokens
        self.threads = threads
        self.aggregator = aggregator
        self.cache = cache if cache is not None else ResultCache()
        self._inflight: Dict[str, asyncio.Future[AggregationResult]] = {}

    async def aggregate(self, ticker: str) -> AggregationResult:
        symbol = ticker.strip().upper()
        while True:
            cached = self.cache.get(symbol)
            if cached is not None:
                log.info("sentiment.cache_hit", extra={"ticker": symbol})
                return cached

            pending = self._inflight.get(symbol)
            if pending is None:
                return await self._lead(symbol)

            log.info("sentiment.coalesced", extra={"ticker": symbol})
            try:
                return await asyncio.shield(pending)
            except asyncio.CancelledError:
                # Only the leader was cancelled; start over instead of failing this caller.
                task = asyncio.current_task()
                if not pending.cancelled() or (task is not None and task.cancelling()):
                    raise
                log.info("sentiment.leader_cancelled", extra={"ticker": symbol})

    async def _lead(self, symbol: str) -> AggregationResult:
        future: asyncio.Future[AggregationResult] = asyncio.get_running_loop().create_future()
        self._inflight[symbol] = future
        try:
            result = await self._compute(symbol)
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as exc:
            future.set_exception(exc)
            # There may be no followers; mark the exception as retrieved.
            future.exception()
            raise
        else:
            future.set_result(result)
            return result
        finally:
            self._inflight.pop(symbol, None)

    async def _compute(self, symbol: str) -> AggregationResult:
        log.info("sentiment.aggregate_start", extra={"ticker": symbol})
        token = await self.tokens.get_access_token()
        posts = await self.threads.fetch_threads(symbol, token)

        thread_scores = []
        for post in posts:
            thread_scores.append(await self.aggregator.score_thread(post, token))

        result = AggregationResult(
            sentiment_score=combine_ticker_score(thread_scores),
            posts=tuple(posts),
        )
        self.cache.put(symbol, result)
        log.info(
            "sentiment.aggregate_done",
            extra={"ticker": symbol, "sentiment_score": result.sentiment_score, "threads": len(posts)},
        )
        return result
