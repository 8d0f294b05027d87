"""Fetch candidate threads and their top replies from Reddit's OAuth API."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

import httpx

from core.settings import DEFAULT_SUBREDDITS
from services.sentiment.filters import MAX_POSTS, select_threads
from services.sentiment.types import Post

OAUTH_BASE = "https://oauth.reddit.com"
MAX_COMMENTS = 10

log = logging.getLogger(__name__)


def _auth_headers(token: str, user_agent: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}", "User-Agent": user_agent}


def _children(listing: Any) -> List[Dict[str, Any]]:
    if not isinstance(listing, dict):
        return []
    data = listing.get("data")
    if not isinstance(data, dict):
        return []
    children = data.get("children")
    return [c for c in children if isinstance(c, dict)] if isinstance(children, list) else []


def _to_post(child: Dict[str, Any], section: str) -> Optional[Post]:
    data = child.get("data")
    if not isinstance(data, dict) or not data.get("permalink"):
        return None
    permalink = str(data["permalink"])
    score = data.get("score")
    return Post(
        id=str(data.get("id", "")),
        title=str(data.get("title") or ""),
        selftext=str(data.get("selftext") or ""),
        score=score if isinstance(score, (int, float)) and not isinstance(score, bool) else 0,
        url=f"https://reddit.com{permalink}",
        permalink=permalink,
        subreddit=str(data.get("subreddit") or section),
    )


class ThreadFetcher:
    """Search a fixed set of subreddits plus the ticker's own for recent threads."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        user_agent: str,
        *,
        subreddits: Sequence[str] = DEFAULT_SUBREDDITS,
        search_limit: int = 15,
        max_posts: int = MAX_POSTS,
        base_url: str = OAUTH_BASE,
    ) -> None:
        self.client = client
        self.user_agent = user_agent
        self.subreddits = tuple(subreddits)
        self.search_limit = search_limit
        self.max_posts = max_posts
        self.base_url = base_url.rstrip("/")

    def sections_for(self, ticker: str) -> List[str]:
        return [*self.subreddits, ticker]

    async def search_section(self, section: str, ticker: str, token: str) -> List[Post]:
        """One subreddit search; failures contribute no candidates."""

        url = f"{self.base_url}/r/{section}/search.json"
        params = {"q": ticker, "limit": self.search_limit, "sort": "new", "restrict_sr": "on"}
        try:
            response = await self.client.get(url, params=params, headers=_auth_headers(token, self.user_agent))
            response.raise_for_status()
            listing = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            log.warning(
                "reddit.section_failed",
                extra={"section": section, "ticker": ticker, "error": repr(exc)},
            )
            return []
        posts = [p for p in (_to_post(child, section) for child in _children(listing)) if p is not None]
        log.debug("reddit.section_fetched", extra={"section": section, "count": len(posts)})
        return posts

    async def fetch_candidates(self, ticker: str, token: str) -> List[Post]:
        candidates: List[Post] = []
        for section in self.sections_for(ticker):
            candidates.extend(await self.search_section(section, ticker, token))
        return candidates

    async def fetch_threads(self, ticker: str, token: str) -> List[Post]:
        candidates = await self.fetch_candidates(ticker, token)
        threads = select_threads(candidates, ticker, limit=self.max_posts)
        log.info(
            "reddit.threads_selected",
            extra={"ticker": ticker, "candidates": len(candidates), "selected": len(threads)},
        )
        return threads


def _comment_bodies(children: Iterable[Dict[str, Any]], limit: int) -> List[str]:
    bodies: List[str] = []
    for child in children:
        if child.get("kind") != "t1":
            continue
        data = child.get("data")
        body = data.get("body") if isinstance(data, dict) else None
        if not body or not isinstance(body, str):
            continue
        bodies.append(body)
    return bodies[:limit]


class CommentFetcher:
    """Retrieve the top-level replies of a thread."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        user_agent: str,
        *,
        limit: int = MAX_COMMENTS,
        base_url: str = OAUTH_BASE,
    ) -> None:
        self.client = client
        self.user_agent = user_agent
        self.limit = limit
        self.base_url = base_url.rstrip("/")

    async def fetch_top_comments(self, post: Post, token: str) -> List[str]:
        url = f"{self.base_url}{post.permalink}.json"
        try:
            response = await self.client.get(
                url,
                params={"sort": "top", "limit": self.limit},
                headers=_auth_headers(token, self.user_agent),
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            log.warning("reddit.comments_failed", extra={"post_id": post.id, "error": repr(exc)})
            return []
        if not isinstance(payload, list) or len(payload) < 2:
            return []
        comments = _comment_bodies(_children(payload[1]), self.limit)
        log.debug("reddit.comments_fetched", extra={"post_id": post.id, "count": len(comments)})
        return comments
