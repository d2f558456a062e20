"""
Reddit discussion context.

Searches Reddit's public JSON endpoint in a handful of subreddits chosen from
the prompt's topics, ranks what comes back and renders the best posts as a
context block. Subreddits that fail are skipped; nothing is made up.
"""

import asyncio
import time
from typing import Awaitable, Callable, List, Optional

import httpx
from pydantic import BaseModel

from ideaforge.models.idea import AuxiliaryContext, Source
from ideaforge.services.context_service import ContextProvider
from ideaforge.services.topic_service import TopicClassifier
from ideaforge.utils.constants import (
    CONTEXT_POST_COUNT,
    CORE_SUBREDDITS,
    REDDIT_SEARCH_URL,
    RELEVANT_SUBREDDITS,
)
from ideaforge.utils.logger import logger

MIN_TITLE_LENGTH = 10
SNIPPET_LENGTH = 280
WEEK_SECONDS = 7 * 24 * 60 * 60


class RedditPost(BaseModel):
    title: str
    content: str = ""
    url: str
    score: int = 0
    subreddit: str
    created_utc: float = 0
    num_comments: int = 0


def relevance_score(post: RedditPost, keywords: List[str], now: Optional[float] = None) -> int:
    """
    Rank a post by votes, keyword hits, engagement and recency.

    +50 per keyword in the title, +25 per keyword in the body, +2 per comment,
    +20 when posted within the last week and +30 in a core startup community.
    """
    now = time.time() if now is None else now
    score = post.score
    title = post.title.lower()
    content = post.content.lower()
    for keyword in keywords:
        keyword = keyword.lower()
        if keyword in title:
            score += 50
        if keyword in content:
            score += 25
    score += post.num_comments * 2
    if post.created_utc > now - WEEK_SECONDS:
        score += 20
    if post.subreddit in RELEVANT_SUBREDDITS:
        score += 30
    return score


class RedditService(ContextProvider):
    """Context provider backed by Reddit search."""

    name = "reddit"

    def __init__(
        self,
        classifier: TopicClassifier,
        user_agent: str = "ideaforge/1.0",
        max_subreddits: int = 4,
        posts_per_subreddit: int = 8,
        request_delay_ms: int = 1200,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize the Reddit service.

        Args:
            classifier: Topic classifier used to pick subreddits
            user_agent: User-Agent sent with every request
            max_subreddits: Upper bound on subreddits searched per prompt
            posts_per_subreddit: Search result limit per request
            request_delay_ms: Pause between subreddits
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport, used by tests
            sleep: Coroutine used for the pause between subreddits
        """
        self.classifier = classifier
        self.user_agent = user_agent
        self.max_subreddits = max(1, max_subreddits)
        self.posts_per_subreddit = posts_per_subreddit
        self.request_delay_ms = request_delay_ms
        self.timeout = timeout
        self.transport = transport
        self._sleep = sleep

    def select_subreddits(self, keywords: List[str], prompt: str) -> List[str]:
        """Topic-specific subreddits first, then the core startup ones, bounded in count."""
        core = {name.lower() for name in CORE_SUBREDDITS}
        specific: List[str] = []
        for topic in self.classifier.classify(keywords, prompt):
            for subreddit in topic.subreddits:
                if subreddit.lower() not in core and subreddit not in specific:
                    specific.append(subreddit)

        room = max(0, self.max_subreddits - len(CORE_SUBREDDITS))
        return (specific[:room] + list(CORE_SUBREDDITS))[:self.max_subreddits]

    async def search_subreddit(self, client: httpx.AsyncClient, subreddit: str, term: str) -> List[RedditPost]:
        params = {
            "q": term,
            "restrict_sr": 1,
            "sort": "relevance",
            "limit": self.posts_per_subreddit,
            "t": "month",
            "raw_json": 1,
        }
        response = await client.get(REDDIT_SEARCH_URL.format(subreddit=subreddit), params=params)
        if response.status_code != 200:
            logger.warning(f"Reddit returned {response.status_code} for r/{subreddit}")
            return []

        body = response.json()
        listing = body.get("data") if isinstance(body, dict) else None
        children = listing.get("children") if isinstance(listing, dict) else None
        if not isinstance(children, list):
            logger.warning(f"Unexpected search response from r/{subreddit}")
            return []

        posts = []
        for child in children:
            data = child.get("data") if isinstance(child, dict) else None
            if not isinstance(data, dict):
                continue
            title = data.get("title") or ""
            if not isinstance(title, str) or len(title) <= MIN_TITLE_LENGTH or not data.get("permalink"):
                continue
            posts.append(RedditPost(
                title=title,
                content=data.get("selftext") or "",
                url=f"https://reddit.com{data['permalink']}",
                score=data.get("score") or 0,
                subreddit=data.get("subreddit") or subreddit,
                created_utc=data.get("created_utc") or 0,
                num_comments=data.get("num_comments") or 0,
            ))
        return posts

    async def fetch_posts(self, keywords: List[str], prompt: str) -> List[RedditPost]:
        """Search the selected subreddits and return de-duplicated posts, best first."""
        subreddits = self.select_subreddits(keywords, prompt)
        logger.info(f"Searching Reddit in {subreddits}")

        terms = [keywords[0] if keywords else "ideas"]
        if len(keywords) > 1:
            terms.append(" ".join(keywords[:2]))

        posts: List[RedditPost] = []
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        async with httpx.AsyncClient(
            headers=headers,
            timeout=self.timeout,
            transport=self.transport,
            follow_redirects=True,
        ) as client:
            for index, subreddit in enumerate(subreddits):
                if index:
                    await self._sleep(self.request_delay_ms / 1000)
                try:
                    for term in terms:
                        found = await self.search_subreddit(client, subreddit, term)
                        if found:
                            logger.debug(f"Found {len(found)} posts in r/{subreddit} for '{term}'")
                            posts.extend(found)
                            break
                except (httpx.HTTPError, ValueError) as e:
                    logger.warning(f"Skipping r/{subreddit}: {e}")

        unique: List[RedditPost] = []
        seen = set()
        for post in posts:
            if post.url in seen or post.title in seen:
                continue
            seen.update((post.url, post.title))
            unique.append(post)

        now = time.time()
        unique.sort(key=lambda post: relevance_score(post, keywords, now), reverse=True)
        return unique

    async def gather(self, prompt: str, keywords: List[str]) -> Optional[AuxiliaryContext]:
        posts = (await self.fetch_posts(keywords, prompt))[:CONTEXT_POST_COUNT]
        if not posts:
            logger.info("No Reddit discussions found")
            return None

        lines = []
        for post in posts:
            line = f"- [r/{post.subreddit}] {post.title} ({post.score} upvotes, {post.num_comments} comments)"
            if post.content:
                line += f": {post.content[:SNIPPET_LENGTH]}"
            lines.append(line)

        sources = [
            Source(title=post.title, url=post.url, snippet=post.content[:SNIPPET_LENGTH] or None)
            for post in posts
        ]
        return AuxiliaryContext(label="Reddit discussions", text="\n".join(lines), sources=sources)
