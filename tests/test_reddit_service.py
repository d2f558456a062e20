"""
Tests for the Reddit context provider.
"""

import time

import httpx
import pytest

from ideaforge.services.reddit_service import RedditPost, RedditService, relevance_score


def reddit_post(title, subreddit, score=10, comments=0, selftext="", created=0, slug="post"):
    return {
        "data": {
            "title": title,
            "selftext": selftext,
            "permalink": f"/r/{subreddit}/comments/{slug}/",
            "score": score,
            "subreddit": subreddit,
            "created_utc": created,
            "num_comments": comments,
        }
    }


def listing(*posts):
    return {"kind": "Listing", "data": {"children": list(posts)}}


@pytest.fixture
def requests_seen():
    return []


@pytest.fixture
def make_service(classifier, recording_sleep, requests_seen):
    """Fixture building a RedditService whose HTTP calls go to a handler."""
    def build(handler, **kwargs):
        def record(request):
            requests_seen.append(request)
            return handler(request)

        return RedditService(
            classifier,
            user_agent="ideaforge-tests/1.0",
            transport=httpx.MockTransport(record),
            sleep=recording_sleep,
            **kwargs,
        )
    return build


def subreddit_of(request):
    return request.url.path.split("/")[2]


class TestSelectSubreddits:
    """Tests for subreddit selection."""

    def test_topic_subreddits_then_core(self, classifier):
        service = RedditService(classifier, max_subreddits=4)
        assert service.select_subreddits(["machine learning"], "") == [
            "MachineLearning", "startups", "entrepreneur", "SaaS",
        ]

    def test_larger_bound(self, classifier):
        service = RedditService(classifier, max_subreddits=6)
        assert service.select_subreddits(["fintech"], "") == [
            "fintech", "CryptoCurrency", "investing", "startups", "entrepreneur", "SaaS",
        ]

    def test_core_only_for_startup_prompts(self, classifier):
        service = RedditService(classifier, max_subreddits=3)
        assert service.select_subreddits(["successful startup"], "") == ["startups", "entrepreneur", "SaaS"]


class TestRelevanceScore:
    """Tests for relevance_score."""

    def test_components(self):
        now = 1_700_000_000
        post = RedditPost(
            title="Looking for a budgeting app",
            content="Any budgeting tools for students?",
            url="https://reddit.com/r/startups/comments/1/",
            score=5,
            subreddit="startups",
            created_utc=now - 3600,
            num_comments=4,
        )
        # 5 votes + 50 title + 25 body + 8 comments + 20 recent + 30 core community
        assert relevance_score(post, ["budgeting"], now=now) == 138

    def test_old_post_elsewhere(self):
        post = RedditPost(title="Unrelated title here", url="https://reddit.com/x", subreddit="pics", score=3)
        assert relevance_score(post, ["budgeting"], now=1_700_000_000) == 3


class TestRedditService:
    """Tests for RedditService.gather."""

    @pytest.mark.asyncio
    async def test_gather_ranks_posts(self, make_service, requests_seen, sleeps):
        now = time.time()

        def handler(request):
            subreddit = subreddit_of(request)
            if subreddit == "MachineLearning":
                return httpx.Response(200, json=listing(
                    reddit_post("Model serving is still painful", subreddit, score=40, slug="a"),
                ))
            if subreddit == "startups":
                return httpx.Response(200, json=listing(
                    reddit_post("Machine learning tools for small startups", subreddit, score=5, comments=10, created=now, slug="b"),
                    reddit_post("short", subreddit, slug="c"),
                ))
            return httpx.Response(200, json=listing())

        service = make_service(handler, max_subreddits=4, request_delay_ms=1200)
        context = await service.gather("machine learning tools", ["machine learning"])

        lines = context.text.splitlines()
        assert len(lines) == 2
        assert lines[0].startswith("- [r/startups] Machine learning tools for small startups")
        assert "Model serving is still painful" in lines[1]
        assert [s.url for s in context.sources] == [
            "https://reddit.com/r/startups/comments/b/",
            "https://reddit.com/r/MachineLearning/comments/a/",
        ]
        assert sleeps == [1.2, 1.2, 1.2]

        first = requests_seen[0]
        assert first.headers["User-Agent"] == "ideaforge-tests/1.0"
        assert first.url.params["q"] == "machine learning"
        assert first.url.params["restrict_sr"] == "1"
        assert first.url.params["sort"] == "relevance"
        assert first.url.params["limit"] == "8"
        assert first.url.params["t"] == "month"

    @pytest.mark.asyncio
    async def test_second_search_term_when_first_finds_nothing(self, make_service, requests_seen):
        def handler(request):
            if request.url.params["q"] == "budgeting app students":
                return httpx.Response(200, json=listing(
                    reddit_post(f"Budgeting app for students in r/{subreddit_of(request)}?", subreddit_of(request)),
                ))
            return httpx.Response(200, json=listing())

        service = make_service(handler, max_subreddits=3)
        context = await service.gather("budgeting app", ["budgeting app", "students"])

        assert [r.url.params["q"] for r in requests_seen[:2]] == ["budgeting app", "budgeting app students"]
        assert len(context.sources) == 3

    @pytest.mark.asyncio
    async def test_failing_subreddits_are_skipped(self, make_service):
        def handler(request):
            subreddit = subreddit_of(request)
            if subreddit == "startups":
                raise httpx.ConnectError("connection refused", request=request)
            if subreddit == "entrepreneur":
                return httpx.Response(429, json={"message": "Too Many Requests"})
            if subreddit == "SaaS":
                return httpx.Response(200, text="<html>not json</html>")
            return httpx.Response(200, json=listing())

        service = make_service(handler, max_subreddits=3)

        assert await service.gather("startup ideas", ["startup"]) is None

    @pytest.mark.asyncio
    async def test_malformed_listing_skips_only_that_subreddit(self, make_service):
        def handler(request):
            subreddit = subreddit_of(request)
            if subreddit == "startups":
                return httpx.Response(200, json=["not", "a", "listing"])
            if subreddit == "entrepreneur":
                return httpx.Response(200, json={"data": {"children": ["junk", {"data": None}, {"data": {"title": 42}}]}})
            if subreddit == "SaaS":
                return httpx.Response(200, json={"data": "nothing here"})
            return httpx.Response(200, json=listing(
                reddit_post("Machine learning for invoice matching", subreddit, slug="ml"),
            ))

        service = make_service(handler, max_subreddits=4)
        context = await service.gather("machine learning", ["machine learning"])

        assert [s.url for s in context.sources] == ["https://reddit.com/r/MachineLearning/comments/ml/"]

    @pytest.mark.asyncio
    async def test_duplicates_removed(self, make_service):
        def handler(request):
            return httpx.Response(200, json=listing(
                reddit_post("The same cross-posted question", subreddit_of(request), slug="same"),
            ))

        service = make_service(handler, max_subreddits=3)
        context = await service.gather("saas", ["saas"])

        assert len(context.sources) == 1

    @pytest.mark.asyncio
    async def test_no_posts(self, make_service, sleeps):
        service = make_service(lambda request: httpx.Response(200, json=listing()), max_subreddits=3, request_delay_ms=0)

        assert await service.gather("anything", ["anything"]) is None
        assert sleeps == [0.0, 0.0]


if __name__ == "__main__":
    # This allows running the tests directly with python
    import sys
    sys.exit(pytest.main(["-v", __file__]))
