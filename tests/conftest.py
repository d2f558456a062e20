"""
Shared fixtures and stubs for the ideaforge tests.
"""

import pytest

from ideaforge.models.idea import CompletionResult
from ideaforge.services.ai_service import CompletionClient
from ideaforge.services.topic_service import TopicClassifier
from ideaforge.utils.retry import RetryPolicy


class StubClient(CompletionClient):
    """
    Completion client that replays canned responses.

    Each entry is returned (strings become CompletionResult) or raised
    (exceptions) in order; the last entry repeats once the list runs out.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    async def complete(self, messages, model_hint=None):
        self.calls.append(messages)
        response = self.responses[min(len(self.calls), len(self.responses)) - 1]
        if isinstance(response, Exception):
            raise response
        if isinstance(response, str):
            return CompletionResult(text=response)
        return response


@pytest.fixture
def sleeps():
    """Delays (in seconds) requested by the code under test."""
    return []


@pytest.fixture
def recording_sleep(sleeps):
    """Fixture providing an async sleep that only records its argument."""
    async def sleep(seconds):
        sleeps.append(seconds)
    return sleep


@pytest.fixture
def fast_retry(recording_sleep):
    """Fixture providing a RetryPolicy with 3 attempts, no jitter and no real waiting."""
    return RetryPolicy(max_attempts=3, base_delay_ms=1000, sleep=recording_sleep, rng=lambda: 0.0)


@pytest.fixture
def classifier():
    """Fixture providing a classifier over the built-in topic dictionary."""
    return TopicClassifier()
