"""
Perplexity service implementation for ideaforge.
Talks to Perplexity's OpenAI-compatible chat completions endpoint.
"""

from typing import Any, Dict, List, Optional

import openai
from openai import AsyncOpenAI

from ideaforge.models.idea import CompletionResult, Source
from ideaforge.services.ai_service import CompletionClient, check_messages
from ideaforge.services.errors import (
    AuthError,
    NetworkError,
    ProtocolError,
    RateLimited,
    is_quota_message,
)
from ideaforge.utils.logger import logger


def to_sources(raw_results: Any) -> List[Source]:
    """Convert a backend's search results into citations, skipping entries without a URL."""
    sources = []
    for item in raw_results or []:
        if not isinstance(item, dict):
            item = getattr(item, "model_dump", lambda: {})()
        url = (item.get("url") or "").strip()
        if not url:
            continue
        sources.append(Source(
            title=item.get("title") or None,
            url=url,
            snippet=item.get("snippet") or item.get("content") or None,
        ))
    return sources


class PerplexityService(CompletionClient):
    """Perplexity chat completions client."""

    def __init__(
        self,
        api_key: str,
        model: str = "sonar",
        base_url: str = "https://api.perplexity.ai",
        timeout: float = 60.0,
        max_tokens: int = 2000,
        temperature: float = 0.7,
    ):
        """
        Initialize the Perplexity service.

        Args:
            api_key: Perplexity API key
            model: Default model
            base_url: API base URL, overridable to point at a stub server
            timeout: Per-request timeout in seconds
            max_tokens: Completion token limit
            temperature: Sampling temperature
        """
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        # Retries are owned by RetryPolicy, not the SDK
        self.client = AsyncOpenAI(
            api_key=api_key or "missing",
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
        )

    async def complete(self, messages: List[Dict[str, str]], model_hint: Optional[str] = None) -> CompletionResult:
        """
        Send a chat completion request to Perplexity.

        Args:
            messages: Ordered {role, content} messages
            model_hint: Model to use instead of the default

        Returns:
            CompletionResult with the message text and search results
        """
        check_messages(messages)
        if not self.api_key:
            raise AuthError("PERPLEXITY_API_KEY is not set")

        model = model_hint or self.model
        logger.info(f"Calling Perplexity model {model} with {len(messages)} messages")

        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=messages,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                extra_body={"search_recall": 1, "include_search_results": True},
            )
        except (openai.AuthenticationError, openai.PermissionDeniedError) as e:
            logger.error(f"Perplexity rejected the API key (HTTP {e.status_code})")
            raise AuthError("Perplexity rejected the API key", status_code=e.status_code) from e
        except openai.RateLimitError as e:
            raise RateLimited(f"Perplexity rate limit: {e}", status_code=e.status_code) from e
        except openai.APIConnectionError as e:
            # Includes APITimeoutError
            raise NetworkError(f"No response from Perplexity: {e}") from e
        except openai.APIStatusError as e:
            if is_quota_message(str(e)):
                raise RateLimited(f"Perplexity quota exceeded: {e}", status_code=e.status_code) from e
            raise ProtocolError(f"Perplexity returned HTTP {e.status_code}: {e}", status_code=e.status_code) from e
        except openai.APIError as e:
            raise ProtocolError(f"Unexpected response from Perplexity: {e}") from e

        try:
            text = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise ProtocolError("Perplexity response has no choices") from e
        if not isinstance(text, str):
            raise ProtocolError("Perplexity response has no message content")

        search_results = getattr(response, "search_results", None)
        if search_results is None and response.model_extra:
            search_results = response.model_extra.get("search_results")
        sources = to_sources(search_results)

        logger.debug(f"Perplexity returned {len(text)} chars and {len(sources)} search results")
        return CompletionResult(text=text, rawSearchResults=sources)
