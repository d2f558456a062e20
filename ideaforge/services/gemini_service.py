"""
Gemini service implementation for ideaforge.
Handles chat-style completions using Google's Gemini models.
"""

from typing import Dict, List, Optional

import httpx
from google import genai
from google.genai import errors

from ideaforge.models.idea import CompletionResult
from ideaforge.services.ai_service import CompletionClient, check_messages
from ideaforge.services.errors import (
    AuthError,
    NetworkError,
    ProtocolError,
    RateLimited,
    is_quota_message,
)
from ideaforge.utils.logger import logger

GEMINI_ROLES = {"user": "user", "assistant": "model"}


class GeminiService(CompletionClient):
    """Gemini service implementation."""

    def __init__(
        self,
        google_api_key: str,
        model: str,
        timeout: float = 60.0,
        max_tokens: int = 2000,
        temperature: float = 0.7,
    ):
        """
        Initialize the Gemini service.

        Args:
            google_api_key: Google AI API key
            model: Gemini model to use
            timeout: Per-request timeout in seconds
            max_tokens: Output token limit
            temperature: Sampling temperature
        """
        self.google_api_key = google_api_key
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.gemini_client = genai.Client(
            api_key=google_api_key or "missing",
            http_options={"timeout": int(timeout * 1000)},
        )

    @staticmethod
    def _to_request(messages: List[Dict[str, str]]):
        """Split chat messages into a system instruction and Gemini contents."""
        system_parts = [m["content"] for m in messages if m["role"] == "system"]
        contents = [
            {"role": GEMINI_ROLES[m["role"]], "parts": [{"text": m["content"]}]}
            for m in messages
            if m["role"] != "system"
        ]
        if not contents:
            # A system-only conversation still needs a user turn
            contents = [{"role": "user", "parts": [{"text": system_parts.pop()}]}]
        return "\n\n".join(system_parts) or None, contents

    async def complete(self, messages: List[Dict[str, str]], model_hint: Optional[str] = None) -> CompletionResult:
        """
        Send a chat completion request to Gemini.

        Args:
            messages: Ordered {role, content} messages
            model_hint: Model to use instead of the default

        Returns:
            CompletionResult with the generated text
        """
        check_messages(messages)
        if not self.google_api_key:
            raise AuthError("GOOGLE_AI_API_KEY is not set")

        model = model_hint or self.model
        system_instruction, contents = self._to_request(messages)

        # Configure the request
        config = {
            "temperature": self.temperature,
            "max_output_tokens": self.max_tokens,
        }
        if system_instruction:
            config["system_instruction"] = system_instruction

        logger.info(f"Calling Gemini model {model} with {len(messages)} messages")
        try:
            response = await self.gemini_client.aio.models.generate_content(
                model=model,
                contents=contents,
                config=config,
            )
        except errors.APIError as e:
            raise self._classify(e) from e
        except httpx.TimeoutException as e:
            raise NetworkError(f"Gemini request timed out: {e}") from e
        except httpx.TransportError as e:
            raise NetworkError(f"No response from Gemini: {e}") from e

        text = getattr(response, "text", None)
        if not isinstance(text, str) or not text.strip():
            raise ProtocolError("Gemini response has no text")

        logger.debug(f"Gemini returned {len(text)} chars")
        return CompletionResult(text=text)

    @staticmethod
    def _classify(error: errors.APIError):
        code = getattr(error, "code", None)
        message = str(error)
        if code in (401, 403) or "api key not valid" in message.lower():
            logger.error(f"Gemini rejected the API key (HTTP {code})")
            return AuthError("Gemini rejected the API key", status_code=code)
        if code == 429 or is_quota_message(message):
            return RateLimited(f"Gemini quota exceeded: {message}", status_code=code)
        return ProtocolError(f"Gemini returned HTTP {code}: {message}", status_code=code)
