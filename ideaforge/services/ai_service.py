"""
Abstract base class for completion backends used in ideaforge.
This provides a common interface for different AI models.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from ideaforge.models.idea import CompletionResult

VALID_ROLES = ("system", "user", "assistant")


def check_messages(messages: List[Dict[str, str]]):
    """Reject message lists no backend could answer."""
    if not messages:
        raise ValueError("messages must not be empty")
    for message in messages:
        if message.get("role") not in VALID_ROLES:
            raise ValueError(f"Unsupported message role: {message.get('role')}")
        if not isinstance(message.get("content"), str):
            raise ValueError("message content must be a string")


class CompletionClient(ABC):
    """Abstract base class for chat-style completion services."""

    @abstractmethod
    async def complete(self, messages: List[Dict[str, str]], model_hint: Optional[str] = None) -> CompletionResult:
        """
        Send a chat completion request.

        Args:
            messages: Ordered {role, content} messages; the last one is the instruction
            model_hint: Model to use instead of the client default

        Returns:
            The completion text plus any search results the backend returned

        Raises:
            AuthError, RateLimited, NetworkError or ProtocolError
        """
        pass
