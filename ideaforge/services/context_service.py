"""
Auxiliary context gathered before idea generation.

Providers are optional; a provider that fails or finds nothing simply
contributes no block to the generation instruction.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ideaforge.models.idea import AuxiliaryContext
from ideaforge.services.ai_service import CompletionClient
from ideaforge.utils.constants import PROMPT_MAX_LENGTH
from ideaforge.utils.logger import logger
from ideaforge.utils.retry import RetryPolicy

RESEARCH_SYSTEM_PROMPT = (
    "You are a market research expert. Provide comprehensive insights about market trends, "
    "opportunities, and potential problems that need solving. Focus on current market gaps "
    "and emerging opportunities."
)


class ContextProvider(ABC):
    """A source of background material for the generation instruction."""

    name = "context"

    @abstractmethod
    async def gather(self, prompt: str, keywords: List[str]) -> Optional[AuxiliaryContext]:
        """
        Gather context for a prompt.

        Returns:
            A context block, or None when there is nothing worth adding

        Raises:
            Any error; the caller treats a failure as an empty result
        """
        pass


class MarketResearchService(ContextProvider):
    """Asks a completion backend for a short market research summary."""

    name = "research"

    def __init__(self, client: CompletionClient, retry: RetryPolicy, model_hint: Optional[str] = None):
        self.client = client
        self.retry = retry
        self.model_hint = model_hint

    def build_messages(self, prompt: str, keywords: List[str]):
        return [
            {"role": "system", "content": RESEARCH_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": (
                    f'Research market opportunities and problems related to: "{prompt[:PROMPT_MAX_LENGTH]}". '
                    f"Keywords: {', '.join(keywords)}. "
                    "Provide insights on: 1) Current market trends, 2) Existing solutions and their "
                    "limitations, 3) Unmet needs and pain points, 4) Recent developments in the space."
                ),
            },
        ]

    async def gather(self, prompt: str, keywords: List[str]) -> Optional[AuxiliaryContext]:
        messages = self.build_messages(prompt, keywords)
        completion = await self.retry.execute(lambda: self.client.complete(messages, self.model_hint))
        text = completion.text.strip()
        if not text:
            return None
        logger.info(f"Market research returned {len(text)} chars and {len(completion.rawSearchResults)} sources")
        return AuxiliaryContext(label="Market research", text=text, sources=completion.rawSearchResults)
