"""
Idea generation pipeline for ideaforge: prompt -> keywords -> ideas -> (optional) storage.
"""

from typing import List, Optional, Tuple

from ideaforge.models.idea import GenerationResult
from ideaforge.services.idea_service import IdeaGenerator
from ideaforge.services.keyword_service import KeywordExtractor
from ideaforge.utils.logger import logger
from ideaforge.utils.mongodb_client import MongoDBClient


class IdeaPipeline:
    """Entry point used by the command line in place of an HTTP handler."""

    def __init__(
        self,
        keyword_extractor: KeywordExtractor,
        idea_generator: IdeaGenerator,
        store: Optional[MongoDBClient] = None,
    ):
        """
        Initialize the idea pipeline.

        Args:
            keyword_extractor: Extracts keywords from the prompt
            idea_generator: Turns prompt and keywords into ideas
            store: Optional persistence collaborator for generated ideas
        """
        self.keyword_extractor = keyword_extractor
        self.idea_generator = idea_generator
        self.store = store

    async def generate(self, prompt: str, target_count: Optional[int] = None) -> GenerationResult:
        """
        Run keyword extraction and idea generation for one prompt. Never raises.

        Args:
            prompt: The user's free-text concept
            target_count: Number of ideas, the generator default when omitted

        Returns:
            GenerationResult with exactly the requested number of ideas
        """
        logger.info("Starting idea generation pipeline")
        keywords = await self.keyword_extractor.extract(prompt)
        logger.info(f"Keywords: {keywords}")

        result = await self.idea_generator.generate(prompt, keywords, target_count)
        logger.info(
            f"Pipeline finished with {len(result.ideas)} ideas "
            f"(outcome={result.outcome.value}, degraded={result.degraded})"
        )
        return result

    async def generate_and_save(
        self,
        prompt: str,
        owner_id: str,
        target_count: Optional[int] = None,
        is_public: bool = True,
    ) -> Tuple[GenerationResult, List[str]]:
        """
        Generate ideas and store them for an owner.

        Returns:
            The generation result and the stored document ids
        """
        if self.store is None:
            raise ValueError("generate_and_save needs a store")

        result = await self.generate(prompt, target_count)
        idea_ids = self.store.insert_ideas(owner_id, prompt, result, is_public=is_public)
        return result, idea_ids
