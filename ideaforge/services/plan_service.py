"""
Expands a single idea into a full Markdown build, team and go-to-market plan.
"""

from typing import Optional

from ideaforge.models.idea import IdeaRecord
from ideaforge.services.ai_service import CompletionClient
from ideaforge.services.errors import ProtocolError
from ideaforge.utils.logger import logger
from ideaforge.utils.mongodb_client import MongoDBClient
from ideaforge.utils.retry import RetryPolicy

PLAN_SYSTEM_PROMPT = (
    "You are a world-class product manager, tech lead, and marketing strategist. Given a "
    "project idea, provide an exhaustive and detailed plan on how to build, strategize, and "
    "market it. Format your response using Markdown for clear headings, lists, and emphasis."
)

PLAN_SECTIONS = """Provide a comprehensive and actionable plan covering the following sections in great detail:

# 1. Technical Architecture
High-level overview, frontend, backend, database (with a sample schema), third-party services, deployment and hosting.

# 2. Team Roles & Responsibilities
Core team for the MVP, extended team after the MVP, and a skills matrix.

# 3. Development Timeline & Milestones
Phase 1: MVP (0-3 months), Phase 2: core features (3-6 months), Phase 3: V2 and scaling (6-12 months).

# 4. Go-to-Market (GTM) Strategy
Target audience personas, tiered pricing, marketing channels with a budget split, and a launch plan.

# 5. Growth & Scaling Strategy
User acquisition for the first 100, 1,000 and 10,000 users, retention, product roadmap and key metrics (KPIs)."""


class PlanService:
    """Generates and caches full project plans."""

    def __init__(
        self,
        client: CompletionClient,
        retry: RetryPolicy,
        store: Optional[MongoDBClient] = None,
        model_hint: Optional[str] = None,
    ):
        self.client = client
        self.retry = retry
        self.store = store
        self.model_hint = model_hint

    def build_messages(self, idea: IdeaRecord):
        details = (
            f"**Project Idea:** {idea.title}\n"
            f"**Description:** {idea.description}\n"
            f"**Market Need:** {idea.marketNeed}\n"
            f"**Suggested Tech Stack:** {', '.join(idea.techStack) or 'Not specified'}\n"
            f"**Difficulty:** {idea.difficulty}\n"
            f"**Estimated Time:** {idea.estimatedTime}"
        )
        return [
            {"role": "system", "content": PLAN_SYSTEM_PROMPT},
            {"role": "user", "content": f"{details}\n\n{PLAN_SECTIONS}"},
        ]

    async def expand(self, idea: IdeaRecord) -> str:
        """
        Generate a plan for an idea.

        Raises:
            CompletionError when the backend cannot produce one
        """
        logger.info(f"Generating plan for '{idea.title}'")
        messages = self.build_messages(idea)
        completion = await self.retry.execute(lambda: self.client.complete(messages, self.model_hint))
        plan = completion.text.strip()
        if not plan:
            raise ProtocolError("Plan response was empty")
        return plan

    async def expand_stored(self, idea_id: str) -> Optional[str]:
        """
        Return the stored plan for an idea, generating and saving one on first request.

        Returns:
            The plan, or None when no idea has that id
        """
        if self.store is None:
            raise ValueError("expand_stored needs a store")

        document = self.store.fetch_idea(idea_id, count_view=False)
        if document is None:
            logger.warning(f"Idea {idea_id} not found")
            return None
        if document.get("plan"):
            logger.info(f"Using stored plan for idea {idea_id}")
            return document["plan"]

        plan = await self.expand(IdeaRecord.model_validate(document))
        self.store.update_plan(idea_id, plan)
        return plan
