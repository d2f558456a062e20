"""
Factory for creating service instances and pipelines from configuration.
"""

from typing import List, Optional

from ideaforge.pipeline import IdeaPipeline
from ideaforge.services.ai_service import CompletionClient
from ideaforge.services.context_service import ContextProvider, MarketResearchService
from ideaforge.services.gemini_service import GeminiService
from ideaforge.services.idea_service import IdeaGenerator
from ideaforge.services.keyword_service import KeywordExtractor
from ideaforge.services.perplexity_service import PerplexityService
from ideaforge.services.plan_service import PlanService
from ideaforge.services.reddit_service import RedditService
from ideaforge.services.topic_service import TopicClassifier, load_topics
from ideaforge.utils.config import config
from ideaforge.utils.logger import logger
from ideaforge.utils.mongodb_client import MongoDBClient
from ideaforge.utils.retry import RetryPolicy


def create_retry_policy() -> RetryPolicy:
    return RetryPolicy(
        max_attempts=config.retry_attempts,
        base_delay_ms=config.retry_base_delay_ms,
        max_jitter_ms=config.retry_max_jitter_ms,
    )


def create_completion_client(provider: str, max_tokens: Optional[int] = None) -> CompletionClient:
    """
    Create the completion backend for a provider name.

    Args:
        provider: "perplexity" or "gemini"
        max_tokens: Output token limit, the configured default when omitted

    Returns:
        CompletionClient instance
    """
    max_tokens = max_tokens or config.max_tokens
    if provider == "perplexity":
        return PerplexityService(
            api_key=config.perplexity_api_key,
            model=config.perplexity_model,
            base_url=config.perplexity_base_url,
            timeout=config.request_timeout,
            max_tokens=max_tokens,
            temperature=config.temperature,
        )
    elif provider == "gemini":
        return GeminiService(
            google_api_key=config.google_ai_api_key,
            model=config.google_ai_model,
            timeout=config.request_timeout,
            max_tokens=max_tokens,
            temperature=config.temperature,
        )
    else:
        raise ValueError(f"Unsupported AI provider: {provider}")


def create_store() -> Optional[MongoDBClient]:
    """Create the MongoDB store, or None when MONGO_URI is not configured."""
    if not config.mongo_uri:
        logger.info("MONGO_URI is not set, ideas will not be stored")
        return None
    return MongoDBClient(config.mongo_uri, config.mongo_db_name)


def create_context_providers(
    client: CompletionClient,
    retry: RetryPolicy,
    classifier: TopicClassifier,
) -> List[ContextProvider]:
    providers: List[ContextProvider] = []
    for source in config.context_sources:
        if source == "research":
            providers.append(MarketResearchService(client, retry))
        elif source == "reddit":
            providers.append(RedditService(
                classifier,
                user_agent=config.reddit_user_agent,
                max_subreddits=config.reddit_max_subreddits,
                posts_per_subreddit=config.reddit_posts_per_subreddit,
                request_delay_ms=config.reddit_request_delay_ms,
                timeout=config.request_timeout,
            ))
        else:
            logger.warning(f"Ignoring unknown context source: {source}")
    return providers


def create_pipeline(provider: Optional[str] = None, store: Optional[MongoDBClient] = None) -> IdeaPipeline:
    """
    Factory to create the idea pipeline for a provider.

    Args:
        provider: Completion provider, AI_PROVIDER when omitted
        store: Optional store for generated ideas

    Returns:
        IdeaPipeline instance
    """
    client = create_completion_client(provider or config.ai_provider)
    retry = create_retry_policy()
    classifier = TopicClassifier(load_topics(config.topics_file))

    keyword_extractor = KeywordExtractor(client, retry, limit=config.keyword_limit)
    idea_generator = IdeaGenerator(
        client,
        retry,
        classifier,
        context_providers=create_context_providers(client, retry, classifier),
        target_count=config.idea_count,
    )
    return IdeaPipeline(keyword_extractor, idea_generator, store=store)


def create_plan_service(store: Optional[MongoDBClient] = None) -> PlanService:
    client = create_completion_client(config.plan_provider, max_tokens=config.plan_max_tokens)
    return PlanService(client, create_retry_policy(), store=store)
