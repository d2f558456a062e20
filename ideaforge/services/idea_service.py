"""
Idea generation: prompt composition, the remote call, validation of parsed
records and the deterministic template fallback.
"""

import asyncio
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from ideaforge.models.idea import (
    AuxiliaryContext,
    GenerationOutcome,
    GenerationResult,
    IdeaRecord,
    PartialIdeaRecord,
    Source,
)
from ideaforge.models.topic import IdeaTemplate, Topic
from ideaforge.services.ai_service import CompletionClient
from ideaforge.services.context_service import ContextProvider
from ideaforge.services.errors import AuthError, NetworkError, ParseError, ProtocolError, RateLimited
from ideaforge.services.response_parser import ResponseParser
from ideaforge.services.topic_service import TopicClassifier
from ideaforge.utils.constants import (
    DEFAULT_KEYWORDS,
    DEFAULT_TECH_STACK,
    DESCRIPTION_MAX_LENGTH,
    DIFFICULTY_TIMES,
    FALLBACK_DIFFICULTY,
    FALLBACK_ESTIMATED_TIME,
    KEYWORD_MAX_LENGTH,
    MARKET_NEED_MAX_LENGTH,
    MAX_IDEA_COUNT,
    MIN_IDEA_COUNT,
    PROMPT_MAX_LENGTH,
    TECH_STACK_MAX_ITEMS,
    TITLE_MAX_LENGTH,
)
from ideaforge.utils.logger import logger
from ideaforge.utils.retry import RetryPolicy

GENERATION_SYSTEM_PROMPT = (
    "You are a product strategist and technical architect. Generate innovative, viable "
    "project ideas based on the user's concept and any research provided. Always respond "
    "with valid JSON."
)

GENERATION_FORMAT = """Format your response as a JSON array with exactly {count} objects and these exact keys:
[
  {{
    "title": "Project Title",
    "description": "Detailed description",
    "marketNeed": "Specific problem it solves",
    "techStack": ["Technology1", "Technology2"],
    "difficulty": "Easy|Medium|Hard",
    "estimatedTime": "Time estimate"
  }}
]
Return only the JSON array."""

GENERIC_MARKET_NEED = (
    "Teams working on {secondary} still juggle manual processes and scattered tools; "
    "a focused {primary} product can save them time and money."
)
GENERIC_TEMPLATE = IdeaTemplate(
    title="{primary} Platform",
    description="A focused platform that helps people handle {secondary} tasks in one place.",
)

EASY_WORDS = ("easy", "beginner", "simple", "low")
HARD_WORDS = ("hard", "advanced", "difficult", "complex", "high")
TITLE_WORDS = 8


def clamp_count(count: int) -> int:
    return min(max(int(count), MIN_IDEA_COUNT), MAX_IDEA_COUNT)


def _clip(text: str, limit: int) -> str:
    text = re.sub(r"\s+", " ", text).strip()
    if len(text) <= limit:
        return text
    return text[:limit - 3].rstrip() + "..."


def _shorten(text: str, limit: int = KEYWORD_MAX_LENGTH) -> str:
    """Cut text to ``limit`` characters, on a word boundary when there is one."""
    text = " ".join(text.split())
    if len(text) <= limit:
        return text
    head = text[:limit]
    if text[limit] != " " and " " in head:
        head = head.rsplit(" ", 1)[0]
    return head.rstrip()


def _display_keyword(keyword: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in keyword.split())


def normalize_difficulty(value: Optional[str]) -> str:
    """Map free-text difficulty onto Easy, Medium or Hard; unknown values become Medium."""
    lowered = (value or "").strip().lower()
    if any(lowered.startswith(word) for word in EASY_WORDS):
        return "Easy"
    if any(lowered.startswith(word) for word in HARD_WORDS):
        return "Hard"
    return "Medium"


def _tech_stack(items: Iterable[str]) -> List[str]:
    stack: List[str] = []
    seen = set()
    for item in items:
        name = str(item).strip()
        if name and name.lower() not in seen:
            seen.add(name.lower())
            stack.append(name)
    return stack[:TECH_STACK_MAX_ITEMS]


def _title_from(description: str) -> str:
    first_sentence = re.split(r"(?<=[.!?])\s", description, maxsplit=1)[0]
    words = first_sentence.split()[:TITLE_WORDS]
    return " ".join(words).rstrip(".,;:!?") or "Untitled Idea"


def coerce_record(partial: PartialIdeaRecord, default_sources: Sequence[Source] = ()) -> Optional[IdeaRecord]:
    """
    Bring a parsed record in line with the IdeaRecord constraints.

    Missing fields are filled from the others or from defaults and long text
    is clipped. A record with neither description nor market need cannot be
    repaired and yields None.
    """
    description = (partial.description or "").strip() or (partial.marketNeed or "").strip()
    if not description:
        return None

    title = (partial.title or "").strip() or _title_from(description)
    difficulty = normalize_difficulty(partial.difficulty)
    market_need = (partial.marketNeed or "").strip() or GENERIC_MARKET_NEED.format(
        primary=title, secondary=title.lower()
    )

    try:
        return IdeaRecord(
            title=_clip(title, TITLE_MAX_LENGTH),
            description=_clip(description, DESCRIPTION_MAX_LENGTH),
            marketNeed=_clip(market_need, MARKET_NEED_MAX_LENGTH),
            techStack=_tech_stack(partial.techStack) or list(DEFAULT_TECH_STACK),
            difficulty=difficulty,
            estimatedTime=(partial.estimatedTime or "").strip() or DIFFICULTY_TIMES[difficulty],
            sources=list(partial.sources) or list(default_sources),
        )
    except ValidationError as e:
        logger.warning(f"Dropping idea '{title[:60]}': {e.error_count()} validation errors")
        return None


def build_fallback_ideas(
    keywords: Sequence[str],
    topics: Sequence[Topic],
    count: int,
    taken_titles: Iterable[str] = (),
) -> List[IdeaRecord]:
    """
    Render template ideas from the matched topics.

    Templates are taken in topic order; titles already in ``taken_titles`` are
    skipped and numbered variants are used once the templates run out. The
    output depends only on the arguments.

    Args:
        keywords: Keyword phrases, the first one names every idea
        topics: Matched topics, most relevant first; should end with the default topic
        count: Number of ideas to produce
        taken_titles: Titles that must not be repeated

    Returns:
        Exactly ``count`` ideas
    """
    keywords = [k for k in keywords if k and k.strip()] or list(DEFAULT_KEYWORDS)
    primary = _display_keyword(_shorten(keywords[0]))
    secondary = _shorten(keywords[1]) if len(keywords) > 1 else (topics[0].focus if topics else "business")

    templates = [template for topic in topics for template in topic.templates] or [GENERIC_TEMPLATE]
    tech_stack = _tech_stack(list(DEFAULT_TECH_STACK) + [t for topic in topics for t in topic.tech_additions])
    market_need = _clip(GENERIC_MARKET_NEED.format(primary=primary, secondary=secondary), MARKET_NEED_MAX_LENGTH)

    taken = {title.lower() for title in taken_titles}
    ideas: List[IdeaRecord] = []
    round_number = 1
    while len(ideas) < count:
        for template in templates:
            # The round suffix goes on after clipping so each round yields new titles
            suffix = f" {round_number}" if round_number > 1 else ""
            title = template.title.format(primary=primary, secondary=secondary)
            title = _clip(title, TITLE_MAX_LENGTH - len(suffix)) + suffix
            if title.lower() in taken:
                continue
            taken.add(title.lower())
            ideas.append(IdeaRecord(
                title=title,
                description=_clip(template.description.format(primary=primary, secondary=secondary), DESCRIPTION_MAX_LENGTH),
                marketNeed=market_need,
                techStack=tech_stack,
                difficulty=FALLBACK_DIFFICULTY,
                estimatedTime=FALLBACK_ESTIMATED_TIME,
                sources=[],
            ))
            if len(ideas) == count:
                break
        round_number += 1
    return ideas


class IdeaGenerator:
    """Produces exactly N ideas for a prompt, falling back to templates when the backend cannot."""

    def __init__(
        self,
        client: CompletionClient,
        retry: RetryPolicy,
        classifier: TopicClassifier,
        parser: Optional[ResponseParser] = None,
        context_providers: Sequence[ContextProvider] = (),
        target_count: int = 3,
        model_hint: Optional[str] = None,
    ):
        """
        Initialize the generator.

        Args:
            client: Completion backend asked for ideas
            retry: Retry policy wrapped around the remote call
            classifier: Topic classifier used by the fallback path
            parser: Response parser, a default one when omitted
            context_providers: Optional providers gathered concurrently before generation
            target_count: Default number of ideas, clamped to 1..5
            model_hint: Model to request instead of the client default
        """
        self.client = client
        self.retry = retry
        self.classifier = classifier
        self.parser = parser or ResponseParser()
        self.context_providers = list(context_providers)
        self.target_count = clamp_count(target_count)
        self.model_hint = model_hint

    async def gather_context(self, prompt: str, keywords: List[str]) -> List[AuxiliaryContext]:
        """Run every provider concurrently; a failing provider only loses its own block."""
        if not self.context_providers:
            return []

        results = await asyncio.gather(
            *(provider.gather(prompt, keywords) for provider in self.context_providers),
            return_exceptions=True,
        )
        contexts = []
        for provider, result in zip(self.context_providers, results):
            if isinstance(result, BaseException):
                logger.warning(f"Context provider '{provider.name}' failed: {type(result).__name__}: {result}")
            elif result is not None and result.text.strip():
                contexts.append(result)
        return contexts

    def build_messages(self, prompt: str, keywords: List[str], count: int, contexts: Sequence[AuxiliaryContext]):
        sections = [f'Generate {count} innovative project ideas for: "{prompt[:PROMPT_MAX_LENGTH]}"']
        sections.append(f"Keywords: {', '.join(keywords)}")
        for context in contexts:
            sections.append(f"{context.label}:\n{context.text}")
        sections.append(
            "For each idea, provide:\n"
            "- A clear, concise title\n"
            "- A detailed description explaining the concept\n"
            "- The specific market need or problem it solves\n"
            "- Recommended technology stack (be specific with frameworks, languages, tools)\n"
            "- Difficulty level (Easy: 1-2 months, Medium: 3-6 months, Hard: 6+ months)\n"
            "- Estimated development time"
        )
        sections.append(GENERATION_FORMAT.format(count=count))
        return [
            {"role": "system", "content": GENERATION_SYSTEM_PROMPT},
            {"role": "user", "content": "\n\n".join(sections)},
        ]

    async def _remote_ideas(self, prompt: str, keywords: List[str], count: int) -> Tuple[GenerationOutcome, List[IdeaRecord]]:
        """Ask the backend for ideas and reduce every failure to an outcome value."""
        try:
            contexts = await self.gather_context(prompt, keywords)
            messages = self.build_messages(prompt, keywords, count, contexts)
            completion = await self.retry.execute(lambda: self.client.complete(messages, self.model_hint))

            default_sources = list(completion.rawSearchResults)
            if not default_sources:
                default_sources = next((list(c.sources) for c in contexts if c.sources), [])

            ideas: List[IdeaRecord] = []
            for partial in self.parser.parse(completion.text):
                record = coerce_record(partial, default_sources)
                if record is not None and record.title.lower() not in {i.title.lower() for i in ideas}:
                    ideas.append(record)
            if not ideas:
                raise ParseError("No valid idea records in the response")
            return GenerationOutcome.OK, ideas[:count]

        except AuthError as e:
            logger.error(f"Idea generation credential rejected, using templates: {e}")
            return GenerationOutcome.AUTH_REJECTED, []
        except RateLimited as e:
            logger.warning(f"Idea generation rate limited, using templates: {e}")
            return GenerationOutcome.RATE_LIMITED, []
        except NetworkError as e:
            logger.warning(f"Idea generation got no response, using templates: {e}")
            return GenerationOutcome.NETWORK_FAILED, []
        except ParseError as e:
            logger.warning(f"Idea generation response unusable, using templates: {e}")
            return GenerationOutcome.PARSE_FAILED, []
        except ProtocolError as e:
            logger.warning(f"Idea generation protocol error, using templates: {e}")
            return GenerationOutcome.PROTOCOL_ERROR, []
        except Exception as e:
            logger.error(f"Unexpected idea generation failure, using templates: {type(e).__name__}: {e}")
            return GenerationOutcome.PROTOCOL_ERROR, []

    def fallback_topics(self, keywords: List[str], prompt: str) -> List[Topic]:
        topics = self.classifier.classify(keywords, prompt)
        default_topic = self.classifier.get("default")
        if default_topic is not None and default_topic not in topics:
            topics = topics + [default_topic]
        return topics

    async def generate(self, prompt: str, keywords: Sequence[str], target_count: Optional[int] = None) -> GenerationResult:
        """
        Generate exactly ``target_count`` ideas. Never raises.

        Args:
            prompt: The user's free-text concept
            keywords: Keywords extracted from the prompt
            target_count: Number of ideas, the generator default when omitted

        Returns:
            GenerationResult; ``degraded`` is set when any idea came from a template
        """
        count = clamp_count(target_count if target_count is not None else self.target_count)
        keywords = [k for k in keywords if k and k.strip()] or list(DEFAULT_KEYWORDS)

        if not prompt or not prompt.strip():
            logger.info("Empty prompt, skipping the backend")
            outcome, ideas = GenerationOutcome.SKIPPED, []
        else:
            outcome, ideas = await self._remote_ideas(prompt, keywords, count)

        if len(ideas) == count:
            logger.info(f"Generated {count} ideas from the backend")
            return GenerationResult(keywords=keywords, ideas=ideas, degraded=False, outcome=outcome)

        topics = self.fallback_topics(keywords, prompt or "")
        fallback = build_fallback_ideas(
            keywords,
            topics,
            count - len(ideas),
            taken_titles=[idea.title for idea in ideas],
        )
        if ideas:
            logger.warning(f"Backend returned {len(ideas)} of {count} ideas, padding with templates")
            outcome = GenerationOutcome.PADDED
        else:
            logger.warning(f"Using {count} template ideas for topics {[t.name for t in topics]}")

        return GenerationResult(keywords=keywords, ideas=ideas + fallback, degraded=True, outcome=outcome)
