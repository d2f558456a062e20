"""
Keyword extraction for user prompts.

The remote backend is asked first; whenever it fails or answers with nothing
usable, a local stop-word/phrase heuristic takes over, so extraction always
produces at least one keyword.
"""

import json
import re
from collections import Counter
from typing import List, Optional

from ideaforge.services.ai_service import CompletionClient
from ideaforge.utils.constants import (
    DEFAULT_KEYWORDS,
    KEYWORD_MAX_LENGTH,
    LOCAL_KEYWORD_COUNT,
    MAX_KEYWORD_LIMIT,
    MIN_KEYWORD_LIMIT,
    PROMPT_MAX_LENGTH,
    STOP_WORDS,
)
from ideaforge.utils.logger import logger
from ideaforge.utils.retry import RetryPolicy

KEYWORD_SYSTEM_PROMPT = (
    "You are a keyword extraction expert. Extract {limit} keywords or short phrases from the "
    "user prompt that would be useful for market research and idea generation. Ignore request "
    "and filler words such as \"give me\", \"ideas\" or \"how to\"; focus on the domain, the "
    "technology, the industry and the target audience. Return only the keywords as a JSON "
    "array of strings."
)

MAX_KEYWORD_WORDS = 5
LIST_MARKER = re.compile(r"^\s*(?:[-*•]\s+|\d+[.)]\s*)")


def _tokenize(text: str) -> List[str]:
    return re.sub(r"[^a-z0-9\s]", " ", text.lower()).split()


def _chunk_run(run: List[str]) -> List[str]:
    """Split a run of content words into consecutive 2-3 word phrases."""
    phrases = []
    i = 0
    while len(run) - i >= 2:
        # A run of four reads better as two pairs than a triple and an orphan
        size = 2 if len(run) - i in (2, 4) else 3
        phrases.append(" ".join(run[i:i + size]))
        i += size
    return phrases


def extract_keywords_locally(prompt: str, count: int = LOCAL_KEYWORD_COUNT) -> List[str]:
    """
    Local keyword heuristic.

    Stop words split the prompt into runs of content words; each run is cut
    into 2-3 word phrases, kept in order of appearance. When no phrase
    survives, single words longer than three letters are ranked by frequency.
    Tokens and phrases over KEYWORD_MAX_LENGTH characters are never keywords.
    A fixed default pair is returned when nothing is left at all.
    """
    tokens = _tokenize(prompt or "")

    phrases: List[str] = []
    run: List[str] = []
    for token in tokens + [""]:
        if token and token not in STOP_WORDS and len(token) <= KEYWORD_MAX_LENGTH:
            run.append(token)
            continue
        for phrase in _chunk_run(run):
            if phrase not in phrases and len(phrase) <= KEYWORD_MAX_LENGTH:
                phrases.append(phrase)
        run = []

    if phrases:
        return phrases[:count]

    words = [t for t in tokens if t not in STOP_WORDS and 3 < len(t) <= KEYWORD_MAX_LENGTH]
    if words:
        # Counter keeps first-seen order for equal counts
        return [word for word, _ in Counter(words).most_common(count)]

    return list(DEFAULT_KEYWORDS)


def parse_keyword_response(text: str, limit: int = MAX_KEYWORD_LIMIT) -> List[str]:
    """
    Read keywords from a model answer given as a JSON array of strings or as
    comma/newline separated phrases.

    Returns lowercase, de-duplicated keywords, at most ``limit`` of them.
    """
    if not text or not text.strip():
        return []

    text = text.strip()
    fenced = re.search(r"```(?:json)?\s*(.*?)```", text, re.DOTALL)
    if fenced:
        text = fenced.group(1).strip()

    items: List[str] = []
    start, end = text.find("["), text.rfind("]")
    if start != -1 and end > start:
        try:
            decoded = json.loads(text[start:end + 1])
            if isinstance(decoded, list):
                items = [item for item in decoded if isinstance(item, str)]
        except json.JSONDecodeError:
            logger.debug("Keyword response is not a JSON array, splitting on separators")

    if not items:
        items = re.split(r"[,\n]", text)

    keywords: List[str] = []
    for item in items:
        keyword = LIST_MARKER.sub("", item).strip().strip("\"'`*[]. ").lower()
        keyword = re.sub(r"\s+", " ", keyword)
        # Preambles such as "Here are the keywords:" and run-on sentences are not keywords
        if (
            not keyword
            or keyword.endswith(":")
            or len(keyword.split()) > MAX_KEYWORD_WORDS
            or len(keyword) > KEYWORD_MAX_LENGTH
        ):
            continue
        if keyword not in keywords:
            keywords.append(keyword)
    return keywords[:limit]


class KeywordExtractor:
    """Turns a free-text prompt into a short ordered list of keyword phrases."""

    def __init__(
        self,
        client: CompletionClient,
        retry: RetryPolicy,
        limit: int = 5,
        model_hint: Optional[str] = None,
    ):
        """
        Initialize the extractor.

        Args:
            client: Completion backend asked for keywords
            retry: Retry policy wrapped around the remote call
            limit: Maximum keywords kept from the remote answer, clamped to 3..8
            model_hint: Model to request instead of the client default
        """
        self.client = client
        self.retry = retry
        self.limit = min(max(limit, MIN_KEYWORD_LIMIT), MAX_KEYWORD_LIMIT)
        self.model_hint = model_hint

    def build_messages(self, prompt: str):
        return [
            {"role": "system", "content": KEYWORD_SYSTEM_PROMPT.format(limit=f"3-{self.limit}")},
            {"role": "user", "content": f'Extract keywords from: "{prompt[:PROMPT_MAX_LENGTH]}"'},
        ]

    async def extract(self, prompt: str) -> List[str]:
        """
        Extract keywords for a prompt. Never raises.

        Args:
            prompt: The user's free-text concept

        Returns:
            One or more lowercase keyword phrases
        """
        if not prompt or not prompt.strip():
            logger.info("Empty prompt, using default keywords")
            return list(DEFAULT_KEYWORDS)

        messages = self.build_messages(prompt)
        try:
            completion = await self.retry.execute(lambda: self.client.complete(messages, self.model_hint))
            keywords = parse_keyword_response(completion.text, self.limit)
            if keywords:
                logger.info(f"Remote keyword extraction returned {keywords}")
                return keywords
            logger.warning("Remote keyword extraction returned nothing usable, using local heuristic")
        except Exception as e:
            logger.warning(f"Remote keyword extraction failed ({type(e).__name__}: {e}), using local heuristic")

        keywords = extract_keywords_locally(prompt)
        logger.info(f"Local keyword extraction returned {keywords}")
        return keywords
