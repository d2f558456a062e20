"""
Topic classification for keywords and prompts.

Topics only flavour degraded output (fallback templates, tech additions) and
choose which communities to search for context; they never gate generation.
"""

import re
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import yaml

from ideaforge.models.topic import DEFAULT_TOPICS, Topic
from ideaforge.utils.logger import logger

DEFAULT_TOPIC_NAMES = ("startup", "default")
MAX_TOPICS = 3


def load_topics(path: Optional[Path] = None) -> List[Topic]:
    """
    Load the topic dictionary.

    Args:
        path: Optional YAML file with a top-level ``topics`` list; the built-in
            dictionary is used when it is missing or absent

    Returns:
        List of topics in priority order
    """
    if path is None or not Path(path).exists():
        if path is not None:
            logger.warning(f"Topics file {path} not found, using built-in topics")
        return [Topic(**entry) for entry in DEFAULT_TOPICS]

    with open(path, 'r') as file:
        topics_config = yaml.safe_load(file) or {}

    topics = [Topic(**entry) for entry in topics_config.get('topics', [])]
    logger.info(f"Loaded {len(topics)} topics from {path}")
    return topics


def _term_pattern(term: str) -> re.Pattern:
    # Whole words only, tolerating a plural "s"
    return re.compile(rf"\b{re.escape(term.lower())}s?\b")


class TopicClassifier:
    """Maps keywords and prompt text onto known topic tags."""

    def __init__(self, topics: Optional[Sequence[Topic]] = None):
        """
        Initialize the classifier.

        Args:
            topics: Topic dictionary; the built-in one when omitted
        """
        self.topics: List[Topic] = list(topics) if topics is not None else load_topics()
        self._by_name: Dict[str, Topic] = {topic.name: topic for topic in self.topics}
        self._alias_patterns = {
            topic.name: [(alias.lower(), _term_pattern(alias)) for alias in topic.aliases]
            for topic in self.topics
        }
        self._trigger_patterns = {
            topic.name: [_term_pattern(trigger) for trigger in topic.triggers]
            for topic in self.topics
        }

    def get(self, name: str) -> Optional[Topic]:
        return self._by_name.get(name)

    def _keyword_matches(self, keyword: str, topic: Topic) -> bool:
        # Containment both ways, on whole words only: "pain points" and "retail" are not ai
        normalized = keyword.strip().lower()
        if not normalized:
            return False
        keyword_pattern = _term_pattern(normalized)
        for alias, alias_pattern in self._alias_patterns[topic.name]:
            if alias_pattern.search(normalized) or keyword_pattern.search(alias):
                return True
        return False

    def classify(self, keywords: Sequence[str], prompt: str = "") -> List[Topic]:
        """
        Classify keywords and prompt into 1 to 3 topics.

        Keyword matches come first, then prompt trigger matches, each in the
        dictionary's order; when nothing matches the default pair is returned.

        Args:
            keywords: Extracted keyword phrases
            prompt: The raw user prompt

        Returns:
            Topics in order of first match
        """
        matched: List[Topic] = []

        def add(topic: Topic):
            if topic not in matched:
                matched.append(topic)

        for keyword in keywords:
            for topic in self.topics:
                if self._keyword_matches(keyword, topic):
                    logger.debug(f"Topic '{topic.name}' matched keyword '{keyword}'")
                    add(topic)

        lowered_prompt = (prompt or "").lower()
        for topic in self.topics:
            if any(pattern.search(lowered_prompt) for pattern in self._trigger_patterns[topic.name]):
                logger.debug(f"Topic '{topic.name}' matched prompt trigger")
                add(topic)

        if not matched:
            defaults = [self._by_name[name] for name in DEFAULT_TOPIC_NAMES if name in self._by_name]
            if not defaults and self.topics:
                defaults = [self.topics[-1]]
            logger.info(f"No topic matched, using defaults: {[t.name for t in defaults]}")
            return defaults

        return matched[:MAX_TOPICS]
