"""
Tests for the topic classifier.
"""

import pytest

from ideaforge.models.topic import DEFAULT_TOPICS
from ideaforge.services.topic_service import TopicClassifier, load_topics


def names(topics):
    return [topic.name for topic in topics]


class TestTopicClassifier:
    """Tests for TopicClassifier.classify."""

    def test_startup_prompt(self, classifier):
        """The scenario prompt only matches the startup topic."""
        topics = classifier.classify(["successful startup"], "Give me a few ideas on building a successful startup")
        assert names(topics) == ["startup"]

    def test_keyword_matches_alias_in_both_directions(self, classifier):
        assert names(classifier.classify(["chatgpt wrapper"])) == ["ai"]
        assert names(classifier.classify(["generative"])) == ["ai"]
        assert names(classifier.classify(["ai"])) == ["ai"]

    def test_keyword_can_match_several_topics(self, classifier):
        assert names(classifier.classify(["machine learning"])) == ["ai", "education"]

    def test_whole_word_matching(self, classifier):
        """'ai' inside 'email' is not the ai topic."""
        assert names(classifier.classify(["email marketing"])) == ["marketing"]
        assert names(classifier.classify(["retail"])) == ["ecommerce"]
        assert "ai" not in names(classifier.classify(["pain points"]))

    def test_plural_keyword(self, classifier):
        assert names(classifier.classify(["payments"])) == ["fintech"]

    def test_prompt_triggers_are_a_second_pass(self, classifier):
        """Prompt triggers add topics after keyword matches."""
        topics = classifier.classify(["budget tracker"], "a budget tracker built on chatgpt")
        assert names(topics) == ["ai"]

        topics = classifier.classify(["fitness coaching"], "fitness coaching with chatgpt")
        assert names(topics) == ["health", "ai"]

    def test_default_topics_when_nothing_matches(self, classifier):
        topics = classifier.classify(["quantum origami"], "quantum origami")
        assert names(topics) == ["startup", "default"]

    def test_at_most_three_topics(self, classifier):
        topics = classifier.classify(["ai", "mobile app", "fintech", "gaming"])
        assert names(topics) == ["ai", "mobile-app", "fintech"]

    def test_deterministic(self, classifier):
        keywords = ["saas", "b2b payments", "react dashboard"]
        prompt = "A SaaS for B2B payments with a React dashboard"
        first = classifier.classify(keywords, prompt)
        second = TopicClassifier().classify(keywords, prompt)
        assert names(first) == names(second)

    def test_get(self, classifier):
        assert classifier.get("ai").tech_additions == ["Python", "TensorFlow"]
        assert classifier.get("missing") is None

    def test_custom_dictionary_without_defaults(self):
        """With a custom dictionary lacking default topics, the last topic is the fallback."""
        topics = load_topics()[:2]
        classifier = TopicClassifier(topics)
        assert names(classifier.classify(["quantum origami"])) == ["web-development"]


class TestLoadTopics:
    """Tests for load_topics."""

    def test_builtin_dictionary(self):
        topics = load_topics()
        assert names(topics) == [entry["name"] for entry in DEFAULT_TOPICS]
        assert all("{primary}" in template.title for topic in topics for template in topic.templates)

    def test_missing_file_uses_builtin(self, tmp_path):
        topics = load_topics(tmp_path / "missing.yaml")
        assert len(topics) == len(DEFAULT_TOPICS)

    def test_yaml_override(self, tmp_path):
        path = tmp_path / "topics.yaml"
        path.write_text(
            "topics:\n"
            "  - name: robotics\n"
            "    aliases: [robot, robotics]\n"
            "    triggers: [robot]\n"
            "    tech_additions: [ROS]\n"
            "    templates:\n"
            "      - title: '{primary} Robot Fleet'\n"
            "        description: 'Fleet management for {secondary} robots.'\n"
            "  - name: default\n"
        )

        topics = load_topics(path)
        classifier = TopicClassifier(topics)

        assert names(topics) == ["robotics", "default"]
        assert names(classifier.classify(["warehouse robots"])) == ["robotics"]
        assert names(classifier.classify(["bakery"])) == ["default"]


if __name__ == "__main__":
    # This allows running the tests directly with python
    import sys
    sys.exit(pytest.main(["-v", __file__]))
