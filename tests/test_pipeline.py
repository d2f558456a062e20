"""
Tests for the IdeaPipeline.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from ideaforge.models.idea import GenerationOutcome, GenerationResult, IdeaRecord
from ideaforge.pipeline import IdeaPipeline


@pytest.fixture
def generation_result():
    """Fixture providing a one-idea generation result."""
    idea = IdeaRecord(
        title="Campus Budget Buddy",
        description="Shared budgeting for students",
        marketNeed="Students overspend",
        techStack=["React Native"],
        difficulty="Easy",
        estimatedTime="2-4 weeks",
    )
    return GenerationResult(keywords=["budgeting", "students"], ideas=[idea], degraded=False)


@pytest.fixture
def mock_keyword_extractor():
    """Fixture providing a mocked keyword extractor."""
    extractor = MagicMock()
    extractor.extract = AsyncMock(return_value=["budgeting", "students"])
    return extractor


@pytest.fixture
def mock_idea_generator(generation_result):
    """Fixture providing a mocked idea generator."""
    generator = MagicMock()
    generator.generate = AsyncMock(return_value=generation_result)
    return generator


@pytest.fixture
def mock_store():
    """Fixture providing a mocked idea store."""
    store = MagicMock()
    store.insert_ideas.return_value = ["65f1c0ffee0ddba11ad0beef"]
    return store


class TestIdeaPipeline:
    """Tests for IdeaPipeline."""

    @pytest.mark.asyncio
    async def test_generate(self, mock_keyword_extractor, mock_idea_generator, generation_result):
        pipeline = IdeaPipeline(mock_keyword_extractor, mock_idea_generator)

        result = await pipeline.generate("budgeting app for students", target_count=1)

        assert result is generation_result
        assert result.outcome == GenerationOutcome.OK
        mock_keyword_extractor.extract.assert_awaited_once_with("budgeting app for students")
        mock_idea_generator.generate.assert_awaited_once_with(
            "budgeting app for students", ["budgeting", "students"], 1
        )

    @pytest.mark.asyncio
    async def test_generate_and_save(self, mock_keyword_extractor, mock_idea_generator, mock_store, generation_result):
        pipeline = IdeaPipeline(mock_keyword_extractor, mock_idea_generator, store=mock_store)

        result, idea_ids = await pipeline.generate_and_save("budgeting app", "user-1", is_public=False)

        assert result is generation_result
        assert idea_ids == ["65f1c0ffee0ddba11ad0beef"]
        mock_store.insert_ideas.assert_called_once_with("user-1", "budgeting app", generation_result, is_public=False)

    @pytest.mark.asyncio
    async def test_generate_and_save_without_store(self, mock_keyword_extractor, mock_idea_generator):
        pipeline = IdeaPipeline(mock_keyword_extractor, mock_idea_generator)

        with pytest.raises(ValueError):
            await pipeline.generate_and_save("budgeting app", "user-1")

        mock_keyword_extractor.extract.assert_not_called()


if __name__ == "__main__":
    # This allows running the tests directly with python
    import sys
    sys.exit(pytest.main(["-v", __file__]))
