"""
Shared data models for ideas, citations and completion responses.
"""

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ideaforge.utils.constants import (
    DESCRIPTION_MAX_LENGTH,
    MARKET_NEED_MAX_LENGTH,
    TECH_STACK_MAX_ITEMS,
    TITLE_MAX_LENGTH,
)

Difficulty = Literal["Easy", "Medium", "Hard"]


class Source(BaseModel):
    """A citation backing an idea."""

    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    url: str = Field(..., min_length=1)
    snippet: Optional[str] = None


class CompletionResult(BaseModel):
    """Model representing a response from a completion backend."""

    text: str
    rawSearchResults: List[Source] = Field(default_factory=list)


class PartialIdeaRecord(BaseModel):
    """Whatever the parser managed to recover for one idea; every field may be missing."""

    title: Optional[str] = None
    description: Optional[str] = None
    marketNeed: Optional[str] = None
    techStack: List[str] = Field(default_factory=list)
    difficulty: Optional[str] = None
    estimatedTime: Optional[str] = None
    sources: List[Source] = Field(default_factory=list)


class IdeaRecord(BaseModel):
    """Model representing a validated project idea."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH, description="A clear, concise project title")
    description: str = Field(..., min_length=1, max_length=DESCRIPTION_MAX_LENGTH, description="What the project is and how it works")
    marketNeed: str = Field(..., max_length=MARKET_NEED_MAX_LENGTH, description="The problem the project addresses")
    techStack: List[str] = Field(..., min_length=1, max_length=TECH_STACK_MAX_ITEMS, description="Recommended technologies")
    difficulty: Difficulty = Field("Medium", description="Easy, Medium or Hard")
    estimatedTime: str = Field(..., min_length=1, description="Free-text duration such as '2-4 weeks'")
    sources: List[Source] = Field(default_factory=list)

    @field_validator("techStack")
    @classmethod
    def tech_stack_distinct(cls, v: List[str]) -> List[str]:
        seen = set()
        for item in v:
            key = item.strip().lower()
            if not key:
                raise ValueError("techStack entries must be non-empty")
            if key in seen:
                raise ValueError(f"duplicate techStack entry: {item}")
            seen.add(key)
        return v


class GenerationOutcome(str, Enum):
    """How the remote generation attempt ended."""

    OK = "ok"
    PADDED = "padded"
    AUTH_REJECTED = "auth_rejected"
    RATE_LIMITED = "rate_limited"
    NETWORK_FAILED = "network_failed"
    PROTOCOL_ERROR = "protocol_error"
    PARSE_FAILED = "parse_failed"
    SKIPPED = "skipped"


class GenerationResult(BaseModel):
    """Keywords and ideas produced for one prompt."""

    keywords: List[str]
    ideas: List[IdeaRecord]
    degraded: bool
    outcome: GenerationOutcome = GenerationOutcome.OK


class AuxiliaryContext(BaseModel):
    """An opaque block of background material appended to the generation instruction."""

    label: str
    text: str
    sources: List[Source] = Field(default_factory=list)
