from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ResultSource(str, Enum):
    QA = "qa"
    SOCIAL = "social"


class SortKey(str, Enum):
    """Caller-facing sort vocabulary (Stack Exchange's own terms)."""

    ACTIVITY = "activity"
    VOTES = "votes"
    CREATION = "creation"
    RELEVANCE = "relevance"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SearchResult(CamelModel):
    """
    Provider-agnostic result record.

    title/url/author are always set so any result can render a link and an
    attribution line. community_label is the tag list for QA items and the
    subreddit for Social items.
    """

    source: ResultSource
    title: str
    url: str
    author: str
    community_label: str
    body: Optional[str] = None
    score: Optional[int] = None

    # QA-only
    question_id: Optional[int] = None
    tags: list[str] = Field(default_factory=list)
    author_url: Optional[str] = None
    answer_count: Optional[int] = None
    is_answered: Optional[bool] = None


class QAOwner(BaseModel):
    model_config = ConfigDict(extra="ignore")

    display_name: Optional[str] = None
    link: Optional[str] = None


class QAQuestionDetail(BaseModel):
    """Raw Stack Exchange question record as returned by /questions/{id}."""

    model_config = ConfigDict(extra="ignore")

    question_id: int
    title: str
    link: str
    tags: list[str] = Field(default_factory=list)
    owner: Optional[QAOwner] = None
    body: Optional[str] = None
    score: Optional[int] = None
    answer_count: Optional[int] = None
    is_answered: Optional[bool] = None


class TopAnswer(CamelModel):
    question_id: int
    body: Optional[str] = None


class AggregatedResults(CamelModel):
    stack_overflow: list[SearchResult] = Field(default_factory=list)
    reddit: list[SearchResult] = Field(default_factory=list)

    @property
    def combined(self) -> list[SearchResult]:
        """QA results first, then Social."""
        return [*self.stack_overflow, *self.reddit]


class EmailRequest(CamelModel):
    # Both optional so a missing field surfaces as our 400, not a schema error
    email: Optional[str] = None
    results: Optional[list[SearchResult]] = None


class EmailResponse(BaseModel):
    message: str
