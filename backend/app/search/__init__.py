"""Search: provider clients, normalization and aggregation."""

from .aggregator import search_all
from .clients import fetch_top_answer, search_reddit, search_stackexchange
from .schemas import (
    AggregatedResults,
    EmailRequest,
    EmailResponse,
    QAQuestionDetail,
    ResultSource,
    SearchResult,
    SortKey,
    TopAnswer,
)

__all__ = [
    "search_all",
    "search_stackexchange",
    "search_reddit",
    "fetch_top_answer",
    "AggregatedResults",
    "EmailRequest",
    "EmailResponse",
    "QAQuestionDetail",
    "ResultSource",
    "SearchResult",
    "SortKey",
    "TopAnswer",
]
