"""Search API clients: Stack Exchange (QA) and Reddit (Social)."""

from .reddit import search_reddit
from .stackexchange import fetch_top_answer, search_stackexchange

__all__ = ["search_stackexchange", "search_reddit", "fetch_top_answer"]
