"""
Stack Exchange API client (QA provider). Public endpoint; STACKEXCHANGE_KEY is optional.
Reuses a single requests.Session for connection pooling.
"""

import concurrent.futures
import html
import logging
from typing import Any, Optional

import requests

from app.config import Settings, get_settings
from app.errors import UpstreamFetchError
from app.search.schemas import QAQuestionDetail, ResultSource, SearchResult, SortKey, TopAnswer

logger = logging.getLogger(__name__)

# Built-in filter that adds `body` to question and answer items
BODY_FILTER = "!9_bDE(fI5"

_session: Optional[requests.Session] = None


def _get_session() -> requests.Session:
    global _session
    if _session is None:
        _session = requests.Session()
    return _session


def _get(path: str, params: dict[str, Any], settings: Settings) -> dict[str, Any]:
    params = {"site": settings.stackexchange_site, **params}
    if settings.stackexchange_key:
        params["key"] = settings.stackexchange_key
    response = _get_session().get(
        f"{settings.stackexchange_base_url}{path}",
        params=params,
        timeout=settings.request_timeout_seconds,
    )
    response.raise_for_status()
    data = response.json()
    if "quota_remaining" in data:
        logger.debug("Stack Exchange quota remaining: %s", data["quota_remaining"])
    return data


def to_search_result(detail: QAQuestionDetail) -> SearchResult:
    owner = detail.owner
    return SearchResult(
        source=ResultSource.QA,
        title=html.unescape(detail.title),
        url=detail.link,
        author=html.unescape(owner.display_name) if owner and owner.display_name else "[deleted]",
        author_url=owner.link if owner else None,
        community_label=", ".join(detail.tags) if detail.tags else "stackoverflow",
        body=detail.body,
        question_id=detail.question_id,
        tags=detail.tags,
        score=detail.score,
        answer_count=detail.answer_count,
        is_answered=detail.is_answered,
    )


def fetch_question_detail(question_id: int, settings: Optional[Settings] = None) -> Optional[QAQuestionDetail]:
    """Fetch one question with its body. Returns None on any failure."""
    settings = settings or get_settings()
    try:
        data = _get(f"/questions/{question_id}", {"filter": BODY_FILTER}, settings)
        items = data.get("items") or []
        if not items:
            logger.warning("Stack Exchange returned no detail for question %s", question_id)
            return None
        return QAQuestionDetail.model_validate(items[0])
    except (requests.exceptions.RequestException, ValueError, AttributeError, KeyError, TypeError) as e:
        logger.warning("Error fetching question details for ID %s: %s", question_id, e)
        return None


def fetch_top_answer(question_id: int, settings: Optional[Settings] = None) -> TopAnswer:
    """Body of the highest-voted answer; body is None when unavailable."""
    settings = settings or get_settings()
    try:
        data = _get(
            f"/questions/{question_id}/answers",
            {"order": "desc", "sort": "votes", "filter": BODY_FILTER},
            settings,
        )
        items = data.get("items") or []
        body = items[0].get("body") if items else None
    except (requests.exceptions.RequestException, ValueError, AttributeError, KeyError, TypeError) as e:
        logger.warning("Error fetching top answer for question %s: %s", question_id, e)
        return TopAnswer(question_id=question_id)
    return TopAnswer(question_id=question_id, body=body)


def search_stackexchange(
    query: str,
    sort: SortKey = SortKey.ACTIVITY,
    settings: Optional[Settings] = None,
) -> list[SearchResult]:
    """
    Title search, then one detail call per hit (in parallel).

    A failed search call raises UpstreamFetchError; a failed detail call only
    drops that question.
    """
    settings = settings or get_settings()
    try:
        data = _get(
            "/search",
            {
                "intitle": query,
                "order": "desc",
                "sort": SortKey(sort).value,
                "pagesize": settings.max_results_per_source,
                "filter": "default",
            },
            settings,
        )
    except requests.exceptions.RequestException as e:
        logger.warning("Stack Exchange search error for query '%s': %s", query, e)
        raise UpstreamFetchError("Error fetching from APIs") from e
    except ValueError as e:
        logger.warning("Stack Exchange returned a malformed payload for query '%s': %s", query, e)
        raise UpstreamFetchError("Error fetching from APIs") from e

    question_ids = [item["question_id"] for item in data.get("items", []) if "question_id" in item]
    if not question_ids:
        return []

    max_workers = max(1, min(settings.detail_fetch_workers, len(question_ids)))
    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        # map() keeps the search ranking order
        details = list(executor.map(lambda qid: fetch_question_detail(qid, settings), question_ids))

    results = [to_search_result(d) for d in details if d is not None]
    dropped = len(question_ids) - len(results)
    if dropped:
        logger.info("Dropped %d of %d Stack Exchange results with failed detail fetch", dropped, len(question_ids))
    return results
