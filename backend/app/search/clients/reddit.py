"""
Reddit search client (Social provider). OAuth refresh-token grant using
REDDIT_CLIENT_ID / REDDIT_CLIENT_SECRET / REDDIT_REFRESH_TOKEN.
"""

import logging
import time
from threading import Lock
from typing import Any, Optional, Union

import requests

from app.config import Settings, get_settings
from app.errors import UpstreamFetchError
from app.search.schemas import ResultSource, SearchResult, SortKey

logger = logging.getLogger(__name__)

TOKEN_URL = "https://www.reddit.com/api/v1/access_token"
SEARCH_URL = "https://oauth.reddit.com/search"
PERMALINK_BASE = "https://reddit.com"

REDDIT_SORTS = {"relevance", "hot", "top", "new", "comments"}

# Caller sort -> Reddit sort
SORT_MAP = {
    SortKey.ACTIVITY.value: "relevance",
    SortKey.VOTES.value: "top",
    SortKey.CREATION.value: "new",
    SortKey.RELEVANCE.value: "relevance",
}

# Refresh this many seconds before Reddit says the token expires
TOKEN_EXPIRY_MARGIN = 60

_session: Optional[requests.Session] = None
_token: Optional[str] = None
_token_expires_at: float = 0.0
_token_lock = Lock()


def _get_session() -> requests.Session:
    global _session
    if _session is None:
        _session = requests.Session()
    return _session


def map_reddit_sort(sort: Union[SortKey, str]) -> str:
    value = sort.value if isinstance(sort, SortKey) else str(sort).lower()
    if value in SORT_MAP:
        return SORT_MAP[value]
    if value in REDDIT_SORTS:
        return value
    return "relevance"


def _get_access_token(settings: Settings) -> str:
    global _token, _token_expires_at
    if not (settings.reddit_client_id and settings.reddit_client_secret and settings.reddit_refresh_token):
        raise ValueError("REDDIT_CLIENT_ID, REDDIT_CLIENT_SECRET and REDDIT_REFRESH_TOKEN are required")

    with _token_lock:
        if _token and time.time() < _token_expires_at:
            return _token
        response = _get_session().post(
            TOKEN_URL,
            auth=(settings.reddit_client_id, settings.reddit_client_secret),
            data={"grant_type": "refresh_token", "refresh_token": settings.reddit_refresh_token},
            headers={"User-Agent": settings.reddit_user_agent},
            timeout=settings.request_timeout_seconds,
        )
        response.raise_for_status()
        data = response.json()
        if "access_token" not in data:
            raise ValueError(f"Reddit token response missing access_token: {data.get('error', 'unknown error')}")
        _token = data["access_token"]
        _token_expires_at = time.time() + float(data.get("expires_in", 3600)) - TOKEN_EXPIRY_MARGIN
        return _token


def reset_token() -> None:
    """Forget the cached OAuth token."""
    global _token, _token_expires_at
    with _token_lock:
        _token = None
        _token_expires_at = 0.0


def to_search_result(post: dict[str, Any]) -> SearchResult:
    selftext = (post.get("selftext") or "").strip()
    return SearchResult(
        source=ResultSource.SOCIAL,
        title=post.get("title", ""),
        url=f"{PERMALINK_BASE}{post.get('permalink', '')}",
        author=post.get("author") or "[deleted]",
        community_label=post.get("subreddit", ""),
        body=selftext or None,
        score=post.get("score"),
    )


def search_reddit(
    query: str,
    sort: SortKey = SortKey.ACTIVITY,
    settings: Optional[Settings] = None,
) -> list[SearchResult]:
    settings = settings or get_settings()
    try:
        token = _get_access_token(settings)
        response = _get_session().get(
            SEARCH_URL,
            params={
                "q": query,
                "sort": map_reddit_sort(sort),
                "t": "all",
                "limit": settings.max_results_per_source,
                "raw_json": 1,
            },
            headers={"Authorization": f"bearer {token}", "User-Agent": settings.reddit_user_agent},
            timeout=settings.request_timeout_seconds,
        )
        response.raise_for_status()
        children = response.json()["data"]["children"]
        return [to_search_result(child.get("data", {})) for child in children]
    except requests.exceptions.HTTPError as e:
        if e.response is not None and e.response.status_code == 401:
            reset_token()
        logger.warning("Reddit search error for query '%s': %s", query, e)
        raise UpstreamFetchError("Error fetching from APIs") from e
    except requests.exceptions.RequestException as e:
        logger.warning("Reddit search error for query '%s': %s", query, e)
        raise UpstreamFetchError("Error fetching from APIs") from e
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("Reddit search failed for query '%s': %s", query, e)
        raise UpstreamFetchError("Error fetching from APIs") from e
