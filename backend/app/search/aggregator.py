"""
Aggregator: run both provider searches in parallel and group their results.
"""

import concurrent.futures
import logging
from typing import Optional

from app.config import Settings, get_settings
from app.errors import UpstreamFetchError
from app.search.clients import search_reddit, search_stackexchange
from app.search.schemas import AggregatedResults, SortKey

logger = logging.getLogger(__name__)


def search_all(
    query: str,
    sort: SortKey = SortKey.ACTIVITY,
    settings: Optional[Settings] = None,
    max_workers: int = 2,
) -> AggregatedResults:
    """
    Query Stack Exchange and Reddit concurrently.

    Fails as a whole if either provider fails; the raised UpstreamFetchError
    does not say which one.
    """
    settings = settings or get_settings()
    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        qa_future = executor.submit(search_stackexchange, query, sort, settings)
        social_future = executor.submit(search_reddit, query, sort, settings)
        try:
            qa_results = qa_future.result()
            social_results = social_future.result()
        except UpstreamFetchError:
            raise
        except Exception as e:
            logger.exception("Unexpected error while searching for '%s'", query)
            raise UpstreamFetchError("Error fetching from APIs") from e

    logger.info(
        "Search '%s' (sort=%s): %d Stack Exchange, %d Reddit results",
        query,
        SortKey(sort).value,
        len(qa_results),
        len(social_results),
    )
    return AggregatedResults(stack_overflow=qa_results, reddit=social_results)
