"""
Entry points for the host application.

This is the only layer that reads the real clock: it times searches,
defaults "now" for recommendations, and records metrics and logs. The
domain functions it calls are pure.
"""

import time
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple

from collection_desk.config import settings
from collection_desk.domain.models import DebtRecord, Recommendation, SearchResult, SearchSummary
from collection_desk.domain.options import RecommendationWeights, SearchOptions
from collection_desk.domain.recommendations import (
    filter_time_appropriate,
    recommend_bulk,
    recommend_for_customer,
)
from collection_desk.domain.search import advanced_search, search, summarize
from collection_desk.infrastructure.observability.logging import log_recommendations, log_search, setup_logging
from collection_desk.infrastructure.observability.metrics import record_recommendations, record_search


def bootstrap() -> None:
    """Configure structured logging for the host process"""
    setup_logging(settings.log_level)


def run_search(
    records: Sequence[DebtRecord],
    query: str,
    advanced: bool = False,
    options: SearchOptions | dict | None = None,
) -> Tuple[List[SearchResult], SearchSummary]:
    """
    Run a smart or advanced (multi-term AND) search and summarize it.

    Flow:
    1. Validate options
    2. Run the search, timing it
    3. Build the summary with the measured time
    4. Record metrics and a structured log line
    """
    opts = SearchOptions.coerce(options)
    mode = "advanced" if advanced else "smart"

    start_time = time.perf_counter()
    results = advanced_search(records, query, opts) if advanced else search(records, query, opts)
    duration = time.perf_counter() - start_time

    summary = summarize(results, duration * 1000)

    record_search(mode, len(results), duration)
    log_search(mode, len(query.split()) if query else 0, len(records), len(results), summary.search_time_ms)

    return results, summary


def run_recommendations(
    records: Sequence[DebtRecord],
    max_recommendations: Optional[int] = None,
    weights: RecommendationWeights | dict | None = None,
    time_filtered: bool = False,
    now: Optional[datetime] = None,
    is_business_day: Optional[Callable[[datetime], bool]] = None,
) -> List[Recommendation]:
    """Bulk recommendations for the dashboard, optionally limited to off-hours actions"""
    now = now or datetime.now()

    start_time = time.perf_counter()
    recommendations = recommend_bulk(records, now, max_recommendations, weights)
    if time_filtered:
        recommendations = list(filter_time_appropriate(recommendations, now, is_business_day))
    duration = time.perf_counter() - start_time

    record_recommendations(recommendations, duration)
    log_recommendations(
        record_count=len(records),
        recommendation_count=len(recommendations),
        time_filtered=time_filtered,
        duration_ms=duration * 1000,
        top_customer_id=recommendations[0].customer_id if recommendations else None,
    )

    return recommendations


def customer_recommendations(
    record: DebtRecord,
    weights: RecommendationWeights | dict | None = None,
    now: Optional[datetime] = None,
) -> List[Recommendation]:
    """Recommendations for a single customer (all statuses considered)"""
    return recommend_for_customer(record, now or datetime.now(), weights)
