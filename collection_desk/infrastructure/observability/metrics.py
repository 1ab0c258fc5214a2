"""Prometheus metrics for search latency, result volume and recommendation mix"""

from typing import Sequence

from prometheus_client import Counter, Histogram

from collection_desk.domain.models import Recommendation

# Search metrics
search_counter = Counter(
    "collection_desk_search_total",
    "Total searches run",
    ["mode"],  # smart | advanced
)

search_latency_histogram = Histogram(
    "collection_desk_search_duration_seconds",
    "Search wall-clock time",
    ["mode"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0],
)

search_results_histogram = Histogram(
    "collection_desk_search_results",
    "Results returned per search",
    buckets=[0, 1, 5, 10, 25, 50, 100],
)

empty_search_counter = Counter(
    "collection_desk_search_empty_total",
    "Searches that returned no results",
)

# Recommendation metrics
recommendation_counter = Counter(
    "collection_desk_recommendations_total",
    "Recommendations produced",
    ["action"],  # call | email | meeting | legal
)

recommendation_run_histogram = Histogram(
    "collection_desk_recommendation_duration_seconds",
    "Bulk recommendation run time",
    buckets=[0.001, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
)


def record_search(mode: str, result_count: int, duration_seconds: float) -> None:
    """Record search metrics for latency and hit-rate monitoring"""
    search_counter.labels(mode=mode).inc()
    search_latency_histogram.labels(mode=mode).observe(duration_seconds)
    search_results_histogram.observe(result_count)
    if result_count == 0:
        empty_search_counter.inc()


def record_recommendations(recommendations: Sequence[Recommendation], duration_seconds: float) -> None:
    """Record the action mix of a recommendation run"""
    recommendation_run_histogram.observe(duration_seconds)
    for rec in recommendations:
        recommendation_counter.labels(action=rec.action.value).inc()
