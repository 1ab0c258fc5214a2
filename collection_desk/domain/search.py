"""Search engine - ranks debt records against free-text queries"""

import logging
from collections import Counter
from typing import Dict, List, Optional, Sequence

from collection_desk.domain.matching import match_record
from collection_desk.domain.models import DebtRecord, SearchResult, SearchSummary
from collection_desk.domain.options import SearchOptions

logger = logging.getLogger(__name__)


def _safe_match(record: DebtRecord, query: str, options: SearchOptions) -> Optional[SearchResult]:
    """Match one record; a corrupt record counts as no match"""
    try:
        return match_record(record, query, options)
    except (TypeError, ValueError, AttributeError) as e:
        logger.warning(
            f"Skipping record during search: {e}",
            extra={"customer_id": getattr(record, "customer_id", None), "step": "search_match"},
        )
        return None


def _rank(results: List[SearchResult], max_results: int) -> List[SearchResult]:
    # sorted() is stable, so equal scores keep input order
    return sorted(results, key=lambda r: r.score, reverse=True)[:max_results]


def search(
    records: Sequence[DebtRecord],
    query: str,
    options: SearchOptions | dict | None = None,
) -> List[SearchResult]:
    """
    Single-query search over all records.

    Returns matches sorted by score (highest first), truncated to
    options.max_results. Empty or whitespace-only queries return [].
    """
    opts = SearchOptions.coerce(options)
    if not query or not query.strip():
        return []

    results = [result for result in (_safe_match(r, query, opts) for r in records) if result is not None]
    return _rank(results, opts.max_results)


def _combine(term_matches: List[SearchResult]) -> SearchResult:
    """Merge per-term results for one record: mean score, union of fields, last highlight wins"""
    matched_fields: Dict[str, None] = {}
    highlights: Dict[str, str] = {}
    for result in term_matches:
        matched_fields.update(dict.fromkeys(result.matched_fields))
        highlights.update(result.highlights)

    return SearchResult(
        record=term_matches[0].record,
        score=sum(r.score for r in term_matches) / len(term_matches),
        matched_fields=tuple(matched_fields),
        highlights=highlights,
    )


def advanced_search(
    records: Sequence[DebtRecord],
    query: str,
    options: SearchOptions | dict | None = None,
) -> List[SearchResult]:
    """
    Multi-term AND search.

    A single term delegates to search(). Otherwise every term is searched on
    its own (without truncation) and only records matched by all terms are
    kept, keyed by customer_id. For the same field, the highlight from the
    last term wins.
    """
    opts = SearchOptions.coerce(options)
    terms = query.split() if query else []
    if not terms:
        return []
    if len(terms) == 1:
        return search(records, query, opts)
    if not records:
        return []

    per_term = opts.model_copy(update={"max_results": len(records)})
    term_results = [search(records, term, per_term) for term in terms]

    later_terms: List[Dict[str, SearchResult]] = []
    for results in term_results[1:]:
        by_customer: Dict[str, SearchResult] = {}
        for result in results:
            by_customer.setdefault(result.record.customer_id, result)
        later_terms.append(by_customer)

    combined: List[SearchResult] = []
    seen = set()
    for first in term_results[0]:
        customer_id = first.record.customer_id
        if customer_id in seen:
            continue
        seen.add(customer_id)

        term_matches = [first] + [lookup.get(customer_id) for lookup in later_terms]
        if any(match is None for match in term_matches):
            continue
        combined.append(_combine(term_matches))

    return _rank(combined, opts.max_results)


def summarize(results: Sequence[SearchResult], elapsed_ms: float) -> SearchSummary:
    """
    Summarize a result list.

    The caller times the search and passes elapsed_ms through.
    """
    if not results:
        return SearchSummary(total_results=0, avg_score=0.0, top_matched_fields=(), search_time_ms=elapsed_ms)

    avg_score = sum(r.score for r in results) / len(results)

    # Counter.most_common keeps first-seen order on ties
    field_counts = Counter(name for r in results for name in r.matched_fields)
    top_fields = tuple(name for name, _ in field_counts.most_common(3))

    return SearchSummary(
        total_results=len(results),
        avg_score=round(avg_score, 2),
        top_matched_fields=top_fields,
        search_time_ms=elapsed_ms,
    )
