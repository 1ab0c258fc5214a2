"""Multi-field weighted matching of a single debt record against a query"""

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from collection_desk.domain.models import DebtRecord, SearchResult
from collection_desk.domain.options import SearchOptions
from collection_desk.domain.text import (
    is_diacritic,
    is_partial_match,
    normalize_for_matching,
    normalize_with_offsets,
    similarity,
)

MARK_OPEN = "<mark>"
MARK_CLOSE = "</mark>"

MAX_SCORE = 1.0


def field_text(value: Any) -> str:
    """Render a record field value as searchable text"""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def highlight(text: str, query: str, open_tag: str = MARK_OPEN, close_tag: str = MARK_CLOSE) -> str:
    """
    Wrap the part of the original text that matches the query.

    The query is located in the normalized text and the span is mapped back
    to original indices, so diacritics and collapsed whitespace inside the
    match stay inside the marker. Combining marks attached to the last
    matched letter are kept with it. When no span can be located the text is
    returned unchanged.
    """
    if not text or not query:
        return text

    normalized_query = normalize_for_matching(query)
    if not normalized_query:
        return text

    normalized_text, offsets = normalize_with_offsets(text)
    index = normalized_text.find(normalized_query)
    if index == -1:
        return text

    start = offsets[index]
    end = offsets[index + len(normalized_query) - 1] + 1
    while end < len(text) and is_diacritic(text[end]):
        end += 1

    return text[:start] + open_tag + text[start:end] + close_tag + text[end:]


def score_field(normalized_value: str, normalized_query: str, options: SearchOptions) -> Optional[float]:
    """
    Score one normalized field value against the normalized query.

    Returns None when the field does not match. Order of checks:
    exact match, substring match (whole-field similarity above threshold),
    then word-by-word similarity.
    """
    if normalized_value == normalized_query:
        return 1.0 * options.exact_match_boost

    if is_partial_match(normalized_query, normalized_value):
        whole_field = similarity(normalized_query, normalized_value)
        if whole_field >= options.fuzzy_threshold:
            return whole_field

    query_words = normalized_query.split(" ")
    field_words = normalized_value.split(" ")
    word_scores = [
        score
        for score in (similarity(q, f) for q in query_words for f in field_words)
        if score >= options.fuzzy_threshold
    ]
    total = sum(word_scores)
    if total > 0:
        return total / len(query_words)
    return None


def match_record(record: DebtRecord, query: str, options: SearchOptions | None = None) -> Optional[SearchResult]:
    """
    Score one record against a query across the configured fields.

    Each matching field contributes field_score * boost. The total is divided
    by the sum of boosts of all searched fields and capped at 1.0; exact
    matches (boosted by exact_match_boost) may exceed 1 per field before
    normalization.

    Returns None when no field matches.
    """
    opts = SearchOptions.coerce(options)
    normalized_query = normalize_for_matching(query)
    if not normalized_query:
        return None

    matches: List[Tuple[str, float, str]] = []
    for field_name in opts.fields:
        text = field_text(getattr(record, field_name, None))
        if not text:
            continue
        field_score = score_field(normalize_for_matching(text), normalized_query, opts)
        if field_score is None:
            continue
        matches.append((field_name, field_score * opts.boost(field_name), highlight(text, query)))

    total_score = sum(weighted for _, weighted, _ in matches)
    if total_score <= 0:
        return None

    max_possible = sum(opts.boost(field_name) for field_name in opts.fields)
    score = min(MAX_SCORE, total_score / max_possible) if max_possible > 0 else 0.0

    highlights: Dict[str, str] = {name: marked for name, _, marked in matches}
    return SearchResult(
        record=record,
        score=score,
        matched_fields=tuple(name for name, _, _ in matches),
        highlights=highlights,
    )
