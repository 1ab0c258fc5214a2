"""
Hebrew text normalization and edit-distance similarity.

Normalization blurs the medial/final letter distinction (שלום == שלומ) on
purpose: it is meant for matching, never for display.

Similarity operates on Python code points, so a base letter and each of its
combining marks count as separate units. Callers normalize first, which
strips the Hebrew marks before any distance is computed.
"""

import re
from typing import List, Optional, Tuple

from rapidfuzz.distance import Levenshtein

HEBREW_DIACRITICS = re.compile("[\u0591-\u05C7]")
WHITESPACE = re.compile(r"\s+")

FINAL_FORMS = str.maketrans("ךםןףץ", "כמנפצ")


def is_diacritic(char: str) -> bool:
    return "\u0591" <= char <= "\u05C7"


def normalize(text: Optional[str]) -> str:
    """Strip Hebrew diacritics, collapse whitespace, trim and lowercase"""
    if not text:
        return ""
    text = HEBREW_DIACRITICS.sub("", text)
    return WHITESPACE.sub(" ", text).strip().lower()


def normalize_final_forms(text: Optional[str]) -> str:
    """Map the five final letter forms (ך ם ן ף ץ) to their medial forms"""
    if not text:
        return ""
    return text.translate(FINAL_FORMS)


def normalize_for_matching(text: Optional[str]) -> str:
    return normalize(normalize_final_forms(text))


def similarity(a: str, b: str) -> float:
    """
    Edit-distance similarity in [0, 1].

    1 - levenshtein(a, b) / max(len(a), len(b)), with unit costs for
    insertion, deletion and substitution.
    """
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    distance = Levenshtein.distance(a, b)
    return 1.0 - distance / max(len(a), len(b))


def is_partial_match(query: str, text: str) -> bool:
    """True when the normalized query is a substring of the normalized text"""
    return normalize_for_matching(query) in normalize_for_matching(text)


def normalize_with_offsets(text: str) -> Tuple[str, List[int]]:
    """
    Normalize text for matching and keep, for every output character, the
    index of the original character it came from.

    Produces the same string as normalize_for_matching for Hebrew and Latin
    input; context-dependent lowercasing (e.g. Greek final sigma) may differ.
    """
    chars: List[str] = []
    offsets: List[int] = []
    pending_space: Optional[int] = None

    for index, char in enumerate(text):
        if is_diacritic(char):
            continue
        if char.isspace():
            # Leading whitespace is dropped, inner runs become one space
            if chars and pending_space is None:
                pending_space = index
            continue
        if pending_space is not None:
            chars.append(" ")
            offsets.append(pending_space)
            pending_space = None
        for lowered in char.translate(FINAL_FORMS).lower():
            chars.append(lowered)
            offsets.append(index)

    return "".join(chars), offsets
