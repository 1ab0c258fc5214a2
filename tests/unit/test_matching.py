"""Unit tests for single-record matching and highlighting"""

import pytest
from collection_desk.domain.matching import field_text, highlight, match_record, score_field
from collection_desk.domain.models import DebtStatus
from collection_desk.domain.options import SearchOptions

# Sum of default boosts: 2.0 + 1.5 + 1.5 + 1.0 + 0.8 + 0.5
DEFAULT_BOOST_TOTAL = 7.3


def test_match_partial_name_prefix(make_record):
    """Test a name prefix matches through the word-by-word fallback"""
    result = match_record(make_record(), "ישרא")

    assert result is not None
    assert result.matched_fields == ("customer_name",)
    # Whole-field similarity 1 - 8/12 is below threshold, so words decide:
    # 'ישראל' 0.8 + 'ישראלי' 1 - 2/6, times name boost 2.0
    expected = (0.8 + (1 - 2 / 6)) * 2.0 / DEFAULT_BOOST_TOTAL
    assert result.score == pytest.approx(expected)
    assert result.highlights["customer_name"] == "<mark>ישרא</mark>ל ישראלי"


def test_match_id_number_substring(make_record):
    """Test an id prefix matches as a substring above threshold"""
    result = match_record(make_record(), "123456")

    assert result is not None
    assert "id_number" in result.matched_fields
    assert result.highlights["id_number"] == "<mark>123456</mark>789"


def test_match_collection_agent(make_record):
    """Test agent first name matches and is highlighted"""
    result = match_record(make_record(), "משה")

    assert result is not None
    assert "collection_agent" in result.matched_fields
    assert result.highlights["collection_agent"] == "<mark>משה</mark> כהן"


def test_match_returns_none_for_no_match(make_record):
    """Test unrelated query yields no result"""
    assert match_record(make_record(), "בוקר טוב") is None


def test_match_empty_query(make_record):
    """Test blank queries never match"""
    assert match_record(make_record(), "") is None
    assert match_record(make_record(), "   ") is None


def test_exact_match_is_boosted(make_record):
    """Test exact normalized equality scores exact_match_boost times the boost"""
    result = match_record(make_record(), "ישראל ישראלי")

    assert result is not None
    assert result.score == pytest.approx(3.0 * 2.0 / DEFAULT_BOOST_TOTAL)
    assert result.score > 0.8
    assert result.highlights["customer_name"] == "<mark>ישראל ישראלי</mark>"


def test_exact_match_ignores_final_forms_and_nikud(make_record):
    """Test a query with medial letters and vowel points still matches exactly"""
    record = make_record(customer_name="שלום כהן", collection_agent="רחל אברהם")
    result = match_record(record, "שָׁלוֹמ כהנ")

    assert result is not None
    assert result.score == pytest.approx(3.0 * 2.0 / DEFAULT_BOOST_TOTAL)


def test_exact_match_beats_fuzzy_match_on_same_field(make_record):
    """Test an exact name match outranks a substring-only name match"""
    exact = match_record(make_record(customer_name="ישראל ישראלי"), "ישראל ישראלי")
    fuzzy = match_record(make_record(customer_name="ישראל ישראלית"), "ישראל ישראלי")

    assert exact is not None and fuzzy is not None
    assert exact.score > fuzzy.score


def test_match_skips_missing_fields(make_record):
    """Test absent optional fields are skipped without error"""
    record = make_record(phone=None, notes="")
    result = match_record(record, "משה")

    assert result is not None
    assert "phone" not in result.matched_fields
    assert "notes" not in result.matched_fields


def test_match_record_is_same_object(make_record):
    """Test the result references the input record, not a copy"""
    record = make_record()
    result = match_record(record, "משה")
    assert result.record is record


def test_zero_boost_field_contributes_nothing(make_record):
    """Test a zero-boost field is excluded from both score and normalization"""
    options = SearchOptions(
        fields=("customer_name", "collection_agent"),
        boost_fields={"customer_name": 0.0, "collection_agent": 1.0},
    )
    record = make_record()

    # Only the zero-boost field matches: total stays 0, so no result
    assert match_record(record, "ישראל ישראלי", options) is None

    result = match_record(record, "משה", options)
    assert result is not None
    assert result.score == pytest.approx(1.0)


def test_all_zero_boosts_never_match(make_record):
    """Test degenerate all-zero boost configuration returns None instead of dividing by zero"""
    options = SearchOptions(fields=("customer_name",), boost_fields={"customer_name": 0.0})
    assert match_record(make_record(), "ישראל ישראלי", options) is None


def test_field_outside_boost_table_weighs_one(make_record):
    """Test non-text fields can be searched with a default boost of 1.0"""
    options = SearchOptions(fields=("status", "customer_name"), boost_fields={"customer_name": 5.0})
    result = match_record(make_record(status=DebtStatus.IN_PROCESS), "בטיפול", options)

    assert result is not None
    assert result.matched_fields == ("status",)
    # Exact status match 3.0 * 1.0 over boosts 1.0 + 5.0
    assert result.score == pytest.approx(0.5)


def test_score_capped_at_one_for_multi_field_exact_match(make_record):
    """Test exact matches on several fields never push the score past 1"""
    record = make_record(customer_name="משה כהן", collection_agent="משה כהן", notes="משה כהן")
    result = match_record(record, "משה כהן")

    assert result is not None
    assert set(result.matched_fields) == {"customer_name", "collection_agent", "notes"}
    # Uncapped: 3.0 * (2.0 + 0.8 + 0.5) / 7.3 = 1.356
    assert 0 <= result.score <= 1
    assert result.score == 1.0


def test_score_capped_at_one_for_narrow_field_set(make_record):
    """Test an exact match on the only searched field scores exactly 1"""
    result = match_record(make_record(), "ישראל ישראלי", {"fields": ("customer_name",)})

    assert result is not None
    assert result.score == 1.0


def test_score_field_word_fallback_averages_over_query_words():
    """Test word-level scores are summed and divided by the number of query words"""
    options = SearchOptions()
    # 'משה' matches exactly, 'זזזז' matches nothing
    assert score_field("משה כהנ", "משה זזזז", options) == pytest.approx(0.5)
    assert score_field("משה כהנ", "זזזז", options) is None


def test_field_text_renders_enums_and_numbers():
    """Test enum members render as their stored value"""
    assert field_text(DebtStatus.ACTIVE) == "פעיל"
    assert field_text(40000) == "40000"
    assert field_text(None) == ""


def test_highlight_maps_span_across_diacritics():
    """Test the marker wraps the original letters including their vowel points"""
    # shin, qamats, shin dot, lamed, vav, holam, final mem
    text = "שָׁלוֹם"
    result = highlight(text, "שלו")
    assert result == "<mark>שָׁלוֹ</mark>ם"


def test_highlight_maps_span_across_collapsed_whitespace():
    """Test a query spanning a whitespace run wraps the full original run"""
    assert highlight("משה   כהן", "משה כהן") == "<mark>משה   כהן</mark>"
    assert highlight("  Hello", "ell") == "  H<mark>ell</mark>o"


def test_highlight_returns_original_when_not_locatable():
    """Test no span (or empty input) leaves text untouched"""
    assert highlight("ישראל ישראלי", "בוקר") == "ישראל ישראלי"
    assert highlight("ישראל ישראלי", "") == "ישראל ישראלי"
    assert highlight("", "ישרא") == ""


def test_highlight_custom_tags():
    """Test marker tags are configurable"""
    assert highlight("משה כהן", "כהן", "[", "]") == "משה [כהן]"
