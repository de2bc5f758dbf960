"""
Tests for the question processor service.
"""

import pytest

from rag.question_processor import (
    QuestionProcessor, NormalizedQuestion, normalize_text, tokenize
)


@pytest.fixture
def question_processor():
    """Create a question processor."""
    return QuestionProcessor()


def test_process_question_normalizes_case_and_punctuation(question_processor):
    """Test that case and punctuation do not survive normalization."""
    result = question_processor.process_question("  Explain   SCIRE Facias?!  ")

    assert isinstance(result, NormalizedQuestion)
    assert result.original_text == "  Explain   SCIRE Facias?!  "
    assert result.text == "explain scire facias"
    assert result.tokens == ("explain", "scire", "facias")


def test_empty_and_absent_questions(question_processor):
    """Test that empty, whitespace and None input yield an empty question."""
    for question in ["", "   \t\n", "?!...", None]:
        result = question_processor.process_question(question)
        assert result.is_empty
        assert result.text == ""
        assert result.tokens == ()


def test_non_string_question_is_coerced(question_processor):
    """Test that non-string input is treated as text rather than rejected."""
    result = question_processor.process_question(1677)
    assert result.tokens == ("1677",)


def test_apostrophes_are_dropped():
    """Test possessives stay a single token, straight or curly apostrophe."""
    assert normalize_text("Black's Law") == "blacks law"
    assert normalize_text("Shelley’s Case") == "shelleys case"


def test_punctuation_becomes_separator():
    """Test that hyphens, slashes and dots separate tokens."""
    assert normalize_text("bargained-for exchange") == "bargained for exchange"
    assert normalize_text("sci. fa.") == "sci fa"
    assert normalize_text("trover/conversion") == "trover conversion"
    assert tokenize("quo_warranto") == ["quo", "warranto"]


def test_contains_sequence(question_processor):
    """Test contiguous token sequence detection."""
    question = question_processor.process_question("What did the writ of habeas corpus require?")

    assert question.contains_sequence(("habeas", "corpus"))
    assert question.contains_sequence(("writ",))
    assert not question.contains_sequence(("corpus", "habeas"))
    assert not question.contains_sequence(())


def test_contains_word_prefix(question_processor):
    """Test word-boundary prefix detection on the normalized text."""
    question = question_processor.process_question("Were writs abolished?")

    assert question.contains_word_prefix("writ")
    assert question.contains_word_prefix("writs abolished")
    assert question.contains_word_prefix("writs abol")
    assert not question.contains_word_prefix("")
    assert not question.contains_word_prefix("mandamus")


def test_word_prefix_never_starts_mid_word(question_processor):
    """A phrase hidden inside a longer word is not a match."""
    question = question_processor.process_question("How do courts resolve a contract controversy?")

    assert not question.contains_word_prefix("trover")
    assert not question.contains_word_prefix("tract")
    assert question.contains_word_prefix("contract contro")


if __name__ == "__main__":
    pytest.main([__file__])
