"""
Question processing service for the research engine.

This module normalizes raw question text (and corpus keywords, which must be
normalized the same way) into a token sequence and a canonical string used
for keyword and phrase matching.
"""

import re
import logging
import unicodedata
from typing import Any, List, Tuple
from dataclasses import dataclass


APOSTROPHES = re.compile(r"['‘’ʼ`]")
SEPARATORS = re.compile(r"[\W_]+", re.UNICODE)


def normalize_text(text: Any) -> str:
    """
    Normalize text for matching.

    Lower-cases (case-folds), drops apostrophes so possessives stay one word
    ("Black's" -> "blacks"), turns every other punctuation or symbol into a
    separator and collapses whitespace.

    Args:
        text: Raw text; None becomes an empty string, other types are str()'d

    Returns:
        Normalized text, tokens separated by single spaces
    """
    if text is None:
        return ""
    if not isinstance(text, str):
        text = str(text)

    normalized = unicodedata.normalize("NFKC", text).casefold()
    normalized = APOSTROPHES.sub("", normalized)
    normalized = SEPARATORS.sub(" ", normalized)
    return " ".join(normalized.split())


def tokenize(text: Any) -> List[str]:
    """Split text into normalized tokens."""
    normalized = normalize_text(text)
    return normalized.split() if normalized else []


@dataclass(frozen=True)
class NormalizedQuestion:
    """Question reduced to the forms used for matching."""
    original_text: str
    text: str
    tokens: Tuple[str, ...]

    @property
    def is_empty(self) -> bool:
        return not self.tokens

    def contains_sequence(self, phrase_tokens: Tuple[str, ...]) -> bool:
        """True when phrase_tokens occur contiguously in the question tokens."""
        width = len(phrase_tokens)
        if width == 0 or width > len(self.tokens):
            return False
        return any(
            self.tokens[i:i + width] == phrase_tokens
            for i in range(len(self.tokens) - width + 1)
        )

    def contains_word_prefix(self, phrase: str) -> bool:
        """
        True when phrase starts at a word boundary of the normalized text.

        The last word of phrase may be the beginning of a longer question
        word ("writ" in "writs"); it may never start mid-word ("trover" in
        "controversy").
        """
        if not phrase:
            return False
        return re.search(r"\b" + re.escape(phrase), self.text) is not None


class QuestionProcessor:
    """Turns raw question input into a NormalizedQuestion."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def process_question(self, question: Any) -> NormalizedQuestion:
        """
        Normalize a raw question.

        Absent or non-string input is valid and yields an empty question.

        Args:
            question: Raw question text from the caller

        Returns:
            NormalizedQuestion with canonical text and ordered tokens
        """
        original = "" if question is None else str(question)
        text = normalize_text(original)
        tokens = tuple(text.split()) if text else ()

        if not tokens:
            self.logger.debug("Question is empty after normalization")
        else:
            self.logger.debug(f"Normalized question into {len(tokens)} tokens")

        return NormalizedQuestion(original_text=original, text=text, tokens=tokens)
