"""
Keyword matching for the research engine.

Every corpus entry carries a normalized keyword vocabulary. An entry matches a
question when one or more of its keywords occur in the normalized question,
either as a contiguous token sequence or, when partial matching is enabled,
starting at a word boundary of the normalized text, where the last keyword
word may be the beginning of a longer question word ("writ" in "writs").
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from corpus.models import KnowledgeEntry
from rag.question_processor import NormalizedQuestion

MAX_SPECIFICITY = 0.9


@dataclass(frozen=True)
class MatchResult:
    """A corpus entry together with the keywords that fired for a question."""
    entry: KnowledgeEntry
    matched_keywords: Tuple[str, ...]
    score: float
    position: int

    def to_dict(self) -> Dict[str, Any]:
        data = self.entry.to_dict()
        data["matchedKeywords"] = list(self.matched_keywords)
        return data


class ScoringPolicy:
    """
    Relevance policy: one point per matched keyword plus a specificity bonus
    for the longest matched phrase.

    The bonus is capped below one point so the number of matched keywords
    always dominates; at equal counts an entry whose matches include a
    multi-word phrase outranks one with only single-word matches.
    """

    def __init__(self, phrase_bonus_per_word: float = 0.1):
        self.phrase_bonus_per_word = phrase_bonus_per_word

    def specificity(self, matched_tokens: Iterable[Tuple[str, ...]]) -> float:
        longest = max((len(tokens) for tokens in matched_tokens), default=0)
        if longest <= 1:
            return 0.0
        return min(self.phrase_bonus_per_word * (longest - 1), MAX_SPECIFICITY)

    def score(self, matched_tokens: List[Tuple[str, ...]]) -> float:
        if not matched_tokens:
            return 0.0
        return round(len(matched_tokens) + self.specificity(matched_tokens), 6)


class KeywordMatcher:
    """Computes MatchResult candidates for a question against the corpus."""

    def __init__(
        self,
        entries: Iterable[KnowledgeEntry],
        scoring_policy: Optional[ScoringPolicy] = None,
        allow_partial_matches: bool = True
    ):
        """
        Initialize the matcher.

        Args:
            entries: Corpus entries in declaration order
            scoring_policy: Relevance policy; defaults to ScoringPolicy()
            allow_partial_matches: Also accept keywords whose last word is a
                prefix of a question word (e.g. "writ" in "writs"); a keyword
                never matches from the middle of a word
        """
        self.entries: Tuple[KnowledgeEntry, ...] = tuple(entries)
        self.scoring_policy = scoring_policy or ScoringPolicy()
        self.allow_partial_matches = allow_partial_matches
        self.logger = logging.getLogger(__name__)

    def keyword_matches(
        self,
        question: NormalizedQuestion,
        keyword: str,
        keyword_tokens: Tuple[str, ...]
    ) -> bool:
        if question.contains_sequence(keyword_tokens):
            return True
        return self.allow_partial_matches and question.contains_word_prefix(keyword)

    def match_entry(
        self,
        question: NormalizedQuestion,
        entry: KnowledgeEntry,
        position: int
    ) -> Optional[MatchResult]:
        """
        Match one entry; None when none of its keywords fired.

        Entries come from build_entries, which fills keyword_tokens in
        parallel with keywords; CorpusStore rejects entries that do not.
        """
        matched_keywords: List[str] = []
        matched_tokens: List[Tuple[str, ...]] = []
        for keyword, tokens in zip(entry.keywords, entry.keyword_tokens):
            if self.keyword_matches(question, keyword, tokens):
                matched_keywords.append(keyword)
                matched_tokens.append(tokens)

        if not matched_keywords:
            return None

        return MatchResult(
            entry=entry,
            matched_keywords=tuple(matched_keywords),
            score=self.scoring_policy.score(matched_tokens),
            position=position
        )

    def match(self, question: NormalizedQuestion) -> List[MatchResult]:
        """
        Match the question against every corpus entry.

        Args:
            question: Normalized question

        Returns:
            Candidates in corpus declaration order; entries without any
            matched keyword are omitted
        """
        if question.is_empty:
            return []

        candidates = []
        for position, entry in enumerate(self.entries):
            result = self.match_entry(question, entry, position)
            if result is not None:
                self.logger.debug(
                    f"Entry {entry.id} matched {list(result.matched_keywords)} "
                    f"score={result.score}"
                )
                candidates.append(result)

        return candidates
