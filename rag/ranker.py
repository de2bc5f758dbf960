"""
Ranking and selection of keyword match candidates.
"""

import logging
from typing import Iterable, Tuple

from core.error_handling import ConfigurationError
from rag.keyword_matcher import MatchResult


class Ranker:
    """
    Orders candidates best-first and bounds the result set.

    Sorting is by score descending with ties broken by corpus declaration
    order, so identical questions always yield identical rankings. Candidates
    beyond max_results are dropped.
    """

    def __init__(self, max_results: int = 4):
        if max_results < 1:
            raise ConfigurationError(f"max_results must be at least 1, got {max_results}")
        self.max_results = max_results
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def sort_key(result: MatchResult):
        return (-result.score, result.position)

    def rank(self, candidates: Iterable[MatchResult]) -> Tuple[MatchResult, ...]:
        return tuple(sorted(candidates, key=self.sort_key))

    def select(self, candidates: Iterable[MatchResult]) -> Tuple[MatchResult, ...]:
        ranked = self.rank(candidates)
        selected = ranked[:self.max_results]
        if len(ranked) > len(selected):
            self.logger.debug(
                f"Dropped {len(ranked) - len(selected)} candidates beyond cap of {self.max_results}"
            )
        return selected
