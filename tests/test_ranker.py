"""
Tests for ranking and selection of match candidates.
"""

import pytest

from corpus.store import build_entries
from core.error_handling import ConfigurationError
from rag.keyword_matcher import MatchResult
from rag.ranker import Ranker


@pytest.fixture
def entries():
    return build_entries([
        {
            "id": f"entry-{i}",
            "title": f"Entry {i}",
            "summary": "Summary.",
            "citations": ["Authority"],
            "era": "Medieval",
            "jurisdiction": "England",
            "category": "doctrine",
            "keywords": [f"keyword{i}"],
        }
        for i in range(6)
    ])


def make_result(entry, score, position):
    return MatchResult(entry=entry, matched_keywords=entry.keywords, score=score, position=position)


def test_sorts_by_score_descending(entries):
    candidates = [make_result(entries[i], score, i) for i, score in enumerate([1.0, 3.0, 2.0])]

    ranked = Ranker(max_results=5).select(candidates)

    assert [r.entry.id for r in ranked] == ["entry-1", "entry-2", "entry-0"]


def test_ties_broken_by_corpus_order(entries):
    candidates = [
        make_result(entries[4], 2.0, 4),
        make_result(entries[1], 2.0, 1),
        make_result(entries[3], 2.0, 3),
    ]

    ranked = Ranker(max_results=5).select(candidates)

    assert [r.position for r in ranked] == [1, 3, 4]


def test_truncates_to_cap(entries):
    candidates = [make_result(entry, 1.0, i) for i, entry in enumerate(entries)]

    ranked = Ranker(max_results=3).select(candidates)

    assert len(ranked) == 3
    assert [r.position for r in ranked] == [0, 1, 2]


def test_fewer_candidates_than_cap(entries):
    ranked = Ranker(max_results=4).select([make_result(entries[0], 1.0, 0)])
    assert len(ranked) == 1


def test_empty_candidates():
    assert Ranker().select([]) == ()


def test_ranking_is_repeatable(entries):
    candidates = [make_result(entry, float(i % 2), i) for i, entry in enumerate(entries)]
    ranker = Ranker(max_results=4)

    assert ranker.select(candidates) == ranker.select(list(reversed(candidates)))


def test_invalid_cap():
    with pytest.raises(ConfigurationError):
        Ranker(max_results=0)
