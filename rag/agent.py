"""
Legal research agent: the question-to-response pipeline.

    question -> QuestionProcessor -> KeywordMatcher -> Ranker
             -> AnswerSynthesizer -> AgentResponse

The agent owns no mutable state beyond the injected, immutable corpus, so a
single instance can serve any number of concurrent callers.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple, Union

from core.config import get_engine_config
from corpus.models import KnowledgeEntry
from corpus.store import CorpusStore
from rag.keyword_matcher import KeywordMatcher, MatchResult, ScoringPolicy
from rag.question_processor import QuestionProcessor
from rag.ranker import Ranker
from rag.response_generator import AnswerSynthesizer, select_disclaimer


@dataclass(frozen=True)
class AgentResponse:
    """Result handed to the boundary layer for one question."""
    answer: str
    supporting_entries: Tuple[MatchResult, ...]
    disclaimer: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "answer": self.answer,
            "supportingEntries": [result.to_dict() for result in self.supporting_entries],
            "disclaimer": self.disclaimer,
        }


def assemble_response(
    answer: str,
    supporting_entries: Sequence[MatchResult],
    disclaimer: str
) -> AgentResponse:
    return AgentResponse(
        answer=answer,
        supporting_entries=tuple(supporting_entries),
        disclaimer=disclaimer,
    )


class LegalResearchAgent:
    """
    Answers research questions against a fixed corpus.

    Components default to the configured engine settings and may be injected
    for testing or tuning.
    """

    def __init__(
        self,
        corpus: Union[CorpusStore, Iterable[KnowledgeEntry]],
        matcher: Optional[KeywordMatcher] = None,
        ranker: Optional[Ranker] = None,
        synthesizer: Optional[AnswerSynthesizer] = None,
        max_results: Optional[int] = None
    ):
        self.corpus = corpus if isinstance(corpus, CorpusStore) else CorpusStore(corpus)
        self.logger = logging.getLogger(__name__)

        config = get_engine_config()
        self.question_processor = QuestionProcessor()
        self.matcher = matcher or KeywordMatcher(
            self.corpus.entries,
            scoring_policy=ScoringPolicy(config['phrase_bonus_per_word']),
            allow_partial_matches=config['allow_partial_matches']
        )
        self.ranker = ranker or Ranker(
            max_results if max_results is not None else config['max_supporting_entries']
        )
        self.synthesizer = synthesizer or AnswerSynthesizer()

    def answer(self, question: Any) -> AgentResponse:
        """
        Answer a question.

        Args:
            question: Raw question text; absent or empty input yields the
                fallback answer

        Returns:
            AgentResponse with answer, ranked supporting entries and disclaimer
        """
        normalized = self.question_processor.process_question(question)
        candidates = self.matcher.match(normalized)
        selected = self.ranker.select(candidates)
        answer = self.synthesizer.synthesize(selected)
        disclaimer = select_disclaimer(bool(selected))

        self.logger.info(
            f"Answered question: tokens={len(normalized.tokens)}, "
            f"candidates={len(candidates)}, selected={len(selected)}",
            extra={'match_count': len(candidates)}
        )

        return assemble_response(answer, selected, disclaimer)


def generate_agent_response(
    question: Any,
    corpus: Union[CorpusStore, Iterable[KnowledgeEntry]],
    max_results: Optional[int] = None
) -> AgentResponse:
    """Answer one question against a corpus without keeping an agent around."""
    return LegalResearchAgent(corpus, max_results=max_results).answer(question)
