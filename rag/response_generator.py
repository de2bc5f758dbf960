"""
Answer synthesis for the research engine.

Composes research guidance from the ranked supporting entries, or the fixed
fallback answer when nothing in the corpus matched, and picks the disclaimer.
"""

import logging
from typing import Sequence

from rag.keyword_matcher import MatchResult

FALLBACK_ANSWER = (
    "I could not find a matching authority in the research corpus for that question. "
    "Try rephrasing it, or broaden it to the name of a doctrine, writ, maxim or defined term "
    "(for example \"scire facias\" or \"consideration\")."
)

DISCLAIMER_WITH_RESULTS = (
    "Research assistant only. These entries are historical research leads, not legal advice: "
    "confirm the current status of every authority and consult licensed counsel before acting."
)

DISCLAIMER_NO_RESULTS = (
    "Research assistant only. No authority was matched, and nothing here is legal advice: "
    "consult primary sources and licensed counsel for questions about your situation."
)


def select_disclaimer(has_results: bool) -> str:
    return DISCLAIMER_WITH_RESULTS if has_results else DISCLAIMER_NO_RESULTS


class AnswerSynthesizer:
    """Builds the natural-language answer for a ranked selection."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def synthesize(self, selected: Sequence[MatchResult]) -> str:
        """
        Compose the answer text.

        Args:
            selected: Ranked supporting entries, best first

        Returns:
            Research guidance referencing each entry's title and summary in
            ranked order, or FALLBACK_ANSWER when the selection is empty
        """
        if not selected:
            return self._generate_fallback_response()

        count = len(selected)
        noun = "authority" if count == 1 else "authorities"
        parts = [f"I found {count} {noun} in the research corpus that may bear on your question:"]

        for rank, result in enumerate(selected, 1):
            parts.append(self._format_entry(rank, result))

        parts.append(
            "Treat these as starting points for research rather than conclusions, "
            "and check how each authority has been applied or superseded in your jurisdiction."
        )
        return "\n\n".join(parts)

    def _format_entry(self, rank: int, result: MatchResult) -> str:
        entry = result.entry
        section = (
            f"{rank}. {entry.title} ({entry.category}; {entry.jurisdiction}; {entry.era}). "
            f"{entry.summary}"
        )
        if entry.citations:
            section += f" Leading authority: {entry.citations[0]}."
        return section

    def _generate_fallback_response(self) -> str:
        self.logger.debug("No supporting entries selected; using fallback answer")
        return FALLBACK_ANSWER
