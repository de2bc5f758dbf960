"""
Knowledge entry model shared read-only by every query
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class KnowledgeEntry:
    """One unit of legal research content: a definition, writ, doctrine or statute."""
    id: str
    title: str
    summary: str
    citations: Tuple[str, ...]
    era: str
    jurisdiction: str
    category: str
    # Normalized search vocabulary in declaration order
    keywords: Tuple[str, ...]
    # Token form of each keyword, parallel to keywords
    keyword_tokens: Tuple[Tuple[str, ...], ...] = field(default=(), repr=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "summary": self.summary,
            "citations": list(self.citations),
            "era": self.era,
            "jurisdiction": self.jurisdiction,
            "category": self.category,
        }
