"""
Corpus store for the research engine.

Loads the knowledge corpus once at process start, validates it and exposes it
as an immutable, read-only collection. Any integrity problem is fatal: the
process must not serve queries against a broken corpus.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from pydantic import ValidationError

from core.config import get_corpus_config
from core.error_handling import CorpusIntegrityError
from corpus.models import KnowledgeEntry
from corpus.schemas import KnowledgeEntryRecord
from rag.question_processor import normalize_text

logger = logging.getLogger(__name__)


def _build_entry(record: KnowledgeEntryRecord) -> KnowledgeEntry:
    """Normalize a validated record's keywords and freeze it into a KnowledgeEntry."""
    keywords: List[str] = []
    seen = set()
    for raw_keyword in record.keywords:
        keyword = normalize_text(raw_keyword)
        if keyword and keyword not in seen:
            keywords.append(keyword)
            seen.add(keyword)

    if not keywords:
        raise CorpusIntegrityError("Entry has an empty keyword set", entry_id=record.id)

    return KnowledgeEntry(
        id=record.id,
        title=record.title,
        summary=record.summary,
        citations=tuple(record.citations),
        era=record.era,
        jurisdiction=record.jurisdiction,
        category=record.category,
        keywords=tuple(keywords),
        keyword_tokens=tuple(tuple(k.split()) for k in keywords),
    )


def build_entries(
    records: Iterable[Dict[str, Any]],
    allowed_categories: Optional[Iterable[str]] = None
) -> Tuple[KnowledgeEntry, ...]:
    """
    Validate raw corpus records and build the immutable entry tuple.

    Args:
        records: Raw records, one dict per entry, in declaration order
        allowed_categories: Closed category set; None accepts any label

    Returns:
        Tuple of KnowledgeEntry in declaration order

    Raises:
        CorpusIntegrityError: On schema violations, duplicate ids, empty
            keyword sets or unknown categories
    """
    allowed = {c.lower() for c in allowed_categories} if allowed_categories is not None else None
    entries: List[KnowledgeEntry] = []
    seen_ids = set()

    for index, raw in enumerate(records):
        if not isinstance(raw, dict):
            raise CorpusIntegrityError(f"Record {index} is not an object")

        try:
            record = KnowledgeEntryRecord.model_validate(raw)
        except ValidationError as e:
            raise CorpusIntegrityError(
                f"Record {index} failed validation: {e}",
                entry_id=raw.get("id") if isinstance(raw.get("id"), str) else None
            ) from e

        if record.id in seen_ids:
            raise CorpusIntegrityError("Duplicate entry id", entry_id=record.id)
        seen_ids.add(record.id)

        if allowed is not None and record.category not in allowed:
            raise CorpusIntegrityError(
                f"Unknown category '{record.category}'", entry_id=record.id
            )

        entries.append(_build_entry(record))

    if not entries:
        raise CorpusIntegrityError("Corpus contains no entries")

    return tuple(entries)


def load_corpus(
    path: Optional[Union[str, Path]] = None,
    allowed_categories: Optional[Iterable[str]] = None
) -> Tuple[KnowledgeEntry, ...]:
    """
    Load and validate the corpus JSON file.

    Args:
        path: Corpus file; defaults to the configured CORPUS_PATH
        allowed_categories: Closed category set; defaults to the configured
            set when CORPUS_STRICT_CATEGORIES is enabled

    Returns:
        Tuple of KnowledgeEntry in declaration order
    """
    config = get_corpus_config()
    corpus_path = Path(path or config['corpus_path'])
    if allowed_categories is None and config['strict_categories']:
        allowed_categories = config['allowed_categories']

    try:
        with corpus_path.open(encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CorpusIntegrityError(f"Unable to read corpus file {corpus_path}: {e}") from e

    records = data.get("entries") if isinstance(data, dict) else data
    if not isinstance(records, list):
        raise CorpusIntegrityError(f"Corpus file {corpus_path} must contain a list of entries")

    entries = build_entries(records, allowed_categories)
    logger.info(f"Loaded {len(entries)} knowledge entries from {corpus_path}")
    return entries


class CorpusStore:
    """Immutable, read-only collection of knowledge entries."""

    def __init__(self, entries: Iterable[KnowledgeEntry]):
        self._entries: Tuple[KnowledgeEntry, ...] = tuple(entries)
        self._index: Dict[str, int] = {}
        for position, entry in enumerate(self._entries):
            if entry.id in self._index:
                raise CorpusIntegrityError("Duplicate entry id", entry_id=entry.id)
            if not entry.keywords:
                raise CorpusIntegrityError("Entry has an empty keyword set", entry_id=entry.id)
            if len(entry.keyword_tokens) != len(entry.keywords):
                raise CorpusIntegrityError(
                    "Entry keyword tokens are not parallel to its keywords; build it with build_entries",
                    entry_id=entry.id
                )
            if not entry.citations:
                raise CorpusIntegrityError("Entry has no citations", entry_id=entry.id)
            self._index[entry.id] = position

    @classmethod
    def from_file(
        cls,
        path: Optional[Union[str, Path]] = None,
        allowed_categories: Optional[Iterable[str]] = None
    ) -> "CorpusStore":
        return cls(load_corpus(path, allowed_categories))

    @classmethod
    def from_records(
        cls,
        records: Iterable[Dict[str, Any]],
        allowed_categories: Optional[Iterable[str]] = None
    ) -> "CorpusStore":
        return cls(build_entries(records, allowed_categories))

    @property
    def entries(self) -> Tuple[KnowledgeEntry, ...]:
        return self._entries

    def __iter__(self) -> Iterator[KnowledgeEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._index

    def get(self, entry_id: str) -> Optional[KnowledgeEntry]:
        position = self._index.get(entry_id)
        return self._entries[position] if position is not None else None

    def position(self, entry_id: str) -> Optional[int]:
        return self._index.get(entry_id)

    def ids(self) -> List[str]:
        return [entry.id for entry in self._entries]
