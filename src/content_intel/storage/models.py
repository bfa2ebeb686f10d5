"""
Data models for the knowledge store.

Defines the persisted KnowledgeEntry record, the aggregate statistics
and the subject/topic/chapter grouping returned by the store, with row
conversion helpers.
"""

import json
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Iterable

from content_intel.classification.classifier import Classification
from content_intel.classification.keywords import (
    CHAPTER_FALLBACK,
    SUBJECT_FALLBACK,
    TOPIC_FALLBACK,
)
from content_intel.core.exceptions import ValidationError
from content_intel.extraction.page_content import PageContent

MAX_KEY_POINTS = 10


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class KnowledgeEntry:
    """
    A classified page persisted in the knowledge store.

    An entry without ``id`` is an unsaved candidate; the store assigns
    ``id`` and ``saved_at`` when it persists it. Entries are never
    updated in place.
    """

    url: str
    subject: str = SUBJECT_FALLBACK
    topic: str = TOPIC_FALLBACK
    chapter: str = CHAPTER_FALLBACK
    title: str = ""
    key_points: tuple[str, ...] = ()
    paragraphs: tuple[str, ...] = ()
    timestamp: datetime = field(default_factory=_utcnow)
    id: int | None = None
    saved_at: datetime | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.url, str) or not self.url.strip():
            raise ValidationError("Knowledge entry requires a url", field="url")

        # Category fields are never empty
        object.__setattr__(self, "subject", self.subject or SUBJECT_FALLBACK)
        object.__setattr__(self, "topic", self.topic or TOPIC_FALLBACK)
        object.__setattr__(self, "chapter", self.chapter or CHAPTER_FALLBACK)
        object.__setattr__(
            self, "key_points", tuple(self.key_points)[:MAX_KEY_POINTS])
        object.__setattr__(self, "paragraphs", tuple(self.paragraphs))

    @classmethod
    def from_classification(
        cls,
        page: PageContent,
        classification: Classification,
        retained_paragraphs: int = 50,
    ) -> "KnowledgeEntry":
        """
        Build an unsaved entry from a page and its classification.

        Args:
            page: Extracted page content
            classification: Classifier output for the page
            retained_paragraphs: Paragraphs kept for display
        """
        return cls(
            url=page.url,
            subject=classification.subject,
            topic=classification.topic,
            chapter=classification.chapter,
            title=page.title,
            key_points=classification.key_points,
            paragraphs=page.paragraphs[:retained_paragraphs],
            timestamp=page.timestamp,
        )

    def saved(self, entry_id: int, saved_at: datetime) -> "KnowledgeEntry":
        """Copy of this candidate with store-assigned identity."""
        return replace(self, id=entry_id, saved_at=saved_at)

    def matches(self, text: str) -> bool:
        """Case-insensitive substring match over the searchable fields."""
        needle = text.lower()
        haystacks = [self.title, self.subject, self.topic, *self.key_points, *self.paragraphs]
        return any(needle in value.lower() for value in haystacks)

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "id": self.id,
            "url": self.url,
            "subject": self.subject,
            "topic": self.topic,
            "chapter": self.chapter,
            "title": self.title,
            "key_points": list(self.key_points),
            "paragraphs": list(self.paragraphs),
            "timestamp": self.timestamp.isoformat(),
            "saved_at": self.saved_at.isoformat() if self.saved_at else None,
        }

    def to_row(self) -> dict:
        """Column values for insertion (id and saved_at excluded)."""
        return {
            "url": self.url,
            "subject": self.subject,
            "topic": self.topic,
            "chapter": self.chapter,
            "title": self.title,
            "key_points": json.dumps(list(self.key_points), ensure_ascii=False),
            "paragraphs": json.dumps(list(self.paragraphs), ensure_ascii=False),
            "timestamp": _to_utc_text(self.timestamp),
        }

    @classmethod
    def from_row(cls, row: dict) -> "KnowledgeEntry":
        """Create from database row."""
        return cls(
            id=row.get("id"),
            url=row.get("url", ""),
            subject=row.get("subject") or SUBJECT_FALLBACK,
            topic=row.get("topic") or TOPIC_FALLBACK,
            chapter=row.get("chapter") or CHAPTER_FALLBACK,
            title=row.get("title") or "",
            key_points=tuple(_load_json_list(row.get("key_points"))),
            paragraphs=tuple(_load_json_list(row.get("paragraphs"))),
            timestamp=_parse_datetime(row.get("timestamp")) or _utcnow(),
            saved_at=_parse_datetime(row.get("saved_at")),
        )


@dataclass(frozen=True)
class KnowledgeStatistics:
    """Aggregate counts over the whole store."""

    total_entries: int = 0
    counts_per_subject: dict[str, int] = field(default_factory=dict)
    counts_per_topic: dict[str, int] = field(default_factory=dict)
    counts_per_chapter: dict[str, int] = field(default_factory=dict)

    @property
    def unique_subject_count(self) -> int:
        return len(self.counts_per_subject)

    @property
    def unique_topic_count(self) -> int:
        return len(self.counts_per_topic)

    @property
    def unique_chapter_count(self) -> int:
        return len(self.counts_per_chapter)

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "total_entries": self.total_entries,
            "counts_per_subject": dict(self.counts_per_subject),
            "counts_per_topic": dict(self.counts_per_topic),
            "counts_per_chapter": dict(self.counts_per_chapter),
            "unique_subject_count": self.unique_subject_count,
            "unique_topic_count": self.unique_topic_count,
            "unique_chapter_count": self.unique_chapter_count,
        }


# subject -> topic -> chapter -> entries
KnowledgeHierarchy = dict[str, dict[str, dict[str, list[KnowledgeEntry]]]]


def organize_entries(entries: Iterable[KnowledgeEntry]) -> KnowledgeHierarchy:
    """
    Group entries into the subject/topic/chapter hierarchy.

    Names are sorted alphabetically at every level; entries keep their
    input order within a chapter.
    """
    grouped: KnowledgeHierarchy = {}
    for entry in entries:
        chapters = grouped.setdefault(entry.subject, {}).setdefault(entry.topic, {})
        chapters.setdefault(entry.chapter, []).append(entry)

    return {
        subject: {
            topic: {chapter: grouped[subject][topic][chapter]
                    for chapter in sorted(grouped[subject][topic])}
            for topic in sorted(grouped[subject])
        }
        for subject in sorted(grouped)
    }


def _to_utc_text(value: datetime) -> str:
    """ISO text in UTC so stored timestamps sort chronologically."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def _load_json_list(value: Any) -> list[str]:
    if not value:
        return []
    try:
        loaded = json.loads(value)
    except (TypeError, ValueError):
        return []
    if not isinstance(loaded, list):
        return []
    return [str(item) for item in loaded]


def _parse_datetime(value: Any) -> datetime | None:
    """Parse datetime from database value."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return None
