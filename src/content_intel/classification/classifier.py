"""
Rule-based subject/topic/chapter classifier.

Scores a lowercase corpus built from the page against three keyword
tables and picks the best category of each, falling back to a default
value when the best score is under the table's threshold.
"""

from dataclasses import dataclass

from content_intel.classification.keywords import (
    KeywordTable,
    KeywordTables,
    default_keyword_tables,
    load_keyword_tables,
)
from content_intel.classification.matcher import KeywordMatcher, PhraseMatcher
from content_intel.config.settings import ClassifierSettings
from content_intel.extraction.page_content import PageContent
from content_intel.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Classification:
    """
    The classifier's judgment for one page.

    Attributes:
        subject: Subject category or "General"
        topic: Topic category or "Miscellaneous"
        chapter: Chapter/level category or "General"
        key_points: Up to 10 headings and sub-headings
        subject_score: Winning subject score (0 on fallback with no matches)
        topic_score: Winning topic score
        chapter_score: Winning chapter score
    """

    subject: str
    topic: str
    chapter: str
    key_points: tuple[str, ...] = ()
    subject_score: int = 0
    topic_score: int = 0
    chapter_score: int = 0

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "subject": self.subject,
            "topic": self.topic,
            "chapter": self.chapter,
            "key_points": list(self.key_points),
            "scores": {
                "subject": self.subject_score,
                "topic": self.topic_score,
                "chapter": self.chapter_score,
            },
        }


class Classifier:
    """
    Classifies PageContent with weighted keyword scoring.

    A category's score is the total number of whole-word matches of its
    keywords in the corpus. The highest score wins; ties go to the
    category declared first in the table. Scores under the threshold
    yield the table's fallback value.

    The classifier holds no mutable state and may be shared between
    threads.

    Example:
        >>> classifier = Classifier()
        >>> result = classifier.classify(page)
        >>> result.subject, result.topic
        ('Web Development', 'React')
    """

    def __init__(
        self,
        tables: KeywordTables | None = None,
        matcher: KeywordMatcher | None = None,
        subject_min_score: int = 2,
        topic_min_score: int = 1,
        chapter_min_score: int = 1,
        max_paragraphs: int = 20,
        max_list_items: int = 30,
        max_key_points: int = 10,
    ) -> None:
        """
        Initialize classifier.

        Args:
            tables: Keyword tables (built-in tables if None)
            matcher: Keyword matcher (PhraseMatcher if None)
            subject_min_score: Threshold for a non-fallback subject
            topic_min_score: Threshold for a non-fallback topic
            chapter_min_score: Threshold for a non-fallback chapter
            max_paragraphs: Leading paragraphs included in the corpus
            max_list_items: Leading list items included in the corpus
            max_key_points: Cap on extracted key points
        """
        self.tables = tables or default_keyword_tables()
        self.matcher = matcher or PhraseMatcher()
        self.subject_min_score = subject_min_score
        self.topic_min_score = topic_min_score
        self.chapter_min_score = chapter_min_score
        self.max_paragraphs = max_paragraphs
        self.max_list_items = max_list_items
        self.max_key_points = min(max_key_points, 10)

    @classmethod
    def from_settings(cls, settings: ClassifierSettings) -> "Classifier":
        """Create a classifier from settings, loading custom tables if configured."""
        tables = None
        if settings.keywords_path is not None:
            tables = load_keyword_tables(settings.keywords_path)

        return cls(
            tables=tables,
            subject_min_score=settings.subject_min_score,
            topic_min_score=settings.topic_min_score,
            chapter_min_score=settings.chapter_min_score,
            max_paragraphs=settings.max_paragraphs,
            max_list_items=settings.max_list_items,
            max_key_points=settings.max_key_points,
        )

    def classify(self, page: PageContent) -> Classification | None:
        """
        Classify a page.

        Args:
            page: Extracted page content

        Returns:
            Classification, or None when the page has no url
        """
        if page is None or not page.url:
            return None

        corpus = self.build_corpus(page)

        subject, subject_score = self._best_category(
            corpus, self.tables.subject, self.subject_min_score)
        topic, topic_score = self._best_category(
            corpus, self.tables.topic, self.topic_min_score)
        chapter, chapter_score = self._best_category(
            corpus, self.tables.chapter, self.chapter_min_score)

        classification = Classification(
            subject=subject,
            topic=topic,
            chapter=chapter,
            key_points=self.extract_key_points(page),
            subject_score=subject_score,
            topic_score=topic_score,
            chapter_score=chapter_score,
        )

        logger.debug(
            f"Classified {page.url}: {subject}/{topic}/{chapter} "
            f"(scores {subject_score}/{topic_score}/{chapter_score})"
        )
        return classification

    def build_corpus(self, page: PageContent) -> str:
        """Lowercase text that keyword scores are computed over."""
        parts = [
            page.url,
            page.title,
            *page.headings,
            *page.sub_headings,
            *page.paragraphs[: self.max_paragraphs],
            *page.lists[: self.max_list_items],
        ]
        return " ".join(parts).lower()

    def score_table(self, corpus: str, table: KeywordTable) -> list[tuple[str, int]]:
        """Score every category of a table, in declaration order."""
        return [
            (
                category.name,
                sum(self.matcher.count(corpus, keyword) for keyword in category.keywords),
            )
            for category in table.categories
        ]

    def extract_key_points(self, page: PageContent) -> tuple[str, ...]:
        """First 3 headings then first 7 sub-headings, capped."""
        key_points = [*page.headings[:3], *page.sub_headings[:7]]
        return tuple(key_points[: self.max_key_points])

    def _best_category(
        self,
        corpus: str,
        table: KeywordTable,
        min_score: int,
    ) -> tuple[str, int]:
        best_name = table.fallback
        best_score = 0

        # Strict comparison keeps the earliest declared category on ties
        for name, score in self.score_table(corpus, table):
            if score > best_score:
                best_name = name
                best_score = score

        if best_score < min_score:
            return table.fallback, best_score
        return best_name, best_score
