"""
Rule-based extractive summarizer.

Picks key sentences by a weighted heuristic score and scans for
definition and example sentences with trigger patterns. Fully offline
and deterministic: the same PageContent always yields the same Summary.
"""

from collections import Counter
from dataclasses import dataclass

from content_intel.config.settings import SummarizerSettings
from content_intel.extraction.page_content import PageContent
from content_intel.summarization.patterns import (
    DEFINITION_PATTERNS,
    DISCOURSE_MARKER,
    EXAMPLE_PATTERNS,
    IMPORTANCE_MARKER,
    matches_any,
)
from content_intel.summarization.text import (
    clean_sentence,
    content_words,
    dedup_key,
    split_sentences,
    tokenize,
)
from content_intel.utils.logging import get_logger

logger = get_logger(__name__)

# Scoring weights
FREQUENCY_CAP = 5
HEADING_WORD_BONUS = 3
POSITION_BONUS_BLOCKS = 3
POSITION_BONUS_BASE = 5
IMPORTANCE_BONUS = 2
DISCOURSE_BONUS = 1


@dataclass(frozen=True)
class Summary:
    """
    Extractive digest of a page. Never persisted.

    Attributes:
        summary_points: Up to 5 key sentences, best first
        definitions: Up to 3 definition sentences, in document order
        examples: Up to 2 example sentences, in document order
    """

    summary_points: tuple[str, ...] = ()
    definitions: tuple[str, ...] = ()
    examples: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.summary_points or self.definitions or self.examples)

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "summary_points": list(self.summary_points),
            "definitions": list(self.definitions),
            "examples": list(self.examples),
        }


@dataclass(frozen=True)
class ScoredSentence:
    """A candidate sentence with its score and origin."""

    text: str
    block_index: int
    position: int
    score: int


class Summarizer:
    """
    Produces a Summary from PageContent.

    Paragraphs followed by list items form the text blocks; headings and
    sub-headings are only used as a relevance signal.

    Sentence score:
    - min(frequency, 5) for each word seen more than once across candidates
    - +3 for each word that also appears in a heading
    - +(5 - block index) for sentences from the first three blocks
    - +2 for length in [60, 200], +1 for length in (200, 300]
    - +2 for an importance marker, +1 for a discourse marker

    Example:
        >>> summarizer = Summarizer()
        >>> summary = summarizer.summarize(page)
        >>> for point in summary.summary_points:
        ...     print(point)
    """

    def __init__(
        self,
        max_summary_points: int = 5,
        max_definitions: int = 3,
        max_examples: int = 2,
        min_sentence_length: int = 30,
        max_sentence_length: int = 300,
        dedup_prefix_length: int = 50,
    ) -> None:
        self.max_summary_points = max_summary_points
        self.max_definitions = max_definitions
        self.max_examples = max_examples
        self.min_sentence_length = min_sentence_length
        self.max_sentence_length = max_sentence_length
        self.dedup_prefix_length = dedup_prefix_length

    @classmethod
    def from_settings(cls, settings: SummarizerSettings) -> "Summarizer":
        """Create a summarizer from settings."""
        return cls(
            max_summary_points=settings.max_summary_points,
            max_definitions=settings.max_definitions,
            max_examples=settings.max_examples,
            min_sentence_length=settings.min_sentence_length,
            max_sentence_length=settings.max_sentence_length,
            dedup_prefix_length=settings.dedup_prefix_length,
        )

    def summarize(self, page: PageContent | None) -> Summary:
        """
        Summarize a page.

        Args:
            page: Extracted page content (None yields an empty summary)

        Returns:
            Summary; empty when the page has no usable sentences
        """
        if page is None:
            return Summary()

        blocks = [*page.paragraphs, *page.lists]
        headings = [*page.headings, *page.sub_headings]

        summary = Summary(
            summary_points=self.select_summary_points(blocks, headings),
            definitions=self.extract_definitions(blocks),
            examples=self.extract_examples(blocks),
        )

        logger.debug(
            f"Summarized {page.url}: {len(summary.summary_points)} points, "
            f"{len(summary.definitions)} definitions, {len(summary.examples)} examples"
        )
        return summary

    def select_summary_points(
        self,
        blocks: list[str],
        headings: list[str],
    ) -> tuple[str, ...]:
        """Top-scoring sentences, unique by prefix, best first."""
        selected: list[str] = []
        seen: set[str] = set()

        for candidate in self.rank_sentences(blocks, headings):
            if len(selected) >= self.max_summary_points:
                break
            key = dedup_key(candidate.text, self.dedup_prefix_length)
            if key in seen:
                continue
            seen.add(key)
            selected.append(candidate.text)

        return tuple(selected)

    def rank_sentences(
        self,
        blocks: list[str],
        headings: list[str],
    ) -> list[ScoredSentence]:
        """
        Score every candidate sentence and sort best first.

        Ties keep document order.
        """
        candidates = [
            (text, block_index)
            for block_index, text in self._sentences(blocks)
            if len(text) >= self.min_sentence_length
        ]
        if not candidates:
            return []

        frequencies = Counter(
            word for text, _ in candidates for word in content_words(text))
        heading_words = {word for heading in headings for word in content_words(heading)}

        scored = [
            ScoredSentence(
                text=text,
                block_index=block_index,
                position=position,
                score=self.score_sentence(
                    text, frequencies, heading_words, block_index),
            )
            for position, (text, block_index) in enumerate(candidates)
        ]
        return sorted(scored, key=lambda s: -s.score)

    def score_sentence(
        self,
        sentence: str,
        frequencies: Counter,
        heading_words: set[str],
        block_index: int,
    ) -> int:
        score = 0

        for word in tokenize(sentence):
            frequency = frequencies.get(word, 0)
            if frequency > 1:
                score += min(frequency, FREQUENCY_CAP)
            if word in heading_words:
                score += HEADING_WORD_BONUS

        if block_index < POSITION_BONUS_BLOCKS:
            score += POSITION_BONUS_BASE - block_index

        length = len(sentence)
        if 60 <= length <= 200:
            score += 2
        elif 200 < length <= 300:
            score += 1

        if IMPORTANCE_MARKER.search(sentence):
            score += IMPORTANCE_BONUS
        if DISCOURSE_MARKER.search(sentence):
            score += DISCOURSE_BONUS

        return score

    def extract_definitions(self, blocks: list[str]) -> tuple[str, ...]:
        """First unique sentences that read like definitions."""
        return self._scan(blocks, DEFINITION_PATTERNS, self.max_definitions)

    def extract_examples(self, blocks: list[str]) -> tuple[str, ...]:
        """First unique sentences that introduce examples."""
        return self._scan(blocks, EXAMPLE_PATTERNS, self.max_examples)

    def _scan(self, blocks: list[str], patterns, limit: int) -> tuple[str, ...]:
        found: list[str] = []
        seen: set[str] = set()
        if limit <= 0:
            return ()

        for _, text in self._sentences(blocks):
            if not self.min_sentence_length <= len(text) <= self.max_sentence_length:
                continue
            if not matches_any(patterns, text):
                continue
            key = dedup_key(text, self.dedup_prefix_length)
            if key in seen:
                continue
            seen.add(key)
            found.append(text)
            if len(found) >= limit:
                break

        return tuple(found)

    @staticmethod
    def _sentences(blocks: list[str]):
        """Yield (block_index, cleaned sentence) in document order."""
        for block_index, block in enumerate(blocks):
            for sentence in split_sentences(block):
                cleaned = clean_sentence(sentence)
                if cleaned:
                    yield block_index, cleaned
