"""
Summarization module for the Content Intelligence Engine.

Provides sentence segmentation, trigger patterns and the rule-based
extractive summarizer.
"""

from content_intel.summarization.text import (
    STOP_WORDS,
    split_sentences,
    clean_sentence,
    tokenize,
    content_words,
    dedup_key,
)
from content_intel.summarization.patterns import (
    DEFINITION_PATTERNS,
    EXAMPLE_PATTERNS,
)
from content_intel.summarization.summarizer import (
    Summary,
    ScoredSentence,
    Summarizer,
)

__all__ = [
    # Text
    "STOP_WORDS",
    "split_sentences",
    "clean_sentence",
    "tokenize",
    "content_words",
    "dedup_key",
    # Patterns
    "DEFINITION_PATTERNS",
    "EXAMPLE_PATTERNS",
    # Summarizer
    "Summary",
    "ScoredSentence",
    "Summarizer",
]
