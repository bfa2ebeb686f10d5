"""
Classification module for the Content Intelligence Engine.

Provides keyword tables, the whole-word matcher and the rule-based
subject/topic/chapter classifier.
"""

from content_intel.classification.matcher import (
    KeywordMatcher,
    PhraseMatcher,
    compile_keyword,
)
from content_intel.classification.keywords import (
    KeywordCategory,
    KeywordTable,
    KeywordTables,
    default_keyword_tables,
    load_keyword_tables,
    SUBJECT_FALLBACK,
    TOPIC_FALLBACK,
    CHAPTER_FALLBACK,
)
from content_intel.classification.classifier import Classification, Classifier

__all__ = [
    # Matching
    "KeywordMatcher",
    "PhraseMatcher",
    "compile_keyword",
    # Tables
    "KeywordCategory",
    "KeywordTable",
    "KeywordTables",
    "default_keyword_tables",
    "load_keyword_tables",
    "SUBJECT_FALLBACK",
    "TOPIC_FALLBACK",
    "CHAPTER_FALLBACK",
    # Classifier
    "Classification",
    "Classifier",
]
