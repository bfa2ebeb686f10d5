"""
Content Intelligence Engine - offline page classification, summarization
and knowledge storage.

This package classifies extracted page text into a subject/topic/chapter
taxonomy, produces extractive summaries, and keeps classified pages in a
deduplicated SQLite knowledge store.
"""

from content_intel.config import Settings, load_config
from content_intel.utils.logging import setup_logging, get_logger
from content_intel.core.exceptions import ContentIntelError
from content_intel.extraction import PageContent, HtmlExtractor
from content_intel.classification import Classification, Classifier
from content_intel.summarization import Summary, Summarizer

__version__ = "0.1.0"
__author__ = "Content Intel Team"

__all__ = [
    "Settings",
    "load_config",
    "setup_logging",
    "get_logger",
    "ContentIntelError",
    "PageContent",
    "HtmlExtractor",
    "Classification",
    "Classifier",
    "Summary",
    "Summarizer",
]
