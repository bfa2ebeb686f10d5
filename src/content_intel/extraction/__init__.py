"""
Extraction module for the Content Intelligence Engine.

Provides the PageContent record consumed by the engine and a
reference extractor that builds it from static HTML.
"""

from content_intel.extraction.page_content import (
    PageContent,
    MAX_PARAGRAPHS,
    MAX_LIST_ITEMS,
    parse_timestamp,
)
from content_intel.extraction.html_extractor import HtmlExtractor

__all__ = [
    "PageContent",
    "MAX_PARAGRAPHS",
    "MAX_LIST_ITEMS",
    "parse_timestamp",
    "HtmlExtractor",
]
