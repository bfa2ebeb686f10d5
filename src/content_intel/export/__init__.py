"""
Export module for the Content Intelligence Engine.

Renders the knowledge store as a Markdown or HTML book.
"""

from content_intel.export.book import (
    BOOK_FORMATS,
    KnowledgeBookExporter,
)

__all__ = [
    "BOOK_FORMATS",
    "KnowledgeBookExporter",
]
