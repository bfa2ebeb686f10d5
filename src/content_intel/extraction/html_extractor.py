"""
Reference HTML extractor.

Produces the same PageContent shape as the in-page extractor of a
browser (h1 headings, h2 sub-headings, paragraphs, list items) from
static HTML, so the engine can be driven from saved pages.
"""

import re
from datetime import datetime

from bs4 import BeautifulSoup, Tag

from content_intel.extraction.page_content import (
    MAX_LIST_ITEMS,
    MAX_PARAGRAPHS,
    PageContent,
    parse_timestamp,
)
from content_intel.utils.logging import get_logger

logger = get_logger(__name__)

_WHITESPACE = re.compile(r"\s+")


class HtmlExtractor:
    """
    Extracts PageContent from an HTML document.

    Example:
        >>> extractor = HtmlExtractor()
        >>> page = extractor.extract(html, url="https://a.test/react")
        >>> page.headings
        ('React Basics',)
    """

    # Tags whose text never reaches the reader
    REMOVE_TAGS = {"script", "style", "noscript", "template"}

    def __init__(
        self,
        max_paragraphs: int = MAX_PARAGRAPHS,
        max_list_items: int = MAX_LIST_ITEMS,
        parser: str = "html.parser",
    ) -> None:
        """
        Initialize extractor.

        Args:
            max_paragraphs: Paragraphs kept, in document order
            max_list_items: List items kept, in document order
            parser: BeautifulSoup tree builder
        """
        self.max_paragraphs = max_paragraphs
        self.max_list_items = max_list_items
        self.parser = parser

    def extract(
        self,
        html: str | bytes,
        url: str,
        timestamp: datetime | str | float | None = None,
    ) -> PageContent:
        """
        Extract page content from HTML.

        Args:
            html: HTML document, or raw bytes whose encoding is detected
            url: URL the document was loaded from
            timestamp: Capture instant (defaults to now)

        Returns:
            PageContent for the document

        Raises:
            ValidationError: If url is empty
        """
        soup = BeautifulSoup(html, self.parser)

        for tag_name in self.REMOVE_TAGS:
            for tag in soup.find_all(tag_name):
                tag.decompose()

        page = PageContent(
            url=url,
            title=self._extract_title(soup),
            headings=self._texts(soup, "h1"),
            sub_headings=self._texts(soup, "h2"),
            paragraphs=self._texts(soup, "p")[: self.max_paragraphs],
            lists=self._texts(soup, "li")[: self.max_list_items],
            timestamp=parse_timestamp(timestamp),
        )

        logger.debug(
            f"Extracted {len(page.paragraphs)} paragraphs, "
            f"{len(page.lists)} list items from {url}"
        )
        return page

    def _extract_title(self, soup: BeautifulSoup) -> str:
        title_tag = soup.find("title")
        if isinstance(title_tag, Tag):
            return self._clean(title_tag.get_text())
        return ""

    def _texts(self, soup: BeautifulSoup, tag_name: str) -> tuple[str, ...]:
        """Non-empty text of every ``tag_name`` element, in document order."""
        texts = (self._clean(element.get_text()) for element in soup.find_all(tag_name))
        return tuple(text for text in texts if text)

    @staticmethod
    def _clean(text: str) -> str:
        return _WHITESPACE.sub(" ", text).strip()
