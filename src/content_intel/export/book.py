"""
Knowledge book export.

Renders every stored entry as a book organized Subject -> Topic ->
Chapter, with a table of contents, as Markdown or HTML. Templates live
in ``templates/`` next to this module and are rendered with Jinja2.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from content_intel.core.exceptions import ExportError
from content_intel.storage.models import KnowledgeEntry, KnowledgeHierarchy
from content_intel.utils.logging import get_logger

logger = get_logger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

BOOK_FORMATS = {
    "markdown": "book.md.j2",
    "html": "book.html.j2",
}

# Output suffix -> format
_SUFFIX_FORMATS = {
    ".md": "markdown",
    ".markdown": "markdown",
    ".html": "html",
    ".htm": "html",
}


class KnowledgeBookExporter:
    """
    Renders knowledge entries as a book.

    Each note shows the entry title, url, its first key points, short
    excerpts of its first paragraphs and the capture date.

    Example:
        >>> exporter = KnowledgeBookExporter()
        >>> exporter.export(await store.get_hierarchy(), Path("book.html"))
    """

    def __init__(
        self,
        title: str = "My Knowledge Book",
        max_key_points: int = 5,
        max_excerpts: int = 2,
        excerpt_length: int = 200,
        template_dir: Path = TEMPLATE_DIR,
    ) -> None:
        """
        Initialize exporter.

        Args:
            title: Book title
            max_key_points: Key points shown per note
            max_excerpts: Paragraph excerpts shown per note
            excerpt_length: Characters kept per excerpt before "..."
            template_dir: Directory holding the book templates
        """
        self.title = title
        self.max_key_points = max_key_points
        self.max_excerpts = max_excerpts
        self.excerpt_length = excerpt_length

        self.env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html", "html.j2"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    @staticmethod
    def format_for(path: Path) -> str:
        """
        Book format implied by an output file suffix.

        Raises:
            ExportError: If the suffix is not a known book format
        """
        fmt = _SUFFIX_FORMATS.get(path.suffix.lower())
        if fmt is None:
            raise ExportError(
                f"Cannot infer book format from '{path.suffix}'; use .md or .html",
                path=str(path),
            )
        return fmt

    def render(
        self,
        hierarchy: KnowledgeHierarchy,
        fmt: str = "markdown",
        generated_at: datetime | None = None,
    ) -> str:
        """
        Render the book.

        Args:
            hierarchy: Entries grouped subject -> topic -> chapter
            fmt: "markdown" or "html"
            generated_at: Date printed on the title page (defaults to now)

        Returns:
            The rendered document

        Raises:
            ExportError: If there are no entries or the format is unknown
        """
        if fmt not in BOOK_FORMATS:
            raise ExportError(
                f"Unknown book format: {fmt}",
                details={"allowed": sorted(BOOK_FORMATS)},
            )

        book = {
            subject: {
                topic: {
                    chapter: [self._note(entry) for entry in entries]
                    for chapter, entries in chapters.items()
                }
                for topic, chapters in topics.items()
            }
            for subject, topics in hierarchy.items()
        }
        total_entries = sum(
            len(notes)
            for topics in book.values()
            for chapters in topics.values()
            for notes in chapters.values()
        )
        if total_entries == 0:
            raise ExportError("No knowledge entries to export")

        template = self.env.get_template(BOOK_FORMATS[fmt])
        return template.render(
            title=self.title,
            generated_on=(generated_at or datetime.now(timezone.utc)).strftime("%B %d, %Y"),
            total_entries=total_entries,
            book=book,
        )

    def export(
        self,
        hierarchy: KnowledgeHierarchy,
        output_path: Path,
        fmt: str | None = None,
    ) -> Path:
        """
        Render the book and write it to a file.

        Args:
            hierarchy: Entries grouped subject -> topic -> chapter
            output_path: Destination file
            fmt: Book format; inferred from the file suffix when None

        Returns:
            Path of the written file

        Raises:
            ExportError: If rendering fails or the file cannot be written
        """
        output_path = Path(output_path)
        fmt = fmt or self.format_for(output_path)
        content = self.render(hierarchy, fmt=fmt)

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise ExportError(
                f"Failed to write book: {e}", path=str(output_path)) from e

        logger.info(f"Exported knowledge book to {output_path} ({fmt})")
        return output_path

    def _note(self, entry: KnowledgeEntry) -> dict[str, Any]:
        return {
            "title": entry.title or "Untitled",
            "url": entry.url,
            "key_points": list(entry.key_points[: self.max_key_points]),
            "excerpts": [
                self._excerpt(paragraph)
                for paragraph in entry.paragraphs[: self.max_excerpts]
            ],
            "saved_on": entry.timestamp.date().isoformat(),
        }

    def _excerpt(self, paragraph: str) -> str:
        if len(paragraph) > self.excerpt_length:
            return paragraph[: self.excerpt_length] + "..."
        return paragraph
