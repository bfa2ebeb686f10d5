"""
PageContent record produced by page extractors.

The extractor runs inside a rendered page and hands back a loosely typed
mapping. PageContent is the validated, immutable form of that mapping;
validation happens once here so that the classifier and summarizer can
trust their input.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from content_intel.core.exceptions import ValidationError
from content_intel.utils.logging import get_logger

logger = get_logger(__name__)

MAX_PARAGRAPHS = 50
MAX_LIST_ITEMS = 100

# Payload key aliases (extractor camelCase -> field name)
_FIELD_ALIASES = {
    "subHeadings": "sub_headings",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class PageContent:
    """
    Structured text extracted from one rendered page at one instant.

    Attributes:
        url: Page URL (required, non-empty)
        title: Document title
        headings: Top-level section headings (h1), in document order
        sub_headings: Second-level headings (h2), in document order
        paragraphs: Paragraph texts, at most 50
        lists: List item texts, at most 100
        timestamp: Capture instant
    """

    url: str
    title: str = ""
    headings: tuple[str, ...] = ()
    sub_headings: tuple[str, ...] = ()
    paragraphs: tuple[str, ...] = ()
    lists: tuple[str, ...] = ()
    timestamp: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        if not isinstance(self.url, str) or not self.url.strip():
            raise ValidationError("PageContent requires a non-empty url", field="url")

        # Normalise sequences to capped tuples so instances stay hashable
        object.__setattr__(self, "headings", tuple(self.headings))
        object.__setattr__(self, "sub_headings", tuple(self.sub_headings))
        object.__setattr__(
            self, "paragraphs", tuple(self.paragraphs)[:MAX_PARAGRAPHS])
        object.__setattr__(self, "lists", tuple(self.lists)[:MAX_LIST_ITEMS])

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None) -> "PageContent":
        """
        Build a PageContent from an extractor payload.

        Accepts the extractor's camelCase keys as well as field names.
        Missing optional fields default to empty; non-string and blank
        items are dropped from sequences.

        Args:
            payload: Mapping produced by the extractor

        Returns:
            Validated PageContent

        Raises:
            ValidationError: If the payload is not a mapping or the url is
                missing or blank
        """
        if not isinstance(payload, Mapping):
            raise ValidationError("Extractor payload must be a mapping")

        data = {_FIELD_ALIASES.get(key, key): value for key, value in payload.items()}

        url = data.get("url")
        if not isinstance(url, str) or not url.strip():
            raise ValidationError("Extractor payload is missing a url", field="url")

        title = data.get("title")

        return cls(
            url=url.strip(),
            title=title.strip() if isinstance(title, str) else "",
            headings=_clean_texts(data.get("headings")),
            sub_headings=_clean_texts(data.get("sub_headings")),
            paragraphs=_clean_texts(data.get("paragraphs")),
            lists=_clean_texts(data.get("lists")),
            timestamp=parse_timestamp(data.get("timestamp")),
        )

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "url": self.url,
            "title": self.title,
            "headings": list(self.headings),
            "sub_headings": list(self.sub_headings),
            "paragraphs": list(self.paragraphs),
            "lists": list(self.lists),
            "timestamp": self.timestamp.isoformat(),
        }


def _clean_texts(value: Any) -> tuple[str, ...]:
    """Keep the non-blank string items of a sequence, stripped."""
    if value is None or isinstance(value, (str, bytes)):
        return ()
    if not isinstance(value, Iterable):
        return ()
    return tuple(
        item.strip() for item in value if isinstance(item, str) and item.strip()
    )


# Epoch values above this are read as milliseconds (JavaScript Date.now())
_EPOCH_MILLIS_THRESHOLD = 10**11


def parse_timestamp(value: Any) -> datetime:
    """
    Parse a capture timestamp.

    Accepts datetime objects, ISO-8601 strings (a trailing ``Z`` is read
    as UTC) and epoch numbers in seconds or milliseconds. Naive values
    are taken as UTC. None, and anything that cannot be interpreted,
    means "now"; the timestamp never invalidates a page.
    """
    if value is None or value == "":
        return _utcnow()

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        seconds = value / 1000 if abs(value) >= _EPOCH_MILLIS_THRESHOLD else value
        try:
            parsed = datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            logger.warning(f"Epoch timestamp out of range: {value!r}, using now")
            return _utcnow()
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            logger.warning(f"Invalid timestamp {value!r}, using now")
            return _utcnow()
    else:
        logger.warning(
            f"Unsupported timestamp type {type(value).__name__}, using now")
        return _utcnow()

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
