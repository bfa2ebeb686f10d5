"""
Pipeline controller.

Wires the classifier, summarizer and knowledge store together:

    capture:    payload -> PageContent -> classify -> dedup check -> save
    summarize:  payload -> PageContent -> summarize

Capture runs only while the capture toggle is on. Invalid payloads are
logged and reported, never raised.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from content_intel.classification import Classification, Classifier
from content_intel.config import Settings
from content_intel.core.exceptions import DuplicateError, StorageError, ValidationError
from content_intel.extraction import PageContent
from content_intel.pipeline.capture_state import CaptureToggle
from content_intel.storage import KnowledgeEntry, KnowledgeStore
from content_intel.summarization import Summarizer, Summary
from content_intel.utils.logging import get_logger

logger = get_logger(__name__)

Payload = PageContent | Mapping[str, Any] | None


class CaptureStatus(str, Enum):
    """Outcome of a capture attempt."""

    SAVED = "saved"
    DUPLICATE = "duplicate"
    DISABLED = "disabled"
    SKIPPED = "skipped"
    INVALID = "invalid"


@dataclass(frozen=True)
class CaptureResult:
    """Result of KnowledgePipeline.capture()."""

    status: CaptureStatus
    url: str | None = None
    entry: KnowledgeEntry | None = None
    classification: Classification | None = None
    reason: str = ""

    @property
    def saved(self) -> bool:
        return self.status is CaptureStatus.SAVED

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "status": self.status.value,
            "url": self.url,
            "entry": self.entry.to_dict() if self.entry else None,
            "classification": self.classification.to_dict() if self.classification else None,
            "reason": self.reason,
        }


class KnowledgePipeline:
    """
    Explicit capture and summarize entry points.

    Example:
        >>> pipeline = KnowledgePipeline.from_settings(settings)
        >>> result = await pipeline.capture(payload)
        >>> result.status
        <CaptureStatus.SAVED: 'saved'>
        >>> summary = pipeline.summarize(payload)
    """

    def __init__(
        self,
        store: KnowledgeStore,
        classifier: Classifier | None = None,
        summarizer: Summarizer | None = None,
        toggle: CaptureToggle | None = None,
        skip_urls: list[str] | None = None,
        retained_paragraphs: int = 50,
    ) -> None:
        """
        Initialize pipeline.

        Args:
            store: Knowledge store receiving captured entries
            classifier: Classifier (default tables if None)
            summarizer: Summarizer (default limits if None)
            toggle: Capture switch; None means capture is always on
            skip_urls: URLs never captured
            retained_paragraphs: Paragraphs kept on saved entries
        """
        self.store = store
        self.classifier = classifier or Classifier()
        self.summarizer = summarizer or Summarizer()
        self.toggle = toggle
        self.skip_urls = frozenset(skip_urls or ())
        self.retained_paragraphs = retained_paragraphs

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        store: KnowledgeStore | None = None,
    ) -> "KnowledgePipeline":
        """Build every component from settings."""
        return cls(
            store=store or KnowledgeStore.from_settings(settings),
            classifier=Classifier.from_settings(settings.classifier),
            summarizer=Summarizer.from_settings(settings.summarizer),
            toggle=CaptureToggle.from_settings(settings.capture),
            skip_urls=settings.capture.skip_urls,
            retained_paragraphs=settings.storage.retained_paragraphs,
        )

    @property
    def capture_enabled(self) -> bool:
        return self.toggle is None or self.toggle.is_enabled()

    async def capture(self, payload: Payload) -> CaptureResult:
        """
        Classify a page and save it if its URL is new.

        Args:
            payload: PageContent or a PageContent-shaped mapping

        Returns:
            CaptureResult describing what happened

        Raises:
            StorageError: If the store fails for a reason other than a duplicate
        """
        if not self.capture_enabled:
            return CaptureResult(status=CaptureStatus.DISABLED, reason="capture is off")

        try:
            page = self._to_page(payload)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid page payload: {e}")
            return CaptureResult(status=CaptureStatus.INVALID, reason=e.message)

        if page.url in self.skip_urls:
            logger.debug(f"Skipping {page.url}")
            return CaptureResult(
                status=CaptureStatus.SKIPPED, url=page.url, reason="url is skipped")

        classification = self.classifier.classify(page)
        if classification is None:
            return CaptureResult(
                status=CaptureStatus.INVALID, url=page.url, reason="page has no url")

        if await self.store.exists(page.url):
            logger.debug(f"Already stored: {page.url}")
            return CaptureResult(
                status=CaptureStatus.DUPLICATE,
                url=page.url,
                entry=await self.store.get_by_url(page.url),
                classification=classification,
                reason="url already stored",
            )

        candidate = KnowledgeEntry.from_classification(
            page, classification, retained_paragraphs=self.retained_paragraphs)

        try:
            entry = await self.store.save(candidate)
        except DuplicateError:
            # Another capture of the same url committed first
            logger.debug(f"Lost save race for {page.url}")
            return CaptureResult(
                status=CaptureStatus.DUPLICATE,
                url=page.url,
                classification=classification,
                reason="url already stored",
            )
        except StorageError as e:
            logger.error(f"Failed to save {page.url}: {e}")
            raise

        logger.info(
            f"Saved {page.url} as {entry.subject} / {entry.topic} / {entry.chapter}")
        return CaptureResult(
            status=CaptureStatus.SAVED,
            url=page.url,
            entry=entry,
            classification=classification,
        )

    def classify(self, payload: Payload) -> Classification | None:
        """Classify without saving. None for invalid payloads."""
        try:
            page = self._to_page(payload)
        except ValidationError as e:
            logger.warning(f"Cannot classify invalid payload: {e}")
            return None
        return self.classifier.classify(page)

    def summarize(self, payload: Payload) -> Summary:
        """Summarize on demand. Not gated by the capture switch."""
        try:
            page = self._to_page(payload)
        except ValidationError as e:
            logger.warning(f"Cannot summarize invalid payload: {e}")
            return Summary()
        return self.summarizer.summarize(page)

    def close(self) -> None:
        self.store.close()

    @staticmethod
    def _to_page(payload: Payload) -> PageContent:
        if isinstance(payload, PageContent):
            return payload
        return PageContent.from_payload(payload)
