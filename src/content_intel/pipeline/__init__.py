"""
Pipeline module for the Content Intelligence Engine.

Provides the capture switch and the controller that runs
classification, deduplication and persistence as explicit calls.
"""

from content_intel.pipeline.capture_state import CaptureToggle
from content_intel.pipeline.controller import (
    CaptureStatus,
    CaptureResult,
    KnowledgePipeline,
)

__all__ = [
    "CaptureToggle",
    "CaptureStatus",
    "CaptureResult",
    "KnowledgePipeline",
]
