"""
Utilities module for the Content Intelligence Engine.

Provides logging setup and logger helpers.
"""

from content_intel.utils.logging import (
    setup_logging,
    get_logger,
    reset_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "reset_logging",
]
