"""
Configuration module for the Content Intelligence Engine.

Provides Pydantic-based settings management with YAML file support
and environment variable overrides.
"""

from content_intel.config.settings import (
    Settings,
    ClassifierSettings,
    SummarizerSettings,
    StorageSettings,
    CaptureSettings,
    LoggingSettings,
)
from content_intel.config.loader import load_config, get_settings, reset_settings

__all__ = [
    "Settings",
    "ClassifierSettings",
    "SummarizerSettings",
    "StorageSettings",
    "CaptureSettings",
    "LoggingSettings",
    "load_config",
    "get_settings",
    "reset_settings",
]
