"""
CLI module for the Content Intelligence Engine.

Provides command-line interface using Typer:
- extract / classify / summarize: Inspect a saved page
- capture: Save classified pages to the knowledge store
- list / show / search / stats: Browse stored knowledge
- delete / clear: Prune stored knowledge
- mode: Switch knowledge capture on and off
- config: Show or create configuration
"""

from content_intel.cli.main import app

__all__ = ["app"]
