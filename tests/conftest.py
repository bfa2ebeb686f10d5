"""
Shared pytest fixtures for Content Intelligence Engine tests.

Provides reusable fixtures for:
- Configuration and settings
- Database and knowledge store instances
- Sample pages and payloads
- Temporary resources
"""

import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator

import pytest

from content_intel.config import Settings, reset_settings
from content_intel.extraction import PageContent
from content_intel.storage import Database, KnowledgeEntry, KnowledgeStore
from content_intel.utils.logging import reset_logging


@pytest.fixture(autouse=True)
def reset_global_state():
    """
    Reset global settings and logging state around each test.

    This ensures tests are isolated and don't share global state.
    """
    reset_settings()
    reset_logging()
    yield
    reset_settings()
    reset_logging()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that's cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_settings(temp_dir: Path) -> Settings:
    """Provide settings with every file under a temporary directory."""
    return Settings(
        storage={"database_path": str(temp_dir / "knowledge.db")},
        capture={"state_path": str(temp_dir / "capture_state.json")},
    )


@pytest.fixture
def database(test_settings: Settings) -> Generator[Database, None, None]:
    """
    Provide an initialized test database.

    Creates a fresh database for each test and cleans up after.
    """
    db = Database.create(test_settings.storage)
    yield db
    db.close()


@pytest.fixture
def store(database: Database) -> KnowledgeStore:
    """Provide a knowledge store over the test database."""
    return KnowledgeStore(database)


@pytest.fixture
def react_page() -> PageContent:
    """A short page about React."""
    return PageContent(
        url="https://example.com/guide",
        headings=("React Basics",),
        paragraphs=(
            "React is a JavaScript library for building UIs.",
            "For example, component state changes trigger hooks like useState.",
        ),
        timestamp=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def react_payload() -> dict:
    """The React page as an extractor payload with camelCase keys."""
    return {
        "url": "https://example.com/guide",
        "title": "Learning React",
        "headings": ["React Basics"],
        "subHeadings": ["Components", "Hooks"],
        "paragraphs": [
            "React is a JavaScript library for building UIs.",
            "For example, component state changes trigger hooks like useState.",
        ],
        "lists": ["JSX syntax", "Virtual DOM"],
        "timestamp": "2024-05-01T12:00:00Z",
    }


def make_entry(url: str, subject: str = "General", **kwargs) -> KnowledgeEntry:
    """Build an unsaved entry for store tests."""
    kwargs.setdefault("timestamp", datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc))
    return KnowledgeEntry(url=url, subject=subject, **kwargs)


@pytest.fixture
def entry_factory():
    """Provide the make_entry helper."""
    return make_entry


@pytest.fixture
def sample_html() -> str:
    """Provide sample HTML for extraction tests."""
    return """
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <meta charset="UTF-8">
        <title>  Learning   React </title>
        <style>p { color: red; }</style>
        <script>var p = "<p>not text</p>";</script>
    </head>
    <body>
        <main>
            <article>
                <h1>React Basics</h1>
                <p>React is a JavaScript library for building UIs.</p>
                <p>For example, component state changes
                   trigger hooks like useState.</p>
                <p>   </p>
                <h2>Components</h2>
                <h2>Hooks</h2>
                <ul>
                    <li>JSX syntax</li>
                    <li>Virtual DOM</li>
                    <li></li>
                </ul>
                <noscript><p>Enable JavaScript</p></noscript>
            </article>
        </main>
    </body>
    </html>
    """


@pytest.fixture
def sample_text_page() -> PageContent:
    """A longer page for summarizer tests."""
    return PageContent(
        url="https://example.com/ml",
        title="Introduction to Machine Learning",
        headings=("Machine Learning",),
        sub_headings=("Supervised Learning", "Unsupervised Learning"),
        paragraphs=(
            "Machine learning is a method of data analysis that automates model building. "
            "It is an important branch of artificial intelligence.",
            "Supervised learning is defined as learning from labeled training data. "
            "For example, spam detection learns from emails marked as spam.",
            "Unsupervised learning refers to finding structure in unlabeled data. "
            "Clustering is used in customer segmentation and anomaly detection.",
            "However, machine learning models need careful evaluation on held out data. "
            "Finally, learning systems should be monitored after deployment.",
            "Reinforcement learning is a technique where an agent learns from rewards. "
            "For instance, game playing agents improve through repeated learning.",
        ),
    )
