"""
Main CLI application for the Content Intelligence Engine.

Provides the command-line interface for:
- Extracting, classifying and summarizing saved pages
- Capturing pages into the knowledge store
- Browsing, searching and pruning stored knowledge
- Exporting stored knowledge as a Markdown or HTML book
- Switching knowledge capture on and off
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError as SettingsValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from content_intel import __version__
from content_intel.config import Settings, load_config
from content_intel.core.exceptions import ContentIntelError, ValidationError
from content_intel.extraction import HtmlExtractor, PageContent
from content_intel.utils.logging import get_logger, setup_logging

# Initialize Typer app
app = typer.Typer(
    name="content-intel",
    help="Content Intelligence Engine - Classify, summarize and store page knowledge",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()
logger = get_logger(__name__)

MODE_ACTIONS = ("on", "off", "toggle", "status")


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(
            f"[bold blue]Content Intelligence Engine[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file",
        exists=True,
        dir_okay=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable verbose logging",
    ),
) -> None:
    """
    Content Intelligence Engine - offline page classification and knowledge store.

    Use 'content-intel --help' for command list.
    """
    try:
        settings = load_config(config_file)
    except (ContentIntelError, SettingsValidationError) as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1)

    setup_logging(settings.logging, level="DEBUG" if verbose else None)
    ctx.obj = settings


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj if isinstance(ctx.obj, Settings) else load_config()


def _fail(message: str) -> None:
    console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(1)


def _load_page(source: Path, url: Optional[str]) -> PageContent:
    """
    Build PageContent from a JSON payload file or an HTML file.

    JSON files hold a PageContent-shaped object. Any other file is parsed
    as HTML and needs --url; its bytes go to BeautifulSoup, which detects
    the document encoding.
    """
    raw = source.read_bytes()

    if source.suffix.lower() == ".json":
        try:
            payload = json.loads(raw)
        except ValueError as e:
            raise ValidationError(f"Invalid JSON in {source}: {e}") from e
        if url and isinstance(payload, dict):
            payload = {**payload, "url": url}
        return PageContent.from_payload(payload)

    if not url:
        raise ValidationError("--url is required for HTML input", field="url")
    return HtmlExtractor().extract(raw, url=url)


def _print_json(data) -> None:
    console.print_json(json.dumps(data, ensure_ascii=False))


def _truncate(text: str, width: int) -> str:
    return text[:width] + "..." if len(text) > width else text


SOURCE_ARGUMENT = typer.Argument(
    ...,
    help="JSON payload or HTML file",
    exists=True,
    dir_okay=False,
    readable=True,
)
URL_OPTION = typer.Option(
    None,
    "--url",
    "-u",
    help="Page URL (required for HTML files, overrides the payload url)",
)
JSON_OPTION = typer.Option(
    False,
    "--json",
    help="Print raw JSON",
)


@app.command()
def extract(
    source: Path = SOURCE_ARGUMENT,
    url: Optional[str] = URL_OPTION,
) -> None:
    """
    Show the PageContent extracted from a file.

    Example:
        content-intel extract page.html --url https://example.com/guide
    """
    try:
        page = _load_page(source, url)
    except ContentIntelError as e:
        _fail(str(e))

    _print_json(page.to_dict())


@app.command()
def classify(
    ctx: typer.Context,
    source: Path = SOURCE_ARGUMENT,
    url: Optional[str] = URL_OPTION,
    as_json: bool = JSON_OPTION,
) -> None:
    """
    Classify a page into subject, topic and chapter.

    Example:
        content-intel classify page.json
    """
    from content_intel.classification import Classifier

    try:
        page = _load_page(source, url)
        classification = Classifier.from_settings(_settings(ctx).classifier).classify(page)
    except ContentIntelError as e:
        _fail(str(e))

    if as_json:
        _print_json(classification.to_dict())
        return

    table = Table(show_header=False, box=None)
    table.add_column("Field", style="dim")
    table.add_column("Value", style="bold")
    table.add_row("Subject", f"{classification.subject} ({classification.subject_score})")
    table.add_row("Topic", f"{classification.topic} ({classification.topic_score})")
    table.add_row("Chapter", f"{classification.chapter} ({classification.chapter_score})")

    console.print(Panel(table, title=_truncate(page.title or page.url, 60), border_style="blue"))

    if classification.key_points:
        console.print("\n[bold]Key points:[/bold]")
        for point in classification.key_points:
            console.print(f"  • {point}")


@app.command()
def summarize(
    ctx: typer.Context,
    source: Path = SOURCE_ARGUMENT,
    url: Optional[str] = URL_OPTION,
    as_json: bool = JSON_OPTION,
) -> None:
    """
    Summarize a page: key sentences, definitions and examples.

    Example:
        content-intel summarize article.html --url https://example.com/a
    """
    from content_intel.summarization import Summarizer

    try:
        page = _load_page(source, url)
    except ContentIntelError as e:
        _fail(str(e))

    summary = Summarizer.from_settings(_settings(ctx).summarizer).summarize(page)

    if as_json:
        _print_json(summary.to_dict())
        return

    if summary.is_empty:
        console.print("[yellow]Nothing to summarize[/yellow]")
        return

    sections = (
        ("Summary", summary.summary_points, "green"),
        ("Definitions", summary.definitions, "cyan"),
        ("Examples", summary.examples, "magenta"),
    )
    for title, sentences, style in sections:
        if sentences:
            body = "\n".join(f"• {sentence}" for sentence in sentences)
            console.print(Panel(body, title=title, border_style=style))


@app.command()
def capture(
    ctx: typer.Context,
    sources: list[Path] = typer.Argument(
        ...,
        help="JSON payload or HTML files",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    url: Optional[str] = URL_OPTION,
) -> None:
    """
    Classify pages and save new URLs to the knowledge store.

    Runs only while knowledge mode is on ('content-intel mode on').

    Example:
        content-intel capture saved/*.json
    """
    settings = _settings(ctx)

    try:
        results = asyncio.run(_capture_async(settings, sources, url))
    except ContentIntelError as e:
        logger.exception("Capture failed")
        _fail(str(e))

    table = Table(title="Capture", show_header=True)
    table.add_column("Source", style="dim")
    table.add_column("Status")
    table.add_column("Subject / Topic / Chapter", style="cyan")

    styles = {"saved": "green", "duplicate": "yellow"}
    for source, result in results:
        status = result.status.value
        style = styles.get(status, "red")
        category = ""
        if result.classification:
            c = result.classification
            category = f"{c.subject} / {c.topic} / {c.chapter}"
        table.add_row(source.name, f"[{style}]{status}[/{style}]", category)

    console.print(table)


async def _capture_async(settings: Settings, sources: list[Path], url: Optional[str]):
    """Async capture implementation."""
    from content_intel.pipeline import CaptureResult, CaptureStatus, KnowledgePipeline

    pipeline = KnowledgePipeline.from_settings(settings)
    results = []
    try:
        for source in sources:
            try:
                page = _load_page(source, url)
            except ValidationError as e:
                logger.warning(f"Skipping {source}: {e}")
                results.append((source, CaptureResult(
                    status=CaptureStatus.INVALID, reason=e.message)))
                continue
            results.append((source, await pipeline.capture(page)))
    finally:
        pipeline.close()
    return results


def _open_store(settings: Settings):
    from content_intel.storage import KnowledgeStore

    return KnowledgeStore.from_settings(settings)


def _run_store(settings: Settings, operation):
    """Run one async store operation and close the store."""

    async def runner():
        store = _open_store(settings)
        try:
            return await operation(store)
        finally:
            store.close()

    try:
        return asyncio.run(runner())
    except ContentIntelError as e:
        _fail(str(e))


def _entries_table(entries, title: str) -> Table:
    table = Table(title=title, show_header=True)
    table.add_column("ID", style="dim", width=5)
    table.add_column("Title", style="cyan")
    table.add_column("Subject")
    table.add_column("Topic")
    table.add_column("Chapter")
    table.add_column("Captured", style="dim")

    for entry in entries:
        table.add_row(
            str(entry.id),
            _truncate(entry.title or entry.url, 50),
            entry.subject,
            entry.topic,
            entry.chapter,
            entry.timestamp.strftime("%Y-%m-%d %H:%M"),
        )
    return table


@app.command("list")
def list_entries(
    ctx: typer.Context,
    subject: Optional[str] = typer.Option(None, "--subject", "-s", help="Filter by subject"),
    topic: Optional[str] = typer.Option(None, "--topic", "-t", help="Filter by topic"),
    chapter: Optional[str] = typer.Option(None, "--chapter", help="Filter by chapter"),
    as_json: bool = JSON_OPTION,
) -> None:
    """
    List stored knowledge entries.

    Examples:
        content-intel list
        content-intel list --subject "Web Development" --topic React
    """

    async def operation(store):
        if subject and topic:
            entries = await store.get_by_subject_topic(subject, topic)
        elif subject:
            entries = await store.get_by("subject", subject)
        elif topic:
            entries = await store.get_by("topic", topic)
        else:
            entries = await store.get_all()
        if chapter:
            entries = [entry for entry in entries if entry.chapter == chapter]
        return entries

    entries = _run_store(_settings(ctx), operation)

    if as_json:
        _print_json([entry.to_dict() for entry in entries])
        return

    if not entries:
        console.print("[yellow]No entries found[/yellow]")
        return

    console.print(_entries_table(entries, f"Knowledge ({len(entries)} entries)"))


@app.command()
def show(
    ctx: typer.Context,
    entry_id: int = typer.Argument(..., help="Entry ID"),
    as_json: bool = JSON_OPTION,
) -> None:
    """Show one stored entry."""

    async def operation(store):
        return await store.get_by_id(entry_id)

    entry = _run_store(_settings(ctx), operation)

    if as_json:
        _print_json(entry.to_dict())
        return

    table = Table(show_header=False, box=None)
    table.add_column("Field", style="dim")
    table.add_column("Value")
    table.add_row("URL", entry.url)
    table.add_row("Subject", entry.subject)
    table.add_row("Topic", entry.topic)
    table.add_row("Chapter", entry.chapter)
    table.add_row("Captured", entry.timestamp.isoformat())
    table.add_row("Saved", entry.saved_at.isoformat() if entry.saved_at else "N/A")

    console.print(Panel(table, title=entry.title or f"Entry {entry.id}", border_style="blue"))

    if entry.key_points:
        console.print("\n[bold]Key points:[/bold]")
        for point in entry.key_points:
            console.print(f"  • {point}")

    if entry.paragraphs:
        console.print(f"\n[dim]{len(entry.paragraphs)} paragraphs stored[/dim]")
        console.print(_truncate(entry.paragraphs[0], 300))


@app.command()
def search(
    ctx: typer.Context,
    text: str = typer.Argument(..., help="Text to search for"),
    as_json: bool = JSON_OPTION,
) -> None:
    """
    Search stored knowledge (case-insensitive substring).

    Example:
        content-intel search "virtual dom"
    """

    async def operation(store):
        return await store.search(text)

    entries = _run_store(_settings(ctx), operation)

    if as_json:
        _print_json([entry.to_dict() for entry in entries])
        return

    if not entries:
        console.print("[yellow]No results found[/yellow]")
        return

    console.print(_entries_table(entries, f"Search Results ({len(entries)} found)"))


@app.command()
def stats(
    ctx: typer.Context,
    as_json: bool = JSON_OPTION,
) -> None:
    """Show knowledge store statistics."""

    async def operation(store):
        return await store.statistics()

    statistics = _run_store(_settings(ctx), operation)

    if as_json:
        _print_json(statistics.to_dict())
        return

    console.print(Panel(
        f"[bold]{statistics.total_entries}[/bold] entries | "
        f"{statistics.unique_subject_count} subjects | "
        f"{statistics.unique_topic_count} topics | "
        f"{statistics.unique_chapter_count} chapters",
        title="Knowledge Store",
        border_style="blue",
    ))

    for title, counts in (
        ("Subjects", statistics.counts_per_subject),
        ("Topics", statistics.counts_per_topic),
        ("Chapters", statistics.counts_per_chapter),
    ):
        if not counts:
            continue
        table = Table(title=title, show_header=True)
        table.add_column("Name", style="cyan")
        table.add_column("Entries", justify="right")
        for name, count in counts.items():
            table.add_row(name, str(count))
        console.print(table)


@app.command()
def export(
    ctx: typer.Context,
    output: Path = typer.Option(
        ...,
        "--output",
        "-o",
        help="Book file to write (.md or .html)",
        dir_okay=False,
    ),
    book_format: Optional[str] = typer.Option(
        None,
        "--format",
        "-f",
        help="markdown or html (default: from the output suffix)",
    ),
    title: str = typer.Option("My Knowledge Book", "--title", help="Book title"),
) -> None:
    """
    Export all stored knowledge as a book.

    Entries are organized Subject -> Topic -> Chapter with a table of
    contents.

    Example:
        content-intel export --output book.html
    """
    from content_intel.export import KnowledgeBookExporter

    async def operation(store):
        return await store.get_hierarchy()

    hierarchy = _run_store(_settings(ctx), operation)
    if not hierarchy:
        console.print("[yellow]No entries to export[/yellow]")
        return

    try:
        path = KnowledgeBookExporter(title=title).export(
            hierarchy, output, fmt=book_format)
    except ContentIntelError as e:
        _fail(str(e))

    console.print(f"[green]✓[/green] Exported knowledge book to {path}")


@app.command()
def delete(
    ctx: typer.Context,
    entry_id: int = typer.Argument(..., help="Entry ID"),
) -> None:
    """Delete one stored entry."""

    async def operation(store):
        return await store.delete_by_id(entry_id)

    if _run_store(_settings(ctx), operation):
        console.print(f"[green]✓[/green] Deleted entry {entry_id}")
    else:
        console.print(f"[yellow]No entry with id {entry_id}[/yellow]")
        raise typer.Exit(1)


@app.command()
def clear(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete every stored entry."""
    if not yes and not typer.confirm("Delete all stored knowledge?"):
        raise typer.Exit(0)

    async def operation(store):
        return await store.clear_all()

    removed = _run_store(_settings(ctx), operation)
    console.print(f"[green]✓[/green] Removed {removed} entries")


@app.command()
def mode(
    ctx: typer.Context,
    action: str = typer.Argument(
        "status",
        help="on, off, toggle or status",
    ),
) -> None:
    """
    Switch knowledge capture on or off.

    Examples:
        content-intel mode on
        content-intel mode status
    """
    from content_intel.pipeline import CaptureToggle

    action = action.lower()
    if action not in MODE_ACTIONS:
        _fail(f"Unknown action {action!r}; use one of {', '.join(MODE_ACTIONS)}")

    toggle = CaptureToggle.from_settings(_settings(ctx).capture)
    try:
        if action == "on":
            toggle.enable()
        elif action == "off":
            toggle.disable()
        elif action == "toggle":
            toggle.toggle()
    except ContentIntelError as e:
        _fail(str(e))

    if toggle.is_enabled():
        console.print("Knowledge mode: [bold green]ON[/bold green]")
    else:
        console.print("Knowledge mode: [bold red]OFF[/bold red]")


@app.command()
def config(
    ctx: typer.Context,
    init: bool = typer.Option(
        False,
        "--init",
        help="Create default configuration file",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output path for config file",
    ),
) -> None:
    """
    Show the active configuration, or write a default one.

    Examples:
        content-intel config
        content-intel config --init --output ./config.yaml
    """
    if init:
        _init_config(output)
        return

    config_dict = _settings(ctx).model_dump(mode="json")
    for section, values in config_dict.items():
        console.print(f"\n[bold cyan]{section}:[/bold cyan]")
        for key, value in values.items():
            console.print(f"  {key}: [dim]{value}[/dim]")


def _init_config(output: Optional[Path]) -> None:
    """Create default configuration file."""
    import yaml

    config_dict = Settings().model_dump(mode="json")
    output_path = output or Path("config.yaml")

    if output_path.exists():
        if not typer.confirm(f"File {output_path} exists. Overwrite?"):
            raise typer.Exit(0)

    with open(output_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)

    console.print(f"[green]✓[/green] Configuration saved to: {output_path}")


if __name__ == "__main__":
    app()
