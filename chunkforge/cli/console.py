"""Console output helpers.

Provides consistent formatting for CLI output: segment summaries, table
previews and error panels built from ChunkForgeError's "why it happened"
and "how to fix" fields.
"""

from __future__ import annotations

import traceback
from typing import List, Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table as RichTable
from rich.text import Text

from chunkforge.chunking.models import ParseResult, Table
from chunkforge.core.exceptions import ChunkForgeError, get_root_cause

# Shared console instance
_console: Console | None = None

# Verbose mode flag (set by CLI --verbose flag)
_verbose_mode: bool = False

PREVIEW_LENGTH = 60


def get_console() -> Console:
    """Get shared console instance (lazy-loaded)."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_verbose_mode(enabled: bool) -> None:
    """Enable or disable tracebacks in error output."""
    global _verbose_mode
    _verbose_mode = enabled


def is_verbose_mode() -> bool:
    return _verbose_mode


def _preview(text: str, length: int = PREVIEW_LENGTH) -> str:
    flat = " ".join(text.split())
    return flat if len(flat) <= length else flat[: length - 3] + "..."


def print_result_summary(result: ParseResult, source: str = "") -> None:
    """Print a segment table and document statistics."""
    console = get_console()

    table = RichTable(title=f"Segments{f' - {source}' if source else ''}")
    table.add_column("#", justify="right")
    table.add_column("Type")
    table.add_column("Page", justify="right")
    table.add_column("Conf", justify="right")
    table.add_column("Words", justify="right")
    table.add_column("Preview")

    for segment in result.segments:
        table.add_row(
            str(segment.position),
            segment.type.value,
            str(segment.page_number),
            f"{segment.confidence:.2f}",
            str(segment.word_count),
            _preview(segment.content),
        )
    console.print(table)

    meta = result.metadata
    console.print(
        f"[bold]{len(result.segments)}[/bold] segments, "
        f"[bold]{len(result.tables)}[/bold] tables, "
        f"{meta.total_words} words, {meta.total_tokens} tokens, "
        f"{meta.processing_time} ms"
    )


def print_tables(tables: Sequence[Table], show_html: bool = False) -> None:
    """Print extracted tables as rich tables (or their HTML)."""
    console = get_console()
    if not tables:
        console.print("[yellow]No tables found[/yellow]")
        return

    for table in tables:
        if show_html:
            console.print(f"[bold]{table.id}[/bold] (page {table.page_number})")
            console.print(table.html_content, markup=False, highlight=False)
            continue

        rich_table = RichTable(
            title=f"{table.id} - page {table.page_number}, "
            f"{table.rows}x{table.columns}"
        )
        header, *body = table.content
        for cell in header:
            rich_table.add_column(cell)
        for row in body:
            rich_table.add_row(*row)
        console.print(rich_table)


def print_errors(errors: List[str]) -> None:
    console = get_console()
    for error in errors:
        console.print(f"[red]✗[/red] {error}", highlight=False)


class ErrorRenderer:
    """Renders ChunkForgeError details as a panel.

    Example
    -------
        try:
            options = load_options(path)
        except ChunkForgeError as e:
            ErrorRenderer.render(e)
            raise typer.Exit(1)
    """

    @staticmethod
    def render(
        exc: BaseException,
        context: str = "",
        show_traceback: Optional[bool] = None,
    ) -> None:
        console = get_console()

        if isinstance(exc, ChunkForgeError):
            error_code = exc.error_code
            why = exc.why_it_happened
            how_to_fix = exc.how_to_fix
        else:
            error_code = "CF-ERR-999"
            why = "An unexpected error occurred"
            how_to_fix = ["Run with --verbose for details"]

        root_cause = get_root_cause(exc)
        root_message = str(root_cause) if root_cause is not exc else None

        content = Text()
        if context:
            content.append(f"{context}\n\n", style="dim")
        content.append(f"{exc}\n\n", style="bold")
        content.append("Why it happened:\n", style="yellow")
        content.append(f"{why}\n\n")
        content.append("How to fix:\n", style="green")
        for step in how_to_fix:
            content.append(f"  - {step}\n")
        if root_message:
            content.append(f"\nRoot cause: {root_message}\n", style="dim")

        console.print(
            Panel(
                content,
                title=f"[bold red]Error: {error_code}[/bold red]",
                border_style="red",
                padding=(1, 2),
            )
        )

        verbose = show_traceback if show_traceback is not None else is_verbose_mode()
        if verbose:
            console.print(
                "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
                markup=False,
                highlight=False,
            )
