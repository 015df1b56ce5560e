"""ChunkForge CLI - Main application entry point.

Commands
--------
    chunkforge chunk FILE     Segment a text file and print or save the result
    chunkforge tables FILE    Show tables detected in a text file

Options are resolved in order: command-line flags, CHUNKFORGE_* environment
variables, the --config YAML file, built-in defaults.

Examples:
    chunkforge chunk report.txt --strategy paragraph --max-length 800
    chunkforge chunk notes.md --splitter markdown --chunk-size 600 -o out.json
    chunkforge tables data.txt --html
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from chunkforge.chunking.embedding_mapper import to_segmentation_options
from chunkforge.chunking.engine import SegmentationEngine
from chunkforge.chunking.extractors import PlainTextExtractor
from chunkforge.chunking.tables import TableExtractor
from chunkforge.cli.console import (
    ErrorRenderer,
    get_console,
    print_errors,
    print_result_summary,
    print_tables,
    set_verbose_mode,
)
from chunkforge.core.config.embedding import EmbeddingConfig
from chunkforge.core.config.loaders import load_options
from chunkforge.core.config.options import SegmentationOptions
from chunkforge.core.exceptions import ChunkForgeError
from chunkforge.core.logging import configure_logging
from chunkforge.core.types import SegmentationStrategy, TextSplitter

app = typer.Typer(
    name="chunkforge",
    help="Document chunking engine for embedding and retrieval",
    add_completion=False,
    pretty_exceptions_enable=False,
)


def _setup(verbose: bool) -> None:
    set_verbose_mode(verbose)
    if verbose:
        configure_logging(level="DEBUG")


def _resolve_options(
    config: Optional[Path],
    strategy: Optional[SegmentationStrategy],
    max_length: Optional[int],
    min_length: Optional[int],
    overlap: Optional[float],
    splitter: Optional[TextSplitter],
    chunk_size: Optional[int],
    chunk_overlap: Optional[int],
) -> SegmentationOptions:
    """Combine YAML/env options with command-line flags.

    Any embedding flag (or an embedding_config in the YAML) switches to the
    embedding path; the config is then mapped onto native options.
    """
    options = load_options(config).with_overrides(
        segmentation_strategy=strategy,
        max_segment_length=max_length,
        min_segment_length=min_length,
        overlap_ratio=overlap,
    )

    embedding = options.embedding_config
    if splitter is not None or chunk_size is not None or chunk_overlap is not None:
        base = embedding or EmbeddingConfig()
        updates = {
            "text_splitter": splitter,
            "chunk_size": chunk_size,
            "chunk_overlap": chunk_overlap,
        }
        embedding = EmbeddingConfig.from_payload(
            {
                **base.model_dump(),
                **{k: v for k, v in updates.items() if v is not None},
            }
        )

    if embedding is not None:
        options = to_segmentation_options(embedding, options)
    return options


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
) -> None:
    """ChunkForge - document chunking engine."""
    if version:
        from chunkforge import __version__

        typer.echo(f"ChunkForge {__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("chunk")
def chunk_command(
    file: Path = typer.Argument(..., help="Text file to segment"),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML options file"
    ),
    strategy: Optional[SegmentationStrategy] = typer.Option(
        None, "--strategy", "-s", help="Segmentation strategy"
    ),
    max_length: Optional[int] = typer.Option(
        None, "--max-length", help="Maximum segment length (characters)"
    ),
    min_length: Optional[int] = typer.Option(
        None, "--min-length", help="Minimum segment length (characters)"
    ),
    overlap: Optional[float] = typer.Option(
        None, "--overlap", help="Overlap ratio in [0, 1)"
    ),
    splitter: Optional[TextSplitter] = typer.Option(
        None, "--splitter", help="Embedding text splitter (enables embedding path)"
    ),
    chunk_size: Optional[int] = typer.Option(
        None, "--chunk-size", help="Embedding chunk size (characters)"
    ),
    chunk_overlap: Optional[int] = typer.Option(
        None, "--chunk-overlap", help="Embedding chunk overlap (characters)"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the JSON result to this file"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the JSON result"),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Debug logging"),
) -> None:
    """Segment a text file."""
    _setup(verbose)

    try:
        options = _resolve_options(
            config,
            strategy,
            max_length,
            min_length,
            overlap,
            splitter,
            chunk_size,
            chunk_overlap,
        )
    except ChunkForgeError as e:
        ErrorRenderer.render(e, context="While loading options")
        raise typer.Exit(code=1)

    result = SegmentationEngine().process_file(file, options=options)
    payload = json.dumps(result.to_dict(), indent=2, ensure_ascii=False)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(payload, encoding="utf-8")
        get_console().print(f"[green]✓[/green] Wrote {output}", highlight=False)

    if as_json:
        typer.echo(payload)
    elif result.success:
        print_result_summary(result, source=file.name)

    if not result.success:
        print_errors(result.errors)
        raise typer.Exit(code=1)


@app.command("tables")
def tables_command(
    file: Path = typer.Argument(..., help="Text file to scan"),
    show_html: bool = typer.Option(False, "--html", help="Print HTML renderings"),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Debug logging"),
) -> None:
    """Show tables detected in a text file."""
    _setup(verbose)

    try:
        document = PlainTextExtractor().extract(file)
    except ChunkForgeError as e:
        ErrorRenderer.render(e, context=f"While reading {file.name}")
        raise typer.Exit(code=1)

    print_tables(TableExtractor().extract(document.text), show_html=show_html)


def cli_main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    cli_main()
