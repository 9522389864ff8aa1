"""Command line entry point for FileConverter."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn

from fileconverter.converters.base import ConversionOptions
from fileconverter.converters.registry import FORMAT_CAPABILITIES, targets_for
from fileconverter.converters.universal_converter import UniversalConverter
from fileconverter.services.batch_service import BatchService, BatchSummary, build_requests, collect_files
from fileconverter.utils.conversion_log import cleanup_old_logs, create_conversion_log, get_latest_log
from fileconverter.utils.storage import load_config, save_config
from fileconverter.utils.worker import BatchWorker

__version__ = "1.0.0"

logger = logging.getLogger(__name__)
console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _expand_sources(sources: tuple[Path, ...]) -> list[Path]:
    files: list[Path] = []
    for source in sources:
        if source.is_dir():
            files.extend(collect_files(str(source)))
        else:
            files.append(source)
    return files


def _print_formats() -> None:
    for source in FORMAT_CAPABILITIES:
        console.print(f"[cyan]{source:>5}[/cyan] -> {', '.join(targets_for(source))}")


def _print_last_log() -> None:
    log_file = get_latest_log()
    if log_file is None:
        console.print("[yellow]No conversion log found[/yellow]")
        sys.exit(1)
    console.print(f"[dim]{log_file}[/dim]")
    console.print(log_file.read_text(encoding="utf-8"), markup=False, highlight=False)


def _print_summary(summary: BatchSummary) -> None:
    for result in summary.results:
        if result.success:
            console.print(f"[green]✓[/green] {result.source_path.name} -> {result.output_path}")
        else:
            console.print(f"[red]✗[/red] {result.source_path.name}: {result.error}")
    if summary.cancelled:
        console.print(f"[yellow]Cancelled, {summary.skipped} file(s) skipped[/yellow]")
    console.print(f"\n[bold]{summary.message}[/bold]")


@click.command()
@click.argument("sources", nargs=-1, type=click.Path(path_type=Path))
@click.option("--to", "-t", "target_format", help="Target format, e.g. pdf, png, csv")
@click.option("--output-dir", "-o", type=click.Path(file_okay=False, path_type=Path), help="Output directory")
@click.option("--quality", "-q", type=click.IntRange(1, 100), help="Quality for lossy image codecs (1-100)")
@click.option("--width", type=click.IntRange(min=1), help="Maximum image width in pixels")
@click.option("--height", type=click.IntRange(min=1), help="Maximum image height in pixels")
@click.option("--list-formats", is_flag=True, help="Show the supported conversions and exit")
@click.option("--last-log", is_flag=True, help="Show the most recent conversion log and exit")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.version_option(version=__version__)
def cli(sources, target_format, output_dir, quality, width, height, list_formats, last_log, verbose):
    """
    Convert image, document and spreadsheet files.

    SOURCES may be files or directories; directories contribute every
    file with a supported extension.

    Examples:

        fileconverter photo.png --to webp -q 80

        fileconverter notes.txt report.docx --to pdf -o out/
    """
    _configure_logging(verbose)

    if list_formats:
        _print_formats()
        return

    if last_log:
        _print_last_log()
        return

    config = load_config()
    target_format = target_format or config.default_format
    if not target_format:
        raise click.UsageError("No target format given (use --to)")
    if not sources:
        raise click.UsageError("No source files given")

    files = _expand_sources(sources)
    if not files:
        console.print("[yellow]No convertible files found[/yellow]")
        sys.exit(1)

    options = ConversionOptions(quality=quality or config.quality, width=width, height=height)
    requests = build_requests(files, target_format, output_dir or config.output_dir or None, options)

    log_file = None
    if config.write_log_file:
        try:
            cleanup_old_logs(config.log_retention_days)
            log_file = create_conversion_log(target_format)
        except OSError as e:
            logger.warning("Conversion log disabled: %s", e)

    worker = BatchWorker(BatchService(UniversalConverter.from_config(config)))
    summaries: list[BatchSummary] = []
    failures: list[Exception] = []

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Converting", total=len(requests))

        def update_progress(current: int, total: int, filename: str, status: str) -> None:
            progress.update(task, completed=current, description=f"{status.capitalize()} {filename}".strip())

        worker.start(
            requests,
            on_progress=update_progress,
            on_complete=summaries.append,
            on_error=failures.append,
            log_file=log_file,
        )
        try:
            while worker.is_running:
                worker.wait(timeout=0.2)
        except KeyboardInterrupt:
            console.print("[yellow]Cancelling after the current file...[/yellow]")
            worker.cancel()
            worker.wait()

    if failures:
        console.print(f"[bold red]✗ Error:[/bold red] {failures[0]}")
        sys.exit(1)

    summary = summaries[0]
    _print_summary(summary)
    if log_file is not None:
        console.print(f"[dim]Log: {log_file}[/dim]")

    config.last_source_dir = str(files[0].resolve().parent)
    try:
        save_config(config)
    except OSError as e:
        logger.warning("Failed to save config: %s", e)

    sys.exit(0 if summary.success == summary.total else 1)


def run() -> None:
    """Console script entry point for the fileconverter command."""
    cli()


if __name__ == "__main__":
    run()
