"""CLI interface for vaultport."""

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from vaultport.config import VaultportConfig, load_config, merge_cli_overrides
from vaultport.convert import ProgressEvent, convert_export
from vaultport.dayone import DayOneEntry, read_export
from vaultport.shared.errors import ArchiveError

app = typer.Typer(
    name="vaultport",
    help="Convert Day One journal exports into Obsidian vaults.",
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from vaultport import __version__

        console.print(f"vaultport {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging."),
    ] = False,
) -> None:
    """vaultport - Day One to Obsidian converter."""
    _configure_logging(verbose)


def _default_output(config: VaultportConfig, export: Path) -> Path:
    stem = export.stem if export.is_file() else export.name
    suffix = ".zip" if config.output.format == "zip" else ""
    return Path(config.output.directory) / f"{stem}-obsidian{suffix}"


@app.command(name="convert")
def convert_cmd(
    export: Annotated[
        Path,
        typer.Argument(
            help="Day One export ZIP (or unpacked export directory).",
            exists=True,
            resolve_path=True,
        ),
    ],
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Output ZIP file or vault directory. Defaults to <export>-obsidian[.zip].",
        ),
    ] = None,
    output_format: Annotated[
        Optional[str],
        typer.Option(
            "--format",
            "-f",
            help="Output format: 'zip' or 'directory'.",
        ),
    ] = None,
    compression_level: Annotated[
        Optional[int],
        typer.Option(
            "--compression-level",
            help="DEFLATE level for ZIP output (0-9).",
            min=0,
            max=9,
        ),
    ] = None,
    allow_duplicates: Annotated[
        Optional[bool],
        typer.Option(
            "--allow-duplicates/--skip-duplicates",
            help="Convert repeated entries instead of skipping them.",
        ),
    ] = None,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to a .vaultport.toml file."),
    ] = None,
) -> None:
    """Convert a Day One export into Obsidian notes and attachments.

    Entries become entries/<date> <title>.md with YAML frontmatter;
    media files are copied to attachments/.
    """
    try:
        config = merge_cli_overrides(
            load_config(config_path),
            allow_duplicates=allow_duplicates,
            output_format=output_format,
            compression_level=compression_level,
        )
    except ValueError as exc:
        console.print(f"[red]Error:[/red] Invalid configuration: {exc}")
        raise typer.Exit(1)

    if output is None:
        output = _default_output(config, export)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Starting...", total=1.0)

        def on_progress(event: ProgressEvent) -> None:
            progress.update(task, description=event.message)
            if event.progress is not None:
                progress.update(task, completed=event.progress)

        try:
            result = convert_export(
                export,
                output,
                output_format=config.output.format,
                compression_level=config.output.compression_level,
                options=config.to_convert_options(on_progress),
            )
        except ArchiveError as exc:
            progress.stop()
            console.print(f"[red]Error:[/red] {exc}")
            raise typer.Exit(1)

    console.print()
    console.print("[bold green]Conversion complete![/bold green]")
    console.print(f"  Journal: {result.journal_name}")
    console.print(f"  Entries: {result.converted}")
    if result.skipped_duplicates:
        console.print(f"  Duplicates skipped: {result.skipped_duplicates}")
    console.print(f"  Attachments: {result.attachments}")
    console.print(f"  Output: {output}")

    if result.report.has_errors:
        console.print(f"[yellow]Warnings:[/yellow] {result.report.summary()}")


@app.command(name="inspect")
def inspect_cmd(
    export: Annotated[
        Path,
        typer.Argument(
            help="Day One export ZIP (or unpacked export directory).",
            exists=True,
            resolve_path=True,
        ),
    ],
) -> None:
    """Print a JSON summary of an export without converting it."""
    try:
        archive = read_export(export)
    except ArchiveError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)

    dates = []
    for raw in archive.journal.entries:
        value = raw.get("creationDate") if isinstance(raw, dict) else None
        if isinstance(value, str):
            created = DayOneEntry(creation_date=value).created_at
            if created is not None:
                dates.append(created)

    summary = {
        "journal": archive.journal_name,
        "entry_count": len(archive.journal.entries),
        "media_count": len(archive.media),
        "date_range": {
            "start": min(dates).isoformat() if dates else None,
            "end": max(dates).isoformat() if dates else None,
        },
    }
    console.print(json.dumps(summary, indent=2))


if __name__ == "__main__":
    app()
