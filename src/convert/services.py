"""Day One → Obsidian conversion pipeline.

A :class:`DayOneConverter` owns one :class:`ConversionState` for the
duration of a run. Entries are processed strictly in input order:
each entry's attachments are indexed and its filename allocated
before the next entry starts, because later entries may reference
media or collide with names registered by earlier ones.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from vaultport.convert.dedup import is_duplicate, record_entry
from vaultport.convert.filenames import resolve_filename
from vaultport.convert.frontmatter import build_frontmatter, render_frontmatter
from vaultport.convert.media import index_entry_media
from vaultport.convert.models import (
    ConversionResult,
    ConversionState,
    ConvertedEntry,
    ConvertOptions,
    ProgressEvent,
)
from vaultport.convert.text import normalize_body
from vaultport.dayone.archive import (
    ArchiveSink,
    DecodedArchive,
    MediaFile,
    ZipArchiveSink,
    open_sink,
    read_export,
)
from vaultport.dayone.models import DayOneEntry
from vaultport.shared.errors import PipelineReport

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 10


class DayOneConverter:
    """Converts Day One entries to Obsidian notes for a single run.

    Create one converter per conversion; its state is not meant to be
    shared between runs.
    """

    def __init__(self, options: ConvertOptions | None = None) -> None:
        self.options = options or ConvertOptions()
        self.state = ConversionState()

    @property
    def report(self) -> PipelineReport:
        return self.state.report

    def emit_progress(self, stage: str, message: str, progress: float | None = None) -> None:
        if self.options.on_progress is not None:
            self.options.on_progress(
                ProgressEvent(stage=stage, message=message, progress=progress)
            )

    # ── Single entry ─────────────────────────────────────────────

    def convert_entry(self, entry: DayOneEntry) -> ConvertedEntry:
        """Render one entry as a note and allocate its filename.

        Raises:
            ValueError: If the entry has no usable creation date.
        """
        index_entry_media(self.state.media_index, entry)

        def _missing(identifier: str) -> None:
            logger.warning("Entry %s references missing media %s", entry.uuid, identifier)
            self.report.add_error(
                "convert",
                f"Missing media {identifier}",
                source=entry.uuid or "",
                error_type="missing_media",
            )

        frontmatter = render_frontmatter(build_frontmatter(entry))
        body = normalize_body(entry.text, self.state.media_index, on_missing=_missing)
        filename = resolve_filename(self.state, entry)
        return ConvertedEntry(filename=filename, content=f"{frontmatter}{body}")

    def _validate(self, raw: Any, position: int) -> DayOneEntry | None:
        try:
            entry = DayOneEntry.model_validate(raw)
        except ValidationError as exc:
            logger.warning("Skipping invalid entry #%d: %s", position, exc)
            self.report.add_error(
                "convert",
                f"Invalid entry #{position}: {exc.error_count()} validation error(s)",
                source=str(position),
                error_type="invalid_entry",
            )
            return None
        if entry.created_at is None:
            logger.warning("Skipping entry %s without creation date", entry.uuid or position)
            self.report.add_error(
                "convert",
                f"Entry #{position} has no usable creation date",
                source=entry.uuid or str(position),
                error_type="missing_creation_date",
            )
            return None
        return entry

    # ── Whole run ────────────────────────────────────────────────

    def convert_entries(self, raw_entries: list[Any], sink: ArchiveSink) -> list[str]:
        """Convert entries in order, writing each note to ``sink``.

        Returns:
            Paths written, in order.
        """
        total = len(raw_entries)
        written: list[str] = []
        self.emit_progress("converting", f"Converting {total} entries...")

        for i, raw in enumerate(raw_entries):
            entry = self._validate(raw, i + 1)
            if entry is None:
                continue

            if not self.options.allow_duplicates and is_duplicate(self.state, entry):
                logger.debug("Skipping duplicate entry %s", entry.uuid)
                self.state.skipped_duplicates += 1
                continue

            converted = self.convert_entry(entry)
            sink.write(converted.path, converted.content.encode("utf-8"))
            written.append(converted.path)
            self.state.converted += 1

            if not self.options.allow_duplicates:
                record_entry(self.state, entry)

            if i % PROGRESS_EVERY == 0:
                self.emit_progress(
                    "converting",
                    f"Converting entries... ({i + 1}/{total})",
                    (i + 1) / total,
                )

        return written

    def copy_media(self, media: list[MediaFile], sink: ArchiveSink) -> list[str]:
        """Copy media files unchanged to ``attachments/<filename>``."""
        self.emit_progress("media", "Processing attachments...")
        written: list[str] = []
        for item in media:
            path = f"attachments/{item.filename}"
            sink.write(path, item.data)
            written.append(path)
        return written

    def convert_archive(self, archive: DecodedArchive, sink: ArchiveSink) -> ConversionResult:
        """Convert a decoded export, feeding attachments then entries to ``sink``."""
        self.emit_progress("parsing", "Parsing journal data...")
        entries = archive.journal.entries
        logger.info("Converting %d entries from %s", len(entries), archive.journal_name)

        attachments = self.copy_media(archive.media, sink)
        notes = self.convert_entries(entries, sink)

        result = ConversionResult(
            journal_name=archive.journal_name,
            converted=self.state.converted,
            skipped_duplicates=self.state.skipped_duplicates,
            attachments=len(attachments),
            written=attachments + notes,
            report=self.report,
        )
        self.emit_progress("complete", result.summary, 1.0)
        logger.info("%s (%s)", result.summary, self.report.summary())
        return result


def convert_archive(
    archive: DecodedArchive,
    sink: ArchiveSink,
    options: ConvertOptions | None = None,
) -> ConversionResult:
    """Run one conversion with a fresh converter."""
    return DayOneConverter(options).convert_archive(archive, sink)


def convert_export(
    export_path: Path,
    output: Path,
    *,
    output_format: str = "zip",
    compression_level: int = 6,
    options: ConvertOptions | None = None,
) -> ConversionResult:
    """Read an export from disk and write the converted vault to ``output``.

    The export is fully decoded before any output is created, so an
    unreadable export leaves nothing behind.

    Raises:
        ArchiveError: If the export cannot be read or has no journal JSON.
        ValueError: If ``output_format`` is unknown.
    """
    converter = DayOneConverter(options)
    converter.emit_progress("reading", "Reading export...")
    archive = read_export(export_path)
    with open_sink(output, output_format, compression_level=compression_level) as sink:
        result = converter.convert_archive(archive, sink)
        if isinstance(sink, ZipArchiveSink):
            converter.emit_progress("zipping", "Creating output ZIP...")
    return result
