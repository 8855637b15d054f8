"""Reading Day One exports and writing converted output.

A Day One export is a ZIP holding one or more journal JSON files plus
media folders (``photos/``, ``videos/``, ``audios/``, ``pdfs/``). The
converter only needs the decoded journal and the media bytes, so both a
ZIP file and an already-unpacked export directory are accepted.

Output goes to an :class:`ArchiveSink`, which receives ``(path, bytes)``
pairs. Two sinks are provided: a ZIP writer and a directory writer for
converting straight into a vault folder.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import zipfile
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from pydantic import ValidationError

from vaultport.dayone.models import DayOneExport
from vaultport.shared.errors import ArchiveError, JournalDecodeError, MalformedArchiveError

logger = logging.getLogger(__name__)

MEDIA_FOLDERS = ("photos", "videos", "audios", "pdfs")


@dataclass(frozen=True)
class MediaFile:
    """A media file found in the export."""

    path: str
    data: bytes

    @property
    def filename(self) -> str:
        return PurePosixPath(self.path).name


@dataclass
class DecodedArchive:
    """Everything the converter needs from an export."""

    journal: DayOneExport
    journal_name: str
    media: list[MediaFile] = field(default_factory=list)


def is_media_path(name: str) -> bool:
    """Whether an archive member lives under one of the media folders."""
    return any(
        f"/{folder}/" in name or name.startswith(f"{folder}/") for folder in MEDIA_FOLDERS
    )


def decode_journal(raw: str | bytes, name: str) -> DayOneExport:
    """Parse journal JSON text into a :class:`DayOneExport`.

    Raises:
        JournalDecodeError: If the text is not JSON or not a JSON object.
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise JournalDecodeError(f"Could not parse journal JSON {name}: {exc}") from exc
    if not isinstance(data, dict):
        raise JournalDecodeError(f"Journal JSON {name} is not an object")
    try:
        return DayOneExport.model_validate(data)
    except ValidationError as exc:
        raise JournalDecodeError(f"Unexpected journal structure in {name}: {exc}") from exc


def decode_members(members: list[tuple[str, bytes]]) -> DecodedArchive:
    """Build a :class:`DecodedArchive` from ``(name, bytes)`` members.

    The first ``*.json`` member (in archive order) is the journal.

    Raises:
        MalformedArchiveError: If no JSON member exists.
        JournalDecodeError: If the journal JSON cannot be decoded.
    """
    json_members = [(name, data) for name, data in members if name.endswith(".json")]
    if not json_members:
        raise MalformedArchiveError("No JSON file found in export")

    journal_name, raw = json_members[0]
    if len(json_members) > 1:
        logger.info(
            "Export contains %d JSON files, using %s", len(json_members), journal_name
        )
    journal = decode_journal(raw, journal_name)

    media = [MediaFile(path=name, data=data) for name, data in members if is_media_path(name)]
    return DecodedArchive(journal=journal, journal_name=journal_name, media=media)


def _read_zip(path: Path) -> list[tuple[str, bytes]]:
    try:
        with zipfile.ZipFile(path) as zf:
            return [(info.filename, zf.read(info)) for info in zf.infolist() if not info.is_dir()]
    except (zipfile.BadZipFile, OSError) as exc:
        raise ArchiveError(f"Could not read ZIP file {path}: {exc}") from exc


def _read_directory(path: Path) -> list[tuple[str, bytes]]:
    members: list[tuple[str, bytes]] = []
    for file_path in sorted(path.rglob("*")):
        if file_path.is_file():
            members.append((file_path.relative_to(path).as_posix(), file_path.read_bytes()))
    return members


def read_export(path: Path) -> DecodedArchive:
    """Read a Day One export from a ZIP file or an unpacked directory.

    Raises:
        ArchiveError: If the path does not exist or is not a readable ZIP.
        MalformedArchiveError: If no journal JSON is present.
        JournalDecodeError: If the journal JSON cannot be decoded.
    """
    if not path.exists():
        raise ArchiveError(f"Export not found: {path}")
    members = _read_directory(path) if path.is_dir() else _read_zip(path)
    logger.info("Read %d files from %s", len(members), path)
    return decode_members(members)


class ArchiveSink(ABC):
    """Receives converted files as ``(relative path, bytes)`` pairs."""

    @abstractmethod
    def write(self, path: str, data: bytes) -> None:
        """Store one output file."""

    def close(self) -> None:
        """Finish writing. Default: nothing to do."""

    def __enter__(self) -> ArchiveSink:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class ZipArchiveSink(ArchiveSink):
    """Writes output into a deflate-compressed ZIP file."""

    def __init__(self, path: Path, *, compression_level: int = 6) -> None:
        self.path = path
        path.parent.mkdir(parents=True, exist_ok=True)
        self._zip = zipfile.ZipFile(
            path, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=compression_level
        )

    def write(self, path: str, data: bytes) -> None:
        self._zip.writestr(path, data)

    def close(self) -> None:
        self._zip.close()


class DirectorySink(ArchiveSink):
    """Writes output files beneath a root directory (e.g. a vault)."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def write(self, path: str, data: bytes) -> None:
        target = self.root / path
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=target.parent, prefix=".tmp-")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp, target)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise


class MemorySink(ArchiveSink):
    """Keeps output in a dict; useful for previews and tests."""

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}

    def write(self, path: str, data: bytes) -> None:
        self.files[path] = data


OUTPUT_FORMATS = ("zip", "directory")


def open_sink(output: Path, output_format: str, *, compression_level: int = 6) -> ArchiveSink:
    """Create the sink for an output format (``"zip"`` or ``"directory"``).

    Raises:
        ValueError: If the format is unknown.
    """
    if output_format == "zip":
        return ZipArchiveSink(output, compression_level=compression_level)
    if output_format == "directory":
        return DirectorySink(output)
    raise ValueError(f"Unknown output format: {output_format!r}")
