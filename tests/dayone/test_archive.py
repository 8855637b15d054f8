"""Tests for reading Day One exports and writing output."""

import json
import zipfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from vaultport.convert import ConvertOptions, convert_export
from vaultport.dayone.archive import (
    DirectorySink,
    MediaFile,
    ZipArchiveSink,
    decode_members,
    is_media_path,
    open_sink,
    read_export,
)
from vaultport.shared.errors import ArchiveError, JournalDecodeError, MalformedArchiveError

JOURNAL = {
    "metadata": {"version": "1.0"},
    "entries": [
        {
            "uuid": "0123456789ABCDEF0123456789ABCDEF",
            "text": "# Morning thoughts\nHello\n![](dayone-moment://AB12)",
            "creationDate": "2024-01-15T10:00:00Z",
            "photos": [{"identifier": "AB12", "md5": "f00d", "type": "jpeg"}],
        },
        {
            "uuid": "FEDCBA9876543210FEDCBA9876543210",
            "text": "Evening",
            "creationDate": "2024-01-16T20:00:00Z",
        },
    ],
}


@pytest.fixture
def export_zip(tmp_path: Path) -> Path:
    """A small Day One export ZIP."""
    path = tmp_path / "export.zip"
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr("Journal.json", json.dumps(JOURNAL))
        zf.writestr("photos/", "")
        zf.writestr("photos/f00d.jpeg", b"jpeg-bytes")
        zf.writestr("videos/cafe.mov", b"mov-bytes")
        zf.writestr("notes/readme.txt", b"ignored")
    return path


class TestIsMediaPath:
    @pytest.mark.parametrize(
        "name",
        ["photos/a.jpeg", "videos/b.mov", "audios/c.m4a", "pdfs/d.pdf", "Export/photos/a.jpeg"],
    )
    def test_media(self, name):
        assert is_media_path(name)

    @pytest.mark.parametrize("name", ["Journal.json", "notes/photos.txt", "myphotos/a.jpeg"])
    def test_not_media(self, name):
        assert not is_media_path(name)


class TestDecodeMembers:
    def test_uses_first_json(self):
        archive = decode_members(
            [
                ("Journal.json", json.dumps({"entries": [{"uuid": "1"}]}).encode()),
                ("Travel.json", json.dumps({"entries": []}).encode()),
            ]
        )
        assert archive.journal_name == "Journal.json"
        assert len(archive.journal.entries) == 1

    def test_missing_entries_key(self):
        archive = decode_members([("Journal.json", b"{}")])
        assert archive.journal.entries == []

    def test_null_entries(self):
        archive = decode_members([("Journal.json", b'{"entries": null}')])
        assert archive.journal.entries == []

    def test_no_json_is_malformed(self):
        with pytest.raises(MalformedArchiveError):
            decode_members([("photos/a.jpeg", b"x")])

    def test_invalid_json(self):
        with pytest.raises(JournalDecodeError) as exc_info:
            decode_members([("Journal.json", b"{not json")])
        assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)

    def test_json_array_rejected(self):
        with pytest.raises(JournalDecodeError):
            decode_members([("Journal.json", b"[]")])

    def test_errors_share_base(self):
        assert issubclass(MalformedArchiveError, ArchiveError)
        assert issubclass(JournalDecodeError, ArchiveError)


class TestReadExport:
    def test_reads_zip(self, export_zip: Path):
        archive = read_export(export_zip)

        assert archive.journal_name == "Journal.json"
        assert len(archive.journal.entries) == 2
        assert sorted(m.filename for m in archive.media) == ["cafe.mov", "f00d.jpeg"]

    def test_reads_directory(self, tmp_path: Path):
        root = tmp_path / "export"
        (root / "photos").mkdir(parents=True)
        (root / "Journal.json").write_text(json.dumps(JOURNAL))
        (root / "photos" / "f00d.jpeg").write_bytes(b"jpeg-bytes")

        archive = read_export(root)
        assert len(archive.journal.entries) == 2
        assert archive.media == [MediaFile(path="photos/f00d.jpeg", data=b"jpeg-bytes")]

    def test_missing_path(self, tmp_path: Path):
        with pytest.raises(ArchiveError):
            read_export(tmp_path / "nope.zip")

    def test_not_a_zip(self, tmp_path: Path):
        path = tmp_path / "fake.zip"
        path.write_text("definitely not a zip")
        with pytest.raises(ArchiveError):
            read_export(path)


class TestSinks:
    def test_zip_sink(self, tmp_path: Path):
        path = tmp_path / "out" / "vault.zip"
        with ZipArchiveSink(path) as sink:
            sink.write("entries/a.md", b"hello")

        with zipfile.ZipFile(path) as zf:
            assert zf.read("entries/a.md") == b"hello"
            assert zf.getinfo("entries/a.md").compress_type == zipfile.ZIP_DEFLATED

    def test_directory_sink(self, tmp_path: Path):
        sink = DirectorySink(tmp_path / "vault")
        sink.write("attachments/x.jpeg", b"data")
        sink.write("attachments/x.jpeg", b"new")

        target = tmp_path / "vault" / "attachments" / "x.jpeg"
        assert target.read_bytes() == b"new"
        assert [p.name for p in target.parent.iterdir()] == ["x.jpeg"]

    def test_open_sink_unknown_format(self, tmp_path: Path):
        with pytest.raises(ValueError):
            open_sink(tmp_path / "x", "tar")


class TestConvertExport:
    def test_zip_to_zip(self, export_zip: Path, tmp_path: Path):
        output = tmp_path / "vault.zip"
        on_progress = MagicMock()
        result = convert_export(
            export_zip, output, options=ConvertOptions(on_progress=on_progress)
        )

        assert result.converted == 2
        stages = [call.args[0].stage for call in on_progress.call_args_list]
        assert stages[0] == "reading"
        assert stages[-1] == "zipping"
        assert {"parsing", "media", "converting", "complete"} <= set(stages)
        with zipfile.ZipFile(output) as zf:
            names = set(zf.namelist())
            note = zf.read("entries/2024-01-15 Morning thoughts.md").decode("utf-8")
        assert names == {
            "attachments/f00d.jpeg",
            "attachments/cafe.mov",
            "entries/2024-01-15 Morning thoughts.md",
            "entries/2024-01-16 Evening.md",
        }
        assert "![[f00d.jpeg]]" in note

    def test_zip_to_directory(self, export_zip: Path, tmp_path: Path):
        vault = tmp_path / "vault"
        on_progress = MagicMock()
        convert_export(
            export_zip,
            vault,
            output_format="directory",
            options=ConvertOptions(on_progress=on_progress),
        )

        stages = [call.args[0].stage for call in on_progress.call_args_list]
        assert "zipping" not in stages

        assert (vault / "attachments" / "f00d.jpeg").read_bytes() == b"jpeg-bytes"
        assert (vault / "entries" / "2024-01-16 Evening.md").exists()

    def test_unreadable_export_writes_nothing(self, tmp_path: Path):
        bad = tmp_path / "bad.zip"
        with zipfile.ZipFile(bad, "w") as zf:
            zf.writestr("photos/a.jpeg", b"x")
        output = tmp_path / "vault.zip"

        with pytest.raises(MalformedArchiveError):
            convert_export(bad, output)
        assert not output.exists()

    def test_repeated_entries_get_unique_zip_members(self, tmp_path: Path):
        export = tmp_path / "repeats.zip"
        entry = {
            "uuid": "AAAA1111BBBB",
            "text": "# Same\nx",
            "creationDate": "2024-01-15T10:00:00Z",
        }
        with zipfile.ZipFile(export, "w") as zf:
            zf.writestr("Journal.json", json.dumps({"entries": [entry, entry, entry]}))
        output = tmp_path / "vault.zip"

        result = convert_export(export, output, options=ConvertOptions(allow_duplicates=True))

        assert result.converted == 3
        with zipfile.ZipFile(output) as zf:
            names = zf.namelist()
        assert len(names) == len(set(names)) == 3
        assert "entries/2024-01-15 Same (AAAA1111-2).md" in names
