"""Tests for duplicate-entry detection."""

from vaultport.convert.dedup import content_fingerprint, is_duplicate, record_entry
from vaultport.convert.models import ConversionState
from vaultport.dayone.models import DayOneEntry


def _entry(uuid: str | None, text: str) -> DayOneEntry:
    return DayOneEntry(uuid=uuid, text=text, creation_date="2024-01-15T10:00:00Z")


class TestContentFingerprint:
    def test_stable(self):
        assert content_fingerprint("hello") == content_fingerprint("hello")

    def test_differs_for_different_text(self):
        assert content_fingerprint("hello") != content_fingerprint("hello!")


class TestDuplicateDetection:
    def test_unseen_entry_is_not_duplicate(self):
        state = ConversionState()
        assert is_duplicate(state, _entry("A", "text")) is False

    def test_same_identifier_and_text_is_duplicate(self):
        state = ConversionState()
        record_entry(state, _entry("A", "text"))
        assert is_duplicate(state, _entry("A", "text")) is True

    def test_same_identifier_different_text_is_not_duplicate(self):
        state = ConversionState()
        record_entry(state, _entry("A", "text"))
        assert is_duplicate(state, _entry("A", "edited text")) is False

    def test_entry_without_identifier_never_duplicate(self):
        state = ConversionState()
        record_entry(state, _entry(None, "text"))
        assert state.seen_entries == {}
        assert is_duplicate(state, _entry(None, "text")) is False

    def test_first_fingerprint_is_kept(self):
        state = ConversionState()
        record_entry(state, _entry("A", "first"))
        record_entry(state, _entry("A", "second"))
        assert state.seen_entries["A"] == content_fingerprint("first")
