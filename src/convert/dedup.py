"""Duplicate-entry detection across one run.

An entry is a duplicate when its identifier was already converted
with exactly the same body text. Fingerprints are best-effort: two
different texts colliding would wrongly skip an entry, which is an
accepted risk.
"""

from __future__ import annotations

import hashlib

from vaultport.convert.models import ConversionState
from vaultport.dayone.models import DayOneEntry


def content_fingerprint(text: str) -> str:
    """Stable short fingerprint of entry text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:16]


def is_duplicate(state: ConversionState, entry: DayOneEntry) -> bool:
    """Whether ``entry`` repeats an already converted entry.

    Entries without an identifier are never duplicates.
    """
    if not entry.uuid:
        return False
    seen = state.seen_entries.get(entry.uuid)
    return seen is not None and seen == content_fingerprint(entry.text)


def record_entry(state: ConversionState, entry: DayOneEntry) -> None:
    """Remember a converted entry; the first fingerprint per identifier is kept."""
    if not entry.uuid:
        return
    state.seen_entries.setdefault(entry.uuid, content_fingerprint(entry.text))
