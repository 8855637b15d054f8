"""Output filename resolution for converted entries.

Notes are named ``"<YYYY-MM-DD> <title>.md"``. The title is the
entry's first ``#`` heading, else its first non-blank line; entries
without either fall back to a short identifier. Names already taken
in the run get the identifier fragment appended.
"""

from __future__ import annotations

import logging
import re

from vaultport.convert.models import ConversionState
from vaultport.convert.text import MOMENT_RE, strip_zero_width, unescape_markdown
from vaultport.dayone.models import DayOneEntry

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 50
ID_FRAGMENT_LENGTH = 8

_HEADING_RE = re.compile(r"^#\s+(.+?)(?:\n|\\n|$)", re.MULTILINE)
_LOOSE_MOMENT_RE = re.compile(r"!\[\]\(dayone-moment://[^)]+\)")
_LEADING_HASHES_RE = re.compile(r"^#+\s*")
_UNSAFE_CHARS_RE = re.compile(r'[/\\:*?"<>|]')
_WHITESPACE_RE = re.compile(r"\s+")


def extract_title(text: str) -> str | None:
    """Pick a title from entry text, or ``None`` if nothing usable."""
    if not text:
        return None

    heading = _HEADING_RE.search(text)
    if heading:
        return unescape_markdown(heading.group(1)).strip()

    first_line = next((line for line in text.split("\n") if line.strip()), None)
    if first_line is None:
        return None

    title = _LOOSE_MOMENT_RE.sub("", first_line)
    title = _LEADING_HASHES_RE.sub("", title).strip()
    if not title:
        return None
    return unescape_markdown(title)[:TITLE_MAX_LENGTH]


def sanitize_title(title: str) -> str:
    """Make a title safe for use as a filename component."""
    safe = _UNSAFE_CHARS_RE.sub("-", strip_zero_width(title))
    safe = _WHITESPACE_RE.sub(" ", safe).strip()
    return safe[:TITLE_MAX_LENGTH].rstrip()


def _id_fragment(state: ConversionState, entry: DayOneEntry) -> str:
    if entry.uuid:
        return entry.uuid[:ID_FRAGMENT_LENGTH]
    state.untitled_entries += 1
    return f"entry-{state.untitled_entries:04d}"


def resolve_filename(state: ConversionState, entry: DayOneEntry) -> str:
    """Allocate a unique ``.md`` filename for ``entry`` in this run.

    The entry must have a parsable creation date. Entries without an
    identifier use a run-local ``entry-NNNN`` counter instead of the
    identifier fragment. A name that is still taken after the
    ``" (<id>)"`` suffix gets a counter: ``" (<id>-2)"``, ``" (<id>-3)"``.
    """
    created = entry.created_at
    if created is None:
        raise ValueError(f"Entry {entry.uuid!r} has no usable creation date")
    date_str = created.strftime("%Y-%m-%d")

    title = extract_title(entry.text)
    safe_title = sanitize_title(title) if title else ""
    fragment: str | None = None
    if safe_title:
        base = f"{date_str} {safe_title}"
    else:
        fragment = _id_fragment(state, entry)
        base = f"{date_str} {fragment}"

    filename = f"{base}.md"
    if filename in state.used_filenames:
        if fragment is None:
            fragment = _id_fragment(state, entry)
        filename = f"{base} ({fragment}).md"
        suffix = 2
        while filename in state.used_filenames:
            filename = f"{base} ({fragment}-{suffix}).md"
            suffix += 1
        logger.debug("Filename collision, using %s", filename)

    state.used_filenames.add(filename)
    return filename
