"""Entry text normalization: Day One markdown → Obsidian markdown."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from vaultport.convert.media import MediaIndex

logger = logging.getLogger(__name__)

# Punctuation Day One protects with a backslash in plain text
ESCAPED_CHARS = ".-()[]#>_*`~!"

_ESCAPE_RE = re.compile(r"\\([" + re.escape(ESCAPED_CHARS) + r"])")
MOMENT_RE = re.compile(r"!\[\]\(dayone-moment://([A-F0-9]+)\)")
ZERO_WIDTH_SPACE = "\u200b"


def unescape_markdown(text: str) -> str:
    """Drop the backslash Day One puts before markdown punctuation."""
    return _ESCAPE_RE.sub(r"\1", text)


def strip_zero_width(text: str) -> str:
    return text.replace(ZERO_WIDTH_SPACE, "")


def rewrite_media_references(
    text: str,
    index: MediaIndex,
    *,
    on_missing: Callable[[str], None] | None = None,
) -> str:
    """Replace ``![](dayone-moment://ID)`` placeholders with wiki embeds.

    Identifiers found in ``index`` become ``![[<md5>.<type>]]``; unknown
    ones become an HTML comment so the gap stays visible in the note.
    """

    def _replace(match: re.Match[str]) -> str:
        identifier = match.group(1)
        ref = index.get(identifier)
        if ref is not None:
            return f"![[{ref.filename}]]"
        if on_missing is not None:
            on_missing(identifier)
        return f"<!-- Missing media: {identifier} -->"

    return MOMENT_RE.sub(_replace, text)


def normalize_body(
    text: str,
    index: MediaIndex,
    *,
    on_missing: Callable[[str], None] | None = None,
) -> str:
    """Full body pipeline: unescape, rewrite media, strip zero-width spaces."""
    text = unescape_markdown(text)
    text = rewrite_media_references(text, index, on_missing=on_missing)
    return strip_zero_width(text)
