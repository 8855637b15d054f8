"""Entry conversion — Day One entries to Obsidian notes.

Pipeline stages, each operating on the run-scoped ConversionState:
  media        — attachment identifier → output filename index
  frontmatter  — entry metadata → YAML frontmatter
  text         — Day One markdown → Obsidian markdown
  filenames    — unique, filesystem-safe note names
  dedup        — skip repeated entries within a run
"""

from vaultport.convert.models import (
    ConversionResult,
    ConversionState,
    ConvertedEntry,
    ConvertOptions,
    ProgressEvent,
)
from vaultport.convert.services import DayOneConverter, convert_archive, convert_export

__all__ = [
    "ConversionResult",
    "ConversionState",
    "ConvertOptions",
    "ConvertedEntry",
    "DayOneConverter",
    "ProgressEvent",
    "convert_archive",
    "convert_export",
]
