"""Error taxonomy and per-run error reporting.

Archive-level failures are raised as exceptions and abort the run.
Per-entry problems are collected on a :class:`PipelineReport` so the
run can continue and the caller can surface them afterwards.
"""

from __future__ import annotations

from collections import Counter

from pydantic import BaseModel, Field


class VaultportError(Exception):
    """Base error for vaultport."""


class ArchiveError(VaultportError):
    """The export archive could not be opened or read."""


class MalformedArchiveError(ArchiveError):
    """The export archive contains no journal JSON."""


class JournalDecodeError(ArchiveError):
    """The journal JSON could not be decoded."""


class PipelineError(BaseModel):
    """A single recoverable problem recorded during a run."""

    stage: str
    message: str
    source: str = ""
    error_type: str = "error"


class PipelineReport(BaseModel):
    """Collects recoverable errors for one conversion run."""

    errors: list[PipelineError] = Field(default_factory=list)

    def add_error(
        self,
        stage: str,
        message: str,
        *,
        source: str = "",
        error_type: str = "error",
    ) -> None:
        self.errors.append(
            PipelineError(
                stage=stage,
                message=message,
                source=source,
                error_type=error_type,
            )
        )

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def by_type(self, error_type: str) -> list[PipelineError]:
        """Return recorded errors of one type."""
        return [e for e in self.errors if e.error_type == error_type]

    def summary(self) -> str:
        """One-line summary, e.g. ``"2 missing_media, 1 invalid_entry"``."""
        if not self.errors:
            return "no problems"
        counts = Counter(e.error_type for e in self.errors)
        return ", ".join(f"{n} {kind}" for kind, n in counts.most_common())
