"""Data models for a conversion run.

No I/O here. :class:`ConversionState` is the run-scoped accumulator
threaded through every pipeline stage; it is created by
:class:`~vaultport.convert.services.DayOneConverter` and discarded
when the run ends.
"""

from __future__ import annotations

from collections.abc import Callable

from pydantic import BaseModel, ConfigDict, Field

from vaultport.convert.media import MediaIndex
from vaultport.shared.errors import PipelineReport


class ProgressEvent(BaseModel):
    """A progress notification for UI collaborators."""

    stage: str
    message: str
    progress: float | None = None


ProgressCallback = Callable[[ProgressEvent], None]


class ConvertOptions(BaseModel):
    """The converter's whole configuration surface."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    allow_duplicates: bool = False
    on_progress: ProgressCallback | None = None


class ConversionState(BaseModel):
    """Mutable, single-writer state for one conversion run."""

    media_index: MediaIndex = Field(default_factory=dict)
    used_filenames: set[str] = Field(default_factory=set)
    seen_entries: dict[str, str] = Field(default_factory=dict)
    converted: int = 0
    skipped_duplicates: int = 0
    untitled_entries: int = 0
    report: PipelineReport = Field(default_factory=PipelineReport)


class ConvertedEntry(BaseModel):
    """One entry rendered as a vault note."""

    filename: str
    content: str

    @property
    def path(self) -> str:
        return f"entries/{self.filename}"


class ConversionResult(BaseModel):
    """Summary of a finished run."""

    journal_name: str = ""
    converted: int = 0
    skipped_duplicates: int = 0
    attachments: int = 0
    written: list[str] = Field(default_factory=list)
    report: PipelineReport = Field(default_factory=PipelineReport)

    @property
    def summary(self) -> str:
        text = f"Converted {self.converted} entries"
        if self.skipped_duplicates > 0:
            text += f", skipped {self.skipped_duplicates} duplicates"
        return text
