"""Day One export format — JSON models and archive collaborators."""

from vaultport.dayone.archive import (
    MEDIA_FOLDERS,
    OUTPUT_FORMATS,
    ArchiveSink,
    DecodedArchive,
    DirectorySink,
    MediaFile,
    MemorySink,
    ZipArchiveSink,
    open_sink,
    read_export,
)
from vaultport.dayone.models import (
    DayOneActivity,
    DayOneEntry,
    DayOneExport,
    DayOneLocation,
    DayOneMedia,
    DayOnePhoto,
    DayOneWeather,
)

__all__ = [
    "MEDIA_FOLDERS",
    "ArchiveSink",
    "DayOneActivity",
    "DayOneEntry",
    "DayOneExport",
    "DayOneLocation",
    "DayOneMedia",
    "DayOnePhoto",
    "DayOneWeather",
    "DecodedArchive",
    "DirectorySink",
    "MediaFile",
    "MemorySink",
    "OUTPUT_FORMATS",
    "ZipArchiveSink",
    "open_sink",
    "read_export",
]
