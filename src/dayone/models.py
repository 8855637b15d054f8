"""Day One export models — pure Pydantic v2 data types.

Field names follow Python conventions; the camelCase keys used in the
export JSON are accepted through aliases. Timestamps are kept as the
strings found in the export so they can be written back verbatim;
use :attr:`DayOneEntry.created_at` for a parsed value.

Unknown keys are allowed everywhere: Day One adds fields between app
versions and the converter only reads the ones it knows.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

Number = int | float


class _DayOneModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class DayOneLocation(_DayOneModel):
    """Where an entry was written."""

    place_name: str | None = Field(None, alias="placeName")
    locality_name: str | None = Field(None, alias="localityName")
    administrative_area: str | None = Field(None, alias="administrativeArea")
    country: str | None = None
    latitude: Number | None = None
    longitude: Number | None = None


class DayOneWeather(_DayOneModel):
    """Weather snapshot taken when the entry was created."""

    conditions_description: str | None = Field(None, alias="conditionsDescription")
    weather_code: str | None = Field(None, alias="weatherCode")
    temperature_celsius: Number | None = Field(None, alias="temperatureCelsius")
    relative_humidity: Number | None = Field(None, alias="relativeHumidity")
    pressure_mb: Number | None = Field(None, alias="pressureMB")
    wind_speed_kph: Number | None = Field(None, alias="windSpeedKPH")
    wind_bearing: Number | None = Field(None, alias="windBearing")
    visibility_km: Number | None = Field(None, alias="visibilityKM")
    moon_phase_code: str | None = Field(None, alias="moonPhaseCode")


class DayOneActivity(_DayOneModel):
    """Motion activity snapshot."""

    activity_name: str | None = Field(None, alias="activityName")
    step_count: int | None = Field(None, alias="stepCount")


class DayOneMedia(_DayOneModel):
    """An attachment referenced from entry text by ``identifier``.

    ``md5`` is the content fingerprint Day One uses as the file stem
    inside the export's media folders.
    """

    identifier: str | None = None
    md5: str | None = None
    type: str | None = None


class DayOnePhoto(DayOneMedia):
    """A photo attachment with optional capture metadata."""

    camera_make: str | None = Field(None, alias="cameraMake")
    camera_model: str | None = Field(None, alias="cameraModel")
    lens_model: str | None = Field(None, alias="lensModel")
    date: str | None = None
    width: int | None = None
    height: int | None = None


class DayOneEntry(_DayOneModel):
    """One journal entry from the export."""

    uuid: str | None = None
    text: str = ""
    creation_date: str | None = Field(None, alias="creationDate")
    modified_date: str | None = Field(None, alias="modifiedDate")
    time_zone: str | None = Field(None, alias="timeZone")
    starred: bool = False
    is_pinned: bool = Field(False, alias="isPinned")
    legacy_pinned: bool = Field(False, alias="pinned")
    is_all_day: bool = Field(False, alias="isAllDay")
    tags: list[str] = Field(default_factory=list)
    location: DayOneLocation | None = None
    weather: DayOneWeather | None = None
    user_activity: DayOneActivity | None = Field(None, alias="userActivity")
    creation_device: str | None = Field(None, alias="creationDevice")
    creation_device_type: str | None = Field(None, alias="creationDeviceType")
    creation_device_model: str | None = Field(None, alias="creationDeviceModel")
    creation_os_name: str | None = Field(None, alias="creationOSName")
    creation_os_version: str | None = Field(None, alias="creationOSVersion")
    photos: list[DayOnePhoto] = Field(default_factory=list)
    videos: list[DayOneMedia] = Field(default_factory=list)
    audios: list[DayOneMedia] = Field(default_factory=list)
    pdf_attachments: list[DayOneMedia] = Field(
        default_factory=list, alias="pdfAttachments"
    )
    editing_time: Number | None = Field(None, alias="editingTime")

    @field_validator("text", mode="before")
    @classmethod
    def _none_text(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator(
        "tags", "photos", "videos", "audios", "pdf_attachments", mode="before"
    )
    @classmethod
    def _none_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("starred", "is_pinned", "legacy_pinned", "is_all_day", mode="before")
    @classmethod
    def _none_flag(cls, v: Any) -> Any:
        return False if v is None else v

    @property
    def created_at(self) -> datetime | None:
        """Creation time as an aware UTC datetime, if parsable."""
        if not self.creation_date:
            return None
        try:
            parsed = datetime.fromisoformat(self.creation_date)
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=UTC)
        return parsed.astimezone(UTC)


class DayOneExport(BaseModel):
    """Top-level journal JSON.

    Entries are kept as raw objects so that one malformed entry can be
    reported and skipped without rejecting the whole export.
    """

    model_config = ConfigDict(extra="allow")

    metadata: dict[str, Any] = Field(default_factory=dict)
    entries: list[Any] = Field(default_factory=list)

    @field_validator("metadata", mode="before")
    @classmethod
    def _none_metadata(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("entries", mode="before")
    @classmethod
    def _none_entries(cls, v: Any) -> Any:
        return [] if v is None else v
