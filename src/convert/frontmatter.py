"""YAML frontmatter for converted entries.

:func:`build_frontmatter` projects a Day One entry into an ordered
dict holding only the fields that carry data; :func:`render_frontmatter`
serializes it as a block-style YAML document between ``---`` lines.
"""

from __future__ import annotations

import math
import re
from types import MappingProxyType
from typing import Any

import yaml

from vaultport.dayone.models import DayOneEntry, DayOnePhoto

WEATHER_CONDITIONS = MappingProxyType(
    {
        "clear": "Clear",
        "clear-day": "Clear",
        "clear-night": "Clear Night",
        "cloudy": "Cloudy",
        "cloudy-night": "Cloudy Night",
        "partly-cloudy": "Partly Cloudy",
        "partly-cloudy-day": "Partly Cloudy",
        "partly-cloudy-night": "Partly Cloudy Night",
        "rain": "Rain",
        "snow": "Snow",
        "sleet": "Sleet",
        "wind": "Windy",
        "fog": "Fog",
        "hail": "Hail",
        "thunderstorm": "Thunderstorm",
    }
)

MOON_PHASES = MappingProxyType(
    {
        "new": "New Moon",
        "waxing-crescent": "Waxing Crescent",
        "first-quarter": "First Quarter",
        "waxing-gibbous": "Waxing Gibbous",
        "full": "Full Moon",
        "waning-gibbous": "Waning Gibbous",
        "last-quarter": "Last Quarter",
        "waning-crescent": "Waning Crescent",
    }
)

DEFAULT_PHOTO_KIND = "jpeg"

_TAG_SPACE_RE = re.compile(r"\s+")
_TAG_STRIP_RE = re.compile(r"[^\w\-]")


class FrontmatterDumper(yaml.SafeDumper):
    """SafeDumper that leaves ISO timestamps unquoted and never emits aliases."""

    def ignore_aliases(self, data: Any) -> bool:
        return True


FrontmatterDumper.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first, resolvers in yaml.SafeDumper.yaml_implicit_resolvers.items()
}


def sanitize_tag(tag: str) -> str:
    """Turn a Day One tag into an Obsidian tag (``"Road Trip!"`` → ``"road-trip"``)."""
    tag = _TAG_SPACE_RE.sub("-", tag)
    return _TAG_STRIP_RE.sub("", tag).lower()


def _compact(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    """Keep only pairs whose value is truthy, preserving order."""
    return {key: value for key, value in pairs if value}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _positive(value: float | None) -> float | None:
    return value if value is not None and value > 0 else None


def _location(entry: DayOneEntry) -> dict[str, Any]:
    loc = entry.location
    if loc is None:
        return {}
    return _compact(
        [
            ("name", loc.place_name),
            ("locality", loc.locality_name),
            ("region", loc.administrative_area),
            ("country", loc.country),
            ("latitude", loc.latitude),
            ("longitude", loc.longitude),
        ]
    )


def _weather(entry: DayOneEntry) -> dict[str, Any]:
    w = entry.weather
    if w is None:
        return {}
    conditions = w.conditions_description or WEATHER_CONDITIONS.get(w.weather_code or "")
    return _compact(
        [
            ("conditions", conditions),
            ("temperature_c", w.temperature_celsius),
            ("humidity", _positive(w.relative_humidity)),
            ("pressure_mb", w.pressure_mb),
            ("wind_speed_kph", w.wind_speed_kph),
            ("wind_bearing", w.wind_bearing),
            ("visibility_km", _positive(w.visibility_km)),
            ("moon_phase", MOON_PHASES.get(w.moon_phase_code or "")),
        ]
    )


def _activity(entry: DayOneEntry) -> dict[str, Any]:
    activity = entry.user_activity
    if activity is None:
        return {}
    return _compact([("type", activity.activity_name), ("steps", activity.step_count)])


def _device(entry: DayOneEntry) -> dict[str, Any]:
    return _compact(
        [
            ("name", entry.creation_device),
            ("type", entry.creation_device_type),
            ("model", entry.creation_device_model),
            ("os", entry.creation_os_name),
            ("os_version", entry.creation_os_version),
        ]
    )


def photo_metadata(photo: DayOnePhoto) -> dict[str, Any]:
    """Frontmatter record for one photo."""
    camera = " ".join(p for p in (photo.camera_make, photo.camera_model) if p).strip()
    dimensions = f"{photo.width}x{photo.height}" if photo.width and photo.height else None
    file = f"{photo.md5}.{photo.type or DEFAULT_PHOTO_KIND}" if photo.md5 else None
    return _compact(
        [
            ("file", file),
            ("identifier", photo.identifier),
            ("camera", camera),
            ("lens", photo.lens_model),
            ("date", photo.date),
            ("dimensions", dimensions),
        ]
    )


def build_frontmatter(entry: DayOneEntry) -> dict[str, Any]:
    """Project an entry into ordered frontmatter fields.

    Absent or falsy values produce no key. Flags appear only when true.
    Nested sections (location, weather, activity, device) appear only
    when at least one of their fields is present.
    """
    fm: dict[str, Any] = _compact(
        [
            ("uuid", entry.uuid),
            ("created", entry.creation_date),
            ("modified", entry.modified_date),
            ("timezone", entry.time_zone),
            ("starred", entry.starred),
            ("pinned", entry.is_pinned or entry.legacy_pinned),
            ("all_day", entry.is_all_day),
        ]
    )

    if entry.tags:
        fm["tags"] = [sanitize_tag(t) for t in entry.tags]

    for key, section in (
        ("location", _location(entry)),
        ("weather", _weather(entry)),
        ("activity", _activity(entry)),
        ("device", _device(entry)),
    ):
        if section:
            fm[key] = section

    if entry.photos:
        fm["photos"] = [photo_metadata(p) for p in entry.photos]

    editing_time = _positive(entry.editing_time)
    if editing_time is not None:
        fm["editing_time_seconds"] = _round_half_up(editing_time)

    return fm


def render_frontmatter(fm: dict[str, Any]) -> str:
    """Serialize frontmatter as ``---\\n<yaml>---\\n\\n``."""
    body = ""
    if fm:
        body = yaml.dump(
            fm,
            Dumper=FrontmatterDumper,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
            width=float("inf"),
        )
    return f"---\n{body}---\n\n"
