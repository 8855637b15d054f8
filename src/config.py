"""Unified configuration loaded from .vaultport.toml, env vars, and CLI flags.

Loading order: defaults → TOML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from vaultport.convert.models import ConvertOptions, ProgressCallback

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".vaultport.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
]
GLOBAL_CONFIG = Path.home() / ".config" / "vaultport" / "config.toml"


class ConvertSectionConfig(BaseModel):
    """[convert] section."""

    allow_duplicates: bool = False


class OutputConfig(BaseModel):
    """[output] section."""

    directory: str = "."
    format: Literal["zip", "directory"] = "zip"
    compression_level: int = Field(default=6, ge=0, le=9)


class VaultportConfig(BaseModel):
    """Top-level configuration model."""

    convert: ConvertSectionConfig = Field(default_factory=ConvertSectionConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    def to_convert_options(self, on_progress: ProgressCallback | None = None) -> ConvertOptions:
        """Build the converter options for one run."""
        return ConvertOptions(
            allow_duplicates=self.convert.allow_duplicates,
            on_progress=on_progress,
        )


def load_config(path: str | Path | None = None) -> VaultportConfig:
    """Load configuration from a TOML file.

    Search order:
    1. Explicit path (if provided)
    2. .vaultport.toml in CWD
    3. ~/.config/vaultport/config.toml

    Then overlay environment variables.

    Args:
        path: Explicit path to a TOML file.

    Returns:
        Merged VaultportConfig.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        for search_dir in CONFIG_SEARCH_PATHS:
            candidate = search_dir / CONFIG_FILENAME
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break
        if not data and GLOBAL_CONFIG.exists():
            data = _load_toml(GLOBAL_CONFIG)
            logger.info("Loaded config from %s", GLOBAL_CONFIG)

    config = VaultportConfig.model_validate(data) if data else VaultportConfig()

    return _apply_env_vars(config)


def merge_cli_overrides(config: VaultportConfig, **cli_kwargs: object) -> VaultportConfig:
    """Overlay explicitly-set CLI flags onto the config.

    Only overrides values where the CLI flag was explicitly provided
    (i.e., not None).

    Args:
        config: Base config.
        **cli_kwargs: CLI flag values, e.g. ``allow_duplicates``,
            ``output_directory``, ``output_format``.

    Returns:
        Updated config with CLI overrides applied.
    """
    data = config.model_dump()

    mapping: dict[str, tuple[str, str]] = {
        "allow_duplicates": ("convert", "allow_duplicates"),
        "output_directory": ("output", "directory"),
        "output_format": ("output", "format"),
        "compression_level": ("output", "compression_level"),
    }

    for key, value in cli_kwargs.items():
        if value is None:
            continue
        if key in mapping:
            section, field = mapping[key]
            data[section][field] = value

    return VaultportConfig.model_validate(data)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: VaultportConfig) -> VaultportConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "VAULTPORT_OUTPUT_DIR": ("output", "directory"),
        "VAULTPORT_OUTPUT_FORMAT": ("output", "format"),
    }

    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[section][field] = value

    dup_raw = os.environ.get("VAULTPORT_ALLOW_DUPLICATES")
    if dup_raw is not None:
        data["convert"]["allow_duplicates"] = dup_raw.lower() in ("true", "1", "yes")

    return VaultportConfig.model_validate(data)
