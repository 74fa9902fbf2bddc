"""Unified configuration loaded from .postkit.toml, env vars, and CLI flags.

Loading order: defaults → TOML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from postkit.content.duplicates import DEFAULT_THRESHOLD
from postkit.content.models import DEFAULT_LAYOUT, DEFAULT_TITLE
from postkit.content.store import DEFAULT_EXTENSIONS
from postkit.renderers import RendererKind

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".postkit.toml"
GLOBAL_CONFIG_PATH = Path.home() / ".config" / "postkit" / "config.toml"


class SiteConfig(BaseModel):
    """[site] section."""

    source_dir: str = "."
    extensions: list[str] = Field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    default_layout: str = DEFAULT_LAYOUT
    default_title: str = DEFAULT_TITLE


class BuildConfig(BaseModel):
    """[build] section."""

    output_dir: str = "./_site"
    renderer: RendererKind = RendererKind.MARKDOWN
    workers: int = Field(default=0, ge=0)


class DuplicatesConfig(BaseModel):
    """[duplicates] section."""

    threshold: float = Field(default=DEFAULT_THRESHOLD, gt=0, le=1)


class PostkitConfig(BaseModel):
    """Top-level configuration model."""

    site: SiteConfig = Field(default_factory=SiteConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)
    duplicates: DuplicatesConfig = Field(default_factory=DuplicatesConfig)

    @property
    def source_path(self) -> Path:
        return Path(self.site.source_dir)

    @property
    def output_path(self) -> Path:
        return Path(self.build.output_dir)


def load_config(path: str | Path | None = None) -> PostkitConfig:
    """Load configuration from a TOML file.

    Search order:
    1. Explicit path (if provided)
    2. .postkit.toml in CWD
    3. ~/.config/postkit/config.toml

    Then overlay environment variables.

    Args:
        path: Explicit path to a TOML file.

    Returns:
        Merged PostkitConfig.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        for candidate in (Path(CONFIG_FILENAME), GLOBAL_CONFIG_PATH):
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break

    config = PostkitConfig()
    if data:
        try:
            config = PostkitConfig.model_validate(data)
        except ValidationError as exc:
            logger.warning("Invalid config, using defaults: %s", exc)

    return _apply_env_vars(config)


def merge_cli_overrides(config: PostkitConfig, **cli_kwargs: object) -> PostkitConfig:
    """Overlay explicitly-set CLI flags onto the config.

    Only overrides values where the CLI flag was explicitly provided
    (i.e., not None).

    Args:
        config: Base config.
        **cli_kwargs: CLI flag values, e.g. ``source_dir``, ``renderer``.

    Returns:
        Updated config with CLI overrides applied.
    """
    data = config.model_dump()

    mapping: dict[str, tuple[str, str]] = {
        "source_dir": ("site", "source_dir"),
        "default_layout": ("site", "default_layout"),
        "default_title": ("site", "default_title"),
        "output_dir": ("build", "output_dir"),
        "renderer": ("build", "renderer"),
        "workers": ("build", "workers"),
        "threshold": ("duplicates", "threshold"),
    }

    for key, value in cli_kwargs.items():
        if value is None:
            continue
        if key not in mapping:
            raise TypeError(f"Unknown override: {key}")
        section, field = mapping[key]
        data[section][field] = str(value) if isinstance(value, Path) else value

    return PostkitConfig.model_validate(data)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: PostkitConfig) -> PostkitConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "POSTKIT_SOURCE_DIR": ("site", "source_dir"),
        "POSTKIT_DEFAULT_LAYOUT": ("site", "default_layout"),
        "POSTKIT_DEFAULT_TITLE": ("site", "default_title"),
        "POSTKIT_OUTPUT_DIR": ("build", "output_dir"),
        "POSTKIT_RENDERER": ("build", "renderer"),
    }

    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[section][field] = value

    workers_raw = os.environ.get("POSTKIT_WORKERS")
    if workers_raw is not None:
        try:
            data["build"]["workers"] = int(workers_raw)
        except ValueError:
            logger.warning("Ignoring non-integer POSTKIT_WORKERS=%r", workers_raw)

    return PostkitConfig.model_validate(data)
