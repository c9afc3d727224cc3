#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Global configuration and constants for the Media Optimizer.

Values are read once at startup (environment first, then CLI overrides) into
an immutable ``Settings`` object that is handed to the run command.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple

from .errors import ConfigurationError

# Default extension list, matched case-sensitively
DEFAULT_EXTENSIONS = "jpg,JPG,jpeg,JPEG,png,PNG,gif,GIF,webp,WEBP,tif,TIF,tiff,TIFF"

# Directory layout (relative to the working directory)
DEFAULT_IMAGES_DIR = Path("./images")
DEFAULT_BACKUP_DIR = Path("./backup")
DEFAULT_OUTPUT_DIR = Path("./optimized")

# Eligibility defaults
DEFAULT_MIN_SIZE_KB = 800
KILOBYTE = 1024
HOUR_SECONDS = 60 * 60

# Transform defaults
DEFAULT_QUALITY = 80
DEFAULT_MAX_WIDTH = 2200
DEFAULT_MAX_HEIGHT = 2400
DEFAULT_FIT = "inside"
FIT_POLICIES = ("inside", "outside", "cover", "contain", "fill")

# Worker pool bounds
MIN_WORKERS = 1
MAX_WORKERS = 32

MODES = ("overwrite", "copy", "restore")

# Extension / format name -> Pillow format
FORMAT_MAP: Dict[str, str] = {
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "png": "PNG",
    "gif": "GIF",
    "webp": "WEBP",
    "tif": "TIFF",
    "tiff": "TIFF",
    "avif": "AVIF",
}


def default_workers() -> int:
    """Available parallelism clamped to the supported pool size."""
    return max(MIN_WORKERS, min(MAX_WORKERS, os.cpu_count() or 1))


@dataclass(frozen=True)
class EligibilityConfig:
    """Thresholds gating which files enter a transaction."""
    min_size: Optional[int] = None  # bytes
    max_age: Optional[float] = None  # seconds since last modification

    def __post_init__(self):
        if self.min_size is not None and self.min_size <= 0:
            raise ConfigurationError(f"min_size must be positive, got {self.min_size}")
        if self.max_age is not None and self.max_age <= 0:
            raise ConfigurationError(f"max_age must be positive, got {self.max_age}")


@dataclass(frozen=True)
class TransformConfig:
    """Options handed opaquely to the transform adapter."""
    quality: int = DEFAULT_QUALITY
    max_width: int = DEFAULT_MAX_WIDTH
    max_height: int = DEFAULT_MAX_HEIGHT
    fit: str = DEFAULT_FIT
    format: Optional[str] = None

    def __post_init__(self):
        if not 1 <= self.quality <= 100:
            raise ConfigurationError(f"quality must be between 1 and 100, got {self.quality}")
        if self.max_width <= 0 or self.max_height <= 0:
            raise ConfigurationError(
                f"max dimensions must be positive, got {self.max_width}x{self.max_height}"
            )
        if self.fit not in FIT_POLICIES:
            raise ConfigurationError(
                f"fit must be one of {', '.join(FIT_POLICIES)}, got {self.fit!r}"
            )
        if self.format is not None and self.format.lower() not in FORMAT_MAP:
            raise ConfigurationError(f"unsupported output format {self.format!r}")


@dataclass(frozen=True)
class Settings:
    """Immutable run configuration."""
    mode: str = "overwrite"
    images_dir: Path = DEFAULT_IMAGES_DIR
    backup_dir: Path = DEFAULT_BACKUP_DIR
    output_dir: Path = DEFAULT_OUTPUT_DIR
    extensions: Tuple[str, ...] = tuple(DEFAULT_EXTENSIONS.split(","))
    eligibility: EligibilityConfig = field(default_factory=EligibilityConfig)
    transform: TransformConfig = field(default_factory=TransformConfig)
    workers: int = field(default_factory=default_workers)
    quiet: bool = False
    owner: Optional[str] = None
    progress: bool = False

    def __post_init__(self):
        if not MIN_WORKERS <= self.workers <= MAX_WORKERS:
            raise ConfigurationError(
                f"workers must be between {MIN_WORKERS} and {MAX_WORKERS}, got {self.workers}"
            )
        if not self.extensions:
            raise ConfigurationError("at least one file extension is required")
        if self.mode == "overwrite" and self.transform.format:
            # In-place output keeps the original file name
            raise ConfigurationError(
                f"format override {self.transform.format!r} needs copy mode; "
                "overwrite keeps file names and extensions"
            )


def _env_flag(value: Optional[str]) -> bool:
    if value is None:
        return False
    return value.strip().lower() not in ("", "0", "false", "no", "off")


def _to_number(name: str, value, kind=int):
    try:
        return kind(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from None


def _pick(overrides: Mapping, env: Mapping, key: str, env_key: str, default=None):
    """CLI override wins over environment, environment over default."""
    value = overrides.get(key)
    if value is not None:
        return value
    value = env.get(env_key)
    if value is not None and value != "":
        return value
    return default


def load_settings(env: Optional[Mapping[str, str]] = None, **overrides) -> Settings:
    """
    Build validated settings from environment variables and CLI overrides.

    Args:
        env: Environment mapping (defaults to ``os.environ``)
        **overrides: Values from the command line; ``None`` means "not given"

    Returns:
        Frozen ``Settings`` instance

    Raises:
        ConfigurationError: if any value is malformed or out of range
    """
    # Local import keeps config importable without the scanning package
    from .scanning.discovery import parse_extensions

    env = os.environ if env is None else env

    mode = str(_pick(overrides, env, "mode", "MODE", "overwrite")).strip().lower()
    if mode not in MODES:
        raise ConfigurationError(f"mode must be one of {', '.join(MODES)}, got {mode!r}")

    min_size_kb = _to_number("MIN_SIZE", _pick(overrides, env, "min_size", "MIN_SIZE", DEFAULT_MIN_SIZE_KB), float)
    if min_size_kb < 0:
        raise ConfigurationError(f"MIN_SIZE must not be negative, got {min_size_kb}")
    max_age_hours = _pick(overrides, env, "max_age", "MAX_AGE")
    if max_age_hours is not None:
        max_age_hours = _to_number("MAX_AGE", max_age_hours, float)

    eligibility = EligibilityConfig(
        min_size=int(min_size_kb * KILOBYTE) if min_size_kb else None,
        max_age=max_age_hours * HOUR_SECONDS if max_age_hours is not None else None,
    )

    fmt = _pick(overrides, env, "format", "FORMAT")
    transform = TransformConfig(
        quality=_to_number("QUALITY", _pick(overrides, env, "quality", "QUALITY", DEFAULT_QUALITY)),
        max_width=_to_number("MAX_WIDTH", _pick(overrides, env, "max_width", "MAX_WIDTH", DEFAULT_MAX_WIDTH)),
        max_height=_to_number("MAX_HEIGHT", _pick(overrides, env, "max_height", "MAX_HEIGHT", DEFAULT_MAX_HEIGHT)),
        fit=str(_pick(overrides, env, "fit", "FIT", DEFAULT_FIT)).strip().lower(),
        format=str(fmt).strip().lower() if fmt else None,
    )

    workers = _pick(overrides, env, "workers", "CONCURRENCY")
    workers = default_workers() if workers is None else _to_number("CONCURRENCY", workers)

    quiet = overrides.get("quiet") or _env_flag(env.get("QUIET"))

    return Settings(
        mode=mode,
        images_dir=Path(overrides.get("images_dir") or DEFAULT_IMAGES_DIR),
        backup_dir=Path(overrides.get("backup_dir") or DEFAULT_BACKUP_DIR),
        output_dir=Path(overrides.get("output_dir") or DEFAULT_OUTPUT_DIR),
        extensions=parse_extensions(str(_pick(overrides, env, "extensions", "EXTENSIONS", DEFAULT_EXTENSIONS))),
        eligibility=eligibility,
        transform=transform,
        workers=workers,
        quiet=bool(quiet),
        owner=_pick(overrides, env, "owner", "OWNER") or None,
        progress=bool(overrides.get("progress")),
    )
