#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Image transform adapter for the Media Optimizer.

The core only depends on the ``Transformer`` protocol: take an input path, an
output path and a ``TransformConfig``, return a ``TransformResult``. The Pillow
implementation writes to a temporary file beside the output and renames it
into place, so a failed transform never leaves a partial file at the output
path even when output and input are the same file.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Tuple

from PIL import Image, ImageOps

from ..config import FORMAT_MAP, TransformConfig
from ..storage.fs import remove_quietly, temp_path_for

logger = logging.getLogger(__name__)
logging.getLogger("PIL").setLevel(logging.WARNING)

RESAMPLE = Image.Resampling.LANCZOS


@dataclass(frozen=True)
class TransformResult:
    """Structured outcome of a single transform call."""
    ok: bool
    output_size: int = 0
    error: Optional[str] = None

    @classmethod
    def success(cls, output_size: int) -> 'TransformResult':
        return cls(ok=True, output_size=output_size)

    @classmethod
    def failure(cls, error: str) -> 'TransformResult':
        return cls(ok=False, error=error)


class Transformer(Protocol):
    def transform(self, input_path: Path, output_path: Path,
                  config: TransformConfig) -> TransformResult:
        ...


def resolve_format(output_path: Path, config: TransformConfig) -> str:
    """
    Pillow format name from the override, or else the output extension.

    The input may be a scratch copy with a temporary name, so only the output
    path carries the intended extension.
    """
    name = config.format or Path(output_path).suffix.lstrip(".")
    try:
        return FORMAT_MAP[name.lower()]
    except KeyError:
        raise ValueError(f"unsupported image format {name!r}") from None


def fit_size(size: Tuple[int, int], max_width: int, max_height: int,
             fit: str) -> Tuple[int, int]:
    """
    Target dimensions for ``fit`` without ever enlarging the image.

    ``inside`` keeps the aspect ratio and fits within the box, ``outside``
    keeps it and covers the box, ``cover``/``contain``/``fill`` produce at most
    the box itself.
    """
    w, h = size
    if fit == "inside":
        scale = min(max_width / w, max_height / h, 1.0)
    elif fit == "outside":
        scale = min(max(max_width / w, max_height / h), 1.0)
    elif fit == "contain":
        if w <= max_width and h <= max_height:
            return w, h
        return max_width, max_height
    else:  # cover, fill
        return min(w, max_width), min(h, max_height)
    return max(1, round(w * scale)), max(1, round(h * scale))


class PillowTransformer:
    """Resize and re-encode images with Pillow."""

    def transform(self, input_path: Path, output_path: Path,
                  config: TransformConfig) -> TransformResult:
        output_path = Path(output_path)
        tmp = None
        try:
            fmt = resolve_format(output_path, config)
            with Image.open(input_path) as source:
                if getattr(source, "is_animated", False):
                    raise ValueError("animated images are not supported")
                icc_profile = source.info.get("icc_profile")
                im = ImageOps.exif_transpose(source)
                im = self._resize(im, config)
                im = self._prepare_mode(im, fmt)

                tmp = temp_path_for(output_path)
                im.save(tmp, format=fmt, **self._save_options(fmt, config, icc_profile))
            os.replace(tmp, output_path)
            tmp = None
            return TransformResult.success(os.stat(output_path).st_size)
        except Exception as e:
            logger.debug("Transform failed for %s", input_path, exc_info=True)
            return TransformResult.failure(f"{type(e).__name__}: {e}")
        finally:
            if tmp is not None:
                remove_quietly(tmp)

    def _resize(self, im: Image.Image, config: TransformConfig) -> Image.Image:
        target = fit_size(im.size, config.max_width, config.max_height, config.fit)
        if target == im.size:
            return im
        if config.fit == "cover":
            return ImageOps.fit(im, target, RESAMPLE)
        if config.fit == "contain":
            return ImageOps.pad(im, target, RESAMPLE)
        return im.resize(target, RESAMPLE)

    @staticmethod
    def _prepare_mode(im: Image.Image, fmt: str) -> Image.Image:
        if fmt == "JPEG" and im.mode not in ("RGB", "L", "CMYK"):
            return im.convert("RGB")
        if fmt in ("WEBP", "AVIF") and im.mode not in ("RGB", "RGBA"):
            has_alpha = im.mode in ("LA", "PA") or "transparency" in im.info
            return im.convert("RGBA" if has_alpha else "RGB")
        if fmt == "PNG" and im.mode == "CMYK":
            return im.convert("RGB")
        return im

    @staticmethod
    def _save_options(fmt: str, config: TransformConfig,
                      icc_profile: Optional[bytes]) -> Dict[str, Any]:
        options: Dict[str, Any] = {}
        if fmt == "JPEG":
            options.update(quality=config.quality, optimize=True, progressive=True)
        elif fmt == "WEBP":
            options.update(quality=config.quality, method=6)
        elif fmt == "AVIF":
            options.update(quality=config.quality)
        elif fmt == "PNG":
            options.update(optimize=True, compress_level=9)
        elif fmt == "GIF":
            options.update(optimize=True)
        elif fmt == "TIFF":
            options.update(compression="tiff_lzw")
        if icc_profile and fmt in ("JPEG", "WEBP", "PNG", "TIFF", "AVIF"):
            options["icc_profile"] = icc_profile
        return options
