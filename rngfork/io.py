"""Output serialization for generated scene artifacts."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import numpy as np
from PIL import Image


def resolve_output_dir(out_root: str | Path, canonical_seed: str, *, overwrite: bool) -> Path:
    """Create and return the output directory for one run."""

    target = Path(out_root) / canonical_seed
    if target.exists() and any(target.iterdir()) and not overwrite:
        raise FileExistsError(
            f"Output directory already exists and is not empty: {target}. Use --overwrite to replace files."
        )
    target.mkdir(parents=True, exist_ok=True)
    return target


def float_preview_u8(values: np.ndarray) -> np.ndarray:
    """Map float values to 8-bit grayscale over their full range."""

    lo = float(np.min(values))
    hi = float(np.max(values))
    scale = max(hi - lo, 1e-6)
    norm = np.clip((values - lo) / scale, 0.0, 1.0)
    return np.round(norm * 255.0).astype(np.uint8)


def write_png_u8(path: str | Path, raster_u8: np.ndarray) -> None:
    image = Image.fromarray(raster_u8.astype(np.uint8))
    image.save(Path(path))


def write_json(path: str | Path, payload: dict[str, Any]) -> None:
    text = json.dumps(payload, indent=2, sort_keys=True)
    Path(path).write_text(text + "\n", encoding="utf-8")
