"""I/O utilities for persisting rendered charts."""
from __future__ import annotations

import os

from PIL import Image

from .errors import OutputError


def ensure_outdir(out_dir: str) -> str:
    """Create the output directory if it does not exist."""

    try:
        os.makedirs(out_dir, exist_ok=True)
    except OSError as exc:
        raise OutputError(f"Unable to create output directory {out_dir!r}: {exc}") from exc
    return out_dir


def save_image(image: Image.Image, path: str) -> None:
    """Persist the PIL image to disk as PNG, overwriting any previous file."""

    try:
        image.save(path, format="PNG")
    except OSError as exc:
        raise OutputError(
            f"Unable to write result to {path!r}; make sure the directory exists: {exc}"
        ) from exc
