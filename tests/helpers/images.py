"""Synthetic image helpers shared by unit and integration tests."""

from __future__ import annotations

import io
import os
import time
from pathlib import Path

import numpy as np
from PIL import Image


def make_image_bytes(w=4, h=4, color=(128, 64, 32), fmt="JPEG") -> bytes:
    arr = np.zeros((h, w, 3), dtype=np.uint8)
    arr[:, :] = color
    img = Image.fromarray(arr)
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def write_source(root: Path, name: str, data: bytes, age_seconds: float = 60.0) -> Path:
    """Write an original and backdate it so freshly written cache entries are newer."""
    path = root / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    past = time.time() - age_seconds
    os.utime(path, (past, past))
    return path


def open_image(data: bytes) -> Image.Image:
    img = Image.open(io.BytesIO(data))
    img.load()
    return img
