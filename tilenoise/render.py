"""
render.py

Samples a noise field over a square grid and saves the result as a grayscale
PNG or TIFF image. The fields themselves never touch arrays or files; this
module is their consumer.
"""

import logging
import os
from typing import Callable, List, Optional

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)


def halving_weights(count: int) -> List[float]:
    """Octave weights ``1/2, 1/4, 1/8, ...`` for ``count`` octaves."""
    if count < 1:
        raise ValueError(f"count must be positive, got {count}")
    return [1.0 / 2 ** (i + 1) for i in range(count)]


def sample_field(field, size: int, progress: Optional[Callable[[int], None]] = None) -> np.ndarray:
    """
    Evaluate ``field.at`` on a ``size x size`` grid covering one period.

    Parameters:
    -----------
    field    : object with an ``at((x, y))`` method
        GradientNoiseField, WorleyField or anything with the same interface.
    size     : int
        Number of samples per side. Sample ``(i, j)`` is taken at
        ``(j / size, i / size)``, so the image tiles.
    progress : callable or None
        Called with the row index after each row has been sampled.

    Returns:
    --------
    np.ndarray
        ``float32`` array of shape ``(size, size)``, indexed ``[y, x]``.
    """
    if size <= 0:
        raise ValueError(f"size must be positive, got {size}")

    noise_map = np.empty((size, size), dtype=np.float32)
    coords = np.linspace(0, 1, size, endpoint=False)
    for row, y in enumerate(coords):
        for col, x in enumerate(coords):
            noise_map[row, col] = field.at((float(x), float(y)))
        if progress is not None:
            progress(row)
    return noise_map


def normalize_map(noise_map: np.ndarray) -> np.ndarray:
    """Min-max normalize to [0, 1]; a flat map becomes all zeros."""
    min_val, max_val = np.min(noise_map), np.max(noise_map)
    if max_val == min_val:
        logger.warning(f"Noise map has no variation: min={min_val}, max={max_val}")
        return np.zeros_like(noise_map, dtype=np.float32)
    return ((noise_map - min_val) / (max_val - min_val)).astype(np.float32)


def save_noise_map(noise_map: np.ndarray, filename: str = "noise.png"):
    """
    Save a 2D array (values in [0,1]) as a grayscale image. The format
    follows the extension: ``.tif``/``.tiff`` writes TIFF, anything else PNG.
    """
    clipped = np.clip(noise_map, 0.0, 1.0)
    img = Image.fromarray((clipped * 255).astype(np.uint8))

    directory = os.path.dirname(filename)
    if directory:
        os.makedirs(directory, exist_ok=True)

    ext = os.path.splitext(filename)[1].lower()
    if ext in (".tif", ".tiff"):
        img.save(filename, format="TIFF")
    else:
        img.save(filename, format="PNG")

    if not os.path.exists(filename):
        raise IOError(f"File not found after saving: {filename}")

    logger.debug(f"Saved noise map to: {filename}")
