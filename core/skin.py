"""
Skin-tone classification over RGB values.

Four empirical bands (light, medium, dark, olive) are OR-ed together. The band
functions work on plain ints and on numpy arrays alike, so the scalar predicate
and the per-pixel mask share one definition.
"""
from __future__ import annotations
import numpy as np


def _light(r, g, b):
    spread = np.maximum(np.maximum(r, g), b) - np.minimum(np.minimum(r, g), b)
    return ((r > 95) & (g > 40) & (b > 20) & (spread > 15)
            & (abs(r - g) > 15) & (r > g) & (r > b))


def _medium(r, g, b):
    return ((r > 80) & (r < 220) & (g > 50) & (g < 180) & (b > 30) & (b < 150)
            & (r > g) & (g > b) & (r - g > 10))


def _dark(r, g, b):
    return ((r > 45) & (r < 120) & (g > 30) & (g < 100) & (b > 20) & (b < 80)
            & (r > g) & (g >= b) & (r - g > 5))


def _olive(r, g, b):
    return ((r > 100) & (r < 200) & (g > 80) & (g < 170) & (b > 60) & (b < 140)
            & (abs(r - g) < 30) & (r > b) & (g > b))


SKIN_BANDS = {
    "light": _light,
    "medium": _medium,
    "dark": _dark,
    "olive": _olive,
}


def is_skin_tone(r: int, g: int, b: int) -> bool:
    """Return True if the RGB triple falls in any skin-tone band."""
    r, g, b = int(r), int(g), int(b)
    return any(bool(band(r, g, b)) for band in SKIN_BANDS.values())


def skin_mask(pixels: np.ndarray) -> np.ndarray:
    """
    Boolean mask of skin-tone pixels.

    Args:
        pixels: (H, W, 3|4) uint8 array in RGB(A) channel order.

    Returns:
        (H, W) bool array.
    """
    # int16 so channel differences cannot wrap around
    r = pixels[..., 0].astype(np.int16)
    g = pixels[..., 1].astype(np.int16)
    b = pixels[..., 2].astype(np.int16)
    mask = np.zeros(pixels.shape[:2], dtype=bool)
    for band in SKIN_BANDS.values():
        mask |= band(r, g, b)
    return mask
