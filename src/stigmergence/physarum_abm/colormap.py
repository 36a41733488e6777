"""Trail-to-pixel coloring strategies.

Three pure-numpy strategies, each returning a uint8 RGBA array shaped
(height, width, 4) with opaque alpha:
- `apply_colormap` : one normalized grid through a 256 entry palette LUT
- `apply_multi_population_colors` : additive blend of population colors
- `apply_color_trail` : carried-color channels, optionally over a blurred
  copy of the food color
"""
import logging
from functools import lru_cache
from typing import Optional, Sequence

import numpy as np
from scipy.ndimage import uniform_filter

from stigmergence.physarum_abm.config import COLORMAP_STOPS, RENDER
from stigmergence.physarum_abm.params import Colormap

logger = logging.getLogger(__name__)


def build_lut(stops: Sequence[Sequence[int]]) -> np.ndarray:
    """Interpolate color stops piecewise-linearly into a (256, 3) uint8 table.

    Rounds half up.
    """
    s = np.asarray(stops, dtype=np.float64)
    if s.ndim != 2 or s.shape[1] != 3 or s.shape[0] < 2:
        raise ValueError('stops must be an (N, 3) sequence with N >= 2')
    n = s.shape[0] - 1
    t = np.arange(256, dtype=np.float64) / 255.0
    idx = np.minimum(np.floor(t * n).astype(int), n - 1)
    frac = (t * n - idx)[:, None]
    lut = s[idx] + (s[idx + 1] - s[idx]) * frac
    return np.floor(lut + 0.5).astype(np.uint8)


@lru_cache(maxsize=None)
def get_lut(name) -> np.ndarray:
    """Cached LUT for a palette name or `Colormap` member."""
    try:
        cmap = Colormap(name)
    except ValueError:
        raise ValueError(f'unknown colormap {name!r}; choose from {[c.value for c in Colormap]}') from None
    lut = build_lut(COLORMAP_STOPS[cmap.value])
    lut.setflags(write=False)
    return lut


def _opaque(rgb: np.ndarray) -> np.ndarray:
    h, w = rgb.shape[:2]
    rgba = np.empty((h, w, 4), dtype=np.uint8)
    rgba[:, :, :3] = rgb
    rgba[:, :, 3] = 255
    return rgba


def _to_byte(values: np.ndarray) -> np.ndarray:
    # clamp then round half to even, matching a clamped byte store
    return np.rint(np.clip(values, 0.0, 255.0)).astype(np.uint8)


def apply_colormap(trail: np.ndarray, width: int, height: int, name='magma') -> np.ndarray:
    """Map a normalized [0, 1] grid through the named palette."""
    lut = get_lut(name)
    v = np.asarray(trail, dtype=np.float64).reshape(height, width)
    idx = np.clip(np.floor(v * 255.0), 0, 255).astype(np.intp)
    return _opaque(lut[idx])


def apply_multi_population_colors(trail_maps: np.ndarray, populations, width: int,
                                  height: int) -> np.ndarray:
    """Sum intensity * color over populations, clamped per channel at 255."""
    maps = np.asarray(trail_maps, dtype=np.float64)
    if maps.shape[0] != len(populations):
        raise ValueError(f'{maps.shape[0]} trail maps but {len(populations)} populations')
    colors = np.array([p.color for p in populations], dtype=np.float64)
    # (P, size) x (P, 3) -> (size, 3)
    rgb = maps.T @ colors
    return _opaque(_to_byte(rgb).reshape(height, width, 3))


def blur_channel(src: np.ndarray, width: int, height: int, radius: int) -> np.ndarray:
    """Box blur of diameter 2 * radius + 1 with edge replication."""
    grid = np.asarray(src, dtype=np.float32).reshape(height, width)
    if radius <= 0:
        return grid.ravel().copy()
    return uniform_filter(grid, size=2 * radius + 1, mode='nearest').ravel()


def apply_color_trail(color_trails: np.ndarray, width: int, height: int, food=None,
                      bg_strength: Optional[float] = None) -> np.ndarray:
    """Render normalized (3, size) carried-color channels.

    When `food` carries color, a heavily blurred copy of its RGB is added at
    `bg_strength` (default from config) as an ambient background.
    """
    rgb = np.asarray(color_trails, dtype=np.float64).copy()
    if food is not None and food.has_color:
        strength = RENDER['bg_strength'] if bg_strength is None else bg_strength
        radius = int(np.floor(max(width, height) * RENDER['bg_blur_fraction'] + 0.5))
        logger.debug('[RENDER] ambient background radius=%d strength=%.2f', radius, strength)
        for c, chan in enumerate((food.r, food.g, food.b)):
            rgb[c] += blur_channel(chan, width, height, radius) * strength
    out = _to_byte(rgb.T * 255.0)
    return _opaque(out.reshape(height, width, 3))
