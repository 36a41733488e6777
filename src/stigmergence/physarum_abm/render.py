"""Render a `SimulationResult` to an RGBA buffer.

`select_render_mode` picks the strategy from what the result carries;
callers may force one with `mode=`. The buffer is handed to an external
encoder; `to_image` wraps it as an in-memory Pillow image without encoding.
"""
import logging
from enum import Enum
from typing import Callable, Dict, Optional

import numpy as np

from stigmergence.physarum_abm.colormap import (
    apply_color_trail,
    apply_colormap,
    apply_multi_population_colors,
)

logger = logging.getLogger(__name__)


class RenderMode(str, Enum):
    COLORMAP = 'colormap'
    POPULATIONS = 'populations'
    COLOR_TRAIL = 'color_trail'


def select_render_mode(result) -> RenderMode:
    """Carried color wins, then multiple populations, then the palette."""
    if result.has_color:
        return RenderMode.COLOR_TRAIL
    if result.population_count > 1:
        return RenderMode.POPULATIONS
    return RenderMode.COLORMAP


def _render_colormap(result, colormap, ambient):
    return apply_colormap(result.trail_maps[0], result.width, result.height, colormap)


def _render_populations(result, colormap, ambient):
    return apply_multi_population_colors(result.trail_maps, result.populations,
                                         result.width, result.height)


def _render_color_trail(result, colormap, ambient):
    if not result.has_color:
        raise ValueError('color_trail rendering needs a result with carried color')
    food = result.food if ambient else None
    return apply_color_trail(result.color_trails, result.width, result.height, food)


_RENDERERS: Dict[RenderMode, Callable[..., np.ndarray]] = {
    RenderMode.COLORMAP: _render_colormap,
    RenderMode.POPULATIONS: _render_populations,
    RenderMode.COLOR_TRAIL: _render_color_trail,
}


def render_result(result, colormap=None, mode: Optional[RenderMode] = None,
                  ambient: bool = True) -> np.ndarray:
    """Return a (height, width, 4) uint8 RGBA buffer for `result`.

    Parameters
    - colormap: palette for COLORMAP mode; defaults to `result.colormap`,
      the palette of the run that produced it
    - mode: force a strategy; forcing COLORMAP on a multi-population or
      color run renders population 0 through the palette
    - ambient: composite the blurred food color under carried-color trails
    """
    mode = select_render_mode(result) if mode is None else RenderMode(mode)
    if colormap is None:
        colormap = result.colormap
    logger.debug('[RENDER] %dx%d mode=%s', result.width, result.height, mode.value)
    return _RENDERERS[mode](result, colormap, ambient)


def to_image(rgba: np.ndarray):
    """Wrap an (H, W, 4) uint8 buffer as a Pillow RGBA image."""
    from PIL import Image

    arr = np.ascontiguousarray(rgba, dtype=np.uint8)
    if arr.ndim != 3 or arr.shape[2] != 4:
        raise ValueError(f'rgba must be shaped (H, W, 4), got {arr.shape}')
    return Image.fromarray(arr)
