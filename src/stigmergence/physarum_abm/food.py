"""Static food (attractant) fields.

Procedural variants draw from a `Mulberry32` in a fixed order so the same
generator state always yields the same field. The `image` variant is never
generated here: its data comes from `food_field_from_rgb` or
`food_field_from_image`, which convert an already-decoded raster.
"""
import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import numpy as np

from stigmergence.physarum_abm.config import RENDER
from stigmergence.physarum_abm.params import FoodPlacement
from stigmergence.physarum_abm.utils import clamp01_inplace

logger = logging.getLogger(__name__)

Rng = Callable[[], float]


@dataclass(frozen=True, eq=False)
class FoodField:
    """Food grid in [0, 1], optionally with parallel RGB channels in [0, 1].

    All grids are flat float32 arrays of length width * height, row-major.
    """
    width: int
    height: int
    values: np.ndarray
    r: Optional[np.ndarray] = None
    g: Optional[np.ndarray] = None
    b: Optional[np.ndarray] = None

    def __post_init__(self):
        size = self.width * self.height
        if self.values.shape != (size,):
            raise ValueError(f'food values must have shape ({size},), got {self.values.shape}')
        channels = (self.r, self.g, self.b)
        present = [c is not None for c in channels]
        if any(present) and not all(present):
            raise ValueError('food color channels must be given together (r, g, b)')
        for c in channels:
            if c is not None and c.shape != (size,):
                raise ValueError(f'food color channel must have shape ({size},), got {c.shape}')

    @property
    def has_color(self) -> bool:
        return self.r is not None

    def rgb(self) -> np.ndarray:
        """Return the color channels stacked as a (3, size) float32 array."""
        if not self.has_color:
            raise ValueError('food field has no color channels')
        return np.stack((self.r, self.g, self.b)).astype(np.float32, copy=False)


def _add_blob(grid, cx, cy, radius, amplitude):
    """Add amplitude * exp(-d^2 / r^2) over the blob's 3r bounding box."""
    h, w = grid.shape
    x0 = max(0, math.floor(cx - radius * 3))
    x1 = min(w - 1, math.ceil(cx + radius * 3))
    y0 = max(0, math.floor(cy - radius * 3))
    y1 = min(h - 1, math.ceil(cy + radius * 3))
    if x1 < x0 or y1 < y0:
        return
    inv_r2 = 1.0 / (radius * radius)
    xs = np.arange(x0, x1 + 1, dtype=np.float64) - cx
    ys = np.arange(y0, y1 + 1, dtype=np.float64) - cy
    d2 = ys[:, None] ** 2 + xs[None, :] ** 2
    grid[y0:y1 + 1, x0:x1 + 1] += (amplitude * np.exp(-d2 * inv_r2)).astype(np.float32)


def generate_clusters(rng: Rng, w: int, h: int, density: float, cluster_count: int) -> np.ndarray:
    grid = np.zeros((h, w), dtype=np.float32)
    min_radius = min(w, h) * 0.02
    max_radius = min(w, h) * 0.1
    for _ in range(int(cluster_count)):
        cx = rng() * w
        cy = rng() * h
        radius = min_radius + rng() * (max_radius - min_radius)
        strength = 0.5 + rng() * 0.5
        _add_blob(grid, cx, cy, radius, strength * density)
    # overlapping blobs may saturate; clamp once after summation
    return clamp01_inplace(grid.ravel())


def generate_rings(rng: Rng, w: int, h: int, density: float, cluster_count: int = 0) -> np.ndarray:
    grid = np.zeros((h, w), dtype=np.float32)
    cx = w * (0.3 + rng() * 0.4)
    cy = h * (0.3 + rng() * 0.4)
    ring_count = 3 + math.floor(rng() * 4)
    max_r = min(w, h) * 0.45
    ys, xs = np.mgrid[0:h, 0:w]
    dist = np.sqrt((xs - cx) ** 2 + (ys - cy) ** 2)
    for k in range(ring_count):
        radius = max_r * ((k + 1) / ring_count)
        thickness = max_r * (0.02 + rng() * 0.04)
        inv_t2 = 1.0 / (thickness * thickness)
        diff = dist - radius
        grid += (np.exp(-diff * diff * inv_t2) * density).astype(np.float32)
    return clamp01_inplace(grid.ravel())


def generate_gradient(rng: Rng, w: int, h: int, density: float, cluster_count: int = 0) -> np.ndarray:
    angle = rng() * math.pi * 2
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    diag = math.sqrt(w * w + h * h)
    ys, xs = np.mgrid[0:h, 0:w]
    proj = (xs * cos_a + ys * sin_a) / diag
    return clamp01_inplace((proj * density).astype(np.float32).ravel())


def generate_grid(rng: Rng, w: int, h: int, density: float, cluster_count: int = 0) -> np.ndarray:
    grid = np.zeros((h, w), dtype=np.float32)
    cols = 3 + math.floor(rng() * 4)
    rows = 3 + math.floor(rng() * 4)
    radius = min(w, h) * (0.02 + rng() * 0.03)
    for r in range(rows):
        for c in range(cols):
            cx = (w / (cols + 1)) * (c + 1) + (rng() - 0.5) * (w / cols) * 0.3
            cy = (h / (rows + 1)) * (r + 1) + (rng() - 0.5) * (h / rows) * 0.3
            _add_blob(grid, cx, cy, radius, density)
    return clamp01_inplace(grid.ravel())


# procedural variants usable on their own and as layers of MIXED, in pick order
STRATEGIES: Dict[FoodPlacement, Callable[..., np.ndarray]] = {
    FoodPlacement.CLUSTERS: generate_clusters,
    FoodPlacement.RINGS: generate_rings,
    FoodPlacement.GRADIENT: generate_gradient,
    FoodPlacement.GRID: generate_grid,
}


def generate_mixed(rng: Rng, w: int, h: int, density: float, cluster_count: int) -> np.ndarray:
    count = 2 + (1 if rng() > 0.5 else 0)
    available = list(STRATEGIES)
    picked = []
    for _ in range(count):
        idx = math.floor(rng() * len(available))
        picked.append(available.pop(idx))
    logger.debug('[FOOD] mixed layers: %s', [p.value for p in picked])
    combined = np.zeros(w * h, dtype=np.float32)
    for placement in picked:
        layer = STRATEGIES[placement](rng, w, h, density, cluster_count)
        combined += layer / np.float32(len(picked))
    return clamp01_inplace(combined)


def generate_food_map(rng: Rng, width: int, height: int, placement, density: float,
                      cluster_count: int) -> np.ndarray:
    """Generate a flat float32 food grid in [0, 1] for `placement`.

    Raises ValueError for FoodPlacement.IMAGE, which has no procedural form.
    """
    placement = FoodPlacement(placement)
    if placement is FoodPlacement.IMAGE:
        raise ValueError("food placement 'image' requires an externally supplied food field")
    if placement is FoodPlacement.MIXED:
        return generate_mixed(rng, width, height, density, cluster_count)
    return STRATEGIES[placement](rng, width, height, density, cluster_count)


def generate_food_field(rng: Rng, width: int, height: int, placement, density: float,
                        cluster_count: int) -> FoodField:
    values = generate_food_map(rng, width, height, placement, density, cluster_count)
    return FoodField(width=width, height=height, values=values)


def food_field_from_rgb(rgb) -> FoodField:
    """Build a color food field from a decoded uint8 raster shaped (H, W, 3) or (H, W, 4).

    Channels are scaled to [0, 1]; the scalar field is Rec. 601 luminance.
    Alpha, if present, is ignored.
    """
    arr = np.asarray(rgb)
    if arr.ndim != 3 or arr.shape[2] not in (3, 4):
        raise ValueError(f'rgb must be shaped (H, W, 3) or (H, W, 4), got {arr.shape}')
    h, w = arr.shape[:2]
    if h == 0 or w == 0:
        raise ValueError('rgb raster is empty')
    chans = arr[:, :, :3].astype(np.float32) / np.float32(255.0)
    r = np.ascontiguousarray(chans[:, :, 0].ravel())
    g = np.ascontiguousarray(chans[:, :, 1].ravel())
    b = np.ascontiguousarray(chans[:, :, 2].ravel())
    wr, wg, wb = RENDER['luminance_weights']
    luminance = (wr * r + wg * g + wb * b).astype(np.float32)
    return FoodField(width=w, height=h, values=clamp01_inplace(luminance), r=r, g=g, b=b)


def food_field_from_image(image, max_side: Optional[int] = None) -> FoodField:
    """Build a color food field from an in-memory Pillow image.

    If `max_side` is given the image is resized so its longer side equals
    `max_side`, keeping the aspect ratio.
    """
    from PIL import Image

    img = image.convert('RGB')
    w, h = img.size
    if max_side:
        scale = max_side / max(w, h)
        w = max(1, int(math.floor(w * scale + 0.5)))
        h = max(1, int(math.floor(h * scale + 0.5)))
        img = img.resize((w, h), Image.Resampling.BILINEAR)
    logger.debug('[FOOD] image food %dx%d', w, h)
    return food_field_from_rgb(np.asarray(img))
