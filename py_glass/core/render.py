"""
Raster output for a generated glass map.

Each pixel takes the color of its nearest site. Bisector samples that were
accepted as cell boundaries are drawn as leading, and an optional guide grid
is laid on top.
"""

import io
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np
import structlog
from matplotlib import image as mpimg

from .glass import GlassMap

logger = structlog.get_logger()

LEAD = (0, 0, 0, 255)
GRID = (128, 128, 128, 255)
UNCOLORED = (0, 0, 0)

# Pixels per KDTree batch
_CHUNK = 1 << 18


def site_color_table(glass: GlassMap) -> np.ndarray:
    """RGB row per site, in index order."""
    return np.array(
        [site.color if site.color is not None else UNCOLORED for site in glass.index],
        dtype=np.uint8,
    )


def fill_cells(glass: GlassMap) -> np.ndarray:
    """
    Per-pixel nearest-site fill.

    Returns:
        RGBA array of shape (height, width, 4)
    """
    width, height = glass.width, glass.height
    table = site_color_table(glass)

    xs, ys = np.meshgrid(np.arange(width), np.arange(height))
    pixels = np.column_stack([xs.ravel(), ys.ravel()]).astype(np.float64)

    nearest = np.empty(len(pixels), dtype=np.intp)
    for start in range(0, len(pixels), _CHUNK):
        _, idx = glass.index.query(pixels[start:start + _CHUNK], 1)
        nearest[start:start + _CHUNK] = idx[:, 0]

    img = np.empty((height, width, 4), dtype=np.uint8)
    img[..., :3] = table[nearest].reshape(height, width, 3)
    img[..., 3] = 255
    return img


def draw_boundaries(img: np.ndarray, samples: np.ndarray) -> None:
    """Paint boundary samples in place, truncating to pixel coordinates."""
    if len(samples) == 0:
        return
    height, width = img.shape[:2]
    px = samples.astype(np.int64)
    inside = (px[:, 0] >= 0) & (px[:, 0] < width) & (px[:, 1] >= 0) & (px[:, 1] < height)
    px = px[inside]
    img[px[:, 1], px[:, 0]] = LEAD


def draw_grid(img: np.ndarray, columns: int, rows: int) -> None:
    """Gray guide lines every width/columns and height/rows pixels."""
    height, width = img.shape[:2]
    x_step = max(1, width // columns)
    y_step = max(1, height // rows)
    img[:, 0:width:x_step] = GRID
    img[0:height:y_step, :] = GRID


def render_image(glass: GlassMap, boundaries: bool = True,
                 grid: Optional[Tuple[int, int]] = (58, 20)) -> np.ndarray:
    """
    Render the glass map.

    Args:
        glass: Generated map
        boundaries: Draw accepted bisector samples in black
        grid: (columns, rows) of the guide grid, or None for no grid

    Returns:
        RGBA uint8 array of shape (height, width, 4)
    """
    logger.info("Rendering image", width=glass.width, height=glass.height)
    img = fill_cells(glass)
    if boundaries:
        draw_boundaries(img, glass.boundary_samples)
    if grid:
        draw_grid(img, *grid)
    return img


def save_png(img: np.ndarray, path: Union[str, Path]) -> Path:
    """Write an RGBA array to a PNG file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    mpimg.imsave(path, img, format="png")
    logger.info("Image written", path=str(path))
    return path


def render_png_bytes(img: np.ndarray) -> bytes:
    """Encode an RGBA array as PNG in memory."""
    buf = io.BytesIO()
    mpimg.imsave(buf, img, format="png")
    return buf.getvalue()
