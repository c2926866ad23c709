"""
Pixel scaling for indexed images: nearest neighbour and EPX (Scale2x).

Scaling works on the palette indices, so the palette is carried over as is.
Animated images are scaled frame by frame.
"""

from dataclasses import dataclass
from enum import Enum

import numpy as np

from .config import Config
from .errors import InvalidScaleParams, TooBigPostScale


class ScalingType(Enum):
    NEAREST_NEIGHBOUR = 'nearest_neighbour'
    EPX_2X = 'epx2x'
    EPX_4X = 'epx4x'


@dataclass(frozen=True)
class Scaling(object):
    """
    Scaling algorithm.

    Build with `Scaling.nearest_neighbour(x, y)`, `Scaling.nn_double()`,
    `Scaling.epx2x()` or `Scaling.epx4x()`.
    """
    type: ScalingType
    x_scale: int = 1
    y_scale: int = 1

    @staticmethod
    def nearest_neighbour(x_scale: int, y_scale: int) -> 'Scaling':
        """Increase size by x_scale and y_scale, where (2, 2) doubles the size."""
        if x_scale < 1 or y_scale < 1:
            raise InvalidScaleParams(x_scale, y_scale)
        return Scaling(ScalingType.NEAREST_NEIGHBOUR, x_scale, y_scale)

    @staticmethod
    def nn_double() -> 'Scaling':
        return Scaling(ScalingType.NEAREST_NEIGHBOUR, 2, 2)

    @staticmethod
    def epx2x() -> 'Scaling':
        return Scaling(ScalingType.EPX_2X, 2, 2)

    @staticmethod
    def epx4x() -> 'Scaling':
        return Scaling(ScalingType.EPX_4X, 4, 4)


# ============================================================================
# GRID ALGORITHMS
# ============================================================================
# Grids are (frames, height, width) uint8 arrays.

def nearest_neighbour_grid(grid: np.ndarray, x_scale: int, y_scale: int) -> np.ndarray:
    """Destination (x, y) samples source (x // x_scale, y // y_scale)."""
    _, height, width = grid.shape
    src_y = np.arange(height * y_scale) // y_scale
    src_x = np.arange(width * x_scale) // x_scale
    return grid[:, src_y, :][:, :, src_x]


def epx_grid(grid: np.ndarray) -> np.ndarray:
    """
    EPX 2x.

    Every source pixel P becomes a 2x2 block:

          A           p1 p2
        C P B   ->    p3 p4
          D

    A and C are clamped to P on the top and left edges. B and D step only
    while x < width - 2 and y < height - 2 respectively, otherwise they are P.
    """
    frames, height, width = grid.shape
    ys = np.arange(height)
    xs = np.arange(width)
    above = np.where(ys > 0, ys - 1, ys)
    below = np.where(ys < height - 2, ys + 1, ys)
    left = np.where(xs > 0, xs - 1, xs)
    right = np.where(xs < width - 2, xs + 1, xs)

    p = grid
    a = grid[:, above, :]
    d = grid[:, below, :]
    c = grid[:, :, left]
    b = grid[:, :, right]

    p1 = np.where((c == a) & (c != d) & (a != b), a, p)
    p2 = np.where((a == b) & (a != c) & (b != d), b, p)
    p3 = np.where((d == c) & (d != b) & (c != a), c, p)
    p4 = np.where((b == d) & (b != a) & (d != c), d, p)

    output = np.empty((frames, height * 2, width * 2), dtype=np.uint8)
    output[:, 0::2, 0::2] = p1
    output[:, 0::2, 1::2] = p2
    output[:, 1::2, 0::2] = p3
    output[:, 1::2, 1::2] = p4
    return output


# ============================================================================
# IMAGE LEVEL
# ============================================================================

def _check_size(width: int, height: int) -> None:
    if width > Config.MAX_DIMENSION or height > Config.MAX_DIMENSION:
        raise TooBigPostScale(width, height)


def scale_nearest_neighbour(image, x_scale: int, y_scale: int, checked: bool = True):
    """
    Nearest neighbour scaling.

    Args:
        image: IndexedImage or AnimatedIndexedImage
        x_scale: Horizontal factor (>= 1)
        y_scale: Vertical factor (>= 1)
        checked: Validate factors and result size

    Returns:
        New image of the same kind

    Raises:
        InvalidScaleParams: A factor is below 1
        TooBigPostScale: Result would exceed 255 in either axis
    """
    if checked:
        if x_scale < 1 or y_scale < 1:
            raise InvalidScaleParams(x_scale, y_scale)
        _check_size(image.width * x_scale, image.height * y_scale)
    grid = nearest_neighbour_grid(image._grid(), x_scale, y_scale)
    return image._with_grid(grid, checked)


def scale_epx(image, checked: bool = True):
    """EPX 2x; raises TooBigPostScale if the result would exceed 255 in either axis."""
    if checked:
        _check_size(image.width * 2, image.height * 2)
    return image._with_grid(epx_grid(image._grid()), checked)


def scale(image, algo: Scaling, checked: bool = True):
    """Apply `algo` to `image` and return the new image."""
    if algo.type == ScalingType.NEAREST_NEIGHBOUR:
        return scale_nearest_neighbour(image, algo.x_scale, algo.y_scale, checked)
    if algo.type == ScalingType.EPX_2X:
        return scale_epx(image, checked)
    if checked:
        _check_size(image.width * 4, image.height * 4)
    return scale_epx(scale_epx(image, checked), checked)
