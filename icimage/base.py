"""
Indexed pixel buffer shared by static and animated images.

Pixels are palette indices stored in one flat uint8 numpy array, frame after
frame; a pixel at (x, y) in frame f lives at f * width * height + x + y * width.

Every accessor comes in a checked and an `_unchecked` flavour. The checked
method validates its arguments and then calls the unchecked one, so both
always produce the same result.
"""

import copy
from typing import Callable, List, Sequence, Tuple

import numpy as np

from .color import Color
from .config import Config
from .errors import (
    DimensionTooLarge,
    HeightIsZero,
    IdOutsideOfNewPalette,
    IndexOutOfRange,
    MissingData,
    PaletteIsEmpty,
    PaletteTooFewColors,
    WidthIsZero,
)


def as_pixel_array(pixels) -> np.ndarray:
    """
    Copy `pixels` into a flat uint8 array.

    Args:
        pixels: bytes, bytearray, a sequence of ints or a numpy array

    Raises:
        ValueError: If a value doesn't fit in a byte
    """
    if isinstance(pixels, (bytes, bytearray, memoryview)):
        return np.frombuffer(bytes(pixels), dtype=np.uint8).copy()
    if isinstance(pixels, np.ndarray) and pixels.dtype == np.uint8:
        return pixels.reshape(-1).copy()
    values = np.asarray(pixels, dtype=np.int64).reshape(-1)
    if values.size and (values.min() < 0 or values.max() > 255):
        raise ValueError("Pixel values must be in 0..=255")
    return values.astype(np.uint8)


def validate_geometry(width: int, height: int, palette: Sequence[Color]) -> None:
    if width == 0:
        raise WidthIsZero()
    if height == 0:
        raise HeightIsZero()
    if width < 0 or width > Config.MAX_DIMENSION:
        raise DimensionTooLarge('width', width, Config.MAX_DIMENSION)
    if height < 0 or height > Config.MAX_DIMENSION:
        raise DimensionTooLarge('height', height, Config.MAX_DIMENSION)
    if len(palette) == 0:
        raise PaletteIsEmpty()


def highest_index(pixels: np.ndarray) -> int:
    # An empty buffer is a broken invariant, let numpy raise
    return int(pixels.max())


class BaseIndexedImage(object):
    """Width, height, palette and pixel indices common to both image kinds."""

    _width: int
    _height: int
    _frame_count: int
    _palette: List[Color]
    _pixels: np.ndarray
    _highest_palette_idx: int

    def _init_pixels(
        self,
        width: int,
        height: int,
        frame_count: int,
        palette: Sequence[Color],
        pixels,
        checked: bool = True,
    ) -> None:
        """
        Set the buffer fields.

        With `checked`, geometry, palette and pixel count are validated;
        callers that already hold consistent data pass checked=False.
        """
        if checked:
            validate_geometry(width, height, palette)
        pixel_array = as_pixel_array(pixels)
        expected = width * height * frame_count
        if checked and pixel_array.size != expected:
            raise MissingData(int(pixel_array.size), expected)
        self._width = int(width)
        self._height = int(height)
        self._frame_count = int(frame_count)
        self._palette = list(palette)
        self._pixels = pixel_array
        self._highest_palette_idx = highest_index(pixel_array)

    # ========================================================================
    # PROPERTIES
    # ========================================================================

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height)"""
        return (self._width, self._height)

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def frame_size(self) -> int:
        """Pixels in one frame."""
        return self._width * self._height

    @property
    def palette(self) -> List[Color]:
        return list(self._palette)

    def get_palette(self) -> List[Color]:
        return list(self._palette)

    def get_pixels(self) -> bytes:
        """All pixel indices (every frame, in order)."""
        return self._pixels.tobytes()

    def min_palette_size_supported(self) -> int:
        """Highest palette index used by any pixel (the high-water mark)."""
        return self._highest_palette_idx

    # ========================================================================
    # PALETTE
    # ========================================================================

    def set_palette(self, palette: Sequence[Color]) -> None:
        """
        Replace palette.

        Raises:
            PaletteIsEmpty: If `palette` is empty
            PaletteTooFewColors: If the new palette is shorter than the high-water index
        """
        if len(palette) == 0:
            raise PaletteIsEmpty()
        if len(palette) < self._highest_palette_idx:
            raise PaletteTooFewColors(self._highest_palette_idx)
        self._palette = list(palette)

    def set_palette_replace_id(self, palette: Sequence[Color], palette_id: int) -> None:
        """
        Replace palette, pixels outside the new palette are set to `palette_id`.

        Raises:
            PaletteIsEmpty: If `palette` is empty
            IdOutsideOfNewPalette: If `palette_id` is not a valid index of `palette`
        """
        if len(palette) == 0:
            raise PaletteIsEmpty()
        if not 0 <= palette_id < len(palette):
            raise IdOutsideOfNewPalette(palette_id, len(palette))
        self._palette = list(palette)
        self._pixels[self._pixels >= len(palette)] = palette_id
        self._highest_palette_idx = highest_index(self._pixels)

    def set_palette_replace_color(self, palette: Sequence[Color], color: Color) -> None:
        """Replace palette, padding it with `color` until every used index is covered."""
        if len(palette) == 0:
            raise PaletteIsEmpty()
        new_palette = list(palette)
        while len(new_palette) <= self._highest_palette_idx:
            new_palette.append(color)
        self._palette = new_palette

    def _check_palette_idx(self, idx: int) -> None:
        if not 0 <= idx < len(self._palette):
            raise IndexOutOfRange(idx, len(self._palette), 'palette')

    def get_color(self, idx: int) -> Color:
        self._check_palette_idx(idx)
        return self.get_color_unchecked(idx)

    def get_color_unchecked(self, idx: int) -> Color:
        return self._palette[idx]

    def set_color(self, idx: int, color: Color) -> None:
        self._check_palette_idx(idx)
        self.set_color_unchecked(idx, color)

    def set_color_unchecked(self, idx: int, color: Color) -> None:
        self._palette[idx] = color

    # ========================================================================
    # PIXELS
    # ========================================================================

    def get_pixel_index(self, x: int, y: int) -> int:
        """
        Linear index of (x, y) within a frame.

        Raises:
            IndexOutOfRange: If x >= width or y >= height
        """
        if not 0 <= x < self._width:
            raise IndexOutOfRange(x, self._width, 'width')
        if not 0 <= y < self._height:
            raise IndexOutOfRange(y, self._height, 'height')
        return self.get_pixel_index_unchecked(x, y)

    def get_pixel_index_unchecked(self, x: int, y: int) -> int:
        return x + y * self._width

    def _check_color_idx(self, color_idx: int) -> None:
        if not 0 <= color_idx <= 255:
            raise IndexOutOfRange(color_idx, 256, 'color index')

    def _read(self, linear_idx: int) -> int:
        return int(self._pixels[linear_idx])

    def _write(self, linear_idx: int, color_idx: int) -> None:
        self._pixels[linear_idx] = color_idx
        if color_idx > self._highest_palette_idx:
            self._highest_palette_idx = color_idx

    # ========================================================================
    # GEOMETRIC TRANSFORMS
    # ========================================================================

    def _grid(self) -> np.ndarray:
        """Pixels as a (frames, height, width) view."""
        return self._pixels.reshape(self._frame_count, self._height, self._width)

    def _with_grid(self, grid: np.ndarray, checked: bool = True):
        """New image of the same kind holding `grid` (frames, height, width)."""
        raise NotImplementedError()

    def _transform(self, fn: Callable[[np.ndarray], np.ndarray], checked: bool):
        return self._with_grid(np.ascontiguousarray(fn(self._grid())), checked)

    def rotate_cw(self):
        """New image rotated 90 degrees clockwise (width and height swap)."""
        return self._transform(_rotate_cw, checked=True)

    def rotate_cw_unchecked(self):
        return self._transform(_rotate_cw, checked=False)

    def rotate_ccw(self):
        """New image rotated 90 degrees counterclockwise (width and height swap)."""
        return self._transform(_rotate_ccw, checked=True)

    def rotate_ccw_unchecked(self):
        return self._transform(_rotate_ccw, checked=False)

    def flip_horizontal(self):
        """New image mirrored left to right."""
        return self._transform(_flip_horizontal, checked=True)

    def flip_horizontal_unchecked(self):
        return self._transform(_flip_horizontal, checked=False)

    def flip_vertical(self):
        """New image mirrored top to bottom."""
        return self._transform(_flip_vertical, checked=True)

    def flip_vertical_unchecked(self):
        return self._transform(_flip_vertical, checked=False)

    # ========================================================================
    # COPY / COMPARE
    # ========================================================================

    def clone(self):
        return copy.deepcopy(self)

    def _content_key(self) -> tuple:
        return (self._width, self._height, self._frame_count, tuple(self._palette))

    def __eq__(self, other) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return (
            self._content_key() == other._content_key()
            and np.array_equal(self._pixels, other._pixels)
        )

    def __ne__(self, other) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None


# (frames, height, width) grid helpers; output row y, column x

def _rotate_cw(grid: np.ndarray) -> np.ndarray:
    # source (x, y) -> (new_width - 1 - y, x)
    return np.rot90(grid, k=-1, axes=(1, 2))


def _rotate_ccw(grid: np.ndarray) -> np.ndarray:
    # source (x, y) -> (y, new_height - 1 - x)
    return np.rot90(grid, k=1, axes=(1, 2))


def _flip_horizontal(grid: np.ndarray) -> np.ndarray:
    return grid[:, :, ::-1]


def _flip_vertical(grid: np.ndarray) -> np.ndarray:
    return grid[:, ::-1, :]
