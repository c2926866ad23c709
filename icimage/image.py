"""
Static indexed image and its .ici container codec.
"""

from typing import Sequence, Tuple

import numpy as np

from . import palette as palette_codec
from .base import BaseIndexedImage
from .color import TRANSPARENT, Color
from .const import FileType
from .errors import IndexOutOfRange, InvalidFileFormat
from .file import expect_format, write_header
from .palette import FilePalette
from .scaling import Scaling, scale


class IndexedImage(BaseIndexedImage):
    """
    Single palette-indexed image, up to 255x255.

    Pixels are palette indices; the image owns both its palette and pixels.
    """

    def __init__(self, width: int, height: int, palette: Sequence[Color], pixels):
        """
        Args:
            width: 1..=255
            height: 1..=255
            palette: Non-empty list of colors
            pixels: width * height palette indices

        Raises:
            WidthIsZero / HeightIsZero / DimensionTooLarge: Bad geometry
            PaletteIsEmpty: Empty palette
            MissingData: Pixel count isn't width * height
        """
        self._init_pixels(width, height, 1, palette, pixels)

    @classmethod
    def _from_parts(cls, width: int, height: int, palette: Sequence[Color], pixels) -> 'IndexedImage':
        image = cls.__new__(cls)
        image._init_pixels(width, height, 1, palette, pixels, checked=False)
        return image

    @classmethod
    def blank(cls, width: int, height: int, palette: Sequence[Color]) -> 'IndexedImage':
        """Image with every pixel set to index 0."""
        return cls(width, height, palette, bytes(width * height))

    def _with_grid(self, grid: np.ndarray, checked: bool = True) -> 'IndexedImage':
        _, height, width = grid.shape
        if checked:
            return IndexedImage(width, height, self._palette, grid)
        return IndexedImage._from_parts(width, height, self._palette, grid)

    # ========================================================================
    # PIXELS
    # ========================================================================

    def get_pixel(self, pixel_idx: int) -> int:
        """
        Palette index at linear `pixel_idx`.

        Raises:
            IndexOutOfRange: If pixel_idx >= width * height
        """
        if not 0 <= pixel_idx < self._pixels.size:
            raise IndexOutOfRange(pixel_idx, int(self._pixels.size), 'pixels')
        return self.get_pixel_unchecked(pixel_idx)

    def get_pixel_unchecked(self, pixel_idx: int) -> int:
        return self._read(pixel_idx)

    def set_pixel(self, pixel_idx: int, color_idx: int) -> None:
        """
        Set the palette index at linear `pixel_idx`.

        The value is not checked against the palette length; rendering a
        pixel past the palette fails at render time instead.

        Raises:
            IndexOutOfRange: If pixel_idx >= width * height or color_idx > 255
        """
        if not 0 <= pixel_idx < self._pixels.size:
            raise IndexOutOfRange(pixel_idx, int(self._pixels.size), 'pixels')
        self._check_color_idx(color_idx)
        self.set_pixel_unchecked(pixel_idx, color_idx)

    def set_pixel_unchecked(self, pixel_idx: int, color_idx: int) -> None:
        self._write(pixel_idx, color_idx)

    # ========================================================================
    # SCALING
    # ========================================================================

    def scale(self, algo: Scaling) -> 'IndexedImage':
        """
        New image scaled with `algo`.

        Raises:
            InvalidScaleParams: Scale factor below 1
            TooBigPostScale: Result larger than 255 in either axis
        """
        return scale(self, algo, checked=True)

    def scale_unchecked(self, algo: Scaling) -> 'IndexedImage':
        return scale(self, algo, checked=False)

    # ========================================================================
    # FILE CONTENTS
    # ========================================================================

    def to_file_contents(self, palette: FilePalette) -> bytes:
        """
        Encode as an .ici container.

        Raises:
            PaletteNameTooShort / PaletteNameTooLong: Bad FilePalette.with_name()
            PaletteTooManyColors: FilePalette.colors() with more than 255 colors
        """
        output = bytearray()
        write_header(FileType.IMAGE, output)
        palette_codec.write(palette, self._palette, output)
        output.append(self._width)
        output.append(self._height)
        output.extend(self._pixels.tobytes())
        return bytes(output)

    @staticmethod
    def from_file_contents(data: bytes) -> Tuple['IndexedImage', FilePalette]:
        """
        Decode an .ici container. Trailing bytes are ignored.

        Unless the file embeds its colors, the palette is filled with
        transparent colors (one per index up to the highest used); replace
        it with `set_palette*`.

        Returns:
            (image, palette descriptor)

        Raises:
            DecodeError: Any malformed or truncated field, with its offset
        """
        _, idx = expect_format(data, FileType.IMAGE)
        skip, file_palette, colors = palette_codec.read(idx, data)

        start = idx + skip
        if len(data) < start + 2:
            raise InvalidFileFormat(start, "Incomplete image header, expected width and height")
        width = data[start]
        height = data[start + 1]
        if width == 0:
            raise InvalidFileFormat(start, "Image width is 0")
        if height == 0:
            raise InvalidFileFormat(start + 1, "Image height is 0")
        pixels_start = start + 2
        pixels_len = width * height
        if len(data) < pixels_start + pixels_len:
            raise InvalidFileFormat(
                pixels_start,
                f"Incomplete pixels data, found {len(data) - pixels_start} but expected {pixels_len}",
            )
        pixels = bytes(data[pixels_start:pixels_start + pixels_len])

        if colors is None:
            colors = [TRANSPARENT] * (max(pixels) + 1)
        elif len(colors) == 0:
            raise InvalidFileFormat(idx + 1, "Palette is empty")
        return IndexedImage(width, height, colors, pixels), file_palette

    def to_file(self, path: str, palette: FilePalette) -> None:
        # encode first so a bad palette leaves an existing file untouched
        data = self.to_file_contents(palette)
        with open(path, 'wb') as fp:
            fp.write(data)

    @staticmethod
    def from_file(path: str) -> Tuple['IndexedImage', FilePalette]:
        with open(path, 'rb') as fp:
            return IndexedImage.from_file_contents(fp.read())

    def __repr__(self) -> str:
        return (
            f"IndexedImage({self._width}x{self._height}, "
            f"palette={len(self._palette)} colors, highest_idx={self._highest_palette_idx})"
        )
