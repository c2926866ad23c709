"""
Animated indexed image and its .ica container codec.

Frames share one palette and are stored back to back in a single pixel
buffer. Playback state lives in a FrameTimer and is not written to disk,
apart from the play type, frame count and per-frame seconds.
"""

import struct
from typing import Sequence, Tuple

import numpy as np

from . import palette as palette_codec
from .base import BaseIndexedImage, validate_geometry
from .color import TRANSPARENT, Color
from .config import Config
from .const import FileType, PlayType
from .errors import IndexOutOfRange, InvalidFileFormat, TooManyFrames
from .file import expect_format, write_header
from .palette import FilePalette
from .scaling import Scaling, scale
from .timing import FrameTimer


PER_FRAME_FORMAT = '>d'
PER_FRAME_SIZE = struct.calcsize(PER_FRAME_FORMAT)


class AnimatedIndexedImage(BaseIndexedImage):
    """
    Palette-indexed animation of 1..=255 frames, up to 255x255.

    Usage:
        anim = AnimatedIndexedImage(8, 8, 0.1, 4, palette, pixels, PlayType.LOOPS)
        anim.update(dt)  # every tick
        frame = anim.get_current_frame_pixels()
    """

    def __init__(
        self,
        width: int,
        height: int,
        per_frame: float,
        frame_count: int,
        palette: Sequence[Color],
        pixels,
        play_type: PlayType,
    ):
        """
        Args:
            width: 1..=255
            height: 1..=255
            per_frame: Seconds each frame is shown (> 0)
            frame_count: 1..=255
            palette: Non-empty list of colors
            pixels: width * height * frame_count palette indices
            play_type: Playback mode

        Raises:
            WidthIsZero / HeightIsZero / DimensionTooLarge: Bad geometry
            TooManyFrames: frame_count outside 1..=255
            PaletteIsEmpty: Empty palette
            MissingData: Pixel count isn't width * height * frame_count
            NegativePerFrame: per_frame <= 0
        """
        validate_geometry(width, height, palette)
        if not 1 <= frame_count <= Config.MAX_FRAMES:
            raise TooManyFrames(frame_count)
        self._init_pixels(width, height, frame_count, palette, pixels)
        self._timer = FrameTimer(frame_count, per_frame, play_type)

    @classmethod
    def _from_parts(
        cls,
        width: int,
        height: int,
        per_frame: float,
        frame_count: int,
        palette: Sequence[Color],
        pixels,
        play_type: PlayType,
    ) -> 'AnimatedIndexedImage':
        image = cls.__new__(cls)
        image._init_pixels(width, height, frame_count, palette, pixels, checked=False)
        image._timer = FrameTimer(frame_count, per_frame, play_type)
        return image

    def _with_grid(self, grid: np.ndarray, checked: bool = True) -> 'AnimatedIndexedImage':
        frame_count, height, width = grid.shape
        args = (width, height, self._timer.per_frame, frame_count, self._palette, grid, self._timer.play_type)
        if checked:
            return AnimatedIndexedImage(*args)
        return AnimatedIndexedImage._from_parts(*args)

    # ========================================================================
    # PIXELS
    # ========================================================================

    def _check_frame_pixel(self, frame: int, pixel_idx: int) -> None:
        if not 0 <= frame < self._frame_count:
            raise IndexOutOfRange(frame, self._frame_count, 'frames')
        if not 0 <= pixel_idx < self.frame_size:
            raise IndexOutOfRange(pixel_idx, self.frame_size, 'pixels')

    def get_pixel(self, frame: int, pixel_idx: int) -> int:
        """
        Palette index of `pixel_idx` in `frame`.

        Raises:
            IndexOutOfRange: frame >= frame_count or pixel_idx >= width * height
        """
        self._check_frame_pixel(frame, pixel_idx)
        return self.get_pixel_unchecked(frame, pixel_idx)

    def get_pixel_unchecked(self, frame: int, pixel_idx: int) -> int:
        return self._read(frame * self.frame_size + pixel_idx)

    def set_pixel(self, frame: int, pixel_idx: int, color_idx: int) -> None:
        """
        Set the palette index of `pixel_idx` in `frame`.

        Raises:
            IndexOutOfRange: Bad frame, pixel or a color index above 255
        """
        self._check_frame_pixel(frame, pixel_idx)
        self._check_color_idx(color_idx)
        self.set_pixel_unchecked(frame, pixel_idx, color_idx)

    def set_pixel_unchecked(self, frame: int, pixel_idx: int, color_idx: int) -> None:
        self._write(frame * self.frame_size + pixel_idx, color_idx)

    def get_frame_pixels(self, frame: int) -> bytes:
        if not 0 <= frame < self._frame_count:
            raise IndexOutOfRange(frame, self._frame_count, 'frames')
        start = frame * self.frame_size
        return self._pixels[start:start + self.frame_size].tobytes()

    def get_current_frame_pixels(self) -> bytes:
        return self.get_frame_pixels(self._timer.current_frame)

    # ========================================================================
    # PLAYBACK
    # ========================================================================

    @property
    def current_frame(self) -> int:
        return self._timer.current_frame

    @property
    def play_type(self) -> PlayType:
        return self._timer.play_type

    @property
    def animate(self) -> bool:
        return self._timer.animate

    def is_animating(self) -> bool:
        return self._timer.animate

    @property
    def timer(self) -> FrameTimer:
        return self._timer

    def get_per_frame(self) -> float:
        return self._timer.per_frame

    def set_per_frame(self, seconds: float) -> None:
        self._timer.set_per_frame(seconds)

    def set_animate(self, animate: bool) -> None:
        self._timer.set_animate(animate)

    def set_play_type(self, play_type: PlayType) -> None:
        self._timer.set_play_type(play_type)

    def set_just_play_type(self, play_type: PlayType) -> None:
        self._timer.set_just_play_type(play_type)

    def update(self, delta: float) -> None:
        self._timer.update(delta)

    def reset(self) -> None:
        self._timer.reset()

    def reverse(self) -> None:
        self._timer.reverse()

    def skip_to_next_frame(self) -> None:
        self._timer.skip_to_next_frame()

    def delay_next_frame(self, seconds: float) -> None:
        self._timer.delay_next_frame(seconds)

    # ========================================================================
    # SCALING
    # ========================================================================

    def scale(self, algo: Scaling) -> 'AnimatedIndexedImage':
        """New animation with every frame scaled by `algo`."""
        return scale(self, algo, checked=True)

    def scale_unchecked(self, algo: Scaling) -> 'AnimatedIndexedImage':
        return scale(self, algo, checked=False)

    # ========================================================================
    # FILE CONTENTS
    # ========================================================================

    def to_file_contents(self, palette: FilePalette) -> bytes:
        output = bytearray()
        write_header(FileType.ANIMATED, output)
        palette_codec.write(palette, self._palette, output)
        output.append(self._width)
        output.append(self._height)
        output.append(self._timer.play_type.value)
        output.append(self._frame_count)
        output.extend(struct.pack(PER_FRAME_FORMAT, self._timer.per_frame))
        output.extend(self._pixels.tobytes())
        return bytes(output)

    @staticmethod
    def from_file_contents(data: bytes) -> Tuple['AnimatedIndexedImage', FilePalette]:
        """
        Decode an .ica container. Trailing bytes are ignored.

        As with static images, a container without embedded colors gets a
        transparent palette sized to the highest pixel index.

        Returns:
            (animation, palette descriptor)

        Raises:
            DecodeError: Any malformed or truncated field, with its offset
        """
        _, idx = expect_format(data, FileType.ANIMATED)
        skip, file_palette, colors = palette_codec.read(idx, data)

        start = idx + skip
        header_len = 4 + PER_FRAME_SIZE
        if len(data) < start + header_len:
            raise InvalidFileFormat(
                start,
                f"Incomplete image header, found {len(data) - start} bytes but expected {header_len}",
            )
        width = data[start]
        height = data[start + 1]
        if width == 0:
            raise InvalidFileFormat(start, "Image width is 0")
        if height == 0:
            raise InvalidFileFormat(start + 1, "Image height is 0")
        play_type = PlayType.from_byte(data[start + 2])
        if play_type is None:
            raise InvalidFileFormat(start + 2, f"Unsupported play type {data[start + 2]}")
        frame_count = data[start + 3]
        if frame_count == 0:
            raise InvalidFileFormat(start + 3, "Image has no frames")
        per_frame = struct.unpack_from(PER_FRAME_FORMAT, data, start + 4)[0]
        if not per_frame > 0.0:
            raise InvalidFileFormat(start + 4, f"Per frame timing must be greater than 0: {per_frame}")

        pixels_start = start + header_len
        pixels_len = width * height * frame_count
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
        image = AnimatedIndexedImage(width, height, per_frame, frame_count, colors, pixels, play_type)
        return image, file_palette

    def to_file(self, path: str, palette: FilePalette) -> None:
        # encode first so a bad palette leaves an existing file untouched
        data = self.to_file_contents(palette)
        with open(path, 'wb') as fp:
            fp.write(data)

    @staticmethod
    def from_file(path: str) -> Tuple['AnimatedIndexedImage', FilePalette]:
        with open(path, 'rb') as fp:
            return AnimatedIndexedImage.from_file_contents(fp.read())

    # ========================================================================
    # COMPARE
    # ========================================================================

    def _content_key(self) -> tuple:
        timer = self._timer
        return super()._content_key() + (timer.frame_count, timer.per_frame, timer.play_type)

    def __repr__(self) -> str:
        return (
            f"AnimatedIndexedImage({self._width}x{self._height}, frames={self._frame_count}, "
            f"per_frame={self._timer.per_frame}, play_type={self._timer.play_type.name}, "
            f"palette={len(self._palette)} colors)"
        )
