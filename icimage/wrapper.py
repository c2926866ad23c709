"""
One handle for either image kind.

`load_bytes` / `load_file` read the container type byte and hand the data to
the matching decoder, so callers that don't care whether a file is animated
can work with an IndexedWrapper throughout.
"""

from io import IOBase
from typing import List, Tuple, Union

from .animated import AnimatedIndexedImage
from .color import Color
from .const import FileType, PlayType
from .file import verify_format
from .image import IndexedImage
from .palette import FilePalette
from .scaling import Scaling


class IndexedWrapper(object):
    """
    Static or animated image behind one interface.

    Animation calls are no-ops on a static image, which reports a single
    frame that never changes.
    """

    def __init__(self, image: Union[IndexedImage, AnimatedIndexedImage]):
        self._image = image

    @staticmethod
    def new_image(image: IndexedImage) -> 'IndexedWrapper':
        return IndexedWrapper(image)

    @staticmethod
    def new_animated(image: AnimatedIndexedImage) -> 'IndexedWrapper':
        return IndexedWrapper(image)

    @property
    def image(self) -> Union[IndexedImage, AnimatedIndexedImage]:
        return self._image

    @property
    def is_animation(self) -> bool:
        return isinstance(self._image, AnimatedIndexedImage)

    @property
    def file_type(self) -> FileType:
        return FileType.ANIMATED if self.is_animation else FileType.IMAGE

    # ========================================================================
    # SHARED SURFACE
    # ========================================================================

    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    @property
    def size(self) -> Tuple[int, int]:
        return self._image.size

    def get_palette(self) -> List[Color]:
        return self._image.get_palette()

    def set_palette(self, palette: List[Color]) -> None:
        self._image.set_palette(palette)

    def set_palette_replace_id(self, palette: List[Color], palette_id: int) -> None:
        self._image.set_palette_replace_id(palette, palette_id)

    def set_palette_replace_color(self, palette: List[Color], color: Color) -> None:
        self._image.set_palette_replace_color(palette, color)

    def get_color(self, idx: int) -> Color:
        return self._image.get_color(idx)

    def set_color(self, idx: int, color: Color) -> None:
        self._image.set_color(idx, color)

    def min_palette_size_supported(self) -> int:
        return self._image.min_palette_size_supported()

    def get_pixel_index(self, x: int, y: int) -> int:
        return self._image.get_pixel_index(x, y)

    def get_pixels(self) -> bytes:
        """Pixels of the frame currently shown."""
        if self.is_animation:
            return self._image.get_current_frame_pixels()
        return self._image.get_pixels()

    def to_file_contents(self, palette: FilePalette) -> bytes:
        return self._image.to_file_contents(palette)

    def _wrap(self, image) -> 'IndexedWrapper':
        return IndexedWrapper(image)

    def rotate_cw(self) -> 'IndexedWrapper':
        return self._wrap(self._image.rotate_cw())

    def rotate_ccw(self) -> 'IndexedWrapper':
        return self._wrap(self._image.rotate_ccw())

    def flip_horizontal(self) -> 'IndexedWrapper':
        return self._wrap(self._image.flip_horizontal())

    def flip_vertical(self) -> 'IndexedWrapper':
        return self._wrap(self._image.flip_vertical())

    def scale(self, algo: Scaling) -> 'IndexedWrapper':
        return self._wrap(self._image.scale(algo))

    def clone(self) -> 'IndexedWrapper':
        return self._wrap(self._image.clone())

    # ========================================================================
    # ANIMATION (no-ops for static images)
    # ========================================================================

    @property
    def frame_count(self) -> int:
        return self._image.frame_count

    @property
    def current_frame(self) -> int:
        return self._image.current_frame if self.is_animation else 0

    def is_animating(self) -> bool:
        return self.is_animation and self._image.is_animating()

    def update(self, delta: float) -> None:
        if self.is_animation:
            self._image.update(delta)

    def reset(self) -> None:
        if self.is_animation:
            self._image.reset()

    def reverse(self) -> None:
        if self.is_animation:
            self._image.reverse()

    def set_animate(self, animate: bool) -> None:
        if self.is_animation:
            self._image.set_animate(animate)

    def set_play_type(self, play_type: PlayType) -> None:
        if self.is_animation:
            self._image.set_play_type(play_type)

    def skip_to_next_frame(self) -> None:
        if self.is_animation:
            self._image.skip_to_next_frame()

    def delay_next_frame(self, seconds: float) -> None:
        if self.is_animation:
            self._image.delay_next_frame(seconds)

    def __eq__(self, other) -> bool:
        if not isinstance(other, IndexedWrapper):
            return NotImplemented
        return self._image == other._image

    __hash__ = None

    def __repr__(self) -> str:
        return f"IndexedWrapper({self._image!r})"


# ============================================================================
# LOADING
# ============================================================================

def load_bytes(data: bytes) -> Tuple[IndexedWrapper, FilePalette]:
    """
    Decode a container of either type.

    Raises:
        DecodeError: If the data isn't a valid container
    """
    file_type = verify_format(data)
    if file_type == FileType.ANIMATED:
        image, palette = AnimatedIndexedImage.from_file_contents(data)
    else:
        image, palette = IndexedImage.from_file_contents(data)
    return IndexedWrapper(image), palette


def load_stream(fp: IOBase) -> Tuple[IndexedWrapper, FilePalette]:
    return load_bytes(fp.read())


def load_file(file_path: str) -> Tuple[IndexedWrapper, FilePalette]:
    with open(file_path, 'rb') as fp:
        return load_stream(fp)
